# setup.py
from setuptools import find_namespace_packages, setup

setup(
    name="scopelog",
    version="1.0.0",
    description="Leveled, scoped logging with console output and date-partitioned rotating files",
    author="Enrique Paredes",
    author_email="eparedesbalen@gmail.com",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["scopelog", "scopelog.*"]),
    python_requires=">=3.8",
    install_requires=[
        "colorama>=0.4.6",  # ANSI color constants and Windows console support
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
        "Topic :: System :: Logging",
    ],
)

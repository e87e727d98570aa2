from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. A clean, uninitialized logging endpoint around every test.
3. Shared factories for configurations writing into a temporary directory.
"""

import io
import os
import sys
from pathlib import Path
from typing import Any, Callable, Generator, List

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

import scopelog  # noqa: E402
from scopelog.domain.config import LoggerConfig  # noqa: E402
from scopelog.domain.severity import Severity  # noqa: E402


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def reset_dispatcher() -> Generator[None, None, None]:
    """Guarantee every test starts and ends with an uninitialized endpoint."""
    scopelog.shutdown()
    yield
    scopelog.shutdown()


@pytest.fixture
def log_dir(tmp_path: Path) -> Path:
    """Directory receiving the rotated log files."""
    return tmp_path / "logs"


@pytest.fixture
def console() -> io.StringIO:
    """In-memory console stream (not a TTY, so colors are off unless forced)."""
    return io.StringIO()


@pytest.fixture
def make_config(log_dir: Path, tmp_path: Path) -> Callable[..., LoggerConfig]:
    """
    Return a factory of configurations rooted in the temporary directory.

    Keyword arguments override the defaults.
    """
    def _factory(**overrides: Any) -> LoggerConfig:
        values = {
            "output_directory": str(log_dir),
            "console_min_level": Severity.DEBUG,
            "file_min_level": Severity.DEBUG,
            "root_directory": str(tmp_path),
        }
        values.update(overrides)
        return LoggerConfig(**values)

    return _factory


@pytest.fixture
def read_log_lines(log_dir: Path) -> Callable[[], List[str]]:
    """Return a reader of every line in every dated log file (alias excluded)."""
    def _read() -> List[str]:
        lines: List[str] = []
        for path in sorted(log_dir.glob("*.log")):
            if path.name == "latest.log":
                continue
            lines.extend(path.read_text(encoding="utf-8").splitlines())
        return lines

    return _read

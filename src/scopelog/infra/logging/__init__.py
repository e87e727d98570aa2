from __future__ import annotations

from .core import RECORD_LOGGER_NAME, SinkPipeline, build_pipeline
from .formatters import ConsoleFormatter, FileFormatter
from .rotation import DailyRotatingFileHandler

__all__ = [
    "RECORD_LOGGER_NAME",
    "SinkPipeline",
    "build_pipeline",
    "ConsoleFormatter",
    "FileFormatter",
    "DailyRotatingFileHandler",
]

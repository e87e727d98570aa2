from __future__ import annotations

"""
Sink Handler Factories and Low-Level Utilities.

Builds the two sinks (console stream and rotating files) and tags them so
the pipeline can tell its own handlers apart from handlers installed by the
host application.
"""

import logging
import sys
from typing import Optional, TextIO

from colorama import just_fix_windows_console

from scopelog.domain.config import LoggerConfig
from scopelog.errors import SinkConstructionError
from scopelog.infra.logging.formatters import ConsoleFormatter, FileFormatter
from scopelog.infra.logging.rotation import DailyRotatingFileHandler

# Internal attribute used to tag and identify our own handlers
_HANDLER_TAG_ATTR: str = "_scopelog_handler"


# ==============================================================================
# INTERNAL LOGGING UTILITIES
# ==============================================================================

def _tag_handler(handler: logging.Handler) -> None:
    """
    Mark a handler as managed by the sink pipeline.

    Args:
        handler: The logging handler instance to tag.
    """
    setattr(handler, _HANDLER_TAG_ATTR, True)


def _is_our_handler(handler: logging.Handler) -> bool:
    return bool(getattr(handler, _HANDLER_TAG_ATTR, False))


# ==============================================================================
# FACTORIES
# ==============================================================================

def create_console_handler(
        cfg: LoggerConfig,
        stream: Optional[TextIO] = None,
) -> logging.StreamHandler:
    """
    Build the console sink.

    Args:
        cfg: Active configuration (level and color policy).
        stream: Target stream; defaults to stdout.

    Returns:
        logging.StreamHandler: Handler filtered at ``cfg.console_min_level``.
    """
    if stream is None:
        just_fix_windows_console()
        stream = sys.stdout

    colors = cfg.console_colors
    if colors is None:
        colors = _is_tty(stream)

    sh = logging.StreamHandler(stream)
    sh.setLevel(cfg.console_min_level.levelno)
    sh.setFormatter(ConsoleFormatter(colors=colors))
    _tag_handler(sh)
    return sh


def create_file_handler(cfg: LoggerConfig) -> DailyRotatingFileHandler:
    """
    Build the rotating file sink.

    Args:
        cfg: Active configuration (directory, level, rotation policy).

    Returns:
        DailyRotatingFileHandler: Handler filtered at ``cfg.file_min_level``.

    Raises:
        SinkConstructionError: If the directory or the first file cannot be opened.
    """
    try:
        fh = DailyRotatingFileHandler(
            cfg.output_directory,
            max_bytes=cfg.max_file_size_bytes,
            retention=cfg.retention,
            date_pattern=cfg.date_pattern,
            encoding=cfg.encoding,
        )
    except OSError as e:
        raise SinkConstructionError(cfg.output_directory, e) from e

    fh.setLevel(cfg.file_min_level.levelno)
    fh.setFormatter(FileFormatter())
    _tag_handler(fh)
    return fh


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _is_tty(stream: TextIO) -> bool:
    isatty = getattr(stream, "isatty", None)
    if isatty is None:
        return False
    try:
        return bool(isatty())
    except ValueError:
        # Closed stream
        return False

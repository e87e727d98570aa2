from __future__ import annotations

"""
Stdlib Formatter Bridge.

The dispatcher attaches the rendered-to-be LogRecord to the stdlib record it
pushes through the queue. These formatters pull it back out and delegate to
the pure rendering functions.
"""

import logging
from typing import Optional

from scopelog.core.formatter import render_console, render_file
from scopelog.domain.records import LogRecord

# Attribute carrying our LogRecord on the stdlib record
RECORD_ATTR: str = "scopelog_record"


def get_attached_record(record: logging.LogRecord) -> Optional[LogRecord]:
    return getattr(record, RECORD_ATTR, None)


class FileFormatter(logging.Formatter):
    """Plain line, as written to the log files."""

    def format(self, record: logging.LogRecord) -> str:
        entry = get_attached_record(record)
        if entry is None:
            return super().format(record)
        return render_file(entry)


class ConsoleFormatter(logging.Formatter):
    """Colorized line; falls back to the plain line when colors are off."""

    def __init__(self, colors: bool = True) -> None:
        super().__init__()
        self.colors = colors

    def format(self, record: logging.LogRecord) -> str:
        entry = get_attached_record(record)
        if entry is None:
            return super().format(record)
        if self.colors:
            return render_console(entry)
        return render_file(entry)

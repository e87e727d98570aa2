from __future__ import annotations

"""
Record Formatter.

Renders a LogRecord into the decorated console line and the plain file line.
Both share one layout:

    <timestamp> <label> [<scope>(:<locator>)] <message>

The file line is always the console line with the ANSI sequences removed.
"""

import re
from datetime import datetime, timezone

from colorama import Fore

from scopelog.domain.records import LogRecord
from scopelog.domain.severity import CRITICAL_LEVELS, color_label, plain_label

_ANSI_RE = re.compile(r"\x1b\[\d+m")

_GREY = Fore.LIGHTBLACK_EX
_RESET = Fore.RESET


def strip_decoration(text: str) -> str:
    """Remove every ANSI color sequence from ``text``."""
    return _ANSI_RE.sub("", text)


def format_timestamp(ts: datetime) -> str:
    """Render an instant as ISO-8601 UTC with milliseconds (``...T12:00:00.000Z``)."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    ts = ts.astimezone(timezone.utc)
    return ts.strftime("%Y-%m-%dT%H:%M:%S.") + f"{ts.microsecond // 1000:03d}Z"


def _scope_segment(record: LogRecord) -> str:
    if record.locator is None:
        return f"[{record.scope}]"
    return f"[{record.scope}:{record.locator}]"


def render_console(record: LogRecord) -> str:
    """Render the colorized console line of a record."""
    message = record.message
    if record.severity in CRITICAL_LEVELS:
        message = f"{Fore.RED}{message}{_RESET}"

    return (
        f"{_GREY}{format_timestamp(record.timestamp)}{_RESET} "
        f"{color_label(record.severity)} "
        f"{_GREY}{_scope_segment(record)}{_RESET} "
        f"{message}"
    )


def render_file(record: LogRecord) -> str:
    """Render the plain file line of a record."""
    line = (
        f"{format_timestamp(record.timestamp)} "
        f"{plain_label(record.severity)} "
        f"{_scope_segment(record)} "
        f"{record.message}"
    )
    # Messages may carry their own escape codes
    return strip_decoration(line)

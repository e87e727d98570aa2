from __future__ import annotations

"""
Record Domain Models.

Value objects flowing from the dispatcher to the sinks. A LogRecord is built
once per log call, rendered by each accepting sink and then discarded.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from scopelog.domain.severity import Severity


@dataclass(frozen=True)
class CallSite:
    """
    Source position of a log call.

    Attributes:
        file: Filename of the calling frame.
        line: 1-based line number.
        column: 1-based column, when the interpreter exposes it.
    """
    file: str
    line: int
    column: Optional[int] = None

    @property
    def locator(self) -> str:
        if self.column is None:
            return str(self.line)
        return f"{self.line}:{self.column}"


@dataclass(frozen=True)
class LogRecord:
    """
    One log event, ready to be rendered.

    Attributes:
        timestamp: Aware instant of the call.
        severity: Logical level of the event.
        scope: Normalized scope of the emitting module.
        message: Normalized, joined message text.
        locator: Call-site ``line[:column]``; None when not resolved.
    """
    timestamp: datetime
    severity: Severity
    scope: str
    message: str
    locator: Optional[str] = None

    @classmethod
    def now(
            cls,
            severity: Severity,
            scope: str,
            message: str,
            locator: Optional[str] = None,
    ) -> LogRecord:
        """Build a record stamped with the current UTC time."""
        return cls(
            timestamp=datetime.now(timezone.utc),
            severity=severity,
            scope=scope,
            message=message,
            locator=locator,
        )

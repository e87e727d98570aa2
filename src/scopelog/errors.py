from __future__ import annotations

"""
Error Taxonomy.

Only two conditions escape a logging call: using the endpoint before it is
configured, and failing to build the file sink during configuration.
Everything else on the logging path degrades locally.
"""

from typing import Optional


class ScopeLogError(Exception):
    """Base class for errors raised by the logging endpoint."""


class ConfigurationMissingError(ScopeLogError, RuntimeError):
    """Raised when logging is used before ``init`` (or after ``shutdown``)."""

    def __init__(self, operation: str = "log") -> None:
        super().__init__(f"Cannot {operation}: logger is not initialized, call init() first")
        self.operation = operation


class SinkConstructionError(ScopeLogError, OSError):
    """Raised by ``init`` when the rotating file sink cannot be created."""

    def __init__(self, path: str, reason: Optional[BaseException] = None) -> None:
        detail = f": {reason}" if reason else ""
        super().__init__(f"Failed to create file sink at '{path}'{detail}")
        self.path = path
        self.reason = reason

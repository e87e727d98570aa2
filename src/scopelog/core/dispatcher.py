from __future__ import annotations

"""
Dispatcher / Sink Router.

Holds the process-wide logging endpoint. ``init`` configures it once at
startup; modules then acquire a ScopeHandle keyed by their own file and call
one method per severity on it. Every call is normalized, optionally located,
stamped and handed to the sink pipeline, where the console and file sinks
filter it independently.

Init and shutdown are serialized by a module lock. The configuration is
read-only between them.
"""

import atexit
import logging
import threading
from typing import Any, Optional, TextIO

from scopelog.core.callsite import locate
from scopelog.core.message import normalize_message
from scopelog.core.scope import ScopeIdentifier, resolve_scope
from scopelog.domain.config import LoggerConfig
from scopelog.domain.records import LogRecord
from scopelog.domain.severity import CRITICAL_LEVELS, Severity
from scopelog.errors import ConfigurationMissingError
from scopelog.infra.fs import tail_file
from scopelog.infra.logging.core import SinkPipeline, build_pipeline

logger = logging.getLogger(__name__)

_LOCK = threading.Lock()
_DISPATCHER: Optional[Dispatcher] = None
_ATEXIT_REGISTERED = False


class Dispatcher:
    """
    Routes records from scope handles to the active sink pipeline.
    """

    def __init__(self, config: LoggerConfig, pipeline: SinkPipeline) -> None:
        self.config = config
        self.pipeline = pipeline

    def dispatch(self, severity: Severity, scope: str, parts: tuple) -> None:
        """
        Build a record from a log call and offer it to both sinks.

        Must be called directly from a ScopeHandle method: the call-site
        depth assumes exactly that frame layout.
        """
        if not self.pipeline.accepts(severity):
            return

        message = normalize_message(parts)
        locator = locate(self.config.stack_depth) if severity in CRITICAL_LEVELS else None
        self.pipeline.emit(LogRecord.now(severity, scope, message, locator))


class ScopeHandle:
    """
    Per-module logging handle closed over a normalized scope.

    Cheap to create; holds nothing but the scope string and looks the
    dispatcher up on every call.
    """

    __slots__ = ("scope",)

    def __init__(self, scope: str) -> None:
        self.scope = scope

    def __repr__(self) -> str:
        return f"ScopeHandle(scope={self.scope!r})"

    def crit(self, *parts: Any) -> None:
        _require_dispatcher().dispatch(Severity.CRIT, self.scope, parts)

    def error(self, *parts: Any) -> None:
        _require_dispatcher().dispatch(Severity.ERROR, self.scope, parts)

    def warn(self, *parts: Any) -> None:
        _require_dispatcher().dispatch(Severity.WARN, self.scope, parts)

    def notice(self, *parts: Any) -> None:
        _require_dispatcher().dispatch(Severity.NOTICE, self.scope, parts)

    def info(self, *parts: Any) -> None:
        _require_dispatcher().dispatch(Severity.INFO, self.scope, parts)

    def http(self, *parts: Any) -> None:
        _require_dispatcher().dispatch(Severity.HTTP, self.scope, parts)

    def debug(self, *parts: Any) -> None:
        _require_dispatcher().dispatch(Severity.DEBUG, self.scope, parts)

    def log(self, level: Severity, *parts: Any) -> None:
        """Emit at a level chosen at runtime."""
        _require_dispatcher().dispatch(Severity.parse(level), self.scope, parts)


# ==============================================================================
# PUBLIC API
# ==============================================================================

def init(config: LoggerConfig, *, console_stream: Optional[TextIO] = None) -> None:
    """
    Configure the process-wide logging endpoint.

    Re-initializing replaces the previous sinks once the new ones are built.
    Handles acquired earlier keep their scope string and write to the new
    sinks.

    Args:
        config: Endpoint configuration.
        console_stream: Console target; defaults to stdout.

    Raises:
        SinkConstructionError: If the file sink cannot be created. The previous
            state (initialized or not) is left untouched.
    """
    global _DISPATCHER, _ATEXIT_REGISTERED

    with _LOCK:
        pipeline = build_pipeline(config, console_stream)

        previous = _DISPATCHER
        if previous is not None:
            previous.pipeline.stop()

        pipeline.attach()
        _DISPATCHER = Dispatcher(config, pipeline)

        if not _ATEXIT_REGISTERED:
            atexit.register(shutdown)
            _ATEXIT_REGISTERED = True

    logger.debug(f"Dispatcher: Initialized, writing to '{config.output_directory}'")


def get_scope(raw_identifier: ScopeIdentifier) -> ScopeHandle:
    """
    Acquire a handle for the calling module.

    Args:
        raw_identifier: Usually ``__file__``; file URLs and paths are accepted.

    Returns:
        ScopeHandle: Handle whose scope is relative to the configured root.

    Raises:
        ConfigurationMissingError: If called before ``init``.
    """
    dispatcher = _require_dispatcher("acquire a scope")
    return ScopeHandle(resolve_scope(raw_identifier, dispatcher.config.root_directory))


def shutdown() -> None:
    """Flush pending records, close the sinks and return to uninitialized."""
    global _DISPATCHER

    with _LOCK:
        dispatcher, _DISPATCHER = _DISPATCHER, None
        if dispatcher is not None:
            dispatcher.pipeline.stop()


def flush() -> None:
    """
    Wait until every record logged so far has reached the sinks.

    Raises:
        ConfigurationMissingError: If called before ``init``.
    """
    with _LOCK:
        _require_dispatcher("flush").pipeline.flush()


def is_initialized() -> bool:
    return _DISPATCHER is not None


def get_config() -> LoggerConfig:
    """
    Return the active configuration.

    Raises:
        ConfigurationMissingError: If called before ``init``.
    """
    return _require_dispatcher("read the configuration").config


def get_recent_logs(n_lines: int = 100) -> str:
    """
    Extract the tail of the current log file for diagnostics.

    Args:
        n_lines: Maximum number of lines to return.

    Returns:
        str: Tail of the file currently being written (the target of ``latest.log``).

    Raises:
        ConfigurationMissingError: If called before ``init``.
    """
    handler = _require_dispatcher("read recent logs").pipeline.file_handler
    flush()
    handler.acquire()
    try:
        path = handler.baseFilename
    finally:
        handler.release()
    return tail_file(path, n_lines)


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _require_dispatcher(operation: str = "log") -> Dispatcher:
    dispatcher = _DISPATCHER
    if dispatcher is None:
        raise ConfigurationMissingError(operation)
    return dispatcher


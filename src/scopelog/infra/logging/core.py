from __future__ import annotations

"""
Sink Pipeline Orchestrator.

Wires the console and file sinks behind a QueueHandler so that formatting
output and disk I/O (including rotation and eviction) run on a listener
thread instead of the logging caller. A single queue per pipeline keeps the
records of one flow of control in call order at every sink.
"""

import logging
import queue
from logging.handlers import QueueHandler, QueueListener
from typing import Optional, TextIO

from scopelog.domain.config import LoggerConfig
from scopelog.domain.records import LogRecord
from scopelog.domain.severity import Severity, register_level_names
from scopelog.infra.logging.formatters import RECORD_ATTR
from scopelog.infra.logging.handlers import (
    _is_our_handler,
    _tag_handler,
    create_console_handler,
    create_file_handler,
)
from scopelog.infra.logging.rotation import DailyRotatingFileHandler

# Dedicated logger carrying the records; never an ancestor of module loggers
RECORD_LOGGER_NAME: str = "scopelog.records"


class SinkPipeline:
    """
    Console + file sinks fed through a queue.

    A pipeline is built detached; ``attach`` connects its QueueHandler to the
    record logger, ``stop`` disconnects it and drains the queue.

    Attributes:
        config: Configuration the sinks were built from.
        logger: Non-propagating logger receiving the records.
        console_handler: Console sink.
        file_handler: Rotating file sink.
        queue_handler: Entry point of the queue on ``logger``.
    """

    def __init__(
            self,
            config: LoggerConfig,
            logger: logging.Logger,
            console_handler: logging.Handler,
            file_handler: DailyRotatingFileHandler,
            queue_handler: QueueHandler,
            listener: QueueListener,
    ) -> None:
        self.config = config
        self.logger = logger
        self.console_handler = console_handler
        self.file_handler = file_handler
        self.queue_handler = queue_handler
        self._listener: Optional[QueueListener] = listener

    @property
    def running(self) -> bool:
        return self._listener is not None

    def attach(self) -> None:
        """Route the record logger into this pipeline's queue."""
        _remove_our_handlers(self.logger)
        self.logger.propagate = False
        self.logger.setLevel(self.config.min_level.levelno)
        self.logger.addHandler(self.queue_handler)

    def accepts(self, severity: Severity) -> bool:
        """True if at least one sink would emit a record of this level."""
        return severity.is_at_least(self.config.min_level)

    def emit(self, record: LogRecord) -> None:
        """
        Offer a record to both sinks; each applies its own level.

        The record goes straight to the queue so a host calling
        ``logging.disable`` does not silence it.
        """
        stdlib_record = self.logger.makeRecord(
            self.logger.name,
            record.severity.levelno,
            "(scopelog)",
            0,
            record.message,
            None,
            None,
            extra={RECORD_ATTR: record},
        )
        self.queue_handler.handle(stdlib_record)

    def flush(self) -> None:
        """Block until every queued record has been handed to the sinks."""
        listener = self._listener
        if listener is None:
            return
        _safe_stop_listener(listener)
        listener.start()
        for h in (self.console_handler, self.file_handler):
            h.flush()

    def stop(self) -> None:
        """Detach, drain pending records and close the sinks. Safe to repeat."""
        listener, self._listener = self._listener, None
        if listener is None:
            return

        if self.queue_handler in self.logger.handlers:
            self.logger.removeHandler(self.queue_handler)
        _safe_stop_listener(listener)

        for h in (self.queue_handler, self.console_handler, self.file_handler):
            h.flush()
            h.close()


# ==============================================================================
# PUBLIC API
# ==============================================================================

def build_pipeline(cfg: LoggerConfig, console_stream: Optional[TextIO] = None) -> SinkPipeline:
    """
    Create both sinks and start the queue listener, without attaching it.

    The file sink is built first so a construction failure leaves no thread
    or handler behind.

    Args:
        cfg: Configuration to build from.
        console_stream: Console target; defaults to stdout.

    Returns:
        SinkPipeline: Started, detached pipeline.

    Raises:
        SinkConstructionError: If the file sink cannot be created.
    """
    register_level_names()

    file_handler = create_file_handler(cfg)
    console_handler = create_console_handler(cfg, console_stream)

    log_queue: queue.Queue[logging.LogRecord] = queue.Queue(-1)
    queue_handler = QueueHandler(log_queue)
    _tag_handler(queue_handler)

    listener = QueueListener(log_queue, console_handler, file_handler, respect_handler_level=True)
    listener.start()

    logger = logging.getLogger(RECORD_LOGGER_NAME)
    return SinkPipeline(cfg, logger, console_handler, file_handler, queue_handler, listener)


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _remove_our_handlers(logger: logging.Logger) -> None:
    """Detach stale pipeline-managed handlers from ``logger``."""
    for h in list(logger.handlers):
        if _is_our_handler(h):
            logger.removeHandler(h)


def _safe_stop_listener(listener: Optional[QueueListener]) -> None:
    """
    Stop a QueueListener, tolerating listeners whose thread is already gone.
    """
    if not listener:
        return
    if getattr(listener, "_thread", None) is not None:
        listener.stop()

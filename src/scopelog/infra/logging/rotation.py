from __future__ import annotations

"""
Date-Partitioned Rotating File Handler.

Writes plain log lines into ``<directory>/<DATE>.log``. A new file is started
when the date changes or when the next line would push the current file past
the size threshold (``<DATE>.1.log``, ``<DATE>.2.log``, ...). Every created file
is recorded in ``audit.json``, old files are evicted according to the retention
policy, and ``latest.log`` always points at the file being written.
"""

import logging
import os
import re
from datetime import datetime
from logging.handlers import BaseRotatingHandler
from typing import Optional

from scopelog.domain.config import DEFAULT_DATE_PATTERN, Retention
from scopelog.infra.audit import AUDIT_FILE_NAME, AuditLog
from scopelog.infra.fs import ensure_directory, update_latest_alias

LOG_EXTENSION = ".log"


class DailyRotatingFileHandler(BaseRotatingHandler):
    """
    Rotates by date and size, evicts by count or age.

    Attributes:
        directory: Absolute folder holding the log files.
        max_bytes: Size threshold of a single file (0 disables size rotation).
        date_pattern: strftime pattern of the ``<DATE>`` part of file names.
        audit: Bookkeeping of created files and eviction policy.
    """

    def __init__(
            self,
            directory: str,
            max_bytes: int,
            retention: Retention,
            date_pattern: str = DEFAULT_DATE_PATTERN,
            encoding: Optional[str] = "utf-8",
    ) -> None:
        self.directory = ensure_directory(directory)
        self.max_bytes = int(max_bytes)
        self.date_pattern = date_pattern
        self.audit = AuditLog(os.path.join(self.directory, AUDIT_FILE_NAME), retention)

        self.current_date = self._date_stamp()
        self.sequence = self._resume_sequence(self.current_date)

        super().__init__(self._file_path(self.current_date, self.sequence), "a", encoding=encoding)
        self._on_file_opened()

    # -------------------------------------------------------------------------
    # BaseRotatingHandler API
    # -------------------------------------------------------------------------

    def shouldRollover(self, record: logging.LogRecord) -> bool:
        if self.stream is None:
            self.stream = self._open()

        if self._date_stamp() != self.current_date:
            return True

        if self.max_bytes > 0:
            line = f"{self.format(record)}{self.terminator}"
            self.stream.seek(0, os.SEEK_END)
            position = self.stream.tell()
            size = len(line.encode(self.encoding or "utf-8"))
            if position > 0 and position + size > self.max_bytes:
                return True
        return False

    def doRollover(self) -> None:
        if self.stream:
            self.stream.close()
            self.stream = None

        today = self._date_stamp()
        if today != self.current_date:
            self.current_date = today
            self.sequence = self._resume_sequence(today)
        else:
            self.sequence += 1

        self.baseFilename = self._file_path(self.current_date, self.sequence)
        self.stream = self._open()
        self._on_file_opened()

    # -------------------------------------------------------------------------
    # Private Helpers
    # -------------------------------------------------------------------------

    def _now(self) -> datetime:
        return datetime.now()

    def _date_stamp(self) -> str:
        return self._now().strftime(self.date_pattern)

    def _file_path(self, date_stamp: str, sequence: int) -> str:
        if sequence == 0:
            name = f"{date_stamp}{LOG_EXTENSION}"
        else:
            name = f"{date_stamp}.{sequence}{LOG_EXTENSION}"
        return os.path.join(self.directory, name)

    def _resume_sequence(self, date_stamp: str) -> int:
        """Pick the newest file of ``date_stamp`` that still has room."""
        pattern = re.compile(rf"^{re.escape(date_stamp)}(?:\.(\d+))?{re.escape(LOG_EXTENSION)}$")
        sequences = []
        for name in os.listdir(self.directory):
            match = pattern.match(name)
            if match:
                sequences.append(int(match.group(1) or 0))

        if not sequences:
            return 0

        newest = max(sequences)
        size = os.path.getsize(self._file_path(date_stamp, newest))
        if self.max_bytes > 0 and size >= self.max_bytes:
            return newest + 1
        return newest

    def _on_file_opened(self) -> None:
        self.audit.register(self.baseFilename)
        self.audit.evict(keep=self.baseFilename)
        update_latest_alias(self.directory, os.path.basename(self.baseFilename))

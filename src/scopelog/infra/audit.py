from __future__ import annotations

"""
Rotation Audit Record.

Keeps ``audit.json`` next to the log files: the ordered list of files the
sink created, each with its creation time and a hash. The record drives
eviction, so files from previous runs are evicted as well.
Persistence is fail-safe; a broken audit file is rebuilt from scratch.
"""

import hashlib
import json
import logging
import os
import time
from dataclasses import asdict, dataclass
from typing import List, Optional

from scopelog.domain.config import Retention

logger = logging.getLogger(__name__)

AUDIT_FILE_NAME = "audit.json"
HASH_TYPE = "sha256"

_MS_PER_DAY = 24 * 60 * 60 * 1000


@dataclass(frozen=True)
class AuditEntry:
    """
    One file created by the sink.

    Attributes:
        date: Creation time in epoch milliseconds.
        name: Absolute path of the file.
        hash: Digest of name and creation time.
    """
    date: int
    name: str
    hash: str


class AuditLog:
    """
    Bookkeeping of rotated files with count- or age-based eviction.
    """

    def __init__(self, path: str, retention: Retention) -> None:
        self.path = path
        self.retention = retention
        self.entries: List[AuditEntry] = []
        self._load()

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def register(self, file_path: str, created_ms: Optional[int] = None) -> None:
        """Append a newly created file unless it is already tracked."""
        file_path = os.path.abspath(file_path)
        if any(e.name == file_path for e in self.entries):
            return
        created = int(time.time() * 1000) if created_ms is None else int(created_ms)
        digest = hashlib.sha256(f"{file_path}{created}".encode("utf-8")).hexdigest()
        self.entries.append(AuditEntry(date=created, name=file_path, hash=digest))
        self.save()

    def evict(self, now_ms: Optional[int] = None, keep: Optional[str] = None) -> List[str]:
        """
        Delete the files falling outside the retention policy.

        Args:
            now_ms: Reference time for age-based retention.
            keep: File that must survive, typically the one being written.

        Returns:
            List[str]: Paths dropped from the record.
        """
        if self.retention.days:
            now = int(time.time() * 1000) if now_ms is None else int(now_ms)
            cutoff = now - self.retention.amount * _MS_PER_DAY
            expired = [e for e in self.entries if e.date < cutoff]
        else:
            overflow = len(self.entries) - self.retention.amount
            expired = self.entries[:overflow] if overflow > 0 else []

        if keep is not None:
            keep = os.path.abspath(keep)
            expired = [e for e in expired if e.name != keep]

        if not expired:
            return []

        for entry in expired:
            _remove_file(entry.name)
        expired_names = {e.name for e in expired}
        self.entries = [e for e in self.entries if e.name not in expired_names]
        self.save()
        return [e.name for e in expired]

    def file_names(self) -> List[str]:
        return [e.name for e in self.entries]

    def to_dict(self) -> dict:
        return {
            "keep": {"days": self.retention.days, "amount": self.retention.amount},
            "auditLog": os.path.abspath(self.path),
            "files": [asdict(e) for e in self.entries],
            "hashType": HASH_TYPE,
        }

    def save(self) -> None:
        tmp_path = self.path + ".tmp"
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(self.to_dict(), f, indent=4)
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.warning(f"AuditLog: Failed to persist '{self.path}': {e}")

    # -------------------------------------------------------------------------
    # Private Helpers
    # -------------------------------------------------------------------------

    def _load(self) -> None:
        if not os.path.exists(self.path):
            return
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            self.entries = [
                AuditEntry(date=int(item["date"]), name=str(item["name"]), hash=str(item.get("hash", "")))
                for item in data.get("files", [])
            ]
            self.entries.sort(key=lambda e: e.date)
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning(f"AuditLog: Ignoring unreadable audit record '{self.path}': {e}")
            self.entries = []


def _remove_file(path: str) -> None:
    try:
        os.remove(path)
        logger.debug(f"AuditLog: Evicted '{path}'")
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(f"AuditLog: Could not evict '{path}': {e}")

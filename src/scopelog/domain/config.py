from __future__ import annotations

"""
Logger Configuration Models.

Defines the immutable configuration consumed by the dispatcher at init time,
the retention policy of the rotating file sink and the tolerant parsers used
to read sizes, backlogs and levels from loosely typed sources (JSON files,
environment-driven dicts).
"""

import logging
import os
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

from scopelog.domain.severity import Severity

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Constants & Defaults
# -----------------------------------------------------------------------------
DEFAULT_MAX_FILE_SIZE = 20 * 1024 * 1024  # 20MB
DEFAULT_MAX_FILE_BACKLOG = 10
DEFAULT_STACK_DEPTH = 3
DEFAULT_DATE_PATTERN = "%Y-%m-%d"

_SIZE_RE = re.compile(r"^\s*(\d+)\s*([kmg]?)b?\s*$", re.IGNORECASE)
_DAYS_RE = re.compile(r"^\s*(\d+)\s*d\s*$", re.IGNORECASE)

_SIZE_UNITS: Dict[str, int] = {
    "": 1,
    "k": 1024,
    "m": 1024 * 1024,
    "g": 1024 * 1024 * 1024,
}


@dataclass(frozen=True)
class Retention:
    """
    How many rotated files the file sink keeps.

    Attributes:
        amount: File count, or number of days when ``days`` is set.
        days: Interpret ``amount`` as an age limit in days.
    """
    amount: int
    days: bool = False


# -----------------------------------------------------------------------------
# Parsers
# -----------------------------------------------------------------------------

def parse_size(value: Union[int, str]) -> int:
    """
    Convert a size option into bytes.

    Accepts plain integers and strings such as ``"20MB"``, ``"10k"`` or ``"1g"``.

    Raises:
        ValueError: If the value is not a positive size.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid size: {value!r}")
    if isinstance(value, int):
        size = value
    else:
        match = _SIZE_RE.match(str(value))
        if not match:
            raise ValueError(f"Invalid size: {value!r}")
        size = int(match.group(1)) * _SIZE_UNITS[match.group(2).lower()]
    if size <= 0:
        raise ValueError(f"Size must be positive: {value!r}")
    return size


def parse_retention(value: Union[int, str, Retention]) -> Retention:
    """
    Convert a backlog option into a Retention policy.

    ``10`` or ``"10"`` keeps ten files; ``"14d"`` keeps fourteen days.

    Raises:
        ValueError: If the value is neither a count nor a day-count.
    """
    if isinstance(value, Retention):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Invalid backlog: {value!r}")
    if isinstance(value, int):
        amount, days = value, False
    else:
        text = str(value).strip()
        match = _DAYS_RE.match(text)
        if match:
            amount, days = int(match.group(1)), True
        elif text.isdigit():
            amount, days = int(text), False
        else:
            raise ValueError(f"Invalid backlog: {value!r}")
    if amount <= 0:
        raise ValueError(f"Backlog must be positive: {value!r}")
    return Retention(amount=amount, days=days)


def _coerce_level(value: Any, default: Severity, option: str) -> Severity:
    """Parse a level option, falling back to ``default`` on unknown names."""
    try:
        return Severity.parse(value)
    except (ValueError, TypeError):
        logger.warning(f"LoggerConfig: Unknown level {value!r} for '{option}', using {default.name}")
        return default


# -----------------------------------------------------------------------------
# Configuration Model
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class LoggerConfig:
    """
    Immutable settings of the logging endpoint.

    Attributes:
        output_directory: Folder receiving dated log files and the audit record.
        console_min_level: Least severe level printed to the console.
        file_min_level: Least severe level written to the log files.
        max_file_size: Rotation threshold, bytes or a size string ("20MB").
        max_file_backlog: Files to keep, or a day-count string ("14d").
        root_directory: Prefix stripped from scope identifiers.
        stack_depth: Frames skipped when resolving the call site.
        console_colors: Force ANSI colors on or off; None detects a TTY.
        date_pattern: strftime pattern used for the dated file names.
        encoding: Encoding of the log files.
    """
    output_directory: str
    console_min_level: Severity = Severity.INFO
    file_min_level: Severity = Severity.DEBUG
    max_file_size: Union[int, str] = DEFAULT_MAX_FILE_SIZE
    max_file_backlog: Union[int, str] = DEFAULT_MAX_FILE_BACKLOG
    root_directory: str = field(default_factory=os.getcwd)
    stack_depth: int = DEFAULT_STACK_DEPTH
    console_colors: Optional[bool] = None
    date_pattern: str = DEFAULT_DATE_PATTERN
    encoding: str = "utf-8"

    def __post_init__(self) -> None:
        object.__setattr__(self, "output_directory", os.fspath(self.output_directory))
        object.__setattr__(self, "root_directory", os.fspath(self.root_directory or ""))
        object.__setattr__(
            self, "console_min_level",
            _coerce_level(self.console_min_level, Severity.INFO, "console_min_level"),
        )
        object.__setattr__(
            self, "file_min_level",
            _coerce_level(self.file_min_level, Severity.DEBUG, "file_min_level"),
        )

        try:
            parse_size(self.max_file_size)
        except ValueError as e:
            logger.warning(f"LoggerConfig: {e}. Using {DEFAULT_MAX_FILE_SIZE} bytes.")
            object.__setattr__(self, "max_file_size", DEFAULT_MAX_FILE_SIZE)

        try:
            parse_retention(self.max_file_backlog)
        except ValueError as e:
            logger.warning(f"LoggerConfig: {e}. Keeping {DEFAULT_MAX_FILE_BACKLOG} files.")
            object.__setattr__(self, "max_file_backlog", DEFAULT_MAX_FILE_BACKLOG)

        try:
            depth = int(self.stack_depth)
        except (TypeError, ValueError):
            depth = DEFAULT_STACK_DEPTH
        object.__setattr__(self, "stack_depth", max(0, depth))

    @property
    def max_file_size_bytes(self) -> int:
        return parse_size(self.max_file_size)

    @property
    def retention(self) -> Retention:
        return parse_retention(self.max_file_backlog)

    @property
    def min_level(self) -> Severity:
        """Least severe level accepted by at least one sink."""
        return max(self.console_min_level, self.file_min_level, key=lambda s: s.rank)


# -----------------------------------------------------------------------------
# Dict Loading
# -----------------------------------------------------------------------------

# Option name -> accepted keys, first match wins
_DICT_KEYS: Dict[str, tuple] = {
    "output_directory": ("output_directory", "outputDirectory", "where", "logFolder"),
    "console_min_level": ("console_min_level", "consoleMinLevel", "consoleLogLevel", "loggingLevel"),
    "file_min_level": ("file_min_level", "fileMinLevel", "fileLogLevel", "loggingLevel"),
    "max_file_size": ("max_file_size", "maxFileSizeBytes", "maxLogFileSize"),
    "max_file_backlog": ("max_file_backlog", "maxFileBacklog", "maxLogFileCount", "maxLogFiles"),
    "root_directory": ("root_directory", "rootDirectory", "dirname"),
    "stack_depth": ("stack_depth", "stackDepth"),
    "console_colors": ("console_colors", "consoleColors"),
    "date_pattern": ("date_pattern", "datePattern"),
    "encoding": ("encoding",),
}


def build_config_from_dict(d: Dict[str, Any]) -> LoggerConfig:
    """
    Build a LoggerConfig from a loosely typed mapping (e.g. config.json).

    Both snake_case names and the camelCase option names used by existing
    deployments are accepted. Missing options keep their defaults.

    Args:
        d: Source mapping.

    Returns:
        LoggerConfig: Parsed configuration.

    Raises:
        ValueError: If no output directory is given.
    """
    kwargs: Dict[str, Any] = {}
    for option, keys in _DICT_KEYS.items():
        for key in keys:
            if key in d and d[key] is not None:
                kwargs[option] = d[key]
                break

    if "output_directory" not in kwargs:
        raise ValueError("Logger configuration requires an output directory")

    return LoggerConfig(**kwargs)

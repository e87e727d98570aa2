from __future__ import annotations

"""
Severity Table.

Defines the seven-level severity taxonomy shared by the formatter, the sink
filters and the dispatcher. Lower rank means higher severity. Every level is
also mapped to a stdlib logging level number so the sinks can be filtered
with plain ``Handler.setLevel`` calls.
"""

import logging
from enum import Enum
from typing import Dict, Union

from colorama import Fore


class Severity(Enum):
    """
    Ordered severity levels.

    The enum value is the rank (0 = most severe). ``levelno`` is the
    equivalent stdlib logging number; it decreases as the rank grows.
    """
    CRIT = 0
    ERROR = 1
    WARN = 2
    NOTICE = 3
    INFO = 4
    HTTP = 5
    DEBUG = 6

    @property
    def rank(self) -> int:
        return self.value

    @property
    def levelno(self) -> int:
        return _LEVELNO[self]

    def is_at_least(self, other: Severity) -> bool:
        """True if this level is as severe as, or more severe than, ``other``."""
        return self.rank <= other.rank

    @classmethod
    def parse(cls, value: Union[Severity, str, int]) -> Severity:
        """
        Resolve a severity from a member, a rank or a case-insensitive name.

        Args:
            value: Severity member, integer rank or textual name/alias.

        Returns:
            Severity: The matching member.

        Raises:
            ValueError: If the value does not name one of the seven levels.
        """
        if isinstance(value, Severity):
            return value
        if isinstance(value, bool):
            raise ValueError(f"Invalid severity: {value!r}")
        if isinstance(value, int):
            return cls(value)
        key = str(value).strip().lower()
        try:
            return _ALIASES[key]
        except KeyError:
            raise ValueError(f"Unknown severity name: {value!r}") from None


# -----------------------------------------------------------------------------
# STATIC TABLES
# -----------------------------------------------------------------------------

NOTICE_LEVELNO = 25
HTTP_LEVELNO = 15

_LEVELNO: Dict[Severity, int] = {
    Severity.CRIT: logging.CRITICAL,
    Severity.ERROR: logging.ERROR,
    Severity.WARN: logging.WARNING,
    Severity.NOTICE: NOTICE_LEVELNO,
    Severity.INFO: logging.INFO,
    Severity.HTTP: HTTP_LEVELNO,
    Severity.DEBUG: logging.DEBUG,
}

_PLAIN_LABELS: Dict[Severity, str] = {
    Severity.CRIT: "CRIT",
    Severity.ERROR: "ERRO",
    Severity.WARN: "WARN",
    Severity.NOTICE: "NOTE",
    Severity.INFO: "INFO",
    Severity.HTTP: "HTTP",
    Severity.DEBUG: "DEBG",
}

_LABEL_COLORS: Dict[Severity, str] = {
    Severity.CRIT: Fore.LIGHTRED_EX,
    Severity.ERROR: Fore.RED,
    Severity.WARN: Fore.YELLOW,
    Severity.NOTICE: Fore.GREEN,
    Severity.INFO: Fore.BLUE,
    Severity.HTTP: Fore.CYAN,
    Severity.DEBUG: Fore.LIGHTWHITE_EX,
}

# Tolerated spellings for configuration files
_ALIASES: Dict[str, Severity] = {
    "crit": Severity.CRIT,
    "critical": Severity.CRIT,
    "fatal": Severity.CRIT,
    "error": Severity.ERROR,
    "err": Severity.ERROR,
    "erro": Severity.ERROR,
    "warn": Severity.WARN,
    "warning": Severity.WARN,
    "notice": Severity.NOTICE,
    "note": Severity.NOTICE,
    "info": Severity.INFO,
    "http": Severity.HTTP,
    "debug": Severity.DEBUG,
    "debg": Severity.DEBUG,
}

# Levels investigated by an operator: call site resolved, message in red
CRITICAL_LEVELS = frozenset({Severity.CRIT, Severity.ERROR})


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def rank(level: Severity) -> int:
    """Return the numeric rank of a level (0 = most severe)."""
    if not isinstance(level, Severity):
        raise TypeError(f"Not a severity level: {level!r}")
    return level.value


def plain_label(level: Severity) -> str:
    """Return the 4-character undecorated label of a level."""
    return _PLAIN_LABELS[level]


def color_label(level: Severity) -> str:
    """Return the 4-character label wrapped in the level's ANSI color."""
    return f"{_LABEL_COLORS[level]}{_PLAIN_LABELS[level]}{Fore.RESET}"


def register_level_names() -> None:
    """Register NOTICE and HTTP with the stdlib logging level registry."""
    logging.addLevelName(NOTICE_LEVELNO, "NOTICE")
    logging.addLevelName(HTTP_LEVELNO, "HTTP")

from __future__ import annotations

"""
Unit tests for the Logger Configuration domain.

Verifies:
1. Size and backlog parsing (bytes, unit suffixes, day-counts).
2. Tolerant coercion of levels and invalid values to defaults.
3. Loading from dicts using both snake_case and legacy camelCase keys.
"""

import os

import pytest

from scopelog.domain.config import (
    DEFAULT_MAX_FILE_BACKLOG,
    DEFAULT_MAX_FILE_SIZE,
    DEFAULT_STACK_DEPTH,
    LoggerConfig,
    Retention,
    build_config_from_dict,
    parse_retention,
    parse_size,
)
from scopelog.domain.severity import Severity


# -----------------------------------------------------------------------------
# Parser Tests
# -----------------------------------------------------------------------------
@pytest.mark.parametrize("raw, expected", [
    (1024, 1024),
    ("512", 512),
    ("10k", 10 * 1024),
    ("20MB", 20 * 1024 * 1024),
    ("1g", 1024 * 1024 * 1024),
    (" 3 m ", 3 * 1024 * 1024),
])
def test_parse_size(raw, expected) -> None:
    """TC-01: Plain numbers and k/m/g suffixes are converted to bytes."""
    assert parse_size(raw) == expected


@pytest.mark.parametrize("raw", ["", "ten", "10t", 0, -5, True])
def test_parse_size_rejects_invalid_values(raw) -> None:
    """TC-02: Garbage and non-positive sizes raise ValueError."""
    with pytest.raises(ValueError):
        parse_size(raw)


def test_parse_retention_count_and_days() -> None:
    """TC-03: Integers are file counts, 'Nd' strings are day-counts."""
    assert parse_retention(10) == Retention(amount=10, days=False)
    assert parse_retention("7") == Retention(amount=7, days=False)
    assert parse_retention("14d") == Retention(amount=14, days=True)
    assert parse_retention("3D") == Retention(amount=3, days=True)


@pytest.mark.parametrize("raw", ["forever", "0", "0d", -1])
def test_parse_retention_rejects_invalid_values(raw) -> None:
    """TC-04: Non-positive or unparsable backlogs raise ValueError."""
    with pytest.raises(ValueError):
        parse_retention(raw)


# -----------------------------------------------------------------------------
# LoggerConfig Tests
# -----------------------------------------------------------------------------
def test_defaults(tmp_path) -> None:
    """TC-05: Unspecified options take the documented defaults."""
    cfg = LoggerConfig(output_directory=str(tmp_path))

    assert cfg.console_min_level is Severity.INFO
    assert cfg.file_min_level is Severity.DEBUG
    assert cfg.max_file_size_bytes == DEFAULT_MAX_FILE_SIZE
    assert cfg.retention == Retention(amount=DEFAULT_MAX_FILE_BACKLOG)
    assert cfg.stack_depth == DEFAULT_STACK_DEPTH
    assert cfg.root_directory == os.getcwd()
    assert cfg.console_colors is None


def test_level_names_are_coerced(tmp_path) -> None:
    """TC-06: Level options accept names and fall back on unknown ones."""
    cfg = LoggerConfig(
        output_directory=str(tmp_path),
        console_min_level="warning",  # type: ignore[arg-type]
        file_min_level="chatty",  # type: ignore[arg-type]
    )
    assert cfg.console_min_level is Severity.WARN
    assert cfg.file_min_level is Severity.DEBUG


def test_invalid_rotation_values_fall_back(tmp_path) -> None:
    """TC-07: Bad sizes and backlogs never make the configuration unusable."""
    cfg = LoggerConfig(
        output_directory=str(tmp_path),
        max_file_size="huge",
        max_file_backlog="forever",
        stack_depth=-2,
    )
    assert cfg.max_file_size_bytes == DEFAULT_MAX_FILE_SIZE
    assert cfg.retention.amount == DEFAULT_MAX_FILE_BACKLOG
    assert cfg.stack_depth == 0


def test_min_level_is_least_severe_of_both_sinks(tmp_path) -> None:
    """TC-08: The endpoint gate opens for anything either sink accepts."""
    cfg = LoggerConfig(
        output_directory=str(tmp_path),
        console_min_level=Severity.HTTP,
        file_min_level=Severity.WARN,
    )
    assert cfg.min_level is Severity.HTTP


def test_config_is_immutable(tmp_path) -> None:
    """TC-09: Configuration is read-only after construction."""
    cfg = LoggerConfig(output_directory=str(tmp_path))
    with pytest.raises(AttributeError):
        cfg.stack_depth = 5  # type: ignore[misc]


# -----------------------------------------------------------------------------
# Dict Loading Tests
# -----------------------------------------------------------------------------
def test_build_from_legacy_keys(tmp_path) -> None:
    """TC-10: camelCase option names of existing deployments are understood."""
    cfg = build_config_from_dict({
        "where": str(tmp_path),
        "consoleLogLevel": "debug",
        "fileLogLevel": "warn",
        "maxLogFileSize": 10_000_000,
        "maxLogFileCount": 10,
        "dirname": "/srv/app",
        "stackDepth": 4,
    })

    assert cfg.output_directory == str(tmp_path)
    assert cfg.console_min_level is Severity.DEBUG
    assert cfg.file_min_level is Severity.WARN
    assert cfg.max_file_size_bytes == 10_000_000
    assert cfg.retention == Retention(amount=10)
    assert cfg.root_directory == "/srv/app"
    assert cfg.stack_depth == 4


def test_build_from_snake_case_keys(tmp_path) -> None:
    """TC-11: snake_case names map one-to-one to the dataclass fields."""
    cfg = build_config_from_dict({
        "output_directory": str(tmp_path),
        "max_file_backlog": "14d",
        "console_colors": False,
    })
    assert cfg.retention == Retention(amount=14, days=True)
    assert cfg.console_colors is False


def test_build_requires_output_directory() -> None:
    """TC-12: A configuration without a destination is rejected."""
    with pytest.raises(ValueError):
        build_config_from_dict({"consoleLogLevel": "info"})

from __future__ import annotations

"""
Unit tests for the Message Normalizer.

Verifies:
1. Classification of parts into text, error and object variants.
2. Rendering rules per variant and single-space joining.
3. Placeholder fallback for circular and unserializable objects.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from pathlib import PurePosixPath

import pytest

from scopelog.core.message import (
    PartKind,
    classify_part,
    normalize_message,
    render_error,
    render_object,
)


class _Color(Enum):
    RED = "red"


@dataclass
class _Point:
    x: int
    y: int


class _Plain:
    def __init__(self) -> None:
        self.name = "plain"
        self.size = 3


def _raise_nested() -> None:
    def level_two() -> None:
        raise ValueError("boom")

    def level_one() -> None:
        level_two()

    level_one()


# -----------------------------------------------------------------------------
# Classification Tests
# -----------------------------------------------------------------------------
@pytest.mark.parametrize("part, kind", [
    ("text", PartKind.TEXT),
    (ValueError("x"), PartKind.ERROR),
    (KeyboardInterrupt(), PartKind.ERROR),
    ({"a": 1}, PartKind.OBJECT),
    (42, PartKind.OBJECT),
    (None, PartKind.OBJECT),
])
def test_classify_part(part, kind) -> None:
    """TC-01: Every part maps to exactly one variant."""
    assert classify_part(part) is kind


# -----------------------------------------------------------------------------
# Rendering Tests
# -----------------------------------------------------------------------------
def test_parts_are_joined_with_single_spaces() -> None:
    """TC-02: Strings pass through and are joined by one space."""
    assert normalize_message(["user", "logged in"]) == "user logged in"
    assert normalize_message([]) == ""


def test_objects_render_as_compact_json() -> None:
    """TC-03: Structured objects use their canonical serialized form."""
    assert normalize_message(["payload", {"id": 7, "tags": ["a", "b"]}]) == 'payload {"id":7,"tags":["a","b"]}'
    assert render_object([1, None, True]) == "[1,null,true]"
    assert render_object({"name": "café"}) == '{"name":"café"}'


def test_common_python_types_are_converted() -> None:
    """TC-04: Dataclasses, enums, dates, paths and plain objects serialize."""
    assert render_object(_Point(1, 2)) == '{"x":1,"y":2}'
    assert render_object(_Color.RED) == '"red"'
    assert render_object(date(2024, 1, 31)) == '"2024-01-31"'
    assert render_object(PurePosixPath("/tmp/a")) == '"/tmp/a"'
    assert render_object(_Plain()) == '{"name":"plain","size":3}'


def test_error_renders_message_then_traceback() -> None:
    """TC-05: An error renders as '<message> \\n<trace>' with the full trace."""
    try:
        _raise_nested()
    except ValueError as exc:
        text = normalize_message(["failed:", exc])

    assert text.startswith("failed: boom \n")
    trace = text.split(" \n", 1)[1]
    assert trace.startswith("Traceback (most recent call last):")
    assert "level_one" in trace
    assert "level_two" in trace
    assert trace.endswith("ValueError: boom")


def test_unraised_error_without_message() -> None:
    """TC-06: An empty message falls back to the exception class name."""
    assert render_error(RuntimeError()) == "RuntimeError \nRuntimeError"


# -----------------------------------------------------------------------------
# Fallback Tests
# -----------------------------------------------------------------------------
def test_circular_object_uses_placeholder() -> None:
    """TC-07: Circular structures never abort the record."""
    loop: dict = {}
    loop["self"] = loop
    assert normalize_message(["state", loop]) == "state [Unserializable dict]"


def test_circular_instance_uses_placeholder() -> None:
    """TC-08: Self-referencing instances are caught as well."""
    node = _Plain()
    node.parent = node  # type: ignore[attr-defined]
    assert render_object(node) == "[Unserializable _Plain]"


def test_unserializable_object_uses_placeholder() -> None:
    """TC-09: Types without a JSON form are replaced, other parts survive."""
    assert normalize_message(["raw", b"\x00\x01", "end"]) == "raw [Unserializable bytes] end"
    assert render_object({(1, 2): "tuple key"}) == "[Unserializable dict]"

from __future__ import annotations

"""
Message Normalizer.

Joins the heterogeneous parts passed to a log call into one string. Each part
is classified into one of three kinds, and each kind has its own rendering
rule:

- TEXT: strings pass through unchanged.
- ERROR: exceptions render as their message followed by the traceback.
- OBJECT: anything else renders as compact JSON.

Normalization never raises: objects that cannot be serialized are replaced
by a placeholder so the rest of the record is still logged.
"""

import dataclasses
import json
import traceback
from datetime import date, datetime, time
from enum import Enum
from pathlib import PurePath
from typing import Any, Callable, Dict, Iterable

UNSERIALIZABLE_PLACEHOLDER = "[Unserializable {type_name}]"


class PartKind(Enum):
    TEXT = "text"
    ERROR = "error"
    OBJECT = "object"


def classify_part(part: Any) -> PartKind:
    """Return the variant tag of a message part."""
    if isinstance(part, str):
        return PartKind.TEXT
    if isinstance(part, BaseException):
        return PartKind.ERROR
    return PartKind.OBJECT


def render_error(exc: BaseException) -> str:
    """Render an exception as ``"<message> \\n<traceback>"``."""
    message = str(exc) or type(exc).__name__
    trace = "".join(
        traceback.format_exception(type(exc), exc, exc.__traceback__)
    ).rstrip("\n")
    return f"{message} \n{trace}"


def render_object(obj: Any) -> str:
    """Render a structured object as compact JSON, or a placeholder."""
    try:
        return json.dumps(
            obj,
            default=_to_jsonable,
            ensure_ascii=False,
            separators=(",", ":"),
        )
    except (TypeError, ValueError, RecursionError):
        return UNSERIALIZABLE_PLACEHOLDER.format(type_name=type(obj).__name__)


def render_text(text: str) -> str:
    return text


_RENDERERS: Dict[PartKind, Callable[[Any], str]] = {
    PartKind.TEXT: render_text,
    PartKind.ERROR: render_error,
    PartKind.OBJECT: render_object,
}


def render_part(part: Any) -> str:
    return _RENDERERS[classify_part(part)](part)


def normalize_message(parts: Iterable[Any]) -> str:
    """
    Render and join the parts of a log call with single spaces.

    Args:
        parts: Strings, exceptions and structured objects, in call order.

    Returns:
        str: The message text of the record.
    """
    return " ".join(render_part(part) for part in parts)


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _to_jsonable(obj: Any) -> Any:
    """Convert common non-JSON types; raise TypeError for the rest."""
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (datetime, date, time)):
        return obj.isoformat()
    if isinstance(obj, PurePath):
        return str(obj)
    if isinstance(obj, (set, frozenset)):
        return list(obj)
    if isinstance(obj, BaseException):
        return str(obj)
    if hasattr(obj, "__dict__") and not isinstance(obj, type):
        return vars(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")

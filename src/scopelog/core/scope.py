from __future__ import annotations

"""
Scope Resolver.

Turns the identifier a module passes when acquiring its scope handle
(``__file__``, a ``file://`` URL or a Path) into a short, separator-normalized
label relative to the configured root directory.
"""

import logging
import os
import posixpath
import re
from typing import Union
from urllib.parse import unquote, urlparse

logger = logging.getLogger(__name__)

ScopeIdentifier = Union[str, "os.PathLike[str]"]

_DRIVE_RE = re.compile(r"^[A-Za-z]:/")
_URL_DRIVE_RE = re.compile(r"^/[A-Za-z]:/")


def resolve_scope(raw_identifier: ScopeIdentifier, root_directory: str = "") -> str:
    """
    Normalize a module identifier into a scope label.

    The identifier is converted to a path, its separators are normalized to
    ``/`` and the root directory prefix is removed when the path lies under it.
    Relative inputs are never stripped, which makes the operation idempotent.

    Args:
        raw_identifier: Module path, ``file://`` URL or path-like object.
        root_directory: Prefix to strip from absolute paths.

    Returns:
        str: Normalized scope, or the unmodified input if it cannot be parsed.
    """
    try:
        path = _to_posix_path(_identifier_to_path(raw_identifier))
        if not path:
            return path

        root = _to_posix_path(os.fspath(root_directory)) if root_directory else ""
        if root and _is_absolute(path) and _is_absolute(root):
            if root != "/":
                root = root.rstrip("/")
            if path == root:
                return path
            prefix = root if root.endswith("/") else root + "/"
            if path.startswith(prefix):
                return path[len(prefix):]
        return path

    except (TypeError, ValueError) as e:
        logger.debug(f"ScopeResolver: Falling back to raw identifier {raw_identifier!r}: {e}")
        return raw_identifier if isinstance(raw_identifier, str) else str(raw_identifier)


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _identifier_to_path(raw_identifier: ScopeIdentifier) -> str:
    """Convert a ``file://`` URL or path-like object into a path string."""
    text = os.fspath(raw_identifier)
    if not isinstance(text, str):
        raise TypeError(f"Unsupported identifier type: {type(text).__name__}")

    if text.lower().startswith("file://"):
        parsed = urlparse(text)
        if parsed.netloc and parsed.netloc.lower() != "localhost":
            raise ValueError(f"File URL must be local: {text}")
        path = unquote(parsed.path)
        # file:///C:/x -> C:/x
        if _URL_DRIVE_RE.match(path):
            path = path[1:]
        return path

    return text


def _to_posix_path(path: str) -> str:
    """Normalize separators to ``/`` and collapse redundant segments."""
    if not path:
        return path
    normalized = posixpath.normpath(path.replace("\\", "/"))
    # normpath keeps a leading '//' as POSIX allows it
    if normalized.startswith("//"):
        normalized = "/" + normalized.lstrip("/")
    return normalized


def _is_absolute(path: str) -> bool:
    return path.startswith("/") or bool(_DRIVE_RE.match(path))

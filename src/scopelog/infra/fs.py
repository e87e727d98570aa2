from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Directory creation, the stable ``latest.log`` alias and log tail extraction.
Alias maintenance is fail-safe: a platform refusing symlinks must not stop
the file sink from writing.
"""

import logging
import os
from typing import Optional

logger = logging.getLogger(__name__)

LATEST_ALIAS_NAME = "latest.log"


def ensure_directory(path: str) -> str:
    """
    Create a directory hierarchy if missing and check it is writable.

    Args:
        path: Target directory.

    Returns:
        str: Absolute path of the directory.

    Raises:
        OSError: If the directory cannot be created or written.
    """
    abs_path = os.path.abspath(path)
    os.makedirs(abs_path, exist_ok=True)
    if not os.access(abs_path, os.W_OK):
        raise PermissionError(f"Directory is not writable: {abs_path}")
    return abs_path


def update_latest_alias(directory: str, target_name: str, alias_name: str = LATEST_ALIAS_NAME) -> bool:
    """
    Point ``<directory>/<alias_name>`` at ``target_name`` with a relative symlink.

    Args:
        directory: Folder holding both the alias and the target.
        target_name: File name (not path) of the current log file.
        alias_name: File name of the alias.

    Returns:
        bool: True if the alias now points at the target.
    """
    alias_path = os.path.join(directory, alias_name)
    tmp_path = alias_path + ".tmp"
    try:
        if os.path.lexists(tmp_path):
            os.remove(tmp_path)
        os.symlink(target_name, tmp_path)
        os.replace(tmp_path, alias_path)
        return True
    except (OSError, NotImplementedError) as e:
        logger.warning(f"LatestAlias: Could not link '{alias_path}' -> '{target_name}': {e}")
        return False


def resolve_latest(directory: str, alias_name: str = LATEST_ALIAS_NAME) -> Optional[str]:
    """Return the absolute path the alias points at, or None if absent."""
    alias_path = os.path.join(directory, alias_name)
    if not os.path.lexists(alias_path):
        return None
    try:
        return os.path.join(directory, os.readlink(alias_path))
    except OSError:
        return None


def tail_file(path: str, n_lines: int = 100) -> str:
    """
    Extract the last lines of a text file for diagnostics.

    Args:
        path: File to read.
        n_lines: Maximum number of lines to return.

    Returns:
        str: Consolidated tail, or a short explanation if unreadable.
    """
    if not os.path.exists(path):
        return "Log file not found."
    if n_lines <= 0:
        return ""

    # errors='replace' tolerates a partially written last line
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            lines = f.readlines()
            return "".join(lines[-n_lines:])
    except OSError as e:
        return f"Error retrieving logs: {e}"

from __future__ import annotations

"""
Call-Site Resolver.

Recovers the ``line[:column]`` of the code that issued a log call by walking
the interpreter stack. Stack inspection is comparatively expensive, so the
dispatcher only asks for it on CRIT and ERROR records. A missing frame or
line is an expected outcome and yields None.
"""

import inspect
import logging
import sys
from types import FrameType
from typing import Optional

from scopelog.domain.records import CallSite

logger = logging.getLogger(__name__)


def current_call_site(skip_frames: int) -> Optional[CallSite]:
    """
    Describe the frame ``skip_frames`` levels above this function.

    Frame 0 is this function itself, frame 1 its caller, and so on.

    Args:
        skip_frames: Number of frames to walk up.

    Returns:
        Optional[CallSite]: Position of the selected frame, or None.
    """
    if skip_frames < 0:
        return None
    try:
        frame = _frame_at(skip_frames)
    except ValueError:
        logger.debug(f"CallSiteResolver: Stack shallower than {skip_frames} frames")
        return None

    try:
        return _describe(frame)
    finally:
        del frame


def locate(configured_depth: int) -> Optional[str]:
    """
    Return the ``line[:column]`` locator of the frame at ``configured_depth``.

    The depth is counted from this function, so the default dispatcher depth
    of 3 skips locate, the dispatcher and the scope handle method.
    """
    # +1 skips locate itself
    site = current_call_site(configured_depth + 1)
    return site.locator if site else None


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _frame_at(depth: int) -> FrameType:
    # +1 skips _frame_at itself
    return sys._getframe(depth + 1)


def _describe(frame: FrameType) -> Optional[CallSite]:
    lineno = frame.f_lineno
    if lineno is None:
        return None

    column: Optional[int] = None
    try:
        info = inspect.getframeinfo(frame, context=0)
        positions = getattr(info, "positions", None)
        if positions is not None and positions.col_offset is not None:
            column = positions.col_offset + 1
    except (OSError, IndexError, StopIteration):
        pass

    return CallSite(file=frame.f_code.co_filename, line=lineno, column=column)

"""
Union bounds of all active displays.

Clicks are clamped into this rectangle so a bad translation on a multi-monitor
setup never sends the pointer off the desktop.

Usage:
    from utils.display_bounds import get_union_display_bounds, clamp_to_displays

    bounds = get_union_display_bounds()
    x, y = clamp_to_displays(5000, -20, bounds)
"""
from __future__ import annotations

import logging
from typing import Optional, Tuple

import mss

from utils.geometry import Rect

logger = logging.getLogger("display_bounds")


class DisplayBoundsError(RuntimeError):
    """No active display could be read."""


def _monitor_to_rect(monitor: dict) -> Rect:
    return Rect(
        int(monitor['left']),
        int(monitor['top']),
        int(monitor['width']),
        int(monitor['height']),
    )


def get_union_display_bounds() -> Rect:
    """
    Compute the smallest rectangle enclosing every active display.

    mss reports the combined virtual screen as monitors[0] followed by one
    entry per physical display. The per-display entries are unioned when
    present; monitors[0] is used alone when mss only reports the combined screen.

    Returns:
        Rect in global logical points

    Raises:
        DisplayBoundsError: if no display is reported
    """
    with mss.mss() as sct:
        monitors = list(sct.monitors)

    if not monitors:
        raise DisplayBoundsError("no active displays found")

    displays = monitors[1:] or monitors[:1]
    bounds = _monitor_to_rect(displays[0])
    for monitor in displays[1:]:
        bounds = bounds.union(_monitor_to_rect(monitor))

    if not bounds.is_valid():
        raise DisplayBoundsError(f"invalid display bounds: {bounds}")

    logger.debug(f"Union display bounds: {bounds} ({len(displays)} display(s))")
    return bounds


def clamp_to_displays(x: int, y: int, bounds: Optional[Rect] = None) -> Tuple[int, int]:
    """Clamp a global point into the display union."""
    if bounds is None:
        bounds = get_union_display_bounds()
    clamped = bounds.clamp_point(x, y)
    if clamped != (x, y):
        logger.warning(f"Click ({x}, {y}) outside displays {bounds}, clamped to {clamped}")
    return clamped

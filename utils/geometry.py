"""
Rectangle type and coordinate translation between capture, window and desktop space.

Three coordinate spaces are involved:
- Frame: pixels of the captured screenshot (2x the window size on Retina displays)
- Window: logical points reported by System Events, origin at the window's top-left
- Global: logical points on the combined multi-monitor desktop

Usage:
    from utils.geometry import Rect, screenshot_to_global

    window = Rect(100, 50, 800, 600)
    x, y = screenshot_to_global((400, 300), (1600, 1200), window)
    # -> (300, 200)
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in logical points."""

    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    def is_valid(self) -> bool:
        return self.width > 0 and self.height > 0

    def contains(self, x: int, y: int) -> bool:
        return self.x <= x < self.right and self.y <= y < self.bottom

    def union(self, other: Rect) -> Rect:
        """Smallest rectangle enclosing both."""
        min_x = min(self.x, other.x)
        min_y = min(self.y, other.y)
        max_x = max(self.right, other.right)
        max_y = max(self.bottom, other.bottom)
        return Rect(min_x, min_y, max_x - min_x, max_y - min_y)

    def clamp_point(self, x: int, y: int) -> Tuple[int, int]:
        """Clamp (x, y) so it lies on a pixel inside this rectangle."""
        cx = min(max(x, self.x), self.right - 1)
        cy = min(max(y, self.y), self.bottom - 1)
        return cx, cy

    def as_region(self) -> str:
        """Format as 'x,y,w,h' for screencapture -R."""
        return f"{self.x},{self.y},{self.width},{self.height}"


def screenshot_to_global(
    point: Tuple[int, int],
    frame_size: Tuple[int, int],
    window: Rect
) -> Tuple[int, int]:
    """
    Translate a frame pixel to global desktop coordinates.

    Args:
        point: (x, y) in frame pixels
        frame_size: (width, height) of the captured frame
        window: Window rectangle the frame was captured from

    Returns:
        (x, y) in global logical points
    """
    frame_w, frame_h = frame_size
    if frame_w <= 0 or frame_h <= 0:
        raise ValueError(f"Invalid frame size: {frame_size}")

    scale_x = window.width / frame_w
    scale_y = window.height / frame_h

    px, py = point
    return window.x + int(px * scale_x), window.y + int(py * scale_y)

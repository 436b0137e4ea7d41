"""
Shared debug screenshot utility for click targets.

Usage:
    from utils.debug_screenshot import annotate_match, save_debug_screenshot

    annotated = annotate_match(frame, match)
    save_debug_screenshot(annotated, "Handshake", "match")
    # Saves to: debug/Handshake/20251209_060553_match.png
"""
from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Optional, Union

import cv2
import numpy as np

from utils.template_matcher import TemplateMatch

# Base debug directory
DEBUG_BASE = Path(__file__).parent.parent / "debug"

MATCH_BOX_COLOR = (0, 255, 0)     # BGR green
CLICK_POINT_COLOR = (0, 0, 255)   # BGR red


def annotate_match(frame: np.ndarray, match: TemplateMatch) -> np.ndarray:
    """
    Draw the matched region and the click point on a copy of the frame.

    Returns:
        Annotated BGR copy; the input frame is not modified
    """
    annotated = frame.copy()
    cv2.rectangle(annotated, match.top_left, match.bottom_right, MATCH_BOX_COLOR, 2)
    cv2.circle(annotated, match.center, 5, CLICK_POINT_COLOR, -1)
    return annotated


def save_debug_screenshot(frame: np.ndarray, target_name: str, label: str,
                          base_dir: Optional[Union[str, Path]] = None) -> str:
    """
    Save debug screenshot with timestamp and label.

    Args:
        frame: BGR numpy array screenshot
        target_name: Name of the click target (used as subdirectory, e.g. "Handshake")
        label: Description label for filename (e.g. "match")
        base_dir: Override DEBUG_BASE

    Returns:
        str: Path to saved file
    """
    debug_dir = Path(base_dir if base_dir is not None else DEBUG_BASE) / target_name
    debug_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    filepath = debug_dir / f"{timestamp}_{label}.png"

    if not cv2.imwrite(str(filepath), frame):
        raise OSError(f"Error saving debug screenshot: {filepath}")

    return str(filepath)

"""
Template matching with multi-scale search and a sliding threshold.

Templates live in images/ and are matched in colour with TM_CCOEFF_NORMED
(higher = better, ~1.0 is perfect).

The game window can be resized, so icons are not always captured at the size the
template was cut at. match_template_multiscale() resizes the template to each
configured scale, keeps the best score per scale, then walks the threshold down
from threshold_start to threshold_min. At each threshold the first scale (in
configured order) that reaches it is accepted, so the nominal scale wins whenever
it is good enough.

Usage:
    from utils.template_matcher import match_template, match_template_multiscale

    match = match_template(frame, "handshake_icon.png", threshold=0.75)
    if match:
        print(match.center, match.score)

    match = match_template_multiscale(
        frame, "close_x_icon.png",
        scales=(1.0, 0.9, 1.1),
        threshold_start=0.9, threshold_min=0.75, threshold_step=0.05,
    )
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

import cv2
import numpy as np

TEMPLATE_DIR = Path(__file__).parent.parent / "images"

# Cache for loaded templates, keyed by resolved path
_templates = {}

# Default thresholds
DEFAULT_THRESHOLD = 0.75
DEFAULT_SCALES = (1.0,)

# Resized templates below this size produce meaningless correlation peaks
MIN_TEMPLATE_SIZE = 8


class TemplateNotFoundError(FileNotFoundError):
    """Template file missing or unreadable."""


@dataclass
class TemplateMatch:
    """Represents a single template match result in frame pixels."""

    label: str
    score: float
    scale: float
    top_left: Tuple[int, int]
    size: Tuple[int, int]  # width, height of the (resized) template

    @property
    def center(self) -> Tuple[int, int]:
        return (self.top_left[0] + self.size[0] // 2, self.top_left[1] + self.size[1] // 2)

    @property
    def bottom_right(self) -> Tuple[int, int]:
        return (self.top_left[0] + self.size[0], self.top_left[1] + self.size[1])


def _template_path(name: str, template_dir: Optional[Union[str, Path]] = None) -> Path:
    base = Path(template_dir) if template_dir is not None else TEMPLATE_DIR
    return base / name


def load_template(name: str, template_dir: Optional[Union[str, Path]] = None) -> np.ndarray:
    """
    Load a template (BGR) with caching.

    Raises:
        TemplateNotFoundError: if the file does not exist or cannot be decoded
    """
    path = _template_path(name, template_dir)
    key = str(path)
    if key not in _templates:
        if not path.exists():
            raise TemplateNotFoundError(f"Error reading template image file: {path}")
        img = cv2.imread(str(path), cv2.IMREAD_COLOR)
        if img is None or img.size == 0:
            raise TemplateNotFoundError(f"Error reading template image file: {path}")
        _templates[key] = img
    return _templates[key]


def _to_bgr(frame: np.ndarray) -> np.ndarray:
    if len(frame.shape) == 2:
        return cv2.cvtColor(frame, cv2.COLOR_GRAY2BGR)
    if frame.shape[2] == 4:
        return cv2.cvtColor(frame, cv2.COLOR_BGRA2BGR)
    return frame


def _resize(template: np.ndarray, scale: float) -> np.ndarray:
    if scale == 1.0:
        return template
    return cv2.resize(
        template,
        dsize=None,
        fx=scale,
        fy=scale,
        interpolation=cv2.INTER_CUBIC if scale > 1.0 else cv2.INTER_AREA,
    )


def _best_match(frame: np.ndarray, template: np.ndarray) -> Tuple[float, Tuple[int, int]]:
    result = cv2.matchTemplate(frame, template, cv2.TM_CCOEFF_NORMED)
    _, max_val, _, max_loc = cv2.minMaxLoc(result)
    return float(max_val), (int(max_loc[0]), int(max_loc[1]))


def sliding_thresholds(start: float, minimum: float, step: float) -> List[float]:
    """Thresholds from start down to minimum (inclusive)."""
    if step <= 0:
        raise ValueError(f"threshold step must be positive, got {step}")
    if start <= minimum:
        return [minimum]
    steps = int(round((start - minimum) / step))
    values = [round(start - i * step, 6) for i in range(steps + 1)]
    values = [v for v in values if v >= minimum]
    if values[-1] != minimum:
        values.append(minimum)
    return values


def match_template(
    frame: np.ndarray,
    template_name: str,
    threshold: float = DEFAULT_THRESHOLD,
    template_dir: Optional[Union[str, Path]] = None,
    label: Optional[str] = None,
) -> Optional[TemplateMatch]:
    """
    Match a template at its native size.

    Args:
        frame: BGR or grayscale image
        template_name: File name under the template directory
        threshold: Minimum TM_CCOEFF_NORMED score
        template_dir: Override the template directory
        label: Name stored on the result (defaults to the template name)

    Returns:
        TemplateMatch if the best score reaches threshold, else None
    """
    return match_template_multiscale(
        frame,
        template_name,
        scales=DEFAULT_SCALES,
        threshold_start=threshold,
        threshold_min=threshold,
        template_dir=template_dir,
        label=label,
    )


def match_template_multiscale(
    frame: np.ndarray,
    template_name: str,
    scales: Sequence[float] = DEFAULT_SCALES,
    threshold_start: float = 0.9,
    threshold_min: float = DEFAULT_THRESHOLD,
    threshold_step: float = 0.05,
    template_dir: Optional[Union[str, Path]] = None,
    label: Optional[str] = None,
) -> Optional[TemplateMatch]:
    """
    Match a template at several scales with a sliding acceptance threshold.

    Args:
        frame: BGR or grayscale image
        template_name: File name under the template directory
        scales: Template scale factors, in order of preference
        threshold_start: Strictest threshold tried first
        threshold_min: Loosest threshold accepted
        threshold_step: Decrement between thresholds
        template_dir: Override the template directory
        label: Name stored on the result (defaults to the template name)

    Returns:
        TemplateMatch for the accepted scale, or None if no scale reaches threshold_min

    Raises:
        TemplateNotFoundError: if the template cannot be loaded
    """
    candidates = score_scales(frame, template_name, scales, template_dir, label)
    if not candidates:
        return None

    for threshold in sliding_thresholds(threshold_start, threshold_min, threshold_step):
        for candidate in candidates:
            if candidate.score >= threshold:
                return candidate

    return None


def score_scales(
    frame: np.ndarray,
    template_name: str,
    scales: Sequence[float] = DEFAULT_SCALES,
    template_dir: Optional[Union[str, Path]] = None,
    label: Optional[str] = None,
) -> List[TemplateMatch]:
    """
    Best location and score for each usable scale, in the order given.

    Scales where the resized template no longer fits in the frame, or shrinks
    below MIN_TEMPLATE_SIZE, are skipped.
    """
    template = load_template(template_name, template_dir)

    if frame is None or frame.size == 0:
        return []

    frame = _to_bgr(frame)
    frame_h, frame_w = frame.shape[:2]

    candidates: List[TemplateMatch] = []
    for scale in scales:
        resized = _resize(template, scale)
        th, tw = resized.shape[:2]

        if th > frame_h or tw > frame_w or th < MIN_TEMPLATE_SIZE or tw < MIN_TEMPLATE_SIZE:
            continue

        score, top_left = _best_match(frame, resized)
        candidates.append(TemplateMatch(
            label=label or template_name,
            score=score,
            scale=scale,
            top_left=top_left,
            size=(tw, th),
        ))

    return candidates


def best_score(
    frame: np.ndarray,
    template_name: str,
    scales: Sequence[float] = DEFAULT_SCALES,
    template_dir: Optional[Union[str, Path]] = None,
) -> float:
    """Highest score over all scales regardless of threshold (for logging)."""
    candidates = score_scales(frame, template_name, scales, template_dir)
    if not candidates:
        return -1.0
    return max(c.score for c in candidates)


def clear_cache():
    """Clear template cache. Useful for testing or reloading."""
    _templates.clear()

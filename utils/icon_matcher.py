"""
Base class for single-icon detectors.

Each clickable element of the game UI gets a small subclass that fixes its label,
template file and default threshold. The icon can appear anywhere in the window,
so the whole frame is searched at every configured scale.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence, Tuple, Union

import numpy as np

from utils.template_matcher import (
    TemplateMatch,
    best_score,
    load_template,
    match_template_multiscale,
)


class IconMatcher:
    """Multi-scale presence detector for one template."""

    LABEL = "Icon"
    TEMPLATE_NAME = ""
    DEFAULT_THRESHOLD = 0.75

    def __init__(
        self,
        threshold: float = None,
        scales: Sequence[float] = (1.0,),
        threshold_start: float = None,
        threshold_step: float = 0.05,
        template_dir: Optional[Union[str, Path]] = None,
        template_name: str = None,
        label: str = None,
    ) -> None:
        """
        Args:
            threshold: Minimum accepted score (default DEFAULT_THRESHOLD)
            scales: Template scales, preferred first
            threshold_start: Strictest threshold tried first (default: threshold)
            threshold_step: Sliding threshold decrement
            template_dir: Override the template directory
            template_name: Override the template file name
            label: Override the label used in logs and debug files
        """
        self.threshold = threshold if threshold is not None else self.DEFAULT_THRESHOLD
        self.threshold_start = max(
            threshold_start if threshold_start is not None else self.threshold,
            self.threshold,
        )
        self.threshold_step = threshold_step
        self.scales = tuple(scales)
        self.template_dir = template_dir
        self.template_name = template_name or self.TEMPLATE_NAME
        self.label = label or self.LABEL

    def load(self) -> np.ndarray:
        """Load the template now so a missing file fails at startup."""
        return load_template(self.template_name, self.template_dir)

    def find(self, frame: np.ndarray) -> Optional[TemplateMatch]:
        """
        Search the whole frame for the icon.

        Returns:
            TemplateMatch in frame pixels, or None
        """
        if frame is None or frame.size == 0:
            return None

        return match_template_multiscale(
            frame,
            self.template_name,
            scales=self.scales,
            threshold_start=self.threshold_start,
            threshold_min=self.threshold,
            threshold_step=self.threshold_step,
            template_dir=self.template_dir,
            label=self.label,
        )

    def is_present(self, frame: np.ndarray) -> Tuple[bool, float]:
        """
        Returns:
            Tuple of (is_present, score). Score is the best over all scales.
        """
        if frame is None or frame.size == 0:
            return False, -1.0

        match = self.find(frame)
        if match is not None:
            return True, match.score
        return False, best_score(frame, self.template_name, self.scales, self.template_dir)

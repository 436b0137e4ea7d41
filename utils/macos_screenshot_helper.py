"""
macOS Screenshot Helper - Window region capture with screencapture.

Captures a global rectangle with `screencapture -x -R` (no shutter sound) and loads
it as a BGR numpy array for template matching. On Retina displays the frame is
twice the logical size of the region; utils.geometry handles the translation back.
"""
from __future__ import annotations

import logging
import os
import subprocess
import tempfile
from pathlib import Path
from typing import Union

import cv2
import numpy as np

from utils.geometry import Rect

logger = logging.getLogger("macos_screenshot_helper")


class CaptureError(RuntimeError):
    """screencapture failed or produced an unreadable file."""


class MacScreenshotHelper:
    """Screenshot capture for a window region."""

    SCREENCAPTURE = "screencapture"

    def __init__(self, output_path: Union[str, Path] = "/tmp/screenshot.png"):
        """Initialize the screenshot helper.

        Args:
            output_path: Naming pattern for scratch files. Each capture writes a fresh
                "<stem>_<random><suffix>" file in the same directory and removes it
                once loaded, so a capture that finishes late never overwrites a
                newer one
        """
        self.output_path = Path(output_path)

    def _scratch_file(self) -> str:
        """Create an empty, uniquely named scratch file for one capture."""
        directory = self.output_path.parent
        directory.mkdir(parents=True, exist_ok=True)
        fd, path = tempfile.mkstemp(
            prefix=f"{self.output_path.stem}_",
            suffix=self.output_path.suffix or ".png",
            dir=str(directory),
        )
        os.close(fd)
        return path

    def capture_region(self, rect: Rect) -> np.ndarray:
        """Capture a global region.

        Args:
            rect: Region in global logical points

        Returns:
            np.ndarray: BGR image

        Raises:
            CaptureError: invalid region, failed command, or empty image
        """
        if not rect.is_valid():
            logger.error(f"Invalid dimensions: width={rect.width}, height={rect.height}")
            raise CaptureError("invalid dimensions")

        path = self._scratch_file()
        try:
            cmd = [self.SCREENCAPTURE, "-x", "-R", rect.as_region(), path]
            try:
                result = subprocess.run(cmd, capture_output=True, text=True)
            except OSError as e:
                raise CaptureError(f"Error capturing screen: {e}")
            if result.returncode != 0:
                raise CaptureError(f"Error capturing screen: {result.stderr.strip() or result.returncode}")

            img = cv2.imread(path, cv2.IMREAD_COLOR)
        finally:
            try:
                os.remove(path)
            except OSError:
                logger.debug(f"Scratch file already gone: {path}")

        if img is None or img.size == 0:
            raise CaptureError("empty screenshot")

        logger.debug(f"Captured {rect} -> {img.shape[1]}x{img.shape[0]}")
        return img

    def save_screenshot(self, rect: Rect, output_path: Union[str, Path]) -> str:
        """Capture a region and save it.

        Args:
            rect: Region to capture
            output_path: Path to save the screenshot
        """
        img = self.capture_region(rect)
        cv2.imwrite(str(output_path), img)
        return str(output_path)

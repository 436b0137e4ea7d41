"""
Unit tests for utils/geometry.py.

Covers Rect helpers and the frame -> global coordinate translation,
including Retina (2x) captures and windows on secondary displays.
"""
from __future__ import annotations

import pytest

from utils.geometry import Rect, screenshot_to_global


class TestRect:
    """Test Rect helpers."""

    def test_right_and_bottom(self):
        rect = Rect(10, 20, 300, 200)
        assert rect.right == 310
        assert rect.bottom == 220

    @pytest.mark.parametrize("width,height,expected", [
        (800, 600, True),
        (0, 600, False),
        (800, 0, False),
        (-5, 600, False),
    ])
    def test_is_valid(self, width, height, expected):
        assert Rect(0, 0, width, height).is_valid() is expected

    def test_contains_excludes_far_edge(self):
        rect = Rect(0, 0, 100, 100)
        assert rect.contains(0, 0)
        assert rect.contains(99, 99)
        assert not rect.contains(100, 50)

    def test_union_with_display_to_the_left(self):
        main = Rect(0, 0, 1920, 1080)
        left = Rect(-1280, 200, 1280, 1024)

        bounds = main.union(left)

        assert bounds == Rect(-1280, 0, 3200, 1224)

    def test_clamp_point_inside_unchanged(self):
        assert Rect(0, 0, 1920, 1080).clamp_point(500, 400) == (500, 400)

    def test_clamp_point_outside(self):
        rect = Rect(-1280, 0, 3200, 1080)
        assert rect.clamp_point(5000, -20) == (1919, 0)
        assert rect.clamp_point(-2000, 2000) == (-1280, 1079)

    def test_as_region(self):
        assert Rect(10, 20, 300, 200).as_region() == "10,20,300,200"


class TestScreenshotToGlobal:
    """Test frame pixel -> global point translation."""

    def test_non_retina_adds_window_origin(self):
        window = Rect(100, 50, 800, 600)
        assert screenshot_to_global((400, 300), (800, 600), window) == (500, 350)

    def test_retina_capture_halves_coordinates(self):
        window = Rect(100, 50, 800, 600)
        assert screenshot_to_global((400, 300), (1600, 1200), window) == (300, 200)

    def test_window_on_secondary_display(self):
        window = Rect(-1200, 100, 800, 600)
        assert screenshot_to_global((800, 600), (1600, 1200), window) == (-800, 400)

    def test_truncates_fractional_points(self):
        window = Rect(0, 0, 100, 100)
        assert screenshot_to_global((3, 3), (200, 200), window) == (1, 1)

    def test_invalid_frame_size_raises(self):
        with pytest.raises(ValueError):
            screenshot_to_global((1, 1), (0, 600), Rect(0, 0, 800, 600))

"""
Unit tests for utils/icon_matcher.py and the concrete icon matchers.
"""
from __future__ import annotations

from unittest.mock import patch

import numpy as np
import pytest

from utils.close_button_matcher import CloseButtonMatcher
from utils.handshake_icon_matcher import HandshakeIconMatcher
from utils.icon_matcher import IconMatcher
from utils.template_matcher import TemplateMatch, TemplateNotFoundError


class TestMatcherDefaults:
    """Test class-level template and threshold defaults."""

    def test_handshake_defaults(self):
        matcher = HandshakeIconMatcher()
        assert matcher.label == "Handshake"
        assert matcher.template_name == "handshake_icon.png"
        assert matcher.threshold == 0.75

    def test_close_defaults(self):
        matcher = CloseButtonMatcher()
        assert matcher.label == "Close"
        assert matcher.template_name == "close_x_icon.png"
        assert matcher.threshold == 0.80

    def test_threshold_start_never_below_threshold(self):
        matcher = HandshakeIconMatcher(threshold=0.8, threshold_start=0.7)
        assert matcher.threshold_start == 0.8

    def test_overrides(self):
        matcher = IconMatcher(threshold=0.6, template_name="x.png", label="X", scales=[1.0, 0.5])
        assert (matcher.threshold, matcher.template_name, matcher.label) == (0.6, "x.png", "X")
        assert matcher.scales == (1.0, 0.5)


class TestFind:
    """Test find() against real templates."""

    def test_finds_icon_anywhere(self, template_dir, write_template, noise_frame):
        write_template("handshake_icon.png", noise_frame[200:240, 300:350])
        matcher = HandshakeIconMatcher(template_dir=template_dir, scales=(1.0, 0.9, 1.1))

        match = matcher.find(noise_frame)

        assert match is not None
        assert match.label == "Handshake"
        assert match.top_left == (300, 200)
        assert match.center == (325, 220)

    def test_passes_sliding_threshold_settings(self):
        matcher = CloseButtonMatcher(threshold=0.8, threshold_start=0.95, threshold_step=0.01,
                                     scales=(1.0, 1.1), template_dir="/tmp/images")
        frame = np.zeros((100, 100, 3), dtype=np.uint8)
        with patch('utils.icon_matcher.match_template_multiscale', return_value=None) as mock_match:
            assert matcher.find(frame) is None

            mock_match.assert_called_once_with(
                frame,
                "close_x_icon.png",
                scales=(1.0, 1.1),
                threshold_start=0.95,
                threshold_min=0.8,
                threshold_step=0.01,
                template_dir="/tmp/images",
                label="Close",
            )

    @pytest.mark.parametrize("frame", [None, np.zeros((0, 0, 3), dtype=np.uint8)])
    def test_empty_frame(self, frame):
        assert HandshakeIconMatcher().find(frame) is None
        assert HandshakeIconMatcher().is_present(frame) == (False, -1.0)


class TestIsPresent:
    """Test is_present()."""

    def test_present_returns_match_score(self):
        frame = np.zeros((100, 100, 3), dtype=np.uint8)
        match = TemplateMatch("Handshake", 0.91, 1.0, (0, 0), (10, 10))
        with patch.object(HandshakeIconMatcher, 'find', return_value=match):
            assert HandshakeIconMatcher().is_present(frame) == (True, 0.91)

    def test_absent_returns_best_score(self):
        frame = np.zeros((100, 100, 3), dtype=np.uint8)
        with patch.object(HandshakeIconMatcher, 'find', return_value=None), \
             patch('utils.icon_matcher.best_score', return_value=0.42):
            assert HandshakeIconMatcher().is_present(frame) == (False, 0.42)


class TestLoad:
    """Test eager template loading."""

    def test_missing_template(self, template_dir):
        with pytest.raises(TemplateNotFoundError):
            CloseButtonMatcher(template_dir=template_dir).load()

    def test_existing_template(self, template_dir, write_template, noise_frame):
        write_template("close_x_icon.png", noise_frame[0:20, 0:20])
        template = CloseButtonMatcher(template_dir=template_dir).load()
        assert template.shape == (20, 20, 3)

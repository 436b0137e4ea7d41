"""
Close ("X") button matcher for popups that block the city view.

Event banners and reward popups cover the handshake icon until dismissed.
"""
from __future__ import annotations

from utils.icon_matcher import IconMatcher


class CloseButtonMatcher(IconMatcher):
    """Presence detector for the dismiss X in the corner of popups."""

    LABEL = "Close"
    TEMPLATE_NAME = "close_x_icon.png"
    # Thin glyph, correlates loosely with other UI strokes
    DEFAULT_THRESHOLD = 0.80

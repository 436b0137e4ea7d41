"""
Handshake icon matcher for the alliance "help" button.

The icon floats over the city view whenever an ally asks for help. Clicking it
sends help to every open request.

Usage:
    from utils.handshake_icon_matcher import HandshakeIconMatcher

    matcher = HandshakeIconMatcher()
    match = matcher.find(frame)
    if match:
        print(match.center)
"""
from __future__ import annotations

from utils.icon_matcher import IconMatcher


class HandshakeIconMatcher(IconMatcher):
    """
    Presence detector for the handshake icon, searched anywhere in the window.

    Template: images/handshake_icon.png, cut from a non-Retina capture.
    """

    LABEL = "Handshake"
    TEMPLATE_NAME = "handshake_icon.png"
    DEFAULT_THRESHOLD = 0.75

"""
Handshake icon flow - sends help to allies by clicking the handshake icon.

Triggered when the daemon detects the handshake icon. The point is already in
global desktop coordinates and clamped to the displays.
"""
import logging

logger = logging.getLogger("handshake_flow")


def handshake_flow(mouse, point):
    """
    Handle handshake icon detection.

    Currently just clicks the icon. The game sends help to every open request
    in one go, so there is no follow-up dialog.

    Args:
        mouse: MouseHelper instance
        point: (x, y) global click position
    """
    x, y = point
    logger.info(f"[FLOW] Handshake: clicking ({x}, {y})")
    mouse.click(x, y)

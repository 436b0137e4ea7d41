"""
Close dialog flow - dismisses a popup by clicking its X button.
"""
import logging

logger = logging.getLogger("close_dialog_flow")


def close_dialog_flow(mouse, point):
    """
    Click the X of the popup covering the city view.

    Args:
        mouse: MouseHelper instance
        point: (x, y) global click position
    """
    x, y = point
    logger.info(f"[FLOW] Close dialog: clicking ({x}, {y})")
    mouse.click(x, y)

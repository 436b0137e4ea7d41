"""
Mouse Helper - Synthesized clicks at global desktop coordinates.

Two backends:
- cliclick: `cliclick c:x,y` (brew install cliclick)
- quartz: CoreGraphics events posted to the HID event tap through pyobjc
  (pip install 'wos-helper[quartz]')

Both take global logical points, the same space System Events reports window
positions in.

Usage:
    from utils.mouse_helper import MouseHelper
    mouse = MouseHelper()
    mouse.click(640, 412)
"""
from __future__ import annotations

import logging
import subprocess
from typing import Callable, Optional

logger = logging.getLogger("mouse_helper")

BACKENDS = ("cliclick", "quartz")


class ClickError(RuntimeError):
    """The click could not be delivered."""


class MouseHelper:
    """Click and move the pointer with the selected backend."""

    def __init__(self, backend: str = "cliclick", cliclick_path: str = "cliclick",
                 on_action: Optional[Callable[[str, int, int], None]] = None):
        """
        Args:
            backend: "cliclick" or "quartz"
            cliclick_path: cliclick executable
            on_action: Optional callback(action, x, y) invoked after each successful action
        """
        if backend not in BACKENDS:
            raise ValueError(f"Unknown click backend: {backend} (expected one of {BACKENDS})")
        self.backend = backend
        self.cliclick_path = cliclick_path
        self._on_action = on_action

    def _run_cliclick(self, command: str) -> None:
        cmd = [self.cliclick_path, command]
        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except OSError as e:
            raise ClickError(f"Error performing click: {e}")
        if result.returncode != 0:
            raise ClickError(f"Error performing click: {result.stderr.strip() or result.returncode}")

    @staticmethod
    def _quartz():
        try:
            import Quartz
        except ImportError:
            raise ClickError(
                "Quartz backend requires pyobjc-framework-Quartz "
                "(pip install 'wos-helper[quartz]')"
            )
        return Quartz

    def _post_quartz_event(self, Quartz, event_type, x: int, y: int) -> None:
        event = Quartz.CGEventCreateMouseEvent(
            None, event_type, (x, y), Quartz.kCGMouseButtonLeft
        )
        Quartz.CGEventPost(Quartz.kCGHIDEventTap, event)

    def move(self, x: int, y: int) -> None:
        """Move the pointer without clicking."""
        if self.backend == "cliclick":
            self._run_cliclick(f"m:{x},{y}")
        else:
            Quartz = self._quartz()
            self._post_quartz_event(Quartz, Quartz.kCGEventMouseMoved, x, y)

        if self._on_action:
            self._on_action("move", x, y)

    def click(self, x: int, y: int) -> None:
        """
        Left-click at a global point.

        Raises:
            ClickError: if the backend fails
        """
        if self.backend == "cliclick":
            self._run_cliclick(f"c:{x},{y}")
        else:
            Quartz = self._quartz()
            # Move first so the game registers hover before the press
            self._post_quartz_event(Quartz, Quartz.kCGEventMouseMoved, x, y)
            self._post_quartz_event(Quartz, Quartz.kCGEventLeftMouseDown, x, y)
            self._post_quartz_event(Quartz, Quartz.kCGEventLeftMouseUp, x, y)

        logger.info(f"Click performed at position: ({x}, {y})")
        if self._on_action:
            self._on_action("click", x, y)

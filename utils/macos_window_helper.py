#!/usr/bin/env python3
"""
macOS Window Helper - Game process detection and window discovery via AppleScript.

All queries go through System Events with osascript. The game sometimes hides its
window while idle, so locate_window() activates the app and polls until a window
shows up.

Usage:
    python macos_window_helper.py check
    python macos_window_helper.py locate

    # From Python code:
    from utils.macos_window_helper import MacWindowHelper
    helper = MacWindowHelper("WhiteoutSurvival")
    if helper.is_app_running():
        rect = helper.locate_window()
"""
from __future__ import annotations

import argparse
import logging
import subprocess
import sys
import time
from pathlib import Path
from typing import Optional, Tuple

if __name__ == "__main__":
    sys.path.insert(0, str(Path(__file__).parent.parent))

from utils.geometry import Rect

logger = logging.getLogger("macos_window_helper")


class WindowError(RuntimeError):
    """Base class for window discovery failures."""


class AppNotRunningError(WindowError):
    """The game process does not exist."""


class WindowNotAvailableError(WindowError):
    """The process exists but has no window."""


class WindowInfoError(WindowError):
    """osascript failed or returned something unparseable."""


class WindowTimeoutError(WindowError):
    """No window appeared before the polling timeout."""


class MacWindowHelper:
    """
    Process and window queries for one application.

    Features:
    - Process presence check through System Events
    - Focus with un-minimize so screenshots see the real window
    - Window rectangle lookup with polling for apps that hide their window
    """

    OSASCRIPT = "osascript"
    NOT_FOUND = "NOTFOUND"
    NO_WINDOW = "NO_WINDOW"

    def __init__(self, app_name: str):
        """
        Args:
            app_name: Process name as shown by System Events (e.g. "WhiteoutSurvival")
        """
        self.app_name = app_name

    @staticmethod
    def quote_applescript(text: str) -> str:
        """Escape text for use inside an AppleScript string literal."""
        return text.replace("\\", "\\\\").replace('"', '\\"')

    @property
    def script_name(self) -> str:
        """App name as it is embedded in AppleScript source."""
        return self.quote_applescript(self.app_name)

    def _run_osascript(self, script: str) -> Tuple[bool, str, str]:
        """
        Execute an AppleScript snippet.

        Returns:
            Tuple of (success, stdout, stderr)
        """
        try:
            result = subprocess.run(
                [self.OSASCRIPT, "-e", script],
                capture_output=True,
                text=True,
            )
        except OSError as e:
            return False, "", str(e)
        return result.returncode == 0, result.stdout.strip(), result.stderr.strip()

    def is_app_running(self) -> bool:
        """Check whether a process with this name exists."""
        script = f'''
            tell application "System Events"
                count (every process whose name is "{self.script_name}")
            end tell
        '''
        success, stdout, stderr = self._run_osascript(script)
        if not success:
            logger.error(f"Error detecting application: {stderr}")
            return False

        running = stdout not in ("", "0")
        logger.debug(f"{self.app_name} is {'running' if running else 'not running'}")
        return running

    def get_window_count(self) -> Optional[int]:
        """
        Count the app's windows.

        Returns:
            Window count, or None if the process is not found or the output is unreadable
        """
        script = f'''
            tell application "System Events"
                if exists (processes whose name is "{self.script_name}") then
                    tell process "{self.script_name}" to count windows
                else
                    return "{self.NOT_FOUND}"
                end if
            end tell
        '''
        success, stdout, _ = self._run_osascript(script)
        if not success or stdout == self.NOT_FOUND:
            return None
        try:
            return int(stdout)
        except ValueError:
            return None

    def activate_app(self) -> bool:
        """Ask the app to come forward, which also makes it open a window."""
        success, _, stderr = self._run_osascript(f'tell application "{self.script_name}" to activate')
        if not success:
            logger.debug(f"Activate {self.app_name} failed: {stderr}")
        return success

    def focus_app(self) -> bool:
        """
        Bring the app to the front and restore window 1 if it is minimized.

        Errors are logged, not raised: a failed focus still lets the capture try.
        """
        script = f'''
            tell application "{self.script_name}" to activate
            tell application "System Events"
                tell process "{self.script_name}"
                    try
                        if miniaturized of window 1 is true then
                            set miniaturized of window 1 to false
                        end if
                    end try
                    set frontmost to true
                end tell
            end tell
        '''
        success, _, stderr = self._run_osascript(script)
        if not success:
            logger.error(f"Error focusing application {self.app_name}: {stderr}")
        return success

    def try_get_window_rect(self) -> Rect:
        """
        Query the position and size of the app's first window once.

        Raises:
            AppNotRunningError: process not found
            WindowNotAvailableError: process has no window
            WindowInfoError: osascript failed or output could not be parsed
        """
        script = f'''
            tell application "System Events"
                if exists (processes whose name is "{self.script_name}") then
                    tell process "{self.script_name}"
                        set winCount to count of windows
                        if winCount = 0 then
                            return "{self.NO_WINDOW}"
                        else
                            set theWindow to first window
                            set pos to position of theWindow
                            set sz to size of theWindow
                            return ((item 1 of pos) as text) & "," & ((item 2 of pos) as text) & "," & ((item 1 of sz) as text) & "," & ((item 2 of sz) as text)
                        end if
                    end tell
                else
                    return "{self.NOT_FOUND}"
                end if
            end tell
        '''
        success, stdout, stderr = self._run_osascript(script)
        if not success:
            raise WindowInfoError(f"AppleScript error: {stderr}, output: {stdout}")
        if stdout == self.NOT_FOUND:
            raise AppNotRunningError("application not running")
        if stdout == self.NO_WINDOW:
            raise WindowNotAvailableError("window not available")
        return self.parse_window_info(stdout)

    @staticmethod
    def parse_window_info(output: str) -> Rect:
        """Parse 'x,y,w,h' as returned by the window query."""
        parts = output.split(",")
        if len(parts) != 4:
            raise WindowInfoError(f"unexpected window info: {output}")
        try:
            x, y, w, h = (int(float(p.strip())) for p in parts)
        except ValueError:
            raise WindowInfoError(f"error parsing window info: {output}")
        return Rect(x, y, w, h)

    def locate_window(self, timeout: float = 3.0, poll_interval: float = 0.5) -> Rect:
        """
        Find the app's window, activating the app if it currently has none.

        Polls every poll_interval seconds until a window is reported or the timeout
        elapses.

        Returns:
            Rect of the window in global logical points

        Raises:
            AppNotRunningError: process not found (no polling)
            WindowTimeoutError: no window appeared within the timeout
        """
        count = self.get_window_count()
        if count == 0:
            logger.info(f"No window available; activating {self.app_name}...")
            self.activate_app()

        deadline = time.monotonic() + timeout
        while True:
            time.sleep(poll_interval)
            try:
                rect = self.try_get_window_rect()
                logger.info(f"Found {self.app_name} window: {rect}")
                return rect
            except AppNotRunningError:
                raise
            except WindowError as e:
                logger.debug(f"Window not ready: {e}")

            if time.monotonic() >= deadline:
                raise WindowTimeoutError("timeout waiting for window to appear")


def main():
    parser = argparse.ArgumentParser(description="macOS window discovery helper")
    parser.add_argument('command', choices=['check', 'locate'])
    parser.add_argument('--app', default="WhiteoutSurvival", help="Process name")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG, format='%(asctime)s [%(levelname)s] %(message)s')
    helper = MacWindowHelper(args.app)

    if args.command == 'check':
        print(f"{args.app} running: {helper.is_app_running()}")
        print(f"Window count: {helper.get_window_count()}")
    else:
        try:
            print(helper.locate_window())
        except WindowError as e:
            print(f"ERROR: {e}")
            sys.exit(1)


if __name__ == "__main__":
    main()

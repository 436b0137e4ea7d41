#!/usr/bin/env python3
"""
Whiteout Survival Helper Daemon

Runs continuously: checks that the game is running, finds its window, screenshots
it and clicks every configured icon it finds. Each iteration is independent; any
failure is logged and the next iteration tries again.

Currently clicks:
- Handshake icon (send alliance help)
- Close X (dismiss popups covering the city view)

The capture runs in a worker thread that hands exactly one frame (or None on
failure) to the matcher through a single-slot queue.

Press Ctrl+C (or send SIGTERM) to stop.

Usage:
    python helper_daemon.py [--delay SECONDS] [--random] [--iterations N] [--debug]
"""

import sys
import time
import queue
import random
import signal
import argparse
import threading
import logging
from pathlib import Path
from datetime import datetime

sys.path.insert(0, str(Path(__file__).parent.parent))

from utils.close_button_matcher import CloseButtonMatcher
from utils.debug_screenshot import annotate_match, save_debug_screenshot
from utils.display_bounds import DisplayBoundsError, clamp_to_displays, get_union_display_bounds
from utils.geometry import screenshot_to_global
from utils.handshake_icon_matcher import HandshakeIconMatcher
from utils.icon_matcher import IconMatcher
from utils.macos_screenshot_helper import CaptureError, MacScreenshotHelper
from utils.macos_window_helper import AppNotRunningError, MacWindowHelper, WindowError
from utils.mouse_helper import BACKENDS, ClickError, MouseHelper
from utils.template_matcher import TemplateNotFoundError

from scripts.flows import FLOWS

# Import configurable parameters
from config import (
    APP_NAME,
    ITERATION_DELAY,
    RANDOM_DELAY,
    ITERATIONS,
    FOCUS_SETTLE_DELAY,
    WINDOW_POLL_INTERVAL,
    WINDOW_POLL_TIMEOUT,
    SCREENSHOT_PATH,
    TEMPLATE_DIR,
    MATCH_SCALES,
    MATCH_THRESHOLD_START,
    MATCH_THRESHOLD_MIN,
    MATCH_THRESHOLD_STEP,
    CLICK_TARGETS,
    CLICK_BACKEND,
    CLICLICK_PATH,
    LOG_DIR,
    DEBUG_DIR,
)

# Matcher class per click target name; unknown names get a plain IconMatcher
MATCHER_CLASSES = {
    'Handshake': HandshakeIconMatcher,
    'Close': CloseButtonMatcher,
}


class HelperDaemon:
    """
    Daemon that polls the game window and clicks detected icons.
    """

    CAPTURE_TIMEOUT = 10.0  # Seconds to wait for the capture worker

    def __init__(self, delay: int = None, random_delay: bool = None, iterations: int = None,
                 debug: bool = False, app_name: str = None, backend: str = None,
                 window_helper=None, screenshot_helper=None, mouse=None, targets=None):
        self.delay = delay if delay is not None else ITERATION_DELAY
        self.random_delay = random_delay if random_delay is not None else RANDOM_DELAY
        self.iterations = iterations if iterations is not None else ITERATIONS
        self.debug = debug
        self.app_name = app_name or APP_NAME

        self.window_helper = window_helper or MacWindowHelper(self.app_name)
        self.screenshot_helper = screenshot_helper or MacScreenshotHelper(SCREENSHOT_PATH)
        self.clicks_performed = 0
        self.mouse = mouse or MouseHelper(
            backend=backend or CLICK_BACKEND,
            cliclick_path=CLICLICK_PATH,
            on_action=self._record_action,
        )

        # List of (name, matcher, flow)
        self.targets = targets if targets is not None else self._build_targets(CLICK_TARGETS)

        self.stop_event = threading.Event()
        self.iterations_run = 0
        self.logger = logging.getLogger('HelperDaemon')

    @staticmethod
    def _build_targets(click_targets):
        targets = []
        for entry in click_targets:
            name = entry['name']
            flow = FLOWS.get(name)
            if flow is None:
                raise ValueError(f"No flow registered for click target: {name}")

            matcher_cls = MATCHER_CLASSES.get(name, IconMatcher)
            matcher = matcher_cls(
                threshold=entry.get('threshold', MATCH_THRESHOLD_MIN),
                scales=MATCH_SCALES,
                threshold_start=MATCH_THRESHOLD_START,
                threshold_step=MATCH_THRESHOLD_STEP,
                template_dir=TEMPLATE_DIR,
                template_name=entry['template'],
                label=name,
            )
            targets.append((name, matcher, flow))
        return targets

    def setup_logging(self, log_dir: Path = None):
        """Configure root logging: timestamped file, current_helper.log, and stdout."""
        log_dir = Path(log_dir or LOG_DIR)
        log_dir.mkdir(parents=True, exist_ok=True)
        self.log_file = log_dir / f"helper_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"
        self.current_log_link = log_dir / 'current_helper.log'

        log_level = logging.DEBUG if self.debug else logging.INFO
        logging.basicConfig(
            level=log_level,
            format='%(asctime)s [%(levelname)s] %(message)s',
            handlers=[
                logging.FileHandler(self.log_file),
                logging.FileHandler(self.current_log_link, mode='w'),
                logging.StreamHandler(sys.stdout)
            ]
        )

    def install_signal_handlers(self):
        signal.signal(signal.SIGINT, self._handle_signal)
        signal.signal(signal.SIGTERM, self._handle_signal)

    def _handle_signal(self, signum, frame):
        self.logger.info("Shutting down...")
        self.stop()

    def stop(self):
        """Request a graceful stop; the current iteration finishes first."""
        self.stop_event.set()

    def _record_action(self, action: str, x: int, y: int):
        """Mouse callback: count delivered clicks."""
        if action == "click":
            self.clicks_performed += 1
            self.logger.debug(f"Click {self.clicks_performed} delivered at ({x}, {y})")

    def load_templates(self):
        """
        Load every template up front.
        Raises TemplateNotFoundError if any template is missing.
        """
        for name, matcher, _ in self.targets:
            matcher.load()
            self.logger.info(f"Template image loaded successfully for {name}: {matcher.template_name}")

    def next_delay(self) -> int:
        """Seconds to wait before the next iteration."""
        if not self.random_delay:
            return self.delay
        if self.delay <= 0:
            return 0
        return random.randrange(self.delay)

    def _capture_worker(self, window, frames: queue.Queue):
        """Producer: capture the window and hand over exactly one frame (None on failure)."""
        frame = None
        try:
            frame = self.screenshot_helper.capture_region(window)
        except CaptureError as e:
            self.logger.error(f"Error capturing screen: {e}")
        except Exception:
            self.logger.exception("Unexpected error capturing screen")
        finally:
            frames.put(frame)

    def capture_frame(self, window):
        """Run the capture worker and wait for its frame."""
        frames = queue.Queue(maxsize=1)
        worker = threading.Thread(
            target=self._capture_worker,
            args=(window, frames),
            name="capture",
            daemon=True,
        )
        worker.start()
        try:
            frame = frames.get(timeout=self.CAPTURE_TIMEOUT)
        except queue.Empty:
            self.logger.error("Timed out waiting for screenshot")
            return None
        worker.join()
        return frame

    def _display_bounds(self):
        try:
            return get_union_display_bounds()
        except DisplayBoundsError as e:
            self.logger.warning(f"Display bounds unavailable, clicks not clamped: {e}")
            return None

    def search_and_click(self, frame, window) -> list:
        """
        Consumer: match every click target in the frame and run its flow.

        Returns:
            Names of the targets that were clicked
        """
        frame_size = (frame.shape[1], frame.shape[0])
        bounds = self._display_bounds()
        clicked = []

        for name, matcher, flow in self.targets:
            match = matcher.find(frame)
            if match is None:
                self.logger.debug(f"{name} not present")
                continue

            point = screenshot_to_global(match.center, frame_size, window)
            if bounds is not None:
                point = clamp_to_displays(point[0], point[1], bounds)

            self.logger.info(
                f"{name} detected (score={match.score:.3f}, scale={match.scale}) "
                f"at frame {match.center} -> click {point}"
            )

            if self.debug:
                try:
                    path = save_debug_screenshot(annotate_match(frame, match), name, "match", base_dir=DEBUG_DIR)
                    self.logger.info(f"Debug screenshot saved: {path}")
                except OSError as e:
                    self.logger.error(str(e))

            try:
                flow(self.mouse, point)
                clicked.append(name)
            except ClickError as e:
                self.logger.error(f"{name}: {e}")

        return clicked

    def run_iteration(self, iteration: int) -> list:
        """
        One poll: locate, focus, capture, match, click.

        Returns:
            Names of the targets that were clicked
        """
        self.logger.info(f"Starting iteration {iteration}")

        if not self.window_helper.is_app_running():
            self.logger.info("Application not running")
            return []

        try:
            window = self.window_helper.locate_window(
                timeout=WINDOW_POLL_TIMEOUT,
                poll_interval=WINDOW_POLL_INTERVAL,
            )
        except AppNotRunningError:
            self.logger.info("Application not running")
            return []
        except WindowError as e:
            self.logger.error(f"Error locating window: {e}")
            return []

        self.window_helper.focus_app()
        time.sleep(FOCUS_SETTLE_DELAY)

        frame = self.capture_frame(window)
        if frame is None:
            self.logger.warning("No valid screenshot received")
            return []

        return self.search_and_click(frame, window)

    def run(self) -> int:
        """
        Main loop.

        Returns:
            Number of iterations run
        """
        self.logger.info("Starting Whiteout Survival helper")
        self.load_templates()

        while self.iterations == 0 or self.iterations_run < self.iterations:
            if self.stop_event.is_set():
                break

            self.iterations_run += 1
            iteration = self.iterations_run

            try:
                self.run_iteration(iteration)
            except Exception as e:
                self.logger.exception(f"[{iteration}] Unexpected error: {e}")

            if self.iterations > 0:
                self.logger.info(f"Completed iteration {iteration} of {self.iterations}")
            else:
                self.logger.info(f"Completed iteration {iteration}")

            if self.iterations > 0 and iteration >= self.iterations:
                break

            delay = self.next_delay()
            self.logger.info(f"Waiting for {delay}s before next iteration")
            if self.stop_event.wait(delay):
                break

        if not self.stop_event.is_set():
            self.logger.info(f"Completed all {self.iterations_run} iterations. Exiting.")
        self.logger.info(f"Clicks performed: {self.clicks_performed}")
        return self.iterations_run


def build_parser():
    parser = argparse.ArgumentParser(
        description="Whiteout Survival Helper - Automates interactions with the game."
    )
    parser.add_argument(
        '--delay',
        type=int,
        default=ITERATION_DELAY,
        help=f"Delay between iterations in seconds (default: {ITERATION_DELAY})"
    )
    parser.add_argument(
        '--random',
        action='store_true',
        default=RANDOM_DELAY,
        help="Use random delay between 0 and specified delay"
    )
    parser.add_argument(
        '--iterations',
        type=int,
        default=ITERATIONS,
        help="Number of iterations to run (0 for infinite)"
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help="Enable debug mode to save annotated screenshots"
    )
    parser.add_argument(
        '--app',
        default=APP_NAME,
        help=f"Process name of the game (default: {APP_NAME})"
    )
    parser.add_argument(
        '--backend',
        choices=BACKENDS,
        default=CLICK_BACKEND,
        help=f"Click backend (default: {CLICK_BACKEND})"
    )
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.delay < 0:
        parser.error("--delay must be >= 0")
    if args.iterations < 0:
        parser.error("--iterations must be >= 0")

    daemon = HelperDaemon(
        delay=args.delay,
        random_delay=args.random,
        iterations=args.iterations,
        debug=args.debug,
        app_name=args.app,
        backend=args.backend,
    )
    daemon.setup_logging()
    daemon.install_signal_handlers()

    try:
        daemon.run()
    except TemplateNotFoundError as e:
        daemon.logger.error(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()

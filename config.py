"""
Configuration loader - loads parameters from config_local.py or environment variables.

Usage:
    from config import APP_NAME, ITERATION_DELAY

Setup:
    1. Create config_local.py next to this file
    2. Override any default parameter (e.g. ITERATION_DELAY = 5)
    3. config_local.py is gitignored so your local tuning stays local
"""
import os
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent

# =============================================================================
# DEFAULT PARAMETERS (can be overridden in config_local.py)
# =============================================================================

# Game process name as reported by System Events
APP_NAME = "WhiteoutSurvival"

# Loop timing
ITERATION_DELAY = 10               # Seconds between iterations
RANDOM_DELAY = False               # Random delay in [0, ITERATION_DELAY) instead of fixed
ITERATIONS = 0                     # 0 = run forever
FOCUS_SETTLE_DELAY = 0.5           # Seconds to wait after bringing the game to front

# Window discovery
WINDOW_POLL_INTERVAL = 0.5         # Seconds between window queries
WINDOW_POLL_TIMEOUT = 3.0          # Give up waiting for a window after this long

# Capture
SCREENSHOT_PATH = "/tmp/screenshot.png"

# =============================================================================
# TEMPLATE MATCHING (TM_CCOEFF_NORMED - higher score = better match)
# =============================================================================

TEMPLATE_DIR = PROJECT_ROOT / "images"

# Scales tried in order of preference. Nominal size first so an exact hit wins ties.
MATCH_SCALES = (1.0, 0.9, 1.1, 0.8, 1.2, 0.7, 1.3)

# Threshold slides from START down to MIN. At each step the first scale
# reaching the threshold is accepted.
MATCH_THRESHOLD_START = 0.90
MATCH_THRESHOLD_MIN = 0.75
MATCH_THRESHOLD_STEP = 0.05

# Elements clicked every iteration, in order.
# 'threshold' is the minimum accepted score for that element.
CLICK_TARGETS = [
    {
        'name': 'Handshake',
        'template': 'handshake_icon.png',
        'threshold': 0.75,
    },
    {
        'name': 'Close',
        'template': 'close_x_icon.png',
        'threshold': 0.80,
    },
]

# =============================================================================
# INPUT
# =============================================================================

CLICK_BACKEND = "cliclick"         # "cliclick" or "quartz"
CLICLICK_PATH = "cliclick"         # Homebrew installs to /opt/homebrew/bin/cliclick

# =============================================================================
# OUTPUT
# =============================================================================

LOG_DIR = PROJECT_ROOT / "logs"
DEBUG_DIR = PROJECT_ROOT / "debug"

# =============================================================================
# LOAD LOCAL OVERRIDES
# =============================================================================

# Try to load from config_local.py first (for local tuning)
try:
    from config_local import *
    print("Loaded config from config_local.py")
except ImportError:
    # Fall back to environment variables for the handful of values people change often
    APP_NAME = os.environ.get('WOS_APP_NAME', APP_NAME)
    CLICLICK_PATH = os.environ.get('WOS_CLICLICK_PATH', CLICLICK_PATH)

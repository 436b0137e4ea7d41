"""
Pytest configuration and shared fixtures for wos-helper tests.
"""
from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any, Generator
from unittest.mock import MagicMock

import cv2
import numpy as np
import pytest

# Add project root to path so imports work
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

if TYPE_CHECKING:
    import numpy.typing as npt


# =============================================================================
# Frame Fixtures
# =============================================================================

@pytest.fixture
def sample_frame() -> npt.NDArray[np.uint8]:
    """Black Retina-sized frame for an 800x600 window (1600x1200 BGR)."""
    return np.zeros((1200, 1600, 3), dtype=np.uint8)


@pytest.fixture
def noise_frame() -> npt.NDArray[np.uint8]:
    """Deterministic random noise frame (300x400 BGR)."""
    rng = np.random.default_rng(1234)
    return rng.integers(0, 256, (300, 400, 3), dtype=np.uint8)


# =============================================================================
# Template Fixtures
# =============================================================================

@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    """Empty template directory."""
    path = tmp_path / "images"
    path.mkdir()
    return path


@pytest.fixture
def write_template(template_dir: Path) -> Any:
    """Factory writing a BGR array as a PNG template; returns the file name."""
    def _write(name: str, image: npt.NDArray[np.uint8]) -> str:
        assert cv2.imwrite(str(template_dir / name), image)
        return name
    return _write


@pytest.fixture(autouse=True)
def clear_template_cache() -> Generator[None, None, None]:
    """Template cache is module-global; isolate every test."""
    from utils import template_matcher
    template_matcher.clear_cache()
    yield
    template_matcher.clear_cache()


# =============================================================================
# OS Helper Mock Fixtures
# =============================================================================

@pytest.fixture
def mock_mouse() -> MagicMock:
    """Mock MouseHelper that tracks all calls."""
    mouse = MagicMock()
    mouse.click = MagicMock(return_value=None)
    mouse.move = MagicMock(return_value=None)
    mouse.backend = "cliclick"
    return mouse


@pytest.fixture
def mock_window_helper() -> MagicMock:
    """Mock MacWindowHelper for a running game with an 800x600 window at (100, 50)."""
    from utils.geometry import Rect

    helper = MagicMock()
    helper.app_name = "WhiteoutSurvival"
    helper.is_app_running = MagicMock(return_value=True)
    helper.locate_window = MagicMock(return_value=Rect(100, 50, 800, 600))
    helper.focus_app = MagicMock(return_value=True)
    return helper


@pytest.fixture
def mock_screenshot_helper(sample_frame: npt.NDArray[np.uint8]) -> MagicMock:
    """Mock MacScreenshotHelper that returns sample_frame."""
    helper = MagicMock()
    helper.capture_region = MagicMock(return_value=sample_frame)
    return helper


# =============================================================================
# Time Mock Fixtures
# =============================================================================

@pytest.fixture
def freeze_time_2026() -> Generator[None, None, None]:
    """Freeze time to 2026-01-04 10:00:00."""
    from freezegun import freeze_time
    with freeze_time("2026-01-04 10:00:00"):
        yield

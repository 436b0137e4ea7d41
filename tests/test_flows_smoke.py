"""
Flow smoke tests.

Basic tests to verify flows can be imported and have expected structure,
plus a click-through of each flow with a mock mouse.
"""
import importlib
import inspect
from pathlib import Path

import pytest


# All flow modules that should be importable
FLOW_MODULES = [
    'scripts.flows.handshake_flow',
    'scripts.flows.close_dialog_flow',
]

FLOW_FUNCTIONS = [
    ('scripts.flows.handshake_flow', 'handshake_flow'),
    ('scripts.flows.close_dialog_flow', 'close_dialog_flow'),
]


class TestFlowImports:
    """Test that all flows can be imported without errors."""

    @pytest.mark.parametrize("module_name", FLOW_MODULES)
    def test_flow_imports(self, module_name):
        """Test that flow module can be imported."""
        try:
            module = importlib.import_module(module_name)
            assert module is not None
        except ImportError as e:
            pytest.fail(f"Failed to import {module_name}: {e}")


class TestFlowStructure:
    """Test that flows have expected structure."""

    @pytest.mark.parametrize("module_name,func_name", FLOW_FUNCTIONS)
    def test_flow_has_main_function(self, module_name, func_name):
        """Test that flow module has its main function."""
        module = importlib.import_module(module_name)
        assert hasattr(module, func_name), f"{module_name} missing function: {func_name}"
        assert callable(getattr(module, func_name))

    @pytest.mark.parametrize("module_name,func_name", FLOW_FUNCTIONS)
    def test_flow_accepts_mouse_and_point(self, module_name, func_name):
        """Test that flow function takes (mouse, point)."""
        func = getattr(importlib.import_module(module_name), func_name)
        params = list(inspect.signature(func).parameters.keys())
        assert params == ['mouse', 'point']

    @pytest.mark.parametrize("module_name,func_name", FLOW_FUNCTIONS)
    def test_flow_clicks_point(self, module_name, func_name, mock_mouse):
        """Test that flow clicks exactly the given point."""
        func = getattr(importlib.import_module(module_name), func_name)
        func(mock_mouse, (321, 654))
        mock_mouse.click.assert_called_once_with(321, 654)


class TestFlowRegistry:
    """Test FLOWS maps every configured click target."""

    def test_every_click_target_has_flow(self):
        from config import CLICK_TARGETS
        from scripts.flows import FLOWS

        for target in CLICK_TARGETS:
            assert target['name'] in FLOWS, f"No flow for click target {target['name']}"


class TestFlowsDirectory:
    """Test the flows directory structure."""

    @pytest.fixture
    def flows_dir(self):
        return Path(__file__).parent.parent / "scripts" / "flows"

    def test_flows_has_init(self, flows_dir):
        """Test that flows directory has __init__.py."""
        assert (flows_dir / "__init__.py").exists(), "scripts/flows/__init__.py does not exist"

    def test_flow_files_present(self, flows_dir):
        """Test that flow files exist."""
        flow_files = list(flows_dir.glob("*_flow.py"))
        assert len(flow_files) == len(FLOW_MODULES)


class TestUtilsImports:
    """Test that required utils can be imported."""

    UTILS = [
        'utils.geometry',
        'utils.display_bounds',
        'utils.macos_window_helper',
        'utils.macos_screenshot_helper',
        'utils.template_matcher',
        'utils.icon_matcher',
        'utils.handshake_icon_matcher',
        'utils.close_button_matcher',
        'utils.mouse_helper',
        'utils.debug_screenshot',
    ]

    @pytest.mark.parametrize("module_name", UTILS)
    def test_utils_imports(self, module_name):
        """Test that utility module can be imported."""
        try:
            module = importlib.import_module(module_name)
            assert module is not None
        except ImportError as e:
            pytest.fail(f"Failed to import {module_name}: {e}")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

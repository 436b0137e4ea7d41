"""
Flows - Action handlers triggered by icon detection.

Each flow handles a specific click target. FLOWS maps a target name from
config.CLICK_TARGETS to its handler.
"""

from .handshake_flow import handshake_flow
from .close_dialog_flow import close_dialog_flow

FLOWS = {
    'Handshake': handshake_flow,
    'Close': close_dialog_flow,
}

__all__ = ['handshake_flow', 'close_dialog_flow', 'FLOWS']

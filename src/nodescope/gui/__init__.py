"""
NodeScope GUI Bridge

PyQt6 objects that expose the headless editor core to widgets.
"""

from nodescope.gui.session_bridge import SessionSignals

__all__ = ["SessionSignals"]

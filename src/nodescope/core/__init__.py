"""
NodeScope Core - The headless editor core.

Navigation, session state and command handling for a node-graph editor
whose graphs live in an external processing engine. It has no GUI
dependencies.
"""

from nodescope.core.editor_core import EditorCore
from nodescope.core.engine import EngineGateway, ProcessingEngine
from nodescope.core.event_bus import EventBus
from nodescope.core.navigation import ContextCache, GraphNavigator
from nodescope.core.session_state import SessionState

__all__ = [
    "EditorCore",
    "EngineGateway",
    "ProcessingEngine",
    "EventBus",
    "ContextCache",
    "GraphNavigator",
    "SessionState",
]

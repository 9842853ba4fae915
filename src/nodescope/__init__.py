"""
NodeScope - Presentation core of a node-graph visual editor

Keeps an editor's navigation and visual state in sync with an external
processing engine while the user drills into and out of nested graphs.
"""

__version__ = "0.1.0"

from nodescope.core.editor_core import EditorCore
from nodescope.core.session_state import SessionState

__all__ = ["EditorCore", "SessionState", "__version__"]

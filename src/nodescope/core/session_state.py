"""
Session State - What is currently true for the user.

Holds the current graph context, the selected node, the output node, the
last render result and the node-type catalog. Only command handlers and the
navigator write to it; widgets observe it through on_change callbacks.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence

from nodescope.core.errors import SessionNotInitializedError
from nodescope.core.handles import GraphContextId, NodeHandle, NodeTypeDescriptor
from nodescope.core.render_world import RenderWorld

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[str, Any], None]


class SessionState:
    """
    The single mutable record shared by the editor core.

    Created once the engine is ready (init), torn down with the editor
    (teardown). Every field write notifies observers with the field name
    and its new value.
    """

    def __init__(self):
        self._initialized = False
        self._current_context: Optional[GraphContextId] = None
        self._selected_node: Optional[NodeHandle] = None
        self._output_node: Optional[NodeHandle] = None
        self._render_result: Optional[RenderWorld] = None
        self._node_types: List[NodeTypeDescriptor] = []
        self._type_by_name: Optional[Dict[str, NodeTypeDescriptor]] = None

        self._change_callbacks: List[ChangeCallback] = []

    def init(self, node_types: Sequence[NodeTypeDescriptor], root_context: GraphContextId) -> None:
        """
        Initialize the session once the engine has loaded.

        Args:
            node_types: The engine's node-type catalog in menu order
            root_context: The root graph context, which becomes current
        """
        self._initialized = True
        self.node_types = list(node_types)
        self.current_context = root_context
        self.selected_node = None
        self.output_node = None
        self.render_result = None
        logger.info(f"Session initialized with {len(self._node_types)} node types")

    def teardown(self) -> None:
        """Reset all fields and drop observers."""
        self._initialized = False
        self._current_context = None
        self._selected_node = None
        self._output_node = None
        self._render_result = None
        self._node_types = []
        self._type_by_name = None
        self._change_callbacks.clear()
        logger.info("Session torn down")

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def on_change(self, callback: ChangeCallback) -> None:
        """Register callback for field changes (field_name, value)."""
        self._change_callbacks.append(callback)

    def remove_change_callback(self, callback: ChangeCallback) -> None:
        if callback in self._change_callbacks:
            self._change_callbacks.remove(callback)

    def _notify_change(self, field_name: str, value: Any) -> None:
        for callback in list(self._change_callbacks):
            try:
                callback(field_name, value)
            except Exception as e:
                logger.error(f"Change callback error ({field_name}): {e}")

    def _require_init(self, field_name: str) -> None:
        if not self._initialized:
            raise SessionNotInitializedError(field_name)

    @property
    def current_context(self) -> GraphContextId:
        """The graph context shown in the diagram."""
        self._require_init("current_context")
        return self._current_context

    @current_context.setter
    def current_context(self, value: GraphContextId) -> None:
        self._current_context = value
        self._notify_change("current_context", value)

    @property
    def selected_node(self) -> Optional[NodeHandle]:
        self._require_init("selected_node")
        return self._selected_node

    @selected_node.setter
    def selected_node(self, value: Optional[NodeHandle]) -> None:
        self._selected_node = value
        self._notify_change("selected_node", value)

    @property
    def output_node(self) -> Optional[NodeHandle]:
        """Output node of the current context, mirrored into the engine."""
        self._require_init("output_node")
        return self._output_node

    @output_node.setter
    def output_node(self, value: Optional[NodeHandle]) -> None:
        self._output_node = value
        self._notify_change("output_node", value)

    @property
    def render_result(self) -> Optional[RenderWorld]:
        """Last successfully evaluated geometry."""
        self._require_init("render_result")
        return self._render_result

    @render_result.setter
    def render_result(self, value: Optional[RenderWorld]) -> None:
        self._render_result = value
        self._notify_change("render_result", value)

    @property
    def node_types(self) -> List[NodeTypeDescriptor]:
        """Node-type catalog in menu order."""
        self._require_init("node_types")
        return list(self._node_types)

    @node_types.setter
    def node_types(self, value: Sequence[NodeTypeDescriptor]) -> None:
        self._node_types = list(value)
        self._type_by_name = None
        self._notify_change("node_types", list(self._node_types))

    @property
    def type_by_name(self) -> Dict[str, NodeTypeDescriptor]:
        """Catalog indexed by type name; rebuilt only after node_types changes."""
        self._require_init("type_by_name")
        if self._type_by_name is None:
            self._type_by_name = {t.name: t for t in self._node_types}
        return self._type_by_name

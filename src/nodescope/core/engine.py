"""
Processing Engine interface and gateway.

The processing engine owns graph topology, parameter storage and
evaluation. Any engine binding must implement ProcessingEngine; the editor
core talks to it only through EngineGateway, which wraps raw paths and
handles into value types and maps engine failures onto editor errors.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Union

from nodescope.core.errors import EngineError, InvalidReferenceError
from nodescope.core.handles import GraphContextId, NodeHandle, NodeTypeDescriptor
from nodescope.core.render_world import RenderWorld

logger = logging.getLogger(__name__)

# Returned by run_processors when the graph has nothing to show
NO_RESULT = "No result"


class ProcessingEngine(ABC):
    """
    Abstract Base Class defining the capability surface of an engine.

    Paths and handles are opaque to the editor. Handles must be hashable so
    they can key visual nodes. Methods raise EngineError when the engine
    rejects a call (stale handle, bad slot, unknown parameter).
    """

    @abstractmethod
    def get_root_path(self) -> Any:
        """Path of the root graph."""
        ...

    @abstractmethod
    def get_graph_path(self, parent_path: Any, handle: Any) -> Any:
        """Path of the graph nested in a subgraph processor node."""
        ...

    @abstractmethod
    def hash_graph_path(self, path: Any) -> str:
        """Canonical key of a graph path."""
        ...

    @abstractmethod
    def get_node_types(self) -> List[Dict[str, Any]]:
        """Node-type catalog in display order."""
        ...

    @abstractmethod
    def add_processor_node(self, path: Any, type_name: str) -> Any:
        """Create a node and return its handle."""
        ...

    @abstractmethod
    def remove_node(self, path: Any, handle: Any) -> None:
        ...

    @abstractmethod
    def is_node_subgraph_processor(self, path: Any, handle: Any) -> bool:
        ...

    @abstractmethod
    def connect_nodes(self, path: Any, from_handle: Any, to_handle: Any) -> None:
        ...

    @abstractmethod
    def connect_nodes_slotted(self, path: Any, from_handle: Any, to_handle: Any, slot: int) -> None:
        ...

    @abstractmethod
    def disconnect_nodes(self, path: Any, from_handle: Any, to_handle: Any) -> None:
        ...

    @abstractmethod
    def disconnect_nodes_slotted(self, path: Any, from_handle: Any, to_handle: Any, slot: int) -> None:
        ...

    @abstractmethod
    def set_output_node(self, path: Any, handle: Any) -> None:
        ...

    @abstractmethod
    def run_processors(self, path: Any) -> Union[Dict[str, Any], str]:
        """Evaluate the graph's output node; returns NO_RESULT if there is nothing to show."""
        ...

    @abstractmethod
    def get_node_parameter(self, path: Any, handle: Any, name: str) -> str:
        ...

    @abstractmethod
    def set_node_parameter(self, path: Any, handle: Any, name: str, value: str) -> None:
        ...

    @abstractmethod
    def is_input_satisfied(self, path: Any, handle: Any) -> bool:
        ...


class EngineGateway:
    """
    Typed access to a ProcessingEngine.

    Converts raw paths into GraphContextId (keyed by the engine's canonical
    hash), raw handles into NodeHandle, the "No result" sentinel into None,
    and EngineError raised by any engine call into InvalidReferenceError
    (with no handle for calls that do not target one node).
    """

    def __init__(self, engine: ProcessingEngine):
        """
        Initialize the gateway.

        Args:
            engine: The engine binding to wrap
        """
        self._engine = engine

    @property
    def engine(self) -> ProcessingEngine:
        """The wrapped engine."""
        return self._engine

    def _context(self, path: Any) -> GraphContextId:
        return GraphContextId(key=str(self._engine.hash_graph_path(path)), path=path)

    def root_context(self) -> GraphContextId:
        """Get the root graph context."""
        return self._context(self._engine.get_root_path())

    def subgraph_context(self, parent: GraphContextId, node: NodeHandle) -> GraphContextId:
        """Get the context nested under a subgraph processor node."""
        try:
            path = self._engine.get_graph_path(parent.path, node.raw)
        except EngineError as e:
            raise InvalidReferenceError("get_graph_path", node, e.reason) from e
        return self._context(path)

    def node_types(self) -> List[NodeTypeDescriptor]:
        """Load the node-type catalog."""
        return [NodeTypeDescriptor.from_dict(d) for d in self._engine.get_node_types()]

    def add_node(self, context: GraphContextId, type_name: str) -> NodeHandle:
        raw = self._call("add_processor_node", None, self._engine.add_processor_node, context.path, type_name)
        handle = NodeHandle(raw=raw, type_name=type_name)
        logger.debug(f"Engine created {handle} in {context}")
        return handle

    def remove_node(self, context: GraphContextId, node: NodeHandle) -> None:
        self._call("remove_node", node, self._engine.remove_node, context.path, node.raw)

    def is_subgraph_processor(self, context: GraphContextId, node: NodeHandle) -> bool:
        return bool(
            self._call(
                "is_node_subgraph_processor", node,
                self._engine.is_node_subgraph_processor, context.path, node.raw,
            )
        )

    def connect(
        self,
        context: GraphContextId,
        from_node: NodeHandle,
        to_node: NodeHandle,
        slot: Optional[int] = None,
    ) -> None:
        if slot is None:
            self._call("connect_nodes", to_node, self._engine.connect_nodes,
                       context.path, from_node.raw, to_node.raw)
        else:
            self._call("connect_nodes_slotted", to_node, self._engine.connect_nodes_slotted,
                       context.path, from_node.raw, to_node.raw, slot)

    def disconnect(
        self,
        context: GraphContextId,
        from_node: NodeHandle,
        to_node: NodeHandle,
        slot: Optional[int] = None,
    ) -> None:
        if slot is None:
            self._call("disconnect_nodes", to_node, self._engine.disconnect_nodes,
                       context.path, from_node.raw, to_node.raw)
        else:
            self._call("disconnect_nodes_slotted", to_node, self._engine.disconnect_nodes_slotted,
                       context.path, from_node.raw, to_node.raw, slot)

    def set_output_node(self, context: GraphContextId, node: NodeHandle) -> None:
        self._call("set_output_node", node, self._engine.set_output_node, context.path, node.raw)

    def run_processors(self, context: GraphContextId) -> Optional[RenderWorld]:
        """
        Evaluate the context's output node.

        Returns:
            The render world, or None when the engine reports no result
        """
        result = self._call("run_processors", None, self._engine.run_processors, context.path)
        if isinstance(result, str):
            if result != NO_RESULT:
                logger.warning(f"Unexpected evaluation result in {context}: {result}")
            return None
        return RenderWorld.from_dict(result)

    def get_parameter(self, context: GraphContextId, node: NodeHandle, name: str) -> str:
        return self._call("get_node_parameter", node, self._engine.get_node_parameter,
                          context.path, node.raw, name)

    def set_parameter(self, context: GraphContextId, node: NodeHandle, name: str, value: str) -> None:
        self._call("set_node_parameter", node, self._engine.set_node_parameter,
                   context.path, node.raw, name, value)

    def is_input_satisfied(self, context: GraphContextId, node: NodeHandle) -> bool:
        return bool(
            self._call("is_input_satisfied", node, self._engine.is_input_satisfied,
                       context.path, node.raw)
        )

    def _call(self, operation: str, node: Optional[NodeHandle], method, *args):
        try:
            return method(*args)
        except EngineError as e:
            raise InvalidReferenceError(operation, node, e.reason) from e

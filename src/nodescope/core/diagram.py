"""
Diagram Model - The visual model the editor core drives.

The diagram widget library owns node positions, links and per-node visual
flags. The core only needs the operations below; DiagramModel is the
contract, InMemoryDiagram a headless implementation.
"""

import copy
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from nodescope.core.handles import NodeHandle, NodeTypeDescriptor

logger = logging.getLogger(__name__)

# Opaque to the core: produced by serialize(), replayed by deserialize()
VisualSnapshot = Any


class DiagramModel(ABC):
    """
    Abstract Base Class for the visual model of one live graph context.

    The snapshot format belongs to the implementation; the core stores
    snapshots and hands them back without looking inside.
    """

    @abstractmethod
    def serialize(self) -> VisualSnapshot:
        """Capture the whole visual model."""
        ...

    @abstractmethod
    def deserialize(self, snapshot: VisualSnapshot) -> None:
        """Replace the whole visual model with a captured one."""
        ...

    @abstractmethod
    def empty_snapshot(self) -> VisualSnapshot:
        """Snapshot of a diagram with nothing in it."""
        ...

    @abstractmethod
    def add_node(
        self,
        handle: NodeHandle,
        node_type: NodeTypeDescriptor,
        is_subgraph_processor: bool,
        x: float,
        y: float,
    ) -> Any:
        """Add a visual node bound to an engine handle."""
        ...

    @abstractmethod
    def remove_node(self, handle: NodeHandle) -> bool:
        """Remove a visual node; returns False if it was not there."""
        ...

    @abstractmethod
    def set_output_flag(self, handle: NodeHandle, is_output: bool) -> bool:
        """Mark or unmark a node as the output; returns False if it is not there."""
        ...

    @abstractmethod
    def repaint(self) -> None:
        """Request a redraw of the canvas."""
        ...


@dataclass
class DiagramNode:
    """Visual state of one node."""
    handle: NodeHandle
    type_name: str
    is_subgraph_processor: bool
    x: float
    y: float
    is_output: bool = False


@dataclass
class DiagramLink:
    """Visual link from an output port to an input port."""
    from_node: NodeHandle
    to_node: NodeHandle
    slot: Optional[int] = None


class InMemoryDiagram(DiagramModel):
    """
    Headless diagram keeping nodes and links in dictionaries.

    Snapshots are deep copies of the node and link tables, so later edits
    never leak into a stored snapshot.
    """

    def __init__(self):
        self._nodes: Dict[NodeHandle, DiagramNode] = {}
        self._links: List[DiagramLink] = []
        self._repaint_count = 0

    @property
    def nodes(self) -> Dict[NodeHandle, DiagramNode]:
        """Get all visual nodes."""
        return self._nodes.copy()

    @property
    def links(self) -> List[DiagramLink]:
        """Get all visual links."""
        return list(self._links)

    @property
    def repaint_count(self) -> int:
        """How many repaints were requested."""
        return self._repaint_count

    def get_node(self, handle: NodeHandle) -> Optional[DiagramNode]:
        return self._nodes.get(handle)

    def add_node(
        self,
        handle: NodeHandle,
        node_type: NodeTypeDescriptor,
        is_subgraph_processor: bool,
        x: float,
        y: float,
    ) -> DiagramNode:
        node = DiagramNode(
            handle=handle,
            type_name=node_type.name,
            is_subgraph_processor=is_subgraph_processor,
            x=x,
            y=y,
        )
        self._nodes[handle] = node
        logger.debug(f"Added node: {handle} at ({x}, {y})")
        return node

    def move_node(self, handle: NodeHandle, x: float, y: float) -> None:
        node = self._nodes[handle]
        node.x = x
        node.y = y

    def remove_node(self, handle: NodeHandle) -> bool:
        if handle not in self._nodes:
            return False
        del self._nodes[handle]
        self._links = [
            link for link in self._links
            if link.from_node != handle and link.to_node != handle
        ]
        logger.debug(f"Removed node: {handle}")
        return True

    def add_link(self, from_node: NodeHandle, to_node: NodeHandle, slot: Optional[int] = None) -> DiagramLink:
        """Add a link between nodes."""
        if from_node not in self._nodes or to_node not in self._nodes:
            raise ValueError("Invalid node handles for link")
        link = DiagramLink(from_node, to_node, slot)
        self._links.append(link)
        return link

    def remove_link(self, from_node: NodeHandle, to_node: NodeHandle, slot: Optional[int] = None) -> bool:
        for link in self._links:
            if link.from_node == from_node and link.to_node == to_node and link.slot == slot:
                self._links.remove(link)
                return True
        return False

    def set_output_flag(self, handle: NodeHandle, is_output: bool) -> bool:
        node = self._nodes.get(handle)
        if node is None:
            return False
        node.is_output = is_output
        return True

    def repaint(self) -> None:
        self._repaint_count += 1

    def serialize(self) -> VisualSnapshot:
        return {
            "nodes": copy.deepcopy(list(self._nodes.values())),
            "links": copy.deepcopy(self._links),
        }

    def deserialize(self, snapshot: VisualSnapshot) -> None:
        nodes = copy.deepcopy(snapshot["nodes"])
        self._nodes = {node.handle: node for node in nodes}
        self._links = copy.deepcopy(snapshot["links"])

    def empty_snapshot(self) -> VisualSnapshot:
        return {"nodes": [], "links": []}

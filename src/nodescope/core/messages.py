"""
Editor Messages - The closed set of messages carried by the event bus.

Every cross-component interaction is one of these frozen dataclasses. Each
class names its MessageKind, which is what handlers subscribe to.
"""

from dataclasses import dataclass
from typing import ClassVar, Literal, Optional, Union

from nodescope.core.handles import GraphContextId, NodeHandle
from nodescope.core.types import MessageKind

# Navigation target meaning "the root graph", resolved through the engine
ROOT: Literal["root"] = "root"

NavigationTarget = Union[GraphContextId, Literal["root"]]


@dataclass(frozen=True)
class CreateNode:
    """Create a node of the named catalog type in the current context."""
    kind: ClassVar[MessageKind] = MessageKind.CREATE_NODE
    node_type: str


@dataclass(frozen=True)
class NodeCreated:
    """A node was created in the engine and added to the diagram."""
    kind: ClassVar[MessageKind] = MessageKind.NODE_CREATED
    handle: NodeHandle


@dataclass(frozen=True)
class DeleteNode:
    kind: ClassVar[MessageKind] = MessageKind.DELETE_NODE
    handle: NodeHandle


@dataclass(frozen=True)
class CreateLink:
    """Connect an output to an input; ``slot`` is set for slotted inputs."""
    kind: ClassVar[MessageKind] = MessageKind.CREATE_LINK
    from_node: Optional[NodeHandle]
    to_node: Optional[NodeHandle]
    slot: Optional[int] = None


@dataclass(frozen=True)
class DeleteLink:
    kind: ClassVar[MessageKind] = MessageKind.DELETE_LINK
    from_node: Optional[NodeHandle]
    to_node: Optional[NodeHandle]
    slot: Optional[int] = None


@dataclass(frozen=True)
class SaveAll:
    kind: ClassVar[MessageKind] = MessageKind.SAVE_ALL


@dataclass(frozen=True)
class SetOutputNode:
    """Make a node the displayed output of the current context, or clear it."""
    kind: ClassVar[MessageKind] = MessageKind.SET_OUTPUT_NODE
    node: Optional[NodeHandle]


@dataclass(frozen=True)
class NodeSelected:
    kind: ClassVar[MessageKind] = MessageKind.NODE_SELECTED
    node: NodeHandle


@dataclass(frozen=True)
class SubgraphNodeSelected:
    """The user asked to open a node's nested graph (e.g. double click)."""
    kind: ClassVar[MessageKind] = MessageKind.SUBGRAPH_NODE_SELECTED
    node: NodeHandle


@dataclass(frozen=True)
class MoveLevelUp:
    kind: ClassVar[MessageKind] = MessageKind.MOVE_LEVEL_UP


@dataclass(frozen=True)
class RunProcessors:
    kind: ClassVar[MessageKind] = MessageKind.RUN_PROCESSORS


@dataclass(frozen=True)
class SwitchToSubgraph:
    """Descend into the graph nested under ``node``."""
    kind: ClassVar[MessageKind] = MessageKind.SWITCH_TO_SUBGRAPH
    node: NodeHandle


@dataclass(frozen=True)
class SwitchedToSubgraph:
    """A descend completed; carries what a breadcrumb trail needs to grow."""
    kind: ClassVar[MessageKind] = MessageKind.SWITCHED_TO_SUBGRAPH
    parent_context: GraphContextId
    context: GraphContextId
    display_label: str


@dataclass(frozen=True)
class SwitchToGraphPath:
    """Navigate to an already visited context, or to the root."""
    kind: ClassVar[MessageKind] = MessageKind.SWITCH_TO_GRAPH_PATH
    path: NavigationTarget


Message = Union[
    CreateNode,
    NodeCreated,
    DeleteNode,
    CreateLink,
    DeleteLink,
    SaveAll,
    SetOutputNode,
    NodeSelected,
    SubgraphNodeSelected,
    MoveLevelUp,
    RunProcessors,
    SwitchToSubgraph,
    SwitchedToSubgraph,
    SwitchToGraphPath,
]

MESSAGE_TYPES = {
    cls.kind: cls
    for cls in (
        CreateNode, NodeCreated, DeleteNode, CreateLink, DeleteLink, SaveAll,
        SetOutputNode, NodeSelected, SubgraphNodeSelected, MoveLevelUp,
        RunProcessors, SwitchToSubgraph, SwitchedToSubgraph, SwitchToGraphPath,
    )
}

"""
Command Handlers - Translate editor messages into engine and diagram calls.

One handler per message kind. Handlers read and write SessionState, call
the engine through EngineGateway and mutate the diagram; follow-up work is
requested by publishing further messages on the bus. Errors propagate to
whoever published the message.
"""

import logging
from typing import Callable, Dict, FrozenSet, Iterable, List, Optional

from nodescope.core.checkpoint import DiagramCheckpoint
from nodescope.core.config import DiagramConfig
from nodescope.core.diagram import DiagramModel
from nodescope.core.engine import EngineGateway
from nodescope.core.errors import IncompatibleLinkError, UnknownNodeTypeError
from nodescope.core.event_bus import EventBus, SubscriptionToken
from nodescope.core.handles import NodeHandle
from nodescope.core.messages import (
    ROOT,
    CreateLink,
    CreateNode,
    DeleteLink,
    DeleteNode,
    Message,
    MoveLevelUp,
    NodeCreated,
    NodeSelected,
    RunProcessors,
    SaveAll,
    SetOutputNode,
    SubgraphNodeSelected,
    SwitchToGraphPath,
    SwitchToSubgraph,
)
from nodescope.core.session_state import SessionState
from nodescope.core.types import MessageKind

logger = logging.getLogger(__name__)

# Kinds the navigator subscribes to
NAVIGATION_KINDS: FrozenSet[MessageKind] = frozenset(k for k in MessageKind if k.is_navigation)


class CommandHandlers:
    """
    Handler set for every command message.

    Construction fails if a MessageKind is neither handled here, delegated
    (to the navigator), nor a pure notification.
    """

    def __init__(
        self,
        bus: EventBus,
        state: SessionState,
        gateway: EngineGateway,
        diagram: DiagramModel,
        config: Optional[DiagramConfig] = None,
        checkpoint: Optional[DiagramCheckpoint] = None,
        delegated: Iterable[MessageKind] = NAVIGATION_KINDS,
    ):
        """
        Initialize the handler set.

        Args:
            bus: Event bus to subscribe to and publish on
            state: Shared session state
            gateway: Engine access
            diagram: The live visual model
            config: Where new nodes are placed
            checkpoint: Storage for SaveAll
            delegated: Kinds handled by another component

        Raises:
            ValueError: If some message kind would go unhandled
        """
        self._bus = bus
        self._state = state
        self._gateway = gateway
        self._diagram = diagram
        self._config = config or DiagramConfig()
        self._checkpoint = checkpoint or DiagramCheckpoint()
        self._tokens: List[SubscriptionToken] = []

        self._handlers: Dict[MessageKind, Callable[[Message], None]] = {
            MessageKind.CREATE_NODE: self.create_node,
            MessageKind.DELETE_NODE: self.delete_node,
            MessageKind.CREATE_LINK: self.create_link,
            MessageKind.DELETE_LINK: self.delete_link,
            MessageKind.SAVE_ALL: self.save_all,
            MessageKind.SET_OUTPUT_NODE: self.set_output_node,
            MessageKind.NODE_SELECTED: self.node_selected,
            MessageKind.SUBGRAPH_NODE_SELECTED: self.subgraph_node_selected,
            MessageKind.MOVE_LEVEL_UP: self.move_level_up,
            MessageKind.RUN_PROCESSORS: self.run_processors,
        }

        delegated = frozenset(delegated)
        unhandled = [
            kind for kind in MessageKind
            if kind not in self._handlers and kind not in delegated and not kind.is_notification
        ]
        if unhandled:
            raise ValueError(f"No handler for message kinds: {', '.join(k.name for k in unhandled)}")

    @property
    def handled_kinds(self) -> FrozenSet[MessageKind]:
        return frozenset(self._handlers)

    @property
    def checkpoint(self) -> DiagramCheckpoint:
        return self._checkpoint

    def attach(self) -> None:
        """Subscribe every handler to the bus."""
        self._tokens = [
            self._bus.subscribe(kind, handler) for kind, handler in self._handlers.items()
        ]

    def detach(self) -> None:
        for token in self._tokens:
            self._bus.unsubscribe(token)
        self._tokens = []

    # Node lifecycle

    def create_node(self, message: CreateNode) -> None:
        node_type = self._state.type_by_name.get(message.node_type)
        if node_type is None:
            raise UnknownNodeTypeError(message.node_type)

        context = self._state.current_context
        handle = self._gateway.add_node(context, node_type.name)
        is_subgraph = self._gateway.is_subgraph_processor(context, handle)
        self._diagram.add_node(
            handle,
            node_type,
            is_subgraph,
            self._config.default_node_x,
            self._config.default_node_y,
        )
        self._diagram.repaint()
        logger.info(f"Created node {handle} in {context}")
        self._bus.publish(NodeCreated(handle))

    def delete_node(self, message: DeleteNode) -> None:
        handle = message.handle
        if self._state.selected_node == handle:
            self._state.selected_node = None
        if self._state.output_node == handle:
            self._diagram.set_output_flag(handle, False)
            self._state.output_node = None
        self._gateway.remove_node(self._state.current_context, handle)
        self._diagram.remove_node(handle)
        logger.info(f"Deleted node {handle}")

    # Links

    def create_link(self, message: CreateLink) -> None:
        from_node, to_node, slot = message.from_node, message.to_node, message.slot
        if from_node is None or to_node is None:
            raise IncompatibleLinkError(from_node, to_node, slot, "link end is not attached to a node")
        if from_node == to_node:
            raise IncompatibleLinkError(from_node, to_node, slot, "a node cannot link to itself")

        target_type = self._state.type_by_name.get(to_node.type_name)
        if target_type is not None:
            reason = target_type.slot_error(slot)
            if reason is not None:
                raise IncompatibleLinkError(from_node, to_node, slot, reason)

        self._gateway.connect(self._state.current_context, from_node, to_node, slot)
        logger.debug(f"Linked {from_node} -> {to_node} (slot {slot})")

    def delete_link(self, message: DeleteLink) -> None:
        if message.from_node is None or message.to_node is None:
            logger.debug("Ignoring link deletion with a detached end")
            return
        self._gateway.disconnect(
            self._state.current_context, message.from_node, message.to_node, message.slot
        )
        logger.debug(f"Unlinked {message.from_node} -> {message.to_node} (slot {message.slot})")

    # Output and evaluation

    def set_output_node(self, message: SetOutputNode) -> None:
        previous = self._state.output_node
        if previous is not None:
            self._diagram.set_output_flag(previous, False)

        node = message.node
        if node is not None:
            self._diagram.set_output_flag(node, True)
        self._state.output_node = node

        if node is not None:
            self._gateway.set_output_node(self._state.current_context, node)
            self._bus.publish(RunProcessors())
        self._diagram.repaint()

    def run_processors(self, message: RunProcessors) -> None:
        if self._state.output_node is None:
            logger.debug("No output node set, skipping evaluation")
            return

        context = self._state.current_context
        world = self._gateway.run_processors(context)
        if world is None:
            logger.debug(f"No result for {context}")
            return
        self._state.render_result = world

    # Selection and navigation requests

    def node_selected(self, message: NodeSelected) -> None:
        self._state.selected_node = message.node

    def subgraph_node_selected(self, message: SubgraphNodeSelected) -> None:
        node: NodeHandle = message.node
        if not self._gateway.is_subgraph_processor(self._state.current_context, node):
            logger.debug(f"{node} is not a subgraph processor, ignoring")
            return
        self._bus.publish(SwitchToSubgraph(node))

    def move_level_up(self, message: MoveLevelUp) -> None:
        self._bus.publish(SwitchToGraphPath(ROOT))

    # Checkpoint

    def save_all(self, message: SaveAll) -> None:
        context = self._state.current_context
        restoring = self._checkpoint.has_saved(context)
        previous = self._checkpoint.swap(context, self._diagram.serialize())
        if restoring:
            self._diagram.deserialize(previous)
            self._diagram.repaint()
            logger.info(f"Restored checkpointed diagram of {context}")
        else:
            logger.info(f"Diagram checkpoint saved for {context}")

"""
Graph Navigation - Context cache and the enter/descend/navigate state machine.

Exactly one graph context is live in the diagram at a time. Leaving a
context stores its diagram snapshot and output node in the cache, keyed by
the engine's canonical hash of the context; entering a context replays its
stored snapshot, or starts from an empty diagram on the first visit.

Because entries are keyed by content hash and not by navigation history,
two different routes to the same nested graph share one entry.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

from nodescope.core.diagram import DiagramModel, VisualSnapshot
from nodescope.core.engine import EngineGateway
from nodescope.core.errors import UnknownNavigationTargetError
from nodescope.core.event_bus import EventBus, SubscriptionToken
from nodescope.core.handles import GraphContextId, NodeHandle
from nodescope.core.messages import (
    ROOT,
    NavigationTarget,
    SetOutputNode,
    SwitchedToSubgraph,
    SwitchToGraphPath,
    SwitchToSubgraph,
)
from nodescope.core.session_state import SessionState
from nodescope.core.types import MessageKind

logger = logging.getLogger(__name__)


@dataclass
class ContextEntry:
    """Cached visual state of one graph context."""
    context: GraphContextId
    output_node: Optional[NodeHandle]
    snapshot: VisualSnapshot


class ContextCache:
    """
    Context entries keyed by canonical context hash.

    Entries are created on first visit, overwritten on every exit and never
    evicted during a session.
    """

    def __init__(self):
        self._entries: Dict[str, ContextEntry] = {}

    def get(self, context: GraphContextId) -> Optional[ContextEntry]:
        return self._entries.get(context.key)

    def store(self, entry: ContextEntry) -> None:
        self._entries[entry.context.key] = entry

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, context: GraphContextId) -> bool:
        return context.key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ContextEntry]:
        return iter(list(self._entries.values()))


class GraphNavigator:
    """
    Drives context switches for the live diagram.

    Handles SwitchToSubgraph (descend) and SwitchToGraphPath (navigate to a
    visited context or the root). Follow-up messages are published only
    after the leave and enter halves of a switch have both completed.
    """

    def __init__(
        self,
        bus: EventBus,
        state: SessionState,
        gateway: EngineGateway,
        diagram: DiagramModel,
        cache: Optional[ContextCache] = None,
    ):
        """
        Initialize the navigator.

        Args:
            bus: Event bus to subscribe to and publish on
            state: Shared session state
            gateway: Engine access for resolving contexts
            diagram: The live visual model
            cache: Context cache, a fresh one if omitted
        """
        self._bus = bus
        self._state = state
        self._gateway = gateway
        self._diagram = diagram
        self._cache = cache if cache is not None else ContextCache()
        self._tokens: List[SubscriptionToken] = []

    @property
    def cache(self) -> ContextCache:
        return self._cache

    def attach(self) -> None:
        """Subscribe to navigation messages."""
        self._tokens = [
            self._bus.subscribe(MessageKind.SWITCH_TO_SUBGRAPH, self._on_switch_to_subgraph),
            self._bus.subscribe(MessageKind.SWITCH_TO_GRAPH_PATH, self._on_switch_to_graph_path),
        ]

    def detach(self) -> None:
        for token in self._tokens:
            self._bus.unsubscribe(token)
        self._tokens = []

    def _on_switch_to_subgraph(self, message: SwitchToSubgraph) -> None:
        self.descend(message.node)

    def _on_switch_to_graph_path(self, message: SwitchToGraphPath) -> None:
        self.navigate_to(message.path)

    def descend(self, child: NodeHandle) -> ContextEntry:
        """
        Enter the graph nested under a subgraph processor node.

        Publishes SwitchedToSubgraph with the parent context and the child's
        type name so breadcrumb trails can grow.
        """
        parent = self._state.current_context
        target = self._gateway.subgraph_context(parent, child)

        entry = self._switch(target)
        self._state.selected_node = None
        self._bus.publish(SetOutputNode(entry.output_node))
        self._bus.publish(SwitchedToSubgraph(
            parent_context=parent,
            context=target,
            display_label=child.type_name or str(child),
        ))
        self._diagram.repaint()
        return entry

    def navigate_to(self, target: NavigationTarget) -> ContextEntry:
        """
        Enter an explicit, already visited context or the root.

        Raises:
            UnknownNavigationTargetError: If the target was never entered
        """
        context = self._gateway.root_context() if target == ROOT else target
        if context != self._state.current_context and context not in self._cache:
            logger.error(f"Untracked graph context selected: {context}")
            raise UnknownNavigationTargetError(context.key)
        return self.enter(context)

    def enter(self, target: GraphContextId) -> ContextEntry:
        """
        Make ``target`` the live context.

        Stores the context being left, restores (or creates) the target's
        entry, clears the selection, publishes the entry's output node and
        requests a repaint.
        """
        entry = self._switch(target)
        self._state.selected_node = None
        self._bus.publish(SetOutputNode(entry.output_node))
        self._diagram.repaint()
        return entry

    def _switch(self, target: GraphContextId) -> ContextEntry:
        leaving = self._state.current_context
        self._cache.store(ContextEntry(
            context=leaving,
            output_node=self._state.output_node,
            snapshot=self._diagram.serialize(),
        ))

        self._state.current_context = target
        entry = self._cache.get(target)
        if entry is None:
            entry = ContextEntry(
                context=target,
                output_node=None,
                snapshot=self._diagram.empty_snapshot(),
            )
            self._cache.store(entry)
            logger.debug(f"First visit of graph context {target}")
        self._diagram.deserialize(entry.snapshot)

        logger.info(f"Switched graph context {leaving} -> {target}")
        return entry

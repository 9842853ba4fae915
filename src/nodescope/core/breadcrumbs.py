"""
Breadcrumb Trail - The graph-level menu model.

The trail starts at the root crumb, grows by one crumb each time the editor
descends into a subgraph, and is cut back to the chosen crumb when the user
navigates to an ancestor (or to the root).
"""

import logging
from dataclasses import dataclass
from typing import Callable, List

from nodescope.core.engine import EngineGateway
from nodescope.core.event_bus import EventBus, SubscriptionToken
from nodescope.core.handles import GraphContextId
from nodescope.core.messages import ROOT, SwitchedToSubgraph, SwitchToGraphPath
from nodescope.core.types import MessageKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Crumb:
    context: GraphContextId
    label: str


class BreadcrumbTrail:
    """
    Ordered list of crumbs from the root to the current context.

    Must be attached after the navigator, so that a navigation rejected by
    the navigator never reaches the trail.
    """

    def __init__(self, bus: EventBus, gateway: EngineGateway, root_label: str = "Root"):
        self._bus = bus
        self._gateway = gateway
        self._root_label = root_label
        self._crumbs: List[Crumb] = []
        self._tokens: List[SubscriptionToken] = []
        self._change_callbacks: List[Callable[[List[Crumb]], None]] = []

    @property
    def crumbs(self) -> List[Crumb]:
        return list(self._crumbs)

    @property
    def labels(self) -> List[str]:
        return [crumb.label for crumb in self._crumbs]

    def reset(self) -> None:
        """Start over with only the root crumb."""
        self._crumbs = [Crumb(self._gateway.root_context(), self._root_label)]
        self._notify_change()

    def attach(self) -> None:
        self.reset()
        self._tokens = [
            self._bus.subscribe(MessageKind.SWITCHED_TO_SUBGRAPH, self._on_switched_to_subgraph),
            self._bus.subscribe(MessageKind.SWITCH_TO_GRAPH_PATH, self._on_switch_to_graph_path),
        ]

    def detach(self) -> None:
        for token in self._tokens:
            self._bus.unsubscribe(token)
        self._tokens = []

    def on_change(self, callback: Callable[[List[Crumb]], None]) -> None:
        """Register callback for trail changes."""
        self._change_callbacks.append(callback)

    def _notify_change(self) -> None:
        crumbs = self.crumbs
        for callback in self._change_callbacks:
            try:
                callback(crumbs)
            except Exception as e:
                logger.error(f"Breadcrumb callback error: {e}")

    def select(self, index: int) -> None:
        """Navigate to the crumb at ``index``."""
        crumb = self._crumbs[index]
        target = ROOT if index == 0 else crumb.context
        self._bus.publish(SwitchToGraphPath(target))

    def render(self, separator: str = " → ") -> str:
        return separator.join(self.labels)

    def _on_switched_to_subgraph(self, message: SwitchedToSubgraph) -> None:
        self._crumbs.append(Crumb(message.context, message.display_label))
        self._notify_change()

    def _on_switch_to_graph_path(self, message: SwitchToGraphPath) -> None:
        if message.path == ROOT:
            index = 0
        else:
            index = self._index_of(message.path)
            if index is None:
                logger.warning(f"Graph context {message.path} is not on the breadcrumb trail")
                return
        del self._crumbs[index + 1:]
        self._notify_change()

    def _index_of(self, context: GraphContextId):
        for i, crumb in enumerate(self._crumbs):
            if crumb.context == context:
                return i
        return None

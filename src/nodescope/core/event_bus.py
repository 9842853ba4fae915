"""
Event Bus - Typed publish/subscribe between widgets and the editor core.

Delivery is synchronous and in-process: publish() calls every handler
subscribed to the message's kind, in subscription order, before returning.
Handlers may publish further messages; that is a plain nested call.
Exceptions raised by a handler propagate to whoever called publish().
"""

import itertools
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List

from nodescope.core.messages import Message
from nodescope.core.types import MessageKind

logger = logging.getLogger(__name__)

Handler = Callable[[Message], None]


@dataclass(frozen=True)
class SubscriptionToken:
    """Identifies one subscription for unsubscribe()."""
    kind: MessageKind
    id: int


class EventBus:
    """Synchronous message dispatcher keyed by MessageKind."""

    def __init__(self):
        self._subscriptions: Dict[MessageKind, Dict[int, Handler]] = {}
        self._ids = itertools.count()
        self._depth = 0

    @property
    def depth(self) -> int:
        """How many publish() calls are currently on the stack."""
        return self._depth

    def subscribe(self, kind: MessageKind, handler: Handler) -> SubscriptionToken:
        """
        Register a handler for one message kind.

        Args:
            kind: The message kind to receive
            handler: Called with each published message of that kind

        Returns:
            Token to pass to unsubscribe()
        """
        token = SubscriptionToken(kind, next(self._ids))
        self._subscriptions.setdefault(kind, {})[token.id] = handler
        return token

    def unsubscribe(self, token: SubscriptionToken) -> None:
        """Remove a subscription. Unknown tokens are ignored."""
        self._subscriptions.get(token.kind, {}).pop(token.id, None)

    def subscriber_count(self, kind: MessageKind) -> int:
        return len(self._subscriptions.get(kind, {}))

    def publish(self, message: Message) -> None:
        """
        Deliver a message to every current subscriber of its kind.

        Handlers subscribed while the message is being delivered do not
        receive it; handlers unsubscribed meanwhile are skipped.
        """
        handlers = self._subscriptions.get(message.kind, {})
        pending: List[int] = list(handlers)

        logger.debug(f"{'  ' * self._depth}publish {type(message).__name__} -> {len(pending)} handler(s)")

        self._depth += 1
        try:
            for handler_id in pending:
                handler = handlers.get(handler_id)
                if handler is not None:
                    handler(message)
        finally:
            self._depth -= 1

    def clear(self) -> None:
        """Drop every subscription."""
        self._subscriptions.clear()

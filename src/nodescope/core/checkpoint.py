"""
Diagram Checkpoint - Single-level save/restore of the live diagram.

SaveAll toggles between the live diagram and one saved copy: the first
SaveAll captures, the next one restores the capture and keeps the diagram
it replaced, so a third SaveAll swaps back again. This is an undo toggle,
not persistence; nothing is written to disk.

Each graph context has its own slot, keyed like the context cache. A
capture taken in one context is only ever restored into that context.
"""

import logging
from typing import Dict, Optional

from nodescope.core.diagram import VisualSnapshot
from nodescope.core.handles import GraphContextId

logger = logging.getLogger(__name__)


class DiagramCheckpoint:
    """Holds at most one saved diagram snapshot per graph context."""

    def __init__(self):
        self._saved: Dict[str, VisualSnapshot] = {}

    def has_saved(self, context: GraphContextId) -> bool:
        return context.key in self._saved

    def swap(self, context: GraphContextId, live: VisualSnapshot) -> Optional[VisualSnapshot]:
        """
        Store ``live`` for ``context`` and hand back that context's previous snapshot.

        Returns:
            The snapshot to restore, or None on the first capture in this context
        """
        previous = self._saved.get(context.key)
        self._saved[context.key] = live
        if previous is None:
            logger.debug(f"Checkpoint captured for {context}")
        else:
            logger.debug(f"Checkpoint swapped with live diagram of {context}")
        return previous

    def clear(self) -> None:
        self._saved.clear()

"""
Parameter Editing - Buffered edits of one node's parameters.

A property panel stages textual values while the user types and commits
them all at once. A commit is all-or-nothing: if the engine rejects one
write, the values already written are put back before the error is raised.
"""

import logging
from typing import Dict, List, Optional, Tuple

from nodescope.core.engine import EngineGateway
from nodescope.core.errors import InvalidReferenceError, UnknownParameterError
from nodescope.core.handles import GraphContextId, NodeHandle, NodeTypeDescriptor
from nodescope.core.render_world import RenderWorld
from nodescope.core.session_state import SessionState

logger = logging.getLogger(__name__)


class ParameterEditSession:
    """Pending parameter edits for a single node in the current context."""

    def __init__(self, gateway: EngineGateway, state: SessionState, handle: NodeHandle):
        self._gateway = gateway
        self._state = state
        self._handle = handle
        self._context: GraphContextId = state.current_context
        self._pending: Dict[str, str] = {}

    @property
    def handle(self) -> NodeHandle:
        return self._handle

    @property
    def node_type(self) -> Optional[NodeTypeDescriptor]:
        return self._state.type_by_name.get(self._handle.type_name)

    @property
    def pending(self) -> Dict[str, str]:
        """Staged values not yet written to the engine."""
        return dict(self._pending)

    @property
    def is_dirty(self) -> bool:
        return bool(self._pending)

    def value(self, name: str) -> str:
        """Get the staged value of a parameter, or the engine's if none is staged."""
        if name in self._pending:
            return self._pending[name]
        return self._gateway.get_parameter(self._context, self._handle, name)

    def stage(self, name: str, text: str) -> None:
        """
        Buffer a new value for a parameter.

        Only the parameter name is checked here; the engine judges the value
        on commit.

        Raises:
            UnknownParameterError: If the node type has no such parameter
        """
        node_type = self.node_type
        if node_type is None or node_type.parameter(name) is None:
            raise UnknownParameterError(self._handle.type_name, name)
        self._pending[name] = text

    def discard(self) -> None:
        self._pending.clear()

    def commit(self) -> Optional[RenderWorld]:
        """
        Write every staged value, then re-evaluate if the node can run.

        Returns:
            The new render result, or None if evaluation was skipped (inputs
            unsatisfied, or the editor has since left this node's context)
            or had nothing to show

        Raises:
            InvalidReferenceError: If the engine rejects a write; earlier
                writes of this commit are rolled back first
        """
        if not self._pending:
            return None

        written: List[Tuple[str, str]] = []
        try:
            for name, text in self._pending.items():
                old = self._gateway.get_parameter(self._context, self._handle, name)
                self._gateway.set_parameter(self._context, self._handle, name, text)
                written.append((name, old))
        except InvalidReferenceError:
            self._rollback(written)
            raise

        logger.info(f"Committed {len(written)} parameter(s) on {self._handle}")
        self._pending.clear()

        # The render result belongs to the current context only
        if self._context != self._state.current_context:
            logger.debug(f"{self._context} is no longer current, skipping evaluation")
            return None

        if not self._gateway.is_input_satisfied(self._context, self._handle):
            logger.debug(f"Inputs of {self._handle} not satisfied, skipping evaluation")
            return None

        world = self._gateway.run_processors(self._context)
        if world is not None:
            self._state.render_result = world
        return world

    def _rollback(self, written: List[Tuple[str, str]]) -> None:
        for name, old in reversed(written):
            try:
                self._gateway.set_parameter(self._context, self._handle, name, old)
            except InvalidReferenceError as e:
                logger.error(f"Failed to restore {self._handle}.{name}: {e}")
        if written:
            logger.warning(f"Rolled back {len(written)} parameter write(s) on {self._handle}")

"""
NodeScope Core - The central orchestrator.

Wires the event bus, session state, navigator, command handlers and
breadcrumb trail around one processing engine and one diagram, and is the
single entry point widgets use to send messages.
"""

import logging
from typing import Callable, List, Optional

from nodescope.core.breadcrumbs import BreadcrumbTrail
from nodescope.core.checkpoint import DiagramCheckpoint
from nodescope.core.config import EditorConfig, get_config
from nodescope.core.diagram import DiagramModel
from nodescope.core.engine import EngineGateway, ProcessingEngine
from nodescope.core.errors import EditorError
from nodescope.core.event_bus import EventBus
from nodescope.core.handlers import CommandHandlers
from nodescope.core.handles import NodeHandle
from nodescope.core.messages import Message
from nodescope.core.navigation import ContextCache, GraphNavigator
from nodescope.core.parameters import ParameterEditSession
from nodescope.core.session_state import SessionState

logger = logging.getLogger(__name__)


class EditorCore:
    """
    Central orchestrator for NodeScope.

    Responsibilities:
    - Load the node-type catalog and root context once the engine is ready
    - Subscribe navigator, handlers and breadcrumbs in a fixed order
    - Dispatch messages and report command errors without ending the session
    """

    def __init__(
        self,
        engine: ProcessingEngine,
        diagram: DiagramModel,
        config: Optional[EditorConfig] = None,
    ):
        """
        Initialize the editor core.

        Args:
            engine: The processing engine binding
            diagram: The live visual model
            config: Editor configuration, the global one if omitted
        """
        self._config = config or get_config()
        self._gateway = EngineGateway(engine)
        self._diagram = diagram
        self._bus = EventBus()
        self._state = SessionState()
        self._cache = ContextCache()
        self._checkpoint = DiagramCheckpoint()

        self._navigator = GraphNavigator(
            self._bus, self._state, self._gateway, self._diagram, self._cache
        )
        self._handlers = CommandHandlers(
            self._bus,
            self._state,
            self._gateway,
            self._diagram,
            self._config.diagram,
            self._checkpoint,
        )
        self._breadcrumbs = BreadcrumbTrail(
            self._bus, self._gateway, self._config.navigation.root_label
        )

        self._initialized = False
        self._error_callbacks: List[Callable[[Message, EditorError], None]] = []

    @property
    def bus(self) -> EventBus:
        return self._bus

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def gateway(self) -> EngineGateway:
        return self._gateway

    @property
    def diagram(self) -> DiagramModel:
        return self._diagram

    @property
    def navigator(self) -> GraphNavigator:
        return self._navigator

    @property
    def handlers(self) -> CommandHandlers:
        return self._handlers

    @property
    def breadcrumbs(self) -> BreadcrumbTrail:
        return self._breadcrumbs

    @property
    def config(self) -> EditorConfig:
        return self._config

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def on_error(self, callback: Callable[[Message, EditorError], None]) -> None:
        """Register callback for command errors."""
        self._error_callbacks.append(callback)

    def _notify_error(self, message: Message, error: EditorError) -> None:
        for callback in self._error_callbacks:
            try:
                callback(message, error)
            except Exception as e:
                logger.error(f"Error callback error: {e}")

    def initialize(self) -> None:
        """Load the engine catalog and start listening for messages."""
        if self._initialized:
            return

        node_types = self._gateway.node_types()
        root = self._gateway.root_context()
        self._state.init(node_types, root)
        self._diagram.deserialize(self._diagram.empty_snapshot())

        self._navigator.attach()
        self._handlers.attach()
        self._breadcrumbs.attach()

        self._initialized = True
        logger.info(f"Editor core initialized at {root} with {len(node_types)} node types")

    def dispatch(self, message: Message) -> bool:
        """
        Publish a message on the bus.

        Returns:
            True if every handler completed, False if one raised an
            EditorError (already logged and reported to on_error callbacks)
        """
        if not self._initialized:
            raise RuntimeError("Editor core not initialized")
        try:
            self._bus.publish(message)
        except EditorError as e:
            logger.error(f"{type(message).__name__} failed: {e}")
            self._notify_error(message, e)
            return False
        return True

    def edit_parameters(self, handle: NodeHandle) -> ParameterEditSession:
        """Open a parameter edit session for a node in the current context."""
        return ParameterEditSession(self._gateway, self._state, handle)

    def shutdown(self) -> None:
        """Detach everything and reset session state."""
        if not self._initialized:
            return
        self._breadcrumbs.detach()
        self._handlers.detach()
        self._navigator.detach()
        self._bus.clear()
        self._cache.clear()
        self._checkpoint.clear()
        self._state.teardown()
        self._initialized = False
        logger.info("Editor core shut down")

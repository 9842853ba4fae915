"""
NodeScope Test Configuration and Fixtures.

Provides shared fixtures for unit and integration tests.
"""

import tempfile
from pathlib import Path
from typing import Any, List
from unittest.mock import MagicMock

import pytest

from nodescope.core.config import EditorConfig
from nodescope.core.diagram import InMemoryDiagram
from nodescope.core.editor_core import EditorCore
from nodescope.core.engine import EngineGateway
from nodescope.core.event_bus import EventBus
from nodescope.core.handles import GraphContextId, InputArity, NodeHandle, NodeTypeDescriptor, ParameterDescriptor
from nodescope.core.messages import CreateNode
from nodescope.core.mock_engine import InMemoryEngine
from nodescope.core.session_state import SessionState
from nodescope.core.types import MessageKind, ParameterKind

# =============================================================================
# Temporary Directory Fixtures
# =============================================================================

@pytest.fixture
def temp_dir():
    """Provide a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


# =============================================================================
# Engine Fixtures
# =============================================================================

@pytest.fixture
def engine():
    """Provide a fresh in-memory engine with the default catalog."""
    return InMemoryEngine()


@pytest.fixture
def gateway(engine):
    """Provide a gateway over the in-memory engine."""
    return EngineGateway(engine)


@pytest.fixture
def mock_engine():
    """Provide a MagicMock engine with a two-type catalog and a root path."""
    engine = MagicMock()
    engine.get_root_path = MagicMock(return_value="root-path")
    engine.hash_graph_path = MagicMock(side_effect=lambda path: f"hash:{path}")
    engine.get_graph_path = MagicMock(side_effect=lambda parent, handle: f"{parent}/{handle}")
    engine.get_node_types = MagicMock(return_value=[
        {"name": "Empty", "input_type": {"type": "Slotted", "number_of_slots": 0}, "parameters": []},
        {"name": "Circle", "input_type": {"type": "Slotted", "number_of_slots": 0}, "parameters": [
            {"param_name": "radius", "param_type": "f32"},
        ]},
    ])
    engine.add_processor_node = MagicMock(return_value=7)
    engine.is_node_subgraph_processor = MagicMock(return_value=False)
    engine.run_processors = MagicMock(return_value="No result")
    engine.is_input_satisfied = MagicMock(return_value=True)
    return engine


# =============================================================================
# Editor Fixtures
# =============================================================================

@pytest.fixture
def bus():
    """Provide an empty event bus."""
    return EventBus()


@pytest.fixture
def diagram():
    """Provide an empty headless diagram."""
    return InMemoryDiagram()


@pytest.fixture
def root_context():
    return GraphContextId(key="r", path="root-path")


@pytest.fixture
def sample_node_types() -> List[NodeTypeDescriptor]:
    """Provide a small catalog covering both input arities."""
    return [
        NodeTypeDescriptor("Empty"),
        NodeTypeDescriptor("Circle", parameters=(
            ParameterDescriptor("radius", ParameterKind.FLOAT),
        )),
        NodeTypeDescriptor("Translate", InputArity.slotted(1), (
            ParameterDescriptor("offset", ParameterKind.POSITION),
        )),
        NodeTypeDescriptor("Merge", InputArity.multiple(zero_allowed=False)),
    ]


@pytest.fixture
def state(sample_node_types, root_context):
    """Provide initialized session state."""
    session = SessionState()
    session.init(sample_node_types, root_context)
    return session


@pytest.fixture
def config(temp_dir):
    """Provide a configuration that writes under the temporary directory."""
    editor_config = EditorConfig()
    editor_config.paths.user_config_dir = temp_dir
    return editor_config


@pytest.fixture
def core(engine, diagram, config):
    """Provide an initialized editor core over the in-memory engine."""
    editor = EditorCore(engine, diagram, config)
    editor.initialize()
    yield editor
    editor.shutdown()


@pytest.fixture
def recorder(core):
    """Record every message published on the core's bus, in order."""
    published: List[Any] = []
    for kind in MessageKind:
        core.bus.subscribe(kind, published.append)
    return published


@pytest.fixture
def create(core):
    """Provide a factory that dispatches CreateNode and returns the new handle."""
    created: List[NodeHandle] = []
    core.bus.subscribe(MessageKind.NODE_CREATED, lambda message: created.append(message.handle))

    def _create(type_name: str) -> NodeHandle:
        assert core.dispatch(CreateNode(type_name))
        return created[-1]

    return _create


# =============================================================================
# PyQt Fixtures (for GUI tests)
# =============================================================================

@pytest.fixture
def qtbot_or_skip(request):
    """
    Provide qtbot if pytest-qt is available, otherwise skip test.

    Usage:
        def test_gui_thing(qtbot_or_skip):
            if qtbot_or_skip is None:
                pytest.skip("pytest-qt not available")
            # ... rest of test
    """
    import importlib.util
    if importlib.util.find_spec("pytestqt") is None:
        return None
    try:
        return request.getfixturevalue('qtbot')
    except Exception:
        return None

"""
Tests for nodescope.core.navigation module.

Tests the context cache and the enter/descend/navigate transitions.
"""

import pytest

from nodescope.core.errors import InvalidReferenceError, UnknownNavigationTargetError
from nodescope.core.handles import GraphContextId, NodeHandle
from nodescope.core.messages import ROOT, SetOutputNode, SwitchedToSubgraph, SwitchToGraphPath, SwitchToSubgraph
from nodescope.core.navigation import ContextCache, ContextEntry, GraphNavigator
from nodescope.core.session_state import SessionState
from nodescope.core.types import MessageKind


@pytest.fixture
def nav_state(gateway):
    session = SessionState()
    session.init(gateway.node_types(), gateway.root_context())
    return session


@pytest.fixture
def published(bus):
    messages = []
    bus.subscribe(MessageKind.SET_OUTPUT_NODE, messages.append)
    bus.subscribe(MessageKind.SWITCHED_TO_SUBGRAPH, messages.append)
    return messages


@pytest.fixture
def navigator(bus, nav_state, gateway, diagram, published):
    nav = GraphNavigator(bus, nav_state, gateway, diagram)
    nav.attach()
    return nav


def _subgraph_node(gateway, state, diagram):
    handle = gateway.add_node(state.current_context, "Subgraph")
    diagram.add_node(handle, state.type_by_name["Subgraph"], True, 0, 0)
    return handle


class TestContextCache:
    """Tests for ContextCache."""

    def test_store_and_get(self):
        cache = ContextCache()
        context = GraphContextId("r/1.0", path="a")
        entry = ContextEntry(context, None, {"nodes": [], "links": []})

        cache.store(entry)

        assert context in cache
        assert len(cache) == 1
        assert cache.get(GraphContextId("r/1.0", path="b")) is entry

    def test_one_entry_per_key(self):
        cache = ContextCache()
        context = GraphContextId("r")

        cache.store(ContextEntry(context, None, "first"))
        cache.store(ContextEntry(context, NodeHandle(1), "second"))

        assert len(cache) == 1
        assert cache.get(context).snapshot == "second"

    def test_missing(self):
        cache = ContextCache()

        assert cache.get(GraphContextId("r")) is None
        assert GraphContextId("r") not in cache

    def test_iter_and_clear(self):
        cache = ContextCache()
        cache.store(ContextEntry(GraphContextId("r"), None, None))
        cache.store(ContextEntry(GraphContextId("r/0.0"), None, None))

        assert [e.context.key for e in cache] == ["r", "r/0.0"]
        cache.clear()
        assert len(cache) == 0


class TestDescend:
    """Tests for GraphNavigator.descend()."""

    def test_first_visit_starts_empty(self, navigator, nav_state, gateway, diagram, published):
        child = _subgraph_node(gateway, nav_state, diagram)

        entry = navigator.descend(child)

        assert nav_state.current_context.key == "r/0.0"
        assert entry.output_node is None
        assert diagram.nodes == {}
        assert published[0] == SetOutputNode(None)

    def test_leaving_stores_snapshot_and_output(self, navigator, nav_state, gateway, diagram):
        child = _subgraph_node(gateway, nav_state, diagram)
        nav_state.output_node = child
        root = nav_state.current_context

        navigator.descend(child)

        stored = navigator.cache.get(root)
        assert stored.output_node == child
        assert [n.handle for n in stored.snapshot["nodes"]] == [child]

    def test_publishes_switched_after_set_output(self, navigator, nav_state, gateway, diagram, published):
        child = _subgraph_node(gateway, nav_state, diagram)
        root = nav_state.current_context

        navigator.descend(child)

        assert [type(m) for m in published] == [SetOutputNode, SwitchedToSubgraph]
        switched = published[1]
        assert switched.parent_context == root
        assert switched.context == nav_state.current_context
        assert switched.display_label == "Subgraph"

    def test_clears_selection_and_repaints(self, navigator, nav_state, gateway, diagram):
        child = _subgraph_node(gateway, nav_state, diagram)
        nav_state.selected_node = child
        repaints = diagram.repaint_count

        navigator.descend(child)

        assert nav_state.selected_node is None
        assert diagram.repaint_count > repaints

    def test_ordinary_node_rejected(self, navigator, nav_state, gateway, diagram):
        handle = gateway.add_node(nav_state.current_context, "Circle")
        root = nav_state.current_context

        with pytest.raises(InvalidReferenceError):
            navigator.descend(handle)

        assert nav_state.current_context == root
        assert len(navigator.cache) == 0

    def test_handles_switch_to_subgraph_message(self, bus, navigator, nav_state, gateway, diagram):
        child = _subgraph_node(gateway, nav_state, diagram)

        bus.publish(SwitchToSubgraph(child))

        assert nav_state.current_context.key == "r/0.0"


class TestNavigateTo:
    """Tests for GraphNavigator.navigate_to()."""

    def test_round_trip_restores_snapshot(self, navigator, nav_state, gateway, diagram):
        """Test re-entering a context restores the snapshot from its last exit."""
        child = _subgraph_node(gateway, nav_state, diagram)
        nav_state.output_node = child
        navigator.descend(child)
        sub = nav_state.current_context
        inner = gateway.add_node(sub, "Circle")
        diagram.add_node(inner, nav_state.type_by_name["Circle"], False, 10, 20)

        navigator.navigate_to(ROOT)

        assert list(diagram.nodes) == [child]
        assert nav_state.current_context.key == "r"

        navigator.navigate_to(sub)

        assert list(diagram.nodes) == [inner]
        assert diagram.get_node(inner).x == 10

    def test_restores_output_node(self, navigator, nav_state, gateway, diagram, published):
        child = _subgraph_node(gateway, nav_state, diagram)
        nav_state.output_node = child
        navigator.descend(child)
        published.clear()

        navigator.navigate_to(ROOT)

        assert published == [SetOutputNode(child)]

    def test_unknown_target_raises_before_mutation(self, navigator, nav_state, diagram):
        root = nav_state.current_context
        snapshot = diagram.serialize()

        with pytest.raises(UnknownNavigationTargetError) as exc_info:
            navigator.navigate_to(GraphContextId("r/5.0"))

        assert exc_info.value.context_key == "r/5.0"
        assert nav_state.current_context == root
        assert len(navigator.cache) == 0
        assert diagram.serialize() == snapshot

    def test_navigate_to_current_context(self, navigator, nav_state):
        root = nav_state.current_context

        navigator.navigate_to(root)

        assert nav_state.current_context == root
        assert root in navigator.cache

    def test_handles_switch_to_graph_path_message(self, bus, navigator, nav_state, gateway, diagram):
        child = _subgraph_node(gateway, nav_state, diagram)
        navigator.descend(child)

        bus.publish(SwitchToGraphPath(ROOT))

        assert nav_state.current_context.key == "r"

    def test_same_hash_shares_entry(self, navigator, nav_state, gateway, diagram):
        """Test two routes to the same nested graph share one cache entry."""
        child = _subgraph_node(gateway, nav_state, diagram)
        navigator.descend(child)
        inner = gateway.add_node(nav_state.current_context, "Circle")
        diagram.add_node(inner, nav_state.type_by_name["Circle"], False, 0, 0)
        navigator.navigate_to(ROOT)

        # A second route: descend again from the root through the same node
        navigator.descend(NodeHandle(child.raw))

        assert list(diagram.nodes) == [inner]
        assert len(navigator.cache) == 2


def test_detach(bus, navigator):
    navigator.detach()

    assert bus.subscriber_count(MessageKind.SWITCH_TO_SUBGRAPH) == 0
    assert bus.subscriber_count(MessageKind.SWITCH_TO_GRAPH_PATH) == 0

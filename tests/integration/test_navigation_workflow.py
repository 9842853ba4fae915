"""
Integration tests for editing and navigation workflows.

Tests complete sessions that create nodes, descend into subgraphs and come
back, driving the editor core only through messages.
"""

from unittest.mock import MagicMock

from nodescope.core.diagram import InMemoryDiagram
from nodescope.core.editor_core import EditorCore
from nodescope.core.handles import GraphContextId
from nodescope.core.messages import (
    ROOT,
    CreateLink,
    CreateNode,
    DeleteNode,
    MoveLevelUp,
    NodeCreated,
    SetOutputNode,
    SubgraphNodeSelected,
    SwitchedToSubgraph,
    SwitchToGraphPath,
)
from nodescope.core.types import MessageKind


class TestCatalogWorkflow:
    """Create and delete against a minimal mocked engine."""

    def test_create_then_delete(self, mock_engine, config):
        """Test catalog [Empty, Circle]: create a Circle, then delete it."""
        diagram = InMemoryDiagram()
        core = EditorCore(mock_engine, diagram, config)
        core.initialize()
        published = []
        for kind in MessageKind:
            core.bus.subscribe(kind, published.append)

        # 1. Create
        assert core.dispatch(CreateNode("Circle"))
        created = [m for m in published if isinstance(m, NodeCreated)]
        assert len(created) == 1
        handle = created[0].handle
        mock_engine.add_processor_node.assert_called_once_with("root-path", "Circle")
        node = diagram.get_node(handle)
        assert (node.x, node.y) == (config.diagram.default_node_x, config.diagram.default_node_y)

        # 2. Delete, nothing further is published
        published.clear()
        assert core.dispatch(DeleteNode(handle))
        mock_engine.remove_node.assert_called_once_with("root-path", 7)
        assert diagram.get_node(handle) is None
        assert published == [DeleteNode(handle)]

        core.shutdown()

    def test_engine_never_asked_to_run_without_output(self, mock_engine, config):
        core = EditorCore(mock_engine, InMemoryDiagram(), config)
        core.initialize()

        core.dispatch(SetOutputNode(None))

        mock_engine.run_processors.assert_not_called()
        mock_engine.set_output_node.assert_not_called()


class TestNestedGraphWorkflow:
    """Descend into subgraphs and back with the in-memory engine."""

    def test_output_and_render_restored_on_return(self, core, create):
        """Test context A keeps output X and world W across a visit to B."""
        # 1. Context A: output X with world W
        x = create("Circle")
        core.dispatch(SetOutputNode(x))
        world_a = core.state.render_result
        assert len(world_a.points) == 8

        # 2. Descend into B
        sub = create("Subgraph")
        core.dispatch(SubgraphNodeSelected(sub))
        assert core.state.output_node is None
        assert core.diagram.nodes == {}

        # 3. In B create Y and make it the output (world W2)
        y = create("Rectangle")
        core.dispatch(SetOutputNode(y))
        world_b = core.state.render_result
        assert len(world_b.points) == 4

        # 4. Back to A
        outputs = []
        core.bus.subscribe(MessageKind.SET_OUTPUT_NODE, lambda m: outputs.append(m.node))
        core.dispatch(SwitchToGraphPath(ROOT))

        assert outputs == [x]
        assert core.state.output_node == x
        assert core.state.render_result == world_a
        assert set(core.diagram.nodes) == {x, sub}
        assert core.diagram.get_node(x).is_output

    def test_nested_output_feeds_parent(self, core, create):
        sub = create("Subgraph")
        core.dispatch(SetOutputNode(sub))
        assert core.state.render_result is None

        core.dispatch(SubgraphNodeSelected(sub))
        rect = create("Rectangle")
        translate = create("Translate")
        assert core.dispatch(CreateLink(rect, translate, 0))
        core.dispatch(SetOutputNode(translate))
        core.dispatch(MoveLevelUp())

        # The subgraph node is the root output again and now has geometry
        assert core.state.output_node == sub
        assert len(core.state.render_result.points) == 4

    def test_deep_navigation_and_breadcrumbs(self, core, create, recorder):
        labels = []
        core.breadcrumbs.on_change(lambda crumbs: labels.append(core.breadcrumbs.render("/")))

        outer = create("Subgraph")
        core.dispatch(SubgraphNodeSelected(outer))
        level_one = core.state.current_context
        inner = create("Subgraph")
        core.dispatch(SubgraphNodeSelected(inner))
        level_two = core.state.current_context
        create("Circle")

        switched = [m for m in recorder if isinstance(m, SwitchedToSubgraph)]
        assert [(m.parent_context.key, m.context.key) for m in switched] == [
            ("r", level_one.key),
            (level_one.key, level_two.key),
        ]

        core.breadcrumbs.select(1)
        assert core.state.current_context == level_one
        assert list(core.diagram.nodes) == [inner]

        # Re-descend: the nested level keeps its circle
        core.dispatch(SubgraphNodeSelected(inner))
        assert [n.type_name for n in core.diagram.nodes.values()] == ["Circle"]

        assert labels == [
            "Root/Subgraph",
            "Root/Subgraph/Subgraph",
            "Root/Subgraph",
            "Root/Subgraph/Subgraph",
        ]

    def test_errors_do_not_end_the_session(self, core, create):
        errors = MagicMock()
        core.on_error(errors)

        assert not core.dispatch(CreateNode("Teapot"))
        assert not core.dispatch(SwitchToGraphPath(GraphContextId("r/7.7")))

        handle = create("Circle")
        assert core.dispatch(SetOutputNode(handle))
        assert errors.call_count == 2

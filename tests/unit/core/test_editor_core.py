"""
Tests for nodescope.core.editor_core module.

Tests lifecycle and error reporting of the composition root.
"""

import pytest

from nodescope.core.config import set_config
from nodescope.core.editor_core import EditorCore
from nodescope.core.errors import SessionNotInitializedError, UnknownNodeTypeError
from nodescope.core.messages import CreateNode, SaveAll
from nodescope.core.types import MessageKind


class TestInitialize:
    """Tests for EditorCore.initialize()."""

    def test_loads_catalog_and_root(self, core):
        assert core.is_initialized
        assert core.state.current_context.key == "r"
        assert "Circle" in core.state.type_by_name

    def test_initialize_twice_is_noop(self, core):
        core.initialize()

        assert core.bus.subscriber_count(MessageKind.CREATE_NODE) == 1

    def test_dispatch_before_initialize(self, engine, diagram, config):
        editor = EditorCore(engine, diagram, config)

        with pytest.raises(RuntimeError):
            editor.dispatch(SaveAll())

    def test_uses_global_config_when_omitted(self, engine, diagram, config):
        set_config(config)

        assert EditorCore(engine, diagram).config is config


class TestDispatch:
    """Tests for EditorCore.dispatch()."""

    def test_success(self, core):
        assert core.dispatch(CreateNode("Empty"))

    def test_error_reported_and_session_continues(self, core):
        reported = []
        core.on_error(lambda message, error: reported.append((message, error)))

        assert not core.dispatch(CreateNode("Teapot"))
        assert core.dispatch(CreateNode("Empty"))

        message, error = reported[0]
        assert message == CreateNode("Teapot")
        assert isinstance(error, UnknownNodeTypeError)

    def test_failing_error_callback_is_contained(self, core):
        def failing(message, error):
            raise RuntimeError("callback failure")

        core.on_error(failing)

        assert not core.dispatch(CreateNode("Teapot"))

    def test_non_editor_errors_propagate(self, core):
        def failing(message):
            raise RuntimeError("bug")

        core.bus.subscribe(MessageKind.SAVE_ALL, failing)

        with pytest.raises(RuntimeError, match="bug"):
            core.dispatch(SaveAll())


class TestShutdown:
    """Tests for EditorCore.shutdown()."""

    def test_shutdown(self, engine, diagram, config):
        editor = EditorCore(engine, diagram, config)
        editor.initialize()

        editor.shutdown()

        assert not editor.is_initialized
        assert editor.bus.subscriber_count(MessageKind.CREATE_NODE) == 0
        assert len(editor.navigator.cache) == 0
        with pytest.raises(SessionNotInitializedError):
            _ = editor.state.current_context

    def test_shutdown_twice(self, engine, diagram, config):
        editor = EditorCore(engine, diagram, config)
        editor.initialize()

        editor.shutdown()
        editor.shutdown()

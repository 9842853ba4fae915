"""
Tests for nodescope.core.types module.

Tests the shared enums and their conversions.
"""

import pytest

from nodescope.core.types import InputArityKind, MessageKind, ParameterKind


class TestParameterKind:
    """Tests for ParameterKind enum."""

    def test_engine_names(self):
        """Test values match the engine's catalog names."""
        assert ParameterKind.BOOLEAN.value == "bool"
        assert ParameterKind.FLOAT.value == "f32"
        assert ParameterKind.UNSIGNED_INT.value == "u32"
        assert ParameterKind.SIGNED_INT.value == "i32"
        assert ParameterKind.STRING.value == "String"
        assert ParameterKind.POSITION.value == "Position"
        assert ParameterKind.POSITION_LIST.value == "PositionList"

    def test_from_string(self):
        """Test conversion from engine names."""
        assert ParameterKind.from_string("f32") == ParameterKind.FLOAT
        assert ParameterKind.from_string("PositionList") == ParameterKind.POSITION_LIST

    def test_from_string_invalid(self):
        """Test unknown names raise ValueError."""
        with pytest.raises(ValueError, match="Unknown parameter kind"):
            ParameterKind.from_string("f64")

    def test_from_string_safe(self):
        """Test safe conversion returns None for unknown names."""
        assert ParameterKind.from_string_safe("u32") == ParameterKind.UNSIGNED_INT
        assert ParameterKind.from_string_safe("Color") is None

    def test_is_numeric(self):
        assert ParameterKind.FLOAT.is_numeric
        assert ParameterKind.SIGNED_INT.is_numeric
        assert not ParameterKind.POSITION.is_numeric
        assert not ParameterKind.BOOLEAN.is_numeric


class TestInputArityKind:
    """Tests for InputArityKind enum."""

    def test_from_string(self):
        assert InputArityKind.from_string("Slotted") == InputArityKind.SLOTTED
        assert InputArityKind.from_string("Multiple") == InputArityKind.MULTIPLE

    def test_from_string_invalid(self):
        with pytest.raises(ValueError):
            InputArityKind.from_string("Variadic")


class TestMessageKind:
    """Tests for MessageKind enum."""

    def test_closed_set(self):
        """Test every message kind of the editor is present."""
        assert len(MessageKind) == 14

    def test_notifications(self):
        """Test only completed-event kinds are notifications."""
        notifications = {k for k in MessageKind if k.is_notification}
        assert notifications == {MessageKind.NODE_CREATED, MessageKind.SWITCHED_TO_SUBGRAPH}

    def test_navigation(self):
        navigation = {k for k in MessageKind if k.is_navigation}
        assert navigation == {MessageKind.SWITCH_TO_SUBGRAPH, MessageKind.SWITCH_TO_GRAPH_PATH}

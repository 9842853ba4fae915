"""
Centralized Type Definitions for NodeScope.

This module provides the enums shared by the editor core: parameter kinds
as the engine names them, input arity of node types, and the closed set of
message kinds carried on the event bus.
"""

from enum import Enum, auto


class ParameterKind(Enum):
    """
    Primitive kind of a node parameter.

    Values are the names the processing engine uses in its node-type catalog.
    """
    BOOLEAN = "bool"
    FLOAT = "f32"
    UNSIGNED_INT = "u32"
    SIGNED_INT = "i32"
    STRING = "String"
    POSITION = "Position"
    POSITION_LIST = "PositionList"

    @classmethod
    def from_string(cls, type_str: str) -> "ParameterKind":
        """
        Convert an engine type name to ParameterKind.

        Args:
            type_str: The engine's parameter type name (e.g., "f32", "Position")

        Returns:
            Corresponding ParameterKind enum value

        Raises:
            ValueError: If the string doesn't match any known parameter kind
        """
        for member in cls:
            if member.value == type_str:
                return member

        raise ValueError(f"Unknown parameter kind: {type_str}")

    @classmethod
    def from_string_safe(cls, type_str: str) -> "ParameterKind | None":
        """Convert an engine type name to ParameterKind, returning None if not found."""
        try:
            return cls.from_string(type_str)
        except ValueError:
            return None

    @property
    def is_numeric(self) -> bool:
        """Whether values of this kind are a single number."""
        return self in (
            ParameterKind.FLOAT,
            ParameterKind.UNSIGNED_INT,
            ParameterKind.SIGNED_INT,
        )


class InputArityKind(Enum):
    """How a node type accepts incoming links."""
    SLOTTED = "Slotted"    # Fixed number of ordered slots, one link each
    MULTIPLE = "Multiple"  # Any number of unordered links on one port

    @classmethod
    def from_string(cls, type_str: str) -> "InputArityKind":
        """
        Convert an engine input type name to InputArityKind.

        Raises:
            ValueError: If the string doesn't match any known arity
        """
        for member in cls:
            if member.value == type_str:
                return member

        raise ValueError(f"Unknown input type: {type_str}")


class MessageKind(Enum):
    """
    Enumeration of every message carried by the event bus.

    The set is closed: handler registration is checked against it.
    """
    CREATE_NODE = auto()
    NODE_CREATED = auto()
    DELETE_NODE = auto()
    CREATE_LINK = auto()
    DELETE_LINK = auto()
    SAVE_ALL = auto()
    SET_OUTPUT_NODE = auto()
    NODE_SELECTED = auto()
    SUBGRAPH_NODE_SELECTED = auto()
    MOVE_LEVEL_UP = auto()
    RUN_PROCESSORS = auto()
    SWITCH_TO_SUBGRAPH = auto()
    SWITCHED_TO_SUBGRAPH = auto()
    SWITCH_TO_GRAPH_PATH = auto()

    @property
    def is_notification(self) -> bool:
        """Whether this kind only reports something that already happened."""
        return self in (MessageKind.NODE_CREATED, MessageKind.SWITCHED_TO_SUBGRAPH)

    @property
    def is_navigation(self) -> bool:
        """Whether this kind requests a graph context switch."""
        return self in (MessageKind.SWITCH_TO_SUBGRAPH, MessageKind.SWITCH_TO_GRAPH_PATH)

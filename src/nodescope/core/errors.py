"""
Editor Errors - Exceptions raised by the NodeScope core.

Every error is local to the single command that raised it; none of them
invalidate the editing session.
"""

from typing import Any, Optional


class EditorError(Exception):
    """Base class for all editor core errors."""


class EngineError(EditorError):
    """Raised by a processing engine when it rejects a call."""

    def __init__(self, operation: str, reason: str = "UnknownError"):
        self.operation = operation
        self.reason = reason
        super().__init__(f"Engine rejected '{operation}': {reason}")


class InvalidReferenceError(EditorError):
    """Raised when a command references a stale or removed node handle."""

    def __init__(self, operation: str, handle: Any, reason: str = ""):
        self.operation = operation
        self.handle = handle
        self.reason = reason
        message = f"Invalid node reference {handle!r} in '{operation}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class UnknownNavigationTargetError(EditorError):
    """Raised when navigating to a graph context that was never entered."""

    def __init__(self, context_key: str):
        self.context_key = context_key
        super().__init__(f"Graph context '{context_key}' has never been entered")


class UnknownNodeTypeError(EditorError):
    """Raised when creating a node whose type is not in the catalog."""

    def __init__(self, type_name: str):
        self.type_name = type_name
        super().__init__(f"Unknown node type: {type_name}")


class IncompatibleLinkError(EditorError):
    """Raised when a link does not fit the ports it connects."""

    def __init__(self, from_handle: Any, to_handle: Any, slot: Optional[int], reason: str):
        self.from_handle = from_handle
        self.to_handle = to_handle
        self.slot = slot
        self.reason = reason
        super().__init__(
            f"Cannot link {from_handle!r} -> {to_handle!r} (slot {slot}): {reason}"
        )


class UnknownParameterError(EditorError):
    """Raised when editing a parameter the node type does not declare."""

    def __init__(self, type_name: str, parameter: str):
        self.type_name = type_name
        self.parameter = parameter
        super().__init__(f"Node type '{type_name}' has no parameter '{parameter}'")


class SessionNotInitializedError(EditorError):
    """Raised when session state is read before it was initialized."""

    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__(f"Session state '{field_name}' read before init()")

"""
Handle and Catalog Types - Value types for engine-issued references.

Graph contexts and node handles are opaque objects owned by the processing
engine. The core wraps them in small immutable value types whose equality
comes from the engine's own canonicalization, never from inspecting the
wrapped object.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, Optional, Tuple

from nodescope.core.types import InputArityKind, ParameterKind


@dataclass(frozen=True)
class GraphContextId:
    """
    A graph scope: the root graph or the graph nested in a subgraph node.

    Two contexts are the same if and only if their canonical keys (as
    returned by the engine's ``hash_graph_path``) are equal.
    """
    key: str
    path: Any = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        return self.key


@dataclass(frozen=True)
class NodeHandle:
    """
    Reference to a node instance inside one graph context.

    ``raw`` is the engine-issued handle and must be hashable; ``type_name``
    is carried along for display and does not take part in equality.
    """
    raw: Hashable
    type_name: str = field(default="", compare=False)

    def __str__(self) -> str:
        return f"{self.type_name or 'node'}#{self.raw}"


@dataclass(frozen=True)
class ParameterDescriptor:
    """A named parameter of a node type."""
    name: str
    kind: ParameterKind

    def to_dict(self) -> Dict[str, Any]:
        return {"param_name": self.name, "param_type": self.kind.value}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParameterDescriptor":
        return cls(
            name=data["param_name"],
            kind=ParameterKind.from_string(data["param_type"]),
        )


@dataclass(frozen=True)
class InputArity:
    """Input shape of a node type: fixed slots or a single multi-link port."""
    kind: InputArityKind
    slot_count: int = 0
    zero_allowed: bool = True

    @classmethod
    def slotted(cls, slot_count: int) -> "InputArity":
        return cls(kind=InputArityKind.SLOTTED, slot_count=slot_count, zero_allowed=False)

    @classmethod
    def multiple(cls, zero_allowed: bool = True) -> "InputArity":
        return cls(kind=InputArityKind.MULTIPLE, zero_allowed=zero_allowed)

    def to_dict(self) -> Dict[str, Any]:
        if self.kind == InputArityKind.SLOTTED:
            return {"type": self.kind.value, "number_of_slots": self.slot_count}
        return {"type": self.kind.value, "zero_allowed": self.zero_allowed}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InputArity":
        kind = InputArityKind.from_string(data["type"])
        if kind == InputArityKind.SLOTTED:
            return cls.slotted(int(data.get("number_of_slots", 0)))
        return cls.multiple(bool(data.get("zero_allowed", True)))


@dataclass(frozen=True)
class NodeTypeDescriptor:
    """
    Immutable catalog entry describing one node type.

    The name is the unique key; parameters keep the engine's order, which is
    also the order the property panel shows them in.
    """
    name: str
    input_arity: InputArity = field(default_factory=lambda: InputArity.slotted(0))
    parameters: Tuple[ParameterDescriptor, ...] = ()

    def parameter(self, name: str) -> Optional[ParameterDescriptor]:
        """Get a parameter descriptor by name."""
        for param in self.parameters:
            if param.name == name:
                return param
        return None

    def slot_error(self, slot: Optional[int]) -> Optional[str]:
        """
        Check whether a link may end on this node type at ``slot``.

        Returns:
            None if the link fits the input ports, otherwise the reason
        """
        arity = self.input_arity
        if arity.kind == InputArityKind.SLOTTED:
            if slot is None:
                return "slotted input requires a slot number"
            if not 0 <= slot < arity.slot_count:
                return f"slot {slot} out of range for {arity.slot_count} slot(s)"
            return None
        if slot is not None:
            return "multiple input does not take a slot number"
        return None

    def accepts_link(self, slot: Optional[int]) -> bool:
        """Whether a link may end on this node type at ``slot``."""
        return self.slot_error(slot) is None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "input_type": self.input_arity.to_dict(),
            "parameters": [p.to_dict() for p in self.parameters],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NodeTypeDescriptor":
        return cls(
            name=data["name"],
            input_arity=InputArity.from_dict(data.get("input_type", {"type": "Slotted"})),
            parameters=tuple(
                ParameterDescriptor.from_dict(p) for p in data.get("parameters", [])
            ),
        )

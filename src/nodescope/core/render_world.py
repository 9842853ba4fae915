"""
Render World - Typed view of the geometry produced by graph evaluation.

The engine returns a mapping of shapes (ordered vertex lists referencing
points) and a mapping of points (position plus Bezier tangents).
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, List, Tuple

Position = Tuple[float, float]

# A tangent equal to this value means "no tangent" (a straight segment).
# A real zero-length tangent cannot be told apart from it.
NO_TANGENT: Position = (0.0, 0.0)


def _position(value: Any) -> Position:
    return (float(value[0]), float(value[1]))


@dataclass(frozen=True)
class Point:
    """A point with optional incoming and outgoing tangents."""
    position: Position
    in_tangent: Position = NO_TANGENT
    out_tangent: Position = NO_TANGENT

    @property
    def has_in_tangent(self) -> bool:
        return self.in_tangent != NO_TANGENT

    @property
    def has_out_tangent(self) -> bool:
        return self.out_tangent != NO_TANGENT

    def to_dict(self) -> Dict[str, Any]:
        return {
            "position": list(self.position),
            "in_tangent": list(self.in_tangent),
            "out_tangent": list(self.out_tangent),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Point":
        return cls(
            position=_position(data["position"]),
            in_tangent=_position(data.get("in_tangent", NO_TANGENT)),
            out_tangent=_position(data.get("out_tangent", NO_TANGENT)),
        )


@dataclass(frozen=True)
class Shape:
    """An ordered list of point keys, optionally closed."""
    vertices: Tuple[Hashable, ...] = ()
    closed: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "vertices": [{"index": v} for v in self.vertices],
            "closed": self.closed,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Shape":
        return cls(
            vertices=tuple(v["index"] for v in data.get("vertices", [])),
            closed=bool(data.get("closed", False)),
        )


@dataclass(frozen=True)
class RenderWorld:
    """Evaluated geometry for one output node."""
    shapes: Dict[Hashable, Shape] = field(default_factory=dict)
    points: Dict[Hashable, Point] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.shapes and not self.points

    def shape_points(self, shape_key: Hashable) -> List[Point]:
        """Get the points of a shape in vertex order."""
        shape = self.shapes[shape_key]
        return [self.points[v] for v in shape.vertices]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "shapes": {k: s.to_dict() for k, s in self.shapes.items()},
            "points": {k: p.to_dict() for k, p in self.points.items()},
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RenderWorld":
        return cls(
            shapes={k: Shape.from_dict(v) for k, v in data.get("shapes", {}).items()},
            points={k: Point.from_dict(v) for k, v in data.get("points", {}).items()},
        )

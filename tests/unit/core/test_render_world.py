"""
Tests for nodescope.core.render_world module.

Tests parsing of the engine's render output.
"""

from nodescope.core.render_world import NO_TANGENT, Point, RenderWorld, Shape


def _world_data():
    return {
        "shapes": {
            0: {"vertices": [{"index": 0}, {"index": 1}], "closed": True},
        },
        "points": {
            0: {"position": [0, 0], "in_tangent": [0, 0], "out_tangent": [1, 0]},
            1: {"position": [10, 0], "in_tangent": [-1, 0], "out_tangent": [0, 0]},
        },
    }


class TestPoint:
    """Tests for Point."""

    def test_zero_tangent_means_no_tangent(self):
        point = Point.from_dict({"position": [1, 2], "in_tangent": [0, 0], "out_tangent": [0.5, 0]})

        assert point.position == (1.0, 2.0)
        assert point.in_tangent == NO_TANGENT
        assert not point.has_in_tangent
        assert point.has_out_tangent

    def test_missing_tangents_default(self):
        point = Point.from_dict({"position": [1, 2]})

        assert not point.has_in_tangent
        assert not point.has_out_tangent


class TestShape:
    """Tests for Shape."""

    def test_from_dict(self):
        shape = Shape.from_dict({"vertices": [{"index": 3}, {"index": 4}], "closed": False})

        assert shape.vertices == (3, 4)
        assert shape.closed is False


class TestRenderWorld:
    """Tests for RenderWorld."""

    def test_from_dict(self):
        world = RenderWorld.from_dict(_world_data())

        assert len(world.shapes) == 1
        assert world.shapes[0].closed
        assert [p.position for p in world.shape_points(0)] == [(0.0, 0.0), (10.0, 0.0)]
        assert not world.is_empty

    def test_empty(self):
        assert RenderWorld.from_dict({}).is_empty
        assert RenderWorld().is_empty

    def test_to_dict_keeps_wire_shape(self):
        data = RenderWorld.from_dict(_world_data()).to_dict()

        assert data["shapes"][0]["vertices"] == [{"index": 0}, {"index": 1}]
        assert data["points"][1]["in_tangent"] == [-1.0, 0.0]

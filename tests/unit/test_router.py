"""Unit tests for ManhattanRouter."""

import pytest

from manhattan_router import (
    Anchor,
    AnchorSide,
    Connector,
    Diagram,
    ManhattanRouter,
    parse_diagram,
)
from manhattan_router.errors import SelfConnectionError
from manhattan_router.geometry import DiagramPoint, segments_intersect
from manhattan_router.search import CostPolicy

ALL_POLICIES = [CostPolicy.TURN_PENALTY, CostPolicy.JUMP_POINT]


def enters(shape, a, b):
    """Whether the axis-aligned segment a-b passes through a shape's interior."""
    if a.y == b.y:
        lo, hi = sorted((a.x, b.x))
        return shape.y < a.y < shape.bottom and lo < shape.right and hi > shape.x
    lo, hi = sorted((a.y, b.y))
    return shape.x < a.x < shape.right and lo < shape.bottom and hi > shape.y


def assert_orthogonal(points):
    for a, b in zip(points, points[1:]):
        assert a.x == b.x or a.y == b.y


class TestConfiguration:
    """Tests for router construction."""

    def test_rejects_non_positive_step(self, two_boxes):
        with pytest.raises(ValueError):
            ManhattanRouter(two_boxes, step=0)

    def test_rejects_negative_margin(self, two_boxes):
        with pytest.raises(ValueError):
            ManhattanRouter(two_boxes, margin_cells=-1)

    def test_policy_from_string(self, two_boxes):
        router = ManhattanRouter(two_boxes, policy="jump_point")
        assert router.policy is CostPolicy.JUMP_POINT

    def test_no_trace_outside_debug(self, two_boxes, two_boxes_connector):
        router = ManhattanRouter(two_boxes)
        router.compute_route(two_boxes_connector)
        assert router.get_trace() is None


class TestComputeRoute:
    """Tests for computing single routes."""

    @pytest.mark.parametrize("policy", ALL_POLICIES)
    def test_straight_route(self, two_boxes, two_boxes_connector, policy):
        router = ManhattanRouter(two_boxes, policy=policy)
        points = router.compute_route(two_boxes_connector)
        assert points == [DiagramPoint(40, 120), DiagramPoint(200, 120)]

    def test_compute_does_not_store(self, two_boxes, two_boxes_connector):
        ManhattanRouter(two_boxes).compute_route(two_boxes_connector)
        assert two_boxes_connector.route == []

    def test_route_ends_at_exact_anchors(self, two_boxes):
        connector = two_boxes.connect(
            Anchor("A", AnchorSide.RIGHT, 0.25), Anchor("B", AnchorSide.TOP, 0.25)
        )
        points = ManhattanRouter(two_boxes).compute_route(connector)
        assert points[0] == DiagramPoint(40, 110)
        assert points[-1] == DiagramPoint(210, 100)

    @pytest.mark.parametrize("policy", ALL_POLICIES)
    def test_detours_around_shape(self, two_boxes, two_boxes_connector, policy):
        wall = two_boxes.add_shape("wall", 100, 80, 40, 80)
        points = ManhattanRouter(two_boxes, policy=policy).compute_route(
            two_boxes_connector
        )
        assert points[0] == DiagramPoint(40, 120)
        assert points[-1] == DiagramPoint(200, 120)
        assert len(points) >= 4
        assert not any(wall.contains(p) for p in points)
        assert_orthogonal(points)
        for a, b in zip(points, points[1:]):
            assert not enters(wall, a, b)

    def test_avoids_foreign_connector(self, two_boxes, two_boxes_connector):
        other = two_boxes.connect(
            Anchor("A", AnchorSide.BOTTOM), Anchor("B", AnchorSide.BOTTOM), name="wall"
        )
        two_boxes.set_route(other, [DiagramPoint(110, 50), DiagramPoint(110, 190)])
        points = ManhattanRouter(two_boxes).compute_route(two_boxes_connector)
        assert points[0] == DiagramPoint(40, 120)
        assert points[-1] == DiagramPoint(200, 120)
        for a, b in zip(points, points[1:]):
            assert not segments_intersect(a, b, *other.route)

    def test_own_route_does_not_block(self, two_boxes, two_boxes_connector):
        """Rerouting a connector ignores its previous route."""
        router = ManhattanRouter(two_boxes)
        first = router.route_connector(two_boxes_connector)
        second = router.route_connector(two_boxes_connector)
        assert first.points == second.points


class TestFallbacks:
    """Tests for routes that degrade to a direct line."""

    def test_blocked_endpoint(self, two_boxes, two_boxes_connector):
        two_boxes.add_shape("cover", 50, 100, 40, 40)
        route = ManhattanRouter(two_boxes).route_connector(two_boxes_connector)
        assert route.fallback == "blocked_endpoint"
        assert route.points == [DiagramPoint(40, 120), DiagramPoint(200, 120)]

    def test_unreachable(self):
        diagram = Diagram()
        diagram.add_shape("A", 0, 0, 40, 40)
        diagram.add_shape("B", 100, 0, 40, 40)
        diagram.add_shape("wall", 60, -50, 20, 205)
        connector = diagram.connect(
            Anchor("A", AnchorSide.RIGHT), Anchor("B", AnchorSide.LEFT)
        )
        route = ManhattanRouter(diagram, margin_cells=0).route_connector(connector)
        assert route.fallback == "unreachable"
        assert route.points == [DiagramPoint(40, 20), DiagramPoint(100, 20)]
        assert connector.route == route.points

    def test_found_route_has_no_fallback(self, two_boxes, two_boxes_connector):
        route = ManhattanRouter(two_boxes).route_connector(two_boxes_connector)
        assert route.fallback is None
        assert route.bend_count == 0


class TestSelfConnections:
    """Tests for connectors joining a shape to itself."""

    def test_raises_without_loop_router(self, two_boxes):
        loop = two_boxes.connect(
            Anchor("A", AnchorSide.TOP), Anchor("A", AnchorSide.BOTTOM)
        )
        with pytest.raises(SelfConnectionError):
            ManhattanRouter(two_boxes).compute_route(loop)

    def test_delegates_to_loop_router(self, two_boxes):
        loop = two_boxes.connect(
            Anchor("A", AnchorSide.TOP), Anchor("A", AnchorSide.BOTTOM)
        )
        expected = [DiagramPoint(20, 100), DiagramPoint(20, 80), DiagramPoint(60, 80)]
        router = ManhattanRouter(two_boxes, self_loop_router=lambda c: expected)
        assert router.compute_route(loop) == expected


class TestRouteAll:
    """Tests for routing every connector of a diagram."""

    def test_routes_stored_in_order(self, two_boxes):
        first = two_boxes.connect(
            Anchor("A", AnchorSide.RIGHT), Anchor("B", AnchorSide.LEFT), name="first"
        )
        second = two_boxes.connect(
            Anchor("A", AnchorSide.BOTTOM),
            Anchor("B", AnchorSide.BOTTOM),
            name="second",
        )
        routes = ManhattanRouter(two_boxes).route_all()
        assert list(routes) == ["first", "second"]
        assert first.route == routes["first"].points
        assert second.route == routes["second"].points

    def test_explicit_connector_list(self, two_boxes, two_boxes_connector):
        other = two_boxes.connect(
            Anchor("A", AnchorSide.BOTTOM), Anchor("B", AnchorSide.BOTTOM), name="other"
        )
        routes = ManhattanRouter(two_boxes).route_all([two_boxes_connector])
        assert list(routes) == ["A->B"]
        assert other.route == []

    def test_parallel_connectors_between_same_shapes(self):
        diagram = parse_diagram(
            """
            shape A 0 100 40 40
            shape B 200 100 40 40
            A.right@0.25 -> B.left@0.25
            A.right@0.75 -> B.left@0.75
            """
        )
        routes = ManhattanRouter(diagram).route_all()
        assert list(routes) == ["A->B", "A->B#2"]
        assert routes["A->B"].points == [DiagramPoint(40, 110), DiagramPoint(200, 110)]
        assert routes["A->B#2"].points == [
            DiagramPoint(40, 130),
            DiagramPoint(200, 130),
        ]

    def test_shared_name_rejected(self, two_boxes, two_boxes_connector):
        twin = Connector(
            "A->B", Anchor("A", AnchorSide.BOTTOM), Anchor("B", AnchorSide.BOTTOM)
        )
        with pytest.raises(ValueError, match="not unique"):
            ManhattanRouter(two_boxes).route_all([two_boxes_connector, twin])


class TestDebugTrace:
    """Tests for debug mode."""

    def test_stages_recorded(self, two_boxes, two_boxes_connector):
        router = ManhattanRouter(two_boxes, debug=True)
        router.compute_route(two_boxes_connector)
        trace = router.get_trace()
        assert [s.name for s in trace.stages] == [
            "grid_mapped",
            "searched",
            "simplified",
        ]
        assert trace.connector == "A->B"
        assert trace.policy == "turn_penalty"

    def test_grid_mapped_stage(self, two_boxes, two_boxes_connector):
        router = ManhattanRouter(two_boxes, debug=True)
        router.compute_route(two_boxes_connector)
        data = router.get_trace().get_stage("grid_mapped").data
        assert data["start"] == (6, 12)
        assert data["goal"] == (18, 12)
        assert data["bounds"] == (29, 19)

    def test_searched_stage(self, two_boxes, two_boxes_connector):
        router = ManhattanRouter(two_boxes, debug=True)
        router.compute_route(two_boxes_connector)
        trace = router.get_trace()
        assert trace.get_stage("searched").data["outcome"] == "found"
        grid = trace.get_grid_at_stage("searched")
        assert len(grid) == 20
        assert grid[12][6] == "S"
        assert grid[12][18] == "G"
        assert grid[12][10] == "*"
        assert grid[12][2] == "#"
        assert trace.expansions[-1].reason == "goal_reached"

    def test_simplified_stage(self, two_boxes, two_boxes_connector):
        router = ManhattanRouter(two_boxes, debug=True)
        router.compute_route(two_boxes_connector)
        data = router.get_trace().get_stage("simplified").data
        assert data["points"] == [(40, 120), (200, 120)]
        assert data["bends"] == 0

"""Unit tests for the simplify module."""

import pytest

from manhattan_router.geometry import Cell, DiagramPoint
from manhattan_router.simplify import simplify, simplify_points, square_ends

START = DiagramPoint(3, 4)
END = DiagramPoint(27, 25)


def cells(*coords):
    return [Cell(x, y) for x, y in coords]


def points(*coords):
    return [DiagramPoint(x, y) for x, y in coords]


class TestSimplify:
    """Tests for reducing raw search paths to bend points."""

    def test_single_bend(self):
        raw = cells((2, 2), (1, 2), (0, 2), (0, 1), (0, 0))
        assert simplify(START, raw, END, 10) == [START, DiagramPoint(0, 20), END]

    def test_straight_run(self):
        """A straight path has no bends, only the true anchors."""
        raw = [Cell(x, 0) for x in range(5, -1, -1)]
        assert simplify(START, raw, END, 10) == [START, END]

    def test_bends_in_start_to_goal_order(self):
        raw = cells((2, 2), (2, 1), (1, 1), (1, 0), (0, 0))
        assert simplify(START, raw, END, 10) == [START] + points(
            (10, 0), (10, 10), (20, 10)
        ) + [END]

    def test_fallback_path(self):
        """The two-cell fallback becomes a direct line."""
        assert simplify(START, cells((9, 9), (0, 0)), END, 10) == [START, END]

    def test_single_cell_path(self):
        assert simplify(START, cells((4, 4)), END, 10) == [START, END]

    def test_raw_endpoints_not_emitted(self):
        """Quantised endpoints are replaced by the true anchor points."""
        raw = cells((3, 0), (2, 0), (1, 0))
        result = simplify(START, raw, END, 10)
        assert DiagramPoint(10, 0) not in result
        assert DiagramPoint(30, 0) not in result

    def test_step_scales_bends(self):
        raw = cells((2, 2), (1, 2), (0, 2), (0, 1), (0, 0))
        assert simplify(START, raw, END, 5)[1] == DiagramPoint(0, 10)


class TestSimplifyPoints:
    """Tests for removing redundant route points."""

    def test_drops_collinear_points(self):
        route = points((0, 0), (5, 0), (10, 0), (10, 5), (10, 10))
        assert simplify_points(route) == points((0, 0), (10, 0), (10, 10))

    def test_drops_duplicates(self):
        route = points((0, 0), (0, 0), (5, 0))
        assert simplify_points(route) == points((0, 0), (5, 0))

    def test_keeps_bends(self):
        route = points((0, 0), (10, 0), (10, 10), (20, 10))
        assert simplify_points(route) == route

    def test_coincident_endpoints(self):
        """Start and end stay even when they coincide."""
        assert simplify_points(points((1, 1), (1, 1))) == points((1, 1), (1, 1))

    def test_empty(self):
        assert simplify_points([]) == []

    def test_off_grid_endpoint_legs_kept(self):
        route = points((3, 4), (0, 20), (27, 25))
        assert simplify_points(route) == route

    @pytest.mark.parametrize(
        "route",
        [
            points((0, 0), (5, 0), (10, 0), (10, 5), (10, 10)),
            points((0, 0), (0, 0), (0, 5), (0, 5), (5, 5)),
            points((0, 0), (10, 0), (0, 0)),
            points((2, 2), (2, 2), (2, 2)),
        ],
    )
    def test_idempotent(self, route):
        once = simplify_points(route)
        assert simplify_points(once) == once

    def test_simplify_output_is_fixed_point(self):
        raw = cells((2, 2), (2, 1), (1, 1), (1, 0), (0, 0))
        route = simplify(START, raw, END, 10)
        assert simplify_points(route) == route


class TestSquareEnds:
    """Tests for straightening the legs to the true anchors."""

    def test_turn_at_start_cell(self):
        raw = cells((3, 2), (2, 2), (1, 2), (1, 1), (1, 0))
        route = simplify(DiagramPoint(3, 0), raw, DiagramPoint(30, 20), 10)
        assert route == points((3, 0), (10, 20), (30, 20))
        assert square_ends(route, raw, 10) == points(
            (3, 0), (10, 0), (10, 20), (30, 20)
        )

    def test_straight_run_between_off_grid_anchors(self):
        raw = cells((3, 1), (2, 1), (1, 1), (0, 1))
        route = simplify(DiagramPoint(2, 14), raw, DiagramPoint(31, 8), 10)
        assert square_ends(route, raw, 10) == points(
            (2, 14), (2, 10), (31, 10), (31, 8)
        )

    def test_aligned_route_unchanged(self):
        raw = [Cell(x, 0) for x in range(3, -1, -1)]
        route = simplify(DiagramPoint(0, 0), raw, DiagramPoint(30, 0), 10)
        assert square_ends(route, raw, 10) == route

    def test_single_cell_path(self):
        route = points((5, 3), (18, 14))
        assert square_ends(route, cells((1, 1)), 10) == points(
            (5, 3), (10, 3), (10, 14), (18, 14)
        )

    def test_every_segment_orthogonal(self):
        raw = cells((2, 2), (2, 1), (1, 1), (1, 0), (0, 0))
        route = square_ends(simplify(START, raw, END, 10), raw, 10)
        for a, b in zip(route, route[1:]):
            assert a.x == b.x or a.y == b.y
        assert (route[0], route[-1]) == (START, END)

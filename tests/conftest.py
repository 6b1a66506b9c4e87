"""Pytest configuration and shared fixtures for manhattan_router tests."""

import pytest

from manhattan_router import Anchor, AnchorSide, Diagram, parse_diagram
from manhattan_router.geometry import Cell, segments_intersect, to_cell
from manhattan_router.grid import GridBounds
from manhattan_router.models import Shape
from manhattan_router.walkability import WalkabilityOracle

OBSTACLE = Shape("obstacle", 0, 0, 0, 0)


class GridDiagram:
    """
    Minimal diagram oracle for search tests.

    Blocked cells report a collision; walls are (connector, start, end)
    segments reported as crossings. With the default step of 1 diagram
    points and cells coincide.
    """

    def __init__(self, blocked=(), walls=(), step=1):
        self.blocked = {Cell(x, y) for x, y in blocked}
        self.walls = list(walls)
        self.step = step
        self.collision_calls = 0

    def collision_at(self, point):
        self.collision_calls += 1
        if to_cell(point, self.step) in self.blocked:
            return OBSTACLE
        return None

    def crossings_on(self, start, end):
        return [c for c, a, b in self.walls if segments_intersect(start, end, a, b)]


@pytest.fixture
def make_walkability():
    """Factory for a WalkabilityOracle over a GridDiagram."""

    def _make(blocked=(), walls=(), bounds=(20, 20), connector=None, step=1):
        diagram = GridDiagram(blocked, walls, step)
        return WalkabilityOracle(diagram, GridBounds(*bounds), step, connector)

    return _make


@pytest.fixture
def two_boxes():
    """Two boxes side by side with nothing between them."""
    diagram = Diagram()
    diagram.add_shape("A", 0, 100, 40, 40)
    diagram.add_shape("B", 200, 100, 40, 40)
    return diagram


@pytest.fixture
def two_boxes_connector(two_boxes):
    """Connector from the right side of A to the left side of B."""
    return two_boxes.connect(
        Anchor("A", AnchorSide.RIGHT), Anchor("B", AnchorSide.LEFT)
    )


@pytest.fixture
def flow_input():
    """Small process diagram in text form."""
    return """
    # four steps
    shape Start 0 0 80 40
    shape Process 160 0 80 40
    shape Review 160 120 80 40
    shape Done 320 120 80 40

    Start.right -> Process.left
    Process.bottom -> Review.top
    Review.right -> Done.left
    Start.bottom -> Review.left
    """


@pytest.fixture
def flow_diagram(flow_input):
    """Parsed process diagram."""
    return parse_diagram(flow_input)

"""
Coordinate types for connector routing.

Two coordinate spaces are kept strictly apart:

- Cell: integer position on the routing grid. Everything inside the path
  search works in cells.
- DiagramPoint: continuous position in the diagram's own units. Only the
  inputs and outputs of a route computation live in this space.

Conversion between them is explicit (to_cell / to_point) and always takes
the grid step, so a Cell can never silently stand in for a point.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple, Union

from .errors import DiagonalMoveError

Number = Union[int, float]


@dataclass(frozen=True)
class Cell:
    """A position on the routing grid."""

    x: int
    y: int

    def step(self, direction: "Direction", distance: int = 1) -> "Cell":
        """Return the cell reached by moving `distance` cells in a direction."""
        return Cell(self.x + direction.dx * distance, self.y + direction.dy * distance)


@dataclass(frozen=True)
class DiagramPoint:
    """A position in diagram coordinates."""

    x: Number
    y: Number

    def as_tuple(self) -> Tuple[Number, Number]:
        return (self.x, self.y)


class Axis(Enum):
    """Axis a run of the path travels along."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class Direction(Enum):
    """The four orthogonal moves. Diagonals are not representable."""

    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    @property
    def axis(self) -> Axis:
        return Axis.HORIZONTAL if self.dx else Axis.VERTICAL

    def turns(self) -> Tuple["Direction", "Direction"]:
        """The two directions perpendicular to this one."""
        if self.axis is Axis.HORIZONTAL:
            return (Direction.UP, Direction.DOWN)
        return (Direction.RIGHT, Direction.LEFT)

    @classmethod
    def between(cls, origin: Cell, destination: Cell) -> "Direction":
        """
        Direction of travel from origin to destination.

        The two cells must share a row or a column; the distance between them
        may be longer than one cell (jump points).

        Raises:
            DiagonalMoveError: If both coordinates differ or neither does.
        """
        dx = destination.x - origin.x
        dy = destination.y - origin.y
        if dx and dy:
            raise DiagonalMoveError(
                f"No diagonal movement allowed: {origin} -> {destination}"
            )
        if not dx and not dy:
            raise DiagonalMoveError(f"No movement between {origin} and itself")
        if dx:
            return cls.RIGHT if dx > 0 else cls.LEFT
        return cls.DOWN if dy > 0 else cls.UP


def to_cell(point: DiagramPoint, step: Number) -> Cell:
    """Quantise a diagram point to the grid cell containing it."""
    return Cell(math.floor(point.x / step), math.floor(point.y / step))


def to_point(cell: Cell, step: Number) -> DiagramPoint:
    """Diagram position of a cell's origin corner."""
    return DiagramPoint(cell.x * step, cell.y * step)


def manhattan_distance(a: Cell, b: Cell) -> int:
    """Number of orthogonal steps between two cells."""
    return abs(a.x - b.x) + abs(a.y - b.y)


def path_length(cells: List[Cell]) -> int:
    """Total Manhattan length of a cell path."""
    return sum(manhattan_distance(a, b) for a, b in zip(cells, cells[1:]))


def _orientation(p: DiagramPoint, q: DiagramPoint, r: DiagramPoint) -> int:
    cross = (q.y - p.y) * (r.x - q.x) - (q.x - p.x) * (r.y - q.y)
    if cross == 0:
        return 0
    return 1 if cross > 0 else 2


def _on_segment(p: DiagramPoint, q: DiagramPoint, r: DiagramPoint) -> bool:
    """Whether q lies within the bounding box of segment p-r."""
    return min(p.x, r.x) <= q.x <= max(p.x, r.x) and min(p.y, r.y) <= q.y <= max(
        p.y, r.y
    )


def segments_intersect(
    a1: DiagramPoint, a2: DiagramPoint, b1: DiagramPoint, b2: DiagramPoint
) -> bool:
    """
    Check whether segments a1-a2 and b1-b2 share at least one point.

    Touching endpoints and collinear overlap both count as an intersection.
    """
    o1 = _orientation(a1, a2, b1)
    o2 = _orientation(a1, a2, b2)
    o3 = _orientation(b1, b2, a1)
    o4 = _orientation(b1, b2, a2)

    if o1 != o2 and o3 != o4:
        return True

    # Collinear special cases
    if o1 == 0 and _on_segment(a1, b1, a2):
        return True
    if o2 == 0 and _on_segment(a1, b2, a2):
        return True
    if o3 == 0 and _on_segment(b1, a1, b2):
        return True
    if o4 == 0 and _on_segment(b1, a2, b2):
        return True

    return False

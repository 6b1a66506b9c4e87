"""
Grid mapping for connector routing.

Derives the routing grid from the diagram:
- Grid bounds from the extent of every shape plus a safety margin
- Start and goal cells from the anchor points, nudged off their shapes
"""

import math
from dataclasses import dataclass
from typing import Iterable

from .geometry import Cell, DiagramPoint, Number, to_cell
from .models import AnchorSide, Shape

# =============================================================================
# ROUTING CONFIGURATION - Adjust these values to tune routing behavior
# =============================================================================

# --- Grid Parameters (in diagram units unless noted) ---

# Size of one grid cell. Smaller values give finer bend positions but a
# larger search space. GridMapper and the simplifier must use the same value.
GRID_STEP = 10

# Extra cells past the rightmost/bottommost shape the search may use
GRID_MARGIN_CELLS = 5

# Horizontal nudge applied to an anchor before quantising it, so the search
# starts just outside the shape that owns the anchor
ANCHOR_OFFSET = 20

# --- Search Costs ---

# Cost of moving one cell
STEP_COST = 10

# Extra cost whenever the path changes axis
TURN_PENALTY = 5

# =============================================================================


@dataclass(frozen=True)
class GridBounds:
    """Inclusive upper limits of the routing grid; the lower limits are 0."""

    max_x: int
    max_y: int

    def contains(self, cell: Cell) -> bool:
        """Check if a cell lies within the grid."""
        return 0 <= cell.x <= self.max_x and 0 <= cell.y <= self.max_y

    @property
    def width(self) -> int:
        return self.max_x + 1

    @property
    def height(self) -> int:
        return self.max_y + 1


def compute_bounds(
    shapes: Iterable[Shape],
    step: Number = GRID_STEP,
    margin_cells: int = GRID_MARGIN_CELLS,
) -> GridBounds:
    """
    Compute grid bounds covering every shape plus a margin.

    Args:
        shapes: All shapes on the diagram
        step: Grid step in diagram units
        margin_cells: Cells of clearance past the furthest shape edges

    Returns:
        GridBounds; (0, 0) for an empty diagram
    """
    max_x = 0
    max_y = 0
    margin = margin_cells * step
    for shape in shapes:
        max_x = max(max_x, math.floor((shape.right + margin) / step))
        max_y = max(max_y, math.floor((shape.bottom + margin) / step))
    return GridBounds(max_x, max_y)


def anchor_cell(
    point: DiagramPoint,
    side: AnchorSide,
    step: Number = GRID_STEP,
    offset: Number = ANCHOR_OFFSET,
) -> Cell:
    """
    Quantise an anchor point into the cell the search starts or ends at.

    Left-side anchors are pushed left by `offset`, every other side is pushed
    right, before the point is converted to a cell.
    """
    shift = -offset if side is AnchorSide.LEFT else offset
    return to_cell(DiagramPoint(point.x + shift, point.y), step)


class GridMapper:
    """
    Converts the continuous diagram geometry into a routing grid.

    Example:
        >>> mapper = GridMapper(step=10)
        >>> bounds = mapper.bounds([Shape("A", 0, 0, 100, 40)])
        >>> bounds
        GridBounds(max_x=15, max_y=9)
    """

    def __init__(
        self,
        step: Number = GRID_STEP,
        margin_cells: int = GRID_MARGIN_CELLS,
        anchor_offset: Number = ANCHOR_OFFSET,
    ):
        self.step = step
        self.margin_cells = margin_cells
        self.anchor_offset = anchor_offset

    def bounds(self, shapes: Iterable[Shape]) -> GridBounds:
        """Grid bounds for the given shapes."""
        return compute_bounds(shapes, self.step, self.margin_cells)

    def endpoint(self, point: DiagramPoint, side: AnchorSide) -> Cell:
        """Search start or goal cell for an anchor."""
        return anchor_cell(point, side, self.step, self.anchor_offset)

"""
Walkability checks for the path search.

The search has no notion of obstacles of its own. Everything it knows about
the diagram comes through WalkabilityOracle, which answers one question: may
the path step into this cell (coming from that one)?

A cell is walkable when it is inside the grid bounds, no shape covers it, and
the step into it does not cross a connector other than the one being routed.
"""

from typing import Dict, List, Optional, Protocol, Sequence

from .geometry import Cell, DiagramPoint, Number, to_point
from .grid import GridBounds
from .models import Anchor, AnchorSide, Connector, Shape


class DiagramOracle(Protocol):
    """Protocol for the host diagram queried during routing."""

    @property
    def connectors(self) -> List[Connector]:
        """Every connector, in routing order."""
        ...

    def all_shapes(self) -> List[Shape]:
        """Every shape on the diagram."""
        ...

    def collision_at(self, point: DiagramPoint) -> Optional[Shape]:
        """The shape covering a point, if any."""
        ...

    def crossings_on(self, start: DiagramPoint, end: DiagramPoint) -> List[Connector]:
        """Connectors whose current route intersects a segment."""
        ...

    def resolve_anchor_point(self, anchor: Anchor) -> DiagramPoint:
        """Diagram position of an anchor."""
        ...

    def resolve_boundary_side(self, anchor: Anchor) -> AnchorSide:
        """Shape side an anchor sits on."""
        ...

    def set_route(self, connector: Connector, points: Sequence[DiagramPoint]) -> None:
        """Store a computed route on the diagram."""
        ...


class WalkabilityOracle:
    """
    Answers walkability queries for one route computation.

    Collision answers are cached per cell, so an instance must not outlive
    the diagram state it was built for. Create one per route.

    Attributes:
        diagram: Host diagram the queries are forwarded to
        bounds: Grid bounds of this computation
        step: Grid step used to convert cells to diagram points
        connector: Connector being routed; crossing its own route is allowed
    """

    def __init__(
        self,
        diagram: DiagramOracle,
        bounds: GridBounds,
        step: Number,
        connector: Optional[Connector] = None,
    ):
        self.diagram = diagram
        self.bounds = bounds
        self.step = step
        self.connector = connector
        self._collisions: Dict[Cell, bool] = {}

    def in_bounds(self, cell: Cell) -> bool:
        return self.bounds.contains(cell)

    def collides(self, cell: Cell) -> bool:
        """Check if a shape covers the cell's diagram position."""
        hit = self._collisions.get(cell)
        if hit is None:
            hit = self.diagram.collision_at(to_point(cell, self.step)) is not None
            self._collisions[cell] = hit
        return hit

    def crosses_foreign(self, from_cell: Cell, cell: Cell) -> bool:
        """Check if the step from_cell -> cell crosses another connector."""
        crossings = self.diagram.crossings_on(
            to_point(from_cell, self.step), to_point(cell, self.step)
        )
        return any(other is not self.connector for other in crossings)

    def is_walkable(self, cell: Cell, from_cell: Optional[Cell] = None) -> bool:
        """
        Check if the search may enter a cell.

        Args:
            cell: Candidate cell
            from_cell: Cell the step comes from; when omitted only the cell
                itself is checked, without connector crossings

        Returns:
            True if the cell is in bounds, free of shapes and, when a step is
            given, the step crosses no foreign connector
        """
        if not self.in_bounds(cell):
            return False
        if self.collides(cell):
            return False
        if from_cell is not None and self.crosses_foreign(from_cell, cell):
            return False
        return True

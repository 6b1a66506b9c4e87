"""
Data models for the host diagram.

This module contains the dataclasses a host diagram hands to the router:
shapes that act as obstacles, anchors where connectors attach, and the
connectors themselves. The router never inspects these directly beyond what
the DiagramOracle protocol exposes; they exist so the bundled Diagram and
parser have something concrete to work with.

Classes:
    AnchorSide: Which side of a shape an anchor sits on.
    Shape: Axis-aligned rectangle in diagram coordinates.
    Anchor: Attachment point on a shape side.
    Connector: A line between two anchors, with its current route.
    ConnectionRoute: Result of routing one connector.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .geometry import DiagramPoint


class AnchorSide(Enum):
    """Which side of a shape an anchor is on."""

    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"


@dataclass
class Shape:
    """
    An obstacle on the diagram.

    Attributes:
        name: Unique shape name within the diagram.
        x: Left edge.
        y: Top edge.
        width: Width in diagram units.
        height: Height in diagram units.
    """

    name: str
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2

    def contains(self, point: DiagramPoint) -> bool:
        """Check if a point lies strictly inside the shape (border excluded)."""
        return self.x < point.x < self.right and self.y < point.y < self.bottom


@dataclass(frozen=True)
class Anchor:
    """
    Attachment point on one side of a shape.

    Attributes:
        shape: Name of the owning shape.
        side: Side of the shape the anchor is on.
        position: Fraction along the side, 0.0 at the top/left end and 1.0 at
            the bottom/right end.
    """

    shape: str
    side: AnchorSide
    position: float = 0.5


@dataclass(eq=False)
class Connector:
    """
    A connector between two anchors.

    Connectors compare by identity: two connectors joining the same anchors
    are still different lines, and crossing one of them is not a self
    crossing for the other.

    Attributes:
        name: Identifier used in traces and renderings.
        source: Anchor the connector starts at.
        target: Anchor the connector ends at.
        route: Current bend-point route, empty until routed.
    """

    name: str
    source: Anchor
    target: Anchor
    route: List[DiagramPoint] = field(default_factory=list)

    @property
    def is_self_connection(self) -> bool:
        return self.source.shape == self.target.shape


@dataclass
class ConnectionRoute:
    """
    A routed connector.

    Attributes:
        connector: The connector that was routed.
        points: Ordered bend points, starting and ending at the true anchors.
        fallback: Why the router fell back to a direct line, or None when the
            search found a path ("blocked_endpoint" or "unreachable").
    """

    connector: Connector
    points: List[DiagramPoint] = field(default_factory=list)
    fallback: Optional[str] = None

    @property
    def bend_count(self) -> int:
        return max(0, len(self.points) - 2)

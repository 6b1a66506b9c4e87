"""
In-memory host diagram using networkx.

Diagram is a reference implementation of the DiagramOracle protocol. Shapes
are the nodes of a networkx MultiDiGraph and connectors are its edges, so a
pair of shapes can be joined by any number of connectors and a shape can be
connected to itself.

Uses networkx for:
- Shape/connector storage
- Adjacency queries (connectors touching a shape)
"""

import math
from typing import List, Optional, Sequence

import networkx as nx

from .errors import UnknownShapeError
from .geometry import DiagramPoint, segments_intersect
from .models import Anchor, AnchorSide, Connector, Shape


class Diagram:
    """
    Shapes and connectors of one diagram.

    Example:
        >>> diagram = Diagram()
        >>> diagram.add_shape("A", 0, 0, 100, 40)
        >>> diagram.add_shape("B", 200, 100, 100, 40)
        >>> connector = diagram.connect(
        ...     Anchor("A", AnchorSide.RIGHT), Anchor("B", AnchorSide.LEFT)
        ... )
    """

    def __init__(self):
        self.graph: nx.MultiDiGraph = nx.MultiDiGraph()
        self._order = 0

    # --- Building -----------------------------------------------------------

    def add_shape(
        self, name: str, x: float, y: float, width: float, height: float
    ) -> Shape:
        """Add a shape, replacing any existing shape with the same name."""
        if not all(math.isfinite(v) for v in (x, y, width, height)):
            raise ValueError(f"Shape {name!r} must have a finite position and size")
        if width < 0 or height < 0:
            raise ValueError(f"Shape {name!r} must have a non-negative size")
        shape = Shape(name, x, y, width, height)
        self.graph.add_node(name, shape=shape)
        return shape

    def connect(
        self, source: Anchor, target: Anchor, name: Optional[str] = None
    ) -> Connector:
        """
        Add a connector between two anchors.

        Args:
            source: Anchor the connector starts at
            target: Anchor the connector ends at
            name: Optional connector name, defaults to "source->target",
                suffixed with "#2", "#3", ... when the shapes are already
                joined

        Raises:
            UnknownShapeError: If either anchor refers to a missing shape
            ValueError: If another connector already has the given name
        """
        self.get_shape(source.shape)
        self.get_shape(target.shape)

        taken = {c.name for c in self.connectors}
        if name is None:
            base = f"{source.shape}->{target.shape}"
            name = base
            suffix = 2
            while name in taken:
                name = f"{base}#{suffix}"
                suffix += 1
        elif name in taken:
            raise ValueError(f"Connector name {name!r} is already used")
        connector = Connector(name, source, target)
        self.graph.add_edge(
            source.shape, target.shape, connector=connector, order=self._order
        )
        self._order += 1
        return connector

    # --- Queries ------------------------------------------------------------

    def get_shape(self, name: str) -> Shape:
        """Look up a shape by name."""
        if name not in self.graph:
            raise UnknownShapeError(f"Unknown shape: {name}")
        return self.graph.nodes[name]["shape"]

    def all_shapes(self) -> List[Shape]:
        """Every shape, in insertion order."""
        return [data["shape"] for _, data in self.graph.nodes(data=True)]

    @property
    def connectors(self) -> List[Connector]:
        """Every connector, in the order they were added."""
        edges = sorted(self.graph.edges(data=True), key=lambda e: e[2]["order"])
        return [data["connector"] for _, _, data in edges]

    def connectors_of(self, shape: str) -> List[Connector]:
        """Connectors starting or ending at a shape."""
        self.get_shape(shape)
        edges = list(self.graph.out_edges(shape, data=True))
        edges += [e for e in self.graph.in_edges(shape, data=True) if e[0] != shape]
        edges.sort(key=lambda e: e[2]["order"])
        return [data["connector"] for _, _, data in edges]

    def collision_at(self, point: DiagramPoint) -> Optional[Shape]:
        """The first shape whose interior contains the point, if any."""
        for shape in self.all_shapes():
            if shape.contains(point):
                return shape
        return None

    def crossings_on(self, start: DiagramPoint, end: DiagramPoint) -> List[Connector]:
        """Connectors whose current route touches the segment start-end."""
        crossings = []
        for connector in self.connectors:
            route = connector.route
            for a, b in zip(route, route[1:]):
                if segments_intersect(start, end, a, b):
                    crossings.append(connector)
                    break
        return crossings

    def resolve_anchor_point(self, anchor: Anchor) -> DiagramPoint:
        """
        Diagram position of an anchor.

        Top and bottom anchors are spread left to right, left and right
        anchors top to bottom, by the anchor's position fraction.
        """
        shape = self.get_shape(anchor.shape)
        if anchor.side in (AnchorSide.TOP, AnchorSide.BOTTOM):
            x = shape.x + shape.width * anchor.position
            y = shape.y if anchor.side is AnchorSide.TOP else shape.bottom
        else:
            x = shape.x if anchor.side is AnchorSide.LEFT else shape.right
            y = shape.y + shape.height * anchor.position
        return DiagramPoint(x, y)

    def resolve_boundary_side(self, anchor: Anchor) -> AnchorSide:
        """Side of its shape an anchor sits on."""
        return anchor.side

    # --- Drawing ------------------------------------------------------------

    def set_route(self, connector: Connector, points: Sequence[DiagramPoint]) -> None:
        """Store a route on a connector so later routes can avoid it."""
        connector.route = list(points)

    def clear_routes(self) -> None:
        """Forget every stored route."""
        for connector in self.connectors:
            connector.route = []

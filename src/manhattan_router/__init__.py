"""
manhattan_router - Orthogonal connector routing for diagrams

A Python library that routes connectors between shapes as Manhattan
(horizontal/vertical) paths, avoiding shapes and other connectors.

Example:
    >>> from manhattan_router import ManhattanRouter, parse_diagram
    >>> diagram = parse_diagram('''
    ...     shape A 0 0 100 40
    ...     shape B 200 100 100 40
    ...     A.right -> B.left
    ... ''')
    >>> router = ManhattanRouter(diagram)
    >>> routes = router.route_all()

Debug Mode Example:
    >>> router = ManhattanRouter(diagram, debug=True)
    >>> router.compute_route(diagram.connectors[0])
    >>> print(router.get_trace().summary())
"""

from .debug import GridCanvas, render_grid
from .diagram import Diagram
from .errors import (
    DiagonalMoveError,
    RoutingError,
    SelfConnectionError,
    UnknownShapeError,
)
from .geometry import Cell, DiagramPoint, Direction, to_cell, to_point
from .grid import GridBounds, GridMapper
from .models import Anchor, AnchorSide, ConnectionRoute, Connector, Shape
from .parser import ParseError, Parser, parse_diagram
from .png_renderer import PNGRenderer, render_to_png
from .router import ManhattanRouter
from .search import CostPolicy, SearchResult, run_search, search
from .simplify import simplify, simplify_points, square_ends
from .tracer import CellExpansion, PipelineStage, RouteTrace
from .walkability import DiagramOracle, WalkabilityOracle

__version__ = "0.3.0"

__all__ = [
    # Main API
    "ManhattanRouter",
    "ConnectionRoute",
    # Host diagram
    "Diagram",
    "DiagramOracle",
    "Shape",
    "Anchor",
    "AnchorSide",
    "Connector",
    # Parser
    "Parser",
    "ParseError",
    "parse_diagram",
    # Pipeline
    "GridMapper",
    "GridBounds",
    "WalkabilityOracle",
    "CostPolicy",
    "SearchResult",
    "run_search",
    "search",
    "simplify",
    "simplify_points",
    "square_ends",
    # Geometry
    "Cell",
    "DiagramPoint",
    "Direction",
    "to_cell",
    "to_point",
    # Errors
    "RoutingError",
    "DiagonalMoveError",
    "SelfConnectionError",
    "UnknownShapeError",
    # Rendering
    "PNGRenderer",
    "render_to_png",
    # Debug/Tracing (for development and debugging)
    "RouteTrace",
    "CellExpansion",
    "PipelineStage",
    "GridCanvas",
    "render_grid",
]

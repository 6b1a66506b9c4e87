"""
Connector routing entry point.

ManhattanRouter ties the pipeline together for one connector:
1. Resolve the true anchor points and sides
2. Map the diagram onto a grid and quantise the anchors
3. Search for a Manhattan path between the quantised anchors
4. Simplify the raw path into bend points anchored at the true points
5. Add corners where a leg to an anchor would run diagonally
"""

from typing import Callable, Dict, List, Optional

from .debug import render_grid
from .errors import SelfConnectionError
from .geometry import Cell, DiagramPoint, Number
from .grid import (
    ANCHOR_OFFSET,
    GRID_MARGIN_CELLS,
    GRID_STEP,
    STEP_COST,
    TURN_PENALTY,
    GridMapper,
)
from .models import ConnectionRoute, Connector
from .search import CostPolicy, SearchResult, run_search
from .simplify import simplify, square_ends
from .tracer import RouteTrace
from .walkability import DiagramOracle, WalkabilityOracle

SelfLoopRouter = Callable[[Connector], List[DiagramPoint]]


class ManhattanRouter:
    """
    Routes connectors using orthogonal (90-degree) paths.

    The router keeps only configuration between calls; every route
    computation builds its own grid, walkability oracle and search state.

    Example:
        >>> router = ManhattanRouter(diagram)
        >>> points = router.compute_route(connector)

    Debug Mode Example:
        >>> router = ManhattanRouter(diagram, debug=True)
        >>> router.compute_route(connector)
        >>> print(router.get_trace().summary())
    """

    def __init__(
        self,
        diagram: DiagramOracle,
        step: Number = GRID_STEP,
        margin_cells: int = GRID_MARGIN_CELLS,
        anchor_offset: Number = ANCHOR_OFFSET,
        policy: CostPolicy = CostPolicy.TURN_PENALTY,
        step_cost: float = STEP_COST,
        turn_penalty: float = TURN_PENALTY,
        self_loop_router: Optional[SelfLoopRouter] = None,
        debug: bool = False,
    ):
        """
        Initialize the router.

        Args:
            diagram: Host diagram to route on
            step: Grid step in diagram units
            margin_cells: Grid cells of clearance past the furthest shapes
            anchor_offset: Horizontal nudge applied to anchors before
                quantising them
            policy: Search cost policy
            step_cost: Cost per cell for the TURN_PENALTY policy
            turn_penalty: Extra cost per turn for the TURN_PENALTY policy
            self_loop_router: Callable computing routes for connectors whose
                source and target are the same shape
            debug: Whether to record a RouteTrace for each computation
        """
        if step <= 0:
            raise ValueError("step must be positive")
        if margin_cells < 0:
            raise ValueError("margin_cells must not be negative")

        self.diagram = diagram
        self.step = step
        self.policy = CostPolicy(policy)
        self.step_cost = step_cost
        self.turn_penalty = turn_penalty
        self.self_loop_router = self_loop_router
        self.debug = debug
        self.mapper = GridMapper(step, margin_cells, anchor_offset)
        self._trace: Optional[RouteTrace] = None

    def get_trace(self) -> Optional[RouteTrace]:
        """Trace of the most recent computation, or None outside debug mode."""
        return self._trace

    def compute_route(self, connector: Connector) -> List[DiagramPoint]:
        """
        Compute the bend-point route for a connector.

        Args:
            connector: Connector to route

        Returns:
            Ordered diagram points starting at the source anchor and ending at
            the target anchor

        Raises:
            SelfConnectionError: If the connector joins a shape to itself and
                no self-loop router was given
        """
        return self._route(connector).points

    def route_connector(self, connector: Connector) -> ConnectionRoute:
        """
        Compute a connector's route and store it on the diagram.

        Returns:
            ConnectionRoute with the points and, if the search failed, the
            reason the route is a direct line
        """
        route = self._route(connector)
        self.diagram.set_route(connector, route.points)
        return route

    def route_all(
        self, connectors: Optional[List[Connector]] = None
    ) -> Dict[str, ConnectionRoute]:
        """
        Route connectors one after another.

        Each stored route is visible to the ones computed after it, so later
        connectors avoid crossing earlier ones.

        Args:
            connectors: Connectors to route; defaults to every connector of
                the diagram in insertion order

        Returns:
            Dict mapping connector name to its ConnectionRoute

        Raises:
            ValueError: If two different connectors share a name
        """
        if connectors is None:
            connectors = list(self.diagram.connectors)

        routes: Dict[str, ConnectionRoute] = {}
        for connector in connectors:
            previous = routes.get(connector.name)
            if previous is not None and previous.connector is not connector:
                raise ValueError(f"Connector name {connector.name!r} is not unique")
            routes[connector.name] = self.route_connector(connector)
        return routes

    def _route(self, connector: Connector) -> ConnectionRoute:
        if connector.is_self_connection:
            if self.self_loop_router is None:
                raise SelfConnectionError(
                    f"Connector {connector.name!r} connects {connector.source.shape} "
                    "to itself; pass self_loop_router to route it"
                )
            self._trace = None
            return ConnectionRoute(connector, list(self.self_loop_router(connector)))

        trace = None
        if self.debug:
            trace = RouteTrace(connector=connector.name, policy=self.policy.value)
        self._trace = trace

        true_start = self.diagram.resolve_anchor_point(connector.source)
        true_end = self.diagram.resolve_anchor_point(connector.target)
        start = self.mapper.endpoint(
            true_start, self.diagram.resolve_boundary_side(connector.source)
        )
        goal = self.mapper.endpoint(
            true_end, self.diagram.resolve_boundary_side(connector.target)
        )
        bounds = self.mapper.bounds(self.diagram.all_shapes())

        if trace is not None:
            trace.add_stage(
                "grid_mapped",
                {
                    "step": self.step,
                    "bounds": (bounds.max_x, bounds.max_y),
                    "true_start": true_start.as_tuple(),
                    "true_end": true_end.as_tuple(),
                    "start": (start.x, start.y),
                    "goal": (goal.x, goal.y),
                },
            )

        walkability = WalkabilityOracle(self.diagram, bounds, self.step, connector)
        result = run_search(
            start,
            goal,
            walkability,
            self.policy,
            trace,
            step_cost=self.step_cost,
            turn_penalty=self.turn_penalty,
        )

        if trace is not None:
            self._trace_search(trace, walkability, result, start, goal)

        points = simplify(true_start, result.path, true_end, self.step)
        if not result.is_fallback:
            points = square_ends(points, result.path, self.step)

        if trace is not None:
            trace.add_stage(
                "simplified",
                {"points": [p.as_tuple() for p in points], "bends": len(points) - 2},
            )

        fallback = result.outcome if result.is_fallback else None
        return ConnectionRoute(connector, points, fallback)

    def _trace_search(
        self,
        trace: RouteTrace,
        walkability: WalkabilityOracle,
        result: SearchResult,
        start: Cell,
        goal: Cell,
    ) -> None:
        grid = render_grid(
            walkability,
            path=None if result.is_fallback else result.path,
            start=start,
            goal=goal,
        )
        trace.add_stage(
            "searched",
            {
                "outcome": result.outcome,
                "expanded": result.expanded,
                "path_cells": len(result.path),
            },
            grid=grid,
        )

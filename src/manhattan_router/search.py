"""
Path search on the routing grid.

Implements best-first search restricted to Manhattan movement:
- A cell with no predecessor may move in all four directions
- Otherwise the path may continue straight or turn 90 degrees, never
  reverse and never move diagonally

Two cost policies are available:
- TURN_PENALTY: A* over single-cell steps with a fixed cost per cell and an
  extra cost per turn. Nodes carry the direction a cell was entered from,
  so the result is the cheapest path under those costs. This is the
  default.
- JUMP_POINT: jump point search. Straight runs are scanned ahead and only
  cells where a turn can matter enter the open set; cost is the Manhattan
  distance between them.

Both return the raw path from goal back to start, one cell per step. When
no path exists, or an endpoint sits inside a shape, the result is the direct
two-cell path [goal, start]; routing failures never raise.
"""

import heapq
import itertools
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Hashable, Iterator, List, Optional, Set, Tuple

from .geometry import Axis, Cell, Direction, manhattan_distance
from .grid import STEP_COST, TURN_PENALTY
from .tracer import RouteTrace
from .walkability import WalkabilityOracle


class CostPolicy(Enum):
    """How the search prices and enumerates moves."""

    TURN_PENALTY = "turn_penalty"
    JUMP_POINT = "jump_point"


# Search outcomes
FOUND = "found"
BLOCKED_ENDPOINT = "blocked_endpoint"
UNREACHABLE = "unreachable"

# Search node: a Cell for jump point search, (Cell, incoming Direction) for
# the turn penalty search, where the cost of the next step depends on how a
# cell was entered
Node = Hashable

# Expansion order for a cell without a predecessor
ALL_DIRECTIONS = (Direction.UP, Direction.DOWN, Direction.RIGHT, Direction.LEFT)


@dataclass
class SearchContext:
    """
    Mutable state of a single search.

    Built fresh for every call and never shared, so concurrent route
    computations cannot see each other's scores.

    The open set is a heap with lazy deletion: improving a node pushes a new
    entry and the stale one is skipped when popped. Entries carry an
    insertion counter so equal f-scores pop in insertion order.
    """

    open_set: Set[Node] = field(default_factory=set)
    closed_set: Set[Node] = field(default_factory=set)
    g_score: Dict[Node, float] = field(default_factory=dict)
    f_score: Dict[Node, float] = field(default_factory=dict)
    came_from: Dict[Node, Node] = field(default_factory=dict)
    _heap: List[Tuple[float, int, Node]] = field(default_factory=list)
    _counter: Iterator[int] = field(default_factory=itertools.count)

    def push(self, node: Node, g_score: float, f_score: float) -> None:
        """Add a node to the open set, or lower its scores if already there."""
        self.g_score[node] = g_score
        self.f_score[node] = f_score
        self.open_set.add(node)
        heapq.heappush(self._heap, (f_score, next(self._counter), node))

    def pop(self) -> Node:
        """Remove and return the open node with the lowest f-score."""
        while self._heap:
            f_score, _, node = heapq.heappop(self._heap)
            if node in self.open_set and f_score == self.f_score[node]:
                self.open_set.remove(node)
                return node
        raise IndexError("pop from an empty open set")

    def incoming(self, cell: Cell) -> Optional[Direction]:
        """Direction the search was travelling when it reached a cell."""
        parent = self.came_from.get(cell)
        if parent is None:
            return None
        return Direction.between(parent, cell)


@dataclass
class SearchResult:
    """
    Outcome of a search.

    Attributes:
        path: Cells from goal back to start
        outcome: FOUND, BLOCKED_ENDPOINT or UNREACHABLE
        expanded: Number of search nodes moved to the closed set
    """

    path: List[Cell]
    outcome: str
    expanded: int = 0

    @property
    def is_fallback(self) -> bool:
        return self.outcome != FOUND


def heuristic(a: Cell, b: Cell) -> int:
    """Manhattan distance; admissible and consistent for orthogonal moves."""
    return manhattan_distance(a, b)


def candidate_directions(incoming: Optional[Direction]) -> Tuple[Direction, ...]:
    """
    Directions a cell may be left in.

    Continuing straight comes first, followed by the two turns. Reversing is
    never offered.
    """
    if incoming is None:
        return ALL_DIRECTIONS
    return (incoming,) + incoming.turns()


def reconstruct_path(came_from: Dict[Node, Node], current: Node) -> List[Node]:
    """Follow predecessor links from a node back to the start."""
    path = [current]
    while current in came_from:
        current = came_from[current]
        path.append(current)
    return path


def expand_path(points: List[Cell]) -> List[Cell]:
    """
    Fill in every cell between consecutive points of an axis-aligned path.

    Raises:
        DiagonalMoveError: If two consecutive points share neither row nor
            column.
    """
    if len(points) < 2:
        return list(points)

    cells = [points[0]]
    for a, b in zip(points, points[1:]):
        direction = Direction.between(a, b)
        for distance in range(1, manhattan_distance(a, b) + 1):
            cells.append(a.step(direction, distance))
    return cells


def _record(
    trace: Optional[RouteTrace],
    ctx: SearchContext,
    node: Node,
    cell: Cell,
    reason: str,
) -> None:
    if trace is not None:
        trace.add_expansion(
            cell.x, cell.y, ctx.g_score[node], ctx.f_score[node], reason
        )


def _turn_penalty_search(
    start: Cell,
    goal: Cell,
    walkability: WalkabilityOracle,
    trace: Optional[RouteTrace],
    step_cost: float,
    turn_penalty: float,
) -> Tuple[Optional[List[Cell]], int]:
    # Nodes are (cell, incoming direction): two arrivals at the same cell
    # along different axes price the next turn differently
    ctx = SearchContext()
    origin = (start, None)
    ctx.push(origin, 0, step_cost * heuristic(start, goal))

    while ctx.open_set:
        node = ctx.pop()
        current, incoming = node
        if current == goal:
            _record(trace, ctx, node, current, "goal_reached")
            path = [cell for cell, _ in reconstruct_path(ctx.came_from, node)]
            return path, len(ctx.closed_set)

        ctx.closed_set.add(node)
        _record(trace, ctx, node, current, "expanded")

        for direction in candidate_directions(incoming):
            neighbor = current.step(direction)
            next_node = (neighbor, direction)
            if next_node in ctx.closed_set:
                continue
            if not walkability.is_walkable(neighbor, current):
                continue

            tentative = ctx.g_score[node] + step_cost
            if incoming is not None and direction.axis is not incoming.axis:
                tentative += turn_penalty

            if next_node not in ctx.g_score or tentative < ctx.g_score[next_node]:
                ctx.came_from[next_node] = node
                estimate = step_cost * heuristic(neighbor, goal)
                ctx.push(next_node, tentative, tentative + estimate)

    return None, len(ctx.closed_set)


def _has_forced_neighbor(
    walkability: WalkabilityOracle, cell: Cell, previous: Cell, direction: Direction
) -> bool:
    """
    Check if a scan must stop at a cell because a turn opens up here.

    A side neighbour is forced when it can be entered from this cell but
    could not have been reached from the previous cell's side neighbour,
    i.e. the scan just passed the edge of an obstacle.
    """
    for turn in direction.turns():
        side = cell.step(turn)
        if not walkability.is_walkable(side, cell):
            continue
        previous_side = previous.step(turn)
        if not (
            walkability.is_walkable(previous_side, previous)
            and walkability.is_walkable(side, previous_side)
        ):
            return True
    return False


def _jump(
    walkability: WalkabilityOracle, cell: Cell, direction: Direction, goal: Cell
) -> Optional[Cell]:
    """
    Scan from a cell in one direction to the next jump point.

    Returns the goal, a cell with a forced neighbour or, when scanning
    vertically, a cell from which a horizontal scan finds a jump point.
    Returns None when the scan runs into an obstacle or the grid edge.
    """
    previous = cell
    current = cell.step(direction)
    while walkability.is_walkable(current, previous):
        if current == goal:
            return current
        if _has_forced_neighbor(walkability, current, previous, direction):
            return current
        # Horizontal scans never scan sideways, so nesting is one level deep
        if direction.axis is Axis.VERTICAL:
            for turn in direction.turns():
                if _jump(walkability, current, turn, goal) is not None:
                    return current
        previous, current = current, current.step(direction)
    return None


def _jump_point_search(
    start: Cell,
    goal: Cell,
    walkability: WalkabilityOracle,
    trace: Optional[RouteTrace],
) -> Tuple[Optional[List[Cell]], int]:
    ctx = SearchContext()
    ctx.push(start, 0, heuristic(start, goal))

    while ctx.open_set:
        current = ctx.pop()
        if current == goal:
            _record(trace, ctx, current, current, "goal_reached")
            jump_points = reconstruct_path(ctx.came_from, current)
            return expand_path(jump_points), len(ctx.closed_set)

        ctx.closed_set.add(current)
        _record(trace, ctx, current, current, "jump_point")

        for direction in candidate_directions(ctx.incoming(current)):
            jump_point = _jump(walkability, current, direction, goal)
            if jump_point is None or jump_point in ctx.closed_set:
                continue

            tentative = ctx.g_score[current] + manhattan_distance(current, jump_point)
            if jump_point not in ctx.g_score or tentative < ctx.g_score[jump_point]:
                ctx.came_from[jump_point] = current
                ctx.push(jump_point, tentative, tentative + heuristic(jump_point, goal))

    return None, len(ctx.closed_set)


def run_search(
    start: Cell,
    goal: Cell,
    walkability: WalkabilityOracle,
    policy: CostPolicy = CostPolicy.TURN_PENALTY,
    trace: Optional[RouteTrace] = None,
    step_cost: float = STEP_COST,
    turn_penalty: float = TURN_PENALTY,
) -> SearchResult:
    """
    Find a Manhattan path from start to goal.

    Args:
        start: Start cell
        goal: Goal cell
        walkability: Oracle deciding which cells and steps are free
        policy: Cost policy to search with
        trace: Optional trace that receives every expanded cell
        step_cost: Cost per cell (TURN_PENALTY policy only)
        turn_penalty: Extra cost per turn (TURN_PENALTY policy only)

    Returns:
        SearchResult whose path runs from goal back to start
    """
    if walkability.collides(start) or walkability.collides(goal):
        return SearchResult([goal, start], BLOCKED_ENDPOINT)

    if policy is CostPolicy.JUMP_POINT:
        path, expanded = _jump_point_search(start, goal, walkability, trace)
    else:
        path, expanded = _turn_penalty_search(
            start, goal, walkability, trace, step_cost, turn_penalty
        )

    if path is None:
        return SearchResult([goal, start], UNREACHABLE, expanded)
    return SearchResult(path, FOUND, expanded)


def search(
    start: Cell,
    goal: Cell,
    walkability: WalkabilityOracle,
    policy: CostPolicy = CostPolicy.TURN_PENALTY,
    trace: Optional[RouteTrace] = None,
) -> List[Cell]:
    """Raw path from goal back to start; [goal, start] when none exists."""
    return run_search(start, goal, walkability, policy, trace).path

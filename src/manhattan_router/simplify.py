"""
Path simplification.

Collapses the cell-by-cell search result into the bend points a renderer
needs, anchored at the exact (unquantised) anchor positions.
"""

from typing import List, Sequence

from .geometry import Axis, Cell, DiagramPoint, Direction, Number, to_point


def simplify(
    true_start: DiagramPoint,
    raw_path: Sequence[Cell],
    true_end: DiagramPoint,
    step: Number,
) -> List[DiagramPoint]:
    """
    Reduce a raw search path to its bend points.

    Args:
        true_start: Exact source anchor point
        raw_path: Search result, ordered from goal back to start
        true_end: Exact target anchor point
        step: Grid step; must match the one used to quantise the anchors

    Returns:
        true_start, every cell where the path changes direction (as diagram
        points, walking from start to goal), then true_end
    """
    result = [true_start]

    # Walk from the start end; the two raw endpoints are replaced by the
    # true anchor points
    for i in range(len(raw_path) - 2, 0, -1):
        prev = raw_path[i + 1]
        curr = raw_path[i]
        nxt = raw_path[i - 1]
        if prev.x == curr.x != nxt.x or prev.y == curr.y != nxt.y:
            result.append(to_point(curr, step))

    result.append(true_end)
    return result


def simplify_points(points: Sequence[DiagramPoint]) -> List[DiagramPoint]:
    """
    Remove redundant points from a route.

    Drops repeated points and interior points lying in the middle of a
    straight horizontal or vertical run. The first and last points are
    always kept. Applying it twice gives the same result as applying it once.
    """
    deduped: List[DiagramPoint] = []
    for point in points:
        if not deduped or point != deduped[-1]:
            deduped.append(point)

    if len(deduped) < 3:
        if len(points) >= 2 and len(deduped) == 1:
            # Start and end coincide; keep both anchors
            return [deduped[0], deduped[0]]
        return deduped

    result = [deduped[0]]
    for curr, nxt in zip(deduped[1:], deduped[2:]):
        prev = result[-1]
        if curr == prev:
            continue
        same_column = prev.x == curr.x == nxt.x
        same_row = prev.y == curr.y == nxt.y
        if not (same_column or same_row):
            result.append(curr)

    last = deduped[-1]
    if len(result) == 1 or result[-1] != last:
        result.append(last)
    return result


def square_ends(
    points: Sequence[DiagramPoint], raw_path: Sequence[Cell], step: Number
) -> List[DiagramPoint]:
    """
    Make the first and last legs of a simplified route axis aligned.

    The true anchors rarely sit on the point of the cell the search started
    or ended in, so the leg joining an anchor to its nearest bend can be
    diagonal. Such a leg gets a corner placed on the line the grid path
    leaves (or enters) its end cell along.

    Args:
        points: Output of simplify for a path the search found
        raw_path: The search result, ordered from goal back to start
        step: Grid step used for the search

    Returns:
        Route whose every segment is horizontal or vertical
    """
    result = list(points)
    if len(result) < 2 or not raw_path:
        return result

    start_cell, goal_cell = raw_path[-1], raw_path[0]
    first_axis = last_axis = None
    if len(raw_path) > 1:
        first_axis = Direction.between(raw_path[-1], raw_path[-2]).axis
        last_axis = Direction.between(raw_path[1], raw_path[0]).axis

    true_start, after = result[0], result[1]
    if true_start.x != after.x and true_start.y != after.y:
        cell_point = to_point(start_cell, step)
        if first_axis is Axis.HORIZONTAL:
            corner = DiagramPoint(true_start.x, cell_point.y)
        else:
            corner = DiagramPoint(cell_point.x, true_start.y)
        result.insert(1, corner)

    true_end, before = result[-1], result[-2]
    if true_end.x != before.x and true_end.y != before.y:
        cell_point = to_point(goal_cell, step)
        if last_axis is Axis.HORIZONTAL:
            corner = DiagramPoint(true_end.x, cell_point.y)
        else:
            corner = DiagramPoint(cell_point.x, true_end.y)
        result.insert(len(result) - 1, corner)

    return simplify_points(result)

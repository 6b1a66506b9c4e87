"""
Debug utilities for manhattan_router.

This module renders the routing grid as ASCII art so a route computation can
be inspected without a diagram editor. The router uses it to attach a grid
snapshot to the "searched" stage of a RouteTrace when debug mode is on.

Legend:
    .   free cell
    #   cell covered by a shape
    *   cell on the raw path
    S   start cell
    G   goal cell

Usage:
    >>> from manhattan_router.debug import render_grid
    >>> canvas = render_grid(walkability, path=raw_path, start=start, goal=goal)
    >>> print(canvas.render())
"""

from typing import List, Optional, Sequence

from .geometry import Cell
from .walkability import WalkabilityOracle

FREE_CHAR = "."
BLOCKED_CHAR = "#"
PATH_CHAR = "*"
START_CHAR = "S"
GOAL_CHAR = "G"


class GridCanvas:
    """
    A 2D character canvas with one character per grid cell.
    """

    def __init__(self, width: int, height: int, fill_char: str = FREE_CHAR):
        self.width = width
        self.height = height
        self.grid: List[List[str]] = [
            [fill_char for _ in range(width)] for _ in range(height)
        ]

    def set(self, x: int, y: int, char: str) -> None:
        """Set a character at position (x, y); positions off the canvas are ignored."""
        if 0 <= x < self.width and 0 <= y < self.height:
            self.grid[y][x] = char

    def get(self, x: int, y: int) -> str:
        """Get character at position (x, y)."""
        if 0 <= x < self.width and 0 <= y < self.height:
            return self.grid[y][x]
        return " "

    def render(self) -> str:
        """Render the canvas to a string, one grid row per line."""
        return "\n".join("".join(row) for row in self.grid)


def render_grid(
    walkability: WalkabilityOracle,
    path: Optional[Sequence[Cell]] = None,
    start: Optional[Cell] = None,
    goal: Optional[Cell] = None,
) -> GridCanvas:
    """
    Draw the routing grid of one computation.

    Args:
        walkability: Oracle of the computation; its bounds size the canvas
        path: Optional raw path to overlay
        start: Optional start cell to mark
        goal: Optional goal cell to mark

    Returns:
        GridCanvas covering every cell within the bounds
    """
    bounds = walkability.bounds
    canvas = GridCanvas(bounds.width, bounds.height)

    for y in range(bounds.height):
        for x in range(bounds.width):
            if walkability.collides(Cell(x, y)):
                canvas.set(x, y, BLOCKED_CHAR)

    for cell in path or ():
        canvas.set(cell.x, cell.y, PATH_CHAR)

    if start is not None:
        canvas.set(start.x, start.y, START_CHAR)
    if goal is not None:
        canvas.set(goal.x, goal.y, GOAL_CHAR)

    return canvas

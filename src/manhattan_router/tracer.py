"""
Debug tracing infrastructure for manhattan_router.

This module provides data structures for capturing detailed traces of a
route computation. When debug mode is enabled, the router records every
stage of the pipeline and every cell the path search expands.

This is primarily useful for:
1. Debugging odd routes (understanding why the search turned where it did)
2. Understanding the pipeline flow (seeing the grid, raw path and bends)
3. Writing targeted tests (verifying specific search decisions)

Usage:
    >>> router = ManhattanRouter(diagram, debug=True)
    >>> points = router.compute_route(connector)
    >>> trace = router.get_trace()
    >>> print(trace.summary())
    >>> trace.dump_to_file("route_trace.txt")

The trace captures:
- Pipeline stages (grid_mapped, searched, simplified)
- An ASCII snapshot of the routing grid after the search
- Every expanded cell with its cost and the reason it was recorded
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class CellExpansion:
    """
    Record of a single cell taken off the open set.

    Attributes:
        x: Cell x coordinate
        y: Cell y coordinate
        g_score: Cost from the start cell when expanded
        f_score: g_score plus the heuristic estimate to the goal
        reason: Why the cell was recorded (e.g., "expanded", "jump_point",
                "goal_reached")
    """

    x: int
    y: int
    g_score: float
    f_score: float
    reason: str

    def __str__(self) -> str:
        return f"({self.x},{self.y}): g={self.g_score} f={self.f_score} [{self.reason}]"


@dataclass
class PipelineStage:
    """
    Snapshot of state at a pipeline stage.

    A route computation has three stages:
    1. grid_mapped - Grid bounds and the quantised start/goal cells
    2. searched - Raw cell path and how the search ended
    3. simplified - Final bend points in diagram coordinates

    Attributes:
        name: Name of this pipeline stage
        data: Dictionary of relevant data at this stage
        grid_snapshot: Optional list of ASCII grid rows at this point
    """

    name: str
    data: Dict[str, Any]
    grid_snapshot: Optional[List[str]] = None

    def __str__(self) -> str:
        lines = [f"=== Stage: {self.name} ==="]
        for key, value in self.data.items():
            # Truncate long values
            str_val = str(value)
            if len(str_val) > 100:
                str_val = str_val[:100] + "..."
            lines.append(f"  {key}: {str_val}")
        if self.grid_snapshot:
            lines.append("  Grid preview (first 15 rows):")
            for row in self.grid_snapshot[:15]:
                lines.append(f"    |{row}|")
        return "\n".join(lines)


@dataclass
class RouteTrace:
    """
    Complete trace of one route computation.

    Usage:
        >>> trace = router.get_trace()
        >>> trace.get_stage("searched").data["outcome"]
        'found'
        >>> trace.get_expansions_at(3, 0)

    Attributes:
        connector: Name of the connector being routed
        policy: Cost policy the search used
        stages: List of pipeline stages with their data
        expansions: Every cell expansion in the order it happened
    """

    connector: str = ""
    policy: str = ""
    stages: List[PipelineStage] = field(default_factory=list)
    expansions: List[CellExpansion] = field(default_factory=list)

    def add_stage(
        self,
        name: str,
        data: Dict[str, Any],
        grid: Optional[Any] = None,
    ) -> None:
        """
        Add a pipeline stage snapshot.

        Args:
            name: Name of the stage (e.g., "searched")
            data: Dictionary of relevant data at this stage
            grid: Optional GridCanvas to snapshot
        """
        snapshot = None
        if grid is not None:
            rendered = grid.render()
            snapshot = rendered.split("\n") if rendered else []

        self.stages.append(PipelineStage(name, data.copy(), snapshot))

    def add_expansion(
        self, x: int, y: int, g_score: float, f_score: float, reason: str
    ) -> None:
        """Record an expanded cell."""
        self.expansions.append(CellExpansion(x, y, g_score, f_score, reason))

    def get_stage(self, name: str) -> Optional[PipelineStage]:
        """Get a specific pipeline stage by name."""
        for stage in self.stages:
            if stage.name == name:
                return stage
        return None

    def get_grid_at_stage(self, name: str) -> Optional[List[str]]:
        """Get the grid snapshot at a specific stage."""
        stage = self.get_stage(name)
        if stage and stage.grid_snapshot:
            return stage.grid_snapshot
        return None

    def get_expansions_at(self, x: int, y: int) -> List[CellExpansion]:
        """Get all expansions of a specific cell."""
        return [e for e in self.expansions if e.x == x and e.y == y]

    def get_expansions_by_reason(self, reason_substring: str) -> List[CellExpansion]:
        """Get all expansions with a specific reason (partial match)."""
        return [e for e in self.expansions if reason_substring in e.reason]

    def summary(self) -> str:
        """
        Generate a human-readable summary of the trace.

        Returns a string with:
        - Connector and policy
        - Pipeline stages overview
        - Expansion statistics
        """
        lines = [
            "=" * 60,
            "ROUTE TRACE SUMMARY",
            "=" * 60,
            "",
            f"Connector: {self.connector}",
            f"Policy: {self.policy}",
            "",
            f"Pipeline stages: {len(self.stages)}",
        ]

        for stage in self.stages:
            has_grid = "+" if stage.grid_snapshot else "-"
            lines.append(f"  [{has_grid}] {stage.name}")

        lines.extend(["", f"Total expansions: {len(self.expansions)}", ""])

        reason_counts: Dict[str, int] = {}
        for e in self.expansions:
            reason_counts[e.reason] = reason_counts.get(e.reason, 0) + 1

        lines.append("Expansions by reason:")
        for reason, count in sorted(reason_counts.items(), key=lambda x: -x[1]):
            lines.append(f"  {reason}: {count}")

        return "\n".join(lines)

    def dump(self) -> str:
        """
        Generate a complete human-readable dump of the trace.

        This includes all stages with their full data and every expansion.
        Can be quite long for large grids.
        """
        lines = [self.summary(), "", "=" * 60, "DETAILED TRACE", "=" * 60, ""]

        lines.append("PIPELINE STAGES:")
        lines.append("-" * 40)
        for stage in self.stages:
            lines.append(str(stage))
            lines.append("")

        lines.append("CELL EXPANSIONS:")
        lines.append("-" * 40)
        for e in self.expansions:
            lines.append(str(e))

        return "\n".join(lines)

    def dump_to_file(self, filename: str) -> None:
        """Write the complete trace dump to a file."""
        with open(filename, "w", encoding="utf-8") as f:
            f.write(self.dump())

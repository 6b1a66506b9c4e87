"""
Parser module for manhattan_router.

Handles parsing of a small text format into a Diagram:

    # comment
    shape <name> <x> <y> <width> <height>
    <shape>.<side>[@<position>] -> <shape>.<side>[@<position>]
"""

import math
import re
from dataclasses import dataclass, field
from typing import List, Tuple

from .diagram import Diagram
from .models import Anchor, AnchorSide


class ParseError(Exception):
    """Raised when input parsing fails."""

    pass


@dataclass
class ShapeDefinition:
    """A parsed shape line."""

    name: str
    x: float
    y: float
    width: float
    height: float


@dataclass
class ParseResult:
    """Result of parsing input text."""

    shapes: List[ShapeDefinition] = field(default_factory=list)
    connections: List[Tuple[Anchor, Anchor]] = field(default_factory=list)


class Parser:
    """Parses diagram input text into shapes and connections."""

    # shape <name> <x> <y> <width> <height>
    SHAPE_PATTERN = re.compile(r"^shape\s+(\S+)\s+(\S+)\s+(\S+)\s+(\S+)\s+(\S+)$")

    # <shape>.<side>[@<position>]
    ANCHOR_PATTERN = re.compile(r"^([^\s.@]+)\.([A-Za-z]+)(?:@(\S+))?$")

    def parse(self, input_text: str) -> ParseResult:
        """
        Parse input text into shape and connection definitions.

        Args:
            input_text: Multi-line string with shape lines and connections in
                        format "A.right -> B.left"

        Returns:
            ParseResult with shapes and connections in input order

        Raises:
            ParseError: If input format is invalid
        """
        result = ParseResult()
        known_shapes = set()

        for line_num, line in enumerate(input_text.split("\n"), 1):
            stripped = line.strip()

            # Skip empty lines and comments
            if not stripped or stripped.startswith("#"):
                continue

            if stripped.startswith("shape ") or stripped == "shape":
                shape = self._parse_shape(line_num, stripped)
                if shape.name in known_shapes:
                    raise ParseError(
                        f"Line {line_num}: Shape '{shape.name}' is already defined"
                    )
                known_shapes.add(shape.name)
                result.shapes.append(shape)
                continue

            if "->" not in stripped:
                raise ParseError(
                    f"Line {line_num}: Expected '->' in connection: {stripped}"
                )

            parts = stripped.split("->")
            if len(parts) != 2:
                raise ParseError(
                    f"Line {line_num}: Invalid connection format: {stripped}"
                )

            source = self._parse_anchor(line_num, parts[0].strip(), known_shapes)
            target = self._parse_anchor(line_num, parts[1].strip(), known_shapes)
            result.connections.append((source, target))

        if not result.shapes:
            raise ParseError("No shapes found in input")

        return result

    def _parse_shape(self, line_num: int, line: str) -> ShapeDefinition:
        match = self.SHAPE_PATTERN.match(line)
        if not match:
            raise ParseError(
                f"Line {line_num}: Expected 'shape <name> <x> <y> <width> "
                f"<height>': {line}"
            )

        name = match.group(1)
        try:
            x, y, width, height = (float(match.group(i)) for i in range(2, 6))
        except ValueError:
            raise ParseError(
                f"Line {line_num}: Shape '{name}' has a non-numeric dimension"
            ) from None

        if not all(math.isfinite(v) for v in (x, y, width, height)):
            raise ParseError(
                f"Line {line_num}: Shape '{name}' has a non-finite dimension"
            )
        if width < 0 or height < 0:
            raise ParseError(f"Line {line_num}: Shape '{name}' has a negative size")

        return ShapeDefinition(name, x, y, width, height)

    def _parse_anchor(self, line_num: int, text: str, known_shapes: set) -> Anchor:
        """
        Parse one side of a connection.

        Raises:
            ParseError: If the anchor is malformed, names an undeclared shape,
                an unknown side, or a position outside [0, 1].
        """
        if not text:
            raise ParseError(f"Line {line_num}: Empty anchor")

        match = self.ANCHOR_PATTERN.match(text)
        if not match:
            raise ParseError(
                f"Line {line_num}: Expected '<shape>.<side>[@<position>]': {text}"
            )

        shape, side_name, position_text = match.groups()
        if shape not in known_shapes:
            raise ParseError(f"Line {line_num}: Unknown shape '{shape}'")

        try:
            side = AnchorSide(side_name.lower())
        except ValueError:
            raise ParseError(
                f"Line {line_num}: Unknown side '{side_name}', expected one of "
                "top, bottom, left, right"
            ) from None

        position = 0.5
        if position_text is not None:
            try:
                position = float(position_text)
            except ValueError:
                raise ParseError(
                    f"Line {line_num}: Invalid anchor position '{position_text}'"
                ) from None
            if not 0.0 <= position <= 1.0:
                raise ParseError(
                    f"Line {line_num}: Anchor position must be between 0 and 1: "
                    f"{position_text}"
                )

        return Anchor(shape, side, position)


def parse_diagram(input_text: str) -> Diagram:
    """
    Convenience function to build a Diagram from text.

    Args:
        input_text: Multi-line string with shapes and connections

    Returns:
        Diagram holding every shape and connector, in input order
    """
    result = Parser().parse(input_text)

    diagram = Diagram()
    for shape in result.shapes:
        diagram.add_shape(shape.name, shape.x, shape.y, shape.width, shape.height)
    for source, target in result.connections:
        diagram.connect(source, target)
    return diagram

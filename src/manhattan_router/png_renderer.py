"""
PNG Renderer module for manhattan_router.

Draws a routed diagram as a PNG image: shapes as labelled boxes and every
connector route as a polyline with an arrowhead at the target end.
"""

import math
import os
from typing import Optional, Tuple

from PIL import Image, ImageDraw, ImageFont

from .diagram import Diagram
from .geometry import DiagramPoint
from .models import Shape


class PNGRenderer:
    """Renders routed diagrams as PNG images."""

    def __init__(
        self,
        font_size: int = 11,
        font_path: Optional[str] = None,  # Custom font path
        scale: int = 2,  # For high-resolution output
        margin: int = 20,
        arrow_size: int = 6,
    ):
        self.font_size = font_size
        self.font_path = font_path
        self.scale = scale
        self.margin = margin
        self.arrow_size = arrow_size

        # Colors
        self.bg_color = (255, 255, 255)
        self.box_fill = (255, 255, 255)
        self.box_outline = (0, 0, 0)
        self.text_color = (0, 0, 0)
        self.line_color = (0, 0, 0)

        self.font = None

    def _get_font(self) -> ImageFont.FreeTypeFont:
        """Get a font for rendering text."""
        if self.font is not None:
            return self.font

        font_size = self.font_size * self.scale

        if self.font_path and os.path.exists(self.font_path):
            try:
                self.font = ImageFont.truetype(self.font_path, font_size)
                return self.font
            except OSError:
                pass  # Fall through to system fonts

        font_options = [
            "/usr/share/fonts/truetype/dejavu/DejaVuSansMono.ttf",
            "/usr/share/fonts/truetype/liberation/LiberationMono-Regular.ttf",
            "/usr/share/fonts/truetype/freefont/FreeMono.ttf",
        ]

        for path in font_options:
            if os.path.exists(path):
                try:
                    self.font = ImageFont.truetype(path, font_size)
                    return self.font
                except OSError:
                    continue

        self.font = ImageFont.load_default()
        return self.font

    def _to_pixel(self, point: DiagramPoint) -> Tuple[float, float]:
        """Map a diagram point to image coordinates."""
        return (
            (point.x + self.margin) * self.scale,
            (point.y + self.margin) * self.scale,
        )

    def _canvas_size(self, diagram: Diagram) -> Tuple[int, int]:
        max_x = 0.0
        max_y = 0.0
        for shape in diagram.all_shapes():
            max_x = max(max_x, shape.right)
            max_y = max(max_y, shape.bottom)
        for connector in diagram.connectors:
            for point in connector.route:
                max_x = max(max_x, point.x)
                max_y = max(max_y, point.y)
        width = math.ceil((max_x + 2 * self.margin) * self.scale)
        height = math.ceil((max_y + 2 * self.margin) * self.scale)
        return max(width, 1), max(height, 1)

    def render(self, diagram: Diagram) -> Image.Image:
        """
        Render a diagram to an in-memory image.

        Connectors without a route are skipped; route them first with
        ManhattanRouter.route_all().

        Args:
            diagram: Diagram to draw

        Returns:
            RGB PIL image
        """
        img = Image.new("RGB", self._canvas_size(diagram), self.bg_color)
        draw = ImageDraw.Draw(img)

        # Boxes first so routes leaving a border stay visible
        for shape in diagram.all_shapes():
            self._draw_shape(draw, shape)

        line_width = max(1, self.scale)
        for connector in diagram.connectors:
            self._draw_route(draw, connector.route, line_width)

        return img

    def save(self, diagram: Diagram, output_path: str = "diagram.png") -> str:
        """
        Render a diagram and save it as a PNG file.

        Returns:
            Path to the saved PNG file
        """
        img = self.render(diagram)
        img.save(output_path, "PNG")
        return output_path

    def _draw_shape(self, draw: ImageDraw.ImageDraw, shape: Shape) -> None:
        """Draw a box with its name centered inside."""
        left, top = self._to_pixel(DiagramPoint(shape.x, shape.y))
        right, bottom = self._to_pixel(DiagramPoint(shape.right, shape.bottom))
        draw.rectangle(
            [left, top, right, bottom],
            fill=self.box_fill,
            outline=self.box_outline,
            width=max(1, self.scale),
        )

        font = self._get_font()
        bbox = draw.textbbox((0, 0), shape.name, font=font)
        text_w = bbox[2] - bbox[0]
        text_h = bbox[3] - bbox[1]
        center = DiagramPoint(shape.center_x, shape.center_y)
        center_x, center_y = self._to_pixel(center)
        text_x = center_x - text_w / 2
        text_y = center_y - text_h / 2
        draw.text((text_x, text_y), shape.name, fill=self.text_color, font=font)

    def _draw_route(self, draw: ImageDraw.ImageDraw, route, line_width: int) -> None:
        """Draw a route polyline with an arrowhead at its last point."""
        if len(route) < 2:
            return

        pixels = [self._to_pixel(p) for p in route]
        for p1, p2 in zip(pixels, pixels[1:]):
            draw.line([p1, p2], fill=self.line_color, width=line_width)

        # Last segment may be zero length when the anchors coincide
        for from_pt in reversed(pixels[:-1]):
            if from_pt != pixels[-1]:
                self._draw_arrowhead(draw, from_pt, pixels[-1])
                break

    def _draw_arrowhead(
        self,
        draw: ImageDraw.ImageDraw,
        from_point: Tuple[float, float],
        to_point: Tuple[float, float],
    ) -> None:
        """Draw an arrowhead at the end of a line."""
        x1, y1 = from_point
        x2, y2 = to_point

        size = self.arrow_size * self.scale
        angle = math.atan2(y2 - y1, x2 - x1)
        angle1 = angle + math.pi * 0.8
        angle2 = angle - math.pi * 0.8

        ax1 = x2 + size * math.cos(angle1)
        ay1 = y2 + size * math.sin(angle1)
        ax2 = x2 + size * math.cos(angle2)
        ay2 = y2 + size * math.sin(angle2)

        draw.polygon([(x2, y2), (ax1, ay1), (ax2, ay2)], fill=self.line_color)


def render_to_png(diagram: Diagram, output_path: str = "diagram.png", **kwargs) -> str:
    """
    Convenience function to render a routed diagram to PNG.

    Args:
        diagram: Diagram whose connectors have been routed
        output_path: Path to save the PNG file
        **kwargs: Additional parameters for PNGRenderer

    Returns:
        Path to the saved PNG file
    """
    renderer = PNGRenderer(**kwargs)
    return renderer.save(diagram, output_path)

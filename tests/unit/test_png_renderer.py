"""Tests for the PNG renderer module."""

import os

from PIL import Image

from manhattan_router import Diagram, ManhattanRouter
from manhattan_router.png_renderer import PNGRenderer, render_to_png

BLACK = (0, 0, 0)
WHITE = (255, 255, 255)


class TestPNGRenderer:
    """Tests for PNGRenderer class."""

    def test_canvas_size(self, two_boxes):
        image = PNGRenderer(scale=1, margin=20).render(two_boxes)
        assert image.size == (280, 180)
        assert image.mode == "RGB"

    def test_scale_multiplies_size(self, two_boxes):
        image = PNGRenderer(scale=2, margin=20).render(two_boxes)
        assert image.size == (560, 360)

    def test_shape_outline(self, two_boxes):
        image = PNGRenderer(scale=1, margin=20).render(two_boxes)
        # Left edge of A at diagram (0, 120)
        assert image.getpixel((20, 140)) == BLACK
        assert image.getpixel((10, 140)) == WHITE

    def test_route_drawn(self, two_boxes, two_boxes_connector):
        ManhattanRouter(two_boxes).route_all()
        image = PNGRenderer(scale=1, margin=20).render(two_boxes)
        # Midpoint of the straight route from (40, 120) to (200, 120)
        assert image.getpixel((140, 140)) == BLACK
        assert image.getpixel((140, 130)) == WHITE

    def test_unrouted_connector_skipped(self, two_boxes, two_boxes_connector):
        image = PNGRenderer(scale=1, margin=20).render(two_boxes)
        assert image.getpixel((140, 140)) == WHITE

    def test_empty_diagram(self):
        image = PNGRenderer(scale=2, margin=20).render(Diagram())
        assert image.size == (80, 80)

    def test_save(self, two_boxes, tmp_path):
        output_path = str(tmp_path / "diagram.png")
        result = PNGRenderer().save(two_boxes, output_path)
        assert result == output_path
        assert os.path.getsize(output_path) > 0
        with Image.open(output_path) as image:
            assert image.format == "PNG"


class TestRenderToPng:
    """Tests for the render_to_png convenience function."""

    def test_writes_file(self, flow_diagram, tmp_path):
        ManhattanRouter(flow_diagram).route_all()
        output_path = str(tmp_path / "flow.png")
        assert render_to_png(flow_diagram, output_path, scale=1) == output_path
        with Image.open(output_path) as image:
            assert image.size == (440, 200)

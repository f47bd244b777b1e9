"""
Tests for svg_painter.writer module.

Tests:
- End-to-end scenarios on a 100x100 orthographic canvas
- Degenerate rejection and back-face culling
- Stable painter's ordering
- Shading of uncolored triangles
- svgwrite drawing export and file output
"""

import math
from xml.etree import ElementTree as ET

import numpy as np
import pytest

from svg_painter.config import WriterConfig
from svg_painter.geometry.transforms import look_at, scale
from svg_painter.writer import SvgWriter

from tests.conftest import SVG_NS, drawn_elements, fill_of

HEADER = (
    '<svg width="100" height="100" version="1.1" xmlns="http://www.w3.org/2000/svg">\n'
    '<rect width="100" height="100" style="fill:white"/>\n'
)


class TestScenarios:
    """Literal end-to-end scenarios."""

    def test_single_point(self, writer):
        writer.write_point((50, 50, 0), (1, 0, 0))
        svg = str(writer)
        assert '<circle cx="50" cy="50" r="3" style="fill: rgb(255,0,0)" />' in svg

    def test_full_document(self, writer):
        writer.write_point((50, 50, 0), (1, 0, 0))
        assert str(writer) == (
            HEADER
            + '<circle cx="50" cy="50" r="3" style="fill: rgb(255,0,0)" />\n'
            + '</svg>\n'
        )

    def test_empty_document(self, writer):
        assert str(writer) == HEADER + '</svg>\n'

    def test_y_flip(self, writer):
        writer.write_point((10, 0, 0), (0, 1, 0))
        assert 'cx="10" cy="100"' in str(writer)

    def test_front_triangle_recorded(self, writer, front_triangle):
        writer.write_triangle(*front_triangle, (0, 0, 1))
        assert '<polygon points="0,100 100,100 0,0 " style="fill: rgb(0,0,255);" />' in str(writer)

    def test_back_triangle_culled(self, writer, back_triangle):
        writer.write_triangle(*back_triangle, (0, 0, 1))
        assert '<polygon' not in str(writer)
        assert len(writer) == 0

    def test_both_windings_recorded_without_culling(self, writer, front_triangle, back_triangle):
        writer.cullface(False)
        writer.write_triangle(*front_triangle, (0, 0, 1))
        writer.write_triangle(*back_triangle, (0, 0, 1))
        assert str(writer).count('<polygon') == 2

    def test_depth_order(self, writer):
        """Far triangle is drawn before the near one even if submitted later."""
        # ortho window depth = 0.5 - z / 2
        near = [(0, 0, 1), (100, 0, 1), (0, 100, 1)]
        far = [(0, 0, -19), (100, 0, -19), (0, 100, -19)]
        writer.write_triangle(*near, (1, 1, 1))
        writer.write_triangle(*far, (0, 0, 0))

        assert [e.z for e in writer.elements] == pytest.approx([0.0, 10.0])
        polygons = drawn_elements(str(writer))
        assert [fill_of(p) for p in polygons] == ["rgb(0,0,0)", "rgb(255,255,255)"]

    def test_degenerate_line(self, writer):
        writer.write_line((1, 1, 1), (1, 1, 1), (1, 0, 0))
        assert '<line' not in str(writer)

    def test_idempotent_render(self, writer, front_triangle):
        writer.write_triangle(*front_triangle)
        writer.write_point((10, 10, 5), (1, 0, 0))
        writer.write_line((0, 0, -3), (50, 50, 2), (0, 1, 0))
        first = str(writer)
        assert str(writer) == first


class TestDegenerateRejection:
    """Coincident points never produce primitives."""

    @pytest.mark.parametrize("corners", [
        ((1, 1, 0), (1, 1, 0), (5, 2, 0)),
        ((1, 1, 0), (5, 2, 0), (5, 2, 0)),
        ((5, 2, 0), (1, 1, 0), (5, 2, 0)),
        ((3, 3, 3), (3, 3, 3), (3, 3, 3)),
    ])
    def test_triangle_with_equal_corners(self, writer, corners):
        writer.cullface(False)
        writer.write_triangle(*corners, (1, 0, 0))
        writer.write_triangle(*corners)
        assert len(writer) == 0
        assert writer.stats.degenerate == 2

    def test_line_with_distinct_endpoints_kept(self, writer):
        writer.write_line((0, 0, 0), (0, 0, 1), (1, 0, 0))
        assert len(writer) == 1

    def test_collinear_triangle_kept(self, writer):
        """Zero-area but non-coincident triangles pass the nz > 0 test."""
        writer.write_triangle((0, 0, 0), (10, 0, 0), (20, 0, 0), (1, 0, 0))
        assert len(writer) == 1


class TestCulling:
    """Back-face culling in screen space."""

    def test_exactly_one_winding_survives(self, writer):
        rng = np.random.default_rng(42)
        for _ in range(50):
            a, b, c = (tuple(p) for p in rng.uniform(0, 100, size=(3, 3)))
            before = len(writer)
            writer.write_triangle(a, b, c, (1, 0, 0))
            writer.write_triangle(a, c, b, (1, 0, 0))
            assert len(writer) - before == 1

    def test_culling_toggle(self, writer, back_triangle):
        writer.cullface(False)
        assert writer.culling_enabled is False
        writer.write_triangle(*back_triangle, (1, 0, 0))
        writer.cullface(True)
        writer.write_triangle(*back_triangle, (1, 0, 0))
        assert len(writer) == 1
        assert writer.stats.culled == 1

    def test_mirrored_view_flips_culling(self, writer, front_triangle, back_triangle):
        writer.model_view(scale((-1, 1, 1)))
        writer.ortho(-100, 0, 0, 100)
        writer.write_triangle(*front_triangle, (1, 0, 0))
        writer.write_triangle(*back_triangle, (0, 1, 0))
        assert len(writer) == 1
        assert writer.elements[0].color == (0.0, 1.0, 0.0)

    def test_culling_follows_perspective_camera(self):
        writer = SvgWriter(200, 200)
        writer.perspective(math.radians(60), 1.0, 0.1, 100.0)
        writer.model_view(look_at((0, 0, 5), (0, 0, 0), (0, 1, 0)))
        writer.write_triangle((0, 0, 0), (1, 0, 0), (0, 1, 0), (1, 0, 0))
        writer.write_triangle((0, 0, 0), (0, 1, 0), (1, 0, 0), (1, 0, 0))
        assert len(writer) == 1


class TestOrdering:
    """Painter's sort: far first, stable under equal depth."""

    def test_equal_depth_keeps_submission_order(self, writer):
        colors = [(1, 0, 0), (0, 1, 0), (0, 0, 1), (1, 1, 0)]
        for i, color in enumerate(colors):
            writer.write_point((10 * i, 10, 0), color)
        fills = [fill_of(e) for e in drawn_elements(str(writer))]
        assert fills == ["rgb(255,0,0)", "rgb(0,255,0)", "rgb(0,0,255)", "rgb(255,255,0)"]

    def test_fill_before_outline_on_same_plane(self, writer, front_triangle):
        """Coplanar outline submitted after the fill is drawn after it."""
        writer.write_triangle(*front_triangle, (0.5, 0.5, 0.5))
        a, b, c = front_triangle
        writer.write_line(a, b, (0, 0, 0))
        tags = [e.tag.split('}')[-1] for e in drawn_elements(str(writer))]
        assert tags == ['polygon', 'line']

    def test_mixed_primitives_sorted_by_depth(self, writer):
        writer.write_point((10, 10, 1), (1, 0, 0))        # depth 0
        writer.write_line((0, 0, -1), (5, 5, -1), (0, 1, 0))  # depth 1
        writer.write_point((20, 20, -19), (0, 0, 1))      # depth 10
        str(writer)
        assert [e.z for e in writer.elements] == pytest.approx([10.0, 1.0, 0.0])

    def test_render_sorts_in_place(self, writer):
        writer.write_point((0, 0, 1), (1, 0, 0))
        writer.write_point((0, 0, -1), (0, 1, 0))
        str(writer)
        assert writer.elements[0].color == (0.0, 1.0, 0.0)


class TestColor:
    """Color clamping and shading."""

    def test_out_of_range_colors_clamped(self, writer):
        writer.write_point((1, 1, 0), (7.5, -3.0, 0.5))
        assert 'rgb(255,0,127)' in str(writer)

    def test_all_emitted_channels_in_range(self, writer):
        rng = np.random.default_rng(3)
        for color in rng.normal(scale=5.0, size=(40, 3)):
            writer.write_point((1, 1, 0), tuple(color))
        for elem in drawn_elements(str(writer)):
            channels = [int(c) for c in fill_of(elem)[4:-1].split(',')]
            assert all(0 <= c <= 255 for c in channels)

    def test_uncolored_triangle_is_shaded(self, writer, front_triangle):
        writer.write_triangle(*front_triangle)
        # normal (0, 0, 1), light (1, 2, 3)/sqrt(14): 0.1 + 0.8 * 3/sqrt(14)
        assert 'rgb(189,189,189)' in str(writer)

    def test_shading_uses_world_normal(self, writer, back_triangle):
        """Under a mirrored view the world normal still decides the gray."""
        writer.model_view(scale((-1, 1, 1)))
        writer.ortho(-100, 0, 0, 100)
        writer.write_triangle(*back_triangle)
        assert len(writer) == 1
        assert 'rgb(25,25,25)' in str(writer)

    def test_custom_light(self, front_triangle):
        writer = SvgWriter(100, 100, light_direction=(0, 0, 1))
        writer.ortho(0, 100, 0, 100)
        writer.write_triangle(*front_triangle)
        assert 'rgb(229,229,229)' in str(writer)

    def test_light_dir_is_unit(self, writer):
        assert np.linalg.norm(writer.light_dir) == pytest.approx(1.0)

    def test_zero_light_rejected(self):
        with pytest.raises(ValueError):
            SvgWriter(100, 100, light_direction=(0, 0, 0))


class TestViewport:
    """Viewport placement in the canvas."""

    def test_quadrant_viewport(self):
        writer = SvgWriter(200, 200)
        writer.ortho(0, 100, 0, 100)
        writer.viewport(100, 100, 100, 100)
        writer.write_point((0, 0, 0), (0, 0, 0))
        assert 'cx="100" cy="100"' in str(writer)


class TestAccumulator:
    """Stats, length and clearing."""

    def test_stats(self, writer, front_triangle, back_triangle):
        writer.write_point((0, 0, 0), (0, 0, 0))
        writer.write_line((0, 0, 0), (0, 0, 0), (0, 0, 0))
        writer.write_triangle(*front_triangle)
        writer.write_triangle(*back_triangle)
        assert writer.stats.submitted == 4
        assert writer.stats.recorded == 2
        assert writer.stats.degenerate == 1
        assert writer.stats.culled == 1

    def test_clear(self, writer):
        writer.write_point((0, 0, 0), (0, 0, 0))
        writer.clear()
        assert len(writer) == 0
        assert str(writer) == HEADER + '</svg>\n'

    def test_negative_canvas_rejected(self):
        with pytest.raises(ValueError):
            SvgWriter(-1, 10)


class TestConfiguredWriter:
    """Writer built from WriterConfig."""

    def test_from_config(self, front_triangle):
        config = WriterConfig.from_dict({
            'canvas': {'width': 100, 'height': 100},
            'render': {'cullface': False, 'point_radius': 2, 'background': 'black'},
        })
        writer = SvgWriter.from_config(config)
        writer.ortho(0, 100, 0, 100)
        writer.write_triangle(*reversed(front_triangle), (1, 0, 0))
        writer.write_point((1, 1, 0), (1, 0, 0))
        svg = str(writer)
        assert '<polygon' in svg
        assert 'r="2"' in svg
        assert 'style="fill:black"' in svg


class TestExport:
    """svgwrite drawing export and saving."""

    def test_to_drawing_structure(self, writer, front_triangle):
        writer.write_line((0, 0, -19), (10, 10, -19), (0, 1, 0))
        writer.write_point((50, 50, 0), (1, 0, 0))
        writer.write_triangle(*front_triangle)

        root = ET.fromstring(writer.to_drawing().tostring())
        assert root.get('width') == '100'
        assert len(root.findall('svg:rect', SVG_NS)) == 1
        group = root.find('svg:g', SVG_NS)
        tags = [child.tag.split('}')[-1] for child in group]
        assert tags == ['line', 'circle', 'polygon']

    def test_save(self, writer, tmp_svg_path):
        writer.write_point((50, 50, 0), (1, 0, 0))
        path = writer.save(tmp_svg_path)
        assert path == tmp_svg_path
        assert tmp_svg_path.read_text(encoding='utf-8') == str(writer)

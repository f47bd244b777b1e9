"""
SVG writer for 3D points, lines and triangles.

Primitives are projected through the camera as they are submitted,
filtered (degenerate input, back faces) and accumulated. Rendering
sorts the accumulator back to front (painter's algorithm) and emits an
SVG 1.1 document.

Usage:
    writer = SvgWriter(100, 100)
    writer.ortho(0, 100, 0, 100)
    writer.write_triangle((0, 0, 0), (100, 0, 0), (0, 100, 0))
    svg_text = str(writer)
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple, Union

import numpy as np
import svgwrite
from numpy.typing import ArrayLike, NDArray

from svg_painter.camera import Camera
from svg_painter.config import WriterConfig
from svg_painter.geometry.transforms import as_vec3, normal, unit_normal
from svg_painter.logging_config import log_timing
from svg_painter.primitives import (
    DEFAULT_POINT_RADIUS,
    BaseElem,
    LineElem,
    TriangleElem,
    VertexElem,
)
from svg_painter.shading import DEFAULT_LIGHT_DIR, Color, DirectionalLight

logger = logging.getLogger(__name__)

SVG_NAMESPACE = "http://www.w3.org/2000/svg"


@dataclass
class WriterStats:
    """Counters of submitted and discarded primitives."""
    submitted: int = 0
    recorded: int = 0
    degenerate: int = 0
    culled: int = 0


class SvgWriter:
    """Accumulates projected primitives and serializes them as SVG.

    Attributes:
        width, height: canvas size in pixels.
        camera: view/projection/viewport state.
        light: directional light used for uncolored triangles.
        stats: submission counters.
    """

    def __init__(
        self,
        width: int,
        height: int,
        light_direction: ArrayLike = DEFAULT_LIGHT_DIR,
        cullface: bool = True,
        point_radius: float = DEFAULT_POINT_RADIUS,
        background: str = "white",
    ) -> None:
        if width < 0 or height < 0:
            raise ValueError(f"Canvas size must be non-negative, got {width}x{height}")
        self.width = int(width)
        self.height = int(height)
        self.camera = Camera(self.width, self.height)
        self.light = DirectionalLight(light_direction)
        self.point_radius = point_radius
        self.background = background
        self.stats = WriterStats()
        self._cullface = bool(cullface)
        self._elems: List[BaseElem] = []

    @classmethod
    def from_config(cls, config: WriterConfig) -> 'SvgWriter':
        """Build a writer from a loaded configuration."""
        return cls(
            config.canvas.width,
            config.canvas.height,
            light_direction=config.render.light_direction,
            cullface=config.render.cullface,
            point_radius=config.render.point_radius,
            background=config.render.background,
        )

    # ------------------------------------------------------------------
    # Camera
    # ------------------------------------------------------------------

    def model_view(self, matrix: ArrayLike) -> None:
        self.camera.model_view(matrix)

    def perspective(self, fovy: float, aspect: float, z_near: float, z_far: float) -> None:
        self.camera.perspective(fovy, aspect, z_near, z_far)

    def ortho(self, left: float, right: float, bottom: float, top: float) -> None:
        self.camera.ortho(left, right, bottom, top)

    def viewport(self, x: int, y: int, width: int, height: int) -> None:
        self.camera.viewport(x, y, width, height)

    def cullface(self, on: bool) -> None:
        """Enable or disable back-face culling."""
        self._cullface = bool(on)

    @property
    def culling_enabled(self) -> bool:
        return self._cullface

    @property
    def light_dir(self) -> NDArray[np.float64]:
        return self.light.direction

    def normal_to_color(self, n: ArrayLike) -> Color:
        return self.light.shade(n)

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    def _record(self, elem: BaseElem) -> None:
        self._elems.append(elem)
        self.stats.recorded += 1

    def write_point(self, p: ArrayLike, color: ArrayLike) -> None:
        self.stats.submitted += 1
        self._record(VertexElem(self.camera.project(p), color))

    def write_line(self, p1: ArrayLike, p2: ArrayLike, color: ArrayLike) -> None:
        """Record a segment; coincident endpoints are silently dropped."""
        self.stats.submitted += 1
        p1 = as_vec3(p1)
        p2 = as_vec3(p2)
        if np.array_equal(p1, p2):
            self.stats.degenerate += 1
            logger.debug("Degenerate line discarded", extra={"point": p1.tolist()})
            return
        self._record(LineElem(self.camera.project(p1), self.camera.project(p2), color))

    def write_triangle(
        self,
        p1: ArrayLike,
        p2: ArrayLike,
        p3: ArrayLike,
        color: Optional[ArrayLike] = None,
    ) -> None:
        """Record a triangle.

        Triangles with two equal corners are dropped. With culling on, a
        triangle whose screen-space winding faces away is dropped. Without
        an explicit color the triangle is shaded from its world-space normal.
        """
        p1, p2, p3 = as_vec3(p1), as_vec3(p2), as_vec3(p3)
        if color is None:
            color = self.light.shade(unit_normal(p1, p2, p3))

        self.stats.submitted += 1
        if np.array_equal(p1, p2) or np.array_equal(p2, p3) or np.array_equal(p1, p3):
            self.stats.degenerate += 1
            logger.debug("Degenerate triangle discarded")
            return

        pp1 = self.camera.project(p1)
        pp2 = self.camera.project(p2)
        pp3 = self.camera.project(p3)

        # y is already flipped, so front faces have nz <= 0
        if self._cullface:
            nz = float(normal(pp1, pp2, pp3)[2])
            if nz > 0.0:
                self.stats.culled += 1
                logger.debug("Back-facing triangle culled", extra={"nz": nz})
                return

        self._record(TriangleElem(pp1, pp2, pp3, color))

    # ------------------------------------------------------------------
    # Accumulator
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._elems)

    @property
    def elements(self) -> Tuple[BaseElem, ...]:
        return tuple(self._elems)

    def clear(self) -> None:
        """Drop all recorded primitives; camera and light are kept."""
        self._elems.clear()
        self.stats = WriterStats()

    def _sort(self) -> None:
        # list.sort stays stable with reverse=True
        self._elems.sort(key=lambda e: e.z, reverse=True)

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def to_svg(self) -> str:
        """Serialize the scene. Sorts the accumulator in place."""
        with log_timing(logger, "Serializing SVG", primitives=len(self._elems),
                        culled=self.stats.culled, degenerate=self.stats.degenerate):
            parts = [
                f'<svg width="{self.width}" height="{self.height}" '
                f'version="1.1" xmlns="{SVG_NAMESPACE}">\n',
                f'<rect width="{self.width}" height="{self.height}" '
                f'style="fill:{self.background}"/>\n',
            ]
            self._sort()
            parts.extend(elem.svg(self.point_radius) for elem in self._elems)
            parts.append("</svg>\n")
        return "".join(parts)

    def __str__(self) -> str:
        return self.to_svg()

    def render_group(self, dwg: svgwrite.Drawing) -> svgwrite.container.Group:
        """Sorted primitives as an svgwrite group, for embedding in another drawing."""
        group = dwg.g()
        self._sort()
        for elem in self._elems:
            group.add(elem.svg_element(dwg, self.point_radius))
        return group

    def to_drawing(self, filename: str = "noname.svg") -> svgwrite.Drawing:
        """Build an svgwrite drawing holding the background and all primitives."""
        dwg = svgwrite.Drawing(
            filename,
            size=(self.width, self.height),
            debug=False,
        )
        background = dwg.rect(insert=(0, 0), size=(self.width, self.height))
        background['style'] = f"fill:{self.background}"
        dwg.add(background)
        dwg.add(self.render_group(dwg))
        return dwg

    def save(self, path: Union[str, Path]) -> Path:
        """Write the SVG document as UTF-8 text."""
        path = Path(path)
        with log_timing(logger, "Saving SVG", level=logging.INFO, path=str(path)) as result:
            text = self.to_svg()
            path.write_text(text, encoding='utf-8')
            result['primitives'] = len(self._elems)
            result['chars'] = len(text)
        return path

"""
Camera and viewport state for the SVG writer.

Holds the view and projection matrices, the cached view-projection
product and the viewport rectangle. Projected points are returned in
SVG window space: origin top-left, y axis pointing down.
"""

import logging
from typing import Tuple

import numpy as np
from numpy.typing import ArrayLike, NDArray

from svg_painter.geometry.transforms import (
    as_mat4,
    identity,
    ortho2d,
    perspective,
    project,
)

logger = logging.getLogger(__name__)


class Camera:
    """View/projection/viewport chain for one canvas.

    ``view_proj_matrix`` is always ``proj_matrix @ view_matrix``; it is
    recomputed by every mutator and never set directly.
    """

    def __init__(self, width: int, height: int) -> None:
        self._canvas_height = int(height)
        self._view = identity()
        self._proj = identity()
        self._view_proj = identity()
        self._viewport_origin: Tuple[int, int] = (0, 0)
        self._viewport_size: Tuple[int, int] = (int(width), int(height))

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def view_matrix(self) -> NDArray[np.float64]:
        return self._view.copy()

    @property
    def proj_matrix(self) -> NDArray[np.float64]:
        return self._proj.copy()

    @property
    def view_proj_matrix(self) -> NDArray[np.float64]:
        return self._view_proj.copy()

    @property
    def viewport_origin(self) -> Tuple[int, int]:
        return self._viewport_origin

    @property
    def viewport_size(self) -> Tuple[int, int]:
        return self._viewport_size

    # ------------------------------------------------------------------
    # Mutators
    # ------------------------------------------------------------------

    def _update_view_proj(self) -> None:
        with np.errstate(invalid='ignore', over='ignore'):
            self._view_proj = self._proj @ self._view

    def model_view(self, matrix: ArrayLike) -> None:
        """Set the world-to-camera matrix."""
        self._view = as_mat4(matrix)
        self._update_view_proj()

    def perspective(self, fovy: float, aspect: float, z_near: float, z_far: float) -> None:
        """Set an OpenGL-style perspective projection (fovy in radians)."""
        self._proj = perspective(fovy, aspect, z_near, z_far)
        self._update_view_proj()
        logger.debug("Perspective projection set", extra={
            "fovy": fovy, "aspect": aspect, "z_near": z_near, "z_far": z_far,
        })

    def ortho(self, left: float, right: float, bottom: float, top: float) -> None:
        """Set a 2D orthographic projection."""
        self._proj = ortho2d(left, right, bottom, top)
        self._update_view_proj()
        logger.debug("Orthographic projection set", extra={
            "left": left, "right": right, "bottom": bottom, "top": top,
        })

    def viewport(self, x: int, y: int, width: int, height: int) -> None:
        """Set the window rectangle that normalized device coordinates map to."""
        self._viewport_origin = (int(x), int(y))
        self._viewport_size = (int(width), int(height))

    # ------------------------------------------------------------------
    # Projection
    # ------------------------------------------------------------------

    def project(self, p: ArrayLike) -> NDArray[np.float64]:
        """Project a world-space point to SVG window coordinates.

        The z component is the window depth used for sorting. The y flip
        happens here and only here.
        """
        with np.errstate(invalid='ignore', over='ignore'):
            win = project(p, self._view_proj, self._viewport_origin, self._viewport_size)
        win[1] = self._canvas_height - win[1]
        return win

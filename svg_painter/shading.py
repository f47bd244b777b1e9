"""
Directional-light shading.

A surface normal is turned into a gray fill color: a fixed ambient
floor plus a Lambert diffuse term, so every shaded value lies in
[AMBIENT, AMBIENT + DIFFUSE].
"""

from typing import Tuple

import numpy as np
from numpy.typing import ArrayLike, NDArray

from svg_painter.geometry.transforms import as_vec3, clamp, normalize

AMBIENT = 0.1
DIFFUSE = 0.8
DEFAULT_LIGHT_DIR = (1.0, 2.0, 3.0)

Color = Tuple[float, float, float]


class DirectionalLight:
    """Single light shining along a fixed unit direction."""

    __slots__ = ('_direction',)

    def __init__(self, direction: ArrayLike = DEFAULT_LIGHT_DIR) -> None:
        direction = as_vec3(direction)
        if not np.all(np.isfinite(direction)) or not np.any(direction):
            raise ValueError(f"Light direction must be a finite non-zero vector, got {direction.tolist()}")
        self._direction = normalize(direction)

    @property
    def direction(self) -> NDArray[np.float64]:
        return self._direction.copy()

    def shade(self, n: ArrayLike) -> Color:
        return normal_to_color(n, self._direction)


def normal_to_color(n: ArrayLike, light_dir: ArrayLike) -> Color:
    """Gray color for normal ``n`` lit from ``light_dir`` (unit vector)."""
    d = float(clamp(np.dot(as_vec3(n), as_vec3(light_dir)), 0.0, 1.0))
    d = AMBIENT + DIFFUSE * d
    return (d, d, d)

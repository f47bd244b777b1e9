"""Линейная алгебра: матрицы проекции, проецирование точек, нормали."""

from svg_painter.geometry.transforms import (
    as_mat4,
    as_vec3,
    clamp,
    identity,
    look_at,
    normal,
    normalize,
    ortho2d,
    perspective,
    project,
    rotate,
    scale,
    translate,
    unit_normal,
)

__all__ = [
    "as_mat4",
    "as_vec3",
    "clamp",
    "identity",
    "look_at",
    "normal",
    "normalize",
    "ortho2d",
    "perspective",
    "project",
    "rotate",
    "scale",
    "translate",
    "unit_normal",
]

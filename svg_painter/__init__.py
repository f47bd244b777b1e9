"""
svg_painter — вывод 3D-точек, отрезков и треугольников в SVG
алгоритмом художника.

Основной класс — SvgWriter.
"""

from svg_painter.camera import Camera
from svg_painter.config import WriterConfig, load_config
from svg_painter.logging_config import (
    setup_logging,
    log_timing,
)
from svg_painter.primitives import LineElem, TriangleElem, VertexElem
from svg_painter.shading import DirectionalLight, normal_to_color
from svg_painter.writer import SvgWriter, WriterStats

__all__ = [
    "Camera",
    "DirectionalLight",
    "LineElem",
    "SvgWriter",
    "TriangleElem",
    "VertexElem",
    "WriterConfig",
    "WriterStats",
    "load_config",
    "log_timing",
    "normal_to_color",
    "setup_logging",
]

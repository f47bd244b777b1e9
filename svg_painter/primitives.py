"""
Примитивы SVG-писателя: точка, отрезок, треугольник.

Каждая запись хранит уже спроецированные оконные координаты (ось Y вниз),
ключ глубины z и цвет (r, g, b) в долях [0, 1]. Ограничение цвета
диапазоном [0, 1] выполняется только при сериализации.

Содержит:
- format_number — текстовое представление координат (как %g)
- to_rgb / rgb_string — перевод цвета в rgb(R,G,B)
- VertexElem, LineElem, TriangleElem — записи с методами svg() и svg_element()
"""

import math
from abc import ABC, abstractmethod
from typing import Sequence, Tuple

import numpy as np
import svgwrite
from numpy.typing import ArrayLike, NDArray

from svg_painter.geometry.transforms import as_vec3

DEFAULT_POINT_RADIUS = 3.0

Color = Tuple[float, float, float]


# ---------------------------------------------------------------------------
# Форматирование
# ---------------------------------------------------------------------------

def format_number(value: float) -> str:
    """Число в формате потока по умолчанию: 6 значащих цифр, без хвостовых нулей."""
    return f"{float(value):g}"


def _channel(c: float) -> int:
    c = float(c)
    if math.isnan(c):
        return 0
    return int(255 * min(max(c, 0.0), 1.0))


def to_rgb(color: Sequence[float]) -> Tuple[int, int, int]:
    """Цвет в долях -> целые компоненты [0, 255] (floor после ограничения)."""
    r, g, b = color
    return _channel(r), _channel(g), _channel(b)


def rgb_string(color: Sequence[float]) -> str:
    r, g, b = to_rgb(color)
    return f"rgb({r},{g},{b})"


# ---------------------------------------------------------------------------
# Записи примитивов
# ---------------------------------------------------------------------------

class BaseElem(ABC):
    """Общая часть записей: ключ глубины и цвет."""

    __slots__ = ('_z', '_color')

    def __init__(self, z: float, color: ArrayLike) -> None:
        self._z = float(z)
        self._color: Color = tuple(float(c) for c in as_vec3(color))

    @property
    def z(self) -> float:
        """Ключ глубины для сортировки художника (больше — дальше, рисуется раньше)."""
        return self._z

    @property
    def color(self) -> Color:
        return self._color

    @abstractmethod
    def svg(self, point_radius: float = DEFAULT_POINT_RADIUS) -> str:
        """Строка SVG-элемента с переводом строки."""

    @abstractmethod
    def svg_element(self, dwg: svgwrite.Drawing, point_radius: float = DEFAULT_POINT_RADIUS):
        """Тот же элемент как объект svgwrite."""


class VertexElem(BaseElem):
    """Точка, рисуется кружком."""

    __slots__ = ('p',)

    def __init__(self, p: ArrayLike, color: ArrayLike) -> None:
        self.p: NDArray[np.float64] = as_vec3(p).copy()
        super().__init__(self.p[2], color)

    def svg(self, point_radius: float = DEFAULT_POINT_RADIUS) -> str:
        return (
            f'<circle cx="{format_number(self.p[0])}" cy="{format_number(self.p[1])}" '
            f'r="{format_number(point_radius)}" style="fill: {rgb_string(self._color)}" />\n'
        )

    def svg_element(self, dwg: svgwrite.Drawing, point_radius: float = DEFAULT_POINT_RADIUS):
        circle = dwg.circle(center=(float(self.p[0]), float(self.p[1])), r=point_radius)
        circle['style'] = f"fill: {rgb_string(self._color)}"
        return circle

    def __repr__(self) -> str:
        return f"VertexElem(p={self.p.tolist()}, z={self._z:g})"


class LineElem(BaseElem):
    """Отрезок; глубина — среднее z концов."""

    __slots__ = ('p1', 'p2')

    def __init__(self, p1: ArrayLike, p2: ArrayLike, color: ArrayLike) -> None:
        self.p1: NDArray[np.float64] = as_vec3(p1).copy()
        self.p2: NDArray[np.float64] = as_vec3(p2).copy()
        super().__init__((self.p1[2] + self.p2[2]) / 2.0, color)

    def svg(self, point_radius: float = DEFAULT_POINT_RADIUS) -> str:
        return (
            f'<line x1="{format_number(self.p1[0])}" y1="{format_number(self.p1[1])}" '
            f'x2="{format_number(self.p2[0])}" y2="{format_number(self.p2[1])}" '
            f'style="stroke: {rgb_string(self._color)};" />\n'
        )

    def svg_element(self, dwg: svgwrite.Drawing, point_radius: float = DEFAULT_POINT_RADIUS):
        line = dwg.line(
            start=(float(self.p1[0]), float(self.p1[1])),
            end=(float(self.p2[0]), float(self.p2[1])),
        )
        line['style'] = f"stroke: {rgb_string(self._color)};"
        return line

    def __repr__(self) -> str:
        return f"LineElem(p1={self.p1.tolist()}, p2={self.p2.tolist()}, z={self._z:g})"


class TriangleElem(BaseElem):
    """Треугольник в порядке подачи вершин; глубина — среднее z трёх вершин."""

    __slots__ = ('points',)

    def __init__(self, p1: ArrayLike, p2: ArrayLike, p3: ArrayLike, color: ArrayLike) -> None:
        self.points: NDArray[np.float64] = np.stack([as_vec3(p1), as_vec3(p2), as_vec3(p3)])
        super().__init__((self.points[0, 2] + self.points[1, 2] + self.points[2, 2]) / 3.0, color)

    def svg(self, point_radius: float = DEFAULT_POINT_RADIUS) -> str:
        coords = "".join(
            f"{format_number(x)},{format_number(y)} " for x, y, _ in self.points
        )
        return f'<polygon points="{coords}" style="fill: {rgb_string(self._color)};" />\n'

    def svg_element(self, dwg: svgwrite.Drawing, point_radius: float = DEFAULT_POINT_RADIUS):
        polygon = dwg.polygon(points=[(float(x), float(y)) for x, y, _ in self.points])
        polygon['style'] = f"fill: {rgb_string(self._color)};"
        return polygon

    def __repr__(self) -> str:
        return f"TriangleElem(points={self.points.tolist()}, z={self._z:g})"

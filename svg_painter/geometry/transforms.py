"""
Линейная алгебра для конвейера проекции.

Содержит:
- построение матриц (identity, translate, scale, rotate, look_at)
- матрицы проекции в стиле OpenGL (perspective, ortho2d)
- project — перевод мировой точки в оконные координаты
- normal / normalize / clamp — вспомогательные операции над векторами

Соглашение: матрицы (4, 4) float64, хранение по строкам,
вектор-столбец справа (clip = M @ [x, y, z, 1]).
"""

import math
from typing import Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray


def as_vec3(p: ArrayLike) -> NDArray[np.float64]:
    """Привести точку/вектор к массиву формы (3,) float64."""
    v = np.asarray(p, dtype=np.float64)
    if v.shape != (3,):
        raise ValueError(f"Expected a 3-vector, got shape {v.shape}")
    return v


def as_mat4(m: ArrayLike) -> NDArray[np.float64]:
    """Привести матрицу к массиву формы (4, 4) float64 (копия)."""
    mat = np.array(m, dtype=np.float64)
    if mat.shape != (4, 4):
        raise ValueError(f"Expected a 4x4 matrix, got shape {mat.shape}")
    return mat


def clamp(x, lo: float, hi: float):
    """Ограничить значение (или массив) диапазоном [lo, hi]."""
    return np.clip(x, lo, hi)


def normalize(v: ArrayLike) -> NDArray[np.float64]:
    """Единичный вектор того же направления. Нулевой вектор остаётся нулевым."""
    v = np.asarray(v, dtype=np.float64)
    length = float(np.linalg.norm(v))
    if length == 0.0:
        return np.zeros_like(v)
    return v / length


def normal(p1: ArrayLike, p2: ArrayLike, p3: ArrayLike) -> NDArray[np.float64]:
    """Нормаль многоугольника: (p2 - p1) × (p3 - p1), без нормировки.

    Знак z-компоненты задаёт ориентацию обхода в плоскости XY.
    """
    a = as_vec3(p1)
    return np.cross(as_vec3(p2) - a, as_vec3(p3) - a)


def unit_normal(p1: ArrayLike, p2: ArrayLike, p3: ArrayLike) -> NDArray[np.float64]:
    """Единичная нормаль треугольника."""
    return normalize(normal(p1, p2, p3))


# ---------------------------------------------------------------------------
# Аффинные преобразования
# ---------------------------------------------------------------------------

def identity() -> NDArray[np.float64]:
    return np.eye(4, dtype=np.float64)


def translate(offset: Sequence[float]) -> NDArray[np.float64]:
    m = identity()
    m[:3, 3] = as_vec3(offset)
    return m


def scale(factors: Sequence[float]) -> NDArray[np.float64]:
    m = identity()
    m[0, 0], m[1, 1], m[2, 2] = as_vec3(factors)
    return m


def rotate(angle: float, axis: Sequence[float]) -> NDArray[np.float64]:
    """Поворот на angle радиан вокруг оси axis (формула Родрига)."""
    x, y, z = normalize(as_vec3(axis))
    c = math.cos(angle)
    s = math.sin(angle)
    t = 1.0 - c
    m = identity()
    m[:3, :3] = [
        [t * x * x + c,     t * x * y - s * z, t * x * z + s * y],
        [t * x * y + s * z, t * y * y + c,     t * y * z - s * x],
        [t * x * z - s * y, t * y * z + s * x, t * z * z + c],
    ]
    return m


def look_at(eye: Sequence[float], center: Sequence[float], up: Sequence[float]) -> NDArray[np.float64]:
    """Видовая матрица камеры в точке eye, смотрящей на center (как gluLookAt)."""
    eye = as_vec3(eye)
    f = normalize(as_vec3(center) - eye)
    s = normalize(np.cross(f, as_vec3(up)))
    u = np.cross(s, f)

    m = identity()
    m[0, :3] = s
    m[1, :3] = u
    m[2, :3] = -f
    m[0, 3] = -np.dot(s, eye)
    m[1, 3] = -np.dot(u, eye)
    m[2, 3] = np.dot(f, eye)
    return m


# ---------------------------------------------------------------------------
# Проекции
# ---------------------------------------------------------------------------

def perspective(fovy: float, aspect: float, z_near: float, z_far: float) -> NDArray[np.float64]:
    """Перспективная проекция OpenGL (fovy — вертикальный угол в радианах).

    Вырожденные параметры (aspect == 0, z_near == z_far) дают inf/nan
    в матрице; исключение не поднимается.
    """
    with np.errstate(divide='ignore', invalid='ignore'):
        f = np.float64(1.0) / np.tan(np.float64(fovy) / 2.0)
        depth = np.float64(z_near) - np.float64(z_far)
        m = np.zeros((4, 4), dtype=np.float64)
        m[0, 0] = f / np.float64(aspect)
        m[1, 1] = f
        m[2, 2] = (z_far + z_near) / depth
        m[2, 3] = 2.0 * z_far * z_near / depth
    m[3, 2] = -1.0
    return m


def ortho2d(left: float, right: float, bottom: float, top: float) -> NDArray[np.float64]:
    """Ортографическая 2D-проекция (near = -1, far = 1), как gluOrtho2D."""
    with np.errstate(divide='ignore', invalid='ignore'):
        width = np.float64(right) - np.float64(left)
        height = np.float64(top) - np.float64(bottom)
        m = identity()
        m[0, 0] = 2.0 / width
        m[1, 1] = 2.0 / height
        m[2, 2] = -1.0
        m[0, 3] = -(right + left) / width
        m[1, 3] = -(top + bottom) / height
    return m


def project(
    point: ArrayLike,
    view_proj: NDArray[np.float64],
    viewport_origin: Sequence[int],
    viewport_size: Sequence[int],
) -> NDArray[np.float64]:
    """Спроецировать мировую точку в оконные координаты (как gluProject).

    Алгоритм:
      1. clip = view_proj @ [x, y, z, 1]
      2. перспективное деление x, y, z на w
      3. перевод из [-1, 1] в [0, 1]
      4. растяжение x, y на прямоугольник viewport; z остаётся глубиной окна

    Returns:
        Массив (3,) — оконные x, y (ось Y вверх) и глубина z.
    """
    clip = view_proj @ np.append(as_vec3(point), 1.0)
    with np.errstate(divide='ignore', invalid='ignore'):
        ndc = clip[:3] / clip[3]
    win = ndc * 0.5 + 0.5
    win[0] = win[0] * viewport_size[0] + viewport_origin[0]
    win[1] = win[1] * viewport_size[1] + viewport_origin[1]
    return win

"""
Тесты пересечения для вокселизации.

Точный тест треугольник / AABB по теореме о разделяющей оси (SAT),
алгоритм Tomas Akenine-Möller (Real-Time Rendering, 22.12).
Сравнения строгие: касание считается пересечением. Эпсилона нет.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np
from numba import jit


# Порядок углов бокса и смещений октантов: min, +x, +y, +x+y, +z, +x+z, +y+z, max.
OCTANT_OFFSETS = np.array(
    [
        [0.0, 0.0, 0.0],
        [1.0, 0.0, 0.0],
        [0.0, 1.0, 0.0],
        [1.0, 1.0, 0.0],
        [0.0, 0.0, 1.0],
        [1.0, 0.0, 1.0],
        [0.0, 1.0, 1.0],
        [1.0, 1.0, 1.0],
    ],
    dtype=np.float64,
)


def box_vertices(box_min: np.ndarray, box_max: np.ndarray) -> np.ndarray:
    """
    8 вершин AABB в порядке OCTANT_OFFSETS.

    Returns:
        Массив shape (8, 3), float64.
    """
    box_min = np.asarray(box_min, dtype=np.float64)
    box_max = np.asarray(box_max, dtype=np.float64)
    return box_min + OCTANT_OFFSETS * (box_max - box_min)


@jit(nopython=True)
def _project(points, ax, ay, az):
    """Проекция точек на ось: (min, max) в float64."""
    lo = ax * points[0, 0] + ay * points[0, 1] + az * points[0, 2]
    hi = lo
    for i in range(1, points.shape[0]):
        val = ax * points[i, 0] + ay * points[i, 1] + az * points[i, 2]
        if val < lo:
            lo = val
        if val > hi:
            hi = val
    return lo, hi


@jit(nopython=True)
def _triangle_box_intersect(box_min, box_max, tri, box_verts, normal):
    # --- Тест 1: нормали бокса (X, Y, Z) ---
    for i in range(3):
        tri_min = min(tri[0, i], tri[1, i], tri[2, i])
        tri_max = max(tri[0, i], tri[1, i], tri[2, i])
        if tri_max < box_min[i] or tri_min > box_max[i]:
            return False

    # --- Тест 2: нормаль треугольника ---
    nx = np.float64(normal[0])
    ny = np.float64(normal[1])
    nz = np.float64(normal[2])
    offset = nx * tri[0, 0] + ny * tri[0, 1] + nz * tri[0, 2]
    b_min, b_max = _project(box_verts, nx, ny, nz)
    if b_max < offset or b_min > offset:
        return False

    # --- Тест 3: 9 осей cross(edge_i, axis_j) ---
    for i in range(3):
        k = (i + 1) % 3
        ex = np.float64(tri[i, 0]) - tri[k, 0]
        ey = np.float64(tri[i, 1]) - tri[k, 1]
        ez = np.float64(tri[i, 2]) - tri[k, 2]
        for j in range(3):
            bx = 1.0 if j == 0 else 0.0
            by = 1.0 if j == 1 else 0.0
            bz = 1.0 if j == 2 else 0.0
            ax = ey * bz - ez * by
            ay = ez * bx - ex * bz
            az = ex * by - ey * bx
            b_min, b_max = _project(box_verts, ax, ay, az)
            t_min, t_max = _project(tri, ax, ay, az)
            if b_max < t_min or b_min > t_max:
                return False

    return True


def triangle_box_intersect(
    box_min: np.ndarray,
    box_max: np.ndarray,
    triangle_vertices: np.ndarray,
    box_verts: np.ndarray,
    triangle_normal: np.ndarray,
) -> bool:
    """
    Тест пересечения треугольника и AABB.

    13 осей: 3 нормали бокса, нормаль треугольника и 9 произведений
    рёбер треугольника на оси бокса. Вырожденная (нулевая или NaN)
    ось не разделяет ничего и пропускается без особой обработки.

    Args:
        box_min, box_max: Углы AABB, shape (3,).
        triangle_vertices: Вершины треугольника, shape (3, 3).
        box_verts: 8 вершин AABB, shape (8, 3), см. box_vertices().
        triangle_normal: Заранее вычисленная нормаль треугольника.

    Returns:
        True если пересекаются (касание тоже).
    """
    return bool(
        _triangle_box_intersect(
            np.asarray(box_min, dtype=np.float64),
            np.asarray(box_max, dtype=np.float64),
            np.asarray(triangle_vertices, dtype=np.float64).reshape(3, 3),
            np.asarray(box_verts, dtype=np.float64).reshape(8, 3),
            np.asarray(triangle_normal, dtype=np.float64),
        )
    )


def triangle_aabb(
    v0: np.ndarray,
    v1: np.ndarray,
    v2: np.ndarray,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Вычислить AABB треугольника.

    Returns:
        (min_corner, max_corner)
    """
    min_corner = np.minimum(np.minimum(v0, v1), v2)
    max_corner = np.maximum(np.maximum(v0, v1), v2)
    return min_corner, max_corner

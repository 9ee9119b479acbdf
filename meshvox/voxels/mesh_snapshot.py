"""
MeshSnapshot — неизменяемые данные меша в мировых координатах.

Общий вход для обоих вокселизаторов: вершины после трансформации,
индексы треугольников, нормаль каждого треугольника, цвета и UV.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Tuple, Union

import numpy as np

from meshvox.geombase.general_pose3 import GeneralPose3

if TYPE_CHECKING:
    from meshvox.mesh.mesh import Mesh3


class MeshDataError(ValueError):
    """Несогласованные данные меша (индекс вне массива вершин, цветов или UV)."""


Transform = Union[GeneralPose3, np.ndarray, None]


@dataclass(frozen=True, eq=False)
class MeshSnapshot:
    """
    Снимок меша для вокселизации.

    Attributes:
        vertices: Вершины в мировых координатах, shape (N, 3), float64.
        triangles: Индексы вершин, shape (M, 3), int64.
        normals: Нормаль каждого треугольника, shape (M, 3).
        colors: Цвета вершин, shape (N, 3) или (0, 3).
        uvs: UV вершин, shape (N, 2) или (0, 2).
    """

    vertices: np.ndarray
    triangles: np.ndarray
    normals: np.ndarray
    colors: np.ndarray
    uvs: np.ndarray

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def triangle_count(self) -> int:
        return len(self.triangles)

    @property
    def is_empty(self) -> bool:
        """True если нет ни одного треугольника."""
        return self.triangle_count == 0 or self.vertex_count == 0

    @property
    def has_colors(self) -> bool:
        return len(self.colors) > 0

    @property
    def has_uvs(self) -> bool:
        return len(self.uvs) > 0

    @property
    def bounds(self) -> Optional[Tuple[np.ndarray, np.ndarray]]:
        """AABB вершин в мировых координатах или None для пустого меша."""
        if self.vertex_count == 0:
            return None
        return self.vertices.min(axis=0), self.vertices.max(axis=0)

    def validate(self) -> None:
        """
        Проверить что индексы треугольников адресуют вершины, цвета и UV.

        Raises:
            MeshDataError: Если какой-то индекс вне диапазона.
        """
        if self.triangle_count == 0:
            return

        lowest = int(self.triangles.min())
        highest = int(self.triangles.max())
        if lowest < 0:
            raise MeshDataError(f"Negative vertex index {lowest} in triangle list")
        if highest >= self.vertex_count:
            raise MeshDataError(
                f"Vertex index {highest} out of range for {self.vertex_count} vertices"
            )
        if self.has_colors and highest >= len(self.colors):
            raise MeshDataError(
                f"Vertex index {highest} out of range for {len(self.colors)} vertex colors"
            )
        if self.has_uvs and highest >= len(self.uvs):
            raise MeshDataError(
                f"Vertex index {highest} out of range for {len(self.uvs)} vertex UVs"
            )

    def triangle_vertices(self, triangle_id: int) -> np.ndarray:
        """Вершины треугольника, shape (3, 3)."""
        return self.vertices[self.triangles[triangle_id]]


def transform_vertices(vertices: np.ndarray, transform: Transform) -> np.ndarray:
    """
    Перевести вершины из локальных координат в мировые.

    Args:
        vertices: Вершины shape (N, 3).
        transform: GeneralPose3, матрица 4x4 или None (без изменений).
    """
    vertices = np.asarray(vertices, dtype=np.float64).reshape(-1, 3)
    if transform is None:
        return vertices.copy()
    if isinstance(transform, GeneralPose3):
        return transform.transform_points(vertices)

    matrix = np.asarray(transform, dtype=np.float64)
    if matrix.shape != (4, 4):
        raise ValueError(f"Transform matrix must be 4x4, got {matrix.shape}")

    # Добавляем w=1 для homogeneous coordinates
    homogeneous = np.ones((len(vertices), 4), dtype=np.float64)
    homogeneous[:, :3] = vertices
    transformed = homogeneous @ matrix.T
    return transformed[:, :3]


def compute_triangle_normals(vertices: np.ndarray, triangles: np.ndarray) -> np.ndarray:
    """
    Нормаль каждого треугольника: normalize(cross(v2 - v1, v3 - v1)).

    Вырожденные треугольники не отбрасываются: нулевая длина даёт
    NaN-вектор, который тест пересечения воспринимает как
    неразделяющую ось.
    """
    if len(triangles) == 0:
        return np.zeros((0, 3), dtype=np.float64)

    v1 = vertices[triangles[:, 0]]
    v2 = vertices[triangles[:, 1]]
    v3 = vertices[triangles[:, 2]]
    normals = np.cross(v2 - v1, v3 - v1)
    lengths = np.linalg.norm(normals, axis=1, keepdims=True)
    with np.errstate(invalid="ignore", divide="ignore"):
        return normals / lengths


def prepare_mesh(
    mesh_or_vertices: Union["Mesh3", np.ndarray],
    triangles: Optional[np.ndarray] = None,
    transform: Transform = None,
    colors: Optional[np.ndarray] = None,
    uvs: Optional[np.ndarray] = None,
) -> MeshSnapshot:
    """
    Построить MeshSnapshot из меша или сырых массивов.

    Args:
        mesh_or_vertices: Mesh3 или локальные вершины shape (N, 3).
        triangles: Индексы (плоский список или (M, 3)); берутся из Mesh3 если не заданы.
        transform: Трансформация в мировые координаты.
        colors: Цвета вершин (RGB или RGBA); берутся из Mesh3 если не заданы.
        uvs: UV вершин; берутся из Mesh3 если не заданы.

    Raises:
        MeshDataError: Если индексы не адресуют массивы.
    """
    if hasattr(mesh_or_vertices, "triangles"):
        mesh = mesh_or_vertices
        vertices = mesh.vertices
        if triangles is None:
            triangles = mesh.triangles
        if colors is None:
            colors = mesh.colors
        if uvs is None:
            uvs = mesh.uvs
    else:
        vertices = mesh_or_vertices

    vertices = np.zeros((0, 3)) if vertices is None else vertices
    triangles = np.zeros((0, 3), dtype=np.int64) if triangles is None else triangles

    if np.size(triangles) % 3 != 0:
        raise MeshDataError("Triangle index count must be a multiple of 3")
    triangles = np.asarray(triangles, dtype=np.int64).reshape(-1, 3)

    world = transform_vertices(vertices, transform)

    colors = _attribute_array(colors, 3)
    uvs = _attribute_array(uvs, 2)

    snapshot = MeshSnapshot(
        vertices=world,
        triangles=triangles,
        normals=np.zeros((0, 3), dtype=np.float64),
        colors=colors,
        uvs=uvs,
    )
    snapshot.validate()

    # Нормали считаются только после проверки индексов
    normals = compute_triangle_normals(world, triangles)
    return MeshSnapshot(
        vertices=world,
        triangles=triangles,
        normals=normals,
        colors=colors,
        uvs=uvs,
    )


def _attribute_array(data, width: int) -> np.ndarray:
    if data is None or np.size(data) == 0:
        return np.zeros((0, width), dtype=np.float64)
    array = np.asarray(data, dtype=np.float64)
    if array.ndim != 2 or array.shape[1] < width:
        raise MeshDataError(f"Vertex attribute must be a Nx{width} array, got {array.shape}")
    return array[:, :width].copy()


def sample_triangle(
    snapshot: MeshSnapshot,
    triangle_id: int,
    default_color: Tuple[float, float, float],
) -> Tuple[Tuple[float, float], Tuple[float, float, float]]:
    """
    UV и цвет первой вершины треугольника.

    Returns:
        (uv, color): UV = (0, 0) без UV-массива, color = default_color без цветов.
    """
    vertex_id = int(snapshot.triangles[triangle_id, 0])
    uv = (0.0, 0.0)
    color = tuple(float(c) for c in default_color)
    if snapshot.has_uvs:
        u, v = snapshot.uvs[vertex_id]
        uv = (float(u), float(v))
    if snapshot.has_colors:
        r, g, b = snapshot.colors[vertex_id]
        color = (float(r), float(g), float(b))
    return uv, color

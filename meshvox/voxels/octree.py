"""
Octree — разреженное октодерево для вокселизации.

Узлы создаются лениво, по треугольникам: узел появляется только если
его бокс пересекает хотя бы один треугольник. Делятся только занятые
узлы крупнее минимального размера.
"""

from __future__ import annotations

from collections import deque
from typing import Iterator, Optional

import numpy as np

from meshvox.voxels.intersection import OCTANT_OFFSETS, box_vertices, triangle_box_intersect
from meshvox.voxels.mesh_snapshot import MeshSnapshot, sample_triangle

WHITE = (1.0, 1.0, 1.0)


class OctreeNode:
    """
    Узел октодерева — AABB-регион.

    Лист определяется один раз при создании: длина ребра <= минимального размера.
    """

    __slots__ = (
        "min_point",
        "max_point",
        "center",
        "dimensions",
        "half_dimensions",
        "vertices",
        "occupied",
        "is_leaf",
        "children",
        "uv",
        "color",
    )

    def __init__(
        self,
        min_point: np.ndarray,
        max_point: np.ndarray,
        vertices: np.ndarray,
        minimum_size: float,
    ) -> None:
        self.min_point = min_point
        self.max_point = max_point
        self.dimensions = max_point - min_point
        self.half_dimensions = self.dimensions * 0.5
        self.center = min_point + self.half_dimensions
        self.vertices = vertices
        self.occupied = False
        self.is_leaf = bool(self.dimensions[0] <= minimum_size)
        self.children: list[Optional[OctreeNode]] = [None] * 8
        self.uv = (0.0, 0.0)
        self.color = WHITE

    @property
    def size(self) -> float:
        """Длина ребра (узлы кубические)."""
        return float(self.dimensions[0])

    @property
    def has_children(self) -> bool:
        return any(child is not None for child in self.children)

    def child_region(self, octant: int) -> tuple[np.ndarray, np.ndarray]:
        """Бокс дочернего октанта по таблице смещений."""
        child_min = self.min_point + OCTANT_OFFSETS[octant] * self.half_dimensions
        return child_min, child_min + self.half_dimensions


class Octree:
    """
    Октодерево над объёмом меша.

    Строится в конструкторе за один проход по треугольникам. Каждый
    треугольник, пересекающий корневой бокс, спускается по всем
    октантам, которые он пересекает, создавая недостающие узлы.
    UV и цвет узла берутся из первого треугольника, создавшего узел.

    Attributes:
        root: Корневой узел или None, если ни один треугольник не попал в объём.
    """

    def __init__(
        self,
        min_point: np.ndarray,
        max_point: np.ndarray,
        minimum_size: float,
        snapshot: MeshSnapshot,
    ) -> None:
        if not minimum_size > 0:
            raise ValueError(f"minimum_size must be positive, got {minimum_size}")
        self.min_point = np.asarray(min_point, dtype=np.float64)
        self.max_point = np.asarray(max_point, dtype=np.float64)
        self.minimum_size = float(minimum_size)
        self.root: Optional[OctreeNode] = None
        self._node_count = 0
        self._build(snapshot)

    @property
    def node_count(self) -> int:
        return self._node_count

    def _build(self, snapshot: MeshSnapshot) -> None:
        root_vertices = box_vertices(self.min_point, self.max_point)
        for triangle_id in range(snapshot.triangle_count):
            triangle = snapshot.triangle_vertices(triangle_id)
            normal = snapshot.normals[triangle_id]
            uv, color = sample_triangle(snapshot, triangle_id, WHITE)

            if self.root is not None:
                root_vertices = self.root.vertices
            if triangle_box_intersect(self.min_point, self.max_point, triangle, root_vertices, normal):
                self.root = self._process_region(
                    self.root, root_vertices, self.min_point, self.max_point,
                    triangle, normal, uv, color,
                )

    def _process_region(
        self,
        node: Optional[OctreeNode],
        vertices: np.ndarray,
        min_point: np.ndarray,
        max_point: np.ndarray,
        triangle: np.ndarray,
        normal: np.ndarray,
        uv: tuple[float, float],
        color: tuple[float, float, float],
    ) -> OctreeNode:
        """Создать узел при первом касании и спуститься в пересекаемые октанты."""
        if node is None:
            node = OctreeNode(min_point, max_point, vertices, self.minimum_size)
            node.occupied = True
            node.uv = uv
            node.color = color
            self._node_count += 1

        if node.is_leaf:
            return node

        for octant in range(8):
            child = node.children[octant]
            if child is None:
                child_min, child_max = node.child_region(octant)
                child_vertices = box_vertices(child_min, child_max)
            else:
                child_min, child_max = child.min_point, child.max_point
                child_vertices = child.vertices

            if triangle_box_intersect(child_min, child_max, triangle, child_vertices, normal):
                node.children[octant] = self._process_region(
                    child, child_vertices, child_min, child_max,
                    triangle, normal, uv, color,
                )
        return node

    def iter_nodes(self) -> Iterator[OctreeNode]:
        """Обход всех узлов в ширину."""
        if self.root is None:
            return
        queue = deque([self.root])
        while queue:
            node = queue.popleft()
            yield node
            for child in node.children:
                if child is not None:
                    queue.append(child)

    def leaves(self) -> Iterator[OctreeNode]:
        """Занятые листья в порядке обхода в ширину."""
        for node in self.iter_nodes():
            if node.is_leaf and node.occupied:
                yield node

    def depth(self) -> int:
        """Глубина дерева (0 для пустого, 1 для одного корня)."""

        def _depth(node: Optional[OctreeNode]) -> int:
            if node is None:
                return 0
            return 1 + max(_depth(child) for child in node.children)

        return _depth(self.root)

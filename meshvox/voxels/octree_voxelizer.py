"""
Вокселизатор на октодереве.

Подразделяет только занятые области объёма до минимального размера узла;
каждый занятый лист становится вокселем.
"""

from __future__ import annotations

from typing import Optional, Tuple

import numpy as np

from meshvox import log
from meshvox.voxels.mesh_snapshot import MeshSnapshot
from meshvox.voxels.octree import Octree
from meshvox.voxels.types import Voxel, VoxelMaterial, VoxelizeResult


def cubic_bounds(
    bounds_min: np.ndarray,
    bounds_max: np.ndarray,
    cell_size: float,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Привести объём к кубу, чтобы воксели оставались кубическими.

    Ребро куба = max по осям от ceil(размер / cell_size), умноженный на
    cell_size; куб начинается в bounds_min.
    """
    bounds_min = np.asarray(bounds_min, dtype=np.float64)
    extent = np.asarray(bounds_max, dtype=np.float64) - bounds_min
    counts = np.maximum(np.ceil(extent / cell_size), 0)
    max_dimension = float(counts.max())
    return bounds_min.copy(), bounds_min + max_dimension * cell_size


class OctreeVoxelizer:
    """
    Вокселизатор на разреженном октодереве.

    Порядок вокселей — обход листьев в ширину.
    """

    def __init__(
        self,
        minimum_size: float,
        material: Optional[VoxelMaterial] = None,
    ) -> None:
        if not minimum_size > 0:
            raise ValueError(f"minimum_size must be positive, got {minimum_size}")
        self._minimum_size = float(minimum_size)
        self._material = material if material is not None else VoxelMaterial()
        self._octree: Optional[Octree] = None

    @property
    def minimum_size(self) -> float:
        return self._minimum_size

    @property
    def material(self) -> VoxelMaterial:
        return self._material

    @property
    def octree(self) -> Optional[Octree]:
        """Дерево последнего прохода (для отладки)."""
        return self._octree

    def voxelize(
        self,
        snapshot: MeshSnapshot,
        bounds_min: Optional[np.ndarray] = None,
        bounds_max: Optional[np.ndarray] = None,
    ) -> VoxelizeResult:
        """
        Вокселизировать меш.

        Args:
            snapshot: Данные меша в мировых координатах.
            bounds_min, bounds_max: Объём; по умолчанию — AABB меша.

        Returns:
            VoxelizeResult с кубическим объёмом, реально использованным деревом.
        """
        snapshot.validate()

        if bounds_min is None or bounds_max is None:
            mesh_bounds = snapshot.bounds
            if mesh_bounds is None:
                self._octree = None
                zero = np.zeros(3, dtype=np.float64)
                return VoxelizeResult(material=self._material, bounds_min=zero, bounds_max=zero.copy())
            if bounds_min is None:
                bounds_min = mesh_bounds[0]
            if bounds_max is None:
                bounds_max = mesh_bounds[1]

        volume_min, volume_max = cubic_bounds(bounds_min, bounds_max, self._minimum_size)
        if not volume_max[0] > volume_min[0]:
            # Нулевой объём — нет ни одного узла
            self._octree = None
            return VoxelizeResult(material=self._material, bounds_min=volume_min, bounds_max=volume_max)

        self._octree = Octree(volume_min, volume_max, self._minimum_size, snapshot)
        log.debug(
            f"[OctreeVoxelizer] edge {volume_max[0] - volume_min[0]:.4f}, "
            f"{self._octree.node_count} nodes, {snapshot.triangle_count} triangles"
        )

        base = self._material.color
        voxels = []
        for node in self._octree.leaves():
            voxels.append(
                Voxel(
                    center=tuple(float(c) for c in node.center),
                    size=node.size,
                    color=(base[0] * node.color[0], base[1] * node.color[1], base[2] * node.color[2]),
                    uv=node.uv,
                )
            )

        log.info(f"[OctreeVoxelizer] {len(voxels)} voxels")

        return VoxelizeResult(
            voxels=voxels,
            material=self._material,
            bounds_min=volume_min,
            bounds_max=volume_max,
        )

"""
Вокселизатор — преобразование мешей в воксели.

Общий интерфейс для стратегий и функция «меш → воксели» одним вызовом.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Protocol, runtime_checkable

import numpy as np

from meshvox.voxels.config import VoxelizeMode, VoxelizerConfig
from meshvox.voxels.mesh_snapshot import MeshSnapshot, Transform, prepare_mesh
from meshvox.voxels.naive_voxelizer import NaiveVoxelizer
from meshvox.voxels.octree_voxelizer import OctreeVoxelizer
from meshvox.voxels.types import VoxelizeResult

if TYPE_CHECKING:
    from meshvox.mesh.mesh import Mesh3


@runtime_checkable
class Voxelizer(Protocol):
    """Всё, что умеет превратить MeshSnapshot в последовательность вокселей."""

    def voxelize(
        self,
        snapshot: MeshSnapshot,
        bounds_min: Optional[np.ndarray] = None,
        bounds_max: Optional[np.ndarray] = None,
    ) -> VoxelizeResult:
        ...


def create_voxelizer(config: Optional[VoxelizerConfig] = None) -> Voxelizer:
    """Создать вокселизатор по конфигурации."""
    if config is None:
        config = VoxelizerConfig()
    config.validate()

    if config.mode == VoxelizeMode.NAIVE:
        return NaiveVoxelizer(config.voxel_size, config.material(), parallel=config.parallel)
    if config.mode == VoxelizeMode.OCTREE:
        return OctreeVoxelizer(config.voxel_size, config.material())
    raise ValueError(f"Unknown voxelize mode: {config.mode}")


def voxelize_mesh(
    mesh: "Mesh3",
    transform: Transform = None,
    config: Optional[VoxelizerConfig] = None,
    bounds_min: Optional[np.ndarray] = None,
    bounds_max: Optional[np.ndarray] = None,
) -> VoxelizeResult:
    """
    Удобная функция: подготовить меш и вокселизировать его.

    Args:
        mesh: Меш в локальных координатах.
        transform: GeneralPose3 или матрица 4x4 (world space).
        config: Параметры; по умолчанию октодерево с размером 0.1.
        bounds_min, bounds_max: Объём; по умолчанию — AABB меша в мире.

    Returns:
        Воксели, материал и использованный объём.
    """
    snapshot = prepare_mesh(mesh, transform=transform)
    return create_voxelizer(config).voxelize(snapshot, bounds_min, bounds_max)

"""
RandomVoxels — случайные воксели для проверки рендерера без меша.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from meshvox.voxels.config import DEFAULT_VOXEL_SIZE
from meshvox.voxels.mesh_snapshot import MeshSnapshot
from meshvox.voxels.types import Voxel, VoxelMaterial, VoxelizeResult


class RandomVoxels:
    """
    Источник случайных вокселей на целочисленной решётке.

    Центр = (x, y + voxel_size, z) * 2 * voxel_size, где x, y, z —
    случайные целые из [min_range, max_range). Повторные центры
    пропускаются. Генератор детерминирован по seed.
    """

    def __init__(
        self,
        min_range: tuple[int, int, int],
        max_range: tuple[int, int, int],
        voxel_size: float = DEFAULT_VOXEL_SIZE,
        seed: int = 0,
    ) -> None:
        self.min_range = np.asarray(min_range, dtype=np.int64)
        self.max_range = np.asarray(max_range, dtype=np.int64)
        if np.any(self.max_range < self.min_range):
            raise ValueError(f"max_range {max_range} is below min_range {min_range}")
        self.voxel_size = float(voxel_size)
        self.seed = seed
        self.material = VoxelMaterial()
        self.bounds_min = self.min_range.astype(np.float64)
        self.bounds_max = self.max_range.astype(np.float64)
        self.voxels: list[Voxel] = self._generate()

    def _generate(self) -> list[Voxel]:
        rng = np.random.default_rng(self.seed)
        dimensions = self.max_range - self.min_range
        max_count = int(np.prod(dimensions))
        if max_count <= 0:
            return []

        voxels: list[Voxel] = []
        seen: set[tuple[float, float, float]] = set()
        step = 2.0 * self.voxel_size
        for _ in range(max_count):
            x, y, z = (int(rng.integers(lo, hi)) for lo, hi in zip(self.min_range, self.max_range))
            center = (x * step, (y + self.voxel_size) * step, z * step)
            color = tuple(float(c) for c in rng.random(3))
            if center in seen:
                continue
            seen.add(center)
            voxels.append(Voxel(center=center, size=self.voxel_size, color=color, uv=(0.0, 0.0)))
        return voxels

    def voxelize(
        self,
        snapshot: Optional[MeshSnapshot] = None,
        bounds_min: Optional[np.ndarray] = None,
        bounds_max: Optional[np.ndarray] = None,
    ) -> VoxelizeResult:
        """Вернуть сгенерированные воксели; меш не используется."""
        return VoxelizeResult(
            voxels=list(self.voxels),
            material=self.material,
            bounds_min=self.bounds_min.copy(),
            bounds_max=self.bounds_max.copy(),
        )

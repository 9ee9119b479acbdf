"""
Конфигурация вокселизации.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Optional, Union

from meshvox.voxels.types import Vec3, VoxelMaterial

# Размер вокселя рендерера по умолчанию
DEFAULT_VOXEL_SIZE = 0.1


class VoxelizeMode(IntEnum):
    """Стратегии вокселизации."""
    NAIVE = 0    # Равномерная сетка, каждая ячейка против каждого треугольника
    OCTREE = 1   # Адаптивное октодерево, делятся только занятые узлы


def _parse_mode(value: Union[str, int, VoxelizeMode]) -> VoxelizeMode:
    if isinstance(value, VoxelizeMode):
        return value
    if isinstance(value, str):
        try:
            return VoxelizeMode[value.upper()]
        except KeyError:
            raise ValueError(f"Unknown voxelize mode: {value!r}") from None
    try:
        return VoxelizeMode(int(value))
    except ValueError:
        raise ValueError(f"Unknown voxelize mode: {value!r}") from None


@dataclass
class VoxelizerConfig:
    """Параметры вокселизатора."""

    mode: VoxelizeMode = VoxelizeMode.OCTREE
    """Стратегия вокселизации."""

    voxel_size: float = DEFAULT_VOXEL_SIZE
    """Размер ячейки сетки / минимальный размер узла октодерева."""

    parallel: bool = True
    """Параллельная обработка ячеек (только NAIVE)."""

    fallback_color: Vec3 = (1.0, 1.0, 1.0)
    """Базовый цвет материала, если у меша нет своего."""

    texture: Optional[Any] = None
    """Ссылка на текстуру материала (передаётся как есть)."""

    def validate(self) -> None:
        """
        Raises:
            ValueError: Если параметры некорректны.
        """
        if not self.voxel_size > 0:
            raise ValueError(f"voxel_size must be positive, got {self.voxel_size}")
        if len(self.fallback_color) != 3:
            raise ValueError(f"fallback_color must have 3 components, got {self.fallback_color}")

    def material(self) -> VoxelMaterial:
        return VoxelMaterial(
            color=tuple(float(c) for c in self.fallback_color),
            texture=self.texture,
        )

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {
            "mode": self.mode.name.lower(),
            "voxel_size": self.voxel_size,
            "parallel": self.parallel,
            "fallback_color": list(self.fallback_color),
            "texture": self.texture,
        }

    @staticmethod
    def from_dict(data: dict) -> "VoxelizerConfig":
        """Deserialize from dictionary."""
        config = VoxelizerConfig(
            mode=_parse_mode(data.get("mode", VoxelizeMode.OCTREE)),
            voxel_size=float(data.get("voxel_size", DEFAULT_VOXEL_SIZE)),
            parallel=bool(data.get("parallel", True)),
            fallback_color=tuple(data.get("fallback_color", (1.0, 1.0, 1.0))),
            texture=data.get("texture"),
        )
        config.validate()
        return config

"""
Базовые структуры данных вокселизации.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Iterator, Optional, Sequence

import numpy as np

Vec3 = tuple[float, float, float]

VOLUME_ID_UNSET = -1
NO_TEXTURE = -1

# Раскладка одной записи вокселя в буфере рендерера.
VOXEL_DTYPE = np.dtype(
    [
        ("center", np.float32, (3,)),
        ("size", np.float32),
        ("color", np.float32, (3,)),
        ("uv", np.float32, (2,)),
        ("volume_id", np.int32),
    ]
)


@dataclass(frozen=True)
class Voxel:
    """
    Воксель — кубический элемент объёма.

    Создаётся один раз на занятую ячейку / лист и больше не меняется.
    """

    center: Vec3
    """Центр в мировых координатах."""

    size: float
    """Длина ребра. 0 — незанятая ячейка."""

    color: Vec3 = (1.0, 1.0, 1.0)
    """RGB цвет (цвет материала, умноженный на цвет вершины)."""

    uv: tuple[float, float] = (0.0, 0.0)
    """Текстурная координата первой вершины пересечённого треугольника."""

    volume_id: int = VOLUME_ID_UNSET
    """Индекс записи VoxelsVolumeProperties; назначается агрегатором."""

    @property
    def is_occupied(self) -> bool:
        return self.size != 0

    def with_volume_id(self, volume_id: int) -> "Voxel":
        return replace(self, volume_id=volume_id)


@dataclass(frozen=True)
class VoxelMaterial:
    """Материал объёма: базовый цвет и необязательная ссылка на текстуру."""

    color: Vec3 = (1.0, 1.0, 1.0)
    texture: Optional[Any] = None


@dataclass
class VoxelizeResult:
    """
    Результат вокселизации одного меша.

    bounds_min / bounds_max — объём, фактически использованный
    вокселизатором (для октодерева — кубический).
    """

    voxels: list[Voxel] = field(default_factory=list)
    material: VoxelMaterial = field(default_factory=VoxelMaterial)
    bounds_min: np.ndarray = field(default_factory=lambda: np.zeros(3, dtype=np.float64))
    bounds_max: np.ndarray = field(default_factory=lambda: np.zeros(3, dtype=np.float64))

    def __len__(self) -> int:
        return len(self.voxels)

    def __iter__(self) -> Iterator[Voxel]:
        return iter(self.voxels)

    @property
    def is_empty(self) -> bool:
        return len(self.voxels) == 0


@dataclass
class VoxelsVolumeProperties:
    """
    Свойства набора вокселей одного меша в общем буфере.

    material_texture_id — индекс текстуры в массиве текстур или -1.
    """

    material_texture_id: int
    voxel_start_id: int
    voxels_count: int
    material_color: Vec3
    volume_center: Vec3
    volume_half_dimensions: Vec3


def voxels_to_array(voxels: Sequence[Voxel]) -> np.ndarray:
    """Упаковать воксели в массив VOXEL_DTYPE."""
    array = np.zeros(len(voxels), dtype=VOXEL_DTYPE)
    for i, voxel in enumerate(voxels):
        array[i] = (voxel.center, voxel.size, voxel.color, voxel.uv, voxel.volume_id)
    return array


def voxels_from_array(array: np.ndarray) -> list[Voxel]:
    """Распаковать массив VOXEL_DTYPE в список Voxel."""
    return [
        Voxel(
            center=tuple(float(c) for c in record["center"]),
            size=float(record["size"]),
            color=tuple(float(c) for c in record["color"]),
            uv=tuple(float(c) for c in record["uv"]),
            volume_id=int(record["volume_id"]),
        )
        for record in array
    ]

"""
VoxelAggregator — сборка вокселей нескольких источников в один буфер.

Каждому источнику соответствует запись VoxelsVolumeProperties с
непрерывным диапазоном [voxel_start_id, voxel_start_id + voxels_count)
в общем буфере.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence

import numpy as np

from meshvox import log
from meshvox.voxels.types import (
    NO_TEXTURE,
    Voxel,
    VoxelMaterial,
    VoxelsVolumeProperties,
    voxels_to_array,
)


class VoxelSource(Protocol):
    """Источник вокселей: VoxelizeResult, RandomVoxels и т.п."""

    voxels: Sequence[Voxel]
    material: VoxelMaterial
    bounds_min: np.ndarray
    bounds_max: np.ndarray


class VoxelAggregator:
    """
    Реестр источников вокселей и плоский буфер для рендерера.

    Буфер перестраивается целиком при первом обращении после
    register / deregister.
    """

    def __init__(self) -> None:
        self._sources: list[VoxelSource] = []
        self._voxels: list[Voxel] = []
        self._properties: list[VoxelsVolumeProperties] = []
        self._textures: list[Any] = []
        self._dirty = False

    @property
    def sources(self) -> list[VoxelSource]:
        return list(self._sources)

    @property
    def needs_update(self) -> bool:
        return self._dirty

    def register(self, source: VoxelSource) -> None:
        """Добавить источник. Повторная регистрация ничего не меняет."""
        if any(existing is source for existing in self._sources):
            return
        self._sources.append(source)
        self._dirty = True

    def deregister(self, source: VoxelSource) -> None:
        """Убрать источник, если он зарегистрирован."""
        for i, existing in enumerate(self._sources):
            if existing is source:
                del self._sources[i]
                self._dirty = True
                return

    def clear(self) -> None:
        self._sources.clear()
        self._dirty = True

    def rebuild(self) -> None:
        """Собрать общий буфер, свойства объёмов и список текстур."""
        voxels: list[Voxel] = []
        properties: list[VoxelsVolumeProperties] = []
        textures: list[Any] = []

        for source in self._sources:
            bounds_min = np.asarray(source.bounds_min, dtype=np.float64)
            bounds_max = np.asarray(source.bounds_max, dtype=np.float64)
            half = (bounds_max - bounds_min) * 0.5
            center = bounds_min + half
            material = source.material

            texture_id = NO_TEXTURE
            if material.texture is not None:
                texture_id = self._texture_slot(textures, material.texture)

            volume_id = len(properties)
            properties.append(
                VoxelsVolumeProperties(
                    material_texture_id=texture_id,
                    voxel_start_id=len(voxels),
                    voxels_count=len(source.voxels),
                    material_color=tuple(float(c) for c in material.color),
                    volume_center=tuple(float(c) for c in center),
                    volume_half_dimensions=tuple(float(c) for c in half),
                )
            )
            voxels.extend(voxel.with_volume_id(volume_id) for voxel in source.voxels)

        self._voxels = voxels
        self._properties = properties
        self._textures = textures
        self._dirty = False

        log.info(f"[VoxelAggregator] Number of voxels: {len(voxels)} in {len(properties)} volumes")

    @staticmethod
    def _texture_slot(textures: list[Any], texture: Any) -> int:
        for i, existing in enumerate(textures):
            if existing is texture or existing == texture:
                return i
        textures.append(texture)
        return len(textures) - 1

    def _ensure_built(self) -> None:
        if self._dirty:
            self.rebuild()

    @property
    def voxels(self) -> list[Voxel]:
        """Плоский буфер вокселей с назначенными volume_id."""
        self._ensure_built()
        return self._voxels

    @property
    def properties(self) -> list[VoxelsVolumeProperties]:
        self._ensure_built()
        return self._properties

    @property
    def textures(self) -> list[Any]:
        self._ensure_built()
        return self._textures

    def slice(self, index: int) -> list[Voxel]:
        """Воксели источника index по его (start, count)."""
        props = self.properties[index]
        return self._voxels[props.voxel_start_id:props.voxel_start_id + props.voxels_count]

    def properties_for(self, source: VoxelSource) -> Optional[VoxelsVolumeProperties]:
        """Запись свойств для источника или None, если он не зарегистрирован."""
        for i, existing in enumerate(self._sources):
            if existing is source:
                return self.properties[i]
        return None

    def to_array(self) -> np.ndarray:
        """Буфер вокселей в раскладке VOXEL_DTYPE."""
        return voxels_to_array(self.voxels)

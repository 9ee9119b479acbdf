"""
Сохранение и загрузка результатов вокселизации.
"""

from __future__ import annotations

import base64
import gzip
import json
from pathlib import Path
from typing import Optional, Union

import numpy as np

from meshvox import log
from meshvox.voxels.types import Voxel, VoxelMaterial, VoxelizeResult


VOXEL_FILE_EXTENSION = ".voxels"
VOXEL_FORMAT_VERSION = "1.0"

# Раскладка записи в файле: little-endian, float64 без потери точности
_STORAGE_DTYPE = np.dtype(
    [
        ("center", "<f8", (3,)),
        ("size", "<f8"),
        ("color", "<f8", (3,)),
        ("uv", "<f8", (2,)),
        ("volume_id", "<i4"),
    ]
)


def _encode_voxels(voxels: list[Voxel]) -> str:
    array = np.zeros(len(voxels), dtype=_STORAGE_DTYPE)
    for i, voxel in enumerate(voxels):
        array[i] = (voxel.center, voxel.size, voxel.color, voxel.uv, voxel.volume_id)
    compressed = gzip.compress(array.tobytes())
    return base64.b64encode(compressed).decode("ascii")


def _decode_voxels(encoded: str) -> list[Voxel]:
    raw = gzip.decompress(base64.b64decode(encoded))
    array = np.frombuffer(raw, dtype=_STORAGE_DTYPE)
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


class VoxelPersistence:
    """
    Сохранение и загрузка VoxelizeResult в файл .voxels.

    Формат — JSON с gzip+base64 упакованными записями вокселей.
    """

    @staticmethod
    def save(
        result: VoxelizeResult,
        path: Union[str, Path],
        cell_size: Optional[float] = None,
        name: str = "",
    ) -> None:
        """
        Сохранить результат вокселизации в файл.

        Args:
            result: Результат для сохранения.
            path: Путь к файлу (.voxels).
            cell_size: Размер вокселя (справочно).
            name: Имя набора.
        """
        path = Path(path)

        texture = result.material.texture
        if texture is not None and not isinstance(texture, str):
            log.warn(f"[VoxelPersistence] texture {type(texture).__name__} is not a path, not saved")
            texture = None

        data = {
            "version": VOXEL_FORMAT_VERSION,
            "name": name,
            "cell_size": cell_size,
            "material": {
                "color": list(result.material.color),
                "texture": texture,
            },
            "bounds_min": [float(c) for c in result.bounds_min],
            "bounds_max": [float(c) for c in result.bounds_max],
            "voxel_count": len(result.voxels),
            "voxels": _encode_voxels(result.voxels),
        }

        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

    @staticmethod
    def load(path: Union[str, Path]) -> VoxelizeResult:
        """
        Загрузить результат вокселизации из файла.

        Raises:
            ValueError: Если формат файла неверный.
            FileNotFoundError: Если файл не найден.
        """
        path = Path(path)

        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)

        version = data.get("version", "")
        if not version.startswith("1."):
            raise ValueError(f"Unsupported voxel format version: {version}")

        material_data = data.get("material", {})
        material = VoxelMaterial(
            color=tuple(float(c) for c in material_data.get("color", (1.0, 1.0, 1.0))),
            texture=material_data.get("texture"),
        )

        voxels = _decode_voxels(data.get("voxels", ""))
        expected = data.get("voxel_count", len(voxels))
        if expected != len(voxels):
            raise ValueError(f"Voxel count mismatch: header {expected}, data {len(voxels)}")

        return VoxelizeResult(
            voxels=voxels,
            material=material,
            bounds_min=np.array(data.get("bounds_min", (0.0, 0.0, 0.0)), dtype=np.float64),
            bounds_max=np.array(data.get("bounds_max", (0.0, 0.0, 0.0)), dtype=np.float64),
        )

    @staticmethod
    def get_info(path: Union[str, Path]) -> dict:
        """
        Получить информацию о воксельном файле без распаковки вокселей.

        Returns:
            Словарь: name, cell_size, voxel_count, bounds_min, bounds_max.
        """
        path = Path(path)

        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)

        return {
            "name": data.get("name", ""),
            "cell_size": data.get("cell_size"),
            "voxel_count": data.get("voxel_count", 0),
            "bounds_min": data.get("bounds_min"),
            "bounds_max": data.get("bounds_max"),
        }

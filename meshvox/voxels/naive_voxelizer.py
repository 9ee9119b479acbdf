"""
Наивный вокселизатор — равномерная сетка.

Каждая ячейка сетки размером с bounds меша проверяется против каждого
треугольника. Ячейки независимы, поэтому проверка идёт параллельно:
каждая итерация пишет только в свой слот заранее выделенного массива.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional, Tuple

import numpy as np
from numba import jit, prange

from meshvox import log
from meshvox.voxels.intersection import _triangle_box_intersect, box_vertices
from meshvox.voxels.mesh_snapshot import MeshSnapshot
from meshvox.voxels.types import Voxel, VoxelMaterial, VoxelizeResult

# Слот без пересечения
NO_HIT = -1

# Плоский буфер ячеек; size == 0 означает незанятую ячейку
_CELL_DTYPE = np.dtype(
    [
        ("center", np.float64, (3,)),
        ("size", np.float64),
        ("color", np.float64, (3,)),
        ("uv", np.float64, (2,)),
    ]
)


class VoxelizerState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    DONE = "done"


def _first_hits(grid_min, nx, ny, nz, cell_size, box_verts, vertices, triangles, normals, hits):
    """Для каждой ячейки — индекс первого пересекающего треугольника."""
    box_min = box_verts[0]
    box_max = box_verts[7]
    layer = ny * nz
    for cell_id in prange(nx * ny * nz):
        x = cell_id // layer
        y = (cell_id // nz) % ny
        z = cell_id % nz

        # Вершины берутся относительно минимального угла ячейки
        ox = grid_min[0] + x * cell_size
        oy = grid_min[1] + y * cell_size
        oz = grid_min[2] + z * cell_size

        tri = np.empty((3, 3), dtype=np.float64)
        for t in range(triangles.shape[0]):
            for k in range(3):
                vid = triangles[t, k]
                tri[k, 0] = vertices[vid, 0] - ox
                tri[k, 1] = vertices[vid, 1] - oy
                tri[k, 2] = vertices[vid, 2] - oz
            if _triangle_box_intersect(box_min, box_max, tri, box_verts, normals[t]):
                hits[cell_id] = t
                break


_first_hits_parallel = jit(nopython=True, parallel=True)(_first_hits)
_first_hits_serial = jit(nopython=True)(_first_hits)


def grid_dimensions(
    bounds_min: np.ndarray,
    bounds_max: np.ndarray,
    cell_size: float,
) -> Tuple[int, int, int]:
    """Количество ячеек по каждой оси: ceil(размер / cell_size), не меньше 0."""
    extent = np.asarray(bounds_max, dtype=np.float64) - np.asarray(bounds_min, dtype=np.float64)
    counts = np.maximum(np.ceil(extent / cell_size), 0).astype(np.int64)
    return int(counts[0]), int(counts[1]), int(counts[2])


class NaiveVoxelizer:
    """
    Вокселизатор на равномерной сетке.

    Ячейки обходятся в порядке X, затем Y, затем Z; порядковый номер
    ячейки определяет её слот и порядок вокселей в результате.
    Ячейка получает воксель по первому (в порядке меша) треугольнику,
    который её пересекает.
    """

    def __init__(
        self,
        cell_size: float,
        material: Optional[VoxelMaterial] = None,
        parallel: bool = True,
    ) -> None:
        if not cell_size > 0:
            raise ValueError(f"cell_size must be positive, got {cell_size}")
        self._cell_size = float(cell_size)
        self._material = material if material is not None else VoxelMaterial()
        self._parallel = parallel
        self._state = VoxelizerState.IDLE

    @property
    def cell_size(self) -> float:
        return self._cell_size

    @property
    def material(self) -> VoxelMaterial:
        return self._material

    @property
    def parallel(self) -> bool:
        return self._parallel

    @property
    def state(self) -> VoxelizerState:
        return self._state

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
            bounds_min, bounds_max: Объём сетки; по умолчанию — AABB меша.

        Returns:
            VoxelizeResult с вокселями в порядке обхода ячеек.

        Raises:
            MeshDataError: Если индексы треугольников не адресуют массивы меша.
        """
        snapshot.validate()
        self._state = VoxelizerState.RUNNING

        bounds_min, bounds_max = self._resolve_bounds(snapshot, bounds_min, bounds_max)
        nx, ny, nz = grid_dimensions(bounds_min, bounds_max, self._cell_size)
        total = nx * ny * nz

        log.debug(
            f"[NaiveVoxelizer] grid {nx}x{ny}x{nz} ({total} cells), "
            f"{snapshot.triangle_count} triangles, parallel={self._parallel}"
        )

        buffer = np.zeros(total, dtype=_CELL_DTYPE)
        if total > 0 and not snapshot.is_empty:
            hits = self._find_hits(snapshot, bounds_min, nx, ny, nz)
            self._fill_buffer(buffer, hits, snapshot, bounds_min, ny, nz)

        voxels = [
            Voxel(
                center=tuple(float(c) for c in cell["center"]),
                size=float(cell["size"]),
                color=tuple(float(c) for c in cell["color"]),
                uv=tuple(float(c) for c in cell["uv"]),
            )
            for cell in buffer[buffer["size"] != 0]
        ]

        self._state = VoxelizerState.DONE
        log.info(f"[NaiveVoxelizer] {len(voxels)} voxels from {total} cells")

        return VoxelizeResult(
            voxels=voxels,
            material=self._material,
            bounds_min=bounds_min,
            bounds_max=bounds_max,
        )

    def _resolve_bounds(self, snapshot, bounds_min, bounds_max):
        if bounds_min is None or bounds_max is None:
            mesh_bounds = snapshot.bounds
            if mesh_bounds is None:
                return np.zeros(3, dtype=np.float64), np.zeros(3, dtype=np.float64)
            if bounds_min is None:
                bounds_min = mesh_bounds[0]
            if bounds_max is None:
                bounds_max = mesh_bounds[1]
        return (
            np.array(bounds_min, dtype=np.float64),
            np.array(bounds_max, dtype=np.float64),
        )

    def _find_hits(self, snapshot: MeshSnapshot, bounds_min, nx, ny, nz) -> np.ndarray:
        """Запустить ядро; возвращает массив индексов треугольников по слотам."""
        hits = np.full(nx * ny * nz, NO_HIT, dtype=np.int64)
        local_box = box_vertices(np.zeros(3), np.full(3, self._cell_size))
        kernel = _first_hits_parallel if self._parallel else _first_hits_serial
        # Ядро возвращается только после завершения всех итераций
        kernel(
            np.ascontiguousarray(bounds_min, dtype=np.float64),
            nx,
            ny,
            nz,
            self._cell_size,
            local_box,
            np.ascontiguousarray(snapshot.vertices, dtype=np.float64),
            np.ascontiguousarray(snapshot.triangles, dtype=np.int64),
            np.ascontiguousarray(snapshot.normals, dtype=np.float64),
            hits,
        )
        return hits

    def _fill_buffer(self, buffer, hits, snapshot: MeshSnapshot, bounds_min, ny, nz) -> None:
        cell_ids = np.nonzero(hits != NO_HIT)[0]
        if len(cell_ids) == 0:
            return

        coords = np.stack(
            [cell_ids // (ny * nz), (cell_ids // nz) % ny, cell_ids % nz],
            axis=1,
        ).astype(np.float64)
        half = self._cell_size * 0.5
        first_vertex = snapshot.triangles[hits[cell_ids], 0]
        base_color = np.asarray(self._material.color, dtype=np.float64)

        buffer["center"][cell_ids] = bounds_min + half + coords * self._cell_size
        buffer["size"][cell_ids] = self._cell_size
        if snapshot.has_colors:
            buffer["color"][cell_ids] = base_color * snapshot.colors[first_vertex]
        else:
            buffer["color"][cell_ids] = base_color
        if snapshot.has_uvs:
            buffer["uv"][cell_ids] = snapshot.uvs[first_vertex]

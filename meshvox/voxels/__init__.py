"""
Вокселизация мешей.

Тест пересечения треугольник/AABB, подготовка меша, вокселизаторы
на равномерной сетке и на октодереве, сборка вокселей в общий буфер.
"""

from meshvox.voxels.intersection import (
    OCTANT_OFFSETS,
    box_vertices,
    triangle_aabb,
    triangle_box_intersect,
)
from meshvox.voxels.mesh_snapshot import (
    MeshDataError,
    MeshSnapshot,
    compute_triangle_normals,
    prepare_mesh,
    sample_triangle,
    transform_vertices,
)
from meshvox.voxels.types import (
    VOXEL_DTYPE,
    Voxel,
    VoxelMaterial,
    VoxelizeResult,
    VoxelsVolumeProperties,
    voxels_from_array,
    voxels_to_array,
)
from meshvox.voxels.config import VoxelizeMode, VoxelizerConfig
from meshvox.voxels.naive_voxelizer import NaiveVoxelizer, VoxelizerState, grid_dimensions
from meshvox.voxels.octree import Octree, OctreeNode
from meshvox.voxels.octree_voxelizer import OctreeVoxelizer, cubic_bounds
from meshvox.voxels.voxelizer import Voxelizer, create_voxelizer, voxelize_mesh
from meshvox.voxels.aggregator import VoxelAggregator
from meshvox.voxels.random_voxels import RandomVoxels
from meshvox.voxels.persistence import VoxelPersistence, VOXEL_FILE_EXTENSION

__all__ = [
    "OCTANT_OFFSETS",
    "box_vertices",
    "triangle_aabb",
    "triangle_box_intersect",
    "MeshDataError",
    "MeshSnapshot",
    "compute_triangle_normals",
    "prepare_mesh",
    "sample_triangle",
    "transform_vertices",
    "VOXEL_DTYPE",
    "Voxel",
    "VoxelMaterial",
    "VoxelizeResult",
    "VoxelsVolumeProperties",
    "voxels_from_array",
    "voxels_to_array",
    "VoxelizeMode",
    "VoxelizerConfig",
    "NaiveVoxelizer",
    "VoxelizerState",
    "grid_dimensions",
    "Octree",
    "OctreeNode",
    "OctreeVoxelizer",
    "cubic_bounds",
    "Voxelizer",
    "create_voxelizer",
    "voxelize_mesh",
    "VoxelAggregator",
    "RandomVoxels",
    "VoxelPersistence",
    "VOXEL_FILE_EXTENSION",
]

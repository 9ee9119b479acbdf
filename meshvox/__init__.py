"""
meshvox - вокселизация треугольных мешей.

Основные модули:
- geombase - трансформации (GeneralPose3)
- mesh - меши в локальных координатах и примитивы
- voxels - тест пересечения, вокселизаторы (сетка, октодерево), агрегатор
"""

from .geombase import GeneralPose3
from .mesh import Mesh3
from .voxels import (
    NaiveVoxelizer,
    OctreeVoxelizer,
    Voxel,
    VoxelAggregator,
    VoxelizerConfig,
    voxelize_mesh,
)

__version__ = '0.1.0'

__all__ = [
    'GeneralPose3',
    'Mesh3',
    'NaiveVoxelizer',
    'OctreeVoxelizer',
    'Voxel',
    'VoxelAggregator',
    'VoxelizerConfig',
    'voxelize_mesh',
]

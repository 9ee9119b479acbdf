"""
Тесты вокселизатора на равномерной сетке.
"""

import unittest
import numpy as np

from meshvox.geombase import GeneralPose3
from meshvox.mesh import CubeMesh, Mesh3, QuadMesh, TriangleMesh
from meshvox.voxels.mesh_snapshot import MeshDataError, MeshSnapshot, prepare_mesh
from meshvox.voxels.naive_voxelizer import NaiveVoxelizer, VoxelizerState, grid_dimensions
from meshvox.voxels.types import VoxelMaterial


RED = [1.0, 0.0, 0.0]


def _centers(result):
    return [voxel.center for voxel in result.voxels]


class GridDimensionsTest(unittest.TestCase):
    """Тесты для grid_dimensions."""

    def test_exact_division(self):
        """Размер кратен ячейке."""
        self.assertEqual(grid_dimensions([0, 0, 0], [1, 2, 3], 0.5), (2, 4, 6))

    def test_rounds_up(self):
        """Неполная ячейка округляется вверх."""
        self.assertEqual(grid_dimensions([0, 0, 0], [1.1, 1.0, 0.1], 0.5), (3, 2, 1))

    def test_flat_axis(self):
        """Плоская ось даёт ноль ячеек."""
        self.assertEqual(grid_dimensions([0, 0, 0], [1, 1, 0], 0.5), (2, 2, 0))

    def test_inverted_bounds(self):
        """max < min не даёт отрицательного числа ячеек."""
        self.assertEqual(grid_dimensions([1, 1, 1], [0, 0, 0], 0.5), (0, 0, 0))


class NaiveVoxelizerTest(unittest.TestCase):
    """Тесты для NaiveVoxelizer."""

    def test_invalid_cell_size(self):
        """Нулевой или отрицательный размер ячейки."""
        with self.assertRaises(ValueError):
            NaiveVoxelizer(0.0)
        with self.assertRaises(ValueError):
            NaiveVoxelizer(-1.0)

    def test_single_cell_single_triangle(self):
        """Один треугольник внутри одной ячейки."""
        mesh = TriangleMesh(
            [0.2, 0.2, 0.5], [0.8, 0.2, 0.5], [0.2, 0.8, 0.5],
            colors=[RED, RED, RED],
        )
        result = NaiveVoxelizer(1.0).voxelize(prepare_mesh(mesh), [0, 0, 0], [1, 1, 1])

        self.assertEqual(len(result), 1)
        voxel = result.voxels[0]
        self.assertEqual(voxel.center, (0.5, 0.5, 0.5))
        self.assertEqual(voxel.size, 1.0)
        self.assertEqual(voxel.color, (1.0, 0.0, 0.0))
        self.assertEqual(voxel.uv, (0.0, 0.0))

    def test_only_intersected_cells(self):
        """Маленький треугольник занимает ровно одну ячейку из 27."""
        mesh = TriangleMesh([1.2, 1.2, 1.5], [1.8, 1.2, 1.5], [1.2, 1.8, 1.5])
        result = NaiveVoxelizer(1.0).voxelize(prepare_mesh(mesh), [0, 0, 0], [3, 3, 3])

        self.assertEqual(_centers(result), [(1.5, 1.5, 1.5)])

    def test_touching_face_occupies_both_cells(self):
        """Треугольник на общей грани двух ячеек занимает обе."""
        mesh = TriangleMesh([1.0, 0.2, 0.2], [1.0, 0.8, 0.2], [1.0, 0.2, 0.8])
        result = NaiveVoxelizer(1.0).voxelize(prepare_mesh(mesh), [0, 0, 0], [2, 1, 1])

        self.assertEqual(_centers(result), [(0.5, 0.5, 0.5), (1.5, 0.5, 0.5)])

    def test_cube_surface(self):
        """Поверхность куба: внутренние 2x2x2 ячейки пусты."""
        result = NaiveVoxelizer(0.25).voxelize(prepare_mesh(CubeMesh(1.0)))

        self.assertEqual(len(result), 56)
        self.assertTrue(all(voxel.is_occupied for voxel in result.voxels))
        self.assertNotIn((0.125, 0.125, 0.125), _centers(result))
        self.assertNotIn((-0.125, -0.125, -0.125), _centers(result))

    def test_cell_order_x_major(self):
        """Порядок вокселей: X, затем Y, затем Z (Z меняется быстрее всех)."""
        result = NaiveVoxelizer(0.25).voxelize(prepare_mesh(CubeMesh(1.0)))

        self.assertEqual(result.voxels[0].center, (-0.375, -0.375, -0.375))
        self.assertEqual(result.voxels[1].center, (-0.375, -0.375, -0.125))
        self.assertEqual(result.voxels[-1].center, (0.375, 0.375, 0.375))

    def test_centers_inside_bounds(self):
        """Центры вокселей внутри объёма сетки."""
        pose = GeneralPose3.translation(3.0, -2.0, 1.0) * GeneralPose3.rotateY(0.4)
        snapshot = prepare_mesh(CubeMesh(1.0), transform=pose)
        result = NaiveVoxelizer(0.2).voxelize(snapshot)

        self.assertGreater(len(result), 0)
        half = 0.1
        for voxel in result.voxels:
            center = np.array(voxel.center)
            self.assertTrue(np.all(center >= result.bounds_min + half - 1e-9))
            self.assertTrue(np.all(center <= result.bounds_max + half + 1e-9))

    def test_parallel_matches_serial(self):
        """Параллельный и последовательный проход дают одно и то же."""
        pose = GeneralPose3.rotateX(0.3) * GeneralPose3.rotateZ(0.7)
        snapshot = prepare_mesh(CubeMesh(1.0, 0.6, 0.8), transform=pose)

        parallel = NaiveVoxelizer(0.1, parallel=True).voxelize(snapshot)
        serial = NaiveVoxelizer(0.1, parallel=False).voxelize(snapshot)

        self.assertEqual(parallel.voxels, serial.voxels)

    def test_repeatable(self):
        """Повторный запуск даёт идентичный результат."""
        snapshot = prepare_mesh(CubeMesh(1.0), transform=GeneralPose3.rotateZ(0.5))
        voxelizer = NaiveVoxelizer(0.2)

        self.assertEqual(voxelizer.voxelize(snapshot).voxels, voxelizer.voxelize(snapshot).voxels)

    def test_first_triangle_wins(self):
        """Цвет ячейки — от первого по порядку треугольника."""
        tri = [[0.2, 0.2, 0.5], [0.8, 0.2, 0.5], [0.2, 0.8, 0.5]]
        mesh = Mesh3(
            vertices=tri + tri,
            triangles=[0, 1, 2, 3, 4, 5],
            colors=[RED] * 3 + [[0.0, 0.0, 1.0]] * 3,
        )
        result = NaiveVoxelizer(0.5).voxelize(prepare_mesh(mesh), [0, 0, 0], [1, 1, 1])

        self.assertGreater(len(result), 0)
        for voxel in result.voxels:
            self.assertEqual(voxel.color, (1.0, 0.0, 0.0))

    def test_material_color_modulates_vertex_color(self):
        """Цвет вокселя = цвет материала * цвет вершины."""
        mesh = TriangleMesh(
            [0.2, 0.2, 0.5], [0.8, 0.2, 0.5], [0.2, 0.8, 0.5],
            colors=[[1.0, 0.5, 0.25]] * 3,
        )
        voxelizer = NaiveVoxelizer(1.0, VoxelMaterial(color=(0.5, 1.0, 1.0)))
        result = voxelizer.voxelize(prepare_mesh(mesh), [0, 0, 0], [1, 1, 1])

        self.assertEqual(result.voxels[0].color, (0.5, 0.5, 0.25))

    def test_material_color_without_vertex_colors(self):
        """Без цветов вершин воксель получает цвет материала."""
        mesh = TriangleMesh([0.2, 0.2, 0.5], [0.8, 0.2, 0.5], [0.2, 0.8, 0.5])
        voxelizer = NaiveVoxelizer(1.0, VoxelMaterial(color=(0.0, 1.0, 0.0)))
        result = voxelizer.voxelize(prepare_mesh(mesh), [0, 0, 0], [1, 1, 1])

        self.assertEqual(result.voxels[0].color, (0.0, 1.0, 0.0))

    def test_uv_from_first_vertex(self):
        """UV берётся с первой вершины треугольника."""
        mesh = TriangleMesh(
            [0.2, 0.2, 0.5], [0.8, 0.2, 0.5], [0.2, 0.8, 0.5],
            uvs=[[0.25, 0.5], [1.0, 0.0], [0.0, 1.0]],
        )
        result = NaiveVoxelizer(1.0).voxelize(prepare_mesh(mesh), [0, 0, 0], [1, 1, 1])

        self.assertEqual(result.voxels[0].uv, (0.25, 0.5))

    def test_flat_mesh_default_bounds_empty(self):
        """Плоский меш с объёмом по умолчанию: ноль ячеек по Z."""
        result = NaiveVoxelizer(0.25).voxelize(prepare_mesh(QuadMesh(1.0)))

        self.assertTrue(result.is_empty)

    def test_flat_mesh_explicit_bounds(self):
        """Плоский меш с явным объёмом."""
        result = NaiveVoxelizer(0.25).voxelize(
            prepare_mesh(QuadMesh(1.0)), [-0.5, -0.5, -0.25], [0.5, 0.5, 0.25]
        )

        # Плоскость z = 0 касается обоих слоёв
        self.assertEqual(len(result), 32)

    def test_empty_mesh(self):
        """Пустой меш — пустой результат без ошибок."""
        voxelizer = NaiveVoxelizer(0.5)
        result = voxelizer.voxelize(prepare_mesh(np.zeros((0, 3)), triangles=[]))

        self.assertTrue(result.is_empty)
        self.assertEqual(voxelizer.state, VoxelizerState.DONE)

    def test_state_transitions(self):
        """IDLE до запуска, DONE после."""
        voxelizer = NaiveVoxelizer(0.5)
        self.assertEqual(voxelizer.state, VoxelizerState.IDLE)

        voxelizer.voxelize(prepare_mesh(CubeMesh(1.0)))
        self.assertEqual(voxelizer.state, VoxelizerState.DONE)

    def test_invalid_snapshot(self):
        """Снимок с индексами вне массива вершин."""
        snapshot = MeshSnapshot(
            vertices=np.zeros((2, 3)),
            triangles=np.array([[0, 1, 2]]),
            normals=np.zeros((1, 3)),
            colors=np.zeros((0, 3)),
            uvs=np.zeros((0, 2)),
        )
        with self.assertRaises(MeshDataError):
            NaiveVoxelizer(1.0).voxelize(snapshot)

    def test_result_bounds(self):
        """Результат хранит использованный объём."""
        result = NaiveVoxelizer(0.25).voxelize(prepare_mesh(CubeMesh(1.0)))

        np.testing.assert_array_equal(result.bounds_min, [-0.5, -0.5, -0.5])
        np.testing.assert_array_equal(result.bounds_max, [0.5, 0.5, 0.5])


if __name__ == "__main__":
    unittest.main()

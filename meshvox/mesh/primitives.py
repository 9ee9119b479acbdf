"""Primitive mesh shapes: Cube, Quad, single Triangle."""

import numpy as np
from .mesh import Mesh3


class CubeMesh(Mesh3):
    def __init__(self, size: float = 1.0, y: float = None, z: float = None, colors=None):
        x = size
        if y is None:
            y = x
        if z is None:
            z = x

        s_x = x * 0.5
        s_y = y * 0.5
        s_z = z * 0.5
        vertices = np.array(
            [
                [-s_x, -s_y, -s_z],
                [s_x, -s_y, -s_z],
                [s_x, s_y, -s_z],
                [-s_x, s_y, -s_z],
                [-s_x, -s_y, s_z],
                [s_x, -s_y, s_z],
                [s_x, s_y, s_z],
                [-s_x, s_y, s_z],
            ],
            dtype=float,
        )
        triangles = np.array(
            [
                [1, 0, 2],
                [2, 0, 3],
                [4, 5, 7],
                [5, 6, 7],
                [0, 1, 4],
                [1, 5, 4],
                [2, 3, 6],
                [3, 7, 6],
                [3, 0, 4],
                [7, 3, 4],
                [1, 2, 5],
                [2, 6, 5],
            ],
            dtype=int,
        )
        uvs = np.array([
            [0.0, 0.0],
            [1.0, 0.0],
            [1.0, 1.0],
            [0.0, 1.0],
            [0.0, 0.0],
            [1.0, 0.0],
            [1.0, 1.0],
            [0.0, 1.0],
        ], dtype=float)
        super().__init__(vertices=vertices, triangles=triangles, uvs=uvs, colors=colors, name="Cube")


class QuadMesh(Mesh3):
    """Square in the XY plane centred at the origin, two triangles."""

    def __init__(self, size: float = 1.0):
        s = size * 0.5
        vertices = np.array(
            [
                [-s, -s, 0.0],
                [s, -s, 0.0],
                [s, s, 0.0],
                [-s, s, 0.0],
            ],
            dtype=float,
        )
        triangles = np.array([[0, 1, 2], [0, 2, 3]], dtype=int)
        uvs = np.array([[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0]], dtype=float)
        super().__init__(vertices=vertices, triangles=triangles, uvs=uvs, name="Quad")


class TriangleMesh(Mesh3):
    def __init__(self, v0, v1, v2, uvs=None, colors=None):
        vertices = np.array([v0, v1, v2], dtype=float)
        super().__init__(vertices=vertices, triangles=[0, 1, 2], uvs=uvs, colors=colors, name="Triangle")

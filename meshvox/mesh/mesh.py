"""Base mesh class for local-space triangle meshes."""

from typing import Optional

import numpy as np


class Mesh3:
    """Triangle mesh storing local-space positions, triangle indices and optional per-vertex colors and UVs."""

    def __init__(
        self,
        vertices: np.ndarray,
        triangles: np.ndarray,
        uvs: Optional[np.ndarray] = None,
        colors: Optional[np.ndarray] = None,
        name: str = "",
    ):
        if np.size(triangles) % 3 != 0:
            raise ValueError("Triangle index count must be a multiple of 3.")
        if np.size(vertices) % 3 != 0:
            raise ValueError("Vertices must be a Nx3 array.")
        self.vertices = np.asarray(vertices, dtype=np.float64).reshape(-1, 3)
        self.triangles = np.asarray(triangles, dtype=np.int64).reshape(-1, 3)
        self.uvs = self._optional_array(uvs, 2)
        self.colors = self._optional_array(colors, None)
        if self.colors.ndim == 2 and self.colors.shape[1] == 4:
            self.colors = self.colors[:, :3].copy()
        self.name = name
        self._validate_mesh()

    @staticmethod
    def _optional_array(data, width) -> np.ndarray:
        if data is None or np.size(data) == 0:
            return np.zeros((0, width or 3), dtype=np.float64)
        return np.asarray(data, dtype=np.float64)

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def triangle_count(self) -> int:
        return len(self.triangles)

    def _validate_mesh(self):
        """Ensure that the attribute arrays have correct shapes."""
        if self.uvs.ndim != 2 or self.uvs.shape[1] != 2:
            raise ValueError("UVs must be a Nx2 array.")
        if self.colors.ndim != 2 or self.colors.shape[1] != 3:
            raise ValueError("Colors must be a Nx3 or Nx4 array.")

    def __repr__(self):
        return f"Mesh3(name={self.name!r}, vertices={self.vertex_count}, triangles={self.triangle_count})"

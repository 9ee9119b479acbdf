"""Mesh module - local-space triangle meshes and primitive shapes."""

from meshvox.mesh.mesh import Mesh3
from meshvox.mesh.primitives import CubeMesh, QuadMesh, TriangleMesh

__all__ = ["Mesh3", "CubeMesh", "QuadMesh", "TriangleMesh"]

"""GeneralPose3 - 3D pose with scale used to place meshes in world space.

Composition formula:
    parent * child:
        new_lin = parent.lin + qrot(parent.ang, parent.scale * child.lin)
        new_ang = qmul(parent.ang, child.ang)
        new_scale = parent.scale * child.scale  # element-wise

Quaternions are stored as (x, y, z, w), the scalar-last convention of
scipy.spatial.transform.Rotation.
"""

import math
import numpy
from scipy.spatial.transform import Rotation


class GeneralPose3:
    """A 3D Pose with scale, represented by rotation quaternion, translation vector, and scale."""

    __slots__ = ('ang', 'lin', 'scale', '_rotation', '_mat')

    def __init__(
        self,
        ang: numpy.ndarray = None,
        lin: numpy.ndarray = None,
        scale: numpy.ndarray = None
    ):
        if ang is None:
            ang = numpy.array([0.0, 0.0, 0.0, 1.0])
        if lin is None:
            lin = numpy.array([0.0, 0.0, 0.0])
        if scale is None:
            scale = numpy.array([1.0, 1.0, 1.0])
        self.ang = numpy.asarray(ang, dtype=numpy.float64)
        self.lin = numpy.asarray(lin, dtype=numpy.float64)
        self.scale = numpy.asarray(scale, dtype=numpy.float64)
        self._rotation = None
        self._mat = None

    @staticmethod
    def identity() -> 'GeneralPose3':
        return GeneralPose3()

    def rotation(self) -> Rotation:
        """scipy Rotation corresponding to the pose's orientation."""
        if self._rotation is None:
            self._rotation = Rotation.from_quat(self.ang)
        return self._rotation

    def rotation_matrix(self) -> numpy.ndarray:
        """Get the 3x3 rotation matrix corresponding to the pose's orientation."""
        return self.rotation().as_matrix()

    def as_matrix(self) -> numpy.ndarray:
        """Get the 4x4 transformation matrix with scale baked in.

        Returns TRS matrix: Translation * Rotation * Scale
        """
        if self._mat is None:
            RS = self.rotation_matrix() @ numpy.diag(self.scale)
            self._mat = numpy.eye(4)
            self._mat[:3, :3] = RS
            self._mat[:3, 3] = self.lin
        return self._mat

    def inverse(self) -> 'GeneralPose3':
        """Compute the inverse of the pose.

        For pose P = TRS, inverse is S^-1 R^-1 T^-1. Exact only for
        uniform scale.
        """
        inv_scale = 1.0 / self.scale
        inv_rot = self.rotation().inv()
        inv_lin = inv_rot.apply(-self.lin) * inv_scale
        return GeneralPose3(ang=inv_rot.as_quat(), lin=inv_lin, scale=inv_scale)

    def __repr__(self):
        return f"GeneralPose3(ang={self.ang}, lin={self.lin}, scale={self.scale})"

    def transform_point(self, point: numpy.ndarray) -> numpy.ndarray:
        """Transform a 3D point using the pose (with scale)."""
        return self.rotation().apply(self.scale * numpy.asarray(point, dtype=numpy.float64)) + self.lin

    def transform_points(self, points: numpy.ndarray) -> numpy.ndarray:
        """Transform an (N, 3) array of points."""
        points = numpy.asarray(points, dtype=numpy.float64).reshape(-1, 3)
        if len(points) == 0:
            return points.copy()
        return self.rotation().apply(points * self.scale) + self.lin

    def __mul__(self, other: 'GeneralPose3') -> 'GeneralPose3':
        """Compose this pose with another pose.

        Composition formula:
            new_lin = parent.lin + qrot(parent.ang, parent.scale * child.lin)
            new_ang = qmul(parent.ang, child.ang)
            new_scale = parent.scale * child.scale
        """
        if not isinstance(other, GeneralPose3):
            raise TypeError("Can only multiply GeneralPose3 with GeneralPose3")
        q = (self.rotation() * other.rotation()).as_quat()
        t = self.lin + self.rotation().apply(self.scale * other.lin)
        s = self.scale * other.scale
        return GeneralPose3(ang=q, lin=t, scale=s)

    # --- Factory methods ---

    @staticmethod
    def rotation_around(axis: numpy.ndarray, angle: float) -> 'GeneralPose3':
        """Create a rotation pose around a given axis by a given angle."""
        axis = numpy.asarray(axis, dtype=numpy.float64)
        axis = axis / numpy.linalg.norm(axis)
        s = math.sin(angle / 2)
        c = math.cos(angle / 2)
        q = numpy.array([axis[0] * s, axis[1] * s, axis[2] * s, c])
        return GeneralPose3(ang=q)

    @staticmethod
    def from_euler(seq: str, angles, degrees: bool = False) -> 'GeneralPose3':
        """Create a rotation pose from Euler angles (scipy axis sequence)."""
        return GeneralPose3(ang=Rotation.from_euler(seq, angles, degrees=degrees).as_quat())

    @staticmethod
    def translation(x: float, y: float, z: float) -> 'GeneralPose3':
        """Create a translation pose."""
        return GeneralPose3(lin=numpy.array([x, y, z], dtype=numpy.float64))

    @staticmethod
    def scaling(sx: float, sy: float = None, sz: float = None) -> 'GeneralPose3':
        """Create a scale-only pose.

        If only sx is given, uniform scale is applied.
        """
        if sy is None:
            sy = sx
        if sz is None:
            sz = sx
        return GeneralPose3(scale=numpy.array([sx, sy, sz], dtype=numpy.float64))

    @staticmethod
    def rotateX(angle: float) -> 'GeneralPose3':
        """Create a rotation pose around the X axis."""
        return GeneralPose3.rotation_around(numpy.array([1.0, 0.0, 0.0]), angle)

    @staticmethod
    def rotateY(angle: float) -> 'GeneralPose3':
        """Create a rotation pose around the Y axis."""
        return GeneralPose3.rotation_around(numpy.array([0.0, 1.0, 0.0]), angle)

    @staticmethod
    def rotateZ(angle: float) -> 'GeneralPose3':
        """Create a rotation pose around the Z axis."""
        return GeneralPose3.rotation_around(numpy.array([0.0, 0.0, 1.0]), angle)

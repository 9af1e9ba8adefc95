import math
from typing import Tuple, Any, Optional, Sequence
import numpy as np


class Matrix:
    """
    A 4x4 affine transformation matrix for 3D points and vectors.

    Provides an object-oriented interface for matrix operations, including
    translations, rotations, and scaling. Uses numpy for the underlying
    calculations. The bottom row is expected to stay (0, 0, 0, 1).
    """

    def __init__(self, data: Any = None):
        """
        Initializes a 4x4 matrix.

        Args:
            data: Can be another Matrix, a 4x4 list/tuple, a 4x4 numpy
                  array, or None to create an identity matrix.
        """
        if data is None:
            self.m: np.ndarray = np.identity(4, dtype=float)
        elif isinstance(data, Matrix):
            self.m = data.m.copy()
        else:
            try:
                self.m = np.array(data, dtype=float)
                if self.m.shape != (4, 4):
                    raise ValueError("Input data must be a 4x4 matrix.")
            except Exception as e:
                raise ValueError(f"Could not create Matrix from data: {e}")

    def __matmul__(self, other: "Matrix") -> "Matrix":
        """
        Performs matrix multiplication: self @ other.

        (A @ B) @ p applies B first, then A.
        """
        if not isinstance(other, Matrix):
            return NotImplemented
        return Matrix(np.dot(self.m, other.m))

    def __eq__(self, other: Any) -> bool:
        """
        Checks for equality between two matrices.

        Uses np.allclose for floating-point comparisons.
        """
        if not isinstance(other, Matrix):
            return False
        return np.allclose(self.m, other.m)

    def __repr__(self) -> str:
        return f"Matrix({self.m.tolist()})"

    def __str__(self) -> str:
        return str(self.m)

    def __copy__(self) -> "Matrix":
        return Matrix(self)

    def copy(self) -> "Matrix":
        return Matrix(self)

    def __deepcopy__(self, memo: dict) -> "Matrix":
        return Matrix(self)

    @staticmethod
    def identity() -> "Matrix":
        """Returns a new identity matrix."""
        return Matrix()

    def is_identity(self) -> bool:
        return np.allclose(self.m, np.identity(4))

    def get_translation(self) -> Tuple[float, float, float]:
        """Extracts the translation component (tx, ty, tz)."""
        return (
            float(self.m[0, 3]),
            float(self.m[1, 3]),
            float(self.m[2, 3]),
        )

    @staticmethod
    def translation(tx: float, ty: float, tz: float = 0.0) -> "Matrix":
        """Creates a translation matrix."""
        return Matrix(
            [
                [1, 0, 0, tx],
                [0, 1, 0, ty],
                [0, 0, 1, tz],
                [0, 0, 0, 1],
            ]
        )

    @staticmethod
    def scale(
        sx: float,
        sy: float,
        sz: float = 1.0,
        center: Optional[Sequence[float]] = None,
    ) -> "Matrix":
        """
        Creates a scaling matrix.

        Args:
            sx: Scale factor for the x-axis.
            sy: Scale factor for the y-axis.
            sz: Scale factor for the z-axis.
            center: Optional point to scale around. If None, scales
                    around the origin.
        """
        m = Matrix(
            [
                [sx, 0, 0, 0],
                [0, sy, 0, 0],
                [0, 0, sz, 0],
                [0, 0, 0, 1],
            ]
        )
        if center:
            return Matrix._about_center(m, center)
        return m

    @staticmethod
    def rotation(
        angle_deg: float,
        axis: Sequence[float] = (0.0, 0.0, 1.0),
        center: Optional[Sequence[float]] = None,
    ) -> "Matrix":
        """
        Creates a rotation matrix around an axis through the origin (or
        through `center`), using Rodrigues' formula.

        Args:
            angle_deg: The rotation angle in degrees.
            axis: Rotation axis. Defaults to +Z.
            center: Optional point the axis passes through.
        """
        axis_vec = np.array(axis, dtype=float)
        norm = np.linalg.norm(axis_vec)
        if norm == 0.0:
            raise ValueError("Rotation axis must have non-zero length.")
        ux, uy, uz = axis_vec / norm
        angle_rad = math.radians(angle_deg)
        c = math.cos(angle_rad)
        s = math.sin(angle_rad)
        t = 1.0 - c
        xy, xz, yz = t * ux * uy, t * ux * uz, t * uy * uz
        m = Matrix(
            [
                [t * ux * ux + c, xy - s * uz, xz + s * uy, 0],
                [xy + s * uz, t * uy * uy + c, yz - s * ux, 0],
                [xz - s * uy, yz + s * ux, t * uz * uz + c, 0],
                [0, 0, 0, 1],
            ]
        )
        if center:
            return Matrix._about_center(m, center)
        return m

    @staticmethod
    def _about_center(m: "Matrix", center: Sequence[float]) -> "Matrix":
        cx, cy = center[0], center[1]
        cz = center[2] if len(center) > 2 else 0.0
        t_to_origin = Matrix.translation(-cx, -cy, -cz)
        t_back = Matrix.translation(cx, cy, cz)
        return t_back @ m @ t_to_origin

    def linear_part(self) -> np.ndarray:
        """Returns a copy of the upper-left 3x3 (rotation/scale/shear)."""
        return self.m[0:3, 0:3].copy()

    def determinant(self) -> float:
        return float(np.linalg.det(self.m[0:3, 0:3]))

    def invert(self) -> "Matrix":
        """
        Computes the inverse of the matrix.

        Will raise a `numpy.linalg.LinAlgError` if the matrix is singular
        (i.e., not invertible), for example, a scale of zero.
        """
        return Matrix(np.linalg.inv(self.m))

    def inverse_transpose_linear(self) -> np.ndarray:
        """
        Returns the inverse transpose of the 3x3 linear part, which is the
        matrix that maps plane normals when space is mapped by this matrix.

        Raises `numpy.linalg.LinAlgError` for a singular linear part.
        """
        inverse = np.linalg.inv(self.m[0:3, 0:3])
        if not np.all(np.isfinite(inverse)):
            raise np.linalg.LinAlgError("Singular matrix")
        return inverse.T

    def transform_point(
        self, point: Sequence[float]
    ) -> Tuple[float, float, float]:
        """
        Applies the full affine transformation to a point. A 2D point is
        treated as lying at z = 0.
        """
        z = point[2] if len(point) > 2 else 0.0
        vec = np.array([point[0], point[1], z, 1.0])
        res_vec = np.dot(self.m, vec)
        return (float(res_vec[0]), float(res_vec[1]), float(res_vec[2]))

    def transform_vector(
        self, vector: Sequence[float]
    ) -> Tuple[float, float, float]:
        """
        Applies the transformation to a vector, ignoring translation.
        """
        z = vector[2] if len(vector) > 2 else 0.0
        vec = np.array([vector[0], vector[1], z, 0.0])
        res_vec = np.dot(self.m, vec)
        return (float(res_vec[0]), float(res_vec[1]), float(res_vec[2]))

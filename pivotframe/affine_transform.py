import logging
import numpy as np
from typing import Union, Iterable
from pivotframe.errors import SingularTransformError
from pivotframe.geometry import det3, inv3
from pivotframe.utils import as_matrix3, as_vector3, as_points, to_matrix, next_mtime

logger = logging.getLogger(__name__)

SINGULAR_TOLERANCE = 1e-12

_BASE_MATRIX = np.eye(3)
_BASE_OFFSET = np.zeros(3)


class AffineTransform:
    """
    A 3D affine map stored as a 3x3 matrix and an offset:

        output = matrix @ input + offset
    """

    __slots__ = ('_matrix', '_offset', '_mtime')

    def __init__(self, matrix: Union[None, Iterable] = None, offset: Union[None, Iterable] = None):
        self._matrix = _BASE_MATRIX.copy() if matrix is None else as_matrix3(matrix)
        self._offset = _BASE_OFFSET.copy() if offset is None else as_vector3(offset, "offset")
        self._mtime = next_mtime()

    @classmethod
    def identity(cls) -> "AffineTransform":
        """Create an identity transform."""
        return cls()

    ###########
    # State
    #

    @property
    def matrix(self) -> np.ndarray:
        """
        Get the linear part of the transform.

        Returns:
            A copy of the 3x3 matrix.
        """
        return self._matrix.copy()

    @matrix.setter
    def matrix(self, value: Union[Iterable, np.ndarray]):
        self.set_matrix(value)

    @property
    def offset(self) -> np.ndarray:
        """
        Get the additive part of the transform.

        Returns:
            A copy of the 3D offset.
        """
        return self._offset.copy()

    @offset.setter
    def offset(self, value: Union[Iterable, np.ndarray]):
        self.set_offset(value)

    def set_matrix(self, matrix: Union[Iterable, np.ndarray]) -> None:
        """Replace the 3x3 matrix."""
        self._matrix = as_matrix3(matrix)
        self.modified()

    def set_offset(self, offset: Union[Iterable, np.ndarray]) -> None:
        """Replace the offset."""
        self._offset = as_vector3(offset, "offset")
        self.modified()

    def set_identity(self) -> None:
        """Reset to the identity map."""
        self._matrix = _BASE_MATRIX.copy()
        self._offset = _BASE_OFFSET.copy()
        self.modified()

    ###########
    # Modification tracking
    #

    def modified(self) -> None:
        """Mark the transform as changed so cached consumers re-evaluate."""
        self._mtime = next_mtime()

    @property
    def mtime(self) -> int:
        """Stamp of the last modification. Strictly increases on every change."""
        return self._mtime

    ###########
    # Application
    #

    def transform_point(self, point: Union[Iterable, np.ndarray]) -> np.ndarray:
        """
        Map a point, or an (N, 3) array of points, through the transform.

        Args:
            point: A 3D point or an (N, 3) array of points.

        Returns:
            The mapped point(s), same shape as the input.
        """
        points = as_points(point)
        return points @ self._matrix.T + self._offset

    def transform_vector(self, vector: Union[Iterable, np.ndarray]) -> np.ndarray:
        """
        Map a displacement vector (or an (N, 3) array of them). The offset is ignored.
        """
        vectors = as_points(vector)
        return vectors @ self._matrix.T

    def transform_covariant_vector(self, vector: Union[Iterable, np.ndarray]) -> np.ndarray:
        """
        Map a covariant vector such as a surface normal or an image gradient,
        using the inverse transpose of the matrix.
        """
        vectors = as_points(vector)
        return vectors @ self.inverse_matrix

    @property
    def inverse_matrix(self) -> np.ndarray:
        """
        Get the inverse of the 3x3 matrix.

        Raises:
            SingularTransformError: if the matrix is singular.
        """
        det = det3(self._matrix)
        if abs(det) <= SINGULAR_TOLERANCE:
            logger.debug("Refusing to invert matrix with determinant %g", det)
            raise SingularTransformError(
                f"Matrix is singular (det={det}) and cannot be inverted")
        return inv3(self._matrix)

    def to_matrix(self) -> np.ndarray:
        """
        Get the 4x4 homogeneous matrix of this transform.
        """
        return to_matrix(self._matrix, self._offset)

    ###########
    # Inversion
    #

    def invert(self) -> None:
        """
        Invert this transform in place.

        Raises:
            SingularTransformError: if the matrix is singular. The transform is left unchanged.
        """
        inverse_matrix = self.inverse_matrix
        self._offset = -(inverse_matrix @ self._offset)
        self._matrix = inverse_matrix
        self.modified()

    def get_inverse(self) -> "AffineTransform":
        """
        Create the inverse transform.

        Returns:
            A new transform of the same type mapping outputs of this transform back to its inputs.
        """
        inverse = self.copy()
        inverse.invert()
        return inverse

    ###########
    # Value semantics
    #

    def copy(self) -> "AffineTransform":
        """Create an independent copy of this transform."""
        return self.__class__(self._matrix, self._offset)

    def __copy__(self):
        return self.copy()

    def __deepcopy__(self, memo):
        # all state is numeric, so shallow vs deep is effectively the same here
        return self.copy()

    def __reduce__(self):
        return (self.__class__, (self._matrix.copy(), self._offset.copy()))

    def __eq__(self, other) -> bool:
        """
        True if `other` is the same class with identical matrix and offset.
        """
        if self is other:
            return True
        if self.__class__ is not other.__class__:
            return False
        return np.array_equal(self._matrix, other._matrix) and \
            np.array_equal(self._offset, other._offset)

    def __ne__(self, other) -> bool:
        return not self.__eq__(other)

    __hash__ = None  # mutable

    def __repr__(self):
        return f"{self.__class__.__name__}(matrix={self._matrix.tolist()}, offset={self._offset.tolist()})"

    def __str__(self):
        return self.__repr__()

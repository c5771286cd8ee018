import logging
import numpy as np
from typing import Union, Iterable, Optional, Protocol
from pivotframe.affine_transform import AffineTransform
from pivotframe.conventions import EulerConvention
from pivotframe.errors import InvalidArgumentError
from pivotframe.geometry import euler_to_rotation, rotation_to_euler, rotation_derivatives, is_rigid
from pivotframe.utils import as_matrix3, as_vector3, as_parameters

logger = logging.getLogger(__name__)

ORTHOGONALITY_TOLERANCE = 1e-6


class OffsetPolicy(Protocol):
    """
    Computes the offset that accompanies a freshly computed rotation matrix.

    An EulerTransform holding a policy calls it from `compute_matrix` and stores
    the result as its offset.
    """

    def compute_offset(self, matrix: np.ndarray, angles: np.ndarray, compute_zyx: bool) -> np.ndarray:
        ...


def _as_convention(convention: Union[EulerConvention, str]) -> EulerConvention:
    if isinstance(convention, EulerConvention):
        return convention
    try:
        return EulerConvention[str(convention).upper()]
    except KeyError:
        raise InvalidArgumentError(
            f"Unknown Euler convention {convention!r}, expected one of {[c.name for c in EulerConvention]}") from None


class EulerTransform(AffineTransform):
    """
    A rotation given by three Euler angles (radians) plus an offset.

    The parameter vector is [angle_x, angle_y, angle_z, offset_x, offset_y, offset_z].
    The rotation matrix is always derived from the stored angles under the active
    convention; if an OffsetPolicy is attached, the offset is derived too.
    """

    __slots__ = ('_angles', '_convention', '_offset_policy')

    number_of_parameters = 6

    def __init__(self,
                 angles: Union[None, Iterable] = None,
                 offset: Union[None, Iterable] = None,
                 convention: Union[EulerConvention, str] = EulerConvention.ZXY,
                 offset_policy: Optional[OffsetPolicy] = None):
        super().__init__(offset=offset)
        self._angles = np.zeros(3) if angles is None else as_vector3(angles, "angles")
        self._convention = _as_convention(convention)
        self._offset_policy = offset_policy
        self.compute_matrix()

    ###########
    # Rotation angles and convention
    #

    @property
    def angles(self) -> np.ndarray:
        """
        Get the rotation angles about x, y, z in radians.

        Returns:
            A copy of the 3 angles.
        """
        return self._angles.copy()

    @angles.setter
    def angles(self, value: Union[Iterable, np.ndarray]):
        self.set_rotation(*as_vector3(value, "angles"))

    def set_rotation(self, angle_x: float, angle_y: float, angle_z: float) -> None:
        """
        Set the rotation angles (radians) and recompute the matrix.
        """
        self._angles = as_vector3((angle_x, angle_y, angle_z), "angles")
        self.compute_matrix()

    @property
    def convention(self) -> EulerConvention:
        return self._convention

    @convention.setter
    def convention(self, value: Union[EulerConvention, str]):
        self.set_convention(value)

    def set_convention(self, convention: Union[EulerConvention, str]) -> None:
        """
        Switch the Euler composition. The stored angles are kept and the matrix is rebuilt from them.
        """
        convention = _as_convention(convention)
        if convention is self._convention:
            return
        logger.debug("Switching %s from %s to %s",
                     self.__class__.__name__, self._convention.name, convention.name)
        self._convention = convention
        self.compute_matrix()

    @property
    def compute_zyx(self) -> bool:
        """True when the matrix is composed as Rz @ Ry @ Rx, False for Rz @ Rx @ Ry."""
        return self._convention.compute_zyx

    @compute_zyx.setter
    def compute_zyx(self, value: bool):
        self.set_convention(EulerConvention.from_compute_zyx(bool(value)))

    ###########
    # Matrix bookkeeping
    #

    def compute_matrix(self) -> None:
        """
        Rebuild the rotation matrix from the angles, then the offset if a policy is attached.
        """
        compute_zyx = self._convention.compute_zyx
        self._matrix = euler_to_rotation(
            float(self._angles[0]), float(self._angles[1]), float(self._angles[2]), compute_zyx)
        if self._offset_policy is not None:
            offset = self._offset_policy.compute_offset(
                self._matrix.copy(), self._angles.copy(), compute_zyx)
            self._offset = np.asarray(offset, dtype=np.float64)
        self.modified()

    def set_matrix(self, matrix: Union[Iterable, np.ndarray]) -> None:
        """
        Set the rotation from a rigid matrix. The angles are recovered from it.

        Raises:
            InvalidArgumentError: if the matrix is not orthonormal with determinant +1.
        """
        matrix = as_matrix3(matrix)
        if not is_rigid(matrix, ORTHOGONALITY_TOLERANCE):
            raise InvalidArgumentError(
                f"Attempting to set a non-orthogonal rotation matrix: {matrix.tolist()}")
        self._angles = np.array(rotation_to_euler(
            matrix, self._convention.compute_zyx), dtype=np.float64)
        self.compute_matrix()

    def set_identity(self) -> None:
        self._angles = np.zeros(3)
        super().set_identity()
        self.compute_matrix()

    ###########
    # Parameters
    #

    def get_parameters(self) -> np.ndarray:
        """
        Get the parameter vector [angle_x, angle_y, angle_z, offset_x, offset_y, offset_z].

        Returns:
            A new array; changing it does not affect the transform.
        """
        return np.concatenate((self._angles, self._offset))

    def set_parameters(self, parameters: Union[Iterable, np.ndarray]) -> None:
        """
        Set the parameter vector [angle_x, angle_y, angle_z, offset_x, offset_y, offset_z].

        Raises:
            InvalidArgumentError: if there are not exactly 6 finite values.
        """
        parameters = as_parameters(parameters, self.number_of_parameters)
        self._offset = parameters[3:].copy()
        self.set_rotation(*parameters[:3])

    @property
    def parameters(self) -> np.ndarray:
        return self.get_parameters()

    @parameters.setter
    def parameters(self, value: Union[Iterable, np.ndarray]):
        self.set_parameters(value)

    def _jacobian_lever(self, point: np.ndarray) -> np.ndarray:
        return point

    def _jacobian_translation_block(self) -> np.ndarray:
        return np.eye(3)

    def jacobian(self, point: Union[Iterable, np.ndarray]) -> np.ndarray:
        """
        Derivative of the mapped point with respect to the parameter vector.

        Args:
            point: The 3D input point.

        Returns:
            A 3x6 matrix, column j is d(output)/d(parameter_j).
        """
        point = as_vector3(point, "point")
        derivatives = rotation_derivatives(
            float(self._angles[0]), float(self._angles[1]), float(self._angles[2]),
            self._convention.compute_zyx)
        lever = self._jacobian_lever(point)
        jacobian = np.empty((3, self.number_of_parameters), dtype=np.float64)
        for i in range(3):
            jacobian[:, i] = derivatives[i] @ lever
        jacobian[:, 3:] = self._jacobian_translation_block()
        return jacobian

    ###########
    # Inversion
    #

    def invert(self) -> None:
        """
        Invert in place. The angles are recovered from the inverted matrix.

        Raises:
            SingularTransformError: if the matrix is singular. The transform is left unchanged.
        """
        super().invert()
        self._angles = np.array(rotation_to_euler(
            self._matrix, self._convention.compute_zyx), dtype=np.float64)

    ###########
    # Value semantics
    #

    def copy(self) -> "EulerTransform":
        other = self.__class__(self._angles, self._offset,
                               self._convention, self._offset_policy)
        other._matrix = self._matrix.copy()
        other._offset = self._offset.copy()
        return other

    def __reduce__(self):
        # the policy travels with the transform, as in copy(); it must itself be picklable
        return (self.__class__, (self._angles.copy(), self._offset.copy(),
                                 self._convention, self._offset_policy))

    def __eq__(self, other) -> bool:
        if not super().__eq__(other):
            return False
        return self._convention is other._convention and \
            np.array_equal(self._angles, other._angles)

    __hash__ = None

    def __repr__(self):
        return (f"{self.__class__.__name__}(angles={self._angles.tolist()}, "
                f"offset={self._offset.tolist()}, convention={self._convention.name})")

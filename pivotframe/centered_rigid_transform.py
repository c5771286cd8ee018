import logging
import numpy as np
from typing import Union, Iterable
from pivotframe.conventions import EulerConvention
from pivotframe.euler_transform import EulerTransform
from pivotframe.geometry import centered_offset
from pivotframe.utils import as_vector3, as_parameters

logger = logging.getLogger(__name__)


class CenteredRigidTransform(EulerTransform):
    """
    A rigid transform rotating about an explicit center, composed with a translation.

    Points are mapped as

        output = R @ (input + translation - center) + center

    which the affine base stores as `matrix = R` and
    `offset = R @ (translation - center) + center`.

    The parameter vector is [angle_x, angle_y, angle_z, translation_x, translation_y, translation_z].
    The center is configuration and never part of it.
    """

    __slots__ = ('_center', '_translation')

    def __init__(self,
                 center: Union[None, Iterable] = None,
                 translation: Union[None, Iterable] = None,
                 angles: Union[None, Iterable] = None,
                 convention: Union[EulerConvention, str] = EulerConvention.ZXY):
        # must exist before the base runs compute_matrix through the offset policy
        self._center = np.zeros(3) if center is None else as_vector3(center, "center")
        self._translation = np.zeros(3) if translation is None else as_vector3(translation, "translation")
        super().__init__(angles=angles, convention=convention, offset_policy=self)

    @classmethod
    def identity(cls) -> "CenteredRigidTransform":
        """Create a transform with zero angles, translation and center."""
        return cls()

    @classmethod
    def from_parameters(cls,
                        parameters: Union[Iterable, np.ndarray],
                        center: Union[None, Iterable] = None,
                        convention: Union[EulerConvention, str] = EulerConvention.ZXY) -> "CenteredRigidTransform":
        """
        Create a transform from a 6-element parameter vector and an optional center.
        """
        parameters = as_parameters(parameters, cls.number_of_parameters)
        return cls(center=center, translation=parameters[3:], angles=parameters[:3], convention=convention)

    ###########
    # Center and translation
    #

    @property
    def center(self) -> np.ndarray:
        """
        Get the center of rotation.

        Returns:
            A copy of the 3D center.
        """
        return self._center.copy()

    @center.setter
    def center(self, value: Union[Iterable, np.ndarray]):
        self.set_center(value)

    def set_center(self, center: Union[Iterable, np.ndarray]) -> None:
        """
        Set the center of rotation. The parameters are unchanged, the offset is recomputed.
        """
        self._center = as_vector3(center, "center")
        self.compute_matrix()

    @property
    def translation(self) -> np.ndarray:
        """
        Get the translation of the center.

        Returns:
            A copy of the 3D translation.
        """
        return self._translation.copy()

    @translation.setter
    def translation(self, value: Union[Iterable, np.ndarray]):
        self.set_translation(value)

    def set_translation(self, translation: Union[Iterable, np.ndarray]) -> None:
        """Set the translation and recompute the offset."""
        self._translation = as_vector3(translation, "translation")
        self.compute_matrix()

    def set_offset(self, offset: Union[Iterable, np.ndarray]) -> None:
        """
        Set the offset directly. The center is kept and the translation that
        produces this offset under the current rotation is solved for.
        """
        offset = as_vector3(offset, "offset")
        self._translation = self._solve_translation(offset)
        self.compute_matrix()

    def _solve_translation(self, offset: np.ndarray) -> np.ndarray:
        # solve R @ (t - c) + c = offset for t
        return self._matrix.T @ (offset - self._center) + self._center

    ###########
    # Offset policy
    #

    def compute_offset(self, matrix: np.ndarray, angles: np.ndarray, compute_zyx: bool) -> np.ndarray:
        """Offset that makes `matrix @ p + offset` rotate about the center, then translate."""
        return centered_offset(angles, self._center, self._translation, compute_zyx)

    ###########
    # Parameters
    #

    def get_parameters(self) -> np.ndarray:
        """
        Get the parameter vector [angle_x, angle_y, angle_z, translation_x, translation_y, translation_z].

        Returns:
            A new array; changing it does not affect the transform.
        """
        return np.concatenate((self._angles, self._translation))

    def set_parameters(self, parameters: Union[Iterable, np.ndarray]) -> None:
        """
        Set the parameter vector [angle_x, angle_y, angle_z, translation_x, translation_y, translation_z].

        Raises:
            InvalidArgumentError: if there are not exactly 6 finite values.
        """
        parameters = as_parameters(parameters, self.number_of_parameters)
        self._translation = parameters[3:].copy()
        self.set_rotation(*parameters[:3])

    def set_identity(self) -> None:
        """Reset angles, translation and center to zero."""
        self._center = np.zeros(3)
        self._translation = np.zeros(3)
        super().set_identity()

    def _jacobian_lever(self, point: np.ndarray) -> np.ndarray:
        return point + self._translation - self._center

    def _jacobian_translation_block(self) -> np.ndarray:
        return self._matrix.copy()

    ###########
    # Inversion
    #

    def invert(self) -> None:
        """
        Invert in place. The center is kept; the angles and the translation are
        recovered from the inverted matrix and offset.

        Raises:
            SingularTransformError: if the matrix is singular. The transform is left unchanged.
        """
        super().invert()
        self._translation = self._solve_translation(self._offset)
        self.compute_matrix()
        logger.debug("Inverted %r", self)

    def inverse(self) -> "CenteredRigidTransform":
        """
        Create the transform that undoes this one.

        Returns:
            A new CenteredRigidTransform with the same center and convention.

        Raises:
            SingularTransformError: if the matrix is singular. This transform is left unchanged.
        """
        return self.get_inverse()

    ###########
    # Value semantics
    #

    def copy(self) -> "CenteredRigidTransform":
        other = self.__class__(self._center, self._translation, self._angles, self._convention)
        other._matrix = self._matrix.copy()
        other._offset = self._offset.copy()
        return other

    def __reduce__(self):
        return (self.__class__, (self._center.copy(), self._translation.copy(),
                                 self._angles.copy(), self._convention))

    def __eq__(self, other) -> bool:
        if not super().__eq__(other):
            return False
        return np.array_equal(self._center, other._center) and \
            np.array_equal(self._translation, other._translation)

    __hash__ = None

    def __repr__(self):
        return (f"{self.__class__.__name__}(center={self._center.tolist()}, "
                f"translation={self._translation.tolist()}, angles={self._angles.tolist()}, "
                f"convention={self._convention.name})")

# utils.py

import itertools
import numpy as np
from numpy import asarray as np_asarray
from typing import Iterable, Union
from numba import njit
from numba.core.errors import NumbaPerformanceWarning
import warnings
from pivotframe.errors import InvalidArgumentError
warnings.filterwarnings("ignore", category=NumbaPerformanceWarning)
_EYE4 = np.eye(4)

# one clock for every transform, so stamps from different objects are comparable
_MTIME_CLOCK = itertools.count(1)


def next_mtime() -> int:
    """Return a new modification stamp, strictly greater than every stamp handed out before."""
    return next(_MTIME_CLOCK)


@njit(cache=True)
def to_matrix(matrix: np.ndarray, offset: np.ndarray) -> np.ndarray:
    """Pack a 3x3 matrix and an offset into a 4x4 homogeneous matrix."""
    m = _EYE4.copy()
    m[:3, :3] = matrix
    m[:3, 3] = offset
    return m


def _check_finite(value: np.ndarray, name: str) -> None:
    if not np.all(np.isfinite(value)):
        raise InvalidArgumentError(f"{name} must be finite, got {value}")


def as_vector3(value: Union[Iterable, np.ndarray], name: str = "vector") -> np.ndarray:
    """
    Convert `value` to an owned float64 array of shape (3,).

    Raises:
        InvalidArgumentError: if the shape is wrong or a component is not finite.
    """
    try:
        vector = np.array(value, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidArgumentError(f"{name} must be a 3D vector: {e}") from e
    if vector.shape != (3,):
        raise InvalidArgumentError(
            f"{name} must be a 3D vector, got {vector.shape}")
    _check_finite(vector, name)
    return vector


def as_matrix3(value: Union[Iterable, np.ndarray], name: str = "matrix") -> np.ndarray:
    """
    Convert `value` to an owned, C-contiguous float64 array of shape (3, 3).

    Raises:
        InvalidArgumentError: if the shape is wrong or an entry is not finite.
    """
    try:
        matrix = np.array(value, dtype=np.float64, order="C")
    except (TypeError, ValueError) as e:
        raise InvalidArgumentError(f"{name} must be a 3x3 matrix: {e}") from e
    if matrix.shape != (3, 3):
        raise InvalidArgumentError(
            f"{name} must be a 3x3 matrix, got {matrix.shape}")
    _check_finite(matrix, name)
    return matrix


def as_parameters(value: Union[Iterable, np.ndarray], count: int) -> np.ndarray:
    """
    Convert `value` to an owned float64 parameter vector of exactly `count` entries.

    Raises:
        InvalidArgumentError: if the length is wrong or an entry is not finite.
    """
    try:
        parameters = np.array(value, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidArgumentError(f"parameters must be numeric: {e}") from e
    if parameters.ndim != 1 or parameters.shape[0] != count:
        raise InvalidArgumentError(
            f"Expected {count} parameters, got shape {parameters.shape}")
    _check_finite(parameters, "parameters")
    return parameters


def as_points(value: Union[Iterable, np.ndarray]) -> np.ndarray:
    """Convert `value` to float64 points of shape (3,) or (N, 3)."""
    points = np_asarray(value, dtype=np.float64)
    if points.shape[-1:] != (3,) or points.ndim > 2:
        raise InvalidArgumentError(
            f"Points must have shape (3,) or (N, 3), got {points.shape}")
    return points

# geometry.py
import math
from numpy import ndarray
import numpy as np
from numba import njit

from numba.core.errors import NumbaPerformanceWarning
import warnings
warnings.filterwarnings("ignore", category=NumbaPerformanceWarning)

GIMBAL_LOCK_TOLERANCE = 1e-12


@njit(cache=True)
def _axis_rotations(angle_x: float, angle_y: float, angle_z: float):
    """Elementary rotations about x, y, z and their derivatives."""
    sx, cx = math.sin(angle_x), math.cos(angle_x)
    sy, cy = math.sin(angle_y), math.cos(angle_y)
    sz, cz = math.sin(angle_z), math.cos(angle_z)

    rx = np.zeros((3, 3), dtype=np.float64)
    rx[0, 0] = 1.0
    rx[1, 1] = cx
    rx[1, 2] = -sx
    rx[2, 1] = sx
    rx[2, 2] = cx

    ry = np.zeros((3, 3), dtype=np.float64)
    ry[0, 0] = cy
    ry[0, 2] = sy
    ry[1, 1] = 1.0
    ry[2, 0] = -sy
    ry[2, 2] = cy

    rz = np.zeros((3, 3), dtype=np.float64)
    rz[0, 0] = cz
    rz[0, 1] = -sz
    rz[1, 0] = sz
    rz[1, 1] = cz
    rz[2, 2] = 1.0

    drx = np.zeros((3, 3), dtype=np.float64)
    drx[1, 1] = -sx
    drx[1, 2] = -cx
    drx[2, 1] = cx
    drx[2, 2] = -sx

    dry = np.zeros((3, 3), dtype=np.float64)
    dry[0, 0] = -sy
    dry[0, 2] = cy
    dry[2, 0] = -cy
    dry[2, 2] = -sy

    drz = np.zeros((3, 3), dtype=np.float64)
    drz[0, 0] = -sz
    drz[0, 1] = -cz
    drz[1, 0] = cz
    drz[1, 1] = -sz

    return rx, ry, rz, drx, dry, drz


@njit(cache=True)
def euler_to_rotation(angle_x: float, angle_y: float, angle_z: float, compute_zyx: bool = False) -> ndarray:
    """
    Compute a rotation matrix from three Euler angles in radians.

    Two compositions are supported:
    - compute_zyx False (default): R = Rz(angle_z) @ Rx(angle_x) @ Ry(angle_y)
    - compute_zyx True:            R = Rz(angle_z) @ Ry(angle_y) @ Rx(angle_x)

    Parameters:
        angle_x (float): Rotation angle about the x-axis.
        angle_y (float): Rotation angle about the y-axis.
        angle_z (float): Rotation angle about the z-axis.
        compute_zyx (bool, optional): Selects the ZYX composition. Defaults to False.

    Returns:
        ndarray: A 3x3 float64 rotation matrix.
    """
    sx, cx = math.sin(angle_x), math.cos(angle_x)
    sy, cy = math.sin(angle_y), math.cos(angle_y)
    sz, cz = math.sin(angle_z), math.cos(angle_z)

    R = np.empty((3, 3), dtype=np.float64)
    if compute_zyx:
        # R = Rz @ Ry @ Rx
        R[0, 0] = cz*cy
        R[0, 1] = cz*sy*sx - sz*cx
        R[0, 2] = cz*sy*cx + sz*sx

        R[1, 0] = sz*cy
        R[1, 1] = sz*sy*sx + cz*cx
        R[1, 2] = sz*sy*cx - cz*sx

        R[2, 0] = -sy
        R[2, 1] = cy*sx
        R[2, 2] = cy*cx
    else:
        # R = Rz @ Rx @ Ry
        R[0, 0] = cz*cy - sz*sx*sy
        R[0, 1] = -sz*cx
        R[0, 2] = cz*sy + sz*sx*cy

        R[1, 0] = sz*cy + cz*sx*sy
        R[1, 1] = cz*cx
        R[1, 2] = sz*sy - cz*sx*cy

        R[2, 0] = -cx*sy
        R[2, 1] = sx
        R[2, 2] = cx*cy
    return R


@njit(cache=True)
def rotation_to_euler(rotation: ndarray, compute_zyx: bool = False) -> tuple[float, float, float]:
    """
    Recover the Euler angles (radians) that reproduce a rotation matrix
    under the given composition.

    Canonical ranges: the middle axis of the composition (x for ZXY, y for ZYX)
    lies in [-pi/2, pi/2], the other two in (-pi, pi]. At gimbal lock the
    z angle is set to zero and the remaining angle absorbs the rotation.
    The innermost angle is read off the matrix with the other two rotations
    undone, so the angles rebuild the matrix to rounding error near gimbal lock too.

    Parameters:
        rotation (ndarray): A 3x3 rotation matrix.
        compute_zyx (bool, optional): Selects the ZYX composition. Defaults to False.

    Returns:
        tuple of float: (angle_x, angle_y, angle_z).
    """
    if compute_zyx:
        # R = Rz @ Ry @ Rx, R[2, 0] = -sin(y), R[0:2, 0] = cos(y) * (cos(z), sin(z))
        c = math.hypot(rotation[0, 0], rotation[1, 0])
        angle_y = math.atan2(-rotation[2, 0], c)
        if c > GIMBAL_LOCK_TOLERANCE:
            angle_z = math.atan2(rotation[1, 0], rotation[0, 0])
        else:
            angle_z = 0.0
        sz, cz = math.sin(angle_z), math.cos(angle_z)
        sy, cy = math.sin(angle_y), math.cos(angle_y)
        # (Rz @ Ry).T @ R = Rx
        cos_x = cz*rotation[1, 1] - sz*rotation[0, 1]
        sin_x = sy*(cz*rotation[0, 1] + sz*rotation[1, 1]) + cy*rotation[2, 1]
        angle_x = math.atan2(sin_x, cos_x)
    else:
        # R = Rz @ Rx @ Ry, R[2, 1] = sin(x), R[0:2, 1] = cos(x) * (-sin(z), cos(z))
        c = math.hypot(rotation[0, 1], rotation[1, 1])
        angle_x = math.atan2(rotation[2, 1], c)
        if c > GIMBAL_LOCK_TOLERANCE:
            angle_z = math.atan2(-rotation[0, 1], rotation[1, 1])
        else:
            angle_z = 0.0
        sz, cz = math.sin(angle_z), math.cos(angle_z)
        # (Rz @ Rx).T @ R = Ry, only the first row is needed
        cos_y = cz*rotation[0, 0] + sz*rotation[1, 0]
        sin_y = cz*rotation[0, 2] + sz*rotation[1, 2]
        angle_y = math.atan2(sin_y, cos_y)
    return angle_x, angle_y, angle_z


@njit(cache=True)
def rotation_derivatives(angle_x: float, angle_y: float, angle_z: float, compute_zyx: bool = False) -> ndarray:
    """
    Partial derivatives of the rotation matrix with respect to each angle.

    Returns:
        ndarray: A (3, 3, 3) array where out[i] is dR/d(angle_i), i in (x, y, z).
    """
    rx, ry, rz, drx, dry, drz = _axis_rotations(angle_x, angle_y, angle_z)
    out = np.empty((3, 3, 3), dtype=np.float64)
    if compute_zyx:
        out[0] = rz @ ry @ drx
        out[1] = rz @ dry @ rx
        out[2] = drz @ ry @ rx
    else:
        out[0] = rz @ drx @ ry
        out[1] = rz @ rx @ dry
        out[2] = drz @ rx @ ry
    return out


@njit(cache=True)
def centered_offset(angles: ndarray, center: ndarray, translation: ndarray, compute_zyx: bool = False) -> ndarray:
    """
    Closed-form affine offset of a rotation about `center` followed by `translation`.

    Expands offset = R @ (translation - center) + center component-wise for the
    rotation produced by `euler_to_rotation` under the same composition, so that
    a plain `matrix @ p + offset` rotates about the center.

    Parameters:
        angles (ndarray): (angle_x, angle_y, angle_z) in radians.
        center (ndarray): Center of rotation (ox, oy, oz).
        translation (ndarray): Translation (tx, ty, tz).
        compute_zyx (bool, optional): Selects the ZYX composition. Defaults to False.

    Returns:
        ndarray: The 3-element offset.
    """
    cx, sx = math.cos(angles[0]), math.sin(angles[0])
    cy, sy = math.cos(angles[1]), math.sin(angles[1])
    cz, sz = math.cos(angles[2]), math.sin(angles[2])

    ox, oy, oz = center[0], center[1], center[2]
    dx = translation[0] - ox
    dy = translation[1] - oy
    dz = translation[2] - oz

    out = np.empty(3, dtype=np.float64)
    if compute_zyx:
        out[0] = cz*cy*dx + (-sz*cx + cz*sy*sx)*dy + (sz*sx + cz*sy*cx)*dz + ox
        out[1] = sz*cy*dx + (cz*cx + sz*sy*sx)*dy + (-cz*sx + sz*sy*cx)*dz + oy
        out[2] = -sy*dx + cy*sx*dy + cy*cx*dz + oz
    else:
        out[0] = (cz*cy - sz*sy*sx)*dx - sz*cx*dy + (cz*sy + sz*sx*cy)*dz + ox
        out[1] = (sz*cy + cz*sy*sx)*dx + cz*cx*dy + (sz*sy - cz*sx*cy)*dz + oy
        out[2] = -cx*sy*dx + sx*dy + cy*cx*dz + oz
    return out


@njit(cache=True)
def _cross(a: ndarray, b: ndarray) -> ndarray:
    out = np.empty(3, dtype=np.float64)
    out[0] = a[1]*b[2] - a[2]*b[1]
    out[1] = a[2]*b[0] - a[0]*b[2]
    out[2] = a[0]*b[1] - a[1]*b[0]
    return out


@njit(cache=True)
def det3(matrix: ndarray) -> float:
    """Determinant of a 3x3 as the triple product of its columns."""
    normal = _cross(matrix[:, 1], matrix[:, 2])
    return matrix[0, 0]*normal[0] + matrix[1, 0]*normal[1] + matrix[2, 0]*normal[2]


@njit(cache=True)
def inv3(matrix: ndarray) -> ndarray:
    """
    Inverse of a 3x3 matrix. Row i of the inverse is the cross product of the
    two other columns, scaled by 1 / det.

    The caller is responsible for rejecting singular matrices; `AffineTransform.inverse_matrix`
    checks the determinant against its tolerance before calling this.
    """
    c0 = matrix[:, 0].copy()
    c1 = matrix[:, 1].copy()
    c2 = matrix[:, 2].copy()
    out = np.empty((3, 3), dtype=np.float64)
    out[0] = _cross(c1, c2)
    out[1] = _cross(c2, c0)
    out[2] = _cross(c0, c1)
    return out / (c0[0]*out[0, 0] + c0[1]*out[0, 1] + c0[2]*out[0, 2])


@njit(cache=True)
def is_rigid(rotation: ndarray, tol: float = 1e-6) -> bool:
    # R must be orthonormal with det +1
    if not np.allclose(rotation @ rotation.T, np.eye(3), atol=tol):
        return False
    return abs(det3(rotation) - 1.0) <= tol

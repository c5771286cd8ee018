"""
Pivotframe: rigid 3D transforms that rotate about an explicit center, built on an
affine matrix-and-offset representation for image registration and resampling.
"""

__version__ = version = "0.1.0"

# exposing the public API of the package
from pivotframe.affine_transform import AffineTransform
from pivotframe.centered_rigid_transform import CenteredRigidTransform
from pivotframe.conventions import EulerConvention
from pivotframe.errors import InvalidArgumentError, SingularTransformError, TransformError
from pivotframe.euler_transform import EulerTransform, OffsetPolicy
from pivotframe.geometry import centered_offset, euler_to_rotation, rotation_to_euler

__all__ = [
    "AffineTransform",
    "CenteredRigidTransform",
    "EulerConvention",
    "EulerTransform",
    "OffsetPolicy",
    "TransformError",
    "InvalidArgumentError",
    "SingularTransformError",
    "centered_offset",
    "euler_to_rotation",
    "rotation_to_euler",
]

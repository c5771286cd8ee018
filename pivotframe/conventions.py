from enum import Enum


class EulerConvention(Enum):
    """Order in which the three axis rotations are composed into a matrix."""
    ZXY = 0  # R = Rz @ Rx @ Ry
    ZYX = 1  # R = Rz @ Ry @ Rx

    @property
    def compute_zyx(self) -> bool:
        return self is EulerConvention.ZYX

    @classmethod
    def from_compute_zyx(cls, compute_zyx: bool) -> "EulerConvention":
        return cls.ZYX if compute_zyx else cls.ZXY

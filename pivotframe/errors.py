class TransformError(Exception):
    """Base class for errors raised by pivotframe transforms."""


class InvalidArgumentError(TransformError, ValueError):
    """Raised for malformed input: wrong shapes, wrong parameter count, non-finite values or a non-rigid matrix."""


class SingularTransformError(TransformError, ZeroDivisionError):
    """Raised when a transform with a singular matrix is inverted."""

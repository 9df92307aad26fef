"""
Error types raised by the scanning core.

Both concrete errors derive from ValueError so callers that already guard
image/shape arguments with ``except ValueError`` keep working.
"""


class ScannerError(ValueError):
    """Base class for failures of the detection/rectification core."""


class InvalidImageError(ScannerError):
    """Raised for an empty, zero-dimension or otherwise unusable image buffer."""


class DegenerateShapeError(ScannerError):
    """
    Raised when a quadrilateral cannot be warped.

    This covers shapes rejected by the corner orderer (collinear, duplicated or
    mis-assigned corners) and shapes whose computed output size rounds to zero.
    It signals a programming error on the caller side: shapes must be checked
    with ``has_valid_shape`` before a crop is requested.
    """

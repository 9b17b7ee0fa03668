# Mathematical utilities
# FORBIDDEN: logging, any I/O

import numpy as np
from typing import Tuple


def normalize_angle(angle: float) -> float:
    """Normalize angle to [-pi, pi) range.

    Only used for display. Heading inside the state vector is never wrapped.

    Args:
        angle: Angle in radians

    Returns:
        Normalized angle in [-pi, pi)
    """
    return float((angle + np.pi) % (2 * np.pi) - np.pi)


def rotate_2d(x: float, y: float, angle: float) -> Tuple[float, float]:
    """Rotate 2D point by angle.

    With the world (x, z) velocity and the heading this gives the
    (longitudinal, lateral) velocity of the chassis.

    Args:
        x, y: Point coordinates
        angle: Rotation angle in radians

    Returns:
        Rotated (x, y) coordinates
    """
    cos_a = np.cos(angle)
    sin_a = np.sin(angle)
    return (
        x * cos_a - y * sin_a,
        x * sin_a + y * cos_a,
    )


def clamp(value: float, min_val: float, max_val: float) -> float:
    """Clamp value to range.

    Args:
        value: Value to clamp
        min_val: Minimum allowed value
        max_val: Maximum allowed value

    Returns:
        Clamped value
    """
    return max(min_val, min(max_val, value))

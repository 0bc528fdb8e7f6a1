"""Math helpers — circular statistics, clamping, rotation. No engine imports."""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import ArrayLike, NDArray


def circular_mean(angles_rad: ArrayLike) -> float:
    """Mean direction of a set of angles (radians), in (-pi, pi].

    Sums unit vectors and takes atan2, so +179° and -179° average to 180°
    rather than 0°. Empty input returns 0.0.
    """
    angles = np.asarray(angles_rad, dtype=np.float64).ravel()
    if len(angles) == 0:
        return 0.0
    return float(math.atan2(float(np.sum(np.sin(angles))), float(np.sum(np.cos(angles)))))


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def rotation_matrix(radians: float) -> NDArray[np.float64]:
    """2x2 CCW rotation matrix."""
    c, s = math.cos(radians), math.sin(radians)
    return np.array([[c, -s], [s, c]])

# polishing_simulator/core/geometry.py
"""
Planar rotation helpers shared by the kinematics and frame modules.
Works on scalars and on NumPy arrays of matching (or broadcastable) shape.
"""

import numpy as np
import math


def rotation_matrix(angle_rad: float) -> np.ndarray:
    """
    Returns the 2x2 matrix rotating a column vector counter-clockwise by angle_rad.
    """
    c = math.cos(angle_rad)
    s = math.sin(angle_rad)
    return np.array([
        [c, -s],
        [s,  c]
    ])


def rotate_xy(x, y, angle_rad):
    """
    Rotates (x, y) by angle_rad: x' = x·cosφ − y·sinφ, y' = x·sinφ + y·cosφ.

    Any argument may be an array; the result broadcasts like NumPy does.
    Scalar inputs return plain floats.
    """
    c = np.cos(angle_rad); s = np.sin(angle_rad)
    xr = x * c - y * s
    yr = x * s + y * c
    if np.ndim(xr) == 0:
        return float(xr), float(yr)
    return xr, yr


def polar_offset(cx, cy, radius, angle_rad):
    """Returns the point at distance radius and angle angle_rad from (cx, cy)."""
    px = cx + radius * np.cos(angle_rad)
    py = cy + radius * np.sin(angle_rad)
    if np.ndim(px) == 0:
        return float(px), float(py)
    return px, py


def to_polar(x, y):
    """Cartesian -> (radius, angle) with angle from atan2."""
    return np.hypot(x, y), np.arctan2(y, x)


def path_length(xs: np.ndarray, ys: np.ndarray, axis: int = -1) -> np.ndarray:
    """Sum of Euclidean distances between consecutive samples along axis."""
    dx = np.diff(xs, axis=axis); dy = np.diff(ys, axis=axis)
    return np.sum(np.hypot(dx, dy), axis=axis)

"""
Affine transformation helpers.

All matrices are 4x4 numpy arrays acting on column vectors, so a
composition ``A @ B`` applies ``B`` first.
"""

from __future__ import annotations
import math
from typing import Optional

import numpy as np

from .vec3 import Vec3, Point3


def identity() -> np.ndarray:
    """Return a fresh 4x4 identity matrix."""
    return np.identity(4, dtype=np.float64)


def translation(offset: Vec3) -> np.ndarray:
    """Matrix translating by the given offset."""
    m = identity()
    m[:3, 3] = offset.to_array()
    return m


def scaling(factors: Vec3) -> np.ndarray:
    """Matrix scaling each axis independently."""
    m = identity()
    m[0, 0], m[1, 1], m[2, 2] = factors.x, factors.y, factors.z
    return m


def rotation(axis: Vec3, angle: float) -> np.ndarray:
    """Matrix rotating counter-clockwise by ``angle`` radians about ``axis``.

    Uses Rodrigues' rotation formula. A zero axis yields the identity.
    """
    unit = axis.normalize()
    if unit.is_zero():
        return identity()

    x, y, z = unit.x, unit.y, unit.z
    c = math.cos(angle)
    s = math.sin(angle)
    t = 1.0 - c

    m = identity()
    m[:3, :3] = [
        [t * x * x + c, t * x * y - s * z, t * x * z + s * y],
        [t * x * y + s * z, t * y * y + c, t * y * z - s * x],
        [t * x * z - s * y, t * y * z + s * x, t * z * z + c],
    ]
    return m


def transform_point(matrix: np.ndarray, point: Point3) -> Point3:
    """Apply a matrix to a point (homogeneous w = 1)."""
    return Vec3.from_array(matrix[:3, :3] @ np.asarray(point) + matrix[:3, 3])


def transform_direction(matrix: np.ndarray, direction: Vec3) -> Vec3:
    """Apply a matrix to a direction (homogeneous w = 0)."""
    return Vec3.from_array(matrix[:3, :3] @ np.asarray(direction))


def invert(matrix: np.ndarray) -> Optional[np.ndarray]:
    """Invert a matrix, returning None when it is singular."""
    try:
        inverse = np.linalg.inv(matrix)
    except np.linalg.LinAlgError:
        return None
    if not np.all(np.isfinite(inverse)):
        return None
    return inverse


def normal_matrix(ctm: np.ndarray) -> Optional[np.ndarray]:
    """Inverse-transpose of the linear 3x3 block of a CTM.

    Normals transformed by this matrix stay perpendicular to the surface
    under non-uniform scaling. Returns None for a singular CTM.
    """
    inverse = invert(ctm[:3, :3])
    if inverse is None:
        return None
    return inverse.T


def inverse_view_matrix(position: Point3, look: Vec3, up: Vec3) -> np.ndarray:
    """Build the camera-to-world matrix from a look-at basis.

    Args:
        position: Camera position in world space
        look: Direction the camera is looking in
        up: Approximate up direction (need not be perpendicular to look)

    Returns:
        Matrix whose columns are the right, up and back vectors of the
        camera followed by its position.
    """
    back = (-look).normalize()
    true_up = (up - back * up.dot(back)).normalize()
    right = true_up.cross(back)

    m = identity()
    m[:3, 0] = right.to_array()
    m[:3, 1] = true_up.to_array()
    m[:3, 2] = back.to_array()
    m[:3, 3] = position.to_array()
    return m

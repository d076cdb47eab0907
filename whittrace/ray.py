"""
Ray class for representing rays in 3D space.

A ray is defined by an origin point and a direction vector.
Ray(t) = origin + t * direction
"""

from __future__ import annotations
import numpy as np

from .vec3 import Vec3, Point3
from .transforms import transform_point, transform_direction


class Ray:
    """A ray with origin and direction.

    The parametric form is: P(t) = origin + t * direction
    where t >= 0 represents points along the ray. The origin behaves as a
    homogeneous point (w=1) and the direction as a homogeneous vector (w=0)
    when the ray is transformed.
    """

    __slots__ = ('origin', 'direction')

    def __init__(self, origin: Point3, direction: Vec3):
        """Create a ray with given origin and direction.

        Args:
            origin: The starting point of the ray
            direction: The direction vector (unit length for camera,
                shadow and reflection rays)
        """
        object.__setattr__(self, 'origin', origin)
        object.__setattr__(self, 'direction', direction)

    def __setattr__(self, name, value):
        raise AttributeError("Ray is immutable")

    def at(self, t: float) -> Point3:
        """Get the point along the ray at parameter t.

        Args:
            t: The parameter value (distance if direction is normalized)

        Returns:
            The point at origin + t * direction
        """
        return self.origin + self.direction * t

    def transform(self, matrix: np.ndarray, normalize_direction: bool) -> Ray:
        """Transform the ray by a 4x4 affine matrix.

        Args:
            matrix: The transformation to apply
            normalize_direction: Whether the resulting direction is rescaled
                to unit length

        Returns:
            The transformed ray
        """
        origin = transform_point(matrix, self.origin)
        direction = transform_direction(matrix, self.direction)

        if normalize_direction:
            direction = direction.normalize()

        return Ray(origin, direction)

    def to_object_space(self, inverse_ctm: np.ndarray) -> Ray:
        """Move the ray into object space, keeping t consistent with world space."""
        return self.transform(inverse_ctm, False)

    def __repr__(self) -> str:
        return f"Ray(origin={self.origin}, direction={self.direction})"

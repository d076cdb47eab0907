"""
World-space shape instances.

A Shape pairs a shared canonical Primitive with its own Material and the
cumulative transformation matrix (CTM) mapping object space to world space.
"""

from __future__ import annotations
from dataclasses import replace
from typing import Optional

import numpy as np

from .vec3 import Vec3
from .ray import Ray
from .intersection import Intersection
from .materials import Material
from .primitives import Primitive
from .transforms import invert, normal_matrix


class Shape:
    """A transformed, materialized instance of a Primitive.

    Shapes are built once while flattening the scene and are read-only
    while rendering.
    """

    __slots__ = ('primitive', 'material', 'ctm', '_inverse_ctm', '_normal_matrix')

    def __init__(self, primitive: Primitive, material: Material, ctm: np.ndarray):
        """Create a shape.

        Args:
            primitive: Shared canonical primitive (held by reference)
            material: Material of this particular shape
            ctm: 4x4 object-to-world matrix
        """
        ctm = np.array(ctm, dtype=np.float64)
        ctm.setflags(write=False)
        object.__setattr__(self, 'primitive', primitive)
        object.__setattr__(self, 'material', material)
        object.__setattr__(self, 'ctm', ctm)
        object.__setattr__(self, '_inverse_ctm', invert(ctm))
        object.__setattr__(self, '_normal_matrix', normal_matrix(ctm))

    def __setattr__(self, name, value):
        raise AttributeError("Shape is immutable")

    def intersect(self, ray: Ray) -> Optional[Intersection]:
        """Intersect a world-space ray with this shape.

        The ray is moved into object space without renormalizing its
        direction, so the returned t is valid along the world-space ray.
        The normal is brought back with the inverse-transpose of the CTM.

        Args:
            ray: Ray in world space

        Returns:
            Intersection with a world-space unit normal, or None
        """
        # A singular CTM collapses the shape; nothing can hit it.
        if self._inverse_ctm is None or self._normal_matrix is None:
            return None

        object_ray = ray.to_object_space(self._inverse_ctm)
        hit = self.primitive.intersect(object_ray)
        if hit is None:
            return None

        world_normal = Vec3.from_array(
            self._normal_matrix @ hit.normal.to_array()
        ).normalize()

        return Intersection(
            component_intersection=replace(hit, normal=world_normal),
            material=self.material
        )

    def __repr__(self) -> str:
        return f"Shape(primitive={self.primitive!r})"

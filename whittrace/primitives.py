"""
Canonical unit-sized primitives built from components.

A render uses exactly one instance of each primitive kind; every Shape of
that kind holds a reference to the same immutable Primitive.
"""

from __future__ import annotations
from enum import Enum
from typing import Iterable, Optional, Tuple

from .ray import Ray
from .intersection import ComponentIntersection
from .components import (
    PrimitiveComponent, Square, Circle, Sphere, CylinderBody, ConeBody,
    X_AXIS, Y_AXIS, Z_AXIS, HALF
)


class PrimitiveType(Enum):
    """The closed catalog of primitive kinds."""
    CUBE = 'cube'
    CYLINDER = 'cylinder'
    CONE = 'cone'
    SPHERE = 'sphere'


class Primitive:
    """An immutable collection of components forming one canonical shape."""

    __slots__ = ('_components', '_kind')

    def __init__(self, components: Iterable[PrimitiveComponent], kind: Optional[PrimitiveType] = None):
        object.__setattr__(self, '_components', tuple(components))
        object.__setattr__(self, '_kind', kind)

    def __setattr__(self, name, value):
        raise AttributeError("Primitive is immutable")

    @property
    def components(self) -> Tuple[PrimitiveComponent, ...]:
        return self._components

    @property
    def kind(self) -> Optional[PrimitiveType]:
        return self._kind

    def intersect(self, ray: Ray) -> Optional[ComponentIntersection]:
        """Find the closest component hit for an object-space ray.

        Ties between components at equal t are resolved arbitrarily, since
        equal t means the surfaces coincide at the hit.
        """
        closest: Optional[ComponentIntersection] = None
        for component in self._components:
            hit = component.intersect(ray)
            if hit is not None and (closest is None or hit < closest):
                closest = hit
        return closest

    def __len__(self) -> int:
        return len(self._components)

    def __repr__(self) -> str:
        name = self._kind.value if self._kind else 'custom'
        return f"Primitive({name}, components={len(self._components)})"


def make_cube() -> Primitive:
    """Six unit squares at ±0.5 on each axis."""
    faces = [
        Square(axis, elevation)
        for axis in (X_AXIS, Y_AXIS, Z_AXIS)
        for elevation in (HALF, -HALF)
    ]
    return Primitive(faces, PrimitiveType.CUBE)


def make_cylinder() -> Primitive:
    """Cylinder body plus top and bottom caps."""
    return Primitive(
        [CylinderBody(), Circle(Y_AXIS, HALF), Circle(Y_AXIS, -HALF)],
        PrimitiveType.CYLINDER
    )


def make_cone() -> Primitive:
    """Cone body (apex up) plus the base cap."""
    return Primitive([ConeBody(), Circle(Y_AXIS, -HALF)], PrimitiveType.CONE)


def make_sphere() -> Primitive:
    return Primitive([Sphere()], PrimitiveType.SPHERE)


class PrimitiveSet:
    """The four canonical primitives shared by every shape in a scene."""

    def __init__(self):
        self._primitives = {
            PrimitiveType.CUBE: make_cube(),
            PrimitiveType.CYLINDER: make_cylinder(),
            PrimitiveType.CONE: make_cone(),
            PrimitiveType.SPHERE: make_sphere(),
        }

    def get(self, kind: PrimitiveType) -> Primitive:
        """Return the shared primitive for a kind (never a copy)."""
        return self._primitives[kind]

"""
Analytic surface pieces that primitives are assembled from.

Every component lives in canonical object space: planar pieces sit at
±0.5 along one axis with half-width 0.5, and curved bodies have radius 0.5
and span y in [-0.5, 0.5]. Each component implements ``intersect`` and
returns a ComponentIntersection (or None on a miss).
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple
import math

from .vec3 import Vec3, Point3
from .ray import Ray
from .intersection import ComponentIntersection

X_AXIS, Y_AXIS, Z_AXIS = 0, 1, 2

HALF = 0.5
RADIUS_SQUARED = 0.25


class PrimitiveComponent(ABC):
    """Abstract base class for one analytic piece of a primitive."""

    @abstractmethod
    def intersect(self, ray: Ray) -> Optional[ComponentIntersection]:
        """Intersect an object-space ray with this component.

        Args:
            ray: Ray expressed in canonical object space

        Returns:
            The closest hit with t >= 0, or None
        """
        pass


def _axis_unit(axis: int, sign: float) -> Vec3:
    components = [0.0, 0.0, 0.0]
    components[axis] = sign
    return Vec3(*components)


def _planar_uv(point: Point3, axis: int, elevation: float) -> Tuple[float, float]:
    """Flatten a point on an axis-aligned face into [0, 1] UV coordinates.

    The sign of each flattened axis depends on which face was hit so that
    U runs continuously around the shape (matching the curved bodies) and
    V runs upward on the side faces.
    """
    side = 1.0 if elevation > 0 else -1.0
    if axis == X_AXIS:
        u, v = -side * point.z, point.y
    elif axis == Y_AXIS:
        u, v = point.x, -side * point.z
    else:
        u, v = side * point.x, point.y
    return u + HALF, v + HALF


def _radial_u(point: Point3) -> float:
    """Map the angle around the y axis onto [0, 1)."""
    theta = math.atan2(point.z, point.x)
    return (-theta / (2 * math.pi)) % 1.0


class BoundedPlane(PrimitiveComponent):
    """Shared intersection logic for planar components.

    Subclasses decide whether the flattened hit lies inside their bounds.
    """

    def __init__(self, axis: int, elevation: float):
        """Create a planar component.

        Args:
            axis: Index of the axis the plane is perpendicular to
            elevation: Position of the plane along that axis (±0.5)
        """
        self.axis = axis
        self.elevation = elevation
        self.normal = _axis_unit(axis, 1.0 if elevation > 0 else -1.0)
        self._others = tuple(i for i in (X_AXIS, Y_AXIS, Z_AXIS) if i != axis)

    @abstractmethod
    def contains(self, first: float, second: float) -> bool:
        """Whether the flattened coordinates lie within the component."""
        pass

    def intersect(self, ray: Ray) -> Optional[ComponentIntersection]:
        direction = ray.direction[self.axis]

        # Parallel to the plane
        if direction == 0:
            return None

        t = (self.elevation - ray.origin[self.axis]) / direction
        if not t >= 0:
            return None

        point = ray.at(t)
        if not self.contains(point[self._others[0]], point[self._others[1]]):
            return None

        return ComponentIntersection(
            t=t,
            normal=self.normal,
            uv=_planar_uv(point, self.axis, self.elevation)
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(axis={self.axis}, elevation={self.elevation})"


class Square(BoundedPlane):
    """A unit square face, as used by the cube."""

    def contains(self, first: float, second: float) -> bool:
        return -HALF <= first <= HALF and -HALF <= second <= HALF


class Circle(BoundedPlane):
    """A disk of radius 0.5, as used for cylinder and cone caps."""

    def contains(self, first: float, second: float) -> bool:
        return first * first + second * second <= RADIUS_SQUARED


def solve_quadratic(a: float, b: float, c: float) -> List[float]:
    """Find all real solutions of a*t^2 + b*t + c = 0.

    A zero discriminant gives a single (repeated) root. When ``a`` is zero
    the equation is linear; a constant equation has no roots.
    """
    if a == 0:
        if b == 0:
            return []
        return [-c / b]

    discriminant = b * b - 4 * a * c
    if discriminant < 0:
        return []

    root = math.sqrt(discriminant)
    double_a = 2 * a
    solutions = [(-b - root) / double_a]
    if discriminant != 0:
        solutions.append((-b + root) / double_a)
    return solutions


class QuadraticBody(PrimitiveComponent):
    """Components whose intersections are roots of a quadratic in t.

    All quadratic bodies share the height constraint -0.5 <= y <= 0.5.
    """

    @abstractmethod
    def quadratic_coefficients(self, ray: Ray) -> Tuple[float, float, float]:
        """Coefficients (a, b, c) of the implicit surface along the ray."""
        pass

    @abstractmethod
    def normal_at(self, point: Point3) -> Vec3:
        """Analytic surface gradient at a point on the body."""
        pass

    @abstractmethod
    def uv_at(self, point: Point3) -> Tuple[float, float]:
        pass

    def check_constraint(self, point: Point3) -> bool:
        return -HALF <= point.y <= HALF

    def intersect(self, ray: Ray) -> Optional[ComponentIntersection]:
        a, b, c = self.quadratic_coefficients(ray)

        best: Optional[float] = None
        for t in solve_quadratic(a, b, c):
            if not t >= 0:
                continue
            if best is not None and not t < best:
                continue
            if self.check_constraint(ray.at(t)):
                best = t

        if best is None:
            return None

        point = ray.at(best)
        return ComponentIntersection(
            t=best,
            normal=self.normal_at(point).normalize(),
            uv=self.uv_at(point)
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class Sphere(QuadraticBody):
    """x^2 + y^2 + z^2 = 0.25"""

    def quadratic_coefficients(self, ray: Ray) -> Tuple[float, float, float]:
        p, d = ray.origin, ray.direction
        a = d.length_squared()
        b = 2 * p.dot(d)
        c = p.length_squared() - RADIUS_SQUARED
        return a, b, c

    def normal_at(self, point: Point3) -> Vec3:
        return point * 2

    def uv_at(self, point: Point3) -> Tuple[float, float]:
        # Latitude: y / radius, clamped against rounding at the poles
        latitude = math.asin(max(-1.0, min(1.0, point.y / HALF)))
        return _radial_u(point), latitude / math.pi + HALF


class CylinderBody(QuadraticBody):
    """x^2 + z^2 = 0.25, unbounded in y before the height constraint."""

    def quadratic_coefficients(self, ray: Ray) -> Tuple[float, float, float]:
        p, d = ray.origin, ray.direction
        a = d.x * d.x + d.z * d.z
        b = 2 * (p.x * d.x + p.z * d.z)
        c = p.x * p.x + p.z * p.z - RADIUS_SQUARED
        return a, b, c

    def normal_at(self, point: Point3) -> Vec3:
        return Vec3(2 * point.x, 0.0, 2 * point.z)

    def uv_at(self, point: Point3) -> Tuple[float, float]:
        return _radial_u(point), point.y + HALF


class ConeBody(QuadraticBody):
    """x^2 + z^2 = ((1 - 2y) / 4)^2, apex at y = 0.5 and base radius 0.5."""

    def quadratic_coefficients(self, ray: Ray) -> Tuple[float, float, float]:
        p, d = ray.origin, ray.direction
        # Radius of the cone at the ray origin's height
        k = 0.25 - p.y / 2
        a = d.x * d.x + d.z * d.z - d.y * d.y / 4
        b = 2 * (p.x * d.x + p.z * d.z) + k * d.y
        c = p.x * p.x + p.z * p.z - k * k
        return a, b, c

    def normal_at(self, point: Point3) -> Vec3:
        gradient = Vec3(2 * point.x, (1 - 2 * point.y) / 4, 2 * point.z)
        # The gradient vanishes at the apex
        if gradient.is_zero():
            return Vec3(0.0, 1.0, 0.0)
        return gradient

    def uv_at(self, point: Point3) -> Tuple[float, float]:
        return _radial_u(point), point.y + HALF

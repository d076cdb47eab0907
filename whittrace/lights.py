"""
Light sources for Phong shading.

Implements three light types:
- Point lights (attenuated with distance)
- Directional lights (infinitely far away, no falloff)
- Spot lights (attenuated point lights with a cone and smooth penumbra)
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Optional, Sequence, TYPE_CHECKING
import math

from .vec3 import Vec3, Point3, Color
from .ray import Ray

if TYPE_CHECKING:
    from .shapes import Shape


# Secondary rays start this far along their direction from the hit point.
SELF_INTERSECT_OFFSET = 0.001


def attenuation_over_distance(coefficients: Vec3, distance: float) -> float:
    """Attenuation factor min(1, 1 / (c2*d^2 + c1*d + c0)).

    Args:
        coefficients: (c0, c1, c2) as the x, y, z components
        distance: Distance from the light

    Returns:
        The attenuation factor; a zero denominator means no attenuation
    """
    denominator = (
        coefficients.z * distance * distance
        + coefficients.y * distance
        + coefficients.x
    )
    if denominator == 0:
        return 1.0
    return min(1.0, 1.0 / denominator)


class Light(ABC):
    """Abstract base class for light sources."""

    def __init__(self, color: Color, attenuation: Optional[Vec3] = None):
        """
        Args:
            color: Color (intensity) of the light
            attenuation: Distance falloff coefficients (c0, c1, c2)
        """
        self.color = color
        self.attenuation = attenuation if attenuation is not None else Vec3(1.0, 0.0, 0.0)

    @abstractmethod
    def distance_to_point(self, point: Point3) -> Optional[float]:
        """Distance from the light to a point, or None if infinitely far."""
        pass

    @abstractmethod
    def direction_to_point(self, point: Point3) -> Vec3:
        """Unit direction travelling from the light to a point."""
        pass

    @abstractmethod
    def intensity_at(self, point: Point3) -> Color:
        """Light intensity arriving at a point, before occlusion."""
        pass

    def is_visible(self, point: Point3, shapes: Sequence[Shape]) -> bool:
        """Check whether a point receives light, i.e. is not in shadow.

        A ray is cast from the point toward the light, starting slightly
        off the surface. Any hit closer than the light occludes it; for a
        light with no position, any hit at all does.

        Args:
            point: World-space point being shaded
            shapes: Every shape in the scene

        Returns:
            True if nothing lies between the point and the light
        """
        to_light = -self.direction_to_point(point)
        shadow_ray = Ray(point + to_light * SELF_INTERSECT_OFFSET, to_light)
        distance = self.distance_to_point(point)

        for shape in shapes:
            hit = shape.intersect(shadow_ray)
            if hit is None:
                continue
            if distance is None or hit.t < distance:
                return False
        return True


class PointLight(Light):
    """A light emanating from a single point in all directions."""

    def __init__(self, position: Point3, color: Color, attenuation: Optional[Vec3] = None):
        super().__init__(color, attenuation)
        self.position = position

    def distance_to_point(self, point: Point3) -> Optional[float]:
        return (self.position - point).length()

    def direction_to_point(self, point: Point3) -> Vec3:
        return (point - self.position).normalize()

    def intensity_at(self, point: Point3) -> Color:
        return self.color * attenuation_over_distance(
            self.attenuation, self.distance_to_point(point)
        )

    def __repr__(self) -> str:
        return f"PointLight(position={self.position}, color={self.color})"


class DirectionalLight(Light):
    """A light shining in one direction from infinitely far away.

    Directional lights ignore attenuation.
    """

    def __init__(self, direction: Vec3, color: Color, attenuation: Optional[Vec3] = None):
        """
        Args:
            direction: Direction the light travels in
            color: Color of the light
            attenuation: Kept for completeness; has no effect
        """
        super().__init__(color, attenuation)
        self.direction = direction

    def distance_to_point(self, point: Point3) -> Optional[float]:
        return None

    def direction_to_point(self, point: Point3) -> Vec3:
        return self.direction.normalize()

    def intensity_at(self, point: Point3) -> Color:
        return self.color

    def __repr__(self) -> str:
        return f"DirectionalLight(direction={self.direction}, color={self.color})"


class SpotLight(Light):
    """A point light restricted to a cone, with a smooth penumbra.

    Points within ``angle - penumbra`` of the spot axis receive the full
    attenuated color, points beyond ``angle`` receive nothing, and the band
    in between fades out along the cubic -2x^3 + 3x^2.
    """

    def __init__(
        self,
        position: Point3,
        direction: Vec3,
        color: Color,
        angle: float,
        penumbra: float = 0.0,
        attenuation: Optional[Vec3] = None
    ):
        """
        Args:
            position: Position of the light
            direction: Axis of the spot cone
            color: Color of the light
            angle: Outer half-angle of the cone in radians
            penumbra: Width of the falloff band in radians
            attenuation: Distance falloff coefficients (c0, c1, c2)
        """
        super().__init__(color, attenuation)
        self.position = position
        self.direction = direction
        self.angle = angle
        self.penumbra = penumbra

    def distance_to_point(self, point: Point3) -> Optional[float]:
        return (self.position - point).length()

    def direction_to_point(self, point: Point3) -> Vec3:
        return (point - self.position).normalize()

    def falloff(self, angle_to_point: float) -> float:
        """Fraction of the light reaching a point at the given off-axis angle."""
        if angle_to_point >= self.angle:
            return 0.0

        inner_angle = self.angle - self.penumbra
        if angle_to_point <= inner_angle:
            return 1.0

        x = (angle_to_point - inner_angle) / self.penumbra
        return 1.0 - (-2.0 * x ** 3 + 3.0 * x ** 2)

    def intensity_at(self, point: Point3) -> Color:
        attenuation = attenuation_over_distance(
            self.attenuation, self.distance_to_point(point)
        )
        cosine = self.direction.normalize().dot(self.direction_to_point(point))
        angle_to_point = math.acos(max(-1.0, min(1.0, cosine)))

        return self.color * (attenuation * self.falloff(angle_to_point))

    def __repr__(self) -> str:
        return (
            f"SpotLight(position={self.position}, direction={self.direction}, "
            f"angle={self.angle:.4f}, penumbra={self.penumbra:.4f})"
        )

"""Tests for light sources."""

import math
import pytest
from whittrace.vec3 import Vec3, Point3, Color
from whittrace.materials import Material
from whittrace.primitives import make_sphere
from whittrace.shapes import Shape
from whittrace.transforms import scaling, translation
from whittrace.lights import (
    attenuation_over_distance, PointLight, DirectionalLight, SpotLight
)


def sphere_at(center, radius):
    ctm = translation(center) @ scaling(Vec3(2 * radius, 2 * radius, 2 * radius))
    return Shape(make_sphere(), Material(), ctm)


class TestAttenuation:
    """Test distance attenuation."""

    def test_constant(self):
        assert attenuation_over_distance(Vec3(1, 0, 0), 10) == 1.0

    def test_quadratic(self):
        assert abs(attenuation_over_distance(Vec3(0, 0, 1), 2) - 0.25) < 1e-12

    def test_linear(self):
        assert abs(attenuation_over_distance(Vec3(0, 1, 0), 4) - 0.25) < 1e-12

    def test_zero_denominator_is_unattenuated(self):
        assert attenuation_over_distance(Vec3(0, 0, 0), 5) == 1.0

    def test_never_amplifies(self):
        assert attenuation_over_distance(Vec3(0.5, 0, 0), 1) == 1.0


class TestPointLight:
    """Test point lights."""

    def test_direction_to_point(self):
        light = PointLight(Point3(0, 10, 0), Color(1, 1, 1))
        assert light.direction_to_point(Point3(0, 0, 0)) == Vec3(0, -1, 0)

    def test_distance(self):
        light = PointLight(Point3(0, 10, 0), Color(1, 1, 1))
        assert abs(light.distance_to_point(Point3(0, 0, 0)) - 10) < 1e-12

    def test_intensity_attenuates(self):
        light = PointLight(Point3(0, 2, 0), Color(1, 0.5, 0), Vec3(0, 0, 1))
        assert light.intensity_at(Point3(0, 0, 0)) == Color(0.25, 0.125, 0)

    def test_default_attenuation(self):
        light = PointLight(Point3(0, 2, 0), Color(1, 1, 1))
        assert light.attenuation == Vec3(1, 0, 0)


class TestDirectionalLight:
    """Test directional lights."""

    def test_no_distance(self):
        light = DirectionalLight(Vec3(0, -2, 0), Color(1, 1, 1))
        assert light.distance_to_point(Point3(4, 5, 6)) is None

    def test_direction_normalized(self):
        light = DirectionalLight(Vec3(0, -2, 0), Color(1, 1, 1))
        assert light.direction_to_point(Point3(4, 5, 6)) == Vec3(0, -1, 0)

    def test_intensity_ignores_attenuation(self):
        light = DirectionalLight(Vec3(0, -1, 0), Color(0.3, 0.6, 0.9), Vec3(0, 0, 5))
        assert light.intensity_at(Point3(100, 100, 100)) == Color(0.3, 0.6, 0.9)


class TestSpotLight:
    """Test spot light falloff."""

    @pytest.fixture
    def spot(self):
        return SpotLight(
            position=Point3(0, 0, 0),
            direction=Vec3(0, -1, 0),
            color=Color(1, 1, 1),
            angle=math.radians(30),
            penumbra=math.radians(10)
        )

    def test_full_inside_inner_cone(self, spot):
        assert spot.falloff(math.radians(20)) == 1.0
        assert spot.falloff(0.0) == 1.0

    def test_zero_at_and_beyond_outer_angle(self, spot):
        assert spot.falloff(math.radians(30)) == 0.0
        assert spot.falloff(math.radians(45)) == 0.0

    def test_half_at_penumbra_midpoint(self, spot):
        assert abs(spot.falloff(math.radians(25)) - 0.5) < 1e-9

    def test_falloff_decreases(self, spot):
        values = [spot.falloff(math.radians(a)) for a in (21, 23, 25, 27, 29)]
        assert values == sorted(values, reverse=True)

    def test_intensity_on_axis(self, spot):
        assert spot.intensity_at(Point3(0, -1, 0)) == Color(1, 1, 1)

    def test_intensity_at_penumbra_midpoint(self, spot):
        angle = math.radians(25)
        point = Point3(math.sin(angle), -math.cos(angle), 0)
        intensity = spot.intensity_at(point)
        assert abs(intensity.r - 0.5) < 1e-6

    def test_outside_cone_is_dark(self, spot):
        assert spot.intensity_at(Point3(1, 0, 0)) == Color(0, 0, 0)

    def test_zero_penumbra_is_hard_edged(self):
        spot = SpotLight(Point3(0, 0, 0), Vec3(0, -1, 0), Color(1, 1, 1), math.radians(30))
        assert spot.falloff(math.radians(29)) == 1.0
        assert spot.falloff(math.radians(30)) == 0.0
        assert spot.falloff(math.radians(31)) == 0.0


class TestVisibility:
    """Test shadow rays."""

    def test_unobstructed(self):
        light = PointLight(Point3(0, 5, 0), Color(1, 1, 1))
        assert light.is_visible(Point3(0, -5, 0), [])

    def test_occluded(self):
        light = PointLight(Point3(0, 5, 0), Color(1, 1, 1))
        blocker = sphere_at(Point3(0, 0, 0), 1.0)
        assert not light.is_visible(Point3(0, -5, 0), [blocker])

    def test_occluder_beyond_point_light(self):
        light = PointLight(Point3(0, 5, 0), Color(1, 1, 1))
        beyond = sphere_at(Point3(0, 10, 0), 1.0)
        assert light.is_visible(Point3(0, 0, 0), [beyond])

    def test_any_hit_blocks_directional_light(self):
        light = DirectionalLight(Vec3(0, -1, 0), Color(1, 1, 1))
        far_above = sphere_at(Point3(0, 100, 0), 1.0)
        assert not light.is_visible(Point3(0, 0, 0), [far_above])

    def test_surface_does_not_shadow_itself(self):
        light = PointLight(Point3(0, 5, 0), Color(1, 1, 1))
        ball = sphere_at(Point3(0, 0, 0), 1.0)
        assert light.is_visible(Point3(0, 1, 0), [ball])

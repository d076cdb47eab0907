"""Tests for Ray class."""

import pytest
import numpy as np
from whittrace.vec3 import Vec3, Point3
from whittrace.ray import Ray
from whittrace.transforms import scaling, translation


class TestRayCreation:
    """Test Ray construction."""

    def test_stores_origin_and_direction(self):
        ray = Ray(Point3(1, 2, 3), Vec3(0, 0, -1))
        assert ray.origin == Point3(1, 2, 3)
        assert ray.direction == Vec3(0, 0, -1)

    def test_is_immutable(self):
        ray = Ray(Point3(0, 0, 0), Vec3(1, 0, 0))
        with pytest.raises(AttributeError):
            ray.origin = Point3(1, 1, 1)


class TestRayAt:
    """Test Ray.at() method."""

    def test_at_zero(self):
        ray = Ray(Point3(1, 2, 3), Vec3(1, 0, 0))
        assert ray.at(0) == Point3(1, 2, 3)

    def test_at_positive(self):
        ray = Ray(Point3(0, 0, 5), Vec3(0, 0, -1))
        assert ray.at(4.5) == Point3(0, 0, 0.5)


class TestRayTransform:
    """Test moving rays between spaces."""

    def test_translation_moves_origin_only(self):
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))
        moved = ray.transform(translation(Vec3(1, 2, 3)), False)
        assert moved.origin == Point3(1, 2, 3)
        assert moved.direction == Vec3(0, 0, -1)

    def test_object_space_keeps_direction_length(self):
        ray = Ray(Point3(0, 0, 4), Vec3(0, 0, -1))
        inverse = np.linalg.inv(scaling(Vec3(2, 2, 2)))
        object_ray = ray.to_object_space(inverse)
        assert object_ray.origin == Point3(0, 0, 2)
        assert abs(object_ray.direction.length() - 0.5) < 1e-12

    def test_transform_can_normalize_direction(self):
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))
        world_ray = ray.transform(scaling(Vec3(3, 3, 3)), True)
        assert abs(world_ray.direction.length() - 1.0) < 1e-12

    def test_same_point_in_both_spaces(self):
        ctm = translation(Vec3(1, 0, 0)) @ scaling(Vec3(2, 3, 4))
        ray = Ray(Point3(5, 1, 2), Vec3(-1, 0.5, 0.25))
        object_ray = ray.to_object_space(np.linalg.inv(ctm))
        back = object_ray.transform(ctm, False)
        assert back.at(1.7) == ray.at(1.7)

"""Tests for Vec3 class."""

import math
import pytest
import numpy as np
from whittrace.vec3 import Vec3, Point3, Color


class TestVec3Creation:
    """Test Vec3 construction."""

    def test_default_is_zero(self):
        v = Vec3()
        assert v.x == 0 and v.y == 0 and v.z == 0

    def test_from_array(self):
        v = Vec3.from_array(np.array([1.0, 2.0, 3.0]))
        assert v == Vec3(1, 2, 3)

    def test_color_aliases(self):
        c = Color(0.1, 0.2, 0.3)
        assert c.r == c.x and c.g == c.y and c.b == c.z

    def test_iteration(self):
        assert list(Point3(1, 2, 3)) == [1.0, 2.0, 3.0]


class TestVec3Operations:
    """Test arithmetic and geometric operations."""

    def test_add_sub(self):
        assert Vec3(1, 2, 3) + Vec3(1, 1, 1) == Vec3(2, 3, 4)
        assert Vec3(1, 2, 3) - Vec3(1, 1, 1) == Vec3(0, 1, 2)

    def test_componentwise_multiply(self):
        assert Vec3(1, 2, 3) * Vec3(2, 2, 2) == Vec3(2, 4, 6)

    def test_scalar_multiply(self):
        assert Vec3(1, 2, 3) * 2 == Vec3(2, 4, 6)
        assert 2 * Vec3(1, 2, 3) == Vec3(2, 4, 6)

    def test_dot_and_cross(self):
        assert Vec3(1, 0, 0).dot(Vec3(0, 1, 0)) == 0
        assert Vec3(1, 0, 0).cross(Vec3(0, 1, 0)) == Vec3(0, 0, 1)

    def test_normalize(self):
        n = Vec3(3, 0, 4).normalize()
        assert abs(n.length() - 1.0) < 1e-12
        assert n == Vec3(0.6, 0, 0.8)

    def test_normalize_zero_vector_has_no_nan(self):
        n = Vec3(0, 0, 0).normalize()
        assert n == Vec3(0, 0, 0)
        assert all(not math.isnan(c) for c in n)

    def test_reflect(self):
        r = Vec3(1, -1, 0).reflect(Vec3(0, 1, 0))
        assert r == Vec3(1, 1, 0)

    def test_is_zero(self):
        assert Vec3(0, 0, 0).is_zero()
        assert not Vec3(0, 1e-9, 0).is_zero()


class TestVec3Immutability:
    """Vectors are shared between shapes and threads, so they never change."""

    def test_cannot_set_attributes(self):
        v = Vec3(1, 2, 3)
        with pytest.raises(AttributeError):
            v.x = 5

    def test_backing_array_read_only(self):
        v = Vec3(1, 2, 3)
        with pytest.raises(ValueError):
            v._data[0] = 5

    def test_to_array_is_a_copy(self):
        v = Vec3(1, 2, 3)
        arr = v.to_array()
        arr[0] = 9
        assert v.x == 1

"""Tests for intersection records and their ordering."""

import math
from whittrace.vec3 import Vec3, Color
from whittrace.intersection import ComponentIntersection, Intersection
from whittrace.materials import Material


def hit(t):
    return ComponentIntersection(t, Vec3(0, 1, 0), (0.5, 0.5))


class TestComponentIntersectionOrdering:
    """Test ordering by ray parameter."""

    def test_less_than(self):
        assert hit(1.0) < hit(2.0)
        assert not hit(2.0) < hit(1.0)

    def test_equal_t_is_equal(self):
        assert hit(1.5) == hit(1.5)

    def test_min_picks_smallest_t(self):
        hits = [hit(3.0), hit(0.5), hit(2.0)]
        assert min(hits).t == 0.5

    def test_nan_compares_equal(self):
        a = hit(math.nan)
        b = hit(1.0)
        assert not a < b
        assert not b < a
        assert a == b

    def test_min_with_nan_does_not_raise(self):
        min([hit(1.0), hit(math.nan), hit(0.5)])
        sorted([hit(math.nan), hit(1.0)])


class TestIntersection:
    """Test material-carrying intersections."""

    def test_properties_forward(self):
        material = Material(ambient=Color(0.1, 0.2, 0.3))
        record = Intersection(hit(2.0), material)
        assert record.t == 2.0
        assert record.normal == Vec3(0, 1, 0)
        assert record.uv == (0.5, 0.5)
        assert record.material is material

    def test_ordering(self):
        material = Material()
        near = Intersection(hit(1.0), material)
        far = Intersection(hit(4.0), material)
        assert near < far
        assert min([far, near]) is near

"""
Records describing where a ray meets the scene.

Both record types are ordered by their ray parameter ``t`` so the closest
hit can be picked with ``min()``. Comparisons involving NaN treat the two
records as equal, which keeps minimum selection total.
"""

from __future__ import annotations
from dataclasses import dataclass
from functools import total_ordering
from typing import Tuple, TYPE_CHECKING

from .vec3 import Vec3

if TYPE_CHECKING:
    from .materials import Material


def _t_less(a: float, b: float) -> bool:
    # NaN on either side compares False, i.e. "not less".
    return a < b


def _t_equal(a: float, b: float) -> bool:
    return not _t_less(a, b) and not _t_less(b, a)


@total_ordering
@dataclass(frozen=True, eq=False)
class ComponentIntersection:
    """Intersection between a ray and one component of a primitive.

    Attributes:
        t: Ray parameter of the hit
        normal: Surface normal at the hit
        uv: Texture coordinates at the hit, each in [0, 1]
    """
    t: float
    normal: Vec3
    uv: Tuple[float, float]

    def __lt__(self, other: ComponentIntersection) -> bool:
        if not isinstance(other, ComponentIntersection):
            return NotImplemented
        return _t_less(self.t, other.t)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ComponentIntersection):
            return NotImplemented
        return _t_equal(self.t, other.t)

    __hash__ = None


@total_ordering
@dataclass(frozen=True, eq=False)
class Intersection:
    """A component intersection together with the material that was hit."""
    component_intersection: ComponentIntersection
    material: Material

    @property
    def t(self) -> float:
        return self.component_intersection.t

    @property
    def normal(self) -> Vec3:
        return self.component_intersection.normal

    @property
    def uv(self) -> Tuple[float, float]:
        return self.component_intersection.uv

    def __lt__(self, other: Intersection) -> bool:
        if not isinstance(other, Intersection):
            return NotImplemented
        return self.component_intersection < other.component_intersection

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Intersection):
            return NotImplemented
        return self.component_intersection == other.component_intersection

    __hash__ = None

"""
Immutable 3-component vectors.

One type serves for positions, directions, surface normals and RGB
intensities. Values are backed by a read-only float64 array so they can be
shared freely between shapes, lights and render threads.
"""

from __future__ import annotations
from typing import Iterator, Union
import numpy as np

Operand = Union['Vec3', float]


def _operand(other: Operand) -> Union[np.ndarray, float]:
    if isinstance(other, Vec3):
        return other._data
    return other


class Vec3:
    """A 3D vector with component-wise arithmetic.

    Multiplying two vectors multiplies component-wise, which is what
    color modulation needs; use ``dot`` and ``cross`` for the geometric
    products.
    """

    __slots__ = ('_data',)

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0):
        data = np.array((x, y, z), dtype=np.float64)
        data.setflags(write=False)
        object.__setattr__(self, '_data', data)

    @classmethod
    def from_array(cls, arr: np.ndarray) -> Vec3:
        """Wrap the first three entries of an array (copied)."""
        x, y, z = np.asarray(arr, dtype=np.float64)[:3]
        return cls(x, y, z)

    def __setattr__(self, name, value):
        raise AttributeError("Vec3 is immutable")

    @property
    def x(self) -> float:
        return float(self._data[0])

    @property
    def y(self) -> float:
        return float(self._data[1])

    @property
    def z(self) -> float:
        return float(self._data[2])

    # Color channel names
    r = x
    g = y
    b = z

    def __repr__(self) -> str:
        return f"Vec3({self.x:.4f}, {self.y:.4f}, {self.z:.4f})"

    def __eq__(self, other: object) -> bool:
        """Approximate equality, tolerant of floating point round-off."""
        if not isinstance(other, Vec3):
            return NotImplemented
        return bool(np.allclose(self._data, other._data))

    __hash__ = None

    def __neg__(self) -> Vec3:
        return Vec3.from_array(-self._data)

    def __add__(self, other: Operand) -> Vec3:
        return Vec3.from_array(self._data + _operand(other))

    __radd__ = __add__

    def __sub__(self, other: Operand) -> Vec3:
        return Vec3.from_array(self._data - _operand(other))

    def __rsub__(self, other: Operand) -> Vec3:
        return Vec3.from_array(_operand(other) - self._data)

    def __mul__(self, other: Operand) -> Vec3:
        return Vec3.from_array(self._data * _operand(other))

    __rmul__ = __mul__

    def __truediv__(self, other: Operand) -> Vec3:
        return Vec3.from_array(self._data / _operand(other))

    def __getitem__(self, axis: int) -> float:
        return float(self._data[axis])

    def __iter__(self) -> Iterator[float]:
        return iter(self._data.tolist())

    def __array__(self, dtype=None, copy=None):
        return np.array(self._data, dtype=dtype)

    def length(self) -> float:
        return float(np.sqrt(self.length_squared()))

    def length_squared(self) -> float:
        return self.dot(self)

    def normalize(self) -> Vec3:
        """Return a unit vector in the same direction.

        A zero-length or non-finite vector normalizes to the zero vector
        instead of producing NaN components.
        """
        length = self.length()
        if length == 0 or not np.isfinite(length):
            return Vec3()
        return self / length

    def dot(self, other: Vec3) -> float:
        return float(self._data @ other._data)

    def cross(self, other: Vec3) -> Vec3:
        return Vec3.from_array(np.cross(self._data, other._data))

    def reflect(self, normal: Vec3) -> Vec3:
        """Mirror this vector about ``normal`` (not renormalized)."""
        return self - normal * (2.0 * self.dot(normal))

    def is_zero(self) -> bool:
        """True only if every component is exactly zero."""
        return not self._data.any()

    def to_array(self) -> np.ndarray:
        """A writable copy of the components."""
        return self._data.copy()


# Aliases that document intent at call sites
Point3 = Vec3
Color = Vec3

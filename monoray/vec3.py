"""
Points and vectors in 3D space.

This is the fundamental building block of the ray tracer. Points and
vectors are kept as separate types:
- Points can be translated by a vector and measured against each other
- Vectors carry the full linear algebra used by shading and geometry

Both are immutable; every operation returns a new instance.
"""

from __future__ import annotations
import math
import numpy as np

from .errors import DomainError

# Absolute tolerance for floating point comparisons.
EPSILON = 1e-12


def near(a: float, b: float) -> bool:
    """Compare two floats with the absolute tolerance EPSILON."""
    return abs(a - b) <= EPSILON


class _Coordinates:
    """Shared storage and comparison for points and vectors.

    Uses numpy internally, exposes plain floats.
    """

    __slots__ = ('_data',)

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0):
        self._data = np.array([x, y, z], dtype=np.float64)

    @classmethod
    def from_array(cls, arr: np.ndarray):
        """Create an instance from a numpy array."""
        return cls(float(arr[0]), float(arr[1]), float(arr[2]))

    @property
    def x(self) -> float:
        return float(self._data[0])

    @property
    def y(self) -> float:
        return float(self._data[1])

    @property
    def z(self) -> float:
        return float(self._data[2])

    def __getitem__(self, index: int) -> float:
        return float(self._data[index])

    def __iter__(self):
        return iter((self.x, self.y, self.z))

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return bool(np.all(np.abs(self._data - other._data) <= EPSILON))

    # Tolerant equality cannot be hashed consistently.
    __hash__ = None

    def to_array(self) -> np.ndarray:
        """Return the underlying numpy array (copy)."""
        return self._data.copy()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.x:.4f}, {self.y:.4f}, {self.z:.4f})"


class Vector(_Coordinates):
    """A direction or displacement with a cached length."""

    __slots__ = ('_length',)

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0):
        super().__init__(x, y, z)
        self._length = math.sqrt(x * x + y * y + z * z)

    def length(self) -> float:
        """Return the magnitude of the vector."""
        return self._length

    def __neg__(self) -> Vector:
        return Vector.from_array(-self._data)

    def __add__(self, other: Vector) -> Vector:
        if not isinstance(other, Vector):
            return NotImplemented
        return Vector.from_array(self._data + other._data)

    def __sub__(self, other: Vector) -> Vector:
        if not isinstance(other, Vector):
            return NotImplemented
        return Vector.from_array(self._data - other._data)

    def __mul__(self, scalar: float) -> Vector:
        if isinstance(scalar, _Coordinates):
            return NotImplemented
        return Vector.from_array(self._data * scalar)

    def __rmul__(self, scalar: float) -> Vector:
        return self.__mul__(scalar)

    def __truediv__(self, scalar: float) -> Vector:
        if scalar == 0:
            raise DomainError("Division of a vector by zero.")
        return Vector.from_array(self._data / scalar)

    def scale(self, new_length: float) -> Vector:
        """Return a vector with the same direction and the given length.

        Raises:
            DomainError: If this vector has length 0
        """
        if self._length == 0:
            raise DomainError("Vector has length of 0.")
        return self * (new_length / self._length)

    def normalize(self) -> Vector:
        """Return a unit vector in the same direction."""
        return self.scale(1.0)

    def dot(self, other: Vector) -> float:
        """Compute dot product with another vector."""
        return float(np.dot(self._data, other._data))

    def cross(self, other: Vector) -> Vector:
        """Compute the right-handed cross product ``self x other``."""
        return Vector.from_array(np.cross(self._data, other._data))

    def mirror(self, normal: Vector) -> Vector:
        """Mirror this vector about a surface normal.

        Computes ``v - 2 (v . n) n`` with ``n`` the normalized ``normal``.
        """
        unit = normal.normalize()
        return self - unit * (2 * self.dot(unit))


class Point(_Coordinates):
    """A location in 3D space."""

    __slots__ = ()

    def __add__(self, vector: Vector) -> Point:
        if not isinstance(vector, Vector):
            return NotImplemented
        return Point.from_array(self._data + vector._data)

    def __sub__(self, other: Point) -> Vector:
        if not isinstance(other, Point):
            return NotImplemented
        return other.vector_to(self)

    def vector_to(self, other: Point) -> Vector:
        """Return the vector pointing from this point to ``other``."""
        return Vector.from_array(other._data - self._data)


ORIGIN = Point(0.0, 0.0, 0.0)
NULL_VECTOR = Vector(0.0, 0.0, 0.0)
X_VECTOR = Vector(1.0, 0.0, 0.0)
Y_VECTOR = Vector(0.0, 1.0, 0.0)
Z_VECTOR = Vector(0.0, 0.0, 1.0)

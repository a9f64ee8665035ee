"""
Geometric primitives for the ray tracer.

Each primitive implements the Primitive interface:
- `intersections(ray)` returns the hits in front of the ray origin,
  nearest first
- `normal_at(point)` returns the surface normal (not necessarily unit length)
- `surface` holds the primitive's material coefficients
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List
import math

from .errors import ConstructionError
from .vec3 import Vector, Point, ORIGIN, NULL_VECTOR, near
from .ray import Ray
from .materials import Surface


@dataclass(eq=False)
class Intersection:
    """A point where a ray crosses the boundary of a primitive.

    Attributes:
        point: The intersection point in world space
        primitive: The primitive that was hit
        distance: Distance from the ray origin, always > 0
        entering: True if the ray passes from outside to inside here
    """
    point: Point
    primitive: 'Primitive'
    distance: float
    entering: bool

    def __post_init__(self):
        if self.distance <= 0:
            raise ConstructionError(f"distance must be positive, got {self.distance}")

    def __lt__(self, other: Intersection) -> bool:
        return self.distance < other.distance

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Intersection):
            return NotImplemented
        return (near(self.distance, other.distance)
                and self.entering == other.entering
                and self.point == other.point
                and self.primitive is other.primitive)

    __hash__ = None


class Primitive(ABC):
    """Abstract base class for all objects that can be hit by rays."""

    def __init__(self):
        self.surface = Surface()

    @abstractmethod
    def intersections(self, ray: Ray) -> List[Intersection]:
        """Find where ray crosses this primitive.

        Args:
            ray: The ray to test

        Returns:
            Intersections with positive distance, ordered nearest first
        """
        pass

    @abstractmethod
    def normal_at(self, point: Point) -> Vector:
        """Get a vector normal to the surface at point."""
        pass


class Sphere(Primitive):
    """A sphere defined by center and radius."""

    def __init__(self, center: Point, radius: float):
        """Create a sphere.

        Args:
            center: Center point of the sphere
            radius: Radius of the sphere, must be positive

        Raises:
            ConstructionError: If radius <= 0
        """
        super().__init__()
        if radius <= 0:
            raise ConstructionError(f"radius must be positive, got {radius}")
        self.center = center
        self.radius = radius

    def intersections(self, ray: Ray) -> List[Intersection]:
        """Test ray-sphere intersection using the quadratic formula.

        With a unit direction d and delta = origin - center the equation
        |origin + t d - center|^2 = r^2 becomes t^2 + b t + c = 0 where
        b = 2 (delta . d) and c = delta . delta - r^2.
        """
        delta = self.center.vector_to(ray.origin)
        b = 2 * delta.dot(ray.direction)
        c = delta.dot(delta) - self.radius * self.radius

        discriminant = b * b - 4 * c
        if discriminant < 0:
            return []

        root = math.sqrt(discriminant)

        # The far root first; if it is behind the origin, so is the near one.
        distance = (-b + root) * 0.5
        if distance <= 0:
            return []

        # The far hit leaves the sphere, also when the ray starts inside.
        hits = [Intersection(ray.at(distance), self, distance, False)]

        # Tangent
        if root == 0:
            return hits

        distance = (-b - root) * 0.5
        if distance > 0:
            hits.insert(0, Intersection(ray.at(distance), self, distance, True))

        return hits

    def normal_at(self, point: Point) -> Vector:
        """Return the vector from the center to point."""
        return self.center.vector_to(point)

    def __repr__(self) -> str:
        return f"Sphere(center={self.center}, radius={self.radius})"


class Plane(Primitive):
    """An infinite plane defined by a point and normal."""

    def __init__(self, point: Point, normal: Vector):
        """Create a plane.

        Args:
            point: Any point on the plane
            normal: The plane's normal vector (will be normalized)

        Raises:
            ConstructionError: If normal is the null vector
        """
        super().__init__()
        if normal == NULL_VECTOR:
            raise ConstructionError("normal is the null vector.")
        self.point = point
        self.normal = normal.normalize()
        # Signed distance of the plane from the coordinate origin.
        self.origin_distance = -ORIGIN.vector_to(point).dot(self.normal)

    def intersections(self, ray: Ray) -> List[Intersection]:
        """Test ray-plane intersection."""
        denom = self.normal.dot(ray.direction)

        # Ray is parallel to plane
        if near(denom, 0.0):
            return []

        distance = -(self.normal.dot(ORIGIN.vector_to(ray.origin)) + self.origin_distance) / denom
        if distance <= 0:
            return []

        return [Intersection(ray.at(distance), self, distance, True)]

    def normal_at(self, point: Point) -> Vector:
        return self.normal

    def __repr__(self) -> str:
        return f"Plane(point={self.point}, normal={self.normal})"

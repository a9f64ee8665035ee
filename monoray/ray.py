"""
Ray class for representing rays in 3D space.

A ray is defined by an origin point and a direction vector.
Ray(t) = origin + t * direction
"""

from __future__ import annotations
from .errors import ConstructionError
from .vec3 import Vector, Point, NULL_VECTOR

DEFAULT_WEIGHT = 1.0


class Ray:
    """A ray with origin, unit direction and weight.

    The parametric form is: P(t) = origin + t * direction
    where t >= 0 represents points along the ray. The weight is the share
    of light the ray still carries after reflections.
    """

    __slots__ = ('origin', 'direction', 'weight')

    def __init__(self, origin: Point, direction: Vector, weight: float = DEFAULT_WEIGHT):
        """Create a ray with given origin and direction.

        Args:
            origin: The starting point of the ray
            direction: The direction vector, normalized on construction
            weight: Remaining light-carrying capacity (1.0 for primary rays)

        Raises:
            ConstructionError: If direction is the null vector
        """
        if direction == NULL_VECTOR:
            raise ConstructionError("direction is the 0-vector.")

        self.origin = origin
        self.direction = direction.normalize()
        self.weight = weight

    def at(self, t: float) -> Point:
        """Get the point along the ray at distance t from the origin."""
        return self.origin + self.direction * t

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ray):
            return NotImplemented
        return self.origin == other.origin and self.direction == other.direction

    __hash__ = None

    def __repr__(self) -> str:
        return f"Ray(origin={self.origin}, direction={self.direction}, weight={self.weight})"

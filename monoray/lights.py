"""
Light models for the ray tracer.

Each model scores one intersection with a non-negative brightness:
- Ambient: constant base brightness of the surface
- Diffuse: Lambertian reflection of the point light
- SpecularHighlight: Phong highlight of the point light
- Reflexion: brightness seen along the mirrored ray
- Shadowed: whether the point light is blocked (used by the others)
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Callable, Optional, TYPE_CHECKING

from .ray import Ray
from .shapes import Intersection

if TYPE_CHECKING:
    from .scene import Scene
    from .tracer import Raytracer

# Reflected rays with a weight below this are not traced.
REFLEXION_WEIGHT_STOP = 2.0 ** -8


class ShadowPromise:
    """A shadow flag that is computed on first access and then cached."""

    __slots__ = ('_supplier', '_value')

    def __init__(self, supplier: Callable[[], bool]):
        self._supplier = supplier
        self._value: Optional[bool] = None

    def get(self) -> bool:
        if self._value is None:
            self._value = bool(self._supplier())
        return self._value


class LightModel(ABC):
    """Abstract base class for light models."""

    @abstractmethod
    def calculate(self, scene: Scene, intersection: Optional[Intersection]) -> float:
        """Compute the brightness contribution for an intersection.

        Args:
            scene: The scene being traced
            intersection: The nearest hit of the traced ray, or None

        Returns:
            Brightness contribution, never negative
        """
        pass


class Ambient(LightModel):
    """Constant light independent of the light source."""

    def calculate(self, scene: Scene, intersection: Optional[Intersection]) -> float:
        if intersection is None:
            return 0.0
        return intersection.primitive.surface.ambient_ratio


class Shadowed(LightModel):
    """Shadow test: 1.0 if the light is blocked, else 0.0."""

    def calculate(self, scene: Scene, intersection: Optional[Intersection]) -> float:
        return 1.0 if self.is_shadowed(scene, intersection) else 0.0

    @staticmethod
    def is_shadowed(scene: Scene, intersection: Optional[Intersection]) -> bool:
        # Without a light there is nothing to cast a shadow.
        if intersection is None or scene.light is None:
            return False

        light_vector = intersection.point.vector_to(scene.light)
        blocker = scene.find_intersection(Ray(intersection.point, light_vector))

        # Hits beyond the light do not block it.
        return blocker is not None and blocker.distance < light_vector.length()


class Diffuse(LightModel):
    """Lambertian diffuse reflection of the point light."""

    def __init__(self, shadowed: ShadowPromise):
        self.shadowed = shadowed

    def calculate(self, scene: Scene, intersection: Optional[Intersection]) -> float:
        if intersection is None or scene.light is None or self.shadowed.get():
            return 0.0

        primitive = intersection.primitive
        diffuse_ratio = primitive.surface.diffuse_ratio
        if diffuse_ratio == 0:
            return 0.0

        normal = primitive.normal_at(intersection.point).normalize()
        to_light = intersection.point.vector_to(scene.light).normalize()

        brightness = diffuse_ratio * normal.dot(to_light)
        return max(0.0, brightness)


class SpecularHighlight(LightModel):
    """Phong specular highlight of the point light."""

    def __init__(self, shadowed: ShadowPromise, ray: Ray):
        self.shadowed = shadowed
        self.ray = ray

    def calculate(self, scene: Scene, intersection: Optional[Intersection]) -> float:
        if intersection is None or scene.light is None or self.shadowed.get():
            return 0.0

        primitive = intersection.primitive
        surface = primitive.surface
        specular_ratio = surface.specular_ratio
        if specular_ratio == 0:
            return 0.0

        point = intersection.point
        mirrored = self.ray.direction.mirror(primitive.normal_at(point).normalize())
        cosine = mirrored.dot(point.vector_to(scene.light).normalize())
        if cosine < 0:
            return 0.0

        return specular_ratio * cosine ** surface.specular_exponent


class Reflexion(LightModel):
    """Mirror reflection, traced until the ray weight runs out."""

    def __init__(self, ray: Ray, raytracer: Raytracer):
        self.ray = ray
        self.raytracer = raytracer

    def mirrored_ray(self, intersection: Optional[Intersection]) -> Optional[Ray]:
        """Build the reflected ray leaving intersection.

        Returns:
            The mirrored ray carrying the reduced weight, or None if there is
            no intersection or the weight falls below REFLEXION_WEIGHT_STOP
        """
        if intersection is None:
            return None

        primitive = intersection.primitive
        point = intersection.point

        weight = self.ray.weight * primitive.surface.reflexion_ratio
        if weight < REFLEXION_WEIGHT_STOP:
            return None

        mirrored = self.ray.direction.mirror(primitive.normal_at(point))
        return Ray(point, mirrored, weight)

    def calculate(self, scene: Scene, intersection: Optional[Intersection]) -> float:
        mirrored = self.mirrored_ray(intersection)
        if mirrored is None:
            return 0.0
        # The traced brightness is returned as is; the weight only bounds the depth.
        return self.raytracer.trace_ray(mirrored)

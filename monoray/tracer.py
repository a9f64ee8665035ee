"""
The ray tracer: turns a ray into a brightness by summing the light models.
"""

from __future__ import annotations
from .errors import RangeError, StateError
from .ray import Ray
from .scene import Scene
from .lights import Ambient, Diffuse, SpecularHighlight, Reflexion, Shadowed, ShadowPromise

# Upper bound on traced levels; only ratios of 1.0 or very close to it reach it.
MAX_REFLEXION_LEVELS = 100_000


class Raytracer:
    """Computes brightness values for rays through a scene.

    The scene is only read, so one Raytracer can be shared by many threads.
    """

    def __init__(self, scene: Scene):
        self.scene = scene
        self.looker = scene.looker

    def trace_primary(self, horizontal: float, vertical: float) -> float:
        """Trace the camera ray through a viewport point.

        Args:
            horizontal: Viewport coordinate in [-1, 1]
            vertical: Viewport coordinate in [-1, 1]

        Returns:
            Brightness in [0, 1]
        """
        if abs(horizontal) > 1:
            raise RangeError(f"horizontal must be within -1 and 1, got {horizontal}")
        if abs(vertical) > 1:
            raise RangeError(f"vertical must be within -1 and 1, got {vertical}")

        return self.trace_ray(self.looker.primary_ray(horizontal, vertical))

    def trace_ray(self, ray: Ray) -> float:
        """Trace an arbitrary ray, following its mirror reflections.

        The reflection chain is walked with an explicit stack instead of
        recursion, so high reflexion ratios cannot exhaust the call stack.
        Chains longer than MAX_REFLEXION_LEVELS are cut off there.
        Each level contributes min(local + reflected, 1.0), where local is
        the sum of the non-reflective light models at that level.

        Returns:
            Brightness in [0, 1]
        """
        scene = self.scene
        levels = []

        while ray is not None and len(levels) < MAX_REFLEXION_LEVELS:
            intersection = scene.find_intersection(ray)
            levels.append(self._local_brightness(ray, intersection))
            ray = Reflexion(ray, self).mirrored_ray(intersection)

        brightness = 0.0
        for local in reversed(levels):
            brightness = min(local + brightness, 1.0)
        return brightness

    def _local_brightness(self, ray: Ray, intersection) -> float:
        """Sum ambient, diffuse and specular light for one intersection."""
        scene = self.scene

        # Diffuse and specular share one shadow ray.
        shadowed = ShadowPromise(lambda: Shadowed.is_shadowed(scene, intersection))

        models = (
            Ambient(),
            Diffuse(shadowed),
            SpecularHighlight(shadowed, ray),
        )
        brightness = sum(model.calculate(scene, intersection) for model in models)

        if brightness < 0:
            raise StateError(f"light models returned negative brightness {brightness}")
        return brightness

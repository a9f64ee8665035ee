"""
Scene container and builder.

A Scene holds the primitives, an optional point light and the Looker.
Scenes are assembled by SceneBuilder from instruction tuples such as::

    ('looker', Point(0, 0, 5), Point(0, 0, 0), 2.0, 2.0)
    ('sphere', Point(0, 0, -5), 1.0)
    ('ambient', 1.0)

Property instructions (ambient, diffuse, specular, reflexion) apply to
the most recently added primitive.
"""

from __future__ import annotations
import logging
from typing import Iterable, List, Optional, Sequence

from .errors import ConstructionError
from .vec3 import Point
from .ray import Ray
from .camera import Looker
from .materials import SurfaceProperty
from .shapes import Primitive, Sphere, Plane, Intersection

logger = logging.getLogger(__name__)

# Hits closer than this are the ray leaving its own start surface.
MINIMUM_DISTANCE = 1e-10


class SceneParseError(ConstructionError):
    """Error while turning scene instructions into a scene."""
    pass


class Scene:
    """Primitives, light and camera of a renderable scene."""

    def __init__(self, looker: Looker, primitives: Optional[List[Primitive]] = None,
                 light: Optional[Point] = None):
        """Create a scene.

        Args:
            looker: The camera, required
            primitives: Objects in the scene
            light: Position of the point light, if any

        Raises:
            ConstructionError: If looker is None
        """
        if looker is None:
            raise ConstructionError("A scene requires a looker.")
        self.looker = looker
        self.primitives: List[Primitive] = list(primitives) if primitives is not None else []
        self.light = light

    def find_intersection(self, ray: Ray) -> Optional[Intersection]:
        """Find the nearest intersection of ray with any primitive.

        Hits within MINIMUM_DISTANCE of the origin are ignored.

        Returns:
            The nearest Intersection, or None if nothing is hit
        """
        hits = []
        for primitive in self.primitives:
            hits.extend(primitive.intersections(ray))

        hits = sorted(hit for hit in hits if hit.distance > MINIMUM_DISTANCE)
        return hits[0] if hits else None

    def __len__(self) -> int:
        return len(self.primitives)

    def __repr__(self) -> str:
        return f"Scene(primitives={len(self.primitives)}, light={self.light}, looker={self.looker})"


class SceneBuilder:
    """Applies scene instructions in order and produces a Scene."""

    PROPERTIES = {
        'ambient': (SurfaceProperty.AMBIENT_RATIO,),
        'diffuse': (SurfaceProperty.DIFFUSE_RATIO,),
        'specular': (SurfaceProperty.SPECULAR_RATIO, SurfaceProperty.SPECULAR_EXPONENT),
        'reflexion': (SurfaceProperty.REFLEXION_RATIO,),
    }

    def __init__(self):
        self.primitives: List[Primitive] = []
        self.looker: Optional[Looker] = None
        self.light: Optional[Point] = None
        self._property_allowed = False

    def apply(self, instruction: Sequence) -> None:
        """Apply a single instruction tuple."""
        if not instruction:
            raise SceneParseError("Empty instruction.")

        name, args = instruction[0], tuple(instruction[1:])

        if name == 'looker':
            self._expect(name, args, 4)
            if self.looker is not None:
                raise SceneParseError("Second looker defined.")
            self.looker = Looker(*args)
            self._property_allowed = False

        elif name == 'light':
            self._expect(name, args, 1)
            if self.light is not None:
                raise SceneParseError("Second light defined.")
            self.light = args[0]
            self._property_allowed = False

        elif name == 'sphere':
            self._expect(name, args, 2)
            self._add_primitive(Sphere(*args))

        elif name == 'plane':
            self._expect(name, args, 2)
            self._add_primitive(Plane(*args))

        elif name in self.PROPERTIES:
            properties = self.PROPERTIES[name]
            self._expect(name, args, len(properties))
            if not self._property_allowed:
                raise SceneParseError(f"Property '{name}' must follow a primitive.")
            surface = self.primitives[-1].surface
            for prop, value in zip(properties, args):
                surface.set(prop, value)

        else:
            raise SceneParseError(f"Unknown instruction: {name}")

    def apply_all(self, instructions: Iterable[Sequence]) -> SceneBuilder:
        for instruction in instructions:
            self.apply(instruction)
        return self

    def build(self) -> Scene:
        """Create the scene.

        Raises:
            SceneParseError: If no looker was defined
        """
        if self.looker is None:
            raise SceneParseError("Instructions must contain a definition for looker.")

        logger.debug("Built scene with %d primitives, light=%s",
                     len(self.primitives), self.light is not None)
        return Scene(self.looker, self.primitives, self.light)

    def _add_primitive(self, primitive: Primitive) -> None:
        self.primitives.append(primitive)
        self._property_allowed = True

    @staticmethod
    def _expect(name: str, args: tuple, count: int) -> None:
        if len(args) != count:
            raise SceneParseError(
                f"Instruction '{name}' takes {count} parameters, got {len(args)}"
            )


def build_scene(instructions: Iterable[Sequence]) -> Scene:
    """Convenience function to build a scene from instruction tuples."""
    return SceneBuilder().apply_all(instructions).build()

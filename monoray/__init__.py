"""
Monoray - A grayscale Python ray tracer

Renders scenes of spheres and planes lit by a single point light with:
- Ambient, diffuse (Lambertian) and specular (Phong) shading
- Hard shadows
- Recursive mirror reflections
- Multi-threaded row-based rendering
- 2x2 supersampling
- PGM and PNG output
"""

__version__ = "0.1.0"
__author__ = "Monoray Team"

from .errors import RaytracerError, ConstructionError, DomainError, StateError, RangeError
from .vec3 import Vector, Point, EPSILON, ORIGIN, NULL_VECTOR, X_VECTOR, Y_VECTOR, Z_VECTOR
from .ray import Ray
from .materials import Surface, SurfaceProperty
from .shapes import Primitive, Sphere, Plane, Intersection
from .camera import Looker
from .scene import Scene, SceneBuilder, SceneParseError, build_scene
from .lights import (
    LightModel, Ambient, Diffuse, SpecularHighlight, Shadowed, Reflexion,
    ShadowPromise, REFLEXION_WEIGHT_STOP
)
from .tracer import Raytracer
from .raster import (
    Raster, ArrayRaster, ParallelRaster, ThreadIdRaster, Supersampled,
    CoordinateConverter, make_raster
)
from .image import Image, PGMImage, PNGImage, make_image
from .renderer import Renderer, RenderSettings
from .scene_parser import SceneParser, load_scene, parse_scene, default_scene

"""
Renderer module - ties scene, raytracer, raster and encoder together.

Implements:
- Render configuration (RenderSettings)
- Raster selection (single-threaded, parallel, supersampled)
- Progress reporting
- Image output (PGM, PNG)
"""

from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from typing import Callable, Optional

from .scene import Scene
from .tracer import Raytracer
from .raster import Raster, ParallelRaster, Supersampled, make_raster, DEFAULT_RESOLUTION
from .image import make_image, image_kind_for

logger = logging.getLogger(__name__)


@dataclass
class RenderSettings:
    """Configuration for the renderer."""
    width: int = DEFAULT_RESOLUTION
    height: int = DEFAULT_RESOLUTION
    raster: str = 'ParallelRaster'
    num_threads: int = 0  # 0 = auto-detect
    supersample: bool = False
    image: Optional[str] = None  # None = pick from output extension
    output: Optional[str] = None  # None = stdout (PGM only)

    def __post_init__(self):
        if self.num_threads == 0:
            self.num_threads = os.cpu_count() or 1


class Renderer:
    """Renders scenes to rasters and saves them as images."""

    def __init__(self, settings: RenderSettings = None):
        """Create a renderer with the given settings.

        Args:
            settings: Render configuration (uses defaults if None)
        """
        self.settings = settings if settings else RenderSettings()
        self._progress_callback: Optional[Callable[[float], None]] = None

    def set_progress_callback(self, callback: Callable[[float], None]) -> None:
        """Set a callback function for progress updates.

        Only parallel rasters report progress.

        Args:
            callback: Function that takes progress as float (0.0 to 1.0)
        """
        self._progress_callback = callback

    def create_raster(self) -> Raster:
        """Build the raster described by the settings."""
        s = self.settings
        raster = make_raster(s.raster, s.width, s.height, s.num_threads, s.supersample)

        inner = raster.underlying if isinstance(raster, Supersampled) else raster
        if self._progress_callback and isinstance(inner, ParallelRaster):
            inner.set_progress_callback(self._progress_callback)
        return raster

    def render(self, scene: Scene) -> Raster:
        """Render the scene.

        Args:
            scene: The scene to render

        Returns:
            The rendered raster
        """
        raster = self.create_raster()
        logger.info("Rendering %d primitives into %r", len(scene), raster)
        return raster.render(Raytracer(scene))

    def save_image(self, raster: Raster, filename: Optional[str] = None) -> None:
        """Save a rendered raster.

        Args:
            raster: Rendered raster
            filename: Output filename (defaults to settings.output)
        """
        filename = filename if filename is not None else self.settings.output
        kind = self.settings.image or image_kind_for(filename)
        make_image(kind, filename).save(raster)

"""
Image encoders for finished rasters.

- PGMImage: plain text grayscale PGM (P2), top row first
- PNGImage: 8-bit grayscale PNG written with Pillow
"""

from __future__ import annotations
import logging
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, TextIO

import numpy as np
from PIL import Image as PILImage

from .errors import ConstructionError, RangeError
from .raster import Raster, MAX_BRIGHTNESS

logger = logging.getLogger(__name__)


def _checked_pixels(raster: Raster) -> np.ndarray:
    """Read all pixels of raster, validating size and brightness range."""
    if raster.width < 1 or raster.height < 1:
        raise ConstructionError("raster resolution must be at least 1x1")

    pixels = np.array(
        [[raster.get_pixel(row, column) for column in range(raster.width)]
         for row in range(raster.height)],
        dtype=np.int64
    )
    if pixels.min() < 0 or pixels.max() > MAX_BRIGHTNESS:
        raise RangeError(f"raster must only contain values between 0 and {MAX_BRIGHTNESS}.")
    return pixels


class Image(ABC):
    """Abstract base class for image encoders."""

    @abstractmethod
    def save(self, raster: Raster) -> None:
        pass


class PGMImage(Image):
    """Plain PGM (P2) encoder."""

    def __init__(self, filename: Optional[str] = None):
        """Create a PGM encoder.

        Args:
            filename: Output file, or None to write to stdout
        """
        self.filename = filename

    def as_string(self, raster: Raster) -> str:
        """Encode raster as PGM text, top row first."""
        pixels = _checked_pixels(raster)

        lines = [f"P2\n{raster.width} {raster.height}\n{MAX_BRIGHTNESS}\n"]
        for row in reversed(range(raster.height)):
            lines.append(''.join(f"{value} " for value in pixels[row]) + '\n')
        return ''.join(lines)

    def write(self, raster: Raster, stream: TextIO) -> None:
        stream.write(self.as_string(raster))

    def save(self, raster: Raster) -> None:
        if self.filename is None:
            self.write(raster, sys.stdout)
            return

        with open(self.filename, 'w') as f:
            self.write(raster, f)
        logger.info("Saved PGM image to %s", self.filename)


class PNGImage(Image):
    """Grayscale PNG encoder."""

    def __init__(self, filename: str):
        self.filename = filename

    def save(self, raster: Raster) -> None:
        pixels = _checked_pixels(raster)

        # Row 0 is the bottom of the image.
        image = PILImage.fromarray(np.ascontiguousarray(np.flipud(pixels), dtype=np.uint8))
        image.save(self.filename, format='PNG')
        logger.info("Saved PNG image to %s", self.filename)


def make_image(kind: str = 'PGMOut', filename: Optional[str] = None) -> Image:
    """Create an image encoder by name.

    Args:
        kind: 'PGMOut' or 'PNGImage'
        filename: Output file; required for PNG, optional for PGM

    Returns:
        The encoder
    """
    if kind in ('', 'PGMOut', 'pgm'):
        return PGMImage(filename)
    elif kind in ('PNGImage', 'png'):
        if filename is None:
            raise ValueError("PNGImage needs an output filename")
        return PNGImage(filename)
    raise ValueError(f"Unknown image type: {kind}")


def image_kind_for(filename: Optional[str]) -> str:
    """Pick the encoder name from a filename's extension."""
    if filename is not None and Path(filename).suffix.lower() == '.png':
        return 'PNGImage'
    return 'PGMOut'

"""
Rasters - the pixel grids a Raytracer renders into.

Implements:
- Single-threaded rendering (ArrayRaster)
- Multi-threaded row-based rendering (ParallelRaster)
- A debug view that colors each row by the worker that rendered it
- 2x2 supersampling of another raster
"""

from __future__ import annotations
import logging
import math
import os
import threading
import time
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional

import numpy as np

from .errors import ConstructionError, RangeError
from .tracer import Raytracer

logger = logging.getLogger(__name__)

DEFAULT_RESOLUTION = 128
MAX_BRIGHTNESS = 255


class Raster(ABC):
    """Abstract base class for rasters."""

    @property
    @abstractmethod
    def width(self) -> int:
        pass

    @property
    @abstractmethod
    def height(self) -> int:
        pass

    @abstractmethod
    def get_pixel(self, row: int, column: int) -> int:
        """Get the brightness in [0, 255] at (row, column).

        Row 0 is the bottom of the image.
        """
        pass

    @abstractmethod
    def render(self, raytracer: Raytracer) -> Raster:
        """Fill the raster using raytracer and return it."""
        pass

    def to_array(self) -> np.ndarray:
        """Return the pixels as a (height, width) uint8 array, row 0 first."""
        return np.array(
            [[self.get_pixel(row, column) for column in range(self.width)]
             for row in range(self.height)],
            dtype=np.uint8
        )


class CoordinateConverter:
    """Maps pixel indices to viewport coordinates in [-1, 1].

    Pixel i of n maps to the center of its cell: i * 2/n - (1 - 1/n).
    """

    def __init__(self, width: int, height: int):
        self.horizontal_factor = self._scale_factor(width)
        self.horizontal_shift = self._shift(width)
        self.vertical_factor = self._scale_factor(height)
        self.vertical_shift = self._shift(height)

    def horizontal(self, column: int) -> float:
        return column * self.horizontal_factor - self.horizontal_shift

    def vertical(self, row: int) -> float:
        return row * self.vertical_factor - self.vertical_shift

    @staticmethod
    def _scale_factor(resolution: int) -> float:
        if resolution == 1:
            return 1.0
        return 2.0 / resolution

    @staticmethod
    def _shift(resolution: int) -> float:
        return 1.0 - 1.0 / resolution


def to_brightness(value: float) -> int:
    """Scale a traced brightness in [0, 1] to an integer in [0, 255]."""
    return int(value * MAX_BRIGHTNESS)


class ArrayRaster(Raster):
    """A raster backed by a numpy array, rendered row by row in one thread."""

    def __init__(self, width: int = DEFAULT_RESOLUTION, height: int = DEFAULT_RESOLUTION):
        """Create a raster.

        Args:
            width: Horizontal resolution, at least 1
            height: Vertical resolution, at least 1
        """
        if width < 1:
            raise ConstructionError(f"width must be at least 1, got {width}")
        if height < 1:
            raise ConstructionError(f"height must be at least 1, got {height}")

        self._width = width
        self._height = height
        self._pixels = np.zeros((height, width), dtype=np.uint8)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def get_pixel(self, row: int, column: int) -> int:
        if not (0 <= row < self._height and 0 <= column < self._width):
            raise RangeError(
                f"pixel ({row}, {column}) is outside the {self._width}x{self._height} raster"
            )
        return int(self._pixels[row, column])

    def _set_pixel(self, row: int, column: int, brightness: int) -> None:
        assert 0 <= row < self._height and 0 <= column < self._width
        assert 0 <= brightness <= MAX_BRIGHTNESS
        self._pixels[row, column] = brightness

    def to_array(self) -> np.ndarray:
        return self._pixels.copy()

    def render(self, raytracer: Raytracer) -> Raster:
        converter = CoordinateConverter(self._width, self._height)
        start = time.perf_counter()

        for row in range(self._height):
            vertical = converter.vertical(row)
            for column in range(self._width):
                brightness = raytracer.trace_primary(converter.horizontal(column), vertical)
                self._set_pixel(row, column, to_brightness(brightness))

        logger.info("Rendered %dx%d in %.2fs", self._width, self._height,
                    time.perf_counter() - start)
        return self

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._width}x{self._height})"


class ParallelRaster(ArrayRaster):
    """A raster rendered by a pool of worker threads.

    Workers claim rows from a shared counter, starting at the top row.
    Each row is claimed by exactly one worker, so pixel writes never
    overlap and only the counter needs a lock.
    """

    def __init__(self, width: int = DEFAULT_RESOLUTION, height: int = DEFAULT_RESOLUTION,
                 thread_count: int = 0):
        """Create a parallel raster.

        Args:
            width: Horizontal resolution, at least 1
            height: Vertical resolution, at least 1
            thread_count: Number of workers, 0 = one per available CPU
        """
        super().__init__(width, height)

        if thread_count < 0:
            raise ConstructionError(f"thread_count must be at least 0, got {thread_count}")
        self.thread_count = thread_count if thread_count > 0 else (os.cpu_count() or 1)

        self._lock = threading.Lock()
        self._remaining_rows = height - 1
        self._completed_rows = 0
        self._progress_callback: Optional[Callable[[float], None]] = None

    def set_progress_callback(self, callback: Callable[[float], None]) -> None:
        """Set a callback function for progress updates.

        Args:
            callback: Function that takes progress as float (0.0 to 1.0)
        """
        self._progress_callback = callback

    def render(self, raytracer: Raytracer) -> Raster:
        self._remaining_rows = self._height - 1
        self._completed_rows = 0
        start = time.perf_counter()

        logger.debug("Rendering %dx%d with %d threads",
                     self._width, self._height, self.thread_count)

        with ThreadPoolExecutor(max_workers=self.thread_count) as executor:
            workers = [
                executor.submit(self._process_rows, raytracer, index)
                for index in range(self.thread_count)
            ]
            # Waits for every worker and re-raises its errors.
            for worker in workers:
                worker.result()

        logger.info("Rendered %dx%d with %d threads in %.2fs", self._width, self._height,
                    self.thread_count, time.perf_counter() - start)
        return self

    def _fetch_next_row(self) -> Optional[int]:
        """Claim the next unrendered row, or None when all are taken."""
        with self._lock:
            if self._remaining_rows < 0:
                return None
            row = self._remaining_rows
            self._remaining_rows -= 1
            return row

    def _process_rows(self, raytracer: Raytracer, worker_index: int) -> None:
        converter = CoordinateConverter(self._width, self._height)

        row = self._fetch_next_row()
        while row is not None:
            vertical = converter.vertical(row)
            for column in range(self._width):
                brightness = raytracer.trace_primary(converter.horizontal(column), vertical)
                self._set_pixel(row, column, self._pixel_value(brightness, worker_index))

            self._report_row_done()
            row = self._fetch_next_row()

    def _pixel_value(self, brightness: float, worker_index: int) -> int:
        return to_brightness(brightness)

    def _report_row_done(self) -> None:
        if self._progress_callback is None:
            return
        with self._lock:
            self._completed_rows += 1
            progress = self._completed_rows / self._height

        # Outside the lock, so slow callbacks do not stall row claiming.
        self._progress_callback(progress)


class ThreadIdRaster(ParallelRaster):
    """A parallel raster whose pixels show which worker rendered them.

    Worker i of n is drawn with brightness 255 * i / (n - 1).
    """

    def _pixel_value(self, brightness: float, worker_index: int) -> int:
        if self.thread_count == 1:
            return MAX_BRIGHTNESS
        return int(MAX_BRIGHTNESS * worker_index / (self.thread_count - 1))


class Supersampled(Raster):
    """Halves the resolution of another raster by averaging 2x2 blocks."""

    def __init__(self, underlying: Raster):
        if underlying.width % 2 != 0 or underlying.height % 2 != 0:
            raise ConstructionError(
                f"underlying resolution {underlying.width}x{underlying.height} is not even"
            )
        self.underlying = underlying

    @property
    def width(self) -> int:
        return self.underlying.width // 2

    @property
    def height(self) -> int:
        return self.underlying.height // 2

    def get_pixel(self, row: int, column: int) -> int:
        if not (0 <= row < self.height and 0 <= column < self.width):
            raise RangeError(
                f"pixel ({row}, {column}) is outside the {self.width}x{self.height} raster"
            )

        r, c = row * 2, column * 2
        total = (self.underlying.get_pixel(r, c)
                 + self.underlying.get_pixel(r, c + 1)
                 + self.underlying.get_pixel(r + 1, c)
                 + self.underlying.get_pixel(r + 1, c + 1))

        # Round half up.
        return int(math.floor(total / 4 + 0.5))

    def render(self, raytracer: Raytracer) -> Raster:
        self.underlying.render(raytracer)
        return self

    def __repr__(self) -> str:
        return f"Supersampled({self.underlying!r})"


RASTER_TYPES = {
    'ArrayRaster': ArrayRaster,
    'ParallelRaster': ParallelRaster,
    'ThreadIdRaster': ThreadIdRaster,
}


def make_raster(kind: str = 'ParallelRaster', width: int = DEFAULT_RESOLUTION,
                height: int = DEFAULT_RESOLUTION, thread_count: int = 0,
                supersample: bool = False) -> Raster:
    """Create a raster by name.

    Args:
        kind: 'ArrayRaster', 'ParallelRaster' or 'ThreadIdRaster'
        width: Output width
        height: Output height
        thread_count: Worker count for parallel rasters (0 = auto)
        supersample: Render at twice the resolution and average down

    Returns:
        The raster, wrapped in Supersampled if requested
    """
    if kind not in RASTER_TYPES:
        raise ValueError(f"Unknown raster type: {kind}")

    if supersample:
        width, height = width * 2, height * 2

    if kind == 'ArrayRaster':
        raster = ArrayRaster(width, height)
    else:
        raster = RASTER_TYPES[kind](width, height, thread_count)

    return Supersampled(raster) if supersample else raster

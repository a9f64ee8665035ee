"""Shared fixtures for the monoray tests."""

import pytest

from monoray.raster import Raster
from monoray.scene_parser import parse_scene


class StaticRaster(Raster):
    """A raster with fixed pixel values, given bottom row first."""

    def __init__(self, rows):
        self.rows = rows
        self.rendered = False

    @property
    def width(self):
        return len(self.rows[0])

    @property
    def height(self):
        return len(self.rows)

    def get_pixel(self, row, column):
        return self.rows[row][column]

    def render(self, raytracer):
        self.rendered = True
        return self


@pytest.fixture
def static_raster():
    """Factory for rasters with fixed pixel values."""
    return StaticRaster


@pytest.fixture
def ambient_scene():
    """One fully ambient sphere straight ahead of the camera, no light."""
    return parse_scene([
        "looker [0 0 5] [0 0 0] 2 2",
        "sphere [0 0 -5] 1",
        "ambient 1",
        "diffuse 0",
    ])


@pytest.fixture
def lit_scene():
    """A shaded scene exercising every light model."""
    return parse_scene([
        "looker [0 1 6] [0 0.5 0] 2 2",
        "light [3 6 4]",
        "sphere [-1 0.5 -2] 1",
        "ambient 0.1",
        "diffuse 0.6",
        "specular 0.4 20",
        "sphere [1.5 0.2 -3] 0.8",
        "reflexion 0.5",
        "plane [0 -0.6 0] <0 1 0>",
        "diffuse 0.5",
        "reflexion 0.3",
    ])

"""
Camera module for generating primary rays.

The Looker sits at a camera position and looks at the center of a
rectangular viewport. Normalized viewport coordinates in [-1, 1] map to
the viewport's left/right and bottom/top edges.
"""

from __future__ import annotations
from .errors import ConstructionError, RangeError
from .vec3 import Vector, Point, Y_VECTOR, near
from .ray import Ray


class Looker:
    """A pinhole camera looking through a viewport."""

    def __init__(
        self,
        camera_position: Point,
        viewport_center: Point,
        viewport_width: float,
        viewport_height: float
    ):
        """Create a looker.

        Args:
            camera_position: Camera position in world space
            viewport_center: Center of the viewport the camera looks through
            viewport_width: Width of the viewport, must be positive
            viewport_height: Height of the viewport, must be positive

        Raises:
            ConstructionError: If the geometry is degenerate
        """
        if camera_position == viewport_center:
            raise ConstructionError("camera_position equals viewport_center.")
        if viewport_width <= 0:
            raise ConstructionError(f"viewport_width must be positive, got {viewport_width}")
        if viewport_height <= 0:
            raise ConstructionError(f"viewport_height must be positive, got {viewport_height}")

        self.camera_position = camera_position
        self.view_vector = camera_position.vector_to(viewport_center)

        # The right vector is undefined when looking straight up or down.
        if near(abs(self.view_vector.normalize().dot(Y_VECTOR)), 1.0):
            raise ConstructionError("view vector is parallel to the y axis.")

        # Cross product order keeps right and up oriented by the right hand rule.
        self.right_vector = self.view_vector.cross(Y_VECTOR).scale(viewport_width / 2)
        self.up_vector = self.right_vector.cross(self.view_vector).scale(viewport_height / 2)

    def primary_ray(self, horizontal: float, vertical: float) -> Ray:
        """Generate the ray through a point of the viewport.

        Args:
            horizontal: Coordinate in [-1, 1] (-1 = left, 1 = right)
            vertical: Coordinate in [-1, 1] (-1 = bottom, 1 = top)

        Returns:
            A ray from the camera through the viewport point
        """
        if abs(horizontal) > 1:
            raise RangeError(f"horizontal must be within -1 and 1, got {horizontal}")
        if abs(vertical) > 1:
            raise RangeError(f"vertical must be within -1 and 1, got {vertical}")

        direction = (
            self.view_vector
            + self.right_vector * horizontal
            + self.up_vector * vertical
        )
        return Ray(self.camera_position, direction)

    def __repr__(self) -> str:
        return f"Looker(position={self.camera_position}, view={self.view_vector})"

"""
Camera module for generating primary rays.

The camera is a pinhole at the origin of its own space looking down -z.
Its inverse view matrix, computed once from a look-at basis, moves camera
space rays into world space.
"""

from __future__ import annotations
import math

from .vec3 import Vec3, Point3
from .ray import Ray
from .transforms import inverse_view_matrix


class Camera:
    """A pinhole camera with a vertical field of view."""

    def __init__(
        self,
        position: Point3 = Point3(5.0, 5.0, 5.0),
        look: Vec3 = Vec3(-1.0, -1.0, -1.0),
        up: Vec3 = Vec3(0.0, 1.0, 0.0),
        height_angle: float = math.radians(45.0)
    ):
        """Create a camera.

        Args:
            position: Camera position in world space
            look: Direction the camera looks in
            up: World up vector (usually (0, 1, 0))
            height_angle: Vertical field of view in radians
        """
        self.position = position
        self.look = look
        self.up = up
        self.height_angle = height_angle
        self.inverse_view_matrix = inverse_view_matrix(position, look, up)
        self.inverse_view_matrix.setflags(write=False)

    @classmethod
    def from_focus(cls, position: Point3, focus: Point3, up: Vec3, height_angle: float) -> Camera:
        """Create a camera that looks at a focus point."""
        return cls(position, focus - position, up, height_angle)

    def viewplane_size(self, aspect_ratio: float) -> tuple[float, float]:
        """Width and height of the view plane at depth 1.

        Args:
            aspect_ratio: Image width / height
        """
        height = 2.0 * math.tan(self.height_angle / 2.0)
        return height * aspect_ratio, height

    def get_ray(self, x: float, y: float, viewplane_width: float, viewplane_height: float) -> Ray:
        """Generate a world-space ray through a view plane point.

        Args:
            x: Horizontal view plane coordinate in [-0.5, 0.5] (left to right)
            y: Vertical view plane coordinate in [-0.5, 0.5] (bottom to top)
            viewplane_width: View plane width at depth 1
            viewplane_height: View plane height at depth 1

        Returns:
            Ray from the camera position through that point
        """
        eye = Point3(0.0, 0.0, 0.0)
        direction = Vec3(viewplane_width * x, viewplane_height * y, -1.0).normalize()
        return Ray(eye, direction).transform(self.inverse_view_matrix, False)

    def __repr__(self) -> str:
        return f"Camera(position={self.position}, look={self.look})"

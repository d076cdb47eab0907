"""
Renderer module - the heart of the ray tracer.

Implements:
- Closest-hit tracing against every shape (no acceleration structure)
- Recursive mirror reflection, bounded by MAX_REFLECTION_DEPTH
- Sequential or multi-threaded pixel dispatch with a single image writer
- Optional multi-sample averaging
"""

from __future__ import annotations
import logging
import math
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Tuple

import numpy as np

from .vec3 import Color
from .ray import Ray
from .intersection import Intersection
from .scene import Scene
from .illumination import phong, reflect, to_rgb
from .lights import SELF_INTERSECT_OFFSET

logger = logging.getLogger(__name__)

# Recursion depth at which reflected rays stop being spawned; the camera
# ray is depth 0.
MAX_REFLECTION_DEPTH = 4

BACKGROUND = Color(0.0, 0.0, 0.0)

Pixel = Tuple[int, int, Tuple[int, int, int]]


@dataclass
class RenderSettings:
    """Configuration for the renderer."""
    width: int = 512
    height: int = 384
    enable_shadows: bool = False
    enable_reflections: bool = False
    enable_texture: bool = False
    enable_parallelism: bool = False
    samples: int = 1
    num_threads: int = 0  # 0 = auto-detect

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Image size must be positive, got {self.width}x{self.height}")
        if self.samples < 1:
            raise ValueError(f"Samples per pixel must be at least 1, got {self.samples}")
        if self.num_threads == 0:
            self.num_threads = os.cpu_count() or 4


def subpixel_offsets(samples: int) -> List[Tuple[float, float]]:
    """Offsets within a pixel for each sample, on a regular grid.

    A single sample sits at the pixel corner, like an unsampled render.
    """
    grid = math.ceil(math.sqrt(samples))
    return [((i % grid) / grid, (i // grid) / grid) for i in range(samples)]


class RayTracer:
    """Whitted-style ray tracer for a fixed scene and configuration."""

    def __init__(self, scene: Scene, settings: RenderSettings = None):
        """Create a ray tracer.

        Args:
            scene: The scene to render (read-only during rendering)
            settings: Render configuration (uses defaults if None)
        """
        self.scene = scene
        self.settings = settings if settings else RenderSettings()

        aspect_ratio = self.settings.width / self.settings.height
        self.viewplane_width, self.viewplane_height = scene.camera.viewplane_size(aspect_ratio)
        self._offsets = subpixel_offsets(self.settings.samples)

    def closest_intersection(self, ray: Ray) -> Optional[Intersection]:
        """Find the hit with the smallest t among all shapes, or None."""
        closest = None
        for shape in self.scene.shapes:
            hit = shape.intersect(ray)
            if hit is not None and (closest is None or hit < closest):
                closest = hit
        return closest

    def trace_ray(self, ray: Ray, depth: int = 0) -> Color:
        """Compute the intensity contributed by a ray.

        Args:
            ray: World-space ray
            depth: Number of reflections already followed

        Returns:
            Unclamped RGB intensity
        """
        intersection = self.closest_intersection(ray)
        if intersection is None:
            return BACKGROUND

        color = phong(self.scene, self.settings, intersection, ray)
        material = intersection.material

        if (
            not self.settings.enable_reflections
            or not material.is_reflective
            or depth >= MAX_REFLECTION_DEPTH
        ):
            return color

        reflected_direction = reflect(ray.direction, intersection.normal)
        reflected_ray = Ray(
            ray.at(intersection.t) + reflected_direction * SELF_INTERSECT_OFFSET,
            reflected_direction
        )
        reflected_light = (
            material.reflective
            * self.scene.global_lighting.ks
            * self.trace_ray(reflected_ray, depth + 1)
        )
        return color + reflected_light

    def pixel_ray(self, col: int, row: int, offset: Tuple[float, float] = (0.0, 0.0)) -> Ray:
        """World-space camera ray through a pixel (row 0 is the top)."""
        width = self.settings.width
        height = self.settings.height
        x = (col + offset[0]) / width - 0.5
        y = (height - 1 - row + offset[1]) / height - 0.5
        return self.scene.camera.get_ray(x, y, self.viewplane_width, self.viewplane_height)

    def render_pixel(self, pixel_index: int) -> Pixel:
        """Render one pixel given its row-major index.

        Returns:
            (col, row, rgb) for the image writer
        """
        row, col = divmod(pixel_index, self.settings.width)

        total = Color(0.0, 0.0, 0.0)
        for offset in self._offsets:
            total = total + self.trace_ray(self.pixel_ray(col, row, offset), 0)

        return col, row, to_rgb(total / len(self._offsets))

    def _render_rows(self, rows: Iterable[int]) -> List[Pixel]:
        width = self.settings.width
        return [
            self.render_pixel(row * width + col)
            for row in rows
            for col in range(width)
        ]

    def render(self, progress_callback: Optional[Callable[[], None]] = None) -> np.ndarray:
        """Render the scene.

        Args:
            progress_callback: Called once for every finished pixel

        Returns:
            Image as a uint8 array of shape (height, width, 3)
        """
        width = self.settings.width
        height = self.settings.height
        image = np.zeros((height, width, 3), dtype=np.uint8)

        logger.debug(
            "Rendering %d shapes at %dx%d (parallel=%s)",
            len(self.scene.shapes), width, height, self.settings.enable_parallelism
        )

        def write(pixels: Iterable[Pixel]) -> None:
            for col, row, color in pixels:
                image[row, col] = color
                if progress_callback:
                    progress_callback()

        if self.settings.enable_parallelism and self.settings.num_threads > 1:
            # Workers only compute; this thread is the only one writing pixels.
            with ThreadPoolExecutor(max_workers=self.settings.num_threads) as executor:
                futures = [executor.submit(self._render_rows, [row]) for row in range(height)]
                for future in as_completed(futures):
                    write(future.result())
        else:
            write(self.render_pixel(index) for index in range(width * height))

        logger.debug("Render finished")
        return image


def save_image(image: np.ndarray, filename: str) -> None:
    """Save an 8-bit RGB image; the extension picks the format.

    Args:
        image: uint8 array of shape (height, width, 3)
        filename: Output filename
    """
    from PIL import Image as PILImage

    PILImage.fromarray(image, 'RGB').save(filename)
    logger.debug("Saved image to %s", filename)

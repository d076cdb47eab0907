"""
Texture images for diffuse texture mapping.

Images are decoded once with Pillow into uint8 numpy arrays and looked up
by filename during shading.
"""

from __future__ import annotations
from pathlib import Path
from typing import Dict, Iterable, Iterator, Tuple
import logging
import math

import numpy as np
from PIL import Image

from .vec3 import Color

logger = logging.getLogger(__name__)


class MissingTextureError(KeyError):
    """A material referenced a texture that was never loaded."""
    pass


class TextureImage:
    """A decoded RGB raster."""

    def __init__(self, pixels: np.ndarray, filename: str = '<memory>'):
        """Wrap an already-decoded image.

        Args:
            pixels: uint8 array of shape (height, width, 3), row 0 at the top
            filename: Where the pixels came from (for diagnostics)
        """
        pixels = np.asarray(pixels, dtype=np.uint8)
        if pixels.ndim != 3 or pixels.shape[2] != 3:
            raise ValueError(f"Texture must be an (H, W, 3) array, got shape {pixels.shape}")
        if pixels.shape[0] == 0 or pixels.shape[1] == 0:
            raise ValueError("Texture must have at least one pixel")
        self._pixels = pixels
        self._pixels.setflags(write=False)
        self.filename = filename
        self.height, self.width = pixels.shape[:2]

    @classmethod
    def from_file(cls, filename: str) -> TextureImage:
        """Load a texture from an image file."""
        path = Path(filename)
        if not path.exists():
            raise FileNotFoundError(f"Texture file not found: {filename}")

        with Image.open(path) as img:
            pixels = np.array(img.convert('RGB'), dtype=np.uint8)

        logger.debug("Loaded texture %s (%dx%d)", filename, pixels.shape[1], pixels.shape[0])
        return cls(pixels, str(filename))

    def texel(self, column: int, row: int) -> Color:
        """Color at a pixel as intensities in [0, 1]."""
        pixel = self._pixels[row, column]
        return Color.from_array(pixel / 255.0)

    def sample(self, uv: Tuple[float, float], repeat_u: float = 1.0, repeat_v: float = 1.0) -> Color:
        """Nearest-texel lookup for a UV coordinate.

        UV is scaled by the image size and repeat factors, floored and
        wrapped. The row uses 1 - v because image row 0 is the top.
        """
        u, v = uv
        column = math.floor(u * self.width * repeat_u) % self.width
        row = math.floor((1.0 - v) * self.height * repeat_v) % self.height
        return self.texel(column, row)

    def __repr__(self) -> str:
        return f"TextureImage({self.filename!r}, {self.width}x{self.height})"


class TextureLibrary:
    """Filename-keyed collection of decoded texture images."""

    def __init__(self, images: Dict[str, TextureImage] = None):
        self._images: Dict[str, TextureImage] = dict(images) if images else {}

    @classmethod
    def load(cls, filenames: Iterable[str]) -> TextureLibrary:
        """Decode every distinct file in ``filenames``."""
        library = cls()
        for filename in filenames:
            if filename not in library:
                library.add(filename, TextureImage.from_file(filename))
        return library

    def add(self, filename: str, image: TextureImage) -> None:
        self._images[filename] = image

    def get(self, filename: str) -> TextureImage:
        try:
            return self._images[filename]
        except KeyError:
            raise MissingTextureError(f"Tried to access unloaded texture: {filename}") from None

    def __contains__(self, filename: str) -> bool:
        return filename in self._images

    def __len__(self) -> int:
        return len(self._images)

    def __iter__(self) -> Iterator[str]:
        return iter(self._images)

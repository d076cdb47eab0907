"""
Surface materials for Phong shading.

A material carries ambient, diffuse, specular and reflective colors, a
shininess exponent and an optional texture map.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional

from .vec3 import Color


@dataclass(frozen=True)
class TextureMap:
    """Reference to a texture image and how it is applied.

    Attributes:
        filename: Key of the decoded image in the scene's texture library
        repeat_u: Number of horizontal repetitions across the UV square
        repeat_v: Number of vertical repetitions across the UV square
        blend: Weight of the texel against the diffuse color (0 = none)
    """
    filename: str
    repeat_u: float = 1.0
    repeat_v: float = 1.0
    blend: float = 0.0


def _black() -> Color:
    return Color(0.0, 0.0, 0.0)


def _white() -> Color:
    return Color(1.0, 1.0, 1.0)


@dataclass(frozen=True, eq=False)
class Material:
    """Phong material of a shape."""
    ambient: Color = field(default_factory=_black)
    diffuse: Color = field(default_factory=_white)
    specular: Color = field(default_factory=_black)
    reflective: Color = field(default_factory=_black)
    shininess: float = 0.0
    texture: Optional[TextureMap] = None

    @property
    def is_reflective(self) -> bool:
        """True unless every reflective component is exactly zero."""
        return not self.reflective.is_zero()

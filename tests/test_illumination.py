"""Tests for Phong illumination."""

import math
import pytest
import numpy as np
from whittrace.vec3 import Vec3, Point3, Color
from whittrace.ray import Ray
from whittrace.camera import Camera
from whittrace.materials import Material, TextureMap
from whittrace.primitives import make_sphere, make_cube
from whittrace.shapes import Shape
from whittrace.transforms import identity, translation
from whittrace.lights import PointLight
from whittrace.textures import TextureImage, TextureLibrary, MissingTextureError
from whittrace.scene import Scene, GlobalLightingCoefficients
from whittrace.renderer import RenderSettings
from whittrace.illumination import phong, reflect, clamp_intensity, to_rgb


CAMERA_RAY = Ray(Point3(0, 0, 5), Vec3(0, 0, -1))


def shade(material, lights=(), ka=0.0, kd=0.0, ks=0.0, extra_shapes=(), textures=None, **flags):
    """Shade the front of a unit-diameter sphere hit head-on from +z."""
    ball = Shape(make_sphere(), material, identity())
    scene = Scene(
        GlobalLightingCoefficients(ka=ka, kd=kd, ks=ks),
        Camera(),
        lights=list(lights),
        shapes=[ball, *extra_shapes],
        textures=textures if textures is not None else TextureLibrary()
    )
    settings = RenderSettings(width=4, height=4, **flags)
    return phong(scene, settings, ball.intersect(CAMERA_RAY), CAMERA_RAY)


FRONT_LIGHT = PointLight(Point3(0, 0, 10), Color(1, 1, 1))


class TestPhongTerms:
    """Test the individual Phong terms."""

    def test_ambient_only(self):
        material = Material(ambient=Color(0.2, 0.4, 0.6))
        result = shade(material, [FRONT_LIGHT], ka=1.0)
        assert result == Color(0.2, 0.4, 0.6)

    def test_ambient_scaled_by_ka(self):
        material = Material(ambient=Color(1, 1, 1))
        assert shade(material, ka=0.5) == Color(0.5, 0.5, 0.5)

    def test_diffuse_head_on(self):
        material = Material(diffuse=Color(0.8, 0.2, 0.4))
        assert shade(material, [FRONT_LIGHT], kd=1.0) == Color(0.8, 0.2, 0.4)

    def test_specular_head_on(self):
        material = Material(diffuse=Color(0, 0, 0), specular=Color(1, 1, 1), shininess=10)
        assert shade(material, [FRONT_LIGHT], ks=1.0) == Color(1, 1, 1)

    def test_light_behind_surface(self):
        material = Material(diffuse=Color(1, 1, 1), specular=Color(1, 1, 1), shininess=5)
        back_light = PointLight(Point3(0, 0, -10), Color(1, 1, 1))
        assert shade(material, [back_light], kd=1.0, ks=1.0) == Color(0, 0, 0)

    def test_lights_add_up(self):
        material = Material(diffuse=Color(0.25, 0.25, 0.25))
        result = shade(material, [FRONT_LIGHT, FRONT_LIGHT], kd=1.0)
        assert result == Color(0.5, 0.5, 0.5)

    def test_no_lights(self):
        assert shade(Material(), kd=1.0, ks=1.0) == Color(0, 0, 0)


class TestShadows:
    """Test shadow handling."""

    def test_unshadowed_point_unchanged(self):
        material = Material(ambient=Color(0.1, 0.1, 0.1), diffuse=Color(0.5, 0.5, 0.5))
        without = shade(material, [FRONT_LIGHT], ka=1.0, kd=1.0)
        with_shadows = shade(material, [FRONT_LIGHT], ka=1.0, kd=1.0, enable_shadows=True)
        assert without == with_shadows

    def test_blocked_light_leaves_ambient(self):
        material = Material(ambient=Color(0.1, 0.1, 0.1), diffuse=Color(0.5, 0.5, 0.5))
        blocker = Shape(make_cube(), Material(), translation(Vec3(0, 0, 3)))
        lit = shade(material, [FRONT_LIGHT], ka=1.0, kd=1.0, extra_shapes=[blocker])
        shadowed = shade(
            material, [FRONT_LIGHT], ka=1.0, kd=1.0, extra_shapes=[blocker], enable_shadows=True
        )
        assert lit == Color(0.6, 0.6, 0.6)
        assert shadowed == Color(0.1, 0.1, 0.1)


class TestTextureBlending:
    """Test diffuse texture blending."""

    @pytest.fixture
    def textures(self):
        red = np.zeros((2, 2, 3), dtype=np.uint8)
        red[:, :, 0] = 255
        library = TextureLibrary()
        library.add('red.png', TextureImage(red, 'red.png'))
        return library

    def test_blend_half(self, textures):
        material = Material(
            diffuse=Color(0, 0, 1),
            texture=TextureMap('red.png', blend=0.5)
        )
        result = shade(material, [FRONT_LIGHT], kd=1.0, textures=textures, enable_texture=True)
        assert result == Color(0.5, 0, 0.5)

    def test_texture_disabled_ignores_map(self, textures):
        material = Material(diffuse=Color(0, 0, 1), texture=TextureMap('red.png', blend=0.5))
        result = shade(material, [FRONT_LIGHT], kd=1.0, textures=textures)
        assert result == Color(0, 0, 1)

    def test_texel_not_scaled_by_kd(self, textures):
        material = Material(diffuse=Color(0, 0, 1), texture=TextureMap('red.png', blend=1.0))
        result = shade(material, [FRONT_LIGHT], kd=0.5, textures=textures, enable_texture=True)
        assert result == Color(1, 0, 0)

    def test_missing_texture_raises(self):
        material = Material(texture=TextureMap('nowhere.png', blend=0.5))
        with pytest.raises(MissingTextureError):
            shade(material, [FRONT_LIGHT], kd=1.0, enable_texture=True)


class TestReflect:
    """Test mirror reflection."""

    def test_reflect_normalizes(self):
        r = reflect(Vec3(1, -1, 0), Vec3(0, 1, 0))
        assert r == Vec3(1, 1, 0).normalize()

    def test_head_on_reverses(self):
        assert reflect(Vec3(0, 0, -1), Vec3(0, 0, 1)) == Vec3(0, 0, 1)


class TestClamp:
    """Test conversion to 8-bit channels."""

    @pytest.mark.parametrize("intensity,expected", [
        (-0.5, 0),
        (0.0, 0),
        (0.5, 127),
        (1.0, 255),
        (1.5, 255),
        (math.nan, 0),
    ])
    def test_clamp_intensity(self, intensity, expected):
        assert clamp_intensity(intensity) == expected

    def test_to_rgb(self):
        assert to_rgb(Color(0.25, 0.5, 2.0)) == (63, 127, 255)

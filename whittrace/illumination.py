"""
Phong illumination with shadows and texture mapping.

The color at a hit point is the material's ambient color plus, for every
light that can see the point, the light's intensity times the sum of a
diffuse and a specular term.
"""

from __future__ import annotations
from typing import Tuple, TYPE_CHECKING

from .vec3 import Vec3, Color
from .ray import Ray
from .intersection import Intersection

if TYPE_CHECKING:
    from .scene import Scene
    from .renderer import RenderSettings


def reflect(direction: Vec3, normal: Vec3) -> Vec3:
    """Mirror a direction about a normal and return it as a unit vector."""
    return direction.reflect(normal).normalize()


def phong(scene: Scene, settings: RenderSettings, intersection: Intersection, ray: Ray) -> Color:
    """Compute the Phong illumination at a point of intersection.

    Args:
        scene: The scene being rendered (lights, shapes, textures)
        settings: Render settings; shadows and texture mapping are optional
        intersection: The closest world-space hit of ``ray``
        ray: The incident ray

    Returns:
        Unclamped RGB intensity
    """
    coefficients = scene.global_lighting
    material = intersection.material

    illumination = material.ambient * coefficients.ka

    point = ray.at(intersection.t)
    normal = intersection.normal
    to_camera = (-ray.direction).normalize()

    use_texture = settings.enable_texture and material.texture is not None
    if use_texture:
        texture = material.texture
        texel = scene.textures.get(texture.filename).sample(
            intersection.uv, texture.repeat_u, texture.repeat_v
        )
        diffuse_color = material.diffuse * ((1.0 - texture.blend) * coefficients.kd) + texel * texture.blend
    else:
        diffuse_color = material.diffuse * coefficients.kd

    for light in scene.lights:
        if settings.enable_shadows and not light.is_visible(point, scene.shapes):
            continue

        light_to_point = light.direction_to_point(point)

        diffuse_angle = max(0.0, normal.dot(-light_to_point))
        diffuse = diffuse_color * diffuse_angle

        mirror_direction = reflect(light_to_point, normal)
        specular_angle = mirror_direction.dot(to_camera)
        if specular_angle < 0:
            specular_angle = 0.0
        else:
            specular_angle = specular_angle ** material.shininess
        specular = material.specular * (coefficients.ks * specular_angle)

        illumination = illumination + light.intensity_at(point) * (diffuse + specular)

    return illumination


def clamp_intensity(intensity: float) -> int:
    """Scale an intensity in [0, 1] onto 0-255, clamping outside values.

    NaN is treated as no light.
    """
    if not intensity > 0:
        return 0
    if intensity >= 1:
        return 255
    return int(255.0 * intensity)


def to_rgb(intensity: Color) -> Tuple[int, int, int]:
    """Convert an RGB intensity vector into an 8-bit triple."""
    return (
        clamp_intensity(intensity.r),
        clamp_intensity(intensity.g),
        clamp_intensity(intensity.b),
    )

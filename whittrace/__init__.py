"""
whittrace - A Python Whitted-style Ray Tracer

Renders scenes built from canonical primitives (cube, cylinder, cone,
sphere) with:
- Exact analytic ray/surface intersection
- Phong illumination from point, directional and spot lights
- Hard shadows
- Recursive mirror reflection
- Texture mapping
- Multi-threaded pixel dispatch
"""

__version__ = "0.1.0"

from .vec3 import Vec3, Point3, Color
from .ray import Ray
from .intersection import ComponentIntersection, Intersection
from .components import (
    PrimitiveComponent, Square, Circle, Sphere, CylinderBody, ConeBody, solve_quadratic
)
from .primitives import Primitive, PrimitiveType, PrimitiveSet
from .materials import Material, TextureMap
from .shapes import Shape
from .textures import TextureImage, TextureLibrary, MissingTextureError
from .lights import (
    Light, PointLight, DirectionalLight, SpotLight,
    attenuation_over_distance, SELF_INTERSECT_OFFSET
)
from .illumination import phong, reflect, to_rgb, clamp_intensity
from .camera import Camera
from .scene import (
    Scene, SceneGraph, SceneNode, ScenePrimitive, SceneGraphError,
    GlobalLightingCoefficients, Translate, Scale, Rotate, MatrixTransform, flatten
)
from .renderer import RayTracer, RenderSettings, MAX_REFLECTION_DEPTH, save_image
from .scene_parser import SceneParser, SceneParseError, load_scene, parse_scene

"""
Scene description language parser.

Supports a YAML (or JSON) scene description with:
- Global lighting coefficients
- Camera configuration
- Lights
- Named object trees built from transblocks, with shared sub-trees

Example scene file:
```yaml
global:
  ka: 0.5
  kd: 0.5
  ks: 0.5

camera:
  position: [0, 0, 5]
  look: [0, 0, -1]        # or `focus: [0, 0, 0]`
  up: [0, 1, 0]
  heightangle: 45         # degrees

lights:
  - type: point
    color: [1, 1, 1]
    position: [3, 3, 3]
    function: [1, 0, 0]   # attenuation c0, c1, c2

  - type: spot
    position: [0, 4, 0]
    direction: [0, -1, 0]
    angle: 30             # degrees
    penumbra: 5           # degrees

objects:
  ball:
    - children:
        - primitive: sphere
          diffuse: [1, 0, 0]
          specular: [1, 1, 1]
          shininess: 20
          texture: {file: marble.png, u: 2, v: 1}
          blend: 0.5

  root:
    - transforms:
        - translate: [-1, 0, 0]
      children:
        - master: ball
    - transforms:
        - translate: [1, 0, 0]
        - rotate: {axis: [0, 1, 0], angle: 45}
        - scale: [1, 2, 1]
      children:
        - master: ball
        - tree:
            - children:
                - primitive: cube
                  reflective: [0.5, 0.5, 0.5]
```
"""

from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, List, Optional, Set
import json
import logging
import math

import numpy as np
import yaml

from .vec3 import Vec3, Color
from .camera import Camera
from .lights import Light, PointLight, DirectionalLight, SpotLight
from .materials import Material, TextureMap
from .primitives import PrimitiveType
from .textures import TextureLibrary
from .scene import (
    Scene, SceneGraph, SceneNode, ScenePrimitive, GlobalLightingCoefficients,
    Translate, Scale, Rotate, MatrixTransform
)

logger = logging.getLogger(__name__)

ROOT_OBJECT = 'root'


class SceneParseError(Exception):
    """Error during scene parsing."""
    pass


class SceneParser:
    """Parser for scene description files."""

    def __init__(self, texture_dir: Optional[str] = None):
        """
        Args:
            texture_dir: Directory texture filenames are relative to
                (defaults to the scene file's directory, or the current
                directory when parsing a dictionary)
        """
        self.texture_dir = Path(texture_dir) if texture_dir is not None else None
        self.graph = SceneGraph()
        self.objects: Dict[str, int] = {}
        self.lights: List[Light] = []
        self.camera: Optional[Camera] = None
        self.global_lighting: Optional[GlobalLightingCoefficients] = None
        self._texture_files: List[str] = []

    def parse_file(self, filepath: str) -> Scene:
        """Parse a scene file.

        Args:
            filepath: Path to the scene file (YAML or JSON)

        Returns:
            The flattened scene, with referenced textures loaded
        """
        path = Path(filepath)
        if not path.exists():
            raise SceneParseError(f"Scene file not found: {filepath}")

        content = path.read_text()

        if path.suffix == '.json':
            try:
                data = json.loads(content)
            except json.JSONDecodeError as e:
                raise SceneParseError(f"Invalid JSON in {filepath}: {e}") from e
        else:
            try:
                data = yaml.safe_load(content)
            except yaml.YAMLError as e:
                raise SceneParseError(f"Invalid YAML in {filepath}: {e}") from e

        if self.texture_dir is None:
            self.texture_dir = path.parent

        logger.debug("Parsing scene file %s", filepath)
        return self.parse_dict(data)

    def parse_dict(self, data: Dict[str, Any]) -> Scene:
        """Parse a scene from a dictionary.

        Args:
            data: Scene description dictionary

        Returns:
            The flattened scene, with referenced textures loaded
        """
        if not isinstance(data, dict):
            raise SceneParseError("Scene description must be a mapping")

        for key in data:
            if key not in ('global', 'camera', 'lights', 'objects'):
                raise SceneParseError(f"Unknown scene section: {key}")

        if 'global' not in data:
            raise SceneParseError("Scene must have a 'global' section")
        if 'camera' not in data:
            raise SceneParseError("Scene must have a 'camera' section")

        self.global_lighting = self._parse_global(data['global'])
        self.camera = self._parse_camera(data['camera'])

        for light_data in data.get('lights') or []:
            self.lights.append(self._parse_light(light_data))

        objects_data = data.get('objects') or {}
        if not isinstance(objects_data, dict):
            raise SceneParseError("'objects' must map object names to transblock lists")
        for name, body in objects_data.items():
            self._parse_object(name, body)

        if ROOT_OBJECT not in self.objects:
            raise SceneParseError("Scene must have a root object")

        textures = TextureLibrary.load(self._texture_files)

        return Scene.from_graph(
            self.graph,
            self.objects[ROOT_OBJECT],
            global_lighting=self.global_lighting,
            camera=self.camera,
            lights=self.lights,
            textures=textures
        )

    def _parse_vec3(self, data: Any) -> Vec3:
        """Parse a Vec3 from a list or an x/y/z mapping."""
        if isinstance(data, (list, tuple)):
            if len(data) != 3:
                raise SceneParseError(f"Vec3 must have 3 components, got {len(data)}")
            return Vec3(*(self._parse_float(c) for c in data))
        elif isinstance(data, dict):
            return Vec3(
                self._parse_float(data.get('x', 0)),
                self._parse_float(data.get('y', 0)),
                self._parse_float(data.get('z', 0))
            )
        else:
            raise SceneParseError(f"Cannot parse Vec3 from: {data}")

    def _parse_color(self, data: Any) -> Color:
        """Parse a Color from a list or an r/g/b mapping."""
        if isinstance(data, dict) and any(k in data for k in ('r', 'g', 'b')):
            return Color(
                self._parse_float(data.get('r', 0)),
                self._parse_float(data.get('g', 0)),
                self._parse_float(data.get('b', 0))
            )
        return self._parse_vec3(data)

    @staticmethod
    def _require_mapping(data: Any, what: str) -> Dict[str, Any]:
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise SceneParseError(f"{what} must be a mapping, got: {data}")
        return data

    @staticmethod
    def _parse_float(value: Any) -> float:
        if isinstance(value, bool):
            raise SceneParseError(f"Expected a number, got: {value}")
        try:
            return float(value)
        except (TypeError, ValueError):
            raise SceneParseError(f"Expected a number, got: {value}") from None

    def _parse_global(self, data: Dict[str, Any]) -> GlobalLightingCoefficients:
        """Parse the global lighting coefficients."""
        data = self._require_mapping(data, "Global lighting")
        for key in data:
            if key not in ('ka', 'kd', 'ks'):
                raise SceneParseError(f"Unknown global lighting coefficient: {key}")
        return GlobalLightingCoefficients(
            ka=self._parse_float(data.get('ka', 0.5)),
            kd=self._parse_float(data.get('kd', 0.5)),
            ks=self._parse_float(data.get('ks', 0.5))
        )

    def _parse_camera(self, data: Dict[str, Any]) -> Camera:
        """Parse the camera section."""
        data = self._require_mapping(data, "Camera")
        for key in data:
            if key in ('aperture', 'focallength'):
                logger.warning("Ignoring unsupported camera setting: %s", key)
            elif key not in ('position', 'look', 'focus', 'up', 'heightangle'):
                raise SceneParseError(f"Unknown camera setting: {key}")

        if 'look' in data and 'focus' in data:
            raise SceneParseError("Camera cannot have both focus and look")

        position = self._parse_vec3(data.get('position', [5, 5, 5]))
        up = self._parse_vec3(data.get('up', [0, 1, 0]))
        height_angle = math.radians(self._parse_float(data.get('heightangle', 45)))

        if 'focus' in data:
            return Camera.from_focus(position, self._parse_vec3(data['focus']), up, height_angle)

        look = self._parse_vec3(data.get('look', [-1, -1, -1]))
        return Camera(position, look, up, height_angle)

    def _parse_light(self, data: Dict[str, Any]) -> Light:
        """Parse one light."""
        data = self._require_mapping(data, "Light")
        allowed = ('type', 'id', 'color', 'function', 'position', 'direction', 'angle', 'penumbra')
        for key in data:
            if key not in allowed:
                raise SceneParseError(f"Unknown light setting: {key}")

        light_type = str(data.get('type', 'point')).lower()
        color = self._parse_color(data.get('color', [1, 1, 1]))
        attenuation = self._parse_vec3(data.get('function', [1, 0, 0]))

        if light_type == 'directional':
            for forbidden in ('position', 'penumbra', 'angle'):
                if forbidden in data:
                    raise SceneParseError(f"Directional light cannot have {forbidden}")
            direction = self._parse_vec3(data.get('direction', [0, 0, 0]))
            return DirectionalLight(direction, color, attenuation)

        if light_type == 'point':
            for forbidden in ('direction', 'penumbra', 'angle'):
                if forbidden in data:
                    raise SceneParseError(f"Point light cannot have {forbidden}")
            position = self._parse_vec3(data.get('position', [3, 3, 3]))
            return PointLight(position, color, attenuation)

        if light_type == 'spot':
            return SpotLight(
                position=self._parse_vec3(data.get('position', [3, 3, 3])),
                direction=self._parse_vec3(data.get('direction', [0, 0, 0])),
                color=color,
                angle=math.radians(self._parse_float(data.get('angle', 0))),
                penumbra=math.radians(self._parse_float(data.get('penumbra', 0))),
                attenuation=attenuation
            )

        raise SceneParseError(f"Unknown light type: {light_type}")

    def _parse_object(self, name: str, body: Any) -> None:
        """Parse a named top-level object tree."""
        if name in self.objects:
            raise SceneParseError(f"Cannot have two objects with the same name: {name}")

        node = self.graph.add_node()
        self.objects[name] = node
        self._parse_object_body(body, node, {name})

    def _parse_object_body(self, body: Any, parent: int, enclosing: Set[str]) -> None:
        """Parse a list of transblocks into children of ``parent``."""
        if not isinstance(body, list):
            raise SceneParseError("An object must be a list of transblocks")

        for transblock in body:
            child = self.graph.add_node()
            self.graph.add_child(parent, child)
            self._parse_transblock(transblock, child, enclosing)

    def _parse_transblock(self, data: Any, node: int, enclosing: Set[str]) -> None:
        """Parse one transblock: its transformations and children."""
        if not isinstance(data, dict):
            raise SceneParseError(f"Invalid transblock: {data}")
        for key in data:
            if key not in ('transforms', 'children'):
                raise SceneParseError(f"Cannot have '{key}' in a transblock")

        scene_node: SceneNode = self.graph[node]

        for transform in data.get('transforms') or []:
            scene_node.transformations.append(self._parse_transformation(transform))

        for child in data.get('children') or []:
            if not isinstance(child, dict):
                raise SceneParseError(f"Invalid transblock child: {child}")

            if 'master' in child:
                master = child['master']
                if not isinstance(master, str):
                    raise SceneParseError(f"Master reference must be a name, got: {master}")
                if master in enclosing:
                    raise SceneParseError(f"Object {master} cannot reference itself")
                if master not in self.objects:
                    raise SceneParseError(f"Unknown master object: {master}")
                self.graph.add_child(node, self.objects[master])
            elif 'tree' in child:
                self._parse_object_body(child['tree'], node, enclosing)
            elif 'primitive' in child:
                scene_node.primitives.append(self._parse_primitive(child))
            else:
                raise SceneParseError(f"Unknown transblock child: {child}")

    def _parse_transformation(self, data: Any):
        """Parse a single translate/rotate/scale/matrix entry."""
        if not isinstance(data, dict) or len(data) != 1:
            raise SceneParseError(f"A transformation must have exactly one key, got: {data}")

        (kind, value), = data.items()

        if kind == 'translate':
            return Translate(self._parse_vec3(value))
        if kind == 'scale':
            return Scale(self._parse_vec3(value))
        if kind == 'rotate':
            if not isinstance(value, dict) or 'axis' not in value or 'angle' not in value:
                raise SceneParseError("Rotation needs an 'axis' and an 'angle'")
            return Rotate(
                self._parse_vec3(value['axis']),
                math.radians(self._parse_float(value['angle']))
            )
        if kind == 'matrix':
            try:
                values = np.array(value, dtype=np.float64)
            except (TypeError, ValueError):
                raise SceneParseError(f"Cannot parse matrix from: {value}") from None
            if values.shape != (4, 4):
                raise SceneParseError(f"Matrix must be 4x4, got shape {values.shape}")
            return MatrixTransform(values)

        raise SceneParseError(f"Unknown transformation: {kind}")

    def _parse_primitive(self, data: Dict[str, Any]) -> ScenePrimitive:
        """Parse a primitive and its inline material."""
        allowed = (
            'primitive', 'ambient', 'diffuse', 'specular', 'reflective',
            'shininess', 'texture', 'blend'
        )
        for key in data:
            if key not in allowed:
                raise SceneParseError(f"Cannot have '{key}' in a primitive")

        try:
            primitive_type = PrimitiveType(str(data['primitive']).lower())
        except ValueError:
            raise SceneParseError(f"Unsupported primitive type: {data['primitive']}") from None

        texture = None
        if 'texture' in data:
            texture = self._parse_texture_map(data['texture'], data.get('blend', 0.0))

        material = Material(
            ambient=self._parse_color(data.get('ambient', [0, 0, 0])),
            diffuse=self._parse_color(data.get('diffuse', [1, 1, 1])),
            specular=self._parse_color(data.get('specular', [0, 0, 0])),
            reflective=self._parse_color(data.get('reflective', [0, 0, 0])),
            shininess=self._parse_float(data.get('shininess', 0)),
            texture=texture
        )
        return ScenePrimitive(primitive_type, material)

    def _parse_texture_map(self, data: Any, blend: Any) -> TextureMap:
        """Parse a texture reference, resolving it against the texture directory."""
        if isinstance(data, str):
            data = {'file': data}
        if not isinstance(data, dict) or 'file' not in data:
            raise SceneParseError(f"Texture needs a 'file': {data}")

        base = self.texture_dir if self.texture_dir is not None else Path('.')
        filename = str(base / data['file'])
        self._texture_files.append(filename)

        return TextureMap(
            filename=filename,
            repeat_u=self._parse_float(data.get('u', 1.0)),
            repeat_v=self._parse_float(data.get('v', 1.0)),
            blend=self._parse_float(blend)
        )


def load_scene(filepath: str, texture_dir: Optional[str] = None) -> Scene:
    """Convenience function to load a scene file.

    Args:
        filepath: Path to the scene file
        texture_dir: Directory texture filenames are relative to

    Returns:
        The flattened scene
    """
    parser = SceneParser(texture_dir)
    return parser.parse_file(filepath)


def parse_scene(data: Dict[str, Any], texture_dir: Optional[str] = None) -> Scene:
    """Convenience function to parse a scene from a dictionary.

    Args:
        data: Scene description dictionary
        texture_dir: Directory texture filenames are relative to

    Returns:
        The flattened scene
    """
    parser = SceneParser(texture_dir)
    return parser.parse_dict(data)

"""
Scene description and scene graph flattening.

The scene graph is a DAG: named sub-trees may be referenced by several
parents. Nodes live in one arena (``SceneGraph``) and refer to their
children by index. Before rendering the graph is walked once, accumulating
the cumulative transformation matrix (CTM), and turned into the flat list
of Shapes the renderer consumes.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Set
import logging

import numpy as np

from .vec3 import Vec3
from .camera import Camera
from .lights import Light
from .materials import Material
from .primitives import PrimitiveSet, PrimitiveType
from .shapes import Shape
from .textures import TextureLibrary
from . import transforms

logger = logging.getLogger(__name__)


class SceneGraphError(Exception):
    """Error in the structure of a scene graph."""
    pass


@dataclass(frozen=True)
class GlobalLightingCoefficients:
    """Scalar weights applied to every ambient, diffuse and specular term."""
    ka: float = 0.5
    kd: float = 0.5
    ks: float = 0.5


class Transformation(ABC):
    """One step of a node's transformation list."""

    @abstractmethod
    def matrix(self) -> np.ndarray:
        pass


@dataclass(frozen=True)
class Translate(Transformation):
    offset: Vec3

    def matrix(self) -> np.ndarray:
        return transforms.translation(self.offset)


@dataclass(frozen=True)
class Scale(Transformation):
    factors: Vec3

    def matrix(self) -> np.ndarray:
        return transforms.scaling(self.factors)


@dataclass(frozen=True)
class Rotate(Transformation):
    """Rotation about an axis; angle in radians."""
    axis: Vec3
    angle: float

    def matrix(self) -> np.ndarray:
        return transforms.rotation(self.axis, self.angle)


@dataclass(frozen=True, eq=False)
class MatrixTransform(Transformation):
    """An explicit 4x4 matrix."""
    values: np.ndarray

    def matrix(self) -> np.ndarray:
        return np.array(self.values, dtype=np.float64)


@dataclass
class ScenePrimitive:
    """A primitive placed in the graph together with its material."""
    primitive_type: PrimitiveType
    material: Material


@dataclass
class SceneNode:
    """A graph node: transformations, attached primitives, child indices."""
    transformations: List[Transformation] = field(default_factory=list)
    primitives: List[ScenePrimitive] = field(default_factory=list)
    children: List[int] = field(default_factory=list)

    def local_matrix(self) -> np.ndarray:
        """Compose the node's transformations in listed order."""
        m = transforms.identity()
        for transformation in self.transformations:
            m = m @ transformation.matrix()
        return m


class SceneGraph:
    """Arena holding every node of a scene graph."""

    def __init__(self):
        self.nodes: List[SceneNode] = []

    def add_node(self, node: Optional[SceneNode] = None) -> int:
        """Add a node and return its index."""
        self.nodes.append(node if node is not None else SceneNode())
        return len(self.nodes) - 1

    def add_child(self, parent: int, child: int) -> None:
        self.nodes[parent].children.append(child)

    def __getitem__(self, index: int) -> SceneNode:
        return self.nodes[index]

    def __len__(self) -> int:
        return len(self.nodes)


def flatten(graph: SceneGraph, root: int, primitives: PrimitiveSet) -> List[Shape]:
    """Turn a scene graph into world-space shapes.

    Every path from the root to a primitive yields one Shape, so a shared
    sub-tree is instanced once per reference. Each node's transformations
    are applied after its parent's CTM.

    Args:
        graph: The scene graph
        root: Index of the root node
        primitives: Canonical primitives to share among shapes

    Returns:
        Flat list of shapes in traversal order

    Raises:
        SceneGraphError: If a node is (indirectly) its own descendant
    """
    shapes: List[Shape] = []
    on_path: Set[int] = set()

    def visit(index: int, parent_ctm: np.ndarray) -> None:
        if index in on_path:
            raise SceneGraphError(f"Scene graph contains a cycle through node {index}")
        on_path.add(index)

        node = graph[index]
        ctm = parent_ctm @ node.local_matrix()

        for placed in node.primitives:
            shapes.append(Shape(primitives.get(placed.primitive_type), placed.material, ctm))

        for child in node.children:
            visit(child, ctm)

        on_path.discard(index)

    visit(root, transforms.identity())
    logger.debug("Flattened scene graph into %d shapes", len(shapes))
    return shapes


@dataclass
class Scene:
    """Everything the renderer needs, fixed for the duration of a render."""
    global_lighting: GlobalLightingCoefficients
    camera: Camera
    lights: Sequence[Light] = field(default_factory=list)
    shapes: Sequence[Shape] = field(default_factory=list)
    textures: TextureLibrary = field(default_factory=TextureLibrary)

    def __post_init__(self):
        self.lights = tuple(self.lights)
        self.shapes = tuple(self.shapes)

    @classmethod
    def from_graph(
        cls,
        graph: SceneGraph,
        root: int,
        global_lighting: GlobalLightingCoefficients,
        camera: Camera,
        lights: Sequence[Light] = (),
        textures: Optional[TextureLibrary] = None
    ) -> Scene:
        """Build a scene by flattening a graph with a fresh primitive set."""
        shapes = flatten(graph, root, PrimitiveSet())
        return cls(
            global_lighting=global_lighting,
            camera=camera,
            lights=lights,
            shapes=shapes,
            textures=textures if textures is not None else TextureLibrary()
        )

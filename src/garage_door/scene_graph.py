"""
Minimal scene graph handed to the renderer.

A Node carries a local transform, child nodes and renderable primitives
(mesh + material + flags). The engine only assigns material references;
it never creates or frees them.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterator, List, Optional, Tuple

import numpy as np
import trimesh
from trimesh.visual.material import Material

logger = logging.getLogger(__name__)


@dataclass
class Primitive:
    """A solid with the material reference it should be drawn with.

    Attributes:
        name: Identifier unique within its parent node.
        mesh: Geometry in the owning node's local frame.
        material: Opaque material handle from the caller's MaterialSet.
        role: Which part of the door this is (frame, roundover, ...).
        cast_shadow: Renderer hint.
        receive_shadow: Renderer hint.
        unlit: Draw without lighting (shadow planes).
    """
    name: str
    mesh: trimesh.Trimesh
    material: Any = None
    role: str = ""
    cast_shadow: bool = False
    receive_shadow: bool = True
    unlit: bool = False


class Node:
    """Group node with a 4x4 local transform."""

    def __init__(self, name: str = "", transform: Optional[np.ndarray] = None):
        self.name = name
        self.transform = np.eye(4) if transform is None else np.asarray(transform, dtype=float)
        self.children: List["Node"] = []
        self.primitives: List[Primitive] = []
        self.parent: Optional["Node"] = None

    def add(self, child: "Node") -> "Node":
        """Attach a child node, detaching it from any previous parent."""
        if child.parent is not None:
            child.parent.children.remove(child)
        child.parent = self
        self.children.append(child)
        return child

    def add_primitive(self, primitive: Primitive) -> Primitive:
        self.primitives.append(primitive)
        return primitive

    @property
    def position(self) -> np.ndarray:
        return self.transform[:3, 3].copy()

    def set_position(self, x: float, y: float, z: float) -> "Node":
        self.transform[:3, 3] = (x, y, z)
        return self

    def translate(self, x: float, y: float, z: float) -> "Node":
        self.transform[:3, 3] += (x, y, z)
        return self

    def traverse(self, parent_matrix: Optional[np.ndarray] = None) -> Iterator[Tuple[Primitive, np.ndarray]]:
        """Yield (primitive, world_matrix) for every primitive below this node."""
        world = self.transform if parent_matrix is None else parent_matrix @ self.transform
        for primitive in self.primitives:
            yield primitive, world
        for child in self.children:
            yield from child.traverse(world)

    def iter_primitives(self, role: Optional[str] = None) -> Iterator[Primitive]:
        for primitive, _ in self.traverse():
            if role is None or primitive.role == role:
                yield primitive

    def bounds(self) -> Optional[np.ndarray]:
        """World-space AABB as [[min_x, min_y, min_z], [max_x, max_y, max_z]].

        Returns None when the node holds no geometry.
        """
        lo = np.full(3, np.inf)
        hi = np.full(3, -np.inf)
        found = False
        for primitive, world in self.traverse():
            if len(primitive.mesh.vertices) == 0:
                continue
            pts = trimesh.transformations.transform_points(primitive.mesh.vertices, world)
            lo = np.minimum(lo, pts.min(axis=0))
            hi = np.maximum(hi, pts.max(axis=0))
            found = True
        if not found:
            return None
        return np.array([lo, hi])

    @property
    def vertex_count(self) -> int:
        return sum(len(p.mesh.vertices) for p, _ in self.traverse())

    @property
    def primitive_count(self) -> int:
        return sum(1 for _ in self.traverse())

    def dispose(self) -> None:
        """Drop every primitive and child so their buffers can be released."""
        released = 0
        for child in self.children:
            released += child.primitive_count
            child.dispose()
            child.parent = None
        released += len(self.primitives)
        self.children.clear()
        self.primitives.clear()
        if released:
            logger.debug("Disposed %d primitives from node %r", released, self.name)

    def to_trimesh_scene(self) -> trimesh.Scene:
        """Flatten into a trimesh.Scene for export (GLB/OBJ/STL).

        Materials that are trimesh materials are attached to the exported
        geometry; other handles are left to the caller's renderer.
        """
        scene = trimesh.Scene()
        for i, (primitive, world) in enumerate(self.traverse()):
            mesh = primitive.mesh.copy()
            uv = getattr(mesh.visual, "uv", None)
            if isinstance(primitive.material, Material):
                mesh.visual = trimesh.visual.TextureVisuals(uv=uv, material=primitive.material)
            name = f"{i:04d}_{primitive.role or 'part'}_{primitive.name}"
            scene.add_geometry(mesh, node_name=name, geom_name=name, transform=world)
        return scene

"""Tests for the scene graph nodes and export."""

import numpy as np
import pytest
import trimesh

from garage_door.extrusion import flat_box
from garage_door.materials import make_material_set
from garage_door.scene_graph import Node, Primitive


def _box_node(name, x=0.0, y=0.0, z=0.0, material=None, role="part"):
    node = Node(name=name).set_position(x, y, z)
    node.add_primitive(Primitive(name=name, mesh=flat_box(1.0, 1.0, 1.0), material=material, role=role))
    return node


class TestNode:
    def test_bounds_compose_transforms(self):
        root = Node("root").set_position(10.0, 0.0, 0.0)
        child = root.add(_box_node("a", x=1.0))
        child.add(_box_node("b", y=2.0))
        bounds = root.bounds()
        assert bounds[0] == pytest.approx([10.5, -0.5, -0.5])
        assert bounds[1] == pytest.approx([11.5, 2.5, 0.5])

    def test_empty_bounds_is_none(self):
        assert Node("empty").bounds() is None

    def test_add_reparents(self):
        a, b = Node("a"), Node("b")
        child = a.add(Node("c"))
        b.add(child)
        assert child.parent is b
        assert a.children == []

    def test_iter_primitives_by_role(self):
        root = Node("root")
        root.add(_box_node("a", role="frame"))
        root.add(_box_node("b", role="shadow"))
        assert [p.name for p in root.iter_primitives("shadow")] == ["b"]
        assert root.primitive_count == 2
        assert root.vertex_count == 16

    def test_translate(self):
        node = Node("n").set_position(1.0, 2.0, 3.0).translate(1.0, 1.0, 1.0)
        assert node.position == pytest.approx([2.0, 3.0, 4.0])

    def test_dispose_releases_everything(self):
        root = Node("root")
        child = root.add(_box_node("a"))
        root.dispose()
        assert root.children == []
        assert root.primitive_count == 0
        assert child.parent is None
        assert child.primitives == []


class TestTrimeshScene:
    def test_export_places_geometry(self):
        root = Node("root")
        root.add(_box_node("a", x=3.0, material=make_material_set().base, role="frame"))
        scene = root.to_trimesh_scene()
        assert len(scene.geometry) == 1
        assert np.allclose(scene.bounds, [[2.5, -0.5, -0.5], [3.5, 0.5, 0.5]])

    def test_export_attaches_trimesh_materials(self):
        material = make_material_set().base
        root = _box_node("a", material=material)
        scene = root.to_trimesh_scene()
        geometry = next(iter(scene.geometry.values()))
        assert geometry.visual.material is material

    def test_opaque_handles_are_not_exported(self):
        root = _box_node("a", material="renderer-handle")
        scene = root.to_trimesh_scene()
        geometry = next(iter(scene.geometry.values()))
        assert isinstance(geometry.visual, trimesh.visual.TextureVisuals)

    def test_glb_roundtrip(self, tmp_path):
        root = _box_node("a", material=make_material_set().base)
        path = tmp_path / "door.glb"
        root.to_trimesh_scene().export(file_obj=str(path))
        loaded = trimesh.load(str(path))
        assert np.allclose(loaded.bounds, [[-0.5, -0.5, -0.5], [0.5, 0.5, 0.5]])

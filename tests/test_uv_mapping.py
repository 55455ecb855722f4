"""Tests for door-relative UV remapping."""

import numpy as np
import pytest
import trimesh
from trimesh.visual.material import SimpleMaterial

from garage_door.contracts import ExtrusionSpec, Rect
from garage_door.extrusion import extrude
from garage_door.profiles import rect_profile
from garage_door.uv_mapping import door_uv, remap_uv


class TestDoorUV:
    def test_door_corners(self):
        uv = door_uv(np.array([[-8.0, -3.5], [8.0, 3.5]]), 0.0, 0.0, 16.0, 7.0)
        assert uv == pytest.approx(np.array([[0.0, 0.0], [1.0, 1.0]]))

    def test_offset_shifts_into_door_space(self):
        uv = door_uv(np.array([0.0, 0.0]), -4.0, 1.75, 16.0, 7.0)
        assert uv == pytest.approx([0.25, 0.75])

    def test_shared_world_point_gets_same_uv(self):
        # The same door point seen from two panels with different local frames
        a = door_uv(np.array([1.0, 0.2]), -2.0, 0.5, 16.0, 7.0)
        b = door_uv(np.array([-0.5, -0.3]), -0.5, 1.0, 16.0, 7.0)
        assert a == pytest.approx(b)


class TestRemapUV:
    def test_remap_in_place(self):
        mesh = extrude(rect_profile(Rect(0, 0, 2.0, 1.0)), ExtrusionSpec(depth=0.1))
        result = remap_uv(mesh, 2.0, 1.0, 3.0, -1.0, 16.0, 7.0)
        assert result is mesh
        uv = np.asarray(mesh.visual.uv)
        lo, hi = uv.min(axis=0), uv.max(axis=0)
        assert lo == pytest.approx([(2.0 + 8.0) / 16.0, (-1.5 + 3.5) / 7.0])
        assert hi == pytest.approx([(4.0 + 8.0) / 16.0, (-0.5 + 3.5) / 7.0])

    def test_uv_ignores_depth(self):
        mesh = extrude(rect_profile(Rect(0, 0, 1.0, 1.0)), ExtrusionSpec(depth=0.3))
        remap_uv(mesh, 1.0, 1.0, 0.0, 0.0, 4.0, 4.0)
        verts = np.asarray(mesh.vertices)
        uv = np.asarray(mesh.visual.uv)
        front = np.isclose(verts[:, 2], 0.0)
        back = np.isclose(verts[:, 2], 0.3)
        assert sorted(map(tuple, np.round(uv[front], 9))) == sorted(map(tuple, np.round(uv[back], 9)))

    def test_keeps_existing_material(self):
        mesh = extrude(rect_profile(Rect(0, 0, 1.0, 1.0)), ExtrusionSpec(depth=0.1))
        material = SimpleMaterial(name="keep")
        mesh.visual = trimesh.visual.TextureVisuals(uv=mesh.visual.uv, material=material)
        remap_uv(mesh, 1.0, 1.0, 0.0, 0.0, 2.0, 2.0)
        assert mesh.visual.material.name == "keep"

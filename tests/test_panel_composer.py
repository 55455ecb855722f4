"""Tests for layered panel composition."""

import logging

import numpy as np
import pytest

from garage_door.constants import (
    CENTER_BEVEL_THICKNESS,
    GROOVE_WIDTH,
    NUM_GROOVES,
    RAISED_HEIGHT,
    ROUNDOVER_DEPTH,
    ROUNDOVER_RADIUS,
    SEAM_OVERLAP,
    SLAB_THICKNESS,
)
from garage_door.contracts import PanelPosition
from garage_door.panel_composer import compose_panel, groove_layout

from conftest import world_vertices


def _layer(node, name):
    return next(child for child in node.children if child.name == name)


class TestComposePanel:
    def test_three_layers(self, standard_panel, materials):
        node = compose_panel(standard_panel, materials, 16.0, 7.0)
        assert [c.name for c in node.children] == ["roundover", "deep_recess", "center"]
        assert node.position == pytest.approx([-6.0, 0.5, 0.0])

    def test_layer_materials(self, standard_panel, materials):
        node = compose_panel(standard_panel, materials, 16.0, 7.0)
        assignments = {p.role: p.material for p in node.iter_primitives()}
        assert assignments == {
            "roundover": "mat_panel",
            "deep_recess": "mat_groove",
            "center": "mat_base",
        }

    def test_center_front_is_flush_with_face(self, standard_panel, materials):
        node = compose_panel(standard_panel, materials, 16.0, 7.0)
        center = _layer(node, "center")
        bounds = center.bounds()
        assert bounds[1, 2] == pytest.approx(CENTER_BEVEL_THICKNESS)
        assert bounds[0, 2] == pytest.approx(-RAISED_HEIGHT - CENTER_BEVEL_THICKNESS)

    def test_roundover_sits_behind_face(self, standard_panel, materials):
        node = compose_panel(standard_panel, materials, 16.0, 7.0)
        bounds = _layer(node, "roundover").bounds()
        assert bounds[1, 2] < 0
        assert bounds[0, 2] == pytest.approx(-2 * ROUNDOVER_DEPTH - 0.025)

    def test_uvs_are_door_relative(self, standard_panel, materials):
        node = compose_panel(standard_panel, materials, 16.0, 7.0)
        for primitive, world in node.traverse():
            pts = world_vertices(primitive.mesh, world)
            uv = np.asarray(primitive.mesh.visual.uv)
            assert uv[:, 0] == pytest.approx((pts[:, 0] + 8.0) / 16.0)
            assert uv[:, 1] == pytest.approx((pts[:, 1] + 3.5) / 7.0)

    def test_only_center_casts_shadow(self, standard_panel, materials):
        node = compose_panel(standard_panel, materials, 16.0, 7.0)
        casting = [p.role for p in node.iter_primitives() if p.cast_shadow]
        assert casting == ["center"]


class TestPerforatedPanel:
    def test_grooves_and_inserts(self, standard_panel, materials):
        node = compose_panel(standard_panel, materials, 16.0, 7.0, perforated=True, v_groove_inserts=True)
        inserts = list(node.iter_primitives("v_groove"))
        assert len(inserts) == NUM_GROOVES
        assert {p.material for p in inserts} == {"mat_v_groove"}

    def test_v_groove_falls_back_to_groove_material(self, standard_panel, sparse_materials):
        node = compose_panel(standard_panel, sparse_materials, 16.0, 7.0, perforated=True, v_groove_inserts=True)
        assert {p.material for p in node.iter_primitives("v_groove")} == {"mat_groove"}

    def test_perforated_center_loses_area(self, standard_panel, materials):
        solid = compose_panel(standard_panel, materials, 16.0, 7.0)
        perforated = compose_panel(standard_panel, materials, 16.0, 7.0, perforated=True)
        solid_center = next(solid.iter_primitives("center")).mesh
        perf_center = next(perforated.iter_primitives("center")).mesh
        assert perf_center.volume < solid_center.volume

    def test_inserts_within_center_depth(self, standard_panel, materials):
        node = compose_panel(standard_panel, materials, 16.0, 7.0, perforated=True, v_groove_inserts=True)
        for i in range(NUM_GROOVES):
            bounds = _layer(node, f"v_groove_{i}").bounds()
            assert bounds[1, 2] <= 0.0 + 1e-9
            assert bounds[0, 2] > -SLAB_THICKNESS


class TestGrooveLayout:
    def test_full_count_on_wide_center(self):
        grooves = groove_layout(2.8, 1.0)
        assert len(grooves) == NUM_GROOVES
        xs = [g.cx for g in grooves]
        assert xs == sorted(xs)
        assert np.allclose(np.diff(xs), xs[1] - xs[0])
        assert xs[0] == pytest.approx(-xs[-1])

    def test_count_shrinks_to_keep_lands(self):
        grooves = groove_layout(0.55, 1.0)
        assert len(grooves) == 4
        spacing = grooves[1].cx - grooves[0].cx
        assert spacing - GROOVE_WIDTH >= GROOVE_WIDTH

    def test_grooves_stop_short_of_edges(self):
        for groove in groove_layout(2.0, 1.0):
            assert groove.height == pytest.approx(1.0 - 2 * GROOVE_WIDTH)

    def test_too_narrow_for_grooves(self):
        assert groove_layout(0.15, 1.0) == []


class TestFeasibilityGuard:
    def test_tiny_panel_keeps_only_roundover(self, materials, caplog):
        with caplog.at_level(logging.WARNING):
            node = compose_panel(PanelPosition(0.0, 0.0, 0.12, 1.0), materials, 4.0, 4.0)
        assert [c.name for c in node.children] == ["roundover"]
        assert "too small" in caplog.text

    def test_narrow_panel_skips_center(self, materials, caplog):
        with caplog.at_level(logging.WARNING):
            node = compose_panel(PanelPosition(0.0, 0.0, 0.4, 1.0), materials, 4.0, 4.0)
        assert [c.name for c in node.children] == ["roundover", "deep_recess"]
        assert "raised center" in caplog.text
        # Solid recess: no holes, so its volume covers the whole footprint
        recess = next(node.iter_primitives("deep_recess")).mesh
        assert recess.volume > 0.3 * 0.9 * 0.042

    @pytest.mark.parametrize("width,height", [(0.12, 1.0), (0.155, 1.0), (1.0, 0.14)])
    def test_flat_recess_stays_inside_footprint(self, materials, width, height):
        node = compose_panel(PanelPosition(2.0, 1.0, width, height), materials, 4.0, 4.0)
        for primitive, world in node.traverse():
            xy = world_vertices(primitive.mesh, world)[:, :2]
            assert xy[:, 0].min() >= 2.0 - width / 2 - 1e-9
            assert xy[:, 0].max() <= 2.0 + width / 2 + 1e-9
            assert xy[:, 1].min() >= 1.0 - height / 2 - 1e-9
            assert xy[:, 1].max() <= 1.0 + height / 2 + 1e-9

    def test_solid_recess_stays_inside_opening(self, materials):
        node = compose_panel(PanelPosition(0.0, 0.0, 0.4, 1.0), materials, 4.0, 4.0)
        recess = _layer(node, "deep_recess")
        xy = world_vertices(recess.primitives[0].mesh, recess.transform)[:, :2]
        half_w = 0.4 / 2 - ROUNDOVER_RADIUS + SEAM_OVERLAP
        assert np.abs(xy[:, 0]).max() <= half_w + 1e-9

    def test_roundover_overhang_needs_frame_margin(self, materials, caplog):
        # Opening is wide enough, but the frame around a 0.155 ft panel is
        # narrower than the roundover's outward bevel
        with caplog.at_level(logging.WARNING):
            node = compose_panel(PanelPosition(0.0, 0.0, 0.155, 1.0), materials, 4.0, 4.0)
        assert [c.name for c in node.children] == ["roundover"]
        assert "too small for a roundover" in caplog.text

"""Tests for 2D profile construction."""

import numpy as np
import pytest
from shapely.geometry import Polygon

from garage_door.contracts import Rect
from garage_door.errors import ProfileError
from garage_door.profiles import Profile2D, build_rect_with_holes, rect_profile


def _signed_area(ring: np.ndarray) -> float:
    x, y = ring[:, 0], ring[:, 1]
    return 0.5 * float(np.dot(x, np.roll(y, -1)) - np.dot(y, np.roll(x, -1)))


class TestBuildRectWithHoles:
    def test_area_subtracts_holes(self):
        profile = build_rect_with_holes(4.0, 2.0, [Rect(-1, 0, 1, 1), Rect(1, 0, 1, 1)])
        assert profile.area == pytest.approx(6.0)
        assert profile.hole_count == 2

    def test_centered_outer(self):
        profile = build_rect_with_holes(2.0, 1.0, center=(3.0, -1.0))
        assert profile.bounds == pytest.approx((2.0, -1.5, 4.0, -0.5))

    def test_ring_orientation(self):
        profile = build_rect_with_holes(4.0, 2.0, [Rect(0, 0, 1, 1)])
        assert _signed_area(profile.outer_ring()) > 0
        assert _signed_area(profile.hole_rings()[0]) < 0

    def test_rings_drop_closing_vertex(self):
        profile = rect_profile(Rect(0, 0, 1, 1))
        assert profile.outer_ring().shape == (4, 2)

    @pytest.mark.parametrize("w,h", [(0, 1), (1, -1)])
    def test_rejects_degenerate_outer(self, w, h):
        with pytest.raises(ProfileError):
            build_rect_with_holes(w, h)

    def test_rejects_degenerate_hole(self):
        with pytest.raises(ProfileError):
            build_rect_with_holes(2, 2, [Rect(0, 0, 0, 0.5)])

    def test_rejects_hole_outside(self):
        with pytest.raises(ProfileError, match="outer bounds"):
            build_rect_with_holes(2, 2, [Rect(0.8, 0, 0.5, 0.5)])

    def test_rejects_hole_touching_edge(self):
        with pytest.raises(ProfileError):
            build_rect_with_holes(2, 2, [Rect(0.75, 0, 0.5, 0.5)])

    def test_rejects_overlapping_holes(self):
        with pytest.raises(ProfileError, match="overlap"):
            build_rect_with_holes(4, 2, [Rect(0, 0, 1, 1), Rect(0.5, 0, 1, 1)])

    def test_rejects_holes_sharing_an_edge(self):
        # Areas add up, but the shared edge makes the outline invalid
        with pytest.raises(ProfileError, match="invalid"):
            build_rect_with_holes(4, 2, [Rect(-0.5, 0, 1, 1), Rect(0.5, 0, 1, 1)])


class TestProfileValidation:
    def test_valid_profile_has_no_issues(self):
        assert build_rect_with_holes(4, 2, [Rect(0, 0, 1, 1)]).validate_geometry() == []

    def test_flags_hole_outside(self):
        outline = Polygon(
            [(0, 0), (2, 0), (2, 2), (0, 2)],
            [[(1.5, 1.5), (2.5, 1.5), (2.5, 2.5), (1.5, 2.5)]],
        )
        issues = Profile2D(outline).validate_geometry()
        assert any("outside" in issue for issue in issues)

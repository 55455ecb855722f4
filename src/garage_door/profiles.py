"""
2D profiles for extrusion.

Built on Shapely. A Profile2D is one outer boundary plus zero or more holes;
the extrusion engine consumes its oriented rings directly.
"""
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np
from shapely.geometry import Polygon
from shapely.geometry.polygon import orient
from shapely.ops import unary_union

from garage_door.contracts import Rect
from garage_door.errors import ProfileError


@dataclass
class Profile2D:
    """Planar outline with holes.

    The exterior ring is counter-clockwise and every interior ring is
    clockwise, so a right-hand edge normal always points away from material.
    """
    outline: Polygon

    def __post_init__(self):
        self.outline = orient(self.outline, sign=1.0)

    @property
    def area(self) -> float:
        return float(self.outline.area)

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        return self.outline.bounds

    @property
    def hole_count(self) -> int:
        return len(self.outline.interiors)

    def outer_ring(self) -> np.ndarray:
        """(N, 2) exterior vertices, counter-clockwise, no closing duplicate."""
        return _ring_array(self.outline.exterior.coords)

    def hole_rings(self) -> List[np.ndarray]:
        """(N, 2) interior vertices per hole, clockwise, no closing duplicate."""
        return [_ring_array(ring.coords) for ring in self.outline.interiors]

    def validate_geometry(self) -> List[str]:
        """Check the profile invariants.

        Returns list of issue strings (empty = ok).
        """
        issues = []
        if self.outline.is_empty:
            issues.append("Outline polygon is empty")
            return issues
        if not self.outline.is_valid:
            issues.append("Outline polygon is invalid")
        shell = Polygon(self.outline.exterior)
        for i, ring in enumerate(self.outline.interiors):
            hole = Polygon(ring)
            if hole.area <= 0:
                issues.append(f"Hole {i} has no area")
            if not shell.contains_properly(hole):
                issues.append(f"Hole {i} extends outside outline")
        return issues


def build_rect_with_holes(
    outer_w: float,
    outer_h: float,
    holes: Sequence[Rect] = (),
    center: Tuple[float, float] = (0.0, 0.0),
) -> Profile2D:
    """Build an axis-aligned rectangular profile punched with rectangular holes.

    Args:
        outer_w: Outer width.
        outer_h: Outer height.
        holes: Hole rectangles in the same coordinate frame as center.
        center: Center of the outer rectangle.

    Raises:
        ProfileError: For degenerate rectangles, holes leaving the outer
            bounds, overlapping holes, or holes sharing an edge. Nothing is
            clamped.
    """
    outer = Rect(center[0], center[1], outer_w, outer_h)
    if not outer.is_positive:
        raise ProfileError(f"Outer rectangle must be positive, got {outer_w} x {outer_h}")

    shell = outer.to_polygon()
    hole_polys = []
    for i, hole in enumerate(holes):
        if not hole.is_positive:
            raise ProfileError(f"Hole {i} must be positive, got {hole.width} x {hole.height}")
        hole_poly = hole.to_polygon()
        if not shell.contains_properly(hole_poly):
            raise ProfileError(f"Hole {i} at ({hole.cx:.3f}, {hole.cy:.3f}) exceeds the outer bounds")
        hole_polys.append(hole_poly)

    if len(hole_polys) > 1:
        merged = unary_union(hole_polys)
        total = sum(p.area for p in hole_polys)
        if not np.isclose(merged.area, total, rtol=1e-9, atol=1e-12):
            raise ProfileError("Profile holes overlap each other")

    profile = Profile2D(outline=Polygon(
        shell.exterior.coords,
        [p.exterior.coords for p in hole_polys],
    ))
    issues = profile.validate_geometry()
    if issues:
        raise ProfileError("; ".join(issues))
    return profile


def rect_profile(rect: Rect) -> Profile2D:
    """Solid rectangle profile with no holes."""
    return build_rect_with_holes(rect.width, rect.height, (), center=(rect.cx, rect.cy))


# ─── Internal helpers ────────────────────────────────────────────────────────

def _ring_array(coords) -> np.ndarray:
    pts = np.asarray(coords, dtype=float)[:, :2]
    if len(pts) > 1 and np.allclose(pts[0], pts[-1]):
        pts = pts[:-1]
    return pts

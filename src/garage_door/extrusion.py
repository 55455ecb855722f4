"""
Layered extrusion of 2D profiles into beveled solids.

A profile is swept from z=0 toward +Z. With beveling enabled the solid
gains `bevel_segments` extra rings on each side of the body: ring
t = b / segments sits at z = -bevel_thickness * cos(t * pi/2) and is pushed
away from the material by bevel_size * sin(t * pi/2) + bevel_offset. The
back side mirrors this past z = depth. Caps keep the profile's holes open.

The z range of the result is therefore [-bevel_thickness,
depth + bevel_thickness]; callers shift it into place themselves.
"""

import logging
import math
from typing import Dict, List, Tuple

import numpy as np
import trimesh
from shapely.geometry import Polygon

from garage_door.contracts import ExtrusionSpec
from garage_door.profiles import Profile2D

logger = logging.getLogger(__name__)


def extrude(profile: Profile2D, spec: ExtrusionSpec) -> trimesh.Trimesh:
    """Extrude a profile into a capped, optionally beveled prism.

    Args:
        profile: Outline with holes; holes stay open through the solid.
        spec: Depth and bevel parameters (validated on construction).

    Returns:
        trimesh.Trimesh with per-vertex UVs in ``mesh.visual.uv``. Vertices
        are not shared between caps and walls so every face keeps a flat
        normal and its own texture coordinates.
    """
    contours = [profile.outer_ring()] + profile.hole_rings()
    miters = [_miter_vectors(ring) for ring in contours]
    layers = layer_offsets(spec)

    parts: List[Tuple[np.ndarray, np.ndarray, np.ndarray]] = []

    for ring, miter in zip(contours, miters):
        for (z_a, off_a), (z_b, off_b) in zip(layers[:-1], layers[1:]):
            parts.append(_wall_strip(ring + miter * off_a, z_a, ring + miter * off_b, z_b))

    front_z, front_offset = layers[0]
    back_z, back_offset = layers[-1]
    parts.append(_cap(contours, miters, front_offset, front_z, facing=-1))
    parts.append(_cap(contours, miters, back_offset, back_z, facing=1))

    vertices, faces, uv = _concatenate(parts)
    mesh = trimesh.Trimesh(
        vertices=vertices,
        faces=faces,
        visual=trimesh.visual.TextureVisuals(uv=uv),
        process=False,
    )
    logger.debug(
        "Extruded profile with %d holes over %d layers: %d vertices, %d faces",
        len(contours) - 1, len(layers), len(vertices), len(faces),
    )
    return mesh


def flat_box(width: float, height: float, depth: float) -> trimesh.Trimesh:
    """Axis-aligned box centered at the origin with planar (x, y) UVs."""
    mesh = trimesh.creation.box(extents=[width, height, depth])
    verts = np.asarray(mesh.vertices)
    uv = np.column_stack([verts[:, 0] / width + 0.5, verts[:, 1] / height + 0.5])
    mesh.visual = trimesh.visual.TextureVisuals(uv=uv)
    return mesh


class ExtrusionCache:
    """Extruded solids memoized for the length of one door build.

    Sections and panels of a door repeat a handful of shapes, each in its
    own local frame, so every distinct (outline, spec) pair is extruded once
    and later requests get a copy they are free to translate and remap.
    """

    def __init__(self):
        self._meshes: Dict[Tuple[bytes, ExtrusionSpec], trimesh.Trimesh] = {}
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._meshes)

    def extrude(self, profile: Profile2D, spec: ExtrusionSpec) -> trimesh.Trimesh:
        key = (profile.outline.wkb, spec)
        mesh = self._meshes.get(key)
        if mesh is None:
            mesh = extrude(profile, spec)
            self._meshes[key] = mesh
            self.misses += 1
        else:
            self.hits += 1
        return mesh.copy()

    def clear(self) -> None:
        self._meshes.clear()


def layer_offsets(spec: ExtrusionSpec) -> List[Tuple[float, float]]:
    """(z, outward offset) per ring, front to back."""
    layers: List[Tuple[float, float]] = []
    if spec.bevel_enabled:
        segments = spec.bevel_segments
        for b in range(segments + 1):
            t = b / segments
            z = spec.bevel_thickness * math.cos(t * math.pi / 2)
            offset = spec.bevel_size * math.sin(t * math.pi / 2) + spec.bevel_offset
            layers.append((-z, offset))
        body_offset = spec.bevel_size + spec.bevel_offset
    else:
        layers.append((0.0, 0.0))
        body_offset = 0.0

    for s in range(1, spec.steps + 1):
        layers.append((spec.depth * s / spec.steps, body_offset))

    if spec.bevel_enabled:
        segments = spec.bevel_segments
        for b in range(segments - 1, -1, -1):
            t = b / segments
            z = spec.bevel_thickness * math.cos(t * math.pi / 2)
            offset = spec.bevel_size * math.sin(t * math.pi / 2) + spec.bevel_offset
            layers.append((spec.depth + z, offset))
    return layers


# ─── Internal helpers ────────────────────────────────────────────────────────

def _right_normals(edges: np.ndarray) -> np.ndarray:
    lengths = np.linalg.norm(edges, axis=1)
    lengths = np.where(lengths < 1e-12, 1.0, lengths)
    return np.column_stack([edges[:, 1], -edges[:, 0]]) / lengths[:, None]


def _miter_vectors(ring: np.ndarray) -> np.ndarray:
    """Per-vertex offset directions scaled so each adjacent edge moves by 1."""
    n_prev = _right_normals(ring - np.roll(ring, 1, axis=0))
    n_next = _right_normals(np.roll(ring, -1, axis=0) - ring)
    denom = 1.0 + np.einsum("ij,ij->i", n_prev, n_next)
    denom = np.maximum(denom, 1e-6)
    return (n_prev + n_next) / denom[:, None]


def _wall_strip(
    ring_a: np.ndarray,
    z_a: float,
    ring_b: np.ndarray,
    z_b: float,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """One quad per edge between two rings; normals face away from material."""
    n = len(ring_a)
    nxt = np.roll(np.arange(n), -1)
    za = np.full(n, z_a)
    zb = np.full(n, z_b)
    quads = np.stack([
        np.column_stack([ring_a, za]),
        np.column_stack([ring_a[nxt], za]),
        np.column_stack([ring_b[nxt], zb]),
        np.column_stack([ring_b, zb]),
    ], axis=1)  # (n, 4, 3)

    edges = ring_a[nxt] - ring_a
    along_x = np.abs(edges[:, 1]) < np.abs(edges[:, 0])
    u = np.where(along_x[:, None], quads[:, :, 0], quads[:, :, 1])
    uv = np.stack([u, quads[:, :, 2]], axis=2).reshape(-1, 2)

    base = (np.arange(n) * 4)[:, None]
    faces = np.vstack([base + [0, 1, 2], base + [0, 2, 3]])
    return quads.reshape(-1, 3), faces, uv


def _cap(
    contours: List[np.ndarray],
    miters: List[np.ndarray],
    offset: float,
    z: float,
    facing: int,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Triangulated cap at z; facing=1 points +Z, facing=-1 points -Z."""
    shifted = [ring + miter * offset for ring, miter in zip(contours, miters)]
    polygon = Polygon(shifted[0], shifted[1:])
    verts_2d, tris = trimesh.creation.triangulate_polygon(polygon, engine="earcut")
    verts_2d = np.asarray(verts_2d, dtype=float)
    tris = _counter_clockwise(verts_2d, np.asarray(tris, dtype=np.int64))
    tris = _split_t_junctions(verts_2d, tris)
    if facing < 0:
        tris = tris[:, ::-1]
    verts = np.column_stack([verts_2d, np.full(len(verts_2d), z)])
    return verts, tris, verts_2d.copy()


def _counter_clockwise(verts_2d: np.ndarray, tris: np.ndarray) -> np.ndarray:
    a = verts_2d[tris[:, 0]]
    b = verts_2d[tris[:, 1]]
    c = verts_2d[tris[:, 2]]
    cross = (b[:, 0] - a[:, 0]) * (c[:, 1] - a[:, 1]) - (b[:, 1] - a[:, 1]) * (c[:, 0] - a[:, 0])
    flipped = tris.copy()
    flipped[cross < 0] = tris[cross < 0][:, ::-1]
    return flipped


def _split_t_junctions(verts_2d: np.ndarray, tris: np.ndarray) -> np.ndarray:
    """Drop zero-area triangles and split every edge that runs through a vertex.

    Earcut bridges between holes with collinear edges can leave a cap vertex
    in the middle of a neighboring triangle's edge. Walls meet the cap only
    at ring vertices, so such an edge leaves the solid open.
    """
    if len(tris) == 0:
        return tris
    scale = max(float(np.ptp(verts_2d, axis=0).max()), 1.0)
    tol = 1e-9 * scale

    a = verts_2d[tris[:, 0]]
    b = verts_2d[tris[:, 1]]
    c = verts_2d[tris[:, 2]]
    area2 = (b[:, 0] - a[:, 0]) * (c[:, 1] - a[:, 1]) - (b[:, 1] - a[:, 1]) * (c[:, 0] - a[:, 0])
    pending = [tuple(int(i) for i in tri) for tri in tris[np.abs(area2) > tol * scale]]

    result = []
    while pending:
        tri = pending.pop()
        split = _vertex_on_edge(verts_2d, tri, tol)
        if split is None:
            result.append(tri)
            continue
        p, v, q, r = split
        pending.append((p, v, r))
        pending.append((v, q, r))
    return np.array(result, dtype=np.int64).reshape(-1, 3)


def _vertex_on_edge(verts_2d: np.ndarray, tri, tol: float):
    """(p, v, q, r) for the first vertex v strictly inside edge p-q, else None.

    r is the corner opposite p-q; (p, v, r) and (v, q, r) keep the winding.
    """
    for k in range(3):
        p, q, r = tri[k], tri[(k + 1) % 3], tri[(k + 2) % 3]
        start = verts_2d[p]
        d = verts_2d[q] - start
        length = math.hypot(d[0], d[1])
        if length <= tol:
            continue
        rel = verts_2d - start
        along = (rel @ d) / length
        across = np.abs(d[0] * rel[:, 1] - d[1] * rel[:, 0]) / length
        inside = (across <= tol) & (along > tol) & (along < length - tol)
        if inside.any():
            candidates = np.flatnonzero(inside)
            v = int(candidates[np.argmin(along[candidates])])
            return p, v, q, r
    return None


def _concatenate(parts):
    vertices, faces, uvs = [], [], []
    count = 0
    for verts, tris, uv in parts:
        vertices.append(verts)
        faces.append(tris + count)
        uvs.append(uv)
        count += len(verts)
    return np.vstack(vertices), np.vstack(faces).astype(np.int64), np.vstack(uvs)

"""
Door-relative texture coordinates.

The extruder hands out UVs local to each solid, so a tiled wood grain would
restart at every panel edge. This pass rewrites them from vertex position
so every solid samples one shared [0, 1] door space.
"""
import numpy as np
import trimesh


def door_uv(
    local_xy: np.ndarray,
    offset_x: float,
    offset_y: float,
    door_w: float,
    door_h: float,
) -> np.ndarray:
    """Map local (x, y) points into door UV space.

    Args:
        local_xy: (N, 2) or (2,) positions in the solid's local frame.
        offset_x, offset_y: Position of the local origin in door coordinates.
        door_w, door_h: Full door dimensions.

    Returns:
        Array of the same shape holding (u, v).
    """
    pts = np.asarray(local_xy, dtype=float)
    world_x = pts[..., 0] + offset_x
    world_y = pts[..., 1] + offset_y
    return np.stack([
        (world_x + door_w / 2) / door_w,
        (world_y + door_h / 2) / door_h,
    ], axis=-1)


def remap_uv(
    mesh: trimesh.Trimesh,
    local_w: float,
    local_h: float,
    offset_x: float,
    offset_y: float,
    door_w: float,
    door_h: float,
) -> trimesh.Trimesh:
    """Replace a solid's UVs with door-relative coordinates, in place.

    local_w and local_h describe the solid's footprint and are accepted for
    call-site symmetry with the extrusion; the mapping depends only on
    vertex positions and offsets.
    """
    uv = door_uv(np.asarray(mesh.vertices)[:, :2], offset_x, offset_y, door_w, door_h)
    material = getattr(mesh.visual, "material", None)
    mesh.visual = trimesh.visual.TextureVisuals(uv=uv, material=material)
    return mesh


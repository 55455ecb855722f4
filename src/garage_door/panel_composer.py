"""
Layered carving of one decorative door panel.

Each panel is three stacked extrusions sharing one footprint:

1. Roundover: a ring from the panel edge to the roundover radius, beveled
   over six segments to read as a rounded shoulder.
2. Deep recess: a flat ring sunk behind the roundover.
3. Raised center: a solid block whose front lands flush with the door face,
   with a wide single-segment bevel giving the sloped V-carve transition.
   Carriage-house panels punch it with thin vertical grooves, optionally
   lined with V-profile inserts.

Small panels that cannot fit every layer keep the outer layers and drop the
inner ones rather than producing inverted geometry.
"""

import logging
from dataclasses import replace
from typing import List, Optional, Tuple

import trimesh

from garage_door.constants import (
    CENTER_BEVEL_SIZE,
    CENTER_BEVEL_THICKNESS,
    DEEP_BEVEL_SEGMENTS,
    DEEP_BEVEL_SIZE,
    DEEP_BEVEL_THICKNESS,
    DEEP_DEPTH,
    DEEP_WIDTH,
    GROOVE_WIDTH,
    MIN_FEATURE_SIZE,
    NUM_GROOVES,
    PANEL_FILL_RATIO,
    RAISED_HEIGHT,
    ROUNDOVER_BEVEL_SEGMENTS,
    ROUNDOVER_DEPTH,
    ROUNDOVER_RADIUS,
    SEAM_OVERLAP,
    V_GROOVE_BEVEL_THICKNESS,
    V_GROOVE_DEPTH,
)
from garage_door.contracts import ExtrusionSpec, PanelPosition, Rect
from garage_door.extrusion import ExtrusionCache, extrude
from garage_door.materials import MaterialSet
from garage_door.profiles import Profile2D, build_rect_with_holes, rect_profile
from garage_door.scene_graph import Node, Primitive
from garage_door.uv_mapping import remap_uv

logger = logging.getLogger(__name__)

ROUNDOVER_SPEC = ExtrusionSpec(
    depth=ROUNDOVER_DEPTH,
    bevel_enabled=True,
    bevel_thickness=ROUNDOVER_RADIUS * 0.5,
    bevel_size=ROUNDOVER_RADIUS * 0.4,
    bevel_segments=ROUNDOVER_BEVEL_SEGMENTS,
)

DEEP_SPEC = ExtrusionSpec(
    depth=DEEP_DEPTH,
    bevel_enabled=True,
    bevel_thickness=DEEP_BEVEL_THICKNESS,
    bevel_size=DEEP_BEVEL_SIZE,
    bevel_segments=DEEP_BEVEL_SEGMENTS,
)

# Fallback solids pull their bevel inside the footprint so an undersized
# panel never reaches past its opening in the frame.
ROUNDOVER_SOLID_SPEC = replace(ROUNDOVER_SPEC, bevel_offset=-ROUNDOVER_SPEC.bevel_size)
DEEP_SOLID_SPEC = replace(DEEP_SPEC, bevel_offset=-DEEP_SPEC.bevel_size)

CENTER_SPEC = ExtrusionSpec(
    depth=RAISED_HEIGHT,
    bevel_enabled=True,
    bevel_thickness=CENTER_BEVEL_THICKNESS,
    bevel_size=CENTER_BEVEL_SIZE,
    bevel_segments=1,
)

# Perforated centers keep the bevel narrower than half a groove so the
# groove holes stay open through the slope.
PERFORATED_CENTER_SPEC = ExtrusionSpec(
    depth=RAISED_HEIGHT,
    bevel_enabled=True,
    bevel_thickness=CENTER_BEVEL_THICKNESS,
    bevel_size=min(CENTER_BEVEL_SIZE, GROOVE_WIDTH * 0.4),
    bevel_segments=1,
)

_V_HALF_WIDTH = GROOVE_WIDTH / 2

V_GROOVE_SPEC = ExtrusionSpec(
    depth=V_GROOVE_DEPTH,
    bevel_enabled=True,
    bevel_thickness=V_GROOVE_BEVEL_THICKNESS,
    bevel_size=_V_HALF_WIDTH * 0.5,
    bevel_segments=1,
    bevel_offset=-_V_HALF_WIDTH * 0.3,
)


def compose_panel(
    position: PanelPosition,
    materials: MaterialSet,
    door_width: float,
    door_height: float,
    perforated: bool = False,
    v_groove_inserts: bool = False,
    cache: Optional[ExtrusionCache] = None,
) -> Node:
    """Build the stacked roundover / deep recess / raised center for a panel.

    Args:
        position: Panel footprint in door coordinates.
        materials: Material handles; roundover uses ``panel``, the recess
            ``groove``, the center ``base`` and inserts ``v_groove``.
        door_width, door_height: Full door size for UV remapping.
        perforated: Punch evenly spaced vertical grooves through the center.
        v_groove_inserts: Line each groove with a V-profile insert.
        cache: Extrusions shared with the rest of the build; a private one
            is used when omitted.

    Returns:
        Node positioned at the panel center whose children are the layers.
    """
    if cache is None:
        cache = ExtrusionCache()
    x, y = position.center_x, position.center_y
    door = (door_width, door_height)
    node = Node(name=f"panel_{x:+.3f}_{y:+.3f}").set_position(x, y, 0.0)

    outer = Rect(0.0, 0.0, position.width, position.height)
    level1 = outer.shrink(ROUNDOVER_RADIUS)
    center = level1.shrink(DEEP_WIDTH)

    if _too_small(level1) or _frame_margin(outer) < ROUNDOVER_SPEC.bevel_size:
        logger.warning(
            "Panel %.3f x %.3f too small for a roundover; using a flat recess",
            position.width, position.height,
        )
        place_layer(
            node, "roundover", "roundover", rect_profile(outer), ROUNDOVER_SOLID_SPEC,
            materials.resolve("panel"), outer, (0.0, 0.0, -ROUNDOVER_DEPTH), (x, y), door,
            cache=cache,
        )
        return node

    place_layer(
        node, "roundover", "roundover",
        build_rect_with_holes(outer.width, outer.height, [level1]),
        ROUNDOVER_SPEC, materials.resolve("panel"), outer,
        (0.0, 0.0, -ROUNDOVER_DEPTH), (x, y), door, cache=cache,
    )

    deep_outer = level1.grow(SEAM_OVERLAP)
    deep_z = -ROUNDOVER_DEPTH - DEEP_DEPTH
    if _too_small(center):
        logger.warning(
            "Panel %.3f x %.3f too small for a raised center; leaving the recess flat",
            position.width, position.height,
        )
        place_layer(
            node, "deep_recess", "deep_recess", rect_profile(deep_outer), DEEP_SOLID_SPEC,
            materials.resolve("groove"), deep_outer, (0.0, 0.0, deep_z), (x, y), door,
            cache=cache,
        )
        return node

    place_layer(
        node, "deep_recess", "deep_recess",
        build_rect_with_holes(deep_outer.width, deep_outer.height, [center]),
        DEEP_SPEC, materials.resolve("groove"), deep_outer,
        (0.0, 0.0, deep_z), (x, y), door, cache=cache,
    )

    grooves = groove_layout(center.width, center.height) if perforated else []
    if grooves:
        center_profile = build_rect_with_holes(center.width, center.height, grooves)
        center_spec = PERFORATED_CENTER_SPEC
    else:
        center_profile = rect_profile(center)
        center_spec = CENTER_SPEC
    place_layer(
        node, "center", "center", center_profile, center_spec,
        materials.resolve("base"), center, (0.0, 0.0, 0.0), (x, y), door,
        cast_shadow=True, cache=cache,
    )

    if v_groove_inserts and grooves:
        insert_z = -RAISED_HEIGHT + V_GROOVE_DEPTH
        # Every groove has the same size, so the inserts share one profile
        insert = Rect(0.0, 0.0, grooves[0].width * 0.8, grooves[0].height)
        insert_profile = rect_profile(insert)
        for i, groove in enumerate(grooves):
            place_layer(
                node, f"v_groove_{i}", "v_groove", insert_profile, V_GROOVE_SPEC,
                materials.resolve("v_groove"), insert, (groove.cx, 0.0, insert_z),
                (x + groove.cx, y), door, cache=cache,
            )

    logger.debug(
        "Composed panel at (%.3f, %.3f): %d layers, %d grooves",
        x, y, len(node.children), len(grooves),
    )
    return node


def groove_layout(center_w: float, center_h: float) -> List[Rect]:
    """Vertical groove holes evenly spaced across a center panel.

    Uses NUM_GROOVES when the panel is wide enough; otherwise as many as
    leave a land at least one groove wide between neighbors. Grooves stop
    one groove width short of the top and bottom edges.
    """
    groove_h = center_h - 2 * GROOVE_WIDTH
    if groove_h <= MIN_FEATURE_SIZE:
        return []
    count = min(NUM_GROOVES, int(center_w / (2 * GROOVE_WIDTH)) - 1)
    if count < 1:
        return []
    spacing = center_w / (count + 1)
    return [
        Rect(-center_w / 2 + i * spacing, 0.0, GROOVE_WIDTH, groove_h)
        for i in range(1, count + 1)
    ]


def place_layer(
    parent: Node,
    name: str,
    role: str,
    profile: Profile2D,
    spec: ExtrusionSpec,
    material,
    footprint: Rect,
    local_position: Tuple[float, float, float],
    uv_origin: Tuple[float, float],
    door_size: Tuple[float, float],
    cast_shadow: bool = False,
    cache: Optional[ExtrusionCache] = None,
) -> Node:
    """Extrude, shift by -depth, remap UVs and attach as a positioned child.

    Args:
        parent: Node receiving the layer.
        profile: Profile in the layer's own frame.
        spec: Extrusion parameters.
        material: Material handle for the primitive.
        footprint: Layer footprint, passed through to the UV pass.
        local_position: Child node position relative to parent.
        uv_origin: Door coordinates of the profile's origin.
        door_size: (width, height) of the whole door.
        cache: Reuse an identical extrusion from earlier in the build.
    """
    mesh = cache.extrude(profile, spec) if cache is not None else extrude(profile, spec)
    mesh.apply_translation([0.0, 0.0, -spec.depth])
    _remap(mesh, footprint, uv_origin, door_size)

    layer = Node(name=name).set_position(*local_position)
    layer.add_primitive(Primitive(
        name=name,
        mesh=mesh,
        material=material,
        role=role,
        cast_shadow=cast_shadow,
        receive_shadow=True,
    ))
    parent.add(layer)
    return layer


def _remap(
    mesh: trimesh.Trimesh,
    footprint: Rect,
    uv_origin: Tuple[float, float],
    door_size: Tuple[float, float],
) -> None:
    remap_uv(
        mesh, footprint.width, footprint.height,
        uv_origin[0], uv_origin[1], door_size[0], door_size[1],
    )


def _too_small(rect: Rect) -> bool:
    return min(rect.width, rect.height) <= MIN_FEATURE_SIZE


def _frame_margin(rect: Rect) -> float:
    # Frame left on each side of a panel that fills PANEL_FILL_RATIO of its cell
    return min(rect.width, rect.height) * (1 - PANEL_FILL_RATIO) / (2 * PANEL_FILL_RATIO)

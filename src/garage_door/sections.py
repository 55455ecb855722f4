"""
Horizontal section layout for multi-panel doors.

The door height is split into N sections separated by a fixed gap. Each
section gets its style front and a thin back panel; each gap gets a dark
unlit plane standing in for the contact shadow a real seam would cast.
"""

import logging
from typing import List, Optional, Tuple

from garage_door.constants import (
    BACK_PANEL_THICKNESS,
    FOUR_SECTION_LIMIT_FT,
    SECTION_GAP,
    SHADOW_HEIGHT_RATIO,
    SHADOW_THICKNESS,
    SLAB_THICKNESS,
)
from garage_door.contracts import DoorSection, ExtrusionSpec, Rect
from garage_door.errors import DoorConfigError
from garage_door.extrusion import ExtrusionCache, flat_box
from garage_door.materials import MaterialSet
from garage_door.panel_composer import place_layer
from garage_door.profiles import rect_profile
from garage_door.scene_graph import Node, Primitive
from garage_door.styles import StyleBuilder, StyleLayout
from garage_door.uv_mapping import remap_uv

logger = logging.getLogger(__name__)

BACK_PANEL_SPEC = ExtrusionSpec(depth=BACK_PANEL_THICKNESS)


def section_count(height: float, layout: StyleLayout) -> int:
    """4 below 8 ft, 5 below the layout's limit, else 6."""
    if height < FOUR_SECTION_LIMIT_FT:
        return 4
    limit = layout.five_section_limit_ft
    if height < limit or (layout.five_section_inclusive and height <= limit):
        return 5
    return 6


def layout_sections(width: float, height: float, count: int, gap: float = SECTION_GAP) -> List[DoorSection]:
    """Stack count sections bottom to top, symmetric about y=0.

    Section heights plus the count-1 gaps add up to height exactly.

    Raises:
        DoorConfigError: If the gaps leave no height for the sections.
    """
    if count < 1:
        raise DoorConfigError(f"Section count must be >= 1, got {count}")
    section_height = (height - (count - 1) * gap) / count
    if section_height <= 0:
        raise DoorConfigError(
            f"Door height {height:.3f} ft is too small for {count} sections"
        )
    return [
        DoorSection(
            index=i,
            world_offset_y=(i - (count - 1) / 2) * (section_height + gap),
            width=width,
            height=section_height,
        )
        for i in range(count)
    ]


def assemble_sections(
    width: float,
    height: float,
    layout: StyleLayout,
    materials: MaterialSet,
    cache: Optional[ExtrusionCache] = None,
) -> Tuple[Node, List[DoorSection]]:
    """Build the door body for a layout.

    Every section draws on one extrusion cache, so a door extrudes each
    distinct frame, layer and insert shape only once.

    Returns:
        (door_body_node, sections). Unsectioned layouts report one section
        spanning the whole door.
    """
    if cache is None:
        cache = ExtrusionCache()
    builder = StyleBuilder(layout)
    body = Node(name="door_body")

    if not layout.sectioned:
        body.add(builder.build(width, height, materials, 0.0, height))
        return body, [DoorSection(index=0, world_offset_y=0.0, width=width, height=height)]

    sections = layout_sections(width, height, section_count(height, layout))
    for section in sections:
        node = Node(name=f"section_{section.index}")
        node.add(builder.build(
            width, section.height, materials, section.world_offset_y, height, cache=cache,
        ))
        node.add(back_panel(section, materials, height, cache=cache))
        if section.index < len(sections) - 1:
            node.add(shadow_plane(section.top + SECTION_GAP / 2, width, height, materials))
        body.add(node)

    overlay = builder.build_trim_overlay(width, height, materials)
    if overlay is not None:
        body.add(overlay)

    logger.debug(
        "Assembled %d %s sections of %.3f ft from %d distinct extrusions (%d reused)",
        len(sections), layout.style.value, sections[0].height, cache.misses, cache.hits,
    )
    return body, sections


def back_panel(
    section: DoorSection,
    materials: MaterialSet,
    total_height: float,
    cache: Optional[ExtrusionCache] = None,
) -> Node:
    """Thin flat back covering the section's panel openings."""
    holder = Node(name=f"back_{section.index}")
    place_layer(
        holder, "back", "back",
        rect_profile(Rect(0.0, 0.0, section.width, section.height)),
        BACK_PANEL_SPEC, materials.resolve("back"),
        Rect(0.0, 0.0, section.width, section.height),
        (0.0, section.world_offset_y, -SLAB_THICKNESS - BACK_PANEL_THICKNESS / 2),
        (0.0, section.world_offset_y), (section.width, total_height), cache=cache,
    )
    return holder


def shadow_plane(gap_center_y: float, width: float, total_height: float, materials: MaterialSet) -> Node:
    """Dark semi-transparent strip filling a section gap, just behind the face."""
    plane_height = SECTION_GAP * SHADOW_HEIGHT_RATIO
    mesh = flat_box(width, plane_height, SHADOW_THICKNESS)
    remap_uv(mesh, width, plane_height, 0.0, gap_center_y, width, total_height)
    node = Node(name=f"shadow_{gap_center_y:+.3f}").set_position(
        0.0, gap_center_y, -SHADOW_THICKNESS / 2 - 0.001,
    )
    node.add_primitive(Primitive(
        name="shadow",
        mesh=mesh,
        material=materials.resolve("shadow"),
        role="shadow",
        cast_shadow=False,
        receive_shadow=False,
        unlit=True,
    ))
    return node

"""
Door style layouts and the builder that lays them out.

Every style is a StyleLayout: which layers exist, whether the door is split
into sections, and which carriage-house extras apply. One StyleBuilder turns
a layout into geometry, so styles differ only in data.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from garage_door.constants import (
    FRAME_BEVEL_SEGMENTS,
    FRAME_BEVEL_SIZE,
    FRAME_BEVEL_THICKNESS,
    PANEL_FILL_RATIO,
    SLAB_THICKNESS,
    THREE_COLUMN_MAX_WIDTH_FT,
    TRIM_THICKNESS,
    TRIM_WIDTH,
    TWO_COLUMN_MAX_WIDTH_FT,
)
from garage_door.contracts import DoorStyle, ExtrusionSpec, PanelPosition, Rect
from garage_door.extrusion import ExtrusionCache, flat_box
from garage_door.materials import MaterialSet
from garage_door.panel_composer import compose_panel, place_layer
from garage_door.profiles import build_rect_with_holes
from garage_door.scene_graph import Node, Primitive
from garage_door.uv_mapping import remap_uv

logger = logging.getLogger(__name__)

# The bevel offset pulls the frame caps in by the bevel size, so the widest
# ring sits exactly on the section outline and adjacent frames read as a
# V-groove without growing the section footprint.
FRAME_BEVELED_SPEC = ExtrusionSpec(
    depth=SLAB_THICKNESS,
    bevel_enabled=True,
    bevel_thickness=FRAME_BEVEL_THICKNESS,
    bevel_size=FRAME_BEVEL_SIZE,
    bevel_segments=FRAME_BEVEL_SEGMENTS,
    bevel_offset=-FRAME_BEVEL_SIZE,
)

FRAME_FLAT_SPEC = ExtrusionSpec(depth=SLAB_THICKNESS)


@dataclass(frozen=True)
class StyleLayout:
    """Per-style switches consumed by StyleBuilder and the section assembler.

    Attributes:
        style: The style this layout renders.
        sectioned: Split the door into horizontal sections.
        panels: Carve decorative panels into each section.
        frame_bevel: Bevel the section frame edges.
        perforated_center: Punch vertical grooves through panel centers.
        v_groove_inserts: Line the grooves with V-profile inserts.
        trim_rails: Add top and bottom trim rails over the face.
        trim_stiles: Add left and right trim stiles over the face.
        five_section_limit_ft: Height limit for five sections.
        five_section_inclusive: Whether the limit itself still gets five.
    """
    style: DoorStyle
    sectioned: bool = True
    panels: bool = True
    frame_bevel: bool = False
    perforated_center: bool = False
    v_groove_inserts: bool = False
    trim_rails: bool = False
    trim_stiles: bool = False
    five_section_limit_ft: float = 9.0
    five_section_inclusive: bool = False

    @property
    def has_trim(self) -> bool:
        return self.trim_rails or self.trim_stiles


STYLE_LAYOUTS: Dict[DoorStyle, StyleLayout] = {
    DoorStyle.RAISED_PANEL: StyleLayout(
        style=DoorStyle.RAISED_PANEL,
        frame_bevel=True,
    ),
    DoorStyle.CARRIAGE_HOUSE: StyleLayout(
        style=DoorStyle.CARRIAGE_HOUSE,
        perforated_center=True,
        v_groove_inserts=True,
        trim_rails=True,
        trim_stiles=True,
    ),
    DoorStyle.FLUSH: StyleLayout(
        style=DoorStyle.FLUSH,
        panels=False,
        five_section_limit_ft=10.0,
        five_section_inclusive=True,
    ),
    DoorStyle.MODERN_STEEL: StyleLayout(
        style=DoorStyle.MODERN_STEEL,
        sectioned=False,
        panels=False,
    ),
    DoorStyle.SIMPLE: StyleLayout(
        style=DoorStyle.SIMPLE,
        sectioned=False,
        panels=False,
    ),
}


def resolve_style(label: Any) -> StyleLayout:
    """Layout for a style label; unknown labels fall back to Simple."""
    style = DoorStyle.from_label(label)
    if style is None:
        logger.warning("Unknown door style %r; using a simple flat door", label)
        style = DoorStyle.SIMPLE
    return STYLE_LAYOUTS[style]


def column_count(width: float) -> int:
    """Panel columns for a door width in feet."""
    if width <= TWO_COLUMN_MAX_WIDTH_FT:
        return 2
    if width <= THREE_COLUMN_MAX_WIDTH_FT:
        return 3
    return 4


def panel_positions(width: float, section_height: float, offset_y: float = 0.0) -> List[PanelPosition]:
    """One row of panels centered in their grid cells, in door coordinates."""
    columns = column_count(width)
    cell_width = width / columns
    return [
        PanelPosition(
            center_x=(c - (columns - 1) / 2) * cell_width,
            center_y=offset_y,
            width=cell_width * PANEL_FILL_RATIO,
            height=section_height * PANEL_FILL_RATIO,
        )
        for c in range(columns)
    ]


class StyleBuilder:
    """Builds section fronts (or the whole door) for one StyleLayout."""

    def __init__(self, layout: StyleLayout):
        self.layout = layout

    def build(
        self,
        width: float,
        height: float,
        materials: MaterialSet,
        offset_y: float = 0.0,
        total_height: Optional[float] = None,
        cache: Optional[ExtrusionCache] = None,
    ) -> Node:
        """Front geometry for a section of the given height centered at offset_y.

        For unsectioned layouts height is the full door height. Pass one
        cache for every section of a door so repeated shapes extrude once.
        """
        if total_height is None:
            total_height = height
        if self.layout.sectioned and self.layout.panels:
            if cache is None:
                cache = ExtrusionCache()
            return self._paneled_section(width, height, materials, offset_y, total_height, cache)
        return self._flat_slab(width, height, materials, offset_y, total_height)

    def build_trim_overlay(self, width: float, height: float, materials: MaterialSet) -> Optional[Node]:
        """Flat trim slabs laid over the door face, or None for this layout."""
        if not self.layout.has_trim:
            return None
        node = Node(name="trim_overlay")
        pieces = []
        if self.layout.trim_rails:
            rail_y = height / 2 - TRIM_WIDTH / 2
            pieces.append(("rail_top", Rect(0.0, rail_y, width, TRIM_WIDTH)))
            pieces.append(("rail_bottom", Rect(0.0, -rail_y, width, TRIM_WIDTH)))
        if self.layout.trim_stiles:
            stile_x = width / 2 - TRIM_WIDTH / 2
            stile_h = height - 2 * TRIM_WIDTH if self.layout.trim_rails else height
            pieces.append(("stile_left", Rect(-stile_x, 0.0, TRIM_WIDTH, stile_h)))
            pieces.append(("stile_right", Rect(stile_x, 0.0, TRIM_WIDTH, stile_h)))

        for name, rect in pieces:
            mesh = flat_box(rect.width, rect.height, TRIM_THICKNESS)
            remap_uv(mesh, rect.width, rect.height, rect.cx, rect.cy, width, height)
            piece = Node(name=name).set_position(rect.cx, rect.cy, TRIM_THICKNESS / 2)
            piece.add_primitive(Primitive(
                name=name,
                mesh=mesh,
                material=materials.resolve("trim"),
                role="trim",
                cast_shadow=True,
            ))
            node.add(piece)
        return node

    def _paneled_section(
        self,
        width: float,
        height: float,
        materials: MaterialSet,
        offset_y: float,
        total_height: float,
        cache: ExtrusionCache,
    ) -> Node:
        section = Node(name=f"section_front_{offset_y:+.3f}")
        positions = panel_positions(width, height, offset_y)
        holes = [
            Rect(p.center_x, p.center_y - offset_y, p.width, p.height)
            for p in positions
        ]
        spec = FRAME_BEVELED_SPEC if self.layout.frame_bevel else FRAME_FLAT_SPEC
        place_layer(
            section, "frame", "frame",
            build_rect_with_holes(width, height, holes),
            spec, materials.resolve("base"), Rect(0.0, 0.0, width, height),
            (0.0, offset_y, 0.0), (0.0, offset_y), (width, total_height),
            cast_shadow=True, cache=cache,
        )
        for position in positions:
            section.add(compose_panel(
                position, materials, width, total_height,
                perforated=self.layout.perforated_center,
                v_groove_inserts=self.layout.v_groove_inserts,
                cache=cache,
            ))
        logger.debug(
            "Built %s section at y=%.3f with %d panels",
            self.layout.style.value, offset_y, len(positions),
        )
        return section

    def _flat_slab(
        self,
        width: float,
        height: float,
        materials: MaterialSet,
        offset_y: float,
        total_height: float,
    ) -> Node:
        mesh = flat_box(width, height, SLAB_THICKNESS)
        remap_uv(mesh, width, height, 0.0, offset_y, width, total_height)
        slab = Node(name=f"slab_{offset_y:+.3f}").set_position(0.0, offset_y, -SLAB_THICKNESS / 2)
        slab.add_primitive(Primitive(
            name="slab",
            mesh=mesh,
            material=materials.resolve("base"),
            role="slab",
            cast_shadow=True,
        ))
        return slab

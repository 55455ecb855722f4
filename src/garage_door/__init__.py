"""Public API for the garage door panel geometry engine."""

from garage_door.assembly import DoorAssembly, DoorAssemblyBuilder, build_door_assembly
from garage_door.contracts import (
    DoorConfig,
    DoorSection,
    DoorStyle,
    ExtrusionSpec,
    PanelPosition,
    Rect,
)
from garage_door.errors import (
    DoorConfigError,
    DoorGeometryError,
    ExtrusionError,
    ProfileError,
)
from garage_door.extrusion import ExtrusionCache, extrude, flat_box
from garage_door.materials import DOOR_COLORS, MaterialSet, make_material_set
from garage_door.panel_composer import compose_panel
from garage_door.profiles import Profile2D, build_rect_with_holes
from garage_door.scene_graph import Node, Primitive
from garage_door.sections import assemble_sections, layout_sections, section_count
from garage_door.styles import StyleBuilder, StyleLayout, column_count, resolve_style
from garage_door.textures import TextureCache, generate_wood_texture
from garage_door.uv_mapping import remap_uv

__all__ = [
    "DOOR_COLORS",
    "DoorAssembly",
    "DoorAssemblyBuilder",
    "DoorConfig",
    "DoorConfigError",
    "DoorGeometryError",
    "DoorSection",
    "DoorStyle",
    "ExtrusionCache",
    "ExtrusionError",
    "ExtrusionSpec",
    "MaterialSet",
    "Node",
    "PanelPosition",
    "Primitive",
    "Profile2D",
    "ProfileError",
    "Rect",
    "StyleBuilder",
    "StyleLayout",
    "TextureCache",
    "assemble_sections",
    "build_door_assembly",
    "build_rect_with_holes",
    "column_count",
    "compose_panel",
    "extrude",
    "flat_box",
    "generate_wood_texture",
    "layout_sections",
    "make_material_set",
    "remap_uv",
    "resolve_style",
    "section_count",
]

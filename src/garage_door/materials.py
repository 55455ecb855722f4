"""
Door color catalog and material sets.

The geometry engine treats materials as opaque handles and only assigns
them. make_material_set() is a convenience factory producing trimesh PBR
materials for export and previews; a renderer may supply its own handles.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
from trimesh.visual.material import PBRMaterial

from garage_door.constants import SHADOW_OPACITY
from garage_door.textures import tile_texture


@dataclass
class DoorColor:
    """A paint or stain offered in the configurator."""

    name: str
    hex_value: str

    @property
    def rgb(self) -> Tuple[float, float, float]:
        value = self.hex_value.lstrip("#")
        return tuple(int(value[i:i + 2], 16) / 255.0 for i in (0, 2, 4))


DOOR_COLORS: List[DoorColor] = [
    DoorColor("White", "#F5F5F5"),
    DoorColor("Almond", "#F0EAD6"),
    DoorColor("Sandstone", "#D8CDBA"),
    DoorColor("Wood Grain", "#8B4513"),
    DoorColor("Charcoal", "#36454F"),
    DoorColor("Black", "#222222"),
]

DEFAULT_COLOR_INDEX = 3
BACK_COLOR_HEX = "#F8F8F8"

# Wood grain repeats per foot of door, across and down
TEXTURE_REPEAT_PER_FT = (1.5, 1.0)

# Surface shading per slot: (color scale, roughness)
_SLOT_SHADING: Dict[str, Tuple[float, float]] = {
    "base": (1.0, 0.8),
    "groove": (0.6, 0.9),
    "panel": (0.7, 0.85),
    "trim": (0.9, 0.8),
    "v_groove": (0.5, 0.9),
}


@dataclass
class MaterialSet:
    """Opaque material handles for every surface the engine generates.

    Optional slots fall back: trim and back to base, v_groove to groove.
    """

    base: Any = None
    groove: Any = None
    panel: Any = None
    trim: Any = None
    back: Any = None
    v_groove: Any = None
    shadow: Any = None

    def resolve(self, slot: str) -> Any:
        value = getattr(self, slot)
        if value is not None:
            return value
        if slot in ("trim", "back"):
            return self.base
        if slot == "v_groove":
            return self.groove
        return None


def door_color(color_index: Optional[int]) -> DoorColor:
    """Catalog color for an index; out-of-range falls back to Wood Grain."""
    if color_index is None or not 0 <= color_index < len(DOOR_COLORS):
        return DOOR_COLORS[DEFAULT_COLOR_INDEX]
    return DOOR_COLORS[color_index]


def texture_repeat(width_ft: float, height_ft: float) -> Tuple[int, int]:
    """Tile counts that keep the grain scale fixed as the door resizes."""
    return (
        max(1, math.floor(width_ft * TEXTURE_REPEAT_PER_FT[0] + 0.5)),
        max(1, math.floor(height_ft * TEXTURE_REPEAT_PER_FT[1] + 0.5)),
    )


def make_material_set(
    color_index: int = DEFAULT_COLOR_INDEX,
    texture=None,
    door_size: Optional[Tuple[float, float]] = None,
) -> MaterialSet:
    """Build PBR materials for a catalog color.

    Args:
        color_index: Index into DOOR_COLORS.
        texture: Optional PIL image used as base color map on the textured
            slots (e.g. from TextureCache.wood()).
        door_size: (width, height) in feet. When given, the texture is tiled
            per texture_repeat() since door UVs span the whole door once.
    """
    if texture is not None and door_size is not None:
        texture = tile_texture(texture, texture_repeat(*door_size))
    rgb = np.array(door_color(color_index).rgb)
    slots = {}
    for slot, (scale, roughness) in _SLOT_SHADING.items():
        slots[slot] = PBRMaterial(
            name=f"door_{slot}",
            baseColorFactor=_rgba(rgb * scale),
            baseColorTexture=texture,
            metallicFactor=0.05,
            roughnessFactor=roughness,
        )
    back_rgb = np.array(DoorColor("Back", BACK_COLOR_HEX).rgb)
    slots["back"] = PBRMaterial(
        name="door_back",
        baseColorFactor=_rgba(back_rgb),
        metallicFactor=0.05,
        roughnessFactor=0.8,
    )
    slots["shadow"] = PBRMaterial(
        name="door_shadow",
        baseColorFactor=_rgba(np.zeros(3), alpha=SHADOW_OPACITY),
        metallicFactor=0.0,
        roughnessFactor=1.0,
        alphaMode="BLEND",
        doubleSided=True,
    )
    return MaterialSet(**slots)


def _rgba(rgb: np.ndarray, alpha: float = 1.0) -> List[int]:
    rgb = np.clip(rgb, 0.0, 1.0)
    return [int(round(c * 255)) for c in rgb] + [int(round(alpha * 255))]

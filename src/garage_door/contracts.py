"""Value types shared across the door geometry engine."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

from shapely.geometry import Polygon, box

from garage_door.constants import INCH_TO_FT
from garage_door.errors import DoorConfigError, ExtrusionError


class DoorStyle(Enum):
    """Door styles offered by the configurator."""
    RAISED_PANEL = "Raised Panel"
    CARRIAGE_HOUSE = "Carriage House"
    FLUSH = "Flush"
    MODERN_STEEL = "Modern Steel"
    SIMPLE = "Simple"

    @classmethod
    def from_label(cls, label: Any) -> Optional["DoorStyle"]:
        """Match a UI label, ignoring case, spaces, dashes and underscores.

        Returns None for anything unrecognized.
        """
        if isinstance(label, DoorStyle):
            return label
        if not isinstance(label, str):
            return None
        key = _style_key(label)
        for style in cls:
            if _style_key(style.value) == key or _style_key(style.name) == key:
                return style
        return None


def _style_key(text: str) -> str:
    return "".join(ch for ch in text.lower() if ch.isalnum())


@dataclass(frozen=True)
class DoorConfig:
    """Door configuration as chosen in the UI.

    Width and height are in inches; the engine works in feet.
    """

    width_inches: float = 192.0
    height_inches: float = 84.0
    style: str = DoorStyle.CARRIAGE_HOUSE.value
    color_index: int = 3
    window_style: str = "Top Row (4)"
    hardware_style: str = "Handles & Hinges"

    def __post_init__(self):
        _require_positive("width_inches", self.width_inches)
        _require_positive("height_inches", self.height_inches)
        _require_index("color_index", self.color_index)

    @property
    def width_ft(self) -> float:
        return float(self.width_inches) * INCH_TO_FT

    @property
    def height_ft(self) -> float:
        return float(self.height_inches) * INCH_TO_FT

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DoorConfig":
        """Build from the configurator's camelCase state payload."""
        missing = [key for key in ("width", "height") if data.get(key) is None]
        if missing:
            raise DoorConfigError(f"Missing door dimension(s): {', '.join(missing)}")
        defaults = cls()
        return cls(
            width_inches=data["width"],
            height_inches=data["height"],
            style=data.get("style", defaults.style),
            color_index=_parse_index("colorIndex", data.get("colorIndex", defaults.color_index)),
            window_style=data.get("windowStyle", defaults.window_style),
            hardware_style=data.get("hardwareStyle", defaults.hardware_style),
        )


def _require_positive(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DoorConfigError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value) or value <= 0:
        raise DoorConfigError(f"{name} must be a positive finite number, got {value!r}")


def _require_index(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise DoorConfigError(f"{name} must be an integer, got {value!r}")


def _parse_index(name: str, value: Any) -> int:
    """Integer from a JSON number or numeric string; out-of-range values pass."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            raise DoorConfigError(f"{name} must be an integer, got {value!r}") from None
    _require_index(name, value)
    return value


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle centered on (cx, cy)."""

    cx: float
    cy: float
    width: float
    height: float

    def shrink(self, amount: float) -> "Rect":
        """Inset every side by amount."""
        return Rect(self.cx, self.cy, self.width - 2 * amount, self.height - 2 * amount)

    def grow(self, amount: float) -> "Rect":
        """Push every side out by amount."""
        return self.shrink(-amount)

    @property
    def is_positive(self) -> bool:
        return self.width > 0 and self.height > 0

    def to_polygon(self) -> Polygon:
        half_w = self.width / 2
        half_h = self.height / 2
        return box(self.cx - half_w, self.cy - half_h, self.cx + half_w, self.cy + half_h)


@dataclass(frozen=True)
class ExtrusionSpec:
    """Depth and bevel parameters for a single extrusion.

    Rejects combinations that would fold the solid through itself,
    including a bevel thicker than the extrusion depth.
    """

    depth: float
    bevel_enabled: bool = False
    bevel_thickness: float = 0.0
    bevel_size: float = 0.0
    bevel_segments: int = 1
    bevel_offset: float = 0.0
    steps: int = 1

    def __post_init__(self):
        if not self.depth > 0:
            raise ExtrusionError(f"Extrusion depth must be positive, got {self.depth}")
        if self.steps < 1:
            raise ExtrusionError(f"Extrusion steps must be >= 1, got {self.steps}")
        if not self.bevel_enabled:
            return
        if self.bevel_segments < 1:
            raise ExtrusionError(
                f"bevel_segments must be >= 1 when beveling, got {self.bevel_segments}"
            )
        if self.bevel_thickness < 0 or self.bevel_size < 0:
            raise ExtrusionError("Bevel thickness and size must be non-negative")
        if self.bevel_thickness > self.depth:
            raise ExtrusionError(
                f"bevel_thickness {self.bevel_thickness} exceeds depth {self.depth}"
            )


@dataclass(frozen=True)
class PanelPosition:
    """Decorative panel placement in door-local feet (origin at door center)."""

    center_x: float
    center_y: float
    width: float
    height: float

    @property
    def rect(self) -> Rect:
        return Rect(self.center_x, self.center_y, self.width, self.height)


@dataclass(frozen=True)
class DoorSection:
    """One horizontal slice of the door."""

    index: int
    world_offset_y: float
    width: float
    height: float

    @property
    def bottom(self) -> float:
        return self.world_offset_y - self.height / 2

    @property
    def top(self) -> float:
        return self.world_offset_y + self.height / 2

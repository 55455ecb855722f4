"""
Door assembly facade: config in, centered renderable scene node out.

build_door_assembly() is pure. DoorAssemblyBuilder keeps the assembly that is
currently displayed and swaps in a fresh one on every rebuild.
"""

import logging
from typing import Any, Dict, List, Optional

import numpy as np

from garage_door.contracts import DoorConfig, DoorSection
from garage_door.materials import MaterialSet
from garage_door.scene_graph import Node
from garage_door.sections import assemble_sections
from garage_door.styles import StyleLayout, resolve_style

logger = logging.getLogger(__name__)


class DoorAssembly(Node):
    """Root node of a built door.

    Attributes:
        config: Configuration the door was built from.
        layout: Resolved style layout (after any fallback).
        sections: Horizontal sections, bottom to top.
        raw_bounds: World AABB before recentering, shape (2, 3).
    """

    def __init__(self, config: DoorConfig, layout: StyleLayout):
        super().__init__(name="garage_door")
        self.config = config
        self.layout = layout
        self.sections: List[DoorSection] = []
        self.raw_bounds: Optional[np.ndarray] = None
        self.disposed = False

    @property
    def style(self):
        return self.layout.style

    @property
    def window_style(self) -> str:
        return self.config.window_style

    @property
    def hardware_style(self) -> str:
        return self.config.hardware_style

    def dispose(self) -> None:
        super().dispose()
        self.disposed = True

    def summary(self) -> Dict[str, Any]:
        bounds = self.bounds()
        return {
            "style": self.style.value,
            "width_ft": self.config.width_ft,
            "height_ft": self.config.height_ft,
            "sections": len(self.sections),
            "primitives": self.primitive_count,
            "vertices": self.vertex_count,
            "bounds": None if bounds is None else bounds.round(6).tolist(),
            "window_style": self.window_style,
            "hardware_style": self.hardware_style,
        }


def build_door_assembly(config: DoorConfig, materials: MaterialSet) -> DoorAssembly:
    """Build the full door for a configuration.

    Args:
        config: Door dimensions (inches) and style selections.
        materials: Material handles assigned to the generated primitives.

    Returns:
        A DoorAssembly whose bounding-box center is the origin.

    Raises:
        DoorGeometryError: If any profile or extrusion is invalid.
    """
    width, height = config.width_ft, config.height_ft
    layout = resolve_style(config.style)

    assembly = DoorAssembly(config, layout)
    body, sections = assemble_sections(width, height, layout, materials)
    assembly.add(body)
    assembly.sections = sections

    raw = assembly.bounds()
    assembly.raw_bounds = raw
    if raw is not None:
        center = raw.mean(axis=0)
        assembly.set_position(*(-center))

    logger.info(
        "Built %s door %.2f x %.2f ft: %d sections, %d primitives, %d vertices",
        layout.style.value, width, height, len(sections),
        assembly.primitive_count, assembly.vertex_count,
    )
    return assembly


class DoorAssemblyBuilder:
    """Owns the displayed assembly across configuration changes."""

    def __init__(self):
        self.current: Optional[DoorAssembly] = None

    def rebuild(self, config: DoorConfig, materials: MaterialSet) -> DoorAssembly:
        """Build a new assembly, then dispose the old one and swap.

        If the build raises, the error propagates and the current assembly
        stays untouched.
        """
        staged = build_door_assembly(config, materials)
        previous, self.current = self.current, staged
        if previous is not None:
            previous.dispose()
        return staged

#!/usr/bin/env python3
"""Build one garage door and export it as GLB/OBJ/STL."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from garage_door import (
    DoorConfig,
    DoorGeometryError,
    TextureCache,
    build_door_assembly,
    make_material_set,
)
from garage_door.contracts import DoorStyle
from garage_door.materials import door_color

logger = logging.getLogger("build_door")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate a parametric garage door and export the mesh"
    )
    parser.add_argument(
        "--width-in", type=float, default=192.0, help="Door width in inches"
    )
    parser.add_argument(
        "--height-in", type=float, default=84.0, help="Door height in inches"
    )
    parser.add_argument(
        "--style",
        default=DoorStyle.CARRIAGE_HOUSE.value,
        help="Door style: " + ", ".join(s.value for s in DoorStyle),
    )
    parser.add_argument(
        "--color-index", type=int, default=3, help="Index into the door color catalog"
    )
    parser.add_argument(
        "--window-style", default="Top Row (4)", help="Window selection (metadata only)"
    )
    parser.add_argument(
        "--hardware-style",
        default="Handles & Hinges",
        help="Hardware selection (metadata only)",
    )
    parser.add_argument(
        "--output", default="door.glb", help="Output mesh path (.glb/.gltf/.obj/.stl)"
    )
    parser.add_argument(
        "--summary", default=None, help="Optional path for a JSON build summary"
    )
    parser.add_argument(
        "--wood-texture",
        action="store_true",
        help="Apply a procedural wood-grain texture to the door surfaces",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logs"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    started = time.perf_counter()
    try:
        config = DoorConfig(
            width_inches=args.width_in,
            height_inches=args.height_in,
            style=args.style,
            color_index=args.color_index,
            window_style=args.window_style,
            hardware_style=args.hardware_style,
        )
        texture = None
        if args.wood_texture:
            texture = TextureCache().wood(door_color(args.color_index).hex_value, size=(512, 512))
        materials = make_material_set(
            config.color_index, texture=texture, door_size=(config.width_ft, config.height_ft),
        )
        assembly = build_door_assembly(config, materials)
    except DoorGeometryError as exc:
        logger.error("Door build failed: %s", exc)
        return 2

    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)
    assembly.to_trimesh_scene().export(file_obj=str(output))
    elapsed = time.perf_counter() - started

    summary = assembly.summary()
    summary["elapsed_s"] = round(elapsed, 3)
    summary["output"] = str(output)
    if args.summary:
        summary_path = Path(args.summary)
        summary_path.parent.mkdir(parents=True, exist_ok=True)
        summary_path.write_text(json.dumps(summary, indent=2), encoding="utf-8")

    print(f"Style: {summary['style']}")
    print(f"Sections: {summary['sections']}")
    print(f"Primitives: {summary['primitives']}")
    print(f"Output: {output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

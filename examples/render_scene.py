#!/usr/bin/env python3
"""Render a single shadow-ray frame to a PNG file.

This script renders one frame headlessly: it builds the scene (the demo
scene, or one loaded from a JSON file), places the cursor, renders into a
fresh RGBA buffer and saves the result.

Usage:
    python -m examples.render_scene [options]

Options:
    --width WIDTH       Frame width in pixels (default: 800)
    --height HEIGHT     Frame height in pixels (default: 600)
    --cursor-x X        Cursor x position in pixels (default: 200)
    --cursor-y Y        Cursor y position in pixels (default: 150)
    --rays RAYS         Rays per light (default: 360)
    --method METHOD     Ray intersection: sampled or analytic (default: sampled)
    --scene FILE        JSON scene file (default: built-in demo scene)
    --output OUTPUT     Output file path (default: shadowcast.png)
    --quiet             Suppress progress output

Example:
    python -m examples.render_scene --cursor-x 100 --cursor-y 500 --rays 720
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

import taichi as ti


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a shadow-ray frame to a PNG file.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=800,
        help="Frame width in pixels (default: 800)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=600,
        help="Frame height in pixels (default: 600)",
    )
    parser.add_argument(
        "--cursor-x",
        type=float,
        default=200.0,
        help="Cursor x position in pixels (default: 200)",
    )
    parser.add_argument(
        "--cursor-y",
        type=float,
        default=150.0,
        help="Cursor y position in pixels (default: 150)",
    )
    parser.add_argument(
        "--rays",
        type=int,
        default=360,
        help="Rays per light (default: 360)",
    )
    parser.add_argument(
        "--method",
        choices=["sampled", "analytic"],
        default="sampled",
        help="Ray intersection method (default: sampled)",
    )
    parser.add_argument(
        "--scene",
        type=str,
        default=None,
        help="JSON scene file (default: built-in demo scene)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="shadowcast.png",
        help="Output file path (default: shadowcast.png)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args(argv)


def render_scene(
    width: int = 800,
    height: int = 600,
    cursor: tuple[float, float] = (200.0, 150.0),
    ray_count: int = 360,
    method: str = "sampled",
    scene_path: str | None = None,
    output_path: str = "shadowcast.png",
    quiet: bool = False,
) -> Path:
    """Render one frame and save it to a PNG file.

    Args:
        width: Frame width in pixels.
        height: Frame height in pixels.
        cursor: Cursor position in pixels.
        ray_count: Rays per light.
        method: Ray intersection method ("sampled" or "analytic").
        scene_path: Optional JSON scene file; the demo scene if None.
        output_path: Output file path (PNG).
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    import numpy as np

    from src.shadowcast.core.framebuffer import frame_size
    from src.shadowcast.core.renderer import RenderConfig, render
    from src.shadowcast.preview.export import save_png
    from src.shadowcast.scene.config import load_scene
    from src.shadowcast.scene.default import create_default_scene

    if scene_path is not None:
        scene = load_scene(scene_path)
    else:
        scene = create_default_scene(width, height)

    config = RenderConfig(ray_count=ray_count, intersection=method)  # type: ignore[arg-type]

    if not quiet:
        print(f"Rendering {len(scene)} circles ({width}x{height}, {ray_count} rays, {method})...")

    start_time = time.time()
    frame = np.zeros(frame_size(width, height), dtype=np.uint8)
    render(frame, cursor, width, height, scene=scene, config=config)

    output_file = Path(output_path)
    save_png(frame, width, height, output_file)

    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {time.time() - start_time:.2f}s")

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    # Use GPU if available, fall back to CPU
    try:
        ti.init(arch=ti.gpu)
        if not args.quiet:
            print("Using GPU backend")
    except Exception:
        ti.init(arch=ti.cpu)
        if not args.quiet:
            print("Using CPU backend")

    try:
        render_scene(
            width=args.width,
            height=args.height,
            cursor=(args.cursor_x, args.cursor_y),
            ray_count=args.rays,
            method=args.method,
            scene_path=args.scene,
            output_path=args.output,
            quiet=args.quiet,
        )
        return 0
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""Interactive shadow-ray demo: the light follows the mouse.

This script opens a Taichi GGUI window and renders the demo scene every
frame. The warm light tracks the cursor and casts its ray fan around the
central occluder.

Usage:
    python -m examples.interactive_scene

Controls:
    - Move the mouse: move the light
    - Ray count: number of rays per light
    - Analytic hits: switch to closed-form ray/circle intersection
    - Export PNG: save the current frame with a timestamp
"""

from __future__ import annotations

import logging
import platform
import sys
from pathlib import Path

# Ensure the project root is in the Python path for direct execution
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import taichi as ti  # noqa: E402

WIDTH = 800
HEIGHT = 600


def initialize_taichi() -> str:
    """Initialize Taichi with the best available backend.

    On macOS, prefers Metal. Falls back to CPU if GPU is unavailable.

    Returns:
        Name of the backend being used.
    """
    system = platform.system()

    if system == "Darwin":
        try:
            ti.init(arch=ti.metal)
            return "Metal (GPU)"
        except Exception:
            pass

    try:
        ti.init(arch=ti.gpu)
        return "GPU"
    except Exception:
        pass

    ti.init(arch=ti.cpu)
    return "CPU"


def main() -> int:
    """Main entry point for the interactive demo.

    Returns:
        Exit code (0 for success, non-zero for error).
    """
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    backend = initialize_taichi()
    print(f"Taichi backend: {backend}")

    # Import after Taichi initialization
    from src.shadowcast.preview.interactive import InteractivePreview

    if not InteractivePreview.is_display_available():
        print("Error: No display available. Cannot run interactive preview.")
        print("This script requires a graphical display environment.")
        return 1

    print(f"Creating interactive preview window ({WIDTH}x{HEIGHT})...")
    preview = InteractivePreview(WIDTH, HEIGHT)

    print("Starting interactive rendering...")
    print("  - Move the mouse to move the light")
    print("  - Click 'Export PNG' to save the current frame")
    print("  - Close window to exit")
    print()

    try:
        preview.run()
    except KeyboardInterrupt:
        print("\nInterrupted by user.")
    finally:
        preview.close()
        print("Preview window closed.")

    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Core rendering module.

This module contains the building blocks of a frame:

Components:
    framebuffer: Frame buffer validation and the per-pixel alpha compositor
    raster: Bresenham line and midpoint filled-circle rasterizers
    shadow: Shadow-ray fan casting with sampled or analytic intersection
    renderer: Frame orchestration (clear, rays, then disks)

All per-pixel work runs in Taichi kernels that write straight into the
host's buffer. Compositing loops are serialized so overlapping draws blend
in a fixed order.
"""

from .framebuffer import (
    BYTES_PER_PIXEL,
    as_frame_array,
    blend_pixel,
    clear_frame,
    draw_pixel,
    frame_size,
)
from .raster import (
    draw_circle,
    draw_line,
    rasterize_disk,
    rasterize_line,
    rasterize_span,
)

# Note: shadow and renderer are NOT imported here to avoid circular imports
# (they depend on the geometry and scene modules, which import framebuffer).
# Import directly from src.shadowcast.core.shadow or src.shadowcast.core.renderer.
#
# For rendering a frame, use:
#   from src.shadowcast.core.renderer import render

__all__ = [
    "BYTES_PER_PIXEL",
    "frame_size",
    "as_frame_array",
    "blend_pixel",
    "clear_frame",
    "draw_pixel",
    "rasterize_span",
    "rasterize_line",
    "rasterize_disk",
    "draw_line",
    "draw_circle",
]

"""Integer line and disk rasterization.

Both rasterizers are pure integer algorithms that hand every covered pixel
to ``blend_pixel``:

- ``rasterize_line``: Bresenham's line algorithm, used for ray segments.
- ``rasterize_disk``: the midpoint circle algorithm, filled by drawing
  symmetric horizontal spans instead of tracing only the boundary.

Pixels outside the frame rectangle are skipped, so partially visible
shapes are clipped rather than wrapped onto neighbouring rows.

Example:
    >>> import numpy as np
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.shadowcast.core.raster import draw_circle, draw_line
    >>> frame = np.zeros(64 * 64 * 4, dtype=np.uint8)
    >>> draw_circle(frame, 64, 64, 32, 32, 10, (255, 255, 255, 255))
    >>> draw_line(frame, 64, 64, 0, 0, 63, 40, (255, 255, 0, 100))
"""

from typing import Any

import taichi as ti

from src.shadowcast.core.framebuffer import (
    Color,
    FrameArray,
    as_frame_array,
    blend_pixel,
    ivec4,
    to_color_vector,
)


@ti.func
def rasterize_span(
    frame: ti.template(),
    width: ti.i32,
    height: ti.i32,
    x_start: ti.i32,
    x_end: ti.i32,
    y: ti.i32,
    color: ivec4,
):
    """Fill the inclusive horizontal span [x_start, x_end] on row y.

    Rows outside the frame are skipped entirely; the span is clipped to
    the frame columns.
    """
    if y >= 0 and y < height:
        x_lo = ti.max(x_start, 0)
        x_hi = ti.min(x_end, width - 1)
        for x in range(x_lo, x_hi + 1):
            blend_pixel(frame, width, x, y, color)


@ti.func
def rasterize_line(
    frame: ti.template(),
    width: ti.i32,
    height: ti.i32,
    x0: ti.i32,
    y0: ti.i32,
    x1: ti.i32,
    y1: ti.i32,
    color: ivec4,
):
    """Draw the segment (x0, y0) -> (x1, y1) with Bresenham's algorithm.

    Both endpoints are included. The sign terms ``sx``/``sy`` cover all
    eight octants, and points outside the frame are skipped without
    ending the line early.
    """
    x = x0
    y = y0
    dx = ti.abs(x1 - x0)
    dy = -ti.abs(y1 - y0)
    sx = ti.select(x0 < x1, 1, -1)
    sy = ti.select(y0 < y1, 1, -1)
    err = dx + dy

    done = False
    while not done:
        if x >= 0 and x < width and y >= 0 and y < height:
            blend_pixel(frame, width, x, y, color)
        if x == x1 and y == y1:
            done = True
        else:
            e2 = 2 * err
            if e2 >= dy:
                err += dy
                x += sx
            if e2 <= dx:
                err += dx
                y += sy


@ti.func
def rasterize_disk(
    frame: ti.template(),
    width: ti.i32,
    height: ti.i32,
    cx: ti.i32,
    cy: ti.i32,
    radius: ti.i32,
    color: ivec4,
):
    """Fill a disk using the midpoint circle algorithm.

    For each boundary point (x, y) of the first octant, four spans are
    filled: [cx-x, cx+x] at rows cy-y and cy+y, and [cx-y, cx+y] at rows
    cy-x and cy+x. Runs in O(radius) outer iterations. A radius of zero or
    less draws nothing.
    """
    if radius > 0:
        x = radius
        y = 0
        err = 0
        while x >= y:
            rasterize_span(frame, width, height, cx - x, cx + x, cy - y, color)
            rasterize_span(frame, width, height, cx - x, cx + x, cy + y, color)
            rasterize_span(frame, width, height, cx - y, cx + y, cy - x, color)
            rasterize_span(frame, width, height, cx - y, cx + y, cy + x, color)

            y += 1
            err += 1 + 2 * y
            if 2 * (err - x) + 1 > 0:
                x -= 1
                err += 1 - 2 * x


@ti.kernel
def _draw_line_kernel(
    frame: FrameArray,
    width: ti.i32,
    height: ti.i32,
    x0: ti.i32,
    y0: ti.i32,
    x1: ti.i32,
    y1: ti.i32,
    color: ivec4,
):
    rasterize_line(frame, width, height, x0, y0, x1, y1, color)


@ti.kernel
def _draw_disk_kernel(
    frame: FrameArray,
    width: ti.i32,
    height: ti.i32,
    cx: ti.i32,
    cy: ti.i32,
    radius: ti.i32,
    color: ivec4,
):
    rasterize_disk(frame, width, height, cx, cy, radius, color)


def draw_line(
    buffer: Any,
    width: int,
    height: int,
    x0: int,
    y0: int,
    x1: int,
    y1: int,
    color: Color,
) -> None:
    """Draw a Bresenham line into the frame buffer.

    Args:
        buffer: Host frame buffer (see ``as_frame_array``).
        width: Frame width in pixels.
        height: Frame height in pixels.
        x0: Start column.
        y0: Start row.
        x1: End column.
        y1: End row.
        color: RGBA color, channels in 0-255.
    """
    frame = as_frame_array(buffer, width, height)
    if frame.shape[0] > 0:
        _draw_line_kernel(frame, width, height, x0, y0, x1, y1, to_color_vector(color))


def draw_circle(
    buffer: Any,
    width: int,
    height: int,
    cx: int,
    cy: int,
    radius: int,
    color: Color,
) -> None:
    """Draw a filled circle into the frame buffer.

    Args:
        buffer: Host frame buffer (see ``as_frame_array``).
        width: Frame width in pixels.
        height: Frame height in pixels.
        cx: Center column.
        cy: Center row.
        radius: Radius in pixels; zero or negative draws nothing.
        color: RGBA color, channels in 0-255.
    """
    frame = as_frame_array(buffer, width, height)
    if frame.shape[0] > 0:
        _draw_disk_kernel(frame, width, height, cx, cy, radius, to_color_vector(color))

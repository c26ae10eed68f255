"""Shadow-ray casting against occluding circles.

Each light emits a fan of ``ray_count`` rays evenly spread over a full
revolution. A ray runs from the light's center to a nominal endpoint at
distance ``max(width, height)``, which reaches the frame edge from any
interior point, and is truncated at the first occluder it meets.

Two intersection methods are available:

- ``"sampled"`` (default): walk the segment in ``ceil(length)`` steps,
  round each sample to a pixel and test it against every occluder with
  ``point_in_circle``. The first sample inside an occluder wins, so the
  nearest hit along the ray is found by construction. Cost is
  O(samples x occluders) per ray.
- ``"analytic"``: closed-form ray/circle entry via ``hit_circle``, taking
  the nearest entry over all occluders. No inner sampling loop.

Occluders are passed to the kernels as an (n, 3) int32 array of
(cx, cy, radius) rows plus an explicit count.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.shadowcast.core.shadow import find_ray_intersection
    >>> find_ray_intersection(100, 300, 900, 300, [(300, 300, 50)])
    (250, 300)
"""

from collections.abc import Iterable
from typing import Literal

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from src.shadowcast.core.framebuffer import ivec4
from src.shadowcast.core.raster import rasterize_line
from src.shadowcast.geometry.circle import hit_circle, point_in_circle
from src.shadowcast.scene.packing import as_int_rows

vec2 = tm.vec2
ivec2 = tm.ivec2
ivec3 = tm.ivec3

# Type alias for intersection method options
IntersectionMethod = Literal["sampled", "analytic"]

INTERSECTION_METHODS: tuple[str, ...] = ("sampled", "analytic")

DEFAULT_RAY_COUNT = 360

# Kernel argument type for occluder / endpoint tables
IntTable = ti.types.ndarray(dtype=ti.i32, ndim=2)


@ti.dataclass
class RayHit:
    """Result of testing one ray segment against the occluders.

    Attributes:
        hit: 1 if the ray meets an occluder, 0 otherwise.
        x: Hit pixel column. Only valid if hit == 1.
        y: Hit pixel row. Only valid if hit == 1.
    """

    hit: ti.i32
    x: ti.i32
    y: ti.i32


def intersection_flag(method: str) -> int:
    """Map an intersection method name to the kernel flag (1 = analytic).

    Raises:
        ValueError: If ``method`` is not a known intersection method.
    """
    if method not in INTERSECTION_METHODS:
        raise ValueError(
            f"Unknown intersection method: {method!r} "
            f"(expected one of {', '.join(INTERSECTION_METHODS)})"
        )
    return 1 if method == "analytic" else 0


@ti.func
def round_to_pixel(v: ti.f32) -> ti.i32:
    """Round to the nearest integer, halves away from zero."""
    r = ti.floor(ti.abs(v) + 0.5)
    return ti.cast(ti.select(v < 0.0, -r, r), ti.i32)


@ti.func
def ray_endpoint(
    cx: ti.i32,
    cy: ti.i32,
    index: ti.i32,
    ray_count: ti.i32,
    ray_length: ti.f32,
) -> ivec2:
    """Nominal endpoint of ray ``index`` out of ``ray_count``.

    Ray i points along theta_i = i * 2*pi / ray_count; with 360 rays this
    is one ray per degree.
    """
    theta = ti.cast(index, ti.f32) * (2.0 * tm.pi / ti.cast(ray_count, ti.f32))
    ex = round_to_pixel(ti.cast(cx, ti.f32) + ray_length * ti.cos(theta))
    ey = round_to_pixel(ti.cast(cy, ti.f32) + ray_length * ti.sin(theta))
    return ivec2(ex, ey)


@ti.func
def sample_ray_hit(
    x0: ti.i32,
    y0: ti.i32,
    x1: ti.i32,
    y1: ti.i32,
    occluders: ti.template(),
    num_occluders: ti.i32,
) -> RayHit:
    """Find the first occluded pixel along a segment by discrete sampling.

    Samples t = k / steps for k in [1, steps), where steps is the segment
    length rounded up, so neither endpoint is tested. A zero-length
    segment never hits.
    """
    dx = x1 - x0
    dy = y1 - y0
    distance = ti.sqrt(ti.cast(dx * dx + dy * dy, ti.f32))
    steps = ti.cast(ti.ceil(distance), ti.i32)

    hit = 0
    hit_x = 0
    hit_y = 0

    step = 1
    while step < steps and hit == 0:
        t = ti.cast(step, ti.f32) / ti.cast(steps, ti.f32)
        px = round_to_pixel(ti.cast(x0, ti.f32) + ti.cast(dx, ti.f32) * t)
        py = round_to_pixel(ti.cast(y0, ti.f32) + ti.cast(dy, ti.f32) * t)

        for k in range(num_occluders):
            if hit == 0 and point_in_circle(
                px, py, occluders[k, 0], occluders[k, 1], occluders[k, 2]
            ):
                hit = 1
                hit_x = px
                hit_y = py

        step += 1

    return RayHit(hit=hit, x=hit_x, y=hit_y)


@ti.func
def analytic_ray_hit(
    x0: ti.i32,
    y0: ti.i32,
    x1: ti.i32,
    y1: ti.i32,
    occluders: ti.template(),
    num_occluders: ti.i32,
) -> RayHit:
    """Find where a segment first enters any occluder, in closed form.

    The entry point nearest to the source over all occluders is rounded to
    the nearest pixel. A zero-length segment never hits.
    """
    origin = vec2(ti.cast(x0, ti.f32), ti.cast(y0, ti.f32))
    delta = vec2(ti.cast(x1 - x0, ti.f32), ti.cast(y1 - y0, ti.f32))
    length = tm.length(delta)

    hit = 0
    hit_x = 0
    hit_y = 0

    if length > 0.0:
        direction = delta / length
        nearest = length
        found = 0

        for k in range(num_occluders):
            center = vec2(ti.cast(occluders[k, 0], ti.f32), ti.cast(occluders[k, 1], ti.f32))
            radius = ti.cast(occluders[k, 2], ti.f32)
            t = hit_circle(origin, direction, center, radius, length)
            if t >= 0.0 and (found == 0 or t < nearest):
                nearest = t
                found = 1

        if found == 1:
            point = origin + direction * nearest
            hit = 1
            hit_x = round_to_pixel(point.x)
            hit_y = round_to_pixel(point.y)

    return RayHit(hit=hit, x=hit_x, y=hit_y)


@ti.func
def find_ray_hit(
    x0: ti.i32,
    y0: ti.i32,
    x1: ti.i32,
    y1: ti.i32,
    occluders: ti.template(),
    num_occluders: ti.i32,
    analytic: ti.i32,
) -> RayHit:
    """Dispatch to the sampled or analytic intersection test."""
    hit = 0
    hit_x = 0
    hit_y = 0

    if analytic == 1:
        rec = analytic_ray_hit(x0, y0, x1, y1, occluders, num_occluders)
        hit = rec.hit
        hit_x = rec.x
        hit_y = rec.y
    else:
        rec = sample_ray_hit(x0, y0, x1, y1, occluders, num_occluders)
        hit = rec.hit
        hit_x = rec.x
        hit_y = rec.y

    return RayHit(hit=hit, x=hit_x, y=hit_y)


@ti.func
def trace_ray(
    x0: ti.i32,
    y0: ti.i32,
    x1: ti.i32,
    y1: ti.i32,
    occluders: ti.template(),
    num_occluders: ti.i32,
    analytic: ti.i32,
) -> ivec2:
    """Return where a ray stops: its hit point, or its nominal endpoint."""
    rec = find_ray_hit(x0, y0, x1, y1, occluders, num_occluders, analytic)
    end_x = ti.select(rec.hit == 1, rec.x, x1)
    end_y = ti.select(rec.hit == 1, rec.y, y1)
    return ivec2(end_x, end_y)


@ti.func
def cast_light_rays(
    frame: ti.template(),
    width: ti.i32,
    height: ti.i32,
    cx: ti.i32,
    cy: ti.i32,
    occluders: ti.template(),
    num_occluders: ti.i32,
    ray_count: ti.i32,
    ray_length: ti.f32,
    ray_color: ivec4,
    analytic: ti.i32,
):
    """Draw the shadowed ray fan of one light into the frame.

    Must run inside a serialized loop: overlapping rays blend into the
    same pixels.
    """
    for i in range(ray_count):
        end = ray_endpoint(cx, cy, i, ray_count, ray_length)
        stop = trace_ray(cx, cy, end[0], end[1], occluders, num_occluders, analytic)
        rasterize_line(frame, width, height, cx, cy, stop[0], stop[1], ray_color)


@ti.kernel
def _find_ray_hit_kernel(
    x0: ti.i32,
    y0: ti.i32,
    x1: ti.i32,
    y1: ti.i32,
    occluders: IntTable,
    num_occluders: ti.i32,
    analytic: ti.i32,
) -> ivec3:
    rec = find_ray_hit(x0, y0, x1, y1, occluders, num_occluders, analytic)
    return ivec3(rec.hit, rec.x, rec.y)


@ti.kernel
def _cast_rays_kernel(
    ends: IntTable,
    cx: ti.i32,
    cy: ti.i32,
    occluders: IntTable,
    num_occluders: ti.i32,
    ray_count: ti.i32,
    ray_length: ti.f32,
    analytic: ti.i32,
):
    for i in range(ray_count):
        end = ray_endpoint(cx, cy, i, ray_count, ray_length)
        stop = trace_ray(cx, cy, end[0], end[1], occluders, num_occluders, analytic)
        ends[i, 0] = stop[0]
        ends[i, 1] = stop[1]


def find_ray_intersection(
    x0: int,
    y0: int,
    x1: int,
    y1: int,
    occluders: Iterable[tuple[int, int, int]],
    *,
    method: IntersectionMethod = "sampled",
) -> tuple[int, int] | None:
    """Find where the segment (x0, y0) -> (x1, y1) first hits an occluder.

    This is a Python-callable wrapper for testing and tooling; the renderer
    runs the same Taichi function inside its frame kernel.

    Args:
        x0: Source column.
        y0: Source row.
        x1: End column.
        y1: End row.
        occluders: (cx, cy, radius) triples of the blocking circles.
        method: "sampled" or "analytic".

    Returns:
        The hit pixel (x, y), or None if the segment is unobstructed.

    Raises:
        ValueError: If ``method`` is unknown.
    """
    analytic = intersection_flag(method)
    table, count = as_int_rows(occluders, 3)
    result = _find_ray_hit_kernel(x0, y0, x1, y1, table, count, analytic)
    if int(result[0]) == 0:
        return None
    return int(result[1]), int(result[2])


def cast_rays(
    center: tuple[int, int],
    occluders: Iterable[tuple[int, int, int]],
    width: int,
    height: int,
    *,
    ray_count: int = DEFAULT_RAY_COUNT,
    method: IntersectionMethod = "sampled",
) -> npt.NDArray[np.int32]:
    """Compute where every ray of a light stops.

    Args:
        center: Resolved light center (x, y).
        occluders: (cx, cy, radius) triples of the blocking circles.
        width: Frame width in pixels.
        height: Frame height in pixels.
        ray_count: Number of rays in the fan.
        method: "sampled" or "analytic".

    Returns:
        Array of shape (ray_count, 2) holding each ray's drawn endpoint:
        its hit point, or the nominal endpoint if unobstructed.

    Raises:
        ValueError: If ``ray_count`` is negative or ``method`` is unknown.
    """
    if ray_count < 0:
        raise ValueError(f"ray_count must be non-negative, got {ray_count}")
    analytic = intersection_flag(method)

    ends = np.zeros((ray_count, 2), dtype=np.int32)
    if ray_count == 0:
        return ends

    table, count = as_int_rows(occluders, 3)
    ray_length = float(max(width, height))
    _cast_rays_kernel(ends, center[0], center[1], table, count, ray_count, ray_length, analytic)
    return ends

"""Circle scene entity and 2D circle intersection tests.

This module provides:

- ``Circle``: the immutable scene entity (center, radius, color, and the
  ``follows_cursor`` / ``emits_light`` flags).
- ``resolve_center``: turns an entity plus the frame's cursor into the
  integer center used for every draw in that frame.
- ``point_in_circle``: the integer occlusion test used by ray sampling.
- ``hit_circle``: closed-form ray/circle entry distance, using the robust
  quadratic formula so nearly tangent rays do not lose precision.

Example:
    >>> from src.shadowcast.geometry.circle import Circle, resolve_center
    >>> light = Circle(0, 0, 40, (255, 255, 200, 255)).with_cursor_follow().with_light_emission()
    >>> resolve_center(light, (1200.5, 37.9), 800, 600)
    (799, 37)
"""

import dataclasses
import math
from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from src.shadowcast.core.framebuffer import Color, validate_color

# Type alias for 2D vectors using Taichi's math module
vec2 = tm.vec2


@dataclass(frozen=True)
class Circle:
    """A circular scene entity.

    Circles are plain values: the scene is rebuilt every frame, so there is
    no identity or mutation across frames. Use ``with_cursor_follow`` and
    ``with_light_emission`` to derive flagged copies.

    Attributes:
        x: Fixed center column (ignored when ``follows_cursor`` is set).
        y: Fixed center row (ignored when ``follows_cursor`` is set).
        radius: Radius in pixels. A negative radius is degenerate: the
            circle is neither drawn nor tested as an occluder.
        color: RGBA fill color, channels in 0-255.
        follows_cursor: Resolve the center from the cursor each frame.
        emits_light: Act as a ray source instead of an occluder.
    """

    x: int
    y: int
    radius: int
    color: Color
    follows_cursor: bool = False
    emits_light: bool = False

    def __post_init__(self) -> None:
        # Normalise to a tuple of ints so equal circles compare equal
        object.__setattr__(self, "color", validate_color(self.color))

    def with_cursor_follow(self, follow: bool = True) -> "Circle":
        """Return a copy whose center tracks the cursor."""
        return dataclasses.replace(self, follows_cursor=follow)

    def with_light_emission(self, emits: bool = True) -> "Circle":
        """Return a copy that emits rays instead of occluding them."""
        return dataclasses.replace(self, emits_light=emits)

    @property
    def is_occluder(self) -> bool:
        """Whether rays are blocked by this circle."""
        return not self.emits_light and self.radius >= 0


def resolve_center(
    circle: Circle,
    cursor: tuple[float, float],
    width: int,
    height: int,
) -> tuple[int, int]:
    """Resolve the integer center of ``circle`` for the current frame.

    Cursor-following circles clamp the cursor per axis to
    [0, width-1] x [0, height-1] and truncate to integers; a NaN coordinate
    resolves to 0. Static circles return their fixed center.

    Call this once per circle per frame and reuse the result, so a cursor
    that moves mid-frame cannot make draws of the same entity disagree.

    Args:
        circle: The entity to resolve.
        cursor: Cursor position in buffer-pixel space.
        width: Frame width in pixels.
        height: Frame height in pixels.

    Returns:
        The (x, y) center in pixels.
    """
    if not circle.follows_cursor:
        return circle.x, circle.y

    x = _clamp_axis(cursor[0], width)
    y = _clamp_axis(cursor[1], height)
    return int(x), int(y)


def _clamp_axis(value: float, size: int) -> float:
    """Clamp one cursor coordinate to [0, size-1]; NaN maps to 0."""
    v = float(value)
    if math.isnan(v):
        return 0.0
    return min(max(v, 0.0), size - 1.0)


@ti.func
def point_in_circle(px: ti.i32, py: ti.i32, cx: ti.i32, cy: ti.i32, radius: ti.i32) -> ti.i32:
    """Check whether pixel (px, py) lies inside the circle.

    Compares squared distances, so no square root is taken.

    Returns:
        1 if dx^2 + dy^2 <= radius^2, 0 otherwise.
    """
    dx = px - cx
    dy = py - cy
    return ti.select(dx * dx + dy * dy <= radius * radius, 1, 0)


@ti.func
def _chord_params(h: ti.f32, c: ti.f32, sqrt_d: ti.f32):
    """Ray parameters where a unit-direction ray crosses a circle.

    Roots of t^2 + 2*h*t + c = 0. The root nearer zero is taken as c / q
    rather than -h +/- sqrt_d, which would cancel when |h| ~ sqrt_d.

    Returns:
        Tuple of (t_enter, t_exit) with t_enter <= t_exit.
    """
    q = -(h + ti.select(h < 0.0, -sqrt_d, sqrt_d))

    t_near = -h
    t_far = -h
    if ti.abs(q) >= 1e-10:
        t_near = c / q
        t_far = q

    return ti.min(t_near, t_far), ti.max(t_near, t_far)


@ti.func
def hit_circle(
    origin: vec2,
    direction: vec2,
    center: vec2,
    radius: ti.f32,
    t_max: ti.f32,
) -> ti.f32:
    """Distance along a ray to where it first enters a circle.

    Solves |origin + t * direction - center|^2 = radius^2 with a unit
    ``direction``, so t is measured in pixels. Only the open interval
    (0, t_max) counts; a ray that starts inside the circle enters at t = 0.

    Args:
        origin: Ray origin.
        direction: Unit ray direction.
        center: Circle center.
        radius: Circle radius.
        t_max: Length of the ray segment.

    Returns:
        The entry distance, or -1.0 if the segment misses the circle.
    """
    oc = origin - center
    h = tm.dot(direction, oc)
    c = tm.dot(oc, oc) - radius * radius
    discriminant = h * h - c

    result = -1.0
    if discriminant >= 0.0:
        sqrt_d = ti.sqrt(discriminant)
        t0, t1 = _chord_params(h, c, sqrt_d)
        if t1 > 0.0 and t0 < t_max:
            result = ti.max(t0, 0.0)

    return result

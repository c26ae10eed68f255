"""Frame orchestration: the single entry point the host calls each frame.

``render`` runs one frame start to finish:

1. Validate the host buffer and view it in place (no copy).
2. Resolve every circle's center once for this frame (``pack_scene``).
3. Clear the buffer to zero.
4. Draw the shadowed ray fan of every light.
5. Draw every circle as a filled disk, on top of the rays.

Rays are always drawn before disks, so opaque circles cover the ray
overlay beneath them. All compositing loops are serialized, which makes
the output byte-identical for identical inputs. No state survives between
calls: the host passes the buffer, cursor and dimensions every time.

Taichi must be initialized (``ti.init``) before the first call.

Example:
    >>> import numpy as np
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.shadowcast.core.renderer import render
    >>> frame = np.zeros(800 * 600 * 4, dtype=np.uint8)
    >>> render(frame, (120.0, 80.0), 800, 600)  # doctest: +ELLIPSIS
    array(...)
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

import numpy as np
import numpy.typing as npt
import taichi as ti

from src.shadowcast.core.framebuffer import (
    Color,
    FrameArray,
    as_frame_array,
    ivec4,
    to_color_vector,
    validate_color,
)
from src.shadowcast.core.raster import rasterize_disk
from src.shadowcast.core.shadow import (
    DEFAULT_RAY_COUNT,
    IntersectionMethod,
    IntTable,
    cast_light_rays,
    intersection_flag,
)
from src.shadowcast.geometry.circle import Circle
from src.shadowcast.scene.default import create_default_scene
from src.shadowcast.scene.packing import pack_scene

logger = logging.getLogger(__name__)

# Semi-transparent yellow
DEFAULT_RAY_COLOR: Color = (255, 255, 0, 100)


@dataclass(frozen=True)
class RenderConfig:
    """Quality and appearance settings for a render call.

    Attributes:
        ray_count: Rays emitted per light, evenly spread over 360 degrees.
        ray_color: RGBA color of the ray segments.
        intersection: "sampled" (discrete sampling along each ray) or
            "analytic" (closed-form ray/circle entry).

    Example:
        >>> RenderConfig(ray_count=720, intersection="analytic")
        RenderConfig(ray_count=720, ray_color=(255, 255, 0, 100), intersection='analytic')
    """

    ray_count: int = DEFAULT_RAY_COUNT
    ray_color: Color = DEFAULT_RAY_COLOR
    intersection: IntersectionMethod = "sampled"

    def __post_init__(self) -> None:
        if self.ray_count < 0:
            raise ValueError(f"ray_count must be non-negative, got {self.ray_count}")
        object.__setattr__(self, "ray_color", validate_color(self.ray_color))
        intersection_flag(self.intersection)


@ti.kernel
def _render_frame(
    frame: FrameArray,
    width: ti.i32,
    height: ti.i32,
    lights: IntTable,
    num_lights: ti.i32,
    occluders: IntTable,
    num_occluders: ti.i32,
    disks: IntTable,
    num_disks: ti.i32,
    ray_count: ti.i32,
    ray_length: ti.f32,
    ray_color: ivec4,
    analytic: ti.i32,
):
    """Clear the frame, then draw all rays, then all disks.

    Args:
        frame: Flat RGBA uint8 frame buffer.
        width: Frame width in pixels.
        height: Frame height in pixels.
        lights: (n, 2) light centers.
        num_lights: Number of lights.
        occluders: (n, 3) occluder centers and radii.
        num_occluders: Number of occluders.
        disks: (n, 7) disk centers, radii and RGBA colors.
        num_disks: Number of disks.
        ray_count: Rays per light.
        ray_length: Nominal ray length in pixels.
        ray_color: RGBA ray color.
        analytic: 1 for closed-form intersection, 0 for sampling.
    """
    for i in range(frame.shape[0]):
        frame[i] = ti.cast(0, ti.u8)

    ti.loop_config(serialize=True)
    for n in range(num_lights):
        cast_light_rays(
            frame,
            width,
            height,
            lights[n, 0],
            lights[n, 1],
            occluders,
            num_occluders,
            ray_count,
            ray_length,
            ray_color,
            analytic,
        )

    ti.loop_config(serialize=True)
    for k in range(num_disks):
        color = ivec4(disks[k, 3], disks[k, 4], disks[k, 5], disks[k, 6])
        rasterize_disk(frame, width, height, disks[k, 0], disks[k, 1], disks[k, 2], color)


def render(
    buffer: Any,
    cursor: tuple[float, float],
    width: int,
    height: int,
    scene: Iterable[Circle] | None = None,
    config: RenderConfig | None = None,
) -> npt.NDArray[np.uint8]:
    """Render one frame into the host's buffer, in place.

    Args:
        buffer: Writable RGBA frame buffer of exactly width * height * 4
            bytes (NumPy uint8 array, bytearray, or other writable buffer).
        cursor: Cursor position in buffer-pixel space.
        width: Frame width in pixels.
        height: Frame height in pixels.
        scene: Circles to draw, in order. Defaults to the demo scene built
            for this frame size.
        config: Render settings (defaults to RenderConfig()).

    Returns:
        A flat uint8 view sharing memory with ``buffer``.

    Raises:
        ValueError: If the buffer is read-only or its size does not match
            the dimensions.
    """
    frame = as_frame_array(buffer, width, height)

    if config is None:
        config = RenderConfig()
    if scene is None:
        scene = create_default_scene(width, height)

    packed = pack_scene(scene, cursor, width, height)

    if frame.shape[0] == 0:
        return frame

    _render_frame(
        frame,
        width,
        height,
        packed.lights,
        packed.num_lights,
        packed.occluders,
        packed.num_occluders,
        packed.disks,
        packed.num_disks,
        config.ray_count,
        float(max(width, height)),
        to_color_vector(config.ray_color),
        intersection_flag(config.intersection),
    )

    logger.debug(
        "Rendered %dx%d frame: %d lights, %d occluders, %d disks, %d rays/light (%s)",
        width,
        height,
        packed.num_lights,
        packed.num_occluders,
        packed.num_disks,
        config.ray_count,
        config.intersection,
    )
    return frame

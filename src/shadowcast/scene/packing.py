"""Per-frame scene resolution and packing for the render kernels.

``pack_scene`` resolves each circle's center exactly once for the frame and
splits the scene into the three tables the frame kernel consumes:

- lights: (x, y) of every light-emitting circle
- occluders: (x, y, radius) of every circle that blocks rays
- disks: (x, y, radius, r, g, b, a) of every circle, in scene order

Tables are int32 arrays with at least one row (zero padded) plus an
explicit count, so an empty category never produces a zero-sized kernel
argument.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

from src.shadowcast.geometry.circle import Circle, resolve_center


def as_int_rows(
    rows: Iterable[Sequence[int]],
    columns: int,
) -> tuple[npt.NDArray[np.int32], int]:
    """Pack integer rows into a zero-padded (max(n, 1), columns) int32 table.

    Args:
        rows: Rows of exactly ``columns`` integers each.
        columns: Number of columns per row.

    Returns:
        Tuple of (table, n) where n is the number of real rows.

    Raises:
        ValueError: If a row has the wrong number of values.
    """
    data = [tuple(int(v) for v in row) for row in rows]
    for row in data:
        if len(row) != columns:
            raise ValueError(f"Expected rows of {columns} values, got {row}")

    table = np.zeros((max(len(data), 1), columns), dtype=np.int32)
    if data:
        table[: len(data)] = np.asarray(data, dtype=np.int32)
    return table, len(data)


@dataclass(frozen=True)
class FrameScene:
    """A scene resolved for one frame.

    Attributes:
        lights: (n, 2) table of light centers.
        num_lights: Number of real rows in ``lights``.
        occluders: (n, 3) table of occluder centers and radii.
        num_occluders: Number of real rows in ``occluders``.
        disks: (n, 7) table of every circle's center, radius and RGBA color.
        num_disks: Number of real rows in ``disks``.
    """

    lights: npt.NDArray[np.int32]
    num_lights: int
    occluders: npt.NDArray[np.int32]
    num_occluders: int
    disks: npt.NDArray[np.int32]
    num_disks: int


def pack_scene(
    circles: Iterable[Circle],
    cursor: tuple[float, float],
    width: int,
    height: int,
) -> FrameScene:
    """Resolve every circle once and pack the frame's kernel tables.

    Light-emitting circles become ray sources and are never occluders, so a
    light cannot shadow its own rays. Circles with a negative radius block
    nothing. Every circle, lights included, is passed on as a disk; the
    rasterizer skips non-positive radii.

    Args:
        circles: The scene, in draw order.
        cursor: Cursor position in buffer-pixel space.
        width: Frame width in pixels.
        height: Frame height in pixels.

    Returns:
        The packed FrameScene.
    """
    lights: list[tuple[int, int]] = []
    occluders: list[tuple[int, int, int]] = []
    disks: list[tuple[int, ...]] = []

    for circle in circles:
        cx, cy = resolve_center(circle, cursor, width, height)
        if circle.emits_light:
            lights.append((cx, cy))
        elif circle.is_occluder:
            occluders.append((cx, cy, circle.radius))
        disks.append((cx, cy, circle.radius, *circle.color))

    light_table, num_lights = as_int_rows(lights, 2)
    occluder_table, num_occluders = as_int_rows(occluders, 3)
    disk_table, num_disks = as_int_rows(disks, 7)

    return FrameScene(
        lights=light_table,
        num_lights=num_lights,
        occluders=occluder_table,
        num_occluders=num_occluders,
        disks=disk_table,
        num_disks=num_disks,
    )

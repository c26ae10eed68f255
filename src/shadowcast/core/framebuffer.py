"""Frame buffer access and the per-pixel alpha compositor.

The frame buffer is a flat, row-major byte array with 4 bytes per pixel in
R, G, B, A order. The host owns the storage; this module only views it as a
``uint8`` NumPy array so Taichi kernels can write into it in place.

Every draw operation in the renderer eventually goes through
``blend_pixel``, which composites a single RGBA color over the destination
and forces the stored alpha to 255.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.shadowcast.core.framebuffer import as_frame_array
    >>> buffer = bytearray(4 * 4 * 4)
    >>> frame = as_frame_array(buffer, 4, 4)
    >>> frame.shape
    (64,)
"""

from typing import Any

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

# Integer RGBA color as used inside kernels
ivec4 = tm.ivec4

BYTES_PER_PIXEL = 4

# Kernel argument type for frame buffers
FrameArray = ti.types.ndarray(dtype=ti.u8, ndim=1)

Color = tuple[int, int, int, int]


def frame_size(width: int, height: int) -> int:
    """Return the byte length of a ``width`` x ``height`` RGBA frame."""
    return width * height * BYTES_PER_PIXEL


def as_frame_array(buffer: Any, width: int, height: int) -> npt.NDArray[np.uint8]:
    """View a host buffer as a flat, writable ``uint8`` array.

    The returned array shares memory with ``buffer``; nothing is copied.

    Args:
        buffer: A NumPy ``uint8`` array, ``bytearray`` or any writable object
            supporting the buffer protocol.
        width: Frame width in pixels.
        height: Frame height in pixels.

    Returns:
        A 1-D ``uint8`` view of length ``width * height * 4``.

    Raises:
        ValueError: If the dimensions are negative, the buffer is read-only,
            not contiguous, or its size does not match the dimensions.
    """
    if width < 0 or height < 0:
        raise ValueError(f"Frame dimensions must be non-negative, got {width}x{height}")

    if isinstance(buffer, np.ndarray):
        if buffer.dtype != np.uint8:
            raise ValueError(f"Frame buffer must have dtype uint8, got {buffer.dtype}")
        if not buffer.flags.c_contiguous:
            raise ValueError("Frame buffer must be C-contiguous")
        frame = buffer.reshape(-1)
    else:
        frame = np.frombuffer(buffer, dtype=np.uint8)

    if not frame.flags.writeable:
        raise ValueError("Frame buffer must be writable")

    expected = frame_size(width, height)
    if frame.shape[0] != expected:
        raise ValueError(
            f"Frame buffer holds {frame.shape[0]} bytes, expected {expected} "
            f"for a {width}x{height} RGBA frame"
        )
    return frame


def to_color_vector(color: Color) -> Any:
    """Convert an RGBA tuple to a Taichi ``ivec4`` kernel argument.

    Raises:
        ValueError: If ``color`` does not have 4 channels in 0-255.
    """
    return ivec4(*validate_color(color))


def validate_color(color: Any) -> Color:
    """Check that ``color`` is an RGBA tuple with channels in 0-255."""
    channels = tuple(int(c) for c in color)
    if len(channels) != 4:
        raise ValueError(f"Color must have 4 channels (RGBA), got {len(channels)}")
    for c in channels:
        if c < 0 or c > 255:
            raise ValueError(f"Color channels must be in [0, 255], got {channels}")
    return channels  # type: ignore[return-value]


@ti.func
def blend_pixel(frame: ti.template(), width: ti.i32, x: ti.i32, y: ti.i32, color: ivec4):
    """Alpha-blend ``color`` over the pixel at (x, y).

    Writes outside the buffer are dropped silently. Only the linear offset
    is checked, so callers clip to the frame rectangle themselves.

    Args:
        frame: Flat RGBA ``uint8`` array.
        width: Frame width in pixels.
        x: Pixel column.
        y: Pixel row.
        color: Source RGBA color, channels in 0-255.
    """
    i = (y * width + x) * 4
    if i >= 0 and i + 3 < frame.shape[0]:
        alpha = ti.cast(color[3], ti.f32) / 255.0
        inv_alpha = 1.0 - alpha
        for c in ti.static(range(3)):
            src = ti.cast(color[c], ti.f32)
            dst = ti.cast(frame[i + c], ti.f32)
            frame[i + c] = ti.cast(src * alpha + dst * inv_alpha, ti.u8)
        frame[i + 3] = ti.cast(255, ti.u8)


@ti.kernel
def _clear_frame_kernel(frame: FrameArray):
    for i in range(frame.shape[0]):
        frame[i] = ti.cast(0, ti.u8)


@ti.kernel
def _draw_pixel_kernel(frame: FrameArray, width: ti.i32, x: ti.i32, y: ti.i32, color: ivec4):
    blend_pixel(frame, width, x, y, color)


def clear_frame(buffer: Any, width: int, height: int) -> None:
    """Zero every byte of the frame buffer."""
    frame = as_frame_array(buffer, width, height)
    if frame.shape[0] > 0:
        _clear_frame_kernel(frame)


def draw_pixel(buffer: Any, width: int, height: int, x: int, y: int, color: Color) -> None:
    """Composite a single pixel into the frame buffer.

    Mirrors ``blend_pixel``: only the linear offset is bounds-checked, so an
    ``x`` past the right edge lands on the next row.
    """
    frame = as_frame_array(buffer, width, height)
    if frame.shape[0] > 0:
        _draw_pixel_kernel(frame, width, x, y, to_color_vector(color))

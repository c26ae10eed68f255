"""Image export utilities for rendered frames.

Frames are flat RGBA byte buffers; these helpers reshape them into images
and save them with Pillow.

Supported formats:
    - PNG (8-bit RGBA via Pillow)

Example:
    >>> import numpy as np
    >>> from src.shadowcast.preview.export import save_png
    >>> frame = np.zeros(64 * 48 * 4, dtype=np.uint8)
    >>> save_png(frame, 64, 48, "frame.png")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from src.shadowcast.core.framebuffer import BYTES_PER_PIXEL, frame_size

logger = logging.getLogger(__name__)


def frame_to_image(buffer: Any, width: int, height: int) -> npt.NDArray[np.uint8]:
    """View a flat RGBA frame as a (height, width, 4) image.

    The buffer is not copied and may be read-only.

    Raises:
        ValueError: If the buffer size doesn't match the dimensions.
    """
    if isinstance(buffer, np.ndarray):
        flat = buffer.reshape(-1)
    else:
        flat = np.frombuffer(buffer, dtype=np.uint8)

    expected = frame_size(width, height)
    if flat.shape[0] != expected:
        raise ValueError(
            f"Frame buffer holds {flat.shape[0]} bytes, expected {expected} "
            f"for a {width}x{height} RGBA frame"
        )
    return flat.reshape(height, width, BYTES_PER_PIXEL)


def frame_to_rgb_float(buffer: Any, width: int, height: int) -> npt.NDArray[np.float32]:
    """Convert a frame to a (height, width, 3) float32 image in [0, 1].

    The alpha channel is dropped; cleared pixels display as black.
    """
    image = frame_to_image(buffer, width, height)
    return (image[:, :, :3].astype(np.float32) / 255.0).astype(np.float32)


def save_png(buffer: Any, width: int, height: int, filepath: str | Path) -> None:
    """Save a frame as an 8-bit RGBA PNG file.

    Args:
        buffer: Flat RGBA frame buffer.
        width: Frame width in pixels.
        height: Frame height in pixels.
        filepath: Output file path (should end in .png).
    """
    image = np.ascontiguousarray(frame_to_image(buffer, width, height))

    pil_image = PILImage.fromarray(image)
    pil_image.save(str(filepath))
    logger.info("Saved %dx%d frame to %s", width, height, filepath)


def compute_rmse(
    frame_a: npt.NDArray[np.uint8],
    frame_b: npt.NDArray[np.uint8],
) -> float:
    """Compute root mean squared error between two frames.

    Args:
        frame_a: First frame (any shape).
        frame_b: Second frame (must have the same shape as frame_a).

    Returns:
        RMSE value in byte units (0 means identical).

    Raises:
        ValueError: If frame shapes don't match.
    """
    if frame_a.shape != frame_b.shape:
        raise ValueError(f"Frame shapes must match: {frame_a.shape} vs {frame_b.shape}")

    diff = frame_a.astype(np.float64) - frame_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))

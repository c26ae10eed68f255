"""Matplotlib-based preview display for rendered frames.

Shows a single frame in a Matplotlib figure. Useful for inspecting headless
renders without opening the interactive Taichi window.

Example:
    >>> import numpy as np
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.shadowcast.core.renderer import render
    >>> from src.shadowcast.preview.display import show_preview
    >>>
    >>> frame = np.zeros(800 * 600 * 4, dtype=np.uint8)
    >>> render(frame, (200.0, 150.0), 800, 600)
    >>> show_preview(frame, 800, 600)
"""

from __future__ import annotations

from typing import Any

from src.shadowcast.preview.export import frame_to_image


def show_preview(
    buffer: Any,
    width: int,
    height: int,
    *,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 6),
    block: bool = True,
) -> None:
    """Display a frame as a Matplotlib figure.

    Args:
        buffer: Flat RGBA frame buffer.
        width: Frame width in pixels.
        height: Frame height in pixels.
        title: Custom title (default shows the frame size).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until figure is closed.
    """
    import matplotlib.pyplot as plt

    image = frame_to_image(buffer, width, height)

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(image[:, :, :3])
    ax.axis("off")

    if title is None:
        title = f"Shadow rays ({width}x{height})"
    ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)

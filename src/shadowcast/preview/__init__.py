"""Preview module for output and visualization.

This module handles everything after a frame is rendered:

Components:
    export: Frame reshaping, PNG export and frame comparison
    display: Matplotlib-based static preview
    interactive: Taichi GGUI-based interactive window (the host loop)

Example:
    >>> import numpy as np
    >>> from src.shadowcast.core.renderer import render
    >>> from src.shadowcast.preview import save_png
    >>>
    >>> frame = np.zeros(800 * 600 * 4, dtype=np.uint8)
    >>> render(frame, (200.0, 150.0), 800, 600)
    >>> save_png(frame, 800, 600, "output.png")

For the interactive window:
    >>> from src.shadowcast.preview import InteractivePreview
    >>> preview = InteractivePreview(800, 600)
    >>> preview.run()
"""

from src.shadowcast.preview.display import show_preview
from src.shadowcast.preview.export import (
    compute_rmse,
    frame_to_image,
    frame_to_rgb_float,
    save_png,
)
from src.shadowcast.preview.interactive import InteractivePreview, normalized_to_pixel

__all__ = [
    # Interactive preview
    "InteractivePreview",
    "normalized_to_pixel",
    # Display functions
    "show_preview",
    # Export functions
    "save_png",
    "frame_to_image",
    "frame_to_rgb_float",
    "compute_rmse",
]

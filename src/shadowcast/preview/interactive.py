"""Interactive preview window using Taichi GGUI.

This module is the host side of the renderer: it owns the window, the frame
buffer and the cursor, and calls ``render`` once per frame with them.

Features:
    - Taichi GGUI window that redraws continuously until closed
    - Light follows the mouse cursor
    - GUI panel with ray count, intersection method and PNG export

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.shadowcast.preview.interactive import InteractivePreview
    >>>
    >>> preview = InteractivePreview(800, 600)
    >>> preview.run()  # Renders continuously until window closed
"""

from __future__ import annotations

import dataclasses
import logging
import os
from datetime import datetime
from typing import TYPE_CHECKING, Any

import numpy as np
import taichi as ti

from src.shadowcast.core.framebuffer import frame_size
from src.shadowcast.core.renderer import RenderConfig, render
from src.shadowcast.preview.export import frame_to_rgb_float, save_png
from src.shadowcast.scene.default import SceneParams, create_default_scene

if TYPE_CHECKING:
    import numpy.typing as npt

    from src.shadowcast.geometry.circle import Circle

logger = logging.getLogger(__name__)

MAX_GUI_RAY_COUNT = 1440


def normalized_to_pixel(
    position: tuple[float, float],
    width: int,
    height: int,
) -> tuple[float, float]:
    """Convert a GGUI cursor position to buffer-pixel space.

    GGUI reports the cursor in [0, 1] with the origin at the bottom-left;
    frame rows count down from the top.

    Args:
        position: Normalized (x, y) cursor position from the window.
        width: Frame width in pixels.
        height: Frame height in pixels.

    Returns:
        The (x, y) cursor position in pixels.
    """
    return position[0] * width, (1.0 - position[1]) * height


class InteractivePreview:
    """Interactive preview window using Taichi GGUI.

    Wraps ti.ui.Window and owns the host-side state the renderer needs:
    the RGBA frame buffer and the latest cursor position.

    Attributes:
        width: Window width in pixels.
        height: Window height in pixels.
        frame: Flat RGBA uint8 frame buffer passed to render().
        display_image: Taichi field storing the display image (RGB float).

    Example:
        >>> preview = InteractivePreview(800, 600)
        >>> preview.render_frame((400.0, 300.0))
        >>> preview.run()
    """

    def __init__(
        self,
        width: int,
        height: int,
        *,
        title: str = "Ray Tracer",
        scene_params: SceneParams | None = None,
        config: RenderConfig | None = None,
    ) -> None:
        """Initialize the interactive preview window.

        Args:
            width: Window width in pixels.
            height: Window height in pixels.
            title: Window title (default: "Ray Tracer").
            scene_params: Demo scene parameters (defaults to SceneParams()).
            config: Render settings (defaults to RenderConfig()).

        Note:
            Taichi must already be initialized. The window is created but
            not shown until run() is called.
        """
        self.width = width
        self.height = height
        self._title = title
        self._is_initialized = False

        self.scene_params = scene_params if scene_params is not None else SceneParams()
        self.config = config if config is not None else RenderConfig()

        # Defer window creation until run() to support headless checks
        self._window: ti.ui.Window | None = None
        self._canvas: ti.ui.Canvas | None = None

        self.frame: npt.NDArray[np.uint8] = np.zeros(frame_size(width, height), dtype=np.uint8)
        self._cursor: tuple[float, float] = (width / 2.0, height / 2.0)
        self._frame_count = 0

        # Shape is (width, height) for Taichi field, RGB values stored as vec3
        self.display_image: ti.MatrixField = ti.Vector.field(
            3, dtype=ti.f32, shape=(width, height)
        )

    def _initialize_window(self) -> None:
        """Initialize the Taichi GGUI window and canvas."""
        if self._is_initialized:
            return

        self._window = ti.ui.Window(
            name=self._title,
            res=(self.width, self.height),
            vsync=True,
        )
        self._canvas = self._window.get_canvas()
        self._is_initialized = True
        logger.info("Opened %dx%d preview window", self.width, self.height)

    @property
    def window(self) -> ti.ui.Window:
        """Get the Taichi GGUI window, initializing if needed."""
        if self._window is None:
            self._initialize_window()
        assert self._window is not None
        return self._window

    @property
    def canvas(self) -> ti.ui.Canvas:
        """Get the canvas for rendering."""
        if self._canvas is None:
            self._initialize_window()
        assert self._canvas is not None
        return self._canvas

    @property
    def cursor(self) -> tuple[float, float]:
        """The cursor position used for the most recent frame, in pixels."""
        return self._cursor

    @property
    def frame_count(self) -> int:
        """Number of frames rendered so far."""
        return self._frame_count

    def build_scene(self) -> list[Circle]:
        """Build this frame's scene from the current scene parameters."""
        return create_default_scene(self.width, self.height, self.scene_params)

    def render_frame(self, cursor: tuple[float, float]) -> None:
        """Render one frame for ``cursor`` and load it into the display image.

        Args:
            cursor: Cursor position in buffer-pixel space.
        """
        self._cursor = cursor
        render(
            self.frame,
            cursor,
            self.width,
            self.height,
            scene=self.build_scene(),
            config=self.config,
        )
        self.update_image(self.frame)
        self._frame_count += 1

    def update_image(self, buffer: Any) -> None:
        """Update the display image from a flat RGBA frame.

        Args:
            buffer: Flat RGBA frame of width * height * 4 bytes.

        Raises:
            ValueError: If the buffer size doesn't match the window size.
        """
        image = frame_to_rgb_float(buffer, self.width, self.height)

        # NumPy images are (height, width, channels) with row 0 at the top;
        # Taichi fields are (width, height) with the origin at bottom-left
        image_transposed = np.ascontiguousarray(np.transpose(np.flipud(image), (1, 0, 2)))
        self.display_image.from_numpy(image_transposed)

    def read_cursor(self) -> tuple[float, float]:
        """Read the window's cursor position in buffer-pixel space."""
        position = self.window.get_cursor_pos()
        return normalized_to_pixel((position[0], position[1]), self.width, self.height)

    def is_running(self) -> bool:
        """Check if the window is still open."""
        return self.window.running

    def show_frame(self) -> None:
        """Present the current display image."""
        self.canvas.set_image(self.display_image)
        self.window.show()

    def run(self) -> None:
        """Run the render loop until the window is closed.

        Each iteration reads the cursor once, renders a full frame with it,
        draws the GUI panel and presents the result.
        """
        self._initialize_window()

        while self.is_running():
            self.render_frame(self.read_cursor())
            self._draw_gui_panel()
            self.show_frame()

    def close(self) -> None:
        """Close the preview window."""
        if self._window is not None:
            self._window.running = False

    @staticmethod
    def is_display_available() -> bool:
        """Check if a display is available for GUI rendering.

        Returns:
            True if a display is available, False for headless environments.
        """
        display = os.environ.get("DISPLAY")
        wayland = os.environ.get("WAYLAND_DISPLAY")

        if os.name == "nt":
            return True

        # On macOS, display is always available if not in SSH
        if os.uname().sysname == "Darwin":
            ssh_connection = os.environ.get("SSH_CONNECTION")
            if ssh_connection and not display:
                return False
            return True

        return bool(display or wayland)

    def _draw_gui_panel(self) -> None:
        """Draw the GUI panel with ray controls and the export button."""
        with self.window.GUI.sub_window("Rays", 0.02, 0.02, 0.3, 0.18) as gui:
            new_ray_count = gui.slider_int(
                "Ray count", self.config.ray_count, minimum=0, maximum=MAX_GUI_RAY_COUNT
            )
            use_analytic = gui.checkbox(
                "Analytic hits", self.config.intersection == "analytic"
            )
            if gui.button("Export PNG"):
                self._export_png()

        method = "analytic" if use_analytic else "sampled"
        if new_ray_count != self.config.ray_count or method != self.config.intersection:
            self.config = dataclasses.replace(
                self.config, ray_count=new_ray_count, intersection=method
            )
            logger.debug("Render config changed: %s", self.config)

    def _export_png(self) -> str:
        """Export the current frame to a timestamped PNG file.

        Returns:
            The file name written.
        """
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filename = f"shadowcast_{timestamp}.png"
        save_png(self.frame, self.width, self.height, filename)
        print(f"Exported: {filename}")
        return filename

"""Default demo scene.

The demo scene is the smallest scene that shows the shadow-ray effect:

- a static white occluder at the frame center
- a warm-white light that follows the cursor and emits the ray fan

The scene is a plain list of immutable ``Circle`` values and is meant to be
rebuilt every frame from the current frame size.

Example:
    >>> from src.shadowcast.scene.default import create_default_scene
    >>> occluder, light = create_default_scene(800, 600)
    >>> (occluder.x, occluder.y, occluder.radius)
    (400, 300, 100)
    >>> light.follows_cursor and light.emits_light
    True
"""

from __future__ import annotations

from dataclasses import dataclass

from src.shadowcast.core.framebuffer import Color
from src.shadowcast.geometry.circle import Circle

# =============================================================================
# Demo Scene Constants
# =============================================================================

DEFAULT_WIDTH = 800
DEFAULT_HEIGHT = 600

OCCLUDER_RADIUS = 100
OCCLUDER_COLOR: Color = (255, 255, 255, 255)

LIGHT_RADIUS = 40
LIGHT_COLOR: Color = (255, 255, 200, 255)


@dataclass
class SceneParams:
    """Parameters for configuring the demo scene.

    Attributes:
        occluder_radius: Radius of the central occluder in pixels.
        occluder_color: RGBA color of the central occluder.
        light_radius: Radius of the light disk in pixels.
        light_color: RGBA color of the light disk.

    Example:
        >>> params = SceneParams(occluder_radius=60)
        >>> create_default_scene(320, 240, params)[0].radius
        60
    """

    occluder_radius: int = OCCLUDER_RADIUS
    occluder_color: Color = OCCLUDER_COLOR
    light_radius: int = LIGHT_RADIUS
    light_color: Color = LIGHT_COLOR


def create_default_scene(
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
    params: SceneParams | None = None,
) -> list[Circle]:
    """Create the demo scene for a frame of the given size.

    Args:
        width: Frame width in pixels.
        height: Frame height in pixels.
        params: Optional scene parameters (defaults to SceneParams()).

    Returns:
        List of [occluder, light]. The light's fixed center is (0, 0) but it
        is resolved from the cursor every frame.
    """
    if params is None:
        params = SceneParams()

    occluder = Circle(width // 2, height // 2, params.occluder_radius, params.occluder_color)
    light = (
        Circle(0, 0, params.light_radius, params.light_color)
        .with_cursor_follow(True)
        .with_light_emission(True)
    )
    return [occluder, light]

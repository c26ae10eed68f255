"""Scene module for scene construction, serialization and per-frame packing.

Components:
    default: The demo scene (central occluder plus a cursor-following light)
    config: Dictionary/JSON scene serialization
    packing: Per-frame center resolution and kernel table packing

Scenes are plain lists of immutable Circle values. They hold no Taichi
state: every frame, pack_scene resolves each circle's center once and
builds fresh int32 tables for the render kernel.
"""

from .config import (
    SceneConfig,
    circle_from_dict,
    circle_to_dict,
    load_scene,
    save_scene,
    scene_from_config,
    scene_from_dict,
    scene_to_config,
    scene_to_dict,
)
from .default import (
    DEFAULT_HEIGHT,
    DEFAULT_WIDTH,
    SceneParams,
    create_default_scene,
)
from .packing import FrameScene, as_int_rows, pack_scene

__all__ = [
    # Default scene
    "SceneParams",
    "create_default_scene",
    "DEFAULT_WIDTH",
    "DEFAULT_HEIGHT",
    # Serialization
    "SceneConfig",
    "circle_to_dict",
    "circle_from_dict",
    "scene_to_config",
    "scene_from_config",
    "scene_to_dict",
    "scene_from_dict",
    "load_scene",
    "save_scene",
    # Packing
    "FrameScene",
    "as_int_rows",
    "pack_scene",
]

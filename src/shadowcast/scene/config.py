"""Scene serialization to and from plain dictionaries and JSON files.

A scene file lists its circles in draw order:

    {
        "circles": [
            {"x": 400, "y": 300, "radius": 100, "color": [255, 255, 255, 255]},
            {"x": 0, "y": 0, "radius": 40, "color": [255, 255, 200, 255],
             "follows_cursor": true, "emits_light": true}
        ]
    }

Missing flags default to false. Loading rebuilds immutable ``Circle`` values,
so a loaded scene can be handed to ``render`` every frame unchanged.

Example:
    >>> from src.shadowcast.scene.config import scene_from_dict, scene_to_dict
    >>> scene = scene_from_dict({"circles": [{"x": 1, "y": 2, "radius": 3,
    ...                                       "color": [0, 0, 0, 255]}]})
    >>> scene_to_dict(scene)["circles"][0]["radius"]
    3
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from src.shadowcast.geometry.circle import Circle

logger = logging.getLogger(__name__)


@dataclass
class SceneConfig:
    """Configuration for scene serialization.

    Attributes:
        circles: List of circle configurations, in draw order.
    """

    circles: list[dict[str, Any]] = field(default_factory=list)


def circle_to_dict(circle: Circle) -> dict[str, Any]:
    """Export a circle to a JSON-compatible dictionary."""
    return {
        "x": circle.x,
        "y": circle.y,
        "radius": circle.radius,
        "color": list(circle.color),
        "follows_cursor": circle.follows_cursor,
        "emits_light": circle.emits_light,
    }


def circle_from_dict(data: dict[str, Any]) -> Circle:
    """Build a circle from a dictionary entry.

    Raises:
        ValueError: If a required key is missing or a value is invalid.
    """
    missing = [key for key in ("x", "y", "radius", "color") if key not in data]
    if missing:
        raise ValueError(f"Circle entry is missing keys: {', '.join(missing)}")

    color = data["color"]
    if not isinstance(color, (list, tuple)):
        raise ValueError(f"Circle color must be a list of 4 channels, got {color!r}")

    return Circle(
        x=int(data["x"]),
        y=int(data["y"]),
        radius=int(data["radius"]),
        color=tuple(int(c) for c in color),  # type: ignore[arg-type]
        follows_cursor=bool(data.get("follows_cursor", False)),
        emits_light=bool(data.get("emits_light", False)),
    )


def scene_to_config(circles: list[Circle]) -> SceneConfig:
    """Export a scene to a configuration object."""
    return SceneConfig(circles=[circle_to_dict(circle) for circle in circles])


def scene_from_config(config: SceneConfig) -> list[Circle]:
    """Load a scene from a configuration object.

    Raises:
        ValueError: If the configuration contains invalid data.
    """
    return [circle_from_dict(entry) for entry in config.circles]


def scene_to_dict(circles: list[Circle]) -> dict[str, Any]:
    """Export a scene to a dictionary (for JSON serialization)."""
    return {"circles": scene_to_config(circles).circles}


def scene_from_dict(data: dict[str, Any]) -> list[Circle]:
    """Load a scene from a dictionary with a 'circles' key.

    Raises:
        ValueError: If the dictionary contains invalid data.
    """
    circles = data.get("circles", [])
    if not isinstance(circles, list):
        raise ValueError(f"'circles' must be a list, got {type(circles).__name__}")
    return scene_from_config(SceneConfig(circles=circles))


def load_scene(filepath: str | Path) -> list[Circle]:
    """Load a scene from a JSON file.

    Raises:
        ValueError: If the file does not describe a valid scene.
    """
    path = Path(filepath)
    with path.open("r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid scene file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Scene file {path} must contain a JSON object")

    circles = scene_from_dict(data)
    logger.info("Loaded %d circles from %s", len(circles), path)
    return circles


def save_scene(circles: list[Circle], filepath: str | Path) -> None:
    """Save a scene as a JSON file."""
    path = Path(filepath)
    with path.open("w", encoding="utf-8") as f:
        json.dump(scene_to_dict(circles), f, indent=2)
    logger.info("Saved %d circles to %s", len(circles), path)

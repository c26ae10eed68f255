"""Taichi-based 2D shadow-ray renderer.

This package rasterizes a small scene of circles into an RGBA byte buffer
every frame. One or more circles act as point lights emitting a fan of
rays; each ray stops at the first opaque circle it meets, so the ray
overlay shows the shadows cast by the occluders.

Subpackages:
    core: Pixel compositor, line/disk rasterizers, shadow-ray caster and
        the frame renderer
    geometry: Circle entity and circle intersection tests
    scene: Demo scene, scene serialization and per-frame packing
    preview: PNG export, Matplotlib preview and the interactive window
"""

__version__ = "0.1.0"

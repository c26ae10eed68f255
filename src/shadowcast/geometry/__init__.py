"""Geometry module for the circle primitive and its intersection tests.

Components:
    circle: Circle scene entity, center resolution, point-in-circle test
        and closed-form ray/circle entry

Occlusion tests are Taichi functions (@ti.func) so the shadow-ray caster
can call them from inside its kernels.
"""

from .circle import Circle, hit_circle, point_in_circle, resolve_center

__all__ = [
    "Circle",
    "resolve_center",
    "point_in_circle",
    "hit_circle",
]

"""Pytest configuration for shadowcast tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import numpy as np
import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


def make_frame(width: int, height: int) -> np.ndarray:
    """Allocate a cleared RGBA frame buffer."""
    return np.zeros(width * height * 4, dtype=np.uint8)


def pixel(frame: np.ndarray, width: int, x: int, y: int) -> tuple[int, int, int, int]:
    """Read the RGBA value of pixel (x, y) from a flat frame."""
    i = (y * width + x) * 4
    return tuple(int(v) for v in frame[i : i + 4])  # type: ignore[return-value]


def painted_mask(frame: np.ndarray, width: int, height: int) -> np.ndarray:
    """Boolean (height, width) mask of pixels that have been drawn to."""
    return frame.reshape(height, width, 4)[:, :, 3] == 255


@pytest.fixture
def frame_helpers():
    """Expose the frame helper functions to tests."""

    class _Helpers:
        make_frame = staticmethod(make_frame)
        pixel = staticmethod(pixel)
        painted_mask = staticmethod(painted_mask)

    return _Helpers

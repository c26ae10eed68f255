"""Unit tests for Bresenham lines and midpoint disks.

Tests cover:
- Endpoint inclusion and pixel counts in all octants
- Degenerate single-point lines
- Clipping of lines and disks at the frame edges (no row wrap)
- Disk area against pi * r^2
- Radius zero as a no-op
"""

import math

import numpy as np
import pytest

WHITE = (255, 255, 255, 255)


class TestDrawLine:
    """Tests for Bresenham line rasterization."""

    @pytest.mark.parametrize(
        "x0,y0,x1,y1",
        [
            (2, 3, 20, 9),  # shallow, +x +y
            (2, 3, 9, 20),  # steep, +x +y
            (20, 3, 2, 9),  # shallow, -x +y
            (9, 3, 2, 20),  # steep, -x +y
            (20, 9, 2, 3),  # shallow, -x -y
            (9, 20, 2, 3),  # steep, -x -y
            (2, 9, 20, 3),  # shallow, +x -y
            (2, 20, 9, 3),  # steep, +x -y
        ],
    )
    def test_line_covers_endpoints_in_every_octant(self, frame_helpers, x0, y0, x1, y1):
        """Test that both endpoints are painted and the pixel count is exact."""
        from src.shadowcast.core.raster import draw_line

        w, h = 32, 32
        frame = frame_helpers.make_frame(w, h)

        draw_line(frame, w, h, x0, y0, x1, y1, WHITE)

        mask = frame_helpers.painted_mask(frame, w, h)
        assert mask[y0, x0]
        assert mask[y1, x1]
        assert mask.sum() == max(abs(x1 - x0), abs(y1 - y0)) + 1

    def test_horizontal_line(self, frame_helpers):
        """Test that a horizontal line paints one contiguous row."""
        from src.shadowcast.core.raster import draw_line

        frame = frame_helpers.make_frame(16, 16)

        draw_line(frame, 16, 16, 3, 5, 12, 5, WHITE)

        mask = frame_helpers.painted_mask(frame, 16, 16)
        assert mask[5, 3:13].all()
        assert mask.sum() == 10

    def test_single_point_line(self, frame_helpers):
        """Test that a zero-length line paints exactly one pixel."""
        from src.shadowcast.core.raster import draw_line

        frame = frame_helpers.make_frame(8, 8)

        draw_line(frame, 8, 8, 4, 4, 4, 4, WHITE)

        mask = frame_helpers.painted_mask(frame, 8, 8)
        assert mask.sum() == 1
        assert mask[4, 4]

    def test_line_starting_off_frame_is_clipped(self, frame_helpers):
        """Test that off-frame points are skipped but the line continues."""
        from src.shadowcast.core.raster import draw_line

        frame = frame_helpers.make_frame(16, 16)

        draw_line(frame, 16, 16, -5, 2, 10, 2, WHITE)

        mask = frame_helpers.painted_mask(frame, 16, 16)
        assert mask[2, 0:11].all()
        assert mask.sum() == 11

    def test_line_past_right_edge_does_not_wrap(self, frame_helpers):
        """Test that columns past the right edge never land on the next row."""
        from src.shadowcast.core.raster import draw_line

        frame = frame_helpers.make_frame(8, 8)

        draw_line(frame, 8, 8, 4, 2, 20, 2, WHITE)

        mask = frame_helpers.painted_mask(frame, 8, 8)
        assert mask[2, 4:8].all()
        assert mask.sum() == 4

    def test_translucent_line_blends(self, frame_helpers):
        """Test that line pixels are composited, not overwritten."""
        from src.shadowcast.core.raster import draw_line

        frame = frame_helpers.make_frame(8, 8)

        draw_line(frame, 8, 8, 0, 0, 7, 0, (255, 255, 0, 100))

        # 255 * 100/255 = 100
        assert frame_helpers.pixel(frame, 8, 3, 0) == (100, 100, 0, 255)


class TestDrawCircle:
    """Tests for midpoint disk rasterization."""

    def test_disk_area_close_to_pi_r_squared(self, frame_helpers):
        """Test that the painted area approximates pi * r^2."""
        from src.shadowcast.core.raster import draw_circle

        w, h, r = 64, 64, 10
        frame = frame_helpers.make_frame(w, h)

        draw_circle(frame, w, h, 32, 32, r, WHITE)

        count = frame_helpers.painted_mask(frame, w, h).sum()
        assert abs(count - math.pi * r * r) <= 2 * math.pi * r

    def test_disk_is_filled_and_bounded(self, frame_helpers):
        """Test that the center is painted and nothing lies beyond the radius."""
        from src.shadowcast.core.raster import draw_circle

        w, h, r, cx, cy = 64, 64, 12, 30, 28
        frame = frame_helpers.make_frame(w, h)

        draw_circle(frame, w, h, cx, cy, r, WHITE)

        mask = frame_helpers.painted_mask(frame, w, h)
        ys, xs = np.nonzero(mask)
        assert mask[cy, cx]
        assert xs.min() == cx - r and xs.max() == cx + r
        assert ys.min() == cy - r and ys.max() == cy + r

    def test_disk_is_symmetric(self, frame_helpers):
        """Test that the disk is symmetric about both axes through its center."""
        from src.shadowcast.core.raster import draw_circle

        w, h = 41, 41
        frame = frame_helpers.make_frame(w, h)

        draw_circle(frame, w, h, 20, 20, 15, WHITE)

        mask = frame_helpers.painted_mask(frame, w, h)
        assert np.array_equal(mask, mask[::-1, :])
        assert np.array_equal(mask, mask[:, ::-1])

    def test_zero_radius_draws_nothing(self, frame_helpers):
        """Test that a radius of zero is a no-op."""
        from src.shadowcast.core.raster import draw_circle

        frame = frame_helpers.make_frame(16, 16)

        draw_circle(frame, 16, 16, 8, 8, 0, WHITE)

        assert not frame.any()

    def test_disk_fully_off_frame_draws_nothing(self, frame_helpers):
        """Test that a disk entirely above-left of the frame paints nothing."""
        from src.shadowcast.core.raster import draw_circle

        frame = frame_helpers.make_frame(64, 64)

        draw_circle(frame, 64, 64, -50, -50, 10, WHITE)

        assert not frame.any()

    def test_disk_past_right_edge_does_not_wrap(self, frame_helpers):
        """Test that a disk right of the frame never wraps onto other rows."""
        from src.shadowcast.core.raster import draw_circle

        frame = frame_helpers.make_frame(64, 64)

        draw_circle(frame, 64, 64, 100, 10, 10, WHITE)

        assert not frame.any()

    def test_disk_straddling_edge_is_clipped(self, frame_helpers):
        """Test that a disk crossing the left edge keeps only the visible part."""
        from src.shadowcast.core.raster import draw_circle

        w, h = 32, 32
        frame = frame_helpers.make_frame(w, h)

        draw_circle(frame, w, h, 0, 16, 8, WHITE)

        mask = frame_helpers.painted_mask(frame, w, h)
        assert mask[16, 0:9].all()
        assert not mask[:, 9:].any()
        assert not mask[:, w - 1].any()

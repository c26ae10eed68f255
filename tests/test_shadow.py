"""Unit tests for shadow-ray casting.

Tests cover:
- Sampled and analytic intersection against a single occluder
- Agreement between the two methods, and where pixel rounding makes them differ
- Nearest-occluder selection
- Ray fan geometry without occluders
- Input validation for method names and ray counts
"""

import numpy as np
import pytest
import taichi as ti

METHODS = ["sampled", "analytic"]


class TestIntersectionFlag:
    """Tests for intersection method selection."""

    def test_known_methods(self):
        """Test the kernel flag for each method."""
        from src.shadowcast.core.shadow import intersection_flag

        assert intersection_flag("sampled") == 0
        assert intersection_flag("analytic") == 1

    def test_unknown_method_raises(self):
        """Test that an unknown method name is rejected."""
        from src.shadowcast.core.shadow import intersection_flag

        with pytest.raises(ValueError, match="Unknown intersection method"):
            intersection_flag("bvh")


class TestRoundToPixel:
    """Tests for round-half-away-from-zero."""

    @pytest.mark.parametrize(
        "value,expected",
        [(0.4, 0), (0.5, 1), (1.5, 2), (-0.5, -1), (-1.4, -1), (-2.5, -3)],
    )
    def test_round_to_pixel(self, value, expected):
        """Test that halves round away from zero."""
        from src.shadowcast.core.shadow import round_to_pixel

        @ti.kernel
        def test_kernel(v: ti.f32) -> ti.i32:
            return round_to_pixel(v)

        assert test_kernel(value) == expected


class TestFindRayIntersection:
    """Tests for the single-ray intersection wrapper."""

    @pytest.mark.parametrize("method", METHODS)
    def test_hit_on_near_side_of_occluder(self, method):
        """Test that a horizontal ray stops at the occluder's near edge."""
        from src.shadowcast.core.shadow import find_ray_intersection

        hit = find_ray_intersection(100, 300, 900, 300, [(300, 300, 50)], method=method)

        assert hit == (250, 300)

    @pytest.mark.parametrize("method", METHODS)
    def test_no_occluders(self, method):
        """Test that an unobstructed ray reports no hit."""
        from src.shadowcast.core.shadow import find_ray_intersection

        assert find_ray_intersection(100, 300, 900, 300, [], method=method) is None

    @pytest.mark.parametrize("method", METHODS)
    def test_occluder_off_the_ray(self, method):
        """Test that an occluder beside the ray is not hit."""
        from src.shadowcast.core.shadow import find_ray_intersection

        hit = find_ray_intersection(100, 300, 900, 300, [(500, 100, 50)], method=method)

        assert hit is None

    @pytest.mark.parametrize("method", METHODS)
    def test_occluder_beyond_segment_end(self, method):
        """Test that an occluder past the endpoint is not hit."""
        from src.shadowcast.core.shadow import find_ray_intersection

        hit = find_ray_intersection(100, 300, 200, 300, [(400, 300, 50)], method=method)

        assert hit is None

    @pytest.mark.parametrize("method", METHODS)
    def test_nearest_occluder_wins(self, method):
        """Test that the first occluder along the ray is reported."""
        from src.shadowcast.core.shadow import find_ray_intersection

        occluders = [(600, 300, 50), (300, 300, 20)]
        hit = find_ray_intersection(100, 300, 900, 300, occluders, method=method)

        assert hit == (280, 300)

    @pytest.mark.parametrize("method", METHODS)
    def test_thin_distant_occluder(self, method):
        """Test a radius-2 occluder far along a diagonal ray."""
        from src.shadowcast.core.shadow import find_ray_intersection

        hit = find_ray_intersection(0, 0, 566, 566, [(400, 400, 2)], method=method)

        assert hit == (399, 399)

    def test_sampling_rounds_onto_thin_occluder(self):
        """Test that pixel rounding makes sampling hit a radius-1 occluder the exact ray misses."""
        from src.shadowcast.core.shadow import cast_rays

        occluders = [(461, 160, 1)]
        sampled = cast_rays((0, 0), occluders, 800, 600, method="sampled")
        analytic = cast_rays((0, 0), occluders, 800, 600, method="analytic")

        # Ray 19 passes just beside the occluder; a rounded sample lands inside it
        assert tuple(sampled[19]) == (461, 159)
        assert tuple(analytic[19]) == (756, 260)

    @pytest.mark.parametrize("method", METHODS)
    def test_vertical_ray(self, method):
        """Test a ray travelling down the y axis."""
        from src.shadowcast.core.shadow import find_ray_intersection

        hit = find_ray_intersection(50, 0, 50, 200, [(50, 100, 10)], method=method)

        assert hit == (50, 90)

    @pytest.mark.parametrize("method", METHODS)
    def test_zero_length_segment(self, method):
        """Test that a degenerate segment never hits."""
        from src.shadowcast.core.shadow import find_ray_intersection

        hit = find_ray_intersection(300, 300, 300, 300, [(300, 300, 50)], method=method)

        assert hit is None

    def test_unknown_method_raises(self):
        """Test that the wrapper validates the method name."""
        from src.shadowcast.core.shadow import find_ray_intersection

        with pytest.raises(ValueError):
            find_ray_intersection(0, 0, 10, 10, [], method="exact")  # type: ignore[arg-type]

    @pytest.mark.parametrize("method", METHODS)
    def test_oblique_ray(self, method):
        """Test a 3-4-5 ray aimed straight at an occluder's center."""
        from src.shadowcast.core.shadow import find_ray_intersection

        hit = find_ray_intersection(0, 0, 600, 450, [(400, 300, 50)], method=method)

        assert hit == (360, 270)


class TestCastRays:
    """Tests for whole ray fans."""

    @pytest.mark.parametrize("method", METHODS)
    def test_unobstructed_rays_reach_nominal_length(self, method):
        """Test that every ray ends max(width, height) from the light."""
        from src.shadowcast.core.shadow import cast_rays

        ends = cast_rays((400, 300), [], 800, 600, ray_count=360, method=method)

        assert ends.shape == (360, 2)
        distances = np.hypot(ends[:, 0] - 400, ends[:, 1] - 300)
        assert np.all(np.abs(distances - 800) <= 1.0)

    def test_ray_order_follows_angle(self):
        """Test that ray i points along theta = i * 2*pi / ray_count."""
        from src.shadowcast.core.shadow import cast_rays

        ends = cast_rays((400, 300), [], 800, 600, ray_count=4)

        assert tuple(ends[0]) == (1200, 300)
        assert tuple(ends[1]) == (400, 1100)
        assert tuple(ends[2]) == (-400, 300)
        assert tuple(ends[3]) == (400, -500)

    def test_rays_stop_at_occluder(self):
        """Test that the ray pointing at an occluder is truncated."""
        from src.shadowcast.core.shadow import cast_rays

        ends = cast_rays((100, 300), [(300, 300, 50)], 800, 600, ray_count=360)

        assert tuple(ends[0]) == (250, 300)
        assert tuple(ends[180]) == (-700, 300)

    def test_zero_rays(self):
        """Test that zero rays yield an empty result."""
        from src.shadowcast.core.shadow import cast_rays

        ends = cast_rays((0, 0), [(10, 10, 5)], 100, 100, ray_count=0)

        assert ends.shape == (0, 2)

    def test_negative_ray_count_raises(self):
        """Test that a negative ray count is rejected."""
        from src.shadowcast.core.shadow import cast_rays

        with pytest.raises(ValueError, match="non-negative"):
            cast_rays((0, 0), [], 100, 100, ray_count=-1)

    def test_repeatable(self):
        """Test that casting the same fan twice gives identical results."""
        from src.shadowcast.core.shadow import cast_rays

        occluders = [(300, 300, 100), (650, 120, 30)]
        a = cast_rays((50, 50), occluders, 800, 600)
        b = cast_rays((50, 50), occluders, 800, 600)

        assert np.array_equal(a, b)

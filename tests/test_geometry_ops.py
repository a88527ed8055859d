"""
Unit tests for geometry_ops module.

Tests cover crop clamping, rotation dimensions, quarter-turn pixel
placement and transparent rotation corners.
"""

import math

import numpy as np
import pytest

from IE_Libs.ImageEditingLib.geometry_ops import (
    crop_image,
    get_crop_dimensions,
    get_rotated_dimensions,
    rotate_90,
    rotate_image,
)
from IE_Libs.ImageEditingLib.image_models import CropArea, RasterBuffer


def assert_well_formed(buffer):
    assert len(buffer.pixels) == buffer.width * buffer.height * 4


class TestGetCropDimensions:
    """Tests for get_crop_dimensions."""

    def test_fits_inside(self):
        assert get_crop_dimensions(10, 10, 30, 40, 100, 100) == (30, 40)

    def test_limited_by_remaining_space(self):
        assert get_crop_dimensions(80, 90, 50, 50, 100, 100) == (20, 10)

    def test_never_negative(self):
        assert get_crop_dimensions(150, 150, 50, 50, 100, 100) == (0, 0)


class TestCropImage:
    """Tests for crop_image."""

    def test_simple_crop(self, large_buffer):
        result = crop_image(large_buffer, CropArea(10, 20, 30, 40))

        assert result.size == (30, 40)
        assert_well_formed(result)
        # Red encodes source x, green encodes source y
        assert result.getpixel(0, 0)[:2] == (10, 20)
        assert result.getpixel(29, 39)[:2] == (39, 59)

    def test_origin_out_of_bounds_is_clamped(self, large_buffer):
        result = crop_image(large_buffer, CropArea(1000, 1000, 50, 50))

        assert result.size == (50, 50)
        assert_well_formed(result)
        assert result.getpixel(0, 0)[:2] == (50, 50)

    def test_negative_origin_is_clamped(self, large_buffer):
        result = crop_image(large_buffer, CropArea(-15, -5, 30, 30))

        assert result.getpixel(0, 0)[:2] == (0, 0)

    def test_minimum_size_enforced(self, large_buffer):
        result = crop_image(large_buffer, CropArea(95, 95, 5, 2))

        assert result.size == (20, 20)
        assert result.getpixel(0, 0)[:2] == (80, 80)

    def test_negative_size_becomes_minimum(self, large_buffer):
        result = crop_image(large_buffer, CropArea(10, 10, -40, 0))

        assert result.size == (20, 20)

    def test_oversized_request_is_capped(self, large_buffer):
        result = crop_image(large_buffer, CropArea(0, 0, 500, 500))

        assert result.size == (100, 100)
        assert result == large_buffer

    def test_source_smaller_than_minimum(self, quadrant_buffer):
        result = crop_image(quadrant_buffer, CropArea(1, 1, 1, 1))

        assert result.size == (4, 2)
        assert result == quadrant_buffer

    def test_does_not_mutate_input(self, large_buffer):
        before = large_buffer.pixels
        crop_image(large_buffer, CropArea(0, 0, 20, 20))

        assert large_buffer.pixels == before


class TestGetRotatedDimensions:
    """Tests for get_rotated_dimensions."""

    @pytest.mark.parametrize("angle", [90, 270, -90, 450])
    def test_quarter_turns_swap(self, angle):
        assert get_rotated_dimensions(40, 10, angle) == (10, 40)

    @pytest.mark.parametrize("angle", [0, 180, 360, -180, 720])
    def test_half_turns_keep(self, angle):
        assert get_rotated_dimensions(40, 10, angle) == (40, 10)

    def test_arbitrary_angle_bounding_box(self):
        width, height = get_rotated_dimensions(100, 50, 30)
        cos, sin = math.cos(math.radians(30)), math.sin(math.radians(30))

        assert width == int(100 * cos + 50 * sin)
        assert height == int(100 * sin + 50 * cos)

    def test_45_degrees_square(self):
        assert get_rotated_dimensions(10, 10, 45) == (14, 14)

    @pytest.mark.parametrize("angle", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_angle_raises(self, angle):
        with pytest.raises(ValueError):
            get_rotated_dimensions(10, 10, angle)


class TestRotateImage:
    """Tests for rotate_image and rotate_90."""

    def test_rotate_90_clockwise_pixels(self, quadrant_buffer):
        result = rotate_90(quadrant_buffer, clockwise=True)

        assert result.size == (2, 4)
        # Bottom-left of the source becomes top-left
        assert result.getpixel(0, 0) == (0, 0, 0, 255)
        # Top-left of the source becomes top-right
        assert result.getpixel(1, 0) == (255, 0, 0, 255)
        assert result.getpixel(1, 3) == (255, 255, 255, 255)

    def test_rotate_90_counterclockwise_pixels(self, quadrant_buffer):
        result = rotate_90(quadrant_buffer, clockwise=False)

        assert result.size == (2, 4)
        # Top-right of the source becomes top-left
        assert result.getpixel(0, 0) == (255, 255, 255, 255)
        assert result.getpixel(0, 3) == (255, 0, 0, 255)

    def test_rotate_90_round_trip(self, quadrant_buffer):
        result = rotate_90(rotate_90(quadrant_buffer, True), False)

        assert result.size == quadrant_buffer.size
        assert result == quadrant_buffer

    def test_rotate_90_round_trip_dimensions_after_arbitrary_rotation(self, large_buffer):
        rotated = rotate_image(large_buffer, 17)
        result = rotate_90(rotate_90(rotated, True), False)

        assert result.size == rotated.size

    def test_rotate_180(self, quadrant_buffer):
        result = rotate_image(quadrant_buffer, 180)

        assert result.size == (4, 2)
        assert result.getpixel(0, 0) == (0, 255, 255, 255)
        assert result.getpixel(3, 1) == (255, 0, 0, 255)

    def test_rotate_zero_is_identity(self, quadrant_buffer):
        assert rotate_image(quadrant_buffer, 0) == quadrant_buffer
        assert rotate_image(quadrant_buffer, 360) == quadrant_buffer

    def test_negative_angle_normalized(self, quadrant_buffer):
        assert rotate_image(quadrant_buffer, -270) == rotate_image(quadrant_buffer, 90)

    def test_arbitrary_angle_size_and_transparent_corners(self):
        buffer = RasterBuffer.new(40, 40, (200, 50, 50, 255))
        result = rotate_image(buffer, 45)

        assert result.size == get_rotated_dimensions(40, 40, 45)
        assert_well_formed(result)
        assert result.getpixel(0, 0)[3] == 0
        assert result.getpixel(result.width - 1, result.height - 1)[3] == 0

        center = result.getpixel(result.width // 2, result.height // 2)
        assert center == (200, 50, 50, 255)

    def test_arbitrary_angle_turns_clockwise_about_center(self):
        # Left half red, right half blue
        pixels = np.zeros((10, 40, 4), dtype=np.uint8)
        pixels[:, :20] = (255, 0, 0, 255)
        pixels[:, 20:] = (0, 0, 255, 255)
        result = rotate_image(RasterBuffer.from_array(pixels), 30)

        assert result.size == (39, 28)

        # Twelve pixels right of center, turned 30 degrees clockwise on screen
        right = result.getpixel(30, 20)
        assert right[3] == 255
        assert right[2] > 245 and right[0] < 10

        left = result.getpixel(9, 8)
        assert left[3] == 255
        assert left[0] > 245 and left[2] < 10

        # A counter-clockwise turn would cover these instead
        assert result.getpixel(30, 8)[3] == 0
        assert result.getpixel(9, 20)[3] == 0
        assert result.getpixel(result.width - 1, 0)[3] == 0

    def test_rotate_does_not_mutate_input(self, quadrant_buffer):
        before = quadrant_buffer.pixels
        rotate_image(quadrant_buffer, 33)

        assert quadrant_buffer.pixels == before

    def test_nan_angle_raises(self, quadrant_buffer):
        with pytest.raises(ValueError):
            rotate_image(quadrant_buffer, float("nan"))

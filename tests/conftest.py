"""
Pytest configuration and shared fixtures for image editor tests.

This module provides shared test fixtures and configuration
used across multiple test modules.
"""

import io

import numpy as np
import pytest
from PIL import Image

from IE_Libs.ImageEditingLib.image_models import RasterBuffer


def encode_image(image, fmt="PNG", **kwargs):
    """Encode a PIL image to bytes."""
    output = io.BytesIO()
    image.save(output, format=fmt, **kwargs)
    return output.getvalue()


@pytest.fixture
def sample_rgba_colors():
    """
    Provide a list of sample RGBA color tuples for testing.

    Returns:
        List of (R, G, B, A) tuples with common test colors
    """
    return [
        (255, 0, 0, 255),    # Red
        (0, 255, 0, 255),    # Green
        (0, 0, 255, 255),    # Blue
        (255, 255, 255, 255),  # White
        (0, 0, 0, 255),      # Black
        (128, 128, 128, 255),  # Gray
    ]


@pytest.fixture
def flat_buffer():
    """A 10x8 buffer filled with one opaque color."""
    return RasterBuffer.new(10, 8, (120, 90, 60, 255))


@pytest.fixture
def gradient_buffer():
    """
    A 16x16 gray ramp: pixel i (row-major) has R = G = B = i.

    Every luminance value 0-255 appears exactly once. Alpha varies by
    row so alpha preservation is observable.
    """
    values = np.arange(256, dtype=np.uint8).reshape(16, 16)
    array = np.zeros((16, 16, 4), dtype=np.uint8)
    array[..., 0] = values
    array[..., 1] = values
    array[..., 2] = values
    array[..., 3] = np.repeat(np.arange(16, dtype=np.uint8) * 16 + 15, 16).reshape(16, 16)
    return RasterBuffer.from_array(array)


@pytest.fixture
def quadrant_buffer():
    """
    A 4x2 buffer with a distinct color per pixel, for geometry checks.

    Layout (x, y):
        (0,0) red    (1,0) green  (2,0) blue   (3,0) white
        (0,1) black  (1,1) gray   (2,1) yellow (3,1) cyan
    """
    colors = [
        [(255, 0, 0, 255), (0, 255, 0, 255), (0, 0, 255, 255), (255, 255, 255, 255)],
        [(0, 0, 0, 255), (128, 128, 128, 255), (255, 255, 0, 255), (0, 255, 255, 255)],
    ]
    return RasterBuffer.from_array(np.array(colors, dtype=np.uint8))


@pytest.fixture
def large_buffer():
    """A 100x100 buffer with a horizontal red ramp, for crop checks."""
    array = np.zeros((100, 100, 4), dtype=np.uint8)
    array[..., 0] = np.arange(100, dtype=np.uint8)[np.newaxis, :]
    array[..., 1] = np.arange(100, dtype=np.uint8)[:, np.newaxis]
    array[..., 3] = 255
    return RasterBuffer.from_array(array)


@pytest.fixture
def png_bytes():
    """PNG encoding of a 30x20 RGBA image."""
    image = Image.new("RGBA", (30, 20), (10, 200, 30, 128))
    return encode_image(image, "PNG")


@pytest.fixture
def jpeg_bytes():
    """JPEG encoding of a 40x24 RGB image."""
    image = Image.new("RGB", (40, 24), (200, 100, 50))
    return encode_image(image, "JPEG", quality=90)


@pytest.fixture
def png_file(tmp_path, png_bytes):
    """A PNG written to disk."""
    path = tmp_path / "sample.png"
    path.write_bytes(png_bytes)
    return path

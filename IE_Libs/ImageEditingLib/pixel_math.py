"""
Shared per-pixel helpers for the tone, color and lighting operations.

Every operation reads a RasterBuffer into float RGB planes, computes new
channel values, and writes them back with 8-bit clamped semantics: values
are rounded to the nearest integer (ties to even) and clamped to 0-255.
Alpha is always carried over unchanged.
"""

import math
from typing import Tuple

import numpy as np

from IE_Libs.ImageEditingLib.image_models import RasterBuffer
from IE_Libs.constants import LUMA_RED, LUMA_GREEN, LUMA_BLUE


def clamp(value: float, low: float, high: float) -> float:
    """
    Clamp a slider value to [low, high].

    Raises:
        ValueError: If value is NaN
    """
    value = float(value)
    if math.isnan(value):
        raise ValueError(f"Adjustment value must be a number, got {value}")
    return max(low, min(high, value))


def split_rgb(buffer: RasterBuffer) -> Tuple[np.ndarray, np.ndarray]:
    """
    Read a buffer for processing.

    Returns:
        Tuple of (rgba, rgb): the writable uint8 RGBA array and a float64
        copy of its first three channels
    """
    rgba = buffer.to_array()
    return rgba, rgba[..., :3].astype(np.float64)


def luminance(rgb: np.ndarray) -> np.ndarray:
    """Perceptual luminance 0.299R + 0.587G + 0.114B for each pixel."""
    return LUMA_RED * rgb[..., 0] + LUMA_GREEN * rgb[..., 1] + LUMA_BLUE * rgb[..., 2]


def to_bytes_clamped(values: np.ndarray) -> np.ndarray:
    return np.clip(np.rint(values), 0, 255).astype(np.uint8)


def merge_rgb(rgba: np.ndarray, rgb: np.ndarray) -> RasterBuffer:
    """Write float RGB values into ``rgba`` (alpha untouched) and wrap a new buffer."""
    rgba[..., :3] = to_bytes_clamped(rgb)
    return RasterBuffer.from_array(rgba)


def channel_averages(rgb: np.ndarray) -> Tuple[float, float, float]:
    """Image-wide average of the R, G and B channels."""
    flat = rgb.reshape(-1, 3)
    avg = flat.mean(axis=0)
    return float(avg[0]), float(avg[1]), float(avg[2])

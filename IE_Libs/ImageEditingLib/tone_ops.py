"""
Tone operations: brightness, contrast, and shadow/highlight recovery.

Every function takes a RasterBuffer plus a slider value, clamps the value
to its range (never rejects it), and returns a new buffer. Only the R, G
and B channels change; alpha is carried over untouched.

Example:
    >>> adjusted = apply_brightness_contrast(buffer, brightness=20, contrast=-10)
    >>> recovered = apply_shadows_highlights(adjusted, shadows=40, highlights=0)
"""

import logging

import numpy as np

from IE_Libs.ImageEditingLib.image_models import RasterBuffer
from IE_Libs.ImageEditingLib.pixel_math import clamp, luminance, merge_rgb, split_rgb
from IE_Libs.constants import (
    BRIGHTNESS_RANGE,
    CONTRAST_PIVOT,
    CONTRAST_RANGE,
    HIGHLIGHT_RECOVERY_MAX,
    SHADOW_RECOVERY_MAX,
    STRENGTH_RANGE,
    TONE_MIDPOINT,
)

logger = logging.getLogger(__name__)


# ============================================================================
# Brightness / Contrast
# ============================================================================

def apply_brightness(buffer: RasterBuffer, value: float) -> RasterBuffer:
    """
    Apply a brightness adjustment (-100 to +100).

    The value becomes a multiplier ``1 + value / 100``: -100 turns every
    color sample black, 0 leaves the image unchanged, +100 doubles it.

    Args:
        buffer: Source RasterBuffer
        value: Brightness in [-100, 100]; out-of-range values are clamped

    Returns:
        New RasterBuffer
    """
    multiplier = 1.0 + clamp(value, *BRIGHTNESS_RANGE) / 100.0
    rgba, rgb = split_rgb(buffer)
    return merge_rgb(rgba, rgb * multiplier)


def apply_contrast(buffer: RasterBuffer, value: float) -> RasterBuffer:
    """
    Apply a contrast adjustment (-100 to +100) around mid-gray.

    ``c' = (c - 128) * f + 128`` with ``f = 1 + value / 100``, so -100
    flattens everything to gray and +100 doubles the distance from gray.

    Args:
        buffer: Source RasterBuffer
        value: Contrast in [-100, 100]; out-of-range values are clamped

    Returns:
        New RasterBuffer
    """
    factor = 1.0 + clamp(value, *CONTRAST_RANGE) / 100.0
    rgba, rgb = split_rgb(buffer)
    return merge_rgb(rgba, (rgb - CONTRAST_PIVOT) * factor + CONTRAST_PIVOT)


def apply_brightness_contrast(
    buffer: RasterBuffer,
    brightness: float,
    contrast: float,
) -> RasterBuffer:
    """Apply brightness, then contrast to the brightness-adjusted result."""
    return apply_contrast(apply_brightness(buffer, brightness), contrast)


# ============================================================================
# Shadow / Highlight Recovery
# ============================================================================

def apply_shadow_recovery(buffer: RasterBuffer, amount: float) -> RasterBuffer:
    """
    Lighten dark areas (0 to 100).

    Pixels with luminance below 128 are pulled toward white in proportion
    to how dark they are, by at most 50% at full strength on pure black.

    Args:
        buffer: Source RasterBuffer
        amount: Strength in [0, 100]; out-of-range values are clamped

    Returns:
        New RasterBuffer
    """
    strength = clamp(amount, *STRENGTH_RANGE) / 100.0
    rgba, rgb = split_rgb(buffer)
    lum = luminance(rgb)

    darkness = 1.0 - lum / TONE_MIDPOINT
    lighten = np.where(lum < TONE_MIDPOINT, strength * darkness * SHADOW_RECOVERY_MAX, 0.0)

    return merge_rgb(rgba, rgb + (255.0 - rgb) * lighten[..., np.newaxis])


def apply_highlight_recovery(buffer: RasterBuffer, amount: float) -> RasterBuffer:
    """
    Darken bright areas (0 to 100).

    Pixels with luminance above 128 are scaled toward black in proportion
    to how bright they are, by at most 50% at full strength.

    Args:
        buffer: Source RasterBuffer
        amount: Strength in [0, 100]; out-of-range values are clamped

    Returns:
        New RasterBuffer
    """
    strength = clamp(amount, *STRENGTH_RANGE) / 100.0
    rgba, rgb = split_rgb(buffer)
    lum = luminance(rgb)

    brightness = (lum - TONE_MIDPOINT) / TONE_MIDPOINT
    darken = np.where(lum > TONE_MIDPOINT, strength * brightness * HIGHLIGHT_RECOVERY_MAX, 0.0)

    return merge_rgb(rgba, rgb - rgb * darken[..., np.newaxis])


def apply_shadows_highlights(
    buffer: RasterBuffer,
    shadows: float,
    highlights: float,
) -> RasterBuffer:
    """Apply shadow recovery then highlight recovery, skipping zero-strength stages."""
    processed = buffer
    if shadows > 0:
        processed = apply_shadow_recovery(processed, shadows)
    if highlights > 0:
        processed = apply_highlight_recovery(processed, highlights)
    if processed is buffer:
        logger.debug("Shadows/highlights skipped: both strengths are zero")
    return processed

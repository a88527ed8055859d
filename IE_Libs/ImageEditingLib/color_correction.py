"""
Color-cast operations for the image editor core.

Functions:
    remove_yellowing: Reduce yellow/amber casts pixel by pixel
    even_colors: Pull every pixel toward the image-average color, keeping its brightness
    remove_color_cast: Subtract the global deviation of each channel from neutral gray
    auto_color_correction: Fixed chain of the three corrections above

even_colors and remove_color_cast are two-pass: the image-wide channel
averages are computed over every pixel before any pixel is changed.
"""

import logging

import numpy as np

from IE_Libs.ImageEditingLib.image_models import RasterBuffer
from IE_Libs.ImageEditingLib.pixel_math import (
    channel_averages,
    clamp,
    luminance,
    merge_rgb,
    split_rgb,
)
from IE_Libs.constants import (
    AUTO_COLOR_CAST_STRENGTH,
    AUTO_EVEN_COLORS_STRENGTH,
    AUTO_YELLOWING_STRENGTH,
    LUMA_BLUE,
    LUMA_GREEN,
    LUMA_RED,
    STRENGTH_RANGE,
    YELLOW_BLUE_BOOST,
    YELLOW_CAST_SCALE,
    YELLOW_CORRECTION_MAX,
)

logger = logging.getLogger(__name__)


def remove_yellowing(buffer: RasterBuffer, amount: float) -> RasterBuffer:
    """
    Remove a yellowing/amber color cast (0 to 100).

    A pixel skews yellow when ``(R + G) / 2 - B`` is positive. Such pixels
    have red and green reduced and blue nudged up, in proportion to how
    yellow they are, with at most 50% correction.

    Args:
        buffer: Source RasterBuffer
        amount: Strength in [0, 100]; out-of-range values are clamped

    Returns:
        New RasterBuffer
    """
    strength = clamp(amount, *STRENGTH_RANGE) / 100.0
    rgba, rgb = split_rgb(buffer)
    r, g, b = rgb[..., 0], rgb[..., 1], rgb[..., 2]

    yellow = (r + g) / 2.0 - b
    ratio = np.minimum(1.0, yellow / YELLOW_CAST_SCALE)
    correction = np.where(yellow > 0, strength * ratio * YELLOW_CORRECTION_MAX, 0.0)

    corrected = np.stack(
        [
            r - r * correction,
            g - g * correction,
            b + (255.0 - b) * correction * YELLOW_BLUE_BOOST,
        ],
        axis=-1,
    )
    return merge_rgb(rgba, corrected)


def even_colors(buffer: RasterBuffer, amount: float) -> RasterBuffer:
    """
    Even out colors toward the image-average hue (0 to 100).

    Each pixel's target is the average color scaled to the pixel's own
    luminance, so the pixel keeps its brightness while its hue and
    saturation move toward the image average. At 100 every pixel lands on
    its target; at 0 the image is unchanged.

    Args:
        buffer: Source RasterBuffer
        amount: Strength in [0, 100]; out-of-range values are clamped

    Returns:
        New RasterBuffer
    """
    strength = clamp(amount, *STRENGTH_RANGE) / 100.0
    rgba, rgb = split_rgb(buffer)

    avg_r, avg_g, avg_b = channel_averages(rgb)
    avg_luminance = LUMA_RED * avg_r + LUMA_GREEN * avg_g + LUMA_BLUE * avg_b
    if avg_luminance <= 0:
        # Only an all-black image has zero average luminance
        logger.debug("even_colors skipped: image has zero average luminance")
        return RasterBuffer.from_array(rgba)

    scale = luminance(rgb) / avg_luminance
    target = scale[..., np.newaxis] * np.array([avg_r, avg_g, avg_b])
    return merge_rgb(rgba, rgb + (target - rgb) * strength)


def remove_color_cast(buffer: RasterBuffer, amount: float) -> RasterBuffer:
    """
    Neutralize the dominant color cast (0 to 100).

    The cast of each channel is its image-wide average minus the mean of
    the three channel averages (neutral gray). That cast, scaled by the
    strength, is subtracted from every pixel.

    Args:
        buffer: Source RasterBuffer
        amount: Strength in [0, 100]; out-of-range values are clamped

    Returns:
        New RasterBuffer
    """
    strength = clamp(amount, *STRENGTH_RANGE) / 100.0
    rgba, rgb = split_rgb(buffer)

    averages = np.array(channel_averages(rgb))
    cast = averages - averages.mean()
    logger.debug("Color cast (R, G, B) = (%.2f, %.2f, %.2f)", *cast)

    return merge_rgb(rgba, rgb - cast * strength)


def auto_color_correction(buffer: RasterBuffer) -> RasterBuffer:
    """
    Automatic color correction.

    Removes the general color cast (80), then yellowing specifically (60),
    then evens out the colors slightly (40). The order and strengths are fixed.
    """
    processed = remove_color_cast(buffer, AUTO_COLOR_CAST_STRENGTH)
    processed = remove_yellowing(processed, AUTO_YELLOWING_STRENGTH)
    return even_colors(processed, AUTO_EVEN_COLORS_STRENGTH)

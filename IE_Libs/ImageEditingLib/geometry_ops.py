"""
Geometry operations for the image editor core.

Crop and rotate transforms that map one RasterBuffer to a new one with
recomputed dimensions. Neither operation fails on valid numeric input:
crop requests outside the source are shifted back inside it, and any
rotation angle is normalized to [0, 360).

Functions:
    get_crop_dimensions: Maximum safe crop width/height for an origin
    crop_image: Crop a buffer, clamping size and origin to the source
    get_rotated_dimensions: Bounding box of a rotated rectangle
    rotate_image: Rotate a buffer about its center by an arbitrary angle
    rotate_90: Rotate a buffer a quarter turn clockwise or counterclockwise
"""

import logging
import math
from typing import Tuple

from IE_Libs.ImageEditingLib.image_models import CropArea, RasterBuffer
from IE_Libs.constants import FULL_TURN_DEGREES, MIN_CROP_SIZE
from IE_Libs.pillow_compat import Image

logger = logging.getLogger(__name__)

# Slack for float noise in the bounding box before truncating to pixels
_DIMENSION_EPSILON = 1e-6


# ============================================================================
# Crop
# ============================================================================

def get_crop_dimensions(
    x: int,
    y: int,
    width: int,
    height: int,
    source_width: int,
    source_height: int,
) -> Tuple[int, int]:
    """
    Compute the largest crop size that fits inside the source from an origin.

    The origin itself is not clamped; callers that need a valid origin
    should clamp it first (as :func:`crop_image` does).

    Args:
        x: Crop origin X in source pixels
        y: Crop origin Y in source pixels
        width: Requested crop width
        height: Requested crop height
        source_width: Width of the buffer being cropped
        source_height: Height of the buffer being cropped

    Returns:
        (width, height) no larger than the space remaining right of / below the origin

    Example:
        >>> get_crop_dimensions(80, 10, 50, 50, 100, 100)
        (20, 50)
    """
    safe_width = max(0, min(int(width), int(source_width) - int(x)))
    safe_height = max(0, min(int(height), int(source_height) - int(y)))
    return safe_width, safe_height


def _clamp_span(origin: int, requested: int, source_extent: int) -> Tuple[int, int]:
    """Apply the minimum-size floor and shift the origin so the span fits."""
    final_extent = min(max(MIN_CROP_SIZE, requested), source_extent)
    final_origin = max(0, min(origin, source_extent - final_extent))
    return final_origin, final_extent


def crop_image(buffer: RasterBuffer, area: CropArea) -> RasterBuffer:
    """
    Crop a buffer to the given area.

    The crop size is floored at MIN_CROP_SIZE (20 px) and capped at the
    source size, then the origin is clamped so the rectangle lies inside
    the source. A request near an edge therefore shifts instead of failing.

    Args:
        buffer: Source RasterBuffer
        area: Requested crop rectangle in source pixels

    Returns:
        New RasterBuffer of exactly the clamped crop size
    """
    x, width = _clamp_span(int(area.x), int(area.width), buffer.width)
    y, height = _clamp_span(int(area.y), int(area.height), buffer.height)

    if (x, y, width, height) != (area.x, area.y, area.width, area.height):
        logger.debug(
            "Crop %s clamped to x=%d y=%d w=%d h=%d for %dx%d source",
            area, x, y, width, height, buffer.width, buffer.height,
        )

    pixels = buffer.to_array()
    return RasterBuffer.from_array(pixels[y:y + height, x:x + width])


# ============================================================================
# Rotate
# ============================================================================

def _normalize_angle(angle: float) -> float:
    angle = float(angle)
    if not math.isfinite(angle):
        raise ValueError(f"Rotation angle must be a finite number, got {angle}")
    normalized = angle % FULL_TURN_DEGREES
    # -1e-20 % 360.0 rounds up to 360.0
    if normalized >= FULL_TURN_DEGREES:
        normalized = 0.0
    return normalized


def get_rotated_dimensions(width: int, height: int, angle: float) -> Tuple[int, int]:
    """
    Calculate canvas dimensions after rotation.

    Quarter turns swap width and height exactly; half turns keep them.
    Other angles use the bounding box of the rotated rectangle, truncated
    to whole pixels.

    Args:
        width: Source width in pixels
        height: Source height in pixels
        angle: Rotation in degrees (any value; normalized to [0, 360))

    Returns:
        (width, height) of the rotated canvas
    """
    normalized = _normalize_angle(angle)

    if normalized in (90.0, 270.0):
        return height, width

    if normalized in (0.0, 180.0):
        return width, height

    radians = math.radians(normalized)
    cos = abs(math.cos(radians))
    sin = abs(math.sin(radians))

    rotated_width = int(math.floor(width * cos + height * sin + _DIMENSION_EPSILON))
    rotated_height = int(math.floor(width * sin + height * cos + _DIMENSION_EPSILON))
    return max(1, rotated_width), max(1, rotated_height)


def rotate_image(buffer: RasterBuffer, angle: float) -> RasterBuffer:
    """
    Rotate a buffer about its center.

    Positive angles rotate clockwise as displayed (y axis pointing down).
    The output canvas is sized by :func:`get_rotated_dimensions` and the
    source is drawn centered on it. Quarter and half turns are exact pixel
    transposes; other angles are resampled bilinearly on premultiplied
    alpha, and the uncovered corners are fully transparent.

    Args:
        buffer: Source RasterBuffer
        angle: Rotation in degrees

    Returns:
        New rotated RasterBuffer

    Raises:
        ValueError: If angle is NaN or infinite
    """
    normalized = _normalize_angle(angle)
    image = buffer.to_image()

    if normalized == 0.0:
        return RasterBuffer.from_image(image)
    if normalized == 90.0:
        return RasterBuffer.from_image(image.transpose(Image.Transpose.ROTATE_270))
    if normalized == 180.0:
        return RasterBuffer.from_image(image.transpose(Image.Transpose.ROTATE_180))
    if normalized == 270.0:
        return RasterBuffer.from_image(image.transpose(Image.Transpose.ROTATE_90))

    out_width, out_height = get_rotated_dimensions(buffer.width, buffer.height, normalized)
    logger.debug(
        "Rotating %dx%d by %.3f degrees onto %dx%d canvas",
        buffer.width, buffer.height, normalized, out_width, out_height,
    )

    radians = math.radians(normalized)
    cos = math.cos(radians)
    sin = math.sin(radians)
    half_out_w, half_out_h = out_width / 2.0, out_height / 2.0
    half_in_w, half_in_h = buffer.width / 2.0, buffer.height / 2.0

    # Inverse mapping: output pixel -> source pixel
    matrix = (
        cos, sin, half_in_w - half_out_w * cos - half_out_h * sin,
        -sin, cos, half_in_h + half_out_w * sin - half_out_h * cos,
    )

    rotated = image.convert("RGBa").transform(
        (out_width, out_height),
        Image.Transform.AFFINE,
        data=matrix,
        resample=Image.Resampling.BILINEAR,
        fillcolor=(0, 0, 0, 0),
    )
    return RasterBuffer.from_image(rotated.convert("RGBA"))


def rotate_90(buffer: RasterBuffer, clockwise: bool = True) -> RasterBuffer:
    """Rotate a buffer 90 degrees clockwise or counterclockwise."""
    return rotate_image(buffer, 90.0 if clockwise else -90.0)

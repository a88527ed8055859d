"""
ImageEditingLib - Core image editing functionality

This module provides the raster buffer model and the pixel-level
operations (geometry, tone, color-cast, auto lighting) of the image
editor core.
"""

from IE_Libs.ImageEditingLib.errors import (
    ImageEditorError,
    ShapeMismatchError,
    DecodeFailureError,
    UnsupportedExportError,
)
from IE_Libs.ImageEditingLib.image_models import (
    CropArea,
    ImageMetadata,
    RasterBuffer,
    RgbaColor,
)
from IE_Libs.ImageEditingLib.geometry_ops import (
    crop_image,
    get_crop_dimensions,
    get_rotated_dimensions,
    rotate_image,
    rotate_90,
)
from IE_Libs.ImageEditingLib.tone_ops import (
    apply_brightness,
    apply_contrast,
    apply_brightness_contrast,
    apply_shadow_recovery,
    apply_highlight_recovery,
    apply_shadows_highlights,
)
from IE_Libs.ImageEditingLib.color_correction import (
    remove_yellowing,
    even_colors,
    remove_color_cast,
    auto_color_correction,
)
from IE_Libs.ImageEditingLib.auto_lighting import (
    auto_even_lighting,
    build_luminance_histogram,
    find_percentile_thresholds,
)
from IE_Libs.ImageEditingLib.lighting import (
    LightingAdjustments,
    apply_lighting_adjustments,
)

__all__ = [
    "ImageEditorError",
    "ShapeMismatchError",
    "DecodeFailureError",
    "UnsupportedExportError",
    "CropArea",
    "ImageMetadata",
    "RasterBuffer",
    "RgbaColor",
    "crop_image",
    "get_crop_dimensions",
    "get_rotated_dimensions",
    "rotate_image",
    "rotate_90",
    "apply_brightness",
    "apply_contrast",
    "apply_brightness_contrast",
    "apply_shadow_recovery",
    "apply_highlight_recovery",
    "apply_shadows_highlights",
    "remove_yellowing",
    "even_colors",
    "remove_color_cast",
    "auto_color_correction",
    "auto_even_lighting",
    "build_luminance_histogram",
    "find_percentile_thresholds",
    "LightingAdjustments",
    "apply_lighting_adjustments",
]

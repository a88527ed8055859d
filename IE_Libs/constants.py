"""
Constants and configuration values for the image editor core.

This module centralizes all constant values, magic numbers, and
configuration settings used throughout the library.
"""

# Geometry
MIN_CROP_SIZE = 20
FULL_TURN_DEGREES = 360.0

# Luminance weights (ITU-R BT.601)
LUMA_RED = 0.299
LUMA_GREEN = 0.587
LUMA_BLUE = 0.114

# Manual shadow/highlight recovery
TONE_MIDPOINT = 128.0
SHADOW_RECOVERY_MAX = 0.5
HIGHLIGHT_RECOVERY_MAX = 0.5

# Contrast curve pivot
CONTRAST_PIVOT = 128.0

# Color cast removal
YELLOW_CAST_SCALE = 128.0
YELLOW_CORRECTION_MAX = 0.5
YELLOW_BLUE_BOOST = 0.3

# Auto color correction strengths (applied in this order)
AUTO_COLOR_CAST_STRENGTH = 80
AUTO_YELLOWING_STRENGTH = 60
AUTO_EVEN_COLORS_STRENGTH = 40

# Auto even lighting
HISTOGRAM_BUCKETS = 256
AUTO_LIGHTING_PERCENTILE = 0.05
AUTO_SHADOW_LIGHTEN_MAX = 0.4
AUTO_HIGHLIGHT_DARKEN_MAX = 0.3

# Adjustment slider ranges
BRIGHTNESS_RANGE = (-100.0, 100.0)
CONTRAST_RANGE = (-100.0, 100.0)
STRENGTH_RANGE = (0.0, 100.0)

# Export
DEFAULT_EXPORT_MIME_TYPE = "image/jpeg"
DEFAULT_EXPORT_QUALITY = 0.92
DEFAULT_EXPORT_FILENAME = "image.jpg"
LOSSY_FORMATS = {"JPEG", "WEBP"}

MIME_TYPES_BY_EXTENSION = {
    "png": "image/png",
    "webp": "image/webp",
    "gif": "image/gif",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
}

PIL_FORMATS_BY_MIME_TYPE = {
    "image/png": "PNG",
    "image/jpeg": "JPEG",
    "image/jpg": "JPEG",
    "image/webp": "WEBP",
    "image/gif": "GIF",
    "image/bmp": "BMP",
    "image/tiff": "TIFF",
}

# Critique fragments
FRAGMENT_MIME_TYPE = "image/webp"
FRAGMENT_QUALITY = 0.85

# Metadata
COLOR_DEPTH_RGBA = 32
COLOR_DEPTH_RGB = 24
UNKNOWN_FORMAT = "unknown"

# URL sources
HTTP_TIMEOUT_SECONDS = 30.0
URL_LOAD_MAX_RETRIES = 3
CACHE_BUST_PARAM = "_cb"
CROSS_ORIGIN_HEADER_VALUE = "null"

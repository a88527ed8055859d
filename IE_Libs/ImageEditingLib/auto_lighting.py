"""
Automatic shadow/highlight recovery driven by the image's own histogram.

Unlike the manual shadow/highlight sliders, auto even lighting takes no
strength parameter: it places its thresholds at the 5th and 95th
luminance percentiles of the image being processed, then lightens pixels
below the shadow threshold (by at most 40%) and darkens pixels above the
highlight threshold (by at most 30%).

Functions:
    build_luminance_histogram: 256-bucket histogram of rounded luminance
    find_percentile_thresholds: Shadow/highlight thresholds from a histogram
    auto_even_lighting: Apply the adaptive tone mapping
"""

import logging
from typing import Tuple

import numpy as np

from IE_Libs.ImageEditingLib.image_models import RasterBuffer
from IE_Libs.ImageEditingLib.pixel_math import luminance, merge_rgb, split_rgb
from IE_Libs.constants import (
    AUTO_HIGHLIGHT_DARKEN_MAX,
    AUTO_LIGHTING_PERCENTILE,
    AUTO_SHADOW_LIGHTEN_MAX,
    HISTOGRAM_BUCKETS,
)

logger = logging.getLogger(__name__)


def _luminance_buckets(lum: np.ndarray) -> np.ndarray:
    # Round half up, matching the histogram the thresholds come from
    return np.clip(np.floor(lum + 0.5), 0, HISTOGRAM_BUCKETS - 1).astype(np.intp)


def build_luminance_histogram(buffer: RasterBuffer) -> np.ndarray:
    """
    Count pixels per rounded luminance value.

    Returns:
        int64 array of length 256; entry i is the number of pixels whose
        luminance rounds to i
    """
    _, rgb = split_rgb(buffer)
    buckets = _luminance_buckets(luminance(rgb))
    return np.bincount(buckets.ravel(), minlength=HISTOGRAM_BUCKETS)


def find_percentile_thresholds(
    histogram: np.ndarray,
    percentile: float = AUTO_LIGHTING_PERCENTILE,
) -> Tuple[int, int]:
    """
    Find the shadow and highlight thresholds of a luminance histogram.

    The shadow threshold is the first bucket, scanning up from 0, at which
    the cumulative count reaches ``percentile`` of all pixels. The
    highlight threshold is found the same way scanning down from 255.

    Args:
        histogram: Luminance histogram from build_luminance_histogram()
        percentile: Fraction of pixels in each tail (default 0.05)

    Returns:
        (shadow_threshold, highlight_threshold); (0, 255) for an empty histogram
    """
    counts = np.asarray(histogram, dtype=np.int64)
    total = int(counts.sum())
    if total == 0:
        return 0, HISTOGRAM_BUCKETS - 1

    target = total * percentile

    from_bottom = np.cumsum(counts)
    shadow_threshold = int(np.argmax(from_bottom >= target))

    from_top = np.cumsum(counts[::-1])
    highlight_threshold = HISTOGRAM_BUCKETS - 1 - int(np.argmax(from_top >= target))

    return shadow_threshold, highlight_threshold


def auto_even_lighting(buffer: RasterBuffer) -> RasterBuffer:
    """
    Apply automatic, content-adaptive shadow and highlight recovery.

    Pixels are classified by the same rounded luminance used to build the
    histogram, so an image of a single flat color is never modified. The
    correction strength uses the exact luminance:

    - below the shadow threshold: lighten by ``(1 - L / shadow) * 0.4``
    - above the highlight threshold: darken by
      ``(L - highlight) / (255 - highlight) * 0.3``

    Args:
        buffer: Source RasterBuffer

    Returns:
        New RasterBuffer
    """
    rgba, rgb = split_rgb(buffer)
    lum = luminance(rgb)
    buckets = _luminance_buckets(lum)

    histogram = np.bincount(buckets.ravel(), minlength=HISTOGRAM_BUCKETS)
    shadow_threshold, highlight_threshold = find_percentile_thresholds(histogram)
    logger.debug(
        "Auto even lighting thresholds: shadow=%d highlight=%d",
        shadow_threshold, highlight_threshold,
    )

    # Bucket-based masks keep both divisors away from zero
    in_shadow = buckets < shadow_threshold
    in_highlight = (buckets > highlight_threshold) & ~in_shadow

    result = rgb.copy()

    if in_shadow.any():
        darkness = 1.0 - lum[in_shadow] / shadow_threshold
        lighten = (darkness * AUTO_SHADOW_LIGHTEN_MAX)[:, np.newaxis]
        shadows = rgb[in_shadow]
        result[in_shadow] = shadows + (255.0 - shadows) * lighten

    if in_highlight.any():
        brightness = (lum[in_highlight] - highlight_threshold) / (255.0 - highlight_threshold)
        darken = (brightness * AUTO_HIGHLIGHT_DARKEN_MAX)[:, np.newaxis]
        highlights = rgb[in_highlight]
        result[in_highlight] = highlights - highlights * darken

    return merge_rgb(rgba, result)

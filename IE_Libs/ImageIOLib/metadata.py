"""
Image metadata extraction.

Functions:
    get_image_metadata: Dimensions, format, byte size and color depth of a source
"""

import logging
from typing import Any, Optional

import httpx

from IE_Libs.ImageEditingLib.errors import DecodeFailureError
from IE_Libs.ImageEditingLib.image_models import ImageMetadata, RasterBuffer
from IE_Libs.ImageIOLib.exporter import extension_from_source
from IE_Libs.ImageIOLib.image_loader import (
    fetch_url_bytes,
    is_url_source,
    open_image,
    read_source_bytes,
)
from IE_Libs.constants import (
    COLOR_DEPTH_RGB,
    COLOR_DEPTH_RGBA,
    CROSS_ORIGIN_HEADER_VALUE,
    UNKNOWN_FORMAT,
)

logger = logging.getLogger(__name__)


def _detect_color_depth(image: Any) -> Optional[int]:
    """Read one pixel and report 32 bits for four samples, 24 otherwise."""
    try:
        pixel = image.getpixel((0, 0))
    except Exception as e:
        logger.debug("Could not determine color depth: %s", e)
        return None

    if isinstance(pixel, tuple) and len(pixel) == 4:
        return COLOR_DEPTH_RGBA
    return COLOR_DEPTH_RGB


def _decoder_format(image: Any) -> Optional[str]:
    image_format = getattr(image, "format", None)
    return image_format.lower() if image_format else None


def _local_metadata(source: Any) -> ImageMetadata:
    if isinstance(source, RasterBuffer):
        return ImageMetadata(
            width=source.width,
            height=source.height,
            format=UNKNOWN_FORMAT,
            color_depth=COLOR_DEPTH_RGBA,
        )

    size: Optional[int] = None
    name: Optional[str] = None

    if hasattr(source, "mode") and hasattr(source, "size") and hasattr(source, "convert"):
        raw, oriented = open_image(source)
    else:
        data, name = read_source_bytes(source)
        size = len(data)
        raw, oriented = open_image(data)

    image_format = _decoder_format(raw)
    if image_format is None and name:
        image_format = extension_from_source(name)

    width, height = oriented.size
    return ImageMetadata(
        width=width,
        height=height,
        format=image_format or UNKNOWN_FORMAT,
        size=size,
        color_depth=_detect_color_depth(raw),
    )


def _url_metadata(url: str, client: Optional[httpx.Client]) -> ImageMetadata:
    last_error: Optional[Exception] = None
    attempts = (
        ("cross-origin", {"Origin": CROSS_ORIGIN_HEADER_VALUE}),
        ("plain", None),
    )

    for mode, headers in attempts:
        try:
            data = fetch_url_bytes(url, client, headers)
            raw, oriented = open_image(data)
            break
        except (httpx.HTTPError, DecodeFailureError) as e:
            last_error = e
            logger.warning("Metadata request for %s failed (%s mode): %s", url, mode, e)
    else:
        raise DecodeFailureError(f"Failed to load image metadata from {url}: {last_error}") from last_error

    width, height = oriented.size
    image_format = extension_from_source(url) or _decoder_format(raw) or UNKNOWN_FORMAT
    return ImageMetadata(width=width, height=height, format=image_format, size=len(data))


def get_image_metadata(source: Any, client: Optional[httpx.Client] = None) -> ImageMetadata:
    """
    Extract metadata from an image source.

    Width and height are the natural (EXIF-oriented) dimensions. For local
    sources the format comes from the decoder, falling back to the file
    extension; for URLs it comes from the URL extension. Color depth is
    reported for local sources only and left unset if it cannot be read.

    Args:
        source: http(s) URL, RasterBuffer, PIL Image, bytes-like,
            SourceFile, path, or binary file object
        client: Optional httpx.Client used for URL sources

    Returns:
        ImageMetadata

    Raises:
        DecodeFailureError: If the source cannot be fetched or decoded

    Example:
        >>> meta = get_image_metadata("photo.png")
        >>> meta.to_dict()
        {'width': 640, 'height': 480, 'format': 'png', 'size': 1234, 'colorDepth': 32}
    """
    if is_url_source(source):
        return _url_metadata(source, client)
    return _local_metadata(source)

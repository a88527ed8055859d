"""
Image loading for the image editor core.

This module is the decode boundary of the pipeline: it turns encoded
sources (bytes, files, uploads, URLs) into RasterBuffers. Nothing past
this point performs I/O.

Classes:
    SourceFile: An uploaded file with a declared name, MIME type and byte size

Functions:
    is_url_source: Check whether a source is an http(s) URL
    read_source_bytes: Read the raw bytes of a local source
    open_image: Open a local source as a PIL Image with EXIF orientation applied
    decode_image: Decode any supported source into a RasterBuffer
    fetch_url_bytes: GET a URL and return the response body
    load_image_from_url: Load a URL into a RasterBuffer, with cache-busting retries
"""

import io
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import httpx

from IE_Libs.ImageEditingLib.errors import DecodeFailureError
from IE_Libs.ImageEditingLib.image_models import RasterBuffer
from IE_Libs.constants import (
    CACHE_BUST_PARAM,
    HTTP_TIMEOUT_SECONDS,
    MIME_TYPES_BY_EXTENSION,
    URL_LOAD_MAX_RETRIES,
)
from IE_Libs.pillow_compat import Image, ImageOps, UnidentifiedImageError

logger = logging.getLogger(__name__)

URL_SCHEMES = ("http://", "https://")


@dataclass(frozen=True)
class SourceFile:
    """An uploaded file as handed over by the caller.

    Attributes:
        name: Original filename (used for the extension when the decoder can't tell)
        data: Encoded image bytes
        mime_type: Declared MIME type, if the caller knows it
    """
    name: str
    data: bytes
    mime_type: Optional[str] = None

    @property
    def size(self) -> int:
        """Declared byte size of the file."""
        return len(self.data)

    @classmethod
    def from_path(cls, path: Path) -> "SourceFile":
        """Read a file from disk, deriving its MIME type from the extension."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Image file not found: {path}")
        extension = path.suffix.lower().lstrip(".")
        return cls(
            name=path.name,
            data=path.read_bytes(),
            mime_type=MIME_TYPES_BY_EXTENSION.get(extension),
        )


def is_url_source(source: Any) -> bool:
    return isinstance(source, str) and source.lower().startswith(URL_SCHEMES)


def read_source_bytes(source: Any) -> Tuple[bytes, Optional[str]]:
    """
    Read the encoded bytes of a local source.

    Args:
        source: bytes-like, SourceFile, path (str or Path), or binary file object

    Returns:
        Tuple of (data, name); name is None when the source has none

    Raises:
        FileNotFoundError: If a path source does not exist
        TypeError: If the source type is not supported
    """
    if isinstance(source, (bytes, bytearray, memoryview)):
        return bytes(source), None

    if isinstance(source, SourceFile):
        return source.data, source.name

    if isinstance(source, (str, Path)):
        path = Path(source)
        if not path.exists():
            raise FileNotFoundError(f"Image file not found: {path}")
        if not path.is_file():
            raise ValueError(f"Path is not a file: {path}")
        return path.read_bytes(), path.name

    if hasattr(source, "read"):
        data = source.read()
        if not isinstance(data, (bytes, bytearray)):
            raise TypeError("File-like sources must be opened in binary mode")
        name = getattr(source, "name", None)
        return bytes(data), Path(name).name if isinstance(name, str) else None

    raise TypeError(f"Unsupported image source type: {type(source)}")


def _open_bytes(data: bytes, label: str) -> Any:
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
        return image
    except UnidentifiedImageError as e:
        raise DecodeFailureError(f"Unrecognized image format in {label}") from e
    except Exception as e:
        raise DecodeFailureError(f"Failed to decode image from {label}: {str(e)}") from e


def open_image(source: Any) -> Tuple[Any, Any]:
    """
    Open a local source as a PIL Image.

    Args:
        source: Anything read_source_bytes() accepts, or a PIL Image

    Returns:
        Tuple of (raw, oriented): the image as decoded (keeps ``format``
        and the native ``mode``) and a copy with its EXIF orientation
        applied (the natural, displayed orientation)

    Raises:
        DecodeFailureError: If the bytes are not a readable image
    """
    if hasattr(source, "mode") and hasattr(source, "size") and hasattr(source, "convert"):
        raw = source
    else:
        data, name = read_source_bytes(source)
        raw = _open_bytes(data, name or f"{len(data)} bytes")

    oriented = ImageOps.exif_transpose(raw)
    return raw, oriented if oriented is not None else raw


def decode_image(source: Any) -> RasterBuffer:
    """
    Decode a source into an RGBA RasterBuffer.

    Args:
        source: RasterBuffer (returned as-is), PIL Image, bytes-like,
            SourceFile, path, or binary file object

    Returns:
        RasterBuffer at the image's natural orientation and size

    Raises:
        DecodeFailureError: If the source cannot be decoded
        FileNotFoundError: If a path source does not exist
    """
    if isinstance(source, RasterBuffer):
        return source

    if is_url_source(source):
        raise TypeError(
            "URL sources must be fetched first; use load_image_from_url()"
        )

    _, oriented = open_image(source)
    try:
        return RasterBuffer.from_image(oriented)
    except Exception as e:
        raise DecodeFailureError(f"Failed to convert image to RGBA: {str(e)}") from e


# ============================================================================
# URL sources
# ============================================================================

def fetch_url_bytes(
    url: str,
    client: Optional[httpx.Client] = None,
    headers: Optional[Dict[str, str]] = None,
) -> bytes:
    """
    GET a URL and return its body.

    Args:
        url: http(s) URL
        client: Optional httpx.Client to reuse; a short-lived one is used otherwise
        headers: Extra request headers

    Returns:
        Response body bytes

    Raises:
        httpx.HTTPError: On transport errors or non-2xx responses
    """
    if client is None:
        with httpx.Client(timeout=HTTP_TIMEOUT_SECONDS, follow_redirects=True) as owned:
            return fetch_url_bytes(url, owned, headers)

    response = client.get(url, headers=headers)
    response.raise_for_status()
    return response.content


def add_cache_bust_param(url: str, attempt: int) -> str:
    """Append a cache-busting query parameter to bypass stale CDN responses."""
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{CACHE_BUST_PARAM}={int(time.time() * 1000)}-{attempt}"


def load_image_from_url(
    url: str,
    max_retries: int = URL_LOAD_MAX_RETRIES,
    client: Optional[httpx.Client] = None,
) -> RasterBuffer:
    """
    Load an image URL into a RasterBuffer.

    CDNs sometimes cache a response without CORS headers; each retry adds
    a cache-busting query parameter so a fresh response is requested.

    Args:
        url: http(s) URL of the image
        max_retries: Total number of attempts (>= 1)
        client: Optional httpx.Client to reuse

    Returns:
        Decoded RasterBuffer

    Raises:
        DecodeFailureError: If every attempt fails to fetch or decode
    """
    attempts = max(1, int(max_retries))
    request_url = url
    last_error: Optional[Exception] = None

    for attempt in range(1, attempts + 1):
        try:
            data = fetch_url_bytes(request_url, client)
            return decode_image(data)
        except (httpx.HTTPError, DecodeFailureError) as e:
            last_error = e
            if attempt < attempts:
                logger.warning(
                    "Loading %s failed (attempt %d/%d): %s; retrying with cache-busting",
                    url, attempt, attempts, e,
                )
                request_url = add_cache_bust_param(url, attempt)

    raise DecodeFailureError(
        f"Failed to load image from {url} after {attempts} attempts: {last_error}"
    ) from last_error

"""
Export of RasterBuffers to encoded bytes.

Classes:
    ExportOptions: MIME type and quality for an export
    ImageFile: In-memory named file holding encoded bytes

Functions:
    extension_from_source: Lower-case extension of a filename or URL path
    mime_type_from_extension: Map a filename/extension to an image MIME type
    mime_type_from_source: MIME type for a URL or filename, if it has a known extension
    to_encoded_bytes: Encode a buffer with the requested MIME type and quality
    to_named_file: Encode a buffer into a named file object
    to_data_url: Encode a buffer as a base64 data URL
"""

import base64
import io
import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from IE_Libs.ImageEditingLib.errors import UnsupportedExportError
from IE_Libs.ImageEditingLib.image_models import RasterBuffer
from IE_Libs.constants import (
    DEFAULT_EXPORT_FILENAME,
    DEFAULT_EXPORT_MIME_TYPE,
    DEFAULT_EXPORT_QUALITY,
    LOSSY_FORMATS,
    MIME_TYPES_BY_EXTENSION,
    PIL_FORMATS_BY_MIME_TYPE,
)
from IE_Libs.pillow_compat import Image

logger = logging.getLogger(__name__)


@dataclass
class ExportOptions:
    """Options for encoding a buffer.

    Attributes:
        mime_type: Target MIME type (default: image/jpeg)
        quality: 0.0-1.0, only meaningful for lossy formats (JPEG, WebP)
    """
    mime_type: str = DEFAULT_EXPORT_MIME_TYPE
    quality: float = DEFAULT_EXPORT_QUALITY

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExportOptions":
        """Create from dictionary."""
        filtered = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**filtered)

    def get_pil_format(self) -> str:
        """
        Resolve the Pillow format name for this MIME type.

        Raises:
            UnsupportedExportError: If the MIME type is unknown or Pillow
                cannot write the format
        """
        mime_type = str(self.mime_type).strip().lower()
        pil_format = PIL_FORMATS_BY_MIME_TYPE.get(mime_type)
        if pil_format is None:
            raise UnsupportedExportError(f"Unsupported export MIME type: {self.mime_type}")

        Image.init()
        if pil_format not in Image.SAVE:
            raise UnsupportedExportError(
                f"Encoder for {self.mime_type} ({pil_format}) is not available in this Pillow build"
            )
        return pil_format

    def get_save_kwargs(self) -> Dict[str, Any]:
        """Get PIL Image.save() kwargs based on format."""
        save_format = self.get_pil_format()
        kwargs: Dict[str, Any] = {"format": save_format}

        if save_format in LOSSY_FORMATS:
            kwargs["quality"] = max(1, min(100, int(round(float(self.quality) * 100))))

        return kwargs


class ImageFile(io.BytesIO):
    """Encoded image bytes with a filename and content type, ready to upload."""

    def __init__(self, data: bytes, name: str, content_type: str):
        super().__init__(data)
        self.name = name
        self.content_type = content_type

    @property
    def size(self) -> int:
        return len(self.getbuffer())

    def __repr__(self) -> str:
        return f"ImageFile(name={self.name!r}, content_type={self.content_type!r}, size={self.size})"


def extension_from_source(source: str) -> Optional[str]:
    """
    Lower-case extension of a filename, path or URL (query and fragment ignored).

    Returns:
        Extension without the dot, or None when there is none
    """
    path = urlparse(source).path if "://" in source else source
    path = path.split("?", 1)[0].split("#", 1)[0]
    last_segment = path.rsplit("/", 1)[-1]
    if "." not in last_segment:
        return None
    extension = last_segment.rsplit(".", 1)[-1].lower()
    return extension or None


def mime_type_from_extension(name: str) -> str:
    """
    Map a filename or bare extension to an image MIME type.

    png, webp and gif map to their own types; jpg, jpeg and anything else
    map to image/jpeg.

    Example:
        >>> mime_type_from_extension("photo.PNG")
        'image/png'
        >>> mime_type_from_extension("scan.tiff")
        'image/jpeg'
    """
    extension = str(name).rsplit(".", 1)[-1].strip().lower()
    return MIME_TYPES_BY_EXTENSION.get(extension, DEFAULT_EXPORT_MIME_TYPE)


def mime_type_from_source(source: str) -> Optional[str]:
    """MIME type implied by a URL or filename extension, or None if unrecognized."""
    extension = extension_from_source(source)
    if extension is None:
        return None
    return MIME_TYPES_BY_EXTENSION.get(extension)


def to_encoded_bytes(
    buffer: RasterBuffer,
    mime_type: str = DEFAULT_EXPORT_MIME_TYPE,
    quality: float = DEFAULT_EXPORT_QUALITY,
) -> bytes:
    """
    Encode a buffer.

    JPEG has no alpha channel: alpha is dropped, so fully transparent
    pixels (e.g. rotation corners) come out black.

    Args:
        buffer: RasterBuffer to encode
        mime_type: Target MIME type
        quality: 0.0-1.0 for lossy formats; ignored otherwise

    Returns:
        Encoded bytes

    Raises:
        UnsupportedExportError: If the MIME type cannot be produced
    """
    if not isinstance(buffer, RasterBuffer):
        raise TypeError(f"Expected RasterBuffer, got {type(buffer)}")

    kwargs = ExportOptions(mime_type=mime_type, quality=quality).get_save_kwargs()

    image = buffer.to_image()
    if kwargs["format"] == "JPEG":
        image = image.convert("RGB")

    output = io.BytesIO()
    try:
        image.save(output, **kwargs)
    except (OSError, KeyError, ValueError) as e:
        raise UnsupportedExportError(f"Failed to encode image as {mime_type}: {str(e)}") from e

    data = output.getvalue()
    logger.debug(
        "Encoded %dx%d buffer as %s (%d bytes)", buffer.width, buffer.height, mime_type, len(data)
    )
    return data


def to_named_file(
    buffer: RasterBuffer,
    filename: str = DEFAULT_EXPORT_FILENAME,
    mime_type: str = DEFAULT_EXPORT_MIME_TYPE,
    quality: float = DEFAULT_EXPORT_QUALITY,
) -> ImageFile:
    """Encode a buffer into an in-memory file named ``filename``."""
    data = to_encoded_bytes(buffer, mime_type, quality)
    return ImageFile(data, name=filename, content_type=mime_type.lower())


def to_data_url(
    buffer: RasterBuffer,
    mime_type: str = DEFAULT_EXPORT_MIME_TYPE,
    quality: float = DEFAULT_EXPORT_QUALITY,
) -> str:
    """Encode a buffer as a ``data:<mime>;base64,...`` URL."""
    data = to_encoded_bytes(buffer, mime_type, quality)
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type.lower()};base64,{encoded}"

"""
ImageIOLib - Decoding, metadata and export

This module converts between encoded image sources (bytes, files,
uploads, URLs) and RasterBuffers.
"""

from IE_Libs.ImageIOLib.image_loader import (
    SourceFile,
    decode_image,
    fetch_url_bytes,
    is_url_source,
    load_image_from_url,
    open_image,
    read_source_bytes,
)
from IE_Libs.ImageIOLib.exporter import (
    ExportOptions,
    ImageFile,
    extension_from_source,
    mime_type_from_extension,
    mime_type_from_source,
    to_data_url,
    to_encoded_bytes,
    to_named_file,
)
from IE_Libs.ImageIOLib.metadata import get_image_metadata

__all__ = [
    "SourceFile",
    "decode_image",
    "fetch_url_bytes",
    "is_url_source",
    "load_image_from_url",
    "open_image",
    "read_source_bytes",
    "ExportOptions",
    "ImageFile",
    "extension_from_source",
    "mime_type_from_extension",
    "mime_type_from_source",
    "to_data_url",
    "to_encoded_bytes",
    "to_named_file",
    "get_image_metadata",
]

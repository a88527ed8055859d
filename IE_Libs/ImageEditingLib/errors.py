"""
Error types for the image editor core.

Classes:
    ImageEditorError: Base class for all errors raised by IE_Libs
    ShapeMismatchError: Raster buffer length/dimensions are inconsistent
    DecodeFailureError: A source could not be decoded (or fetched) as an image
    UnsupportedExportError: The requested export MIME type cannot be produced
"""


class ImageEditorError(Exception):
    """Base class for image editor errors."""


class ShapeMismatchError(ImageEditorError, ValueError):
    """Raised when a raster buffer's byte length is not width * height * 4."""


class DecodeFailureError(ImageEditorError, IOError):
    """Raised when source bytes cannot be interpreted as an image."""


class UnsupportedExportError(ImageEditorError, ValueError):
    """Raised when the encoder backend cannot produce the requested MIME type."""

"""
Image editing data models for the image editor core.

This module defines core data structures used throughout the image editing system.

Classes:
    RasterBuffer: Immutable RGBA pixel grid with explicit width/height
    CropArea: Rectangle in pixel units relative to the buffer being cropped
    ImageMetadata: Derived, read-only description of a source image

Type Aliases:
    RgbaColor: A tuple of 4 integers representing RGBA color values (0-255)
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, Union

import numpy as np

from IE_Libs.ImageEditingLib.errors import ShapeMismatchError
from IE_Libs.pillow_compat import Image

RgbaColor = Tuple[int, int, int, int]

CHANNELS = 4

PixelData = Union[bytes, bytearray, memoryview]


@dataclass(frozen=True)
class RasterBuffer:
    """An owned 2D grid of RGBA pixels.

    The pixel payload is stored as immutable ``bytes`` laid out row-major,
    four 8-bit samples (R, G, B, A) per pixel. Operations never mutate a
    buffer; they read it with :meth:`to_array` and build a new one with
    :meth:`from_array`.

    Attributes:
        width: Width in pixels (>= 1)
        height: Height in pixels (>= 1)
        pixels: RGBA samples, length == width * height * 4

    Raises:
        ShapeMismatchError: If the dimensions are not positive integers or
            the payload length does not equal width * height * 4
    """

    width: int
    height: int
    pixels: bytes

    def __post_init__(self):
        if isinstance(self.width, bool) or not isinstance(self.width, (int, np.integer)):
            raise ShapeMismatchError(f"width must be an integer, got {self.width!r}")
        if isinstance(self.height, bool) or not isinstance(self.height, (int, np.integer)):
            raise ShapeMismatchError(f"height must be an integer, got {self.height!r}")
        if self.width < 1 or self.height < 1:
            raise ShapeMismatchError(
                f"Raster buffer must not be zero-sized, got {self.width}x{self.height}"
            )
        if not isinstance(self.pixels, (bytes, bytearray, memoryview)):
            raise ShapeMismatchError(f"pixels must be bytes-like, got {type(self.pixels)}")

        object.__setattr__(self, "width", int(self.width))
        object.__setattr__(self, "height", int(self.height))
        object.__setattr__(self, "pixels", bytes(self.pixels))

        expected = self.width * self.height * CHANNELS
        if len(self.pixels) != expected:
            raise ShapeMismatchError(
                f"Pixel data length {len(self.pixels)} does not match "
                f"{self.width}x{self.height}x{CHANNELS} = {expected}"
            )

    def __repr__(self) -> str:
        return f"RasterBuffer(width={self.width}, height={self.height})"

    @property
    def size(self) -> Tuple[int, int]:
        """(width, height) tuple, matching PIL's ``Image.size``."""
        return self.width, self.height

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    @classmethod
    def new(cls, width: int, height: int, color: RgbaColor = (0, 0, 0, 0)) -> "RasterBuffer":
        """Create a buffer filled with a single color."""
        return cls(width, height, bytes(color) * (width * height))

    @classmethod
    def from_array(cls, array: Any) -> "RasterBuffer":
        """
        Build a buffer from an array of shape (height, width, 4).

        Args:
            array: numpy array (or array-like) of RGBA samples; values are
                expected to already be in 0-255

        Returns:
            A new RasterBuffer owning a copy of the data

        Raises:
            ShapeMismatchError: If the array is not (height, width, 4)
        """
        data = np.asarray(array)
        if data.ndim != 3 or data.shape[2] != CHANNELS:
            raise ShapeMismatchError(f"Expected array of shape (h, w, 4), got {data.shape}")
        height, width = data.shape[0], data.shape[1]
        return cls(width, height, data.astype(np.uint8, copy=False).tobytes())

    def to_array(self) -> np.ndarray:
        """Return a writable uint8 copy of the pixels, shaped (height, width, 4)."""
        return np.frombuffer(self.pixels, dtype=np.uint8).reshape(
            self.height, self.width, CHANNELS
        ).copy()

    @classmethod
    def from_image(cls, image: Any) -> "RasterBuffer":
        """Build a buffer from a PIL Image (converted to RGBA)."""
        if not hasattr(image, "convert"):
            raise TypeError(f"Expected PIL Image, got {type(image)}")
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        width, height = image.size
        return cls(width, height, image.tobytes())

    def to_image(self) -> Any:
        """Return a new RGBA PIL Image holding a copy of the pixels."""
        return Image.frombytes("RGBA", (self.width, self.height), self.pixels)

    def getpixel(self, x: int, y: int) -> RgbaColor:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} buffer")
        offset = (y * self.width + x) * CHANNELS
        r, g, b, a = self.pixels[offset:offset + CHANNELS]
        return r, g, b, a


@dataclass(frozen=True)
class CropArea:
    """Crop rectangle in pixel units, relative to the buffer being cropped."""

    x: int
    y: int
    width: int
    height: int

    def to_dict(self) -> Dict[str, int]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CropArea":
        try:
            return cls(
                x=int(round(float(data["x"]))),
                y=int(round(float(data["y"]))),
                width=int(round(float(data["width"]))),
                height=int(round(float(data["height"]))),
            )
        except KeyError as e:
            raise ValueError(f"Crop area missing required field {e}") from e


@dataclass(frozen=True)
class ImageMetadata:
    """Image metadata, recomputed each time it is requested.

    Attributes:
        width: Natural pixel width
        height: Natural pixel height
        format: Lower-case format name (e.g. 'jpeg', 'png') or 'unknown'
        size: Declared byte size of the source, when known
        color_depth: Bits per pixel (32 for RGBA, 24 for RGB), when detectable
    """

    width: int
    height: int
    format: str
    size: Optional[int] = None
    color_depth: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "width": self.width,
            "height": self.height,
            "format": self.format,
        }
        if self.size is not None:
            data["size"] = self.size
        if self.color_depth is not None:
            data["colorDepth"] = self.color_depth
        return data

"""
Critique selection fragments.

A critique can point at part of a submission: a rectangle of an image or
a span of rich text. This module turns those selections into the small
payloads stored with the critique.

Image selections are percentages (0-100) of the image's true, decoded
pixel dimensions, never of a displayed or scaled size.

Text selections are indices into the PLAIN-TEXT projection of the rich
content (markup stripped, character references decoded), never into
the markup itself. ``"<p>Hello <b>world</b></p>"`` projects to
``"Hello world"``, so indices 6..11 select ``"world"`` even though that
word starts at offset 12 of the markup.

Classes:
    ImageSelectionInput: Image rectangle before the fragment is uploaded
    ImageSelection: Image rectangle with its stored fragment URL
    TextSelection: Span of the plain-text projection

Functions:
    selection_from_dict: Build a selection from its dictionary form
    fragment_crop_area: Percent selection -> pixel CropArea for an image size
    extract_image_fragment: Crop a selection and encode it as WebP bytes
    extract_image_fragment_data_url: Same, as a data URL
    build_image_selection: ImageSelection carrying the fragment data URL
    plain_text_projection: Text content of rich-text markup
    extract_text_selection: Slice of the plain-text projection
    build_text_selection: TextSelection for a span of rich text
"""

import logging
import math
from dataclasses import dataclass, field
from html.parser import HTMLParser
from typing import Any, Dict, List, Union

from IE_Libs.ImageEditingLib.geometry_ops import crop_image
from IE_Libs.ImageEditingLib.image_models import CropArea, RasterBuffer
from IE_Libs.ImageIOLib.exporter import to_data_url, to_encoded_bytes
from IE_Libs.ImageIOLib.image_loader import decode_image, is_url_source, load_image_from_url
from IE_Libs.constants import FRAGMENT_MIME_TYPE, FRAGMENT_QUALITY, MIN_CROP_SIZE

logger = logging.getLogger(__name__)


# ============================================================================
# Selection models
# ============================================================================

@dataclass(frozen=True)
class ImageSelectionInput:
    """Image selection before its fragment has been extracted.

    Attributes:
        x, y, width, height: Percentages (0-100) of the true image size
    """
    x: float
    y: float
    width: float
    height: float
    type: str = field(default="image", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
        }


@dataclass(frozen=True)
class ImageSelection:
    x: float
    y: float
    width: float
    height: float
    fragment_url: str
    type: str = field(default="image", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "fragmentUrl": self.fragment_url,
        }


@dataclass(frozen=True)
class TextSelection:
    """Span ``[start_index, end_index)`` of the plain-text projection."""
    start_index: int
    end_index: int
    original_text: str
    type: str = field(default="text", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "startIndex": self.start_index,
            "endIndex": self.end_index,
            "originalText": self.original_text,
        }


Selection = Union[ImageSelectionInput, ImageSelection, TextSelection]


def selection_from_dict(data: Dict[str, Any]) -> Selection:
    """
    Build a selection from its dictionary form (camelCase or snake_case keys).

    An image selection without a fragment URL becomes an ImageSelectionInput.

    Raises:
        ValueError: If the type tag is unknown or a field is missing
    """
    selection_type = data.get("type")

    try:
        if selection_type == "image":
            rect = {key: float(data[key]) for key in ("x", "y", "width", "height")}
            fragment_url = data.get("fragmentUrl", data.get("fragment_url"))
            if fragment_url is None:
                return ImageSelectionInput(**rect)
            return ImageSelection(fragment_url=str(fragment_url), **rect)

        if selection_type == "text":
            return TextSelection(
                start_index=int(data.get("startIndex", data.get("start_index"))),
                end_index=int(data.get("endIndex", data.get("end_index"))),
                original_text=str(data.get("originalText", data.get("original_text", ""))),
            )
    except (KeyError, TypeError) as e:
        raise ValueError(f"Invalid {selection_type} selection: {e}") from e

    raise ValueError(f"Unknown selection type: {selection_type!r}")


# ============================================================================
# Image fragments
# ============================================================================

def _percent_to_pixels(percent: float, extent: int) -> int:
    # Round half up
    return int(math.floor(float(percent) / 100.0 * extent + 0.5))


def _selection_rect(selection: Any) -> Dict[str, float]:
    if isinstance(selection, dict):
        return {key: selection[key] for key in ("x", "y", "width", "height")}
    return {
        "x": selection.x,
        "y": selection.y,
        "width": selection.width,
        "height": selection.height,
    }


def fragment_crop_area(selection: Any, image_width: int, image_height: int) -> CropArea:
    """
    Convert a percentage selection to a pixel CropArea.

    Width and height are raised to at least 20 px and the origin is kept
    inside the image.

    Args:
        selection: Object or dict with x, y, width, height percentages
        image_width: True (decoded) image width
        image_height: True (decoded) image height

    Returns:
        CropArea in pixels
    """
    rect = _selection_rect(selection)

    x = _percent_to_pixels(rect["x"], image_width)
    y = _percent_to_pixels(rect["y"], image_height)
    width = max(_percent_to_pixels(rect["width"], image_width), MIN_CROP_SIZE)
    height = max(_percent_to_pixels(rect["height"], image_height), MIN_CROP_SIZE)

    final_x = max(0, min(x, image_width - width))
    final_y = max(0, min(y, image_height - height))

    return CropArea(x=final_x, y=final_y, width=width, height=height)


def _fragment_buffer(source: Any, selection: Any) -> RasterBuffer:
    if is_url_source(source):
        buffer = load_image_from_url(source)
    else:
        buffer = decode_image(source)

    area = fragment_crop_area(selection, buffer.width, buffer.height)
    logger.debug(
        f"Extracting fragment {area.to_dict()} from {buffer.width}x{buffer.height} image"
    )
    return crop_image(buffer, area)


def extract_image_fragment(source: Any, selection: Any) -> bytes:
    """
    Crop a selection out of an image and encode it as a small WebP preview.

    Args:
        source: http(s) URL or any source decode_image() accepts
        selection: x, y, width, height as percentages of the true image size

    Returns:
        WebP bytes (quality 0.85)

    Raises:
        DecodeFailureError: If the source cannot be loaded or decoded
    """
    fragment = _fragment_buffer(source, selection)
    return to_encoded_bytes(fragment, FRAGMENT_MIME_TYPE, FRAGMENT_QUALITY)


def extract_image_fragment_data_url(source: Any, selection: Any) -> str:
    """Like extract_image_fragment(), returning a ``data:image/webp;base64,...`` URL."""
    fragment = _fragment_buffer(source, selection)
    return to_data_url(fragment, FRAGMENT_MIME_TYPE, FRAGMENT_QUALITY)


def build_image_selection(source: Any, selection_input: Any) -> ImageSelection:
    """Extract the fragment for ``selection_input`` and return the stored selection."""
    rect = _selection_rect(selection_input)
    return ImageSelection(
        x=rect["x"],
        y=rect["y"],
        width=rect["width"],
        height=rect["height"],
        fragment_url=extract_image_fragment_data_url(source, selection_input),
    )


# ============================================================================
# Text selections
# ============================================================================

class _TextContentParser(HTMLParser):
    """Collects the text nodes of a markup fragment."""

    def __init__(self):
        super().__init__(convert_charrefs=True)
        self._chunks: List[str] = []

    def handle_data(self, data: str) -> None:
        self._chunks.append(data)

    @property
    def text(self) -> str:
        return "".join(self._chunks)


def plain_text_projection(markup: str) -> str:
    """
    Text content of rich-text markup: tags dropped, character references decoded.

    Example:
        >>> plain_text_projection("<p>Fish &amp; <b>chips</b></p>")
        'Fish & chips'
    """
    parser = _TextContentParser()
    parser.feed(markup or "")
    parser.close()
    return parser.text


def extract_text_selection(markup: str, start_index: int, end_index: int) -> str:
    """
    Return the selected span of rich text as plain text.

    ``start_index`` and ``end_index`` index the PLAIN-TEXT projection
    (see plain_text_projection()), not the markup. Passing offsets taken
    from the raw markup selects the wrong characters whenever tags or
    entities precede the selection. Negative and out-of-range indices
    follow Python slice semantics.

    Args:
        markup: Rich text (HTML)
        start_index: Inclusive start in the plain text
        end_index: Exclusive end in the plain text

    Returns:
        The selected plain text

    Example:
        >>> extract_text_selection("<p>Hello <b>world</b></p>", 0, 5)
        'Hello'
    """
    return plain_text_projection(markup)[start_index:end_index]


def build_text_selection(markup: str, start_index: int, end_index: int) -> TextSelection:
    """Build a TextSelection whose ``original_text`` is the selected plain text."""
    return TextSelection(
        start_index=start_index,
        end_index=end_index,
        original_text=extract_text_selection(markup, start_index, end_index),
    )

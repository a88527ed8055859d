"""
FragmentsLib - Critique selection fragments (image crops and text spans)
"""

from IE_Libs.FragmentsLib.critique_fragments import (
    ImageSelection,
    ImageSelectionInput,
    TextSelection,
    build_image_selection,
    build_text_selection,
    extract_image_fragment,
    extract_image_fragment_data_url,
    extract_text_selection,
    fragment_crop_area,
    plain_text_projection,
    selection_from_dict,
)

__all__ = [
    "ImageSelection",
    "ImageSelectionInput",
    "TextSelection",
    "build_image_selection",
    "build_text_selection",
    "extract_image_fragment",
    "extract_image_fragment_data_url",
    "extract_text_selection",
    "fragment_crop_area",
    "plain_text_projection",
    "selection_from_dict",
]

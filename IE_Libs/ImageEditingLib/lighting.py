"""
Lighting and color adjustment composer.

Classes:
    LightingAdjustments: Optional-field record of slider values

Functions:
    apply_lighting_adjustments: Apply every set adjustment in a fixed order
"""

import logging
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional

from IE_Libs.ImageEditingLib.color_correction import (
    auto_color_correction,
    even_colors,
    remove_yellowing,
)
from IE_Libs.ImageEditingLib.image_models import RasterBuffer
from IE_Libs.ImageEditingLib.tone_ops import (
    apply_brightness_contrast,
    apply_shadows_highlights,
)

logger = logging.getLogger(__name__)

# Serialized (camelCase) key for each field
_WIRE_KEYS = {
    "brightness": "brightness",
    "contrast": "contrast",
    "shadows": "shadows",
    "highlights": "highlights",
    "remove_yellowing": "removeYellowing",
    "even_colors": "evenColors",
    "auto_color_correction": "autoColorCorrection",
}


@dataclass(frozen=True)
class LightingAdjustments:
    """Lighting and color adjustment parameters.

    Every field is optional; ``None`` means "skip this stage". Values
    outside a field's range are clamped by the stage that uses them.

    Attributes:
        brightness: -100 to +100
        contrast: -100 to +100
        shadows: 0 to 100
        highlights: 0 to 100
        remove_yellowing: 0 to 100
        even_colors: 0 to 100
        auto_color_correction: Run the fixed auto color correction chain
    """
    brightness: Optional[float] = None
    contrast: Optional[float] = None
    shadows: Optional[float] = None
    highlights: Optional[float] = None
    remove_yellowing: Optional[float] = None
    even_colors: Optional[float] = None
    auto_color_correction: Optional[bool] = None

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a camelCase dictionary, omitting unset fields."""
        return {
            _WIRE_KEYS[f.name]: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LightingAdjustments":
        """Create from a dictionary with camelCase or snake_case keys."""
        values: Dict[str, Any] = {}
        for name, wire_key in _WIRE_KEYS.items():
            raw = data.get(wire_key, data.get(name))
            if raw is None:
                continue
            if name == "auto_color_correction":
                values[name] = bool(raw)
            else:
                values[name] = float(raw)
        return cls(**values)


def apply_lighting_adjustments(
    buffer: RasterBuffer,
    adjustments: LightingAdjustments,
) -> RasterBuffer:
    """
    Apply all lighting and color adjustments to a buffer.

    Stages run in order: brightness/contrast, shadows/highlights, auto
    color correction, remove yellowing, even colors. A stage pair runs when
    either of its values is set (the other defaults to 0); the color
    corrections run only for positive strengths.

    Args:
        buffer: Source RasterBuffer
        adjustments: Slider values to apply

    Returns:
        New RasterBuffer (the input itself when nothing is set)
    """
    processed = buffer

    if adjustments.brightness is not None or adjustments.contrast is not None:
        processed = apply_brightness_contrast(
            processed,
            adjustments.brightness or 0.0,
            adjustments.contrast or 0.0,
        )

    if adjustments.shadows is not None or adjustments.highlights is not None:
        processed = apply_shadows_highlights(
            processed,
            adjustments.shadows or 0.0,
            adjustments.highlights or 0.0,
        )

    if adjustments.auto_color_correction:
        processed = auto_color_correction(processed)

    if adjustments.remove_yellowing is not None and adjustments.remove_yellowing > 0:
        processed = remove_yellowing(processed, adjustments.remove_yellowing)

    if adjustments.even_colors is not None and adjustments.even_colors > 0:
        processed = even_colors(processed, adjustments.even_colors)

    logger.debug("Applied lighting adjustments %s", adjustments.to_dict())
    return processed

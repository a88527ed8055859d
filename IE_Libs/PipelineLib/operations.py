"""
Image operation models.

An edit is an ordered list of operations. Each operation is a small,
frozen record with a ``type`` tag and only primitive numeric/boolean
parameters, so an edit history can be stored or sent as JSON.

Classes:
    CropOperation: Crop to a pixel rectangle ("crop")
    RotateOperation: Rotate by an arbitrary angle in degrees ("rotate")
    Rotate90Operation: Quarter turn in either direction ("rotate90")
    LightingOperation: Lighting and color adjustments ("lighting")
    AutoEvenLightingOperation: Histogram-driven tone mapping ("autoEvenLighting")

Functions:
    operation_from_dict: Build an operation from its dictionary form
    operations_to_json: Serialize an operation list to JSON
    operations_from_json: Parse an operation list from JSON
"""

import json
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence, Union

from IE_Libs.ImageEditingLib.image_models import CropArea
from IE_Libs.ImageEditingLib.lighting import LightingAdjustments


@dataclass(frozen=True)
class CropOperation:
    area: CropArea
    type: str = field(default="crop", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "area": self.area.to_dict()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CropOperation":
        return cls(area=CropArea.from_dict(data["area"]))


@dataclass(frozen=True)
class RotateOperation:
    """Rotate clockwise by ``angle`` degrees around the image centre."""
    angle: float
    type: str = field(default="rotate", init=False)

    def __post_init__(self):
        angle = float(self.angle)
        if not math.isfinite(angle):
            raise ValueError(f"Rotation angle must be finite, got {self.angle!r}")
        object.__setattr__(self, "angle", angle)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "angle": self.angle}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RotateOperation":
        return cls(angle=data["angle"])


@dataclass(frozen=True)
class Rotate90Operation:
    clockwise: bool = True
    type: str = field(default="rotate90", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "clockwise": bool(self.clockwise)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Rotate90Operation":
        return cls(clockwise=bool(data.get("clockwise", True)))


@dataclass(frozen=True)
class LightingOperation:
    adjustments: LightingAdjustments
    type: str = field(default="lighting", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "adjustments": self.adjustments.to_dict()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LightingOperation":
        return cls(adjustments=LightingAdjustments.from_dict(data.get("adjustments") or {}))


@dataclass(frozen=True)
class AutoEvenLightingOperation:
    type: str = field(default="autoEvenLighting", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AutoEvenLightingOperation":
        return cls()


ImageOperation = Union[
    CropOperation,
    RotateOperation,
    Rotate90Operation,
    LightingOperation,
    AutoEvenLightingOperation,
]

OPERATION_TYPES = {
    "crop": CropOperation,
    "rotate": RotateOperation,
    "rotate90": Rotate90Operation,
    "lighting": LightingOperation,
    "autoEvenLighting": AutoEvenLightingOperation,
}


def operation_from_dict(data: Dict[str, Any]) -> ImageOperation:
    """
    Build an operation from its dictionary form.

    Args:
        data: Dictionary with a ``type`` tag and that operation's parameters

    Returns:
        The matching operation instance

    Raises:
        ValueError: If the tag is missing or unknown, or a parameter is invalid

    Example:
        >>> operation_from_dict({"type": "rotate", "angle": 45})
        RotateOperation(angle=45.0, type='rotate')
    """
    if not isinstance(data, dict):
        raise ValueError(f"Operation must be a dictionary, got {type(data)}")

    op_type = data.get("type")
    op_class = OPERATION_TYPES.get(op_type)
    if op_class is None:
        available = ", ".join(sorted(OPERATION_TYPES))
        raise ValueError(f"Unknown operation type {op_type!r}. Available types: {available}")

    try:
        return op_class.from_dict(data)
    except KeyError as e:
        raise ValueError(f"Operation {op_type!r} is missing field {e}") from e


def operations_to_json(operations: Sequence[ImageOperation]) -> str:
    """Serialize an operation list to a JSON array."""
    return json.dumps([op.to_dict() for op in operations])


def operations_from_json(text: str) -> List[ImageOperation]:
    """
    Parse a JSON array of operations.

    Raises:
        ValueError: If the JSON is malformed, not an array, or holds an invalid operation
    """
    data = json.loads(text)
    if not isinstance(data, list):
        raise ValueError("Operation list JSON must be an array")
    return [operation_from_dict(item) for item in data]

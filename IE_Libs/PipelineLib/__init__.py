"""
PipelineLib - Operation models, executor registry and pipeline runner
"""

from IE_Libs.PipelineLib.operations import (
    AutoEvenLightingOperation,
    CropOperation,
    ImageOperation,
    LightingOperation,
    Rotate90Operation,
    RotateOperation,
    operation_from_dict,
    operations_from_json,
    operations_to_json,
)
from IE_Libs.PipelineLib.operation_executors import (
    OperationExecutorRegistry,
    get_default_registry,
    register_default_executors,
)
from IE_Libs.PipelineLib.pipeline import (
    apply_operations,
    apply_operations_batch,
    get_pipeline_summary,
    process_image,
)

__all__ = [
    "AutoEvenLightingOperation",
    "CropOperation",
    "ImageOperation",
    "LightingOperation",
    "Rotate90Operation",
    "RotateOperation",
    "operation_from_dict",
    "operations_from_json",
    "operations_to_json",
    "OperationExecutorRegistry",
    "get_default_registry",
    "register_default_executors",
    "apply_operations",
    "apply_operations_batch",
    "get_pipeline_summary",
    "process_image",
]

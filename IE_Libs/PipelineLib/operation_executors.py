"""
Operation executor dispatch.

Each operation's ``type`` tag maps to a function that takes the current
buffer and the operation and returns a new buffer. The pipeline folds an
operation list through these lookups.

Classes:
    OperationExecutorRegistry: Maps operation type tags to executors

Functions:
    get_default_registry: Shared registry holding the built-in executors
    register_default_executors: Register the built-in executors on a registry
"""

from typing import Any, Callable, Dict, List, Optional
import logging

from IE_Libs.ImageEditingLib.auto_lighting import auto_even_lighting
from IE_Libs.ImageEditingLib.geometry_ops import crop_image, rotate_90, rotate_image
from IE_Libs.ImageEditingLib.image_models import RasterBuffer
from IE_Libs.ImageEditingLib.lighting import apply_lighting_adjustments

logger = logging.getLogger(__name__)

ExecutorFunction = Callable[[RasterBuffer, Any], RasterBuffer]


class OperationExecutorRegistry:
    """
    Lookup table from operation type tag to executor.

    Example:
        >>> registry = OperationExecutorRegistry()
        >>> registry.register("rotate90", execute_rotate_90)
        >>> rotated = registry.execute("rotate90", buffer, Rotate90Operation())
    """

    def __init__(self):
        self._executors: Dict[str, ExecutorFunction] = {}

    def register(self, op_type: str, executor: ExecutorFunction) -> None:
        """
        Register the executor for an operation type.

        Args:
            op_type: Operation type tag (e.g., "crop")
            executor: Callable accepting (buffer, operation) and returning a new buffer

        Raises:
            ValueError: If op_type is empty or executor is not callable
            RuntimeError: If op_type already has an executor
        """
        op_type = str(op_type).strip()

        if not op_type:
            raise ValueError("op_type cannot be empty")

        if not callable(executor):
            raise ValueError(f"executor must be callable, got {type(executor)}")

        if op_type in self._executors:
            raise RuntimeError(f"Operation type '{op_type}' already has an executor")

        self._executors[op_type] = executor
        logger.debug(f"Registered executor for operation type: {op_type}")

    def get_executor(self, op_type: str) -> ExecutorFunction:
        """
        Raises:
            KeyError: If op_type has no executor; the message lists the known types
        """
        op_type = str(op_type).strip()

        if op_type not in self._executors:
            available = ", ".join(self.list_operation_types())
            raise KeyError(
                f"No executor for operation type '{op_type}'. Known types: {available}"
            )

        return self._executors[op_type]

    def has_executor(self, op_type: str) -> bool:
        return str(op_type).strip() in self._executors

    def execute(self, op_type: str, buffer: RasterBuffer, operation: Any) -> RasterBuffer:
        """Run the executor for ``op_type``. Executor errors propagate unchanged."""
        return self.get_executor(op_type)(buffer, operation)

    def list_operation_types(self) -> List[str]:
        return sorted(self._executors)


# ============================================================================
# Built-in executors
# ============================================================================

def execute_crop(buffer: RasterBuffer, operation: Any) -> RasterBuffer:
    return crop_image(buffer, operation.area)


def execute_rotate(buffer: RasterBuffer, operation: Any) -> RasterBuffer:
    return rotate_image(buffer, operation.angle)


def execute_rotate_90(buffer: RasterBuffer, operation: Any) -> RasterBuffer:
    return rotate_90(buffer, operation.clockwise)


def execute_lighting(buffer: RasterBuffer, operation: Any) -> RasterBuffer:
    return apply_lighting_adjustments(buffer, operation.adjustments)


def execute_auto_even_lighting(buffer: RasterBuffer, operation: Any) -> RasterBuffer:
    return auto_even_lighting(buffer)


_BUILTIN_EXECUTORS = (
    ("crop", execute_crop),
    ("rotate", execute_rotate),
    ("rotate90", execute_rotate_90),
    ("lighting", execute_lighting),
    ("autoEvenLighting", execute_auto_even_lighting),
)

_default_registry: Optional[OperationExecutorRegistry] = None


def get_default_registry() -> OperationExecutorRegistry:
    """
    Get the shared registry of built-in executors, creating it on first use.

    The registry is fully populated before it is published, so concurrent
    callers never see a partially registered instance.
    """
    global _default_registry

    if _default_registry is None:
        registry = OperationExecutorRegistry()
        register_default_executors(registry)
        _default_registry = registry

    return _default_registry


def register_default_executors(registry: OperationExecutorRegistry) -> None:
    """Register crop, rotate, rotate90, lighting and autoEvenLighting."""
    for op_type, executor in _BUILTIN_EXECUTORS:
        registry.register(op_type, executor)

    logger.info("Registered default operation executors")

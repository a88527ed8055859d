"""
Operation pipeline.

Decodes a source once, then folds an ordered list of operations over the
buffer. Each stage is a pure buffer -> buffer function, so separate
images can be processed concurrently with no shared state.

Functions:
    apply_operations: Run an operation list over one source
    process_image: Alias of apply_operations
    apply_operations_batch: Run the same operation list over many sources
    get_pipeline_summary: Human-readable listing of an operation list
"""

import concurrent.futures
import logging
from typing import Any, Dict, List, Optional, Sequence, Union

from IE_Libs.ImageEditingLib.errors import ImageEditorError
from IE_Libs.ImageEditingLib.image_models import RasterBuffer
from IE_Libs.ImageIOLib.image_loader import decode_image
from IE_Libs.PipelineLib.operation_executors import (
    OperationExecutorRegistry,
    get_default_registry,
)
from IE_Libs.PipelineLib.operations import ImageOperation, operation_from_dict

logger = logging.getLogger(__name__)

OperationLike = Union[ImageOperation, Dict[str, Any]]


def _coerce_operations(operations: Sequence[OperationLike]) -> List[ImageOperation]:
    return [
        operation_from_dict(op) if isinstance(op, dict) else op
        for op in operations
    ]


def apply_operations(
    source: Any,
    operations: Sequence[OperationLike],
    registry: Optional[OperationExecutorRegistry] = None,
) -> RasterBuffer:
    """
    Apply operations to a source image, left to right.

    The source is decoded before any operation runs, so a decode failure
    aborts the whole edit. Errors raised by a stage propagate unchanged.

    Args:
        source: RasterBuffer, or any encoded source decode_image() accepts
        operations: Operations (dataclasses or their dictionary form)
        registry: Executor registry (default: the global default registry)

    Returns:
        The final RasterBuffer

    Raises:
        DecodeFailureError: If the source cannot be decoded
        ValueError: If an operation dictionary is invalid
        KeyError: If an operation type has no registered executor

    Example:
        >>> result = apply_operations(buffer, [
        ...     {"type": "rotate90", "clockwise": True},
        ...     {"type": "lighting", "adjustments": {"brightness": 20}},
        ... ])
    """
    ops = _coerce_operations(operations)
    registry = registry or get_default_registry()

    buffer = decode_image(source)

    for index, op in enumerate(ops):
        logger.debug(f"Applying operation {index} ({op.type}) to {buffer.width}x{buffer.height} buffer")
        buffer = registry.execute(op.type, buffer, op)

    return buffer


process_image = apply_operations


def _with_source_context(index: int, error: Exception) -> Exception:
    message = f"Error processing source {index}: {error}"
    logger.error(message)
    if isinstance(error, ImageEditorError):
        return type(error)(message)
    return Exception(message)


def apply_operations_batch(
    sources: Sequence[Any],
    operations: Sequence[OperationLike],
    use_threading: bool = True,
    max_workers: int = None,
    registry: Optional[OperationExecutorRegistry] = None,
) -> List[RasterBuffer]:
    """
    Apply the same operations to several independent sources.

    Args:
        sources: Sources accepted by apply_operations()
        operations: Operations to apply to each source
        use_threading: Process sources in parallel (default: True)
        max_workers: Maximum number of threads (default: None = CPU count)
        registry: Executor registry (default: the global default registry)

    Returns:
        Result buffers, in the same order as ``sources``

    Raises:
        ImageEditorError: The first editor failure (decode, shape, export),
            re-raised as the same subclass with the failing source index
        Exception: Any other first failure, with the failing source index
    """
    ops = _coerce_operations(operations)
    registry = registry or get_default_registry()
    results: List[Optional[RasterBuffer]] = [None] * len(sources)

    if use_threading and len(sources) > 1:
        with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures: Dict[concurrent.futures.Future, int] = {
                executor.submit(apply_operations, source, ops, registry): index
                for index, source in enumerate(sources)
            }

            for future in concurrent.futures.as_completed(futures):
                index = futures[future]
                try:
                    results[index] = future.result()
                except Exception as e:
                    # Re-raise with source context
                    raise _with_source_context(index, e) from e
    else:
        for index, source in enumerate(sources):
            try:
                results[index] = apply_operations(source, ops, registry)
            except Exception as e:
                raise _with_source_context(index, e) from e

    return results


def _describe(op: ImageOperation) -> str:
    params = {k: v for k, v in op.to_dict().items() if k != "type"}
    if not params:
        return op.type
    details = ", ".join(f"{k}={v}" for k, v in params.items())
    return f"{op.type} ({details})"


def get_pipeline_summary(operations: Sequence[OperationLike]) -> str:
    """
    Get a human-readable summary of an operation list.

    Example:
        >>> print(get_pipeline_summary([{"type": "rotate", "angle": 90}]))
        Operation Pipeline Summary
        ==================================================
        Total Operations: 1
        <BLANKLINE>
          1. rotate (angle=90.0)
    """
    ops = _coerce_operations(operations)

    lines = []
    lines.append("Operation Pipeline Summary")
    lines.append("=" * 50)
    lines.append(f"Total Operations: {len(ops)}")
    lines.append("")

    if not ops:
        lines.append("  (no operations)")

    for index, op in enumerate(ops, start=1):
        lines.append(f"  {index}. {_describe(op)}")

    return "\n".join(lines)

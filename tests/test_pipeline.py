"""
Tests for the operation pipeline.

Tests cover:
- Decoding the source once before any operation
- Left-to-right folding through the registry
- Error propagation
- Batch processing order with and without threading
- Pipeline summary
"""

import io

import numpy as np
import pytest
from PIL import Image

from IE_Libs.ImageEditingLib.errors import DecodeFailureError, ShapeMismatchError
from IE_Libs.ImageEditingLib.geometry_ops import crop_image, rotate_90
from IE_Libs.ImageEditingLib.image_models import CropArea, RasterBuffer
from IE_Libs.ImageEditingLib.lighting import LightingAdjustments, apply_lighting_adjustments
from IE_Libs.PipelineLib.operation_executors import OperationExecutorRegistry
from IE_Libs.PipelineLib.operations import (
    AutoEvenLightingOperation,
    CropOperation,
    LightingOperation,
    Rotate90Operation,
    RotateOperation,
)
from IE_Libs.PipelineLib.pipeline import (
    apply_operations,
    apply_operations_batch,
    get_pipeline_summary,
    process_image,
)


class TestApplyOperations:
    """Tests for apply_operations."""

    def test_no_operations_returns_source(self, flat_buffer):
        assert apply_operations(flat_buffer, []) is flat_buffer

    def test_folds_left_to_right(self, large_buffer):
        operations = [
            Rotate90Operation(clockwise=True),
            CropOperation(CropArea(10, 0, 30, 60)),
            LightingOperation(LightingAdjustments(brightness=20)),
        ]

        expected = rotate_90(large_buffer, True)
        expected = crop_image(expected, CropArea(10, 0, 30, 60))
        expected = apply_lighting_adjustments(expected, LightingAdjustments(brightness=20))

        assert apply_operations(large_buffer, operations) == expected

    def test_order_matters(self):
        buffer = RasterBuffer.new(100, 40, (50, 50, 50, 255))
        crop_then_rotate = apply_operations(
            buffer, [CropOperation(CropArea(0, 0, 80, 30)), Rotate90Operation()]
        )
        rotate_then_crop = apply_operations(
            buffer, [Rotate90Operation(), CropOperation(CropArea(0, 0, 80, 30))]
        )

        assert crop_then_rotate.size == (30, 80)
        assert rotate_then_crop.size == (40, 30)

    def test_accepts_dict_operations(self, large_buffer):
        result = apply_operations(large_buffer, [
            {"type": "crop", "area": {"x": 0, "y": 0, "width": 40, "height": 20}},
            {"type": "rotate", "angle": 90},
        ])

        assert result.size == (20, 40)

    def test_decodes_encoded_source(self):
        image = Image.new("RGB", (64, 32), (10, 20, 30))
        output = io.BytesIO()
        image.save(output, format="PNG")

        result = apply_operations(output.getvalue(), [RotateOperation(270)])

        assert result.size == (32, 64)
        assert result.getpixel(0, 0) == (10, 20, 30, 255)

    def test_decode_failure_aborts_before_operations(self):
        calls = []
        registry = OperationExecutorRegistry()
        registry.register("crop", lambda buffer, op: calls.append(op) or buffer)

        with pytest.raises(DecodeFailureError):
            apply_operations(b"not an image", [CropOperation(CropArea(0, 0, 20, 20))], registry)

        assert calls == []

    def test_stage_error_propagates_unchanged(self, flat_buffer):
        registry = OperationExecutorRegistry()

        def failing(buffer, op):
            raise ZeroDivisionError("boom")

        registry.register("autoEvenLighting", failing)

        with pytest.raises(ZeroDivisionError, match="boom"):
            apply_operations(flat_buffer, [AutoEvenLightingOperation()], registry)

    def test_unknown_executor_raises_key_error(self, flat_buffer):
        with pytest.raises(KeyError):
            apply_operations(flat_buffer, [RotateOperation(10)], OperationExecutorRegistry())

    def test_invalid_dict_raises_value_error(self, flat_buffer):
        with pytest.raises(ValueError):
            apply_operations(flat_buffer, [{"type": "sharpen"}])

    def test_invalid_operation_rejected_before_decode(self):
        with pytest.raises(ValueError):
            apply_operations(b"not an image", [{"type": "rotate", "angle": float("nan")}])

    def test_custom_registry_is_used(self, flat_buffer):
        marker = RasterBuffer.new(1, 1, (9, 9, 9, 9))
        registry = OperationExecutorRegistry()
        registry.register("rotate", lambda buffer, op: marker)

        assert apply_operations(flat_buffer, [RotateOperation(45)], registry) is marker

    def test_source_not_mutated(self, gradient_buffer):
        before = gradient_buffer.pixels
        apply_operations(gradient_buffer, [
            LightingOperation(LightingAdjustments(contrast=50, shadows=40)),
            AutoEvenLightingOperation(),
        ])

        assert gradient_buffer.pixels == before

    def test_process_image_alias(self):
        assert process_image is apply_operations


class TestApplyOperationsBatch:
    """Tests for apply_operations_batch."""

    def _sources(self):
        return [RasterBuffer.new(20 + i, 30, (i * 10, 0, 0, 255)) for i in range(6)]

    @pytest.mark.parametrize("use_threading", [True, False])
    def test_results_keep_input_order(self, use_threading):
        sources = self._sources()
        results = apply_operations_batch(
            sources, [Rotate90Operation()], use_threading=use_threading, max_workers=3
        )

        assert [r.size for r in results] == [(30, 20 + i) for i in range(6)]
        assert [r.getpixel(0, 0)[0] for r in results] == [i * 10 for i in range(6)]

    def test_matches_sequential_results(self):
        sources = self._sources()
        operations = [{"type": "lighting", "adjustments": {"brightness": 30}}]

        threaded = apply_operations_batch(sources, operations, use_threading=True)
        sequential = [apply_operations(source, operations) for source in sources]

        assert threaded == sequential

    @pytest.mark.parametrize("use_threading", [True, False])
    def test_failure_reports_source_index(self, use_threading):
        sources = self._sources()
        sources[3] = b"garbage"

        with pytest.raises(DecodeFailureError, match="source 3") as excinfo:
            apply_operations_batch(sources, [Rotate90Operation()], use_threading=use_threading)

        assert isinstance(excinfo.value.__cause__, DecodeFailureError)

    def test_all_sources_undecodable(self):
        with pytest.raises(DecodeFailureError, match="source"):
            apply_operations_batch([b"garbage", b"junk"], [])

    @pytest.mark.parametrize("use_threading", [True, False])
    def test_editor_error_subclass_kept(self, use_threading):
        registry = OperationExecutorRegistry()

        def failing(buffer, op):
            raise ShapeMismatchError("bad dimensions")

        registry.register("rotate90", failing)

        with pytest.raises(ShapeMismatchError, match=r"source [01]: bad dimensions"):
            apply_operations_batch(
                self._sources()[:2], [Rotate90Operation()],
                use_threading=use_threading, registry=registry,
            )

    def test_other_errors_wrapped_with_index(self):
        registry = OperationExecutorRegistry()

        def failing(buffer, op):
            raise ZeroDivisionError("boom")

        registry.register("rotate90", failing)

        with pytest.raises(Exception, match="source 0: boom") as excinfo:
            apply_operations_batch(
                self._sources()[:1], [Rotate90Operation()], registry=registry
            )

        assert isinstance(excinfo.value.__cause__, ZeroDivisionError)

    def test_empty_batch(self):
        assert apply_operations_batch([], [Rotate90Operation()]) == []


class TestPipelineSummary:
    """Tests for get_pipeline_summary."""

    def test_lists_operations_in_order(self):
        summary = get_pipeline_summary([
            CropOperation(CropArea(1, 2, 30, 40)),
            RotateOperation(15),
            AutoEvenLightingOperation(),
        ])

        lines = summary.splitlines()
        assert lines[0] == "Operation Pipeline Summary"
        assert "Total Operations: 3" in summary
        assert lines[-3].strip().startswith("1. crop")
        assert lines[-2].strip() == "2. rotate (angle=15.0)"
        assert lines[-1].strip() == "3. autoEvenLighting"

    def test_empty(self):
        assert "(no operations)" in get_pipeline_summary([])

    def test_accepts_dicts(self):
        summary = get_pipeline_summary([{"type": "rotate90", "clockwise": False}])

        assert "rotate90 (clockwise=False)" in summary

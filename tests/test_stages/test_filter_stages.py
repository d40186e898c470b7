"""Tests for range filter, sampler and null stages."""

import numpy as np
import pytest
from pydantic import ValidationError

from plystream.core.contracts import FlushResult, PointsBatch
from plystream.core.errors import SchemaViolationError
from plystream.stages.fixed_ratio_sampler.config import FixedRatioSamplerConfig
from plystream.stages.fixed_ratio_sampler.stage import FixedRatioSamplerStage
from plystream.stages.min_max_range_filter.config import MinMaxRangeFilterConfig
from plystream.stages.min_max_range_filter.stage import MinMaxRangeFilterStage
from plystream.stages.null.stage import NullStage


class TestMinMaxRangeFilter:
    def test_config_validation(self):
        with pytest.raises(ValidationError):
            MinMaxRangeFilterConfig(min_range=5.0, max_range=1.0)
        with pytest.raises(ValidationError):
            MinMaxRangeFilterConfig(max_range=0.0)

    def test_filters_points_and_attributes(self, recorder):
        stage = MinMaxRangeFilterStage(MinMaxRangeFilterConfig(min_range=1.0, max_range=3.0), recorder)
        batch = PointsBatch(
            points=[(0.5, 0, 0), (2, 0, 0), (0, 0, 5), (0, 3, 0)],
            frame_id="f",
            intensities=[0.1, 0.2, 0.3, 0.4],
            rings=[1, 2, 3, 4],
        )
        stage.process(batch)
        (out,) = recorder.batches
        np.testing.assert_array_equal(out.points, [[2, 0, 0], [0, 3, 0]])
        np.testing.assert_allclose(out.intensities, [0.2, 0.4])
        np.testing.assert_array_equal(out.rings, [2, 4])
        assert len(out.colors) == 0
        assert out.frame_id == "f"

    def test_uses_batch_origin(self, recorder):
        stage = MinMaxRangeFilterStage(MinMaxRangeFilterConfig(max_range=1.0), recorder)
        stage.process(PointsBatch(points=[(10, 0, 0), (0, 0, 0)], origin=(10, 0, 0)))
        np.testing.assert_array_equal(recorder.batches[0].points, [[10, 0, 0]])

    def test_mismatched_attribute_length_is_fatal(self, recorder):
        stage = MinMaxRangeFilterStage(MinMaxRangeFilterConfig(max_range=10.0), recorder)
        batch = PointsBatch(
            points=[(1, 0, 0), (2, 0, 0), (3, 0, 0)],
            intensities=[0.1, 0.2],
            frame_id="scan_9",
        )
        with pytest.raises(SchemaViolationError, match="scan_9"):
            stage.process(batch)
        assert recorder.batches == []

    def test_flush_propagates(self, restarting_recorder):
        stage = MinMaxRangeFilterStage(MinMaxRangeFilterConfig(max_range=1.0), restarting_recorder)
        assert stage.flush() is FlushResult.RESTART_STREAM


class TestFixedRatioSampler:
    def test_ratio_bounds(self):
        with pytest.raises(ValidationError):
            FixedRatioSamplerConfig(sampling_ratio=0.0)
        with pytest.raises(ValidationError):
            FixedRatioSamplerConfig(sampling_ratio=1.5)

    def test_keeps_fraction_across_batches(self, recorder, make_batch):
        stage = FixedRatioSamplerStage(FixedRatioSamplerConfig(sampling_ratio=0.25), recorder)
        for i in range(4):
            stage.process(make_batch(10, seed=i))
        assert sum(len(b) for b in recorder.batches) == 10

    def test_ratio_one_keeps_all(self, recorder, make_batch):
        stage = FixedRatioSamplerStage(FixedRatioSamplerConfig(sampling_ratio=1.0), recorder)
        batch = make_batch(7, color=True)
        stage.process(batch)
        np.testing.assert_array_equal(recorder.batches[0].points, batch.points)
        np.testing.assert_array_equal(recorder.batches[0].colors, batch.colors)


class TestNullStage:
    def test_terminal(self, make_batch):
        stage = NullStage()
        stage.process(make_batch())
        assert stage.flush() is FlushResult.FINISHED

    def test_non_terminal_requires_next(self):
        with pytest.raises(ValueError, match="next stage"):
            MinMaxRangeFilterStage(MinMaxRangeFilterConfig(max_range=1.0))

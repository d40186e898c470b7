"""Shared pytest fixtures for plystream tests."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import numpy as np
import pytest

from plystream.core.contracts import FlushResult, PointsBatch
from plystream.core.stage_base import BaseStage
from plystream.stages.null.config import NullConfig


def make_batch(
    n: int = 4,
    *,
    color: bool = False,
    intensity: bool = False,
    ring: bool = False,
    start_time: float = 1.5,
    frame_id: str = "lidar",
    seed: int = 0,
) -> PointsBatch:
    """Create a batch of ``n`` random points with the requested attributes."""
    rng = np.random.default_rng(seed)
    return PointsBatch(
        points=rng.uniform(-10, 10, (n, 3)).astype(np.float32),
        frame_id=frame_id,
        start_time=start_time,
        colors=rng.integers(0, 256, (n, 3), dtype=np.uint8) if color else None,
        intensities=rng.uniform(0, 1, n).astype(np.float32) if intensity else None,
        rings=rng.integers(0, 32, n, dtype=np.uint16) if ring else None,
    )


class RecordingStage(BaseStage[NullConfig]):
    """Terminal stage that records what reaches it and returns a preset flush result."""

    name = "recording"
    config_type = NullConfig
    terminal = True

    def __init__(self, flush_result: FlushResult = FlushResult.FINISHED):
        super().__init__(NullConfig())
        self.batches: list[PointsBatch] = []
        self.flush_calls = 0
        self.flush_result = flush_result

    def process(self, batch: PointsBatch) -> None:
        self.batches.append(batch)

    def flush(self) -> FlushResult:
        self.flush_calls += 1
        return self.flush_result


@pytest.fixture
def recorder() -> RecordingStage:
    return RecordingStage()


@pytest.fixture
def frames_dir(tmp_path: Path) -> Path:
    """Directory with three .npz frames carrying colors and intensities."""
    frames = tmp_path / "frames"
    frames.mkdir()
    for i in range(3):
        batch = make_batch(5, color=True, intensity=True, start_time=10.0 + i, seed=i)
        np.savez(
            frames / f"frame_{i:04d}.npz",
            points=batch.points,
            colors=batch.colors,
            intensities=batch.intensities,
            start_time=batch.start_time,
            frame_id=f"frame_{i}",
        )
    return frames


@pytest.fixture(name="make_batch")
def make_batch_fixture():
    return make_batch


@pytest.fixture
def restarting_recorder() -> RecordingStage:
    """Terminal stage that asks for another pass on flush."""
    return RecordingStage(FlushResult.RESTART_STREAM)


@pytest.fixture
def root_logging():
    """Restore root logger handlers and level replaced by ``setup_logging``."""
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    yield root
    for handler in root.handlers:
        if handler not in saved_handlers:
            handler.close()
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)

"""Common models shared across pipeline stages."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from .errors import SchemaViolationError


def _as_array(values, dtype, what: str, width: Optional[int] = None) -> np.ndarray:
    arr = np.asarray(values if values is not None else [])
    if arr.size == 0:
        shape = (0, width) if width else (0,)
        return np.zeros(shape, dtype=dtype)
    if width is None:
        if arr.ndim != 1:
            raise ValueError(f"{what} must be a flat (N,) array, got shape {arr.shape}")
    elif arr.ndim == 1 and arr.shape[0] == width:
        arr = arr.reshape(1, width)
    elif arr.ndim != 2 or arr.shape[1] != width:
        raise ValueError(f"{what} must have shape (N, {width}), got {arr.shape}")
    return arr.astype(dtype, copy=False)


def _check_range(arr: np.ndarray, lo: int, hi: int, what: str) -> None:
    if arr.size and (arr.min() < lo or arr.max() > hi):
        raise ValueError(f"{what} values must lie in [{lo}, {hi}]")


@dataclass(eq=False)
class PointsBatch:
    """A group of points emitted together by an upstream stage.

    ``colors``, ``intensities`` and ``rings`` are parallel to ``points``;
    an absent attribute is an empty array. Lengths are not checked here.
    """

    points: np.ndarray
    frame_id: str = ""
    start_time: float = 0.0
    colors: np.ndarray = field(default_factory=lambda: np.zeros((0, 3), dtype=np.uint8))
    intensities: np.ndarray = field(default_factory=lambda: np.zeros((0,), dtype=np.float32))
    rings: np.ndarray = field(default_factory=lambda: np.zeros((0,), dtype=np.uint16))
    origin: np.ndarray = field(default_factory=lambda: np.zeros(3, dtype=np.float32))
    trajectory_id: int = 0

    def __post_init__(self) -> None:
        self.points = _as_array(self.points, np.float32, "Points", width=3)

        colors = np.asarray(self.colors if self.colors is not None else [])
        _check_range(colors, 0, 255, "Color")
        self.colors = _as_array(colors, np.uint8, "Colors", width=3)

        self.intensities = _as_array(self.intensities, np.float32, "Intensities")

        rings = np.asarray(self.rings if self.rings is not None else [])
        _check_range(rings, 0, np.iinfo(np.uint16).max, "Ring")
        self.rings = _as_array(rings, np.uint16, "Rings")

        self.origin = np.asarray(self.origin, dtype=np.float32).reshape(3)
        self.start_time = float(self.start_time)

    def __len__(self) -> int:
        return len(self.points)

    def is_empty(self) -> bool:
        return len(self.points) == 0

    def select(self, mask: np.ndarray) -> PointsBatch:
        """Return a new batch keeping only the points selected by ``mask``."""
        mask = np.asarray(mask)

        def pick(arr: np.ndarray, label: str) -> np.ndarray:
            if not len(arr):
                return arr
            if len(arr) != len(self.points):
                raise SchemaViolationError(
                    f"Batch has {len(arr)} {label} for {len(self.points)} points.",
                    frame_id=self.frame_id,
                )
            return arr[mask]

        return PointsBatch(
            points=self.points[mask],
            frame_id=self.frame_id,
            start_time=self.start_time,
            colors=pick(self.colors, "colors"),
            intensities=pick(self.intensities, "intensities"),
            rings=pick(self.rings, "rings"),
            origin=self.origin,
            trajectory_id=self.trajectory_id,
        )


class StreamSchema(BaseModel):
    """Optional attributes an output stream has committed to carrying."""

    model_config = ConfigDict(frozen=True)

    has_color: bool = False
    has_intensity: bool = False
    has_ring: bool = False

    @property
    def record_size(self) -> int:
        """Bytes per encoded point."""
        return 12 + 3 * self.has_color + 4 * self.has_intensity + 8 + 2 * self.has_ring


class FlushResult(enum.Enum):
    """Completion signal returned by ``BaseStage.flush``."""

    FINISHED = "finished"
    RESTART_STREAM = "restart_stream"


class StageState(enum.Enum):
    IDLE = "idle"
    STREAMING = "streaming"
    FINALIZED = "finalized"


class SourceConfig(BaseModel):
    """Where the runner reads batches from."""

    type: str = Field("npz_dir", description="Batch source kind (only 'npz_dir' is supported)")
    path: Path = Field(Path("./data/frames"), description="Directory of .npz frames")


class StageEntry(BaseModel):
    """One entry in the pipeline stage list."""

    name: str
    module: str
    config: dict[str, Any] = Field(default_factory=dict)
    config_file: Optional[str] = None
    enabled: bool = True


class PipelineConfig(BaseModel):
    """Top-level pipeline configuration loaded from pipeline.yaml."""

    project_name: str = "plystream_project"
    output_dir: Path = Path("./output")
    source: SourceConfig = Field(default_factory=SourceConfig)
    stages: list[StageEntry] = Field(default_factory=list)

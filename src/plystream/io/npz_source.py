"""Batch source reading one PointsBatch per .npz frame file."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import numpy as np

from plystream.core.contracts import PointsBatch

logger = logging.getLogger(__name__)

_OPTIONAL_KEYS = ("colors", "intensities", "rings", "origin")


def load_npz_batch(path: Path) -> PointsBatch:
    """Load a single frame.

    Required key: ``points`` (N, 3). Optional keys: ``colors``, ``intensities``,
    ``rings``, ``origin``, ``start_time``, ``frame_id``.
    """
    with np.load(path, allow_pickle=False) as data:
        if "points" not in data:
            raise KeyError(f"{path} has no 'points' array")
        kwargs = {key: data[key] for key in _OPTIONAL_KEYS if key in data}
        start_time = float(data["start_time"]) if "start_time" in data else 0.0
        frame_id = str(data["frame_id"]) if "frame_id" in data else path.stem
        points = data["points"]
    return PointsBatch(points=points, frame_id=frame_id, start_time=start_time, **kwargs)


def iter_npz_batches(directory: Path) -> Iterator[PointsBatch]:
    """Yield batches for every ``*.npz`` file in ``directory``, sorted by name."""
    directory = Path(directory)
    if not directory.is_dir():
        raise FileNotFoundError(f"Frame directory not found: {directory}")
    files = sorted(directory.glob("*.npz"))
    logger.info(f"Reading {len(files)} frames from {directory}")
    for path in files:
        yield load_npz_batch(path)

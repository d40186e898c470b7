"""Stage: drop points closer than min_range or farther than max_range from the origin."""

from __future__ import annotations

import logging
from typing import ClassVar

import numpy as np

from plystream.core.contracts import FlushResult, PointsBatch
from plystream.core.stage_base import BaseStage
from .config import MinMaxRangeFilterConfig

logger = logging.getLogger(__name__)


class MinMaxRangeFilterStage(BaseStage[MinMaxRangeFilterConfig]):
    name: ClassVar[str] = "min_max_range_filter"
    config_type: ClassVar = MinMaxRangeFilterConfig

    def process(self, batch: PointsBatch) -> None:
        if batch.is_empty():
            self.forward(batch)
            return
        dist = np.linalg.norm(batch.points - batch.origin, axis=1)
        mask = (dist >= self.config.min_range) & (dist <= self.config.max_range)
        logger.debug(f"[{self.stage_name}] '{batch.frame_id}': kept {int(mask.sum())}/{len(mask)} points")
        self.forward(batch.select(mask))

    def flush(self) -> FlushResult:
        return self.flush_next()

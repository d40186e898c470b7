"""Stage: deterministically keep a fixed fraction of the points."""

from __future__ import annotations

import logging
from typing import ClassVar, Optional

import numpy as np

from plystream.core.contracts import FlushResult, PointsBatch
from plystream.core.stage_base import BaseStage
from .config import FixedRatioSamplerConfig

logger = logging.getLogger(__name__)


class FixedRatioSamplerStage(BaseStage[FixedRatioSamplerConfig]):
    """Keep point i (counted over the stream) when floor((i+1)*r) > floor(i*r)."""

    name: ClassVar[str] = "fixed_ratio_sampler"
    config_type: ClassVar = FixedRatioSamplerConfig

    def __init__(self, config: FixedRatioSamplerConfig, next_stage: Optional[BaseStage] = None):
        super().__init__(config, next_stage)
        self.num_seen = 0

    def process(self, batch: PointsBatch) -> None:
        if batch.is_empty():
            self.forward(batch)
            return
        r = self.config.sampling_ratio
        idx = np.arange(self.num_seen, self.num_seen + len(batch), dtype=np.float64)
        mask = np.floor((idx + 1) * r) > np.floor(idx * r)
        self.num_seen += len(batch)
        self.forward(batch.select(mask))

    def flush(self) -> FlushResult:
        logger.info(f"[{self.stage_name}] Sampled {self.num_seen} points at ratio {self.config.sampling_ratio}")
        self.num_seen = 0
        return self.flush_next()

"""Stage: end of the pipeline, drops every batch."""

from __future__ import annotations

from typing import ClassVar, Optional

from plystream.core.contracts import FlushResult, PointsBatch
from plystream.core.stage_base import BaseStage
from .config import NullConfig


class NullStage(BaseStage[NullConfig]):
    name: ClassVar[str] = "null"
    config_type: ClassVar = NullConfig
    terminal: ClassVar[bool] = True

    def __init__(self, config: Optional[NullConfig] = None, next_stage: Optional[BaseStage] = None):
        super().__init__(config or NullConfig(), next_stage)

    def process(self, batch: PointsBatch) -> None:
        pass

    def flush(self) -> FlushResult:
        return FlushResult.FINISHED

"""Stage: stream batches into a binary PLY file with x/y/z, color, intensity, time, ring."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import ClassVar, Optional

from plystream.core.contracts import FlushResult, PointsBatch, StageState, StreamSchema
from plystream.core.errors import PipelineOrderError, PipelineStateError
from plystream.core.stage_base import BaseStage
from plystream.io.sink import FileSinkFactory, OutputSink, make_file_sink_factory
from plystream.ply.encoder import encode_batch
from plystream.ply.header import render_header
from plystream.ply.schema import observe_first_batch, validate_batch
from .config import WritePlyCustomConfig

logger = logging.getLogger(__name__)


class PlyCustomWritingStage(BaseStage[WritePlyCustomConfig]):
    """Write every point passing through into one binary PLY file.

    The optional attributes are locked by the first non-empty batch. A
    placeholder header with count 0 is written up front and replaced by the
    real count on flush; the header length does not depend on the count.
    """

    name: ClassVar[str] = "write_ply_custom"
    config_type: ClassVar = WritePlyCustomConfig

    def __init__(
        self,
        config: WritePlyCustomConfig,
        next_stage: Optional[BaseStage] = None,
        sink: Optional[OutputSink] = None,
        file_sink_factory: Optional[FileSinkFactory] = None,
    ):
        super().__init__(config, next_stage)
        if sink is None:
            factory = file_sink_factory or make_file_sink_factory(Path("."))
            sink = factory(config.filename)
        self.sink = sink
        self.schema = StreamSchema()
        self.num_points = 0
        self.state = StageState.IDLE

    @classmethod
    def from_config(
        cls,
        config: WritePlyCustomConfig,
        next_stage: Optional[BaseStage],
        file_sink_factory: Optional[FileSinkFactory] = None,
    ) -> PlyCustomWritingStage:
        return cls(config, next_stage, file_sink_factory=file_sink_factory)

    def process(self, batch: PointsBatch) -> None:
        if self.state is StageState.FINALIZED:
            raise PipelineStateError(
                f"[{self.stage_name}] process() called after the PLY file was finalized"
            )
        if batch.is_empty():
            self.forward(batch)
            return

        if self.num_points == 0:
            self.schema = observe_first_batch(batch)
            self.sink.write_header(render_header(self.schema, 0, self.config.comment))
            self.state = StageState.STREAMING
            logger.info(
                f"[{self.stage_name}] Locked schema from frame '{batch.frame_id}': "
                f"color={self.schema.has_color} intensity={self.schema.has_intensity} "
                f"ring={self.schema.has_ring} ({self.schema.record_size} bytes/point)"
            )

        validate_batch(batch, self.schema)
        self.sink.write(encode_batch(batch, self.schema))
        self.num_points += len(batch)
        logger.debug(f"[{self.stage_name}] Wrote {len(batch)} points from '{batch.frame_id}'")

        self.forward(batch)

    def flush(self) -> FlushResult:
        if self.state is StageState.FINALIZED:
            raise PipelineStateError(f"[{self.stage_name}] flush() called twice")

        self.sink.write_header(render_header(self.schema, self.num_points, self.config.comment))
        self.sink.close()
        self.state = StageState.FINALIZED
        logger.info(f"[{self.stage_name}] Finalized {self.config.filename} with {self.num_points} points")

        result = self.flush_next()
        if result is FlushResult.RESTART_STREAM:
            raise PipelineOrderError(
                "PLY generation must be configured to occur after any stages "
                "that require multiple passes."
            )
        return result

"""plystream core: stage base, pipeline runner, shared contracts."""

from .stage_base import BaseStage
from .contracts import FlushResult, PipelineConfig, PointsBatch, StageEntry, StageState, StreamSchema
from .pipeline_runner import build_pipeline, drive, load_pipeline_config, run_pipeline
from .logging import setup_logging

__all__ = [
    "BaseStage",
    "FlushResult",
    "PipelineConfig",
    "PointsBatch",
    "StageEntry",
    "StageState",
    "StreamSchema",
    "build_pipeline",
    "drive",
    "load_pipeline_config",
    "run_pipeline",
    "setup_logging",
]

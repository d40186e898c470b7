"""Pipeline orchestrator: reads pipeline.yaml, chains stages and drives batches through them."""

from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Callable, Iterable, Optional

import yaml
from pydantic import BaseModel

from .contracts import FlushResult, PipelineConfig, PointsBatch, StageEntry
from .stage_base import BaseStage

logger = logging.getLogger(__name__)

BatchesFactory = Callable[[], Iterable[PointsBatch]]


def load_pipeline_config(config_path: Path) -> PipelineConfig:
    """Load and validate pipeline.yaml."""
    with open(config_path, encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    return PipelineConfig(**raw)


def load_stage_config(entry: StageEntry, config_class: type[BaseModel]) -> BaseModel:
    """Build a stage config from its YAML file (if any) overlaid with inline values."""
    raw: dict = {}
    if entry.config_file:
        with open(entry.config_file, encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    raw.update(entry.config)
    return config_class(**raw)


def import_stage_class(module_path: str) -> type[BaseStage]:
    """Dynamically import a stage class from its module path.

    Expects module_path like 'plystream.stages.write_ply_custom'
    and looks for a class ending in 'Stage' in that module's stage.py.
    """
    stage_module = importlib.import_module(f"{module_path}.stage")
    for attr_name in dir(stage_module):
        attr = getattr(stage_module, attr_name)
        if (
            isinstance(attr, type)
            and issubclass(attr, BaseStage)
            and attr_name.endswith("Stage")
            and attr_name != "BaseStage"
            and attr.__module__ == stage_module.__name__
        ):
            return attr
    raise ImportError(f"No Stage class found in {module_path}.stage")


def build_pipeline(pipeline_cfg: PipelineConfig) -> BaseStage:
    """Instantiate enabled stages back to front and return the head of the chain.

    Each stage receives only its successor. A null terminal is appended when
    the last configured stage is not terminal itself.
    """
    from plystream.io.sink import make_file_sink_factory
    from plystream.stages.null.stage import NullStage

    enabled = [s for s in pipeline_cfg.stages if s.enabled]
    sink_factory = make_file_sink_factory(pipeline_cfg.output_dir)

    next_stage: Optional[BaseStage] = None
    for entry in reversed(enabled):
        stage_cls = import_stage_class(entry.module)
        stage_config = load_stage_config(entry, stage_cls.config_type)
        if next_stage is None and not stage_cls.terminal:
            next_stage = NullStage()
        next_stage = stage_cls.from_config(stage_config, next_stage, sink_factory)
        logger.debug(f"Built stage '{entry.name}' ({stage_cls.__name__})")

    if next_stage is None:
        return NullStage()
    return next_stage


def drive(head: BaseStage, batches_factory: BatchesFactory) -> int:
    """Push the batch stream through ``head`` until it reports FINISHED.

    Returns the number of passes made over the stream.
    """
    passes = 0
    while True:
        passes += 1
        num_batches = 0
        for batch in batches_factory():
            head.process(batch)
            num_batches += 1
        logger.info(f"Pass {passes}: processed {num_batches} batches")
        if head.flush() is FlushResult.FINISHED:
            return passes
        logger.info("Pipeline requested another pass over the batch stream")


def run_pipeline(config_path: Path) -> int:
    """Execute the full pipeline from a config file."""
    from plystream.io.npz_source import iter_npz_batches

    pipeline_cfg = load_pipeline_config(config_path)
    if pipeline_cfg.source.type != "npz_dir":
        raise ValueError(f"Unsupported batch source: {pipeline_cfg.source.type}")

    enabled = [s for s in pipeline_cfg.stages if s.enabled]
    logger.info(f"Pipeline '{pipeline_cfg.project_name}' with {len(enabled)} stages")

    head = build_pipeline(pipeline_cfg)
    source_dir = pipeline_cfg.source.path
    passes = drive(head, lambda: iter_npz_batches(source_dir))

    logger.info("Pipeline complete.")
    return passes

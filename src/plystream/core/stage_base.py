"""Base class for all points-processing stages.

Stages form a forward-only chain: each stage owns a reference to the next
one and never to its predecessor. Batches are pushed through ``process`` and
the end of a pass is signalled by ``flush``, whose result tells the driver
whether the whole batch stream must be replayed.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, ClassVar, Generic, Optional, TypeVar

from pydantic import BaseModel

from .contracts import FlushResult, PointsBatch

ConfigT = TypeVar("ConfigT", bound=BaseModel)

logger = logging.getLogger(__name__)


class BaseStage(ABC, Generic[ConfigT]):
    """Abstract base for pipeline stages.

    Subclasses must:
    1. Define a concrete Pydantic model for ConfigT
    2. Set class variables: name, config_type
    3. Implement process() and flush()

    Example:
        class DropEverythingStage(BaseStage[DropConfig]):
            name = "drop_everything"
            config_type = DropConfig

            def process(self, batch: PointsBatch) -> None: ...
            def flush(self) -> FlushResult: ...
    """

    name: ClassVar[str] = ""
    config_type: ClassVar[type[BaseModel]]
    terminal: ClassVar[bool] = False

    def __init__(self, config: ConfigT, next_stage: Optional[BaseStage] = None):
        self.config = config
        self.next_stage = next_stage
        if next_stage is None and not self.terminal:
            raise ValueError(f"[{self.stage_name}] Non-terminal stage needs a next stage")

    @property
    def stage_name(self) -> str:
        return self.name or self.__class__.__name__

    @abstractmethod
    def process(self, batch: PointsBatch) -> None:
        """Consume one batch and forward it (or a derived batch) downstream."""
        ...

    @abstractmethod
    def flush(self) -> FlushResult:
        """Finish the current pass and report whether another one is needed."""
        ...

    def forward(self, batch: PointsBatch) -> None:
        if self.next_stage is not None:
            self.next_stage.process(batch)

    def flush_next(self) -> FlushResult:
        if self.next_stage is None:
            return FlushResult.FINISHED
        return self.next_stage.flush()

    @classmethod
    def from_config(
        cls,
        config: ConfigT,
        next_stage: Optional[BaseStage],
        file_sink_factory: Optional[Callable[[str], Any]] = None,
    ) -> BaseStage:
        """Build the stage from the runner. Stages that write files use the factory."""
        return cls(config, next_stage)

    @classmethod
    def get_config_schema(cls) -> dict:
        """Return JSON schema for config."""
        return cls.config_type.model_json_schema()

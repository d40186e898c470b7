"""Configuration for the fixed ratio sampler stage."""

from pydantic import BaseModel, Field


class FixedRatioSamplerConfig(BaseModel):
    sampling_ratio: float = Field(
        ..., gt=0, le=1, description="Fraction of points kept across the whole stream"
    )

"""Configuration for the min/max range filter stage."""

from pydantic import BaseModel, Field, model_validator


class MinMaxRangeFilterConfig(BaseModel):
    min_range: float = Field(0.0, ge=0, description="Minimum distance to the sensor origin (meters)")
    max_range: float = Field(..., gt=0, description="Maximum distance to the sensor origin (meters)")

    @model_validator(mode="after")
    def _check_order(self) -> "MinMaxRangeFilterConfig":
        if self.min_range > self.max_range:
            raise ValueError(f"min_range {self.min_range} > max_range {self.max_range}")
        return self

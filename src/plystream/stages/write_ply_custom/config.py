"""Configuration for the custom binary PLY writing stage."""

from pydantic import BaseModel, Field, field_validator

from plystream.ply.header import DEFAULT_COMMENT


class WritePlyCustomConfig(BaseModel):
    filename: str = Field(..., description="Output PLY filename, relative to the pipeline output_dir")
    comment: str = Field(DEFAULT_COMMENT, description="Single-line comment written into the header")

    @field_validator("comment")
    @classmethod
    def _single_ascii_line(cls, value: str) -> str:
        if "\n" in value or "\r" in value or not value.isascii():
            raise ValueError("comment must be a single ASCII line")
        return value

"""Configuration for the terminal null stage (no options)."""

from pydantic import BaseModel


class NullConfig(BaseModel):
    pass

"""Fatal errors raised by pipeline stages.

None of these is recoverable: a partially written fixed-layout file cannot be
consumed, so every error aborts the whole pipeline.
"""

from __future__ import annotations

from typing import Optional


class PlyStreamError(RuntimeError):
    """Base class for all plystream failures."""


class SchemaViolationError(PlyStreamError):
    """A batch does not match the attributes the stream committed to."""

    def __init__(self, message: str, frame_id: Optional[str] = None):
        if frame_id is not None:
            message = f"{message} frame_id: {frame_id}"
        super().__init__(message)
        self.frame_id = frame_id


class HeaderOverflowError(PlyStreamError):
    """Point count does not fit the fixed-width header field."""


class SinkError(PlyStreamError):
    """Header write, body write or close on an output sink failed."""


class PipelineOrderError(PlyStreamError):
    """A downstream stage asked for another pass after the file was finalized."""


class PipelineStateError(PlyStreamError):
    """A stage was used after it was finalized."""

"""Stream schema negotiation: lock optional attributes on the first batch."""

from __future__ import annotations

from plystream.core.contracts import PointsBatch, StreamSchema
from plystream.core.errors import SchemaViolationError

# (schema flag, batch attribute)
_ATTRIBUTES = (
    ("has_color", "colors"),
    ("has_intensity", "intensities"),
    ("has_ring", "rings"),
)


def observe_first_batch(batch: PointsBatch) -> StreamSchema:
    """Derive the stream schema from the first non-empty batch."""
    return StreamSchema(
        has_color=len(batch.colors) > 0,
        has_intensity=len(batch.intensities) > 0,
        has_ring=len(batch.rings) > 0,
    )


def validate_batch(batch: PointsBatch, schema: StreamSchema) -> None:
    """Check a non-empty batch against the locked schema.

    Raises:
        SchemaViolationError: an attribute the stream carries is missing or
            has the wrong length, or the batch carries one the stream does not.
    """
    num_points = len(batch.points)
    for flag, attr in _ATTRIBUTES:
        size = len(getattr(batch, attr))
        if getattr(schema, flag):
            if size != num_points:
                raise SchemaViolationError(
                    f"First PointsBatch had {attr}, but encountered one with "
                    f"{size} {attr} for {num_points} points.",
                    frame_id=batch.frame_id,
                )
        elif size:
            raise SchemaViolationError(
                f"First PointsBatch had no {attr}, but encountered one with {attr}.",
                frame_id=batch.frame_id,
            )

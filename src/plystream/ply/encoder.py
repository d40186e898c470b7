"""Record encoding for the binary PLY body.

Record layout (little-endian, tightly packed):
    x, y, z        float32 x3
    red, green, blue  uint8 x3    (if has_color)
    intensity      float32        (if has_intensity)
    time           float64
    ring           uint16         (if has_ring)
"""

from __future__ import annotations

import struct
from functools import lru_cache
from typing import Optional, Sequence

import numpy as np

from plystream.core.contracts import PointsBatch, StreamSchema


@lru_cache(maxsize=None)
def record_format(schema: StreamSchema) -> struct.Struct:
    fmt = "<3f"
    if schema.has_color:
        fmt += "3B"
    if schema.has_intensity:
        fmt += "f"
    fmt += "d"
    if schema.has_ring:
        fmt += "H"
    return struct.Struct(fmt)


@lru_cache(maxsize=None)
def record_dtype(schema: StreamSchema) -> np.dtype:
    """Packed structured dtype with the same byte layout as ``record_format``."""
    fields = [("x", "<f4"), ("y", "<f4"), ("z", "<f4")]
    if schema.has_color:
        fields += [("red", "u1"), ("green", "u1"), ("blue", "u1")]
    if schema.has_intensity:
        fields.append(("intensity", "<f4"))
    fields.append(("time", "<f8"))
    if schema.has_ring:
        fields.append(("ring", "<u2"))
    return np.dtype(fields)


def encode_record(
    position: Sequence[float],
    time: float,
    schema: StreamSchema,
    color: Optional[Sequence[int]] = None,
    intensity: Optional[float] = None,
    ring: Optional[int] = None,
) -> bytes:
    """Encode a single point."""
    values = [float(v) for v in position]
    if schema.has_color:
        if color is None:
            raise ValueError("Schema carries color but no color was given")
        values += [int(c) for c in color]
    if schema.has_intensity:
        if intensity is None:
            raise ValueError("Schema carries intensity but no intensity was given")
        values.append(float(intensity))
    values.append(float(time))
    if schema.has_ring:
        if ring is None:
            raise ValueError("Schema carries ring but no ring was given")
        values.append(int(ring))
    return record_format(schema).pack(*values)


def encode_batch(batch: PointsBatch, schema: StreamSchema) -> bytes:
    """Encode every point of ``batch`` in order, each stamped with the batch time.

    The batch must already have been validated against ``schema``.
    """
    records = np.empty(len(batch.points), dtype=record_dtype(schema))
    records["x"] = batch.points[:, 0]
    records["y"] = batch.points[:, 1]
    records["z"] = batch.points[:, 2]
    if schema.has_color:
        records["red"] = batch.colors[:, 0]
        records["green"] = batch.colors[:, 1]
        records["blue"] = batch.colors[:, 2]
    if schema.has_intensity:
        records["intensity"] = batch.intensities
    records["time"] = batch.start_time
    if schema.has_ring:
        records["ring"] = batch.rings
    return records.tobytes()

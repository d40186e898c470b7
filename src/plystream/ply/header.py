"""Binary little-endian PLY header rendering.

The vertex count is written zero-padded to a fixed width so the header has
the same byte length for the placeholder (count 0) and for the final count.
That lets the finished header overwrite the placeholder at offset 0 without
touching the body.
"""

from __future__ import annotations

from plystream.core.contracts import StreamSchema
from plystream.core.errors import HeaderOverflowError

COUNT_WIDTH = 15
MAX_POINT_COUNT = 10**COUNT_WIDTH - 1
DEFAULT_COMMENT = "Point cloud streamed by plystream"


def property_lines(schema: StreamSchema) -> list[tuple[str, str]]:
    """(ply type, name) pairs in declaration order, matching the record layout."""
    props = [("float", "x"), ("float", "y"), ("float", "z")]
    if schema.has_color:
        props += [("uchar", "red"), ("uchar", "green"), ("uchar", "blue")]
    if schema.has_intensity:
        props.append(("float", "intensity"))
    props.append(("double", "time"))
    if schema.has_ring:
        props.append(("ushort", "ring"))
    return props


def property_names(schema: StreamSchema) -> list[str]:
    return [name for _, name in property_lines(schema)]


def render_header(
    schema: StreamSchema, point_count: int, comment: str = DEFAULT_COMMENT
) -> bytes:
    """Render the header declaring ``point_count`` vertices.

    Raises:
        HeaderOverflowError: count does not fit in COUNT_WIDTH digits.
        ValueError: negative count, or a comment that is not one ASCII line.
    """
    if point_count < 0:
        raise ValueError(f"Point count must be non-negative, got {point_count}")
    if point_count > MAX_POINT_COUNT:
        raise HeaderOverflowError(
            f"Point count {point_count} exceeds the {COUNT_WIDTH}-digit header field"
        )
    if "\n" in comment or "\r" in comment or not comment.isascii():
        raise ValueError("Header comment must be a single ASCII line")

    lines = [
        "ply",
        "format binary_little_endian 1.0",
        f"comment {comment}",
        f"element vertex {point_count:0{COUNT_WIDTH}d}",
    ]
    lines += [f"property {ply_type} {name}" for ply_type, name in property_lines(schema)]
    lines.append("end_header")
    return ("\n".join(lines) + "\n").encode("ascii")

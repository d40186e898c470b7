"""Binary PLY building blocks: schema negotiation, header, record encoding."""

from .encoder import encode_batch, encode_record, record_dtype, record_format
from .header import COUNT_WIDTH, DEFAULT_COMMENT, MAX_POINT_COUNT, property_names, render_header
from .schema import observe_first_batch, validate_batch

__all__ = [
    "COUNT_WIDTH",
    "DEFAULT_COMMENT",
    "MAX_POINT_COUNT",
    "encode_batch",
    "encode_record",
    "observe_first_batch",
    "property_names",
    "record_dtype",
    "record_format",
    "render_header",
    "validate_batch",
]

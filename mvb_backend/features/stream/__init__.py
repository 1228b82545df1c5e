"""Range-aware media streaming."""
from .ranges import ByteRange, RangeNotSatisfiable, parse_range_header
from .service import MediaStreamer, MediaTarget, SpanReader

__all__ = [
    "ByteRange",
    "RangeNotSatisfiable",
    "parse_range_header",
    "MediaStreamer",
    "MediaTarget",
    "SpanReader",
]

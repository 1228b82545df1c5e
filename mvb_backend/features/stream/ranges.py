"""
HTTP `Range` header parsing for single byte ranges.

Policy:
- a header that is not a single well-formed `bytes=` range is ignored (`None`),
  so the caller serves the full body with 200;
- a well-formed range that selects no byte of the file raises
  `RangeNotSatisfiable`, answered with 416.
"""
from __future__ import annotations

import re
from dataclasses import dataclass

_RANGE_RE = re.compile(r"^\s*bytes\s*=\s*(\d*)\s*-\s*(\d*)\s*$", re.IGNORECASE)

# Offsets longer than this are past the end of any real file.
_MAX_OFFSET_DIGITS = 18
_BEYOND_ANY_FILE = 10 ** _MAX_OFFSET_DIGITS


def _offset(digits: str) -> int:
    significant = digits.lstrip("0")
    if len(significant) > _MAX_OFFSET_DIGITS:
        return _BEYOND_ANY_FILE
    return int(significant or "0")


class RangeNotSatisfiable(Exception):
    def __init__(self, size: int):
        super().__init__(f"Requested range not satisfiable for size {size}")
        self.size = size


@dataclass(frozen=True)
class ByteRange:
    """Inclusive byte span [start, end] within a file of `size` bytes."""

    start: int
    end: int
    size: int

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    def content_range(self) -> str:
        return f"bytes {self.start}-{self.end}/{self.size}"


def parse_range_header(header: str | None, size: int) -> ByteRange | None:
    """
    Resolve a `Range` header against a file size.

    Args:
        header: Raw header value, or None when absent
        size: Total file size in bytes

    Returns:
        ByteRange to serve with 206, or None to serve the full body

    Raises:
        RangeNotSatisfiable: the range is well-formed but outside the file
    """
    if not header:
        return None
    match = _RANGE_RE.match(header)
    if match is None:
        return None

    first, last = match.group(1), match.group(2)
    if not first and not last:
        return None

    if not first:
        # Suffix form: the final N bytes.
        suffix = _offset(last)
        if suffix == 0 or size == 0:
            raise RangeNotSatisfiable(size)
        return ByteRange(start=max(0, size - suffix), end=size - 1, size=size)

    start = _offset(first)
    end = _offset(last) if last else size - 1
    if start >= size or start > end:
        raise RangeNotSatisfiable(size)
    return ByteRange(start=start, end=min(end, size - 1), size=size)

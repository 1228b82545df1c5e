"""
Media file resolution and span reading for the stream endpoint.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from mvb_shared import ErrorCode, Result, content_type_for, get_logger

from ...config import BrowserConfig
from ...path_utils import media_name_error, resolve_media_file
from .ranges import ByteRange

logger = get_logger(__name__)

NOT_FOUND_MESSAGE = "File not found"


@dataclass(frozen=True)
class MediaTarget:
    name: str
    path: Path
    size: int
    content_type: str


def _open_at(path: Path, offset: int) -> BinaryIO:
    handle = open(path, "rb")
    try:
        handle.seek(offset)
    except OSError:
        handle.close()
        raise
    return handle


class SpanReader:
    """
    Reads a byte span from an open file, one chunk per call, in worker threads.

    Use as an async context manager; the file handle is closed on exit.
    """

    def __init__(self, handle: BinaryIO, length: int, chunk_size: int):
        self._handle = handle
        self._remaining = length
        self._chunk_size = chunk_size

    async def read(self) -> bytes:
        """Next chunk, or b"" once the span is exhausted."""
        if self._remaining <= 0 or self._handle.closed:
            return b""
        chunk = await asyncio.to_thread(self._handle.read, min(self._chunk_size, self._remaining))
        if not chunk:
            # File shrank while streaming.
            self._remaining = 0
            return b""
        self._remaining -= len(chunk)
        return chunk

    def close(self) -> None:
        if not self._handle.closed:
            self._handle.close()

    async def __aenter__(self) -> "SpanReader":
        return self

    async def __aexit__(self, *exc_info) -> None:
        self.close()


class MediaStreamer:
    """Resolves request filenames against the media root and opens byte spans."""

    def __init__(self, config: BrowserConfig):
        self.media_dir = config.media_dir
        self.chunk_size = int(config.stream_chunk_size)

    def resolve(self, name: str) -> Result[MediaTarget]:
        """
        Map a requested filename to a file inside the media root.

        Every failure is reported as NOT_FOUND so callers cannot probe the filesystem.
        """
        reason = media_name_error(name)
        if reason:
            logger.warning("Rejected stream filename %r: %s", name, reason)
            return Result.Err(ErrorCode.NOT_FOUND, NOT_FOUND_MESSAGE)

        path = resolve_media_file(self.media_dir, name)
        if path is None:
            logger.debug("Stream target not found: %r", name)
            return Result.Err(ErrorCode.NOT_FOUND, NOT_FOUND_MESSAGE)

        try:
            size = path.stat().st_size
        except OSError as exc:
            logger.debug("Stream target stat failed for %r: %s", name, exc)
            return Result.Err(ErrorCode.NOT_FOUND, NOT_FOUND_MESSAGE)

        return Result.Ok(MediaTarget(name=name, path=path, size=size, content_type=content_type_for(name)))

    async def open_span(self, target: MediaTarget, byte_range: ByteRange | None) -> Result[SpanReader]:
        """Open a reader for the requested span, or the whole file when no range applies."""
        start = byte_range.start if byte_range else 0
        length = byte_range.length if byte_range else target.size
        try:
            handle = await asyncio.to_thread(_open_at, target.path, start)
        except OSError as exc:
            logger.debug("Stream target open failed for %r: %s", target.name, exc)
            return Result.Err(ErrorCode.NOT_FOUND, NOT_FOUND_MESSAGE)
        return Result.Ok(SpanReader(handle, length, self.chunk_size))

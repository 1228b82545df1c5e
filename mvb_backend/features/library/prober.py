"""
Duration probing on top of the ffprobe adapter.
"""
from __future__ import annotations

from mvb_shared import get_logger

from ...adapters.tools import FFProbe

logger = get_logger(__name__)


class DurationProber:
    """Total wrapper around FFProbe: a duration in seconds, or None."""

    def __init__(self, ffprobe: FFProbe):
        self.ffprobe = ffprobe

    def is_available(self) -> bool:
        return self.ffprobe.is_available()

    async def probe(self, path: str) -> float | None:
        try:
            result = await self.ffprobe.aget_duration(path)
        except Exception as exc:
            logger.warning("Duration probe crashed for %s: %s", path, exc)
            return None
        if not result.ok:
            logger.debug("No duration for %s (%s: %s)", path, result.code, result.error)
            return None
        return result.data

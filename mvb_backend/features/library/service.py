"""
Library listing: directory scan plus concurrent per-file enrichment.
"""
from __future__ import annotations

import asyncio
import logging
import os
from typing import Protocol

from mvb_shared import (
    ErrorCode,
    Result,
    get_logger,
    is_supported_video,
    log_structured,
    sanitize_error_message,
    timer,
)

from ...config import BrowserConfig
from .catalog_cache import CatalogCache
from .models import CatalogRecord, MovieRecord
from .title import display_title

logger = get_logger(__name__)


class CatalogLookup(Protocol):
    async def lookup(self, title: str) -> CatalogRecord: ...


class DurationLookup(Protocol):
    async def probe(self, path: str) -> float | None: ...


def merge_record(
    filename: str,
    fallback_title: str,
    catalog: CatalogRecord,
    duration: float | None,
) -> MovieRecord:
    """Combine catalog data and probe output into the response record for one file."""
    return MovieRecord(
        file=filename,
        title=catalog.title or fallback_title,
        overview=catalog.overview or "",
        poster=catalog.poster or "",
        year=catalog.year or "",
        duration=duration,
    )


def _is_media_entry(entry: os.DirEntry) -> bool:
    if not is_supported_video(entry.name):
        return False
    try:
        return entry.is_file(follow_symlinks=True)
    except OSError:
        return False


class LibraryService:
    """
    Builds the movie listing for the configured media directory.

    Output order is the directory scan order; enrichment failures only blank
    fields of the affected record.
    """

    def __init__(
        self,
        config: BrowserConfig,
        catalog: CatalogLookup,
        prober: DurationLookup,
        cache: CatalogCache | None = None,
    ):
        self.media_dir = config.media_dir
        self.debug = config.debug
        self.catalog = catalog
        self.prober = prober
        self.cache = cache if cache is not None else CatalogCache(config.catalog_cache_ttl)
        self._enrich_sem = asyncio.Semaphore(max(1, int(config.max_concurrency)))

    def scan_directory(self) -> Result[list[str]]:
        """
        List supported video files in the media directory (non-recursive).

        Returns:
            Result with filenames in scan order, or DIRECTORY_UNREADABLE
        """
        try:
            with os.scandir(self.media_dir) as it:
                names = [entry.name for entry in it if _is_media_entry(entry)]
        except OSError as exc:
            logger.error("Media directory scan failed for %s: %s", self.media_dir, exc)
            return Result.Err(
                ErrorCode.DIRECTORY_UNREADABLE,
                sanitize_error_message(exc, "Media directory is not readable", debug=self.debug),
            )
        return Result.Ok(names)

    async def _lookup(self, filename: str, query: str) -> CatalogRecord:
        cached = self.cache.get(filename)
        if cached is not None:
            return cached
        try:
            record = await self.catalog.lookup(query)
        except Exception as exc:
            logger.warning("Catalog lookup crashed for %s: %s", filename, exc)
            return CatalogRecord.degraded(query)
        if record.matched:
            self.cache.put(filename, record)
        return record

    async def _probe(self, filename: str) -> float | None:
        try:
            return await self.prober.probe(os.path.join(self.media_dir, filename))
        except Exception as exc:
            logger.warning("Duration probe crashed for %s: %s", filename, exc)
            return None

    async def enrich(self, filename: str) -> MovieRecord:
        """Build the record for one file. Never raises."""
        fallback_title = display_title(filename)
        try:
            async with self._enrich_sem:
                catalog, duration = await asyncio.gather(
                    self._lookup(filename, fallback_title),
                    self._probe(filename),
                )
        except Exception as exc:
            logger.warning("Enrichment failed for %s: %s", filename, exc)
            catalog, duration = CatalogRecord.degraded(""), None
        return merge_record(filename, fallback_title, catalog, duration)

    async def list_movies(self) -> Result[list[MovieRecord]]:
        """
        Scan the media directory and enrich every supported file concurrently.

        Returns:
            Result with one MovieRecord per scanned file, in scan order
        """
        with timer("library listing", logger):
            scanned = await asyncio.to_thread(self.scan_directory)
            if not scanned.ok:
                return Result.Err(scanned.code, scanned.error or "Media directory is not readable")

            names = scanned.unwrap()
            slots: list[MovieRecord | None] = [None] * len(names)

            async def _fill(index: int, filename: str) -> None:
                slots[index] = await self.enrich(filename)

            await asyncio.gather(*(_fill(i, name) for i, name in enumerate(names)))

            if self.cache.enabled:
                self.cache.prune(set(names))

        records = [record for record in slots if record is not None]
        log_structured(
            logger,
            logging.DEBUG,
            "library listed",
            count=len(records),
            with_duration=sum(1 for r in records if r.duration is not None),
            cached=len(self.cache),
        )
        return Result.Ok(records, count=len(records))

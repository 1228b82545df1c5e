"""
OMDb catalog adapter.

One GET per title (`?apikey=<key>&t=<title>`). Lookups never raise: any failure
yields a degraded `CatalogRecord` carrying only the queried title.
"""
from __future__ import annotations

import asyncio
from typing import Any

from aiohttp import ClientError, ClientSession, ClientTimeout

from mvb_shared import get_logger

from ...config import DEFAULT_OMDB_URL
from ...features.library.models import CatalogRecord

logger = get_logger(__name__)

# OMDb's "no value" marker (most visibly used for missing posters).
_NOT_AVAILABLE = "N/A"


def _clean_field(value: Any) -> str:
    if value is None:
        return ""
    text = str(value).strip()
    return "" if text == _NOT_AVAILABLE else text


def _record_from_payload(payload: Any, title: str) -> CatalogRecord:
    if not isinstance(payload, dict):
        return CatalogRecord.degraded(title)
    if str(payload.get("Response", "")).strip().lower() == "false":
        logger.debug("OMDb has no match for %r: %s", title, payload.get("Error") or "not found")
        return CatalogRecord.degraded(title)
    return CatalogRecord(
        title=_clean_field(payload.get("Title")) or title,
        overview=_clean_field(payload.get("Plot")),
        poster=_clean_field(payload.get("Poster")),
        year=_clean_field(payload.get("Year")),
        matched=True,
    )


class OmdbClient:
    """
    Async OMDb client owning a single aiohttp session.

    The session is created on first use and must be released with `aclose()`.
    """

    def __init__(
        self,
        api_key: str | None,
        *,
        base_url: str = DEFAULT_OMDB_URL,
        timeout: float = 5.0,
        session: ClientSession | None = None,
    ):
        self.api_key = (api_key or "").strip() or None
        self.base_url = base_url
        self.timeout = ClientTimeout(total=float(timeout))
        self._session = session
        self._owns_session = session is None

    def is_enabled(self) -> bool:
        return self.api_key is not None

    def _get_session(self) -> ClientSession:
        if self._session is None or self._session.closed:
            self._session = ClientSession(timeout=self.timeout)
            self._owns_session = True
        return self._session

    async def _fetch_json(self, title: str) -> Any:
        params = {"apikey": self.api_key or "", "t": title}
        async with self._get_session().get(self.base_url, params=params, timeout=self.timeout) as resp:
            if resp.status < 200 or resp.status >= 300:
                raise RuntimeError(f"OMDb returned HTTP {resp.status}")
            # OMDb does not always send application/json.
            return await resp.json(content_type=None)

    async def lookup(self, title: str) -> CatalogRecord:
        """
        Look up a title in the catalog.

        Args:
            title: Candidate title to search for

        Returns:
            CatalogRecord; degraded (title passthrough) when the key is missing,
            the title is empty, or the request fails in any way
        """
        title = (title or "").strip()
        if not self.is_enabled() or not title:
            return CatalogRecord.degraded(title)

        try:
            payload = await self._fetch_json(title)
        except asyncio.TimeoutError:
            logger.warning("OMDb lookup timed out after %ss for %r", self.timeout.total, title)
            return CatalogRecord.degraded(title)
        except (ClientError, RuntimeError, ValueError) as exc:
            # ValueError covers undecodable JSON bodies.
            logger.warning("OMDb lookup failed for %r: %s", title, exc)
            return CatalogRecord.degraded(title)
        return _record_from_payload(payload, title)

    async def aclose(self) -> None:
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
        self._session = None

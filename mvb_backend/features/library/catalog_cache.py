"""Simple TTL cache for catalog records, keyed by media filename."""
import time

from .models import CatalogRecord


class CatalogCache:
    def __init__(self, ttl_seconds: float):
        self._ttl = float(ttl_seconds)
        self._store: dict[str, tuple[float, CatalogRecord]] = {}

    @property
    def enabled(self) -> bool:
        return self._ttl > 0

    def get(self, filename: str) -> CatalogRecord | None:
        if not self.enabled:
            return None
        item = self._store.get(filename)
        if not item:
            return None
        ts, record = item
        if (time.monotonic() - ts) > self._ttl:
            self._store.pop(filename, None)
            return None
        return record

    def put(self, filename: str, record: CatalogRecord) -> None:
        if self.enabled:
            self._store[filename] = (time.monotonic(), record)

    def prune(self, keep: set[str]) -> int:
        """Drop expired entries and entries for files no longer listed."""
        now = time.monotonic()
        stale = [k for k, (ts, _) in self._store.items() if k not in keep or (now - ts) > self._ttl]
        for k in stale:
            self._store.pop(k, None)
        return len(stale)

    def __len__(self) -> int:
        return len(self._store)

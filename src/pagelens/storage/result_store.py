"""
In-memory result store with bounded history and a per-URL TTL cache.

Nothing here survives a process restart.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional

import structlog

from ..config.config import StorageConfig
from ..protocols import ScrapeResult

logger = structlog.get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class HistoryEntry:
    id: str
    url: str
    timestamp: datetime

    def to_dict(self) -> Dict[str, str]:
        return {"id": self.id, "url": self.url, "timestamp": self.timestamp.isoformat()}


@dataclass(frozen=True)
class CacheEntry:
    result: ScrapeResult
    timestamp: datetime
    expires_at: datetime


class InMemoryResultStore:
    """Keeps the newest ``max_results`` results, addressable by id."""

    def __init__(self, config: Optional[StorageConfig] = None, clock: Callable[[], datetime] = _utcnow) -> None:
        self.config = config or StorageConfig()
        self._clock = clock
        # newest last
        self._results: "OrderedDict[str, ScrapeResult]" = OrderedDict()
        self._history: List[HistoryEntry] = []
        self._cache: Dict[str, CacheEntry] = {}

    # --- results ---------------------------------------------------------

    def put(self, result: ScrapeResult) -> None:
        self._results[result.id] = result
        self._history.insert(0, HistoryEntry(id=result.id, url=result.data.url, timestamp=self._clock()))

        while len(self._history) > self.config.max_results:
            oldest = self._history.pop()
            self._results.pop(oldest.id, None)
            logger.debug("Evicted oldest result", result_id=oldest.id)

    def get(self, result_id: str) -> Optional[ScrapeResult]:
        return self._results.get(result_id)

    def history(self) -> List[HistoryEntry]:
        """Newest first."""
        return list(self._history)

    def __len__(self) -> int:
        return len(self._results)

    # --- URL cache -------------------------------------------------------

    def cache(self, url: str, result: ScrapeResult, ttl_seconds: Optional[int] = None) -> None:
        """Cache a result for ``url``; stale entries for other URLs are dropped first."""
        purged = self.purge_expired()
        if purged:
            logger.debug("Purged expired cache entries", count=purged)
        ttl = self.config.cache_ttl_seconds if ttl_seconds is None else ttl_seconds
        now = self._clock()
        self._cache[url] = CacheEntry(result=result, timestamp=now, expires_at=now + timedelta(seconds=ttl))

    def get_cached(self, url: str) -> Optional[ScrapeResult]:
        entry = self._cache.get(url)
        if entry is None:
            return None
        if self._clock() > entry.expires_at:
            del self._cache[url]
            return None
        return entry.result

    def cache_stats(self) -> Dict[str, int]:
        now = self._clock()
        expired = sum(1 for entry in self._cache.values() if now > entry.expires_at)
        return {"total": len(self._cache), "valid": len(self._cache) - expired, "expired": expired}

    def purge_expired(self) -> int:
        now = self._clock()
        stale = [url for url, entry in self._cache.items() if now > entry.expires_at]
        for url in stale:
            del self._cache[url]
        return len(stale)

    def clear_cache(self) -> None:
        self._cache.clear()

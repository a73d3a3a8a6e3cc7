"""
Analysis Cache — SHA-256 hash-based caching of analyses.

Analysis is a pure function of the source text, so results are keyed by the
content hash alone. Re-submitting an unchanged file skips re-analysis.
"""

from __future__ import annotations

import hashlib
import logging
import time
from dataclasses import dataclass, field
from typing import Any

from solmigrate.config import settings
from solmigrate.models.analysis_models import AnalysisResult

logger = logging.getLogger("solmigrate.cache")


@dataclass
class CacheEntry:
    """A cached analysis of one source text."""

    content_hash: str
    analysis: AnalysisResult
    timestamp: float = field(default_factory=time.time)
    ttl_seconds: float = field(default_factory=lambda: settings.cache_ttl_seconds)

    @property
    def is_expired(self) -> bool:
        return (time.time() - self.timestamp) > self.ttl_seconds


class AnalysisCache:
    """
    In-memory analysis cache keyed by SHA-256 of the source.

    Expired entries are purged on every write and the store never holds more
    than `max_entries`; the oldest writes are evicted first.

    Upgradeable to Redis/SQLite by swapping the storage backend.
    """

    def __init__(self, ttl_seconds: float | None = None, max_entries: int | None = None) -> None:
        self._store: dict[str, CacheEntry] = {}
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else settings.cache_ttl_seconds
        self.max_entries = max_entries if max_entries is not None else settings.cache_max_entries

    @staticmethod
    def hash_content(content: str) -> str:
        """Compute SHA-256 hash of the source."""
        return hashlib.sha256(content.encode("utf-8")).hexdigest()

    def get(self, source: str) -> AnalysisResult | None:
        """Return the cached analysis, or None if not cached or expired."""
        key = self.hash_content(source)
        entry = self._store.get(key)

        if entry is None:
            return None

        if entry.is_expired:
            del self._store[key]
            return None

        return entry.analysis

    def put(self, source: str, analysis: AnalysisResult) -> str:
        """Cache an analysis. Returns the content hash used as key."""
        key = self.hash_content(source)
        self.purge_expired()
        # Re-inserting moves the key to the newest position
        self._store.pop(key, None)
        self._store[key] = CacheEntry(
            content_hash=key,
            analysis=analysis,
            ttl_seconds=self.ttl_seconds,
        )
        while len(self._store) > max(self.max_entries, 1):
            oldest = next(iter(self._store))
            del self._store[oldest]
            logger.debug(f"Evicted cached analysis {oldest[:12]}")
        return key

    def purge_expired(self) -> int:
        """Drop every expired entry. Returns how many were removed."""
        expired = [key for key, entry in self._store.items() if entry.is_expired]
        for key in expired:
            del self._store[key]
        return len(expired)

    def invalidate(self, source: str) -> bool:
        """Remove the entry for a source. Returns True if one was removed."""
        return self._store.pop(self.hash_content(source), None) is not None

    def clear(self) -> None:
        """Clear all cached entries."""
        self._store.clear()

    @property
    def size(self) -> int:
        """Number of cached entries."""
        return len(self._store)

    def stats(self) -> dict[str, Any]:
        """Cache statistics."""
        expired = sum(1 for e in self._store.values() if e.is_expired)
        return {
            "total_entries": len(self._store),
            "expired_entries": expired,
            "active_entries": len(self._store) - expired,
        }

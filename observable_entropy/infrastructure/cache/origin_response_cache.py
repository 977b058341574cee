"""In-memory cache of origin responses with status-keyed TTLs.

Commit-addressed records never change, so successful fetches are kept for
a long time. The head record moves every round and gets a short TTL.
Not-found answers are cached briefly so a hot miss does not hammer the
origin. Server errors are never cached.

The cache is bounded: expired entries are swept once the earliest of them
lapses, and past ``max_entries`` the oldest entry is evicted.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from observable_entropy.infrastructure.observability.logging import (
    get_logger_for_component,
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CachedResponse:
    """A cached origin response.

    Attributes:
        status_code: HTTP status returned by the origin.
        payload: Decoded JSON body (None for non-2xx responses).
    """

    status_code: int
    payload: Any = None


@dataclass
class CacheEntry:
    """Cache entry with its own TTL."""

    response: CachedResponse
    cached_at: datetime
    ttl_seconds: int

    @property
    def expires_at(self) -> datetime:
        return self.cached_at + timedelta(seconds=self.ttl_seconds)

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


class OriginResponseCache:
    """Caches origin responses by URL.

    TTL selection:
        2xx: ``success_ttl_seconds`` (``latest_ttl_seconds`` when the
            caller marks the URL as the moving head record)
        404: ``not_found_ttl_seconds``
        anything else: not cached

    A TTL of 0 disables caching for that class of response. At most
    ``max_entries`` responses are held; the oldest is evicted first.
    """

    def __init__(
        self,
        success_ttl_seconds: int = 86400,
        latest_ttl_seconds: int = 5,
        not_found_ttl_seconds: int = 5,
        max_entries: int = 10_000,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Initialize the cache.

        Args:
            success_ttl_seconds: TTL of immutable 2xx responses.
            latest_ttl_seconds: TTL of 2xx responses for the head record.
            not_found_ttl_seconds: TTL of 404 responses.
            max_entries: Upper bound on cached responses.
            clock: Returns the current UTC time.

        Raises:
            ValueError: If max_entries is less than 1.
        """
        if max_entries < 1:
            raise ValueError(f"max_entries must be at least 1, got {max_entries}")
        self._entries: dict[str, CacheEntry] = {}
        self._max_entries = max_entries
        self._next_expiry: datetime | None = None
        self._success_ttl_seconds = success_ttl_seconds
        self._latest_ttl_seconds = latest_ttl_seconds
        self._not_found_ttl_seconds = not_found_ttl_seconds
        self._clock = clock
        self._log = get_logger_for_component("origin_response_cache")

    def __len__(self) -> int:
        return len(self._entries)

    def ttl_for(self, status_code: int, *, moving: bool = False) -> int:
        """TTL in seconds for a response status; 0 means do not cache."""
        if 200 <= status_code < 300:
            return self._latest_ttl_seconds if moving else self._success_ttl_seconds
        if status_code == 404:
            return self._not_found_ttl_seconds
        return 0

    def get(self, url: str) -> CachedResponse | None:
        """Get a live cached response for a URL.

        Returns:
            The cached response, or None if absent or expired.
        """
        entry = self._entries.get(url)
        if entry is None:
            self._log.debug("cache_miss", url=url)
            return None

        if entry.is_expired(self._clock()):
            self._log.debug("cache_expired", url=url)
            del self._entries[url]
            return None

        self._log.debug("cache_hit", url=url, status_code=entry.response.status_code)
        return entry.response

    def set(self, url: str, response: CachedResponse, *, moving: bool = False) -> bool:
        """Cache a response if its status is cacheable.

        Args:
            url: Request URL used as the cache key.
            response: Response to cache.
            moving: True for content that changes over time (head record).

        Returns:
            True if the response was cached.
        """
        ttl = self.ttl_for(response.status_code, moving=moving)
        if ttl <= 0:
            return False

        now = self._clock()
        self._sweep_expired(now)

        # Re-inserting moves the key to the young end
        self._entries.pop(url, None)
        while len(self._entries) >= self._max_entries:
            self._evict_oldest()

        entry = CacheEntry(response=response, cached_at=now, ttl_seconds=ttl)
        self._entries[url] = entry
        if self._next_expiry is None or entry.expires_at < self._next_expiry:
            self._next_expiry = entry.expires_at
        self._log.debug(
            "cache_set",
            url=url,
            status_code=response.status_code,
            ttl_seconds=ttl,
        )
        return True

    def _sweep_expired(self, now: datetime) -> None:
        """Drop every expired entry once the earliest expiry has passed."""
        if self._next_expiry is None or now < self._next_expiry:
            return

        expired = [url for url, entry in self._entries.items() if entry.is_expired(now)]
        for url in expired:
            del self._entries[url]
        self._next_expiry = min(
            (entry.expires_at for entry in self._entries.values()), default=None
        )
        if expired:
            self._log.debug("cache_swept", entries_removed=len(expired))

    def _evict_oldest(self) -> None:
        url = next(iter(self._entries))
        del self._entries[url]
        self._log.debug("cache_evicted", url=url)

    def clear(self) -> None:
        """Clear all cache entries."""
        count = len(self._entries)
        self._entries.clear()
        self._next_expiry = None
        self._log.info("cache_cleared", entries_cleared=count)

"""In-memory TTL cache for role store lookups."""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar

from ..config.settings import DEFAULT_CACHE_TTL

logger = logging.getLogger(__name__)

T = TypeVar("T")

_MISSING = object()


@dataclass
class CacheEntry:
    """Cached value with an absolute expiry timestamp."""
    value: Any
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class TTLCache:
    """Instance-owned key -> (value, expiry) map guarded by an asyncio lock.

    Fetchers run outside the lock: two concurrent misses on the same key may
    both fetch, and the last write wins. Failed fetches are never cached.
    """

    def __init__(
        self,
        ttl: int = DEFAULT_CACHE_TTL,
        clock: Callable[[], float] = time.time
    ):
        """Initialize the cache.

        Args:
            ttl: Entry lifetime in seconds
            clock: Source of the current timestamp in seconds
        """
        if ttl <= 0:
            raise ValueError("TTL must be positive")

        self.ttl = ttl
        self._clock = clock
        self._store: Dict[str, CacheEntry] = {}
        self._lock = asyncio.Lock()

        self._hits = 0
        self._misses = 0

    async def get(self, key: str, default: Any = None) -> Any:
        """Get an unexpired value, evicting it if it has expired."""
        value = await self._lookup(key)
        return default if value is _MISSING else value

    async def set(self, key: str, value: Any) -> None:
        """Store a value that expires ``ttl`` seconds from now."""
        async with self._lock:
            self._store[key] = CacheEntry(value=value, expires_at=self._clock() + self.ttl)

    async def get_or_fetch(self, key: str, fetcher: Callable[[], Awaitable[T]]) -> T:
        """Return the cached value for key, or await fetcher and cache its result.

        Args:
            key: Cache key, e.g. ``role:admin``
            fetcher: Zero-argument coroutine function producing the value

        Returns:
            Cached or freshly fetched value
        """
        cached = await self._lookup(key)
        if cached is not _MISSING:
            logger.debug(f"Cache hit for {key}")
            return cached

        logger.debug(f"Cache miss for {key}")
        value = await fetcher()
        await self.set(key, value)
        return value

    async def clear(self, key: Optional[str] = None) -> None:
        """Remove one entry, or every entry when no key is given."""
        async with self._lock:
            if key is None:
                self._store.clear()
            else:
                self._store.pop(key, None)

    async def _lookup(self, key: str) -> Any:
        async with self._lock:
            entry = self._store.get(key)
            if entry is None:
                self._misses += 1
                return _MISSING

            if entry.is_expired(self._clock()):
                del self._store[key]
                self._misses += 1
                return _MISSING

            self._hits += 1
            return entry.value

    def _live_count(self) -> int:
        now = self._clock()
        return sum(1 for entry in self._store.values() if not entry.is_expired(now))

    def __len__(self) -> int:
        """Number of unexpired entries."""
        return self._live_count()

    def __contains__(self, key: str) -> bool:
        entry = self._store.get(key)
        return entry is not None and not entry.is_expired(self._clock())

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        total = self._hits + self._misses
        return {
            "size": self._live_count(),
            "ttl": self.ttl,
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": self._hits / total if total else 0.0,
        }

"""
Result Cache

Short-TTL cache in front of the event repository, keyed by a canonical
serialization of the query. Entries are invalidated early by change
notifications (see invalidation.py), which drop every key under a prefix.

Usage:
    cache = ResultCache(default_ttl=60)
    events = await cache.get("events:...", fetch_events)
    cache.invalidate_prefix("events:")

Safe for concurrent use: the entry map is guarded by a lock that is never
held across an await, and concurrent misses on one key share a single fetch.
A fetch that started before an invalidation never writes its result back.
"""

import asyncio
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar

from .errors import CacheMiss

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class CacheEntry:
    """A stored value and the clock reading after which it is dead."""
    value: Any
    expires_at: float


class ResultCache:
    """In-process TTL cache with prefix invalidation."""

    def __init__(
        self,
        default_ttl: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            default_ttl: Seconds an entry lives when get() is not given a ttl.
            clock: Monotonic seconds source; injectable for tests.
        """
        if default_ttl <= 0:
            raise ValueError(f"default_ttl must be positive, got {default_ttl}")
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._inflight: Dict[str, asyncio.Lock] = {}
        self._waiters: Dict[str, int] = {}
        self._generation = 0

    def peek(self, key: str) -> Any:
        """Return the live value for key, or raise CacheMiss."""
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                raise CacheMiss(key)
            if now >= entry.expires_at:
                del self._entries[key]
                raise CacheMiss(key)
            return entry.value

    async def get(
        self,
        key: str,
        fetcher: Callable[[], Awaitable[T]],
        ttl: Optional[float] = None,
    ) -> T:
        """
        Return the cached value for key, or await fetcher() and cache its result.

        If fetcher raises, nothing is stored and the exception propagates.
        """
        try:
            return self.peek(key)
        except CacheMiss:
            pass

        lock = self._acquire_inflight(key)
        try:
            async with lock:
                # Another waiter may have filled the entry while we queued
                try:
                    value = self.peek(key)
                    logger.debug("[cache] HIT_AFTER_WAIT key=%s", key)
                    return value
                except CacheMiss:
                    logger.debug("[cache] MISS key=%s", key)

                generation = self._current_generation()
                value = await fetcher()
                self._store(key, value, ttl if ttl is not None else self.default_ttl, generation)
                return value
        finally:
            self._release_inflight(key)

    def invalidate(self, key: str) -> bool:
        """Drop one key. Returns True if an entry was removed."""
        with self._lock:
            self._generation += 1
            return self._entries.pop(key, None) is not None

    def invalidate_prefix(self, prefix: str) -> int:
        """Drop every entry whose key starts with prefix. Returns the number removed."""
        with self._lock:
            self._generation += 1
            doomed = [k for k in self._entries if k.startswith(prefix)]
            for k in doomed:
                del self._entries[k]
        return len(doomed)

    def clear(self) -> None:
        with self._lock:
            self._generation += 1
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _current_generation(self) -> int:
        with self._lock:
            return self._generation

    def _acquire_inflight(self, key: str) -> asyncio.Lock:
        with self._lock:
            lock = self._inflight.get(key)
            if lock is None:
                lock = self._inflight[key] = asyncio.Lock()
            self._waiters[key] = self._waiters.get(key, 0) + 1
            return lock

    def _release_inflight(self, key: str) -> None:
        # The last waiter out removes the lock so the map holds only live fetches
        with self._lock:
            remaining = self._waiters[key] - 1
            if remaining:
                self._waiters[key] = remaining
            else:
                del self._waiters[key]
                del self._inflight[key]

    @property
    def inflight(self) -> int:
        """Number of keys with a fetch running or queued."""
        with self._lock:
            return len(self._inflight)

    def _store(self, key: str, value: Any, ttl: float, generation: int) -> None:
        expires_at = self._clock() + ttl
        with self._lock:
            if generation != self._generation:
                logger.debug("[cache] STALE_FETCH_DISCARDED key=%s", key)
                return
            self._entries[key] = CacheEntry(value=value, expires_at=expires_at)

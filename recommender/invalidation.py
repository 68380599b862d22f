"""
Push-driven cache invalidation.

Upstream "events table changed" signals arrive on a ChangeNotificationChannel.
A dedicated CacheInvalidator task consumes them and drops every cached event
query, so notification delivery never runs on request-handling code paths.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import AsyncIterator, Optional, Protocol

from .cache import ResultCache

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChangeNotification:
    """An upstream change signal. The engine needs no payload; source is for logs."""
    source: str = "events"
    received_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class ChangeNotificationChannel(Protocol):
    """Asynchronous stream of change notifications."""

    def subscribe(self) -> AsyncIterator[ChangeNotification]:
        ...


_CLOSED = object()


class QueueChangeChannel:
    """
    In-process channel backed by an asyncio.Queue.

    publish() is non-blocking and may be called from request handlers or a
    realtime client callback; subscribe() yields until close().
    """

    def __init__(self, maxsize: int = 0):
        # Bounded here rather than in the queue so close() can always enqueue its sentinel
        self._queue: "asyncio.Queue[object]" = asyncio.Queue()
        self._maxsize = maxsize
        self._closed = False

    def publish(self, notification: Optional[ChangeNotification] = None) -> bool:
        """Enqueue a signal. Returns False when the channel is closed or full."""
        if self._closed:
            return False
        if self._maxsize and self._queue.qsize() >= self._maxsize:
            # A pending signal already guarantees an invalidation
            logger.debug("[invalidation] QUEUE_FULL signal coalesced")
            return False
        self._queue.put_nowait(notification or ChangeNotification())
        return True

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._queue.put_nowait(_CLOSED)

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    async def subscribe(self) -> AsyncIterator[ChangeNotification]:
        while True:
            item = await self._queue.get()
            if item is _CLOSED:
                return
            yield item


class CacheInvalidator:
    """Cache-maintenance task: invalidates cached event queries on every notification."""

    def __init__(
        self,
        cache: ResultCache,
        channel: ChangeNotificationChannel,
        prefix: str = "events:",
    ):
        self._cache = cache
        self._channel = channel
        self._prefix = prefix
        self._task: Optional[asyncio.Task] = None
        self.invalidations = 0

    async def run(self) -> None:
        """Consume the channel until it closes."""
        async for notification in self._channel.subscribe():
            removed = self._cache.invalidate_prefix(self._prefix)
            self.invalidations += 1
            logger.info(
                "[invalidation] source=%s prefix=%s removed=%d",
                notification.source, self._prefix, removed,
            )

    def start(self) -> asyncio.Task:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run(), name="cache-invalidator")
        return self._task

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

"""Change notifications: channel semantics and the cache-maintenance task."""

import asyncio

import pytest

from recommender.cache import ResultCache
from recommender.invalidation import CacheInvalidator, ChangeNotification, QueueChangeChannel


async def _fill(cache, *keys):
    for key in keys:
        async def fetch(key=key):
            return key
        await cache.get(key, fetch)


async def _wait_for(predicate, attempts: int = 200):
    for _ in range(attempts):
        if predicate():
            return
        await asyncio.sleep(0.001)
    raise AssertionError("condition not reached")


class TestQueueChangeChannel:
    def test_publish_after_close_is_rejected(self):
        channel = QueueChangeChannel()
        channel.close()
        assert channel.publish() is False

    def test_bounded_channel_coalesces(self):
        channel = QueueChangeChannel(maxsize=1)
        assert channel.publish() is True
        assert channel.publish() is False
        assert channel.pending == 1
        channel.close()

    @pytest.mark.asyncio
    async def test_subscribe_yields_until_closed(self):
        channel = QueueChangeChannel()
        channel.publish(ChangeNotification(source="a"))
        channel.publish(ChangeNotification(source="b"))
        channel.close()
        seen = [n.source async for n in channel.subscribe()]
        assert seen == ["a", "b"]


class TestCacheInvalidator:
    @pytest.mark.asyncio
    async def test_notification_drops_event_entries(self):
        cache = ResultCache()
        await _fill(cache, "events:status=active", "events:status=full", "other:x")
        channel = QueueChangeChannel()
        invalidator = CacheInvalidator(cache, channel, prefix="events:")
        invalidator.start()
        try:
            channel.publish()
            await _wait_for(lambda: invalidator.invalidations == 1)
            assert len(cache) == 1
            assert cache.peek("other:x") == "other:x"
        finally:
            await invalidator.stop()

    @pytest.mark.asyncio
    async def test_run_returns_when_channel_closes(self):
        cache = ResultCache()
        channel = QueueChangeChannel()
        invalidator = CacheInvalidator(cache, channel)
        channel.publish()
        channel.close()
        await asyncio.wait_for(invalidator.run(), timeout=1.0)
        assert invalidator.invalidations == 1

    @pytest.mark.asyncio
    async def test_stop_cancels_task(self):
        invalidator = CacheInvalidator(ResultCache(), QueueChangeChannel())
        invalidator.start()
        assert invalidator.running
        await invalidator.stop()
        assert not invalidator.running

    @pytest.mark.asyncio
    async def test_start_is_idempotent(self):
        invalidator = CacheInvalidator(ResultCache(), QueueChangeChannel())
        first = invalidator.start()
        assert invalidator.start() is first
        await invalidator.stop()

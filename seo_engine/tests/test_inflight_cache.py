"""Unit tests for InFlightTaskCache single-flight deduplication."""

import asyncio

import pytest

from seo_engine.core.caching import InFlightTaskCache


class TestInFlightTaskCache:
    """Test sharing, eviction and error propagation."""

    @pytest.mark.asyncio
    async def test_concurrent_requests_share_one_task(self):
        """Two concurrent requests for one key run the factory once."""
        cache = InFlightTaskCache()
        release = asyncio.Event()
        calls = []

        async def generate():
            calls.append("SKU-1")
            await release.wait()
            return "estufa, estufa de gas"

        first = asyncio.ensure_future(cache.get_or_create("SKU-1", generate))
        second = asyncio.ensure_future(cache.get_or_create("SKU-1", generate))
        await asyncio.sleep(0)

        assert "SKU-1" in cache
        assert cache.size == 1

        release.set()
        results = await asyncio.gather(first, second)

        assert results == ["estufa, estufa de gas", "estufa, estufa de gas"]
        assert calls == ["SKU-1"]

    @pytest.mark.asyncio
    async def test_entry_removed_after_completion(self):
        """The key is evicted once the task settles, so a later call runs again."""
        cache = InFlightTaskCache()
        calls = []

        async def generate():
            calls.append(1)
            return "abanico"

        await cache.get_or_create("SKU-1", generate)
        await asyncio.sleep(0)
        assert len(cache) == 0

        await cache.get_or_create("SKU-1", generate)
        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_failure_shared_and_evicted(self):
        """Every waiter sees the same failure and the entry is dropped."""
        cache = InFlightTaskCache()
        release = asyncio.Event()

        async def generate():
            await release.wait()
            raise ConnectionError("reset")

        first = asyncio.ensure_future(cache.get_or_create("SKU-1", generate))
        second = asyncio.ensure_future(cache.get_or_create("SKU-1", generate))
        await asyncio.sleep(0)
        release.set()

        results = await asyncio.gather(first, second, return_exceptions=True)
        await asyncio.sleep(0)

        assert all(isinstance(r, ConnectionError) for r in results)
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_cancelled_waiter_does_not_cancel_shared_task(self):
        """Cancelling one waiter leaves the shared call running for the others."""
        cache = InFlightTaskCache()
        release = asyncio.Event()

        async def generate():
            await release.wait()
            return "microondas"

        first = asyncio.ensure_future(cache.get_or_create("SKU-1", generate))
        second = asyncio.ensure_future(cache.get_or_create("SKU-1", generate))
        await asyncio.sleep(0)

        first.cancel()
        await asyncio.sleep(0)
        release.set()

        assert await second == "microondas"
        assert first.cancelled()

    @pytest.mark.asyncio
    async def test_distinct_keys_not_shared(self):
        cache = InFlightTaskCache()

        async def generate_for(key):
            return f"kw-{key}"

        results = await asyncio.gather(
            cache.get_or_create("A", lambda: generate_for("A")),
            cache.get_or_create("B", lambda: generate_for("B")),
        )

        assert results == ["kw-A", "kw-B"]

    @pytest.mark.asyncio
    async def test_clear_cancels_pending(self):
        """clear() cancels outstanding tasks and empties the cache."""
        cache = InFlightTaskCache()
        release = asyncio.Event()

        async def generate():
            await release.wait()
            return "nunca"

        waiter = asyncio.ensure_future(cache.get_or_create("SKU-1", generate))
        await asyncio.sleep(0)

        cache.clear()

        with pytest.raises(asyncio.CancelledError):
            await waiter
        assert cache.get_stats() == {"pending": 0, "keys": []}

"""In-flight task cache for the keyword enrichment engine.

Single-flight deduplication: concurrent requests for the same record key
share one pending enrichment task instead of issuing duplicate calls.
"""

import asyncio
from typing import Any, Awaitable, Callable, Dict


class InFlightTaskCache:
    """Maps record key to the one outstanding task enriching it.

    get_or_create never awaits between lookup and insert, so it is race-free
    on a single event loop. Entries are dropped as soon as their task settles.
    """

    def __init__(self):
        self._tasks: Dict[str, asyncio.Task] = {}

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, key: str) -> bool:
        return key in self._tasks

    @property
    def size(self) -> int:
        """Number of pending tasks."""
        return len(self._tasks)

    async def get_or_create(self, key: str, factory: Callable[[], Awaitable[Any]]) -> Any:
        """Await the shared task for key, creating it from factory if absent.

        Args:
            key: Record key
            factory: Zero-argument coroutine factory producing the enrichment

        Returns:
            The shared task's result; its exception propagates to every waiter
        """
        task = self._tasks.get(key)
        if task is None:
            task = asyncio.ensure_future(factory())
            self._tasks[key] = task
            task.add_done_callback(lambda done, k=key: self._evict(k, done))

        # A cancelled waiter must not cancel the call other waiters share
        return await asyncio.shield(task)

    def _evict(self, key: str, task: asyncio.Task) -> None:
        if self._tasks.get(key) is task:
            del self._tasks[key]
        # Retrieve the exception so an unawaited failure is not reported as lost
        if not task.cancelled():
            task.exception()

    def clear(self) -> None:
        """Cancel and forget every pending task."""
        for task in self._tasks.values():
            task.cancel()
        self._tasks.clear()

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics.

        Returns:
            Dictionary with pending task count and keys
        """
        return {"pending": len(self._tasks), "keys": sorted(self._tasks)}

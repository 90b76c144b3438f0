"""Bounded-concurrency batch strategy.

Uses asyncio.gather() over a semaphore so that at most N record pipelines
run at the same time; a queued record starts as soon as a slot frees up.
"""

import asyncio
from typing import List

from seo_engine.core.batch.models import Record, RecordOutcome
from seo_engine.core.batch.strategies.base import BatchStrategy, RecordHandler
from seo_engine.core.logging import logger


class ConcurrencyLimiter(BatchStrategy):
    """Async concurrent batch strategy with a hard in-flight bound."""

    def __init__(self, limit: int):
        if limit < 1:
            raise ValueError("concurrency limit must be >= 1")
        self.limit = limit
        self._active = 0
        self.peak_active = 0

    @property
    def active(self) -> int:
        return self._active

    async def execute(self, records: List[Record], handler: RecordHandler) -> List[RecordOutcome]:
        """Execute records with at most `limit` pipelines active.

        Args:
            records: Records to process
            handler: Per-record pipeline

        Returns:
            List of RecordOutcome, one per record
        """
        semaphore = asyncio.Semaphore(self.limit)

        async def run_one(record: Record) -> RecordOutcome:
            async with semaphore:
                self._active += 1
                self.peak_active = max(self.peak_active, self._active)
                try:
                    return await handler(record)
                finally:
                    self._active -= 1

        logger.debug("bounded_group_started", records=len(records), limit=self.limit)

        return list(await asyncio.gather(*[run_one(record) for record in records]))

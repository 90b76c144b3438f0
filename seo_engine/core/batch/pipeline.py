"""Per-record enrichment pipeline.

InFlightTaskCache -> RetryPolicy -> AdaptiveRateController -> EnrichmentClient.
"""

import asyncio
import time
from typing import List, Optional

from seo_engine.core.batch.interfaces import EnrichmentClient
from seo_engine.core.batch.models import EnrichmentResult, Record, RecordOutcome
from seo_engine.core.caching import InFlightTaskCache
from seo_engine.core.errors import PermanentRecordError
from seo_engine.core.execution.adaptive_rate import AdaptiveRateController
from seo_engine.core.execution.error_classifier import ErrorClassifier
from seo_engine.core.execution.retry_policy import RetryPolicy
from seo_engine.core.logging import logger


class RecordPipeline:
    """Enriches one record with deduplication, retry and adaptive pacing."""

    def __init__(
        self,
        client: EnrichmentClient,
        cache: InFlightTaskCache,
        retry_policy: RetryPolicy,
        rate_controller: AdaptiveRateController,
        call_slots: Optional[asyncio.Semaphore] = None,
    ):
        """Initialize RecordPipeline.

        Args:
            client: EnrichmentClient issuing the external call
            cache: InFlightTaskCache shared by every pipeline of the controller
            retry_policy: RetryPolicy wrapping each record
            rate_controller: AdaptiveRateController pacing each attempt
            call_slots: Optional semaphore bounding client calls across every
                pipeline sharing it (job pages and single-record requests)
        """
        self.client = client
        self.cache = cache
        self.retry_policy = retry_policy
        self.rate_controller = rate_controller
        self.call_slots = call_slots

    async def enrich(self, record: Record, attempts: Optional[List[int]] = None) -> str:
        """Return the enrichment value for record, raising on failure.

        Args:
            record: Record to enrich
            attempts: Optional one-item counter incremented per client call
                issued by this pipeline (a caller joining an in-flight task
                issues none)
        """

        async def call():
            return await self.rate_controller.delay_then_call(
                record.key, lambda: self.client.enrich(record)
            )

        async def attempt():
            if attempts is not None:
                attempts[0] += 1
            if self.call_slots is None:
                return await call()
            async with self.call_slots:
                return await call()

        return await self.cache.get_or_create(
            record.key, lambda: self.retry_policy.run(attempt, key=record.key)
        )

    async def process(self, record: Record) -> RecordOutcome:
        """Run the pipeline and capture the result as a RecordOutcome."""
        started = time.monotonic()
        attempts = [0]
        try:
            value = await self.enrich(record, attempts)
            result = EnrichmentResult.ok(value)
        except Exception as e:
            result = EnrichmentResult.failure(
                ErrorClassifier.reason(e), permanent=isinstance(e, PermanentRecordError)
            )
            logger.warning(
                "record_enrichment_failed",
                key=record.key,
                category=record.category,
                reason=result.reason,
                permanent=result.permanent,
                attempts=attempts[0],
            )

        return RecordOutcome(
            key=record.key,
            category=record.category,
            result=result,
            attempts=attempts[0],
            latency_ms=round((time.monotonic() - started) * 1000, 2),
        )

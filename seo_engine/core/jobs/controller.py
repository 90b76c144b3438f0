"""Job controller for the keyword enrichment engine.

Owns the single process-wide keyword job: start, pause, resume and status.
"""

import asyncio
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from seo_engine.config import Config
from seo_engine.core.batch.interfaces import EnrichmentClient, RecordSource, ResultSink
from seo_engine.core.batch.models import JobOptions, JobState, JobStatus, RecordFilter, RunSummary
from seo_engine.core.batch.pipeline import RecordPipeline
from seo_engine.core.batch.scheduler import BatchScheduler, SchedulerConfig
from seo_engine.core.caching import InFlightTaskCache
from seo_engine.core.errors import ConflictError, PermanentRecordError
from seo_engine.core.execution.adaptive_rate import (
    AdaptiveRateController,
    RateControllerConfig,
    Sleep,
)
from seo_engine.core.execution.retry_policy import RetryPolicy
from seo_engine.core.logging import logger
from seo_engine.core.retry_config import RetryConfig


class JobController:
    """Start/pause/resume/status over one keyword job at a time.

    Follows Dependency Inversion Principle: source, sink, client and all
    tunables are injected. Flag transitions happen under one asyncio.Lock;
    status() is a lock-free read of the current JobState.
    """

    def __init__(
        self,
        source: RecordSource,
        sink: ResultSink,
        client: EnrichmentClient,
        rate_config: Optional[RateControllerConfig] = None,
        retry_config: Optional[RetryConfig] = None,
        scheduler_config: Optional[SchedulerConfig] = None,
        sleep: Sleep = asyncio.sleep,
    ):
        """Initialize JobController.

        Args:
            source: RecordSource supplying products without keywords
            sink: ResultSink persisting generated keywords
            client: EnrichmentClient generating keywords
            rate_config: Adaptive delay tunables
            retry_config: Retry/backoff tunables
            scheduler_config: Page delay and pause limits
            sleep: Awaitable sleep shared by every pacing component
        """
        self.source = source
        self.sink = sink
        self.client = client
        self.rate_config = rate_config or RateControllerConfig()
        self.retry_config = retry_config or RetryConfig()
        self.scheduler_config = scheduler_config or SchedulerConfig()
        self._sleep = sleep

        self.cache = InFlightTaskCache()
        self.rate_controller = AdaptiveRateController(self.rate_config, sleep=sleep)
        # Bounds Gemini calls of the job and of single-product requests together
        self.call_slots = asyncio.Semaphore(Config.keyword_concurrency())
        self.state: Optional[JobState] = None
        self.scheduler: Optional[BatchScheduler] = None
        self._task: Optional[asyncio.Task] = None
        self._lock = asyncio.Lock()

    def _build_pipeline(self) -> RecordPipeline:
        retry_policy = RetryPolicy(self.retry_config, self.rate_controller, sleep=self._sleep)
        return RecordPipeline(
            self.client, self.cache, retry_policy, self.rate_controller, call_slots=self.call_slots
        )

    async def start(self, options: Optional[JobOptions] = None) -> Dict[str, Any]:
        """Start a new job in the background.

        Returns:
            Accepted payload with the number of records to process

        Raises:
            ConflictError: If a job is already running
            ValueError: If batch size or concurrency level is below 1
        """
        options = options or JobOptions()
        if options.batch_size < 1 or options.concurrency_level < 1:
            raise ValueError("batch_size and concurrency_level must be >= 1")

        async with self._lock:
            if self.state is not None and self.state.running:
                raise ConflictError("A keyword job is already running")

            # Fresh statistics per job
            self.rate_controller = AdaptiveRateController(self.rate_config, sleep=self._sleep)
            self.call_slots = asyncio.Semaphore(options.concurrency_level)
            state = JobState(
                batch_size=options.batch_size,
                concurrency_level=options.concurrency_level,
                prioritized_categories=list(options.prioritized_categories),
                rate_stats=self.rate_controller.stats,
            )
            state.total_records = await self.source.count(RecordFilter())
            state.mark_started()
            self.state = state

            self.scheduler = BatchScheduler(
                source=self.source,
                sink=self.sink,
                pipeline=self._build_pipeline(),
                state=state,
                config=self.scheduler_config,
                sleep=self._sleep,
            )
            self._task = asyncio.create_task(self.scheduler.run())

        logger.info(
            "keyword_job_accepted",
            total_records=state.total_records,
            batch_size=state.batch_size,
            concurrency_level=state.concurrency_level,
        )

        return {
            "status": "accepted",
            "total_records": state.total_records,
            "batch_size": state.batch_size,
            "concurrency_level": state.concurrency_level,
            "prioritized_categories": state.prioritized_categories,
            "started_at": state.started_at.isoformat(),
        }

    async def pause(self) -> Dict[str, Any]:
        """Stop dispatching new pages. In-flight calls are not cancelled.

        Raises:
            ConflictError: If no job is running or it is already paused
        """
        async with self._lock:
            state = self._require_running()
            if state.pause_requested:
                raise ConflictError("Keyword job is already paused")
            state.pause_requested = True

        logger.info("keyword_job_pause_requested", processed=state.processed_records)
        return self.status()

    async def resume(self) -> Dict[str, Any]:
        """Allow the scheduler to dispatch the next page.

        Raises:
            ConflictError: If no job is running or it is not paused
        """
        async with self._lock:
            state = self._require_running()
            if not state.pause_requested:
                raise ConflictError("Keyword job is not paused")
            state.pause_requested = False

        logger.info("keyword_job_resume_requested", processed=state.processed_records)
        return self.status()

    def _require_running(self) -> JobState:
        if self.state is None or not self.state.running:
            raise ConflictError("No keyword job is running")
        return self.state

    def status(self) -> Dict[str, Any]:
        """Snapshot of job progress. No side effects."""
        stats = self.rate_controller.stats
        base = {
            "pending_tasks": self.cache.size,
            "current_delay_ms": round(stats.current_delay_ms, 2),
            "consecutive_errors": stats.consecutive_errors,
            "average_latency_ms": round(stats.average_latency_ms, 2),
        }

        state = self.state
        if state is None:
            return {"status": JobStatus.IDLE.value, "running": False, "paused": False, **base}

        total = state.total_records
        processed = state.processed_records
        if total > 0:
            percent = round(min(processed / total, 1.0) * 100, 2)
        else:
            percent = 100.0 if state.ended_at else 0.0

        return {
            "status": state.status.value,
            "running": state.running,
            "paused": state.running and state.pause_requested,
            "total_records": total,
            "prioritized_count": state.prioritized_count,
            "processed_records": processed,
            "succeeded_count": state.succeeded_count,
            "failed_count": state.failed_count,
            "percent_complete": percent,
            "estimated_seconds_remaining": self._estimate_remaining(state),
            "last_processed_key": state.last_processed_key,
            "batch_size": state.batch_size,
            "concurrency_level": state.concurrency_level,
            "prioritized_categories": state.prioritized_categories,
            "started_at": state.started_at.isoformat() if state.started_at else None,
            "ended_at": state.ended_at.isoformat() if state.ended_at else None,
            "abort_reason": state.abort_reason,
            **base,
        }

    @staticmethod
    def _estimate_remaining(state: JobState) -> Optional[float]:
        if not state.running or state.processed_records == 0 or state.started_at is None:
            return None
        elapsed = (datetime.now(timezone.utc) - state.started_at).total_seconds()
        remaining = max(state.total_records - state.processed_records, 0)
        return round(elapsed / state.processed_records * remaining, 1)

    def failures(self) -> List[Dict[str, str]]:
        """Failed records of the current or last job."""
        return list(self.state.failed_records) if self.state else []

    async def wait(self) -> Optional[RunSummary]:
        """Wait for the background run to finish and return its summary."""
        if self._task is None:
            return None
        return await self._task

    async def generate_for_key(self, key: str) -> str:
        """Generate keywords for a single product through the shared pipeline.

        Raises:
            PermanentRecordError: If the product does not exist
        """
        record = await self.source.get(key)
        if record is None:
            raise PermanentRecordError(key)
        return await self._build_pipeline().enrich(record)

    async def shutdown(self) -> None:
        """Cancel the running job, if any (application shutdown)."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self.cache.clear()

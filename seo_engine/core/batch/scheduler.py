"""Batch scheduler for the keyword enrichment engine.

Main orchestrator: pages through the record source (prioritized categories
first, then the remainder), drives each page through the concurrency
limiter, and writes every page's successes to the sink in one bulk call.
"""

import asyncio
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Set

from seo_engine.config import Config
from seo_engine.core.batch.interfaces import RecordSource, ResultSink
from seo_engine.core.batch.models import (
    BulkWriteReport,
    JobState,
    Record,
    RecordFilter,
    RecordOutcome,
    RunSummary,
)
from seo_engine.core.batch.pipeline import RecordPipeline
from seo_engine.core.batch.strategies import BatchStrategy, select_strategy
from seo_engine.core.errors import FatalAbortError, PersistenceError
from seo_engine.core.execution.adaptive_rate import Sleep
from seo_engine.core.logging import logger

NOT_WRITTEN_REASON = "result not written"


@dataclass(frozen=True)
class SchedulerConfig:
    """Page-level pacing and pause limits (seconds)."""

    page_delay_seconds: float = 1.0
    pause_poll_seconds: float = 5.0
    max_pause_seconds: float = 3600.0

    @classmethod
    def from_env(cls) -> "SchedulerConfig":
        return cls(
            page_delay_seconds=Config.keyword_page_delay_ms() / 1000.0,
            pause_poll_seconds=float(Config.keyword_pause_poll_seconds()),
            max_pause_seconds=float(Config.keyword_max_pause_seconds()),
        )


class BatchScheduler:
    """Drives one keyword job run to completion or to a fatal abort.

    Writes job counters only; the pause flag is owned by the JobController
    and read here before every page.
    """

    def __init__(
        self,
        source: RecordSource,
        sink: ResultSink,
        pipeline: RecordPipeline,
        state: JobState,
        config: Optional[SchedulerConfig] = None,
        strategy: Optional[BatchStrategy] = None,
        sleep: Sleep = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.source = source
        self.sink = sink
        self.pipeline = pipeline
        self.state = state
        self.config = config or SchedulerConfig()
        self.strategy = strategy or select_strategy(state.concurrency_level)
        self._sleep = sleep
        self._clock = clock
        self._seen: Set[str] = set()
        self.pages_processed = 0

    async def run(self) -> RunSummary:
        """Run every phase and return the run summary.

        Never raises for per-record or fatal errors; those end up in the
        returned summary and in the job state.
        """
        state = self.state
        if not state.running:
            state.mark_started()

        logger.info(
            "keyword_job_started",
            batch_size=state.batch_size,
            concurrency_level=state.concurrency_level,
            prioritized_categories=state.prioritized_categories,
        )

        try:
            await self._run_phases()
            state.mark_finished()
        except FatalAbortError as e:
            logger.error("keyword_job_aborted", reason=str(e), processed=state.processed_records)
            state.mark_finished(abort_reason=str(e))
        except asyncio.CancelledError:
            state.mark_finished(abort_reason="cancelled")
            raise
        except Exception as e:
            logger.exception("keyword_job_crashed", error=str(e))
            state.mark_finished(abort_reason=f"scheduler error: {e}")

        summary = RunSummary.from_state(state)
        logger.info(
            "keyword_job_finished",
            status=summary.status,
            total_records=summary.total_records,
            processed_records=summary.processed_records,
            succeeded=summary.succeeded_count,
            failed=len(summary.failed_records),
            duration_seconds=summary.duration_seconds,
        )
        return summary

    async def _run_phases(self) -> None:
        state = self.state
        prioritized = list(state.prioritized_categories)

        state.total_records = await self.source.count(RecordFilter())
        if prioritized:
            state.prioritized_count = await self.source.count(
                RecordFilter(include_categories=prioritized)
            )

        if state.total_records == 0:
            logger.info("keyword_job_nothing_to_do")
            return

        if prioritized:
            await self._run_phase("prioritized", RecordFilter(include_categories=prioritized))
        await self._run_phase(
            "remainder", RecordFilter(exclude_categories=prioritized or None)
        )

    async def _run_phase(self, phase: str, record_filter: RecordFilter) -> None:
        """Page through one phase.

        Successful writes drop records out of the "missing keywords" filter,
        so the offset only advances past records that are still missing
        (this phase's failures) under a stable category/key ordering.
        """
        batch_size = self.state.batch_size
        offset = 0

        while True:
            await self._wait_while_paused()

            try:
                records = await self.source.page(record_filter, offset, batch_size, "category")
            except Exception as e:
                raise FatalAbortError(f"record source failed: {e}") from e

            if not records:
                break

            # Records already handled this run are skipped, never re-enriched
            fresh = [r for r in records if r.key not in self._seen]
            repeated = len(records) - len(fresh)
            if fresh:
                offset += await self._process_page(phase, fresh)
            else:
                logger.warning("record_source_repeated_page", phase=phase, offset=offset)
            offset += repeated

            if len(records) < batch_size:
                break

            if self.config.page_delay_seconds > 0:
                await self._sleep(self.config.page_delay_seconds)

    async def _wait_while_paused(self) -> None:
        state = self.state
        if not state.pause_requested:
            return

        paused_at = self._clock()
        logger.info("keyword_job_paused", processed=state.processed_records)

        while state.pause_requested:
            if self._clock() - paused_at >= self.config.max_pause_seconds:
                raise FatalAbortError(
                    f"extended pause: paused longer than {self.config.max_pause_seconds:.0f}s"
                )
            await self._sleep(self.config.pause_poll_seconds)

        logger.info("keyword_job_resumed", paused_seconds=round(self._clock() - paused_at, 2))

    async def _process_page(self, phase: str, records: List[Record]) -> int:
        """Enrich one page, bulk write it and update counters.

        Returns:
            Number of page records still missing keywords afterwards
        """
        state = self.state
        self._seen.update(r.key for r in records)

        # Same-category records are dispatched back to back; the limiter spans
        # the whole page so many small categories still fill every slot
        groups = self._group_by_category(records)
        ordered = [record for group in groups.values() for record in group]
        logger.debug("page_dispatched", phase=phase, size=len(ordered), categories=len(groups))
        outcomes: List[RecordOutcome] = await self.strategy.execute(ordered, self.pipeline.process)

        succeeded = [o for o in outcomes if o.success]
        for outcome in outcomes:
            if not outcome.success:
                state.record_failure(outcome.key, outcome.result.reason or "unknown error")

        report = await self._bulk_write(succeeded) if succeeded else BulkWriteReport()
        written = set(report.succeeded)
        page_succeeded = 0
        for outcome in succeeded:
            if outcome.key in report.failed:
                state.record_failure(outcome.key, report.failed[outcome.key])
            elif outcome.key in written:
                page_succeeded += 1
            else:
                state.record_failure(outcome.key, NOT_WRITTEN_REASON)

        state.succeeded_count += page_succeeded
        state.processed_records += len(outcomes)
        state.last_processed_key = records[-1].key
        self.pages_processed += 1

        logger.info(
            "page_processed",
            phase=phase,
            page=self.pages_processed,
            size=len(records),
            succeeded=page_succeeded,
            failed=len(outcomes) - page_succeeded,
            processed=state.processed_records,
            total=state.total_records,
            current_delay_ms=round(state.rate_stats.current_delay_ms, 2),
        )
        return len(outcomes) - page_succeeded

    async def _bulk_write(self, succeeded: List[RecordOutcome]) -> BulkWriteReport:
        updates = [{"key": o.key, "value": o.result.value} for o in succeeded]
        try:
            return await self.sink.bulk_write(updates)
        except Exception as e:
            error = e if isinstance(e, PersistenceError) else PersistenceError(None, str(e))
            logger.error("bulk_write_failed", records=len(updates), error=error.reason)
            return BulkWriteReport(failed={u["key"]: error.reason for u in updates})

    @staticmethod
    def _group_by_category(records: List[Record]) -> Dict[Optional[str], List[Record]]:
        groups: "OrderedDict[Optional[str], List[Record]]" = OrderedDict()
        for record in records:
            groups.setdefault(record.category, []).append(record)
        return groups

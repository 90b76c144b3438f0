"""Batch processing module for the keyword enrichment engine.

Provides orchestration for bulk keyword enrichment using Strategy pattern.

Components:
- BatchScheduler: Main orchestrator (paging, prioritization, bulk writes)
- RecordPipeline: Per-record cache -> retry -> rate -> client chain
- BatchStrategy: Strategy interface
- ConcurrencyLimiter: Bounded async concurrent execution
- SequentialBatchStrategy: Sequential execution for a single worker
"""

from seo_engine.core.batch.interfaces import EnrichmentClient, RecordSource, ResultSink
from seo_engine.core.batch.models import (
    BulkWriteReport,
    EnrichmentResult,
    JobOptions,
    JobState,
    JobStatus,
    Record,
    RecordFilter,
    RecordOutcome,
    RunSummary,
)
from seo_engine.core.batch.pipeline import RecordPipeline
from seo_engine.core.batch.scheduler import BatchScheduler, SchedulerConfig
from seo_engine.core.batch.strategies import (
    BatchStrategy,
    ConcurrencyLimiter,
    SequentialBatchStrategy,
)

__all__ = [
    "BatchScheduler",
    "SchedulerConfig",
    "RecordPipeline",
    "BatchStrategy",
    "ConcurrencyLimiter",
    "SequentialBatchStrategy",
    "RecordSource",
    "ResultSink",
    "EnrichmentClient",
    "BulkWriteReport",
    "EnrichmentResult",
    "JobOptions",
    "JobState",
    "JobStatus",
    "Record",
    "RecordFilter",
    "RecordOutcome",
    "RunSummary",
]

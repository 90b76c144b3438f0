"""Batch processing models for the keyword enrichment engine.

Type-safe models for records, per-record outcomes, job state and run summaries.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from seo_engine.core.execution.adaptive_rate import AdaptiveRateStats


@dataclass
class Record:
    """A product pending keyword enrichment."""

    key: str
    title: Optional[str] = None
    category: Optional[str] = None
    keywords: Optional[str] = None


@dataclass
class EnrichmentResult:
    """Outcome of enriching one record: a value or a failure reason."""

    success: bool
    value: Optional[str] = None
    reason: Optional[str] = None
    permanent: bool = False

    @classmethod
    def ok(cls, value: str) -> "EnrichmentResult":
        return cls(success=True, value=value)

    @classmethod
    def failure(cls, reason: str, permanent: bool = False) -> "EnrichmentResult":
        return cls(success=False, reason=reason, permanent=permanent)


@dataclass
class RecordOutcome:
    """Result of one record pipeline within a page."""

    key: str
    category: Optional[str]
    result: EnrichmentResult
    attempts: int = 0
    latency_ms: float = 0.0

    @property
    def success(self) -> bool:
        return self.result.success


@dataclass
class RecordFilter:
    """Selection of candidate records."""

    missing_only: bool = True
    include_categories: Optional[List[str]] = None
    exclude_categories: Optional[List[str]] = None


@dataclass
class BulkWriteReport:
    """Per-key outcome of one bulk write."""

    succeeded: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)


class JobStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"
    ABORTED = "aborted"


@dataclass
class JobOptions:
    """Options accepted by JobController.start."""

    batch_size: int = 50
    concurrency_level: int = 5
    prioritized_categories: List[str] = field(default_factory=list)


@dataclass
class JobState:
    """Progress of the single process-wide keyword job.

    Counters are written by the BatchScheduler only; the JobController writes
    the running and pause_requested flags.
    """

    batch_size: int
    concurrency_level: int
    prioritized_categories: List[str] = field(default_factory=list)
    running: bool = False
    pause_requested: bool = False
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    total_records: int = 0
    prioritized_count: int = 0
    processed_records: int = 0
    succeeded_count: int = 0
    failed_count: int = 0
    last_processed_key: Optional[str] = None
    failed_records: List[Dict[str, str]] = field(default_factory=list)
    abort_reason: Optional[str] = None
    rate_stats: AdaptiveRateStats = field(default_factory=AdaptiveRateStats)

    @property
    def status(self) -> JobStatus:
        if self.running:
            return JobStatus.PAUSED if self.pause_requested else JobStatus.RUNNING
        if self.ended_at is None:
            return JobStatus.IDLE
        if self.abort_reason is not None:
            return JobStatus.ABORTED
        return JobStatus.COMPLETED

    def mark_started(self) -> None:
        self.running = True
        self.started_at = datetime.now(timezone.utc)

    def mark_finished(self, abort_reason: Optional[str] = None) -> None:
        self.running = False
        self.pause_requested = False
        self.abort_reason = abort_reason
        self.ended_at = datetime.now(timezone.utc)

    def record_failure(self, key: str, reason: str) -> None:
        self.failed_records.append({"key": key, "reason": reason})
        self.failed_count += 1


@dataclass
class RunSummary:
    """Summary returned when a run ends."""

    status: str
    total_records: int
    processed_records: int
    succeeded_count: int
    failed_records: List[Dict[str, str]]
    duration_seconds: float
    abort_reason: Optional[str] = None

    @classmethod
    def from_state(cls, state: JobState) -> "RunSummary":
        """Factory method building the summary from final job state."""
        duration = 0.0
        if state.started_at and state.ended_at:
            duration = (state.ended_at - state.started_at).total_seconds()
        return cls(
            status=state.status.value,
            total_records=state.total_records,
            processed_records=state.processed_records,
            succeeded_count=state.succeeded_count,
            failed_records=list(state.failed_records),
            duration_seconds=round(duration, 2),
            abort_reason=state.abort_reason,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "total_records": self.total_records,
            "processed_records": self.processed_records,
            "succeeded_count": self.succeeded_count,
            "failed_count": len(self.failed_records),
            "failed_records": self.failed_records,
            "duration_seconds": self.duration_seconds,
            "abort_reason": self.abort_reason,
        }

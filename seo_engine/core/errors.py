"""Error taxonomy for the keyword enrichment engine.

Per-record errors (PermanentRecordError, TransientCallError, PersistenceError)
are collected into the run's failed records. Only FatalAbortError ends a run.
"""

from typing import Optional

NOT_FOUND_REASON = "not found"


class EngineError(Exception):
    """Base class for all engine errors."""


class ConflictError(EngineError):
    """Job control request conflicts with the current job state (HTTP 409)."""


class RecordError(EngineError):
    """Error attributed to a single record key."""

    def __init__(self, key: Optional[str], reason: str):
        super().__init__(reason)
        self.key = key
        self.reason = reason


class PermanentRecordError(RecordError):
    """Record does not exist upstream. Never retried."""

    def __init__(self, key: Optional[str], reason: str = NOT_FOUND_REASON):
        super().__init__(key, reason)


class TransientCallError(RecordError):
    """Network, rate limit or server-side failure of the enrichment service."""


class PersistenceError(RecordError):
    """Bulk write failed for a key. Not retried within the same run."""


class FatalAbortError(EngineError):
    """Unrecoverable scheduler error; terminates the whole run."""

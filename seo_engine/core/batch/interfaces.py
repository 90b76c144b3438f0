"""Collaborator interfaces consumed by the batch scheduler.

Concrete implementations live in infrastructure (Supabase) and integrations
(Gemini); tests provide in-memory fakes.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from seo_engine.core.batch.models import BulkWriteReport, Record, RecordFilter


class RecordSource(ABC):
    """Supplies records that still need enrichment."""

    @abstractmethod
    async def count(self, record_filter: RecordFilter) -> int:
        pass

    @abstractmethod
    async def page(
        self,
        record_filter: RecordFilter,
        offset: int,
        limit: int,
        order_hint: str = "category",
    ) -> List[Record]:
        """Return up to limit records after skipping offset.

        order_hint "category" orders by category then key, anything else by key.
        """
        pass

    @abstractmethod
    async def get(self, key: str) -> Optional[Record]:
        pass


class ResultSink(ABC):
    """Persists enrichment results in bulk."""

    @abstractmethod
    async def bulk_write(self, updates: List[Dict[str, str]]) -> BulkWriteReport:
        """Write [{"key": ..., "value": ...}] and report per-key outcome."""
        pass


class EnrichmentClient(ABC):
    """External AI service producing the enrichment for one record."""

    @abstractmethod
    async def enrich(self, record: Record) -> str:
        """Return the enrichment value.

        Raises:
            PermanentRecordError: record does not exist upstream
            Exception: anything else is treated as transient
        """
        pass

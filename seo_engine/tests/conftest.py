"""Shared fakes for the keyword engine tests.

In-memory product store, scripted keyword client and an instant sleep, all
exposed through fixtures.
"""

import asyncio
from typing import Callable, Dict, List, Optional

import pytest

from seo_engine.core.batch.interfaces import EnrichmentClient, RecordSource, ResultSink
from seo_engine.core.batch.models import BulkWriteReport, Record, RecordFilter
from seo_engine.core.errors import PermanentRecordError
from seo_engine.utils.enrichment import keywords_to_json


class FakeClock:
    """Instant sleep that advances a virtual clock."""

    def __init__(self):
        self.now = 0.0
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds
        await asyncio.sleep(0)


class InMemoryProductStore(RecordSource, ResultSink):
    """Product table kept in a dict; written products leave the missing filter.

    Keywords are stored as JSON arrays, like the search_keywords column.
    """

    def __init__(self, records: List[Record], fail_bulk_write: bool = False):
        self.records: Dict[str, Record] = {r.key: r for r in records}
        self.fail_bulk_write = fail_bulk_write
        self.page_calls: List[Dict] = []
        self.bulk_calls: List[List[Dict[str, str]]] = []

    def _matching(self, record_filter: RecordFilter) -> List[Record]:
        matches = []
        for record in self.records.values():
            if record_filter.missing_only and record.keywords:
                continue
            if record_filter.include_categories and record.category not in record_filter.include_categories:
                continue
            if record_filter.exclude_categories and record.category in record_filter.exclude_categories:
                continue
            matches.append(record)
        # Category order with NULL categories last, then key
        return sorted(matches, key=lambda r: (r.category is None, r.category or "", r.key))

    async def count(self, record_filter: RecordFilter) -> int:
        return len(self._matching(record_filter))

    async def page(self, record_filter, offset, limit, order_hint="category"):
        self.page_calls.append({"filter": record_filter, "offset": offset, "limit": limit})
        return self._matching(record_filter)[offset:offset + limit]

    async def get(self, key: str) -> Optional[Record]:
        return self.records.get(key)

    async def bulk_write(self, updates):
        self.bulk_calls.append(list(updates))
        if self.fail_bulk_write:
            raise ConnectionError("database unavailable")
        report = BulkWriteReport()
        for update in updates:
            record = self.records.get(update["key"])
            if record is None:
                report.failed[update["key"]] = "product not updated"
                continue
            record.keywords = keywords_to_json(update["value"])
            report.succeeded.append(update["key"])
        return report


class ScriptedKeywordClient(EnrichmentClient):
    """Keyword client whose failures are scripted per key.

    Args:
        missing: Keys that raise PermanentRecordError
        failures: Key -> number of leading attempts that raise ConnectionError
    """

    def __init__(self, missing=(), failures: Optional[Dict[str, int]] = None):
        self.missing = set(missing)
        self.failures = dict(failures or {})
        self.calls: List[str] = []
        self.in_flight = 0
        self.peak_in_flight = 0

    async def enrich(self, record: Record) -> str:
        self.calls.append(record.key)
        self.in_flight += 1
        self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
            if record.key in self.missing:
                raise PermanentRecordError(record.key)
            if self.failures.get(record.key, 0) > 0:
                self.failures[record.key] -= 1
                raise ConnectionError("503 service unavailable")
            return f"{record.title.lower()}, oferta rd"
        finally:
            self.in_flight -= 1


def make_records(count: int, category: Optional[str] = "LAV", prefix: str = "SKU") -> List[Record]:
    return [
        Record(key=f"{prefix}-{i:03d}", title=f"Producto {prefix} {i}", category=category)
        for i in range(count)
    ]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def records_factory() -> Callable[..., List[Record]]:
    return make_records


@pytest.fixture
def store_factory() -> Callable[..., InMemoryProductStore]:
    return InMemoryProductStore


@pytest.fixture
def client_factory() -> Callable[..., ScriptedKeywordClient]:
    return ScriptedKeywordClient

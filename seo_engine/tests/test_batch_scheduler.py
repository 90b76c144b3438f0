"""Tests for BatchScheduler paging, failure handling and prioritization."""

import json

import pytest

from seo_engine.core.batch.models import JobState
from seo_engine.core.batch.pipeline import RecordPipeline
from seo_engine.core.batch.scheduler import BatchScheduler, SchedulerConfig
from seo_engine.core.caching import InFlightTaskCache
from seo_engine.core.execution import AdaptiveRateController, RetryPolicy


def build_scheduler(store, client, clock, batch_size=10, concurrency_level=5,
                    prioritized_categories=None, config=None):
    rate = AdaptiveRateController(sleep=clock.sleep, clock=clock)
    cache = InFlightTaskCache()
    pipeline = RecordPipeline(client, cache, RetryPolicy(rate_controller=rate, sleep=clock.sleep), rate)
    state = JobState(
        batch_size=batch_size,
        concurrency_level=concurrency_level,
        prioritized_categories=prioritized_categories or [],
        rate_stats=rate.stats,
    )
    scheduler = BatchScheduler(
        source=store,
        sink=store,
        pipeline=pipeline,
        state=state,
        config=config or SchedulerConfig(page_delay_seconds=1.0),
        sleep=clock.sleep,
        clock=clock,
    )
    return scheduler, state, cache


class TestBatchSchedulerPaging:
    """Test page-by-page processing of the missing-keywords filter."""

    @pytest.mark.asyncio
    async def test_processes_all_records_in_pages(self, clock, records_factory, store_factory, client_factory):
        """25 records with batch size 10 are handled as pages of 10, 10 and 5."""
        store = store_factory(records_factory(25))
        client = client_factory()
        scheduler, state, cache = build_scheduler(store, client, clock)

        summary = await scheduler.run()

        assert [len(call) for call in store.bulk_calls] == [10, 10, 5]
        assert summary.status == "completed"
        assert summary.processed_records == 25
        assert summary.succeeded_count == 25
        assert summary.failed_records == []
        assert state.total_records == 25
        assert state.last_processed_key == "SKU-024"
        assert all(r.keywords for r in store.records.values())
        assert json.loads(store.records["SKU-000"].keywords) == ["producto sku 0", "oferta rd"]
        assert sorted(client.calls) == sorted(store.records)
        assert len(cache) == 0
        # Delay between pages, never after the final short page
        assert clock.sleeps.count(1.0) >= 2

    @pytest.mark.asyncio
    async def test_concurrency_bound_respected(self, clock, records_factory, store_factory, client_factory):
        store = store_factory(records_factory(20))
        client = client_factory()
        scheduler, _, _ = build_scheduler(store, client, clock, batch_size=20, concurrency_level=4)

        await scheduler.run()

        assert 1 < client.peak_in_flight <= 4

    @pytest.mark.asyncio
    async def test_empty_source_completes(self, clock, store_factory, client_factory):
        store = store_factory([])
        scheduler, state, _ = build_scheduler(store, client_factory(), clock)

        summary = await scheduler.run()

        assert summary.status == "completed"
        assert summary.processed_records == 0
        assert store.bulk_calls == []
        assert state.running is False

    @pytest.mark.asyncio
    async def test_each_record_enriched_once(self, clock, records_factory, store_factory, client_factory):
        """Failed records stay missing but are never fetched and enriched twice."""
        store = store_factory(records_factory(30))
        client = client_factory(missing={"SKU-000", "SKU-011", "SKU-025"})
        scheduler, _, _ = build_scheduler(store, client, clock)

        summary = await scheduler.run()

        assert len(client.calls) == len(set(client.calls)) == 30
        assert summary.processed_records == 30
        assert summary.succeeded_count == 27


class TestBatchSchedulerFailures:
    """Test per-record failures never stop the run."""

    @pytest.mark.asyncio
    async def test_not_found_record(self, clock, records_factory, store_factory, client_factory):
        """A not-found product is recorded without retry; the rest are written."""
        store = store_factory(records_factory(10))
        client = client_factory(missing={"SKU-003"})
        scheduler, _, _ = build_scheduler(store, client, clock)

        summary = await scheduler.run()

        assert summary.failed_records == [{"key": "SKU-003", "reason": "not found"}]
        assert summary.succeeded_count == 9
        assert summary.processed_records == 10
        assert client.calls.count("SKU-003") == 1
        assert [u["key"] for u in store.bulk_calls[0]] == [
            k for k in sorted(store.records) if k != "SKU-003"
        ]

    @pytest.mark.asyncio
    async def test_transient_failure_retried(self, clock, records_factory, store_factory, client_factory):
        """A record failing twice then succeeding is written."""
        store = store_factory(records_factory(3))
        client = client_factory(failures={"SKU-001": 2})
        scheduler, _, _ = build_scheduler(store, client, clock)

        summary = await scheduler.run()

        assert summary.succeeded_count == 3
        assert client.calls.count("SKU-001") == 3
        assert 2.0 in clock.sleeps and 4.0 in clock.sleeps

    @pytest.mark.asyncio
    async def test_retries_exhausted(self, clock, records_factory, store_factory, client_factory):
        store = store_factory(records_factory(2))
        client = client_factory(failures={"SKU-000": 10})
        scheduler, _, _ = build_scheduler(store, client, clock)

        summary = await scheduler.run()

        assert client.calls.count("SKU-000") == 4
        assert summary.failed_records == [{"key": "SKU-000", "reason": "503 service unavailable"}]
        assert summary.succeeded_count == 1
        assert store.records["SKU-000"].keywords is None

    @pytest.mark.asyncio
    async def test_bulk_write_failure_marks_page_failed(self, clock, records_factory, store_factory, client_factory):
        """A failed bulk write fails every record of the page; the run still finishes."""
        store = store_factory(records_factory(15), fail_bulk_write=True)
        scheduler, _, _ = build_scheduler(store, client_factory(), clock)

        summary = await scheduler.run()

        assert summary.status == "completed"
        assert summary.processed_records == 15
        assert summary.succeeded_count == 0
        assert len(summary.failed_records) == 15
        assert {f["reason"] for f in summary.failed_records} == {"database unavailable"}
        assert len(store.bulk_calls) == 2

    @pytest.mark.asyncio
    async def test_partial_bulk_write_moves_keys_to_failed(self, clock, records_factory, store_factory, client_factory):
        """Keys the sink rejects, or never reports, fail with the sink's reason."""
        store = store_factory(records_factory(5))
        write_all = store.bulk_write

        async def partial_write(updates):
            report = await write_all([u for u in updates if u["key"] not in ("SKU-002", "SKU-004")])
            report.failed["SKU-002"] = "constraint violation"
            return report

        store.bulk_write = partial_write
        scheduler, _, _ = build_scheduler(store, client_factory(), clock)

        summary = await scheduler.run()

        assert summary.status == "completed"
        assert summary.processed_records == 5
        assert summary.succeeded_count == 3
        assert summary.failed_records == [
            {"key": "SKU-002", "reason": "constraint violation"},
            {"key": "SKU-004", "reason": "result not written"},
        ]
        assert store.records["SKU-002"].keywords is None

    @pytest.mark.asyncio
    async def test_source_failure_aborts(self, clock, records_factory, store_factory, client_factory):
        """A page fetch failure is fatal."""
        store = store_factory(records_factory(5))

        async def broken_page(*args, **kwargs):
            raise ConnectionError("database unavailable")

        store.page = broken_page
        scheduler, state, _ = build_scheduler(store, client_factory(), clock)

        summary = await scheduler.run()

        assert summary.status == "aborted"
        assert "record source failed" in summary.abort_reason
        assert state.running is False


class TestBatchSchedulerPrioritization:
    """Test prioritized categories run before the remainder."""

    @pytest.mark.asyncio
    async def test_prioritized_categories_first(self, clock, records_factory, store_factory, client_factory):
        records = (
            records_factory(3, category="AIR", prefix="AIR")
            + records_factory(3, category="LAV", prefix="LAV")
            + records_factory(3, category="NEV", prefix="NEV")
            + records_factory(2, category=None, prefix="GEN")
        )
        store = store_factory(records)
        client = client_factory()
        scheduler, state, _ = build_scheduler(
            store, client, clock, batch_size=4, concurrency_level=1, prioritized_categories=["NEV"]
        )

        summary = await scheduler.run()

        assert client.calls[:3] == ["NEV-000", "NEV-001", "NEV-002"]
        assert set(client.calls[3:]) == {r.key for r in records if r.category != "NEV"}
        assert state.prioritized_count == 3
        assert summary.succeeded_count == 11

    @pytest.mark.asyncio
    async def test_records_grouped_by_category_within_page(self, clock, records_factory, store_factory, client_factory):
        records = records_factory(2, category="LAV", prefix="LAV") + records_factory(2, category="AIR", prefix="AIR")
        store = store_factory(records)
        client = client_factory()
        scheduler, _, _ = build_scheduler(store, client, clock, concurrency_level=1)

        await scheduler.run()

        assert client.calls == ["AIR-000", "AIR-001", "LAV-000", "LAV-001"]

    @pytest.mark.asyncio
    async def test_small_categories_share_the_page_limiter(self, clock, records_factory, store_factory, client_factory):
        """A page of single-record categories still runs records in parallel."""
        records = [
            record
            for category in ("AIR", "LAV", "NEV", "MIC")
            for record in records_factory(1, category=category, prefix=category)
        ]
        store = store_factory(records)
        client = client_factory()
        scheduler, _, _ = build_scheduler(store, client, clock, concurrency_level=4)

        summary = await scheduler.run()

        assert summary.succeeded_count == 4
        assert 1 < client.peak_in_flight <= 4


class TestBatchSchedulerPause:
    """Test the pause gate checked before each page."""

    @pytest.mark.asyncio
    async def test_extended_pause_aborts(self, clock, records_factory, store_factory, client_factory):
        """A pause longer than the maximum ends the run as aborted."""
        store = store_factory(records_factory(5))
        client = client_factory()
        scheduler, state, _ = build_scheduler(
            store, client, clock,
            config=SchedulerConfig(page_delay_seconds=0, pause_poll_seconds=5.0, max_pause_seconds=20.0),
        )
        state.pause_requested = True

        summary = await scheduler.run()

        assert summary.status == "aborted"
        assert summary.abort_reason.startswith("extended pause")
        assert client.calls == []
        assert state.pause_requested is False
        assert clock.sleeps == [5.0, 5.0, 5.0, 5.0]

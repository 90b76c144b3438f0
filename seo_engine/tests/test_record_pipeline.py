"""Tests for RecordPipeline outcomes and in-flight sharing."""

import asyncio

import pytest

from seo_engine.core.batch.models import Record
from seo_engine.core.batch.pipeline import RecordPipeline
from seo_engine.core.caching import InFlightTaskCache
from seo_engine.core.execution import AdaptiveRateController, RetryPolicy


def build_pipeline(client, clock):
    rate = AdaptiveRateController(sleep=clock.sleep, clock=clock)
    return RecordPipeline(client, InFlightTaskCache(), RetryPolicy(rate_controller=rate, sleep=clock.sleep), rate)


RECORD = Record(key="SKU-1", title="Nevera Samsung", category="NEV")


class TestRecordPipeline:
    """Test per-record outcomes."""

    @pytest.mark.asyncio
    async def test_success_outcome(self, clock, client_factory):
        pipeline = build_pipeline(client_factory(), clock)

        outcome = await pipeline.process(RECORD)

        assert outcome.success
        assert outcome.result.value == "nevera samsung, oferta rd"
        assert outcome.attempts == 1

    @pytest.mark.asyncio
    async def test_retried_outcome_counts_attempts(self, clock, client_factory):
        pipeline = build_pipeline(client_factory(failures={"SKU-1": 2}), clock)

        outcome = await pipeline.process(RECORD)

        assert outcome.success
        assert outcome.attempts == 3

    @pytest.mark.asyncio
    async def test_not_found_outcome(self, clock, client_factory):
        pipeline = build_pipeline(client_factory(missing={"SKU-1"}), clock)

        outcome = await pipeline.process(RECORD)

        assert not outcome.success
        assert outcome.result.reason == "not found"
        assert outcome.result.permanent is True
        assert outcome.attempts == 1

    @pytest.mark.asyncio
    async def test_concurrent_requests_call_client_once(self, clock, client_factory):
        """Concurrent pipelines for one key share a single client call."""
        client = client_factory()
        pipeline = build_pipeline(client, clock)

        first, second = await asyncio.gather(pipeline.process(RECORD), pipeline.process(RECORD))

        assert client.calls == ["SKU-1"]
        assert first.result.value == second.result.value
        assert sorted([first.attempts, second.attempts]) == [0, 1]
        assert len(pipeline.cache) == 0

"""Batch processing strategies for the keyword enrichment engine.

Strategy pattern implementation for different batch execution approaches.
"""

from seo_engine.core.batch.strategies.base import BatchStrategy, RecordHandler
from seo_engine.core.batch.strategies.bounded_strategy import ConcurrencyLimiter
from seo_engine.core.batch.strategies.sequential_strategy import SequentialBatchStrategy

__all__ = [
    "BatchStrategy",
    "RecordHandler",
    "ConcurrencyLimiter",
    "SequentialBatchStrategy",
    "select_strategy",
]


def select_strategy(concurrency_level: int) -> BatchStrategy:
    """Pick the strategy for a given worker count."""
    if concurrency_level <= 1:
        return SequentialBatchStrategy()
    return ConcurrencyLimiter(concurrency_level)

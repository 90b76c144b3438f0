"""Base batch processing strategy for the keyword enrichment engine.

Defines strategy interface following Strategy pattern (Open/Closed principle).
"""

from abc import ABC, abstractmethod
from typing import Awaitable, Callable, List

from seo_engine.core.batch.models import Record, RecordOutcome

RecordHandler = Callable[[Record], Awaitable[RecordOutcome]]


class BatchStrategy(ABC):
    """Abstract base class for batch processing strategies.

    Different strategies implement different execution approaches:
    - ConcurrencyLimiter: at most N record pipelines in flight at once
    - SequentialBatchStrategy: Processes records one by one (N == 1)

    Handlers never raise; every record yields a RecordOutcome.
    """

    @abstractmethod
    async def execute(self, records: List[Record], handler: RecordHandler) -> List[RecordOutcome]:
        """Run handler over records using this strategy.

        Args:
            records: Records of one category sub-group
            handler: Per-record pipeline returning a RecordOutcome

        Returns:
            Outcomes for every record, in no guaranteed order
        """
        pass

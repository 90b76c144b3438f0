"""Sequential batch processing strategy.

Processes records one by one. Selected when the job runs with a single worker.
"""

from typing import List

from seo_engine.core.batch.models import Record, RecordOutcome
from seo_engine.core.batch.strategies.base import BatchStrategy, RecordHandler
from seo_engine.core.logging import logger


class SequentialBatchStrategy(BatchStrategy):
    """Sequential batch processing strategy.

    Processes records one by one in input order.
    """

    limit = 1

    async def execute(self, records: List[Record], handler: RecordHandler) -> List[RecordOutcome]:
        logger.debug("sequential_group_started", records=len(records))

        outcomes = []
        for record in records:
            outcomes.append(await handler(record))
        return outcomes

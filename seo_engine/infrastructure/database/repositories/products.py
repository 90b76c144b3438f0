"""Product catalog repository for the keyword enrichment engine.

Reads products that still lack SEO keywords and writes generated keywords
back in bulk. Acts as both RecordSource and ResultSink for the scheduler.
The search_keywords column holds a JSON array of strings, the format the
admin backend parses; generated comma lists are converted on write.

Bulk writes go through one Postgres function so a page is persisted in a
single round trip and the database reports which SKUs it actually updated:

    create or replace function bulk_set_search_keywords(updates jsonb)
    returns setof text language sql as $$
      update web_products p
         set search_keywords = u.value, update_at = now()
        from jsonb_to_recordset(updates) as u(key text, value text)
       where p.sku = u.key
      returning p.sku;
    $$;
"""

import asyncio
from typing import Any, Dict, List, Optional

from seo_engine.config import config
from seo_engine.core.batch.interfaces import RecordSource, ResultSink
from seo_engine.core.batch.models import BulkWriteReport, Record, RecordFilter
from seo_engine.core.errors import PersistenceError
from seo_engine.core.logging import logger
from seo_engine.infrastructure.database.client import SupabaseClient
from seo_engine.infrastructure.database.repositories.base import BaseRepository
from seo_engine.utils.enrichment import keywords_to_json

NOT_WRITTEN_REASON = "product not updated"


def _in_list(values: List[str]) -> str:
    """PostgREST `in` list with every value double-quoted."""
    quoted = ",".join('"{}"'.format(v.replace('"', '\\"')) for v in values)
    return f"({quoted})"


class ProductRepository(BaseRepository[Record], RecordSource, ResultSink):
    """Repository for the product catalog table."""

    key_column = "sku"
    title_column = "title"
    category_column = "grupo"
    keywords_column = "search_keywords"
    bulk_function = "bulk_set_search_keywords"

    def __init__(self, client: Optional[SupabaseClient] = None, table: Optional[str] = None):
        super().__init__(client)
        self._table = table or config.products_table()

    def table_name(self) -> str:
        """Return table name."""
        return self._table

    def _columns(self) -> str:
        return ",".join(
            [self.key_column, self.title_column, self.category_column, self.keywords_column]
        )

    def _apply_filter(self, query, record_filter: RecordFilter):
        if record_filter.missing_only:
            query = query.is_(self.keywords_column, "null")
        if record_filter.include_categories:
            query = query.in_(self.category_column, record_filter.include_categories)
        if record_filter.exclude_categories:
            # NOT IN drops NULL categories, keep them in the remainder
            query = query.or_(
                f"{self.category_column}.is.null,"
                f"{self.category_column}.not.in.{_in_list(record_filter.exclude_categories)}"
            )
        return query

    def _row_to_model(self, row: Dict[str, Any]) -> Record:
        return Record(
            key=str(row[self.key_column]),
            title=row.get(self.title_column),
            category=row.get(self.category_column),
            keywords=row.get(self.keywords_column),
        )

    # Sync queries (run in worker threads by the async wrappers)

    def count_sync(self, record_filter: RecordFilter) -> int:
        query = self._client.table(self.table_name()).select(self.key_column, count="exact")
        result = self._apply_filter(query, record_filter).execute()
        return result.count or 0

    def page_sync(
        self, record_filter: RecordFilter, offset: int, limit: int, order_hint: str = "category"
    ) -> List[Record]:
        query = self._apply_filter(
            self._client.table(self.table_name()).select(self._columns()), record_filter
        )
        if order_hint == "category":
            query = query.order(self.category_column, nullsfirst=False)
        query = query.order(self.key_column).range(offset, offset + limit - 1)
        return [self._row_to_model(row) for row in query.execute().data or []]

    def get_sync(self, key: str) -> Optional[Record]:
        result = (
            self._client.table(self.table_name())
            .select(self._columns())
            .eq(self.key_column, key)
            .limit(1)
            .execute()
        )
        if not result.data:
            return None
        return self._row_to_model(result.data[0])

    def bulk_write_sync(self, updates: List[Dict[str, str]]) -> BulkWriteReport:
        """Persist one page of keywords.

        Raises:
            PersistenceError: If the bulk call itself fails
        """
        report = BulkWriteReport()
        payload = []
        for update in updates:
            try:
                payload.append({"key": update["key"], "value": keywords_to_json(update["value"])})
            except ValueError as e:
                report.failed[update["key"]] = str(e)

        if not payload:
            return report

        try:
            result = self._client.rpc(self.bulk_function, {"updates": payload}).execute()
        except Exception as e:
            raise PersistenceError(None, f"bulk write failed: {e}") from e

        written = set()
        for row in result.data or []:
            written.add(str(row[self.key_column] if isinstance(row, dict) else row))

        for update in payload:
            if update["key"] in written:
                report.succeeded.append(update["key"])
            else:
                report.failed[update["key"]] = NOT_WRITTEN_REASON

        logger.info(
            "products_keywords_written",
            requested=len(updates),
            sent=len(payload),
            written=len(report.succeeded),
            failed=len(report.failed),
        )
        return report

    # RecordSource / ResultSink

    async def count(self, record_filter: RecordFilter) -> int:
        return await asyncio.to_thread(self.count_sync, record_filter)

    async def page(
        self, record_filter: RecordFilter, offset: int, limit: int, order_hint: str = "category"
    ) -> List[Record]:
        return await asyncio.to_thread(self.page_sync, record_filter, offset, limit, order_hint)

    async def get(self, key: str) -> Optional[Record]:
        return await asyncio.to_thread(self.get_sync, key)

    async def bulk_write(self, updates: List[Dict[str, str]]) -> BulkWriteReport:
        return await asyncio.to_thread(self.bulk_write_sync, updates)

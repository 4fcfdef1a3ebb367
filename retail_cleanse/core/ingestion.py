"""
Record ingestion: source rows -> RawRecord.

Values are preserved verbatim; the only checks made here are schema-level
(every required column must be present), which abort the run before any
record is processed.
"""

import re
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from retail_cleanse.core.config import CleaningConfig
from retail_cleanse.core.errors import SchemaError
from retail_cleanse.core.models import RAW_FIELDS, RawRecord
from retail_cleanse.observability.logger import get_logger

logger = get_logger(__name__)


def column_key(name: str) -> str:
    """Reduce a column header to lowercase alphanumerics ("Order ID" -> "orderid")."""
    return re.sub(r"[^a-z0-9]", "", str(name).lower())


_FIELD_KEYS = {column_key(field): field for field in RAW_FIELDS}


class RecordIngestor:
    """
    Maps source rows onto RawRecords with a stable origin index.

    Source headers are matched to field names ignoring case and
    punctuation, so "OrderID", "order_id" and "Order Id" all feed
    ``order_id``.
    """

    def __init__(self, config: CleaningConfig | None = None):
        self.config = config or CleaningConfig()

    def resolve_columns(self, columns: Sequence[str]) -> dict[str, str]:
        """
        Match source columns to raw field names.

        Args:
            columns: Source column names

        Returns:
            Mapping of source column -> raw field name

        Raises:
            SchemaError: If a required field has no matching column
        """
        mapping: dict[str, str] = {}
        for column in columns:
            field = _FIELD_KEYS.get(column_key(column))
            if field is None:
                logger.debug(f"Ignoring unrecognized source column: {column}")
                continue
            if field in mapping.values():
                logger.warning(f"Column '{column}' duplicates field '{field}', ignoring")
                continue
            mapping[column] = field

        missing = [f for f in self.config.required_columns if f not in mapping.values()]
        if missing:
            raise SchemaError(missing)
        return mapping

    def ingest(
        self,
        rows: Iterable[Mapping[str, Any]],
        columns: Sequence[str] | None = None,
    ) -> list[RawRecord]:
        """
        Convert source rows to RawRecords in input order.

        Args:
            rows: Source rows, in the order they were read
            columns: Source column names (defaults to the keys of the first row)

        Returns:
            List of RawRecords; origin_index equals the row position

        Raises:
            SchemaError: If the source is missing required columns
        """
        rows = list(rows)
        if columns is None:
            if not rows:
                return []
            columns = list(rows[0].keys())

        mapping = self.resolve_columns(columns)

        records = []
        for index, row in enumerate(rows):
            values = {field: row.get(column) for column, field in mapping.items()}
            records.append(RawRecord(origin_index=index, **values))

        logger.info(f"Ingested {len(records)} records from {len(mapping)} columns")
        return records

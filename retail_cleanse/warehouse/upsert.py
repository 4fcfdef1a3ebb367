"""
Idempotent upsert operations for cleaning output.

Implements INSERT ... ON CONFLICT for reliable, idempotent writes so a
batch can be re-run against the same source without duplicating rows.
"""

import hashlib
import json

from retail_cleanse.core.models import CleanRecord, Rejection
from retail_cleanse.core.models.clean_record import CLEAN_FIELDS

from .connection import DatabaseConnectionPool


class CleanOrderWriter:
    """
    Upserts clean records into clean_orders keyed by (source_id, order_id).
    """

    UPSERT_SQL = """
        INSERT INTO clean_orders (
            source_id, origin_index, order_id, order_date, customer_name, country,
            product_id, product_name, category, quantity, unit_price,
            discount_code, sales_rep, payment_method, order_source, checksum
        )
        VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
        ON CONFLICT (source_id, order_id) DO UPDATE SET
            origin_index = EXCLUDED.origin_index,
            order_date = EXCLUDED.order_date,
            customer_name = EXCLUDED.customer_name,
            country = EXCLUDED.country,
            product_id = EXCLUDED.product_id,
            product_name = EXCLUDED.product_name,
            category = EXCLUDED.category,
            quantity = EXCLUDED.quantity,
            unit_price = EXCLUDED.unit_price,
            discount_code = EXCLUDED.discount_code,
            sales_rep = EXCLUDED.sales_rep,
            payment_method = EXCLUDED.payment_method,
            order_source = EXCLUDED.order_source,
            checksum = EXCLUDED.checksum,
            processed_at = now()
    """

    def __init__(self, pool: DatabaseConnectionPool):
        """
        Initialize clean order writer.

        Args:
            pool: Database connection pool
        """
        self.pool = pool

    def upsert_batch(self, records: list[CleanRecord], source_id: str, conn=None) -> int:
        """
        Upsert a batch of clean records in one transaction.

        Args:
            records: Clean records from one run
            source_id: Data source ID
            conn: Open connection whose transaction the caller commits;
                without one the batch commits on its own connection

        Returns:
            Number of records upserted
        """
        if not records:
            return 0

        data_tuples = [
            (source_id, record.origin_index)
            + tuple(getattr(record, name) for name in CLEAN_FIELDS)
            + (self.checksum(record),)
            for record in records
        ]

        if conn is not None:
            with conn.cursor() as cur:
                cur.executemany(self.UPSERT_SQL, data_tuples)
        else:
            with self.pool.get_connection() as conn:
                with conn.cursor() as cur:
                    cur.executemany(self.UPSERT_SQL, data_tuples)
                conn.commit()

        return len(records)

    @staticmethod
    def checksum(record: CleanRecord) -> str:
        """
        Calculate MD5 checksum of the record's output columns.

        Args:
            record: Clean record

        Returns:
            Hexadecimal checksum string
        """
        data_str = json.dumps(record.to_row(), sort_keys=True)
        return hashlib.md5(data_str.encode()).hexdigest()


class RejectionLedgerWriter:
    """
    Writes rejection ledger entries keyed by (source_id, origin_index).
    """

    UPSERT_SQL = """
        INSERT INTO rejection_ledger (
            source_id, origin_index, stage, reason_code, order_id, detail
        )
        VALUES (%s, %s, %s, %s, %s, %s)
        ON CONFLICT (source_id, origin_index) DO UPDATE SET
            stage = EXCLUDED.stage,
            reason_code = EXCLUDED.reason_code,
            order_id = EXCLUDED.order_id,
            detail = EXCLUDED.detail,
            rejected_at = now()
    """

    def __init__(self, pool: DatabaseConnectionPool):
        """
        Initialize rejection ledger writer.

        Args:
            pool: Database connection pool
        """
        self.pool = pool

    def write_batch(self, rejections: list[Rejection], source_id: str, conn=None) -> int:
        """
        Write a batch of rejections in one transaction.

        Args:
            rejections: Ledger entries from one run
            source_id: Data source ID
            conn: Open connection whose transaction the caller commits

        Returns:
            Number of entries written
        """
        if not rejections:
            return 0

        data_tuples = [
            (
                source_id,
                rejection.origin_index,
                rejection.stage,
                rejection.reason_code,
                rejection.order_id,
                rejection.detail,
            )
            for rejection in rejections
        ]

        if conn is not None:
            with conn.cursor() as cur:
                cur.executemany(self.UPSERT_SQL, data_tuples)
        else:
            with self.pool.get_connection() as conn:
                with conn.cursor() as cur:
                    cur.executemany(self.UPSERT_SQL, data_tuples)
                conn.commit()

        return len(rejections)

    def get_summary(self, source_id: str) -> list[dict]:
        """
        Count ledger entries per stage and reason for a source.

        Args:
            source_id: The data source ID

        Returns:
            Rows with stage, reason_code and count
        """
        query = """
            SELECT stage, reason_code, COUNT(*) AS count
            FROM rejection_ledger
            WHERE source_id = %s
            GROUP BY stage, reason_code
            ORDER BY stage, reason_code
        """
        return self.pool.execute_query(query, (source_id,))

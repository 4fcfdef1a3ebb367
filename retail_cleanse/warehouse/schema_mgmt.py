"""
Schema management for the cleaning output tables.

Handles DDL for the clean record table, the rejection ledger and the
audit trail.
"""

from retail_cleanse.observability.logger import get_logger

from .connection import DatabaseConnectionPool

logger = get_logger(__name__)

CLEAN_ORDERS_DDL = """
    CREATE TABLE IF NOT EXISTS clean_orders (
        source_id TEXT NOT NULL,
        order_id TEXT NOT NULL,
        origin_index INTEGER NOT NULL,
        order_date DATE NOT NULL,
        customer_name TEXT,
        country TEXT,
        product_id TEXT,
        product_name TEXT NOT NULL,
        category TEXT,
        quantity DOUBLE PRECISION NOT NULL CHECK (quantity > 0),
        unit_price DOUBLE PRECISION NOT NULL CHECK (unit_price > 0),
        discount_code TEXT,
        sales_rep TEXT,
        payment_method TEXT,
        order_source TEXT,
        checksum TEXT,
        processed_at TIMESTAMPTZ NOT NULL DEFAULT now(),
        PRIMARY KEY (source_id, order_id)
    )
"""

REJECTION_LEDGER_DDL = """
    CREATE TABLE IF NOT EXISTS rejection_ledger (
        source_id TEXT NOT NULL,
        origin_index INTEGER NOT NULL,
        stage TEXT NOT NULL,
        reason_code TEXT NOT NULL,
        order_id TEXT,
        detail TEXT,
        rejected_at TIMESTAMPTZ NOT NULL DEFAULT now(),
        PRIMARY KEY (source_id, origin_index)
    )
"""

AUDIT_LOG_DDL = """
    CREATE TABLE IF NOT EXISTS cleaning_audit_log (
        log_id BIGSERIAL PRIMARY KEY,
        source_id TEXT NOT NULL,
        origin_index INTEGER NOT NULL,
        order_id TEXT,
        transformation_type TEXT NOT NULL,
        field_name TEXT NOT NULL DEFAULT '',
        old_value TEXT,
        new_value TEXT,
        rule_applied TEXT,
        created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
        UNIQUE (source_id, origin_index, transformation_type, field_name)
    )
"""

TABLES = ("clean_orders", "rejection_ledger", "cleaning_audit_log")


class SchemaManager:
    """
    Creates and inspects the warehouse tables the pipeline writes to.
    """

    def __init__(self, pool: DatabaseConnectionPool):
        """
        Initialize schema manager.

        Args:
            pool: Database connection pool
        """
        self.pool = pool

    def create_tables(self) -> None:
        """Create the output tables if they do not exist."""
        for ddl in (CLEAN_ORDERS_DDL, REJECTION_LEDGER_DDL, AUDIT_LOG_DDL):
            self.pool.execute_command(ddl)
        logger.info(f"Ensured warehouse tables: {', '.join(TABLES)}")

    def table_counts(self, source_id: str) -> dict[str, int]:
        """
        Count rows per output table for a source.

        Args:
            source_id: The data source ID

        Returns:
            Table name -> row count
        """
        counts = {}
        for table in TABLES:
            rows = self.pool.execute_query(
                f"SELECT COUNT(*) AS count FROM {table} WHERE source_id = %s",
                (source_id,)
            )
            counts[table] = rows[0]["count"] if rows else 0
        return counts

"""
Batch warehouse writer for a completed cleaning run.

Writes clean records, the rejection ledger and the audit trail to PostgreSQL.
"""

from retail_cleanse.core.models import PipelineResult
from retail_cleanse.observability.lineage import LineageTracker
from retail_cleanse.observability.logger import get_logger
from retail_cleanse.observability.metrics import record_warehouse_write
from retail_cleanse.warehouse.connection import DatabaseConnectionPool
from retail_cleanse.warehouse.schema_mgmt import SchemaManager
from retail_cleanse.warehouse.upsert import CleanOrderWriter, RejectionLedgerWriter

logger = get_logger(__name__)


class BatchWarehouseWriter:
    """
    Writes the output of one pipeline run to the warehouse in bulk.
    """

    def __init__(self, pool: DatabaseConnectionPool, create_tables: bool = True):
        """
        Initialize batch warehouse writer.

        Args:
            pool: Database connection pool
            create_tables: Ensure output tables exist before the first write
        """
        self.pool = pool
        self.schema_manager = SchemaManager(pool)
        self.clean_writer = CleanOrderWriter(pool)
        self.ledger_writer = RejectionLedgerWriter(pool)
        self.create_tables = create_tables
        self._tables_ready = False

    def write_result(self, result: PipelineResult, source_id: str) -> dict[str, int]:
        """
        Write clean records, rejections and audit entries.

        All three tables are written in a single transaction; a failure in
        any of them rolls back the whole run.

        Args:
            result: Completed pipeline run
            source_id: Data source ID

        Returns:
            Rows written per table
        """
        if self.create_tables and not self._tables_ready:
            self.schema_manager.create_tables()
            self._tables_ready = True

        tracker = LineageTracker(self.pool)
        tracker.track(result.audit_log)

        # all three tables commit together or not at all
        with self.pool.get_connection() as conn:
            try:
                written = {
                    "clean_orders": self.clean_writer.upsert_batch(result.clean_records, source_id, conn=conn),
                    "rejection_ledger": self.ledger_writer.write_batch(result.rejections, source_id, conn=conn),
                    "cleaning_audit_log": tracker.flush(source_id, conn=conn),
                }
                conn.commit()
            except Exception as e:
                conn.rollback()
                logger.error(f"Warehouse write failed for {source_id}, rolled back: {e}", exc_info=True)
                raise

        for table, count in written.items():
            record_warehouse_write(source_id, table, count)

        logger.info(f"Warehouse write complete for {source_id}", extra={"rows_written": written})
        return written

"""
Data lineage tracking for the cleaning audit trail.

This module provides a LineageTracker class that collects the per-field
modifications made to kept records and optionally persists them.
"""

from retail_cleanse.core.models.audit_log import AuditLog
from retail_cleanse.observability.logger import get_logger
from retail_cleanse.warehouse.audit import insert_audit_logs_batch
from retail_cleanse.warehouse.connection import DatabaseConnectionPool

logger = get_logger(__name__)


class LineageTracker:
    """
    Collects AuditLog entries for records that made it into the output.

    Entries are staged per record by the normalizers and imputation
    engine and only tracked here once the record is accepted, so the
    trail never references rejected rows.

    Usage:
        tracker = LineageTracker()
        tracker.track(entries)
        tracker.flush(source_id="orders")  # requires a pool
    """

    def __init__(self, pool: DatabaseConnectionPool | None = None):
        """
        Initialize lineage tracker.

        Args:
            pool: Database connection pool (optional; only needed for flush)
        """
        self.pool = pool
        self._logs: list[AuditLog] = []

    def track(self, entries: list[AuditLog]) -> None:
        """Track entries staged for an accepted record."""
        self._logs.extend(entries)

    @property
    def entries(self) -> list[AuditLog]:
        """All tracked entries ordered by origin index, stable within a record."""
        return sorted(self._logs, key=lambda entry: entry.origin_index)

    def count_by_type(self) -> dict[str, int]:
        """Count tracked entries by transformation type."""
        counts: dict[str, int] = {}
        for entry in self._logs:
            counts[entry.transformation_type] = counts.get(entry.transformation_type, 0) + 1
        return counts

    def flush(self, source_id: str, conn=None) -> int:
        """
        Write all tracked entries to the database.

        Args:
            source_id: Source the entries belong to
            conn: Open connection whose transaction the caller commits

        Returns:
            Number of audit log entries written

        Raises:
            RuntimeError: If pool not configured
        """
        if not self.pool:
            raise RuntimeError("No database pool configured, cannot flush audit logs")

        if not self._logs:
            return 0

        count = insert_audit_logs_batch(self.pool, source_id, self.entries, conn=conn)
        logger.info(f"Flushed {count} audit log entries to database")
        self._logs.clear()
        return count

"""
Audit log operations for data lineage tracking.

This module provides functions to insert and query the cleaning audit
trail persisted in cleaning_audit_log.
"""

from typing import Any

import psycopg

from retail_cleanse.core.models.audit_log import AuditLog
from retail_cleanse.observability.logger import get_logger
from retail_cleanse.warehouse.connection import DatabaseConnectionPool

logger = get_logger(__name__)

INSERT_SQL = """
    INSERT INTO cleaning_audit_log (
        source_id,
        origin_index,
        order_id,
        transformation_type,
        field_name,
        old_value,
        new_value,
        rule_applied
    ) VALUES (
        %(source_id)s,
        %(origin_index)s,
        %(order_id)s,
        %(transformation_type)s,
        COALESCE(%(field_name)s::text, ''),
        %(old_value)s,
        %(new_value)s,
        %(rule_applied)s
    )
    ON CONFLICT (source_id, origin_index, transformation_type, field_name) DO UPDATE SET
        order_id = EXCLUDED.order_id,
        old_value = EXCLUDED.old_value,
        new_value = EXCLUDED.new_value,
        rule_applied = EXCLUDED.rule_applied;
"""


def insert_audit_logs_batch(
    pool: DatabaseConnectionPool,
    source_id: str,
    audit_logs: list[AuditLog],
    conn=None,
) -> int:
    """
    Insert multiple audit log entries in batch.

    Re-running a source replaces entries for the same record, change type
    and field instead of duplicating them.

    Args:
        pool: Database connection pool
        source_id: Source the entries belong to
        audit_logs: List of AuditLog model instances
        conn: Open connection whose transaction the caller commits

    Returns:
        count: Number of audit log entries written

    Raises:
        psycopg.DatabaseError: If batch insert fails
    """
    if not audit_logs:
        return 0

    params = [
        {
            "source_id": source_id,
            "origin_index": log.origin_index,
            "order_id": log.order_id,
            "transformation_type": log.transformation_type,
            "field_name": log.field_name,
            "old_value": log.old_value,
            "new_value": log.new_value,
            "rule_applied": log.rule_applied,
        }
        for log in audit_logs
    ]

    try:
        if conn is not None:
            with conn.cursor() as cur:
                cur.executemany(INSERT_SQL, params)
        else:
            with pool.get_connection() as conn:
                with conn.cursor() as cur:
                    cur.executemany(INSERT_SQL, params)
                conn.commit()

    except psycopg.DatabaseError as e:
        logger.error(f"Failed to insert audit logs batch: {e}")
        raise

    count = len(audit_logs)
    logger.info(f"Inserted {count} audit log entries in batch")
    return count


def query_audit_logs_by_order(
    pool: DatabaseConnectionPool,
    source_id: str,
    order_id: str,
) -> list[dict[str, Any]]:
    """
    Query audit log entries for a specific order.

    Args:
        pool: Database connection pool
        source_id: Source the order was read from
        order_id: Canonical order id

    Returns:
        List of audit log entries as dictionaries, in application order

    Raises:
        psycopg.DatabaseError: If query fails
    """
    query_sql = """
        SELECT
            origin_index,
            order_id,
            transformation_type,
            field_name,
            old_value,
            new_value,
            rule_applied,
            created_at
        FROM cleaning_audit_log
        WHERE source_id = %s AND order_id = %s
        ORDER BY log_id;
    """

    try:
        return pool.execute_query(query_sql, (source_id, order_id))
    except psycopg.DatabaseError as e:
        logger.error(f"Failed to query audit logs for order {order_id}: {e}")
        raise

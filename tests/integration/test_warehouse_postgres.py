"""
Integration tests for the PostgreSQL sink.

Requires Docker for the PostgreSQL testcontainer; tests skip otherwise.
"""

import pytest

from retail_cleanse.batch.pipeline import CleaningPipeline
from retail_cleanse.batch.writers import BatchWarehouseWriter
from retail_cleanse.warehouse.audit import query_audit_logs_by_order
from retail_cleanse.warehouse.schema_mgmt import SchemaManager
from retail_cleanse.warehouse.upsert import RejectionLedgerWriter

pytestmark = pytest.mark.integration


@pytest.fixture
def result(make_row):
    rows = [
        make_row(order_id="1", quantity="-2"),
        make_row(order_id="???"),
        make_row(order_id="2", unit_price="0"),
        make_row(order_id="2"),
    ]
    return CleaningPipeline().run(rows, source_id="pg")


def test_write_result(warehouse_pool, result):
    """Test clean records, ledger and audit trail land in their tables"""
    written = BatchWarehouseWriter(warehouse_pool).write_result(result, source_id="pg")

    assert written["clean_orders"] == 2
    assert written["rejection_ledger"] == 2
    assert SchemaManager(warehouse_pool).table_counts("pg") == {
        "clean_orders": 2,
        "rejection_ledger": 2,
        "cleaning_audit_log": len(result.audit_log),
    }

    rows = warehouse_pool.execute_query(
        "SELECT order_id, quantity, unit_price FROM clean_orders WHERE source_id = %s ORDER BY order_id",
        ("pg",)
    )
    assert [(r["order_id"], r["quantity"], r["unit_price"]) for r in rows] == [
        ("1", 2.0, 49.99),
        ("2", 2.0, 49.99),
    ]


def test_rerun_is_idempotent(warehouse_pool, result):
    """Test writing the same run twice leaves the same rows"""
    writer = BatchWarehouseWriter(warehouse_pool)
    writer.write_result(result, source_id="pg")
    first = SchemaManager(warehouse_pool).table_counts("pg")

    writer.write_result(result, source_id="pg")

    assert SchemaManager(warehouse_pool).table_counts("pg") == first


def test_ledger_summary(warehouse_pool, result):
    """Test the ledger can be summarized by reason"""
    BatchWarehouseWriter(warehouse_pool).write_result(result, source_id="pg")

    summary = RejectionLedgerWriter(warehouse_pool).get_summary("pg")

    assert {(r["reason_code"], r["count"]) for r in summary} == {("invalid_id", 1), ("duplicate_id", 1)}


def test_audit_trail_query(warehouse_pool, result):
    """Test an order's modifications can be read back"""
    BatchWarehouseWriter(warehouse_pool).write_result(result, source_id="pg")

    entries = query_audit_logs_by_order(warehouse_pool, "pg", "1")

    assert [e["transformation_type"] for e in entries] == ["sign_correction"]
    assert entries[0]["old_value"] == "-2"

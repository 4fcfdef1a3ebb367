"""
Prometheus metrics collection for retail-cleanse

This module provides metrics instrumentation for monitoring cleaning
runs, data quality and warehouse writes.
"""
import os

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
)

from retail_cleanse.core.models import PipelineResult

# Global registry for metrics
REGISTRY = CollectorRegistry()


# =======================
# PIPELINE METRICS
# =======================

records_ingested_total = Counter(
    name="cleaning_records_ingested_total",
    documentation="Total number of raw records ingested",
    labelnames=["source_id"],
    registry=REGISTRY,
)

records_cleaned_total = Counter(
    name="cleaning_records_cleaned_total",
    documentation="Total number of clean records produced",
    labelnames=["source_id"],
    registry=REGISTRY,
)

run_duration_seconds = Histogram(
    name="cleaning_run_duration_seconds",
    documentation="Time spent on a full cleaning run in seconds",
    labelnames=["source_id"],
    buckets=[0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0, 120.0],
    registry=REGISTRY,
)

runs_processed_total = Counter(
    name="cleaning_runs_processed_total",
    documentation="Total number of cleaning runs",
    labelnames=["source_id", "status"],  # status: balanced, unbalanced
    registry=REGISTRY,
)

# =======================
# DATA QUALITY METRICS
# =======================

records_rejected_total = Counter(
    name="cleaning_records_rejected_total",
    documentation="Total number of rejected records",
    labelnames=["source_id", "stage", "reason_code"],
    registry=REGISTRY,
)

field_transformations_total = Counter(
    name="cleaning_field_transformations_total",
    documentation="Total number of field modifications on kept records",
    labelnames=["source_id", "transformation_type"],
    registry=REGISTRY,
)

unmapped_country_values = Gauge(
    name="cleaning_unmapped_country_values",
    documentation="Distinct country values without an alias entry in the last run",
    labelnames=["source_id"],
    registry=REGISTRY,
)

# =======================
# WAREHOUSE METRICS
# =======================

warehouse_writes_total = Counter(
    name="cleaning_warehouse_writes_total",
    documentation="Total number of rows written to the warehouse",
    labelnames=["source_id", "table"],
    registry=REGISTRY,
)


# =======================
# HELPER FUNCTIONS
# =======================

def start_metrics_server(port: int | None = None) -> None:
    """
    Start HTTP server for Prometheus metrics

    Args:
        port: Port to listen on (defaults to env var METRICS_PORT or 8000)
    """
    # Lazy import: avoids binding a port on import
    from prometheus_client import start_http_server

    metrics_port = port or int(os.getenv("METRICS_PORT", "8000"))
    start_http_server(metrics_port, registry=REGISTRY)


def record_pipeline_run(source_id: str, result: PipelineResult, duration_seconds: float) -> None:
    """
    Record metrics for a completed cleaning run.

    Args:
        source_id: Data source ID
        result: The run's result
        duration_seconds: Wall-clock duration of the run
    """
    report = result.report

    records_ingested_total.labels(source_id=source_id).inc(report.input_count)
    records_cleaned_total.labels(source_id=source_id).inc(report.output_count)

    for rejection in result.rejections:
        records_rejected_total.labels(
            source_id=source_id,
            stage=rejection.stage,
            reason_code=rejection.reason_code,
        ).inc()

    for entry in result.audit_log:
        field_transformations_total.labels(
            source_id=source_id,
            transformation_type=entry.transformation_type,
        ).inc()

    unmapped_country_values.labels(source_id=source_id).set(len(report.unmapped_countries))
    run_duration_seconds.labels(source_id=source_id).observe(duration_seconds)

    status = "balanced" if report.is_balanced else "unbalanced"
    runs_processed_total.labels(source_id=source_id, status=status).inc()


def record_warehouse_write(source_id: str, table: str, row_count: int) -> None:
    """Record rows written to a warehouse table."""
    if row_count > 0:
        warehouse_writes_total.labels(source_id=source_id, table=table).inc(row_count)

"""
Batch cleaning pipeline orchestration.

Coordinates the flow: ingest → resolve identity → normalize → impute → route
"""

import time
from collections import Counter
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import Any

from pyspark.sql import SparkSession

from retail_cleanse.batch.readers import FileReader
from retail_cleanse.batch.writers import BatchFileWriter, BatchWarehouseWriter
from retail_cleanse.core.config import CleaningConfig
from retail_cleanse.core.identity import IdentityResolver
from retail_cleanse.core.imputation import ImputationEngine, build_tables
from retail_cleanse.core.ingestion import RecordIngestor
from retail_cleanse.core.models import (
    CleanRecord,
    PipelineResult,
    RawRecord,
    ReconciliationReport,
    Rejection,
)
from retail_cleanse.core.normalizers import NormalizedRecord, NormalizerEngine
from retail_cleanse.observability.lineage import LineageTracker
from retail_cleanse.observability.logger import get_logger, log_operation
from retail_cleanse.observability.metrics import record_pipeline_run
from retail_cleanse.warehouse.connection import DatabaseConnectionPool

logger = get_logger(__name__)


class CleaningPipeline:
    """
    Runs the cleaning stages over one batch of records.

    Flow:
    1. Ingest rows into RawRecords (schema check, origin index)
    2. Resolve identity (reject invalid ids, keep first of each duplicate)
    3. Normalize fields (may reject on date or product)
    4. Build imputation tables, then fill quantity/price gaps
    5. Assemble clean records, rejection ledger, audit trail and report

    A record rejected at any stage goes no further; other records are
    unaffected. Nothing is returned until the whole batch is processed.
    """

    def __init__(self, config: CleaningConfig | None = None):
        """
        Initialize the pipeline.

        Args:
            config: Cleaning tables (defaults to built-in tables)
        """
        self.config = config or CleaningConfig()
        self.ingestor = RecordIngestor(self.config)
        self.identity_resolver = IdentityResolver(self.config)
        self.normalizer_engine = NormalizerEngine(self.config)
        self.imputation_engine = ImputationEngine()
        logger.debug("Normalizers loaded", extra=self.normalizer_engine.get_rule_summary())

    def run(
        self,
        rows: Iterable[Mapping[str, Any]],
        columns: Sequence[str] | None = None,
        source_id: str = "default",
    ) -> PipelineResult:
        """
        Clean a batch of source rows.

        Args:
            rows: Source rows in input order
            columns: Source column names (defaults to the first row's keys)
            source_id: Data source ID, used for logs and metrics

        Returns:
            PipelineResult with clean records, ledger, audit trail and report

        Raises:
            SchemaError: If the source is missing required columns
        """
        start = time.time()

        with log_operation("Record ingestion", logger=logger, source_id=source_id):
            records = self.ingestor.ingest(rows, columns)

        result = self.run_records(records, source_id=source_id)
        record_pipeline_run(source_id, result, time.time() - start)
        return result

    def run_records(self, records: list[RawRecord], source_id: str = "default") -> PipelineResult:
        """
        Clean already-ingested records.

        Args:
            records: RawRecords with unique origin indexes
            source_id: Data source ID, used for logs

        Returns:
            PipelineResult
        """
        records = sorted(records, key=lambda r: r.origin_index)
        rejections: list[Rejection] = []

        with log_operation("Identity resolution", logger=logger, source_id=source_id):
            resolution = self.identity_resolver.resolve(records)
            rejections.extend(resolution.rejected)

        normalized: list[NormalizedRecord] = []
        with log_operation("Field normalization", logger=logger, source_id=source_id):
            for order_id, record in resolution.kept:
                outcome = self.normalizer_engine.normalize_record(order_id, record)
                if isinstance(outcome, Rejection):
                    rejections.append(outcome)
                else:
                    normalized.append(outcome)

        clean_records: list[CleanRecord] = []
        tracker = LineageTracker()
        unmapped: Counter[str] = Counter()
        with log_operation("Imputation", logger=logger, source_id=source_id):
            tables = build_tables(normalized)
            for record in normalized:
                outcome, changes = self.imputation_engine.apply(record, tables)
                if isinstance(outcome, Rejection):
                    rejections.append(outcome)
                    continue
                clean_records.append(outcome)
                tracker.track(record.changes + changes)
                if record.unmapped_country is not None:
                    unmapped[record.unmapped_country] += 1

        rejections.sort(key=lambda r: r.origin_index)
        for rejection in rejections:
            logger.debug(
                f"Rejected origin index {rejection.origin_index}: "
                f"{rejection.stage}/{rejection.reason_code}"
            )
        for value, count in sorted(unmapped.items()):
            logger.warning(f"Country value {value!r} has no alias entry ({count} records)")

        report = self._build_report(len(records), clean_records, rejections, tracker, unmapped)
        if not report.is_balanced:
            logger.error(
                f"Reconciliation failed: {report.input_count} in, "
                f"{report.output_count} out, {report.rejected_count} rejected"
            )

        logger.info(
            f"Cleaning complete: {report.output_count} clean, {report.rejected_count} rejected",
            extra={"source_id": source_id, "rejections": report.rejections_by_reason},
        )
        return PipelineResult(
            clean_records=clean_records,
            rejections=rejections,
            audit_log=tracker.entries,
            report=report,
        )

    def _build_report(
        self,
        input_count: int,
        clean_records: list[CleanRecord],
        rejections: list[Rejection],
        tracker: LineageTracker,
        unmapped: Counter,
    ) -> ReconciliationReport:
        by_reason = Counter(r.reason_code for r in rejections)
        by_stage = Counter(r.stage for r in rejections)
        transformations = tracker.count_by_type()

        return ReconciliationReport(
            input_count=input_count,
            output_count=len(clean_records),
            rejections_by_reason=dict(by_reason),
            rejections_by_stage=dict(by_stage),
            imputed_quantities=transformations.get("quantity_imputation", 0),
            imputed_prices=transformations.get("price_imputation", 0),
            sign_corrections=transformations.get("sign_correction", 0),
            unmapped_countries=dict(unmapped),
        )


class BatchPipeline:
    """
    File-to-sink batch job around CleaningPipeline.

    Flow:
    1. Read file with Spark (CSV/JSON/Parquet) in source order
    2. Clean the collected rows
    3. Write clean records and ledger to files and/or the warehouse

    Sinks are written only after the cleaning pass has completed.
    """

    def __init__(
        self,
        spark: SparkSession,
        pool: DatabaseConnectionPool | None = None,
        config: CleaningConfig | None = None
    ):
        """
        Initialize batch pipeline.

        Args:
            spark: Active Spark session
            pool: Database connection pool (None disables warehouse writes)
            config: Cleaning tables
        """
        self.spark = spark
        self.pool = pool
        self.file_reader = FileReader(spark)
        self.file_writer = BatchFileWriter(spark)
        self.warehouse_writer = BatchWarehouseWriter(pool) if pool else None
        self.cleaning_pipeline = CleaningPipeline(config)

    def process_file(
        self,
        file_path: str,
        source_id: str,
        file_format: str = "csv",
        output_dir: str | None = None,
        output_format: str = "csv",
        dry_run: bool = False,
        **read_options
    ) -> PipelineResult:
        """
        Process a file through the complete pipeline.

        Args:
            file_path: Path to input file
            source_id: Data source ID
            file_format: Input format (csv, json, parquet)
            output_dir: Directory for clean/ledger/audit output files
            output_format: Output file format (csv, json, parquet)
            dry_run: Clean and report without writing any sink
            **read_options: Additional read options

        Returns:
            PipelineResult of the run
        """
        logger.info(f"Starting batch cleaning for file: {file_path}")

        rows, columns = self.file_reader.read_rows(file_path, file_format=file_format, **read_options)
        result = self.cleaning_pipeline.run(rows, columns=columns, source_id=source_id)

        if dry_run:
            logger.info("DRY RUN: no output written")
            return result

        if output_dir:
            self.file_writer.write_result(result, Path(output_dir), output_format=output_format)

        if self.warehouse_writer:
            self.warehouse_writer.write_result(result, source_id=source_id)

        logger.info("Batch cleaning complete")
        return result

"""
Batch file writer for clean records, the rejection ledger and the audit trail.
"""

from pathlib import Path

from pyspark.sql import DataFrame, SparkSession
from pyspark.sql.types import DateType, DoubleType, IntegerType, StringType, StructField, StructType

from retail_cleanse.core.models import PipelineResult
from retail_cleanse.core.models.clean_record import CLEAN_FIELDS
from retail_cleanse.observability.logger import get_logger

logger = get_logger(__name__)

CLEAN_SCHEMA = StructType(
    [
        StructField("order_id", StringType(), False),
        StructField("order_date", DateType(), False),
        StructField("customer_name", StringType(), True),
        StructField("country", StringType(), True),
        StructField("product_id", StringType(), True),
        StructField("product_name", StringType(), False),
        StructField("category", StringType(), True),
        StructField("quantity", DoubleType(), False),
        StructField("unit_price", DoubleType(), False),
        StructField("discount_code", StringType(), True),
        StructField("sales_rep", StringType(), True),
        StructField("payment_method", StringType(), True),
        StructField("order_source", StringType(), True),
    ]
)

REJECTION_SCHEMA = StructType(
    [
        StructField("origin_index", IntegerType(), False),
        StructField("stage", StringType(), False),
        StructField("reason_code", StringType(), False),
        StructField("order_id", StringType(), True),
        StructField("detail", StringType(), True),
    ]
)

AUDIT_SCHEMA = StructType(
    [
        StructField("origin_index", IntegerType(), False),
        StructField("order_id", StringType(), True),
        StructField("transformation_type", StringType(), False),
        StructField("field_name", StringType(), True),
        StructField("old_value", StringType(), True),
        StructField("new_value", StringType(), True),
        StructField("rule_applied", StringType(), True),
    ]
)

OUTPUT_FORMATS = ("csv", "json", "parquet")


class BatchFileWriter:
    """
    Writes the output of one pipeline run as Spark files.

    Layout under the output directory:
        clean/       clean records (13 canonical columns)
        rejections/  rejection ledger
        audit/       audit trail for kept records
    """

    def __init__(self, spark: SparkSession):
        """
        Initialize file writer.

        Args:
            spark: Active Spark session
        """
        self.spark = spark

    def to_dataframes(self, result: PipelineResult) -> dict[str, DataFrame]:
        """Build one DataFrame per output, rows in origin order."""
        clean_rows = [
            tuple(getattr(record, name) for name in CLEAN_FIELDS)
            for record in result.clean_records
        ]
        rejection_rows = [
            (r.origin_index, r.stage, r.reason_code, r.order_id, r.detail)
            for r in result.rejections
        ]
        audit_rows = [
            (
                a.origin_index,
                a.order_id,
                a.transformation_type,
                a.field_name,
                a.old_value,
                a.new_value,
                a.rule_applied,
            )
            for a in result.audit_log
        ]

        return {
            "clean": self.spark.createDataFrame(clean_rows, CLEAN_SCHEMA),
            "rejections": self.spark.createDataFrame(rejection_rows, REJECTION_SCHEMA),
            "audit": self.spark.createDataFrame(audit_rows, AUDIT_SCHEMA),
        }

    def write_result(
        self,
        result: PipelineResult,
        output_dir: Path,
        output_format: str = "csv"
    ) -> dict[str, Path]:
        """
        Write clean records, rejections and audit entries.

        Each output is coalesced to a single part file so row order is kept.

        Args:
            result: Completed pipeline run
            output_dir: Base output directory (existing outputs are overwritten)
            output_format: csv, json or parquet

        Returns:
            Output name -> directory written

        Raises:
            ValueError: If the output format is unsupported
        """
        output_format = output_format.lower()
        if output_format not in OUTPUT_FORMATS:
            raise ValueError(f"Unsupported output format: {output_format}")

        paths = {}
        for name, df in self.to_dataframes(result).items():
            path = output_dir / name
            writer = df.coalesce(1).write.mode("overwrite")
            if output_format == "csv":
                writer = writer.option("header", "true")
            writer.format(output_format).save(str(path))
            paths[name] = path

        logger.info(
            f"Wrote {len(result.clean_records)} clean records and "
            f"{len(result.rejections)} rejections to {output_dir}"
        )
        return paths

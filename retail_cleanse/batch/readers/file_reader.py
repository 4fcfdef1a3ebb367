"""
Generic file reader for multiple formats (CSV, JSON, Parquet).
"""

from typing import Any

from pyspark.sql import DataFrame, SparkSession
from pyspark.sql.functions import monotonically_increasing_id
from pyspark.sql.types import StructType

from .csv_reader import CSVReader

ORIGIN_COLUMN = "_origin_position"


class FileReader:
    """
    Generic file reader supporting multiple formats.
    """

    def __init__(self, spark: SparkSession):
        """
        Initialize file reader.

        Args:
            spark: Active Spark session
        """
        self.spark = spark
        self.csv_reader = CSVReader(spark)

    def read(
        self,
        file_path: str,
        file_format: str = "csv",
        schema: StructType | None = None,
        **options
    ) -> DataFrame:
        """
        Read file into Spark DataFrame.

        Args:
            file_path: Path to file
            file_format: Format (csv, json, parquet)
            schema: Optional explicit schema
            **options: Format-specific options

        Returns:
            Spark DataFrame

        Raises:
            ValueError: If file format is unsupported
        """
        if file_format.lower() == "csv":
            return self.csv_reader.read(
                file_path,
                schema=schema,
                **options
            )
        elif file_format.lower() == "json":
            reader = self.spark.read
            if schema:
                reader = reader.schema(schema)
            return reader.option("primitivesAsString", "true").json(file_path)
        elif file_format.lower() == "parquet":
            return self.spark.read.parquet(file_path)
        else:
            raise ValueError(f"Unsupported file format: {file_format}")

    def read_rows(
        self,
        file_path: str,
        file_format: str = "csv",
        **options
    ) -> tuple[list[dict[str, Any]], list[str]]:
        """
        Read a file and collect its rows in source order.

        Spark assigns monotonically increasing ids in partition order, which
        for a file source follows the order rows appear in the file. Rows
        are sorted on that id before collection so duplicate tie-breaking
        downstream sees the file's order.

        Returns:
            (rows as dictionaries, source column names)
        """
        df = self.read(file_path, file_format=file_format, **options)
        columns = list(df.columns)

        ordered = df.withColumn(ORIGIN_COLUMN, monotonically_increasing_id()).orderBy(ORIGIN_COLUMN)
        rows = []
        for row in ordered.collect():
            record = row.asDict()
            record.pop(ORIGIN_COLUMN, None)
            rows.append(record)

        return rows, columns

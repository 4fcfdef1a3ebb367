"""
CSV reader using Spark for batch processing.
"""

from pyspark.sql import DataFrame, SparkSession
from pyspark.sql.types import StructType


class CSVReader:
    """
    Reads CSV files using Spark.

    Columns are read as strings unless an explicit schema is given, so
    raw values reach the cleaning stages verbatim.
    """

    def __init__(self, spark: SparkSession):
        """
        Initialize CSV reader.

        Args:
            spark: Active Spark session
        """
        self.spark = spark

    def read(
        self,
        file_path: str,
        schema: StructType | None = None,
        header: bool = True,
        delimiter: str = ",",
        encoding: str = "UTF-8"
    ) -> DataFrame:
        """
        Read CSV file into Spark DataFrame.

        Args:
            file_path: Path to CSV file
            schema: Optional explicit schema
            header: Whether CSV has header row
            delimiter: Field delimiter
            encoding: File encoding

        Returns:
            Spark DataFrame
        """
        reader = self.spark.read

        if schema:
            reader = reader.schema(schema)
        else:
            reader = reader.option("inferSchema", "false")

        df = reader \
            .option("header", str(header).lower()) \
            .option("delimiter", delimiter) \
            .option("encoding", encoding) \
            .option("mode", "PERMISSIVE") \
            .option("ignoreLeadingWhiteSpace", "false") \
            .option("ignoreTrailingWhiteSpace", "false") \
            .csv(file_path)

        return df

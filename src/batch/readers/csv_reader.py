"""
CSV reader using Spark for batch processing.
"""

from pyspark.sql import DataFrame, SparkSession
from pyspark.sql.types import StructType


class CSVReader:
    """
    Reads delimited text files using Spark with an explicit schema.
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
        schema: StructType,
        header: bool = True,
        delimiter: str = ","
    ) -> DataFrame:
        """
        Read CSV file into Spark DataFrame.

        Values that do not parse as their schema type become null
        (PERMISSIVE mode); surrounding whitespace is preserved.

        Args:
            file_path: Path to CSV file
            schema: Explicit schema, in file column order
            header: Whether the first row is a header to skip
            delimiter: Field delimiter

        Returns:
            Spark DataFrame
        """
        df = self.spark.read \
            .schema(schema) \
            .option("header", str(header).lower()) \
            .option("delimiter", delimiter) \
            .option("mode", "PERMISSIVE") \
            .option("ignoreLeadingWhiteSpace", "false") \
            .option("ignoreTrailingWhiteSpace", "false") \
            .csv(file_path)

        return df

"""
Raw store reader: loads the six raw source tables of one snapshot.
"""

from pathlib import Path

from pyspark.errors import AnalysisException
from pyspark.sql import DataFrame, SparkSession

from src.core.config import PipelineConfig
from src.core.errors import IngestionError
from src.core.models import RawSource
from src.core.schema import RAW_SCHEMAS
from src.observability.logger import get_logger

from .csv_reader import CSVReader

logger = get_logger(__name__)


class RawStoreReader:
    """
    Reads raw source files into DataFrames with the raw table schemas.
    """

    def __init__(self, spark: SparkSession):
        """
        Initialize raw store reader.

        Args:
            spark: Active Spark session
        """
        self.spark = spark
        self.csv_reader = CSVReader(spark)

    def read_source(self, source: RawSource) -> DataFrame:
        """
        Read one raw table.

        Args:
            source: Where and how the table's file is stored

        Returns:
            Raw DataFrame with the table's schema

        Raises:
            IngestionError: If the table is unknown or its file is missing or unreadable
        """
        schema = RAW_SCHEMAS.get(source.table)
        if schema is None:
            raise IngestionError(source.table, "no raw schema is defined for this table")

        # Only local paths can be checked up front
        if "://" not in source.source_path and not Path(source.source_path).exists():
            raise IngestionError(source.table, f"source file not found: {source.source_path}")

        logger.info(f"Reading raw table {source.table} from {source.source_path}")
        try:
            return self.csv_reader.read(
                source.source_path,
                schema=schema,
                header=source.header_row_present,
                delimiter=source.field_delimiter,
            )
        except AnalysisException as e:
            raise IngestionError(source.table, f"source file is unreadable: {e}") from e

    def read_snapshot(self, config: PipelineConfig) -> dict[str, DataFrame]:
        """
        Read every raw table named in RAW_SCHEMAS.

        Args:
            config: Pipeline configuration holding the sources

        Returns:
            Raw table name -> DataFrame

        Raises:
            IngestionError: If a source is not configured or cannot be read
        """
        raw = {}
        for table in RAW_SCHEMAS:
            if table not in config.sources:
                raise IngestionError(table, "no source is configured for this table")
            raw[table] = self.read_source(config.source_for(table))
        return raw

"""
Batch warehouse writer for the canonical and dimensional tables.

Collects every DataFrame of a snapshot and hands the rows to the
snapshot publisher in one go.
"""

from datetime import datetime

from pyspark.errors import PySparkException
from pyspark.sql import DataFrame

from src.core.errors import TransformationError
from src.core.schema import CANONICAL_SCHEMAS, GOLD_SCHEMA, GOLD_SCHEMAS, SILVER_SCHEMA
from src.warehouse.connection import DatabaseConnectionPool
from src.warehouse.publish import SnapshotPublisher, StagedTable


class BatchWarehouseWriter:
    """
    Writes a full silver and gold snapshot from Spark to the warehouse.
    """

    def __init__(self, pool: DatabaseConnectionPool):
        """
        Initialize batch warehouse writer.

        Args:
            pool: Database connection pool
        """
        self.pool = pool
        self.publisher = SnapshotPublisher(pool)

    def stage_dataframe(self, schema_name: str, table: str, df: DataFrame) -> StagedTable:
        """
        Collect a DataFrame into a staged table.

        Raises:
            TransformationError: If Spark fails to compute the table
        """
        try:
            rows = [tuple(row) for row in df.collect()]
        except PySparkException as e:
            raise TransformationError(table, f"failed to compute table: {e}") from e
        return StagedTable(schema_name, table, list(df.columns), rows)

    def stage(
        self,
        canonical: dict[str, DataFrame],
        gold: dict[str, DataFrame]
    ) -> list[StagedTable]:
        """
        Stage all silver tables, then all gold tables.

        Everything is computed before the warehouse is touched, so a
        failing table cannot leave a partial snapshot behind.
        """
        staged = [
            self.stage_dataframe(SILVER_SCHEMA, table, canonical[table])
            for table in CANONICAL_SCHEMAS
        ]
        staged += [
            self.stage_dataframe(GOLD_SCHEMA, table, gold[table])
            for table in GOLD_SCHEMAS
        ]
        return staged

    def write_snapshot(
        self,
        canonical: dict[str, DataFrame],
        gold: dict[str, DataFrame],
        written_at: datetime | None = None
    ) -> dict[str, int]:
        """
        Replace the warehouse contents with this snapshot.

        Args:
            canonical: Canonical table name -> DataFrame
            gold: Dimension/fact table name -> DataFrame
            written_at: Value of the audit column

        Returns:
            Qualified table name -> rows written
        """
        return self.publisher.publish(self.stage(canonical, gold), written_at)

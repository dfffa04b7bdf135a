"""
Batch warehouse pipeline orchestration.

Coordinates the flow: ingest → transform → model → publish → verify
"""

import uuid
from datetime import datetime
from typing import Optional

from pyspark.errors import PySparkException
from pyspark.sql import DataFrame, SparkSession

from src.batch.readers import RawStoreReader
from src.batch.writers import BatchWarehouseWriter
from src.core.config import PipelineConfig
from src.core.errors import IngestionError, PipelineError, TransformationError
from src.core.models import PipelineRunResult, VerificationReport
from src.gold import DimensionalModel
from src.observability.logger import get_logger, log_operation
from src.observability.metrics import (
    record_entity_counts,
    record_run,
    stage_duration_seconds,
    track_duration,
)
from src.quality import QualityVerifier
from src.transform import TransformationEngine
from src.warehouse.connection import DatabaseConnectionPool

logger = get_logger(__name__)


class WarehousePipeline:
    """
    Rebuilds the silver and gold layers from one raw snapshot.

    Flow:
    1. Read the six raw tables
    2. Transform them into canonical tables
    3. Build the dimensions and the sales fact
    4. Publish silver and gold in one transaction (skipped on dry runs)
    5. Run the quality checks on the produced snapshot
    """

    def __init__(
        self,
        spark: SparkSession,
        config: PipelineConfig,
        pool: Optional[DatabaseConnectionPool] = None
    ):
        """
        Initialize warehouse pipeline.

        Args:
            spark: Active Spark session
            config: Sources, lookup tables and as-of date
            pool: Database connection pool (only needed to publish)
        """
        self.spark = spark
        self.config = config
        self.pool = pool

        self.reader = RawStoreReader(spark)
        self.engine = TransformationEngine(config.mappings, config.as_of)
        self.model = DimensionalModel(config.mappings.unknown_label)
        self.verifier = QualityVerifier(config.mappings, config.as_of)
        self.writer = BatchWarehouseWriter(pool) if pool is not None else None

    def ingest(self) -> dict[str, DataFrame]:
        """Read the raw snapshot."""
        with log_operation("ingest", logger=logger), track_duration(stage_duration_seconds, stage="ingest"):
            return self.reader.read_snapshot(self.config)

    def transform(self, raw: dict[str, DataFrame]) -> dict[str, DataFrame]:
        """Turn raw tables into cached canonical tables."""
        with log_operation("transform", logger=logger), track_duration(stage_duration_seconds, stage="transform"):
            canonical = self.engine.transform(raw)
        return {table: df.cache() for table, df in canonical.items()}

    def build_model(self, canonical: dict[str, DataFrame]) -> dict[str, DataFrame]:
        """Build cached dimension and fact tables."""
        with log_operation("model", logger=logger), track_duration(stage_duration_seconds, stage="model"):
            gold = self.model.build(canonical)
        return {table: df.cache() for table, df in gold.items()}

    def verify(self, canonical: dict[str, DataFrame], gold: dict[str, DataFrame]) -> VerificationReport:
        """Run the quality checks over a snapshot."""
        with log_operation("verify", logger=logger), track_duration(stage_duration_seconds, stage="verify"):
            return self.verifier.verify(canonical, gold)

    def run(self, publish: bool = True, verify: bool = True) -> PipelineRunResult:
        """
        Execute one full run.

        A failing entity aborts the run before anything is published; the
        failure is reported in the result instead of being raised. A check
        that cannot be evaluated fails the run after publication, so
        ``published`` stays True.

        Args:
            publish: Write the snapshot to the warehouse
            verify: Run the quality checks after the snapshot is built

        Returns:
            PipelineRunResult with per-entity counts and the outcome
        """
        if publish and self.writer is None:
            raise ValueError("A database connection pool is required to publish")

        result = PipelineRunResult(run_id=str(uuid.uuid4()))
        cached: list[DataFrame] = []
        logger.info(f"Starting warehouse run {result.run_id}", extra={"run_id": result.run_id})

        try:
            raw = self.ingest()
            result.raw_counts = self._count(raw, "raw", IngestionError)
            for table, count in result.raw_counts.items():
                if count == 0:
                    logger.warning(f"Raw table {table} is empty", extra={"entity": table})

            canonical = self.transform(raw)
            cached.extend(canonical.values())
            result.canonical_counts = self._count(canonical, "silver", TransformationError)

            gold = self.build_model(canonical)
            cached.extend(gold.values())
            result.gold_counts = self._count(gold, "gold", TransformationError)

            if publish:
                with log_operation("publish", logger=logger, run_id=result.run_id):
                    with track_duration(stage_duration_seconds, stage="publish"):
                        self.writer.write_snapshot(canonical, gold, written_at=result.started_at)
                result.published = True

            if verify:
                report = self.verify(canonical, gold)
                result.violation_count = len(report.violations)

        except PipelineError as e:
            result.status = "failed"
            result.failed_entity = e.entity
            result.error_message = e.message
            logger.error(
                f"Warehouse run {result.run_id} failed at {e.entity}: {e.message}",
                extra={"run_id": result.run_id, "entity": e.entity}
            )

        finally:
            result.finished_at = datetime.now()
            for df in cached:
                df.unpersist()

        record_run(result)
        logger.info(
            f"Warehouse run {result.run_id} finished: {result.status}",
            extra={"run_id": result.run_id, "status": result.status, "published": result.published}
        )
        return result

    def _count(
        self,
        tables: dict[str, DataFrame],
        layer: str,
        error: type[PipelineError]
    ) -> dict[str, int]:
        """Count rows per table, attributing Spark failures to the table."""
        counts = {}
        for table, df in tables.items():
            try:
                counts[table] = df.count()
            except PySparkException as e:
                raise error(table, f"failed to compute table: {e}") from e
        record_entity_counts(layer, counts)
        return counts

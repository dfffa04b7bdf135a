"""
Command-line interface for the warehouse pipeline.

Usage:
    python -m src.cli.pipeline_cli run [--config <path>] [--dry-run] [options]
    python -m src.cli.pipeline_cli init-db [options]
    python -m src.cli.pipeline_cli verify [--config <path>]
"""

import argparse
import sys

from src.batch.pipeline import WarehousePipeline
from src.core.config import load_pipeline_config
from src.core.spark import create_spark_session
from src.observability.logger import get_logger
from src.observability.metrics import start_metrics_server
from src.warehouse.connection import DatabaseConnectionPool
from src.warehouse.schema_mgmt import SchemaManager


logger = get_logger(__name__)


def create_pool(args) -> DatabaseConnectionPool:
    """Open a connection pool from CLI flags, falling back to DB_* env vars."""
    pool = DatabaseConnectionPool(
        host=args.db_host,
        port=args.db_port,
        database=args.db_name,
        user=args.db_user,
        password=args.db_password
    )
    pool.open()
    return pool


def log_counts(title: str, counts: dict[str, int]) -> None:
    logger.info(f"{title}:")
    for table, count in counts.items():
        logger.info(f"  {table}: {count}")


def run_command(args):
    """
    Execute a full warehouse run.

    Args:
        args: Command-line arguments
    """
    try:
        config = load_pipeline_config(args.config)
    except (OSError, ValueError) as e:
        logger.error(f"Invalid pipeline configuration: {e}")
        sys.exit(1)
    logger.info(f"Raw sources under: {config.base_path}")

    if args.metrics_port:
        start_metrics_server(args.metrics_port)
        logger.info(f"Metrics endpoint listening on port {args.metrics_port}")

    logger.info("Creating Spark session...")
    spark = create_spark_session()

    pool = None
    try:
        if args.dry_run:
            logger.info("DRY RUN MODE: No data will be written to database")
        else:
            logger.info("Initializing database connection...")
            pool = create_pool(args)
            SchemaManager(pool).create_tables()

        pipeline = WarehousePipeline(spark=spark, config=config, pool=pool)
        result = pipeline.run(publish=not args.dry_run, verify=not args.no_verify)

        # Display results
        logger.info("=" * 60)
        logger.info(f"RUN {result.status.upper()}")
        logger.info("=" * 60)
        log_counts("Raw records", result.raw_counts)
        log_counts("Silver records", result.canonical_counts)
        log_counts("Gold records", result.gold_counts)
        if result.violation_count is not None:
            logger.info(f"Failed quality checks: {result.violation_count}")
        if result.status == "failed":
            logger.error(f"Failed entity: {result.failed_entity}")
            logger.error(f"Reason: {result.error_message}")
        logger.info(f"Duration: {result.duration_seconds:.2f}s")
        logger.info("=" * 60)

        if args.dry_run:
            logger.info("DRY RUN: No data was written to the database")

        if result.status == "failed":
            sys.exit(1)

    except Exception as e:
        logger.error(f"Error during warehouse run: {e}", exc_info=True)
        sys.exit(1)
    finally:
        if pool is not None:
            pool.close()
        spark.stop()


def init_db_command(args):
    """
    Provision the silver and gold schemas.

    Args:
        args: Command-line arguments
    """
    try:
        pool = create_pool(args)
    except Exception as e:
        logger.error(f"Could not connect to database: {e}")
        sys.exit(1)

    try:
        manager = SchemaManager(pool)
        if args.drop:
            manager.drop_tables()
        for table in manager.create_tables():
            logger.info(f"  {table}")
    except Exception as e:
        logger.error(f"Error provisioning warehouse: {e}", exc_info=True)
        sys.exit(1)
    finally:
        pool.close()


def verify_command(args):
    """
    Build a snapshot without publishing it and report every quality violation.

    Args:
        args: Command-line arguments
    """
    try:
        config = load_pipeline_config(args.config)
    except (OSError, ValueError) as e:
        logger.error(f"Invalid pipeline configuration: {e}")
        sys.exit(1)
    spark = create_spark_session()

    try:
        pipeline = WarehousePipeline(spark=spark, config=config)
        canonical = pipeline.transform(pipeline.ingest())
        gold = pipeline.build_model(canonical)
        report = pipeline.verify(canonical, gold)

        logger.info("=" * 60)
        logger.info(f"Checks run: {len(report.checks_run)}")
        logger.info(f"Checks failed: {len(report.violations)}")
        for violation in report.violations:
            logger.info(
                f"  [{violation.layer}] {violation.check_name}: "
                f"{violation.violation_count} rows - {violation.description}"
            )
            for sample in violation.samples:
                logger.info(f"      {sample}")
        logger.info("=" * 60)

        if not report.passed:
            sys.exit(1)

    except Exception as e:
        logger.error(f"Error during verification: {e}", exc_info=True)
        sys.exit(1)
    finally:
        spark.stop()


def add_db_arguments(parser: argparse.ArgumentParser) -> None:
    """Database flags; unset flags fall back to the DB_* environment variables."""
    parser.add_argument("--db-host", help="Database host (default: $DB_HOST or localhost)")
    parser.add_argument("--db-port", type=int, help="Database port (default: $DB_PORT or 5432)")
    parser.add_argument("--db-name", help="Database name (default: $DB_NAME or warehouse)")
    parser.add_argument("--db-user", help="Database user (default: $DB_USER or warehouse)")
    parser.add_argument("--db-password", help="Database password (default: $DB_PASSWORD)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="CRM/ERP sales warehouse pipeline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Rebuild silver and gold from datasets/
  python -m src.cli.pipeline_cli run

  # Use a custom configuration, without touching the database
  python -m src.cli.pipeline_cli run --config config/pipeline.yaml --dry-run

  # Create the warehouse schemas and tables
  python -m src.cli.pipeline_cli init-db

  # Report quality violations of the current raw snapshot
  python -m src.cli.pipeline_cli verify
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Run command
    run_parser = subparsers.add_parser("run", help="Rebuild the warehouse from the raw snapshot")
    run_parser.add_argument(
        "--config",
        default=None,
        help="Path to pipeline YAML file (default: config/pipeline.yaml if present)"
    )
    run_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Build the snapshot without writing to database"
    )
    run_parser.add_argument(
        "--no-verify",
        action="store_true",
        help="Skip the quality checks"
    )
    run_parser.add_argument(
        "--metrics-port",
        type=int,
        default=None,
        help="Expose Prometheus metrics on this port during the run"
    )
    add_db_arguments(run_parser)

    # Init-db command
    init_parser = subparsers.add_parser("init-db", help="Create warehouse schemas and tables")
    init_parser.add_argument(
        "--drop",
        action="store_true",
        help="Drop existing warehouse schemas first"
    )
    add_db_arguments(init_parser)

    # Verify command
    verify_parser = subparsers.add_parser("verify", help="Run the quality checks only")
    verify_parser.add_argument(
        "--config",
        default=None,
        help="Path to pipeline YAML file"
    )

    return parser


def main():
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    # Execute command
    if args.command == "run":
        run_command(args)
    elif args.command == "init-db":
        init_db_command(args)
    elif args.command == "verify":
        verify_command(args)


if __name__ == "__main__":
    main()

"""
Pytest configuration and fixtures for crm-erp-warehouse tests

This module provides shared fixtures for unit, integration, and E2E tests.
"""
import os
import shutil
import time
from datetime import date
from typing import Generator

import pytest
from pyspark.sql import SparkSession
from testcontainers.postgres import PostgresContainer

from src.core.spark import create_spark_session


# Naive datetimes in tests are wall-clock UTC, like the Spark session
os.environ["TZ"] = "UTC"
time.tzset()

FIXTURES_DIR = os.path.join(os.path.dirname(__file__), "fixtures")

# Date the fixture snapshot is evaluated against
AS_OF = date(2025, 1, 1)


# =======================
# PYTEST CONFIGURATION
# =======================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests that don't require external services"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests that require Docker containers"
    )
    config.addinivalue_line(
        "markers", "e2e: End-to-end tests that test the full pipeline"
    )
    config.addinivalue_line(
        "markers", "slow: Tests that take more than 5 seconds to run"
    )


# =======================
# SPARK FIXTURES
# =======================

@pytest.fixture(scope="session")
def spark_session() -> Generator[SparkSession, None, None]:
    """
    Create a Spark session for testing with local mode

    Yields:
        SparkSession configured like the production session
    """
    spark = create_spark_session("crm-erp-warehouse-test", master="local[2]")
    spark.conf.set("spark.sql.shuffle.partitions", "2")

    # Set log level to WARN to reduce test output noise
    spark.sparkContext.setLogLevel("WARN")

    yield spark

    # Cleanup
    spark.stop()


@pytest.fixture(scope="function")
def spark_test_session(spark_session) -> SparkSession:
    """
    Function-scoped Spark session that clears catalog between tests

    Args:
        spark_session: Session-scoped Spark session

    Returns:
        SparkSession for individual test
    """
    # Clear any cached tables
    spark_session.catalog.clearCache()

    return spark_session


# =======================
# DATABASE FIXTURES (Testcontainers)
# =======================

@pytest.fixture(scope="session")
def postgres_container() -> Generator[PostgresContainer, None, None]:
    """
    Start PostgreSQL container for integration tests

    Yields:
        PostgresContainer instance
    """
    with PostgresContainer(
        image="postgres:16.2-alpine",
        username="test_warehouse",
        password="test_password",
        dbname="test_warehouse"
    ) as postgres:
        # Wait for container to be ready
        postgres.get_connection_url()
        yield postgres


@pytest.fixture(scope="session")
def db_pool(postgres_container):
    """
    Connection pool to the test container with the warehouse tables provisioned

    Yields:
        Open DatabaseConnectionPool
    """
    from src.warehouse.connection import DatabaseConnectionPool
    from src.warehouse.schema_mgmt import SchemaManager

    pool = DatabaseConnectionPool(
        host=postgres_container.get_container_host_ip(),
        port=int(postgres_container.get_exposed_port(5432)),
        database="test_warehouse",
        user="test_warehouse",
        password="test_password",
        min_size=1,
        max_size=4,
    )
    pool.open()
    SchemaManager(pool).create_tables()

    yield pool

    pool.close()


@pytest.fixture(scope="function")
def clean_db(db_pool):
    """
    Provide a clean warehouse by dropping and recreating all tables before each test

    Yields:
        Open DatabaseConnectionPool
    """
    from src.warehouse.schema_mgmt import SchemaManager

    manager = SchemaManager(db_pool)
    manager.drop_tables()
    manager.create_tables()

    yield db_pool


# =======================
# FILE FIXTURES
# =======================

@pytest.fixture(scope="session")
def test_data_dir() -> str:
    """
    Get path to test data fixtures directory

    Returns:
        Path to tests/fixtures directory
    """
    return FIXTURES_DIR


@pytest.fixture(scope="function")
def datasets_dir(tmp_path) -> str:
    """
    Copy of the fixture raw snapshot that a test may modify

    Returns:
        Path to a datasets directory with source_crm/ and source_erp/
    """
    target = tmp_path / "datasets"
    shutil.copytree(os.path.join(FIXTURES_DIR, "datasets"), target)
    return str(target)


@pytest.fixture(scope="session")
def as_of() -> date:
    """Date treated as today when transforming the fixture snapshot"""
    return AS_OF


# =======================
# CONFIGURATION FIXTURES
# =======================

@pytest.fixture(scope="session")
def test_env_vars():
    """
    Set test environment variables

    This fixture loads test.env and sets environment variables
    """
    from dotenv import load_dotenv

    env_path = os.path.join(
        os.path.dirname(os.path.dirname(__file__)),
        "config",
        "test.env"
    )

    if os.path.exists(env_path):
        load_dotenv(env_path, override=True)


# =======================
# SNAPSHOT FIXTURES
# =======================

@pytest.fixture(scope="session")
def fixture_config(as_of):
    """
    Pipeline configuration pointing at the fixture raw snapshot

    Returns:
        PipelineConfig with default sources and mappings
    """
    from src.core.config import build_config

    return build_config({"base_path": os.path.join(FIXTURES_DIR, "datasets"), "as_of": as_of})


@pytest.fixture(scope="session")
def raw_snapshot(spark_session, fixture_config):
    """Raw DataFrames of the fixture snapshot"""
    from src.batch.readers import RawStoreReader

    return RawStoreReader(spark_session).read_snapshot(fixture_config)


@pytest.fixture(scope="session")
def canonical_snapshot(raw_snapshot, fixture_config):
    """Canonical DataFrames of the fixture snapshot"""
    from src.transform import TransformationEngine

    return TransformationEngine(fixture_config.mappings, fixture_config.as_of).transform(raw_snapshot)


@pytest.fixture(scope="session")
def gold_snapshot(canonical_snapshot):
    """Dimension and fact DataFrames of the fixture snapshot"""
    from src.gold import DimensionalModel

    return DimensionalModel().build(canonical_snapshot)

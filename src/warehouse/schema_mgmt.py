"""
Schema management operations for the data warehouse.

Provisions the ``silver`` and ``gold`` schemas and their tables from the
Spark table schemas, so DDL and transformation output never drift apart.
"""

from psycopg import sql
from pyspark.sql.types import (
    DataType,
    DateType,
    DoubleType,
    IntegerType,
    LongType,
    StringType,
    StructType,
    TimestampType,
)

from src.core.schema import (
    CANONICAL_SCHEMAS,
    DIM_CUSTOMERS,
    DIM_PRODUCTS,
    GOLD_SCHEMA,
    GOLD_SCHEMAS,
    SILVER_SCHEMA,
)
from src.observability.logger import get_logger

from .connection import DatabaseConnectionPool

logger = get_logger(__name__)

AUDIT_COLUMN = "dwh_create_date"

PRIMARY_KEYS = {
    (GOLD_SCHEMA, DIM_CUSTOMERS): "customer_key",
    (GOLD_SCHEMA, DIM_PRODUCTS): "product_key",
}

_PG_TYPES = {
    StringType: "VARCHAR",
    IntegerType: "INTEGER",
    LongType: "BIGINT",
    DoubleType: "DOUBLE PRECISION",
    DateType: "DATE",
    TimestampType: "TIMESTAMP",
}


def postgres_type(data_type: DataType) -> str:
    """
    Map a Spark column type to its PostgreSQL column type.

    Raises:
        ValueError: If the Spark type has no mapping
    """
    for spark_type, pg_type in _PG_TYPES.items():
        if isinstance(data_type, spark_type):
            return pg_type
    raise ValueError(f"No PostgreSQL type for Spark type {data_type.simpleString()}")


def warehouse_tables() -> list[tuple[str, str, StructType]]:
    """All warehouse tables as (schema, table, Spark schema), silver first."""
    tables = [(SILVER_SCHEMA, name, schema) for name, schema in CANONICAL_SCHEMAS.items()]
    tables += [(GOLD_SCHEMA, name, schema) for name, schema in GOLD_SCHEMAS.items()]
    return tables


def table_ddl(schema_name: str, table: str, struct: StructType) -> sql.Composed:
    """
    Build the CREATE TABLE statement for one warehouse table.

    Every table gets the ``dwh_create_date`` audit column.
    """
    primary_key = PRIMARY_KEYS.get((schema_name, table))
    columns = []
    for field in struct.fields:
        definition = sql.SQL("{} {}").format(
            sql.Identifier(field.name), sql.SQL(postgres_type(field.dataType))
        )
        if field.name == primary_key:
            definition = sql.SQL("{} PRIMARY KEY").format(definition)
        columns.append(definition)
    columns.append(
        sql.SQL("{} TIMESTAMP DEFAULT now()").format(sql.Identifier(AUDIT_COLUMN))
    )

    return sql.SQL("CREATE TABLE IF NOT EXISTS {} ({})").format(
        sql.Identifier(schema_name, table), sql.SQL(", ").join(columns)
    )


class SchemaManager:
    """
    Manages the warehouse schemas and tables.

    Handles:
    - Creating the silver and gold schemas
    - Creating one table per canonical and dimensional table
    - Dropping everything for a clean rebuild
    """

    def __init__(self, pool: DatabaseConnectionPool):
        """
        Initialize schema manager.

        Args:
            pool: Database connection pool
        """
        self.pool = pool

    def create_tables(self) -> list[str]:
        """
        Create schemas and tables that do not exist yet.

        Returns:
            Qualified names of all warehouse tables
        """
        created = []
        with self.pool.get_connection() as conn:
            with conn.cursor() as cur:
                for schema_name in (SILVER_SCHEMA, GOLD_SCHEMA):
                    cur.execute(
                        sql.SQL("CREATE SCHEMA IF NOT EXISTS {}").format(sql.Identifier(schema_name))
                    )
                for schema_name, table, struct in warehouse_tables():
                    cur.execute(table_ddl(schema_name, table, struct))
                    created.append(f"{schema_name}.{table}")
            conn.commit()

        logger.info(f"Provisioned {len(created)} warehouse tables")
        return created

    def drop_tables(self) -> None:
        """Drop the silver and gold schemas with everything in them."""
        with self.pool.get_connection() as conn:
            with conn.cursor() as cur:
                for schema_name in (GOLD_SCHEMA, SILVER_SCHEMA):
                    cur.execute(
                        sql.SQL("DROP SCHEMA IF EXISTS {} CASCADE").format(sql.Identifier(schema_name))
                    )
            conn.commit()

        logger.info("Dropped warehouse schemas")

    def row_count(self, schema_name: str, table: str) -> int:
        """
        Count rows currently stored in a warehouse table.

        Args:
            schema_name: "silver" or "gold"
            table: Table name

        Returns:
            Number of rows
        """
        query = sql.SQL("SELECT COUNT(*) AS row_count FROM {}").format(
            sql.Identifier(schema_name, table)
        )
        with self.pool.get_cursor() as cur:
            cur.execute(query)
            return cur.fetchone()["row_count"]

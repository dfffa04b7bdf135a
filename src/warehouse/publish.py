"""
All-or-nothing snapshot publication to the warehouse.

Every silver and gold table is truncated and refilled inside one
transaction: readers see either the previous snapshot or the new one.
"""

from datetime import datetime
from typing import Any

from psycopg import Error as PsycopgError
from psycopg import sql

from src.core.errors import PublishError
from src.observability.logger import get_logger
from src.observability.metrics import record_published_rows

from .connection import DatabaseConnectionPool
from .schema_mgmt import AUDIT_COLUMN

logger = get_logger(__name__)


class StagedTable:
    """
    Rows of one warehouse table, held in memory until publication.
    """

    def __init__(self, schema_name: str, table: str, columns: list[str], rows: list[tuple[Any, ...]]):
        self.schema_name = schema_name
        self.table = table
        self.columns = columns
        self.rows = rows

    @property
    def qualified_name(self) -> str:
        return f"{self.schema_name}.{self.table}"

    def __len__(self) -> int:
        return len(self.rows)

    def __repr__(self) -> str:
        return f"StagedTable({self.qualified_name}, rows={len(self.rows)})"


class SnapshotPublisher:
    """
    Replaces the warehouse contents with a staged snapshot.
    """

    def __init__(self, pool: DatabaseConnectionPool):
        """
        Initialize snapshot publisher.

        Args:
            pool: Database connection pool
        """
        self.pool = pool

    def publish(
        self,
        tables: list[StagedTable],
        written_at: datetime | None = None
    ) -> dict[str, int]:
        """
        Publish staged tables in a single transaction.

        Args:
            tables: Staged tables, in load order
            written_at: Value of the audit column (defaults to now)

        Returns:
            Qualified table name -> rows written

        Raises:
            PublishError: If any statement fails; nothing is committed
        """
        written_at = written_at or datetime.now()
        written = {}
        current = "warehouse"

        with self.pool.get_connection() as conn:
            try:
                with conn.cursor() as cur:
                    for staged in tables:
                        current = staged.qualified_name
                        target = sql.Identifier(staged.schema_name, staged.table)
                        cur.execute(sql.SQL("TRUNCATE TABLE {}").format(target))

                        copy_sql = sql.SQL("COPY {} ({}) FROM STDIN").format(
                            target,
                            sql.SQL(", ").join(
                                sql.Identifier(name) for name in [*staged.columns, AUDIT_COLUMN]
                            ),
                        )
                        with cur.copy(copy_sql) as copy:
                            for row in staged.rows:
                                copy.write_row((*row, written_at))
                        written[current] = len(staged)
                conn.commit()
            except PsycopgError as e:
                conn.rollback()
                logger.error(f"Publish failed at {current}, snapshot rolled back: {e}")
                raise PublishError(current, str(e)) from e

        for table, count in written.items():
            record_published_rows(table, count)
        logger.info(f"Published {len(written)} tables ({sum(written.values())} rows)")
        return written

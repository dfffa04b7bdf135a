"""
Connection pool for the warehouse database (psycopg3).

The publisher and the schema manager borrow connections from one pool per
run; the CLI opens it from ``--db-*`` flags or the ``DB_*`` environment.
"""
import os
import time
from contextlib import contextmanager

from psycopg import OperationalError
from psycopg.conninfo import make_conninfo
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from src.observability.logger import get_logger

logger = get_logger(__name__)


class DatabaseConnectionPool:
    """
    Pooled connections to the Postgres instance holding silver and gold.

    Rows are returned as dictionaries.
    """

    def __init__(
        self,
        host: str | None = None,
        port: int | None = None,
        database: str | None = None,
        user: str | None = None,
        password: str | None = None,
        min_size: int = 1,
        max_size: int = 4,
        timeout: float = 30.0,
    ) -> None:
        """
        Resolve connection settings; the pool itself is created by open().

        Args:
            host: Database host (DB_HOST, default localhost)
            port: Database port (DB_PORT, default 5432)
            database: Warehouse database name (DB_NAME, default warehouse)
            user: Loader role (DB_USER, default warehouse)
            password: Loader password (DB_PASSWORD, required)
            min_size: Connections kept open
            max_size: Upper bound on connections
            timeout: Seconds to wait for a connection

        Raises:
            ValueError: If no password is configured
        """
        self.host = host or os.getenv("DB_HOST", "localhost")
        self.port = port or int(os.getenv("DB_PORT", "5432"))
        self.database = database or os.getenv("DB_NAME", "warehouse")
        self.user = user or os.getenv("DB_USER", "warehouse")
        self.password = password or os.getenv("DB_PASSWORD")

        if not self.password:
            raise ValueError(
                "Warehouse password is not configured. "
                "Set DB_PASSWORD or pass --db-password."
            )

        self.min_size = min_size
        self.max_size = max_size
        self.timeout = timeout
        self.conninfo = make_conninfo(
            host=self.host,
            port=self.port,
            dbname=self.database,
            user=self.user,
            password=self.password,
            connect_timeout=int(self.timeout),
        )
        self._pool: ConnectionPool | None = None

    def open(self, max_retries: int = 3, retry_delay: float = 2.0) -> None:
        """
        Open the pool, retrying while the database is still starting.

        Raises:
            OperationalError: If every attempt fails
        """
        if self._pool is not None:
            return

        pool = self._new_pool()
        for attempt in range(1, max_retries + 1):
            try:
                pool.open(wait=True, timeout=self.timeout)
            except OperationalError as e:
                pool.close()
                if attempt == max_retries:
                    raise OperationalError(
                        f"Cannot reach warehouse at {self.host}:{self.port} "
                        f"after {max_retries} attempts: {e}"
                    ) from e
                logger.warning(
                    f"Warehouse not reachable (attempt {attempt}/{max_retries}), retrying",
                    extra={"host": self.host, "port": self.port}
                )
                time.sleep(retry_delay)
                pool = self._new_pool()
            else:
                self._pool = pool
                logger.info(f"Connected to warehouse {self.database} at {self.host}:{self.port}")
                return

    def _new_pool(self) -> ConnectionPool:
        return ConnectionPool(
            conninfo=self.conninfo,
            min_size=self.min_size,
            max_size=self.max_size,
            timeout=self.timeout,
            kwargs={"row_factory": dict_row},
            open=False,
        )

    def close(self) -> None:
        if self._pool is not None:
            self._pool.close()
            self._pool = None

    @contextmanager
    def get_connection(self):
        """
        Borrow a connection; it is returned to the pool on exit.

        Raises:
            RuntimeError: If open() has not been called
        """
        if self._pool is None:
            raise RuntimeError("Connection pool is not open. Call open() first.")

        with self._pool.connection() as conn:
            yield conn

    @contextmanager
    def get_cursor(self):
        """Borrow a connection and yield a cursor on it."""
        with self.get_connection() as conn:
            with conn.cursor() as cur:
                yield cur

    def execute_query(self, query, params: tuple | None = None) -> list[dict]:
        """Run a SELECT and return every row as a dictionary."""
        with self.get_cursor() as cur:
            cur.execute(query, params)
            return cur.fetchall()

"""PostgreSQL connection pool shared by the trip and audit stores.

Opened once at process start and closed at shutdown; stores receive the pool
handle explicitly instead of importing it.
"""

import json
import logging
from collections.abc import Iterator
from contextlib import contextmanager

import boto3
import psycopg
from psycopg import errors as pg_errors
from psycopg_pool import ConnectionPool, PoolTimeout

from core.config import Config
from core.errors import ErrorCode, PlanItError, StoreUnavailableError

logger = logging.getLogger(__name__)


class DatabasePool:
    def __init__(self, config: Config) -> None:
        self._config = config
        self._pool: ConnectionPool | None = None
        self._secret_cache: dict[str, str] | None = None

    def _get_credentials(self) -> dict[str, str]:
        if self._config.db_secret_arn:
            if self._secret_cache is None:
                client = boto3.client("secretsmanager", region_name=self._config.aws_region)
                secret = client.get_secret_value(SecretId=self._config.db_secret_arn)
                self._secret_cache = json.loads(secret["SecretString"])
            return self._secret_cache
        return {
            "host": self._config.db_host,
            "port": str(self._config.db_port),
            "dbname": self._config.db_name,
            "user": self._config.db_user,
            "password": self._config.db_password,
        }

    def _connection_kwargs(self) -> dict[str, object]:
        creds = self._get_credentials()
        kwargs: dict[str, object] = {
            "host": creds.get("host", self._config.db_host),
            "port": int(creds.get("port", self._config.db_port)),
            "dbname": creds.get("dbname", self._config.db_name),
            "user": creds.get("username", creds.get("user", self._config.db_user)),
            "password": creds.get("password", self._config.db_password),
        }
        if self._config.db_statement_timeout_ms:
            kwargs["options"] = f"-c statement_timeout={self._config.db_statement_timeout_ms}"
        return kwargs

    @property
    def is_open(self) -> bool:
        return self._pool is not None and not self._pool.closed

    def open(self) -> None:
        if self.is_open:
            return
        pool = ConnectionPool(
            kwargs=self._connection_kwargs(),
            min_size=self._config.db_pool_min_size,
            max_size=self._config.db_pool_max_size,
            timeout=self._config.db_pool_timeout_seconds,
            name="planit-trips",
            open=False,
        )
        try:
            pool.open(wait=self._config.db_pool_min_size > 0, timeout=self._config.db_pool_timeout_seconds)
        except PoolTimeout as e:
            pool.close()
            raise StoreUnavailableError(f"Could not open connection pool: {e}") from e
        self._pool = pool
        logger.info(
            "Connection pool opened (min=%d, max=%d)",
            self._config.db_pool_min_size,
            self._config.db_pool_max_size,
        )

    def close(self) -> None:
        if self._pool is not None and not self._pool.closed:
            self._pool.close()
            logger.info("Connection pool closed")
        self._pool = None

    def _require_pool(self) -> ConnectionPool:
        """Return the open pool or raise if not opened."""
        if self._pool is None or self._pool.closed:
            raise PlanItError("DatabasePool is not open. Call open() first.")
        return self._pool

    @contextmanager
    def connection(self) -> Iterator[psycopg.Connection]:
        """Borrow a connection for one transaction.

        Commits on clean exit, rolls back on error. Pool exhaustion and
        connection or timeout failures surface as StoreUnavailableError.
        """
        pool = self._require_pool()
        try:
            with pool.connection() as conn:
                yield conn
        except PoolTimeout as e:
            raise StoreUnavailableError(f"Connection pool exhausted: {e}", code=ErrorCode.TIMEOUT) from e
        except pg_errors.QueryCanceled as e:
            raise StoreUnavailableError(f"Statement timed out: {e}", code=ErrorCode.TIMEOUT) from e
        except psycopg.OperationalError as e:
            raise StoreUnavailableError(f"Database unavailable: {e}") from e

    def health_check(self) -> bool:
        try:
            with self.connection() as conn:
                conn.execute("SELECT 1")
            return True
        except Exception:
            logger.exception("Database health check failed")
            return False

    def __enter__(self) -> "DatabasePool":
        self.open()
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

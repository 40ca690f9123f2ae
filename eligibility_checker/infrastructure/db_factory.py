"""
Database connection factory utilities for the Eligibility Checker.

Provides explicit management of the process-wide psycopg connection pool. A
PoolManager is constructed once by the boundary layer, passed to the store,
and closed on shutdown; nothing here is a module-level singleton.

Startup (opening the pool, one-off bootstrap connections) retries transient
connection failures using tenacity. Pipeline operations are never retried.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Generator, Optional

import psycopg
from psycopg import Connection
from psycopg_pool import ConnectionPool, PoolTimeout
from tenacity import (
    Retrying,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from eligibility_checker.config import Settings
from eligibility_checker.utils.logging import get_logger

log = get_logger(__name__)

_TRANSIENT_ERRORS = (psycopg.OperationalError, psycopg.InterfaceError, PoolTimeout)


def connection_kwargs(settings: Settings) -> Dict[str, Any]:
    """
    Per-connection parameters bounding every storage call.

    ``connect_timeout`` caps connection establishment and the server-side
    ``statement_timeout`` caps each query.
    """
    kwargs: Dict[str, Any] = {"connect_timeout": settings.db_connect_timeout_seconds}
    if settings.db_statement_timeout_ms:
        kwargs["options"] = f"-c statement_timeout={settings.db_statement_timeout_ms}"
    return kwargs


class PoolManager:
    """
    Owner of the single connection pool used for the process lifetime.

    Example
    -------
        with PoolManager(settings) as manager:
            store = PostgresDeterminationStore(manager.pool)
            ...
    """

    def __init__(self, settings: Settings, dsn_override: Optional[str] = None) -> None:
        self._settings = settings
        self._dsn = dsn_override or settings.dsn
        self._pool: Optional[ConnectionPool] = None

    @property
    def pool(self) -> ConnectionPool:
        """The open pool; opens it on first access."""
        if self._pool is None:
            self.open()
        assert self._pool is not None
        return self._pool

    def open(self) -> ConnectionPool:
        """
        Create and open the pool, waiting for the database to accept connections.

        Retries with exponential backoff up to ``DB_STARTUP_RETRIES`` attempts so
        that a database container still starting up does not abort the process.

        Raises
        ------
        psycopg_pool.PoolTimeout
            If no connection could be obtained after all attempts.
        """
        if self._pool is not None:
            return self._pool

        settings = self._settings
        pool = ConnectionPool(
            conninfo=self._dsn,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
            timeout=settings.db_pool_timeout_seconds,
            kwargs=connection_kwargs(settings),
            name="eligibility",
            open=False,
        )
        pool.open()

        try:
            for attempt in Retrying(
                stop=stop_after_attempt(settings.db_startup_retries),
                wait=wait_exponential(multiplier=1, min=1, max=10),
                retry=retry_if_exception_type(_TRANSIENT_ERRORS),
                reraise=True,
            ):
                with attempt:
                    with pool.connection() as conn:
                        conn.execute("SELECT 1")
        except Exception:
            pool.close()
            log.error(
                "Database unreachable after startup retries",
                extra={"db_host": settings.db_host, "db_name": settings.db_name},
            )
            raise

        log.info(
            "Database connected successfully",
            extra={
                "db_host": settings.db_host,
                "db_name": settings.db_name,
                "pool_max_size": settings.db_pool_max_size,
            },
        )
        self._pool = pool
        return pool

    @contextmanager
    def connection(self) -> Generator[Connection, None, None]:
        """
        Context manager for obtaining a connection from the pool.

        The transaction is committed when the block exits cleanly and rolled
        back when it raises.
        """
        with self.pool.connection() as conn:
            yield conn

    def close(self) -> None:
        """Close the pool and release its connections."""
        if self._pool is not None:
            self._pool.close()
            self._pool = None
            log.info("Database connections closed")

    def __enter__(self) -> "PoolManager":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type((psycopg.OperationalError, psycopg.InterfaceError)),
    reraise=True,
)
def get_sync_connection(settings: Settings, dsn_override: Optional[str] = None) -> Connection:
    """
    Acquire a dedicated synchronous connection with automatic retry.

    Retries up to 3 times with exponential backoff for transient connection
    errors. Use this for one-off operations such as schema bootstrap; the
    request pipeline goes through the pool.

    Raises
    ------
    psycopg.OperationalError
        If connection fails after all retry attempts.
    """
    return psycopg.connect(dsn_override or settings.dsn, **connection_kwargs(settings))


__all__ = ["PoolManager", "connection_kwargs", "get_sync_connection"]

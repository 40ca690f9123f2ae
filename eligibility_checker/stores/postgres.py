"""
PostgreSQL determination store backed by a psycopg connection pool.

Each append is a single ``INSERT ... RETURNING`` committed when the pooled
connection context exits; each aggregate is a single ``SELECT`` over the
``determination_statistics`` view, so counts and mean always come from one
consistent MVCC snapshot. Driver exceptions are translated into the core's
storage errors and never retried here.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Generator, Optional

import psycopg
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from eligibility_checker.domain.models import AppendResult, EligibilityCommand, StatisticsSnapshot
from eligibility_checker.errors import ConstraintViolation, StorageError, StorageUnavailable
from eligibility_checker.stores.abstract import AbstractDeterminationStore
from eligibility_checker.utils.logging import get_logger

log = get_logger(__name__)

INSERT_SQL = """
    INSERT INTO determinations (first_name, last_name, date_of_birth, age, is_eligible, created_at)
    VALUES (%s, %s, %s, %s, %s, now())
    RETURNING id, created_at
"""

AGGREGATE_SQL = """
    SELECT total_users, eligible_users, ineligible_users, average_age,
           min_age, max_age, users_today, users_this_week, users_this_month
    FROM determination_statistics
"""


@contextmanager
def translate_errors(operation: str) -> Generator[None, None, None]:
    """
    Map psycopg/psycopg_pool exceptions onto StorageError subclasses.

    The original exception is kept as ``__cause__`` for logs; the message
    carried by the new exception is only the operation name.
    """
    try:
        yield
    except (psycopg.IntegrityError, psycopg.DataError) as exc:
        raise ConstraintViolation(f"{operation}: constraint violated") from exc
    except (psycopg.OperationalError, psycopg.InterfaceError) as exc:
        # psycopg_pool.PoolTimeout and PoolClosed subclass OperationalError.
        raise StorageUnavailable(f"{operation}: storage unavailable") from exc
    except psycopg.Error as exc:
        raise StorageError(f"{operation}: storage error") from exc


class PostgresDeterminationStore(AbstractDeterminationStore):
    """
    Determination store over a psycopg ``ConnectionPool``.

    The pool is created and owned by the caller (see ``PoolManager``); closing
    the store does not close a pool it did not create.
    """

    def __init__(self, pool: ConnectionPool, owns_pool: bool = False) -> None:
        self._pool = pool
        self._owns_pool = owns_pool

    @classmethod
    def from_dsn(
        cls, dsn: str, min_size: int = 1, max_size: int = 10, timeout: float = 5.0
    ) -> "PostgresDeterminationStore":
        pool = ConnectionPool(
            conninfo=dsn, min_size=min_size, max_size=max_size, timeout=timeout, open=True
        )
        return cls(pool, owns_pool=True)

    def append(self, command: EligibilityCommand, age: int, eligible: bool) -> AppendResult:
        params = (
            command.first_name,
            command.last_name,
            command.date_of_birth,
            age,
            eligible,
        )
        with translate_errors("append"):
            with self._pool.connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(INSERT_SQL, params)
                    row = cur.fetchone()
        if row is None:
            raise StorageError("append: insert returned no row")

        log.debug("Inserted determination", extra={"determination_id": row[0]})
        return AppendResult(int(row[0]), row[1])

    def aggregate(self) -> StatisticsSnapshot:
        with translate_errors("aggregate"):
            with self._pool.connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(AGGREGATE_SQL)
                    row: Optional[dict[str, Any]] = cur.fetchone()
        if row is None:
            return StatisticsSnapshot()

        return StatisticsSnapshot(
            total_count=int(row["total_users"] or 0),
            eligible_count=int(row["eligible_users"] or 0),
            ineligible_count=int(row["ineligible_users"] or 0),
            average_age=float(row["average_age"] or 0),
            min_age=row["min_age"],
            max_age=row["max_age"],
            created_today=int(row["users_today"] or 0),
            created_last_7_days=int(row["users_this_week"] or 0),
            created_last_30_days=int(row["users_this_month"] or 0),
        )

    def ping(self) -> None:
        with translate_errors("ping"):
            with self._pool.connection() as conn:
                conn.execute("SELECT 1")

    def close(self) -> None:
        if self._owns_pool:
            self._pool.close()


__all__ = ["PostgresDeterminationStore", "translate_errors"]

"""
In-memory determination store.

A process-local storage engine used for development and tests. Appends and
aggregate reads run under the engine's own lock, which plays the role of the
database's transactional guarantee: identifiers are unique and never reused,
and an aggregate always sees whole rows. The same constraints as the
``determinations`` table are enforced.
"""

from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, List, Optional

from eligibility_checker.domain.models import (
    MAX_PERSISTED_AGE,
    AppendResult,
    DeterminationRecord,
    EligibilityCommand,
    StatisticsSnapshot,
)
from eligibility_checker.errors import ConstraintViolation, StorageUnavailable
from eligibility_checker.stores.abstract import AbstractDeterminationStore

MAX_NAME_LENGTH = 50


def _round_half_up(value: Decimal) -> float:
    # Matches ROUND(numeric, 2) in PostgreSQL.
    return float(value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryDeterminationStore(AbstractDeterminationStore):
    """
    Thread-safe, append-only list of determinations.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None) -> None:
        self._clock = clock or _utcnow
        self._lock = threading.Lock()
        self._records: List[DeterminationRecord] = []
        self._next_id = 1
        self._closed = False

    def _check_constraints(self, command: EligibilityCommand, age: int, eligible: bool) -> None:
        if not isinstance(age, int) or isinstance(age, bool) or not 0 <= age <= MAX_PERSISTED_AGE:
            raise ConstraintViolation(f"age {age!r} outside 0..{MAX_PERSISTED_AGE}")
        if not isinstance(eligible, bool):
            raise ConstraintViolation("is_eligible must be a boolean")
        for value in (command.first_name, command.last_name):
            if not value or len(value) > MAX_NAME_LENGTH:
                raise ConstraintViolation("name length outside 1..50")

    def append(self, command: EligibilityCommand, age: int, eligible: bool) -> AppendResult:
        self._check_constraints(command, age, eligible)
        with self._lock:
            if self._closed:
                raise StorageUnavailable("store is closed")
            record = DeterminationRecord(
                id=self._next_id,
                first_name=command.first_name,
                last_name=command.last_name,
                date_of_birth=command.date_of_birth,
                age=age,
                eligible=eligible,
                created_at=self._clock(),
            )
            self._next_id += 1
            self._records.append(record)
        return AppendResult(record.id, record.created_at)

    def aggregate(self) -> StatisticsSnapshot:
        with self._lock:
            if self._closed:
                raise StorageUnavailable("store is closed")
            records = list(self._records)
            now = self._clock()

        total = len(records)
        if total == 0:
            return StatisticsSnapshot()

        ages = [record.age for record in records]
        eligible = sum(1 for record in records if record.eligible)
        start_of_today = now.replace(hour=0, minute=0, second=0, microsecond=0)

        def created_since(cutoff: datetime) -> int:
            return sum(1 for record in records if record.created_at >= cutoff)

        return StatisticsSnapshot(
            total_count=total,
            eligible_count=eligible,
            ineligible_count=total - eligible,
            average_age=_round_half_up(Decimal(sum(ages)) / total),
            min_age=min(ages),
            max_age=max(ages),
            created_today=created_since(start_of_today),
            created_last_7_days=created_since(start_of_today - timedelta(days=7)),
            created_last_30_days=created_since(start_of_today - timedelta(days=30)),
        )

    def ping(self) -> None:
        if self._closed:
            raise StorageUnavailable("store is closed")

    def close(self) -> None:
        with self._lock:
            self._closed = True

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


__all__ = ["InMemoryDeterminationStore", "MAX_PERSISTED_AGE"]

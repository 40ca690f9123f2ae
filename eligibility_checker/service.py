"""
Determination service: the single entry point the boundary layer calls.

Usage (example from the CLI):
    from eligibility_checker.service import DeterminationService
    from eligibility_checker.stores import InMemoryDeterminationStore

    service = DeterminationService(InMemoryDeterminationStore())
    record = service.check_eligibility(
        {"firstName": "John", "lastName": "Doe", "dateOfBirth": "1990-01-01"}
    )
    print(record.to_response())

Each call is one linear pipeline (validate -> age -> rule -> append) holding
only call-local data; all shared state lives in the store.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Mapping, Optional

from eligibility_checker.domain.age import calculate_age
from eligibility_checker.domain.models import DeterminationRecord, StatisticsSnapshot
from eligibility_checker.domain.rules import DEFAULT_THRESHOLD_YEARS, is_eligible
from eligibility_checker.errors import InputValidationError, StorageError
from eligibility_checker.stores.abstract import DeterminationStore
from eligibility_checker.utils.logging import get_logger
from eligibility_checker.validator import validate_request

log = get_logger(__name__)


def _local_now() -> datetime:
    return datetime.now().astimezone()


class DeterminationService:
    """
    Orchestrates validator, age calculator, eligibility rule and store.

    Parameters
    ----------
    store : DeterminationStore
        The persistence handle; constructed once per process by the caller.
    threshold_years : int
        Minimum eligible age. Comes from configuration, never from requests.
    clock : callable, optional
        Returns the current instant; its date is the evaluation date.
    """

    def __init__(
        self,
        store: DeterminationStore,
        threshold_years: int = DEFAULT_THRESHOLD_YEARS,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._store = store
        self._threshold_years = threshold_years
        self._clock = clock or _local_now

    @property
    def threshold_years(self) -> int:
        return self._threshold_years

    def check_eligibility(self, raw: Mapping[str, Any]) -> DeterminationRecord:
        """
        Validate input, compute age and eligibility, and persist the result.

        Raises
        ------
        InputValidationError
            With every violated rule; ``InvalidDate`` / ``FutureDate`` are
            subclasses. The store is not called.
        StorageError
            ``StorageUnavailable`` or ``ConstraintViolation`` from the store.
        """
        today = self._clock().date()

        try:
            command = validate_request(raw, today).unwrap()
            age = calculate_age(command.date_of_birth, today)
        except InputValidationError as exc:
            log.info(
                "Eligibility request rejected",
                extra={"errors": [error.code for error in exc.errors]},
            )
            raise

        eligible = is_eligible(age, self._threshold_years)

        try:
            determination_id, created_at = self._store.append(command, age, eligible)
        except StorageError:
            log.exception("Error checking eligibility", extra={"stage": "append"})
            raise

        log.info(
            "User eligibility checked",
            extra={"determination_id": determination_id, "age": age, "eligible": eligible},
        )
        return DeterminationRecord(
            id=determination_id,
            first_name=command.first_name,
            last_name=command.last_name,
            date_of_birth=command.date_of_birth,
            age=age,
            eligible=eligible,
            created_at=created_at,
        )

    def get_statistics(self) -> StatisticsSnapshot:
        """Aggregate snapshot over every stored determination."""
        try:
            snapshot = self._store.aggregate()
        except StorageError:
            log.exception("Error fetching statistics", extra={"stage": "aggregate"})
            raise
        log.info("Statistics requested", extra={"total": snapshot.total_count})
        return snapshot

    def ping(self) -> None:
        """Raise StorageUnavailable when the store cannot be reached."""
        self._store.ping()


__all__ = ["DeterminationService"]

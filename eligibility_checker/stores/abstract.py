"""
Abstract store interface for the Eligibility Checker.

Concrete stores (PostgreSQL, in-memory) implement the DeterminationStore
protocol. The store is the only component that owns durable state and the
only one whose operations may block.
"""

from __future__ import annotations

import abc
from typing import Protocol, runtime_checkable

from eligibility_checker.domain.models import AppendResult, EligibilityCommand, StatisticsSnapshot


@runtime_checkable
class DeterminationStore(Protocol):
    """
    Persistence contract consumed by the DeterminationService.

    Implementations must assign unique, never-reused identifiers, must not
    silently drop writes, and must make each successful append visible to
    subsequent aggregate reads as a whole row.
    """

    def append(self, command: EligibilityCommand, age: int, eligible: bool) -> AppendResult:
        """
        Durably record one determination.

        Returns
        -------
        AppendResult
            The store-assigned identifier and creation timestamp.

        Raises
        ------
        StorageUnavailable
            If the storage medium cannot be reached.
        ConstraintViolation
            If the row violates a persisted-schema constraint.
        """
        ...

    def aggregate(self) -> StatisticsSnapshot:
        """Compute counts and mean age over the full record set."""
        ...

    def ping(self) -> None:
        """Raise StorageUnavailable when the medium is unreachable."""
        ...

    def close(self) -> None:
        """Release any resources held by the store."""
        ...


class AbstractDeterminationStore(abc.ABC):
    """
    Optional ABC helper for class-based implementations.
    """

    @abc.abstractmethod
    def append(
        self, command: EligibilityCommand, age: int, eligible: bool
    ) -> AppendResult:  # pragma: no cover - interface only
        raise NotImplementedError

    @abc.abstractmethod
    def aggregate(self) -> StatisticsSnapshot:  # pragma: no cover - interface only
        raise NotImplementedError

    def ping(self) -> None:
        return None

    def close(self) -> None:
        return None


__all__ = ["AbstractDeterminationStore", "DeterminationStore"]

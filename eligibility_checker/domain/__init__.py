"""
Domain package for the Eligibility Checker.

Exports the core data definitions. The pure calculations live in
``domain.age`` and ``domain.rules`` and are imported from there directly.
"""

from eligibility_checker.domain.models import (
    AppendResult,
    DeterminationRecord,
    EligibilityCommand,
    FieldError,
    StatisticsSnapshot,
)

__all__ = [
    "AppendResult",
    "DeterminationRecord",
    "EligibilityCommand",
    "FieldError",
    "StatisticsSnapshot",
]

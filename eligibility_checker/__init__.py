"""
Eligibility Checker - program eligibility determinations from a date of birth.

This package validates determination requests, computes age and eligibility,
persists every determination to PostgreSQL, and serves aggregate statistics:

- Request validation with complete, ordered field diagnostics
- Whole-year age calculation with a defined February 29 policy
- Append-only determination stores (PostgreSQL, in-memory)
- A stateless service orchestrating the pipeline
- Liveness/readiness probes and a typer CLI
"""

from __future__ import annotations

__version__ = "1.0.0"
__license__ = "MIT"

# Public API exports
from eligibility_checker.config import Settings, get_settings
from eligibility_checker.domain.age import calculate_age
from eligibility_checker.domain.models import (
    AppendResult,
    DeterminationRecord,
    EligibilityCommand,
    FieldError,
    StatisticsSnapshot,
)
from eligibility_checker.domain.rules import is_eligible
from eligibility_checker.errors import (
    ConstraintViolation,
    EligibilityCheckerError,
    FutureDate,
    InputValidationError,
    InvalidDate,
    StorageError,
    StorageUnavailable,
)
from eligibility_checker.service import DeterminationService
from eligibility_checker.stores import (
    DeterminationStore,
    InMemoryDeterminationStore,
    PostgresDeterminationStore,
)
from eligibility_checker.utils.logging import configure_logging, get_logger
from eligibility_checker.validator import ValidationResult, validate_request

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Pure pipeline stages
    "calculate_age",
    "is_eligible",
    "validate_request",
    "ValidationResult",
    # Models
    "AppendResult",
    "DeterminationRecord",
    "EligibilityCommand",
    "FieldError",
    "StatisticsSnapshot",
    # Errors
    "EligibilityCheckerError",
    "InputValidationError",
    "InvalidDate",
    "FutureDate",
    "StorageError",
    "StorageUnavailable",
    "ConstraintViolation",
    # Service and stores
    "DeterminationService",
    "DeterminationStore",
    "InMemoryDeterminationStore",
    "PostgresDeterminationStore",
    # Logging
    "configure_logging",
    "get_logger",
]

"""
Error taxonomy for the Eligibility Checker.

Two families exist:

- Input errors (``InputValidationError`` and its date-specific subclasses) are
  caller-recoverable: the request can be corrected and resubmitted. They carry
  the full, ordered list of field errors.
- Storage errors (``StorageError`` and subclasses) mean the input was fine but
  the system could not complete the operation. Their ``public_message`` never
  exposes driver or schema details.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from eligibility_checker.domain.models import FieldError

GENERIC_STORAGE_MESSAGE = "Unable to complete the request. Please try again later."


class EligibilityCheckerError(Exception):
    """Base class for all errors raised by the core."""


class InputValidationError(EligibilityCheckerError):
    """
    Raised when request input violates one or more validation rules.

    Attributes
    ----------
    errors : list[FieldError]
        Every violated rule, ordered firstName, lastName, dateOfBirth.
    """

    def __init__(self, errors: Iterable[FieldError]) -> None:
        self.errors: List[FieldError] = list(errors)
        super().__init__("; ".join(error.message for error in self.errors) or "Validation failed")

    @property
    def messages(self) -> List[str]:
        return [error.message for error in self.errors]

    def to_response(self) -> dict:
        return {"error": "Validation failed", "details": self.messages}


class InvalidDate(InputValidationError):
    """The date of birth is not a valid calendar date."""

    def __init__(self, value: object, message: Optional[str] = None) -> None:
        self.value = value
        super().__init__(
            [
                FieldError(
                    field="dateOfBirth",
                    code="invalid_date",
                    message=message or "Date of birth must be a valid date (YYYY-MM-DD)",
                )
            ]
        )


class FutureDate(InputValidationError):
    """The date of birth lies after the reference date."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(
            [
                FieldError(
                    field="dateOfBirth",
                    code="future_date",
                    message="Date of birth cannot be in the future",
                )
            ]
        )


class StorageError(EligibilityCheckerError):
    """Opaque storage failure; no partial result was produced."""

    public_message: str = GENERIC_STORAGE_MESSAGE

    def to_response(self) -> dict:
        return {"success": False, "error": self.public_message}


class StorageUnavailable(StorageError):
    """The storage medium could not be reached or timed out."""


class ConstraintViolation(StorageError):
    """Data violated a persisted-schema constraint (pipeline bug, not user error)."""


__all__ = [
    "GENERIC_STORAGE_MESSAGE",
    "EligibilityCheckerError",
    "InputValidationError",
    "InvalidDate",
    "FutureDate",
    "StorageError",
    "StorageUnavailable",
    "ConstraintViolation",
]

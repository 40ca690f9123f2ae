"""
Request validation for eligibility checks.

``validate_request`` turns raw, untyped field values into either a normalized
``EligibilityCommand`` or the complete list of violated rules. Every field is
checked; errors are never short-circuited after the first failing field, and
they are reported in a stable order: firstName, lastName, dateOfBirth.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date
from typing import Any, List, Mapping, Optional, Tuple

from eligibility_checker.domain.age import calculate_age, parse_date
from eligibility_checker.domain.models import (
    MAX_PERSISTED_AGE,
    EligibilityCommand,
    FieldError,
    FieldName,
)
from eligibility_checker.errors import InputValidationError, InvalidDate

NAME_MAX_LENGTH = 50
NAME_PATTERN = re.compile(r"^[A-Za-z '\-]+$")

_NAME_LABELS = {"firstName": "First name", "lastName": "Last name"}


@dataclass(frozen=True)
class ValidationResult:
    """Either a command (``ok``) or a non-empty list of errors."""

    command: Optional[EligibilityCommand] = None
    errors: List[FieldError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.command is not None and not self.errors

    def unwrap(self) -> EligibilityCommand:
        """Return the command or raise ``InputValidationError`` with all errors."""
        if not self.ok:
            raise InputValidationError(self.errors)
        return self.command  # type: ignore[return-value]


def _validate_name(field_name: FieldName, raw: Any) -> Tuple[Optional[str], List[FieldError]]:
    label = _NAME_LABELS[field_name]
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return None, [FieldError(field=field_name, code="required", message=f"{label} is required")]
    if not isinstance(raw, str):
        return None, [FieldError(field=field_name, code="type", message=f"{label} must be a string")]

    value = raw.strip()
    errors: List[FieldError] = []
    if len(value) > NAME_MAX_LENGTH:
        errors.append(
            FieldError(
                field=field_name,
                code="max_length",
                message=f"{label} cannot exceed {NAME_MAX_LENGTH} characters",
            )
        )
    if not NAME_PATTERN.match(value):
        errors.append(
            FieldError(
                field=field_name,
                code="pattern",
                message=f"{label} must contain only letters, spaces, hyphens, and apostrophes",
            )
        )
    return (None if errors else value), errors


def _validate_date_of_birth(raw: Any, today: date) -> Tuple[Optional[date], List[FieldError]]:
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return None, [
            FieldError(field="dateOfBirth", code="required", message="Date of birth is required")
        ]
    try:
        born = parse_date(raw)
    except InvalidDate as exc:
        return None, list(exc.errors)
    if born > today:
        return None, [
            FieldError(
                field="dateOfBirth",
                code="future_date",
                message="Date of birth cannot be in the future",
            )
        ]
    if calculate_age(born, today) > MAX_PERSISTED_AGE:
        return None, [
            FieldError(
                field="dateOfBirth",
                code="implausible_date",
                message=f"Date of birth cannot imply an age over {MAX_PERSISTED_AGE} years",
            )
        ]
    return born, []


def validate_request(raw: Mapping[str, Any], today: date) -> ValidationResult:
    """
    Validate and normalize raw request fields.

    Parameters
    ----------
    raw : Mapping[str, Any]
        Untyped input keyed by ``firstName``, ``lastName`` and ``dateOfBirth``.
    today : date
        Reference date for the not-in-the-future and maximum-age rules.

    Returns
    -------
    ValidationResult
        A normalized command, or every violated rule in field order.
    """
    first_name, first_errors = _validate_name("firstName", raw.get("firstName"))
    last_name, last_errors = _validate_name("lastName", raw.get("lastName"))
    born, date_errors = _validate_date_of_birth(raw.get("dateOfBirth"), today)

    errors = first_errors + last_errors + date_errors
    if errors:
        return ValidationResult(errors=errors)

    return ValidationResult(
        command=EligibilityCommand(first_name=first_name, last_name=last_name, date_of_birth=born)
    )


__all__ = ["NAME_MAX_LENGTH", "NAME_PATTERN", "ValidationResult", "validate_request"]

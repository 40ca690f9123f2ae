"""
Domain models for the Eligibility Checker.

Defines the persisted determination record (aligned with
``infrastructure/schema.sql``), the normalized request command, the derived
statistics snapshot, and the field-level error type produced by the validator.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Literal, NamedTuple, Optional

from pydantic import BaseModel, Field

ELIGIBLE_MESSAGE = "You are eligible for the program"
INELIGIBLE_MESSAGE = "You are not eligible for the program"

# Mirrors the CHECK constraint on determinations.age.
MAX_PERSISTED_AGE = 150

FieldName = Literal["firstName", "lastName", "dateOfBirth"]


class FieldError(BaseModel):
    """
    A single violated validation rule.
    """

    field: FieldName = Field(..., description="Wire name of the offending field.")
    code: str = Field(..., description="Machine-friendly rule identifier.")
    message: str = Field(..., description="Human-readable explanation.")

    model_config = {"frozen": True}


class EligibilityCommand(BaseModel):
    """
    Normalized, validated input for one determination.
    """

    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    date_of_birth: date

    model_config = {"frozen": True}


class AppendResult(NamedTuple):
    id: int
    created_at: datetime


class DeterminationRecord(BaseModel):
    """
    Representation of a single row in the ``determinations`` table.
    """

    id: int = Field(..., description="Primary key (BIGSERIAL), assigned by the store.")
    first_name: str = Field(..., serialization_alias="firstName")
    last_name: str = Field(..., serialization_alias="lastName")
    date_of_birth: date = Field(..., serialization_alias="dateOfBirth")
    age: int = Field(..., ge=0, description="Age in whole years at creation time.")
    eligible: bool = Field(..., description="Whether age met the threshold at creation time.")
    created_at: datetime = Field(..., serialization_alias="createdAt")

    model_config = {
        "frozen": True,
        "populate_by_name": True,
    }

    @property
    def message(self) -> str:
        return ELIGIBLE_MESSAGE if self.eligible else INELIGIBLE_MESSAGE

    def to_response(self) -> Dict[str, Any]:
        """Shape returned to the boundary layer for a successful check."""
        return {
            "id": self.id,
            "age": self.age,
            "eligible": self.eligible,
            "message": self.message,
            "timestamp": self.created_at.isoformat(),
        }


class StatisticsSnapshot(BaseModel):
    """
    Aggregate view over every stored determination at one point in time.
    """

    total_count: int = Field(0, ge=0)
    eligible_count: int = Field(0, ge=0)
    ineligible_count: int = Field(0, ge=0)
    average_age: float = Field(0.0, ge=0, description="Mean age, 0 when there are no records.")
    min_age: Optional[int] = None
    max_age: Optional[int] = None
    created_today: int = Field(0, ge=0)
    created_last_7_days: int = Field(0, ge=0)
    created_last_30_days: int = Field(0, ge=0)

    model_config = {"frozen": True}

    def to_response(self) -> Dict[str, Any]:
        return {
            "totalUsers": self.total_count,
            "eligibleUsers": self.eligible_count,
            "ineligibleUsers": self.ineligible_count,
            "averageAge": self.average_age,
        }

    def to_detailed_response(self) -> Dict[str, Any]:
        payload = self.to_response()
        payload.update(
            {
                "minAge": self.min_age,
                "maxAge": self.max_age,
                "usersToday": self.created_today,
                "usersThisWeek": self.created_last_7_days,
                "usersThisMonth": self.created_last_30_days,
            }
        )
        return payload


__all__ = [
    "ELIGIBLE_MESSAGE",
    "INELIGIBLE_MESSAGE",
    "AppendResult",
    "DeterminationRecord",
    "EligibilityCommand",
    "FieldError",
    "StatisticsSnapshot",
]

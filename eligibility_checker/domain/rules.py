"""
Eligibility rule: a person is eligible once they reach the age threshold.
"""

from __future__ import annotations

DEFAULT_THRESHOLD_YEARS = 18


def is_eligible(age: int, threshold_years: int = DEFAULT_THRESHOLD_YEARS) -> bool:
    """Return True when ``age`` is at or above ``threshold_years``."""
    return age >= threshold_years


__all__ = ["DEFAULT_THRESHOLD_YEARS", "is_eligible"]

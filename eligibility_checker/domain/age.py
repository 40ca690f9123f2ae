"""
Age calculation in whole years.

February 29 birthdays follow plain (month, day) ordering: in a non-leap year
the birthday is reached on March 1, in a leap year on February 29.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Union

from eligibility_checker.errors import FutureDate, InvalidDate

DateLike = Union[date, datetime, str]


def parse_date(value: DateLike) -> date:
    """
    Coerce an ISO string, ``datetime`` or ``date`` into a calendar date.

    Full ISO datetimes are accepted and truncated to their date part.

    Raises
    ------
    InvalidDate
        If the value is not a valid calendar date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise InvalidDate(value)

    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError as exc:
        raise InvalidDate(value) from exc


def calculate_age(birth_date: DateLike, as_of: Union[date, datetime]) -> int:
    """
    Whole years elapsed between ``birth_date`` and ``as_of``.

    Parameters
    ----------
    birth_date : date | datetime | str
        Date of birth; strings must be ISO formatted.
    as_of : date | datetime
        Reference date. A datetime contributes only its date part.

    Returns
    -------
    int
        Non-negative age in years.

    Raises
    ------
    InvalidDate
        If ``birth_date`` does not parse as a calendar date.
    FutureDate
        If ``birth_date`` is strictly after ``as_of``.
    """
    born = parse_date(birth_date)
    reference = as_of.date() if isinstance(as_of, datetime) else as_of

    if born > reference:
        raise FutureDate(born)

    age = reference.year - born.year
    if (reference.month, reference.day) < (born.month, born.day):
        age -= 1
    return age


__all__ = ["DateLike", "calculate_age", "parse_date"]

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from eligibility_checker.domain.age import calculate_age, parse_date
from eligibility_checker.errors import FutureDate, InputValidationError, InvalidDate


def _is_leap(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


@pytest.mark.parametrize(
    ("birth", "as_of", "expected"),
    [
        (date(1990, 1, 1), date(2024, 6, 15), 34),
        (date(1990, 6, 15), date(2024, 6, 15), 34),
        (date(1990, 6, 16), date(2024, 6, 15), 33),
        (date(1990, 12, 31), date(2024, 1, 1), 33),
        (date(2024, 6, 15), date(2024, 6, 15), 0),
        (date(2006, 6, 15), date(2024, 6, 15), 18),
        (date(2006, 6, 16), date(2024, 6, 15), 17),
    ],
)
def test_calculate_age_whole_years(birth: date, as_of: date, expected: int) -> None:
    assert calculate_age(birth, as_of) == expected


def test_calculate_age_accepts_iso_string_and_datetime_reference() -> None:
    as_of = datetime(2024, 6, 15, 23, 59, tzinfo=timezone.utc)
    assert calculate_age("1990-01-01", as_of) == 34


def test_leap_day_birthday_reached_on_march_first_in_common_years() -> None:
    born = date(2000, 2, 29)
    assert calculate_age(born, date(2023, 2, 28)) == 22
    assert calculate_age(born, date(2023, 3, 1)) == 23
    assert calculate_age(born, date(2024, 2, 28)) == 23
    assert calculate_age(born, date(2024, 2, 29)) == 24


def test_future_birth_date_raises_future_date() -> None:
    with pytest.raises(FutureDate) as excinfo:
        calculate_age(date(2024, 6, 16), date(2024, 6, 15))

    assert isinstance(excinfo.value, InputValidationError)
    assert excinfo.value.errors[0].code == "future_date"


def test_far_future_never_yields_negative_age() -> None:
    as_of = date(2024, 6, 15)
    for offset in (1, 30, 365, 366, 3650):
        with pytest.raises(FutureDate):
            calculate_age(as_of + timedelta(days=offset), as_of)


@pytest.mark.parametrize("value", ["2023-02-29", "2023-13-01", "not-a-date", "", None, 19900101])
def test_unparseable_birth_date_raises_invalid_date(value: object) -> None:
    with pytest.raises(InvalidDate):
        calculate_age(value, date(2024, 6, 15))  # type: ignore[arg-type]


def test_parse_date_truncates_full_iso_datetimes() -> None:
    assert parse_date("1990-01-01T10:30:00Z") == date(1990, 1, 1)
    assert parse_date(datetime(1990, 1, 1, 10, 30)) == date(1990, 1, 1)


@pytest.mark.parametrize("born", [date(1999, 7, 15), date(2000, 2, 29), date(2003, 1, 1)])
def test_age_is_monotonic_and_steps_exactly_on_birthdays(born: date) -> None:
    previous = calculate_age(born, born)
    day = born + timedelta(days=1)
    end = born + timedelta(days=365 * 6)

    while day <= end:
        current = calculate_age(born, day)
        step = current - previous
        assert step in (0, 1)

        if born.month == 2 and born.day == 29 and not _is_leap(day.year):
            is_birthday = (day.month, day.day) == (3, 1)
        else:
            is_birthday = (day.month, day.day) == (born.month, born.day)
        assert (step == 1) == is_birthday, day

        previous = current
        day += timedelta(days=1)

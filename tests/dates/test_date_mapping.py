from __future__ import annotations

from datetime import date, timedelta

import pytest

from church_attendance.core.constants import MONTH_NAMES
from church_attendance.core.exceptions import ValidationError
from church_attendance.dates.mapping import (
    attendance_field_id,
    decode_field_id,
    is_attendance_field,
    is_field_for_date,
    sundays_in_month,
)
from church_attendance.dates.model import MonthId, month_index


def test_sundays_in_january_2026():
    assert sundays_in_month("January", 2026) == [
        date(2026, 1, 4),
        date(2026, 1, 11),
        date(2026, 1, 18),
        date(2026, 1, 25),
    ]


def test_sundays_when_the_first_is_a_sunday():
    assert sundays_in_month("March", 2026)[0] == date(2026, 3, 1)
    assert len(sundays_in_month("March", 2026)) == 5


def test_sundays_month_name_is_case_insensitive():
    assert sundays_in_month("february", 2026) == sundays_in_month("February", 2026)


@pytest.mark.parametrize("name", ["", "Janvier", "Sept", None])
def test_sundays_unknown_month_is_empty(name):
    assert sundays_in_month(name, 2026) == []


def test_sundays_invariants_for_every_month():
    for year in range(1995, 2036):
        for idx, name in enumerate(MONTH_NAMES, start=1):
            sundays = sundays_in_month(name, year)
            assert len(sundays) in (4, 5)
            assert all(d.weekday() == 6 for d in sundays)
            assert all(d.year == year and d.month == idx for d in sundays)
            assert all(b - a == timedelta(days=7) for a, b in zip(sundays, sundays[1:]))
            # nothing before the first or after the last Sunday still in the month
            assert (sundays[0] - timedelta(days=7)).month != idx
            assert (sundays[-1] + timedelta(days=7)).month != idx


def test_field_id_encodes_full_date():
    assert attendance_field_id(date(2026, 1, 4)) == "attendance_2026_01_04"
    assert attendance_field_id(date(2026, 1, 4)) != attendance_field_id(date(2026, 2, 4))
    assert attendance_field_id(date(2026, 1, 4)) != attendance_field_id(date(2027, 1, 4))


def test_field_id_round_trips_over_a_long_range():
    day = date(1999, 12, 1)
    seen = set()
    while day < date(2031, 1, 1):
        field_id = attendance_field_id(day)
        assert decode_field_id(field_id) == day
        assert field_id not in seen
        seen.add(field_id)
        day += timedelta(days=1)


@pytest.mark.parametrize(
    "name",
    ["full_name", "Attendance 4th", "attendance_2026_02_30", "attendance_2026_1_4", "attendance_2026_01_04_x"],
)
def test_decode_rejects_non_attendance_names(name):
    assert decode_field_id(name) is None
    assert not is_attendance_field(name)


def test_is_field_for_date():
    assert is_field_for_date("attendance_2026_03_08", date(2026, 3, 8))
    assert not is_field_for_date("attendance_2026_03_08", date(2026, 4, 8))
    assert not is_field_for_date("badge", date(2026, 3, 8))


def test_month_id_parse_and_order():
    months = [MonthId.parse(t) for t in ("March_2026", "December_2025", "January_2026")]
    ordered = sorted(months, key=lambda m: m.sort_key)
    assert [m.table_name for m in ordered] == ["December_2025", "January_2026", "March_2026"]
    assert MonthId.parse("march_2026").table_name == "March_2026"
    assert month_index("October") == 10


@pytest.mark.parametrize("value", ["March", "March-2026", "Marzo_2026", "March_20x6", ""])
def test_month_id_parse_rejects_bad_identifiers(value):
    with pytest.raises(ValidationError):
        MonthId.parse(value)


def test_month_id_contains():
    month = MonthId("March", 2026)
    assert month.contains(date(2026, 3, 31))
    assert not month.contains(date(2025, 3, 1))

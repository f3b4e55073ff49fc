from datetime import date, timedelta

import pytest

from app.services.session_dates import (
    calculate_contest_date,
    calculate_session_date,
    first_contest_monday,
    is_contest,
    is_live_session,
    resolve_session_date,
)
from app.utils.dates import DAYS_OF_WEEK, date_index, day_index, day_name
from app.utils.errors import UnrecognizedDayName


def test_day_index_uses_sunday_zero():
    assert day_index("Sunday") == 0
    assert day_index("Monday") == 1
    assert day_index("Saturday") == 6
    assert day_index("  wednesday ") == 3


def test_day_index_rejects_unknown_name():
    with pytest.raises(UnrecognizedDayName):
        day_index("Funday")


def test_date_index_matches_day_name():
    assert date_index(date(2024, 1, 7)) == 0  # Sunday
    assert day_name(date(2024, 1, 1)) == "Monday"


def test_normal_session_example_from_monday_start():
    start = date(2024, 1, 1)
    assert calculate_session_date(start, 1, 1, "Monday", "Wednesday") == date(2024, 1, 1)
    assert calculate_session_date(start, 1, 2, "Monday", "Wednesday") == date(2024, 1, 3)
    assert calculate_session_date(start, 2, 1, "Monday", "Wednesday") == date(2024, 1, 8)


def test_day2_before_day1_moves_to_following_week_cycle():
    # Thursday start, sessions on Saturday then Tuesday
    start = date(2024, 1, 4)
    first = calculate_session_date(start, 1, 1, "Saturday", "Tuesday")
    second = calculate_session_date(start, 1, 2, "Saturday", "Tuesday")
    assert first == date(2024, 1, 6)
    assert second == date(2024, 1, 9)
    assert second > first


def test_unknown_day_returns_none():
    assert calculate_session_date(date(2024, 1, 1), 1, 1, "Someday", "Monday") is None


def test_normal_session_weekday_property():
    start = date(2024, 1, 1)
    for offset in range(7):
        current_start = start + timedelta(days=offset)
        for day1 in DAYS_OF_WEEK:
            for day2 in DAYS_OF_WEEK:
                if day1 == day2:
                    continue
                for week in (1, 2, 5):
                    first = calculate_session_date(current_start, week, 1, day1, day2)
                    second = calculate_session_date(current_start, week, 2, day1, day2)
                    assert day_name(first) == day1
                    assert day_name(second) == day2
                    assert first >= current_start


def test_first_contest_monday_anchor():
    assert first_contest_monday(date(2024, 1, 1)) == date(2024, 1, 1)  # Monday
    assert first_contest_monday(date(2024, 1, 7)) == date(2024, 1, 8)  # Sunday
    assert first_contest_monday(date(2024, 1, 3)) == date(2024, 1, 8)  # Wednesday
    assert first_contest_monday(date(2024, 1, 6)) == date(2024, 1, 8)  # Saturday


def test_contest_example_from_wednesday_start():
    start = date(2024, 1, 3)
    assert calculate_contest_date(start, 1, 1) == date(2024, 1, 8)
    assert calculate_contest_date(start, 1, 3) == date(2024, 1, 10)
    assert calculate_contest_date(start, 2, 1) == date(2024, 1, 15)


def test_contest_weekdays_cycle_from_monday():
    start = date(2024, 2, 14)
    for week in (1, 2, 3):
        names = [day_name(calculate_contest_date(start, week, n)) for n in range(1, 8)]
        assert names == list(DAYS_OF_WEEK[1:]) + [DAYS_OF_WEEK[0]]


def test_session_type_checks_are_case_insensitive():
    assert is_contest("CONTEST")
    assert is_contest(" Contest ")
    assert not is_contest("live session")
    assert is_live_session("Live Session")
    assert not is_live_session(None)


def test_resolve_session_date_ignores_days_for_contests():
    start = date(2024, 1, 3)
    assert resolve_session_date(start, 1, 1, "contest", "Bogus", "Bogus") == date(2024, 1, 8)
    assert resolve_session_date(start, 1, 1, "live session", "Wednesday", "Friday") == date(2024, 1, 3)

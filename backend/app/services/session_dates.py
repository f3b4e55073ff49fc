"""세션 날짜 계산 규칙입니다. 일반 세션은 주 2회 수업 요일, 콘테스트는 월요일 기준 순번을 따릅니다."""

from datetime import date, timedelta
from typing import Optional

from app.utils.dates import date_index, day_index
from app.utils.errors import UnrecognizedDayName

CONTEST = "contest"
LIVE_SESSION = "live session"


def _normalize_type(session_type: Optional[str]) -> str:
    return (session_type or "").strip().lower()


def is_contest(session_type: Optional[str]) -> bool:
    return _normalize_type(session_type) == CONTEST


def is_live_session(session_type: Optional[str]) -> bool:
    return _normalize_type(session_type) == LIVE_SESSION


def calculate_session_date(
    start_date: date,
    week_number: int,
    session_number: int,
    day1: str,
    day2: str,
) -> Optional[date]:
    """Return the class date for a normal session, or None for an unknown day name.

    Session 1 of a week lands on ``day1``; every other session lands on ``day2``,
    which is always placed strictly after ``day1`` in the same week cycle.
    """
    try:
        day1_index = day_index(day1)
        day2_index = day_index(day2)
    except UnrecognizedDayName:
        return None

    start_index = date_index(start_date)
    day1_offset = (day1_index - start_index) % 7
    day2_offset = (day2_index - start_index) % 7
    if day2_offset <= day1_offset:
        day2_offset += 7

    base_offset = day1_offset if session_number == 1 else day2_offset
    return start_date + timedelta(days=(week_number - 1) * 7 + base_offset)


def first_contest_monday(start_date: date) -> date:
    start_index = date_index(start_date)
    if start_index == 1:
        days_to_monday = 0
    elif start_index == 0:
        days_to_monday = 1
    else:
        days_to_monday = 8 - start_index
    return start_date + timedelta(days=days_to_monday)


def calculate_contest_date(start_date: date, week_number: int, session_number: int) -> date:
    """Nth contest of a week lands on the Nth weekday counted from that week's Monday."""
    target_monday = first_contest_monday(start_date) + timedelta(days=(week_number - 1) * 7)
    return target_monday + timedelta(days=session_number - 1)


def resolve_session_date(
    start_date: date,
    week_number: int,
    session_number: int,
    session_type: Optional[str],
    day1: str,
    day2: str,
) -> Optional[date]:
    if is_contest(session_type):
        return calculate_contest_date(start_date, week_number, session_number)
    return calculate_session_date(start_date, week_number, session_number, day1, day2)

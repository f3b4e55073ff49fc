"""요일/날짜 변환 공용 유틸리티입니다. 요일 인덱스는 0=일요일 기준입니다."""

from datetime import date, datetime, timedelta
from typing import Iterator, Optional
from zoneinfo import ZoneInfo

from app.config import settings
from app.utils.errors import UnrecognizedDayName

DAYS_OF_WEEK = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")

_DAY_LOOKUP = {name.lower(): idx for idx, name in enumerate(DAYS_OF_WEEK)}


def day_index(name: str) -> int:
    key = str(name or "").strip().lower()
    if key not in _DAY_LOOKUP:
        raise UnrecognizedDayName(f"알 수 없는 요일입니다: {name!r}")
    return _DAY_LOOKUP[key]


def date_index(value: date) -> int:
    # date.weekday()는 0=월요일이므로 일요일 기준으로 회전한다.
    return (value.weekday() + 1) % 7


def day_name(value: date) -> str:
    return DAYS_OF_WEEK[date_index(value)]


def parse_iso_date(value) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).split("T")[0])


def format_iso_date(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value else None


def daterange(start: date, end: date) -> Iterator[date]:
    """Yield every date from start to end inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def program_today() -> date:
    """Today's date in the program's timezone."""
    return datetime.now(ZoneInfo(settings.PROGRAM_TIMEZONE)).date()

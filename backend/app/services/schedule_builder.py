"""커리큘럼 템플릿 행을 코호트 스케줄 행으로 변환합니다."""

from datetime import date, datetime, time
from typing import Any, Dict, List, Mapping, Optional, Sequence

from app.config import settings
from app.services.session_dates import is_live_session, resolve_session_date
from app.utils.dates import day_name
from app.utils.errors import MissingSourceData

PASS_THROUGH_FIELDS = (
    "session_type",
    "subject_type",
    "subject_name",
    "subject_topic",
    "initial_session_material",
)


def _get(record: Any, key: str):
    if isinstance(record, Mapping):
        return record.get(key)
    return getattr(record, key, None)


def build_schedule_row(
    record: Any,
    start_date: date,
    day1: str,
    day2: str,
    mentor_id: Optional[int],
    session_time: time,
    created_at: Optional[datetime],
) -> Dict[str, Any]:
    week_number = _get(record, "week_number")
    session_number = _get(record, "session_number")
    session_type = _get(record, "session_type")

    session_date = None
    if week_number and session_number:
        session_date = resolve_session_date(start_date, week_number, session_number, session_type, day1, day2)

    row = {
        "id": _get(record, "id"),
        "week_number": week_number,
        "session_number": session_number,
        "date": session_date,
        "time": session_time,
        "day": day_name(session_date) if session_date else None,
    }
    for field in PASS_THROUGH_FIELDS:
        row[field] = _get(record, field)
    row.update(
        {
            "session_material": None,
            "session_recording": None,
            "mentor_id": mentor_id if is_live_session(session_type) else None,
            "swapped_mentor_id": None,
            "teams_meeting_link": None,
            "notification_sent": False,
            "email_sent": False,
            "whatsapp_sent": False,
            "created_at": created_at,
        }
    )
    return row


def build_schedule_rows(
    template_rows: Sequence[Any],
    start_date: date,
    day1: str,
    day2: str,
    mentor_id: Optional[int],
    session_time: Optional[time] = None,
    created_at: Optional[datetime] = None,
) -> List[Dict[str, Any]]:
    """Bind template rows to calendar dates, preserving template order.

    Rows without week/session numbers, or whose day names are unrecognised,
    keep a null date and day instead of failing the batch.
    """
    if not template_rows:
        raise MissingSourceData("no template data: 템플릿 데이터가 없습니다.")
    if session_time is None:
        session_time = time.fromisoformat(settings.DEFAULT_SESSION_TIME)
    return [
        build_schedule_row(record, start_date, day1, day2, mentor_id, session_time, created_at)
        for record in template_rows
    ]

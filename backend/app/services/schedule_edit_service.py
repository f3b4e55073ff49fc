"""Schedule Edit Service 도메인 서비스 레이어입니다. 세션 추가/수정, 연기/당김, 주차 삭제 규칙을 캡슐화합니다."""

import logging
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from app.models.cohort_schedule import EDITABLE_COLUMNS
from app.services.cohort_store import CohortScheduleStore, coerce_values, parse_time
from app.utils.dates import day_name, daterange, parse_iso_date
from app.utils.errors import ScheduleError, SessionMoveError, SessionNotFound

logger = logging.getLogger(__name__)

MOVE_MODES = ("postpone", "prepone")
OPEN_ENDED_WINDOW_DAYS = 30


def list_sessions(db: Session, table_name: str) -> List[Dict[str, Any]]:
    return CohortScheduleStore(db, table_name).all_rows()


def _require_row(store: CohortScheduleStore, session_id: int) -> Dict[str, Any]:
    row = store.get_row(session_id)
    if not row:
        raise SessionNotFound(f"세션을 찾을 수 없습니다: {session_id}")
    return row


def add_session(db: Session, table_name: str, payload: Dict[str, Any]) -> Dict[str, Any]:
    store = CohortScheduleStore(db, table_name)
    week_number = payload["week_number"]
    new_id = (store.max_id() or 0) + 1
    session_number = payload.get("session_number") or (store.max_session_in_week(week_number) or 0) + 1

    values = {column: payload.get(column) for column in EDITABLE_COLUMNS}
    values.update(
        {
            "id": new_id,
            "week_number": week_number,
            "session_number": session_number,
            "notification_sent": False,
            "email_sent": False,
            "whatsapp_sent": False,
        }
    )
    session_date = parse_iso_date(values.get("date"))
    values["day"] = day_name(session_date) if session_date else None
    store.insert_row(values)
    logger.info("[schedule] %s: added session %s (week %s #%s)", table_name, new_id, week_number, session_number)
    return {
        "session": store.get_row(new_id),
        "message": f"{week_number}주차에 {session_number}번 세션을 추가했습니다.",
    }


def _with_day(values: Dict[str, Any]) -> Dict[str, Any]:
    # 날짜를 바꾸면 요일도 함께 맞춘다.
    if "date" in values:
        session_date = parse_iso_date(values["date"])
        values["date"] = session_date
        values["day"] = day_name(session_date) if session_date else None
    return values


def _validated(values: Dict[str, Any]) -> Dict[str, Any]:
    try:
        return coerce_values(_with_day(values))
    except (TypeError, ValueError) as exc:
        raise ScheduleError(f"잘못된 값입니다: {exc}", status_code=400) from exc


def update_session_field(db: Session, table_name: str, session_id: int, field: str, value: Any) -> Dict[str, Any]:
    if field not in EDITABLE_COLUMNS:
        raise ScheduleError(f"수정할 수 없는 항목입니다: {field}", status_code=400)
    store = CohortScheduleStore(db, table_name)
    _require_row(store, session_id)
    store.update_row(session_id, _validated({field: value}))
    return store.get_row(session_id)


def bulk_update_sessions(db: Session, table_name: str, session_ids: List[int], values: Dict[str, Any]) -> int:
    invalid = [field for field in values if field not in EDITABLE_COLUMNS]
    if invalid:
        raise ScheduleError(f"수정할 수 없는 항목입니다: {', '.join(invalid)}", status_code=400)
    if not values:
        return 0
    return CohortScheduleStore(db, table_name).update_rows(session_ids, _validated(dict(values)))


def _taken_dates(rows: List[Dict[str, Any]], exclude_id: Optional[int] = None) -> set:
    return {
        parse_iso_date(row["date"])
        for row in rows
        if row.get("date") and row.get("id") != exclude_id
    }


def _find(rows: List[Dict[str, Any]], session_id: int) -> Dict[str, Any]:
    for row in rows:
        if row.get("id") == session_id:
            return row
    raise SessionNotFound(f"세션을 찾을 수 없습니다: {session_id}")


def postpone_dates(rows: List[Dict[str, Any]], session_id: int, today: date) -> List[date]:
    """Free dates after the session and before the next session by date."""
    session_date = parse_iso_date(_find(rows, session_id).get("date"))
    if not session_date:
        return []
    later = sorted(d for d in _taken_dates(rows, session_id) if d > session_date)
    if later:
        max_date = later[0] - timedelta(days=1)
    else:
        max_date = session_date + timedelta(days=OPEN_ENDED_WINDOW_DAYS)
    taken = _taken_dates(rows, session_id)
    start = max(session_date + timedelta(days=1), today)
    return [d for d in daterange(start, max_date) if d not in taken]


def prepone_dates(rows: List[Dict[str, Any]], session_id: int, today: date) -> List[date]:
    """Free dates before the session and after the previous session by date, never before today."""
    session_date = parse_iso_date(_find(rows, session_id).get("date"))
    if not session_date:
        return []
    earlier = sorted((d for d in _taken_dates(rows, session_id) if d < session_date), reverse=True)
    if earlier:
        min_date = earlier[0] + timedelta(days=1)
    else:
        min_date = session_date - timedelta(days=OPEN_ENDED_WINDOW_DAYS)
    min_date = max(min_date, today)
    taken = _taken_dates(rows, session_id)
    return [d for d in daterange(min_date, session_date - timedelta(days=1)) if d not in taken]


def move_dates(rows: List[Dict[str, Any]], session_id: int, mode: str, today: date) -> List[date]:
    if mode == "postpone":
        return postpone_dates(rows, session_id, today)
    if mode == "prepone":
        return prepone_dates(rows, session_id, today)
    raise SessionMoveError(f"지원하지 않는 이동 방식입니다: {mode}")


def _ordered(rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return sorted(rows, key=lambda r: (r.get("week_number") or 0, r.get("session_number") or 0))


def edit_dates(rows: List[Dict[str, Any]], session_id: int, today: date) -> List[date]:
    """Free dates between the previous and next session in week/session order."""
    ordered = _ordered(rows)
    index = next((i for i, row in enumerate(ordered) if row.get("id") == session_id), None)
    if index is None:
        raise SessionNotFound(f"세션을 찾을 수 없습니다: {session_id}")
    prev_row = ordered[index - 1] if index > 0 else None
    next_row = ordered[index + 1] if index < len(ordered) - 1 else None

    min_date = today
    prev_date = parse_iso_date(prev_row.get("date")) if prev_row else None
    if prev_date and prev_date + timedelta(days=1) > min_date:
        min_date = prev_date + timedelta(days=1)

    next_date = parse_iso_date(next_row.get("date")) if next_row else None
    if next_date:
        max_date = next_date - timedelta(days=1)
    else:
        max_date = min_date + timedelta(days=OPEN_ENDED_WINDOW_DAYS)

    taken = _taken_dates(rows, session_id)
    return [d for d in daterange(min_date, max_date) if d not in taken]


def _minutes(value) -> Optional[int]:
    parsed = parse_time(value)
    if parsed is None:
        return None
    return parsed.hour * 60 + parsed.minute


def is_time_valid_for_move(current_time, new_time, mode: str) -> bool:
    current = _minutes(current_time)
    new = _minutes(new_time)
    if current is None or new is None:
        return True
    if mode == "prepone":
        return new < current
    return new > current


def move_session(
    db: Session,
    table_name: str,
    session_id: int,
    mode: str,
    new_date: Optional[date],
    new_time: Optional[str],
    today: date,
) -> Dict[str, Any]:
    if mode not in MOVE_MODES:
        raise SessionMoveError(f"지원하지 않는 이동 방식입니다: {mode}")
    store = CohortScheduleStore(db, table_name)
    rows = store.all_rows()
    row = _find(rows, session_id)

    current_date = parse_iso_date(row.get("date"))
    current_minutes = _minutes(row.get("time"))
    effective_date = new_date or current_date
    try:
        effective_time = parse_time(new_time) if new_time else parse_time(row.get("time"))
    except ValueError as exc:
        raise SessionMoveError(f"잘못된 시간 형식입니다: {new_time}") from exc
    effective_minutes = _minutes(effective_time)

    date_changed = effective_date != current_date
    time_changed = effective_minutes != current_minutes
    if not date_changed and not time_changed:
        raise SessionMoveError("날짜 또는 시간을 변경해주세요.")

    if date_changed and effective_date not in move_dates(rows, session_id, mode, today):
        raise SessionMoveError(f"{effective_date} 은(는) 선택할 수 없는 날짜입니다.")
    if not date_changed and not is_time_valid_for_move(row.get("time"), effective_time, mode):
        direction = "이전" if mode == "prepone" else "이후"
        raise SessionMoveError(f"같은 날짜에서는 {row.get('time')} {direction} 시간만 선택할 수 있습니다.")

    values: Dict[str, Any] = {}
    if date_changed:
        values.update(_with_day({"date": effective_date}))
    if time_changed:
        values["time"] = effective_time
    store.update_row(session_id, values)
    logger.info("[schedule] %s: session %s %sd to %s %s", table_name, session_id, mode, effective_date, effective_time)
    return store.get_row(session_id)


ORDINAL_SUFFIX = {1: "st", 2: "nd", 3: "rd"}


def _ordinal(day: int) -> str:
    if 11 <= day <= 13:
        return f"{day}th"
    return f"{day}{ORDINAL_SUFFIX.get(day % 10, 'th')}"


def format_span_label(start: date, end: date) -> str:
    def fmt(d: date) -> str:
        return f"{_ordinal(d.day)} {d.strftime('%b')}"

    if start == end:
        return fmt(start)
    return f"{fmt(start)} → {fmt(end)}"


def available_date_spans(rows: List[Dict[str, Any]], week_number: int, today: date) -> List[Dict[str, Any]]:
    """Runs of free dates around a week, bounded by the neighbouring weeks' sessions."""
    dated = sorted((r for r in rows if r.get("date")), key=lambda r: parse_iso_date(r["date"]))
    this_week = [parse_iso_date(r["date"]) for r in dated if r.get("week_number") == week_number]
    prev_week = [parse_iso_date(r["date"]) for r in dated if r.get("week_number") == week_number - 1]
    next_week = [parse_iso_date(r["date"]) for r in dated if r.get("week_number") == week_number + 1]

    if prev_week:
        week_start = prev_week[-1] + timedelta(days=1)
    elif this_week:
        week_start = this_week[0] - timedelta(days=7)
    else:
        return []
    if next_week:
        week_end = next_week[0] - timedelta(days=1)
    elif this_week:
        week_end = this_week[-1] + timedelta(days=7)
    else:
        return []

    week_start = max(week_start, today)
    if week_end < today:
        return []

    taken = set(this_week)
    spans = []
    span_start = None
    for current in daterange(week_start, week_end):
        if current not in taken:
            if span_start is None:
                span_start = current
            continue
        if span_start is not None:
            span_end = current - timedelta(days=1)
            spans.append({"start": span_start, "end": span_end, "label": format_span_label(span_start, span_end)})
            span_start = None
    if span_start is not None:
        spans.append({"start": span_start, "end": week_end, "label": format_span_label(span_start, week_end)})
    return spans


def delete_week(db: Session, table_name: str, week_number: int) -> Dict[str, Any]:
    """Delete a week and pull every later week one week earlier, all in one transaction."""
    store = CohortScheduleStore(db, table_name)
    later = store.select_rows(store.table.c.week_number > week_number)
    shifts = []
    for row in later:
        values: Dict[str, Any] = {"week_number": row["week_number"] - 1}
        if row.get("date"):
            values.update(_with_day({"date": parse_iso_date(row["date"]) - timedelta(days=7)}))
        shifts.append((row["id"], values))

    deleted, updated = store.delete_week(week_number, shifts)
    if not deleted:
        raise SessionNotFound(f"{week_number}주차 세션이 없습니다.")
    logger.info("[schedule] %s: deleted week %s (%s rows), shifted %s rows", table_name, week_number, deleted, updated)
    return {"deleted_count": deleted, "updated_count": updated}

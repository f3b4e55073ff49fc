"""Meeting Service 도메인 서비스 레이어입니다. 다가오는 세션에 회의 링크를 만들어 저장합니다."""

import logging
from datetime import date, datetime, time, timedelta
from typing import Dict, List, Optional

import httpx
from sqlalchemy.orm import Session

from app.config import settings
from app.models.cohort_schedule import parse_cohort_table_name
from app.models.mentor import Mentor
from app.models.student import Student
from app.services.cohort_store import CohortScheduleStore, parse_time, retry_on_schema_not_ready
from app.services.meeting_client import MeetingClient
from app.services.table_catalog import ScheduleTableCatalog, get_table_catalog
from app.utils.errors import ScheduleError, StoreError

logger = logging.getLogger(__name__)


def has_meeting_link(value: Optional[str]) -> bool:
    text = (value or "").strip()
    return bool(text) and text != "null"


def mentor_email_map(db: Session) -> Dict[int, str]:
    return {m.mentor_id: m.email for m in db.query(Mentor).all() if m.email}


def cohort_student_emails(db: Session, cohort_type: str, cohort_number: str) -> List[str]:
    rows = (
        db.query(Student.email)
        .filter(Student.cohort_type == cohort_type, Student.cohort_number == cohort_number)
        .order_by(Student.student_id.asc())
        .all()
    )
    return [email for (email,) in rows if email and "@" in email]


def meeting_subject(cohort: Optional[tuple], subject_name: Optional[str]) -> str:
    cohort_type, cohort_number = cohort or ("Unknown", "0.0")
    return f"Cohort {cohort_type} {cohort_number} - {subject_name or 'Session'}"


def meeting_window(session_date: date, session_time: Optional[time]) -> tuple:
    start_time = session_time or parse_time(settings.MEETING_FALLBACK_TIME)
    start = datetime.combine(session_date, start_time)
    return start, start + timedelta(minutes=settings.MEETING_DURATION_MINUTES)


def generate_meetings(
    db: Session,
    client: MeetingClient,
    today: date,
    catalog: ScheduleTableCatalog | None = None,
) -> dict:
    until = today + timedelta(days=settings.MEETING_LOOKAHEAD_DAYS)
    mentor_emails = mentor_email_map(db)
    student_cache: Dict[tuple, List[str]] = {}
    results = []

    for table_name in (catalog or get_table_catalog(db)).list_tables():
        cohort = parse_cohort_table_name(table_name)
        student_emails: List[str] = []
        if cohort:
            if cohort not in student_cache:
                student_cache[cohort] = cohort_student_emails(db, *cohort)
            student_emails = student_cache[cohort]

        store = CohortScheduleStore(db, table_name)
        try:
            sessions = store.rows_between(today, until)
        except StoreError as exc:
            logger.warning("[meeting] skip %s: %s", table_name, exc)
            results.append({"table": table_name, "status": "error", "message": exc.message})
            continue

        if not sessions:
            results.append({"table": table_name, "status": "no_sessions", "message": "회의 링크가 필요한 세션이 없습니다."})
            continue

        created = 0
        for session in sessions:
            if not session.get("date") or has_meeting_link(session.get("teams_meeting_link")):
                continue
            start, end = meeting_window(session["date"], session.get("time"))
            attendees = []
            mentor_email = mentor_emails.get(session.get("mentor_id"))
            if mentor_email:
                attendees.append(mentor_email)
            attendees.extend(student_emails)
            subject = meeting_subject(cohort, session.get("subject_name"))
            try:
                link = client.create_meeting(subject, start, end, attendees)
                retry_on_schema_not_ready(store.update_row, session["id"], {"teams_meeting_link": link})
            except (ScheduleError, httpx.HTTPError) as exc:
                logger.error("[meeting] %s session %s failed: %s", table_name, session["id"], exc)
                continue
            created += 1

        logger.info("[meeting] %s: %s sessions in window, %s meetings created", table_name, len(sessions), created)
        results.append(
            {
                "table": table_name,
                "status": "success",
                "sessions_found": len(sessions),
                "meetings_created": created,
                "students_in_cohort": len(student_emails),
            }
        )

    return {
        "success": True,
        "date_range": {"from": today.isoformat(), "to": until.isoformat()},
        "results": results,
    }

"""Notification Service 도메인 서비스 레이어입니다. 당일 세션 안내를 수강생과 멘토에게 발송합니다.

발송 후 세션 행에 notification_sent 를 표시해 같은 세션이 하루에 두 번 발송되지 않게 합니다.
"""

import html
import logging
import time as time_module
from datetime import date
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from app.config import settings
from app.models.cohort_schedule import cohort_table_name
from app.models.mentor import Mentor
from app.models.student import Student
from app.services.cohort_store import CohortScheduleStore, parse_time, retry_on_schema_not_ready
from app.services.notifiers import Notifier
from app.utils.errors import ScheduleError, StoreError

logger = logging.getLogger(__name__)

DEFAULT_SENDER_NAME = "Mentor Team"


def _pause():
    # 발송 업체 rate limit 회피
    if settings.NOTIFY_DELAY_SECONDS > 0:
        time_module.sleep(settings.NOTIFY_DELAY_SECONDS)


def active_cohorts(db: Session) -> Dict[str, str]:
    """``"Basic 1.1" -> "basic1_1_schedule"`` for every cohort in the student roster."""
    mapping: Dict[str, str] = {}
    rows = db.query(Student.cohort_type, Student.cohort_number).distinct().all()
    for cohort_type, cohort_number in rows:
        if not cohort_type or not cohort_number:
            continue
        key = f"{cohort_type} {cohort_number}"
        if key in mapping:
            continue
        try:
            mapping[key] = cohort_table_name(cohort_type, cohort_number)
        except ScheduleError:
            logger.warning("[notify] ignoring unparseable cohort %s", key)
    if not mapping:
        logger.info("[notify] no cohorts in roster, using fallback cohorts")
        for key in settings.FALLBACK_COHORTS:
            cohort_type, _, cohort_number = key.partition(" ")
            try:
                mapping[key] = cohort_table_name(cohort_type, cohort_number)
            except ScheduleError:
                logger.warning("[notify] ignoring unparseable fallback cohort %s", key)
    return mapping


def mentor_info(mentors: Dict[int, Mentor], mentor_id: Optional[int]) -> dict:
    mentor = mentors.get(mentor_id or settings.DEFAULT_MENTOR_ID) or mentors.get(settings.DEFAULT_MENTOR_ID)
    return {
        "name": (mentor.name if mentor else None) or DEFAULT_SENDER_NAME,
        "email": mentor.email if mentor else None,
    }


def format_session_date(value: date) -> str:
    return f"{value.strftime('%A')}, {value.day} {value.strftime('%B %Y')}"


def format_session_time(value) -> str:
    parsed = parse_time(value)
    if parsed is None:
        return "Check Dashboard"
    return parsed.strftime("%I:%M %p")


def _session_lines(session: dict, mentor_name: str) -> List[str]:
    lines = [
        f"<li><b>Date:</b> {html.escape(format_session_date(session['date']))} ({html.escape(session.get('day') or '')})</li>",
        f"<li><b>Time:</b> {html.escape(format_session_time(session.get('time')))}</li>",
        f"<li><b>Subject:</b> {html.escape(session.get('subject_name') or 'Session')}</li>",
        f"<li><b>Topic:</b> {html.escape(session.get('subject_topic') or '')}</li>",
        f"<li><b>Type:</b> {html.escape(session.get('session_type') or 'Live Session')}</li>",
        f"<li><b>Mentor:</b> {html.escape(mentor_name)}</li>",
    ]
    link = session.get("teams_meeting_link")
    if link:
        lines.append(f'<li><b>Join:</b> <a href="{html.escape(link)}">{html.escape(link)}</a></li>')
    return lines


def student_email_html(student_name: str, session: dict, mentor_name: str) -> str:
    items = "\n".join(_session_lines(session, mentor_name))
    return (
        f"<p>Hi {html.escape(student_name)},</p>\n"
        f"<p>You have a session scheduled today:</p>\n<ul>\n{items}\n</ul>\n"
        "<p>See you in class!</p>"
    )


def mentor_email_html(mentor_name: str, session: dict, cohort_key: str, student_count: int) -> str:
    items = "\n".join(_session_lines(session, mentor_name))
    return (
        f"<p>Hi {html.escape(mentor_name)},</p>\n"
        f"<p>Reminder: you are teaching <b>{html.escape(cohort_key)}</b> today "
        f"({student_count} students).</p>\n<ul>\n{items}\n</ul>"
    )


def _students(db: Session, cohort_key: str) -> List[Student]:
    cohort_type, _, cohort_number = cohort_key.partition(" ")
    return (
        db.query(Student)
        .filter(Student.cohort_type == cohort_type, Student.cohort_number == cohort_number)
        .order_by(Student.student_id.asc())
        .all()
    )


def send_daily_notifications(
    db: Session,
    email_notifier: Notifier,
    today: date,
    whatsapp_notifier: Optional[Notifier] = None,
) -> dict:
    mentors = {m.mentor_id: m for m in db.query(Mentor).all()}
    cohorts = active_cohorts(db)
    logger.info("[notify] sending reminders for %s across %s cohorts", today, len(cohorts))

    results = []
    total_student_emails = 0
    total_mentor_emails = 0

    for cohort_key, table_name in cohorts.items():
        store = CohortScheduleStore(db, table_name)
        try:
            sessions = store.rows_on(today)
        except StoreError as exc:
            logger.info("[notify] skip %s: %s", table_name, exc)
            continue

        for session in sessions:
            if not session.get("time") or session.get("notification_sent"):
                continue

            students = _students(db, cohort_key)
            mentor = mentor_info(mentors, session.get("mentor_id"))
            subject = f"Upcoming Session: {session.get('subject_name') or 'Session'} - {session.get('subject_topic') or ''}"

            student_emails_sent = 0
            whatsapp_sent = 0
            for student in students:
                if student.email:
                    body = student_email_html(student.full_name or "Student", session, mentor["name"])
                    if email_notifier.send(student.email, subject, body):
                        student_emails_sent += 1
                    _pause()
                if whatsapp_notifier and student.phone:
                    text = f"{session.get('subject_name') or 'Session'} today at {format_session_time(session.get('time'))}"
                    if whatsapp_notifier.send(student.phone, subject, text):
                        whatsapp_sent += 1
                    _pause()

            mentor_notified = False
            if mentor["email"]:
                body = mentor_email_html(mentor["name"], session, cohort_key, len(students))
                mentor_notified = email_notifier.send(
                    mentor["email"],
                    f"Mentor Reminder: {cohort_key} - {session.get('subject_name') or 'Session'}",
                    body,
                )
                _pause()

            try:
                retry_on_schema_not_ready(
                    store.update_row,
                    session["id"],
                    {
                        "notification_sent": True,
                        "email_sent": bool(student_emails_sent or mentor_notified),
                        "whatsapp_sent": bool(whatsapp_sent),
                    },
                )
            except StoreError as exc:
                logger.error("[notify] could not mark %s session %s as notified: %s", table_name, session["id"], exc)

            total_student_emails += student_emails_sent
            total_mentor_emails += int(mentor_notified)
            results.append(
                {
                    "cohort": cohort_key,
                    "session_id": session["id"],
                    "subject": session.get("subject_name"),
                    "topic": session.get("subject_topic"),
                    "time": format_session_time(session.get("time")),
                    "student_emails_sent": student_emails_sent,
                    "whatsapp_sent": whatsapp_sent,
                    "mentor_notified": mentor_notified,
                }
            )

    return {
        "success": True,
        "notification_date": today.isoformat(),
        "total_student_emails_sent": total_student_emails,
        "total_mentor_emails_sent": total_mentor_emails,
        "sessions_notified": len(results),
        "details": results,
    }

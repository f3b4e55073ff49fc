"""Mentor Attendance Service 도메인 서비스 레이어입니다.

모든 코호트 스케줄 테이블을 훑어 멘토별 출석(담당 수업 중 직접 진행/대체됨)과
특별 출석(다른 멘토 수업을 대신 진행)을 집계하고 mentor_id 기준으로 덮어씁니다.
녹화본(session_recording)이 있는 수업만 완료된 수업으로 봅니다.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.attendance import MentorAttendance
from app.models.mentor import Mentor
from app.models.user import User
from app.services.auth_service import linked_mentor
from app.services.cohort_store import CohortScheduleStore
from app.services.table_catalog import ScheduleTableCatalog, get_table_catalog
from app.utils.errors import MissingSourceData, ScheduleError, StoreError

logger = logging.getLogger(__name__)


@dataclass
class MentorTally:
    mentor_id: int
    name: str
    email: str | None
    total_classes: int = 0
    present: int = 0
    absent: int = 0
    special_attendance: int = 0
    skipped_tables: List[str] = field(default_factory=list)

    @property
    def attendance_percent(self) -> float:
        if self.total_classes <= 0:
            return 0
        return round(self.present / self.total_classes * 100, 2)

    def as_dict(self) -> dict:
        return {
            "mentor_id": self.mentor_id,
            "name": self.name,
            "email": self.email,
            "total_classes": self.total_classes,
            "present": self.present,
            "absent": self.absent,
            "special_attendance": self.special_attendance,
            "attendance_percent": self.attendance_percent,
        }


def load_mentors(db: Session) -> List[Mentor]:
    try:
        mentors = db.query(Mentor).order_by(Mentor.mentor_id.asc()).all()
    except SQLAlchemyError as exc:
        raise MissingSourceData(f"멘토 명단을 불러오지 못했습니다: {exc}", status_code=500) from exc
    if not mentors:
        raise MissingSourceData("멘토 명단이 비어 있습니다.", status_code=500)
    return mentors


def scan_mentor(db: Session, mentor: Mentor, table_names: List[str]) -> MentorTally:
    tally = MentorTally(
        mentor_id=mentor.mentor_id,
        name=mentor.name or "Unknown",
        email=mentor.email or None,
    )
    for table_name in table_names:
        store = CohortScheduleStore(db, table_name)
        try:
            assigned = store.completed_rows("mentor_id", mentor.mentor_id)
            substituted = store.completed_rows("swapped_mentor_id", mentor.mentor_id)
        except StoreError as exc:
            logger.warning("[attendance] skip %s for mentor %s: %s", table_name, mentor.mentor_id, exc)
            tally.skipped_tables.append(table_name)
            continue

        for row in assigned:
            tally.total_classes += 1
            if row.get("swapped_mentor_id") is not None:
                tally.absent += 1
            else:
                tally.present += 1
        # 대체 진행 수업은 비율 계산(total_classes)에 포함하지 않는다.
        tally.special_attendance += len(substituted)
    return tally


def persist_tally(db: Session, tally: MentorTally, updated_at: datetime) -> bool:
    try:
        record = db.get(MentorAttendance, tally.mentor_id)
        if record is None:
            record = MentorAttendance(mentor_id=tally.mentor_id)
            db.add(record)
        record.name = tally.name
        record.email = tally.email
        record.total_classes = tally.total_classes
        record.present = tally.present
        record.absent = tally.absent
        record.special_attendance = tally.special_attendance
        record.attendance_percent = tally.attendance_percent
        record.updated_at = updated_at
        db.commit()
        return True
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("[attendance] failed to save mentor %s: %s", tally.mentor_id, exc)
        return False


def calculate_mentor_attendance(db: Session, catalog: ScheduleTableCatalog | None = None) -> dict:
    mentors = load_mentors(db)
    table_names = (catalog or get_table_catalog(db)).list_tables()
    logger.info("[attendance] %s mentors, %s cohort tables", len(mentors), len(table_names))

    results = []
    failed_saves = []
    for mentor in mentors:
        tally = scan_mentor(db, mentor, table_names)
        logger.info(
            "[attendance] mentor=%s total=%s present=%s absent=%s special=%s percent=%s",
            tally.mentor_id,
            tally.total_classes,
            tally.present,
            tally.absent,
            tally.special_attendance,
            tally.attendance_percent,
        )
        if not persist_tally(db, tally, datetime.now(timezone.utc).replace(tzinfo=None)):
            failed_saves.append(tally.mentor_id)
        results.append(tally.as_dict())

    return {
        "success": True,
        "message": f"{len(mentors)}명의 멘토 출석을 계산했습니다.",
        "tables_scanned": table_names,
        "failed_saves": failed_saves,
        "results": results,
    }


def list_mentor_attendance(db: Session) -> List[MentorAttendance]:
    try:
        return (
            db.query(MentorAttendance)
            .order_by(MentorAttendance.attendance_percent.desc(), MentorAttendance.mentor_id.asc())
            .all()
        )
    except SQLAlchemyError as exc:
        raise ScheduleError(f"멘토 출석 정보를 불러오지 못했습니다: {exc}") from exc


def attendance_for_user(db: Session, user: User) -> MentorAttendance:
    """Attendance record of the mentor whose roster email matches the logged-in staff member."""
    mentor = linked_mentor(db, user)
    if mentor is None:
        raise MissingSourceData(f"{user.emp_id} 계정과 연결된 멘토가 없습니다.")
    record = db.get(MentorAttendance, mentor.mentor_id)
    if record is None:
        raise MissingSourceData(f"멘토 {mentor.mentor_id} 의 출석 집계가 아직 없습니다.")
    return record

"""Mentor Attendance 기능 API 라우터입니다. 멘토 출석 재계산과 결과 조회를 제공합니다."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.middleware.auth_middleware import get_current_user, require_roles
from app.models.user import User
from app.schemas.attendance import MentorAttendanceOut, MentorAttendanceRunResult
from app.services import mentor_attendance_service
from app.utils.permissions import ADMIN

router = APIRouter(prefix="/api/mentor-attendance", tags=["mentor-attendance"])


@router.post("", response_model=MentorAttendanceRunResult)
def recalculate(
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles(ADMIN)),
):
    return mentor_attendance_service.calculate_mentor_attendance(db)


@router.get("", response_model=List[MentorAttendanceOut])
def list_attendance(
    db: Session = Depends(get_db),
    _current_user: User = Depends(get_current_user),
):
    return mentor_attendance_service.list_mentor_attendance(db)


@router.get("/me", response_model=MentorAttendanceOut)
def my_attendance(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return mentor_attendance_service.attendance_for_user(db, current_user)

"""SQLAlchemy 모델 패키지 초기화 모듈입니다."""

from app.models.user import User
from app.models.mentor import Mentor
from app.models.student import Student
from app.models.schedule import ScheduleTemplate
from app.models.attendance import MentorAttendance

__all__ = [
    "User",
    "Mentor",
    "Student",
    "ScheduleTemplate",
    "MentorAttendance",
]

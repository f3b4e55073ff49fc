"""서비스 레이어 패키지 초기화 모듈입니다."""

from app.services import (
    auth_service,
    cohort_service,
    mentor_attendance_service,
    schedule_edit_service,
    meeting_service,
    notification_service,
)

"""스케줄러(회의 생성/알림 발송) 실행 결과 스키마입니다."""

from typing import List, Optional

from pydantic import BaseModel, Field


class MeetingTableResult(BaseModel):
    table: str
    status: str
    message: Optional[str] = None
    sessions_found: Optional[int] = None
    meetings_created: Optional[int] = None
    students_in_cohort: Optional[int] = None


class DateRange(BaseModel):
    from_: str = Field(alias="from")
    to: str

    model_config = {"populate_by_name": True}


class MeetingRunResult(BaseModel):
    success: bool
    date_range: DateRange
    results: List[MeetingTableResult]

    model_config = {"populate_by_name": True}


class NotificationDetail(BaseModel):
    cohort: str
    session_id: int
    subject: Optional[str] = None
    topic: Optional[str] = None
    time: str
    student_emails_sent: int
    whatsapp_sent: int
    mentor_notified: bool


class NotificationRunResult(BaseModel):
    success: bool
    notification_date: str
    total_student_emails_sent: int
    total_mentor_emails_sent: int
    sessions_notified: int
    details: List[NotificationDetail]

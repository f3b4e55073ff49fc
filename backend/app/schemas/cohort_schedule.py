"""코호트 스케줄 세션 편집 요청/응답 스키마입니다."""

import datetime as dt
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field


class SessionOut(BaseModel):
    id: int
    week_number: Optional[int] = None
    session_number: Optional[int] = None
    date: Optional[dt.date] = None
    time: Optional[dt.time] = None
    day: Optional[str] = None
    session_type: Optional[str] = None
    subject_type: Optional[str] = None
    subject_name: Optional[str] = None
    subject_topic: Optional[str] = None
    initial_session_material: Optional[str] = None
    session_material: Optional[str] = None
    session_recording: Optional[str] = None
    mentor_id: Optional[int] = None
    swapped_mentor_id: Optional[int] = None
    teams_meeting_link: Optional[str] = None
    notification_sent: Optional[bool] = None
    email_sent: Optional[bool] = None
    whatsapp_sent: Optional[bool] = None
    created_at: Optional[dt.datetime] = None


class SessionCreate(BaseModel):
    week_number: int = Field(ge=1)
    session_number: Optional[int] = Field(default=None, ge=1)
    date: Optional[dt.date] = None
    time: Optional[dt.time] = None
    session_type: Optional[str] = None
    subject_type: Optional[str] = None
    subject_name: Optional[str] = None
    subject_topic: Optional[str] = None
    initial_session_material: Optional[str] = None
    session_material: Optional[str] = None
    session_recording: Optional[str] = None
    mentor_id: Optional[int] = None
    swapped_mentor_id: Optional[int] = None
    teams_meeting_link: Optional[str] = None


class SessionCreateResult(BaseModel):
    session: SessionOut
    message: str


class SessionFieldUpdate(BaseModel):
    field: str
    value: Any = None


class SessionBulkUpdate(BaseModel):
    session_ids: List[int] = Field(min_length=1)
    values: Dict[str, Any]


class SessionBulkUpdateResult(BaseModel):
    updated: int


class SessionMoveRequest(BaseModel):
    mode: Literal["postpone", "prepone"]
    new_date: Optional[dt.date] = None
    new_time: Optional[str] = None


class SessionDatesOut(BaseModel):
    session_id: int
    mode: str
    dates: List[dt.date]


class DateSpanOut(BaseModel):
    start: dt.date
    end: dt.date
    label: str


class WeekDeleteResult(BaseModel):
    deleted_count: int
    updated_count: int

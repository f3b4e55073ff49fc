"""멘토 출석 집계 요청/응답 스키마입니다."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class MentorAttendanceOut(BaseModel):
    mentor_id: int
    name: Optional[str] = None
    email: Optional[str] = None
    total_classes: int
    present: int
    absent: int
    special_attendance: int
    attendance_percent: float
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class MentorAttendanceRunResult(BaseModel):
    success: bool
    message: str
    tables_scanned: List[str]
    failed_saves: List[int]
    results: List[MentorAttendanceOut]

"""Mentor 응답 스키마입니다."""

from typing import Optional

from pydantic import BaseModel


class MentorOut(BaseModel):
    mentor_id: int
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None

    model_config = {"from_attributes": True}

"""운영자 로그인/프로필 요청·응답 Pydantic 스키마입니다."""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class UserBase(BaseModel):
    emp_id: str
    name: str
    role: str
    email: Optional[str] = None


class UserOut(UserBase):
    user_id: int
    is_active: bool
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class StaffProfileOut(UserOut):
    is_admin: bool
    can_manage_schedule: bool
    mentor_id: Optional[int] = None


class LoginRequest(BaseModel):
    emp_id: str = Field(min_length=1, description="사번 또는 등록된 이메일")


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: StaffProfileOut

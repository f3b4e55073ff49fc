"""Mentors 기능 API 라우터입니다. 코호트 생성 화면의 멘토 선택 목록을 제공합니다."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.middleware.auth_middleware import get_current_user
from app.models.mentor import Mentor
from app.models.user import User
from app.schemas.mentor import MentorOut

router = APIRouter(prefix="/api/mentors", tags=["mentors"])


@router.get("", response_model=List[MentorOut])
def list_mentors(
    db: Session = Depends(get_db),
    _current_user: User = Depends(get_current_user),
):
    return db.query(Mentor).order_by(Mentor.mentor_id.asc()).all()

"""Auth Service 도메인 서비스 레이어입니다.

운영자(admin/staff)는 사번 또는 등록된 이메일로 모의 SSO 로그인합니다.
토큰에는 발급 시점의 역할이 담기며, 운영자 이메일이 멘토 명단과 일치하면
프로필에 해당 멘토 ID를 함께 돌려줍니다.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import HTTPException, status
from jose import jwt
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from app.config import settings
from app.models.mentor import Mentor
from app.models.user import User
from app.utils.permissions import ADMIN, can_manage_schedule

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


def create_access_token(user: User) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {"sub": str(user.user_id), "role": user.role, "exp": expire}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=ALGORITHM)


def find_staff(db: Session, login_id: str) -> Optional[User]:
    login_id = (login_id or "").strip()
    if not login_id:
        return None
    return (
        db.query(User)
        .filter(
            or_(User.emp_id == login_id, func.lower(User.email) == login_id.lower()),
            User.is_active == True,
        )
        .first()
    )


def mock_sso_login(db: Session, login_id: str) -> User:
    user = find_staff(db, login_id)
    if not user:
        logger.warning("[auth] login rejected for %r", login_id)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"'{login_id}'에 해당하는 활성 운영자를 찾을 수 없습니다.",
        )
    logger.info("[auth] login emp_id=%s role=%s", user.emp_id, user.role)
    return user


def linked_mentor(db: Session, user: User) -> Optional[Mentor]:
    if not user.email:
        return None
    return db.query(Mentor).filter(func.lower(Mentor.email) == user.email.strip().lower()).first()


def staff_profile(db: Session, user: User) -> dict:
    mentor = linked_mentor(db, user)
    return {
        "user_id": user.user_id,
        "emp_id": user.emp_id,
        "name": user.name,
        "role": user.role,
        "email": user.email,
        "is_active": user.is_active,
        "created_at": user.created_at,
        "is_admin": user.role == ADMIN,
        "can_manage_schedule": can_manage_schedule(user),
        "mentor_id": mentor.mentor_id if mentor else None,
    }

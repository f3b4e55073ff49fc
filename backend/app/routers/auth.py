"""Auth 기능 API 라우터입니다. 운영자 로그인/로그아웃과 현재 운영자 프로필 조회를 제공합니다."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.middleware.auth_middleware import get_current_user
from app.models.user import User
from app.schemas.user import LoginRequest, StaffProfileOut, TokenResponse
from app.services.auth_service import create_access_token, mock_sso_login, staff_profile

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
def login(request: LoginRequest, db: Session = Depends(get_db)):
    user = mock_sso_login(db, request.emp_id)
    return TokenResponse(access_token=create_access_token(user), user=staff_profile(db, user))


@router.post("/logout")
def logout(current_user: User = Depends(get_current_user)):
    # 토큰은 상태가 없으므로 서버에서는 기록만 남긴다.
    logger.info("[auth] logout emp_id=%s", current_user.emp_id)
    return {"message": "로그아웃 되었습니다."}


@router.get("/me", response_model=StaffProfileOut)
def me(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return staff_profile(db, current_user)

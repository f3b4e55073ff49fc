"""Permissions 관련 공용 유틸리티 헬퍼입니다."""

from app.models.user import User


ADMIN = "admin"
STAFF = "staff"

ALL_ROLES = (ADMIN, STAFF)


def can_manage_schedule(user: User) -> bool:
    return user.role in ALL_ROLES

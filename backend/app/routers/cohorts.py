"""Cohorts 기능 API 라우터입니다. 템플릿 기반 코호트 스케줄 생성과 코호트 조회를 제공합니다."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.middleware.auth_middleware import get_current_user, require_roles
from app.models.cohort_schedule import cohort_table_name
from app.models.user import User
from app.schemas.cohort import CohortCreate, CohortCreateResult, CohortExistsOut, CohortNumbersOut
from app.services import cohort_service
from app.utils.permissions import ADMIN

router = APIRouter(prefix="/api/cohorts", tags=["cohorts"])


@router.post("", response_model=CohortCreateResult, status_code=status.HTTP_201_CREATED)
def create_cohort(
    data: CohortCreate,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles(ADMIN)),
):
    return cohort_service.create_cohort_schedule(
        db,
        cohort_type=data.cohort_type,
        cohort_number=data.cohort_number,
        day1=data.day1,
        day2=data.day2,
        start_date=data.start_date,
        mentor_id=data.mentor_id,
    )


@router.get("/{cohort_type}/numbers", response_model=CohortNumbersOut)
def list_cohort_numbers(
    cohort_type: str,
    db: Session = Depends(get_db),
    _current_user: User = Depends(get_current_user),
):
    return CohortNumbersOut(
        cohort_type=cohort_type,
        numbers=cohort_service.list_cohort_numbers(db, cohort_type),
    )


@router.get("/{cohort_type}/{cohort_number}/exists", response_model=CohortExistsOut)
def cohort_exists(
    cohort_type: str,
    cohort_number: str,
    db: Session = Depends(get_db),
    _current_user: User = Depends(get_current_user),
):
    return CohortExistsOut(
        cohort_type=cohort_type,
        cohort_number=cohort_number,
        table_name=cohort_table_name(cohort_type, cohort_number),
        exists=cohort_service.cohort_exists(db, cohort_type, cohort_number),
    )

"""Cohort Schedules 기능 API 라우터입니다. 코호트 스케줄 세션 조회/편집/연기/주차 삭제를 제공합니다."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.middleware.auth_middleware import get_current_user
from app.models.user import User
from app.schemas.cohort_schedule import (
    DateSpanOut,
    SessionBulkUpdate,
    SessionBulkUpdateResult,
    SessionCreate,
    SessionCreateResult,
    SessionDatesOut,
    SessionFieldUpdate,
    SessionMoveRequest,
    SessionOut,
    WeekDeleteResult,
)
from app.services import schedule_edit_service
from app.services.cohort_store import CohortScheduleStore
from app.utils.dates import program_today
from app.utils.permissions import can_manage_schedule

router = APIRouter(prefix="/api/cohort-schedules", tags=["cohort-schedules"])


def _schedule_editor(current_user: User = Depends(get_current_user)) -> User:
    if not can_manage_schedule(current_user):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="스케줄 편집 권한이 없습니다.")
    return current_user


def _rows(db: Session, table_name: str):
    return CohortScheduleStore(db, table_name).all_rows()


@router.get("/{table_name}", response_model=List[SessionOut])
def list_sessions(
    table_name: str,
    db: Session = Depends(get_db),
    _current_user: User = Depends(get_current_user),
):
    return schedule_edit_service.list_sessions(db, table_name)


@router.post("/{table_name}/sessions", response_model=SessionCreateResult, status_code=status.HTTP_201_CREATED)
def add_session(
    table_name: str,
    data: SessionCreate,
    db: Session = Depends(get_db),
    _current_user: User = Depends(_schedule_editor),
):
    return schedule_edit_service.add_session(db, table_name, data.model_dump())


@router.put("/{table_name}/sessions/bulk", response_model=SessionBulkUpdateResult)
def bulk_update_sessions(
    table_name: str,
    data: SessionBulkUpdate,
    db: Session = Depends(get_db),
    _current_user: User = Depends(_schedule_editor),
):
    updated = schedule_edit_service.bulk_update_sessions(db, table_name, data.session_ids, data.values)
    return SessionBulkUpdateResult(updated=updated)


@router.patch("/{table_name}/sessions/{session_id}", response_model=SessionOut)
def update_session_field(
    table_name: str,
    session_id: int,
    data: SessionFieldUpdate,
    db: Session = Depends(get_db),
    _current_user: User = Depends(_schedule_editor),
):
    return schedule_edit_service.update_session_field(db, table_name, session_id, data.field, data.value)


@router.get("/{table_name}/sessions/{session_id}/move-dates", response_model=SessionDatesOut)
def move_dates(
    table_name: str,
    session_id: int,
    mode: str = Query("postpone", pattern="^(postpone|prepone)$"),
    db: Session = Depends(get_db),
    _current_user: User = Depends(get_current_user),
):
    dates = schedule_edit_service.move_dates(_rows(db, table_name), session_id, mode, program_today())
    return SessionDatesOut(session_id=session_id, mode=mode, dates=dates)


@router.get("/{table_name}/sessions/{session_id}/edit-dates", response_model=SessionDatesOut)
def edit_dates(
    table_name: str,
    session_id: int,
    db: Session = Depends(get_db),
    _current_user: User = Depends(get_current_user),
):
    dates = schedule_edit_service.edit_dates(_rows(db, table_name), session_id, program_today())
    return SessionDatesOut(session_id=session_id, mode="edit", dates=dates)


@router.post("/{table_name}/sessions/{session_id}/move", response_model=SessionOut)
def move_session(
    table_name: str,
    session_id: int,
    data: SessionMoveRequest,
    db: Session = Depends(get_db),
    _current_user: User = Depends(_schedule_editor),
):
    return schedule_edit_service.move_session(
        db,
        table_name,
        session_id,
        data.mode,
        data.new_date,
        data.new_time,
        program_today(),
    )


@router.get("/{table_name}/weeks/{week_number}/spans", response_model=List[DateSpanOut])
def week_spans(
    table_name: str,
    week_number: int,
    db: Session = Depends(get_db),
    _current_user: User = Depends(get_current_user),
):
    return schedule_edit_service.available_date_spans(_rows(db, table_name), week_number, program_today())


@router.delete("/{table_name}/weeks/{week_number}", response_model=WeekDeleteResult)
def delete_week(
    table_name: str,
    week_number: int,
    db: Session = Depends(get_db),
    _current_user: User = Depends(_schedule_editor),
):
    return schedule_edit_service.delete_week(db, table_name, week_number)

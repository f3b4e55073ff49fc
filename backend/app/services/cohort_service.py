"""Cohort Service 도메인 서비스 레이어입니다. 템플릿 기반 코호트 스케줄 생성과 코호트 조회를 담당합니다."""

import logging
import time as time_module
from datetime import date, datetime, timezone
from typing import List

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.config import settings
from app.models.cohort_schedule import cohort_table_name, parse_cohort_table_name
from app.models.schedule import ScheduleTemplate
from app.services.cohort_store import CohortScheduleStore, retry_on_schema_not_ready
from app.services.schedule_builder import build_schedule_rows
from app.services.table_catalog import get_table_catalog
from app.utils.errors import MissingSourceData

logger = logging.getLogger(__name__)


def load_template(db: Session, cohort_type: str) -> List[ScheduleTemplate]:
    return (
        db.query(ScheduleTemplate)
        .filter(func.lower(ScheduleTemplate.cohort_type) == cohort_type.strip().lower())
        .order_by(ScheduleTemplate.id.asc())
        .all()
    )


def create_cohort_schedule(
    db: Session,
    *,
    cohort_type: str,
    cohort_number: str,
    day1: str,
    day2: str,
    start_date: date,
    mentor_id: int,
) -> dict:
    template_rows = load_template(db, cohort_type)
    if not template_rows:
        raise MissingSourceData(f"no template data: '{cohort_type}' 유형의 템플릿 데이터가 없습니다.")

    table_name = cohort_table_name(cohort_type, cohort_number)
    rows = build_schedule_rows(
        template_rows,
        start_date,
        day1,
        day2,
        mentor_id,
        created_at=datetime.now(timezone.utc).replace(tzinfo=None),
    )
    undated = sum(1 for row in rows if row["date"] is None)
    if undated:
        logger.warning("[cohort] %s: %s rows have no computable date", table_name, undated)

    store = CohortScheduleStore(db, table_name)
    if store.ensure_table() and settings.TABLE_CREATE_WAIT_SECONDS > 0:
        time_module.sleep(settings.TABLE_CREATE_WAIT_SECONDS)

    inserted = retry_on_schema_not_ready(store.replace_rows, rows, settings.INSERT_BATCH_SIZE)
    logger.info("[cohort] %s: inserted %s rows", table_name, inserted)
    return {
        "success": True,
        "message": f"{table_name} 스케줄이 생성되었습니다.",
        "table_name": table_name,
        "records_inserted": inserted,
    }


def list_cohort_numbers(db: Session, cohort_type: str) -> List[str]:
    wanted = str(cohort_type or "").strip().lower()
    numbers = []
    for table_name in get_table_catalog(db).list_tables():
        parsed = parse_cohort_table_name(table_name)
        if parsed and parsed[0].lower() == wanted:
            numbers.append(parsed[1])
    return sorted(numbers, key=lambda n: tuple(int(p) for p in n.split(".")))


def cohort_exists(db: Session, cohort_type: str, cohort_number: str) -> bool:
    store = CohortScheduleStore(db, cohort_table_name(cohort_type, cohort_number))
    return store.exists()

"""Cohort Store 데이터 접근 레이어입니다. 코호트 스케줄 테이블 CRUD와 오류 분류를 담당합니다."""

import logging
from datetime import date, datetime, time
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from sqlalchemy import and_, delete, func, inspect, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_fixed

from app.config import settings
from app.models.cohort_schedule import get_cohort_table
from app.utils.dates import parse_iso_date
from app.utils.errors import SchemaNotReadyError, StoreError, TableNotFoundError
from app.utils.schema_sync import sync_missing_columns

logger = logging.getLogger(__name__)

INTEGER_COLUMNS = {"id", "week_number", "session_number", "mentor_id", "swapped_mentor_id"}
BOOLEAN_COLUMNS = {"notification_sent", "email_sent", "whatsapp_sent"}


def parse_time(value) -> Optional[time]:
    if value is None or value == "":
        return None
    if isinstance(value, time):
        return value
    return time.fromisoformat(str(value).strip())


def coerce_value(column: str, value: Any) -> Any:
    if column == "date":
        return parse_iso_date(value)
    if column == "time":
        return parse_time(value)
    if column == "created_at" and isinstance(value, str):
        return datetime.fromisoformat(value)
    if column in INTEGER_COLUMNS:
        return int(value) if value not in (None, "") else None
    if column in BOOLEAN_COLUMNS:
        return bool(value)
    if isinstance(value, str) and value == "":
        return None
    return value


def coerce_values(values: Dict[str, Any]) -> Dict[str, Any]:
    return {k: coerce_value(k, v) for k, v in values.items()}


def _log_retry(retry_state):
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        "[cohort-store] schema not ready (attempt %s/%s): %s",
        retry_state.attempt_number,
        settings.SCHEMA_RETRY_ATTEMPTS,
        exc,
    )


def retry_on_schema_not_ready(operation: Callable, *args, **kwargs):
    """Run operation, retrying only SchemaNotReadyError with a fixed wait."""
    retrying = Retrying(
        retry=retry_if_exception_type(SchemaNotReadyError),
        stop=stop_after_attempt(max(1, settings.SCHEMA_RETRY_ATTEMPTS)),
        wait=wait_fixed(settings.SCHEMA_RETRY_WAIT_SECONDS),
        before_sleep=_log_retry,
        reraise=True,
    )
    return retrying(operation, *args, **kwargs)


class CohortScheduleStore:
    """Select/insert/update/delete over one cohort schedule table."""

    def __init__(self, db: Session, table_name: str):
        self.db = db
        self.table_name = table_name
        self.table = get_cohort_table(table_name)

    def exists(self) -> bool:
        return inspect(self.db.connection()).has_table(self.table_name)

    def _fail(self, exc: SQLAlchemyError, action: str, *, writing: bool = False) -> StoreError:
        self.db.rollback()
        try:
            missing = not self.exists()
        except SQLAlchemyError:
            missing = False
        if missing and writing:
            return SchemaNotReadyError(f"{self.table_name} 테이블이 아직 준비되지 않았습니다.")
        if missing:
            return TableNotFoundError(f"{self.table_name} 테이블을 찾을 수 없습니다.")
        return StoreError(f"{self.table_name} {action} 실패: {exc}")

    def ensure_table(self) -> bool:
        """Create the table if missing; otherwise add any missing columns. Returns True when created."""
        try:
            conn = self.db.connection()
            if inspect(conn).has_table(self.table_name):
                added = sync_missing_columns(conn, self.table)
                if added:
                    logger.info("[cohort-store] %s: added columns %s", self.table_name, ", ".join(added))
                self.db.commit()
                return False
            self.table.create(bind=conn, checkfirst=True)
            self.db.commit()
        except SQLAlchemyError as exc:
            raise self._fail(exc, "생성") from exc
        logger.info("[cohort-store] created table %s", self.table_name)
        return True

    def select_rows(self, *criteria, order_by: Iterable = (), columns: Iterable = ()) -> List[Dict[str, Any]]:
        stmt = select(*(list(columns) or [self.table]))
        if criteria:
            stmt = stmt.where(and_(*criteria))
        order = list(order_by) or [self.table.c.id.asc()]
        stmt = stmt.order_by(*order)
        try:
            result = self.db.execute(stmt)
            return [dict(row._mapping) for row in result]
        except SQLAlchemyError as exc:
            raise self._fail(exc, "조회") from exc

    def all_rows(self) -> List[Dict[str, Any]]:
        c = self.table.c
        return self.select_rows(order_by=(c.week_number.asc(), c.session_number.asc(), c.id.asc()))

    def get_row(self, row_id: int) -> Optional[Dict[str, Any]]:
        rows = self.select_rows(self.table.c.id == row_id)
        return rows[0] if rows else None

    def completed_rows(self, column: str, mentor_id: int) -> List[Dict[str, Any]]:
        """Rows where ``column == mentor_id`` and a session recording exists."""
        c = self.table.c
        return self.select_rows(
            c[column] == mentor_id,
            c.session_recording.isnot(None),
            c.session_recording != "",
            columns=(c.id, c.mentor_id, c.swapped_mentor_id, c.session_recording),
        )

    def rows_between(self, start: date, end: date) -> List[Dict[str, Any]]:
        c = self.table.c
        return self.select_rows(c.date >= start, c.date <= end, c.session_type.isnot(None))

    def rows_on(self, target: date) -> List[Dict[str, Any]]:
        return self.select_rows(self.table.c.date == target)

    def replace_rows(self, rows: List[Dict[str, Any]], batch_size: int) -> int:
        """Delete every row, then insert rows in batches within one transaction."""
        if not self.exists():
            raise SchemaNotReadyError(f"{self.table_name} 테이블이 아직 준비되지 않았습니다.")
        inserted = 0
        try:
            self.db.execute(delete(self.table).where(self.table.c.id >= 0))
            for start in range(0, len(rows), batch_size):
                chunk = rows[start:start + batch_size]
                self.db.execute(self.table.insert(), chunk)
                inserted += len(chunk)
            self.db.commit()
        except SQLAlchemyError as exc:
            raise self._fail(exc, "저장", writing=True) from exc
        return inserted

    def insert_row(self, values: Dict[str, Any]) -> None:
        try:
            self.db.execute(self.table.insert().values(**coerce_values(values)))
            self.db.commit()
        except SQLAlchemyError as exc:
            raise self._fail(exc, "추가", writing=True) from exc

    def update_row(self, row_id: int, values: Dict[str, Any]) -> int:
        try:
            result = self.db.execute(
                update(self.table).where(self.table.c.id == row_id).values(**coerce_values(values))
            )
            self.db.commit()
        except SQLAlchemyError as exc:
            raise self._fail(exc, "수정", writing=True) from exc
        return result.rowcount

    def update_rows(self, row_ids: List[int], values: Dict[str, Any]) -> int:
        if not row_ids:
            return 0
        try:
            result = self.db.execute(
                update(self.table).where(self.table.c.id.in_(row_ids)).values(**coerce_values(values))
            )
            self.db.commit()
        except SQLAlchemyError as exc:
            raise self._fail(exc, "수정", writing=True) from exc
        return result.rowcount

    def delete_week(self, week_number: int, shifts: Iterable = ()) -> Tuple[int, int]:
        """Delete one week and apply ``(row_id, values)`` shifts in a single transaction.

        Nothing is committed when the week has no rows or any statement fails.
        """
        updated = 0
        try:
            result = self.db.execute(delete(self.table).where(self.table.c.week_number == week_number))
            deleted = result.rowcount
            if not deleted:
                self.db.rollback()
                return 0, 0
            for row_id, values in shifts:
                shifted = self.db.execute(
                    update(self.table).where(self.table.c.id == row_id).values(**coerce_values(values))
                )
                updated += shifted.rowcount
            self.db.commit()
        except SQLAlchemyError as exc:
            raise self._fail(exc, "삭제", writing=True) from exc
        return deleted, updated

    def max_id(self) -> Optional[int]:
        try:
            return self.db.execute(select(func.max(self.table.c.id))).scalar()
        except SQLAlchemyError as exc:
            raise self._fail(exc, "조회") from exc

    def max_session_in_week(self, week_number: int) -> Optional[int]:
        c = self.table.c
        try:
            return self.db.execute(
                select(func.max(c.session_number)).where(c.week_number == week_number)
            ).scalar()
        except SQLAlchemyError as exc:
            raise self._fail(exc, "조회") from exc

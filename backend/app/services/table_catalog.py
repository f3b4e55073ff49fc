"""코호트 스케줄 테이블 카탈로그입니다. 설정된 정적 목록 또는 DB 메타데이터에서 테이블 이름을 제공합니다."""

import logging
from typing import Iterable, List

from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import settings
from app.models.cohort_schedule import COHORT_TABLE_PATTERN
from app.utils.errors import TableDiscoveryError

logger = logging.getLogger(__name__)


class ScheduleTableCatalog:
    def list_tables(self) -> List[str]:
        raise NotImplementedError


class StaticTableCatalog(ScheduleTableCatalog):
    def __init__(self, table_names: Iterable[str]):
        self.table_names = [name.strip() for name in table_names if name and name.strip()]

    def list_tables(self) -> List[str]:
        invalid = [name for name in self.table_names if not COHORT_TABLE_PATTERN.match(name)]
        if invalid:
            raise TableDiscoveryError(f"잘못된 코호트 테이블 이름이 설정되어 있습니다: {', '.join(invalid)}")
        return list(self.table_names)


class MetadataTableCatalog(ScheduleTableCatalog):
    """Discovers cohort tables by inspecting the database schema."""

    def __init__(self, db: Session):
        self.db = db

    def list_tables(self) -> List[str]:
        try:
            names = inspect(self.db.connection()).get_table_names()
        except SQLAlchemyError as exc:
            logger.error("[catalog] table discovery failed: %s", exc)
            raise TableDiscoveryError(f"스케줄 테이블 목록을 가져오지 못했습니다: {exc}") from exc
        return sorted(name for name in names if COHORT_TABLE_PATTERN.match(name))


def get_table_catalog(db: Session) -> ScheduleTableCatalog:
    if settings.SCHEDULE_TABLES:
        return StaticTableCatalog(settings.SCHEDULE_TABLES)
    return MetadataTableCatalog(db)

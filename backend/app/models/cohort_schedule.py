"""코호트별 스케줄 테이블(Core Table) 정의입니다.

코호트마다 ``{유형 소문자}{번호 '.'→'_'}_schedule`` 이름의 테이블을 하나씩 가지므로
ORM 클래스 대신 이름으로 Table 객체를 만들어 재사용합니다.
"""

import re
from typing import Optional, Tuple

from sqlalchemy import (
    BigInteger,
    Boolean,
    Column,
    Date,
    DateTime,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    Time,
)
from sqlalchemy.sql import func

from app.utils.errors import InvalidTableName

TABLE_SUFFIX = "_schedule"
COHORT_TABLE_PATTERN = re.compile(r"^([a-z]+)(\d+)_(\d+)_schedule$")

cohort_metadata = MetaData()

# 세션 편집 API에서 변경을 허용하는 컬럼. day 는 date 에서만 파생된다.
EDITABLE_COLUMNS = (
    "week_number",
    "session_number",
    "date",
    "time",
    "session_type",
    "subject_type",
    "subject_name",
    "subject_topic",
    "initial_session_material",
    "session_material",
    "session_recording",
    "mentor_id",
    "swapped_mentor_id",
    "teams_meeting_link",
)


def cohort_table_name(cohort_type: str, cohort_number: str) -> str:
    name = f"{str(cohort_type).strip().lower()}{str(cohort_number).strip().replace('.', '_')}{TABLE_SUFFIX}"
    if not COHORT_TABLE_PATTERN.match(name):
        raise InvalidTableName(f"코호트 테이블 이름을 만들 수 없습니다: {cohort_type} {cohort_number}")
    return name


def parse_cohort_table_name(table_name: str) -> Optional[Tuple[str, str]]:
    """``basic1_1_schedule`` -> ``("Basic", "1.1")``; None when the name does not match."""
    match = COHORT_TABLE_PATTERN.match(table_name or "")
    if not match:
        return None
    type_raw, major, minor = match.groups()
    return type_raw[:1].upper() + type_raw[1:], f"{major}.{minor}"


def _build_columns():
    return [
        Column("id", BigInteger, primary_key=True, autoincrement=False),
        Column("week_number", Integer),
        Column("session_number", Integer),
        Column("date", Date),
        Column("time", Time),
        Column("day", String(16)),
        Column("session_type", String(50)),
        Column("subject_type", String(100)),
        Column("subject_name", String(200)),
        Column("subject_topic", Text),
        Column("initial_session_material", Text),
        Column("session_material", Text),
        Column("session_recording", Text),
        Column("mentor_id", Integer),
        Column("swapped_mentor_id", Integer),
        Column("teams_meeting_link", Text),
        Column("notification_sent", Boolean, default=False),
        Column("email_sent", Boolean, default=False),
        Column("whatsapp_sent", Boolean, default=False),
        Column("created_at", DateTime, server_default=func.now()),
    ]


def get_cohort_table(table_name: str) -> Table:
    if not COHORT_TABLE_PATTERN.match(table_name or ""):
        raise InvalidTableName(f"코호트 스케줄 테이블 이름이 올바르지 않습니다: {table_name}")
    existing = cohort_metadata.tables.get(table_name)
    if existing is not None:
        return existing
    return Table(table_name, cohort_metadata, *_build_columns())

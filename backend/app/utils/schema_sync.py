"""런타임 스키마 동기화 유틸리티."""

from __future__ import annotations

from typing import List

from sqlalchemy import inspect, text
from sqlalchemy.engine import Connection
from sqlalchemy.schema import CreateColumn, Table


def sync_missing_columns(conn: Connection, table: Table) -> List[str]:
    """Table 정의 기준으로 기존 테이블에 누락된 컬럼을 추가하고 추가한 컬럼명을 돌려준다."""
    inspector = inspect(conn)
    if not inspector.has_table(table.name):
        return []

    existing_columns = {
        str(row.get("name"))
        for row in inspector.get_columns(table.name)
        if row.get("name")
    }
    preparer = conn.dialect.identifier_preparer
    table_sql = preparer.format_table(table)

    added: List[str] = []
    for column in table.columns:
        if column.name in existing_columns:
            continue
        if column.server_default is not None and conn.dialect.name == "sqlite":
            # SQLite는 상수가 아닌 기본값을 가진 컬럼을 ALTER로 추가할 수 없다.
            column_sql = f"{preparer.format_column(column)} {column.type.compile(dialect=conn.dialect)}"
        else:
            column_sql = str(CreateColumn(column).compile(dialect=conn.dialect)).strip()
        conn.execute(text(f"ALTER TABLE {table_sql} ADD COLUMN {column_sql}"))
        added.append(column.name)
    return added

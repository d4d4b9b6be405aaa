from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .department_model import Department
from .department_repository import DepartmentRepository


def _to_department(row: dict) -> Department:
    expected = row.get("expected_daily_minutes")
    return Department(
        dept_id=int(row["dept_id"]),
        dept_name=row["dept_name"],
        expected_daily_minutes=int(expected) if expected is not None else None,
    )


class MySQLDepartmentRepository(DepartmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, dept_id: int) -> Optional[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT dept_id, dept_name, expected_daily_minutes FROM departments WHERE dept_id=%s",
                (int(dept_id),),
            )
            row = fetchone(cur)
            return _to_department(row) if row else None

    def list_all(self) -> Sequence[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT dept_id, dept_name, expected_daily_minutes FROM departments ORDER BY dept_name")
            return [_to_department(r) for r in fetchall(cur)]

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import from_db_utc, to_db_utc
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import MonthlyBalance
from .repository import BalanceRepository

_SELECT = """
    SELECT user_id, reference_month, balance_minutes, overtime_minutes, deficit_minutes,
           created_at, updated_at
    FROM monthly_balances
    WHERE user_id=%s AND reference_month=%s
"""


def _to_balance(r: dict) -> MonthlyBalance:
    return MonthlyBalance(
        user_id=int(r["user_id"]),
        reference_month=r["reference_month"],
        balance_minutes=int(r["balance_minutes"]),
        overtime_minutes=int(r["overtime_minutes"]),
        deficit_minutes=int(r["deficit_minutes"]),
        created_at=from_db_utc(r.get("created_at")),
        updated_at=from_db_utc(r.get("updated_at")),
    )


class MySQLBalanceRepository(BalanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, *, user_id: int, reference_month: date) -> Optional[MonthlyBalance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT, (int(user_id), reference_month))
            r = fetchone(cur)
            return _to_balance(r) if r else None

    def upsert(
        self,
        *,
        user_id: int,
        reference_month: date,
        balance_minutes: int,
        overtime_minutes: int,
        deficit_minutes: int,
        now: datetime,
    ) -> MonthlyBalance:
        stamp = to_db_utc(now)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO monthly_balances(
                    user_id, reference_month, balance_minutes, overtime_minutes, deficit_minutes,
                    created_at, updated_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    balance_minutes=VALUES(balance_minutes),
                    overtime_minutes=VALUES(overtime_minutes),
                    deficit_minutes=VALUES(deficit_minutes),
                    updated_at=VALUES(updated_at)
                """,
                (
                    int(user_id),
                    reference_month,
                    int(balance_minutes),
                    int(overtime_minutes),
                    int(deficit_minutes),
                    stamp,
                    stamp,
                ),
            )
            cur.execute(_SELECT, (int(user_id), reference_month))
            return _to_balance(fetchone(cur))

from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import from_db_utc, to_db_utc
from ..core.enums import CaptureMethod, PunchKind
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import GeoLocation, PunchEvent
from .repository import PunchRepository

_PUNCH_COLUMNS = "punch_id, user_id, instant, kind, method, latitude, longitude, address, photo_ref, note"


def _to_punch(r: dict) -> PunchEvent:
    location = None
    if r.get("latitude") is not None and r.get("longitude") is not None:
        location = GeoLocation(
            latitude=float(r["latitude"]),
            longitude=float(r["longitude"]),
            address=r.get("address"),
        )
    return PunchEvent(
        punch_id=int(r["punch_id"]),
        user_id=int(r["user_id"]),
        instant=from_db_utc(r["instant"]),
        kind=PunchKind(r["kind"]),
        method=CaptureMethod(r.get("method") or CaptureMethod.APP.value),
        location=location,
        photo_ref=r.get("photo_ref"),
        note=r.get("note"),
    )


class MySQLPunchRepository(PunchRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, punch_id: int) -> Optional[PunchEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_PUNCH_COLUMNS} FROM punches WHERE punch_id=%s", (int(punch_id),))
            r = fetchone(cur)
            return _to_punch(r) if r else None

    def list_for_user(self, user_id: int, *, start: datetime, end: datetime) -> Sequence[PunchEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_PUNCH_COLUMNS}
                FROM punches
                WHERE user_id=%s AND instant >= %s AND instant < %s
                ORDER BY instant ASC, punch_id ASC
                """,
                (int(user_id), to_db_utc(start), to_db_utc(end)),
            )
            return [_to_punch(r) for r in fetchall(cur)]

    def list_for_range(self, *, start: datetime, end: datetime) -> Sequence[PunchEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_PUNCH_COLUMNS}
                FROM punches
                WHERE instant >= %s AND instant < %s
                ORDER BY instant ASC, punch_id ASC
                """,
                (to_db_utc(start), to_db_utc(end)),
            )
            return [_to_punch(r) for r in fetchall(cur)]

    def list_recent_for_user(
        self,
        user_id: int,
        *,
        limit: int,
        kind: Optional[PunchKind] = None,
    ) -> Sequence[PunchEvent]:
        clauses = ["user_id=%s"]
        params: list[object] = [int(user_id)]
        if kind is not None:
            clauses.append("kind=%s")
            params.append(kind.value)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_PUNCH_COLUMNS}
                FROM punches
                WHERE {where}
                ORDER BY instant DESC, punch_id DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [_to_punch(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        user_id: int,
        instant: datetime,
        kind: PunchKind,
        method: CaptureMethod,
        location: Optional[GeoLocation] = None,
        photo_ref: Optional[str] = None,
        note: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO punches(user_id, instant, kind, method, latitude, longitude, address, photo_ref, note)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(user_id),
                    to_db_utc(instant),
                    kind.value,
                    method.value,
                    location.latitude if location else None,
                    location.longitude if location else None,
                    location.address if location else None,
                    photo_ref,
                    note,
                ),
            )
            return int(cur.lastrowid)

    def update_instant(self, *, punch_id: int, instant: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE punches SET instant=%s WHERE punch_id=%s",
                (to_db_utc(instant), int(punch_id)),
            )
            return cur.rowcount > 0

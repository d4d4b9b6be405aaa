from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import from_db_utc, to_db_utc
from ..core.enums import AdjustmentStatus, PunchKind
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AdjustmentRequest
from .repository import AdjustmentRepository

_COLUMNS = """
    request_id, user_id, punch_id, proposed_instant, kind, justification, status,
    reviewer_id, decided_at, reviewer_justification, created_at, updated_at
"""


def _to_request(r: dict) -> AdjustmentRequest:
    return AdjustmentRequest(
        request_id=int(r["request_id"]),
        user_id=int(r["user_id"]),
        punch_id=int(r["punch_id"]) if r.get("punch_id") is not None else None,
        proposed_instant=from_db_utc(r["proposed_instant"]),
        kind=PunchKind(r["kind"]),
        justification=r["justification"],
        status=AdjustmentStatus(r["status"]),
        created_at=from_db_utc(r["created_at"]),
        updated_at=from_db_utc(r["updated_at"]),
        reviewer_id=int(r["reviewer_id"]) if r.get("reviewer_id") is not None else None,
        decided_at=from_db_utc(r.get("decided_at")),
        reviewer_justification=r.get("reviewer_justification"),
    )


class MySQLAdjustmentRepository(AdjustmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        user_id: int,
        punch_id: Optional[int],
        proposed_instant: datetime,
        kind: PunchKind,
        justification: str,
        now: datetime,
    ) -> AdjustmentRequest:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO adjustment_requests(
                    user_id, punch_id, proposed_instant, kind, justification, status, created_at, updated_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(user_id),
                    int(punch_id) if punch_id is not None else None,
                    to_db_utc(proposed_instant),
                    kind.value,
                    justification,
                    AdjustmentStatus.PENDING.value,
                    to_db_utc(now),
                    to_db_utc(now),
                ),
            )
            request_id = int(cur.lastrowid)
            cur.execute(f"SELECT {_COLUMNS} FROM adjustment_requests WHERE request_id=%s", (request_id,))
            return _to_request(fetchone(cur))

    def get(self, *, request_id: int) -> Optional[AdjustmentRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM adjustment_requests WHERE request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _to_request(r) if r else None

    def list_requests(
        self,
        *,
        status: Optional[AdjustmentStatus] = None,
        user_id: Optional[int] = None,
        exclude_user_id: Optional[int] = None,
        limit: Optional[int] = 200,
    ) -> Sequence[AdjustmentRequest]:
        clauses = ["1=1"]
        params: list[object] = []

        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        if user_id is not None:
            clauses.append("user_id=%s")
            params.append(int(user_id))
        if exclude_user_id is not None:
            clauses.append("user_id<>%s")
            params.append(int(exclude_user_id))

        where = " AND ".join(clauses)
        limit_sql = ""
        if limit is not None:
            limit_sql = "LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM adjustment_requests
                WHERE {where}
                ORDER BY created_at DESC, request_id DESC
                {limit_sql}
                """,
                tuple(params),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def decide(
        self,
        *,
        request_id: int,
        status: AdjustmentStatus,
        reviewer_id: int,
        decided_at: datetime,
        reviewer_justification: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE adjustment_requests
                SET status=%s, reviewer_id=%s, decided_at=%s, reviewer_justification=%s, updated_at=%s
                WHERE request_id=%s AND status=%s
                """,
                (
                    status.value,
                    int(reviewer_id),
                    to_db_utc(decided_at),
                    reviewer_justification,
                    to_db_utc(decided_at),
                    int(request_id),
                    AdjustmentStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def reopen(self, *, request_id: int, reviewer_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE adjustment_requests
                SET status=%s, reviewer_id=NULL, decided_at=NULL, reviewer_justification=NULL, updated_at=UTC_TIMESTAMP(6)
                WHERE request_id=%s AND status=%s AND reviewer_id=%s
                """,
                (
                    AdjustmentStatus.PENDING.value,
                    int(request_id),
                    AdjustmentStatus.APPROVED.value,
                    int(reviewer_id),
                ),
            )
            return cur.rowcount > 0

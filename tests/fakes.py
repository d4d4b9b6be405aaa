from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime

from werkzeug.security import generate_password_hash

from src.timeclock.timeclock.accounting.model import MonthlyBalance
from src.timeclock.timeclock.adjustments.model import AdjustmentRequest
from src.timeclock.timeclock.core.enums import AdjustmentStatus, CaptureMethod, PunchKind, Role
from src.timeclock.timeclock.punches.model import PunchEvent
from src.timeclock.timeclock.users.department_model import Department
from src.timeclock.timeclock.users.model import User


class FakeUsersRepo:
    def __init__(self, users=()):
        self._users = {u.user_id: u for u in users}

    def add(self, user: User) -> User:
        self._users[user.user_id] = user
        return user

    def get_by_id(self, user_id):
        return self._users.get(int(user_id))

    def get_by_username(self, username):
        for u in self._users.values():
            if u.username == username:
                return u
        return None

    def list_active(self):
        return [u for u in sorted(self._users.values(), key=lambda u: u.full_name) if u.is_active]


class FakeDepartmentsRepo:
    def __init__(self, departments=()):
        self._depts = {d.dept_id: d for d in departments}

    def get_by_id(self, dept_id):
        return self._depts.get(int(dept_id))

    def list_all(self):
        return sorted(self._depts.values(), key=lambda d: d.dept_name)


class FakePunchesRepo:
    def __init__(self):
        self._next_id = 1
        self.punches: dict[int, PunchEvent] = {}
        self.range_calls = 0

    def add(self, user_id: int, instant: datetime, kind: PunchKind) -> PunchEvent:
        pid = self.create(user_id=user_id, instant=instant, kind=kind, method=CaptureMethod.APP)
        return self.punches[pid]

    def delete(self, punch_id: int) -> None:
        self.punches.pop(int(punch_id), None)

    def get_by_id(self, punch_id):
        return self.punches.get(int(punch_id))

    def list_for_user(self, user_id, *, start, end):
        self.range_calls += 1
        rows = [p for p in self.punches.values() if p.user_id == int(user_id) and start <= p.instant < end]
        return sorted(rows, key=lambda p: (p.instant, p.punch_id))

    def list_for_range(self, *, start, end):
        self.range_calls += 1
        rows = [p for p in self.punches.values() if start <= p.instant < end]
        return sorted(rows, key=lambda p: (p.user_id, p.instant, p.punch_id))

    def list_recent_for_user(self, user_id, *, limit, kind=None):
        rows = [p for p in self.punches.values() if p.user_id == int(user_id) and (kind is None or p.kind is kind)]
        return sorted(rows, key=lambda p: (p.instant, p.punch_id), reverse=True)[: int(limit)]

    def create(self, *, user_id, instant, kind, method, location=None, photo_ref=None, note=None):
        pid = self._next_id
        self._next_id += 1
        self.punches[pid] = PunchEvent(
            punch_id=pid,
            user_id=int(user_id),
            instant=instant,
            kind=kind,
            method=method,
            location=location,
            photo_ref=photo_ref,
            note=note,
        )
        return pid

    def update_instant(self, *, punch_id, instant):
        p = self.punches.get(int(punch_id))
        if not p:
            return False
        self.punches[p.punch_id] = replace(p, instant=instant)
        return True


class FakeBalancesRepo:
    def __init__(self):
        self.rows: dict[tuple[int, date], MonthlyBalance] = {}
        self.upserts = 0

    def get(self, *, user_id, reference_month):
        return self.rows.get((int(user_id), reference_month))

    def upsert(self, *, user_id, reference_month, balance_minutes, overtime_minutes, deficit_minutes, now):
        self.upserts += 1
        key = (int(user_id), reference_month)
        existing = self.rows.get(key)
        row = MonthlyBalance(
            user_id=int(user_id),
            reference_month=reference_month,
            balance_minutes=int(balance_minutes),
            overtime_minutes=int(overtime_minutes),
            deficit_minutes=int(deficit_minutes),
            created_at=existing.created_at if existing else now,
            updated_at=now,
        )
        self.rows[key] = row
        return row


class FakeAdjustmentsRepo:
    def __init__(self):
        self._next_id = 1
        self.requests: dict[int, AdjustmentRequest] = {}

    def create(self, *, user_id, punch_id, proposed_instant, kind, justification, now):
        rid = self._next_id
        self._next_id += 1
        req = AdjustmentRequest(
            request_id=rid,
            user_id=int(user_id),
            punch_id=punch_id,
            proposed_instant=proposed_instant,
            kind=kind,
            justification=justification,
            status=AdjustmentStatus.PENDING,
            created_at=now,
            updated_at=now,
        )
        self.requests[rid] = req
        return req

    def get(self, *, request_id):
        return self.requests.get(int(request_id))

    def list_requests(self, *, status=None, user_id=None, exclude_user_id=None, limit=200):
        rows = [
            r
            for r in self.requests.values()
            if (status is None or r.status is status)
            and (user_id is None or r.user_id == int(user_id))
            and (exclude_user_id is None or r.user_id != int(exclude_user_id))
        ]
        rows = sorted(rows, key=lambda r: (r.created_at, r.request_id), reverse=True)
        return rows if limit is None else rows[: int(limit)]

    def decide(self, *, request_id, status, reviewer_id, decided_at, reviewer_justification=None):
        req = self.requests.get(int(request_id))
        if not req or req.status is not AdjustmentStatus.PENDING:
            return False
        self.requests[req.request_id] = replace(
            req,
            status=status,
            reviewer_id=int(reviewer_id),
            decided_at=decided_at,
            reviewer_justification=reviewer_justification,
            updated_at=decided_at,
        )
        return True

    def reopen(self, *, request_id, reviewer_id):
        req = self.requests.get(int(request_id))
        if not req or req.status is not AdjustmentStatus.APPROVED or req.reviewer_id != int(reviewer_id):
            return False
        self.requests[req.request_id] = replace(
            req,
            status=AdjustmentStatus.PENDING,
            reviewer_id=None,
            decided_at=None,
            reviewer_justification=None,
        )
        return True


def make_user(
    user_id: int,
    *,
    role: Role = Role.EMPLOYEE,
    dept_id=None,
    manager_id=None,
    is_active: bool = True,
    password: str = "secret",
) -> User:
    return User(
        user_id=user_id,
        full_name=f"User {user_id}",
        username=f"user{user_id}",
        password_hash=generate_password_hash(password, method="pbkdf2:sha256:1000"),
        role=role,
        dept_id=dept_id,
        manager_id=manager_id,
        is_active=is_active,
    )


def make_department(dept_id: int, name: str, expected_daily_minutes=None) -> Department:
    return Department(dept_id=dept_id, dept_name=name, expected_daily_minutes=expected_daily_minutes)

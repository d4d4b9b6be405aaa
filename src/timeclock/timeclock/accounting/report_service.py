from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, tzinfo
from typing import Optional

from ..common.datetime_utils import month_bounds
from ..common.formatting import format_hhmm
from ..punches.model import PunchEvent
from ..punches.repository import PunchRepository
from ..users.department_repository import DepartmentRepository
from ..users.policy import ExpectedMinutesPolicy
from ..users.repository import UserRepository
from .aggregator import MonthlyBalanceAggregator
from .summary import DailySummaryBuilder

NO_DEPARTMENT = "No department"


@dataclass(frozen=True)
class TeamReport:
    rows: list[dict]
    departments: list[dict]
    headcount: int
    present_headcount: int
    total_overtime_minutes: int

    @property
    def presence_rate(self) -> float:
        if not self.headcount:
            return 0.0
        return self.present_headcount / self.headcount * 100


class TeamReportService:
    """Monthly worked/overtime/deficit per active employee, rolled up per department."""

    def __init__(
        self,
        punches: PunchRepository,
        users: UserRepository,
        departments: DepartmentRepository,
        policy: ExpectedMinutesPolicy,
        *,
        tz: tzinfo,
        builder: Optional[DailySummaryBuilder] = None,
        aggregator: Optional[MonthlyBalanceAggregator] = None,
    ):
        self._punches = punches
        self._users = users
        self._departments = departments
        self._policy = policy
        self._tz = tz
        self._builder = builder or DailySummaryBuilder()
        self._aggregator = aggregator or MonthlyBalanceAggregator()

    def build_month_report(self, *, month: date, dept_id: Optional[int] = None) -> TeamReport:
        start, end = month_bounds(month, self._tz)

        by_user: dict[int, list[PunchEvent]] = defaultdict(list)
        for p in self._punches.list_for_range(start=start, end=end):
            by_user[p.user_id].append(p)

        dept_names = {d.dept_id: d.dept_name for d in self._departments.list_all()}

        rows: list[dict] = []
        dept_map: dict[str, dict] = {}

        for user in self._users.list_active():
            if dept_id is not None and user.dept_id != int(dept_id):
                continue

            summaries = self._builder.build_all(
                by_user.get(user.user_id, []),
                tz=self._tz,
                expected_minutes=self._policy.get_expected_daily_minutes(user.user_id),
            )
            totals = self._aggregator.aggregate(user_id=user.user_id, month=month, summaries=summaries)
            dept_name = dept_names.get(user.dept_id, NO_DEPARTMENT) if user.dept_id else NO_DEPARTMENT

            rows.append(
                {
                    "user_id": user.user_id,
                    "full_name": user.full_name,
                    "username": user.username,
                    "dept_name": dept_name,
                    "worked_minutes": totals.total_worked,
                    "expected_minutes": totals.total_expected,
                    "overtime_minutes": totals.overtime,
                    "deficit_minutes": totals.deficit,
                    "days_worked": totals.days_worked,
                    "worked_hours": format_hhmm(totals.total_worked),
                }
            )

            d = dept_map.get(dept_name)
            if not d:
                d = {
                    "dept_name": dept_name,
                    "worked_minutes": 0,
                    "overtime_minutes": 0,
                    "headcount": 0,
                    "present_headcount": 0,
                }
                dept_map[dept_name] = d
            d["worked_minutes"] += totals.total_worked
            d["overtime_minutes"] += totals.overtime
            d["headcount"] += 1
            d["present_headcount"] += 1 if totals.days_worked > 0 else 0

        departments = sorted(dept_map.values(), key=lambda x: x["dept_name"])
        return TeamReport(
            rows=rows,
            departments=departments,
            headcount=len(rows),
            present_headcount=sum(1 for r in rows if r["days_worked"] > 0),
            total_overtime_minutes=sum(r["overtime_minutes"] for r in rows),
        )

from __future__ import annotations

import logging
from datetime import date, datetime, tzinfo
from typing import Optional

from ..common.datetime_utils import month_bounds, month_start, now_utc
from ..punches.repository import PunchRepository
from ..users.policy import ExpectedMinutesPolicy
from .aggregator import MonthlyBalanceAggregator
from .model import DailySummary, MonthlyBalance, MonthlyReport, MonthlyTotals
from .repository import BalanceRepository
from .summary import DailySummaryBuilder

logger = logging.getLogger(__name__)


class BalanceService:
    """Use case: recompute a user's monthly hour balance from raw punches.

    Balances are recomputed on read. An approved adjustment only shows up in
    the stored balance after the next recompute of that month.
    """

    def __init__(
        self,
        punches: PunchRepository,
        balances: BalanceRepository,
        policy: ExpectedMinutesPolicy,
        *,
        tz: tzinfo,
        builder: Optional[DailySummaryBuilder] = None,
        aggregator: Optional[MonthlyBalanceAggregator] = None,
    ):
        self._punches = punches
        self._balances = balances
        self._policy = policy
        self._tz = tz
        self._builder = builder or DailySummaryBuilder()
        self._aggregator = aggregator or MonthlyBalanceAggregator()

    def daily_summaries(self, user_id: int, month: date) -> list[DailySummary]:
        start, end = month_bounds(month, self._tz)
        punches = self._punches.list_for_user(int(user_id), start=start, end=end)
        expected = self._policy.get_expected_daily_minutes(int(user_id))
        return self._builder.build_all(punches, tz=self._tz, expected_minutes=expected)

    def compute(self, user_id: int, month: date) -> tuple[MonthlyTotals, list[DailySummary]]:
        """Pure read: totals and per-day breakdown, nothing persisted."""
        days = self.daily_summaries(user_id, month)
        totals = self._aggregator.aggregate(user_id=int(user_id), month=month, summaries=days)
        return totals, days

    def recompute_month(self, user_id: int, month: date, *, now: datetime | None = None) -> MonthlyReport:
        totals, days = self.compute(user_id, month)
        balance = self._balances.upsert(
            user_id=int(user_id),
            reference_month=totals.month,
            balance_minutes=totals.balance,
            overtime_minutes=totals.overtime,
            deficit_minutes=totals.deficit,
            now=now or now_utc(),
        )
        logger.info(
            "Balance recomputed: user=%s month=%s worked=%s expected=%s balance=%s",
            user_id,
            totals.month.isoformat(),
            totals.total_worked,
            totals.total_expected,
            totals.balance,
        )
        return MonthlyReport(balance=balance, totals=totals, days=days)

    def get_stored(self, user_id: int, month: date) -> Optional[MonthlyBalance]:
        """Last persisted balance; may be stale relative to recent approvals."""
        return self._balances.get(user_id=int(user_id), reference_month=month_start(month))

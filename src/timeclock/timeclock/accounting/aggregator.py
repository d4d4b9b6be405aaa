from __future__ import annotations

from datetime import date
from typing import Iterable

from ..common.datetime_utils import month_start, next_month_start
from .model import DailySummary, MonthlyTotals


class MonthlyBalanceAggregator:
    """Rolls a month of daily summaries into worked/expected totals.

    Only days with at least one punch add to the expected baseline; a day with
    no punches at all is not treated as an absence.
    """

    def aggregate(self, *, user_id: int, month: date, summaries: Iterable[DailySummary]) -> MonthlyTotals:
        first = month_start(month)
        last = next_month_start(month)

        total_worked = 0
        total_expected = 0
        days_worked = 0
        for s in summaries:
            if not (first <= s.day < last):
                continue
            total_worked += s.worked_minutes
            if s.punch_count > 0:
                total_expected += s.expected_minutes
                days_worked += 1

        return MonthlyTotals(
            user_id=int(user_id),
            month=first,
            total_worked=total_worked,
            total_expected=total_expected,
            days_worked=days_worked,
        )

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Optional

_MINUTE = timedelta(minutes=1)


@dataclass(frozen=True)
class WorkInterval:
    """A paired (in, out) for one user on one local day. Derived, never persisted."""

    start: datetime
    end: datetime

    @property
    def minutes(self) -> int:
        """Whole minutes, fractional part dropped."""
        return (self.end - self.start) // _MINUTE


@dataclass(frozen=True)
class PairingResult:
    intervals: tuple[WorkInterval, ...] = ()
    unpaired: int = 0
    rejected: int = 0


@dataclass(frozen=True)
class DailySummary:
    day: date
    worked_minutes: int
    expected_minutes: int
    punch_count: int = 0
    unpaired_punches: int = 0
    rejected_intervals: int = 0


@dataclass(frozen=True)
class MonthlyTotals:
    """Aggregator output for one (user, month)."""

    user_id: int
    month: date
    total_worked: int
    total_expected: int
    days_worked: int

    @property
    def balance(self) -> int:
        return self.total_worked - self.total_expected

    @property
    def overtime(self) -> int:
        return max(0, self.balance)

    @property
    def deficit(self) -> int:
        return max(0, -self.balance)


@dataclass(frozen=True)
class MonthlyBalance:
    """Persisted balance row, one per (user, reference month)."""

    user_id: int
    reference_month: date
    balance_minutes: int
    overtime_minutes: int
    deficit_minutes: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class MonthlyReport:
    balance: MonthlyBalance
    totals: MonthlyTotals
    days: list[DailySummary] = field(default_factory=list)

from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol

from .model import MonthlyBalance


class BalanceRepository(Protocol):
    def get(self, *, user_id: int, reference_month: date) -> Optional[MonthlyBalance]:
        raise NotImplementedError

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
        """Create or overwrite the single row keyed by (user_id, reference_month)."""

        raise NotImplementedError

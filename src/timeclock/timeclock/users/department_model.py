from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Department:
    dept_id: int
    dept_name: str
    expected_daily_minutes: Optional[int] = None

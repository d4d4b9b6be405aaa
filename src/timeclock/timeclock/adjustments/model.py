from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AdjustmentStatus, PunchKind


@dataclass(frozen=True)
class AdjustmentRequest:
    """A user's proposal to move one punch to a new instant.

    ``punch_id`` may be None, or point at a punch deleted after submission.
    """

    request_id: int
    user_id: int
    punch_id: Optional[int]
    proposed_instant: datetime
    kind: PunchKind
    justification: str
    status: AdjustmentStatus
    created_at: datetime
    updated_at: datetime
    reviewer_id: Optional[int] = None
    decided_at: Optional[datetime] = None
    reviewer_justification: Optional[str] = None

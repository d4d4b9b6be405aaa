from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AdjustmentStatus, PunchKind
from .model import AdjustmentRequest


class AdjustmentRepository(Protocol):
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
        raise NotImplementedError

    def get(self, *, request_id: int) -> Optional[AdjustmentRequest]:
        raise NotImplementedError

    def list_requests(
        self,
        *,
        status: Optional[AdjustmentStatus] = None,
        user_id: Optional[int] = None,
        exclude_user_id: Optional[int] = None,
        limit: Optional[int] = 200,
    ) -> Sequence[AdjustmentRequest]:
        """Newest first. ``limit=None`` returns every match."""

        raise NotImplementedError

    def decide(
        self,
        *,
        request_id: int,
        status: AdjustmentStatus,
        reviewer_id: int,
        decided_at: datetime,
        reviewer_justification: Optional[str] = None,
    ) -> bool:
        """Conditional update: only applies while the request is still pending.

        Returns False when another decision got there first.
        """

        raise NotImplementedError

    def reopen(self, *, request_id: int, reviewer_id: int) -> bool:
        """Undo an approval by ``reviewer_id`` whose punch rewrite failed.

        Only an approved request decided by that reviewer goes back to pending.
        """

        raise NotImplementedError

from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import CaptureMethod, PunchKind
from .model import GeoLocation, PunchEvent


class PunchRepository(Protocol):
    """Append-mostly punch log.

    Range reads are half-open ``[start, end)`` and ordered by instant ascending.
    """

    def get_by_id(self, punch_id: int) -> Optional[PunchEvent]:
        raise NotImplementedError

    def list_for_user(self, user_id: int, *, start: datetime, end: datetime) -> Sequence[PunchEvent]:
        raise NotImplementedError

    def list_for_range(self, *, start: datetime, end: datetime) -> Sequence[PunchEvent]:
        """All users' punches in the range (team reports)."""

        raise NotImplementedError

    def list_recent_for_user(
        self,
        user_id: int,
        *,
        limit: int,
        kind: Optional[PunchKind] = None,
    ) -> Sequence[PunchEvent]:
        """Newest first."""

        raise NotImplementedError

    def create(
        self,
        *,
        user_id: int,
        instant: datetime,
        kind: PunchKind,
        method: CaptureMethod,
        location: Optional[GeoLocation] = None,
        photo_ref: Optional[str] = None,
        note: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def update_instant(self, *, punch_id: int, instant: datetime) -> bool:
        """Rewrite one punch's instant. Returns False when the punch no longer exists."""

        raise NotImplementedError

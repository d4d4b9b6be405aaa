from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Optional, Sequence

from ..common.datetime_utils import day_bounds, local_day, now_utc
from ..common.validators import optional_text, require_range
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import CaptureMethod, PunchKind, WorkStatus
from ..core.exceptions import ValidationError
from ..users.repository import UserRepository
from .model import GeoLocation, PunchEvent
from .repository import PunchRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NewPunch:
    kind: Optional[PunchKind] = None
    method: CaptureMethod = CaptureMethod.APP
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    address: Optional[str] = None
    photo_ref: Optional[str] = None
    note: Optional[str] = None


class PunchService:
    """Use case: record punches and read a user's punch log."""

    def __init__(self, punches: PunchRepository, users: UserRepository, *, tz: tzinfo):
        self._punches = punches
        self._users = users
        self._tz = tz

    def list_day(self, user_id: int, *, now: datetime | None = None) -> Sequence[PunchEvent]:
        now = now or now_utc()
        start, end = day_bounds(local_day(now, self._tz), self._tz)
        return self._punches.list_for_user(int(user_id), start=start, end=end)

    def next_kind(self, user_id: int, *, now: datetime | None = None) -> PunchKind:
        """In when nothing was punched today or the last punch was an out."""
        today = self.list_day(user_id, now=now)
        if not today:
            return PunchKind.IN
        return today[-1].kind.opposite

    def current_status(self, user_id: int, *, now: datetime | None = None) -> WorkStatus:
        today = self.list_day(user_id, now=now)
        if today and today[-1].kind is PunchKind.IN:
            return WorkStatus.WORKING
        return WorkStatus.OFF_DUTY

    @staticmethod
    def _location(data: NewPunch) -> Optional[GeoLocation]:
        if data.latitude is None and data.longitude is None:
            return None
        if data.latitude is None or data.longitude is None:
            raise ValidationError("Latitude and longitude must be sent together")
        return GeoLocation(
            latitude=require_range(float(data.latitude), "Latitude", -90.0, 90.0),
            longitude=require_range(float(data.longitude), "Longitude", -180.0, 180.0),
            address=optional_text(data.address, "Address"),
        )

    def record_punch(self, user_id: int, data: NewPunch, *, now: datetime | None = None) -> PunchEvent:
        now = now or now_utc()
        if now.tzinfo is None:
            raise ValidationError("Punch instant must be timezone-aware")

        user = self._users.get_by_id(int(user_id))
        if not user or not user.is_active:
            raise ValidationError("Employee does not exist")

        expected = self.next_kind(user.user_id, now=now)
        kind = data.kind or expected
        if kind is not expected:
            raise ValidationError(f"Next punch today must be '{expected.value}'")

        location = self._location(data)
        photo_ref = optional_text(data.photo_ref, "Photo reference")
        note = optional_text(data.note, "Note")
        punch_id = self._punches.create(
            user_id=user.user_id,
            instant=now,
            kind=kind,
            method=data.method,
            location=location,
            photo_ref=photo_ref,
            note=note,
        )
        logger.info("Punch %s recorded: user=%s kind=%s method=%s", punch_id, user.user_id, kind.value, data.method.value)

        return PunchEvent(
            punch_id=punch_id,
            user_id=user.user_id,
            instant=now,
            kind=kind,
            method=data.method,
            location=location,
            photo_ref=photo_ref,
            note=note,
        )

    def history(
        self,
        user_id: int,
        *,
        kind: Optional[PunchKind] = None,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> Sequence[PunchEvent]:
        if int(limit) <= 0:
            raise ValidationError("Limit must be positive")
        return self._punches.list_recent_for_user(int(user_id), limit=int(limit), kind=kind)

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import CaptureMethod, PunchKind


@dataclass(frozen=True)
class GeoLocation:
    latitude: float
    longitude: float
    address: Optional[str] = None


@dataclass(frozen=True)
class PunchEvent:
    """Domain entity: one timestamped attendance action.

    ``instant`` is always timezone-aware. It is only ever rewritten by an
    approved adjustment request.
    """

    punch_id: int
    user_id: int
    instant: datetime
    kind: PunchKind
    method: CaptureMethod = CaptureMethod.APP
    location: Optional[GeoLocation] = None
    photo_ref: Optional[str] = None
    note: Optional[str] = None

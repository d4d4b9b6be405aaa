from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, tzinfo
from typing import Iterable, Optional

from ..common.datetime_utils import local_day
from ..punches.model import PunchEvent
from .model import DailySummary
from .pairing.base import PairingStrategy
from .pairing.index_pairing import IndexPairingStrategy

logger = logging.getLogger(__name__)


def group_by_local_day(punches: Iterable[PunchEvent], tz: tzinfo) -> dict[date, list[PunchEvent]]:
    """Bucket punches by local calendar day, each bucket ordered by instant.

    The input may be unordered or concatenated from several fetches.
    """
    buckets: dict[date, list[PunchEvent]] = defaultdict(list)
    for punch in punches:
        buckets[local_day(punch.instant, tz)].append(punch)

    return {
        day: sorted(items, key=lambda p: (p.instant, p.punch_id))
        for day, items in sorted(buckets.items())
    }


class DailySummaryBuilder:
    """Turns one day's punches into worked minutes against an expected baseline."""

    def __init__(self, pairing: Optional[PairingStrategy] = None):
        self._pairing = pairing or IndexPairingStrategy()

    def build(self, day: date, punches: list[PunchEvent], *, expected_minutes: int) -> DailySummary:
        result = self._pairing.pair(punches)
        worked = sum(interval.minutes for interval in result.intervals)

        if result.unpaired or result.rejected:
            logger.debug(
                "Day %s: %s unpaired punch(es), %s rejected interval(s)",
                day.isoformat(),
                result.unpaired,
                result.rejected,
            )

        return DailySummary(
            day=day,
            worked_minutes=worked,
            expected_minutes=int(expected_minutes),
            punch_count=len(punches),
            unpaired_punches=result.unpaired,
            rejected_intervals=result.rejected,
        )

    def build_all(self, punches: Iterable[PunchEvent], *, tz: tzinfo, expected_minutes: int) -> list[DailySummary]:
        return [
            self.build(day, day_punches, expected_minutes=expected_minutes)
            for day, day_punches in group_by_local_day(punches, tz).items()
        ]

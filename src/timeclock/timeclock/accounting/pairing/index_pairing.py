from __future__ import annotations

from typing import Sequence

from ...core.enums import PunchKind
from ...punches.model import PunchEvent
from ..model import PairingResult, WorkInterval
from .base import PairingStrategy


class IndexPairingStrategy(PairingStrategy):
    """Pair the i-th "in" with the i-th "out" of the day.

    Surplus punches on the longer side are left unpaired. A pair whose "out"
    precedes its "in" is rejected instead of producing negative time. Neither
    case raises; both are only counted.
    """

    def pair(self, punches: Sequence[PunchEvent]) -> PairingResult:
        ins = [p.instant for p in punches if p.kind is PunchKind.IN]
        outs = [p.instant for p in punches if p.kind is PunchKind.OUT]
        n = min(len(ins), len(outs))

        intervals: list[WorkInterval] = []
        rejected = 0
        for start, end in zip(ins[:n], outs[:n]):
            if end < start:
                rejected += 1
                continue
            intervals.append(WorkInterval(start=start, end=end))

        return PairingResult(
            intervals=tuple(intervals),
            unpaired=len(ins) + len(outs) - 2 * n,
            rejected=rejected,
        )

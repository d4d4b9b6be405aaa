from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from ...punches.model import PunchEvent
from ..model import PairingResult


class PairingStrategy(ABC):
    """Strategy Pattern: how one day's punches become worked intervals."""

    @abstractmethod
    def pair(self, punches: Sequence[PunchEvent]) -> PairingResult:
        """``punches`` belong to one user and one local day, ordered by instant."""

        raise NotImplementedError

from __future__ import annotations

from ...core.enums import TravelFlag
from ..model import AttendanceRecord
from .base import TravelStrategy


class NoTravelStrategy(TravelStrategy):
    """Unknown modality or open record: nothing to compare against."""

    def classify(self, record: AttendanceRecord) -> TravelFlag:
        return TravelFlag.NONE

from __future__ import annotations

from abc import ABC, abstractmethod

from ...core.enums import TravelFlag
from ..model import AttendanceRecord


class TravelStrategy(ABC):
    """Strategy Pattern: decide whether a clock-out location means travel."""

    @abstractmethod
    def classify(self, record: AttendanceRecord) -> TravelFlag:
        raise NotImplementedError

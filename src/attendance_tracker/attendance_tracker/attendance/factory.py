from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import TravelFlag, WorkModality
from .model import AttendanceRecord
from .strategies.base import TravelStrategy
from .strategies.null_strategy import NoTravelStrategy
from .strategies.office_strategy import OfficeTravelStrategy
from .strategies.wfh_strategy import WfhTravelStrategy


@dataclass
class TravelStrategyFactory:
    """Factory Pattern: choose the travel strategy for a work modality."""

    def for_modality(self, modality: Optional[WorkModality]) -> TravelStrategy:
        if modality == WorkModality.OFFICE:
            return OfficeTravelStrategy()
        if modality == WorkModality.WFH:
            return WfhTravelStrategy()
        return NoTravelStrategy()

    def for_record(self, record: AttendanceRecord) -> TravelStrategy:
        if record.clock_out is None:
            return NoTravelStrategy()
        return self.for_modality(record.work_modality)


def classify_travel(record: AttendanceRecord, *, factory: Optional[TravelStrategyFactory] = None) -> TravelFlag:
    """Classify a closed record's clock-out location. Pure and idempotent."""
    factory = factory or TravelStrategyFactory()
    return factory.for_record(record).classify(record)

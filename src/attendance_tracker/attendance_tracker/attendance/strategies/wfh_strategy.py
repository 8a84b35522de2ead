from __future__ import annotations

from ...common.geo import is_outside, parse_location
from ...core.enums import TravelFlag
from ..model import AttendanceRecord
from .base import TravelStrategy


class WfhTravelStrategy(TravelStrategy):
    """WFH session: compare the clock-out point with the clock-in point."""

    def classify(self, record: AttendanceRecord) -> TravelFlag:
        location_out = parse_location(record.location_out)
        location_in = parse_location(record.location_in)
        if location_out is None or location_in is None:
            return TravelFlag.NONE

        if is_outside(location_out, location_in):
            return TravelFlag.POSSIBLE_TRAVEL
        return TravelFlag.NONE

from __future__ import annotations

from ...branches.directory import find_branch
from ...common.geo import is_outside, parse_location
from ...core.enums import TravelFlag
from ..model import AttendanceRecord
from .base import TravelStrategy


class OfficeTravelStrategy(TravelStrategy):
    """Office session: compare the clock-out point with the assigned branch.

    An unknown branch counts as outside.
    """

    def classify(self, record: AttendanceRecord) -> TravelFlag:
        location_out = parse_location(record.location_out)
        if location_out is None:
            return TravelFlag.NONE

        branch = find_branch(record.branch_location)
        if branch is None or is_outside(location_out, branch.point):
            return TravelFlag.TRAVEL
        return TravelFlag.NONE

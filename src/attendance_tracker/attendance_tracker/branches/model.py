from __future__ import annotations

from dataclasses import dataclass

from ..common.geo import Point


@dataclass(frozen=True)
class Branch:
    """Office branch an ``office`` session is expected to clock out from."""

    branch_id: str
    name: str
    address: str
    latitude: float
    longitude: float

    @property
    def point(self) -> Point:
        return Point(self.latitude, self.longitude)

    def to_dict(self) -> dict:
        return {
            "branch_id": self.branch_id,
            "name": self.name,
            "address": self.address,
            "latitude": self.latitude,
            "longitude": self.longitude,
        }

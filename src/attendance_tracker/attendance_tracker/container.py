from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from .attendance.factory import TravelStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_FACIAL_STATUS
from .database.connection import DBConfig, DatabaseConnection


@dataclass(frozen=True)
class Container:
    attendance_repo: AttendanceRepository
    attendance_service: AttendanceService


def build_container_for(
    attendance_repo: AttendanceRepository,
    *,
    default_facial_status: str = DEFAULT_FACIAL_STATUS,
) -> Container:
    attendance_service = AttendanceService(
        attendance_repo,
        travel_factory=TravelStrategyFactory(),
        default_facial_status=default_facial_status,
    )
    return Container(attendance_repo=attendance_repo, attendance_service=attendance_service)


def build_container(*, db_config: Mapping, default_facial_status: str = DEFAULT_FACIAL_STATUS) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))
    return build_container_for(MySQLAttendanceRepository(conn), default_facial_status=default_facial_status)

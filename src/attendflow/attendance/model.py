from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import to_iso
from ..core.enums import AttendanceStatus, Department
from ..geofence.model import GeoPoint


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance record per user per day.

    `check_in_time` is None only for ABSENT records, which have no arrival.
    """

    id: str
    user_id: str
    user_name: str
    department: Department
    date: date
    status: AttendanceStatus
    check_in_time: Optional[datetime]
    location: GeoPoint
    check_out_time: Optional[datetime] = None

    @property
    def is_open(self) -> bool:
        return self.check_in_time is not None and self.check_out_time is None

    @property
    def is_closed(self) -> bool:
        return self.check_out_time is not None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "user_name": self.user_name,
            "department": self.department.value,
            "date": self.date.isoformat(),
            "status": self.status.value,
            "check_in_time": to_iso(self.check_in_time),
            "check_out_time": to_iso(self.check_out_time),
            "location": self.location.to_dict(),
        }

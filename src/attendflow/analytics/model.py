from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional

from ..common.datetime_utils import to_iso
from ..core.constants import ALL_USERS
from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class DashboardFilterSelection:
    """Slicer state: a user (or ALL) plus the month (1-12) and year to inspect."""

    user_id: str
    month: int
    year: int

    @classmethod
    def default(cls, now: datetime, *, user_id: str = ALL_USERS) -> "DashboardFilterSelection":
        return cls(user_id=user_id, month=now.month, year=now.year)

    @property
    def is_all(self) -> bool:
        return self.user_id == ALL_USERS


@dataclass(frozen=True)
class StatusCounts:
    present: int = 0
    late: int = 0
    absent: int = 0

    @property
    def total(self) -> int:
        return self.present + self.late + self.absent

    def to_dict(self) -> dict:
        return {"present": self.present, "late": self.late, "absent": self.absent}


@dataclass(frozen=True)
class AttendanceStats:
    counts: StatusCounts
    rate: int

    def to_dict(self) -> dict:
        return {**self.counts.to_dict(), "rate": self.rate}


@dataclass(frozen=True)
class MonthOverMonth:
    current: AttendanceStats
    previous: AttendanceStats

    @property
    def trend(self) -> int:
        """Rate change in percentage points."""
        return self.current.rate - self.previous.rate

    def to_dict(self) -> dict:
        return {"current": self.current.to_dict(), "previous": self.previous.to_dict(), "trend": self.trend}


@dataclass(frozen=True)
class ArrivalPoint:
    day: int
    decimal_hour: float
    status: AttendanceStatus
    date: date

    def to_dict(self) -> dict:
        return {
            "day": self.day,
            "decimal_hour": self.decimal_hour,
            "status": self.status.value,
            "date": self.date.isoformat(),
        }


@dataclass(frozen=True)
class CalendarCell:
    day: int
    date: date
    status: Optional[AttendanceStatus]
    is_weekend: bool
    check_in_time: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "day": self.day,
            "date": self.date.isoformat(),
            "status": self.status.value if self.status else None,
            "is_weekend": self.is_weekend,
            "check_in_time": to_iso(self.check_in_time),
        }


@dataclass(frozen=True)
class ChartSlice:
    name: str
    value: int
    color: str

    def to_dict(self) -> dict:
        return {"name": self.name, "value": self.value, "color": self.color}


@dataclass(frozen=True)
class ComparisonBar:
    name: str
    present: int
    late: int
    absent: int

    def to_dict(self) -> dict:
        return {"name": self.name, "present": self.present, "late": self.late, "absent": self.absent}


@dataclass(frozen=True)
class DashboardView:
    """Everything the dashboard renders for one viewer and slicer state."""

    title: str
    subtitle: str
    is_individual: bool
    selection: DashboardFilterSelection
    stats: AttendanceStats
    trend: Optional[int]
    status_distribution: List[ChartSlice]
    monthly_comparison: List[ComparisonBar]
    department_breakdown: Dict[str, int]
    arrival_series: List[ArrivalPoint] = field(default_factory=list)
    calendar: List[CalendarCell] = field(default_factory=list)
    leading_blank_days: int = 0
    live_feed: List[dict] = field(default_factory=list)
    available_students: List[dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "subtitle": self.subtitle,
            "is_individual": self.is_individual,
            "selection": {
                "user_id": self.selection.user_id,
                "month": self.selection.month,
                "year": self.selection.year,
            },
            "stats": self.stats.to_dict(),
            "trend": self.trend,
            "status_distribution": [s.to_dict() for s in self.status_distribution],
            "monthly_comparison": [b.to_dict() for b in self.monthly_comparison],
            "department_breakdown": dict(self.department_breakdown),
            "arrival_series": [p.to_dict() for p in self.arrival_series],
            "calendar": [c.to_dict() for c in self.calendar],
            "leading_blank_days": self.leading_blank_days,
            "live_feed": list(self.live_feed),
            "available_students": list(self.available_students),
        }

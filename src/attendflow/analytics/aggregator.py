"""Pure aggregation over attendance records.

Every function here is deterministic and total: empty or odd input gives a
zeroed result instead of an exception. Callers pass records already loaded
from a repository; nothing in this module touches storage or the clock.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..common.datetime_utils import days_in_month, decimal_hour
from ..core.enums import AttendanceStatus, Department, Role
from .model import (
    ArrivalPoint,
    AttendanceStats,
    CalendarCell,
    ChartSlice,
    ComparisonBar,
    DashboardFilterSelection,
    MonthOverMonth,
    StatusCounts,
)

STATUS_COLORS = {
    "Present": "#10b981",
    "Late": "#f59e0b",
    "Absent": "#f43f5e",
}
NO_DATA_COLOR = "#e2e8f0"

CONCRETE_DEPARTMENTS = (Department.CS, Department.EE, Department.ME, Department.BA)


def filter_by_scope(
    records: Iterable[AttendanceRecord],
    *,
    role: Role,
    department: Department,
    user_id: str,
    selection: Optional[DashboardFilterSelection] = None,
) -> List[AttendanceRecord]:
    """Records visible to a viewer, optionally narrowed by the slicers.

    Students only ever see their own records. Teachers, admins and HODs see
    their department; super admins see everything. When a specific user is
    selected (or the viewer is a student) the result is further narrowed to
    that user and to the selected month and year.
    """
    if role == Role.STUDENT:
        scoped = [r for r in records if r.user_id == user_id]
    elif role == Role.SUPER_ADMIN:
        scoped = list(records)
    else:
        scoped = [r for r in records if r.department == department]

    if selection is None:
        return scoped

    if not selection.is_all and role != Role.STUDENT:
        scoped = [r for r in scoped if r.user_id == selection.user_id]

    if role == Role.STUDENT or not selection.is_all:
        scoped = [r for r in scoped if r.date.month == selection.month and r.date.year == selection.year]
    return scoped


def compute_status_counts(records: Iterable[AttendanceRecord]) -> StatusCounts:
    present = late = absent = 0
    for r in records:
        if r.status == AttendanceStatus.PRESENT:
            present += 1
        elif r.status == AttendanceStatus.LATE:
            late += 1
        elif r.status == AttendanceStatus.ABSENT:
            absent += 1
    return StatusCounts(present=present, late=late, absent=absent)


def _rate(counts: StatusCounts) -> int:
    total = counts.total
    if total == 0:
        return 0
    # Integer half-up rounding of 100 * attended / total.
    attended = counts.present + counts.late
    return (200 * attended + total) // (2 * total)


def compute_rate(records: Iterable[AttendanceRecord]) -> int:
    return _rate(compute_status_counts(records))


def compute_stats(records: Iterable[AttendanceRecord]) -> AttendanceStats:
    counts = compute_status_counts(records)
    return AttendanceStats(counts=counts, rate=_rate(counts))


def previous_month(month: int) -> int:
    return 12 if month == 1 else month - 1


def compute_month_over_month(
    records: Sequence[AttendanceRecord],
    current_month: int,
    prev_month: int,
    *,
    year: Optional[int] = None,
) -> MonthOverMonth:
    """Stats for two months side by side.

    Without `year` records are matched on the month alone, so the same month
    of earlier years is counted too.
    """
    if year is None:
        current = [r for r in records if r.date.month == current_month]
        previous = [r for r in records if r.date.month == prev_month]
    else:
        prev_year = year - 1 if prev_month > current_month else year
        current = [r for r in records if (r.date.year, r.date.month) == (year, current_month)]
        previous = [r for r in records if (r.date.year, r.date.month) == (prev_year, prev_month)]
    return MonthOverMonth(current=compute_stats(current), previous=compute_stats(previous))


def _latest_per_date(records: Iterable[AttendanceRecord]) -> Dict[date, AttendanceRecord]:
    """One record per date: the latest check-in wins, then the highest id."""
    by_date: Dict[date, AttendanceRecord] = {}
    for r in records:
        kept = by_date.get(r.date)
        if kept is None or _recency(r) > _recency(kept):
            by_date[r.date] = r
    return by_date


def _recency(record: AttendanceRecord):
    return (record.check_in_time or datetime.min, record.id)


def build_arrival_time_series(records: Iterable[AttendanceRecord]) -> List[ArrivalPoint]:
    attended = [r for r in records if r.status != AttendanceStatus.ABSENT and r.check_in_time is not None]
    by_date = _latest_per_date(attended)
    return [
        ArrivalPoint(day=d.day, decimal_hour=decimal_hour(r.check_in_time), status=r.status, date=d)
        for d, r in sorted(by_date.items())
    ]


def build_calendar_cells(records: Iterable[AttendanceRecord], month: int, year: int) -> List[CalendarCell]:
    n_days = days_in_month(month, year)
    if n_days is None:
        return []

    by_date = _latest_per_date(r for r in records if r.date.month == month and r.date.year == year)
    first = date(year, month, 1)
    cells: List[CalendarCell] = []
    for offset in range(n_days):
        d = first + timedelta(days=offset)
        record = by_date.get(d)
        cells.append(
            CalendarCell(
                day=d.day,
                date=d,
                status=record.status if record else None,
                is_weekend=d.weekday() >= 5,
                check_in_time=record.check_in_time if record else None,
            )
        )
    return cells


def leading_blank_days(month: int, year: int) -> int:
    """Empty grid slots before day 1 in a Sunday-first calendar."""
    if days_in_month(month, year) is None:
        return 0
    return (date(year, month, 1).weekday() + 1) % 7


def build_department_breakdown(records: Iterable[AttendanceRecord]) -> Dict[str, int]:
    breakdown = {dept.short_name: 0 for dept in CONCRETE_DEPARTMENTS}
    for r in records:
        if r.status != AttendanceStatus.ABSENT and r.department in CONCRETE_DEPARTMENTS:
            breakdown[r.department.short_name] += 1
    return breakdown


def build_status_distribution(counts: StatusCounts) -> List[ChartSlice]:
    slices = [
        ChartSlice(name=name, value=value, color=STATUS_COLORS[name])
        for name, value in (("Present", counts.present), ("Late", counts.late), ("Absent", counts.absent))
        if value > 0
    ]
    if not slices:
        slices.append(ChartSlice(name="No Data", value=1, color=NO_DATA_COLOR))
    return slices


def build_monthly_comparison(mom: MonthOverMonth) -> List[ComparisonBar]:
    return [
        ComparisonBar("Last Month", mom.previous.counts.present, mom.previous.counts.late, mom.previous.counts.absent),
        ComparisonBar("This Month", mom.current.counts.present, mom.current.counts.late, mom.current.counts.absent),
    ]

from __future__ import annotations

import calendar
from dataclasses import replace
from datetime import datetime
from typing import Iterable, List, Sequence

from ..attendance.model import AttendanceRecord
from ..core.enums import AttendanceStatus, Role
from ..users.model import User
from .aggregator import (
    build_arrival_time_series,
    build_calendar_cells,
    build_department_breakdown,
    build_monthly_comparison,
    build_status_distribution,
    compute_month_over_month,
    compute_stats,
    filter_by_scope,
    leading_blank_days,
    previous_month,
)
from .model import DashboardFilterSelection, DashboardView

LIVE_FEED_SIZE = 8


def available_students(users: Iterable[User], viewer: User) -> List[User]:
    """Students the viewer may pick in the user slicer."""
    if viewer.role == Role.STUDENT:
        return []
    students = [u for u in users if u.role == Role.STUDENT]
    if viewer.role != Role.SUPER_ADMIN:
        students = [u for u in students if u.department == viewer.department]
    return sorted(students, key=lambda u: u.name)


class DashboardService:
    """Use case: assemble the dashboard view model for one viewer."""

    def build(
        self,
        viewer: User,
        records: Sequence[AttendanceRecord],
        users: Sequence[User],
        selection: DashboardFilterSelection,
        *,
        now: datetime,
    ) -> DashboardView:
        if viewer.role == Role.STUDENT:
            selection = replace(selection, user_id=viewer.id)

        scoped = filter_by_scope(records, role=viewer.role, department=viewer.department, user_id=viewer.id)
        is_individual = viewer.role == Role.STUDENT or not selection.is_all

        students = available_students(users, viewer)
        student_dicts = [{"id": u.id, "name": u.name} for u in students]

        if is_individual:
            filtered = filter_by_scope(
                records,
                role=viewer.role,
                department=viewer.department,
                user_id=viewer.id,
                selection=selection,
            )
            stats = compute_stats(filtered)
            selected = next((u for u in users if u.id == selection.user_id), None)
            return DashboardView(
                title=selected.name if selected else "Student Report",
                subtitle=f"Performance report for {_month_name(selection.month)} {selection.year}",
                is_individual=True,
                selection=selection,
                stats=stats,
                trend=None,
                status_distribution=build_status_distribution(stats.counts),
                # Comparison and breakdown belong to the aggregate view only.
                monthly_comparison=[],
                department_breakdown={},
                arrival_series=build_arrival_time_series(filtered),
                calendar=build_calendar_cells(filtered, selection.month, selection.year),
                leading_blank_days=leading_blank_days(selection.month, selection.year),
                available_students=student_dicts,
            )

        # Month-over-month always compares the real current month with the one before it.
        mom = compute_month_over_month(scoped, now.month, previous_month(now.month))
        live_feed = [
            r.to_dict() for r in scoped if r.status != AttendanceStatus.ABSENT and r.check_in_time is not None
        ][:LIVE_FEED_SIZE]
        return DashboardView(
            title="Dashboard",
            subtitle="Overview of campus activity and analytics",
            is_individual=False,
            selection=selection,
            stats=mom.current,
            trend=mom.trend,
            status_distribution=build_status_distribution(mom.current.counts),
            monthly_comparison=build_monthly_comparison(mom),
            department_breakdown=build_department_breakdown(scoped),
            live_feed=live_feed,
            available_students=student_dicts,
        )


def _month_name(month: int) -> str:
    if 1 <= month <= 12:
        return calendar.month_name[month]
    return str(month)

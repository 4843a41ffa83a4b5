from __future__ import annotations

import itertools
from datetime import date, datetime, time

import pytest

from attendflow.attendance.model import AttendanceRecord
from attendflow.core.enums import AttendanceStatus, Department, Role
from attendflow.geofence.model import GeoPoint
from attendflow.users.model import User


@pytest.fixture
def fixed_now() -> datetime:
    # Monday, before the 08:00 cutoff.
    return datetime(2024, 3, 4, 7, 45, 0)


@pytest.fixture
def student() -> User:
    return User("s1", "Alex Smith", "alex.smith@eduno.com", Role.STUDENT, Department.CS)


@pytest.fixture
def ee_student() -> User:
    return User("s2", "Jordan Lee", "jordan.lee@eduno.com", Role.STUDENT, Department.EE)


@pytest.fixture
def teacher() -> User:
    return User("u4", "Mike Ross", "teacher.cs@eduno.com", Role.TEACHER, Department.CS)


@pytest.fixture
def cs_admin() -> User:
    return User("u2", "John Doe", "admin.cs@eduno.com", Role.ADMIN, Department.CS)


@pytest.fixture
def super_admin() -> User:
    return User("u1", "Eleanor Rigby", "super@eduno.com", Role.SUPER_ADMIN, Department.ALL)


@pytest.fixture
def make_record():
    """Factory for attendance records; `check_in` is 'HH:MM' or None."""
    ids = itertools.count(1)

    def _make(
        user_id: str,
        day: date,
        status: AttendanceStatus,
        check_in: str | None = "08:00",
        *,
        check_out: str | None = None,
        department: Department = Department.CS,
        user_name: str | None = None,
        record_id: str | None = None,
    ) -> AttendanceRecord:
        def at(hhmm: str | None):
            if hhmm is None:
                return None
            h, m = hhmm.split(":")
            return datetime.combine(day, time(int(h), int(m)))

        return AttendanceRecord(
            id=record_id or f"r{next(ids)}",
            user_id=user_id,
            user_name=user_name or user_id,
            department=department,
            date=day,
            status=status,
            check_in_time=None if status == AttendanceStatus.ABSENT else at(check_in),
            check_out_time=at(check_out),
            location=GeoPoint(37.7749, -122.4194),
        )

    return _make

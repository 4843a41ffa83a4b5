from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for scoping and view permissions."""

    SUPER_ADMIN = "SUPER_ADMIN"
    ADMIN = "ADMIN"  # department admin
    HOD = "HOD"
    TEACHER = "TEACHER"
    STUDENT = "STUDENT"


class Department(str, Enum):
    CS = "Computer Science"
    EE = "Electrical Engineering"
    ME = "Mechanical Engineering"
    BA = "Business Administration"
    ALL = "All Departments"

    @property
    def short_name(self) -> str:
        return self.name


class AttendanceStatus(str, Enum):
    """Status assigned at check-in; check-out never changes it."""

    PRESENT = "PRESENT"
    LATE = "LATE"
    ABSENT = "ABSENT"


class AuditAction(str, Enum):
    SYSTEM_INIT = "SYSTEM_INIT"
    USER_LOGIN = "USER_LOGIN"
    ATTENDANCE_CHECKIN = "ATTENDANCE_CHECKIN"
    ATTENDANCE_CHECKOUT = "ATTENDANCE_CHECKOUT"


class View(str, Enum):
    DASHBOARD = "dashboard"
    ATTENDANCE = "attendance"
    INSIGHTS = "insights"
    AUDIT = "audit"
    USERS = "users"
    REPORTS = "reports"


class FallbackReason(str, Enum):
    """Why a position reading was replaced by the simulated campus center."""

    POSITION_UNAVAILABLE = "POSITION_UNAVAILABLE"
    OUT_OF_RANGE = "OUT_OF_RANGE"


class RejectionReason(str, Enum):
    ALREADY_COMPLETED = "ALREADY_COMPLETED"
    INVALID_READING = "INVALID_READING"
    OUT_OF_BOUNDS = "OUT_OF_BOUNDS"

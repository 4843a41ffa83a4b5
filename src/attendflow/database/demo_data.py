"""Deterministic demo dataset.

Used to seed the in-memory store when no database is configured, and by
`scripts/seed_db.py` to fill MySQL with the same data.
"""

from __future__ import annotations

import random
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import List

from ..attendance.model import AttendanceRecord
from ..audit.model import AuditLog
from ..core.constants import DEFAULT_GEOFENCE_LAT, DEFAULT_GEOFENCE_LNG, DEMO_HISTORY_DAYS
from ..core.enums import AttendanceStatus, AuditAction, Department, Role
from ..geofence.model import GeoPoint
from ..users.model import User

DEPT_SIZES = {
    Department.CS: 25,
    Department.EE: 15,
    Department.ME: 10,
    Department.BA: 8,
}

FIRST_NAMES = [
    "Alex", "Jordan", "Taylor", "Morgan", "Casey", "Riley", "Avery", "Quinn", "Sage", "River",
    "Emma", "Liam", "Olivia", "Noah", "Ava", "Ethan", "Sophia", "Mason", "Isabella", "Lucas",
    "Mia", "Jackson", "Charlotte", "Aiden", "Amelia", "Caden", "Harper", "Logan", "Evelyn", "Maya",
    "James", "Benjamin", "Henry", "Alexander", "Michael", "Daniel", "Matthew", "David", "Joseph", "William",
    "Emily", "Madison", "Abigail", "Chloe", "Elizabeth", "Samantha", "Grace", "Natalie", "Victoria", "Hannah",
    "Ryan", "Tyler", "Brandon", "Jake", "Connor", "Nathan", "Dylan", "Cameron", "Hunter", "Zachary",
    "Jessica", "Ashley", "Brittany", "Amanda", "Melissa", "Nicole", "Stephanie", "Rachel", "Lauren", "Michelle",
]

LAST_NAMES = [
    "Smith", "Johnson", "Williams", "Brown", "Jones", "Garcia", "Miller", "Davis", "Rodriguez", "Martinez",
    "Hernandez", "Lopez", "Wilson", "Anderson", "Thomas", "Taylor", "Moore", "Jackson", "Martin", "Lee",
    "Thompson", "White", "Harris", "Sanchez", "Clark", "Ramirez", "Lewis", "Robinson", "Walker", "Young",
    "Allen", "King", "Wright", "Scott", "Torres", "Nguyen", "Hill", "Flores", "Green", "Adams",
    "Nelson", "Baker", "Hall", "Rivera", "Campbell", "Mitchell", "Carter", "Roberts", "Gomez", "Phillips",
    "Evans", "Turner", "Diaz", "Parker", "Cruz", "Edwards", "Collins", "Reyes", "Stewart", "Morris",
]

STAFF = [
    User("u1", "Eleanor Rigby", "super@eduno.com", Role.SUPER_ADMIN, Department.ALL),
    User("u2", "John Doe", "admin.cs@eduno.com", Role.ADMIN, Department.CS),
    User("u3", "Sarah Smith", "hod.cs@eduno.com", Role.HOD, Department.CS),
    User("u4", "Mike Ross", "teacher.cs@eduno.com", Role.TEACHER, Department.CS),
]


@dataclass
class DemoData:
    users: List[User] = field(default_factory=list)
    records: List[AttendanceRecord] = field(default_factory=list)
    logs: List[AuditLog] = field(default_factory=list)


def student_name(seed: int) -> str:
    return f"{FIRST_NAMES[seed % len(FIRST_NAMES)]} {LAST_NAMES[(seed * 7) % len(LAST_NAMES)]}"


def demo_record_id(user_id: str, day: date) -> str:
    """Stable id per (user, day) so re-seeding on a later day does not duplicate history."""
    return f"demo-{user_id}-{day:%Y%m%d}"


def _arrival(rng: random.Random, day: date, status: AttendanceStatus) -> datetime:
    # Punctual arrivals land before the 08:00 cutoff, late ones between 09:00 and 09:59.
    if status == AttendanceStatus.LATE:
        return datetime.combine(day, time(9, rng.randrange(60)))
    return datetime.combine(day, time(7, rng.randrange(30, 60)))


def generate_demo_data(seed: int, today: date) -> DemoData:
    """Users plus weekday attendance for the last `DEMO_HISTORY_DAYS` days.

    The first student of every department has no record today so a
    presenter can check in live. Other students may not have arrived yet,
    and today's records stay open.
    """
    rng = random.Random(seed)
    data = DemoData(users=list(STAFF))

    counter = 0
    for dept, size in DEPT_SIZES.items():
        for s in range(1, size + 1):
            counter += 1
            name = student_name(counter)
            student = User(
                id=f"mock-{dept.short_name}-{s}",
                name=name,
                email=f"{name.lower().replace(' ', '.')}@eduno.com",
                role=Role.STUDENT,
                department=dept,
            )
            data.users.append(student)
            data.records.extend(_student_history(rng, student, s, today))

    data.logs.append(
        AuditLog(
            id=uuid.UUID(int=rng.getrandbits(128)).hex,
            action=AuditAction.SYSTEM_INIT,
            performed_by="System",
            timestamp=datetime.combine(today - timedelta(days=1), time(8, 0)),
            details="System initialized successfully.",
        )
    )
    return data


def _student_history(rng: random.Random, student: User, index: int, today: date) -> List[AttendanceRecord]:
    records: List[AttendanceRecord] = []
    for days_ago in range(DEMO_HISTORY_DAYS):
        day = today - timedelta(days=days_ago)
        if day.weekday() >= 5:
            continue

        is_today = days_ago == 0
        if is_today:
            if index == 1 or rng.random() > 0.5:
                continue
            status = AttendanceStatus.LATE if rng.random() > 0.9 else AttendanceStatus.PRESENT
        else:
            roll = rng.random()
            if roll > 0.92:
                status = AttendanceStatus.ABSENT
            elif roll > 0.80:
                status = AttendanceStatus.LATE
            else:
                status = AttendanceStatus.PRESENT

        check_in = check_out = None
        if status != AttendanceStatus.ABSENT:
            check_in = _arrival(rng, day, status)
            if not is_today:
                check_out = check_in + timedelta(hours=8 + rng.uniform(-1, 1))

        records.append(
            AttendanceRecord(
                id=demo_record_id(student.id, day),
                user_id=student.id,
                user_name=student.name,
                department=student.department,
                date=day,
                status=status,
                check_in_time=check_in,
                check_out_time=check_out,
                location=GeoPoint(
                    lat=DEFAULT_GEOFENCE_LAT + rng.random() * 0.01,
                    lng=DEFAULT_GEOFENCE_LNG + rng.random() * 0.01,
                ),
            )
        )
    return records

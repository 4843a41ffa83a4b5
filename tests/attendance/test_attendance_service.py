import threading
import time as clock
from datetime import time

import pytest

from attendflow.attendance.engine import CheckInEngine
from attendflow.attendance.memory_attendance_repository import InMemoryAttendanceRepository
from attendflow.attendance.service import AttendanceService
from attendflow.audit.memory_audit_repository import InMemoryAuditLogRepository
from attendflow.core.enums import AttendanceStatus, AuditAction, Department, FallbackReason
from attendflow.core.exceptions import (
    AlreadyCompletedError,
    AuthorizationError,
    InvalidReadingError,
    OutOfBoundsError,
    ScanConflictError,
    ValidationError,
)
from attendflow.geofence.model import GeofenceConfig

ON_CAMPUS = {"lat": 37.7752, "lng": -122.4190}
OAKLAND = {"lat": 37.8044, "lng": -122.2712}


@pytest.fixture
def repos():
    return InMemoryAttendanceRepository(), InMemoryAuditLogRepository()


def _service(repos, *, allow_simulation=True):
    attendance, audit = repos
    return AttendanceService(
        attendance,
        audit,
        engine=CheckInEngine(cutoff=time(8, 0)),
        geofence=GeofenceConfig(),
        allow_simulation=allow_simulation,
    )


def test_scan_checks_in_then_out_then_rejects(repos, student, fixed_now):
    svc = _service(repos)
    attendance, audit = repos

    first = svc.scan(student, ON_CAMPUS, now=fixed_now)
    assert first.action == "CHECK_IN"
    assert first.simulated is False
    assert first.record.status == AttendanceStatus.PRESENT

    second = svc.scan(student, ON_CAMPUS, now=fixed_now.replace(hour=15))
    assert second.action == "CHECK_OUT"
    assert second.record.id == first.record.id
    assert second.record.check_out_time == fixed_now.replace(hour=15)

    with pytest.raises(AlreadyCompletedError):
        svc.scan(student, ON_CAMPUS, now=fixed_now.replace(hour=16))

    stored = attendance.list_attendance()
    assert len(stored) == 1
    assert stored[0].check_out_time == fixed_now.replace(hour=15)

    actions = [e.action for e in audit.list_recent(10)]
    assert actions == [AuditAction.ATTENDANCE_CHECKOUT, AuditAction.ATTENDANCE_CHECKIN]


def test_audit_details_match_the_action(repos, student, fixed_now):
    svc = _service(repos)
    _, audit = repos

    svc.scan(student, ON_CAMPUS, now=fixed_now)
    svc.scan(student, ON_CAMPUS, now=fixed_now.replace(hour=16, minute=2, second=9))

    checkout, checkin = audit.list_recent(10)
    assert checkin.details == f"Check-in at {ON_CAMPUS['lat']}, {ON_CAMPUS['lng']}"
    assert checkin.performed_by == student.name
    assert checkout.details == "Check-out at 16:02:09"


def test_simulated_checkin_is_disclosed(repos, student, fixed_now):
    svc = _service(repos)
    _, audit = repos

    result = svc.scan(student, OAKLAND, now=fixed_now)

    assert result.simulated is True
    assert result.fallback_reason == FallbackReason.OUT_OF_RANGE
    assert result.measured_distance_meters > 2000
    assert result.to_dict()["simulated"] is True
    assert audit.list_recent(1)[0].details.endswith("(simulated)")


def test_unavailable_position_is_simulated(repos, student, fixed_now):
    result = _service(repos).scan(student, {"unavailable": True}, now=fixed_now)

    assert result.simulated is True
    assert result.fallback_reason == FallbackReason.POSITION_UNAVAILABLE


def test_out_of_bounds_without_simulation_persists_nothing(repos, student, fixed_now):
    svc = _service(repos, allow_simulation=False)
    attendance, audit = repos

    with pytest.raises(OutOfBoundsError):
        svc.scan(student, OAKLAND, now=fixed_now)

    assert attendance.list_attendance() == []
    assert audit.list_recent(10) == []


def test_invalid_reading_is_a_validation_error(repos, student, fixed_now):
    with pytest.raises(InvalidReadingError) as exc:
        _service(repos).scan(student, {"lat": "north", "lng": 1.0}, now=fixed_now)

    assert isinstance(exc.value, ValidationError)


def test_admins_cannot_check_in(repos, cs_admin, fixed_now):
    with pytest.raises(AuthorizationError):
        _service(repos).scan(cs_admin, ON_CAMPUS, now=fixed_now)


def test_teacher_can_check_in_late(repos, teacher, fixed_now):
    result = _service(repos).scan(teacher, ON_CAMPUS, now=fixed_now.replace(hour=8, minute=30))
    assert result.record.status == AttendanceStatus.LATE


def test_today_state_follows_the_record(repos, student, fixed_now):
    svc = _service(repos)

    assert svc.today_state(student, now=fixed_now).state == "NONE"
    svc.scan(student, ON_CAMPUS, now=fixed_now)
    assert svc.today_state(student, now=fixed_now).state == "OPEN"
    svc.scan(student, ON_CAMPUS, now=fixed_now.replace(hour=15))
    assert svc.today_state(student, now=fixed_now).state == "CLOSED"


def test_list_visible_is_scoped_by_role(student, ee_student, cs_admin, super_admin, fixed_now, make_record):
    day = fixed_now.date()
    records = [
        make_record(student.id, day, AttendanceStatus.PRESENT),
        make_record(ee_student.id, day, AttendanceStatus.LATE, "09:00", department=Department.EE),
    ]
    svc = _service((InMemoryAttendanceRepository(records), InMemoryAuditLogRepository()))

    assert [r.user_id for r in svc.list_visible(student)] == [student.id]
    assert [r.user_id for r in svc.list_visible(cs_admin)] == [student.id]
    assert len(svc.list_visible(super_admin)) == 2


class _SlowReadRepository(InMemoryAttendanceRepository):
    """Widens the gap between reading today's record and writing a new one."""

    def get_for_user_and_date(self, user_id, work_date):
        found = super().get_for_user_and_date(user_id, work_date)
        clock.sleep(0.05)
        return found


def test_concurrent_scans_open_a_single_record(student, fixed_now):
    attendance, audit = _SlowReadRepository(), InMemoryAuditLogRepository()
    svc = _service((attendance, audit))
    start = threading.Barrier(2)
    results, errors = [], []

    def scan():
        start.wait()
        try:
            results.append(svc.scan(student, None, now=fixed_now))
        except ScanConflictError as exc:
            errors.append(exc)

    threads = [threading.Thread(target=scan) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    stored = [r for r in attendance.list_attendance() if r.user_id == student.id]
    assert len(stored) == 1
    assert len(results) == 1
    assert len(errors) == 1
    assert [e.action for e in audit.list_recent(10)] == [AuditAction.ATTENDANCE_CHECKIN]


def test_create_if_absent_ignores_absent_placeholder(student, fixed_now, make_record):
    placeholder = make_record(student.id, fixed_now.date(), AttendanceStatus.ABSENT)
    attendance = InMemoryAttendanceRepository([placeholder])
    opened = make_record(student.id, fixed_now.date(), AttendanceStatus.PRESENT, "07:45")
    duplicate = make_record(student.id, fixed_now.date(), AttendanceStatus.LATE, "08:10")

    assert attendance.create_if_absent(opened) is True
    assert attendance.create_if_absent(duplicate) is False
    assert {r.id for r in attendance.list_attendance()} == {placeholder.id, opened.id}


class _TrackingRepository(InMemoryAttendanceRepository):
    def __init__(self):
        super().__init__()
        self.active = 0

    def subscribe(self, callback):
        unsubscribe = super().subscribe(callback)
        self.active += 1

        def release():
            self.active -= 1
            unsubscribe()

        return release


def test_watch_streams_only_visible_changes(student, ee_student, fixed_now, make_record):
    attendance = _TrackingRepository()
    svc = _service((attendance, InMemoryAuditLogRepository()))
    changes = svc.watch(student, keepalive=0.01)

    assert next(changes) is None
    assert attendance.active == 1

    other = make_record(ee_student.id, fixed_now.date(), AttendanceStatus.PRESENT, "07:40", department=Department.EE)
    own = make_record(student.id, fixed_now.date(), AttendanceStatus.PRESENT, "07:45")
    attendance.create_attendance(other)
    attendance.create_attendance(own)

    assert next(changes) == own
    assert next(changes) is None  # quiet period

    changes.close()
    assert attendance.active == 0


def test_watch_for_staff_follows_department_scope(cs_admin, student, ee_student, fixed_now, make_record):
    attendance = InMemoryAttendanceRepository()
    svc = _service((attendance, InMemoryAuditLogRepository()))
    changes = svc.watch(cs_admin, keepalive=0.01)
    next(changes)

    attendance.create_attendance(
        make_record(ee_student.id, fixed_now.date(), AttendanceStatus.PRESENT, department=Department.EE)
    )
    cs = make_record(student.id, fixed_now.date(), AttendanceStatus.LATE, "08:20")
    attendance.create_attendance(cs)

    assert next(changes) == cs
    changes.close()

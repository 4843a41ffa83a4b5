from __future__ import annotations

import logging
import queue
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterator, List, Mapping, Optional

from ..access.policy import can_check_in
from ..analytics.aggregator import filter_by_scope
from ..audit.model import AuditLog
from ..audit.repository import AuditLogRepository
from ..core.constants import STREAM_KEEPALIVE_SECONDS
from ..core.enums import AuditAction, FallbackReason, RejectionReason
from ..core.exceptions import (
    AlreadyCompletedError,
    AuthorizationError,
    InvalidReadingError,
    OutOfBoundsError,
    ScanConflictError,
    ValidationError,
)
from ..geofence.evaluator import parse_reading
from ..geofence.model import GeofenceConfig
from ..users.model import User
from .engine import CheckInEngine, CloseAttendance, CreateAttendance, Rejected
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

_REJECTION_ERRORS = {
    RejectionReason.ALREADY_COMPLETED: AlreadyCompletedError,
    RejectionReason.INVALID_READING: InvalidReadingError,
    RejectionReason.OUT_OF_BOUNDS: OutOfBoundsError,
}


@dataclass(frozen=True)
class ScanResult:
    """What a scan did, including whether the position was simulated."""

    action: str  # CHECK_IN | CHECK_OUT
    record: AttendanceRecord
    simulated: bool
    fallback_reason: Optional[FallbackReason]
    measured_distance_meters: Optional[float]

    @property
    def message(self) -> str:
        if self.action == "CHECK_OUT":
            return "Checked out successfully"
        if self.simulated:
            return f"Checked in as {self.record.status.value} (simulated location)"
        return f"Checked in as {self.record.status.value}"

    def to_dict(self) -> dict:
        return {
            "action": self.action,
            "message": self.message,
            "record": self.record.to_dict(),
            "simulated": self.simulated,
            "fallback_reason": self.fallback_reason.value if self.fallback_reason else None,
            "measured_distance_meters": self.measured_distance_meters,
        }


@dataclass(frozen=True)
class TodayState:
    state: str  # NONE | OPEN | CLOSED
    record: Optional[AttendanceRecord]

    def to_dict(self) -> dict:
        return {"state": self.state, "record": self.record.to_dict() if self.record else None}


class AttendanceService:
    """Use case: geofenced check-in/check-out and the record log."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        audit: AuditLogRepository,
        *,
        engine: CheckInEngine | None = None,
        geofence: GeofenceConfig | None = None,
        allow_simulation: bool = True,
    ):
        self._attendance = attendance
        self._audit = audit
        self._engine = engine or CheckInEngine()
        self._geofence = geofence or GeofenceConfig()
        self._allow_simulation = bool(allow_simulation)

    @property
    def allow_simulation(self) -> bool:
        return self._allow_simulation

    def scan(self, user: User, payload: Optional[Mapping[str, Any]], *, now: datetime) -> ScanResult:
        if not can_check_in(user.role):
            raise AuthorizationError("Only students and teachers can check in")

        today_record = self._attendance.get_for_user_and_date(user.id, now.date())
        outcome = self._engine.scan(
            user,
            today_record,
            parse_reading(payload),
            self._geofence,
            now=now,
            allow_simulation=self._allow_simulation,
        )
        decision = outcome.decision

        if isinstance(decision, Rejected):
            logger.info("Scan rejected for user %s: %s", user.id, decision.reason.value)
            raise _REJECTION_ERRORS[decision.reason](decision.message)

        evaluation = outcome.evaluation
        simulated = bool(evaluation and evaluation.simulated)
        fallback_reason = evaluation.fallback_reason if evaluation else None
        measured = evaluation.measured_distance_meters if evaluation else None

        if isinstance(decision, CreateAttendance):
            record = decision.record
            if not self._attendance.create_if_absent(record):
                logger.info("Concurrent check-in for user %s on %s lost the race", user.id, record.date)
                raise ScanConflictError("A check-in for today is already being recorded")
            details = f"Check-in at {record.location.lat}, {record.location.lng}"
            if simulated:
                details += " (simulated)"
            self._log(AuditAction.ATTENDANCE_CHECKIN, user, now, details)
            logger.info("User %s checked in as %s", user.id, record.status.value)
            return ScanResult("CHECK_IN", record, simulated, fallback_reason, measured)

        if isinstance(decision, CloseAttendance):
            record = decision.record
            if not self._attendance.update_attendance(record):
                raise ValidationError("Attendance record no longer exists")
            self._log(AuditAction.ATTENDANCE_CHECKOUT, user, now, f"Check-out at {now.strftime('%H:%M:%S')}")
            logger.info("User %s checked out", user.id)
            return ScanResult("CHECK_OUT", record, simulated, fallback_reason, measured)

        raise TypeError(f"Unexpected check-in decision: {decision!r}")

    def today_state(self, user: User, *, now: datetime) -> TodayState:
        record = self._attendance.get_for_user_and_date(user.id, now.date())
        if record is None or record.check_in_time is None:
            return TodayState("NONE", None)
        if record.is_closed:
            return TodayState("CLOSED", record)
        return TodayState("OPEN", record)

    def list_visible(self, viewer: User) -> List[AttendanceRecord]:
        """Record log scoped to what the viewer may see, newest first."""
        return filter_by_scope(
            self._attendance.list_attendance(),
            role=viewer.role,
            department=viewer.department,
            user_id=viewer.id,
        )

    def watch(self, viewer: User, *, keepalive: float = STREAM_KEEPALIVE_SECONDS) -> Iterator[Optional[AttendanceRecord]]:
        """Changed records visible to `viewer`, as they are written.

        Yields None once subscribed and again after every `keepalive` seconds
        without a change. Closing the generator unsubscribes.
        """
        changes: queue.Queue = queue.Queue()
        unsubscribe = self._attendance.subscribe(changes.put)
        try:
            yield None
            while True:
                try:
                    record = changes.get(timeout=keepalive)
                except queue.Empty:
                    yield None
                    continue
                if filter_by_scope([record], role=viewer.role, department=viewer.department, user_id=viewer.id):
                    yield record
        finally:
            unsubscribe()

    def _log(self, action: AuditAction, user: User, now: datetime, details: str) -> None:
        self._audit.append(AuditLog.new(action=action, performed_by=user.name, timestamp=now, details=details))

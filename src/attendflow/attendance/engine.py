from __future__ import annotations

import dataclasses
import logging
import uuid
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Callable, Iterable, Optional, Union

from ..core.constants import DEFAULT_CHECKIN_CUTOFF
from ..core.enums import RejectionReason
from ..geofence.evaluator import evaluate_position
from ..geofence.model import GeofenceConfig, GeoPoint, InvalidReading, PositionEvaluation
from ..users.model import User
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CreateAttendance:
    record: AttendanceRecord


@dataclass(frozen=True)
class CloseAttendance:
    record: AttendanceRecord


@dataclass(frozen=True)
class Rejected:
    reason: RejectionReason
    message: str


CheckInDecision = Union[CreateAttendance, CloseAttendance, Rejected]


@dataclass(frozen=True)
class ScanOutcome:
    decision: CheckInDecision
    evaluation: Optional[PositionEvaluation] = None


def find_today_record(records: Iterable[AttendanceRecord], user_id: str, today: date) -> Optional[AttendanceRecord]:
    """Most recent record of `user_id` dated `today` (latest check-in wins)."""
    candidates = [r for r in records if r.user_id == user_id and r.date == today]
    if not candidates:
        return None
    return max(candidates, key=lambda r: (r.check_in_time or datetime.min, r.id))


def _belongs_to(record: Optional[AttendanceRecord], user: User, today: date) -> bool:
    return record is not None and record.user_id == user.id and record.date == today


def _already_completed() -> Rejected:
    return Rejected(reason=RejectionReason.ALREADY_COMPLETED, message="Attendance for today is already completed")


class CheckInEngine:
    """Per user, per day state machine: NO_RECORD -> OPEN -> CLOSED.

    The engine only returns intent objects. Persistence and audit logging
    belong to the caller.
    """

    def __init__(
        self,
        *,
        cutoff: time = DEFAULT_CHECKIN_CUTOFF,
        strategy_factory: AttendanceStrategyFactory | None = None,
        id_factory: Callable[[], str] | None = None,
    ):
        self._cutoff = cutoff
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._new_id = id_factory or (lambda: uuid.uuid4().hex)

    @property
    def cutoff(self) -> time:
        return self._cutoff

    def decide(
        self,
        user: User,
        today_record: Optional[AttendanceRecord],
        *,
        now: datetime,
        position: GeoPoint,
    ) -> CheckInDecision:
        today = now.date()
        if not _belongs_to(today_record, user, today):
            today_record = None

        if today_record is not None and today_record.is_closed:
            return _already_completed()

        if today_record is not None and today_record.is_open:
            return CloseAttendance(record=dataclasses.replace(today_record, check_out_time=now))

        strategy = self._factory.for_checkin(now=now, cutoff=self._cutoff)
        decision = strategy.decide_checkin(now=now)
        return CreateAttendance(
            record=AttendanceRecord(
                id=self._new_id(),
                user_id=user.id,
                user_name=user.name,
                department=user.department,
                date=today,
                status=decision.status,
                check_in_time=now,
                location=position,
            )
        )

    def scan(
        self,
        user: User,
        today_record: Optional[AttendanceRecord],
        reading: Optional[GeoPoint],
        geofence: GeofenceConfig,
        *,
        now: datetime,
        allow_simulation: bool = True,
    ) -> ScanOutcome:
        """Evaluate a reading and decide the mutation in one step.

        A closed day is rejected before the reading is looked at.
        """
        if _belongs_to(today_record, user, now.date()) and today_record.is_closed:
            return ScanOutcome(decision=_already_completed())

        evaluation = evaluate_position(reading, geofence, allow_simulation=allow_simulation)
        if isinstance(evaluation, InvalidReading):
            logger.warning("Rejected malformed reading for user %s: %s", user.id, evaluation.message)
            return ScanOutcome(decision=Rejected(reason=RejectionReason.INVALID_READING, message=evaluation.message))

        if not evaluation.within_bounds:
            return ScanOutcome(
                decision=Rejected(
                    reason=RejectionReason.OUT_OF_BOUNDS,
                    message=f"You must be within {geofence.radius_meters:.0f}m of {geofence.name}",
                ),
                evaluation=evaluation,
            )

        decision = self.decide(user, today_record, now=now, position=evaluation.position)
        return ScanOutcome(decision=decision, evaluation=evaluation)

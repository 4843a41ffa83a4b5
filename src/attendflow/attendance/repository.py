from __future__ import annotations

from datetime import date
from typing import Callable, Optional, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    """Data-access interface for attendance records.

    Note (DIP): services depend on this interface, never on a concrete store.
    """

    def list_attendance(self) -> Sequence[AttendanceRecord]:
        """All records, most recent check-in first."""

        raise NotImplementedError

    def get_for_user_and_date(self, user_id: str, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_attendance(self, record: AttendanceRecord) -> None:
        raise NotImplementedError

    def create_if_absent(self, record: AttendanceRecord) -> bool:
        """Insert `record` unless its user already checked in on its date.

        The check and the insert are atomic per user. Returns False when
        another record won.
        """

        raise NotImplementedError

    def update_attendance(self, record: AttendanceRecord) -> bool:
        raise NotImplementedError

    def subscribe(self, callback: Callable[[AttendanceRecord], None]) -> Callable[[], None]:
        raise NotImplementedError

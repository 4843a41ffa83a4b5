from __future__ import annotations

import threading
from datetime import date, datetime, time
from typing import Callable, Iterable, Optional, Sequence

from .change_feed import ChangeFeed
from .engine import find_today_record
from .model import AttendanceRecord
from .repository import AttendanceRepository


def _sort_key(record: AttendanceRecord) -> datetime:
    return record.check_in_time or datetime.combine(record.date, time.min)


class InMemoryAttendanceRepository(AttendanceRepository):
    """Process-local store used in demo mode (no database configured)."""

    def __init__(self, records: Iterable[AttendanceRecord] = (), *, feed: ChangeFeed | None = None):
        self._records: dict[str, AttendanceRecord] = {r.id: r for r in records}
        self._lock = threading.Lock()
        self._feed = feed or ChangeFeed()

    def list_attendance(self) -> Sequence[AttendanceRecord]:
        with self._lock:
            items = list(self._records.values())
        items.sort(key=_sort_key, reverse=True)
        return items

    def get_for_user_and_date(self, user_id: str, work_date: date) -> Optional[AttendanceRecord]:
        with self._lock:
            items = list(self._records.values())
        return find_today_record(items, user_id, work_date)

    def create_attendance(self, record: AttendanceRecord) -> None:
        with self._lock:
            self._records[record.id] = record
        self._feed.publish(record)

    def create_if_absent(self, record: AttendanceRecord) -> bool:
        with self._lock:
            for existing in self._records.values():
                if (
                    existing.user_id == record.user_id
                    and existing.date == record.date
                    and existing.check_in_time is not None
                ):
                    return False
            self._records[record.id] = record
        self._feed.publish(record)
        return True

    def update_attendance(self, record: AttendanceRecord) -> bool:
        with self._lock:
            if record.id not in self._records:
                return False
            self._records[record.id] = record
        self._feed.publish(record)
        return True

    def subscribe(self, callback: Callable[[AttendanceRecord], None]) -> Callable[[], None]:
        return self._feed.subscribe(callback)

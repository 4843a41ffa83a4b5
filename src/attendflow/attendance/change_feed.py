from __future__ import annotations

import logging
import threading
from typing import Callable, List

from .model import AttendanceRecord

logger = logging.getLogger(__name__)

Listener = Callable[[AttendanceRecord], None]


class ChangeFeed:
    """Pushes created/updated attendance records to subscribers."""

    def __init__(self):
        self._listeners: List[Listener] = []
        self._lock = threading.Lock()

    def subscribe(self, callback: Listener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._listeners:
                    self._listeners.remove(callback)

        return unsubscribe

    def publish(self, record: AttendanceRecord) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(record)
            except Exception:
                logger.exception("Attendance subscriber failed for record %s", record.id)

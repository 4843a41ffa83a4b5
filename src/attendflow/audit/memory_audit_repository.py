from __future__ import annotations

import threading
from typing import Iterable, Sequence

from .model import AuditLog
from .repository import AuditLogRepository


class InMemoryAuditLogRepository(AuditLogRepository):
    def __init__(self, entries: Iterable[AuditLog] = ()):
        self._entries: list[AuditLog] = list(entries)
        self._lock = threading.Lock()

    def append(self, entry: AuditLog) -> None:
        with self._lock:
            self._entries.append(entry)

    def list_recent(self, limit: int) -> Sequence[AuditLog]:
        with self._lock:
            items = list(reversed(self._entries))
        # Stable sort: equal timestamps keep the latest append first.
        items.sort(key=lambda e: e.timestamp, reverse=True)
        return items[: max(int(limit), 0)]

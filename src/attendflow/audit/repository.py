from __future__ import annotations

from typing import Protocol, Sequence

from .model import AuditLog


class AuditLogRepository(Protocol):
    def append(self, entry: AuditLog) -> None:
        raise NotImplementedError

    def list_recent(self, limit: int) -> Sequence[AuditLog]:
        """Newest first."""

        raise NotImplementedError

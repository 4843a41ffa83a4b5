from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime

from ..core.enums import AuditAction


@dataclass(frozen=True)
class AuditLog:
    id: str
    action: AuditAction
    performed_by: str
    timestamp: datetime
    details: str

    @classmethod
    def new(cls, *, action: AuditAction, performed_by: str, timestamp: datetime, details: str) -> "AuditLog":
        return cls(id=uuid.uuid4().hex, action=action, performed_by=performed_by, timestamp=timestamp, details=details)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "action": self.action.value,
            "performed_by": self.performed_by,
            "timestamp": self.timestamp.isoformat(),
            "details": self.details,
        }

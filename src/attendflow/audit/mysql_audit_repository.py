from __future__ import annotations

from typing import Sequence

from ..core.enums import AuditAction
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import AuditLog
from .repository import AuditLogRepository


class MySQLAuditLogRepository(AuditLogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def append(self, entry: AuditLog) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO audit_logs (id, action, performed_by, logged_at, details)
                VALUES (%s, %s, %s, %s, %s)
                """,
                (entry.id, entry.action.value, entry.performed_by, entry.timestamp, entry.details),
            )

    def list_recent(self, limit: int) -> Sequence[AuditLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, action, performed_by, logged_at, details
                FROM audit_logs
                ORDER BY logged_at DESC
                LIMIT %s
                """,
                (int(limit),),
            )
            return [
                AuditLog(
                    id=r["id"],
                    action=AuditAction(r["action"]),
                    performed_by=r["performed_by"],
                    timestamp=r["logged_at"],
                    details=r.get("details") or "",
                )
                for r in fetchall(cur)
            ]

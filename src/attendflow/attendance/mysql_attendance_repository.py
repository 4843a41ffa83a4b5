from __future__ import annotations

from datetime import date
from typing import Callable, Optional, Sequence

from ..core.enums import AttendanceStatus, Department
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from ..geofence.model import GeoPoint
from .change_feed import ChangeFeed
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = "id, user_id, user_name, department, work_date, status, check_in_time, check_out_time, lat, lng"


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        id=r["id"],
        user_id=r["user_id"],
        user_name=r["user_name"],
        department=Department(r["department"]),
        date=r["work_date"],
        status=AttendanceStatus(r["status"]),
        check_in_time=r.get("check_in_time"),
        check_out_time=r.get("check_out_time"),
        location=GeoPoint(lat=float(r["lat"]), lng=float(r["lng"])),
    )


def _insert(cur, record: AttendanceRecord) -> None:
    cur.execute(
        f"""
        INSERT INTO attendance_records({_COLUMNS})
        VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
        """,
        (
            record.id,
            record.user_id,
            record.user_name,
            record.department.value,
            record.date,
            record.status.value,
            record.check_in_time,
            record.check_out_time,
            record.location.lat,
            record.location.lng,
        ),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection, *, feed: ChangeFeed | None = None):
        self._conn_factory = conn_factory
        self._feed = feed or ChangeFeed()

    def list_attendance(self) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                ORDER BY COALESCE(check_in_time, work_date) DESC
                """
            )
            return [_to_record(r) for r in fetchall(cur)]

    def get_for_user_and_date(self, user_id: str, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE user_id=%s AND work_date=%s
                ORDER BY check_in_time DESC, id DESC
                LIMIT 1
                """,
                (user_id, work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def create_attendance(self, record: AttendanceRecord) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            _insert(cur, record)
        self._feed.publish(record)

    def create_if_absent(self, record: AttendanceRecord) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            # Row lock on the user serialises concurrent scans until commit.
            cur.execute("SELECT id FROM users WHERE id=%s FOR UPDATE", (record.user_id,))
            fetchone(cur)
            cur.execute(
                """
                SELECT COUNT(*) AS n
                FROM attendance_records
                WHERE user_id=%s AND work_date=%s AND check_in_time IS NOT NULL
                """,
                (record.user_id, record.date),
            )
            row = fetchone(cur)
            if row and int(row["n"]) > 0:
                return False
            _insert(cur, record)
        self._feed.publish(record)
        return True

    def update_attendance(self, record: AttendanceRecord) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s, status=%s
                WHERE id=%s
                """,
                (record.check_out_time, record.status.value, record.id),
            )
            updated = cur.rowcount > 0
        if updated:
            self._feed.publish(record)
        return updated

    def subscribe(self, callback: Callable[[AttendanceRecord], None]) -> Callable[[], None]:
        return self._feed.subscribe(callback)

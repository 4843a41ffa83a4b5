from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, time
from typing import Optional

from .analytics.service import DashboardService
from .attendance.change_feed import ChangeFeed
from .attendance.engine import CheckInEngine
from .attendance.factory import AttendanceStrategyFactory
from .attendance.memory_attendance_repository import InMemoryAttendanceRepository
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .audit.memory_audit_repository import InMemoryAuditLogRepository
from .audit.mysql_audit_repository import MySQLAuditLogRepository
from .audit.repository import AuditLogRepository
from .core.constants import DEFAULT_CHECKIN_CUTOFF, DEFAULT_POSITION_TIMEOUT_MS
from .database.connection import DBConfig, DatabaseConnection
from .database.demo_data import generate_demo_data
from .geofence.model import GeofenceConfig
from .insights.client import GeminiClient, LLMConfig
from .insights.service import InsightsService
from .users.memory_user_repository import InMemoryUserRepository
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import SessionService

logger = logging.getLogger(__name__)

STORE_MYSQL = "MYSQL"
STORE_MEMORY = "MEMORY"


@dataclass(frozen=True)
class Container:
    store_type: str

    geofence: GeofenceConfig
    position_timeout_ms: int

    users_repo: UserRepository
    attendance_repo: AttendanceRepository
    audit_repo: AuditLogRepository

    session_service: SessionService
    attendance_service: AttendanceService
    dashboard_service: DashboardService
    insights_service: InsightsService


def build_container(
    *,
    db_config: Optional[dict],
    geofence: GeofenceConfig | None = None,
    cutoff: time = DEFAULT_CHECKIN_CUTOFF,
    allow_simulation: bool = True,
    position_timeout_ms: int = DEFAULT_POSITION_TIMEOUT_MS,
    llm_config: LLMConfig | None = None,
    demo_seed: int = 42,
    today: date | None = None,
) -> Container:
    """Wire repositories and services once per process.

    With `db_config` the MySQL repositories are used; without it the
    in-memory store is seeded with the demo dataset.
    """
    feed = ChangeFeed()
    geofence = geofence or GeofenceConfig()

    if db_config:
        conn = DatabaseConnection(DBConfig.from_mapping(db_config))
        users_repo: UserRepository = MySQLUserRepository(conn)
        attendance_repo: AttendanceRepository = MySQLAttendanceRepository(conn, feed=feed)
        audit_repo: AuditLogRepository = MySQLAuditLogRepository(conn)
        store_type = STORE_MYSQL
        logger.info("Using MySQL store at %s:%s/%s", conn.config.host, conn.config.port, conn.config.database)
    else:
        demo = generate_demo_data(demo_seed, today or date.today())
        users_repo = InMemoryUserRepository(demo.users)
        attendance_repo = InMemoryAttendanceRepository(demo.records, feed=feed)
        audit_repo = InMemoryAuditLogRepository(demo.logs)
        store_type = STORE_MEMORY
        logger.info("No database configured, using in-memory demo store (%d records)", len(demo.records))

    engine = CheckInEngine(cutoff=cutoff, strategy_factory=AttendanceStrategyFactory())

    client: Optional[GeminiClient] = None
    if llm_config and llm_config.api_key:
        client = GeminiClient(llm_config)
    else:
        logger.info("GEMINI_API_KEY not set, AI insights disabled")

    return Container(
        store_type=store_type,
        geofence=geofence,
        position_timeout_ms=int(position_timeout_ms),
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        audit_repo=audit_repo,
        session_service=SessionService(users_repo, audit_repo),
        attendance_service=AttendanceService(
            attendance_repo,
            audit_repo,
            engine=engine,
            geofence=geofence,
            allow_simulation=allow_simulation,
        ),
        dashboard_service=DashboardService(),
        insights_service=InsightsService(client),
    )

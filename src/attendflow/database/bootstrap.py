from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, List

import mysql.connector

from .connection import DBConfig
from .demo_data import DemoData

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter (handles ';' inside quotes).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _connect(target: DBConfig, *, with_database: bool = True):
    kwargs = dict(host=target.host, port=target.port, user=target.user, password=target.password, use_pure=True)
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_mapping(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path = SCHEMA_PATH) -> None:
    ensure_database_exists(db_config)
    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))

    conn = _connect(DBConfig.from_mapping(db_config))
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()
    logger.info("Schema applied from %s", schema_path)


def list_tables(db_config: dict) -> List[str]:
    conn = _connect(DBConfig.from_mapping(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [str(row[0]) for row in cur.fetchall()]
    finally:
        conn.close()


def seed_demo_data(db_config: dict, data: DemoData) -> None:
    """Upsert demo users and insert demo records/logs that are not there yet.

    Record ids are keyed on (user, day), so seeding again on a later day only
    adds the days that are new.
    """
    conn = _connect(DBConfig.from_mapping(db_config))
    try:
        cur = conn.cursor()
        cur.executemany(
            """
            INSERT INTO users (id, name, email, role, department, avatar_url)
            VALUES (%s, %s, %s, %s, %s, %s)
            ON DUPLICATE KEY UPDATE
                name=VALUES(name), email=VALUES(email), role=VALUES(role),
                department=VALUES(department), avatar_url=VALUES(avatar_url)
            """,
            [(u.id, u.name, u.email, u.role.value, u.department.value, u.avatar_url) for u in data.users],
        )
        cur.executemany(
            """
            INSERT IGNORE INTO attendance_records
                (id, user_id, user_name, department, work_date, status, check_in_time, check_out_time, lat, lng)
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
            """,
            [
                (
                    r.id,
                    r.user_id,
                    r.user_name,
                    r.department.value,
                    r.date,
                    r.status.value,
                    r.check_in_time,
                    r.check_out_time,
                    r.location.lat,
                    r.location.lng,
                )
                for r in data.records
            ],
        )
        cur.executemany(
            """
            INSERT IGNORE INTO audit_logs (id, action, performed_by, logged_at, details)
            VALUES (%s, %s, %s, %s, %s)
            """,
            [(log.id, log.action.value, log.performed_by, log.timestamp, log.details) for log in data.logs],
        )
        conn.commit()
    finally:
        conn.close()
    logger.info(
        "Seeded %d users, %d attendance records, %d audit logs",
        len(data.users),
        len(data.records),
        len(data.logs),
    )

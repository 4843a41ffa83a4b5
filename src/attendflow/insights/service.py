from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..analytics.aggregator import compute_rate, compute_status_counts
from ..attendance.model import AttendanceRecord
from ..audit.model import AuditLog
from ..common.datetime_utils import to_iso
from ..common.validators import require_max_length, require_non_empty
from ..core.constants import INSIGHTS_RECENT_LOGS, INSIGHTS_SAMPLE_RECORDS
from ..core.enums import Role
from ..users.model import User
from .client import GeminiClient
from .prompts import EMPTY_RESPONSE_MESSAGE, MISSING_KEY_MESSAGE, PROVIDER_FAILURE_MESSAGE, render_prompt

logger = logging.getLogger(__name__)

MAX_QUERY_LENGTH = 2000


def build_context(
    records: Sequence[AttendanceRecord],
    users: Sequence[User],
    logs: Sequence[AuditLog],
    *,
    now: datetime,
) -> Dict[str, Any]:
    """Summarise the visible data for the analyst prompt."""
    today = now.date()
    today_records = [r for r in records if r.date == today]
    last_7 = [r for r in records if (today - r.date).days <= 7]
    last_30 = [r for r in records if (today - r.date).days <= 30]

    students_per_dept = Counter(u.department.value for u in users if u.role == Role.STUDENT)
    today_counts = compute_status_counts(today_records)
    recent = sorted(records, key=lambda r: r.check_in_time or datetime.min, reverse=True)[:INSIGHTS_SAMPLE_RECORDS]

    return {
        "summary": {
            "total_users": len(users),
            "total_records": len(records),
            "students": sum(1 for u in users if u.role == Role.STUDENT),
            "teachers": sum(1 for u in users if u.role == Role.TEACHER),
            "departments": sorted(students_per_dept),
        },
        "today": {
            "total_check_ins": len(today_records),
            **today_counts.to_dict(),
        },
        "last_7_days": {
            "total_records": len(last_7),
            "attendance_rate": compute_rate(last_7),
        },
        "last_30_days": {
            "total_records": len(last_30),
            "status_breakdown": dict(Counter(r.status.value for r in last_30)),
            "attendance_rate": compute_rate(last_30),
        },
        "department_breakdown": dict(students_per_dept),
        "sample_records": [
            {
                "user_name": r.user_name,
                "department": r.department.value,
                "date": r.date.isoformat(),
                "status": r.status.value,
                "check_in_time": to_iso(r.check_in_time),
                "has_check_out": r.check_out_time is not None,
            }
            for r in recent
        ],
        "recent_logs": [
            {"action": log.action.value, "performed_by": log.performed_by, "timestamp": to_iso(log.timestamp)}
            for log in list(logs)[:INSIGHTS_RECENT_LOGS]
        ],
    }


class InsightsService:
    """Use case: answer a free-text question about attendance with the LLM."""

    def __init__(self, client: Optional[GeminiClient]):
        self._client = client

    @property
    def configured(self) -> bool:
        return self._client is not None

    def answer(
        self,
        query: str,
        records: Sequence[AttendanceRecord],
        users: Sequence[User],
        logs: Sequence[AuditLog],
        *,
        now: datetime,
    ) -> str:
        query = require_non_empty(query or "", "query")
        require_max_length(query, "query", MAX_QUERY_LENGTH)

        if self._client is None:
            return MISSING_KEY_MESSAGE

        prompt = render_prompt(build_context(records, users, logs, now=now), query)
        try:
            text = self._client.generate_text(prompt)
        except Exception:
            logger.exception("Insights generation failed")
            return PROVIDER_FAILURE_MESSAGE

        if text is None:
            return PROVIDER_FAILURE_MESSAGE
        return text.strip() or EMPTY_RESPONSE_MESSAGE

from __future__ import annotations

import calendar
from datetime import date, datetime, time
from typing import Optional


def parse_hhmm(value: str) -> time:
    """Parse HH:MM string into time."""
    return datetime.strptime(value.strip(), "%H:%M").time()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def days_in_month(month: int, year: int) -> Optional[int]:
    """Number of days in month (1-12), or None for an invalid month/year."""
    if not 1 <= month <= 12 or not 1 <= year <= 9999:
        return None
    return calendar.monthrange(year, month)[1]


def decimal_hour(moment: datetime) -> float:
    return moment.hour + moment.minute / 60


def to_iso(value: Optional[datetime | date]) -> Optional[str]:
    return value.isoformat() if value is not None else None

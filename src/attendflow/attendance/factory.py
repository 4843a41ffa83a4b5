from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time

from .strategies.base import AttendanceStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.punctual_strategy import PunctualStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on the punctuality cutoff."""

    def for_checkin(self, *, now: datetime, cutoff: time) -> AttendanceStrategy:
        if now.time() <= cutoff:
            return PunctualStrategy()
        return LateStrategy()

from datetime import datetime, time

from attendflow.attendance.factory import AttendanceStrategyFactory
from attendflow.attendance.strategies.late_strategy import LateStrategy
from attendflow.attendance.strategies.punctual_strategy import PunctualStrategy
from attendflow.core.enums import AttendanceStatus


def test_factory_checkin_exactly_at_cutoff_is_punctual():
    now = datetime(2025, 1, 1, 8, 0, 0)

    strategy = AttendanceStrategyFactory().for_checkin(now=now, cutoff=time(8, 0))

    assert isinstance(strategy, PunctualStrategy)
    assert strategy.decide_checkin(now=now).status == AttendanceStatus.PRESENT


def test_factory_checkin_one_second_after_cutoff_is_late():
    now = datetime(2025, 1, 1, 8, 0, 1)

    strategy = AttendanceStrategyFactory().for_checkin(now=now, cutoff=time(8, 0))

    assert isinstance(strategy, LateStrategy)
    assert strategy.decide_checkin(now=now).status == AttendanceStatus.LATE


def test_factory_respects_custom_cutoff():
    now = datetime(2025, 1, 1, 8, 45)

    strategy = AttendanceStrategyFactory().for_checkin(now=now, cutoff=time(9, 0))

    assert isinstance(strategy, PunctualStrategy)

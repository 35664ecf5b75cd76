"""Tardiness/undertime accounting for CSC Form 48.

Government office hours are 08:00-12:00 and 13:00-17:00. Each session is
judged on its own; the results add up independently. Nothing here raises:
unreadable times simply count as missing punches.
"""

from __future__ import annotations

import re
from typing import Iterable, Optional

from ..common.datetime_utils import parse_clock_minutes
from ..core.constants import (
    AM_SESSION_END,
    AM_SESSION_START,
    EXCUSE_KEYWORDS,
    PM_SESSION_END,
    PM_SESSION_START,
)
from .factory import SessionStrategyFactory
from .model import DailyCalculation, DailyPunch, MonthlySummary
from .strategies.base import SessionWindow

AM_SESSION = SessionWindow(start=AM_SESSION_START, end=AM_SESSION_END)
PM_SESSION = SessionWindow(start=PM_SESSION_START, end=PM_SESSION_END)

_EXCUSE_RE = re.compile("|".join(re.escape(k) for k in EXCUSE_KEYWORDS), re.IGNORECASE)


def is_excused(remarks: Optional[str]) -> bool:
    return bool(remarks) and _EXCUSE_RE.search(remarks) is not None


class AttendanceCalculator:
    def __init__(self, *, strategy_factory: SessionStrategyFactory | None = None):
        self._factory = strategy_factory or SessionStrategyFactory()

    def calculate_daily(self, punch: DailyPunch) -> DailyCalculation:
        remarks = punch.remarks or ""

        if is_excused(remarks):
            return self._result(punch, remarks, tardiness=0, undertime=0, incomplete=False)

        am_in = parse_clock_minutes(punch.am_in)
        am_out = parse_clock_minutes(punch.am_out)
        pm_in = parse_clock_minutes(punch.pm_in)
        pm_out = parse_clock_minutes(punch.pm_out)

        am_punched = am_in is not None or am_out is not None
        pm_punched = pm_in is not None or pm_out is not None

        tardiness = 0
        undertime = 0
        incomplete = False
        for window, p_in, p_out, other in (
            (AM_SESSION, am_in, am_out, pm_punched),
            (PM_SESSION, pm_in, pm_out, am_punched),
        ):
            strategy = self._factory.for_session(punch_in=p_in, punch_out=p_out)
            decision = strategy.decide(
                window=window,
                punch_in=p_in,
                punch_out=p_out,
                other_session_punched=other,
            )
            tardiness += decision.tardiness
            undertime += decision.undertime
            incomplete = incomplete or decision.incomplete

        return self._result(punch, remarks, tardiness=tardiness, undertime=undertime, incomplete=incomplete)

    def calculate_monthly(self, punches: Iterable[DailyPunch]) -> MonthlySummary:
        # One entry per day, in the order given; no dedup, no gap filling.
        days = tuple(self.calculate_daily(p) for p in punches)
        return MonthlySummary(
            days=days,
            total_tardiness=sum(d.tardiness_minutes for d in days),
            total_undertime=sum(d.undertime_minutes for d in days),
        )

    @staticmethod
    def _result(punch: DailyPunch, remarks: str, *, tardiness: int, undertime: int, incomplete: bool) -> DailyCalculation:
        return DailyCalculation(
            log_date=punch.log_date,
            am_in=punch.am_in,
            am_out=punch.am_out,
            pm_in=punch.pm_in,
            pm_out=punch.pm_out,
            tardiness_minutes=tardiness,
            undertime_minutes=undertime,
            is_incomplete=incomplete,
            remarks=remarks,
        )


_default = AttendanceCalculator()


def calculate_daily_attendance(punch: DailyPunch) -> DailyCalculation:
    return _default.calculate_daily(punch)


def calculate_monthly_attendance(punches: Iterable[DailyPunch]) -> MonthlySummary:
    return _default.calculate_monthly(punches)

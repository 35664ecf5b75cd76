from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import split_minutes


@dataclass(frozen=True)
class DailyPunch:
    """One employee's time-clock entries for one calendar date.

    Times are kept exactly as encoded; the calculator decides what is usable.
    """

    log_date: date
    am_in: Optional[str] = None
    am_out: Optional[str] = None
    pm_in: Optional[str] = None
    pm_out: Optional[str] = None
    remarks: str = ""


@dataclass(frozen=True)
class DailyCalculation:
    log_date: date
    am_in: Optional[str]
    am_out: Optional[str]
    pm_in: Optional[str]
    pm_out: Optional[str]
    tardiness_minutes: int
    undertime_minutes: int
    is_incomplete: bool
    remarks: str


@dataclass(frozen=True)
class MonthlySummary:
    """Derived Form 48 view; recomputed on demand, never stored."""

    days: tuple[DailyCalculation, ...]
    total_tardiness: int
    total_undertime: int

    @property
    def total_tardiness_hm(self) -> tuple[int, int]:
        return split_minutes(self.total_tardiness)

    @property
    def total_undertime_hm(self) -> tuple[int, int]:
        return split_minutes(self.total_undertime)

    @property
    def incomplete_dates(self) -> tuple[date, ...]:
        return tuple(d.log_date for d in self.days if d.is_incomplete)


@dataclass(frozen=True)
class DTRLog:
    """Persisted daily time record, as encoded by HR."""

    log_id: str
    employee_id: str
    log_date: date
    am_in: Optional[str]
    am_out: Optional[str]
    pm_in: Optional[str]
    pm_out: Optional[str]
    remarks: Optional[str]
    encoded_by: Optional[str]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_punch(self) -> DailyPunch:
        return DailyPunch(
            log_date=self.log_date,
            am_in=self.am_in,
            am_out=self.am_out,
            pm_in=self.pm_in,
            pm_out=self.pm_out,
            remarks=self.remarks or "",
        )

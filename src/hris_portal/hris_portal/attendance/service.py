from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..common.datetime_utils import month_bounds
from ..common.validators import require_clock_time, require_text
from ..core.enums import Permission
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..permissions.capabilities import Actor, can_view_dtr
from ..users.repository import EmployeeRepository
from .calculator import AttendanceCalculator
from .model import DTRLog, MonthlySummary
from .repository import DTRLogRepository

logger = logging.getLogger(__name__)

_UNSET = object()


@dataclass(frozen=True)
class PunchEntry:
    am_in: Optional[str]
    am_out: Optional[str]
    pm_in: Optional[str]
    pm_out: Optional[str]
    remarks: Optional[str]


class DTRService:
    """Use cases around daily time records: encoding by HR and Form 48 summaries."""

    def __init__(
        self,
        logs: DTRLogRepository,
        employees: EmployeeRepository,
        *,
        calculator: AttendanceCalculator | None = None,
    ):
        self._logs = logs
        self._employees = employees
        self._calculator = calculator or AttendanceCalculator()

    @staticmethod
    def _require_encoder(actor: Actor) -> None:
        if not actor.has(Permission.ENCODE_DTR):
            logger.warning("dtr.denied actor=%s", actor.actor_id)
            raise AuthorizationError("Only HR may encode time records")

    @staticmethod
    def _clean(am_in, am_out, pm_in, pm_out, remarks) -> PunchEntry:
        return PunchEntry(
            am_in=require_clock_time(am_in, "AM arrival"),
            am_out=require_clock_time(am_out, "AM departure"),
            pm_in=require_clock_time(pm_in, "PM arrival"),
            pm_out=require_clock_time(pm_out, "PM departure"),
            remarks=require_text(remarks, "Remarks"),
        )

    def encode(
        self,
        actor: Actor,
        *,
        employee_id: str,
        log_date: date,
        am_in: Optional[str] = None,
        am_out: Optional[str] = None,
        pm_in: Optional[str] = None,
        pm_out: Optional[str] = None,
        remarks: Optional[str] = None,
    ) -> str:
        self._require_encoder(actor)

        if not self._employees.get_by_id(employee_id):
            raise NotFoundError("Employee not found")

        entry = self._clean(am_in, am_out, pm_in, pm_out, remarks)

        if self._logs.get_for_employee_and_date(employee_id, log_date):
            raise ValidationError(f"A time record for {log_date.isoformat()} already exists")

        log_id = self._logs.create(
            employee_id=employee_id,
            log_date=log_date,
            am_in=entry.am_in,
            am_out=entry.am_out,
            pm_in=entry.pm_in,
            pm_out=entry.pm_out,
            remarks=entry.remarks,
            encoded_by=actor.actor_id,
        )
        logger.info("dtr.created log=%s employee=%s date=%s by=%s", log_id, employee_id, log_date, actor.actor_id)
        return log_id

    def update(
        self,
        actor: Actor,
        *,
        log_id: str,
        am_in=_UNSET,
        am_out=_UNSET,
        pm_in=_UNSET,
        pm_out=_UNSET,
        remarks=_UNSET,
    ) -> DTRLog:
        """Patch a record; fields left out keep their stored value."""
        self._require_encoder(actor)

        existing = self._logs.get_by_id(log_id)
        if not existing:
            raise NotFoundError("Time record not found")

        def pick(new, old):
            return old if new is _UNSET else new

        entry = self._clean(
            pick(am_in, existing.am_in),
            pick(am_out, existing.am_out),
            pick(pm_in, existing.pm_in),
            pick(pm_out, existing.pm_out),
            pick(remarks, existing.remarks),
        )

        ok = self._logs.update(
            log_id=log_id,
            am_in=entry.am_in,
            am_out=entry.am_out,
            pm_in=entry.pm_in,
            pm_out=entry.pm_out,
            remarks=entry.remarks,
        )
        if not ok:
            raise NotFoundError("Time record not found")

        logger.info("dtr.updated log=%s by=%s", log_id, actor.actor_id)
        updated = self._logs.get_by_id(log_id)
        if updated is None:
            raise NotFoundError("Time record not found")
        return updated

    def delete(self, actor: Actor, *, log_id: str) -> None:
        self._require_encoder(actor)
        if not self._logs.delete(log_id):
            raise NotFoundError("Time record not found")
        logger.info("dtr.deleted log=%s by=%s", log_id, actor.actor_id)

    def monthly_summary(self, actor: Actor, *, employee_id: str, year: int, month: int) -> MonthlySummary:
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")
        if not can_view_dtr(actor, employee_id=employee_id, employee_division=employee.division):
            raise AuthorizationError("You may not view this employee's time records")

        try:
            start, end = month_bounds(int(year), int(month))
        except ValueError as e:
            raise ValidationError(str(e)) from e

        logs = self._logs.list_for_employee_between(employee_id, start=start, end=end)
        return self._calculator.calculate_monthly(log.to_punch() for log in logs)

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Optional

import pytest

from src.hris_portal.hris_portal.attendance.model import DTRLog
from src.hris_portal.hris_portal.core.enums import FormKind, FormStatus, Role
from src.hris_portal.hris_portal.performance.model import PerformanceForm, SpmsCycle
from src.hris_portal.hris_portal.permissions.capabilities import resolve_actor
from src.hris_portal.hris_portal.users.model import Employee


class InMemoryEmployees:
    def __init__(self, employees=()):
        self._by_id = {e.employee_id: e for e in employees}

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        return self._by_id.get(employee_id)


class InMemoryDTRLogs:
    def __init__(self):
        self._by_id: dict[str, DTRLog] = {}
        self._id = 0

    def get_by_id(self, log_id: str) -> Optional[DTRLog]:
        return self._by_id.get(log_id)

    def get_for_employee_and_date(self, employee_id: str, log_date: date) -> Optional[DTRLog]:
        for log in self._by_id.values():
            if log.employee_id == employee_id and log.log_date == log_date:
                return log
        return None

    def list_for_employee_between(self, employee_id: str, *, start: date, end: date):
        items = [l for l in self._by_id.values() if l.employee_id == employee_id and start <= l.log_date < end]
        return sorted(items, key=lambda l: l.log_date)

    def create(self, *, employee_id, log_date, am_in, am_out, pm_in, pm_out, remarks, encoded_by) -> str:
        self._id += 1
        log_id = f"log-{self._id}"
        self._by_id[log_id] = DTRLog(
            log_id=log_id,
            employee_id=employee_id,
            log_date=log_date,
            am_in=am_in,
            am_out=am_out,
            pm_in=pm_in,
            pm_out=pm_out,
            remarks=remarks,
            encoded_by=encoded_by,
            created_at=datetime(2026, 3, 1, 8, 0, 0),
        )
        return log_id

    def update(self, *, log_id, am_in, am_out, pm_in, pm_out, remarks) -> bool:
        log = self._by_id.get(log_id)
        if not log:
            return False
        self._by_id[log_id] = replace(log, am_in=am_in, am_out=am_out, pm_in=pm_in, pm_out=pm_out, remarks=remarks)
        return True

    def delete(self, log_id: str) -> bool:
        return self._by_id.pop(log_id, None) is not None


class InMemoryForms:
    def __init__(self):
        self._by_id: dict[str, PerformanceForm] = {}
        self._id = 0
        self.saves = 0

    def put(self, form: PerformanceForm) -> PerformanceForm:
        self._by_id[form.form_id] = form
        return form

    def get_by_id(self, form_id: str) -> Optional[PerformanceForm]:
        return self._by_id.get(form_id)

    def find_for_cycle(self, *, kind, cycle_id, owner_id=None, division=None):
        for f in self._by_id.values():
            if f.kind != kind or f.cycle_id != cycle_id:
                continue
            if owner_id is not None and f.owner_id != owner_id:
                continue
            if division is not None and f.division != division:
                continue
            return f
        return None

    def list_forms(self, *, kind, owner_id=None, division=None, cycle_id=None, status=None, limit=200):
        out = []
        for f in self._by_id.values():
            if f.kind != kind:
                continue
            if owner_id is not None and f.owner_id != owner_id:
                continue
            if division is not None and f.division != division:
                continue
            if cycle_id is not None and f.cycle_id != cycle_id:
                continue
            if status is not None and f.status != status:
                continue
            out.append(replace(f, lines=()))
        return out[:limit]

    def create(self, *, kind, owner_id, division, cycle_id, supervisor_id=None) -> str:
        self._id += 1
        form_id = f"form-{self._id}"
        self._by_id[form_id] = PerformanceForm(
            form_id=form_id,
            kind=kind,
            owner_id=owner_id,
            division=division,
            cycle_id=cycle_id,
            status=FormStatus.DRAFT,
            supervisor_id=supervisor_id,
        )
        return form_id

    def save(self, form: PerformanceForm, *, expected_version: int) -> bool:
        stored = self._by_id.get(form.form_id)
        if stored is None or stored.version != expected_version:
            return False
        self._by_id[form.form_id] = form
        self.saves += 1
        return True


class InMemoryCycles:
    def __init__(self, cycles=()):
        self._by_id = {c.cycle_id: c for c in cycles}

    def get_by_id(self, cycle_id: str) -> Optional[SpmsCycle]:
        return self._by_id.get(cycle_id)


STAFF = (
    Employee("hr-1", "Maria Santos", Role.ADMIN_STAFF, "Administrative"),
    Employee("head-1", "Jose Reyes", Role.HEAD_OF_OFFICE, "Office of the Director"),
    Employee("chief-1", "Ana Cruz", Role.DIVISION_CHIEF, "Research"),
    Employee("chief-2", "Ramon Garcia", Role.DIVISION_CHIEF, "Finance"),
    Employee("staff-1", "Liza Flores", Role.PROJECT_STAFF, "Research"),
    Employee("staff-2", "Paolo Mendoza", Role.PROJECT_STAFF, "Finance"),
    Employee("gone-1", "Former Staff", Role.PROJECT_STAFF, "Research", is_active=False),
)

CYCLES = (
    SpmsCycle("2026-1", "January - June 2026", date(2026, 1, 1), date(2026, 6, 30), True),
    SpmsCycle("2025-2", "July - December 2025", date(2025, 7, 1), date(2025, 12, 31), False),
)


@pytest.fixture
def employees():
    return InMemoryEmployees(STAFF)


@pytest.fixture
def actors():
    return {e.employee_id: resolve_actor(e) for e in STAFF}


@pytest.fixture
def dtr_logs():
    return InMemoryDTRLogs()


@pytest.fixture
def forms():
    return InMemoryForms()


@pytest.fixture
def cycles():
    return InMemoryCycles(CYCLES)


@pytest.fixture
def fixed_now():
    return datetime(2026, 7, 1, 9, 30, 0)


@pytest.fixture
def make_form():
    def _make(
        form_id="form-1",
        *,
        kind=FormKind.IPCR,
        owner_id="staff-1",
        division="Research",
        status=FormStatus.DRAFT,
        lines=(),
    ):
        return PerformanceForm(
            form_id=form_id,
            kind=kind,
            owner_id=owner_id,
            division=division,
            cycle_id="2026-1",
            status=status,
            lines=tuple(lines),
        )

    return _make

from __future__ import annotations

from dataclasses import dataclass

from .attendance.calculator import AttendanceCalculator
from .attendance.factory import SessionStrategyFactory
from .attendance.mysql_dtr_repository import MySQLDTRLogRepository
from .attendance.repository import DTRLogRepository
from .attendance.service import DTRService
from .database.connection import DBConfig, DatabaseConnection
from .performance.mysql_form_repository import MySQLPerformanceFormRepository, MySQLSpmsCycleRepository
from .performance.repository import PerformanceFormRepository, SpmsCycleRepository
from .performance.service import PerformanceService
from .performance.workflow import ReviewWorkflow
from .users.mysql_employee_repository import MySQLEmployeeRepository
from .users.repository import EmployeeRepository


@dataclass(frozen=True)
class Container:
    employees_repo: EmployeeRepository
    dtr_repo: DTRLogRepository
    forms_repo: PerformanceFormRepository
    cycles_repo: SpmsCycleRepository

    dtr_service: DTRService
    performance_service: PerformanceService


def wire(
    *,
    employees_repo: EmployeeRepository,
    dtr_repo: DTRLogRepository,
    forms_repo: PerformanceFormRepository,
    cycles_repo: SpmsCycleRepository,
) -> Container:
    calculator = AttendanceCalculator(strategy_factory=SessionStrategyFactory())
    return Container(
        employees_repo=employees_repo,
        dtr_repo=dtr_repo,
        forms_repo=forms_repo,
        cycles_repo=cycles_repo,
        dtr_service=DTRService(dtr_repo, employees_repo, calculator=calculator),
        performance_service=PerformanceService(forms_repo, cycles_repo, employees_repo, workflow=ReviewWorkflow()),
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))
    return wire(
        employees_repo=MySQLEmployeeRepository(conn),
        dtr_repo=MySQLDTRLogRepository(conn),
        forms_repo=MySQLPerformanceFormRepository(conn),
        cycles_repo=MySQLSpmsCycleRepository(conn),
    )

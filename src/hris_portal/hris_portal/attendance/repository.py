from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import DTRLog


class DTRLogRepository(Protocol):
    def get_by_id(self, log_id: str) -> Optional[DTRLog]:
        raise NotImplementedError

    def get_for_employee_and_date(self, employee_id: str, log_date: date) -> Optional[DTRLog]:
        raise NotImplementedError

    def list_for_employee_between(self, employee_id: str, *, start: date, end: date) -> Sequence[DTRLog]:
        """Logs with ``start <= log_date < end``, oldest first."""

        raise NotImplementedError

    def create(
        self,
        *,
        employee_id: str,
        log_date: date,
        am_in: Optional[str],
        am_out: Optional[str],
        pm_in: Optional[str],
        pm_out: Optional[str],
        remarks: Optional[str],
        encoded_by: str,
    ) -> str:
        raise NotImplementedError

    def update(
        self,
        *,
        log_id: str,
        am_in: Optional[str],
        am_out: Optional[str],
        pm_in: Optional[str],
        pm_out: Optional[str],
        remarks: Optional[str],
    ) -> bool:
        raise NotImplementedError

    def delete(self, log_id: str) -> bool:
        raise NotImplementedError

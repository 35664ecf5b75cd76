from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import FormKind, FormStatus
from .model import PerformanceForm, SpmsCycle


class PerformanceFormRepository(Protocol):
    def get_by_id(self, form_id: str) -> Optional[PerformanceForm]:
        """Form header together with its rating lines."""

        raise NotImplementedError

    def find_for_cycle(
        self,
        *,
        kind: FormKind,
        cycle_id: str,
        owner_id: Optional[str] = None,
        division: Optional[str] = None,
    ) -> Optional[PerformanceForm]:
        raise NotImplementedError

    def list_forms(
        self,
        *,
        kind: FormKind,
        owner_id: Optional[str] = None,
        division: Optional[str] = None,
        cycle_id: Optional[str] = None,
        status: Optional[FormStatus] = None,
        limit: int = 200,
    ) -> Sequence[PerformanceForm]:
        """Headers only; ``lines`` is left empty."""

        raise NotImplementedError

    def create(
        self,
        *,
        kind: FormKind,
        owner_id: str,
        division: Optional[str],
        cycle_id: str,
        supervisor_id: Optional[str] = None,
    ) -> str:
        raise NotImplementedError

    def save(self, form: PerformanceForm, *, expected_version: int) -> bool:
        """Write header and lines only if the stored version is still ``expected_version``.

        The stored version becomes ``form.version``.
        """

        raise NotImplementedError


class SpmsCycleRepository(Protocol):
    def get_by_id(self, cycle_id: str) -> Optional[SpmsCycle]:
        raise NotImplementedError

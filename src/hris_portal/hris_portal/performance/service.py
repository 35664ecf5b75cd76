from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.enums import FormAction, FormKind, FormStatus, Permission
from ..core.exceptions import AuthorizationError, NotFoundError, StateError, ValidationError
from ..core.result import Result
from ..permissions.capabilities import Actor, can_view_form, resolve_form_capabilities
from ..users.repository import EmployeeRepository
from .model import LineScores, PerformanceForm, RatingLine
from .repository import PerformanceFormRepository, SpmsCycleRepository
from .workflow import ReviewWorkflow, TransitionRequest

logger = logging.getLogger(__name__)


class PerformanceService:
    """Use cases for IPCR/DPCR forms: load, run the workflow, commit atomically."""

    def __init__(
        self,
        forms: PerformanceFormRepository,
        cycles: SpmsCycleRepository,
        employees: EmployeeRepository,
        *,
        workflow: ReviewWorkflow | None = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._forms = forms
        self._cycles = cycles
        self._employees = employees
        self._workflow = workflow or ReviewWorkflow()
        self._clock = clock

    def _load(self, form_id: str) -> PerformanceForm:
        form = self._forms.get_by_id(form_id)
        if not form:
            raise NotFoundError("Form not found")
        return form

    @staticmethod
    def _capabilities(actor: Actor, form: PerformanceForm):
        return resolve_form_capabilities(
            actor,
            kind=form.kind,
            owner_id=form.owner_id,
            owner_division=form.division,
        )

    def _unwrap(self, result: Result, *, actor: Actor, form: PerformanceForm, what: str):
        if not result.ok:
            logger.warning(
                "form.%s.denied form=%s actor=%s status=%s code=%s",
                what,
                form.form_id,
                actor.actor_id,
                form.status.value,
                result.code,
            )
        return result.unwrap()

    def _commit(self, before: PerformanceForm, after: PerformanceForm) -> PerformanceForm:
        after = replace(after, version=before.version + 1)
        if not self._forms.save(after, expected_version=before.version):
            raise StateError("The form was changed by someone else; reload and try again")
        return after

    def get_form(self, actor: Actor, form_id: str) -> PerformanceForm:
        form = self._load(form_id)
        if not can_view_form(actor, kind=form.kind, owner_id=form.owner_id, owner_division=form.division):
            raise AuthorizationError("You may not view this form")
        return form

    def available_actions(self, actor: Actor, form: PerformanceForm) -> tuple[FormAction, ...]:
        return self._workflow.available_actions(form, self._capabilities(actor, form))

    def list_forms(
        self,
        actor: Actor,
        *,
        kind: FormKind,
        cycle_id: Optional[str] = None,
        status: Optional[FormStatus] = None,
    ) -> Sequence[PerformanceForm]:
        if kind == FormKind.DPCR:
            if not (actor.has(Permission.MANAGE_OFFICE_FORMS) or actor.has(Permission.APPROVE_OFFICE_FORMS)):
                raise AuthorizationError("You may not view office forms")
            return self._forms.list_forms(kind=kind, cycle_id=cycle_id, status=status)

        if actor.has(Permission.VIEW_ALL_FORMS):
            return self._forms.list_forms(kind=kind, cycle_id=cycle_id, status=status)
        if actor.has(Permission.VIEW_DIVISION_FORMS):
            return self._forms.list_forms(kind=kind, division=actor.division, cycle_id=cycle_id, status=status)
        return self._forms.list_forms(kind=kind, owner_id=actor.actor_id, cycle_id=cycle_id, status=status)

    def create_form(
        self,
        actor: Actor,
        *,
        kind: FormKind,
        cycle_id: str,
        supervisor_id: Optional[str] = None,
    ) -> str:
        if kind == FormKind.DPCR and not actor.has(Permission.MANAGE_OFFICE_FORMS):
            raise AuthorizationError("Only HR may prepare office forms")
        if kind == FormKind.IPCR and not actor.has(Permission.FILE_OWN_FORMS):
            raise AuthorizationError("You may not file a performance form")

        cycle = self._cycles.get_by_id(cycle_id)
        if not cycle or not cycle.is_active:
            raise ValidationError("No active SPMS cycle found or selected cycle is not active")

        if supervisor_id and not self._employees.get_by_id(supervisor_id):
            raise ValidationError("Immediate supervisor not found")

        if kind == FormKind.IPCR:
            existing = self._forms.find_for_cycle(kind=kind, cycle_id=cycle_id, owner_id=actor.actor_id)
        else:
            existing = self._forms.find_for_cycle(kind=kind, cycle_id=cycle_id, division=actor.division)
        if existing:
            raise ValidationError(f"A {kind.value.upper()} for this period already exists ({existing.form_id})")

        form_id = self._forms.create(
            kind=kind,
            owner_id=actor.actor_id,
            division=actor.division,
            cycle_id=cycle_id,
            supervisor_id=supervisor_id,
        )
        logger.info("form.created form=%s kind=%s cycle=%s by=%s", form_id, kind.value, cycle_id, actor.actor_id)
        return form_id

    def save_lines(self, actor: Actor, form_id: str, lines: Sequence[RatingLine]) -> PerformanceForm:
        form = self._load(form_id)
        result = self._workflow.edit_lines(
            form,
            lines,
            capabilities=self._capabilities(actor, form),
            now=self._clock(),
        )
        updated = self._commit(form, self._unwrap(result, actor=actor, form=form, what="edit"))
        logger.info("form.lines_saved form=%s lines=%d by=%s", form_id, len(updated.lines), actor.actor_id)
        return updated

    def transition(
        self,
        actor: Actor,
        form_id: str,
        action: FormAction,
        *,
        remarks: Optional[str] = None,
        scores: Sequence[LineScores] = (),
    ) -> PerformanceForm:
        form = self._load(form_id)
        request = TransitionRequest(
            action=action,
            actor_id=actor.actor_id,
            capabilities=self._capabilities(actor, form),
            remarks=remarks,
            scores=tuple(scores),
            now=self._clock(),
        )
        result = self._workflow.apply(form, request)
        updated = self._commit(form, self._unwrap(result, actor=actor, form=form, what=action.value))
        logger.info(
            "form.%s form=%s %s->%s by=%s rating=%s",
            action.value,
            form_id,
            form.status.value,
            updated.status.value,
            actor.actor_id,
            updated.final_rating,
        )
        return updated

    def submit(self, actor: Actor, form_id: str) -> PerformanceForm:
        return self.transition(actor, form_id, FormAction.SUBMIT)

    def review(self, actor: Actor, form_id: str, *, comments: Optional[str] = None) -> PerformanceForm:
        return self.transition(actor, form_id, FormAction.REVIEW, remarks=comments)

    def return_form(self, actor: Actor, form_id: str, *, remarks: Optional[str] = None) -> PerformanceForm:
        return self.transition(actor, form_id, FormAction.RETURN, remarks=remarks)

    def rate(self, actor: Actor, form_id: str, scores: Sequence[LineScores]) -> PerformanceForm:
        return self.transition(actor, form_id, FormAction.RATE, scores=scores)

    def finalize(
        self,
        actor: Actor,
        form_id: str,
        *,
        scores: Sequence[LineScores] = (),
        remarks: Optional[str] = None,
    ) -> PerformanceForm:
        return self.transition(actor, form_id, FormAction.FINALIZE, scores=scores, remarks=remarks)

    def approve(
        self,
        actor: Actor,
        form_id: str,
        *,
        scores: Sequence[LineScores] = (),
        remarks: Optional[str] = None,
    ) -> PerformanceForm:
        return self.transition(actor, form_id, FormAction.APPROVE, scores=scores, remarks=remarks)

    def reopen(self, actor: Actor, form_id: str) -> PerformanceForm:
        return self.transition(actor, form_id, FormAction.REOPEN)

    def revert(self, actor: Actor, form_id: str, *, remarks: str) -> PerformanceForm:
        return self.transition(actor, form_id, FormAction.REVERT, remarks=remarks)

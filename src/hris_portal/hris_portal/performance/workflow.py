"""Review lifecycle for performance commitment forms.

Everything here is pure: ``check`` answers whether an action is legal for
this form, these capabilities and this data; ``apply`` computes the next
snapshot. Persisting it atomically is the caller's job.

Check order for an action:
    1. the actor holds a capability that could ever perform it (Unauthorized)
    2. the action has an edge out of the current state (InvalidTransition)
    3. the actor holds a capability for that particular edge (Unauthorized)
    4. remark and data guards (InvalidData / IncompleteData)
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable, FrozenSet, Optional, Sequence

from ..common.validators import require_score, require_text
from ..core.constants import EDITABLE_FORM_STATUSES
from ..core.enums import Capability, FormAction, FormKind, FormStatus, OutputCategory
from ..core.exceptions import (
    AuthorizationError,
    DomainError,
    IncompleteRatingError,
    InvariantViolation,
    StateError,
    ValidationError,
)
from ..core.result import Result
from .banding import INDIVIDUAL_BANDING, OFFICE_BANDING, BandingTable
from .model import LineScores, PerformanceForm, RatingLine
from .rating import aggregate_ratings

Guard = Callable[[PerformanceForm], Optional[DomainError]]


def _has_lines(form: PerformanceForm) -> Optional[DomainError]:
    if not form.lines:
        return ValidationError("Add at least one output before submitting")
    return None


def _indicators_filled(form: PerformanceForm) -> Optional[DomainError]:
    blank = [ln.line_id for ln in form.lines if not (ln.success_indicator or "").strip()]
    if blank:
        return ValidationError(f"Success indicator is required: {', '.join(blank)}")
    return None


def _all_rated(form: PerformanceForm) -> Optional[DomainError]:
    missing = [ln.line_id for ln in form.lines if not ln.is_rated]
    if missing:
        return IncompleteRatingError(f"Not all lines rated: {', '.join(missing)}")
    return None


@dataclass(frozen=True)
class Transition:
    action: FormAction
    from_state: FormStatus
    to_state: FormStatus
    allowed: FrozenSet[Capability]
    guards: tuple[Guard, ...] = ()
    remark_required: bool = False


@dataclass(frozen=True)
class WorkflowDefinition:
    kind: FormKind
    initial_state: FormStatus
    transitions: tuple[Transition, ...]
    banding: BandingTable
    categories: FrozenSet[OutputCategory]
    editable_states: FrozenSet[FormStatus] = EDITABLE_FORM_STATUSES

    def edges(self, action: FormAction) -> tuple[Transition, ...]:
        return tuple(t for t in self.transitions if t.action == action)

    def edge(self, action: FormAction, state: FormStatus) -> Optional[Transition]:
        for t in self.transitions:
            if t.action == action and t.from_state == state:
                return t
        return None


_OWNER = frozenset({Capability.OWNER})
_FINALIZER = frozenset({Capability.FINALIZER})
_REVIEWER_OR_FINALIZER = frozenset({Capability.REVIEWER, Capability.FINALIZER})
_SUBMIT_GUARDS = (_has_lines, _indicators_filled)

IPCR_WORKFLOW = WorkflowDefinition(
    kind=FormKind.IPCR,
    initial_state=FormStatus.DRAFT,
    banding=INDIVIDUAL_BANDING,
    categories=frozenset({OutputCategory.CORE_FUNCTION, OutputCategory.SUPPORT_FUNCTION}),
    transitions=(
        Transition(FormAction.SUBMIT, FormStatus.DRAFT, FormStatus.SUBMITTED, _OWNER, _SUBMIT_GUARDS),
        Transition(FormAction.SUBMIT, FormStatus.RETURNED, FormStatus.SUBMITTED, _OWNER, _SUBMIT_GUARDS),
        Transition(FormAction.REVIEW, FormStatus.SUBMITTED, FormStatus.REVIEWED, _REVIEWER_OR_FINALIZER),
        Transition(FormAction.RETURN, FormStatus.SUBMITTED, FormStatus.RETURNED, _REVIEWER_OR_FINALIZER),
        Transition(FormAction.RETURN, FormStatus.REVIEWED, FormStatus.RETURNED, _FINALIZER),
        Transition(FormAction.RATE, FormStatus.REVIEWED, FormStatus.REVIEWED, _FINALIZER),
        Transition(FormAction.FINALIZE, FormStatus.REVIEWED, FormStatus.FINALIZED, _FINALIZER, (_all_rated,)),
        Transition(FormAction.REOPEN, FormStatus.RETURNED, FormStatus.DRAFT, _OWNER),
        Transition(FormAction.REVERT, FormStatus.FINALIZED, FormStatus.RETURNED, _FINALIZER, remark_required=True),
    ),
)

DPCR_WORKFLOW = WorkflowDefinition(
    kind=FormKind.DPCR,
    initial_state=FormStatus.DRAFT,
    banding=OFFICE_BANDING,
    categories=frozenset(OutputCategory),
    editable_states=frozenset({FormStatus.DRAFT}),
    transitions=(
        Transition(FormAction.SUBMIT, FormStatus.DRAFT, FormStatus.SUBMITTED, _OWNER, _SUBMIT_GUARDS),
        Transition(FormAction.RATE, FormStatus.SUBMITTED, FormStatus.SUBMITTED, _FINALIZER),
        Transition(FormAction.APPROVE, FormStatus.SUBMITTED, FormStatus.APPROVED, _FINALIZER, (_all_rated,)),
        Transition(FormAction.REVERT, FormStatus.APPROVED, FormStatus.DRAFT, _FINALIZER, remark_required=True),
    ),
)

_SCORING_ACTIONS = frozenset({FormAction.RATE, FormAction.FINALIZE, FormAction.APPROVE})
_COMPLETING_ACTIONS = frozenset({FormAction.FINALIZE, FormAction.APPROVE})


@dataclass(frozen=True)
class TransitionRequest:
    action: FormAction
    actor_id: str
    capabilities: FrozenSet[Capability]
    remarks: Optional[str] = None
    scores: tuple[LineScores, ...] = ()
    now: Optional[datetime] = None


def _apply_scores(form: PerformanceForm, scores: Sequence[LineScores]) -> PerformanceForm:
    by_id = {}
    for s in scores:
        if form.line(s.line_id) is None:
            raise ValidationError(f"Unknown rating line: {s.line_id}")
        by_id[s.line_id] = LineScores(
            line_id=s.line_id,
            quantity=require_score(s.quantity, "Quantity"),
            quality=require_score(s.quality, "Quality"),
            timeliness=require_score(s.timeliness, "Timeliness"),
        )
    if not by_id:
        return form
    lines = []
    for ln in form.lines:
        sc = by_id.get(ln.line_id)
        if sc is not None:
            ln = replace(ln, quantity=sc.quantity, quality=sc.quality, timeliness=sc.timeliness)
        lines.append(ln)
    return replace(form, lines=tuple(lines))


class ReviewWorkflow:
    def __init__(self, definitions: Sequence[WorkflowDefinition] = (IPCR_WORKFLOW, DPCR_WORKFLOW)):
        self._definitions = {d.kind: d for d in definitions}

    def definition_for(self, kind: FormKind) -> WorkflowDefinition:
        try:
            return self._definitions[kind]
        except KeyError:
            raise InvariantViolation(f"No workflow registered for {kind!r}") from None

    def available_actions(self, form: PerformanceForm, capabilities: FrozenSet[Capability]) -> tuple[FormAction, ...]:
        d = self.definition_for(form.kind)
        return tuple(
            t.action for t in d.transitions if t.from_state == form.status and capabilities & t.allowed
        )

    def _prepare(self, form: PerformanceForm, request: TransitionRequest) -> tuple[Transition, PerformanceForm]:
        d = self.definition_for(form.kind)

        edges = d.edges(request.action)
        if not edges:
            raise StateError(f"'{request.action.value}' does not apply to {form.kind.value.upper()} forms")

        ever_allowed = frozenset().union(*(t.allowed for t in edges))
        if not request.capabilities & ever_allowed:
            raise AuthorizationError(f"Not permitted to {request.action.value} this form")

        edge = d.edge(request.action, form.status)
        if edge is None:
            raise StateError(f"Cannot {request.action.value} a form that is {form.status.value}")

        if not request.capabilities & edge.allowed:
            raise AuthorizationError(f"Not permitted to {request.action.value} a {form.status.value} form")

        remarks = require_text(request.remarks, "Remarks")
        if edge.remark_required and not remarks:
            raise ValidationError("Remarks are required for this action")

        candidate = form
        if request.action in _SCORING_ACTIONS:
            if request.action == FormAction.RATE and not request.scores:
                raise ValidationError("No ratings provided")
            candidate = _apply_scores(form, request.scores)

        for guard in edge.guards:
            err = guard(candidate)
            if err is not None:
                raise err

        return edge, candidate

    def check(self, form: PerformanceForm, request: TransitionRequest) -> Result[Transition]:
        """Is this action legal from this state, by these capabilities, with this data?"""
        try:
            edge, _ = self._prepare(form, request)
        except DomainError as e:
            return Result.failure(e)
        return Result.success(edge)

    def apply(self, form: PerformanceForm, request: TransitionRequest) -> Result[PerformanceForm]:
        """Next snapshot for ``form``; the input is never modified."""
        try:
            edge, candidate = self._prepare(form, request)
        except DomainError as e:
            return Result.failure(e)

        now = request.now
        remarks = require_text(request.remarks, "Remarks")
        action = request.action
        nxt = replace(candidate, status=edge.to_state, updated_at=now)

        if action == FormAction.SUBMIT:
            nxt = replace(nxt, submitted_at=now, final_rating=None, adjectival_rating=None)
        elif action == FormAction.REVIEW:
            nxt = replace(nxt, reviewed_by=request.actor_id, reviewed_at=now, review_comments=remarks)
        elif action in (FormAction.RETURN, FormAction.REVERT):
            nxt = replace(
                nxt,
                final_rating=None,
                adjectival_rating=None,
                finalized_at=None,
                approved_by=None,
                reviewed_by=None,
                reviewed_at=None,
                review_comments=None,
                final_remarks=remarks,
            )
        elif action in _COMPLETING_ACTIONS:
            summary = aggregate_ratings(nxt.lines, self.definition_for(form.kind).banding)
            if not summary.ok:
                return Result.failure(summary.error)
            nxt = replace(
                nxt,
                final_rating=summary.value.final_rating,
                adjectival_rating=summary.value.adjectival_rating,
                approved_by=request.actor_id,
                finalized_at=now,
                final_remarks=remarks,
            )

        return Result.success(nxt)

    def edit_lines(
        self,
        form: PerformanceForm,
        lines: Sequence[RatingLine],
        *,
        capabilities: FrozenSet[Capability],
        now: Optional[datetime] = None,
    ) -> Result[PerformanceForm]:
        """Replace the form's content. Only the owner, only while editable.

        Sub-scores never come from the owner: every saved line starts unrated.
        """
        d = self.definition_for(form.kind)

        if Capability.OWNER not in capabilities:
            return Result.failure(AuthorizationError("Only the owner may edit this form"))
        if form.status not in d.editable_states:
            return Result.failure(StateError(f"Cannot edit a form that is {form.status.value}"))

        seen: set[str] = set()
        cleaned = []
        for ln in lines:
            if ln.category not in d.categories:
                return Result.failure(ValidationError(f"Invalid category: {ln.category.value}"))
            if ln.line_id in seen:
                return Result.failure(ValidationError(f"Duplicate rating line: {ln.line_id}"))
            seen.add(ln.line_id)
            try:
                description = require_text(ln.output_description, "Output description")
                text = {
                    "success_indicator": require_text(ln.success_indicator, "Success indicator"),
                    "actual_accomplishment": require_text(ln.actual_accomplishment, "Actual accomplishment"),
                    "remarks": require_text(ln.remarks, "Remarks"),
                }
            except ValidationError as e:
                return Result.failure(e)
            if not description:
                return Result.failure(ValidationError("Output description is required"))
            cleaned.append(
                replace(ln, output_description=description, quantity=None, quality=None, timeliness=None, **text)
            )

        ordered = tuple(sorted(cleaned, key=lambda ln: (_category_rank(ln.category), ln.output_order)))
        return Result.success(replace(form, lines=ordered, updated_at=now))


_CATEGORY_ORDER = (
    OutputCategory.STRATEGIC_PRIORITY,
    OutputCategory.CORE_FUNCTION,
    OutputCategory.SUPPORT_FUNCTION,
)


def _category_rank(category: OutputCategory) -> int:
    return _CATEGORY_ORDER.index(category)

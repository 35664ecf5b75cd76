from __future__ import annotations

from dataclasses import replace
from datetime import datetime

import pytest

from src.hris_portal.hris_portal.core.enums import (
    AdjectivalRating,
    Capability,
    FormAction,
    FormKind,
    FormStatus,
    OutputCategory,
)
from src.hris_portal.hris_portal.core.exceptions import (
    AuthorizationError,
    IncompleteRatingError,
    StateError,
    ValidationError,
)
from src.hris_portal.hris_portal.performance.model import LineScores, RatingLine
from src.hris_portal.hris_portal.performance.workflow import ReviewWorkflow, TransitionRequest

NOW = datetime(2026, 7, 1, 9, 30, 0)
OWNER = frozenset({Capability.OWNER})
REVIEWER = frozenset({Capability.REVIEWER})
FINALIZER = frozenset({Capability.FINALIZER})
NOBODY = frozenset()

LINES = (
    RatingLine("l1", OutputCategory.CORE_FUNCTION, 1, "Process vouchers", "100% within 3 days"),
    RatingLine("l2", OutputCategory.SUPPORT_FUNCTION, 1, "Attend trainings", "2 per semester"),
)
SCORES = (LineScores("l1", 4, 5, 3), LineScores("l2", 5, 5, 5))


@pytest.fixture
def wf():
    return ReviewWorkflow()


def req(action, caps, actor="someone", remarks=None, scores=()):
    return TransitionRequest(action=action, actor_id=actor, capabilities=caps, remarks=remarks, scores=scores, now=NOW)


def test_individual_form_happy_path(wf, make_form):
    form = make_form(lines=LINES)

    submitted = wf.apply(form, req(FormAction.SUBMIT, OWNER, "staff-1")).unwrap()
    reviewed = wf.apply(submitted, req(FormAction.REVIEW, REVIEWER, "chief-1", remarks="ok")).unwrap()
    final = wf.apply(reviewed, req(FormAction.FINALIZE, FINALIZER, "hr-1", scores=SCORES)).unwrap()

    assert submitted.status == FormStatus.SUBMITTED and submitted.submitted_at == NOW
    assert reviewed.reviewed_by == "chief-1" and reviewed.review_comments == "ok"
    assert final.status == FormStatus.FINALIZED
    assert final.final_rating == 4.5
    assert final.adjectival_rating == AdjectivalRating.OUTSTANDING
    assert final.approved_by == "hr-1"
    assert final.finalized_at == NOW
    assert [ln.average for ln in final.lines] == [4.0, 5.0]


def test_apply_never_touches_the_input(wf, make_form):
    form = make_form(lines=LINES)
    before = replace(form)

    wf.apply(form, req(FormAction.SUBMIT, OWNER))

    assert form == before
    assert form.status == FormStatus.DRAFT


def test_submit_requires_success_indicators(wf, make_form):
    lines = (LINES[0], replace(LINES[1], success_indicator="  "))

    result = wf.apply(make_form(lines=lines), req(FormAction.SUBMIT, OWNER))

    assert isinstance(result.error, ValidationError)
    assert "l2" in str(result.error)


def test_submit_requires_a_line(wf, make_form):
    result = wf.apply(make_form(), req(FormAction.SUBMIT, OWNER))

    assert isinstance(result.error, ValidationError)


def test_only_owner_submits(wf, make_form):
    form = make_form(lines=LINES)

    result = wf.apply(form, req(FormAction.SUBMIT, REVIEWER | FINALIZER))

    assert isinstance(result.error, AuthorizationError)
    assert result.code == "Unauthorized"


def test_capability_is_checked_before_state(wf, make_form):
    result = wf.apply(make_form(lines=LINES), req(FormAction.FINALIZE, OWNER))

    assert isinstance(result.error, AuthorizationError)


def test_wrong_state_is_a_state_error(wf, make_form):
    result = wf.apply(make_form(lines=LINES), req(FormAction.REVIEW, REVIEWER))

    assert isinstance(result.error, StateError)
    assert result.code == "InvalidTransition"


def test_reviewer_cannot_return_a_reviewed_form(wf, make_form):
    form = make_form(status=FormStatus.REVIEWED, lines=LINES)

    assert isinstance(wf.apply(form, req(FormAction.RETURN, REVIEWER)).error, AuthorizationError)
    assert wf.apply(form, req(FormAction.RETURN, FINALIZER)).ok


def test_return_records_optional_remark(wf, make_form):
    form = make_form(status=FormStatus.SUBMITTED, lines=LINES)

    with_remark = wf.apply(form, req(FormAction.RETURN, REVIEWER, remarks=" fix targets ")).unwrap()
    without = wf.apply(form, req(FormAction.RETURN, REVIEWER)).unwrap()

    assert with_remark.status == FormStatus.RETURNED
    assert with_remark.final_remarks == "fix targets"
    assert without.final_remarks is None


def test_finalize_blocks_on_unrated_lines(wf, make_form):
    form = make_form(status=FormStatus.REVIEWED, lines=LINES)

    result = wf.apply(form, req(FormAction.FINALIZE, FINALIZER, scores=SCORES[:1]))

    assert isinstance(result.error, IncompleteRatingError)
    assert result.code == "IncompleteData"


def test_rate_then_finalize(wf, make_form):
    form = make_form(status=FormStatus.REVIEWED, lines=LINES)

    rated = wf.apply(form, req(FormAction.RATE, FINALIZER, scores=SCORES[:1])).unwrap()
    rated = wf.apply(rated, req(FormAction.RATE, FINALIZER, scores=(LineScores("l2", 3, 3, 3),))).unwrap()
    final = wf.apply(rated, req(FormAction.FINALIZE, FINALIZER)).unwrap()

    assert rated.status == FormStatus.REVIEWED
    assert final.final_rating == 3.5
    assert final.adjectival_rating == AdjectivalRating.VERY_SATISFACTORY


@pytest.mark.parametrize(
    "scores",
    [
        (LineScores("zz", 4, 4, 4),),
        (LineScores("l1", 6, 4, 4),),
        (LineScores("l1", 0, 4, 4),),
        (LineScores("l1", 4, True, 4),),
        (LineScores("l1", 4, 4, 4.5),),
        (),
    ],
)
def test_rate_rejects_bad_scores(wf, make_form, scores):
    form = make_form(status=FormStatus.REVIEWED, lines=LINES)

    result = wf.apply(form, req(FormAction.RATE, FINALIZER, scores=scores))

    assert isinstance(result.error, ValidationError)


def test_reopen_and_resubmit(wf, make_form):
    returned = make_form(status=FormStatus.RETURNED, lines=LINES)

    assert wf.apply(returned, req(FormAction.REOPEN, OWNER)).unwrap().status == FormStatus.DRAFT
    assert wf.apply(returned, req(FormAction.SUBMIT, OWNER)).unwrap().status == FormStatus.SUBMITTED
    assert isinstance(wf.apply(returned, req(FormAction.REOPEN, FINALIZER)).error, AuthorizationError)


def test_revert_needs_remark_and_clears_rating(wf, make_form):
    reviewed = make_form(status=FormStatus.REVIEWED, lines=LINES)
    final = wf.apply(reviewed, req(FormAction.FINALIZE, FINALIZER, scores=SCORES)).unwrap()

    missing = wf.apply(final, req(FormAction.REVERT, FINALIZER, remarks="   "))
    reverted = wf.apply(final, req(FormAction.REVERT, FINALIZER, remarks="wrong period")).unwrap()

    assert isinstance(missing.error, ValidationError)
    assert reverted.status == FormStatus.RETURNED
    assert reverted.final_rating is None
    assert reverted.adjectival_rating is None
    assert reverted.finalized_at is None
    assert reverted.final_remarks == "wrong period"


def test_resubmission_never_carries_a_stale_rating(wf, make_form):
    stale = replace(
        make_form(status=FormStatus.RETURNED, lines=LINES),
        final_rating=4.5,
        adjectival_rating=AdjectivalRating.OUTSTANDING,
    )

    resubmitted = wf.apply(stale, req(FormAction.SUBMIT, OWNER)).unwrap()

    assert resubmitted.final_rating is None
    assert resubmitted.adjectival_rating is None


def test_check_reports_the_edge(wf, make_form):
    form = make_form(status=FormStatus.SUBMITTED, lines=LINES)

    result = wf.check(form, req(FormAction.REVIEW, FINALIZER))

    assert result.ok
    assert result.value.to_state == FormStatus.REVIEWED


def test_available_actions(wf, make_form):
    submitted = make_form(status=FormStatus.SUBMITTED, lines=LINES)

    assert set(wf.available_actions(submitted, REVIEWER)) == {FormAction.REVIEW, FormAction.RETURN}
    assert wf.available_actions(submitted, OWNER) == ()
    assert set(wf.available_actions(make_form(status=FormStatus.REVIEWED), FINALIZER)) == {
        FormAction.RETURN,
        FormAction.RATE,
        FormAction.FINALIZE,
    }


def test_edit_lines_sorts_by_category_then_order(wf, make_form):
    lines = [
        RatingLine("s1", OutputCategory.SUPPORT_FUNCTION, 1, "Support"),
        RatingLine("c2", OutputCategory.CORE_FUNCTION, 2, "Core two"),
        RatingLine("c1", OutputCategory.CORE_FUNCTION, 1, "Core one"),
    ]

    edited = wf.edit_lines(make_form(), lines, capabilities=OWNER, now=NOW).unwrap()

    assert [ln.line_id for ln in edited.lines] == ["c1", "c2", "s1"]
    assert edited.updated_at == NOW


@pytest.mark.parametrize("status", [FormStatus.SUBMITTED, FormStatus.REVIEWED, FormStatus.FINALIZED])
def test_lines_are_frozen_outside_editable_states(wf, make_form, status):
    result = wf.edit_lines(make_form(status=status, lines=LINES), LINES, capabilities=OWNER)

    assert isinstance(result.error, StateError)


def test_only_owner_edits_lines(wf, make_form):
    result = wf.edit_lines(make_form(), LINES, capabilities=REVIEWER | FINALIZER)

    assert isinstance(result.error, AuthorizationError)


@pytest.mark.parametrize(
    "bad",
    [
        RatingLine("x", OutputCategory.STRATEGIC_PRIORITY, 1, "Priority"),
        RatingLine("x", OutputCategory.CORE_FUNCTION, 1, "  "),
        RatingLine("l1", OutputCategory.CORE_FUNCTION, 9, "Duplicate id"),
        RatingLine("x", OutputCategory.CORE_FUNCTION, 1, "Indicator is a number", 5),
        RatingLine("x", OutputCategory.CORE_FUNCTION, 1, ["not", "text"]),
    ],
)
def test_edit_lines_validation(wf, make_form, bad):
    result = wf.edit_lines(make_form(), [LINES[0], bad], capabilities=OWNER)

    assert isinstance(result.error, ValidationError)


def test_saved_lines_start_unrated(wf, make_form):
    self_rated = [replace(ln, quantity=5, quality=5, timeliness=5) for ln in LINES]

    edited = wf.edit_lines(make_form(), self_rated, capabilities=OWNER).unwrap()

    assert [ln.is_rated for ln in edited.lines] == [False, False]
    assert [ln.success_indicator for ln in edited.lines] == [ln.success_indicator for ln in LINES]


def test_return_after_review_clears_reviewer(wf, make_form):
    reviewed = wf.apply(
        make_form(status=FormStatus.SUBMITTED, lines=LINES),
        req(FormAction.REVIEW, REVIEWER, "chief-1", remarks="ok"),
    ).unwrap()

    returned = wf.apply(reviewed, req(FormAction.RETURN, FINALIZER, "hr-1")).unwrap()

    assert (returned.reviewed_by, returned.reviewed_at, returned.review_comments) == (None, None, None)


def test_remarks_must_be_text(wf, make_form):
    form = make_form(status=FormStatus.SUBMITTED, lines=LINES)

    result = wf.apply(form, req(FormAction.RETURN, REVIEWER, remarks=1))

    assert isinstance(result.error, ValidationError)


def test_office_form_path_uses_office_banding(wf, make_form):
    dpcr = make_form(kind=FormKind.DPCR, owner_id="hr-1", division="Administrative", lines=LINES)

    submitted = wf.apply(dpcr, req(FormAction.SUBMIT, OWNER, "hr-1")).unwrap()
    approved = wf.apply(submitted, req(FormAction.APPROVE, FINALIZER, "head-1", scores=SCORES)).unwrap()

    assert approved.status == FormStatus.APPROVED
    assert approved.final_rating == 4.5
    assert approved.adjectival_rating == AdjectivalRating.VERY_SATISFACTORY
    assert approved.approved_by == "head-1"


def test_office_form_has_no_review_step(wf, make_form):
    submitted = make_form(kind=FormKind.DPCR, status=FormStatus.SUBMITTED, lines=LINES)

    assert isinstance(wf.apply(submitted, req(FormAction.REVIEW, FINALIZER)).error, StateError)
    assert isinstance(wf.apply(submitted, req(FormAction.FINALIZE, FINALIZER)).error, StateError)


def test_office_form_accepts_strategic_priorities(wf, make_form):
    dpcr = make_form(kind=FormKind.DPCR)
    lines = [RatingLine("p1", OutputCategory.STRATEGIC_PRIORITY, 1, "Digitize records", "80% by Q4")]

    assert wf.edit_lines(dpcr, lines, capabilities=OWNER).ok


def test_office_form_revert_returns_to_draft(wf, make_form):
    approved = replace(
        make_form(kind=FormKind.DPCR, status=FormStatus.APPROVED, lines=LINES),
        final_rating=4.0,
        adjectival_rating=AdjectivalRating.VERY_SATISFACTORY,
    )

    reverted = wf.apply(approved, req(FormAction.REVERT, FINALIZER, remarks="recompute")).unwrap()

    assert reverted.status == FormStatus.DRAFT
    assert reverted.final_rating is None
    assert wf.edit_lines(reverted, LINES, capabilities=OWNER).ok


def test_submitted_office_form_is_frozen(wf, make_form):
    submitted = make_form(kind=FormKind.DPCR, status=FormStatus.SUBMITTED, lines=LINES)

    assert isinstance(wf.edit_lines(submitted, LINES, capabilities=OWNER).error, StateError)


def test_nobody_gets_unauthorized_for_every_individual_action(wf, make_form):
    form = make_form(lines=LINES)
    for action in FormAction:
        if action == FormAction.APPROVE:
            continue
        assert isinstance(wf.apply(form, req(action, NOBODY)).error, AuthorizationError), action

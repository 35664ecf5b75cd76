"""Example: drive the two engines directly (no Flask, no database).

Controllers and repositories are thin; the rules live in the calculator and
the review workflow.
"""

from datetime import date, datetime

from src.hris_portal.hris_portal.attendance.calculator import calculate_monthly_attendance
from src.hris_portal.hris_portal.attendance.model import DailyPunch
from src.hris_portal.hris_portal.core.enums import Capability, FormAction, FormKind, FormStatus, OutputCategory
from src.hris_portal.hris_portal.performance.model import LineScores, PerformanceForm, RatingLine
from src.hris_portal.hris_portal.performance.workflow import ReviewWorkflow, TransitionRequest


def attendance_demo():
    summary = calculate_monthly_attendance(
        [
            DailyPunch(date(2026, 3, 2), "08:15", "12:00", "13:00", "16:45"),
            DailyPunch(date(2026, 3, 3), "08:00", "12:00", None, None),
            DailyPunch(date(2026, 3, 4), remarks="Sick Leave"),
            DailyPunch(date(2026, 3, 5)),
        ]
    )
    for d in summary.days:
        print(d.log_date, d.tardiness_minutes, d.undertime_minutes, "incomplete" if d.is_incomplete else "")
    print("total tardiness (h, m):", summary.total_tardiness_hm)
    print("total undertime (h, m):", summary.total_undertime_hm)


def workflow_demo():
    workflow = ReviewWorkflow()
    now = datetime(2026, 7, 1, 9, 0)
    form = PerformanceForm(
        form_id="f-1",
        kind=FormKind.IPCR,
        owner_id="emp-1",
        division="Admin",
        cycle_id="2026-1",
        status=FormStatus.DRAFT,
        lines=(
            RatingLine("l-1", OutputCategory.CORE_FUNCTION, 1, "Process vouchers", "100% within 3 days"),
            RatingLine("l-2", OutputCategory.SUPPORT_FUNCTION, 1, "Attend trainings", "2 trainings per sem"),
        ),
    )

    steps = [
        TransitionRequest(FormAction.SUBMIT, "emp-1", frozenset({Capability.OWNER}), now=now),
        TransitionRequest(FormAction.REVIEW, "chief-1", frozenset({Capability.REVIEWER}), now=now),
        TransitionRequest(
            FormAction.FINALIZE,
            "hr-1",
            frozenset({Capability.FINALIZER}),
            scores=(LineScores("l-1", 4, 5, 3), LineScores("l-2", 5, 5, 5)),
            now=now,
        ),
    ]
    for req in steps:
        result = workflow.apply(form, req)
        if not result.ok:
            print(req.action.value, "failed:", result.code, result.error)
            return
        form = result.value
        print(req.action.value, "->", form.status.value)

    print("final rating:", form.final_rating, form.adjectival_rating.value)


if __name__ == "__main__":
    attendance_demo()
    workflow_demo()

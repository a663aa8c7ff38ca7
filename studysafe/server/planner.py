# server/planner.py
# ---------------------------------------------------------
# Plan builder for the study-plan use case.
#
#   build_daily_plan(payload)      default plan, up to 3 subjects
#   build_rebalance_plan(payload)  reduced plan, up to 5 subjects
#   workload_warning(hours)        independent of the overload flag
#   apply_rebalance(plan)          swap the rebalance plan in
# ---------------------------------------------------------

from typing import List, Optional

from .schemas import RECOVERY_MODE, StudyPlanInput, StudyPlanResponse

DEFAULT_SUBJECTS = ("Math", "Science", "Reading")

DAILY_PLAN_SUBJECTS = 3
REBALANCE_SUBJECTS = 5
MAX_HOURS_PER_SUBJECT = 2
RECOVERY_HOURS_PER_SUBJECT = 1
WARN_ABOVE_HOURS = 4

BREAK_REMINDERS = (
    "Take a 5–10 minute break every hour.",
    "Stretch, hydrate, and rest your eyes.",
)

WORKLOAD_WARNING = "That’s a lot for one day. Consider splitting work across more days."
REBALANCED_WARNING = "Plan rebalanced to reduce overload."


def _format_hours(hours: float) -> str:
    # 2.0 -> "2", 1.5 -> "1.5"
    return f"{hours:g}"


def _plan_lines(subjects: List[str], limit: int, hours: float) -> List[str]:
    base = list(subjects) or list(DEFAULT_SUBJECTS)
    return [
        f"Day {day}: {subject} for {_format_hours(hours)} hour(s)"
        for day, subject in enumerate(base[:limit], start=1)
    ]


def build_daily_plan(payload: StudyPlanInput) -> List[str]:
    if payload.mode == RECOVERY_MODE:
        hours = RECOVERY_HOURS_PER_SUBJECT
    else:
        hours = min(payload.hours_per_day, MAX_HOURS_PER_SUBJECT)
    return _plan_lines(payload.subjects, DAILY_PLAN_SUBJECTS, hours)


def build_rebalance_plan(payload: StudyPlanInput) -> List[str]:
    hours = (
        RECOVERY_HOURS_PER_SUBJECT
        if payload.mode == RECOVERY_MODE
        else MAX_HOURS_PER_SUBJECT
    )
    return _plan_lines(payload.subjects, REBALANCE_SUBJECTS, hours)


def workload_warning(hours_per_day: float) -> Optional[str]:
    return WORKLOAD_WARNING if hours_per_day > WARN_ABOVE_HOURS else None


def apply_rebalance(plan: StudyPlanResponse) -> StudyPlanResponse:
    """
    Make the rebalance plan the active plan and clear the overload state.
    Plans without a rebalance plan are returned unchanged.
    """
    if not plan.rebalance_plan:
        return plan
    return plan.model_copy(
        update={
            "daily_plan": list(plan.rebalance_plan),
            "overload_detected": False,
            "overload_notes": [],
            "rebalance_plan": None,
            "workload_warning": REBALANCED_WARNING,
        }
    )

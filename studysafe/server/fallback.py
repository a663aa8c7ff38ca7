# server/fallback.py
"""
Deterministic answers for every use case.

Used whenever the remote model is missing, fails, or returns something
unusable. Same inputs always give the same output.
"""

from typing import Optional

from .planner import (
    BREAK_REMINDERS,
    build_daily_plan,
    build_rebalance_plan,
    workload_warning,
)
from .schemas import (
    EXAM_WEEK,
    RECOVERY_MODE,
    FocusModeInput,
    FocusModeResponse,
    OverloadResult,
    ReflectionInput,
    ReflectionResponse,
    StressCheckInput,
    StressCheckResponse,
    StudyPlanInput,
    StudyPlanResponse,
    WeeklySummaryInput,
    WeeklySummaryResponse,
)
from .scoring import pick_coach_message
from .signals import (
    RED_FLAG_SENTIMENT,
    classify_stress,
    detect_overload,
    detect_red_flag,
    sentiment_for,
)

# -------------------------------------------------------------------
# Fixed texts
# -------------------------------------------------------------------

RED_FLAG_SUPPORT = "I’m really glad you shared this. You don’t have to handle it alone."
RED_FLAG_COACH = "You matter. It’s okay to ask for support."
RED_FLAG_MESSAGE = (
    "Please reach out to a trusted adult, teacher, or counselor who can support you."
)

SUPPORT_BY_LEVEL = {
    "High": RED_FLAG_SUPPORT,
    "Medium": "Thanks for checking in. It’s okay to feel a bit stressed sometimes.",
    "Low": "You’re doing well. Keep taking care of yourself.",
}

ADVICE_BY_LEVEL = {
    "High": (
        "Take a short break and breathe slowly.",
        "Pick just one small task to start.",
        "Consider talking to a trusted adult or counselor.",
    ),
    "Medium": (
        "Try a quick walk or stretch.",
        "Break tasks into smaller steps.",
        "Ask a friend or teacher if you need help.",
    ),
    "Low": (
        "Keep a steady routine.",
        "Celebrate small wins.",
        "Make time for rest.",
    ),
}

GENTLE_FOCUS = (15, 7)
EXAM_FOCUS = (30, 5)
STEADY_FOCUS = (25, 5)
HIGH_SELF_STRESS = 4
GENTLE_REASON = "Shorter focus blocks can feel gentler when stress is high."
STEADY_REASON = "A steady focus rhythm helps build consistency."

TREND_TEXT = {
    "Up": "Stress looks a bit higher this week",
    "Down": "Stress seems to be easing",
    "Flat": "Stress looks steady",
}

REFLECTION_REPLY = (
    "Thanks for sharing. That sounds meaningful — keep going at a steady pace."
)


class FallbackCoach:
    """Local, rule-based coach. Mirrors RemoteCoach's five use cases."""

    def study_plan(
        self,
        payload: StudyPlanInput,
        overload: Optional[OverloadResult] = None,
    ) -> StudyPlanResponse:
        if overload is None:
            overload = detect_overload(payload)
        return StudyPlanResponse(
            daily_plan=build_daily_plan(payload),
            break_reminders=list(BREAK_REMINDERS),
            workload_warning=workload_warning(payload.hours_per_day),
            coach_message=pick_coach_message(
                payload.hours_per_day + payload.self_stress_level
            ),
            overload_detected=overload.detected,
            overload_notes=list(overload.notes),
            rebalance_plan=build_rebalance_plan(payload) if overload.detected else None,
        )

    def stress_check(self, payload: StressCheckInput) -> StressCheckResponse:
        text = payload.text.lower()

        # Safety override: runs before, and instead of, tier scoring
        if detect_red_flag(text):
            return StressCheckResponse(
                stress_level="High",
                supportive_message=RED_FLAG_SUPPORT,
                practical_advice=[],
                sentiment_score=RED_FLAG_SENTIMENT,
                coach_message=RED_FLAG_COACH,
                red_flag=True,
                red_flag_message=RED_FLAG_MESSAGE,
            )

        level = classify_stress(text)
        return StressCheckResponse(
            stress_level=level,
            supportive_message=SUPPORT_BY_LEVEL[level],
            practical_advice=list(ADVICE_BY_LEVEL[level]),
            sentiment_score=sentiment_for(level),
            coach_message=pick_coach_message(len(text)),
            red_flag=False,
            red_flag_message=None,
        )

    def focus_mode(self, payload: FocusModeInput) -> FocusModeResponse:
        is_high = (
            payload.stress_level == "High"
            or payload.mode == RECOVERY_MODE
            or payload.self_stress_level >= HIGH_SELF_STRESS
        )
        if is_high:
            focus, rest = GENTLE_FOCUS
        elif payload.mode == EXAM_WEEK:
            focus, rest = EXAM_FOCUS
        else:
            focus, rest = STEADY_FOCUS
        return FocusModeResponse(
            focus_minutes=focus,
            break_minutes=rest,
            reason=GENTLE_REASON if is_high else STEADY_REASON,
        )

    def weekly_insight(self, payload: WeeklySummaryInput) -> WeeklySummaryResponse:
        trend_text = TREND_TEXT[payload.stress_trend]
        return WeeklySummaryResponse(
            insight=f"{trend_text} — keep balancing focus with breaks."
        )

    def reflection(self, payload: ReflectionInput) -> ReflectionResponse:
        return ReflectionResponse(supportive_reply=REFLECTION_REPLY)

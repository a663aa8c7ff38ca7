# server/coach.py
# ---------------------------------------------------------
# Response assembler: the five public engine operations.
#
# Each one asks the remote coach first, validates the reply
# against the response schema, and otherwise answers from
# FallbackCoach. Remote problems never reach the caller.
#
# Public helpers used by routes:
#   - generate_study_plan(payload)
#   - analyze_stress(payload)
#   - get_focus_mode_suggestion(payload)
#   - get_weekly_insight(payload)
#   - respond_to_reflection(payload)
#   - reflection_prompt_for(day), quick_tip(index)
# ---------------------------------------------------------

import math
from datetime import date
from typing import Any, Callable, Dict, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from .fallback import RED_FLAG_MESSAGE, FallbackCoach
from .llm import RemoteCoach
from .planner import BREAK_REMINDERS
from .schemas import (
    FocusModeInput,
    FocusModeResponse,
    ReflectionInput,
    ReflectionResponse,
    StressCheckInput,
    StressCheckResponse,
    StudyPlanInput,
    StudyPlanResponse,
    WeeklySummaryInput,
    WeeklySummaryResponse,
)
from .scoring import clamp, pick_coach_message
from .signals import RED_FLAG_SENTIMENT, detect_overload, detect_red_flag

M = TypeVar("M", bound=BaseModel)

fallback = FallbackCoach()

_remote_coach: Optional[RemoteCoach] = None


def get_remote_coach() -> RemoteCoach:
    """Module-wide remote coach, built from the environment on first use."""
    global _remote_coach
    if _remote_coach is None:
        _remote_coach = RemoteCoach()
    return _remote_coach


# -------------------------------------------------------------------
# Remote call + validation
# -------------------------------------------------------------------

def _ask_remote(label: str, ask: Callable[[], Optional[Dict[str, Any]]]) -> Optional[Dict[str, Any]]:
    try:
        return ask()
    except Exception as e:
        print(f"[coach] remote {label} failed, using fallback:", repr(e))
        return None


def _validate(label: str, model: Type[M], data: Dict[str, Any]) -> Optional[M]:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        print(f"[coach] remote {label} has the wrong shape, using fallback:", e.error_count(), "error(s)")
        return None


# -------------------------------------------------------------------
# Study plan
# -------------------------------------------------------------------

def generate_study_plan(
    payload: StudyPlanInput, remote: Optional[RemoteCoach] = None
) -> StudyPlanResponse:
    remote = remote or get_remote_coach()
    overload = detect_overload(payload)

    data = _ask_remote("study plan", lambda: remote.study_plan(payload, overload))
    if data and data.get("dailyPlan"):
        merged = dict(data)
        # back-fill what the model left out from the local computation
        if merged.get("overloadDetected") is None:
            merged["overloadDetected"] = overload.detected
        if merged.get("overloadNotes") is None:
            merged["overloadNotes"] = list(overload.notes)
        if not merged.get("breakReminders"):
            merged["breakReminders"] = list(BREAK_REMINDERS)
        if not merged.get("coachMessage"):
            merged["coachMessage"] = pick_coach_message(
                payload.hours_per_day + payload.self_stress_level
            )
        result = _validate("study plan", StudyPlanResponse, merged)
        if result is not None:
            return result

    return fallback.study_plan(payload, overload)


# -------------------------------------------------------------------
# Stress check
# -------------------------------------------------------------------

def _normalize_stress_reply(data: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(data)
    level = out.get("stressLevel")
    if isinstance(level, str):
        out["stressLevel"] = level.strip().capitalize()
    score = out.get("sentimentScore")
    if isinstance(score, (int, float)) and not isinstance(score, bool):
        # NaN / Infinity parse as floats; None fails validation and falls back
        out["sentimentScore"] = int(clamp(round(score), 0, 100)) if math.isfinite(score) else None
    return out


def enforce_safety(result: StressCheckResponse, text: str) -> StressCheckResponse:
    """
    A red flag from either side (model or local detector) forces the
    safety shape: High, no practical advice, a referral message.
    """
    if not (result.red_flag or detect_red_flag(text)):
        return result
    return result.model_copy(
        update={
            "stress_level": "High",
            "practical_advice": [],
            "sentiment_score": max(result.sentiment_score, RED_FLAG_SENTIMENT),
            "red_flag": True,
            "red_flag_message": result.red_flag_message or RED_FLAG_MESSAGE,
        }
    )


def analyze_stress(
    payload: StressCheckInput, remote: Optional[RemoteCoach] = None
) -> StressCheckResponse:
    remote = remote or get_remote_coach()

    data = _ask_remote("stress check", lambda: remote.stress_check(payload))
    if data and data.get("stressLevel"):
        result = _validate("stress check", StressCheckResponse, _normalize_stress_reply(data))
        if result is not None:
            return enforce_safety(result, payload.text)

    return fallback.stress_check(payload)


# -------------------------------------------------------------------
# Focus mode / weekly insight / reflection
# -------------------------------------------------------------------

def get_focus_mode_suggestion(
    payload: FocusModeInput, remote: Optional[RemoteCoach] = None
) -> FocusModeResponse:
    remote = remote or get_remote_coach()

    data = _ask_remote("focus mode", lambda: remote.focus_mode(payload))
    if data and data.get("focusMinutes"):
        result = _validate("focus mode", FocusModeResponse, data)
        if result is not None:
            return result

    return fallback.focus_mode(payload)


def get_weekly_insight(
    payload: WeeklySummaryInput, remote: Optional[RemoteCoach] = None
) -> WeeklySummaryResponse:
    remote = remote or get_remote_coach()

    data = _ask_remote("weekly insight", lambda: remote.weekly_insight(payload))
    if data and data.get("insight"):
        result = _validate("weekly insight", WeeklySummaryResponse, data)
        if result is not None:
            return result

    return fallback.weekly_insight(payload)


def respond_to_reflection(
    payload: ReflectionInput, remote: Optional[RemoteCoach] = None
) -> ReflectionResponse:
    remote = remote or get_remote_coach()

    data = _ask_remote("reflection", lambda: remote.reflection(payload))
    if data and data.get("supportiveReply"):
        result = _validate("reflection", ReflectionResponse, data)
        if result is not None:
            return result

    return fallback.reflection(payload)


# -------------------------------------------------------------------
# Static prompts and tips
# -------------------------------------------------------------------

# Indexed by day of week, Sunday first
REFLECTION_PROMPTS = (
    "What’s one thing you learned today?",
    "What small win are you proud of today?",
    "What felt challenging, and what helped even a little?",
    "Who supported you today, even in a small way?",
    "What would make tomorrow feel a bit easier?",
    "What is one kind thing you can say to yourself today?",
    "What is one task you handled well?",
)

QUICK_TIPS = (
    "Start with the easiest task to build momentum.",
    "Keep your phone out of reach during focus time.",
    "Study in 25-minute blocks with short breaks.",
    "Teach the topic out loud to test yourself.",
    "Write a 2-sentence summary after each session.",
    "Stop 30 minutes before bed to wind down.",
)


def reflection_prompt_for(day: Optional[date] = None) -> str:
    day = day or date.today()
    # isoweekday: Monday=1 .. Sunday=7 -> Sunday=0
    return REFLECTION_PROMPTS[day.isoweekday() % 7]


def quick_tip(index: int) -> str:
    return QUICK_TIPS[index % len(QUICK_TIPS)]

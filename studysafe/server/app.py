# server/app.py
import math
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from .coach import (
    analyze_stress,
    generate_study_plan,
    get_focus_mode_suggestion,
    get_weekly_insight,
    quick_tip,
    reflection_prompt_for,
    respond_to_reflection,
)
from .history import normalize_window, plan_completion_percent, summarize_week, upsert_weekly_data
from .planner import apply_rebalance
from .schemas import (
    NORMAL_WEEK,
    FocusModeIn,
    FocusModeInput,
    FocusModeResponse,
    ReflectionIn,
    ReflectionInput,
    ReflectionResponse,
    StressCheckIn,
    StressCheckInput,
    StressCheckResponse,
    StudyPlanIn,
    StudyPlanInput,
    StudyPlanResponse,
    WeeklySummaryIn,
    WeeklySummaryInput,
    WeeklySummaryResponse,
    WeeklyTrendIn,
    WeeklyTrendOut,
)
from .scoring import burnout_score

app = FastAPI(title="StudySafe Backend")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _to_number(value: Any, default: float) -> float:
    """Loose numeric coercion: anything unparsable or non-finite becomes `default`."""
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


def _to_int(value: Any, default: int) -> int:
    return int(_to_number(value, default))


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


@app.get("/health")
def health() -> Dict[str, Any]:
    return {"ok": True, "ts": datetime.now(timezone.utc).isoformat()}


# ---------------------------------------------------------------------------
# /api/study-plan
# ---------------------------------------------------------------------------


@app.post("/api/study-plan", response_model=StudyPlanResponse)
def study_plan(payload: StudyPlanIn) -> StudyPlanResponse:
    subjects = [s.strip() for s in (payload.subjects or "").split(",") if s.strip()]
    try:
        plan = generate_study_plan(
            StudyPlanInput(
                subjects=subjects,
                deadlines=payload.deadlines or "",
                hours_per_day=_to_number(payload.hours_per_day, 0),
                self_stress_level=_to_int(payload.self_stress_level, 1),
                mode=payload.mode or NORMAL_WEEK,
            )
        )
    except Exception as exc:
        print("[app] study plan failed:", repr(exc))
        raise HTTPException(status_code=500, detail="Failed to generate study plan.")

    if payload.rebalance:
        plan = apply_rebalance(plan)
    return plan


# ---------------------------------------------------------------------------
# /api/stress-check
# ---------------------------------------------------------------------------


@app.post("/api/stress-check", response_model=StressCheckResponse)
def stress_check(payload: StressCheckIn) -> StressCheckResponse:
    try:
        return analyze_stress(
            StressCheckInput(
                text=(payload.text or "").strip(),
                mode=payload.mode or NORMAL_WEEK,
            )
        )
    except Exception as exc:
        print("[app] stress check failed:", repr(exc))
        raise HTTPException(status_code=500, detail="Failed to analyze stress.")


# ---------------------------------------------------------------------------
# /api/focus-mode
# ---------------------------------------------------------------------------


@app.post("/api/focus-mode", response_model=FocusModeResponse)
def focus_mode(payload: FocusModeIn) -> FocusModeResponse:
    try:
        return get_focus_mode_suggestion(
            FocusModeInput(
                stress_level=payload.stress_level or "Low",
                self_stress_level=_to_int(payload.self_stress_level, 1),
                mode=payload.mode or NORMAL_WEEK,
            )
        )
    except Exception as exc:
        print("[app] focus mode failed:", repr(exc))
        raise HTTPException(status_code=500, detail="Failed to get focus mode suggestion.")


# ---------------------------------------------------------------------------
# /api/weekly-summary + /api/weekly-trend
# ---------------------------------------------------------------------------


@app.post("/api/weekly-summary", response_model=WeeklySummaryResponse)
def weekly_summary(payload: WeeklySummaryIn) -> WeeklySummaryResponse:
    try:
        return get_weekly_insight(
            WeeklySummaryInput(
                stress_trend=payload.stress_trend or "Flat",
                consistency_score=_to_number(payload.consistency_score, 0),
                burnout_level=payload.burnout_level or "Low",
            )
        )
    except Exception as exc:
        print("[app] weekly summary failed:", repr(exc))
        raise HTTPException(status_code=500, detail="Failed to get weekly summary.")


@app.post("/api/weekly-trend", response_model=WeeklyTrendOut)
def weekly_trend(payload: WeeklyTrendIn) -> WeeklyTrendOut:
    entry = payload.entry
    if entry is not None and payload.daily_plan:
        completion = plan_completion_percent(payload.daily_plan, set(payload.completed))
        entry = entry.model_copy(update={"study_completion": completion})
    try:
        if entry is not None:
            points = upsert_weekly_data(payload.points, entry)
        else:
            points = normalize_window(payload.points)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    sentiment = _to_number(payload.sentiment_score, 0)
    self_stress = _to_number(payload.self_stress_level, 1)
    hours = _to_number(payload.hours_per_day, 0)

    summary = summarize_week(points, sentiment, self_stress, hours)
    return WeeklyTrendOut(
        points=points,
        stress_trend=summary.stress_trend,
        consistency_score=summary.consistency_score,
        burnout_score=burnout_score(sentiment, self_stress, hours),
        burnout_level=summary.burnout_level,
    )


# ---------------------------------------------------------------------------
# /api/reflection
# ---------------------------------------------------------------------------


@app.post("/api/reflection", response_model=ReflectionResponse)
def reflection(payload: ReflectionIn) -> ReflectionResponse:
    try:
        return respond_to_reflection(
            ReflectionInput(
                prompt=payload.prompt or "",
                response=payload.response or "",
                mode=payload.mode or NORMAL_WEEK,
            )
        )
    except Exception as exc:
        print("[app] reflection failed:", repr(exc))
        raise HTTPException(status_code=500, detail="Failed to respond to reflection.")


@app.get("/api/reflection-prompt")
def reflection_prompt() -> Dict[str, str]:
    return {"prompt": reflection_prompt_for()}


@app.get("/api/tips/{index}")
def tip(index: int) -> Dict[str, Any]:
    return {"index": index, "tip": quick_tip(index)}

# server/schemas.py
"""
Pydantic schemas for the StudySafe backend.

Engine value objects (all frozen, camelCase on the wire):
- StudyPlanInput / StudyPlanResponse / OverloadResult
- StressCheckInput / StressCheckResponse
- FocusModeInput / FocusModeResponse
- WeeklyDataPoint / WeeklySummaryInput / WeeklySummaryResponse
- ReflectionInput / ReflectionResponse

HTTP request bodies (loose, coerced in app.py before reaching the engine):
- StudyPlanIn, StressCheckIn, FocusModeIn, WeeklySummaryIn, ReflectionIn,
  WeeklyTrendIn / WeeklyTrendOut
"""

from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

Mode = Literal["Normal Week", "Exam Week", "Recovery Mode"]
StressLevel = Literal["Low", "Medium", "High"]
Trend = Literal["Up", "Down", "Flat"]

NORMAL_WEEK: Mode = "Normal Week"
EXAM_WEEK: Mode = "Exam Week"
RECOVERY_MODE: Mode = "Recovery Mode"


class EngineModel(BaseModel):
    """Immutable value object serialised with camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class WireModel(BaseModel):
    """Request body: camelCase keys, mutable, unknown keys ignored."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _non_blank(value: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValueError("must not be blank")
    return value


# ---------------------------------------------------------------------------
# Study plan
# ---------------------------------------------------------------------------

class StudyPlanInput(EngineModel):
    subjects: List[str] = Field(default_factory=list)
    deadlines: str = ""
    hours_per_day: float = 0
    self_stress_level: int = 1
    mode: Mode = NORMAL_WEEK


class OverloadResult(EngineModel):
    detected: bool = False
    # ordered, distinct
    notes: List[str] = Field(default_factory=list)


class StudyPlanResponse(EngineModel):
    daily_plan: List[str]
    break_reminders: List[str] = Field(default_factory=list)
    workload_warning: Optional[str] = None
    coach_message: str = ""
    overload_detected: bool = False
    overload_notes: List[str] = Field(default_factory=list)
    rebalance_plan: Optional[List[str]] = None

    @field_validator("daily_plan")
    @classmethod
    def _plan_not_empty(cls, value: List[str]) -> List[str]:
        if not value:
            raise ValueError("dailyPlan must not be empty")
        return value


# ---------------------------------------------------------------------------
# Stress check
# ---------------------------------------------------------------------------

class StressCheckInput(EngineModel):
    text: str = ""
    mode: Mode = NORMAL_WEEK


class StressCheckResponse(EngineModel):
    stress_level: StressLevel
    supportive_message: str = ""
    practical_advice: List[str] = Field(default_factory=list)
    sentiment_score: int = Field(default=0, ge=0, le=100)
    coach_message: str = ""
    red_flag: bool = False
    red_flag_message: Optional[str] = None


# ---------------------------------------------------------------------------
# Focus mode
# ---------------------------------------------------------------------------

class FocusModeInput(EngineModel):
    stress_level: StressLevel = "Low"
    self_stress_level: int = 1
    mode: Mode = NORMAL_WEEK


class FocusModeResponse(EngineModel):
    focus_minutes: int = Field(gt=0)
    break_minutes: int = Field(gt=0)
    reason: str = ""


# ---------------------------------------------------------------------------
# Weekly summary
# ---------------------------------------------------------------------------

class WeeklyDataPoint(EngineModel):
    # calendar-day key, YYYY-MM-DD
    date: str
    stress_score: float = Field(default=0, ge=0, le=100)
    # percent of the day's plan completed
    study_completion: float = Field(default=0, ge=0, le=100)


class WeeklySummaryInput(EngineModel):
    stress_trend: Trend = "Flat"
    consistency_score: float = 0
    burnout_level: StressLevel = "Low"


class WeeklySummaryResponse(EngineModel):
    insight: str

    @field_validator("insight")
    @classmethod
    def _insight_not_blank(cls, value: str) -> str:
        return _non_blank(value)


# ---------------------------------------------------------------------------
# Reflection
# ---------------------------------------------------------------------------

class ReflectionInput(EngineModel):
    prompt: str = ""
    response: str = ""
    mode: Mode = NORMAL_WEEK


class ReflectionResponse(EngineModel):
    supportive_reply: str

    @field_validator("supportive_reply")
    @classmethod
    def _reply_not_blank(cls, value: str) -> str:
        return _non_blank(value)


# ---------------------------------------------------------------------------
# HTTP request bodies
# ---------------------------------------------------------------------------

Number = Union[float, str, None]


class StudyPlanIn(WireModel):
    # comma-separated, e.g. "Math, Biology"
    subjects: Optional[str] = None
    deadlines: Optional[str] = None
    hours_per_day: Number = None
    self_stress_level: Number = None
    mode: Optional[Mode] = None
    # serve the rebalance plan as the active plan when overloaded
    rebalance: bool = False


class StressCheckIn(WireModel):
    text: Optional[str] = None
    mode: Optional[Mode] = None


class FocusModeIn(WireModel):
    stress_level: Optional[StressLevel] = None
    self_stress_level: Number = None
    mode: Optional[Mode] = None


class WeeklySummaryIn(WireModel):
    stress_trend: Optional[Trend] = None
    consistency_score: Number = None
    burnout_level: Optional[StressLevel] = None


class ReflectionIn(WireModel):
    prompt: Optional[str] = None
    response: Optional[str] = None
    mode: Optional[Mode] = None


class WeeklyTrendIn(WireModel):
    points: List[WeeklyDataPoint] = Field(default_factory=list)
    # today's check-in, upserted by date before the trend is computed
    entry: Optional[WeeklyDataPoint] = None
    # when given, the entry's studyCompletion is derived from the checked-off plan
    daily_plan: List[str] = Field(default_factory=list)
    completed: List[str] = Field(default_factory=list)
    sentiment_score: Number = None
    self_stress_level: Number = None
    hours_per_day: Number = None


class WeeklyTrendOut(EngineModel):
    points: List[WeeklyDataPoint]
    stress_trend: Trend
    consistency_score: float
    burnout_score: int
    burnout_level: StressLevel

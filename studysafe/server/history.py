# server/history.py
# ---------------------------------------------------------
# Rolling weekly window over caller-owned check-ins.
#
# The engine keeps no state: callers pass the window they stored,
# get the updated window back, and persist it themselves.
# ---------------------------------------------------------

from datetime import date, datetime
from statistics import mean
from typing import List, Sequence, TypeVar, Union

from dateutil import parser as dateparser

from .schemas import Trend, WeeklyDataPoint, WeeklySummaryInput
from .scoring import burnout_score, score_to_level

WINDOW_DAYS = 7
MIN_TREND_POINTS = 4
TREND_SPAN = 3
TREND_THRESHOLD = 6
RECENT_LIMIT = 5

T = TypeVar("T")


def date_key(value: Union[str, date, datetime]) -> str:
    """Normalize a date, datetime or date-like string to YYYY-MM-DD."""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    try:
        return dateparser.parse(value).date().isoformat()
    except (ValueError, OverflowError, TypeError) as exc:
        raise ValueError(f"not a calendar date: {value!r}") from exc


def normalize_window(
    window: Sequence[WeeklyDataPoint], limit: int = WINDOW_DAYS
) -> List[WeeklyDataPoint]:
    """
    One point per calendar day (later points win), dates as YYYY-MM-DD,
    sorted oldest first, newest `limit` kept.
    """
    by_date = {}
    for point in window:
        key = date_key(point.date)
        by_date[key] = point.model_copy(update={"date": key})
    ordered = [by_date[key] for key in sorted(by_date)]
    return ordered[-limit:]


def upsert_weekly_data(
    window: Sequence[WeeklyDataPoint],
    entry: WeeklyDataPoint,
    limit: int = WINDOW_DAYS,
) -> List[WeeklyDataPoint]:
    """Replace the point with the same date (else append), then normalize."""
    return normalize_window([*window, entry], limit)


def compute_trend(window: Sequence[WeeklyDataPoint]) -> Trend:
    if len(window) < MIN_TREND_POINTS:
        return "Flat"
    scores = [point.stress_score for point in window]
    # both sums are over 3, even when fewer than 3 earlier points exist
    recent = sum(scores[-TREND_SPAN:]) / TREND_SPAN
    prior = sum(scores[-2 * TREND_SPAN:-TREND_SPAN]) / TREND_SPAN
    if recent - prior > TREND_THRESHOLD:
        return "Up"
    if prior - recent > TREND_THRESHOLD:
        return "Down"
    return "Flat"


def consistency_score(window: Sequence[WeeklyDataPoint]) -> float:
    if not window:
        return 0.0
    return mean(point.study_completion for point in window)


def plan_completion_percent(daily_plan: Sequence[str], completed) -> int:
    """Rounded share of plan items marked done; `completed` is any container of items."""
    if not daily_plan:
        return 0
    done = sum(1 for item in daily_plan if item in completed)
    return int(done * 100 / len(daily_plan) + 0.5)


def summarize_week(
    window: Sequence[WeeklyDataPoint],
    sentiment: float,
    self_stress: float,
    hours_per_day: float,
) -> WeeklySummaryInput:
    score = burnout_score(sentiment, self_stress, hours_per_day)
    return WeeklySummaryInput(
        stress_trend=compute_trend(window),
        consistency_score=consistency_score(window),
        burnout_level=score_to_level(score),
    )


def push_recent(history: Sequence[T], item: T, limit: int = RECENT_LIMIT) -> List[T]:
    """Newest-first bounded log (stress checks, reflections)."""
    return [item, *history][:limit]

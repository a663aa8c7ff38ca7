# server/scoring.py
"""Numeric scorers: coach-message pick, burnout score and its tiers."""

import math

from .schemas import StressLevel

COACH_MESSAGES = (
    "Consistency beats cramming.",
    "Small steps add up. You got this!",
    "Take a breath and keep going.",
    "You’re doing more than you think.",
    "Plan, pace, and pause.",
)

# Burnout tiers: [0, 34) Low, [34, 67) Medium, [67, 100] High
LOW_BELOW = 34
MEDIUM_BELOW = 67

MAX_COUNTED_HOURS = 10


def clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


def pick_coach_message(seed: float) -> str:
    """Same seed, same message: index is abs(seed) mod len(COACH_MESSAGES)."""
    # huge finite inputs can sum to inf
    if isinstance(seed, float) and not math.isfinite(seed):
        seed = 0
    return COACH_MESSAGES[int(abs(seed)) % len(COACH_MESSAGES)]


def burnout_score(sentiment: float, self_stress: float, hours_per_day: float) -> int:
    """
    0-100 composite:
      half the sentiment score
      + up to 30 from self-reported stress (1..5)
      + up to 20 from daily hours (capped at 10h)
    """
    stress_part = ((self_stress - 1) / 4) * 30
    hours_part = (clamp(hours_per_day, 0, MAX_COUNTED_HOURS) / MAX_COUNTED_HOURS) * 20
    score = sentiment * 0.5 + stress_part + hours_part
    if math.isnan(score):
        return 0
    # clamp before rounding so an infinite part still lands on 100
    # half-up rounding, not banker's rounding
    return int(math.floor(clamp(score, 0, 100) + 0.5))


def score_to_level(score: float) -> StressLevel:
    if score < LOW_BELOW:
        return "Low"
    if score < MEDIUM_BELOW:
        return "Medium"
    return "High"

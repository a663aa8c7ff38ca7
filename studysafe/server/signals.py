# server/signals.py
# ---------------------------------------------------------
# Keyword / threshold detectors used by the fallback path:
#   - detect_red_flag(text)      safety override, checked first
#   - classify_stress(text)      High / Medium / Low tiers
#   - detect_overload(payload)   workload notes + overload flag
#
# These are best-effort heuristics, not clinical assessment.
# ---------------------------------------------------------

from typing import List

from .schemas import OverloadResult, StressLevel, StudyPlanInput

RED_FLAG_SIGNALS = (
    "suicide",
    "kill myself",
    "self harm",
    "self-harm",
    "end it",
    "hurt myself",
    "no reason to live",
)

HIGH_SIGNALS = ("overwhelmed", "panic", "exhausted", "burnout", "hopeless", "stressed")
MEDIUM_SIGNALS = ("worried", "tired", "nervous", "pressure", "anxious")

SENTIMENT_BY_LEVEL = {"High": 85, "Medium": 55, "Low": 25}
RED_FLAG_SENTIMENT = 90

# Overload thresholds
MANY_SUBJECTS = 5
TOO_MANY_SUBJECTS = 6
DENSE_DEADLINES_CHARS = 60
LONG_HOURS = 4
TOO_MANY_HOURS = 5

SUBJECTS_NOTE = "That’s a lot of subjects. Consider rotating focus each day."
DEADLINES_NOTE = "You have many deadlines listed. Spreading tasks across days can help."
HOURS_NOTE = "More than 4 hours a day can be tiring. Try shorter sessions."


def _contains_any(text: str, phrases) -> bool:
    return any(phrase in text for phrase in phrases)


def detect_red_flag(text: str) -> bool:
    """True if the text mentions any self-harm phrase (substring match)."""
    return _contains_any((text or "").lower(), RED_FLAG_SIGNALS)


def classify_stress(text: str) -> StressLevel:
    """
    Tier the text by signal words. High signals win over medium ones;
    red flags are NOT handled here (see detect_red_flag).
    """
    hay = (text or "").lower()
    if _contains_any(hay, HIGH_SIGNALS):
        return "High"
    if _contains_any(hay, MEDIUM_SIGNALS):
        return "Medium"
    return "Low"


def sentiment_for(level: StressLevel) -> int:
    return SENTIMENT_BY_LEVEL[level]


def detect_overload(payload: StudyPlanInput) -> OverloadResult:
    """
    Notes are collected in a fixed order (subjects, deadlines, hours);
    the overload flag then depends on how many notes fired.
    """
    notes: List[str] = []
    subject_count = len(payload.subjects)
    hours = payload.hours_per_day

    if subject_count >= MANY_SUBJECTS:
        notes.append(SUBJECTS_NOTE)
    if len(payload.deadlines) >= DENSE_DEADLINES_CHARS:
        notes.append(DEADLINES_NOTE)
    if hours >= LONG_HOURS:
        notes.append(HOURS_NOTE)

    detected = (
        len(notes) >= 2
        or hours >= TOO_MANY_HOURS
        or subject_count >= TOO_MANY_SUBJECTS
    )
    return OverloadResult(detected=detected, notes=notes)

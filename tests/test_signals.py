import pytest

from studysafe.server.signals import (
    DEADLINES_NOTE,
    HOURS_NOTE,
    RED_FLAG_SIGNALS,
    SUBJECTS_NOTE,
    classify_stress,
    detect_overload,
    detect_red_flag,
    sentiment_for,
)


# ── Red flags ───────────────────────────────────────────────────────────

@pytest.mark.parametrize("phrase", RED_FLAG_SIGNALS)
def test_every_red_flag_phrase_is_detected(phrase):
    assert detect_red_flag(f"lately I think {phrase} sometimes")


def test_red_flag_is_case_insensitive():
    assert detect_red_flag("Sometimes I want to HURT MYSELF")


def test_red_flag_ignores_ordinary_stress():
    assert not detect_red_flag("I am stressed about my exam tomorrow")
    assert not detect_red_flag("")


# ── Stress tiers ────────────────────────────────────────────────────────

def test_overwhelmed_and_exhausted_is_high():
    assert classify_stress("I feel so overwhelmed and exhausted") == "High"


def test_high_signals_beat_medium_signals():
    assert classify_stress("a bit tired but mostly in a panic") == "High"


def test_medium_signals():
    assert classify_stress("I'm worried about the pressure") == "Medium"


def test_no_signals_is_low():
    assert classify_stress("Had a good day at the library") == "Low"
    assert classify_stress("") == "Low"


@pytest.mark.parametrize("level,score", [("High", 85), ("Medium", 55), ("Low", 25)])
def test_sentiment_constants(level, score):
    assert sentiment_for(level) == score


# ── Overload ────────────────────────────────────────────────────────────

def test_six_subjects_overload_with_single_note(make_plan_input):
    result = detect_overload(make_plan_input(
        subjects=["Math", "Science", "English", "History", "Art", "Music"],
        deadlines="",
        hours_per_day=2,
        self_stress_level=2,
    ))
    assert result.detected is True
    assert result.notes == [SUBJECTS_NOTE]


def test_notes_keep_fixed_order(make_plan_input):
    result = detect_overload(make_plan_input(
        subjects=["A", "B", "C", "D", "E"],
        deadlines="x" * 60,
        hours_per_day=4,
    ))
    assert result.notes == [SUBJECTS_NOTE, DEADLINES_NOTE, HOURS_NOTE]
    assert result.detected is True


def test_two_notes_trigger_overload(make_plan_input):
    result = detect_overload(make_plan_input(deadlines="y" * 80, hours_per_day=4))
    assert result.notes == [DEADLINES_NOTE, HOURS_NOTE]
    assert result.detected is True


def test_four_hours_alone_is_only_a_note(make_plan_input):
    result = detect_overload(make_plan_input(hours_per_day=4))
    assert result.notes == [HOURS_NOTE]
    assert result.detected is False


def test_five_hours_alone_is_overload(make_plan_input):
    result = detect_overload(make_plan_input(hours_per_day=5))
    assert result.detected is True


def test_deadlines_just_under_threshold(make_plan_input):
    result = detect_overload(make_plan_input(deadlines="z" * 59))
    assert result.notes == []
    assert result.detected is False


def test_odd_numbers_do_not_crash(make_plan_input):
    assert detect_overload(make_plan_input(hours_per_day=-3)).detected is False
    assert detect_overload(make_plan_input(hours_per_day=1e9)).detected is True


def test_overload_is_monotone(make_plan_input):
    subject_lists = [["A"] * n for n in (0, 3, 5, 6, 8)]
    deadline_lengths = (0, 30, 60, 120)
    hours = (0, 3, 4, 5, 9)

    def detected(n_subjects, n_chars, h):
        return detect_overload(make_plan_input(
            subjects=subject_lists[n_subjects],
            deadlines="d" * deadline_lengths[n_chars],
            hours_per_day=hours[h],
        )).detected

    for s in range(len(subject_lists)):
        for d in range(len(deadline_lengths)):
            for h in range(len(hours)):
                if not detected(s, d, h):
                    continue
                if s + 1 < len(subject_lists):
                    assert detected(s + 1, d, h)
                if d + 1 < len(deadline_lengths):
                    assert detected(s, d + 1, h)
                if h + 1 < len(hours):
                    assert detected(s, d, h + 1)

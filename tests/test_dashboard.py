# tests/test_dashboard.py
from datetime import date

from kokushi_tutor.dashboard import (
    accuracy_percent, daily_progress_percent, get_accuracy_color, get_accuracy_label,
    get_study_stats, get_year_breakdown, is_goal_reached,
)
from kokushi_tutor.models import ProgressState
from kokushi_tutor.progress import record_answer

TODAY = date(2025, 3, 1)
TOMORROW = date(2025, 3, 2)


def test_accuracy_label():
    assert get_accuracy_label(85) == "READY"
    assert get_accuracy_label(70) == "LIKELY"
    assert get_accuracy_label(55) == "NEEDS WORK"
    assert get_accuracy_label(40) == "NOT READY"


def test_accuracy_color():
    assert get_accuracy_color(90) == "green"
    assert get_accuracy_color(10) == "red"


def test_accuracy_percent():
    assert accuracy_percent(0, 0) == 0
    assert accuracy_percent(3, 2) == 67
    assert accuracy_percent(4, 4) == 100


def test_daily_progress_percent_capped():
    state = ProgressState(daily_goal=4)
    record_answer(state, "a", True, today=TODAY)
    assert daily_progress_percent(state, TODAY) == 25.0
    for qid in "bcdef":
        record_answer(state, qid, True, today=TODAY)
    assert daily_progress_percent(state, TODAY) == 100.0
    assert is_goal_reached(state, TODAY)


def test_daily_progress_resets_on_new_day():
    state = ProgressState(daily_goal=1)
    record_answer(state, "a", True, today=TODAY)
    assert is_goal_reached(state, TODAY)
    assert daily_progress_percent(state, TOMORROW) == 0.0
    assert not is_goal_reached(state, TOMORROW)


def test_get_study_stats(questions):
    state = ProgressState(daily_goal=2)
    record_answer(state, "112A1", True, today=TODAY)
    record_answer(state, "112B48", False, today=TODAY)
    record_answer(state, "112A1", True, today=TODAY)
    record_answer(state, "not-in-corpus", True, today=TODAY)
    stats = get_study_stats(state, questions, TODAY)
    assert stats["today_answered"] == 4
    assert stats["today_correct"] == 3
    assert stats["today_accuracy"] == 75
    assert stats["goal_reached"] is True
    assert stats["current_streak"] == 1
    assert stats["questions_seen"] == 2
    assert stats["coverage"] == 25.0


def test_get_study_stats_empty():
    stats = get_study_stats(ProgressState(), [])
    assert stats["total_accuracy"] == 0
    assert stats["coverage"] == 0.0


def test_get_year_breakdown(questions):
    state = ProgressState()
    record_answer(state, "112A1", True, today=TODAY)
    rows = get_year_breakdown(state, questions)
    assert [r["year"] for r in rows] == [118, 113, 112, 110, 105, 102]
    row_112 = next(r for r in rows if r["year"] == 112)
    assert row_112 == {"year": 112, "total": 2, "answered": 1, "coverage": 50.0}

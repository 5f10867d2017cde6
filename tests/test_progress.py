# tests/test_progress.py
from datetime import date

import pytest

from kokushi_tutor.db import get_connection, init_db, save_blob
from kokushi_tutor.models import ProgressState
from kokushi_tutor.progress import (
    PROGRESS_KEY, load_progress, progress_from_dict, progress_to_dict, record_answer,
    save_progress, set_daily_goal, today_counts,
)

DAY1 = date(2025, 1, 10)
DAY2 = date(2025, 1, 11)
DAY4 = date(2025, 1, 13)


def test_initial_state():
    state = ProgressState()
    assert state.current_streak == 0
    assert state.longest_streak == 0
    assert state.last_study_date is None
    assert state.daily_goal == 20
    assert state.answered_question_ids == set()


def test_first_answer_starts_streak():
    state = record_answer(ProgressState(), "112A1", True, today=DAY1)
    assert state.current_streak == 1
    assert state.longest_streak == 1
    assert state.last_study_date == DAY1
    assert state.today_answered == 1
    assert state.today_correct == 1
    assert state.total_answered == 1
    assert state.total_correct == 1


def test_streak_continue_then_break():
    state = ProgressState()
    record_answer(state, "112A1", True, today=DAY1)
    record_answer(state, "112A2", False, today=DAY2)
    assert state.current_streak == 2
    assert state.longest_streak == 2
    record_answer(state, "112A3", True, today=DAY4)
    assert state.current_streak == 1
    assert state.longest_streak == 2


def test_multiple_answers_same_day_do_not_inflate_streak():
    state = ProgressState()
    for qid in ("112A1", "112A2", "112A3"):
        record_answer(state, qid, True, today=DAY1)
    assert state.current_streak == 1
    assert state.longest_streak == 1


def test_same_question_twice_counts_twice_but_one_id():
    state = ProgressState()
    record_answer(state, "112A1", True, today=DAY1)
    record_answer(state, "112A1", True, today=DAY1)
    assert state.today_answered == 2
    assert state.today_correct == 2
    assert state.total_answered == 2
    assert state.answered_question_ids == {"112A1"}


def test_new_day_resets_today_counters():
    state = ProgressState()
    record_answer(state, "112A1", True, today=DAY1)
    record_answer(state, "112A2", True, today=DAY1)
    record_answer(state, "112A3", False, today=DAY2)
    assert state.today_answered == 1
    assert state.today_correct == 0
    assert state.total_answered == 3
    assert state.total_correct == 2


def test_incorrect_answer_counts():
    state = record_answer(ProgressState(), "112A1", False, today=DAY1)
    assert state.today_answered == 1
    assert state.today_correct == 0
    assert state.total_correct == 0


def test_longest_streak_never_below_current():
    state = ProgressState(current_streak=3, longest_streak=3, last_study_date=DAY1)
    record_answer(state, "q", True, today=DAY2)
    assert state.current_streak == 4
    assert state.longest_streak == 4


def test_broken_streak_from_zero_history_keeps_invariant():
    state = ProgressState(last_study_date=date(2024, 12, 1))
    record_answer(state, "q", True, today=DAY1)
    assert state.current_streak == 1
    assert state.longest_streak >= state.current_streak


def test_record_answer_defaults_to_today():
    state = record_answer(ProgressState(), "q", True)
    assert state.last_study_date == date.today()


def test_set_daily_goal():
    state = set_daily_goal(ProgressState(), 30)
    assert state.daily_goal == 30


@pytest.mark.parametrize("goal", [0, -5, 2.5, "10", True])
def test_set_daily_goal_rejects_invalid(goal):
    state = ProgressState()
    with pytest.raises(ValueError):
        set_daily_goal(state, goal)
    assert state.daily_goal == 20


def test_today_counts_reset_on_read():
    state = ProgressState()
    record_answer(state, "q", True, today=DAY1)
    assert today_counts(state, DAY1) == (1, 1)
    assert today_counts(state, DAY2) == (0, 0)


def test_round_trip():
    state = ProgressState()
    record_answer(state, "112A1", True, today=DAY1)
    record_answer(state, "118D3", False, today=DAY2)
    set_daily_goal(state, 40)
    data = progress_to_dict(state)
    assert data["answered_question_ids"] == ["112A1", "118D3"]
    assert data["last_study_date"] == "2025-01-11"
    assert progress_from_dict(data) == state


def test_from_dict_missing_keys_use_defaults():
    state = progress_from_dict({"total_answered": 5, "total_correct": 3})
    assert state.total_answered == 5
    assert state.daily_goal == 20
    assert state.last_study_date is None


@pytest.mark.parametrize("data", [
    {"current_streak": -1},
    {"total_answered": "many"},
    {"last_study_date": "yesterday"},
    {"answered_question_ids": "112A1"},
    {"daily_goal": 0},
    {"today_answered": 1, "today_correct": 3},
    {"total_answered": 1, "total_correct": 5},
    ["not", "a", "dict"],
])
def test_from_dict_rejects_malformed(data):
    with pytest.raises(ValueError):
        progress_from_dict(data)


def test_save_and_load_progress(tmp_db):
    init_db(tmp_db)
    state = ProgressState()
    record_answer(state, "112A1", True, today=DAY1)
    assert save_progress(tmp_db, state) is True
    assert load_progress(tmp_db) == state


def test_load_progress_missing_gives_initial_state(tmp_db):
    init_db(tmp_db)
    assert load_progress(tmp_db) == ProgressState()


def test_load_progress_malformed_gives_initial_state(tmp_db):
    init_db(tmp_db)
    save_blob(tmp_db, PROGRESS_KEY, {"current_streak": "lots"})
    assert load_progress(tmp_db) == ProgressState()


def test_load_progress_corrupt_json_gives_initial_state(tmp_db):
    init_db(tmp_db)
    conn = get_connection(tmp_db)
    conn.execute("INSERT INTO kv_store (key, value) VALUES (?, ?)", (PROGRESS_KEY, "{not json"))
    conn.commit()
    conn.close()
    assert load_progress(tmp_db) == ProgressState()

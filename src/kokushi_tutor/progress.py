"""Daily progress counters and study streak tracking."""
import logging
from dataclasses import asdict
from datetime import date, timedelta

from kokushi_tutor.db import load_blob, save_blob
from kokushi_tutor.models import ProgressState

log = logging.getLogger(__name__)

PROGRESS_KEY = "kokushi-progress"
DEFAULT_DAILY_GOAL = 20

_COUNTERS = (
    "current_streak", "longest_streak", "today_answered", "today_correct",
    "total_answered", "total_correct",
)


def update_streak(state: ProgressState, previous: date | None, today: date) -> None:
    """Advance the streak given the study date seen before today's answer.

    Several answers on one day count once; studying yesterday extends the
    streak; any longer gap restarts it at 1.
    """
    if previous == today:
        return
    if previous == today - timedelta(days=1):
        state.current_streak += 1
    else:
        state.current_streak = 1
    state.longest_streak = max(state.longest_streak, state.current_streak)


def record_answer(
    state: ProgressState, question_id: str, is_correct: bool, today: date | None = None
) -> ProgressState:
    """Record one answered question. Mutates and returns state."""
    today = today or date.today()
    previous = state.last_study_date

    if previous != today:
        state.today_answered = 1
        state.today_correct = 1 if is_correct else 0
    else:
        state.today_answered += 1
        state.today_correct += 1 if is_correct else 0

    state.total_answered += 1
    state.total_correct += 1 if is_correct else 0
    state.last_study_date = today
    state.answered_question_ids.add(question_id)

    update_streak(state, previous, today)
    return state


def set_daily_goal(state: ProgressState, goal: int) -> ProgressState:
    if isinstance(goal, bool) or not isinstance(goal, int) or goal < 1:
        raise ValueError(f"Daily goal must be a positive integer, got {goal!r}")
    state.daily_goal = goal
    return state


def today_counts(state: ProgressState, today: date | None = None) -> tuple[int, int]:
    """(answered, correct) for today; zero if the last answer was on another day."""
    today = today or date.today()
    if state.last_study_date != today:
        return 0, 0
    return state.today_answered, state.today_correct


def progress_to_dict(state: ProgressState) -> dict:
    data = asdict(state)
    data["last_study_date"] = state.last_study_date.isoformat() if state.last_study_date else None
    data["answered_question_ids"] = sorted(state.answered_question_ids)
    return data


def progress_from_dict(data: dict) -> ProgressState:
    """Rebuild a ProgressState. Raises ValueError on malformed data."""
    if not isinstance(data, dict):
        raise ValueError(f"Expected a mapping, got {type(data).__name__}")
    state = ProgressState()
    for name in _COUNTERS:
        if name in data:
            value = data[name]
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValueError(f"{name} must be a non-negative integer, got {value!r}")
            setattr(state, name, value)
    if state.today_correct > state.today_answered or state.total_correct > state.total_answered:
        raise ValueError("More correct answers than answers recorded")
    if "daily_goal" in data:
        set_daily_goal(state, data["daily_goal"])
    raw_date = data.get("last_study_date")
    if raw_date is not None:
        try:
            state.last_study_date = date.fromisoformat(raw_date)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Bad last_study_date {raw_date!r}") from e
    ids = data.get("answered_question_ids") or []
    if not isinstance(ids, list):
        raise ValueError("answered_question_ids must be a list")
    state.answered_question_ids = {str(i) for i in ids}
    state.longest_streak = max(state.longest_streak, state.current_streak)
    return state


def load_progress(db_path: str) -> ProgressState:
    data = load_blob(db_path, PROGRESS_KEY)
    if data is None:
        return ProgressState(daily_goal=DEFAULT_DAILY_GOAL)
    try:
        return progress_from_dict(data)
    except ValueError as e:
        log.warning("Discarding stored progress: %s", e)
        return ProgressState(daily_goal=DEFAULT_DAILY_GOAL)


def save_progress(db_path: str, state: ProgressState) -> bool:
    return save_blob(db_path, PROGRESS_KEY, progress_to_dict(state))

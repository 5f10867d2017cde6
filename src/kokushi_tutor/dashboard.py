"""Daily goal, accuracy and coverage statistics."""
from collections import Counter
from datetime import date

from kokushi_tutor.models import ProgressState, Question
from kokushi_tutor.progress import today_counts


def get_accuracy_label(score: float) -> str:
    if score >= 80:
        return "READY"
    elif score >= 65:
        return "LIKELY"
    elif score >= 50:
        return "NEEDS WORK"
    return "NOT READY"


def get_accuracy_color(score: float) -> str:
    if score >= 80:
        return "green"
    elif score >= 65:
        return "yellow"
    elif score >= 50:
        return "dark_orange"
    return "red"


def daily_progress_percent(state: ProgressState, today: date | None = None) -> float:
    answered, _ = today_counts(state, today)
    return min(answered / state.daily_goal * 100, 100.0)


def accuracy_percent(answered: int, correct: int) -> int:
    if answered == 0:
        return 0
    return round(correct / answered * 100)


def is_goal_reached(state: ProgressState, today: date | None = None) -> bool:
    answered, _ = today_counts(state, today)
    return answered >= state.daily_goal


def get_study_stats(state: ProgressState, questions: list[Question], today: date | None = None) -> dict:
    answered, correct = today_counts(state, today)
    known_ids = {q.id for q in questions}
    covered = len(state.answered_question_ids & known_ids)
    return {
        "today_answered": answered,
        "today_correct": correct,
        "today_accuracy": accuracy_percent(answered, correct),
        "daily_goal": state.daily_goal,
        "goal_reached": answered >= state.daily_goal,
        "total_answered": state.total_answered,
        "total_correct": state.total_correct,
        "total_accuracy": accuracy_percent(state.total_answered, state.total_correct),
        "current_streak": state.current_streak,
        "longest_streak": state.longest_streak,
        "questions_seen": covered,
        "coverage": round(covered / len(known_ids) * 100, 1) if known_ids else 0.0,
    }


def get_year_breakdown(state: ProgressState, questions: list[Question]) -> list[dict]:
    """Per sitting: how many of its questions have been answered at least once. Newest first."""
    totals = Counter(q.year for q in questions)
    seen = Counter(q.year for q in questions if q.id in state.answered_question_ids)
    results = []
    for year in sorted(totals, reverse=True):
        results.append({
            "year": year,
            "total": totals[year],
            "answered": seen[year],
            "coverage": round(seen[year] / totals[year] * 100, 1),
        })
    return results

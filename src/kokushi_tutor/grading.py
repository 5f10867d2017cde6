"""Answer checking for the different question types."""
import re

from kokushi_tutor.models import Question

CALCULATION_PATTERN = re.compile(r"^[0-9.]+$")
ORDERING_PATTERN = re.compile(r"^[A-Ea-e]{5}$")


def question_type(question: Question) -> str:
    """One of "calculation", "ordering" or "normal"."""
    if CALCULATION_PATTERN.match(question.answer.strip()):
        return "calculation"
    if ORDERING_PATTERN.match(question.answer):
        return "ordering"
    return "normal"


def correct_choices(question: Question) -> list[str]:
    return [c for c in question.answer.lower() if c in "abcde"]


def _typed(selected) -> str:
    return selected if isinstance(selected, str) else "".join(selected)


def check_answer(question: Question, selected) -> bool:
    """Grade one answer.

    Normal questions take the picked choice letters and need exactly the
    correct ones. Ordering questions take the typed letter sequence, and
    calculation questions the typed value.
    """
    kind = question_type(question)
    if kind == "calculation":
        return _typed(selected).strip() == question.answer.strip()
    if kind == "ordering":
        sequence = "".join(c for c in _typed(selected).lower() if c in "abcde")
        return sequence == question.answer.lower()
    picked = {s.lower().strip() for s in selected}
    correct = correct_choices(question)
    if not correct:
        return False
    return len(correct) == len(picked) and all(c in picked for c in correct)


def is_correct_choice(question: Question, key: str) -> bool:
    if question_type(question) != "normal":
        return False
    return key.lower() in question.answer.lower()


def format_ordering_answer(question: Question) -> str:
    return "→".join(
        question.choices.get(key, key.upper()) for key in question.answer.lower()
    )


def sorted_choices(question: Question) -> list[tuple[str, str]]:
    return sorted(question.choices.items())

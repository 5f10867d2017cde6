"""Question filtering: identifier lookup first, then keyword and structured filters."""
import re

from kokushi_tutor.core_topics import CORE_TOPIC_RANGES, is_core_topic
from kokushi_tutor.identifiers import DEFAULT_YEAR_RANGE, parse_complete, parse_partial
from kokushi_tutor.models import FilterSpec, Question

# Half-width and full-width (U+3000) spaces both separate keywords.
KEYWORD_SPLIT = re.compile(r"[\s　]+")


def split_keywords(text: str) -> list[str]:
    return [kw for kw in KEYWORD_SPLIT.split(text.strip()) if kw]


def matches_keywords(question: Question, keywords: list[str]) -> bool:
    """Every keyword must appear in the question text or in one of the choices."""
    question_text = question.question_text.lower()
    choice_texts = [c.lower() for c in question.choices.values()]
    for keyword in keywords:
        kw = keyword.lower()
        if kw in question_text:
            continue
        if any(kw in c for c in choice_texts):
            continue
        return False
    return True


def find_by_id(questions: list[Question], text: str) -> list[Question]:
    wanted = text.strip().lower()
    if not wanted:
        return []
    return [q for q in questions if q.id.lower() == wanted]


def filter_questions(
    questions: list[Question],
    spec: FilterSpec,
    year_range: tuple = DEFAULT_YEAR_RANGE,
    core_ranges: tuple = CORE_TOPIC_RANGES,
) -> list[Question]:
    """Return the questions matching spec, in input order.

    A search text that reads as a question identifier (complete, exact id,
    or partial) takes precedence and the remaining filters are ignored.
    """
    text = spec.search_text.strip()

    parsed = parse_complete(text)
    if parsed:
        return [
            q for q in questions
            if q.year == parsed.year and q.session == parsed.session and q.number == parsed.number
        ]

    exact = find_by_id(questions, text)
    if exact:
        return exact

    partial = parse_partial(text, year_range)
    if partial:
        return [
            q for q in questions
            if q.year in partial.years and (partial.session is None or q.session == partial.session)
        ]

    keywords = split_keywords(text)
    results = []
    for q in questions:
        if spec.core_topic_only and not is_core_topic(q.year, q.session, q.number, core_ranges):
            continue
        if spec.selected_years and q.year not in spec.selected_years:
            continue
        if spec.sessions and q.session not in spec.sessions:
            continue
        if keywords and not matches_keywords(q, keywords):
            continue
        results.append(q)
    return results

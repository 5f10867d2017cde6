"""Build the question feed from a keyword search, a folder or a custom tab."""
import random

from kokushi_tutor.identifiers import DEFAULT_YEAR_RANGE
from kokushi_tutor.models import FilterSpec, FolderRef, Keyword, Question, TabRef
from kokushi_tutor.search import filter_questions
from kokushi_tutor.stores import CustomTabStore, FolderStore

ORDERS = ("newest", "random")


def order_questions(questions: list[Question], order: str = "newest", rng=None) -> list[Question]:
    """Newest sitting first (session and number descending within it), or shuffled."""
    if order not in ORDERS:
        raise ValueError(f"Unknown order {order!r}, expected one of {ORDERS}")
    result = list(questions)
    if order == "random":
        (rng or random).shuffle(result)
        return result
    result.sort(key=lambda q: (q.year, q.session, q.number), reverse=True)
    return result


def folder_questions(questions: list[Question], folders: FolderStore, folder_id: str) -> list[Question]:
    """Folder contents, most recently added first. Ids missing from the corpus are skipped."""
    folder = folders.get(folder_id)
    if folder is None:
        return []
    by_id = {q.id: q for q in questions}
    return [by_id[qid] for qid in reversed(folder.question_ids) if qid in by_id]


def tab_questions(
    questions: list[Question], tabs: CustomTabStore, tab_id: str, subject_index: dict
) -> list[Question]:
    tab = tabs.get(tab_id)
    if tab is None:
        return list(questions)
    wanted = set()
    for subject_id in tab.subject_ids:
        wanted |= subject_index.get(subject_id, frozenset())
    return [q for q in questions if q.id in wanted]


def load_feed(
    questions: list[Question],
    feed,
    folders: FolderStore,
    tabs: CustomTabStore,
    subject_index: dict,
    order: str = "newest",
    year_range: tuple = DEFAULT_YEAR_RANGE,
    rng=None,
) -> list[Question]:
    match feed:
        case Keyword(text=text, years=years, core_topic_only=core_only):
            spec = FilterSpec(search_text=text, selected_years=frozenset(years), core_topic_only=core_only)
            return order_questions(filter_questions(questions, spec, year_range), order, rng)
        case FolderRef(folder_id=folder_id):
            return folder_questions(questions, folders, folder_id)
        case TabRef(tab_id=tab_id):
            return order_questions(tab_questions(questions, tabs, tab_id, subject_index), order, rng)
        case _:
            raise TypeError(f"Unsupported feed source: {feed!r}")

"""The study session: owns the corpus, progress and collections for one user."""
import logging
from datetime import date

from kokushi_tutor.corpus import Corpus
from kokushi_tutor.db import init_db
from kokushi_tutor.feed import load_feed, order_questions
from kokushi_tutor.grading import check_answer
from kokushi_tutor.models import FilterSpec, Question
from kokushi_tutor.progress import load_progress, record_answer, save_progress, set_daily_goal
from kokushi_tutor.search import filter_questions
from kokushi_tutor.stores import (
    CustomTabStore, Favorites, Flashcards, FolderStore, SearchHistory, load_store, save_store,
)
from kokushi_tutor.subjects import build_subject_index

log = logging.getLogger(__name__)


class StudySession:
    """Loads every store on construction and writes each one back when it changes.

    Use as a context manager to guarantee a final flush.
    """

    def __init__(self, db_path: str, corpus: Corpus, clock=date.today):
        self.db_path = db_path
        self.corpus = corpus
        self.clock = clock
        init_db(db_path)
        self.subject_index = build_subject_index(corpus.questions)
        self.progress = load_progress(db_path)
        self.favorites = load_store(db_path, Favorites)
        self.flashcards = load_store(db_path, Flashcards)
        self.folders = load_store(db_path, FolderStore)
        self.history = load_store(db_path, SearchHistory)
        self.tabs = load_store(db_path, CustomTabStore)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    @property
    def questions(self) -> list[Question]:
        return self.corpus.questions

    def _stores(self):
        return (self.favorites, self.flashcards, self.folders, self.history, self.tabs)

    def flush(self) -> bool:
        ok = save_progress(self.db_path, self.progress)
        for store in self._stores():
            ok = save_store(self.db_path, store) and ok
        return ok

    def close(self) -> None:
        if not self.flush():
            log.warning("Some study data could not be saved to %s", self.db_path)

    # --- Searching ---

    def search(self, spec: FilterSpec, order: str | None = None) -> list[Question]:
        """Filter the corpus; non-blank search text is remembered in the history."""
        if spec.search_text.strip():
            self.history.add(spec.search_text.strip())
            save_store(self.db_path, self.history)
        results = filter_questions(self.questions, spec, self.corpus.year_range)
        if order:
            results = order_questions(results, order)
        return results

    def load_feed(self, feed, order: str = "newest", rng=None) -> list[Question]:
        return load_feed(
            self.questions, feed, self.folders, self.tabs, self.subject_index,
            order=order, year_range=self.corpus.year_range, rng=rng,
        )

    def remove_search(self, keyword: str) -> None:
        self.history.remove(keyword)
        save_store(self.db_path, self.history)

    def clear_history(self) -> None:
        self.history.clear()
        save_store(self.db_path, self.history)

    # --- Progress ---

    def record_answer(self, question_id: str, is_correct: bool) -> None:
        record_answer(self.progress, question_id, is_correct, today=self.clock())
        save_progress(self.db_path, self.progress)

    def answer_question(self, question: Question, selected) -> bool:
        is_correct = check_answer(question, selected)
        self.record_answer(question.id, is_correct)
        return is_correct

    def set_daily_goal(self, goal: int) -> None:
        set_daily_goal(self.progress, goal)
        save_progress(self.db_path, self.progress)

    # --- Collections ---

    def toggle_favorite(self, question_id: str) -> bool:
        now_favorite = self.favorites.toggle(question_id)
        save_store(self.db_path, self.favorites)
        return now_favorite

    def add_flashcard(self, question_id: str) -> None:
        self.flashcards.add(question_id)
        save_store(self.db_path, self.flashcards)

    def remove_flashcard(self, question_id: str) -> None:
        self.flashcards.remove(question_id)
        save_store(self.db_path, self.flashcards)

    def create_folder(self, name: str, color: str | None = None) -> str:
        folder_id = self.folders.create(name, color) if color else self.folders.create(name)
        save_store(self.db_path, self.folders)
        return folder_id

    def delete_folder(self, folder_id: str) -> None:
        self.folders.delete(folder_id)
        save_store(self.db_path, self.folders)

    def rename_folder(self, folder_id: str, name: str) -> None:
        self.folders.rename(folder_id, name)
        save_store(self.db_path, self.folders)

    def add_to_folder(self, folder_id: str, question_id: str) -> None:
        self.folders.add_question(folder_id, question_id)
        save_store(self.db_path, self.folders)

    def remove_from_folder(self, folder_id: str, question_id: str) -> None:
        self.folders.remove_question(folder_id, question_id)
        save_store(self.db_path, self.folders)

    def add_tab(self, name: str, subject_ids: list, color: str | None = None) -> str:
        tab_id = self.tabs.add(name, subject_ids, color) if color else self.tabs.add(name, subject_ids)
        save_store(self.db_path, self.tabs)
        return tab_id

    def remove_tab(self, tab_id: str) -> None:
        self.tabs.remove(tab_id)
        save_store(self.db_path, self.tabs)

    def update_tab(self, tab_id: str, **updates) -> None:
        self.tabs.update(tab_id, **updates)
        save_store(self.db_path, self.tabs)

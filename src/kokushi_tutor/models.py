"""Data classes for the question bank and study state."""
from dataclasses import dataclass, field
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class Question:
    id: str
    year: int
    session: str
    number: int
    question_text: str
    choices: dict
    choice_count: int = 1
    answer: str = ""
    has_figure: bool = False
    images: tuple = ()
    is_excluded: bool = False
    figure_refs: tuple = ()
    category: Optional[str] = None
    subcategory: Optional[str] = None
    keywords: tuple = ()

    def __hash__(self):
        return hash(self.id)


@dataclass(frozen=True)
class CorpusMeta:
    total_count: int
    with_images_count: int
    year_min: int
    year_max: int
    version: str = ""
    last_updated: str = ""


@dataclass(frozen=True)
class FilterSpec:
    search_text: str = ""
    selected_years: frozenset = frozenset()
    sessions: frozenset = frozenset()
    core_topic_only: bool = False


@dataclass
class ProgressState:
    current_streak: int = 0
    longest_streak: int = 0
    last_study_date: Optional[date] = None
    today_answered: int = 0
    today_correct: int = 0
    daily_goal: int = 20
    total_answered: int = 0
    total_correct: int = 0
    answered_question_ids: set = field(default_factory=set)


@dataclass
class Folder:
    id: str
    name: str
    color: str = "#3B82F6"
    question_ids: list = field(default_factory=list)
    created_at: int = 0


@dataclass
class CustomTab:
    id: str
    name: str
    subject_ids: list = field(default_factory=list)
    color: str = "#3B82F6"
    created_at: int = 0


@dataclass(frozen=True)
class Subject:
    id: str
    name: str
    display_name: str
    color: str


@dataclass(frozen=True)
class Explanation:
    id: str
    original_id: str = ""
    subject: str = ""
    dialogue: str = ""
    points: Optional[str] = None
    table_title: Optional[str] = None
    table_content: Optional[str] = None


# Feed sources: what the question list on screen was loaded from.

@dataclass(frozen=True)
class Keyword:
    text: str = ""
    years: frozenset = frozenset()
    core_topic_only: bool = False


@dataclass(frozen=True)
class FolderRef:
    folder_id: str


@dataclass(frozen=True)
class TabRef:
    tab_id: str

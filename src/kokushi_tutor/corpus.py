"""Load the merged question corpus and its explanations."""
import json
import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path

from kokushi_tutor.identifiers import DEFAULT_YEAR_RANGE
from kokushi_tutor.models import CorpusMeta, Explanation, Question

log = logging.getLogger(__name__)

DATA_DIR = Path.home() / ".kokushi_tutor"
DEFAULT_CORPUS_PATH = os.environ.get("KOKUSHI_TUTOR_CORPUS", str(DATA_DIR / "questions.json"))
DEFAULT_EXPLANATIONS_PATH = os.environ.get(
    "KOKUSHI_TUTOR_EXPLANATIONS", str(DATA_DIR / "explanations.json")
)

SESSIONS = ("A", "B", "C", "D")


class CorpusError(ValueError):
    """The corpus file does not have the expected shape."""


@dataclass
class Corpus:
    questions: list
    meta: CorpusMeta
    _by_id: dict = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self):
        self._by_id = {q.id: q for q in self.questions}

    def find(self, question_id: str) -> Question | None:
        return self._by_id.get(question_id)

    @property
    def year_range(self) -> tuple:
        if not self.questions:
            return DEFAULT_YEAR_RANGE
        return (self.meta.year_min, self.meta.year_max)

    @property
    def sessions(self) -> tuple:
        return SESSIONS


def read_data_file(file_path: str):
    path = Path(file_path)
    suffix = path.suffix.lower()
    if suffix in (".yaml", ".yml"):
        import yaml
        return yaml.safe_load(path.read_text(encoding="utf-8"))
    return json.loads(path.read_text(encoding="utf-8"))


def question_from_dict(raw: dict) -> Question:
    """Build a Question from one record of the merged dataset (camelCase keys)."""
    choices = raw.get("choices") or {}
    return Question(
        id=str(raw["id"]),
        year=int(raw["year"]),
        session=str(raw["session"]).upper(),
        number=int(raw["number"]),
        question_text=raw.get("questionText") or "",
        choices={str(k).lower(): str(v) for k, v in choices.items()},
        choice_count=int(raw.get("choiceCount") or 1),
        answer=raw.get("answer") or "",
        has_figure=bool(raw.get("hasFigure", False)),
        images=tuple(raw.get("images") or ()),
        is_excluded=bool(raw.get("isExcluded", False)),
        figure_refs=tuple(raw.get("figureRefs") or ()),
        category=raw.get("category"),
        subcategory=raw.get("subcategory"),
        keywords=tuple(raw.get("keywords") or ()),
    )


def is_valid_question(q: Question) -> bool:
    """Displayable: has text and choices, and an answer unless scored out."""
    return bool(q.question_text and q.choices and (q.answer or q.is_excluded))


def summarize(questions: list[Question]) -> CorpusMeta:
    years = [q.year for q in questions]
    return CorpusMeta(
        total_count=len(questions),
        with_images_count=sum(1 for q in questions if q.images),
        year_min=min(years) if years else DEFAULT_YEAR_RANGE[0],
        year_max=max(years) if years else DEFAULT_YEAR_RANGE[1],
    )


def _meta_from_dict(raw: dict, questions: list[Question]) -> CorpusMeta:
    computed = summarize(questions)
    year_range = raw.get("yearRange") or {}
    return CorpusMeta(
        total_count=int(raw.get("totalCount", computed.total_count)),
        with_images_count=int(raw.get("withImagesCount", computed.with_images_count)),
        year_min=int(year_range.get("min", computed.year_min)),
        year_max=int(year_range.get("max", computed.year_max)),
        version=str(raw.get("version", "")),
        last_updated=str(raw.get("lastUpdated", "")),
    )


def build_corpus(data) -> Corpus:
    """Build a Corpus from decoded file content: a mapping with questions, or a bare list."""
    if isinstance(data, list):
        records, raw_meta = data, None
    elif isinstance(data, dict) and isinstance(data.get("questions"), list):
        records, raw_meta = data["questions"], data.get("meta")
    else:
        raise CorpusError("Corpus must be a list of questions or a mapping with a 'questions' list")

    questions = []
    skipped = 0
    for raw in records:
        try:
            q = question_from_dict(raw)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            log.warning("Skipping malformed question record: %s", e)
            continue
        if is_valid_question(q):
            questions.append(q)
        else:
            skipped += 1
    if skipped:
        log.info("Filtered out %d questions without text, choices or answer", skipped)

    meta = _meta_from_dict(raw_meta, questions) if isinstance(raw_meta, dict) else summarize(questions)
    return Corpus(questions=questions, meta=meta)


def load_corpus(file_path: str = DEFAULT_CORPUS_PATH) -> Corpus:
    corpus = build_corpus(read_data_file(file_path))
    log.info("Loaded %d questions from %s", len(corpus.questions), file_path)
    return corpus


def normalize_question_id(question_id: str) -> str:
    return re.sub(r"[-\s]", "", question_id)


def load_explanations(file_path: str = DEFAULT_EXPLANATIONS_PATH) -> dict:
    """Explanations keyed by normalized question id. A missing file gives an empty map."""
    if not Path(file_path).exists():
        return {}
    data = read_data_file(file_path)
    if not isinstance(data, dict):
        raise CorpusError("Explanations file must be a mapping of question id to explanation")
    explanations = {}
    for key, raw in data.items():
        explanations[normalize_question_id(key)] = Explanation(
            id=str(raw.get("id", key)),
            original_id=str(raw.get("originalId", "")),
            subject=str(raw.get("subject", "")),
            dialogue=str(raw.get("dialogue", "")),
            points=raw.get("points"),
            table_title=raw.get("tableTitle"),
            table_content=raw.get("tableContent"),
        )
    return explanations


def get_explanation(explanations: dict, question_id: str) -> Explanation | None:
    return explanations.get(normalize_question_id(question_id))


def has_explanation(explanations: dict, question_id: str) -> bool:
    return normalize_question_id(question_id) in explanations

"""Per-user question collections: favorites, flashcards, folders, search history, custom tabs."""
import logging
import time
import uuid

from kokushi_tutor.db import load_blob, save_blob
from kokushi_tutor.models import CustomTab, Folder

log = logging.getLogger(__name__)

MAX_HISTORY = 20
DEFAULT_COLOR = "#3B82F6"
BOOKMARK_FOLDER_ID = "bookmark"


def _now_ms() -> int:
    return int(time.time() * 1000)


class IdListStore:
    """An ordered list of question ids without duplicates."""

    key = ""

    def __init__(self, ids=None):
        self.ids = list(dict.fromkeys(ids or []))

    def add(self, question_id: str) -> None:
        if question_id not in self.ids:
            self.ids.append(question_id)

    def remove(self, question_id: str) -> None:
        self.ids = [i for i in self.ids if i != question_id]

    def __contains__(self, question_id) -> bool:
        return question_id in self.ids

    def __len__(self) -> int:
        return len(self.ids)

    def clear(self) -> None:
        self.ids = []

    def to_dict(self) -> dict:
        return {"ids": list(self.ids)}

    @classmethod
    def from_dict(cls, data: dict):
        ids = data.get("ids", [])
        if not isinstance(ids, list):
            raise ValueError("ids must be a list")
        return cls([str(i) for i in ids])


class Favorites(IdListStore):
    key = "kokushi-favorites"

    def toggle(self, question_id: str) -> bool:
        """Flip membership; returns True if the question is now a favorite."""
        if question_id in self.ids:
            self.remove(question_id)
            return False
        self.add(question_id)
        return True


class Flashcards(IdListStore):
    key = "kokushi-flashcards"


class SearchHistory:
    """Recent searches, newest first."""

    key = "kokushi-search-history"

    def __init__(self, entries=None):
        self.entries = list(entries or [])[:MAX_HISTORY]

    def add(self, keyword: str) -> None:
        if not keyword.strip():
            return
        rest = [h for h in self.entries if h != keyword]
        self.entries = [keyword] + rest[: MAX_HISTORY - 1]

    def remove(self, keyword: str) -> None:
        self.entries = [h for h in self.entries if h != keyword]

    def clear(self) -> None:
        self.entries = []

    def to_dict(self) -> dict:
        return {"entries": list(self.entries)}

    @classmethod
    def from_dict(cls, data: dict):
        entries = data.get("entries", [])
        if not isinstance(entries, list):
            raise ValueError("entries must be a list")
        return cls([str(e) for e in entries])


def default_folders() -> list[Folder]:
    return [Folder(id=BOOKMARK_FOLDER_ID, name="ブックマーク", color=DEFAULT_COLOR)]


class FolderStore:
    key = "kokushi-folders"

    def __init__(self, folders=None):
        self.folders = default_folders() if folders is None else list(folders)

    def get(self, folder_id: str) -> Folder | None:
        for folder in self.folders:
            if folder.id == folder_id:
                return folder
        return None

    def create(self, name: str, color: str = DEFAULT_COLOR) -> str:
        folder_id = f"folder-{uuid.uuid4().hex[:12]}"
        self.folders.append(Folder(id=folder_id, name=name, color=color, created_at=_now_ms()))
        return folder_id

    def delete(self, folder_id: str) -> None:
        self.folders = [f for f in self.folders if f.id != folder_id]

    def rename(self, folder_id: str, name: str) -> None:
        folder = self.get(folder_id)
        if folder:
            folder.name = name

    def add_question(self, folder_id: str, question_id: str) -> None:
        folder = self.get(folder_id)
        if folder and question_id not in folder.question_ids:
            folder.question_ids.append(question_id)

    def remove_question(self, folder_id: str, question_id: str) -> None:
        folder = self.get(folder_id)
        if folder:
            folder.question_ids = [q for q in folder.question_ids if q != question_id]

    def folders_for_question(self, question_id: str) -> list[Folder]:
        return [f for f in self.folders if question_id in f.question_ids]

    def to_dict(self) -> dict:
        return {
            "folders": [
                {
                    "id": f.id, "name": f.name, "color": f.color,
                    "question_ids": list(f.question_ids), "created_at": f.created_at,
                }
                for f in self.folders
            ]
        }

    @classmethod
    def from_dict(cls, data: dict):
        raw = data.get("folders")
        if raw is None:
            return cls()
        if not isinstance(raw, list):
            raise ValueError("folders must be a list")
        try:
            folders = [
                Folder(
                    id=str(f["id"]),
                    name=str(f["name"]),
                    color=f.get("color", DEFAULT_COLOR),
                    question_ids=[str(q) for q in f.get("question_ids", [])],
                    created_at=int(f.get("created_at", 0)),
                )
                for f in raw
            ]
        except (KeyError, TypeError, AttributeError) as e:
            raise ValueError(f"Malformed folder entry: {e}") from e
        return cls(folders)


class CustomTabStore:
    key = "kokushi-custom-tabs"
    editable = ("name", "subject_ids", "color")

    def __init__(self, tabs=None):
        self.tabs = list(tabs or [])

    def get(self, tab_id: str) -> CustomTab | None:
        for tab in self.tabs:
            if tab.id == tab_id:
                return tab
        return None

    def add(self, name: str, subject_ids: list, color: str = DEFAULT_COLOR) -> str:
        tab_id = f"custom_{uuid.uuid4().hex[:12]}"
        self.tabs.append(CustomTab(
            id=tab_id, name=name, subject_ids=list(subject_ids), color=color, created_at=_now_ms(),
        ))
        return tab_id

    def remove(self, tab_id: str) -> None:
        self.tabs = [t for t in self.tabs if t.id != tab_id]

    def update(self, tab_id: str, **updates) -> None:
        unknown = set(updates) - set(self.editable)
        if unknown:
            raise ValueError(f"Cannot update tab fields: {', '.join(sorted(unknown))}")
        tab = self.get(tab_id)
        if tab is None:
            return
        for name, value in updates.items():
            setattr(tab, name, list(value) if name == "subject_ids" else value)

    def to_dict(self) -> dict:
        return {
            "tabs": [
                {
                    "id": t.id, "name": t.name, "subject_ids": list(t.subject_ids),
                    "color": t.color, "created_at": t.created_at,
                }
                for t in self.tabs
            ]
        }

    @classmethod
    def from_dict(cls, data: dict):
        raw = data.get("tabs", [])
        if not isinstance(raw, list):
            raise ValueError("tabs must be a list")
        try:
            tabs = [
                CustomTab(
                    id=str(t["id"]),
                    name=str(t["name"]),
                    subject_ids=[str(s) for s in t.get("subject_ids", [])],
                    color=t.get("color", DEFAULT_COLOR),
                    created_at=int(t.get("created_at", 0)),
                )
                for t in raw
            ]
        except (KeyError, TypeError, AttributeError) as e:
            raise ValueError(f"Malformed tab entry: {e}") from e
        return cls(tabs)


def load_store(db_path: str, store_cls):
    """Load a store from the database, falling back to an empty one."""
    data = load_blob(db_path, store_cls.key)
    if data is None:
        return store_cls()
    try:
        if not isinstance(data, dict):
            raise ValueError(f"Expected a mapping, got {type(data).__name__}")
        return store_cls.from_dict(data)
    except ValueError as e:
        log.warning("Discarding stored %s: %s", store_cls.key, e)
        return store_cls()


def save_store(db_path: str, store) -> bool:
    return save_blob(db_path, store.key, store.to_dict())

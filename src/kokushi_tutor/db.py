"""Local key-value store: one JSON blob per key in a SQLite file."""
import json
import logging
import os
import sqlite3
from pathlib import Path

log = logging.getLogger(__name__)

DEFAULT_DB_PATH = os.environ.get(
    "KOKUSHI_TUTOR_DB", str(Path.home() / ".kokushi_tutor" / "tutor.db")
)

SCHEMA = """
CREATE TABLE IF NOT EXISTS kv_store (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    key TEXT NOT NULL UNIQUE,
    value TEXT,
    updated_at TEXT DEFAULT CURRENT_TIMESTAMP
);
"""


def get_connection(db_path: str = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Return a SQLite connection with row factory enabled."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def init_db(db_path: str = DEFAULT_DB_PATH) -> None:
    """Initialize the database, creating the store table if it doesn't exist."""
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = get_connection(db_path)
    conn.executescript(SCHEMA)
    conn.commit()
    conn.close()


def load_blob(db_path: str, key: str, default=None):
    """Return the decoded value stored under key, or default.

    A missing key, unreadable database or corrupt JSON all yield default.
    """
    try:
        conn = get_connection(db_path)
        try:
            row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
        finally:
            conn.close()
    except sqlite3.Error as e:
        log.warning("Could not read %s from %s: %s", key, db_path, e)
        return default
    if row is None or row["value"] is None:
        return default
    try:
        return json.loads(row["value"])
    except json.JSONDecodeError as e:
        log.warning("Corrupt blob under %s, using default: %s", key, e)
        return default


def save_blob(db_path: str, key: str, value) -> bool:
    """Replace the blob stored under key. Returns False if the write failed."""
    payload = json.dumps(value, ensure_ascii=False)
    try:
        conn = get_connection(db_path)
        try:
            conn.execute(
                """INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=CURRENT_TIMESTAMP""",
                (key, payload),
            )
            conn.commit()
        finally:
            conn.close()
    except sqlite3.Error as e:
        log.error("Could not write %s to %s: %s", key, db_path, e)
        return False
    log.debug("Saved %s (%d bytes)", key, len(payload))
    return True


def delete_blob(db_path: str, key: str) -> None:
    conn = get_connection(db_path)
    conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
    conn.commit()
    conn.close()


def list_keys(db_path: str) -> list[str]:
    conn = get_connection(db_path)
    rows = conn.execute("SELECT key FROM kv_store ORDER BY key").fetchall()
    conn.close()
    return [row["key"] for row in rows]

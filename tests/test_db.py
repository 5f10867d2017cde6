"""Tests for the key-value store."""
from kokushi_tutor.db import (
    delete_blob, get_connection, init_db, list_keys, load_blob, save_blob,
)


def test_init_db_creates_tables(tmp_db):
    init_db(tmp_db)
    conn = get_connection(tmp_db)
    cursor = conn.execute("SELECT name FROM sqlite_master WHERE type='table' ORDER BY name")
    tables = {row[0] for row in cursor.fetchall()}
    assert "kv_store" in tables
    conn.close()


def test_init_db_is_idempotent(tmp_db):
    init_db(tmp_db)
    init_db(tmp_db)  # should not raise
    assert list_keys(tmp_db) == []


def test_init_db_creates_parent_directory(tmp_path):
    db_path = str(tmp_path / "nested" / "dir" / "tutor.db")
    init_db(db_path)
    assert (tmp_path / "nested" / "dir" / "tutor.db").exists()


def test_save_and_load_blob(tmp_db):
    init_db(tmp_db)
    assert save_blob(tmp_db, "kokushi-favorites", {"ids": ["112A1", "118D3"]}) is True
    assert load_blob(tmp_db, "kokushi-favorites") == {"ids": ["112A1", "118D3"]}


def test_save_blob_replaces_whole_value(tmp_db):
    init_db(tmp_db)
    save_blob(tmp_db, "k", {"a": 1, "b": 2})
    save_blob(tmp_db, "k", {"c": 3})
    assert load_blob(tmp_db, "k") == {"c": 3}
    assert list_keys(tmp_db) == ["k"]


def test_blob_keeps_non_ascii_text(tmp_db):
    init_db(tmp_db)
    save_blob(tmp_db, "kokushi-search-history", {"entries": ["齲蝕 窩洞"]})
    conn = get_connection(tmp_db)
    raw = conn.execute("SELECT value FROM kv_store WHERE key = 'kokushi-search-history'").fetchone()["value"]
    conn.close()
    assert "齲蝕" in raw
    assert load_blob(tmp_db, "kokushi-search-history") == {"entries": ["齲蝕 窩洞"]}


def test_load_blob_missing_key_returns_default(tmp_db):
    init_db(tmp_db)
    assert load_blob(tmp_db, "nope") is None
    assert load_blob(tmp_db, "nope", default={"x": 1}) == {"x": 1}


def test_load_blob_corrupt_returns_default(tmp_db):
    init_db(tmp_db)
    conn = get_connection(tmp_db)
    conn.execute("INSERT INTO kv_store (key, value) VALUES ('bad', '{oops')")
    conn.commit()
    conn.close()
    assert load_blob(tmp_db, "bad", default=[]) == []


def test_load_blob_without_table_returns_default(tmp_db):
    assert load_blob(tmp_db, "anything", default="fallback") == "fallback"


def test_save_blob_failure_returns_false(tmp_db):
    # no kv_store table yet
    assert save_blob(tmp_db, "k", {"a": 1}) is False


def test_delete_blob(tmp_db):
    init_db(tmp_db)
    save_blob(tmp_db, "k", [1, 2])
    delete_blob(tmp_db, "k")
    assert load_blob(tmp_db, "k") is None

"""Tests for the SQLite settings store and MemoryStore."""

from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from wellnest.storage import MemoryStore, SettingsStore


@pytest.fixture()
def db(tmp_path: Path) -> Path:
    return tmp_path / "wellnest.db"


# ---- SettingsStore ----


def test_missing_key_returns_default(db):
    store = SettingsStore(db)
    assert store.get("current_mood") is None
    assert store.get("current_mood", 3) == 3


def test_set_then_get(db):
    store = SettingsStore(db)
    store.set("completed_goal_ids", ["3", "6"])
    assert store.get("completed_goal_ids") == ["3", "6"]


def test_values_survive_a_new_instance(db):
    SettingsStore(db).set("current_mood", 4)
    assert SettingsStore(db).get("current_mood") == 4


def test_set_overwrites(db):
    store = SettingsStore(db)
    store.set("current_mood", 2)
    store.set("current_mood", 5)
    assert store.get("current_mood") == 5


def test_creates_parent_dirs(tmp_path):
    deep = tmp_path / "a" / "b" / "wellnest.db"
    SettingsStore(deep).set("x", 1)
    assert deep.exists()


def test_corrupt_value_returns_default(db):
    store = SettingsStore(db)
    conn = sqlite3.connect(db)
    conn.execute("INSERT INTO settings (key, value) VALUES (?, ?)", ("current_mood", "{not json"))
    conn.commit()
    conn.close()
    assert store.get("current_mood", 3) == 3


def test_unopenable_database_never_raises(tmp_path):
    # a directory cannot be opened as a database file
    store = SettingsStore(tmp_path)
    assert store.get("current_mood", 3) == 3
    store.set("current_mood", 4)
    assert store.get("current_mood", 3) == 3


# ---- records ----


def test_records_keep_append_order(db):
    store = SettingsStore(db)
    for goal_id in ("3", "6", "3"):
        store.append("completed_goal_ids", goal_id)
    assert store.get_list("completed_goal_ids") == ["3", "6", "3"]
    assert store.get_list("mood_history") == []


def test_appends_from_two_instances_interleave(db):
    first, second = SettingsStore(db), SettingsStore(db)
    first.append("mood_history", {"mood": 4})
    second.append("mood_history", {"mood": 2})
    first.append("mood_history", {"mood": 5})
    assert SettingsStore(db).get_list("mood_history") == [{"mood": 4}, {"mood": 2}, {"mood": 5}]


def test_corrupt_record_is_skipped(db):
    store = SettingsStore(db)
    store.append("ids", "1")
    conn = sqlite3.connect(db)
    conn.execute("INSERT INTO records (key, value) VALUES (?, ?)", ("ids", "{not json"))
    conn.commit()
    conn.close()
    store.append("ids", "2")
    assert store.get_list("ids") == ["1", "2"]


def test_unopenable_database_has_no_records(tmp_path):
    store = SettingsStore(tmp_path)
    store.append("ids", "1")
    assert store.get_list("ids") == []


# ---- MemoryStore ----


def test_memory_store_roundtrip():
    store = MemoryStore()
    store.set("k", {"a": [1, 2]})
    assert store.get("k") == {"a": [1, 2]}


def test_memory_store_returns_copies():
    store = MemoryStore({"ids": ["1"]})
    store.get("ids").append("2")
    assert store.get("ids") == ["1"]


def test_memory_store_default():
    assert MemoryStore().get("nope", 7) == 7


def test_memory_store_records():
    store = MemoryStore()
    store.append("ids", "1")
    store.append("ids", "2")
    assert store.get_list("ids") == ["1", "2"]
    assert store.get_list("other") == []

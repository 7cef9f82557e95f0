# FILE: tests/test_store.py
"""Key-value stores"""
import json

import pytest

from store import JsonFileStore, MemoryStore


@pytest.fixture(params=["file", "memory"])
def store(request, tmp_path):
    if request.param == "file":
        return JsonFileStore(tmp_path / "nested" / "store.json")
    return MemoryStore()


def test_get_missing_key(store):
    assert store.get("activeBookmark") is None


def test_set_get_remove(store):
    value = {"chapterId": "chapter-1", "text": "שלום", "position": 3}
    assert store.set("activeBookmark", value) is True
    assert store.get("activeBookmark") == value

    assert store.remove("activeBookmark") is True
    assert store.get("activeBookmark") is None
    assert store.remove("activeBookmark") is True


def test_keys_are_independent(store):
    store.set("book_version", "1.0.0")
    store.set("activeBookmark", {"position": 1})
    store.remove("activeBookmark")
    assert store.get("book_version") == "1.0.0"


def test_file_store_persists(tmp_path):
    path = tmp_path / "data" / "store.json"
    JsonFileStore(path).set("book_version", "2.1.0")

    assert path.exists()
    assert JsonFileStore(path).get("book_version") == "2.1.0"


def test_file_store_writes_readable_hebrew(tmp_path):
    path = tmp_path / "store.json"
    JsonFileStore(path).set("title", "ספר החכמה")
    assert "ספר החכמה" in path.read_text(encoding="utf-8")


def test_corrupt_file_reads_as_empty(tmp_path, capsys):
    path = tmp_path / "store.json"
    path.write_text("{broken", encoding="utf-8")

    store = JsonFileStore(path)
    assert store.get("book_content") is None
    assert "Warning" in capsys.readouterr().out

    # The unreadable file is left alone rather than replaced
    assert store.set("book_version", "1.0.0") is False
    assert store.remove("book_content") is False
    assert path.read_text(encoding="utf-8") == "{broken"
    assert "not overwriting" in capsys.readouterr().out


def test_non_object_file_is_not_overwritten(tmp_path):
    path = tmp_path / "store.json"
    path.write_text("[1, 2]", encoding="utf-8")

    assert JsonFileStore(path).set("book_version", "1.0.0") is False
    assert json.loads(path.read_text(encoding="utf-8")) == [1, 2]


def test_writes_leave_no_temp_files(tmp_path):
    path = tmp_path / "store.json"
    store = JsonFileStore(path)
    store.set("book_version", "1.0.0")
    store.set("activeBookmark", {"position": 2})
    store.remove("activeBookmark")

    assert [p.name for p in tmp_path.iterdir()] == ["store.json"]
    assert json.loads(path.read_text(encoding="utf-8")) == {"book_version": "1.0.0"}


def test_directory_as_store_fails_writes(tmp_path, capsys):
    path = tmp_path / "storedir"
    path.mkdir()

    store = JsonFileStore(path)
    assert store.get("book_content") is None
    assert store.set("book_content", {}) is False
    assert "Warning" in capsys.readouterr().out

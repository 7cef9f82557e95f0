# FILE: tests/test_library.py
"""Stored book content and the single-slot bookmark"""
import json

import pytest

from document_io import document_to_dict, dumps
from errors import ChapterNotFoundError, InvalidDocumentError, StorageError
from library import BOOKMARK_KEY, CONTENT_KEY, VERSION_KEY, BookLibrary
from segmenter import segment
from store import MemoryStore


@pytest.fixture
def loaded_library(library, sample_text, metadata):
    library.save_document(segment(sample_text, metadata))
    return library


def test_empty_library(library):
    assert library.load_document() is None
    assert library.export_document() is None
    assert library.search("תפילה") == []
    assert library.get_bookmark() is None


def test_import_valid_document(library, structured_document):
    data = document_to_dict(structured_document)
    library.import_document(data)

    assert library.store.get(CONTENT_KEY) == data
    assert library.store.get(VERSION_KEY) == "1.0.0"
    # A fresh library on the same store sees the content
    assert BookLibrary(library.store).load_document() == structured_document


def test_invalid_import_leaves_content_untouched(loaded_library):
    before = loaded_library.store.get(CONTENT_KEY)

    with pytest.raises(InvalidDocumentError):
        loaded_library.import_document({"metadata": {}, "chapters": [{"id": "x"}]})

    assert loaded_library.store.get(CONTENT_KEY) == before
    assert len(loaded_library.load_document().chapters) == 2


def test_corrupt_stored_content_is_ignored(library, capsys):
    library.store.set(CONTENT_KEY, {"chapters": "nope"})
    assert library.load_document() is None
    assert "Warning" in capsys.readouterr().out


def test_export_round_trips(loaded_library):
    exported = loaded_library.export_document()
    other = BookLibrary(MemoryStore())
    other.import_document(json.loads(exported))
    assert other.load_document() == loaded_library.load_document()


def test_get_chapter_and_search(loaded_library):
    assert loaded_library.get_chapter("chapter-2").title == "פרק ב - כח התפילה"
    assert loaded_library.get_chapter("chapter-9") is None
    results = loaded_library.search("התפילה")
    assert [(r.chapter_id, r.position) for r in results] == [("chapter-2", 0)]


def test_save_bookmark(loaded_library):
    bookmark = loaded_library.save_bookmark("chapter-1", 5)

    assert bookmark.chapter_id == "chapter-1"
    assert bookmark.chapter_title == "פרק א - יסודות האמונה"
    assert bookmark.position == 5
    assert bookmark.text == "הנה יסוד גדול הוא באמונה.\nועוד שורה של תוכן."[5:105]
    assert bookmark.timestamp > 0
    assert loaded_library.get_bookmark() == bookmark


def test_bookmark_is_single_slot(loaded_library):
    loaded_library.save_bookmark("chapter-1", 0)
    second = loaded_library.save_bookmark("chapter-2", 3)

    assert loaded_library.get_bookmark() == second
    stored = loaded_library.store.get(BOOKMARK_KEY)
    assert stored["chapterId"] == "chapter-2"
    assert set(stored) == {"chapterId", "chapterTitle", "position", "text", "timestamp"}


def test_clear_bookmark(loaded_library):
    loaded_library.save_bookmark("chapter-1", 0)
    assert loaded_library.clear_bookmark() is True
    assert loaded_library.get_bookmark() is None
    # Clearing twice is fine
    assert loaded_library.clear_bookmark() is True


def test_bookmark_unknown_chapter(loaded_library):
    with pytest.raises(ChapterNotFoundError):
        loaded_library.save_bookmark("chapter-42", 0)
    assert loaded_library.get_bookmark() is None


def test_structured_bookmark_preview(library, structured_document):
    library.save_document(structured_document)
    bookmark = library.save_bookmark("chapter-1", 1001)
    assert bookmark.text == "שוב תפילה ועוד תפילה"


class FailingStore(MemoryStore):
    """MemoryStore whose writes to the given keys fail"""

    def __init__(self, *failing_keys):
        super().__init__()
        self.failing_keys = set(failing_keys)

    def set(self, key, value):
        if key in self.failing_keys:
            return False
        return super().set(key, value)


@pytest.mark.parametrize("key", [CONTENT_KEY, VERSION_KEY])
def test_failed_content_write_raises_storage_error(structured_document, key):
    library = BookLibrary(FailingStore(key))

    with pytest.raises(StorageError):
        library.save_document(structured_document)
    assert library._document is None


def test_failed_bookmark_write_raises_storage_error(structured_document):
    library = BookLibrary(FailingStore(BOOKMARK_KEY))
    library.save_document(structured_document)

    with pytest.raises(StorageError, match="bookmark"):
        library.save_bookmark("chapter-1", 0)


@pytest.fixture
def default_json(tmp_path, structured_document):
    path = tmp_path / "default_book.json"
    path.write_text(dumps(structured_document), encoding="utf-8")
    return path


def test_default_content_when_nothing_stored(default_json, structured_document):
    library = BookLibrary(MemoryStore(), default_path=default_json)

    assert library.load_document() == structured_document
    assert library.get_chapter("chapter-2").title == "פרק ב"
    # The default is not written to the store
    assert library.store.get(CONTENT_KEY) is None


def test_stored_content_wins_over_default(default_json, sample_text, metadata):
    library = BookLibrary(MemoryStore(), default_path=default_json)
    library.store.set(CONTENT_KEY, document_to_dict(segment(sample_text, metadata)))

    assert library.load_document().metadata.title == "ספר החכמה"


def test_invalid_stored_content_falls_back_to_default(default_json, structured_document, capsys):
    library = BookLibrary(MemoryStore(), default_path=default_json)
    library.store.set(CONTENT_KEY, {"chapters": "nope"})

    assert library.load_document() == structured_document
    assert "stored book content ignored" in capsys.readouterr().out


@pytest.mark.parametrize("text", ["{broken", '{"metadata": {}, "chapters": []}'])
def test_invalid_default_is_ignored(tmp_path, capsys, text):
    path = tmp_path / "default_book.json"
    path.write_text(text, encoding="utf-8")

    library = BookLibrary(MemoryStore(), default_path=path)
    assert library.load_document() is None
    assert "default book content" in capsys.readouterr().out


def test_missing_default_file_is_ignored(tmp_path):
    library = BookLibrary(MemoryStore(), default_path=tmp_path / "nope.json")
    assert library.load_document() is None

"""library.py — Stored book content and the single "continue reading" bookmark."""

import time
from pathlib import Path

from document_io import document_from_dict, document_to_dict, dumps, loads
from errors import ChapterNotFoundError, InvalidDocumentError, StorageError
from models import BookDocument, BookmarkRecord, Chapter, SearchResult
from search import locate, search

CONTENT_KEY = "book_content"
VERSION_KEY = "book_version"
BOOKMARK_KEY = "activeBookmark"


def _bookmark_to_dict(bookmark: BookmarkRecord) -> dict:
    return {
        "chapterId": bookmark.chapter_id,
        "chapterTitle": bookmark.chapter_title,
        "position": bookmark.position,
        "text": bookmark.text,
        "timestamp": bookmark.timestamp,
    }


def _bookmark_from_dict(data: dict) -> BookmarkRecord:
    return BookmarkRecord(
        chapter_id=data["chapterId"],
        chapter_title=data.get("chapterTitle", ""),
        position=int(data.get("position", 0)),
        text=data.get("text", ""),
        timestamp=int(data.get("timestamp", 0)),
    )


class BookLibrary:
    """
    Book content and bookmark on top of a key-value store.

    The store needs get(key), set(key, value) and remove(key); see store.py.
    Content is only written after it validates, so a failed import leaves the
    previously stored book untouched. At most one bookmark exists at a time.
    """

    def __init__(self, store, default_path: Path | None = None):
        self.store = store
        self.default_path = Path(default_path) if default_path else None
        self._document: BookDocument | None = None

    # --- book content ---

    def load_document(self) -> BookDocument | None:
        """
        The current book: stored content if present and valid, otherwise the
        default content file (if configured), otherwise None.
        """
        if self._document is not None:
            return self._document

        data = self.store.get(CONTENT_KEY)
        if data is not None:
            try:
                self._document = document_from_dict(data)
                return self._document
            except InvalidDocumentError as e:
                print(f"  Warning: stored book content ignored: {e}")

        self._document = self._load_default()
        return self._document

    def _load_default(self) -> BookDocument | None:
        if self.default_path is None:
            return None
        try:
            return loads(self.default_path.read_text(encoding="utf-8"))
        except (OSError, InvalidDocumentError) as e:
            print(f"  Warning: default book content {self.default_path} ignored: {e}")
            return None

    def import_document(self, data) -> BookDocument:
        """Validate parsed JSON and make it the current book."""
        document = document_from_dict(data)
        return self.save_document(document)

    def save_document(self, document: BookDocument) -> BookDocument:
        if not self.store.set(CONTENT_KEY, document_to_dict(document)):
            raise StorageError("Failed to store book content")
        if not self.store.set(VERSION_KEY, document.metadata.version):
            raise StorageError("Failed to store book version")
        self._document = document
        return document

    def export_document(self) -> str | None:
        document = self.load_document()
        return dumps(document) if document else None

    def get_chapter(self, chapter_id: str) -> Chapter | None:
        document = self.load_document()
        return document.get_chapter(chapter_id) if document else None

    def search(self, query: str) -> list[SearchResult]:
        document = self.load_document()
        return search(document, query) if document else []

    # --- bookmark (single slot) ---

    def get_bookmark(self) -> BookmarkRecord | None:
        data = self.store.get(BOOKMARK_KEY)
        if not isinstance(data, dict) or "chapterId" not in data:
            return None
        return _bookmark_from_dict(data)

    def save_bookmark(self, chapter_id: str, position: int = 0) -> BookmarkRecord:
        """Create or overwrite the bookmark at `position` within a chapter."""
        chapter = self.get_chapter(chapter_id)
        if chapter is None:
            raise ChapterNotFoundError(chapter_id)

        bookmark = BookmarkRecord(
            chapter_id=chapter.id,
            chapter_title=chapter.title,
            position=position,
            text=locate(chapter, position),
            timestamp=int(time.time() * 1000),
        )
        if not self.store.set(BOOKMARK_KEY, _bookmark_to_dict(bookmark)):
            raise StorageError("Failed to store bookmark")
        return bookmark

    def clear_bookmark(self) -> bool:
        return self.store.remove(BOOKMARK_KEY)

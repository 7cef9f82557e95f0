"""document_io.py — JSON (de)serialization and shape validation for book documents."""

import json
import math
from datetime import datetime

from errors import InvalidDocumentError
from models import Block, BookDocument, BookMetadata, Chapter, FlatText, Structured


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _validate_content(content, where: str) -> None:
    if isinstance(content, str):
        if not content:
            raise InvalidDocumentError(f"{where}: empty content")
        return
    if not isinstance(content, list) or not content:
        raise InvalidDocumentError(f"{where}: content must be a string or a list of blocks")
    for b, block in enumerate(content):
        if not isinstance(block, dict):
            raise InvalidDocumentError(f"{where}, block {b}: not an object")
        paragraphs = block.get("paragraphs")
        if not isinstance(paragraphs, list) or not paragraphs:
            raise InvalidDocumentError(f"{where}, block {b}: 'paragraphs' must be a non-empty list")
        if not all(isinstance(p, str) and p for p in paragraphs):
            raise InvalidDocumentError(f"{where}, block {b}: paragraphs must be non-empty strings")
        subtitle = block.get("subtitle")
        if subtitle is not None and not isinstance(subtitle, str):
            raise InvalidDocumentError(f"{where}, block {b}: 'subtitle' must be a string")


def validate_document_data(data) -> None:
    """
    Check that parsed JSON has the book document shape.
    Raises InvalidDocumentError describing the first problem found.
    """
    if not isinstance(data, dict):
        raise InvalidDocumentError("document must be a JSON object")
    if not isinstance(data.get("metadata"), dict):
        raise InvalidDocumentError("missing 'metadata' object")
    chapters = data.get("chapters")
    if not isinstance(chapters, list):
        raise InvalidDocumentError("'chapters' must be a list")
    if not chapters:
        raise InvalidDocumentError("'chapters' is empty")

    for i, chapter in enumerate(chapters):
        where = f"chapter {i}"
        if not isinstance(chapter, dict):
            raise InvalidDocumentError(f"{where}: not an object")
        for key in ("id", "title"):
            if not isinstance(chapter.get(key), str) or not chapter[key]:
                raise InvalidDocumentError(f"{where}: missing '{key}'")
        if "content" not in chapter:
            raise InvalidDocumentError(f"{where}: missing 'content'")
        _validate_content(chapter["content"], where)
        for key in ("startPage", "endPage"):
            if not _is_number(chapter.get(key)):
                raise InvalidDocumentError(f"{where}: '{key}' must be a number")


def _content_to_json(content):
    if isinstance(content, FlatText):
        return content.text
    blocks = []
    for block in content.blocks:
        item = {}
        if block.subtitle is not None:
            item["subtitle"] = block.subtitle
        item["paragraphs"] = list(block.paragraphs)
        blocks.append(item)
    return blocks


def _content_from_json(raw):
    if isinstance(raw, str):
        return FlatText(raw)
    return Structured([
        Block(paragraphs=list(b["paragraphs"]), subtitle=b.get("subtitle"))
        for b in raw
    ])


def document_to_dict(document: BookDocument) -> dict:
    meta = document.metadata
    return {
        "metadata": {
            "title": meta.title,
            "subtitle": meta.subtitle,
            "author": meta.author,
            "version": meta.version,
            "lastUpdated": meta.last_updated.isoformat() if meta.last_updated else None,
            "totalChapters": meta.total_chapters,
            "totalPages": meta.total_pages,
        },
        "chapters": [
            {
                "id": ch.id,
                "title": ch.title,
                "subtitle": ch.subtitle,
                "content": _content_to_json(ch.content),
                "startPage": ch.start_page,
                "endPage": ch.end_page,
            }
            for ch in document.chapters
        ],
    }


def _parse_timestamp(value) -> datetime | None:
    if not value:
        return None
    if not isinstance(value, str):
        raise InvalidDocumentError("'lastUpdated' must be an ISO-8601 string")
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise InvalidDocumentError(f"'lastUpdated' is not ISO-8601: {value!r}") from None


def document_from_dict(data) -> BookDocument:
    """Validate `data` and build a BookDocument from it."""
    validate_document_data(data)

    chapters = [
        Chapter(
            id=ch["id"],
            title=ch["title"],
            subtitle=ch.get("subtitle") or "",
            content=_content_from_json(ch["content"]),
            start_page=int(ch["startPage"]),
            end_page=int(ch["endPage"]),
        )
        for ch in data["chapters"]
    ]

    meta = data["metadata"]
    total_chapters = meta.get("totalChapters")
    total_pages = meta.get("totalPages")
    metadata = BookMetadata(
        title=meta.get("title") or "",
        author=meta.get("author") or "",
        subtitle=meta.get("subtitle") or "",
        version=meta.get("version") or "1.0.0",
        last_updated=_parse_timestamp(meta.get("lastUpdated")),
        total_chapters=int(total_chapters) if _is_number(total_chapters) else len(chapters),
        total_pages=int(total_pages) if _is_number(total_pages) else chapters[-1].end_page,
    )
    return BookDocument(metadata=metadata, chapters=chapters)


def dumps(document: BookDocument) -> str:
    return json.dumps(document_to_dict(document), ensure_ascii=False, indent=2)


def loads(text: str) -> BookDocument:
    """Parse JSON text into a BookDocument. Raises InvalidDocumentError on bad input."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidDocumentError(f"not valid JSON ({e.msg} at line {e.lineno})") from None
    return document_from_dict(data)

"""segmenter.py — Split raw book text into chapters."""

import re
from dataclasses import dataclass
from datetime import datetime, timezone

from errors import EmptyInputError, MissingMetadataError
from models import BookDocument, BookMetadata, Chapter, FlatText

CHARS_PER_PAGE = 2000
FALLBACK_TITLE = "פרק יחיד"

# Checked in order; the keyword pattern wins over the bare letter/number ones.
CHAPTER_PATTERNS = [
    re.compile(r"^(פרק|חלק)\s*[א-ת\d]+"),
    re.compile(r"^[א-ת]\."),
    re.compile(r"^\d+\."),
]


@dataclass
class SegmentMetadata:
    title: str
    author: str
    subtitle: str = ""
    version: str = "1.0.0"


def is_chapter_start(line: str) -> bool:
    """True if a trimmed line opens a new chapter."""
    return any(p.match(line) for p in CHAPTER_PATTERNS)


def _has_body_after(lines: list[str], start: int) -> bool:
    """True if a non-heading line follows `start` before the next chapter or EOF."""
    for line in lines[start:]:
        if not line:
            continue
        return not is_chapter_start(line)
    return False


def _check_input(raw_text: str, metadata: SegmentMetadata) -> None:
    missing = [name for name in ("title", "author") if not (getattr(metadata, name) or "").strip()]
    if missing:
        raise MissingMetadataError(missing)
    if not raw_text or not raw_text.strip():
        raise EmptyInputError()


def segment(raw_text: str, metadata: SegmentMetadata) -> BookDocument:
    """
    Convert raw pasted book text into a BookDocument.

    Chapters start at lines such as "פרק א - ...", "חלק 2", "ג." or "12.".
    The line after a chapter heading becomes its subtitle when more body text
    follows it. Page numbers are estimated at CHARS_PER_PAGE characters per page.
    Text without any chapter heading becomes a single chapter.
    """
    _check_input(raw_text, metadata)

    lines = [line.strip() for line in raw_text.split("\n")]
    chapters: list[Chapter] = []
    current_page = 1
    chapter_index = 1

    title: str | None = None
    subtitle = ""
    buffer = ""

    def close_chapter() -> None:
        nonlocal current_page, chapter_index
        end_page = current_page + len(buffer) // CHARS_PER_PAGE
        chapters.append(Chapter(
            id=f"chapter-{chapter_index}",
            title=title,
            subtitle=subtitle,
            content=FlatText(buffer.strip()),
            start_page=current_page,
            end_page=end_page,
        ))
        current_page = end_page + 1
        chapter_index += 1

    i = 0
    while i < len(lines):
        line = lines[i]
        if is_chapter_start(line):
            if title is not None and buffer.strip():
                close_chapter()

            title = line
            subtitle = ""
            nxt = lines[i + 1] if i + 1 < len(lines) else ""
            if nxt and not is_chapter_start(nxt) and _has_body_after(lines, i + 2):
                subtitle = nxt
                i += 1
            buffer = ""
        elif line:
            buffer += line + "\n"
        i += 1

    if title is not None and buffer.strip():
        close_chapter()

    if not chapters:
        chapters.append(Chapter(
            id="chapter-1",
            title=metadata.title.strip() or FALLBACK_TITLE,
            subtitle=metadata.subtitle or "",
            content=FlatText(raw_text.strip()),
            start_page=1,
            end_page=len(raw_text) // CHARS_PER_PAGE + 1,
        ))

    return BookDocument(
        metadata=BookMetadata(
            title=metadata.title,
            author=metadata.author,
            subtitle=metadata.subtitle or "",
            version=metadata.version or "1.0.0",
            last_updated=datetime.now(timezone.utc),
            total_chapters=len(chapters),
            total_pages=chapters[-1].end_page if chapters else 1,
        ),
        chapters=chapters,
    )

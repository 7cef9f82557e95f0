"""models.py — Shared data types for sifron."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Block:
    paragraphs: list[str]
    subtitle: str | None = None     # Rendered as a sub-heading above the paragraphs


@dataclass
class FlatText:
    """Legacy chapter content: one opaque text blob."""
    text: str


@dataclass
class Structured:
    """Chapter content as an ordered sequence of blocks."""
    blocks: list[Block]


ChapterContent = FlatText | Structured


@dataclass
class Chapter:
    id: str          # e.g. "chapter-3"
    title: str       # Display title, e.g. "פרק ג - כח התפילה"
    subtitle: str
    content: ChapterContent
    start_page: int
    end_page: int

    @property
    def page_range(self) -> str:
        return f"{self.start_page}-{self.end_page}"

    @property
    def block_count(self) -> int:
        if isinstance(self.content, Structured):
            return len(self.content.blocks)
        return 1


@dataclass
class BookMetadata:
    title: str
    author: str
    subtitle: str = ""
    version: str = "1.0.0"
    last_updated: datetime | None = None
    total_chapters: int = 0
    total_pages: int = 0


@dataclass
class BookDocument:
    metadata: BookMetadata
    chapters: list[Chapter] = field(default_factory=list)

    def get_chapter(self, chapter_id: str) -> Chapter | None:
        for chapter in self.chapters:
            if chapter.id == chapter_id:
                return chapter
        return None


@dataclass
class SearchResult:
    chapter_id: str
    chapter_title: str
    text: str                       # Context window, or the full subtitle
    position: int                   # Flat offset, block index, or block*1000 + paragraph
    type: str = "paragraph"         # "paragraph" | "subtitle"
    block_subtitle: str | None = None
    block_index: int | None = None
    paragraph_index: int | None = None


@dataclass
class BookmarkRecord:
    chapter_id: str
    chapter_title: str
    position: int
    text: str                       # Short preview of the text at `position`
    timestamp: int                  # Epoch milliseconds

"""search.py — Substring search over a BookDocument, plus match highlighting."""

import re
from dataclasses import dataclass

from models import BookDocument, Chapter, FlatText, SearchResult, Structured

CONTEXT_CHARS = 50
# Composite paragraph position = block_index * POSITION_STRIDE + paragraph_index.
# Blocks holding POSITION_STRIDE or more paragraphs produce colliding positions.
POSITION_STRIDE = 1000
PREVIEW_CHARS = 100


@dataclass
class HighlightSpan:
    text: str
    highlighted: bool


def _fold(text: str) -> str:
    """Lower-case char by char, keeping the length so offsets stay valid."""
    out = []
    for ch in text:
        low = ch.lower()
        out.append(low if len(low) == 1 else ch)
    return "".join(out)


def _window(text: str, pos: int, length: int) -> str:
    start = max(0, pos - CONTEXT_CHARS)
    end = min(len(text), pos + length + CONTEXT_CHARS)
    return text[start:end]


def _search_flat(chapter: Chapter, content: FlatText, term: str) -> list[SearchResult]:
    results = []
    folded = _fold(content.text)
    pos = folded.find(term)
    while pos != -1:
        results.append(SearchResult(
            chapter_id=chapter.id,
            chapter_title=chapter.title,
            text=_window(content.text, pos, len(term)),
            position=pos,
            type="paragraph",
        ))
        pos = folded.find(term, pos + len(term))
    return results


def _search_structured(chapter: Chapter, content: Structured, term: str) -> list[SearchResult]:
    results = []
    for block_idx, block in enumerate(content.blocks):
        if block.subtitle and term in _fold(block.subtitle):
            results.append(SearchResult(
                chapter_id=chapter.id,
                chapter_title=chapter.title,
                text=block.subtitle,
                position=block_idx,
                type="subtitle",
                block_subtitle=block.subtitle,
                block_index=block_idx,
            ))
        for para_idx, paragraph in enumerate(block.paragraphs):
            pos = _fold(paragraph).find(term)
            if pos == -1:
                continue
            results.append(SearchResult(
                chapter_id=chapter.id,
                chapter_title=chapter.title,
                text=_window(paragraph, pos, len(term)),
                position=block_idx * POSITION_STRIDE + para_idx,
                type="paragraph",
                block_subtitle=block.subtitle,
                block_index=block_idx,
                paragraph_index=para_idx,
            ))
    return results


def search(document: BookDocument, query: str) -> list[SearchResult]:
    """
    Find every case-insensitive occurrence of `query` in the document.

    Flat chapters yield one result per non-overlapping occurrence, positioned
    at its character offset. Structured chapters yield one result per matching
    block subtitle and one per matching paragraph (windowed on the first hit).
    Results follow reading order. A blank query returns no results.
    """
    if not query or not query.strip():
        return []

    term = _fold(query)
    results: list[SearchResult] = []
    for chapter in document.chapters:
        if isinstance(chapter.content, Structured):
            results.extend(_search_structured(chapter, chapter.content, term))
        else:
            results.extend(_search_flat(chapter, chapter.content, term))
    return results


def highlight(text: str, query: str) -> list[HighlightSpan]:
    """Split text into spans, marking the parts equal to the query (ignoring case)."""
    if not query or not query.strip():
        return [HighlightSpan(text, False)] if text else []

    term = _fold(query)
    parts = re.split(f"({re.escape(query)})", text, flags=re.IGNORECASE)
    return [HighlightSpan(part, _fold(part) == term) for part in parts if part]


def locate(chapter: Chapter, position: int, length: int = PREVIEW_CHARS) -> str:
    """Return up to `length` characters of chapter text starting at `position`."""
    if position < 0:
        return ""
    content = chapter.content
    if isinstance(content, FlatText):
        return content.text[position:position + length]

    block_idx, para_idx = divmod(position, POSITION_STRIDE)
    if block_idx >= len(content.blocks):
        return ""
    block = content.blocks[block_idx]
    if para_idx >= len(block.paragraphs):
        return (block.subtitle or "")[:length]
    return block.paragraphs[para_idx][:length]

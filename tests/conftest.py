# FILE: tests/conftest.py

import pytest

from library import BookLibrary
from models import Block, BookDocument, BookMetadata, Chapter, FlatText, Structured
from segmenter import SegmentMetadata
from store import MemoryStore


@pytest.fixture
def metadata():
    """Metadata accepted by segment()"""
    return SegmentMetadata(title="ספר החכמה", author="המחבר", subtitle="מבחר מאמרים")


@pytest.fixture
def sample_text():
    """Two chapters, the first with a subtitle"""
    return (
        "פרק א - יסודות האמונה\n"
        "בעניין אמונה פשוטה ויראת שמים\n"
        "\n"
        "הנה יסוד גדול הוא באמונה.\n"
        "ועוד שורה של תוכן.\n"
        "\n"
        "פרק ב - כח התפילה\n"
        "בעניין כוונה בתפילה ודבקות\n"
        "\n"
        "התפילה היא עבודה שבלב.\n"
    )


@pytest.fixture
def structured_document():
    """One structured chapter and one flat chapter"""
    return BookDocument(
        metadata=BookMetadata(title="ספר", author="המחבר", total_chapters=2, total_pages=3),
        chapters=[
            Chapter(
                id="chapter-1",
                title="פרק א",
                subtitle="",
                content=Structured([
                    Block(subtitle="על התפילה", paragraphs=["פסקה ראשונה", "התפילה היא עבודה שבלב"]),
                    Block(paragraphs=["אין כאן כלום", "שוב תפילה ועוד תפילה"]),
                ]),
                start_page=1,
                end_page=2,
            ),
            Chapter(
                id="chapter-2",
                title="פרק ב",
                subtitle="",
                content=FlatText("שלום עולם שלום"),
                start_page=3,
                end_page=3,
            ),
        ],
    )


@pytest.fixture
def library():
    """BookLibrary over an in-memory store"""
    return BookLibrary(MemoryStore())

"""parsers/ — Read book sources and segment them into chapters."""

from pathlib import Path

from models import BookDocument
from parsers.base import SourceText
from segmenter import SegmentMetadata, segment

SUPPORTED_EXTENSIONS = {".txt", ".md", ".markdown", ".epub", ".pdf"}


def read_source(file_path: Path) -> SourceText:
    """Dispatch to the appropriate reader based on file extension."""
    file_path = Path(file_path)
    suffix = file_path.suffix.lower()

    if suffix == ".epub" or file_path.is_dir():
        from parsers.epub_parser import read_epub_source
        return read_epub_source(file_path)
    elif suffix in (".txt", ".md", ".markdown"):
        from parsers.markdown_parser import read_text_source
        return read_text_source(file_path)
    elif suffix == ".pdf":
        from parsers.pdf_parser import read_pdf_source
        return read_pdf_source(file_path)
    else:
        raise ValueError(
            f"Unsupported file format: '{suffix}'. "
            f"Supported: {', '.join(sorted(SUPPORTED_EXTENSIONS))}"
        )


def build_metadata(source: SourceText, fallback_title: str = "", **overrides) -> SegmentMetadata:
    """Merge metadata found in the source with caller overrides (non-empty overrides win)."""
    fields = {
        "title": source.title or fallback_title,
        "subtitle": source.subtitle,
        "author": source.author,
        "version": source.version or "1.0.0",
    }
    for key, value in overrides.items():
        if key in fields and value:
            fields[key] = value
    return SegmentMetadata(**fields)


def parse_file(file_path: Path, **overrides) -> BookDocument:
    """Read a source file and segment it. Overrides: title, subtitle, author, version."""
    file_path = Path(file_path)
    source = read_source(file_path)
    fallback_title = file_path.stem.replace("_", " ").replace("-", " ")
    metadata = build_metadata(source, fallback_title, **overrides)
    return segment(source.text, metadata)

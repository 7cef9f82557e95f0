"""parsers/markdown_parser.py — Read plain-text and Markdown book sources."""

import re
from pathlib import Path

from parsers.base import SourceText

FRONTMATTER_KEYS = ("title", "subtitle", "author", "version")


def _extract_frontmatter(content: str) -> tuple[dict, str]:
    """Extract YAML-style frontmatter (--- delimited) if present. Returns (meta, body)."""
    m = re.match(r"^---\s*\n(.*?)\n---\s*\n", content, re.DOTALL)
    if not m:
        return {}, content
    meta = {}
    for line in m.group(1).split("\n"):
        if ":" in line:
            key, _, value = line.partition(":")
            meta[key.strip().lower()] = value.strip().strip("\"'")
    return meta, content[m.end():]


def _strip_heading_marks(body: str) -> str:
    """Turn '# פרק א' into 'פרק א' so headings reach the segmenter as plain lines."""
    return re.sub(r"^#{1,6}\s+", "", body, flags=re.MULTILINE)


def read_text_source(file_path: Path) -> SourceText:
    """Read a .txt or .md file. Text is passed through as-is apart from frontmatter."""
    file_path = Path(file_path)
    content = file_path.read_text(encoding="utf-8-sig")
    content = content.replace("\r\n", "\n")
    frontmatter, body = _extract_frontmatter(content)

    is_markdown = file_path.suffix.lower() in (".md", ".markdown")
    if is_markdown:
        body = _strip_heading_marks(body)

    fields = {key: frontmatter.get(key, "") for key in FRONTMATTER_KEYS}
    return SourceText(
        text=body,
        source_format="markdown" if is_markdown else "text",
        **fields,
    )

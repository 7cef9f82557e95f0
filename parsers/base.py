"""parsers/base.py — Shared parser utilities and types."""

import html
import re
from dataclasses import dataclass

# LRM, RLM, ALM and the bidi embedding/override/isolate controls
BIDI_CONTROLS = re.compile("[\u200e\u200f\u061c\u202a-\u202e\u2066-\u2069]")


@dataclass
class SourceText:
    """Raw book text read from a file, with whatever metadata the file carries."""
    text: str
    title: str = ""
    subtitle: str = ""
    author: str = ""
    version: str = ""
    source_format: str = ""         # "text", "markdown", "epub", "pdf"


def clean_text(text: str) -> str:
    """Normalize extracted text before chapter segmentation."""
    text = html.unescape(text)
    text = BIDI_CONTROLS.sub("", text)
    text = text.replace("\u00ad", "")
    text = text.replace("\u05be", "-")      # maqaf
    text = text.replace("\u05f3", "'")      # geresh
    text = text.replace("\u05f4", '"')      # gershayim
    text = text.replace("\u2013", "-").replace("\u2014", "-")
    text = text.replace("\u00a0", " ")
    lines = text.split("\n")
    lines = [re.sub(r"[ \t]+", " ", line).strip() for line in lines]
    cleaned_lines = []
    prev_blank = False
    for line in lines:
        if not line:
            if not prev_blank:
                cleaned_lines.append("")
            prev_blank = True
        else:
            cleaned_lines.append(line)
            prev_blank = False
    return "\n".join(cleaned_lines).strip()

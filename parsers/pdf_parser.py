"""parsers/pdf_parser.py — Extract raw book text from PDF files using pymupdf."""

from pathlib import Path

from tqdm import tqdm

from parsers.base import SourceText, clean_text


def read_pdf_source(file_path: Path) -> SourceText:
    """
    Read every page's text in order. Chapter detection is left to the
    segmenter, so the PDF outline is not consulted.
    """
    import fitz  # pymupdf

    file_path = Path(file_path)
    doc = fitz.open(str(file_path))
    try:
        pdf_meta = doc.metadata or {}
        title = (pdf_meta.get("title") or "").strip()
        author = (pdf_meta.get("author") or "").strip()
        subtitle = (pdf_meta.get("subject") or "").strip()

        pages = []
        for page_num in tqdm(range(doc.page_count), desc="  Reading PDF", unit="page"):
            pages.append(doc[page_num].get_text("text"))
    finally:
        doc.close()

    return SourceText(
        text=clean_text("\n\n".join(pages)),
        title=title,
        subtitle=subtitle,
        author=author,
        source_format="pdf",
    )

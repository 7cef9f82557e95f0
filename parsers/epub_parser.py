"""parsers/epub_parser.py — Extract reading-order text from EPUB (packed or directory)."""

import posixpath
import xml.etree.ElementTree as ET
import zipfile
from pathlib import Path
from urllib.parse import unquote

from bs4 import BeautifulSoup
from tqdm import tqdm

from parsers.base import SourceText, clean_text

CONTAINER_NS = "urn:oasis:names:tc:opendocument:xmlns:container"
OPF_NS = "http://www.idpf.org/2007/opf"
DC_NS = "http://purl.org/dc/elements/1.1/"

TEXT_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6", "p", "li", "blockquote"]
XHTML_TYPES = {"application/xhtml+xml", "text/html"}


class _EpubFiles:
    """Read members by archive path from a packed .epub or an unzipped directory."""

    def __init__(self, epub_path: Path):
        self.root = epub_path
        self.zip = None
        if epub_path.is_dir():
            return
        if zipfile.is_zipfile(epub_path):
            self.zip = zipfile.ZipFile(epub_path)
            return
        raise ValueError(f"Cannot determine EPUB format for {epub_path}")

    def exists(self, name: str) -> bool:
        if self.zip is not None:
            return name in self.zip.namelist()
        return (self.root / name).is_file()

    def read(self, name: str) -> bytes:
        if self.zip is not None:
            return self.zip.read(name)
        return (self.root / name).read_bytes()

    def close(self) -> None:
        if self.zip is not None:
            self.zip.close()


def _find_opf(files: _EpubFiles) -> str:
    """Locate the package document via META-INF/container.xml."""
    if files.exists("META-INF/container.xml"):
        root = ET.fromstring(files.read("META-INF/container.xml"))
        rootfile = root.find(f".//{{{CONTAINER_NS}}}rootfile")
        if rootfile is not None and rootfile.get("full-path"):
            return rootfile.get("full-path")
    for candidate in ("OEBPS/content.opf", "content.opf"):
        if files.exists(candidate):
            return candidate
    raise FileNotFoundError("No package document (content.opf) found in EPUB")


def _read_package(files: _EpubFiles, opf_path: str) -> tuple[dict, list[str]]:
    """Return ({title, author}, spine document paths in reading order)."""
    root = ET.fromstring(files.read(opf_path))
    opf_dir = posixpath.dirname(opf_path)

    meta = {"title": "", "author": ""}
    t = root.find(f".//{{{DC_NS}}}title")
    if t is not None and t.text:
        meta["title"] = t.text.strip()
    a = root.find(f".//{{{DC_NS}}}creator")
    if a is not None and a.text:
        meta["author"] = a.text.strip()

    manifest = {}
    for item in root.findall(f".//{{{OPF_NS}}}manifest/{{{OPF_NS}}}item"):
        if item.get("media-type") in XHTML_TYPES:
            href = unquote(item.get("href", ""))
            manifest[item.get("id")] = posixpath.normpath(posixpath.join(opf_dir, href))

    spine = []
    for itemref in root.findall(f".//{{{OPF_NS}}}spine/{{{OPF_NS}}}itemref"):
        path = manifest.get(itemref.get("idref"))
        if path and itemref.get("linear", "yes") != "no":
            spine.append(path)
    return meta, spine


def _extract_document_text(content: bytes) -> str:
    """Text of one XHTML spine document, one block element per paragraph."""
    soup = BeautifulSoup(content, features="lxml-xml")
    body = soup.find("body") or soup

    paragraphs = []
    for tag in body.find_all(TEXT_TAGS):
        if tag.find_parent(TEXT_TAGS):
            continue
        text = tag.get_text(separator=" ", strip=True)
        if text:
            paragraphs.append(text)
    return "\n\n".join(paragraphs)


def read_epub_source(epub_path: Path) -> SourceText:
    """Concatenate spine documents in reading order into one raw text."""
    epub_path = Path(epub_path)
    files = _EpubFiles(epub_path)
    try:
        opf_path = _find_opf(files)
        meta, spine = _read_package(files, opf_path)

        parts = []
        for doc_path in tqdm(spine, desc="  Reading EPUB", unit="doc"):
            if not files.exists(doc_path):
                raise FileNotFoundError(f"Spine document not found: {doc_path}")
            text = _extract_document_text(files.read(doc_path))
            if text:
                parts.append(text)
    finally:
        files.close()

    return SourceText(
        text=clean_text("\n\n".join(parts)),
        title=meta["title"],
        author=meta["author"],
        source_format="epub",
    )

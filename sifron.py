#!/usr/bin/env python3
"""
sifron — Hebrew e-book text core: chapter segmentation, search and bookmarks.

Input formats for `format`: plain text (.txt), Markdown (.md), EPUB, PDF
Book content is stored as JSON in a key-value store file (SIFRON_STORE in .env).
Until a book is stored, the JSON document named by SIFRON_DEFAULT_CONTENT is used.

Quick start:
  1. python sifron.py format book.txt --author "המחבר" --dry-run
  2. python sifron.py format book.txt --author "המחבר" --output book.json
  3. python sifron.py import book.json
  4. python sifron.py search "אמונה"
  5. python sifron.py bookmark save chapter-2 120
"""

import argparse
import json
import sys
from datetime import datetime
from pathlib import Path


def _positive_int(value: str) -> int:
    n = int(value)
    if n < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {n}")
    return n


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Segment, search and bookmark a Hebrew e-book",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Preview chapter detection without writing anything:
  python sifron.py format book.txt --title "ספר החכמה" --author "המחבר" --dry-run

  # Segment and store in one step:
  python sifron.py format book.md --author "המחבר" --import

  # Import a JSON document produced elsewhere:
  python sifron.py import book.json

  # Search and open a chapter with matches marked:
  python sifron.py search "תפילה" --limit 20
  python sifron.py show chapter-2 --query "תפילה"

  # Continue-reading bookmark:
  python sifron.py bookmark save chapter-2 120
  python sifron.py bookmark show
        """,
    )
    parser.add_argument(
        "--store", type=Path, default=None, metavar="PATH",
        help="Key-value store file (default: SIFRON_STORE or data/sifron_store.json)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    fmt = sub.add_parser("format", help="Segment a text/Markdown/EPUB/PDF file into chapters")
    fmt.add_argument("input_path", type=Path, help="Path to .txt, .md, .epub or .pdf")
    fmt.add_argument("--title", default="", help="Book title (default: from file)")
    fmt.add_argument("--subtitle", default="", help="Book subtitle")
    fmt.add_argument("--author", default="", help="Author name (required unless the file has one)")
    fmt.add_argument("--version", default="", help="Content version (default: 1.0.0)")
    fmt.add_argument(
        "--output", type=Path, default=None, metavar="FILE",
        help="Write the JSON document here (default: print to stdout)",
    )
    fmt.add_argument("--import", action="store_true", dest="do_import", help="Also store the result")
    fmt.add_argument("--dry-run", action="store_true", help="Only list detected chapters")

    imp = sub.add_parser("import", help="Validate and store a JSON book document")
    imp.add_argument("json_path", type=Path)

    exp = sub.add_parser("export", help="Print or save the stored JSON book document")
    exp.add_argument("--output", type=Path, default=None, metavar="FILE")

    sub.add_parser("chapters", help="List chapters of the stored book")

    show = sub.add_parser("show", help="Print one chapter")
    show.add_argument("chapter_id")
    show.add_argument("--query", default="", help="Mark matches of this text with [[...]]")

    srch = sub.add_parser("search", help="Search the stored book")
    srch.add_argument("query")
    srch.add_argument("--limit", type=_positive_int, default=None, metavar="N", help="Show at most N results")

    bm = sub.add_parser("bookmark", help="Show, save or clear the continue-reading bookmark")
    bm_sub = bm.add_subparsers(dest="bookmark_command", required=True)
    bm_sub.add_parser("show")
    bm_save = bm_sub.add_parser("save")
    bm_save.add_argument("chapter_id")
    bm_save.add_argument("position", type=int, nargs="?", default=0)
    bm_sub.add_parser("clear")

    return parser.parse_args(argv)


def render_highlighted(text: str, query: str) -> str:
    from search import highlight
    return "".join(
        f"[[{span.text}]]" if span.highlighted else span.text
        for span in highlight(text, query)
    )


def print_chapter_list(document) -> None:
    meta = document.metadata
    print(f"Title:   {meta.title}")
    if meta.subtitle:
        print(f"         {meta.subtitle}")
    print(f"Author:  {meta.author}")
    print(f"Version: {meta.version}")
    print(f"\nFound {len(document.chapters)} chapters:")
    print("-" * 70)
    total_chars = 0
    for ch in document.chapters:
        chars = _content_length(ch)
        total_chars += chars
        print(f"  {ch.id:<12} {ch.title[:40]:<40} pp. {ch.page_range:<9} {chars:>7} chars")
        if ch.subtitle:
            print(f"  {'':<12} {ch.subtitle[:56]}")
    print("-" * 70)
    print(f"  Total: {total_chars:,} chars | {meta.total_pages} pages")
    print()


def _content_length(chapter) -> int:
    from models import FlatText
    if isinstance(chapter.content, FlatText):
        return len(chapter.content.text)
    return sum(len(p) for b in chapter.content.blocks for p in b.paragraphs)


def _print_chapter(chapter, query: str) -> None:
    from models import FlatText

    print(chapter.title)
    if chapter.subtitle:
        print(chapter.subtitle)
    print(f"(pp. {chapter.page_range})\n")
    if isinstance(chapter.content, FlatText):
        print(render_highlighted(chapter.content.text, query))
        return
    for block in chapter.content.blocks:
        if block.subtitle:
            print(f"## {render_highlighted(block.subtitle, query)}")
        for paragraph in block.paragraphs:
            print(render_highlighted(paragraph, query))
        print()


def _require_document(library):
    document = library.load_document()
    if document is None:
        print("ERROR: No book content stored. Run 'import' or 'format --import' first.")
        sys.exit(1)
    return document


def cmd_format(args, settings, library) -> None:
    from document_io import dumps
    from parsers import parse_file

    print(f"Parsing: {args.input_path}", file=sys.stderr)
    document = parse_file(
        args.input_path,
        title=args.title,
        subtitle=args.subtitle,
        author=args.author or settings.default_author,
        version=args.version or settings.default_version,
    )

    if args.dry_run or args.output or args.do_import:
        print_chapter_list(document)
    if args.dry_run:
        print("Dry run complete. Nothing written.")
        return

    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(dumps(document), encoding="utf-8")
        print(f"Saved: {args.output}")
    elif not args.do_import:
        print(dumps(document))

    if args.do_import:
        library.save_document(document)
        print(f"Stored book content in {settings.store_path}")


def cmd_import(args, settings, library) -> None:
    from errors import InvalidDocumentError

    try:
        data = json.loads(args.json_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise InvalidDocumentError(f"not valid JSON ({e.msg} at line {e.lineno})") from None
    document = library.import_document(data)
    print(f"Imported '{document.metadata.title}' ({len(document.chapters)} chapters, "
          f"version {document.metadata.version})")


def cmd_export(args, settings, library) -> None:
    _require_document(library)
    exported = library.export_document()
    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(exported, encoding="utf-8")
        print(f"Saved: {args.output}")
    else:
        print(exported)


def cmd_chapters(args, settings, library) -> None:
    print_chapter_list(_require_document(library))


def cmd_show(args, settings, library) -> None:
    from errors import ChapterNotFoundError

    _require_document(library)
    chapter = library.get_chapter(args.chapter_id)
    if chapter is None:
        raise ChapterNotFoundError(args.chapter_id)
    _print_chapter(chapter, args.query)


def cmd_search(args, settings, library) -> None:
    _require_document(library)
    results = library.search(args.query)
    if not results:
        print(f'No results for "{args.query}"')
        return

    print(f'Found {len(results)} results for "{args.query}"\n')
    shown = results[:args.limit] if args.limit is not None else results
    for r in shown:
        where = f"{r.chapter_id} @ {r.position}"
        if r.type == "subtitle":
            where += " (subtitle)"
        elif r.block_subtitle:
            where += f" ({r.block_subtitle})"
        print(f"  {r.chapter_title} [{where}]")
        print(f"    ...{render_highlighted(r.text, args.query)}...")
    if len(shown) < len(results):
        print(f"\n  ({len(results) - len(shown)} more not shown)")


def cmd_bookmark(args, settings, library) -> None:
    if args.bookmark_command == "save":
        _require_document(library)
        bookmark = library.save_bookmark(args.chapter_id, args.position)
        print(f"Bookmark saved: {bookmark.chapter_title} @ {bookmark.position}")
        return

    if args.bookmark_command == "clear":
        library.clear_bookmark()
        print("Bookmark removed.")
        return

    bookmark = library.get_bookmark()
    if bookmark is None:
        print("No bookmark saved.")
        return
    saved_at = datetime.fromtimestamp(bookmark.timestamp / 1000).strftime("%Y-%m-%d %H:%M")
    print(f"Chapter:  {bookmark.chapter_title} ({bookmark.chapter_id})")
    print(f"Position: {bookmark.position}")
    print(f"Saved:    {saved_at}")
    print(f"Text:     {bookmark.text}")


COMMANDS = {
    "format": cmd_format,
    "import": cmd_import,
    "export": cmd_export,
    "chapters": cmd_chapters,
    "show": cmd_show,
    "search": cmd_search,
    "bookmark": cmd_bookmark,
}


def main(argv=None):
    args = parse_args(argv)

    # Lazy imports keep --help fast
    from config import load_settings
    from library import BookLibrary
    from store import JsonFileStore

    settings = load_settings()
    if args.store:
        settings.store_path = args.store
    library = BookLibrary(JsonFileStore(settings.store_path), settings.default_content_path)

    try:
        COMMANDS[args.command](args, settings, library)
    except (ValueError, FileNotFoundError) as e:
        print(f"ERROR: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()

"""Write a :class:`~kidsbook_creator.book.Book` to disk."""

from __future__ import annotations

import hashlib
import html
import json
import logging
from pathlib import Path
from typing import Callable, Dict

from ebooklib import epub

from .book import Book

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ("json", "txt", "epub")


def export_json(book: Book, path: Path) -> Path:
    path.write_text(json.dumps(book.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8")
    return path


def render_text(book: Book) -> str:
    lines = [book.title or "My Story"]
    if book.author:
        lines.append(f"By {book.author}")
    lines.append("")
    for chapter in book.chapters:
        lines.append(chapter.title)
        lines.append(chapter.content)
        lines.append("")
    return "\n".join(lines)


def export_text(book: Book, path: Path) -> Path:
    path.write_text(render_text(book), encoding="utf-8")
    return path


def export_epub(book: Book, path: Path) -> Path:
    document = epub.EpubBook()
    digest = hashlib.sha1(book.title.encode("utf-8")).hexdigest()[:16]
    document.set_identifier(f"kidsbook-{digest}")
    document.set_title(book.title or "My Story")
    document.set_language(book.metadata.get("language", "en"))
    if book.author:
        document.add_author(book.author)

    items = []
    for number, chapter in enumerate(book.chapters, start=1):
        item = epub.EpubHtml(
            title=chapter.title,
            file_name=f"chapter_{number:03d}.xhtml",
            lang=book.metadata.get("language", "en"),
        )
        body = [f"<h1>{html.escape(chapter.title)}</h1>"]
        if chapter.image_url:
            body.append(
                f'<p><img src="{html.escape(chapter.image_url, quote=True)}" '
                f'alt="{html.escape(chapter.title, quote=True)}"/></p>'
            )
        body.append(f"<p>{html.escape(chapter.content)}</p>")
        item.content = "\n".join(body)
        document.add_item(item)
        items.append(item)

    document.toc = tuple(items)
    document.add_item(epub.EpubNcx())
    document.add_item(epub.EpubNav())
    document.spine = ["nav", *items]
    epub.write_epub(str(path), document)
    return path


EXPORTERS: Dict[str, Callable[[Book, Path], Path]] = {
    "json": export_json,
    "txt": export_text,
    "epub": export_epub,
}


def export_book(book: Book, path: Path, format: str) -> Path:
    try:
        exporter = EXPORTERS[format]
    except KeyError:
        raise ValueError(f"format must be one of {', '.join(EXPORT_FORMATS)}") from None
    path.parent.mkdir(parents=True, exist_ok=True)
    exporter(book, path)
    logger.info("Wrote %d chapters (%s) to %s", len(book.chapters), format, path)
    return path


__all__ = [
    "EXPORT_FORMATS",
    "export_book",
    "export_epub",
    "export_json",
    "export_text",
    "render_text",
]

"""EPUB ingestion utilities."""

from __future__ import annotations

from dataclasses import dataclass
import html
import logging
import re
from pathlib import Path
from typing import Iterable, List
import zipfile

import ebooklib
from ebooklib import epub

LOGGER = logging.getLogger(__name__)


@dataclass
class TocEntry:
    title: str
    href: str


class EpubLoader:
    """Extract the reading-order text of an EPUB.

    Documents are visited in table-of-contents order; books without a TOC
    fall back to spine order.
    """

    def __init__(self, *, strip_empty: bool = True) -> None:
        self.strip_empty = strip_empty

    def load(self, path: str | Path) -> str:
        try:
            book = epub.read_epub(str(path))
        except (epub.EpubException, zipfile.BadZipFile, KeyError) as exc:
            raise ValueError(f"Failed to process EPUB file: {exc}") from exc
        toc_entries = list(self._flatten_toc(book.toc))
        if not toc_entries:
            LOGGER.warning("EPUB has no explicit TOC, falling back to spine order.")
            toc_entries = self._spine_entries(book)

        sections: List[str] = []
        seen = set()
        for entry in toc_entries:
            href = entry.href.split("#", 1)[0]
            if href in seen:
                continue
            seen.add(href)
            item = book.get_item_with_href(href)
            if item is None:
                LOGGER.debug("Skipping TOC entry without document: %s", entry)
                continue
            text = self._html_to_text(item.get_content().decode("utf-8", errors="ignore"))
            if self.strip_empty and not text.strip():
                LOGGER.debug("Skipping empty document: %s", entry.title)
                continue
            sections.append(text)
        return "\n\n".join(sections)

    def _flatten_toc(self, toc: Iterable) -> Iterable[TocEntry]:
        for node in toc:
            if isinstance(node, (list, tuple)) and node:
                first, *rest = node
                if hasattr(first, "title") and hasattr(first, "href"):
                    yield TocEntry(title=self._safe_title(first.title), href=first.href)
                if rest:
                    yield from self._flatten_toc(rest)
            elif hasattr(node, "title") and hasattr(node, "href"):
                yield TocEntry(title=self._safe_title(node.title), href=node.href)

    def _spine_entries(self, book: epub.EpubBook) -> List[TocEntry]:
        entries: List[TocEntry] = []
        for item in book.get_items_of_type(ebooklib.ITEM_DOCUMENT):
            if isinstance(item, epub.EpubNav):
                continue
            entries.append(TocEntry(title=item.get_name(), href=item.get_name()))
        return entries

    def _safe_title(self, value: str) -> str:
        if isinstance(value, bytes):
            value = value.decode("utf-8", errors="ignore")
        return re.sub(r"\s+", " ", value or "").strip()

    def _html_to_text(self, markup: str) -> str:
        markup = re.sub(r"<(head|script|style)[^>]*>.*?</\1>", "", markup, flags=re.S | re.I)
        markup = re.sub(r"<br[^>]*>", "\n", markup, flags=re.I)
        markup = re.sub(r"</(p|h[1-6]|div|li)>", "\n", markup, flags=re.I)
        text = html.unescape(re.sub(r"<[^>]+>", " ", markup))
        text = re.sub(r"[ \t]+", " ", text)
        text = re.sub(r" ?\n ?", "\n", text)
        text = re.sub(r"\n{2,}", "\n", text)
        return text.strip()


__all__ = ["EpubLoader", "TocEntry"]

"""DOCX ingestion.

A ``.docx`` file is a zip archive; the body text lives in
``word/document.xml`` as ``<w:p>`` paragraphs made of ``<w:t>`` runs.
"""

from __future__ import annotations

import html
import logging
import re
import zipfile
from pathlib import Path
from typing import List

LOGGER = logging.getLogger(__name__)

DOCUMENT_PART = "word/document.xml"

_PARAGRAPH = re.compile(r"<w:p[ >].*?</w:p>|<w:p/>", re.S)
_TEXT_RUN = re.compile(r"<w:t(?:\s[^>]*)?>(.*?)</w:t>", re.S)
_BREAK = re.compile(r"<w:(?:tab|br|cr)\b[^>]*/>")


class DocxLoader:
    """Extract paragraph text from Word documents."""

    def load(self, path: str | Path) -> str:
        path = Path(path)
        try:
            with zipfile.ZipFile(path) as archive:
                xml = archive.read(DOCUMENT_PART).decode("utf-8", errors="ignore")
        except zipfile.BadZipFile as exc:
            raise ValueError(f"Failed to process DOCX file: {path.name} is not a valid document") from exc
        except KeyError as exc:
            raise ValueError(f"Failed to process DOCX file: {path.name} has no {DOCUMENT_PART}") from exc

        paragraphs = self._paragraphs(xml)
        LOGGER.debug("Read %d paragraphs from %s", len(paragraphs), path)
        return "\n\n".join(paragraphs)

    def _paragraphs(self, xml: str) -> List[str]:
        paragraphs: List[str] = []
        for block in _PARAGRAPH.findall(xml):
            block = _BREAK.sub("<w:t> </w:t>", block)
            text = "".join(html.unescape(run) for run in _TEXT_RUN.findall(block))
            if text.strip():
                paragraphs.append(text.strip())
        return paragraphs


__all__ = ["DocxLoader"]

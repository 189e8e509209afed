"""PDF ingestion utilities."""

from __future__ import annotations

import collections
import logging
import re
from pathlib import Path
from typing import Dict, List

from pypdf import PdfReader
from pypdf.errors import PyPdfError

LOGGER = logging.getLogger(__name__)


class PdfLoader:
    """Extract running text from PDFs, minus repeated headers and footers."""

    def __init__(self, *, common_threshold: float = 0.4, strip_page_numbers: bool = True) -> None:
        self.common_threshold = common_threshold
        self.strip_page_numbers = strip_page_numbers

    def load(self, path: str | Path) -> str:
        try:
            reader = PdfReader(str(path))
            page_texts = [page.extract_text() or "" for page in reader.pages]
        except PyPdfError as exc:
            raise ValueError(f"Failed to process PDF file: {exc}") from exc
        except Exception as exc:
            # pypdf surfaces malformed structures as assorted built-in errors.
            raise ValueError(f"Failed to process PDF file: {type(exc).__name__}: {exc}") from exc
        if not any(text.strip() for text in page_texts):
            LOGGER.warning("No extractable text in %s; the PDF may be scanned images.", path)
            return ""
        headers, footers = self._detect_repeated_lines(page_texts)
        if headers or footers:
            LOGGER.debug(
                "Stripping %d header and %d footer lines from %s",
                len(headers),
                len(footers),
                path,
            )
        pages = [self._strip_common_lines(text, headers, footers) for text in page_texts]
        return "\n\n".join(page for page in pages if page)

    def _detect_repeated_lines(self, pages: List[str]) -> tuple[Dict[str, int], Dict[str, int]]:
        header_counts: Dict[str, int] = collections.Counter()
        footer_counts: Dict[str, int] = collections.Counter()
        for text in pages:
            lines = [line.strip() for line in (text or "").splitlines() if line.strip()]
            if not lines:
                continue
            header_counts[lines[0]] += 1
            footer_counts[lines[-1]] += 1
        if len(pages) < 2:
            return {}, {}
        threshold = max(2, int(len(pages) * self.common_threshold))
        headers = {line: count for line, count in header_counts.items() if count >= threshold}
        footers = {line: count for line, count in footer_counts.items() if count >= threshold}
        return headers, footers

    def _strip_common_lines(
        self, text: str, headers: Dict[str, int], footers: Dict[str, int]
    ) -> str:
        lines = []
        for line in text.splitlines():
            stripped = line.strip()
            if not stripped:
                continue
            if stripped in headers or stripped in footers:
                continue
            if self.strip_page_numbers and re.fullmatch(r"\d+", stripped):
                continue
            lines.append(stripped)
        return "\n".join(lines)


__all__ = ["PdfLoader"]

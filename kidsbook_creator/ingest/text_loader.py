"""Plain text ingestion."""

from __future__ import annotations

import logging
from pathlib import Path

LOGGER = logging.getLogger(__name__)


class TextLoader:
    """Read ``.txt`` files, tolerating legacy encodings."""

    def __init__(self, *, encoding: str = "utf-8", fallback_encoding: str = "latin-1") -> None:
        self.encoding = encoding
        self.fallback_encoding = fallback_encoding

    def load(self, path: str | Path) -> str:
        path = Path(path)
        try:
            return path.read_text(encoding=self.encoding)
        except UnicodeDecodeError:
            LOGGER.warning(
                "Failed to decode %s as %s; attempting %s",
                path,
                self.encoding,
                self.fallback_encoding,
            )
            return path.read_text(encoding=self.fallback_encoding)


__all__ = ["TextLoader"]

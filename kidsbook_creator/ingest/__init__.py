"""Extract raw text from uploaded documents."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Protocol, Type

from .docx_loader import DocxLoader
from .epub_loader import EpubLoader
from .pdf_loader import PdfLoader
from .text_loader import TextLoader


class Loader(Protocol):
    def load(self, path: str | Path) -> str: ...


class UnsupportedFileType(ValueError):
    """Raised for uploads whose extension has no loader."""

    def __init__(self, extension: str) -> None:
        super().__init__(f"Unsupported file type: {extension or '(none)'}")
        self.extension = extension


LOADERS: Dict[str, Type] = {
    ".txt": TextLoader,
    ".docx": DocxLoader,
    ".pdf": PdfLoader,
    ".epub": EpubLoader,
}

SUPPORTED_EXTENSIONS = tuple(LOADERS)


def loader_for(path: str | Path) -> Loader:
    extension = Path(path).suffix.lower()
    try:
        return LOADERS[extension]()
    except KeyError:
        raise UnsupportedFileType(extension) from None


__all__ = [
    "DocxLoader",
    "EpubLoader",
    "Loader",
    "PdfLoader",
    "SUPPORTED_EXTENSIONS",
    "TextLoader",
    "UnsupportedFileType",
    "loader_for",
]

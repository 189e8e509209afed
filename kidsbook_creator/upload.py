"""Turn uploaded files into cleaned text and chapters.

Uploads are processed one file at a time. A failing file never aborts a
batch: its record carries ``status="error"`` and the reason instead.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from .ingest import loader_for
from .segmenter import Chapter, ChapterSegmenter, count_words
from .text.clean import TextCleaner

__all__ = [
    "DocumentImportError",
    "ImportedDocument",
    "ProcessedUpload",
    "UploadProcessor",
]

logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 10 * 1024 * 1024
MIN_TEXT_LENGTH = 10


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class ProcessedUpload:
    """Outcome of extracting a single uploaded file."""

    original_name: str
    size: int
    type: str
    extracted_text: str
    status: str
    error: Optional[str] = None
    processed_at: str = field(default_factory=_now)

    @property
    def ok(self) -> bool:
        return self.status == "success"

    @property
    def word_count(self) -> int:
        return count_words(self.extracted_text)

    def to_dict(self) -> Dict[str, object]:
        return {
            "originalName": self.original_name,
            "size": self.size,
            "type": self.type,
            "extractedText": self.extracted_text,
            "status": self.status,
            "error": self.error,
            "wordCount": self.word_count,
            "processedAt": self.processed_at,
        }


@dataclass
class ImportedDocument:
    """A cleaned document together with its detected chapters."""

    title: str
    content: str
    chapters: List[Chapter]
    source: str = "upload"
    processed_at: str = field(default_factory=_now)

    def to_dict(self) -> Dict[str, object]:
        return {
            "title": self.title,
            "content": self.content,
            "chapters": [chapter.to_dict() for chapter in self.chapters],
            "source": self.source,
            "processedAt": self.processed_at,
        }


class DocumentImportError(RuntimeError):
    """Raised when a document cannot be imported as a book."""

    def __init__(self, upload: ProcessedUpload) -> None:
        super().__init__(f"Failed to import {upload.original_name}: {upload.error}")
        self.upload = upload


class UploadProcessor:
    """Extract, clean and segment uploaded documents."""

    def __init__(
        self,
        *,
        cleaner: Optional[TextCleaner] = None,
        segmenter: Optional[ChapterSegmenter] = None,
        max_file_size: int = MAX_FILE_SIZE,
        min_text_length: int = MIN_TEXT_LENGTH,
    ) -> None:
        self.cleaner = cleaner or TextCleaner()
        self.segmenter = segmenter or ChapterSegmenter()
        self.max_file_size = max_file_size
        self.min_text_length = min_text_length

    def process(self, path: Path) -> ProcessedUpload:
        path = Path(path)
        extension = path.suffix.lower()
        size = path.stat().st_size if path.exists() else 0

        try:
            text = self._extract(path, size)
        except (OSError, ValueError) as exc:
            logger.warning("Could not process %s: %s", path.name, exc)
            return ProcessedUpload(
                original_name=path.name,
                size=size,
                type=extension,
                extracted_text="",
                status="error",
                error=str(exc),
            )

        logger.info("Extracted %d characters from %s", len(text), path.name)
        return ProcessedUpload(
            original_name=path.name,
            size=size,
            type=extension,
            extracted_text=text,
            status="success",
        )

    def process_many(self, paths: Iterable[Path]) -> List[ProcessedUpload]:
        return [self.process(path) for path in paths]

    def import_document(self, path: Path, title: Optional[str] = None) -> ImportedDocument:
        upload = self.process(path)
        if not upload.ok:
            raise DocumentImportError(upload)

        chapters = self.segmenter.split(upload.extracted_text)
        if not chapters:
            logger.warning("Could not detect chapters in %s", upload.original_name)
        else:
            logger.info("Detected %d chapters in %s", len(chapters), upload.original_name)
        return ImportedDocument(
            title=title or Path(path).stem,
            content=upload.extracted_text,
            chapters=chapters,
        )

    def _extract(self, path: Path, size: int) -> str:
        if not path.exists():
            raise FileNotFoundError(f"Input file does not exist: {path}")
        if size == 0:
            raise ValueError("Uploaded file is empty")
        if size > self.max_file_size:
            raise ValueError(
                f"File is too large ({size} bytes, limit {self.max_file_size} bytes)"
            )
        loader = loader_for(path)
        logger.debug("Loading %s with %s", path, type(loader).__name__)
        try:
            raw = loader.load(path)
        except (OSError, ValueError):
            raise
        except Exception as exc:
            raise ValueError(f"Failed to process {path.suffix.lower()} file: {exc}") from exc
        text = self.cleaner.clean(raw)
        if len(text) < self.min_text_length:
            raise ValueError("Extracted text is too short or empty")
        return text

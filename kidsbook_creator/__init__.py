"""Turn story prompts and uploaded documents into chaptered children's books."""

from __future__ import annotations

__version__ = "0.1.0"

from .book import Book
from .builder import BookBuilder, BuildOptions, BuildResult
from .segmenter import Chapter, ChapterSegmenter, split_into_chapters
from .story import StoryGenerator, StoryRequest
from .upload import ImportedDocument, ProcessedUpload, UploadProcessor

__all__ = [
    "Book",
    "BookBuilder",
    "BuildOptions",
    "BuildResult",
    "Chapter",
    "ChapterSegmenter",
    "ImportedDocument",
    "ProcessedUpload",
    "StoryGenerator",
    "StoryRequest",
    "UploadProcessor",
    "split_into_chapters",
]

"""Shared book-building logic used by the CLI and library callers.

A build either imports an uploaded document or generates a story from a
prompt, optionally illustrates every chapter, and exports the result. Chapter
illustrations are cached on disk so a resumed build keeps the images it
already has.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple
import hashlib
import json
import logging
import os
import time

from .book import Book
from .export import EXPORT_FORMATS, export_book
from .images import CharacterReference, GeneratedImage, ImageGenerator
from .segmenter import Chapter
from .story import StoryGenerator, StoryRequest
from .upload import UploadProcessor

__all__ = [
    "BookBuilder",
    "BuildOptions",
    "BuildResult",
]

logger = logging.getLogger(__name__)


@dataclass
class BuildOptions:
    """Options that control how a book is assembled and exported."""

    output_path: Path
    input_path: Optional[Path] = None
    story: Optional[StoryRequest] = None
    title: Optional[str] = None
    format: str = "json"
    with_images: bool = False
    art_style: str = "cartoon"
    cache_dir: Optional[Path] = None
    resume: bool = False
    metadata: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if (self.input_path is None) == (self.story is None):
            raise ValueError("Exactly one of input_path or story must be provided")
        if self.format not in EXPORT_FORMATS:
            raise ValueError(f"format must be one of {', '.join(EXPORT_FORMATS)}")
        if self.story is not None:
            self.art_style = self.story.art_style


@dataclass
class BuildResult:
    """Outcome returned after a build run."""

    output_path: Path
    book: Book
    generated_images: int
    reused_images: int
    elapsed_seconds: float


class BookBuilder:
    """High level orchestrator for importing, illustrating and exporting books."""

    def __init__(
        self,
        default_cache_dir: Optional[Path] = None,
        *,
        uploads: Optional[UploadProcessor] = None,
        stories: Optional[StoryGenerator] = None,
        images: Optional[ImageGenerator] = None,
    ) -> None:
        self.default_cache_dir = (
            default_cache_dir
            or Path(os.getenv("KIDSBOOK_CACHE", Path.home() / ".cache" / "kidsbook_creator"))
        )
        self.uploads = uploads or UploadProcessor()
        self.stories = stories or StoryGenerator()
        self.images = images or ImageGenerator()

    # Public API -----------------------------------------------------------------
    def build(self, options: BuildOptions) -> BuildResult:
        start_time = time.perf_counter()
        logger.debug("Starting build with options: %s", options)

        book = self._assemble_book(options)
        logger.info("Prepared %d chapters", len(book.chapters))

        generated = 0
        reused = 0
        if options.with_images and book.chapters:
            cache_dir = options.cache_dir or self.default_cache_dir
            cache_dir.mkdir(parents=True, exist_ok=True)
            logger.debug("Using cache directory: %s", cache_dir)
            generated, reused = self._illustrate(book, options, cache_dir)

        output_path = export_book(book, options.output_path, options.format)

        elapsed = time.perf_counter() - start_time
        logger.info("Finished build in %.2fs", elapsed)

        return BuildResult(
            output_path=output_path,
            book=book,
            generated_images=generated,
            reused_images=reused,
            elapsed_seconds=elapsed,
        )

    # Content ---------------------------------------------------------------------
    def _assemble_book(self, options: BuildOptions) -> Book:
        if options.story is not None:
            book = self.stories.generate(options.story)
        else:
            input_path = options.input_path
            if not input_path.exists():
                raise FileNotFoundError(f"Input file does not exist: {input_path}")
            document = self.uploads.import_document(input_path, title=options.title)
            if not document.chapters:
                raise ValueError(f"Could not detect chapters in {input_path.name}")
            book = Book(
                title=document.title,
                chapters=document.chapters,
                metadata={
                    "source": document.source,
                    "importedFrom": input_path.name,
                    "processedAt": document.processed_at,
                },
            )
        book.metadata.update(options.metadata)
        return book

    # Illustration ----------------------------------------------------------------
    def _characters(self, book: Book) -> List[CharacterReference]:
        if not book.character_name:
            return []
        return [CharacterReference.create(book.character_name, book.character_name)]

    def _illustrate(
        self, book: Book, options: BuildOptions, cache_dir: Path
    ) -> tuple[int, int]:
        characters = self._characters(book)
        character_key = ",".join(c.name for c in characters)
        reused = 0
        pending: List[Tuple[Chapter, Path]] = []
        for chapter in book.chapters:
            key = self._chapter_cache_key(chapter, options, character_key)
            cache_path = cache_dir / f"{key}.json"
            if options.resume and cache_path.exists():
                image = self._read_cached_image(cache_path)
                if image is not None:
                    self._apply_image(chapter, image)
                    reused += 1
                    logger.debug("Reused cached image for %s", chapter.id)
                    continue
            pending.append((chapter, cache_path))

        results = self.images.generate_chapter_images(
            [chapter for chapter, _ in pending], options.art_style, characters
        )
        generated = 0
        for (chapter, cache_path), result in zip(pending, results):
            if not result.success:
                logger.warning("Leaving %s without an illustration: %s", chapter.id, result.error)
                continue
            cache_path.write_text(json.dumps(result.image.to_dict()), encoding="utf-8")
            self._apply_image(chapter, result.image)
            generated += 1
            logger.debug("Generated image for %s", chapter.id)

        if characters and generated + reused:
            sheet = self.images.generate_character(characters[0], options.art_style)
            book.metadata["characterImage"] = sheet.url
        return generated, reused

    def _apply_image(self, chapter: Chapter, image: GeneratedImage) -> None:
        chapter.image_prompt = image.prompt
        chapter.image_url = image.url

    def _chapter_cache_key(
        self, chapter: Chapter, options: BuildOptions, characters: str = ""
    ) -> str:
        fingerprint = "|".join(
            [
                chapter.title,
                hashlib.sha256(chapter.content.encode("utf-8")).hexdigest(),
                options.art_style.lower(),
                characters,
            ]
        )
        return hashlib.sha256(fingerprint.encode("utf-8")).hexdigest()

    def _read_cached_image(self, path: Path) -> Optional[GeneratedImage]:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            return GeneratedImage(
                url=data["url"],
                prompt=data["prompt"],
                style=data["style"],
                metadata=data.get("metadata", {}),
            )
        except (OSError, ValueError, KeyError, TypeError) as exc:
            logger.warning("Ignoring unreadable cache entry %s: %s", path.name, exc)
            return None

"""Split extracted document text into chapter-sized records."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import re
from typing import Dict, Iterable, List, Optional, Pattern, Sequence

LOGGER = logging.getLogger(__name__)

# Priority order matters: the first pattern with more than one hit is used.
DEFAULT_MARKERS = (
    r"chapter\s+\d+",
    r"part\s+\d+",
    r"section\s+\d+",
    r"\d+\.",
)

DEFAULT_CHUNK_WORDS = 500
DEFAULT_MIN_CHARS = 50


@dataclass
class Chapter:
    """A chapter of a book, either imported or generated."""

    id: str
    title: str
    content: str
    word_count: int
    image_prompt: Optional[str] = None
    image_url: Optional[str] = None

    @property
    def has_image(self) -> bool:
        return bool(self.image_url)

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "wordCount": self.word_count,
            "imagePrompt": self.image_prompt,
            "imageUrl": self.image_url,
            "hasImage": self.has_image,
        }


def count_words(text: str) -> int:
    return len(text.split())


class ChapterSegmenter:
    """Detect chapter boundaries in plain text.

    Marker patterns are tried in order; the first one that matches more than
    once splits the text. Without a usable marker the text is cut into
    windows of ``chunk_words`` tokens. Fragments whose trimmed length is not
    above ``min_chars`` are dropped and do not consume a chapter number.
    """

    def __init__(
        self,
        *,
        markers: Optional[Iterable[str]] = None,
        chunk_words: int = DEFAULT_CHUNK_WORDS,
        min_chars: int = DEFAULT_MIN_CHARS,
    ) -> None:
        if chunk_words <= 0:
            raise ValueError("chunk_words must be positive")
        patterns = DEFAULT_MARKERS if markers is None else tuple(markers)
        self.markers: List[Pattern[str]] = [
            re.compile(p, re.IGNORECASE | re.ASCII) for p in patterns
        ]
        self.chunk_words = chunk_words
        self.min_chars = min_chars

    def split(self, text: str) -> List[Chapter]:
        fragments = self._split_on_markers(text)
        if fragments is None:
            fragments = self._split_by_length(text)
            LOGGER.debug("No chapter markers found; using %d-word chunks", self.chunk_words)

        chapters: List[Chapter] = []
        for fragment in fragments:
            content = fragment.strip()
            if len(content) <= self.min_chars:
                continue
            number = len(chapters) + 1
            chapters.append(
                Chapter(
                    id=f"chapter-{number}",
                    title=f"Chapter {number}",
                    content=content,
                    word_count=count_words(content),
                )
            )
        LOGGER.debug("Kept %d of %d fragments", len(chapters), len(fragments))
        return chapters

    def _split_on_markers(self, text: str) -> Optional[List[str]]:
        for marker in self.markers:
            matches = list(marker.finditer(text))
            if len(matches) < 2:
                continue
            LOGGER.debug("Splitting on %r (%d matches)", marker.pattern, len(matches))
            return _segments_after(text, matches)
        return None

    def _split_by_length(self, text: str) -> List[str]:
        words = text.split()
        return [
            " ".join(words[start : start + self.chunk_words])
            for start in range(0, len(words), self.chunk_words)
        ]


def _segments_after(text: str, matches: Sequence[re.Match]) -> List[str]:
    """Return the text between consecutive matches and after the last one."""

    segments = []
    for idx, match in enumerate(matches):
        end = matches[idx + 1].start() if idx + 1 < len(matches) else len(text)
        segments.append(text[match.end() : end])
    return segments


_DEFAULT_SEGMENTER = ChapterSegmenter()


def split_into_chapters(text: str) -> List[Chapter]:
    """Split *text* into chapters using the default markers and thresholds."""

    return _DEFAULT_SEGMENTER.split(text or "")


__all__ = [
    "Chapter",
    "ChapterSegmenter",
    "DEFAULT_MARKERS",
    "count_words",
    "split_into_chapters",
]

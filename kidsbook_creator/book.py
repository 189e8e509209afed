"""The book assembled from imported or generated chapters."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .segmenter import Chapter


@dataclass
class Book:
    title: str
    chapters: List[Chapter]
    metadata: Dict[str, str] = field(default_factory=dict)
    character_name: Optional[str] = None

    @property
    def author(self) -> str:
        return self.metadata.get("author", "")

    @property
    def word_count(self) -> int:
        return sum(chapter.word_count for chapter in self.chapters)

    def to_dict(self) -> Dict[str, object]:
        data: Dict[str, object] = {
            "title": self.title,
            "chapters": [chapter.to_dict() for chapter in self.chapters],
            "metadata": dict(self.metadata),
        }
        if self.character_name:
            data["characterName"] = self.character_name
        return data


__all__ = ["Book"]

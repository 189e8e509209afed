"""Template based story generation.

This stands in for a real text generation service: a request goes in, a
:class:`~kidsbook_creator.book.Book` comes out. Titles and prose are picked
from fixed tables by keyword and by the chapter's position in the story arc.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
import logging
from typing import List, Optional

from .book import Book
from .segmenter import Chapter, count_words

__all__ = [
    "AGE_GROUPS",
    "CHAPTER_COUNTS",
    "StoryGenerator",
    "StoryRequest",
    "extract_themes",
    "image_prompt",
]

logger = logging.getLogger(__name__)

AGE_GROUPS = ("3-5", "6-8", "9-12", "13+")
CHAPTER_COUNTS = {"short": 4, "medium": 6, "long": 8}

STORY_ARC = [
    "The Beginning",
    "A New Discovery",
    "The Challenge",
    "Making Friends",
    "The Big Problem",
    "Finding Solutions",
    "Working Together",
    "The Happy Ending",
]

STYLE_DESCRIPTORS = {
    "cartoon": "colorful cartoon style",
    "watercolor": "soft watercolor painting",
    "digital": "digital art illustration",
    "hand-drawn": "hand-drawn sketch style",
    "realistic": "realistic illustration",
}

THEME_KEYWORDS = {
    "adventure": ("adventure", "journey", "explore"),
    "friendship": ("friend", "together", "help"),
    "magic": ("magic", "wizard", "fairy"),
    "nature": ("animal", "pet", "forest"),
}

INTRODUCTIONS = {
    "adventure": (
        "Our story begins in a wonderful place where exciting adventures are about to "
        "unfold. The main character is curious and brave, ready to explore the world "
        "around them."
    ),
    "friendship": (
        "In a cozy neighborhood, someone special is about to make new friends and learn "
        "important lessons about kindness and caring."
    ),
    "magic": (
        "In a land where magic sparkles in the air, something extraordinary is about to "
        "happen that will change everything."
    ),
}

DEFAULT_INTRODUCTION = (
    "Once upon a time, in a place filled with wonder and possibility, our story begins "
    "with someone very special who is about to embark on an amazing journey."
)

RISING_ACTION = (
    "As our adventure continues, new discoveries are made and interesting characters are "
    "met along the way. Each step forward brings new excitement and learning opportunities."
)

GENTLE_CLIMAX = (
    "A small challenge appears, but it's nothing that can't be solved with creativity, "
    "kindness, and the help of friends."
)

CLIMAX = (
    "The biggest challenge of the journey appears, testing everything our characters have "
    "learned. But they're ready to face it together."
)

RESOLUTION = (
    "With teamwork, creativity, and kindness, everything works out wonderfully. Our "
    "characters have learned valuable lessons and made lasting friendships. The adventure "
    "ends with joy and the promise of more wonderful times ahead."
)

LIFE_LESSON = (
    " The experience taught valuable life lessons about perseverance, empathy, and "
    "personal growth."
)

SIMPLER_WORDS = {
    "extraordinary": "special",
    "challenging": "hard",
    "magnificent": "beautiful",
}


@dataclass
class StoryRequest:
    """Everything needed to generate a story."""

    title: str
    prompt: str
    age: str
    length: str
    art_style: str
    character_name: Optional[str] = None

    def __post_init__(self) -> None:
        for name in ("title", "prompt", "age", "length", "art_style"):
            if not str(getattr(self, name) or "").strip():
                raise ValueError(f"Missing required field: {name}")
        if self.age not in AGE_GROUPS:
            raise ValueError(f"Unsupported age group: {self.age}")
        if self.length not in CHAPTER_COUNTS:
            raise ValueError(f"length must be one of {', '.join(CHAPTER_COUNTS)}")

    @property
    def chapter_count(self) -> int:
        return CHAPTER_COUNTS[self.length]


def extract_themes(prompt: str) -> List[str]:
    lowered = prompt.lower()
    return [
        theme
        for theme, keywords in THEME_KEYWORDS.items()
        if any(keyword in lowered for keyword in keywords)
    ]


def image_prompt(chapter_title: str, chapter_content: str, art_style: str) -> str:
    descriptor = STYLE_DESCRIPTORS.get(art_style.lower(), "colorful illustration")
    return (
        f"{descriptor}, {chapter_title}, child-friendly, bright colors, engaging scene, "
        f"book illustration, {chapter_content[:100]}"
    )


class StoryGenerator:
    """Fabricate a chaptered story from a :class:`StoryRequest`."""

    def generate(self, request: StoryRequest) -> Book:
        total = request.chapter_count
        chapters: List[Chapter] = []
        for number in range(1, total + 1):
            title = self.chapter_title(number, request.prompt)
            content = self.chapter_content(number, total, request.prompt, request.age)
            chapters.append(
                Chapter(
                    id=f"chapter-{number}",
                    title=title,
                    content=content,
                    word_count=count_words(content),
                    image_prompt=image_prompt(title, content, request.art_style),
                )
            )
        logger.info("Generated %d chapters for %r", len(chapters), request.title)
        return Book(
            title=request.title,
            chapters=chapters,
            character_name=request.character_name,
            metadata={
                "age": request.age,
                "length": str(total),
                "artStyle": request.art_style,
                "generatedAt": datetime.now(timezone.utc).isoformat(),
            },
        )

    def chapter_title(self, number: int, prompt: str) -> str:
        base = STORY_ARC[number - 1] if number <= len(STORY_ARC) else f"Chapter {number}"
        lowered = prompt.lower()
        if "adventure" in lowered:
            return f"Chapter {number}: {base} of the Adventure"
        if "magic" in lowered:
            return f"Chapter {number}: {base} - A Magical Tale"
        if "animal" in lowered:
            return f"Chapter {number}: {base} in the Animal Kingdom"
        return f"Chapter {number}: {base}"

    def chapter_content(self, number: int, total: int, prompt: str, age: str) -> str:
        progression = number / total
        if progression <= 0.25:
            content = self._introduction(prompt)
        elif progression <= 0.5:
            content = RISING_ACTION
        elif progression <= 0.75:
            content = GENTLE_CLIMAX if age == "3-5" else CLIMAX
        else:
            content = RESOLUTION
        return self.adjust_for_age(content, age)

    def adjust_for_age(self, content: str, age: str) -> str:
        if age == "3-5":
            for word, simpler in SIMPLER_WORDS.items():
                content = content.replace(word, simpler)
        elif age == "13+":
            content += LIFE_LESSON
        return content

    def _introduction(self, prompt: str) -> str:
        themes = extract_themes(prompt)
        for theme in ("adventure", "friendship", "magic"):
            if theme in themes:
                return INTRODUCTIONS[theme]
        return DEFAULT_INTRODUCTION

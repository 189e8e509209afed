"""Placeholder illustration service.

Prompts are enriched the way a real image backend would receive them, but the
"image" is a seeded placeholder URL.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
import logging
import random
import string
from typing import Dict, Iterable, List, Optional, Sequence

from .segmenter import Chapter

LOGGER = logging.getLogger(__name__)

PLACEHOLDER_URL = "https://picsum.photos/seed/{seed}/600/400"

STYLE_ENHANCEMENTS = {
    "cartoon": "vibrant cartoon style, bold outlines, bright colors, child-friendly characters, animated look",
    "watercolor": "soft watercolor painting, gentle brushstrokes, flowing colors, artistic texture, dreamy atmosphere",
    "digital": "digital art illustration, clean lines, modern style, polished finish, contemporary look",
    "hand-drawn": "hand-drawn illustration, sketch-like quality, artistic lines, traditional art feel",
    "realistic": "realistic illustration, detailed artwork, lifelike characters, natural lighting",
}

SAFETY_GUIDELINES = (
    "child-safe content",
    "appropriate for children",
    "wholesome and positive",
    "no scary or inappropriate elements",
    "bright and cheerful",
    "educational and inspiring",
)

# Each style draws its seed from its own band of 100 so styles don't collide.
STYLE_SEED_OFFSETS = {
    "cartoon": 0,
    "watercolor": 100,
    "digital": 200,
    "hand-drawn": 300,
    "realistic": 400,
}

VISUAL_KEYWORDS = (
    "forest", "castle", "mountain", "ocean", "garden", "house", "tree",
    "animal", "bird", "cat", "dog", "rabbit", "bear", "dragon",
    "magic", "sparkle", "rainbow", "star", "moon", "sun",
    "adventure", "journey", "path", "bridge", "door", "window",
)


@dataclass
class GeneratedImage:
    url: str
    prompt: str
    style: str
    metadata: Dict[str, object] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, object]:
        return {
            "url": self.url,
            "prompt": self.prompt,
            "style": self.style,
            "metadata": dict(self.metadata),
        }


@dataclass
class ImageResult:
    """Outcome of illustrating one chapter."""

    chapter_id: str
    success: bool
    image: Optional[GeneratedImage] = None
    error: Optional[str] = None


@dataclass
class CharacterReference:
    """Description of a recurring character, used to keep illustrations consistent."""

    id: str
    name: str
    description: str
    art_style: str = ""
    visual_features: List[str] = field(default_factory=list)
    reference_images: List[str] = field(default_factory=list)
    created_at: str = ""

    @classmethod
    def create(
        cls,
        name: str,
        description: str,
        *,
        art_style: str = "",
        visual_features: Iterable[str] = (),
        reference_images: Iterable[str] = (),
        rng: Optional[random.Random] = None,
    ) -> "CharacterReference":
        rng = rng or random.Random()
        suffix = "".join(rng.choice(string.ascii_lowercase + string.digits) for _ in range(9))
        return cls(
            id=f"char_{suffix}",
            name=name,
            description=description,
            art_style=art_style,
            visual_features=list(visual_features),
            reference_images=list(reference_images),
            created_at=datetime.now(timezone.utc).isoformat(),
        )


def extract_visual_elements(content: str, limit: int = 3) -> List[str]:
    lowered = content.lower()
    return [keyword for keyword in VISUAL_KEYWORDS if keyword in lowered][:limit]


class ImageGenerator:
    """Produce placeholder illustrations for chapters."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()

    def enhance_prompt(self, prompt: str, art_style: str) -> str:
        enhancement = STYLE_ENHANCEMENTS.get(art_style.lower(), "colorful illustration")
        return f"{prompt}, {enhancement}"

    def add_safety_guidelines(self, prompt: str) -> str:
        return f"{prompt}, {', '.join(SAFETY_GUIDELINES)}"

    def placeholder_url(self, art_style: str) -> str:
        offset = STYLE_SEED_OFFSETS.get(art_style.lower())
        if offset is None:
            seed = self.rng.randint(1, 500)
        else:
            seed = offset + self.rng.randint(1, 100)
        return PLACEHOLDER_URL.format(seed=seed)

    def generate(
        self,
        prompt: str,
        art_style: str,
        *,
        chapter_title: Optional[str] = None,
        character_consistency: bool = False,
    ) -> GeneratedImage:
        if not prompt or not art_style:
            raise ValueError("Missing required fields: prompt and art_style")
        full_prompt = self.add_safety_guidelines(self.enhance_prompt(prompt, art_style))
        url = self.placeholder_url(art_style)
        LOGGER.debug("Generated %s placeholder %s", art_style, url)
        return GeneratedImage(
            url=url,
            prompt=full_prompt,
            style=art_style,
            metadata={
                "generatedAt": datetime.now(timezone.utc).isoformat(),
                "chapterTitle": chapter_title or "Untitled Chapter",
                "characterConsistency": character_consistency,
            },
        )

    def generate_character(self, character: CharacterReference, art_style: str) -> GeneratedImage:
        prompt = (
            f"{character.description}, consistent character design, same appearance, "
            f"{art_style} style"
        )
        return self.generate(prompt, art_style, character_consistency=True)

    def chapter_prompt(
        self, chapter: Chapter, characters: Sequence[CharacterReference] = ()
    ) -> str:
        prompt = chapter.image_prompt or f"Illustration for {chapter.title}"
        if characters:
            prompt += f", featuring {', '.join(c.description for c in characters)}"
        elements = extract_visual_elements(chapter.content)
        if elements:
            prompt += f", showing {', '.join(elements)}"
        return prompt

    def generate_chapter_images(
        self,
        chapters: Iterable[Chapter],
        art_style: str,
        characters: Sequence[CharacterReference] = (),
    ) -> List[ImageResult]:
        results: List[ImageResult] = []
        for chapter in chapters:
            try:
                image = self.generate(
                    self.chapter_prompt(chapter, characters),
                    art_style,
                    chapter_title=chapter.title,
                    character_consistency=bool(characters),
                )
            except ValueError as exc:
                LOGGER.warning("Could not illustrate %s: %s", chapter.id, exc)
                results.append(ImageResult(chapter_id=chapter.id, success=False, error=str(exc)))
                continue
            results.append(ImageResult(chapter_id=chapter.id, success=True, image=image))
        return results


__all__ = [
    "CharacterReference",
    "GeneratedImage",
    "ImageGenerator",
    "ImageResult",
    "extract_visual_elements",
]

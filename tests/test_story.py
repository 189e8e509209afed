from __future__ import annotations

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from kidsbook_creator.story import (
    CLIMAX,
    GENTLE_CLIMAX,
    LIFE_LESSON,
    RESOLUTION,
    RISING_ACTION,
    StoryGenerator,
    StoryRequest,
    extract_themes,
    image_prompt,
)


def make_request(**overrides) -> StoryRequest:
    values = dict(
        title="Pip's Big Day",
        prompt="a brave mouse goes on an adventure",
        age="6-8",
        length="short",
        art_style="watercolor",
    )
    values.update(overrides)
    return StoryRequest(**values)


@pytest.mark.parametrize(
    "overrides",
    [{"title": ""}, {"prompt": "   "}, {"age": "2-3"}, {"length": "epic"}],
)
def test_invalid_requests_are_rejected(overrides):
    with pytest.raises(ValueError):
        make_request(**overrides)


@pytest.mark.parametrize("length,count", [("short", 4), ("medium", 6), ("long", 8)])
def test_chapter_count_follows_length(length, count):
    book = StoryGenerator().generate(make_request(length=length))

    assert len(book.chapters) == count
    assert [c.id for c in book.chapters] == [f"chapter-{n}" for n in range(1, count + 1)]
    assert book.metadata["length"] == str(count)


@pytest.mark.parametrize(
    "prompt,expected",
    [
        ("an adventure with magic", "Chapter 1: The Beginning of the Adventure"),
        ("a magic kingdom", "Chapter 1: The Beginning - A Magical Tale"),
        ("animal friends", "Chapter 1: The Beginning in the Animal Kingdom"),
        ("a rainy day", "Chapter 1: The Beginning"),
    ],
)
def test_titles_follow_prompt_keywords(prompt, expected):
    assert StoryGenerator().chapter_title(1, prompt) == expected


def test_title_beyond_story_arc():
    assert StoryGenerator().chapter_title(9, "a rainy day") == "Chapter 9: Chapter 9"


def test_content_follows_story_arc():
    book = StoryGenerator().generate(make_request(prompt="a rainy day"))
    contents = [c.content for c in book.chapters]

    assert contents[0].startswith("Once upon a time")
    assert contents[1:] == [RISING_ACTION, CLIMAX, RESOLUTION]


def test_young_readers_get_gentler_text():
    generator = StoryGenerator()

    assert generator.chapter_content(3, 4, "magic", "3-5") == GENTLE_CLIMAX
    intro = generator.chapter_content(1, 4, "a magic wand", "3-5")
    assert "extraordinary" not in intro
    assert "something special" in intro


def test_teen_readers_get_life_lesson():
    assert StoryGenerator().chapter_content(4, 4, "x", "13+") == RESOLUTION + LIFE_LESSON


def test_extract_themes():
    assert extract_themes("A magical forest journey with friends") == [
        "adventure",
        "friendship",
        "magic",
        "nature",
    ]
    assert extract_themes("a quiet nap") == []


def test_image_prompt_uses_style_and_content():
    content = "x" * 150

    prompt = image_prompt("Chapter 1: Hello", content, "Cartoon")

    assert prompt.startswith("colorful cartoon style, Chapter 1: Hello, child-friendly")
    assert prompt.endswith(", " + "x" * 100)
    assert image_prompt("T", "c", "crayon").startswith("colorful illustration, T")


def test_generated_chapters_carry_image_prompts():
    book = StoryGenerator().generate(make_request(character_name="Pip"))

    assert book.character_name == "Pip"
    assert book.to_dict()["characterName"] == "Pip"
    assert all(c.image_prompt.startswith("soft watercolor painting") for c in book.chapters)
    assert not any(c.has_image for c in book.chapters)

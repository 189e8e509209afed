"""Clean text pulled out of uploaded documents."""

from __future__ import annotations

from dataclasses import dataclass, field
import re
from typing import Mapping, MutableMapping

DEFAULT_LIGATURES = {
    "ﬀ": "ff",
    "ﬁ": "fi",
    "ﬂ": "fl",
    "ﬃ": "ffi",
    "ﬄ": "ffl",
    "æ": "ae",
    "œ": "oe",
}

SMART_QUOTES = {
    "“": '"',
    "”": '"',
    "‘": "'",
    "’": "'",
    "—": "-",
    "–": "-",
}

# Anything outside word characters, whitespace and basic punctuation.
DISALLOWED_CHARS = re.compile(r"[^\w\s.,!?;:'\"()-]")


@dataclass
class CleaningOptions:
    """Configuration toggles for text cleaning."""

    normalize_quotes: bool = True
    replace_ligatures: bool = True
    collapse_whitespace: bool = True
    strip_special_chars: bool = True
    fix_sentence_spacing: bool = True
    custom_replacements: MutableMapping[str, str] = field(default_factory=dict)


class TextCleaner:
    """Flatten extracted text into a single whitespace-normalised line."""

    def __init__(self, options: CleaningOptions | None = None) -> None:
        self.options = options or CleaningOptions()

    def clean(self, text: str | None) -> str:
        if not text:
            return ""
        if self.options.normalize_quotes:
            text = self._normalize_quotes(text)
        if self.options.replace_ligatures:
            text = self._replace_ligatures(text)
        if self.options.custom_replacements:
            text = self._apply_mapping(text, self.options.custom_replacements)
        if self.options.collapse_whitespace:
            text = re.sub(r"\s+", " ", text)
        if self.options.strip_special_chars:
            text = DISALLOWED_CHARS.sub("", text)
        text = text.strip()
        if self.options.fix_sentence_spacing:
            text = self._fix_sentence_spacing(text).strip()
        return text

    def _normalize_quotes(self, text: str) -> str:
        for src, dst in SMART_QUOTES.items():
            text = text.replace(src, dst)
        return text

    def _replace_ligatures(self, text: str) -> str:
        for src, dst in DEFAULT_LIGATURES.items():
            text = text.replace(src, dst)
        return text

    def _apply_mapping(self, text: str, mapping: Mapping[str, str]) -> str:
        pattern = re.compile("|".join(re.escape(k) for k in mapping.keys()))

        def repl(match: re.Match[str]) -> str:
            return mapping[match.group(0)]

        return pattern.sub(repl, text)

    def _fix_sentence_spacing(self, text: str) -> str:
        text = re.sub(r"\.\s*", ". ", text)
        text = re.sub(r"\?\s*", "? ", text)
        text = re.sub(r"!\s*", "! ", text)
        return text


def clean_extracted_text(text: str | None) -> str:
    return TextCleaner().clean(text)


__all__ = ["CleaningOptions", "TextCleaner", "clean_extracted_text"]

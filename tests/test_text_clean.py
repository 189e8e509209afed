from __future__ import annotations

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from kidsbook_creator.text.clean import CleaningOptions, TextCleaner, clean_extracted_text


def test_empty_input_is_empty():
    assert clean_extracted_text("") == ""
    assert clean_extracted_text(None) == ""


def test_whitespace_is_collapsed_to_single_line():
    assert clean_extracted_text("  Hello   world\n\n\tagain  ") == "Hello world again"


def test_special_characters_are_removed():
    assert clean_extracted_text("Hi @there #1 (friend)") == "Hi there 1 (friend)"


def test_sentence_spacing_is_normalised():
    assert clean_extracted_text("One.Two!Three?Four.") == "One. Two! Three? Four."


def test_smart_quotes_and_ligatures():
    assert clean_extracted_text("“Let’s ﬁsh” — she said") == "\"Let's fish\" - she said"


def test_steps_can_be_disabled():
    cleaner = TextCleaner(CleaningOptions(strip_special_chars=False, fix_sentence_spacing=False))

    assert cleaner.clean("Email me @ home.Now") == "Email me @ home.Now"


def test_custom_replacements_run_before_collapsing():
    cleaner = TextCleaner(CleaningOptions(custom_replacements={"Mr.": "Mister"}))

    assert cleaner.clean("Mr.   Fox") == "Mister Fox"

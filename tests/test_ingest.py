from __future__ import annotations

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from documents import write_docx, write_epub, write_pdf
from kidsbook_creator.ingest import (
    DocxLoader,
    EpubLoader,
    PdfLoader,
    TextLoader,
    UnsupportedFileType,
    loader_for,
)


def test_loader_for_picks_loader_by_extension():
    assert isinstance(loader_for("story.TXT"), TextLoader)
    assert isinstance(loader_for("story.docx"), DocxLoader)
    assert isinstance(loader_for("story.pdf"), PdfLoader)
    assert isinstance(loader_for("story.epub"), EpubLoader)


def test_loader_for_rejects_unknown_extension():
    with pytest.raises(UnsupportedFileType) as excinfo:
        loader_for("story.rtf")

    assert isinstance(excinfo.value, ValueError)
    assert str(excinfo.value) == "Unsupported file type: .rtf"


def test_text_loader_falls_back_to_latin1(tmp_path):
    path = tmp_path / "legacy.txt"
    path.write_bytes("Caf\xe9 stories".encode("latin-1"))

    assert TextLoader().load(path) == "Café stories"


def test_docx_loader_reads_paragraphs(tmp_path):
    path = write_docx(tmp_path / "story.docx", ["Chapter 1: The Start", "Tom &amp; Jerry ran."])

    assert DocxLoader().load(path) == "Chapter 1: The Start\n\nTom & Jerry ran."


def test_docx_loader_rejects_non_zip(tmp_path):
    path = tmp_path / "broken.docx"
    path.write_text("not a zip", encoding="utf-8")

    with pytest.raises(ValueError):
        DocxLoader().load(path)


def test_pdf_loader_extracts_page_text(tmp_path):
    path = write_pdf(
        tmp_path / "story.pdf",
        [["The Fox Book", "Chapter 1 The fox woke up early."], ["The Fox Book", "Chapter 2 The fox ate."]],
    )

    text = PdfLoader().load(path)

    assert "The fox woke up early." in text
    assert "The fox ate." in text
    assert "The Fox Book" not in text


def test_pdf_loader_rejects_garbage(tmp_path):
    path = tmp_path / "broken.pdf"
    path.write_bytes(b"this is not a pdf document at all")

    with pytest.raises(ValueError):
        PdfLoader().load(path)


def test_pdf_loader_wraps_unexpected_reader_errors(tmp_path, monkeypatch):
    def broken_reader(path):
        raise IndexError("list index out of range")

    monkeypatch.setattr("kidsbook_creator.ingest.pdf_loader.PdfReader", broken_reader)
    path = write_pdf(tmp_path / "story.pdf", [["Chapter 1 The fox woke up early."]])

    with pytest.raises(ValueError, match="IndexError"):
        PdfLoader().load(path)


def test_pdf_repeated_lines_and_page_numbers_are_stripped():
    loader = PdfLoader()
    pages = [
        "My Book\nOnce upon a time\n1",
        "My Book\nthere was a fox\n2",
        "My Book\nwho loved berries\n3",
    ]

    headers, footers = loader._detect_repeated_lines(pages)
    stripped = [loader._strip_common_lines(page, headers, footers) for page in pages]

    assert "My Book" in headers
    assert not footers
    assert stripped == ["Once upon a time", "there was a fox", "who loved berries"]


def test_epub_loader_reads_documents_in_toc_order(tmp_path):
    path = write_epub(
        tmp_path / "story.epub",
        [
            ("Chapter 1", "The owl &amp; the cat set off."),
            ("Chapter 2", "They sailed away for a year and a day."),
        ],
    )

    text = EpubLoader().load(path)

    assert text.index("The owl & the cat set off.") < text.index("They sailed away")
    assert "Chapter 2" in text

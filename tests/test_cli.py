from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from kidsbook_creator import cli


def test_generate_book_from_prompt(tmp_path, capsys):
    out = tmp_path / "tale.json"

    code = cli.main(["--prompt", "a magic adventure", "--title", "Tale", "--out", str(out)])

    assert code == 0
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["title"] == "Tale"
    assert len(data["chapters"]) == 4
    assert "Wrote 4 chapters" in capsys.readouterr().out


def test_import_with_images(tmp_path, capsys):
    source = tmp_path / "story.txt"
    source.write_text(
        "Part 1 The little boat floated down the sleepy river past the willow trees. "
        "Part 2 At the end of the river the boat found the wide and sparkling sea.",
        encoding="utf-8",
    )
    out = tmp_path / "story.txt.json"

    code = cli.main(
        [
            "--in",
            str(source),
            "--out",
            str(out),
            "--images",
            "--cache-dir",
            str(tmp_path / "cache"),
            "--meta",
            "author=Ada",
        ]
    )

    assert code == 0
    data = json.loads(out.read_text(encoding="utf-8"))
    assert [c["hasImage"] for c in data["chapters"]] == [True, True]
    assert data["metadata"]["author"] == "Ada"
    assert "Illustrations: 2 new, 0 from cache" in capsys.readouterr().out


def test_missing_input_returns_error(tmp_path):
    assert cli.main(["--in", str(tmp_path / "nope.txt"), "--out", str(tmp_path / "x.json")]) == 1


def test_source_is_required(tmp_path):
    with pytest.raises(SystemExit):
        cli.main(["--out", str(tmp_path / "x.json")])


def test_parse_metadata():
    assert cli.parse_metadata(["author = Ada", "year=2024"]) == {"author": "Ada", "year": "2024"}
    with pytest.raises(ValueError):
        cli.parse_metadata(["broken"])


@pytest.mark.parametrize(
    "format_arg,name,expected",
    [(None, "book.epub", "epub"), (None, "book.TXT", "txt"), (None, "book.pdf", "json"), ("txt", "book.json", "txt")],
)
def test_resolve_format(format_arg, name, expected):
    assert cli.resolve_format(format_arg, Path(name)) == expected

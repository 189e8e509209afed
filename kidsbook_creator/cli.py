"""Command line interface for KidsBook Creator."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Iterable, List, Optional

from . import __version__
from .builder import BookBuilder, BuildOptions
from .export import EXPORT_FORMATS
from .story import AGE_GROUPS, CHAPTER_COUNTS, StoryRequest


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kidsbook",
        description=(
            "Import a document or generate a story from a prompt, then export it "
            "as a chaptered children's book."
        ),
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--in", dest="input_path", type=Path, help="Input TXT/DOCX/PDF/EPUB file")
    source.add_argument("--prompt", help="Story idea to generate a book from")
    parser.add_argument("--out", dest="output_path", type=Path, required=True, help="Destination file")
    parser.add_argument("--title", help="Book title (defaults to the input file name)")
    parser.add_argument("--age", choices=AGE_GROUPS, default="6-8", help="Reader age group")
    parser.add_argument(
        "--length",
        choices=list(CHAPTER_COUNTS),
        default="short",
        help="Story length for generated books",
    )
    parser.add_argument("--style", default="cartoon", help="Illustration art style")
    parser.add_argument("--character", help="Name of the main character")
    parser.add_argument("--format", choices=EXPORT_FORMATS, default=None, help="Output format")
    parser.add_argument("--images", action="store_true", help="Illustrate every chapter")
    parser.add_argument("--cache-dir", type=Path, help="Cache directory for chapter illustrations")
    parser.add_argument("--resume", action="store_true", help="Reuse cached illustrations when available")
    parser.add_argument(
        "--meta",
        dest="metadata",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Extra metadata to embed in the output (repeatable)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only print warnings and errors")
    parser.add_argument("--version", action="version", version=f"kidsbook {__version__}")
    return parser


def parse_metadata(pairs: Iterable[str]) -> dict:
    metadata = {}
    for pair in pairs:
        if "=" not in pair:
            raise ValueError(f"Invalid metadata entry (expected key=value): {pair}")
        key, value = pair.split("=", 1)
        metadata[key.strip()] = value.strip()
    return metadata


def configure_logging(verbose: bool, quiet: bool) -> None:
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def resolve_format(format_arg: Optional[str], output_path: Path) -> str:
    if format_arg:
        return format_arg
    suffix = output_path.suffix.lower().lstrip(".")
    return suffix if suffix in EXPORT_FORMATS else "json"


def create_options(namespace: argparse.Namespace) -> BuildOptions:
    story = None
    if namespace.prompt:
        story = StoryRequest(
            title=namespace.title or "My Story",
            prompt=namespace.prompt,
            age=namespace.age,
            length=namespace.length,
            art_style=namespace.style,
            character_name=namespace.character,
        )
    return BuildOptions(
        output_path=namespace.output_path,
        input_path=namespace.input_path,
        story=story,
        title=namespace.title,
        format=resolve_format(namespace.format, namespace.output_path),
        with_images=namespace.images,
        art_style=namespace.style,
        cache_dir=namespace.cache_dir,
        resume=namespace.resume,
        metadata=parse_metadata(namespace.metadata),
    )


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose, args.quiet)
    try:
        options = create_options(args)
        result = BookBuilder().build(options)
    except Exception as exc:  # pragma: no cover - CLI safety net
        logging.getLogger(__name__).error(str(exc))
        return 1

    print(f"Wrote {len(result.book.chapters)} chapters to {result.output_path}")
    if result.generated_images or result.reused_images:
        print(
            f"Illustrations: {result.generated_images} new, "
            f"{result.reused_images} from cache"
        )
    print(f"Elapsed: {result.elapsed_seconds:.2f}s")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

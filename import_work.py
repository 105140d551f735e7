"""CLI: generate a YAML work skeleton from a PDF's table of contents.

Usage examples
--------------
python import_work.py https://example.org/summa.pdf --author Q9438 --id summa --depth 2
python import_work.py local.pdf --lang grc
"""

from __future__ import annotations

import argparse
import logging
import os
import sys

from dotenv import load_dotenv

from outline import extract_outline
from pdf_source import SourceError, is_url, load_source, open_document
from skeleton import build_work_skeleton, render_work_yaml


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line flags."""
    parser = argparse.ArgumentParser(description="Generate a catalog work skeleton from a PDF outline")
    parser.add_argument("source", help="Path or http(s) URL of the PDF")
    parser.add_argument("--author", default=None, help="Author identifier, e.g. Q9438")
    parser.add_argument("--id", dest="work_id", default=None, help="Work identifier (default: work-id)")
    parser.add_argument(
        "--depth",
        type=int,
        default=None,
        help="Maximum section depth to emit (default: unlimited)",
    )
    parser.add_argument(
        "--lang",
        default=os.getenv("IMPORT_DEFAULT_LANG", "la"),
        help="Language code of the original edition (default: la)",
    )
    return parser.parse_args(argv)


def run(args: argparse.Namespace) -> int:
    """Build and print the skeleton; return the process exit code."""
    doc = open_document(load_source(args.source))
    outline = extract_outline(doc)
    if not outline:
        logging.error("No outline/bookmarks found in this PDF.")
        return 1
    logging.info("Found %s top-level outline entries", len(outline))

    skeleton = build_work_skeleton(
        outline,
        work_id=args.work_id,
        author=args.author,
        lang=args.lang,
        source_url=args.source if is_url(args.source) else None,
        max_depth=args.depth,
    )
    sys.stdout.write(render_work_yaml(skeleton))
    return 0


def main(argv: list[str] | None = None) -> None:
    """Initialize config and emit the skeleton."""
    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    args = parse_args(argv)

    try:
        code = run(args)
    except SourceError as exc:
        logging.error("%s", exc)
        code = 1
    sys.exit(code)


if __name__ == "__main__":
    main()

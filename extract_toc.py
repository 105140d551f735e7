"""CLI: print a PDF's outline (bookmarks) with resolved page numbers."""

from __future__ import annotations

import argparse
import logging
import sys

from dotenv import load_dotenv

from outline import count_nodes, extract_outline, outline_to_json, render_outline_lines
from pdf_source import SourceError, load_source, open_document


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line flags."""
    parser = argparse.ArgumentParser(description="Extract a PDF outline with page numbers")
    parser.add_argument("source", help="Path or http(s) URL of the PDF")
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the outline as a JSON tree instead of a readable listing",
    )
    return parser.parse_args(argv)


def run(source: str, as_json: bool) -> int:
    """Extract and print one outline; return the process exit code."""
    doc = open_document(load_source(source))
    outline = extract_outline(doc)
    if not outline:
        logging.error("No outline/bookmarks found in this PDF.")
        return 1

    logging.info("Outline: top_level=%s total_nodes=%s", len(outline), count_nodes(outline))
    if as_json:
        print(outline_to_json(outline))
        return 0

    print(f"Pages: {doc.total_pages}")
    print(f"Title: {doc.title or '(none)'}")
    print("---")
    for line in render_outline_lines(outline):
        print(line)
    return 0


def main(argv: list[str] | None = None) -> None:
    """Initialize config and print the outline."""
    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    args = parse_args(argv)

    try:
        code = run(args.source, as_json=args.json)
    except SourceError as exc:
        logging.error("%s", exc)
        code = 1
    sys.exit(code)


if __name__ == "__main__":
    main()

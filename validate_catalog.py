"""CLI: validate catalog work files against the locus taxonomy."""

from __future__ import annotations

import argparse
import logging
import os
import sys

from dotenv import load_dotenv

from loci import TaxonomyError, collect_slugs, load_taxonomy
from models import Severity, ValidationReport
from validator import validate_catalog

LOGGER = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line flags."""
    parser = argparse.ArgumentParser(description="Validate catalog work files against the locus taxonomy")
    parser.add_argument(
        "--works",
        default=os.getenv("CATALOG_WORKS_DIR", "works"),
        help="Directory holding one YAML file per work (default: works)",
    )
    parser.add_argument(
        "--loci",
        default=os.getenv("CATALOG_LOCI_PATH", "loci.yaml"),
        help="Path to the locus taxonomy YAML (default: loci.yaml)",
    )
    return parser.parse_args(argv)


def log_report(report: ValidationReport) -> None:
    for diagnostic in report.diagnostics:
        if diagnostic.severity is Severity.ERROR:
            LOGGER.error("%s", diagnostic.format())
        else:
            LOGGER.warning("%s", diagnostic.format())
    LOGGER.info(
        "Validation complete: %s errors, %s warnings",
        report.error_count,
        report.warning_count,
    )


def run(works_dir: str, loci_path: str) -> ValidationReport:
    """Load the taxonomy, then validate every work file."""
    valid_slugs = collect_slugs(load_taxonomy(loci_path))
    LOGGER.info("Taxonomy: %s valid loci", len(valid_slugs))
    report = validate_catalog(works_dir, valid_slugs)
    log_report(report)
    return report


def main(argv: list[str] | None = None) -> None:
    """Initialize config and run validation; exit 1 when any error was found."""
    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    args = parse_args(argv)

    try:
        report = run(args.works, args.loci)
    except (TaxonomyError, OSError) as exc:
        LOGGER.error("%s", exc)
        sys.exit(1)
    sys.exit(1 if report.failed else 0)


if __name__ == "__main__":
    main()

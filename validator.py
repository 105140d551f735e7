"""Catalog entry validation against the locus taxonomy.

Public API
----------
extract_loci(sections)                   -> list[str]
validate_entry(source, data, valid)      -> list[Diagnostic]
validate_catalog(works_dir, valid)       -> ValidationReport

Missing or malformed authorship is an error; locus identifiers that are
not in the taxonomy are warnings. Entries are validated independently.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable

import yaml

from models import CatalogSection, Diagnostic, Severity, ValidationReport

WORK_LEVEL_KEYS = frozenset({"author", "corporate_author", "loci"})

LOGGER = logging.getLogger(__name__)


def extract_loci(sections: Iterable[CatalogSection | dict[str, Any]] | None, found: list[str] | None = None) -> list[str]:
    """Collect every ``loci`` value at every nesting level of a section tree.

    A ``loci`` value may be a single identifier or a list of them.
    """
    found = [] if found is None else found
    if not sections:
        return found

    for item in sections:
        if isinstance(item, CatalogSection):
            item = item.to_mapping()
        if not isinstance(item, dict):
            continue
        for key, value in item.items():
            if key == "loci":
                found.extend(_as_identifiers(value))
            elif key == "sections" and isinstance(value, list):
                extract_loci(value, found)
    return found


def _as_identifiers(value: Any) -> list[str]:
    if value is None:
        return []
    values = value if isinstance(value, (list, tuple)) else [value]
    return [str(v) for v in values if v is not None and v != ""]


def validate_entry(source: str, data: Any, valid_slugs: set[str]) -> list[Diagnostic]:
    """Validate one persisted catalog entry (a single-key mapping)."""
    if not isinstance(data, dict) or not data:
        return [_error(source, "expected a mapping with one top-level work key")]

    work_id = next(iter(data))
    work = data[work_id]
    if not isinstance(work, dict):
        return [_error(source, f"work {work_id!r} must be a mapping")]

    diagnostics: list[Diagnostic] = []

    author = work.get("author")
    if isinstance(author, list):
        if not author:
            diagnostics.append(_error(source, "author array is empty"))
    elif not author:
        diagnostics.append(_error(source, "Missing author field"))

    corporate_author = work.get("corporate_author")
    if isinstance(corporate_author, dict) and not corporate_author.get("label"):
        diagnostics.append(_error(source, "corporate_author object missing label field"))

    for tag in _as_identifiers(work.get("loci")):
        if tag not in valid_slugs:
            diagnostics.append(_warning(source, f'Unknown locus "{tag}" (work-level)', tag))

    for lang, edition in work.items():
        if lang in WORK_LEVEL_KEYS or not isinstance(edition, dict):
            continue
        for tag in extract_loci(edition.get("sections")):
            if tag not in valid_slugs:
                diagnostics.append(_warning(source, f'Unknown locus "{tag}" ({lang} sections)', tag))

    return diagnostics


def validate_catalog(works_dir: str | Path, valid_slugs: set[str]) -> ValidationReport:
    """Validate every ``*.yaml`` work file in ``works_dir``, in name order.

    A file that cannot be read or parsed is reported as an error and skipped.
    """
    works_path = Path(works_dir)
    if not works_path.is_dir():
        raise NotADirectoryError(f"Works directory not found: {works_path}")

    report = ValidationReport()
    files = sorted(works_path.glob("*.yaml"))
    for path in files:
        try:
            with path.open("rb") as fh:
                data = yaml.safe_load(fh)
        except (yaml.YAMLError, UnicodeDecodeError) as exc:
            report.extend([_error(path.name, f"YAML parse error: {exc}")])
            continue
        except OSError as exc:
            report.extend([_error(path.name, f"Cannot read work file: {exc}")])
            continue
        report.extend(validate_entry(path.name, data, valid_slugs))

    LOGGER.info(
        "Validated %s work files: errors=%s warnings=%s",
        len(files),
        report.error_count,
        report.warning_count,
    )
    return report


def _error(source: str, message: str) -> Diagnostic:
    return Diagnostic(severity=Severity.ERROR, source=source, message=message)


def _warning(source: str, message: str, locus: str) -> Diagnostic:
    return Diagnostic(severity=Severity.WARNING, source=source, message=message, locus=locus)

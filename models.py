"""Shared typed models for outline extraction and catalog validation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


@dataclass(frozen=True, slots=True)
class ObjectRef:
    """Reference to an indirect object inside a document (number, generation)."""

    num: int
    gen: int = 0


@dataclass(frozen=True, slots=True)
class OutlineItem:
    """Raw bookmark as exposed by the document source, before resolution.

    ``destination`` is an opaque descriptor; only its first element matters,
    and only when it is an ``ObjectRef``.
    """

    title: str | None
    destination: tuple[Any, ...] | None = None
    children: tuple[OutlineItem, ...] = ()


@dataclass(frozen=True, slots=True)
class OutlineNode:
    """Resolved bookmark: trimmed non-empty title, optional 1-based page."""

    title: str
    page: int | None = None
    children: tuple[OutlineNode, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "page": self.page,
            "children": [child.to_dict() for child in self.children],
        }


@dataclass(frozen=True, slots=True)
class TaxonomyNode:
    slug: str
    label: str
    children: tuple[TaxonomyNode, ...] = ()


# Keys that share a persisted section mapping with the slug; never valid slugs.
RESERVED_SECTION_KEYS: frozenset[str] = frozenset({"loci", "sections"})


@dataclass(frozen=True, slots=True)
class CatalogSection:
    """One node of a work's section tree.

    ``sections`` is None when the node was emitted without children, so the
    persisted mapping carries no ``sections`` key at all.
    """

    slug: str
    title: str
    loci: tuple[str, ...] = ()
    sections: tuple[CatalogSection, ...] | None = None

    def to_mapping(self) -> dict[str, Any]:
        """Persisted shape: ``{<slug>: <title>, loci: [...], sections: [...]}``."""
        mapping: dict[str, Any] = {self.slug: self.title, "loci": list(self.loci)}
        if self.sections is not None:
            mapping["sections"] = [section.to_mapping() for section in self.sections]
        return mapping


@dataclass(frozen=True, slots=True)
class Anchor:
    """Page-qualified link target for a generated section."""

    slug: str
    page: int


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A single validation finding scoped to one catalog entry (file)."""

    severity: Severity
    source: str
    message: str
    locus: str | None = None

    def format(self) -> str:
        tag = "ERROR" if self.severity is Severity.ERROR else "WARN"
        return f"{tag} [{self.source}]: {self.message}"


@dataclass(slots=True)
class ValidationReport:
    """Aggregated diagnostics for a whole validation run."""

    diagnostics: list[Diagnostic] = field(default_factory=list)

    def extend(self, diagnostics: list[Diagnostic]) -> None:
        self.diagnostics.extend(diagnostics)

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity is Severity.ERROR]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity is Severity.WARNING]

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def warning_count(self) -> int:
        return len(self.warnings)

    @property
    def failed(self) -> bool:
        """Only errors fail a run; warnings never do."""
        return self.error_count > 0

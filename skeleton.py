"""Catalog skeleton generation from a resolved outline."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Sequence

import yaml

from models import RESERVED_SECTION_KEYS, Anchor, CatalogSection, OutlineNode
from slugs import make_unique, slugify

DEFAULT_WORK_ID = "work-id"
AUTHOR_PLACEHOLDER = "Q000000"
FALLBACK_SLUG = "section"

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class _GenerationRun:
    """State shared by every node of one skeleton generation."""

    max_depth: float
    seen: set[str] = field(default_factory=set)
    anchors: list[Anchor] = field(default_factory=list)


def build_sections(
    nodes: Sequence[OutlineNode],
    max_depth: int | None = None,
    seen: set[str] | None = None,
) -> tuple[list[CatalogSection], list[Anchor]]:
    """Mirror an outline as catalog sections, down to ``max_depth`` levels.

    Depth is 1-based. Nodes at exactly ``max_depth`` are emitted without a
    ``sections`` field. Slugs are unique across the whole run, not per
    sibling list; pass ``seen`` to extend uniqueness over slugs that already
    exist. The reserved mapping keys (``loci``, ``sections``) are added to
    ``seen`` so a title like "Loci" becomes ``loci-2``. Every emitted node
    with a known page yields an ``Anchor``.
    """
    run = _GenerationRun(
        max_depth=math.inf if max_depth is None else max_depth,
        seen=seen if seen is not None else set(),
    )
    run.seen.update(RESERVED_SECTION_KEYS)
    sections = _generate(nodes, depth=1, run=run)
    return sections, run.anchors


def _generate(nodes: Sequence[OutlineNode], depth: int, run: _GenerationRun) -> list[CatalogSection]:
    if depth > run.max_depth:
        return []

    sections: list[CatalogSection] = []
    for node in nodes:
        slug = make_unique(slugify(node.title) or FALLBACK_SLUG, run.seen)
        if node.page:
            run.anchors.append(Anchor(slug=slug, page=node.page))

        children: tuple[CatalogSection, ...] | None = None
        if node.children and depth < run.max_depth:
            children = tuple(_generate(node.children, depth + 1, run))

        sections.append(CatalogSection(slug=slug, title=node.title, sections=children))
    return sections


def section_urls(anchors: Sequence[Anchor], source_url: str) -> list[dict[str, str]]:
    return [{anchor.slug: f"{source_url}#page={anchor.page}"} for anchor in anchors]


def build_work_skeleton(
    outline: Sequence[OutlineNode],
    work_id: str | None = None,
    author: str | None = None,
    lang: str = "la",
    source_url: str | None = None,
    max_depth: int | None = None,
) -> dict[str, Any]:
    """Assemble a catalog entry skeleton ready to be filled in by hand.

    Page links are only emitted when the source is a URL.
    """
    sections, anchors = build_sections(outline, max_depth=max_depth)
    LOGGER.info(
        "Skeleton: sections=%s anchors=%s max_depth=%s",
        len(sections),
        len(anchors),
        max_depth,
    )

    translation: dict[str, Any] = {"translator": None}
    if source_url:
        site: dict[str, Any] = {"site": None, "url": source_url, "pdf": True}
        if anchors:
            site["section_urls"] = section_urls(anchors, source_url)
        translation["sites"] = [site]

    english: dict[str, Any] = {
        "title": None,
        "sections": [section.to_mapping() for section in sections],
        "translations": [translation],
    }

    work: dict[str, Any] = {"author": author or AUTHOR_PLACEHOLDER, "loci": []}
    if lang == "en":
        english["orig_lang"] = True
    else:
        work[lang] = {"title": None, "orig_lang": True}
    work["en"] = english

    return {work_id or DEFAULT_WORK_ID: work}


def render_work_yaml(skeleton: dict[str, Any]) -> str:
    return yaml.safe_dump(skeleton, sort_keys=False, allow_unicode=True, default_flow_style=False)

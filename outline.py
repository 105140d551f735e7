"""Outline extraction: resolve bookmark destinations to pages and build a clean tree."""

from __future__ import annotations

import json
import logging
from typing import Any, Sequence

from models import ObjectRef, OutlineItem, OutlineNode
from pdf_source import OutlineDocument

# Bookmarks form a tree, but a malformed document can encode a cycle.
MAX_OUTLINE_DEPTH = 64

UNKNOWN_PAGE_MARKER = "[?]"

LOGGER = logging.getLogger(__name__)


def build_page_map(doc: OutlineDocument) -> dict[int, int]:
    """Map each page's defining object number to its 1-based page number.

    Built once per document. A page whose lookup fails is left unmapped.
    """
    lookup = doc.page_lookup
    if lookup is None:
        LOGGER.info("Document exposes no page table; pages will be unknown")
        return {}

    page_map: dict[int, int] = {}
    for number in range(1, lookup.total_pages + 1):
        try:
            page = lookup.get_page(number)
        except Exception as exc:  # noqa: BLE001
            LOGGER.debug("Page lookup failed for page=%s: %s", number, exc)
            continue
        if page is None or page.object_ref is None:
            continue
        page_map[page.object_ref.num] = number
    return page_map


def resolve_destination(destination: Sequence[Any] | None, page_map: dict[int, int]) -> int | None:
    """Return the page a destination points at, or None when it cannot be resolved."""
    if not page_map or not destination:
        return None
    target = destination[0]
    if not isinstance(target, ObjectRef):
        return None
    return page_map.get(target.num)


def extract_outline(doc: OutlineDocument) -> list[OutlineNode]:
    """Build the resolved outline tree of a document, in bookmark order.

    Items whose trimmed title is empty are dropped together with their
    whole subtree.
    """
    page_map = build_page_map(doc)
    return _build_tree(doc.bookmarks, page_map, depth=1)


def _build_tree(items: Sequence[OutlineItem], page_map: dict[int, int], depth: int) -> list[OutlineNode]:
    nodes: list[OutlineNode] = []
    for item in items:
        title = (item.title or "").strip()
        if not title:
            continue

        children: tuple[OutlineNode, ...] = ()
        if item.children:
            if depth >= MAX_OUTLINE_DEPTH:
                LOGGER.warning(
                    "Outline deeper than %s levels; truncating below %r",
                    MAX_OUTLINE_DEPTH,
                    title,
                )
            else:
                children = tuple(_build_tree(item.children, page_map, depth + 1))

        nodes.append(
            OutlineNode(
                title=title,
                page=resolve_destination(item.destination, page_map),
                children=children,
            )
        )
    return nodes


def count_nodes(nodes: Sequence[OutlineNode]) -> int:
    return sum(1 + count_nodes(node.children) for node in nodes)


def page_marker(page: int | None) -> str:
    return f"[p.{page}]" if page else UNKNOWN_PAGE_MARKER


def render_outline_lines(nodes: Sequence[OutlineNode], depth: int = 0) -> list[str]:
    """Line-oriented rendering: ``[p.N]`` padded to 8 columns, then the indented title."""
    lines: list[str] = []
    for node in nodes:
        indent = "  " * depth
        lines.append(f"{page_marker(node.page):<8}{indent}{node.title}")
        if node.children:
            lines.extend(render_outline_lines(node.children, depth + 1))
    return lines


def outline_to_json(nodes: Sequence[OutlineNode]) -> str:
    return json.dumps([node.to_dict() for node in nodes], indent=2, ensure_ascii=False)

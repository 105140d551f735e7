"""Locus taxonomy: load the curated tree and flatten it to the set of valid slugs."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable

import yaml

from models import TaxonomyNode

LOGGER = logging.getLogger(__name__)


class TaxonomyError(ValueError):
    """The taxonomy source is unreadable or structurally invalid."""


def load_taxonomy(path: str | Path) -> list[TaxonomyNode]:
    """Read and parse a YAML taxonomy file."""
    try:
        with Path(path).open("rb") as fh:
            data = yaml.safe_load(fh)
    except OSError as exc:
        raise TaxonomyError(f"Cannot read taxonomy {path}: {exc}") from exc
    except (yaml.YAMLError, UnicodeDecodeError) as exc:
        raise TaxonomyError(f"Taxonomy {path} is not valid YAML: {exc}") from exc

    nodes = parse_taxonomy(data)
    LOGGER.info("Loaded taxonomy from %s: roots=%s", path, len(nodes))
    return nodes


def parse_taxonomy(data: Any) -> list[TaxonomyNode]:
    """Build ``TaxonomyNode`` trees from a nested list/mapping structure.

    Accepts a list of root nodes or a single root mapping. Each node needs a
    ``slug``; ``label`` (or ``name``) defaults to the slug. A slug appearing
    twice anywhere in the tree raises ``TaxonomyError``.
    """
    if data is None:
        raise TaxonomyError("Taxonomy is empty")
    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list):
        raise TaxonomyError(f"Unexpected taxonomy shape: {type(data).__name__}")

    seen: dict[str, str] = {}
    return [_parse_node(item, seen, path="") for item in data]


def _parse_node(item: Any, seen: dict[str, str], path: str) -> TaxonomyNode:
    if not isinstance(item, dict) or item.get("slug") in (None, ""):
        raise TaxonomyError(f"Taxonomy node without slug under {path or '<root>'}: {item!r}")

    slug = str(item["slug"])
    location = f"{path}/{slug}"
    if slug in seen:
        raise TaxonomyError(f"Duplicate taxonomy slug {slug!r} at {location} (first seen at {seen[slug]})")
    seen[slug] = location

    raw_children = item.get("children") or []
    if not isinstance(raw_children, list):
        raise TaxonomyError(f"children of {location} must be a list")

    label = item.get("label") or item.get("name") or slug
    return TaxonomyNode(
        slug=slug,
        label=str(label),
        children=tuple(_parse_node(child, seen, location) for child in raw_children),
    )


def collect_slugs(nodes: Iterable[TaxonomyNode | dict[str, Any]], found: set[str] | None = None) -> set[str]:
    """Flatten every slug reachable from ``nodes`` into a set."""
    found = set() if found is None else found
    for node in nodes:
        if isinstance(node, TaxonomyNode):
            found.add(node.slug)
            collect_slugs(node.children, found)
        else:
            found.add(str(node["slug"]))
            collect_slugs(node.get("children") or [], found)
    return found

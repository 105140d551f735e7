from __future__ import annotations

from pathlib import Path

import pytest

from loci import TaxonomyError, collect_slugs, load_taxonomy, parse_taxonomy
from models import TaxonomyNode

TAXONOMY_YAML = """\
- slug: intro
  label: Introduction
- slug: ch1
  label: Chapter One
  children:
    - slug: ch1-v1
      label: Verse One
"""


def test_load_taxonomy_builds_tree(tmp_path: Path) -> None:
    path = tmp_path / "loci.yaml"
    path.write_text(TAXONOMY_YAML, encoding="utf-8")

    nodes = load_taxonomy(path)

    assert nodes == [
        TaxonomyNode("intro", "Introduction"),
        TaxonomyNode("ch1", "Chapter One", (TaxonomyNode("ch1-v1", "Verse One"),)),
    ]
    assert collect_slugs(nodes) == {"intro", "ch1", "ch1-v1"}


def test_collect_slugs_accepts_raw_mappings() -> None:
    raw = [{"slug": "a", "children": [{"slug": "b", "children": [{"slug": 3}]}]}]
    assert collect_slugs(raw) == {"a", "b", "3"}


def test_parse_taxonomy_single_root_mapping() -> None:
    nodes = parse_taxonomy({"slug": "root", "name": "Everything"})
    assert nodes == [TaxonomyNode("root", "Everything")]


def test_parse_taxonomy_label_defaults_to_slug() -> None:
    assert parse_taxonomy([{"slug": "x"}])[0].label == "x"


def test_duplicate_slug_anywhere_in_tree_is_an_error() -> None:
    data = [
        {"slug": "ch1", "children": [{"slug": "shared"}]},
        {"slug": "ch2", "children": [{"slug": "shared"}]},
    ]
    with pytest.raises(TaxonomyError, match="Duplicate taxonomy slug 'shared'"):
        parse_taxonomy(data)


@pytest.mark.parametrize("data", [
    None,
    "just a string",
    [{"label": "no slug"}],
    [{"slug": "a", "children": "not-a-list"}],
])
def test_parse_taxonomy_rejects_malformed(data) -> None:
    with pytest.raises(TaxonomyError):
        parse_taxonomy(data)


def test_load_taxonomy_invalid_yaml(tmp_path: Path) -> None:
    path = tmp_path / "loci.yaml"
    path.write_text("- slug: [unclosed\n", encoding="utf-8")
    with pytest.raises(TaxonomyError, match="not valid YAML"):
        load_taxonomy(path)


def test_load_taxonomy_missing_file(tmp_path: Path) -> None:
    with pytest.raises(TaxonomyError, match="Cannot read taxonomy"):
        load_taxonomy(tmp_path / "nope.yaml")


def test_load_taxonomy_undecodable_bytes(tmp_path: Path) -> None:
    path = tmp_path / "loci.yaml"
    path.write_bytes(b"- slug: \xff\n")
    with pytest.raises(TaxonomyError, match="not valid YAML"):
        load_taxonomy(path)

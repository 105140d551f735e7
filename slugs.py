"""Identifier-safe slugs derived from section titles."""

from __future__ import annotations

import re

MAX_SLUG_LENGTH = 60

_APOSTROPHES_RE = re.compile(r"['‘’]")
_NON_SLUG_RE = re.compile(r"[^a-z0-9]+")


def slugify(title: str) -> str:
    """Lower-case, drop apostrophes, hyphenate everything else, cap at 60 chars."""
    value = _APOSTROPHES_RE.sub("", title.lower())
    value = _NON_SLUG_RE.sub("-", value).strip("-")
    return value[:MAX_SLUG_LENGTH]


def make_unique(slug: str, seen: set[str]) -> str:
    """Return ``slug`` or ``slug-2``, ``slug-3``, ... whichever is not yet in ``seen``.

    The result is added to ``seen``, so one set shared across a whole
    generation run keeps every slug in that run distinct.
    """
    candidate = slug
    suffix = 2
    while candidate in seen:
        candidate = f"{slug}-{suffix}"
        suffix += 1
    seen.add(candidate)
    return candidate

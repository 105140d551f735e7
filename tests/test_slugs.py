import pytest

from slugs import MAX_SLUG_LENGTH, make_unique, slugify


@pytest.mark.parametrize(("title", "expected"), [
    ("Book I", "book-i"),
    ("Chapter 3: On the Soul", "chapter-3-on-the-soul"),
    ("  --Preface--  ", "preface"),
    ("The Author’s Preface", "the-authors-preface"),
    ("Saint's Day", "saints-day"),
    ("Question 2, Article 3", "question-2-article-3"),
    ("Ἀρχή", ""),
])
def test_slugify(title: str, expected: str) -> None:
    assert slugify(title) == expected


def test_slugify_is_deterministic() -> None:
    title = "De Civitate Dei, Liber XIV"
    assert slugify(title) == slugify(title)


def test_slugify_truncates_to_max_length() -> None:
    slug = slugify("word " * 40)
    assert len(slug) == MAX_SLUG_LENGTH
    assert slug.startswith("word-word")


def test_make_unique_returns_token_when_free() -> None:
    seen: set[str] = set()
    assert make_unique("prologue", seen) == "prologue"
    assert seen == {"prologue"}


def test_make_unique_appends_numeric_suffix_on_collision() -> None:
    seen: set[str] = set()
    results = [make_unique("chapter-1", seen) for _ in range(3)]
    assert results == ["chapter-1", "chapter-1-2", "chapter-1-3"]


def test_make_unique_skips_suffixes_already_taken() -> None:
    seen = {"notes", "notes-2"}
    assert make_unique("notes", seen) == "notes-3"


def test_make_unique_tokens_pairwise_distinct() -> None:
    titles = ["Intro", "Intro", "Part 1", "intro", "Intro 2", "Intro", "Part-1"]
    seen: set[str] = set()
    tokens = [make_unique(slugify(title), seen) for title in titles]
    assert len(set(tokens)) == len(titles)


def _run(titles: list[str]) -> list[str]:
    seen: set[str] = set()
    return [make_unique(slugify(title), seen) for title in titles]


def test_make_unique_deterministic_given_insertion_order() -> None:
    titles = ["A", "B", "A", "A-2", "A"]
    assert _run(titles) == _run(titles)
    assert _run(titles) == ["a", "b", "a-2", "a-2-2", "a-3"]

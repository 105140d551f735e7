"""Document source: fetch PDF bytes and expose their bookmarks and page table."""

from __future__ import annotations

import io
import logging
import os
from pathlib import Path
from typing import Any, Protocol

import requests
from pypdf import PdfReader
from pypdf.errors import PyPdfError
from pypdf.generic import IndirectObject

from models import ObjectRef, OutlineItem

REQUEST_TIMEOUT_SECONDS = int(os.getenv("SOURCE_REQUEST_TIMEOUT_SECONDS", "60"))

LOGGER = logging.getLogger(__name__)


class SourceError(RuntimeError):
    """The source could not be fetched or is not a readable document."""


class PageHandle(Protocol):
    object_ref: ObjectRef | None


class PageLookupCapable(Protocol):
    """Page table of a document: 1-based page access."""

    @property
    def total_pages(self) -> int: ...

    def get_page(self, number: int) -> PageHandle | None: ...


class OutlineDocument(Protocol):
    """What the outline resolver needs from an opened document.

    ``page_lookup`` is None when the document exposes no page table; every
    destination then resolves to an unknown page.
    """

    @property
    def title(self) -> str | None: ...

    @property
    def total_pages(self) -> int: ...

    @property
    def page_lookup(self) -> PageLookupCapable | None: ...

    @property
    def bookmarks(self) -> list[OutlineItem]: ...


class PdfPage:
    __slots__ = ("object_ref",)

    def __init__(self, object_ref: ObjectRef | None) -> None:
        self.object_ref = object_ref


class PdfDocument:
    """pypdf-backed implementation of ``OutlineDocument`` and ``PageLookupCapable``."""

    def __init__(self, reader: PdfReader) -> None:
        self._reader = reader
        self._total_pages = len(reader.pages)
        self._bookmarks = _convert_outline(reader.outline)

    @property
    def title(self) -> str | None:
        metadata = self._reader.metadata
        return metadata.title if metadata is not None else None

    @property
    def total_pages(self) -> int:
        return self._total_pages

    @property
    def page_lookup(self) -> PageLookupCapable:
        return self

    @property
    def bookmarks(self) -> list[OutlineItem]:
        return self._bookmarks

    def get_page(self, number: int) -> PdfPage | None:
        if number < 1 or number > self.total_pages:
            return None
        page = self._reader.pages[number - 1]
        return PdfPage(_as_object_ref(page.indirect_reference))


def is_url(value: str) -> bool:
    return value.startswith("http://") or value.startswith("https://")


def load_source(path_or_url: str) -> bytes:
    """Return the raw bytes of a local file or an http(s) URL."""
    if is_url(path_or_url):
        LOGGER.info("Downloading %s...", path_or_url)
        try:
            response = requests.get(path_or_url, timeout=REQUEST_TIMEOUT_SECONDS)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise SourceError(f"Download failed: {exc}") from exc
        data = response.content
        LOGGER.info("Downloaded %s bytes", len(data))
        return data

    path = Path(path_or_url)
    if not path.is_file():
        raise SourceError(f"File not found: {path_or_url}")
    return path.read_bytes()


def open_document(data: bytes) -> PdfDocument:
    """Parse PDF bytes; an unreadable document, page tree or outline is a ``SourceError``."""
    try:
        reader = PdfReader(io.BytesIO(data))
        return PdfDocument(reader)
    except (PyPdfError, ValueError, KeyError) as exc:
        raise SourceError(f"Unreadable document: {exc}") from exc


def _convert_outline(raw: list[Any]) -> list[OutlineItem]:
    """Convert pypdf's flat outline encoding into nested ``OutlineItem``s.

    pypdf returns a list where a nested list holds the children of the
    destination immediately before it.
    """
    entries: list[tuple[Any, list[OutlineItem]]] = []
    for element in raw:
        if isinstance(element, list):
            children = _convert_outline(element)
            if entries:
                entries[-1][1].extend(children)
            else:
                # Orphan child list: keep its items at this level.
                entries.extend((child, []) for child in children)
            continue
        entries.append((element, []))

    items: list[OutlineItem] = []
    for element, children in entries:
        if isinstance(element, OutlineItem):
            items.append(element)
            continue
        items.append(
            OutlineItem(
                title=element.title,
                destination=_destination(element),
                children=tuple(children),
            )
        )
    return items


def _destination(element: Any) -> tuple[Any, ...] | None:
    raw_page = element.get("/Page")
    if raw_page is None:
        return None
    ref = _as_object_ref(raw_page)
    return (ref if ref is not None else raw_page,)


def _as_object_ref(value: Any) -> ObjectRef | None:
    if isinstance(value, IndirectObject):
        return ObjectRef(num=value.idnum, gen=value.generation)
    indirect = getattr(value, "indirect_reference", None)
    if isinstance(indirect, IndirectObject):
        return ObjectRef(num=indirect.idnum, gen=indirect.generation)
    return None

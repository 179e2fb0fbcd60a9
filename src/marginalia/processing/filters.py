"""Allow/deny filters and output shaping applied around reconciliation."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
import logging

from marginalia.ingestion.models import Clipping, ClippingKind

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class FilterResult:
    clippings: list[Clipping]
    removed_count: int


def _matches_any(title: str, needles: Iterable[str]) -> bool:
    lowered = title.lower()
    return any(needle.lower() in lowered for needle in needles)


def filter_clippings(
    clippings: list[Clipping],
    *,
    exclude_types: Iterable[str] = (),
    exclude_books: Iterable[str] = (),
    only_books: Iterable[str] = (),
    min_content_length: int = 0,
) -> FilterResult:
    """Drop records by kind, title substring and content length.

    Book filters are case-insensitive substring matches on the title.
    Bookmarks carry no content and are exempt from ``min_content_length``.
    """

    excluded_kinds = {ClippingKind(kind) for kind in exclude_types}
    exclude_books = tuple(exclude_books)
    only_books = tuple(only_books)

    kept: list[Clipping] = []
    for clipping in clippings:
        if clipping.kind in excluded_kinds:
            continue
        if (
            min_content_length
            and clipping.kind is not ClippingKind.BOOKMARK
            and len(clipping.content) < min_content_length
        ):
            continue
        if exclude_books and _matches_any(clipping.title, exclude_books):
            continue
        if only_books and not _matches_any(clipping.title, only_books):
            continue
        kept.append(clipping)

    removed = len(clippings) - len(kept)
    if removed:
        logger.debug("Filters removed %d records", removed)
    return FilterResult(clippings=kept, removed_count=removed)


def remove_empty(clippings: list[Clipping]) -> FilterResult:
    """Drop empty highlights; empty notes and bookmarks are kept."""

    kept = [
        clipping
        for clipping in clippings
        if not (clipping.kind is ClippingKind.HIGHLIGHT and clipping.is_empty)
    ]
    return FilterResult(clippings=kept, removed_count=len(clippings) - len(kept))


def filter_to_highlights_only(clippings: list[Clipping]) -> list[Clipping]:
    """Keep only highlights; linked note text is already embedded in them."""

    return [clipping for clipping in clippings if clipping.kind is ClippingKind.HIGHLIGHT]


def remove_linked_notes(clippings: list[Clipping], remove_unlinked: bool = False) -> list[Clipping]:
    """Drop notes whose content now lives on a highlight.

    With ``remove_unlinked`` every note is dropped, linked or not.
    """

    return [
        clipping
        for clipping in clippings
        if clipping.kind is not ClippingKind.NOTE
        or (not remove_unlinked and clipping.linked_highlight_id is None)
    ]

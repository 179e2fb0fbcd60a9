"""Grouping, page estimation and aggregate statistics."""

from __future__ import annotations

from collections.abc import Iterable
import math

from marginalia.ingestion.models import BookStats, Clipping, ClippingKind, ClippingsStats, DateRange

LOCATIONS_PER_PAGE = 16


def group_by_book(clippings: Iterable[Clipping]) -> dict[tuple[str, str], list[Clipping]]:
    """Group records by ``(title, author)``, case-insensitively, in first-seen order."""

    groups: dict[tuple[str, str], list[Clipping]] = {}
    for clipping in clippings:
        groups.setdefault(clipping.book_key, []).append(clipping)
    return groups


def estimate_page_from_location(location_start: int) -> int:
    if location_start <= 0:
        return 1
    return math.ceil(location_start / LOCATIONS_PER_PAGE)


def effective_page(clipping: Clipping) -> int:
    """Printed page when the device reported one, otherwise an estimate."""

    if clipping.page is not None:
        return clipping.page
    return estimate_page_from_location(clipping.location.start)


def _rounded_ratio(numerator: int, denominator: int) -> int:
    if denominator <= 0:
        return 0
    return math.floor(numerator / denominator + 0.5)


def calculate_stats(clippings: list[Clipping]) -> ClippingsStats:
    stats = ClippingsStats(total=len(clippings))
    authors: set[str] = set()

    for book_clippings in group_by_book(clippings).values():
        first = book_clippings[0]
        book = BookStats(title=first.title, author=first.author, date_range=DateRange())
        authors.add(first.author)
        for clipping in book_clippings:
            if clipping.kind is ClippingKind.HIGHLIGHT:
                book.highlights += 1
                stats.total_highlights += 1
            elif clipping.kind is ClippingKind.NOTE:
                book.notes += 1
                stats.total_notes += 1
            elif clipping.kind is ClippingKind.BOOKMARK:
                book.bookmarks += 1
                stats.total_bookmarks += 1
            else:
                stats.total_clips += 1
            book.word_count += clipping.word_count
            stats.total_words += clipping.word_count
            book.date_range.include(clipping.date)
            stats.date_range.include(clipping.date)
            if clipping.is_limit_reached:
                stats.drm_limit_reached += 1
        stats.books.append(book)

    stats.books.sort(key=lambda book: book.highlights, reverse=True)
    stats.total_books = len(stats.books)
    stats.total_authors = len(authors)
    stats.avg_words_per_highlight = _rounded_ratio(stats.total_words, stats.total_highlights)
    stats.avg_highlights_per_book = _rounded_ratio(stats.total_highlights, stats.total_books)
    return stats

"""Attach notes to the highlight they annotate."""

from __future__ import annotations

from dataclasses import dataclass, replace
import logging

from marginalia.ingestion.models import Clipping, ClippingKind

logger = logging.getLogger(__name__)

PROXIMITY_DISTANCE = 10
_UNLINKABLE_REASONS = frozenset({"exact_duplicate", "overlapping"})


@dataclass(slots=True)
class LinkResult:
    clippings: list[Clipping]
    linked_count: int


def _contains(highlight: Clipping, position: int) -> bool:
    return highlight.location.start <= position <= highlight.location.effective_end


def _edge_distance(highlight: Clipping, position: int) -> int:
    return min(abs(highlight.location.start - position), abs(highlight.location.effective_end - position))


def find_highlight_for_note(note: Clipping, highlights: list[Clipping]) -> int | None:
    """Return the index into *highlights* that *note* belongs to, if any.

    Containing highlights win, the one whose start is closest to the note
    first. Otherwise the highlight with the nearest start or end within
    ``PROXIMITY_DISTANCE`` is used. Ties keep the earlier highlight.
    """

    position = note.location.start
    best: int | None = None
    best_distance = 0
    for index, highlight in enumerate(highlights):
        if not _contains(highlight, position):
            continue
        distance = abs(highlight.location.start - position)
        if best is None or distance < best_distance:
            best, best_distance = index, distance
    if best is not None:
        return best

    for index, highlight in enumerate(highlights):
        distance = _edge_distance(highlight, position)
        if distance > PROXIMITY_DISTANCE:
            continue
        if best is None or distance < best_distance:
            best, best_distance = index, distance
    return best


def link_notes_to_highlights(clippings: list[Clipping]) -> LinkResult:
    """Link every located note to at most one highlight of the same book.

    Notes are visited in file order and a highlight keeps only its last
    linked note; a displaced note loses its ``linked_highlight_id``.
    ``linked_count`` counts every successful link, displaced ones included.
    Records are copied, the input list is left untouched.
    """

    result = [
        replace(clipping) if clipping.kind in (ClippingKind.NOTE, ClippingKind.HIGHLIGHT) else clipping
        for clipping in clippings
    ]

    highlights_by_book: dict[tuple[str, str], list[int]] = {}
    for position, clipping in enumerate(result):
        if clipping.kind is ClippingKind.HIGHLIGHT and clipping.suspicious_reason not in _UNLINKABLE_REASONS:
            highlights_by_book.setdefault(clipping.book_key, []).append(position)

    # highlight position -> note position currently linked to it
    owners: dict[int, int] = {}
    linked_count = 0
    for note_position, note in enumerate(result):
        if note.kind is not ClippingKind.NOTE or not note.location.is_known:
            continue
        positions = highlights_by_book.get(note.book_key)
        if not positions:
            continue
        match = find_highlight_for_note(note, [result[position] for position in positions])
        if match is None:
            continue
        highlight_position = positions[match]
        highlight = result[highlight_position]

        previous = owners.get(highlight_position)
        if previous is not None and previous != note_position:
            result[previous].linked_highlight_id = None

        highlight.note = note.content
        highlight.linked_note_id = note.id
        note.linked_highlight_id = highlight.id
        owners[highlight_position] = note_position
        linked_count += 1

    logger.debug("Linked %d notes to highlights", linked_count)
    return LinkResult(clippings=result, linked_count=linked_count)

from __future__ import annotations

from marginalia.ingestion.identity import make_id
from marginalia.ingestion.models import Clipping, ClippingKind, Location
from marginalia.processing.linker import link_notes_to_highlights


def _record(
    kind: ClippingKind,
    content: str,
    start: int | None,
    end: int | None = None,
    *,
    title: str = "Book",
    block_index: int = 0,
) -> Clipping:
    if start is None:
        location = Location()
    elif end is None:
        location = Location(raw=str(start), start=start)
    else:
        location = Location.span(start, end)
    return Clipping(
        id=make_id(title, location.raw, kind, content),
        kind=kind,
        title=title,
        title_raw=f"{title} (Author)",
        author="Author",
        author_raw=f"{title} (Author)",
        content=content,
        content_raw=content,
        location=location,
        block_index=block_index,
    )


def _by_id(records: list[Clipping], record_id: str) -> Clipping:
    return next(record for record in records if record.id == record_id)


def test_note_inside_long_highlight_links_by_containment() -> None:
    highlight = _record(ClippingKind.HIGHLIGHT, "A long passage.", 100, 500, block_index=0)
    note = _record(ClippingKind.NOTE, "Remember this.", 490, block_index=1)

    result = link_notes_to_highlights([highlight, note])

    linked = _by_id(result.clippings, highlight.id)
    linked_note = _by_id(result.clippings, note.id)
    assert result.linked_count == 1
    assert linked.linked_note_id == note.id
    assert linked.note == "Remember this."
    assert linked_note.linked_highlight_id == highlight.id
    assert highlight.note is None
    assert note.linked_highlight_id is None


def test_most_specific_containing_highlight_wins() -> None:
    wide = _record(ClippingKind.HIGHLIGHT, "Wide passage.", 100, 500, block_index=0)
    narrow = _record(ClippingKind.HIGHLIGHT, "Narrow passage.", 180, 220, block_index=1)
    note = _record(ClippingKind.NOTE, "About the narrow one.", 200, block_index=2)

    result = link_notes_to_highlights([wide, narrow, note])

    assert _by_id(result.clippings, narrow.id).linked_note_id == note.id
    assert _by_id(result.clippings, wide.id).linked_note_id is None
    assert _by_id(result.clippings, note.id).linked_highlight_id == narrow.id


def test_proximity_fallback_uses_start_or_end_within_ten() -> None:
    highlight = _record(ClippingKind.HIGHLIGHT, "Passage.", 100, 110, block_index=0)
    near = _record(ClippingKind.NOTE, "Near the end.", 118, block_index=1)
    far = _record(ClippingKind.NOTE, "Too far.", 140, block_index=2)

    result = link_notes_to_highlights([highlight, near, far])

    assert result.linked_count == 1
    assert _by_id(result.clippings, near.id).linked_highlight_id == highlight.id
    assert _by_id(result.clippings, far.id).linked_highlight_id is None


def test_last_note_wins_when_two_target_the_same_highlight() -> None:
    highlight = _record(ClippingKind.HIGHLIGHT, "Passage.", 100, 200, block_index=0)
    first_note = _record(ClippingKind.NOTE, "First thought.", 150, block_index=1)
    second_note = _record(ClippingKind.NOTE, "Second thought.", 160, block_index=2)

    result = link_notes_to_highlights([highlight, first_note, second_note])

    linked = _by_id(result.clippings, highlight.id)
    assert linked.linked_note_id == second_note.id
    assert linked.note == "Second thought."
    assert _by_id(result.clippings, first_note.id).linked_highlight_id is None
    assert _by_id(result.clippings, second_note.id).linked_highlight_id == highlight.id
    # both links count even though the first was displaced
    assert result.linked_count == 2


def test_notes_never_cross_books_and_need_a_location() -> None:
    highlight = _record(ClippingKind.HIGHLIGHT, "Passage.", 100, 200, title="Book One", block_index=0)
    other_book = _record(ClippingKind.NOTE, "Elsewhere.", 150, title="Book Two", block_index=1)
    unlocated = _record(ClippingKind.NOTE, "No location.", None, title="Book One", block_index=2)

    result = link_notes_to_highlights([highlight, other_book, unlocated])

    assert result.linked_count == 0
    assert all(record.linked_highlight_id is None for record in result.clippings)
    assert _by_id(result.clippings, highlight.id).linked_note_id is None

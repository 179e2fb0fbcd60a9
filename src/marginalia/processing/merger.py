"""Collapse highlights that are the same selection extended or re-highlighted."""

from __future__ import annotations

from dataclasses import dataclass, replace
import logging

from marginalia.ingestion.identity import make_id
from marginalia.ingestion.models import Clipping, ClippingKind, Location
from marginalia.processing.dedupe import union_tags
from marginalia.processing.similarity import is_substring_match, jaccard_similarity
from marginalia.processing.stats import group_by_book

logger = logging.getLogger(__name__)

OVERLAPPING = "overlapping"
LOCATION_GAP_TOLERANCE = 5
CONTENT_SIMILARITY_THRESHOLD = 0.5


@dataclass(slots=True)
class MergeResult:
    clippings: list[Clipping]
    merged_count: int


def within_reach(first: Clipping, second: Clipping, tolerance: int = LOCATION_GAP_TOLERANCE) -> bool:
    """True when *second* (starting no earlier than *first*) overlaps it or starts within *tolerance*."""

    return second.location.start <= first.location.effective_end + tolerance


def contents_match(first: Clipping, second: Clipping) -> bool:
    if is_substring_match(first.content, second.content):
        return True
    return jaccard_similarity(first.content, second.content) >= CONTENT_SIMILARITY_THRESHOLD


def can_merge(first: Clipping, second: Clipping) -> bool:
    return first.book_key == second.book_key and within_reach(first, second) and contents_match(first, second)


def _keeper_and_redundant(first: Clipping, second: Clipping) -> tuple[Clipping, Clipping]:
    # Equal lengths keep the earlier record of the sweep.
    if len(first.content) >= len(second.content):
        return first, second
    return second, first


def _dated(base: Clipping, other: Clipping) -> Clipping:
    if base.date is not None and other.date is not None:
        return other if other.date > base.date else base
    if base.date is None and other.date is not None:
        return other
    return base


def merge_pair(first: Clipping, second: Clipping) -> Clipping:
    """Union two matching highlights into one record with a recomputed id."""

    base, other = _keeper_and_redundant(first, second)
    start = min(first.location.start, second.location.start)
    end = max(first.location.effective_end, second.location.effective_end)
    location = Location.span(start, end)
    dated = _dated(base, other)
    noted = base if base.note is not None else other
    return replace(
        base,
        id=make_id(base.title, location.raw, base.kind, base.content),
        location=location,
        date=dated.date,
        date_raw=dated.date_raw,
        tags=union_tags(first.tags, second.tags),
        note=noted.note,
        linked_note_id=noted.linked_note_id,
        block_index=min(first.block_index, second.block_index),
    )


def _sweep(highlights: list[Clipping], merge: bool) -> tuple[list[Clipping], int]:
    """Compare each highlight, in start order, with the running record only."""

    ordered = sorted(highlights, key=lambda clipping: clipping.location.start)
    output: list[Clipping] = []
    merged_count = 0
    current: Clipping | None = None
    for clipping in ordered:
        if current is None:
            current = clipping
            continue
        if not can_merge(current, clipping):
            output.append(current)
            current = clipping
            continue
        if merge:
            current = merge_pair(current, clipping)
            merged_count += 1
            continue
        keeper, redundant = _keeper_and_redundant(current, clipping)
        output.append(
            replace(
                redundant,
                is_suspicious=True,
                suspicious_reason=OVERLAPPING,
                possible_duplicate_of=keeper.id,
            )
        )
        current = keeper
    if current is not None:
        output.append(current)
    return output, merged_count


def smart_merge_highlights(clippings: list[Clipping], merge: bool = True) -> MergeResult:
    """Merge overlapping highlights per book, or flag them when ``merge`` is off.

    Records of other kinds, and highlights already flagged as exact
    duplicates, pass through untouched. Output is in ``block_index`` order.
    """

    candidates = [
        clipping
        for clipping in clippings
        if clipping.kind is ClippingKind.HIGHLIGHT and not clipping.is_suspicious
    ]
    candidate_ids = {id(clipping) for clipping in candidates}
    result = [clipping for clipping in clippings if id(clipping) not in candidate_ids]

    merged_count = 0
    for book_highlights in group_by_book(candidates).values():
        if len(book_highlights) == 1:
            result.extend(book_highlights)
            continue
        swept, count = _sweep(book_highlights, merge)
        result.extend(swept)
        merged_count += count

    result.sort(key=lambda clipping: clipping.block_index)
    logger.debug("Smart merge collapsed %d highlight pairs (merge=%s)", merged_count, merge)
    return MergeResult(clippings=result, merged_count=merged_count)

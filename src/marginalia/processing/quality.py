"""Advisory quality flags for highlights."""

from __future__ import annotations

from dataclasses import dataclass, replace
import logging

from marginalia.ingestion.models import Clipping, ClippingKind
from marginalia.processing.similarity import jaccard_similarity
from marginalia.processing.stats import group_by_book

logger = logging.getLogger(__name__)

TOO_SHORT = "too_short"
FRAGMENT = "fragment"
INCOMPLETE = "incomplete"

GARBAGE_LENGTH = 5
# fragment/incomplete checks only apply below this length
SHORT_LENGTH = 75
VALID_ENDINGS = frozenset(".!?\"”’')]»…。！？")

FUZZY_THRESHOLD = 0.8
FUZZY_WINDOW = 50


@dataclass(slots=True)
class FlagResult:
    clippings: list[Clipping]
    flagged_count: int


def suspicious_reason(content: str) -> str | None:
    """Return why *content* looks like an accidental highlight, or ``None``."""

    text = content.strip()
    if len(text) < GARBAGE_LENGTH:
        return TOO_SHORT
    if len(text) >= SHORT_LENGTH:
        return None
    first = text[0]
    if first.isalpha() and first.islower():
        return FRAGMENT
    if text[-1] not in VALID_ENDINGS:
        return INCOMPLETE
    return None


def flag_suspicious_highlights(clippings: list[Clipping]) -> FlagResult:
    """Flag highlights not already flagged by deduplication or merging."""

    result: list[Clipping] = []
    flagged = 0
    for clipping in clippings:
        if clipping.kind is not ClippingKind.HIGHLIGHT or clipping.is_suspicious:
            result.append(clipping)
            continue
        reason = suspicious_reason(clipping.content)
        if reason is None:
            result.append(clipping)
            continue
        flagged += 1
        result.append(replace(clipping, is_suspicious=True, suspicious_reason=reason))

    logger.debug("Flagged %d suspicious highlights", flagged)
    return FlagResult(clippings=result, flagged_count=flagged)


def flag_fuzzy_duplicates(
    clippings: list[Clipping],
    threshold: float = FUZZY_THRESHOLD,
    window: int = FUZZY_WINDOW,
) -> FlagResult:
    """Mark near-identical highlights of the same book.

    Pairs scoring ``threshold <= jaccard < 1`` within *window* locations get
    ``similarity_score`` and ``possible_duplicate_of`` on the later-located
    record. Exact matches are left to :func:`remove_duplicates`.
    """

    flags: dict[int, tuple[float, str]] = {}
    highlights = [clipping for clipping in clippings if clipping.kind is ClippingKind.HIGHLIGHT]
    for book_highlights in group_by_book(highlights).values():
        ordered = sorted(book_highlights, key=lambda clipping: clipping.location.start)
        for index, current in enumerate(ordered):
            if id(current) in flags:
                continue
            for other in ordered[index + 1 :]:
                if id(other) in flags:
                    continue
                if other.location.start - current.location.effective_end > window:
                    break
                score = jaccard_similarity(current.content, other.content)
                if threshold <= score < 1.0:
                    flags[id(other)] = (score, current.id)

    result: list[Clipping] = []
    for clipping in clippings:
        flag = flags.get(id(clipping))
        if flag is None:
            result.append(clipping)
        else:
            result.append(replace(clipping, similarity_score=flag[0], possible_duplicate_of=flag[1]))
    logger.debug("Flagged %d fuzzy duplicates", len(flags))
    return FlagResult(clippings=result, flagged_count=len(flags))

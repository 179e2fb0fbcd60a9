"""Exact-duplicate removal keyed on record identity."""

from __future__ import annotations

from dataclasses import dataclass, replace
import logging

from marginalia.ingestion.models import Clipping

logger = logging.getLogger(__name__)

EXACT_DUPLICATE = "exact_duplicate"


@dataclass(slots=True)
class DedupeResult:
    """Surviving records plus how many duplicates were (or would be) dropped."""

    clippings: list[Clipping]
    removed_count: int


def union_tags(*tag_lists: list[str]) -> list[str]:
    """Ordered-unique union; the first occurrence of each tag decides its position."""

    merged: list[str] = []
    seen: set[str] = set()
    for tags in tag_lists:
        for tag in tags:
            if tag not in seen:
                seen.add(tag)
                merged.append(tag)
    return merged


def remove_duplicates(clippings: list[Clipping], merge: bool = True) -> DedupeResult:
    """Collapse records that share an ``id``; the last one in file order survives.

    With ``merge=False`` nothing is dropped: every earlier member of a group
    is flagged ``exact_duplicate`` and points at the survivor instead.
    ``removed_count`` is ``len(clippings) - distinct ids`` in both modes.
    """

    groups: dict[str, list[Clipping]] = {}
    for clipping in clippings:
        groups.setdefault(clipping.id, []).append(clipping)

    result: list[Clipping] = []
    for members in groups.values():
        survivor = members[-1]
        if len(members) == 1:
            result.append(survivor)
            continue
        if merge:
            tags = union_tags(*(member.tags for member in members))
            result.append(replace(survivor, tags=tags))
            continue
        result.append(survivor)
        for member in members[:-1]:
            result.append(
                replace(
                    member,
                    is_suspicious=True,
                    suspicious_reason=EXACT_DUPLICATE,
                    possible_duplicate_of=survivor.id,
                )
            )

    result.sort(key=lambda clipping: clipping.block_index)
    removed_count = len(clippings) - len(groups)
    logger.debug(
        "Deduplicated %d records into %d ids (merge=%s)", len(clippings), len(groups), merge
    )
    return DedupeResult(clippings=result, removed_count=removed_count)

"""Reconciliation stages composed in their fixed order."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging

from marginalia.config import ParseOptions
from marginalia.ingestion.models import Clipping
from marginalia.processing.dedupe import remove_duplicates
from marginalia.processing.filters import filter_to_highlights_only, remove_empty
from marginalia.processing.linker import link_notes_to_highlights
from marginalia.processing.merger import smart_merge_highlights
from marginalia.processing.quality import flag_suspicious_highlights
from marginalia.processing.tags import extract_tags_from_linked_notes

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ProcessResult:
    clippings: list[Clipping] = field(default_factory=list)
    duplicates_removed: int = 0
    merged_highlights: int = 0
    linked_notes: int = 0
    empty_removed: int = 0
    tags_extracted: int = 0
    notes_consumed: int = 0
    suspicious_flagged: int = 0


def process(clippings: list[Clipping], options: ParseOptions | None = None) -> ProcessResult:
    """Deduplicate, merge, link, tag and flag parsed records.

    When deduplication or merging is switched off the affected records are
    flagged instead of dropped. ``duplicates_removed`` still counts the
    flagged duplicates; ``merged_highlights`` stays at zero.
    """

    options = options or ParseOptions()
    result = ProcessResult()

    dedupe = remove_duplicates(clippings, merge=options.remove_duplicates)
    records = dedupe.clippings
    result.duplicates_removed = dedupe.removed_count

    merged = smart_merge_highlights(records, merge=options.merge_overlapping)
    records = merged.clippings
    result.merged_highlights = merged.merged_count

    if options.merge_notes:
        linked = link_notes_to_highlights(records)
        records = linked.clippings
        result.linked_notes = linked.linked_count

    if options.extract_tags:
        tagged = extract_tags_from_linked_notes(records, options.tag_case)
        records = tagged.clippings
        result.tags_extracted = tagged.extracted_count
        result.notes_consumed = tagged.notes_consumed

    flagged = flag_suspicious_highlights(records)
    records = flagged.clippings
    result.suspicious_flagged = flagged.flagged_count

    if options.remove_empty:
        emptied = remove_empty(records)
        records = emptied.clippings
        result.empty_removed = emptied.removed_count

    if options.highlights_only:
        records = filter_to_highlights_only(records)

    result.clippings = records
    return result

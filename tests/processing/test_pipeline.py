from __future__ import annotations

from marginalia.config import ParseOptions
from marginalia.ingestion.identity import make_id
from marginalia.ingestion.models import Clipping, ClippingKind, Location
from marginalia.processing.pipeline import process


def _record(
    kind: ClippingKind,
    content: str,
    location: Location,
    *,
    block_index: int,
    is_empty: bool = False,
) -> Clipping:
    return Clipping(
        id=make_id("Book", location.raw, kind, content),
        kind=kind,
        title="Book",
        title_raw="Book (Author)",
        author="Author",
        author_raw="Book (Author)",
        content=content,
        content_raw=content,
        location=location,
        block_index=block_index,
        is_empty=is_empty,
    )


def _records() -> list[Clipping]:
    return [
        _record(ClippingKind.HIGHLIGHT, "The beginning", Location.span(100, 110), block_index=0),
        _record(ClippingKind.HIGHLIGHT, "The beginning of a full sentence.", Location.span(100, 120), block_index=1),
        _record(ClippingKind.NOTE, "focus, craft", Location(raw="115", start=115), block_index=2),
        _record(ClippingKind.HIGHLIGHT, "A separate passage.", Location.span(300, 310), block_index=3),
        _record(ClippingKind.HIGHLIGHT, "A separate passage.", Location.span(300, 310), block_index=4),
        _record(ClippingKind.HIGHLIGHT, "", Location.span(500, 505), block_index=5, is_empty=True),
    ]


def test_default_pipeline_collapses_and_links() -> None:
    result = process(_records())

    assert result.duplicates_removed == 1
    assert result.merged_highlights == 1
    assert result.linked_notes == 1
    assert result.tags_extracted == 0
    assert result.empty_removed == 0
    # the empty highlight is too short to be trusted
    assert result.suspicious_flagged == 1
    merged = next(record for record in result.clippings if record.location.raw == "100-120")
    assert merged.note == "focus, craft"
    assert merged.tags == []


def test_options_enable_tags_and_output_shaping() -> None:
    options = ParseOptions(extract_tags=True, remove_empty=True, highlights_only=True, tag_case="upper")

    result = process(_records(), options)

    assert result.tags_extracted == 1
    assert result.notes_consumed == 1
    assert result.empty_removed == 1
    assert {record.kind for record in result.clippings} == {ClippingKind.HIGHLIGHT}
    assert len(result.clippings) == 2
    merged = next(record for record in result.clippings if record.location.raw == "100-120")
    assert merged.tags == ["FOCUS", "CRAFT"]


def test_disabled_stages_flag_instead_of_dropping() -> None:
    options = ParseOptions(remove_duplicates=False, merge_overlapping=False, merge_notes=False)

    result = process(_records(), options)

    assert len(result.clippings) == 6
    assert result.duplicates_removed == 1
    assert result.merged_highlights == 0
    assert result.linked_notes == 0
    reasons = sorted(record.suspicious_reason or "" for record in result.clippings)
    assert "exact_duplicate" in reasons
    assert "overlapping" in reasons

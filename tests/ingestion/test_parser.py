from __future__ import annotations

from marginalia.config import ParseOptions
from marginalia.ingestion.models import ClippingKind
from marginalia.ingestion.parser import parse_string
from marginalia.ingestion.serialize import to_clippings_text

SEPARATOR = "=========="
ADDED = "Added on Friday, January 1, 2021 10:30:45 AM"


def _block(title: str, metadata: str, content: str = "") -> str:
    return f"{title}\n{metadata}\n\n{content}\n{SEPARATOR}\n"


def _sample_export() -> str:
    return "".join(
        [
            _block("Deep Work (Cal Newport)", f"- Your Highlight on page 10 | Location 100-110 | {ADDED}", "This is the beginning"),
            _block(
                "Deep Work (Cal Newport)",
                f"- Your Highlight on page 10 | Location 100-120 | {ADDED}",
                "This is the beginning of a longer sentence.",
            ),
            _block("Deep Work (Cal Newport)", f"- Your Note on page 10 | Location 115 | {ADDED}", "Productivity, Habits"),
            _block("Deep Work (Cal Newport)", f"- Your Highlight on page 20 | Location 300-305 | {ADDED}", "Another passage worth keeping."),
            _block("Deep Work (Cal Newport)", f"- Your Highlight on page 20 | Location 300-305 | {ADDED}", "Another passage worth keeping."),
            _block("Deep Work (Cal Newport)", f"- Your Bookmark on page 30 | Location 400 | {ADDED}"),
        ]
    )


def test_overlapping_highlights_merge_into_the_longer_one() -> None:
    text = (
        _block("Book (Author)", "- Your Highlight | Location 100-110", "This is the beginning")
        + _block("Book (Author)", "- Your Highlight | Location 100-120", "This is the beginning of a longer sentence")
    )

    result = parse_string(text)

    highlights = [record for record in result.clippings if record.kind is ClippingKind.HIGHLIGHT]
    assert len(highlights) == 1
    assert highlights[0].content == "This is the beginning of a longer sentence"
    assert highlights[0].location.raw == "100-120"
    assert result.metrics.merged_highlights == 1


def test_full_pipeline_reports_metrics_and_links_notes() -> None:
    result = parse_string(_sample_export(), ParseOptions(extract_tags=True))

    metrics = result.metrics
    assert metrics.total_blocks == 6
    assert metrics.parsed_blocks == 6
    assert metrics.duplicates_removed == 1
    assert metrics.merged_highlights == 1
    assert metrics.linked_notes == 1
    assert metrics.notes_consumed == 1
    assert metrics.detected_language == "en"
    assert metrics.parse_time >= 0
    assert metrics.file_size == len(_sample_export().encode("utf-8"))

    kinds = [record.kind for record in result.clippings]
    assert kinds.count(ClippingKind.HIGHLIGHT) == 2
    assert kinds.count(ClippingKind.NOTE) == 1
    assert kinds.count(ClippingKind.BOOKMARK) == 1

    merged = next(record for record in result.clippings if record.location.raw == "100-120")
    note = next(record for record in result.clippings if record.kind is ClippingKind.NOTE)
    assert merged.note == "Productivity, Habits"
    assert merged.linked_note_id == note.id
    assert note.linked_highlight_id == merged.id
    assert merged.tags == ["productivity", "habits"]
    assert result.stats.total == 4
    assert result.stats.total_books == 1


def test_reparsing_serialized_output_is_idempotent() -> None:
    first = parse_string(_sample_export())
    second = parse_string(to_clippings_text(first.clippings))

    assert [record.id for record in second.clippings] == [record.id for record in first.clippings]
    assert second.metrics.duplicates_removed == 0
    assert second.metrics.merged_highlights == 0
    assert second.metrics.linked_notes == first.metrics.linked_notes


def test_malformed_blocks_become_warnings() -> None:
    text = (
        "Lonely line\n"
        f"{SEPARATOR}\n"
        "Book (Author)\nnot a metadata line\ncontent\n"
        f"{SEPARATOR}\n"
        + _block("Book (Author)", "- Your Highlight | Location 5", "Fine content.")
    )

    result = parse_string(text)

    assert result.metrics.total_blocks == 3
    assert result.metrics.parsed_blocks == 1
    assert [warning.block_index for warning in result.warnings] == [0, 1]
    assert all(warning.kind == "unknown_format" for warning in result.warnings)
    assert result.warnings[0].raw == "Lonely line"
    assert len(result.clippings) == 1


def test_parsed_blocks_are_counted_before_filters() -> None:
    text = _block("Deep Work (Cal Newport)", "- Your Highlight | Location 5", "Kept text.") + _block(
        "Other Book (Someone)", "- Your Highlight | Location 9", "Dropped text."
    )

    result = parse_string(text, ParseOptions(only_books=("deep",)))

    assert result.metrics.parsed_blocks == 2
    assert [record.title for record in result.clippings] == ["Deep Work"]


def test_disabled_dedupe_and_merge_flag_instead_of_dropping() -> None:
    options = ParseOptions(remove_duplicates=False, merge_overlapping=False)

    result = parse_string(_sample_export(), options)

    reasons = sorted(record.suspicious_reason or "" for record in result.clippings if record.is_suspicious)
    assert "exact_duplicate" in reasons
    assert "overlapping" in reasons
    assert result.metrics.duplicates_removed == 1
    assert result.metrics.merged_highlights == 0
    assert len(result.clippings) == 6


def test_explicit_language_skips_detection() -> None:
    text = _block(
        "Libro (Autora)",
        "- Tu subrayado en la página 3 | posición 10-12 | Añadido el viernes, 1 de enero de 2021 10:30:45",
        "Texto subrayado.",
    )

    detected = parse_string(text)
    forced = parse_string(text, ParseOptions(language="en"))

    assert detected.metrics.detected_language == "es"
    assert detected.clippings[0].location.raw == "10-12"
    assert forced.metrics.detected_language == "en"
    assert forced.clippings[0].location.raw == ""


def test_long_mid_sentence_highlight_is_not_flagged() -> None:
    content = "the habits we repeat every day shape who we become over years of patient time and effort"
    text = _block("Atomic Habits (James Clear)", "- Your Highlight | Location 40-42", content)

    result = parse_string(text)

    assert result.clippings[0].content == content
    assert result.clippings[0].is_suspicious is False
    assert result.metrics.suspicious_flagged == 0

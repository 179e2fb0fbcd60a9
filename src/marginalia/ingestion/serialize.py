"""Write records back into the clippings text format, or into plain dicts."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from marginalia.ingestion.dates import format_date
from marginalia.ingestion.languages import LANGUAGE_MAP
from marginalia.ingestion.models import Clipping, ClippingKind
from marginalia.ingestion.sanitizers import UNKNOWN_AUTHOR
from marginalia.ingestion.tokenizer import SEPARATOR


def _kind_phrase(kind: ClippingKind, language: str) -> str:
    patterns = LANGUAGE_MAP[language]
    return {
        ClippingKind.HIGHLIGHT: patterns.highlight,
        ClippingKind.NOTE: patterns.note,
        ClippingKind.BOOKMARK: patterns.bookmark,
        ClippingKind.CLIP: patterns.clip,
    }[kind]


def _date_text(clipping: Clipping, language: str) -> str:
    if clipping.date_raw and clipping.language == language:
        return clipping.date_raw
    if clipping.date is not None:
        return format_date(clipping.date, language)
    return ""


def format_metadata_line(clipping: Clipping, language: str = "en") -> str:
    patterns = LANGUAGE_MAP[language]
    parts = [f"- {_kind_phrase(clipping.kind, language)}"]
    if clipping.page is not None:
        parts.append(f"{patterns.page} {clipping.page}")
    if clipping.location.is_known:
        parts.append(f"{patterns.location} {clipping.location.raw}")
    date_text = _date_text(clipping, language)
    if date_text:
        parts.append(f"{patterns.added_on} {date_text}")
    return " | ".join(parts)


def format_title_line(clipping: Clipping) -> str:
    if clipping.author and clipping.author != UNKNOWN_AUTHOR:
        return f"{clipping.title} ({clipping.author})"
    return clipping.title


def to_clippings_text(clippings: Iterable[Clipping], language: str = "en") -> str:
    """Serialize records in file order using *language*'s keywords.

    Parsing the output again yields the same ids, which makes it suitable
    for re-import checks.
    """

    if language not in LANGUAGE_MAP:
        raise ValueError(f"Unsupported language: {language!r}")
    chunks: list[str] = []
    for clipping in clippings:
        chunks.append(
            "\n".join(
                (
                    format_title_line(clipping),
                    format_metadata_line(clipping, language),
                    "",
                    clipping.content,
                    SEPARATOR,
                )
            )
        )
    return "\n".join(chunks) + ("\n" if chunks else "")


def record_to_dict(clipping: Clipping) -> dict[str, Any]:
    """JSON-safe representation of one record."""

    return {
        "id": clipping.id,
        "kind": clipping.kind.value,
        "title": clipping.title,
        "author": clipping.author,
        "content": clipping.content,
        "location": {
            "raw": clipping.location.raw,
            "start": clipping.location.start,
            "end": clipping.location.end,
        },
        "page": clipping.page,
        "date": clipping.date.isoformat() if clipping.date else None,
        "date_raw": clipping.date_raw,
        "source": clipping.source.value,
        "language": clipping.language,
        "block_index": clipping.block_index,
        "word_count": clipping.word_count,
        "char_count": clipping.char_count,
        "is_empty": clipping.is_empty,
        "is_limit_reached": clipping.is_limit_reached,
        "title_was_cleaned": clipping.title_was_cleaned,
        "content_was_cleaned": clipping.content_was_cleaned,
        "note": clipping.note,
        "tags": list(clipping.tags),
        "linked_note_id": clipping.linked_note_id,
        "linked_highlight_id": clipping.linked_highlight_id,
        "is_suspicious": clipping.is_suspicious,
        "suspicious_reason": clipping.suspicious_reason,
        "possible_duplicate_of": clipping.possible_duplicate_of,
        "similarity_score": clipping.similarity_score,
    }

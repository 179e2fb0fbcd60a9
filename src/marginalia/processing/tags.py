"""Reinterpret short linked notes such as ``"productivity, habits"`` as tags."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
import logging
import re

from marginalia.ingestion.models import Clipping, ClippingKind

logger = logging.getLogger(__name__)

TAG_CASES = ("original", "upper", "lower")
MIN_TAG_LENGTH = 2
MAX_TAG_LENGTH = 50
MAX_TAG_SPACES = 3
MAX_TAG_NOTE_LENGTH = 200

_SEPARATORS_RE = re.compile(r"[,;.\n\r]+")
_TRAILING_PUNCT_RE = re.compile(r"[.,;:!?]+$")
_WHITESPACE_RE = re.compile(r"\s+")
_FUNCTION_WORDS_RE = re.compile(
    r"\b(the|is|are|was|were|a|an|have|has|will|would|could|should|does|did)\b",
    re.IGNORECASE,
)


@dataclass(slots=True)
class TagExtraction:
    tags: list[str] = field(default_factory=list)
    is_tag_only: bool = False

    @property
    def has_tags(self) -> bool:
        return bool(self.tags)


@dataclass(slots=True)
class TagExtractionResult:
    clippings: list[Clipping]
    extracted_count: int
    notes_consumed: int


def clean_tag(segment: str, tag_case: str = "lower") -> str:
    cleaned = segment.strip()
    if cleaned.startswith("#"):
        cleaned = cleaned[1:]
    cleaned = _TRAILING_PUNCT_RE.sub("", cleaned)
    cleaned = _WHITESPACE_RE.sub(" ", cleaned).strip()
    if tag_case == "lower":
        return cleaned.lower()
    if tag_case == "upper":
        return cleaned.upper()
    return cleaned


def is_valid_tag(tag: str) -> bool:
    if not MIN_TAG_LENGTH <= len(tag) <= MAX_TAG_LENGTH:
        return False
    if not tag[0].isalpha():
        return False
    if tag.count(" ") > MAX_TAG_SPACES:
        return False
    return _FUNCTION_WORDS_RE.search(tag) is None


def extract_tags(note: str, tag_case: str = "lower") -> TagExtraction:
    """Split *note* into tags and decide whether the whole note is a tag list.

    Segments that read like prose ("This is a sentence") are dropped. The
    note is tag-only when it is shorter than 200 characters and every
    non-empty segment produced a valid tag.
    """

    if tag_case not in TAG_CASES:
        raise ValueError(f"tag_case must be one of {', '.join(TAG_CASES)}")
    trimmed = note.strip()
    if not trimmed:
        return TagExtraction()

    segments = [segment for segment in _SEPARATORS_RE.split(trimmed) if segment.strip()]
    tags: list[str] = []
    seen: set[str] = set()
    valid_segments = 0
    for segment in segments:
        tag = clean_tag(segment, tag_case)
        if not is_valid_tag(tag):
            continue
        valid_segments += 1
        key = tag.lower()
        if key not in seen:
            seen.add(key)
            tags.append(tag)

    is_tag_only = bool(tags) and valid_segments == len(segments) and len(trimmed) < MAX_TAG_NOTE_LENGTH
    return TagExtraction(tags=tags, is_tag_only=is_tag_only)


def extract_tags_from_linked_notes(clippings: list[Clipping], tag_case: str = "lower") -> TagExtractionResult:
    """Populate ``tags`` on highlights whose linked note yields tags.

    ``notes_consumed`` counts linked notes that are entirely tag lists; the
    notes themselves stay in the output.
    """

    result: list[Clipping] = []
    extracted = 0
    consumed = 0
    for clipping in clippings:
        if clipping.kind is not ClippingKind.HIGHLIGHT or not clipping.note:
            result.append(clipping)
            continue
        extraction = extract_tags(clipping.note, tag_case)
        if not extraction.has_tags:
            result.append(clipping)
            continue
        extracted += 1
        if extraction.is_tag_only:
            consumed += 1
        result.append(replace(clipping, tags=_merge_tags(clipping.tags, extraction.tags)))

    logger.debug("Extracted tags for %d highlights (%d tag-only notes)", extracted, consumed)
    return TagExtractionResult(clippings=result, extracted_count=extracted, notes_consumed=consumed)


def _merge_tags(existing: list[str], extracted: list[str]) -> list[str]:
    merged = list(existing)
    known = {tag.lower() for tag in existing}
    for tag in extracted:
        if tag.lower() not in known:
            known.add(tag.lower())
            merged.append(tag)
    return merged

"""Cleanup of PDF and OCR artifacts in highlight text."""

from __future__ import annotations

from dataclasses import dataclass, field
import re

DEHYPHENATION = "dehyphenation"
SPACE_BEFORE_PUNCTUATION = "space_before_punctuation"
MULTIPLE_SPACES = "multiple_spaces"
INVISIBLE_CHARS = "invisible_chars"

# "word-\n suffix" -> "wordsuffix"; letters only, so "1990-\n2000" is kept.
_HYPHEN_BREAK_RE = re.compile(r"([^\W\d_]+)-[ \t]*\n\s*([^\W\d_]+)")
_SPACE_BEFORE_PUNCT_RE = re.compile(r"\s+([.,;:!?])")
_MULTIPLE_SPACES_RE = re.compile(r" {2,}")
_INVISIBLE_RE = re.compile("[\ufeff\u200b\u200c\u200d]")


@dataclass(slots=True)
class TextCleaningResult:
    text: str
    was_cleaned: bool
    applied_operations: list[str] = field(default_factory=list)


def clean_text(text: str) -> TextCleaningResult:
    """Apply the cleanup chain and report which steps changed the text."""

    result = text
    applied: list[str] = []
    for operation, pattern, replacement in (
        (DEHYPHENATION, _HYPHEN_BREAK_RE, r"\1\2"),
        (SPACE_BEFORE_PUNCTUATION, _SPACE_BEFORE_PUNCT_RE, r"\1"),
        (MULTIPLE_SPACES, _MULTIPLE_SPACES_RE, " "),
        (INVISIBLE_CHARS, _INVISIBLE_RE, ""),
    ):
        updated = pattern.sub(replacement, result)
        if updated != result:
            result = updated
            applied.append(operation)

    result = result.strip()
    return TextCleaningResult(text=result, was_cleaned=result != text.strip(), applied_operations=applied)


def needs_cleaning(text: str) -> bool:
    return bool(
        _HYPHEN_BREAK_RE.search(text)
        or _SPACE_BEFORE_PUNCT_RE.search(text)
        or _MULTIPLE_SPACES_RE.search(text)
        or _INVISIBLE_RE.search(text)
    )

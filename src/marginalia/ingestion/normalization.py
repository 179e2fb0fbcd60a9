"""Text normalization helpers used by the tokenizer, parser and identity."""

from __future__ import annotations

import re
import unicodedata

_BOM = "\ufeff"
_LINE_ENDINGS_RE = re.compile(r"\r\n?")
_NBSP_RE = re.compile("\u00a0")
_MULTIPLE_SPACES_RE = re.compile(r"\s{2,}")
_WHITESPACE_RE = re.compile(r"\s+")


def remove_bom(text: str) -> str:
    """Drop a leading byte-order mark."""

    return text[1:] if text.startswith(_BOM) else text


def normalize_line_endings(text: str) -> str:
    return _LINE_ENDINGS_RE.sub("\n", text)


def normalize_unicode(text: str) -> str:
    """Apply canonical composition so visually equal strings compare equal."""

    return unicodedata.normalize("NFC", text)


def normalize_whitespace(text: str) -> str:
    """Convert NBSP, collapse whitespace runs of two or more and trim.

    Single newlines survive so the text cleaner can still see line-break
    hyphenation.
    """

    text = _NBSP_RE.sub(" ", text)
    return _MULTIPLE_SPACES_RE.sub(" ", text).strip()


def collapse_whitespace(text: str) -> str:
    """Collapse every whitespace run (newlines included) into one space."""

    return _WHITESPACE_RE.sub(" ", text).strip()


def prepare_source(text: str, *, unicode_normalization: bool = True) -> str:
    """Normalize a raw clippings export before tokenization.

    Strips the BOM and unifies line endings unconditionally; NFC composition
    can be switched off for callers that need byte-faithful content.
    """

    prepared = normalize_line_endings(remove_bom(text))
    if unicode_normalization:
        prepared = normalize_unicode(prepared)
    return prepared


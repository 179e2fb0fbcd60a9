"""Title, author and content sanitization for parsed blocks."""

from __future__ import annotations

from dataclasses import dataclass
import re

from marginalia.ingestion.languages import DRM_LIMIT_MESSAGES
from marginalia.ingestion.normalization import normalize_whitespace

UNKNOWN_AUTHOR = "Unknown"

_SIDELOAD_EXTENSION_RE = re.compile(r"\.(pdf|epub|mobi|azw3?|txt|doc|docx|html|fb2|rtf)\b", re.IGNORECASE)
_EBOK_SUFFIX_RE = re.compile(r"_EBOK$", re.IGNORECASE)

_TITLE_NOISE_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"\s*\((?:Spanish|English|French|German|Italian|Portuguese|Kindle) Edition\)",
        r"\s*\(Edici[oó]n (?:española|en español)\)",
        r"\s*\((?:Edition|Version) française\)",
        r"\s*\(Deutsche Ausgabe\)",
        r"\s*\(Edizione italiana\)",
        r"\s*\(Edição portuguesa\)",
        r"\s*\(Edition \d+\)",
        r"\s*\[(?:Print Replica|eBook|Kindle)\]",
        r"^\d+\s+",
        r"\s*\(\s*\)$",
        r"\s*\[\s*\]$",
    )
)


@dataclass(slots=True)
class TitleSanitizeResult:
    title: str
    was_cleaned: bool


@dataclass(slots=True)
class SanitizedContent:
    content: str
    is_empty: bool
    is_limit_reached: bool


def sanitize_title(title: str) -> TitleSanitizeResult:
    """Strip sideload extensions, store suffixes and edition markers from *title*."""

    original = normalize_whitespace(title)
    clean = _SIDELOAD_EXTENSION_RE.sub("", title)
    clean = _EBOK_SUFFIX_RE.sub("", clean)
    for pattern in _TITLE_NOISE_PATTERNS:
        clean = pattern.sub("", clean)
    clean = normalize_whitespace(clean)
    if not clean:
        # Never erase a title completely; "2021.pdf" keeps its digits.
        clean = original
    return TitleSanitizeResult(title=clean, was_cleaned=clean != original)


def split_title_author(line: str) -> tuple[str, str | None]:
    """Split ``"Title (Author)"`` on the last balanced parenthesis group.

    Nested groups are tracked by depth, so ``"Book ((Nested) Author)"``
    yields the author ``"(Nested) Author"``. Returns ``(line, None)`` when
    the line does not end in a balanced group.
    """

    trimmed = line.strip()
    if not trimmed.endswith(")"):
        return trimmed, None

    depth = 0
    for position in range(len(trimmed) - 1, -1, -1):
        char = trimmed[position]
        if char == ")":
            depth += 1
        elif char == "(":
            depth -= 1
            if depth == 0:
                return trimmed[:position].strip(), trimmed[position + 1 : -1].strip()
    return trimmed, None


def extract_author(line: str, *, clean_title: bool = True) -> tuple[str, str, bool]:
    """Return ``(title, author, title_was_cleaned)`` for a block's first line."""

    title, author = split_title_author(line)
    if author is not None and not title:
        # "(Only Parentheses)" is a title, not an author.
        title, author = line.strip(), None
    was_cleaned = False
    if clean_title:
        result = sanitize_title(title)
        title, was_cleaned = result.title, result.was_cleaned
    else:
        title = normalize_whitespace(title)
    author = normalize_whitespace(author) if author else ""
    return title, author or UNKNOWN_AUTHOR, was_cleaned


def is_sideloaded(title_line: str) -> bool:
    return bool(_SIDELOAD_EXTENSION_RE.search(title_line) or _EBOK_SUFFIX_RE.search(title_line.strip()))


def is_limit_message(content: str) -> bool:
    lowered = content.lower()
    return any(message.lower() in lowered for message in DRM_LIMIT_MESSAGES)


def sanitize_content(content: str) -> SanitizedContent:
    trimmed = content.strip()
    if not trimmed:
        return SanitizedContent(content="", is_empty=True, is_limit_reached=False)
    return SanitizedContent(
        content=normalize_whitespace(trimmed),
        is_empty=False,
        is_limit_reached=is_limit_message(trimmed),
    )

"""Turn one tokenized block into a candidate record."""

from __future__ import annotations

from dataclasses import dataclass
import re

from marginalia.ingestion.dates import parse_date
from marginalia.ingestion.identity import make_id
from marginalia.ingestion.languages import DEFAULT_LANGUAGE, LANGUAGE_MAP, LanguagePatterns
from marginalia.ingestion.models import Clipping, ClippingKind, ClippingSource, Location
from marginalia.ingestion.normalization import normalize_whitespace
from marginalia.ingestion.sanitizers import extract_author, is_sideloaded, sanitize_content
from marginalia.ingestion.text_cleaner import clean_text

# A few non-digits may sit between keyword and number ("位置No. 33") but never a field separator.
_NUMBER_LEAD = r"^[^\d|()（）]{0,8}?"
_FIRST_NUMBER_RE = re.compile(_NUMBER_LEAD + r"(\d+)")
_LOCATION_RE = re.compile(_NUMBER_LEAD + r"(\d+)(?:\s*-\s*(\d+))?")
_DATE_LEAD_RE = re.compile(r"^[\s:|,]+")
_WORD_RE = re.compile(r"\S+")


@dataclass(slots=True)
class MetadataLine:
    """Fields decomposed from a block's second line."""

    kind: ClippingKind
    page: int | None
    location: Location
    date_raw: str


def count_words(text: str) -> int:
    return len(_WORD_RE.findall(text))


def _after_keyword(text: str, keyword: str) -> str | None:
    match = re.search(re.escape(keyword), text, re.IGNORECASE)
    if match is None:
        return None
    return text[match.end():]


def detect_kind(text: str, patterns: LanguagePatterns) -> ClippingKind:
    """First matching keyword wins; unrecognized lines default to highlight."""

    lowered = text.lower()
    for kind, keyword in (
        (ClippingKind.HIGHLIGHT, patterns.highlight),
        (ClippingKind.NOTE, patterns.note),
        (ClippingKind.BOOKMARK, patterns.bookmark),
        (ClippingKind.CLIP, patterns.clip),
    ):
        if keyword.lower() in lowered:
            return kind
    return ClippingKind.HIGHLIGHT


def parse_page(text: str, patterns: LanguagePatterns) -> int | None:
    tail = _after_keyword(text, patterns.page)
    if tail is None:
        return None
    match = _FIRST_NUMBER_RE.match(tail)
    return int(match.group(1)) if match else None


def parse_location(text: str, patterns: LanguagePatterns) -> Location:
    tail = _after_keyword(text, patterns.location)
    if tail is None:
        return Location()
    match = _LOCATION_RE.match(tail)
    if match is None:
        return Location()
    start = int(match.group(1))
    if match.group(2) is None:
        return Location(raw=str(start), start=start)
    end = int(match.group(2))
    if end < start:
        start, end = end, start
    return Location.span(start, end)


def parse_date_raw(text: str, patterns: LanguagePatterns) -> str:
    tail = _after_keyword(text, patterns.added_on)
    if tail is None:
        return ""
    return normalize_whitespace(_DATE_LEAD_RE.sub("", tail))


def parse_metadata_line(line: str, language: str) -> MetadataLine | None:
    """Decompose ``- Your Highlight on page 3 | Location 10-12 | Added on ...``.

    Returns ``None`` when the line does not start with ``-``. The kind falls
    back to highlight rather than failing the block.
    """

    if not line.startswith("-"):
        return None
    patterns = LANGUAGE_MAP.get(language) or LANGUAGE_MAP[DEFAULT_LANGUAGE]
    body = line[1:].strip()
    return MetadataLine(
        kind=detect_kind(body, patterns),
        page=parse_page(body, patterns),
        location=parse_location(body, patterns),
        date_raw=parse_date_raw(body, patterns),
    )


def parse_block(
    lines: list[str],
    index: int,
    language: str,
    *,
    clean_content: bool = True,
    clean_titles: bool = True,
) -> Clipping | None:
    """Build a record from a block's lines, or ``None`` if the block is malformed."""

    if len(lines) < 2 or not lines[0] or not lines[1]:
        return None
    title_line, metadata_line = lines[0], lines[1]
    metadata = parse_metadata_line(metadata_line, language)
    if metadata is None:
        return None

    title, author, title_was_cleaned = extract_author(title_line, clean_title=clean_titles)

    content_raw = "\n".join(lines[2:])
    sanitized = sanitize_content(content_raw)
    content = sanitized.content
    content_was_cleaned = False
    if clean_content and content:
        cleaned = clean_text(content)
        content, content_was_cleaned = cleaned.text, cleaned.was_cleaned

    return Clipping(
        id=make_id(title, metadata.location.raw, metadata.kind, content),
        kind=metadata.kind,
        title=title,
        title_raw=title_line,
        author=author,
        author_raw=title_line,
        content=content,
        content_raw=content_raw,
        location=metadata.location,
        page=metadata.page,
        date=parse_date(metadata.date_raw, language) if metadata.date_raw else None,
        date_raw=metadata.date_raw,
        source=ClippingSource.SIDELOAD if is_sideloaded(title_line) else ClippingSource.KINDLE,
        language=language,
        block_index=index,
        word_count=count_words(content),
        char_count=len(content),
        is_empty=sanitized.is_empty,
        is_limit_reached=sanitized.is_limit_reached,
        title_was_cleaned=title_was_cleaned,
        content_was_cleaned=content_was_cleaned,
    )

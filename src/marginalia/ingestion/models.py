"""Canonical data structures shared by the parser and reconciliation stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class ClippingKind(str, Enum):
    """Closed set of annotation kinds found in a clippings export."""

    HIGHLIGHT = "highlight"
    NOTE = "note"
    BOOKMARK = "bookmark"
    CLIP = "clip"


class ClippingSource(str, Enum):
    KINDLE = "kindle"        # bought from the native store
    SIDELOAD = "sideload"    # personal document copied onto the device


@dataclass(frozen=True, slots=True)
class Location:
    """Reader position range in the device's internal addressing."""

    raw: str = ""
    start: int = 0
    end: int | None = None

    def __post_init__(self) -> None:
        if self.end is not None and self.end < self.start:
            raise ValueError(f"Location end {self.end} precedes start {self.start}")

    @property
    def effective_end(self) -> int:
        return self.start if self.end is None else self.end

    @property
    def is_known(self) -> bool:
        return bool(self.raw)

    @classmethod
    def span(cls, start: int, end: int) -> "Location":
        return cls(raw=f"{start}-{end}", start=start, end=end)


@dataclass(slots=True)
class Clipping:
    """One parsed annotation: highlight, note, bookmark or clip."""

    id: str
    kind: ClippingKind
    title: str
    title_raw: str
    author: str
    author_raw: str
    content: str
    content_raw: str
    location: Location = field(default_factory=Location)
    page: int | None = None
    date: datetime | None = None
    date_raw: str = ""
    source: ClippingSource = ClippingSource.KINDLE
    language: str = "en"
    block_index: int = 0
    word_count: int = 0
    char_count: int = 0
    is_empty: bool = False
    is_limit_reached: bool = False
    title_was_cleaned: bool = False
    content_was_cleaned: bool = False
    note: str | None = None
    tags: list[str] = field(default_factory=list)
    linked_note_id: str | None = None
    linked_highlight_id: str | None = None
    is_suspicious: bool = False
    suspicious_reason: str | None = None
    possible_duplicate_of: str | None = None
    similarity_score: float | None = None

    @property
    def book_key(self) -> tuple[str, str]:
        """Grouping key: records from different books are never compared."""

        return (self.title.lower(), self.author.lower())


@dataclass(slots=True)
class Block:
    """Raw text segment between two separator lines."""

    index: int
    lines: list[str]
    raw: str


@dataclass(slots=True)
class ParseWarning:
    """Non-fatal anomaly collected while parsing."""

    kind: str
    message: str
    block_index: int
    raw: str | None = None


@dataclass(slots=True)
class ParseMetrics:
    """Counters describing one pipeline run."""

    total_blocks: int = 0
    parsed_blocks: int = 0
    duplicates_removed: int = 0
    merged_highlights: int = 0
    linked_notes: int = 0
    empty_removed: int = 0
    notes_consumed: int = 0
    tags_extracted: int = 0
    suspicious_flagged: int = 0
    detected_language: str = "en"
    parse_time: float = 0.0
    file_size: int = 0


@dataclass(slots=True)
class DateRange:
    earliest: datetime | None = None
    latest: datetime | None = None

    def include(self, value: datetime | None) -> None:
        if value is None:
            return
        if self.earliest is None or value < self.earliest:
            self.earliest = value
        if self.latest is None or value > self.latest:
            self.latest = value


@dataclass(slots=True)
class BookStats:
    title: str
    author: str
    highlights: int = 0
    notes: int = 0
    bookmarks: int = 0
    word_count: int = 0
    date_range: DateRange = field(default_factory=DateRange)


@dataclass(slots=True)
class ClippingsStats:
    """Aggregate statistics over a list of records."""

    total: int = 0
    total_highlights: int = 0
    total_notes: int = 0
    total_bookmarks: int = 0
    total_clips: int = 0
    total_books: int = 0
    total_authors: int = 0
    total_words: int = 0
    drm_limit_reached: int = 0
    avg_words_per_highlight: int = 0
    avg_highlights_per_book: int = 0
    date_range: DateRange = field(default_factory=DateRange)
    books: list[BookStats] = field(default_factory=list)


@dataclass(slots=True)
class ParseResult:
    """Everything downstream exporters are expected to consume."""

    clippings: list[Clipping]
    warnings: list[ParseWarning]
    metrics: ParseMetrics
    stats: ClippingsStats

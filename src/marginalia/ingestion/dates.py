"""Locale-aware parsing of the device's "added on" date text.

Each language lists its formats in ``LANGUAGE_MAP``; formats are compiled
once into regular expressions over that language's month, weekday and
meridiem tables. When no format matches, ``dateutil`` gets one lenient
attempt with a fixed default so results never depend on today's date.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from functools import lru_cache
import logging
import re

from dateutil import parser as dateutil_parser

from marginalia.ingestion.languages import CALENDAR_NAMES, LANGUAGE_MAP, SUPPORTED_LANGUAGES, CalendarNames
from marginalia.ingestion.normalization import collapse_whitespace

logger = logging.getLogger(__name__)

_FALLBACK_DEFAULT = datetime(2000, 1, 1)
_CAPITALIZED_MONTHS = frozenset({"en", "de"})

# Longest tokens first so "yyyy" is not read as four "y".
_FORMAT_TOKEN_RE = re.compile(r"'[^']*'|EEEE|MMMM|yyyy|HH|hh|mm|ss|dd|MM|H|h|d|M|a|\s+|.", re.DOTALL)

_NUMERIC_TOKENS: dict[str, tuple[str, str]] = {
    "yyyy": ("year", r"\d{4}"),
    "MM": ("month", r"\d{1,2}"),
    "M": ("month", r"\d{1,2}"),
    "dd": ("day", r"\d{1,2}"),
    "d": ("day", r"\d{1,2}"),
    "HH": ("hour", r"\d{1,2}"),
    "H": ("hour", r"\d{1,2}"),
    "hh": ("hour12", r"\d{1,2}"),
    "h": ("hour12", r"\d{1,2}"),
    "mm": ("minute", r"\d{2}"),
    "ss": ("second", r"\d{2}"),
}


@dataclass(frozen=True, slots=True)
class DateParseAutoResult:
    date: datetime | None
    language: str | None


def _alternation(names) -> str:
    ordered = sorted(set(names), key=len, reverse=True)
    return "|".join(re.escape(name) for name in ordered)


def compile_date_format(date_format: str, calendar: CalendarNames) -> re.Pattern[str]:
    """Translate a format string into an anchored, case-insensitive regex."""

    parts: list[str] = []
    for token in _FORMAT_TOKEN_RE.findall(date_format):
        if token.startswith("'") and token.endswith("'") and len(token) >= 2:
            parts.append(re.escape(token[1:-1]))
        elif token in _NUMERIC_TOKENS:
            group, pattern = _NUMERIC_TOKENS[token]
            parts.append(f"(?P<{group}>{pattern})")
        elif token == "EEEE":
            parts.append(f"(?:{_alternation(calendar.weekdays)})" if calendar.weekdays else r"\S+")
        elif token == "MMMM":
            parts.append(f"(?P<month_name>{_alternation(calendar.months)})")
        elif token == "a":
            parts.append(f"(?P<meridiem>{_alternation(calendar.meridiem)})")
        elif token.isspace():
            parts.append(r"\s*")
        else:
            parts.append(re.escape(token))
    return re.compile("".join(parts), re.IGNORECASE)


@lru_cache(maxsize=None)
def _compiled_formats(language: str) -> tuple[re.Pattern[str], ...]:
    calendar = CALENDAR_NAMES[language]
    return tuple(compile_date_format(fmt, calendar) for fmt in LANGUAGE_MAP[language].date_formats)


def _build_datetime(match: re.Match[str], calendar: CalendarNames) -> datetime | None:
    fields = match.groupdict()
    if fields.get("month_name"):
        month = calendar.months.get(fields["month_name"].lower())
    else:
        month = int(fields["month"]) if fields.get("month") else None
    if month is None or not fields.get("year") or not fields.get("day"):
        return None

    if fields.get("hour12") is not None:
        hour = int(fields["hour12"])
        meridiem = calendar.meridiem.get((fields.get("meridiem") or "").lower())
        if not 1 <= hour <= 12 and meridiem is not None:
            return None
        if meridiem == "pm" and hour < 12:
            hour += 12
        elif meridiem == "am" and hour == 12:
            hour = 0
    else:
        hour = int(fields.get("hour") or 0)

    try:
        return datetime(
            int(fields["year"]),
            month,
            int(fields["day"]),
            hour,
            int(fields.get("minute") or 0),
            int(fields.get("second") or 0),
        )
    except ValueError:
        return None


def parse_date_strict(raw: str, language: str) -> datetime | None:
    """Try only *language*'s own format list; no generic fallback."""

    if language not in LANGUAGE_MAP:
        return None
    text = collapse_whitespace(raw)
    if not text:
        return None
    calendar = CALENDAR_NAMES[language]
    for pattern in _compiled_formats(language):
        match = pattern.fullmatch(text)
        if match is None:
            continue
        parsed = _build_datetime(match, calendar)
        if parsed is not None:
            return parsed
    return None


def parse_date_generic(raw: str) -> datetime | None:
    """Locale-agnostic fallback; timezone information is dropped."""

    text = collapse_whitespace(raw)
    if not text:
        return None
    try:
        parsed = dateutil_parser.parse(text, default=_FALLBACK_DEFAULT, fuzzy=False)
    except (ValueError, OverflowError):
        return None
    return parsed.replace(tzinfo=None)


def parse_date(raw: str, language: str) -> datetime | None:
    """Resolve *raw* using *language*'s formats, then the generic fallback.

    Returns ``None`` for an unsupported language or text no strategy accepts.
    """

    if language not in LANGUAGE_MAP:
        logger.debug("No date formats for unsupported language %r", language)
        return None
    parsed = parse_date_strict(raw, language)
    if parsed is not None:
        return parsed
    return parse_date_generic(raw)


def parse_date_auto(raw: str) -> DateParseAutoResult:
    """Try every supported language in priority order.

    The generic fallback runs once, after every language-specific format
    failed; a date found that way carries ``language=None``.
    """

    for language in SUPPORTED_LANGUAGES:
        parsed = parse_date_strict(raw, language)
        if parsed is not None:
            return DateParseAutoResult(date=parsed, language=language)
    return DateParseAutoResult(date=parse_date_generic(raw), language=None)


def _first_alias(table, wanted) -> str | None:
    for name, value in table.items():
        if value == wanted:
            return name
    return None


def format_date(value: datetime, language: str) -> str:
    """Render *value* with *language*'s first date format.

    The output parses back to the same value with :func:`parse_date`.
    """

    calendar = CALENDAR_NAMES[language]
    date_format = LANGUAGE_MAP[language].date_formats[0]
    hour12 = value.hour % 12 or 12
    rendered: list[str] = []
    for token in _FORMAT_TOKEN_RE.findall(date_format):
        if token.startswith("'") and token.endswith("'") and len(token) >= 2:
            rendered.append(token[1:-1])
        elif token == "EEEE":
            rendered.append(calendar.weekdays[value.weekday()])
        elif token == "MMMM":
            month_name = _first_alias(calendar.months, value.month) or str(value.month)
            rendered.append(month_name.capitalize() if language in _CAPITALIZED_MONTHS else month_name)
        elif token == "yyyy":
            rendered.append(f"{value.year:04d}")
        elif token in ("M", "MM"):
            rendered.append(str(value.month) if token == "M" else f"{value.month:02d}")
        elif token in ("d", "dd"):
            rendered.append(str(value.day) if token == "d" else f"{value.day:02d}")
        elif token in ("H", "HH"):
            rendered.append(str(value.hour) if token == "H" else f"{value.hour:02d}")
        elif token in ("h", "hh"):
            rendered.append(str(hour12) if token == "h" else f"{hour12:02d}")
        elif token == "mm":
            rendered.append(f"{value.minute:02d}")
        elif token == "ss":
            rendered.append(f"{value.second:02d}")
        elif token == "a":
            meridiem = "am" if value.hour < 12 else "pm"
            name = _first_alias(calendar.meridiem, meridiem) or meridiem
            rendered.append(name.upper() if language == "en" else name)
        else:
            rendered.append(token)
    return "".join(rendered)

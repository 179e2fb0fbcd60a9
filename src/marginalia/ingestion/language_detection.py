"""Keyword-vote language detection for clippings exports."""

from __future__ import annotations

from collections.abc import Iterable
import logging

from marginalia.ingestion.languages import DEFAULT_LANGUAGE, LANGUAGE_MAP, SUPPORTED_LANGUAGES
from marginalia.ingestion.models import Block

logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_SIZE = 10


def _keywords(language: str) -> tuple[str, ...]:
    patterns = LANGUAGE_MAP[language]
    return tuple(
        keyword.lower()
        for keyword in (patterns.highlight, patterns.note, patterns.bookmark, patterns.clip, patterns.added_on)
    )


_KEYWORDS: dict[str, tuple[str, ...]] = {language: _keywords(language) for language in SUPPORTED_LANGUAGES}


def score_line(line: str) -> dict[str, int]:
    """Count keyword occurrences of every supported language in one metadata line."""

    lowered = line.lower()
    return {
        language: sum(lowered.count(keyword) for keyword in keywords)
        for language, keywords in _KEYWORDS.items()
    }


def detect_language(blocks: Iterable[Block], *, sample_size: int = DEFAULT_SAMPLE_SIZE) -> str:
    """Return the language whose keywords occur most in the sampled metadata lines.

    Only the second line of the first *sample_size* blocks is inspected. Ties
    go to the earlier language in ``SUPPORTED_LANGUAGES``; ``"en"`` is
    returned when nothing matched.
    """

    totals = dict.fromkeys(SUPPORTED_LANGUAGES, 0)
    sampled = 0
    for block in blocks:
        if sampled >= sample_size:
            break
        sampled += 1
        if len(block.lines) < 2:
            continue
        for language, score in score_line(block.lines[1]).items():
            totals[language] += score

    best_language = DEFAULT_LANGUAGE
    best_score = 0
    for language in SUPPORTED_LANGUAGES:
        if totals[language] > best_score:
            best_language = language
            best_score = totals[language]

    logger.debug("Detected language %s from %d sampled blocks (score=%d)", best_language, sampled, best_score)
    return best_language

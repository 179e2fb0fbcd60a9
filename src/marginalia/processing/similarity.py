"""Word-set similarity used by the merger and the fuzzy-duplicate flagger."""

from __future__ import annotations

import re

_PUNCTUATION_RE = re.compile("[.,;:!?\"'„“”‘’«»\\-—–()\\[\\]{}]")


def word_set(text: str) -> set[str]:
    """Lower-case *text*, strip punctuation and split on whitespace."""

    return set(_PUNCTUATION_RE.sub("", text.lower()).split())


def jaccard_similarity(left: str, right: str) -> float:
    """Return ``|A & B| / |A | B|`` over the two texts' word sets.

    Two texts without any words score 0.0, except that identical strings
    always score 1.0.
    """

    if left == right and left:
        return 1.0
    left_words = word_set(left)
    right_words = word_set(right)
    if not left_words or not right_words:
        return 0.0
    union = left_words | right_words
    return len(left_words & right_words) / len(union)


def is_substring_match(left: str, right: str) -> bool:
    """Case-insensitive containment in either direction."""

    left_folded = left.lower()
    right_folded = right.lower()
    return left_folded in right_folded or right_folded in left_folded

"""Split a normalized clippings export into raw blocks."""

from __future__ import annotations

from collections.abc import Iterator

from marginalia.ingestion.models import Block

SEPARATOR = "=========="


def _is_separator(line: str) -> bool:
    return line.strip() == SEPARATOR


def _segments(text: str) -> Iterator[list[str]]:
    current: list[str] = []
    for line in text.split("\n"):
        if _is_separator(line):
            yield current
            current = []
        else:
            current.append(line)
    yield current


def _trim_blank_edges(lines: list[str]) -> list[str]:
    start = 0
    end = len(lines)
    while start < end and not lines[start]:
        start += 1
    while end > start and not lines[end - 1]:
        end -= 1
    return lines[start:end]


def tokenize(text: str) -> Iterator[Block]:
    """Yield blocks in file order.

    ``Block.index`` is the rank of the segment among all separator-delimited
    segments, including blank ones that are dropped, so warnings point at a
    stable position. The iterator is single-pass; tokenize the text again to
    restart.
    """

    for index, segment in enumerate(_segments(text)):
        lines = _trim_blank_edges([line.strip() for line in segment])
        if not lines:
            continue
        yield Block(index=index, lines=lines, raw="\n".join(lines))

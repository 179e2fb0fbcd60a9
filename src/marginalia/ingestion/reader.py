"""Read clippings exports from disk with charset detection."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path

from charset_normalizer import from_bytes

from marginalia.config import ParseOptions
from marginalia.ingestion.models import ParseResult
from marginalia.ingestion.parser import parse_string

logger = logging.getLogger(__name__)

_FALLBACK_ENCODINGS = ("utf-8", "utf-16", "latin-1")


@dataclass(slots=True)
class ClippingsReadError(Exception):
    """Raised when a clippings file cannot be read or decoded."""

    path: Path
    message: str

    def __str__(self) -> str:
        return f"{self.message} (path={self.path})"


def detect_encoding(raw: bytes) -> str:
    # Kindle exports are UTF-8 with a BOM; trust it before statistical guessing.
    if raw.startswith(b"\xef\xbb\xbf"):
        return "utf-8-sig"
    if raw.startswith((b"\xff\xfe", b"\xfe\xff")):
        return "utf-16"

    best = from_bytes(raw).best()
    if best and best.encoding:
        return best.encoding

    for fallback in _FALLBACK_ENCODINGS:
        try:
            raw.decode(fallback)
            return fallback
        except UnicodeDecodeError:
            continue
    raise ValueError("Could not detect clippings encoding")


def decode_clippings(raw: bytes) -> str:
    if not raw:
        return ""
    return raw.decode(detect_encoding(raw))


def read_clippings_text(path: str | Path) -> tuple[str, int]:
    """Return the decoded text of *path* and its size in bytes."""

    source = Path(path)
    try:
        raw = source.read_bytes()
    except OSError as exc:
        raise ClippingsReadError(path=source, message=f"Could not read clippings file: {exc.strerror or exc}") from exc
    try:
        text = decode_clippings(raw)
    except (LookupError, ValueError) as exc:
        raise ClippingsReadError(path=source, message=f"Could not decode clippings file: {exc}") from exc
    logger.debug("Read %d bytes from %s", len(raw), source)
    return text, len(raw)


def parse_file(path: str | Path, options: ParseOptions | None = None) -> ParseResult:
    """Read and parse a clippings file; ``metrics.file_size`` is the on-disk size."""

    text, size = read_clippings_text(path)
    result = parse_string(text, options)
    result.metrics.file_size = size
    return result

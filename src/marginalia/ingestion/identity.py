"""Deterministic record identity."""

from __future__ import annotations

import hashlib

from marginalia.ingestion.models import ClippingKind
from marginalia.ingestion.normalization import normalize_unicode

CONTENT_PREFIX_LENGTH = 50
ID_LENGTH = 12


def make_id(title: str, location_raw: str, kind: ClippingKind | str, content: str) -> str:
    """Hash ``kind:title:location:content-prefix`` into a short hex id.

    The title is NFC-normalized, lower-cased and trimmed; only the first
    50 characters of content take part, so a highlight whose tail was edited
    keeps its id.
    """

    kind_value = kind.value if isinstance(kind, ClippingKind) else str(kind)
    normalized_title = normalize_unicode(title).lower().strip()
    prefix = normalize_unicode(content)[:CONTENT_PREFIX_LENGTH].strip()
    payload = f"{kind_value}:{normalized_title}:{location_raw.strip()}:{prefix}"
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()[:ID_LENGTH]

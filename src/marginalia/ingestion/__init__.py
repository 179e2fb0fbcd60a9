"""Clippings ingestion: tokenizing, parsing and record models."""

from .models import (
    Block,
    Clipping,
    ClippingKind,
    ClippingSource,
    Location,
    ParseMetrics,
    ParseResult,
    ParseWarning,
)

__all__ = [
    "Block",
    "Clipping",
    "ClippingKind",
    "ClippingSource",
    "Location",
    "ParseMetrics",
    "ParseResult",
    "ParseWarning",
]

"""Runtime options for the clippings pipeline."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
import os
from typing import Any, Mapping

from marginalia.ingestion.languages import AUTO_LANGUAGE, SUPPORTED_LANGUAGES
from marginalia.ingestion.models import ClippingKind

TAG_CASES = ("original", "upper", "lower")
ENV_PREFIX = "MARGINALIA_"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})
_KIND_VALUES = tuple(kind.value for kind in ClippingKind)


def _parse_bool(*, name: str, raw_value: str) -> bool:
    value = raw_value.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean (1/0, true/false, yes/no, on/off)")


def _parse_non_negative_int(*, name: str, raw_value: str) -> int:
    try:
        value = int(raw_value.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer") from exc
    if value < 0:
        raise ValueError(f"{name} must be >= 0")
    return value


def _parse_list(raw_value: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in raw_value.split(",") if item.strip())


@dataclass(frozen=True, slots=True)
class ParseOptions:
    """Validated options controlling parsing, reconciliation and filtering."""

    language: str = AUTO_LANGUAGE
    remove_duplicates: bool = True
    merge_overlapping: bool = True
    merge_notes: bool = True
    extract_tags: bool = False
    tag_case: str = "lower"
    highlights_only: bool = False
    remove_empty: bool = False
    normalize_unicode: bool = True
    clean_content: bool = True
    clean_titles: bool = True
    min_content_length: int = 0
    exclude_types: tuple[str, ...] = ()
    exclude_books: tuple[str, ...] = ()
    only_books: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.language != AUTO_LANGUAGE and self.language not in SUPPORTED_LANGUAGES:
            raise ValueError(
                f"language must be 'auto' or one of {', '.join(SUPPORTED_LANGUAGES)}, got {self.language!r}"
            )
        if self.tag_case not in TAG_CASES:
            raise ValueError(f"tag_case must be one of {', '.join(TAG_CASES)}, got {self.tag_case!r}")
        if self.min_content_length < 0:
            raise ValueError("min_content_length must be >= 0")
        # Lists given by callers are frozen so options stay hashable.
        for name in ("exclude_types", "exclude_books", "only_books"):
            object.__setattr__(self, name, tuple(getattr(self, name)))
        unknown = [kind for kind in self.exclude_types if kind not in _KIND_VALUES]
        if unknown:
            raise ValueError(f"exclude_types has unknown kinds: {', '.join(unknown)}")

    @property
    def auto_language(self) -> bool:
        return self.language == AUTO_LANGUAGE

    def with_overrides(self, **changes: Any) -> "ParseOptions":
        """Return a validated copy with *changes* applied; ``None`` values are ignored."""

        known = {item.name for item in fields(self)}
        unknown = sorted(set(changes) - known)
        if unknown:
            raise ValueError(f"Unknown option(s): {', '.join(unknown)}")
        return replace(self, **{key: value for key, value in changes.items() if value is not None})

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ParseOptions":
        source: Mapping[str, str] = os.environ if environ is None else environ
        values: dict[str, Any] = {}

        language_raw = source.get(f"{ENV_PREFIX}LANGUAGE", "").strip()
        if language_raw:
            values["language"] = language_raw.lower()

        tag_case_raw = source.get(f"{ENV_PREFIX}TAG_CASE", "").strip()
        if tag_case_raw:
            values["tag_case"] = tag_case_raw.lower()

        for name in (
            "remove_duplicates",
            "merge_overlapping",
            "merge_notes",
            "extract_tags",
            "highlights_only",
            "remove_empty",
        ):
            env_name = f"{ENV_PREFIX}{name.upper()}"
            raw_value = source.get(env_name, "").strip()
            if raw_value:
                values[name] = _parse_bool(name=env_name, raw_value=raw_value)

        min_length_raw = source.get(f"{ENV_PREFIX}MIN_CONTENT_LENGTH", "").strip()
        if min_length_raw:
            values["min_content_length"] = _parse_non_negative_int(
                name=f"{ENV_PREFIX}MIN_CONTENT_LENGTH",
                raw_value=min_length_raw,
            )

        for name in ("exclude_types", "exclude_books", "only_books"):
            raw_value = source.get(f"{ENV_PREFIX}{name.upper()}", "")
            if raw_value.strip():
                values[name] = _parse_list(raw_value)

        return cls(**values)

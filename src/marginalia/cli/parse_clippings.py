"""CLI command that parses a clippings export and prints JSON."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from marginalia.config import TAG_CASES, ParseOptions
from marginalia.ingestion.languages import AUTO_LANGUAGE, SUPPORTED_LANGUAGES
from marginalia.ingestion.models import ClippingKind, ParseResult
from marginalia.ingestion.reader import ClippingsReadError, parse_file
from marginalia.ingestion.serialize import record_to_dict

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.INFO if verbose else logging.WARNING,
        stream=sys.stderr,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Parse an e-reader clippings export into JSON records")
    parser.add_argument("--path", required=True, help="Clippings text file")
    parser.add_argument(
        "--language",
        choices=(AUTO_LANGUAGE, *SUPPORTED_LANGUAGES),
        default=None,
        help="Export language (default: auto-detect)",
    )
    parser.add_argument("--no-dedupe", action="store_true", help="Flag exact duplicates instead of removing them")
    parser.add_argument("--no-merge", action="store_true", help="Flag overlapping highlights instead of merging")
    parser.add_argument("--no-link", action="store_true", help="Do not attach notes to highlights")
    parser.add_argument("--extract-tags", action="store_true", help="Turn tag-list notes into highlight tags")
    parser.add_argument("--tag-case", choices=TAG_CASES, default=None)
    parser.add_argument("--highlights-only", action="store_true", help="Emit highlights only")
    parser.add_argument("--remove-empty", action="store_true", help="Drop highlights without content")
    parser.add_argument("--min-length", type=int, default=None, help="Minimum content length")
    parser.add_argument(
        "--exclude-type",
        action="append",
        default=[],
        choices=[kind.value for kind in ClippingKind],
        help="Kind to drop (repeatable)",
    )
    parser.add_argument("--exclude-book", action="append", default=[], help="Title substring to drop (repeatable)")
    parser.add_argument("--only-book", action="append", default=[], help="Title substring to keep (repeatable)")
    parser.add_argument("--env-file", default=None, help="Optional .env file with MARGINALIA_* options")
    parser.add_argument("--verbose", action="store_true", help="Log progress to stderr")
    return parser


def _build_options(args: argparse.Namespace) -> ParseOptions:
    options = ParseOptions.from_env()
    overrides: dict[str, object] = {
        "language": args.language,
        "tag_case": args.tag_case,
        "min_content_length": args.min_length,
    }
    if args.no_dedupe:
        overrides["remove_duplicates"] = False
    if args.no_merge:
        overrides["merge_overlapping"] = False
    if args.no_link:
        overrides["merge_notes"] = False
    if args.extract_tags:
        overrides["extract_tags"] = True
    if args.highlights_only:
        overrides["highlights_only"] = True
    if args.remove_empty:
        overrides["remove_empty"] = True
    if args.exclude_type:
        overrides["exclude_types"] = tuple(args.exclude_type)
    if args.exclude_book:
        overrides["exclude_books"] = tuple(args.exclude_book)
    if args.only_book:
        overrides["only_books"] = tuple(args.only_book)
    return options.with_overrides(**overrides)


def _result_payload(path: Path, result: ParseResult) -> dict[str, object]:
    metrics = result.metrics
    stats = result.stats
    return {
        "path": str(path),
        "metrics": {
            "total_blocks": metrics.total_blocks,
            "parsed_blocks": metrics.parsed_blocks,
            "duplicates_removed": metrics.duplicates_removed,
            "merged_highlights": metrics.merged_highlights,
            "linked_notes": metrics.linked_notes,
            "empty_removed": metrics.empty_removed,
            "notes_consumed": metrics.notes_consumed,
            "tags_extracted": metrics.tags_extracted,
            "suspicious_flagged": metrics.suspicious_flagged,
            "detected_language": metrics.detected_language,
            "file_size": metrics.file_size,
            "parse_time": round(metrics.parse_time, 6),
        },
        "stats": {
            "total": stats.total,
            "highlights": stats.total_highlights,
            "notes": stats.total_notes,
            "bookmarks": stats.total_bookmarks,
            "clips": stats.total_clips,
            "books": stats.total_books,
            "authors": stats.total_authors,
            "words": stats.total_words,
            "drm_limit_reached": stats.drm_limit_reached,
        },
        "clippings": [record_to_dict(clipping) for clipping in result.clippings],
        "warnings": [
            {
                "kind": warning.kind,
                "message": warning.message,
                "block_index": warning.block_index,
                "raw": warning.raw,
            }
            for warning in result.warnings
        ],
    }


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    _configure_logging(args.verbose)
    if args.env_file:
        load_dotenv(args.env_file)
    else:
        load_dotenv()

    source_path = Path(args.path)
    try:
        options = _build_options(args)
        result = parse_file(source_path, options)
    except (ClippingsReadError, ValueError) as exc:
        logger.error("Parsing failed: %s", exc)
        print(json.dumps({"path": str(source_path), "error": str(exc)}, ensure_ascii=True, indent=2))
        return 1

    print(json.dumps(_result_payload(source_path, result), ensure_ascii=True, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

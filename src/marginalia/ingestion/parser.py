"""Top-level entry point: clippings text in, reconciled records out."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import time

from marginalia.config import ParseOptions
from marginalia.ingestion.block_parser import parse_block
from marginalia.ingestion.language_detection import detect_language
from marginalia.ingestion.models import Block, Clipping, ParseMetrics, ParseResult, ParseWarning
from marginalia.ingestion.normalization import prepare_source
from marginalia.ingestion.tokenizer import tokenize
from marginalia.processing.filters import filter_clippings
from marginalia.processing.pipeline import process
from marginalia.processing.stats import calculate_stats

logger = logging.getLogger(__name__)

UNKNOWN_FORMAT = "unknown_format"
RAW_SNIPPET_LENGTH = 200


@dataclass(slots=True)
class PipelineContext:
    """Per-run state; built fresh by every call so concurrent runs never share it."""

    options: ParseOptions
    language: str = "en"
    warnings: list[ParseWarning] = field(default_factory=list)
    metrics: ParseMetrics = field(default_factory=ParseMetrics)
    started_at: float = field(default_factory=time.perf_counter)

    def warn_unparsed(self, block: Block) -> None:
        self.warnings.append(
            ParseWarning(
                kind=UNKNOWN_FORMAT,
                message=f"Could not parse block at index {block.index}",
                block_index=block.index,
                raw=block.raw[:RAW_SNIPPET_LENGTH],
            )
        )
        logger.debug("Unparseable block %d: %r", block.index, block.raw[:80])


def parse_blocks(blocks: list[Block], context: PipelineContext) -> list[Clipping]:
    records: list[Clipping] = []
    for block in blocks:
        record = parse_block(
            block.lines,
            block.index,
            context.language,
            clean_content=context.options.clean_content,
            clean_titles=context.options.clean_titles,
        )
        if record is None:
            context.warn_unparsed(block)
            continue
        records.append(record)
    return records


def parse_string(text: str, options: ParseOptions | None = None) -> ParseResult:
    """Parse a whole clippings export held in memory.

    Never raises for malformed content: unparseable blocks become warnings
    and the counters in ``metrics`` expose how much of the input survived.
    """

    context = PipelineContext(options=options or ParseOptions())
    source = prepare_source(text, unicode_normalization=context.options.normalize_unicode)
    blocks = list(tokenize(source))
    context.metrics.total_blocks = len(blocks)

    if context.options.auto_language:
        context.language = detect_language(blocks)
    else:
        context.language = context.options.language
    context.metrics.detected_language = context.language

    records = parse_blocks(blocks, context)
    context.metrics.parsed_blocks = len(records)

    filtered = filter_clippings(
        records,
        exclude_types=context.options.exclude_types,
        exclude_books=context.options.exclude_books,
        only_books=context.options.only_books,
        min_content_length=context.options.min_content_length,
    )
    processed = process(filtered.clippings, context.options)

    metrics = context.metrics
    metrics.duplicates_removed = processed.duplicates_removed
    metrics.merged_highlights = processed.merged_highlights
    metrics.linked_notes = processed.linked_notes
    metrics.empty_removed = processed.empty_removed
    metrics.tags_extracted = processed.tags_extracted
    metrics.notes_consumed = processed.notes_consumed
    metrics.suspicious_flagged = processed.suspicious_flagged
    metrics.file_size = len(text.encode("utf-8"))
    metrics.parse_time = time.perf_counter() - context.started_at

    logger.info(
        "Parsed %d/%d blocks (%s): %d duplicates, %d merged, %d linked, %d warnings",
        metrics.parsed_blocks,
        metrics.total_blocks,
        metrics.detected_language,
        metrics.duplicates_removed,
        metrics.merged_highlights,
        metrics.linked_notes,
        len(context.warnings),
    )
    return ParseResult(
        clippings=processed.clippings,
        warnings=context.warnings,
        metrics=metrics,
        stats=calculate_stats(processed.clippings),
    )

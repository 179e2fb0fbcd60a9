from __future__ import annotations

from datetime import datetime

from marginalia.ingestion.block_parser import parse_block, parse_metadata_line
from marginalia.ingestion.identity import make_id
from marginalia.ingestion.models import ClippingKind, ClippingSource, Location


def test_parse_block_builds_english_highlight() -> None:
    lines = [
        "The Pragmatic Programmer (Hunt, Andrew)",
        "- Your Highlight on page 42 | Location 1406-1407 | Added on Friday, January 1, 2021 10:30:45 AM",
        "",
        "Care about your craft.",
    ]

    record = parse_block(lines, 7, "en")

    assert record is not None
    assert record.kind is ClippingKind.HIGHLIGHT
    assert record.title == "The Pragmatic Programmer"
    assert record.author == "Hunt, Andrew"
    assert record.title_raw == lines[0]
    assert record.page == 42
    assert record.location == Location(raw="1406-1407", start=1406, end=1407)
    assert record.date == datetime(2021, 1, 1, 10, 30, 45)
    assert record.date_raw == "Friday, January 1, 2021 10:30:45 AM"
    assert record.content == "Care about your craft."
    assert record.block_index == 7
    assert record.word_count == 4
    assert record.char_count == len("Care about your craft.")
    assert record.source is ClippingSource.KINDLE
    assert record.id == make_id("The Pragmatic Programmer", "1406-1407", ClippingKind.HIGHLIGHT, record.content)


def test_parse_block_requires_two_lines_and_a_dash_metadata_line() -> None:
    assert parse_block(["Only a title"], 0, "en") is None
    assert parse_block(["Title", "Your Highlight | Location 4"], 0, "en") is None


def test_parse_block_defaults_unknown_type_to_highlight_and_tracks_sideload() -> None:
    record = parse_block(["notes_draft.pdf", "- Something odd | Location 9"], 3, "en")

    assert record is not None
    assert record.kind is ClippingKind.HIGHLIGHT
    assert record.title == "notes_draft"
    assert record.title_was_cleaned is True
    assert record.author == "Unknown"
    assert record.source is ClippingSource.SIDELOAD
    assert record.is_empty is True
    assert record.content == ""


def test_parse_block_flags_drm_limit_and_cleans_content() -> None:
    limited = parse_block(
        ["Book (Author)", "- Your Highlight | Location 10-11", "<You have reached the clipping limit for this item>"],
        0,
        "en",
    )
    hyphenated = parse_block(["Book (Author)", "- Your Highlight | Location 12", "extraordi-", "nary results ."], 1, "en")

    assert limited is not None and limited.is_limit_reached is True
    assert hyphenated is not None
    assert hyphenated.content == "extraordinary results."
    assert hyphenated.content_raw == "extraordi-\nnary results ."
    assert hyphenated.content_was_cleaned is True


def test_parse_metadata_line_variants() -> None:
    note = parse_metadata_line("- Your Note on page 3 | Location 77 | Added on Friday, January 1, 2021 10:30:45 AM", "en")
    bookmark = parse_metadata_line("- Your Bookmark on page 9", "en")
    reversed_range = parse_metadata_line("- Your Highlight | Location 120-100", "en")

    assert note is not None
    assert note.kind is ClippingKind.NOTE
    assert note.page == 3
    assert note.location == Location(raw="77", start=77)
    assert bookmark is not None
    assert bookmark.kind is ClippingKind.BOOKMARK
    assert bookmark.location == Location()
    assert bookmark.date_raw == ""
    assert reversed_range is not None
    assert reversed_range.location == Location(raw="100-120", start=100, end=120)
    assert parse_metadata_line("Your Note", "en") is None


def test_parse_metadata_line_cjk_locations() -> None:
    japanese = parse_metadata_line("- 位置No. 33-34のハイライト | 追加日 2014年4月16日水曜日 21:35:51", "ja")
    chinese = parse_metadata_line("- 您在第 12 页（位置 #181-183）的标注 | 添加于 2021年1月1日星期五 上午10:30:45", "zh")

    assert japanese is not None
    assert japanese.kind is ClippingKind.HIGHLIGHT
    assert japanese.location == Location(raw="33-34", start=33, end=34)
    assert japanese.date_raw == "2014年4月16日水曜日 21:35:51"
    assert chinese is not None
    assert chinese.location == Location(raw="181-183", start=181, end=183)


def test_numbers_are_not_read_across_field_separators() -> None:
    line = parse_metadata_line("- Your Highlight on page | Location 5", "en")

    assert line is not None
    assert line.page is None
    assert line.location == Location(raw="5", start=5)


def test_parse_block_spanish_and_russian() -> None:
    spanish = parse_block(
        [
            "Cien años de soledad (Spanish Edition) (Gabriel García Márquez)",
            "- La subrayado en la página 5 | posición 70-72 | Añadido el viernes, 1 de enero de 2021 10:30:45",
            "",
            "Muchos años después.",
        ],
        0,
        "es",
    )
    russian = parse_block(
        [
            "Война и мир (Толстой Лев)",
            "- Ваша заметка на странице 8 | позиция 120 | Добавлено: пятница, 1 января 2021 г. 10:30:45",
            "",
            "Важная мысль.",
        ],
        1,
        "ru",
    )

    assert spanish is not None
    assert spanish.title == "Cien años de soledad"
    assert spanish.author == "Gabriel García Márquez"
    assert spanish.title_was_cleaned is True
    assert spanish.page == 5
    assert spanish.location.raw == "70-72"
    assert spanish.date == datetime(2021, 1, 1, 10, 30, 45)
    assert russian is not None
    assert russian.kind is ClippingKind.NOTE
    assert russian.location == Location(raw="120", start=120)
    assert russian.date_raw == "пятница, 1 января 2021 г. 10:30:45"
    assert russian.date == datetime(2021, 1, 1, 10, 30, 45)


def test_unparseable_date_keeps_raw_text() -> None:
    record = parse_block(["Book (Author)", "- Your Highlight | Location 1 | Added on someday soon", "Text."], 0, "en")

    assert record is not None
    assert record.date is None
    assert record.date_raw == "someday soon"

from __future__ import annotations

from marginalia.ingestion.language_detection import detect_language
from marginalia.ingestion.models import Block


def _block(index: int, metadata: str) -> Block:
    lines = ["Some Book (Some Author)", metadata, "", "Content."]
    return Block(index=index, lines=lines, raw="\n".join(lines))


def test_detects_english_metadata() -> None:
    blocks = [
        _block(0, "- Your Highlight on page 4 | Location 55-56 | Added on Monday, March 1, 2021 9:15:00 AM"),
        _block(1, "- Your Note on page 4 | Location 56 | Added on Monday, March 1, 2021 9:16:00 AM"),
    ]

    assert detect_language(blocks) == "en"


def test_detects_spanish_metadata() -> None:
    blocks = [
        _block(0, "- Tu subrayado en la página 12 | posición 180-182 | Añadido el lunes, 1 de marzo de 2021 9:15:00"),
        _block(1, "- La nota en la página 12 | posición 182 | Añadido el lunes, 1 de marzo de 2021 9:16:00"),
    ]

    assert detect_language(blocks) == "es"


def test_detects_german_and_russian_metadata() -> None:
    german = [_block(0, "- Ihre Markierung auf Seite 3 | Position 40-41 | Hinzugefügt am Montag, 1. März 2021 09:15:00")]
    russian = [_block(0, "- Ваше выделение на странице 3 | позиция 40-41 | Добавлено: понедельник, 1 марта 2021 г. 9:15:00")]

    assert detect_language(german) == "de"
    assert detect_language(russian) == "ru"


def test_falls_back_to_english_when_nothing_matches() -> None:
    assert detect_language([]) == "en"
    assert detect_language([_block(0, "- something unrelated")]) == "en"


def test_only_the_first_sample_blocks_vote() -> None:
    english = [_block(index, "- Your Highlight | Added on today") for index in range(2)]
    spanish = [_block(index + 2, "- Tu subrayado | Añadido el hoy") for index in range(5)]

    assert detect_language(english + spanish, sample_size=2) == "en"
    assert detect_language(english + spanish) == "es"

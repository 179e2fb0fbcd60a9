"""Per-language keyword, date-format and calendar-name tables.

Tables are module constants built at import time and never mutated. Date
formats use the token syntax understood by :mod:`marginalia.ingestion.dates`
(``EEEE`` weekday name, ``MMMM`` month name, ``yyyy``/``M``/``d`` numbers,
``H``/``h`` hours, ``mm``/``ss``, ``a`` meridiem, ``'quoted'`` literals).
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

DEFAULT_LANGUAGE = "en"
AUTO_LANGUAGE = "auto"


@dataclass(frozen=True, slots=True)
class LanguagePatterns:
    """Keyword phrases and date formats for one export language."""

    added_on: str
    highlight: str
    note: str
    bookmark: str
    clip: str
    page: str
    location: str
    date_formats: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class CalendarNames:
    """Month, weekday and meridiem names used when parsing dates."""

    months: Mapping[str, int]
    weekdays: tuple[str, ...]
    meridiem: Mapping[str, str]


SUPPORTED_LANGUAGES: tuple[str, ...] = ("en", "es", "pt", "de", "fr", "it", "zh", "ja", "ko", "nl", "ru")

LANGUAGE_MAP: Mapping[str, LanguagePatterns] = MappingProxyType(
    {
        "en": LanguagePatterns(
            added_on="Added on",
            highlight="Your Highlight",
            note="Your Note",
            bookmark="Your Bookmark",
            clip="Your Clip",
            page="page",
            location="Location",
            date_formats=(
                "EEEE, MMMM d, yyyy h:mm:ss a",
                "EEEE, d MMMM yyyy HH:mm:ss",
                "EEEE, MMMM d, yyyy, h:mm a",
            ),
        ),
        # Spanish exports vary the article ("Tu subrayado", "La subrayado").
        "es": LanguagePatterns(
            added_on="Añadido el",
            highlight="subrayado",
            note="nota",
            bookmark="marcador",
            clip="recorte",
            page="página",
            location="posición",
            date_formats=(
                "EEEE, d 'de' MMMM 'de' yyyy H:mm:ss",
                "EEEE d 'de' MMMM 'de' yyyy H:mm:ss",
            ),
        ),
        "pt": LanguagePatterns(
            added_on="Adicionado em",
            highlight="Seu destaque",
            note="Sua nota",
            bookmark="Seu marcador",
            clip="Seu recorte",
            page="página",
            location="posição",
            date_formats=("EEEE, d 'de' MMMM 'de' yyyy HH:mm:ss",),
        ),
        "de": LanguagePatterns(
            added_on="Hinzugefügt am",
            highlight="Ihre Markierung",
            note="Ihre Notiz",
            bookmark="Ihr Lesezeichen",
            clip="Ihr Ausschnitt",
            page="Seite",
            location="Position",
            date_formats=(
                "EEEE, d. MMMM yyyy HH:mm:ss",
                "EEEE, d. MMMM yyyy 'um' HH:mm:ss",
            ),
        ),
        "fr": LanguagePatterns(
            added_on="Ajouté le",
            highlight="Votre surlignage",
            note="Votre note",
            bookmark="Votre signet",
            clip="Votre extrait",
            page="page",
            location="emplacement",
            date_formats=(
                "EEEE d MMMM yyyy HH:mm:ss",
                "EEEE d MMMM yyyy 'à' HH:mm:ss",
            ),
        ),
        "it": LanguagePatterns(
            added_on="Aggiunto il",
            highlight="La tua evidenziazione",
            note="La tua nota",
            bookmark="Il tuo segnalibro",
            clip="Il tuo ritaglio",
            page="pagina",
            location="posizione",
            date_formats=("EEEE d MMMM yyyy HH:mm:ss",),
        ),
        "zh": LanguagePatterns(
            added_on="添加于",
            highlight="您的标注",
            note="您的笔记",
            bookmark="您的书签",
            clip="您的剪贴",
            page="页",
            location="位置",
            date_formats=(
                "yyyy年M月d日EEEE ahh:mm:ss",
                "yyyy年M月d日EEEE H:mm:ss",
            ),
        ),
        "ja": LanguagePatterns(
            added_on="追加日",
            highlight="ハイライト",
            note="メモ",
            bookmark="ブックマーク",
            clip="クリップ",
            page="ページ",
            location="位置",
            date_formats=("yyyy年M月d日EEEE H:mm:ss",),
        ),
        "ko": LanguagePatterns(
            added_on="추가됨",
            highlight="하이라이트",
            note="메모",
            bookmark="북마크",
            clip="클립",
            page="페이지",
            location="위치",
            date_formats=("yyyy년 M월 d일 EEEE a h:mm:ss",),
        ),
        "nl": LanguagePatterns(
            added_on="Toegevoegd op",
            highlight="Uw markering",
            note="Uw notitie",
            bookmark="Uw bladwijzer",
            clip="Uw knipsel",
            page="pagina",
            location="locatie",
            date_formats=("EEEE d MMMM yyyy HH:mm:ss",),
        ),
        "ru": LanguagePatterns(
            added_on="Добавлено",
            highlight="Ваше выделение",
            note="Ваша заметка",
            bookmark="Ваша закладка",
            clip="Ваша вырезка",
            page="страница",
            location="позиция",
            date_formats=(
                "EEEE, d MMMM yyyy 'г.' H:mm:ss",
                "EEEE, d MMMM yyyy 'г. в' H:mm:ss",
            ),
        ),
    }
)


def _month_table(*names: str | tuple[str, ...]) -> Mapping[str, int]:
    table: dict[str, int] = {}
    for number, entry in enumerate(names, start=1):
        aliases = entry if isinstance(entry, tuple) else (entry,)
        for alias in aliases:
            table[alias.lower()] = number
    return MappingProxyType(table)


_NO_MERIDIEM: Mapping[str, str] = MappingProxyType({})
_LATIN_MERIDIEM: Mapping[str, str] = MappingProxyType({"am": "am", "pm": "pm", "a.m.": "am", "p.m.": "pm"})

CALENDAR_NAMES: Mapping[str, CalendarNames] = MappingProxyType(
    {
        "en": CalendarNames(
            months=_month_table(
                "January", "February", "March", "April", "May", "June",
                "July", "August", "September", "October", "November", "December",
            ),
            weekdays=("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"),
            meridiem=_LATIN_MERIDIEM,
        ),
        "es": CalendarNames(
            months=_month_table(
                "enero", "febrero", "marzo", "abril", "mayo", "junio",
                "julio", "agosto", ("septiembre", "setiembre"), "octubre", "noviembre", "diciembre",
            ),
            weekdays=("lunes", "martes", "miércoles", "jueves", "viernes", "sábado", "domingo"),
            meridiem=_NO_MERIDIEM,
        ),
        "pt": CalendarNames(
            months=_month_table(
                "janeiro", "fevereiro", "março", "abril", "maio", "junho",
                "julho", "agosto", "setembro", "outubro", "novembro", "dezembro",
            ),
            weekdays=(
                "segunda-feira", "terça-feira", "quarta-feira", "quinta-feira",
                "sexta-feira", "sábado", "domingo",
            ),
            meridiem=_NO_MERIDIEM,
        ),
        "de": CalendarNames(
            months=_month_table(
                "Januar", "Februar", "März", "April", "Mai", "Juni",
                "Juli", "August", "September", "Oktober", "November", "Dezember",
            ),
            weekdays=("Montag", "Dienstag", "Mittwoch", "Donnerstag", "Freitag", "Samstag", "Sonntag"),
            meridiem=_NO_MERIDIEM,
        ),
        "fr": CalendarNames(
            months=_month_table(
                "janvier", "février", "mars", "avril", "mai", "juin",
                "juillet", "août", "septembre", "octobre", "novembre", "décembre",
            ),
            weekdays=("lundi", "mardi", "mercredi", "jeudi", "vendredi", "samedi", "dimanche"),
            meridiem=_NO_MERIDIEM,
        ),
        "it": CalendarNames(
            months=_month_table(
                "gennaio", "febbraio", "marzo", "aprile", "maggio", "giugno",
                "luglio", "agosto", "settembre", "ottobre", "novembre", "dicembre",
            ),
            weekdays=("lunedì", "martedì", "mercoledì", "giovedì", "venerdì", "sabato", "domenica"),
            meridiem=_NO_MERIDIEM,
        ),
        "zh": CalendarNames(
            months=_month_table(),
            weekdays=("星期一", "星期二", "星期三", "星期四", "星期五", "星期六", "星期日"),
            meridiem=MappingProxyType({"上午": "am", "下午": "pm"}),
        ),
        "ja": CalendarNames(
            months=_month_table(),
            weekdays=("月曜日", "火曜日", "水曜日", "木曜日", "金曜日", "土曜日", "日曜日"),
            meridiem=MappingProxyType({"午前": "am", "午後": "pm"}),
        ),
        "ko": CalendarNames(
            months=_month_table(),
            weekdays=("월요일", "화요일", "수요일", "목요일", "금요일", "토요일", "일요일"),
            meridiem=MappingProxyType({"오전": "am", "오후": "pm"}),
        ),
        "nl": CalendarNames(
            months=_month_table(
                "januari", "februari", "maart", "april", "mei", "juni",
                "juli", "augustus", "september", "oktober", "november", "december",
            ),
            weekdays=("maandag", "dinsdag", "woensdag", "donderdag", "vrijdag", "zaterdag", "zondag"),
            meridiem=_NO_MERIDIEM,
        ),
        # Russian exports use the genitive month form; nominative is accepted too.
        "ru": CalendarNames(
            months=_month_table(
                ("января", "январь"), ("февраля", "февраль"), ("марта", "март"),
                ("апреля", "апрель"), ("мая", "май"), ("июня", "июнь"),
                ("июля", "июль"), ("августа", "август"), ("сентября", "сентябрь"),
                ("октября", "октябрь"), ("ноября", "ноябрь"), ("декабря", "декабрь"),
            ),
            weekdays=("понедельник", "вторник", "среда", "четверг", "пятница", "суббота", "воскресенье"),
            meridiem=_NO_MERIDIEM,
        ),
    }
)

# Placeholder texts substituted for content once a publisher's clipping quota is hit.
DRM_LIMIT_MESSAGES: tuple[str, ...] = (
    "You have reached the clipping limit",
    "<You have reached the clipping limit for this item>",
    "Has alcanzado el límite de recortes",
    "Você atingiu o limite de recortes",
    "Sie haben das Markierungslimit erreicht",
    "Vous avez atteint la limite",
    "您已达到本书的剪贴限制",
    "このアイテムのクリップ上限に達しました",
)

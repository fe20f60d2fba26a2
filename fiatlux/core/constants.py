from __future__ import annotations

from typing import Final

SCHEDULE_KEYWORDS: Final[tuple[str, ...]] = (
    "графік",
    "черга",
    "група",
    "відключення",
    "вимкнення",
    "знеструмлення",
)

MONTHS: Final[dict[str, int]] = {
    "січня": 1,
    "січень": 1,
    "лютого": 2,
    "лютий": 2,
    "березня": 3,
    "березень": 3,
    "квітня": 4,
    "квітень": 4,
    "травня": 5,
    "травень": 5,
    "червня": 6,
    "червень": 6,
    "липня": 7,
    "липень": 7,
    "серпня": 8,
    "серпень": 8,
    "вересня": 9,
    "вересень": 9,
    "жовтня": 10,
    "жовтень": 10,
    "листопада": 11,
    "листопад": 11,
    "грудня": 12,
    "грудень": 12,
}

# Longest first so "графік на" wins over the bare "на".
DATE_MARKERS: Final[tuple[str, ...]] = (
    "станом на",
    "графік на",
    "на",
)

HOURS_MARKER: Final[str] = "години відсутності електропостачання"

FOOTER_MARKERS: Final[tuple[str, ...]] = (
    "наступне оновлення",
    "інформація оновлена",
    "оновлено",
    "оновлення о",
    "оновлення від",
)

TODAY_WORD: Final[str] = "сьогодні"
TOMORROW_WORD: Final[str] = "завтра"

MARKER_LOOKBACK_LINES: Final[int] = 3
HEADER_LINES: Final[int] = 3

MAX_SLOT_HOUR: Final[int] = 24
MAX_SLOT_MINUTE: Final[int] = 59

LEGACY_QUEUE_RANGE: Final[range] = range(1, 7)

QUEUE_DESCRIPTION: Final[str] = "Черга {key}"

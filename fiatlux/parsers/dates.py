from __future__ import annotations

import logging
import re
from datetime import date, datetime, timedelta

from fiatlux.core.constants import (
    DATE_MARKERS,
    FOOTER_MARKERS,
    HEADER_LINES,
    HOURS_MARKER,
    MARKER_LOOKBACK_LINES,
    MONTHS,
    TODAY_WORD,
    TOMORROW_WORD,
)
from fiatlux.core.dates import build_date, resolve_year

logger = logging.getLogger("fiatlux.parser.dates")

_MONTH_ALTERNATION = "|".join(sorted(MONTHS, key=len, reverse=True))
_MARKER_ALTERNATION = "|".join(re.escape(marker).replace(r"\ ", r"\s+") for marker in DATE_MARKERS)

_MONTH_DATE_RE = re.compile(
    rf"(?<!\d)(\d{{1,2}})\s+({_MONTH_ALTERNATION})(?!\w)",
    flags=re.IGNORECASE,
)
# A trailing digit means a longer number. A ":" followed by more text on the same
# line is a queue key ("1.2: 10:00-12:00"); a ":" that ends the line is a heading.
_NOT_A_DATE_TAIL = r"(?!\d|:(?![ \t]*(?:\r?\n|$)))"
_NUMERIC_DATE_RE = re.compile(rf"(?<![\d.])(\d{{1,2}})\.(\d{{1,2}})(?:\.(\d{{4}}))?{_NOT_A_DATE_TAIL}")
_MARKED_DATE_RE = re.compile(
    rf"(?<!\w)(?:{_MARKER_ALTERNATION})\s+"
    rf"(?:(\d{{1,2}})\s+({_MONTH_ALTERNATION})(?!\w)"
    rf"|(\d{{1,2}})\.(\d{{1,2}})(?:\.(\d{{4}}))?{_NOT_A_DATE_TAIL})",
    flags=re.IGNORECASE,
)
# Footers start their own line ("Наступне оновлення о 18:00").
_FOOTER_LINE_RE = re.compile(
    r"^\s*(?:" + "|".join(re.escape(marker).replace(r"\ ", r"\s+") for marker in FOOTER_MARKERS) + ")",
    flags=re.IGNORECASE,
)
_TODAY_RE = re.compile(rf"(?<!\w){TODAY_WORD}(?!\w)", flags=re.IGNORECASE)
_TOMORROW_RE = re.compile(rf"(?<!\w){TOMORROW_WORD}(?!\w)", flags=re.IGNORECASE)


def _month_date(day_raw: str, month_name: str, now: datetime) -> date | None:
    month = MONTHS[month_name.lower()]
    return build_date(resolve_year(month, now), month, int(day_raw))


def _numeric_date(day_raw: str, month_raw: str, year_raw: str | None, now: datetime) -> date | None:
    month = int(month_raw)
    year = int(year_raw) if year_raw else resolve_year(month, now)
    return build_date(year, month, int(day_raw))


def find_month_date(text: str, now: datetime) -> date | None:
    match = _MONTH_DATE_RE.search(text)
    if match is None:
        return None
    return _month_date(match.group(1), match.group(2), now)


def find_numeric_date(text: str, now: datetime) -> date | None:
    match = _NUMERIC_DATE_RE.search(text)
    if match is None:
        return None
    return _numeric_date(match.group(1), match.group(2), match.group(3), now)


def strip_footer(text: str) -> str:
    """Drop everything from the first footer line onwards.

    The headline (first non-empty line) is never treated as a footer, so
    "Оновлено графік на 16 лютого" keeps its date.
    """
    lines = text.splitlines(keepends=True)
    seen_headline = False
    for index, line in enumerate(lines):
        if not line.strip():
            continue
        if not seen_headline:
            seen_headline = True
            continue
        if _FOOTER_LINE_RE.match(line):
            return "".join(lines[:index])
    return text


def _from_hours_marker(lines: list[str], now: datetime) -> date | None:
    for index, line in enumerate(lines):
        if HOURS_MARKER not in line.lower():
            continue
        preceding = lines[max(index - MARKER_LOOKBACK_LINES, 0) : index]
        return find_month_date("\n".join(preceding), now)
    return None


def _from_header_markers(lines: list[str], now: datetime) -> date | None:
    header = [line for line in lines if line.strip()][:HEADER_LINES]
    for line in header:
        for match in _MARKED_DATE_RE.finditer(line):
            if match.group(1):
                resolved = _month_date(match.group(1), match.group(2), now)
            else:
                resolved = _numeric_date(match.group(3), match.group(4), match.group(5), now)
            if resolved is not None:
                return resolved
    return None


def _from_body(text: str, now: datetime) -> date | None:
    body = strip_footer(text)
    return find_month_date(body, now) or find_numeric_date(body, now)


def _from_relative_words(text: str, now: datetime) -> date | None:
    if _TODAY_RE.search(text):
        return now.date()
    if _TOMORROW_RE.search(text):
        return now.date() + timedelta(days=1)
    return None


def resolve_date(text: str, now: datetime) -> date | None:
    """Find the calendar day an announcement talks about.

    Strategies run in order and the first one that yields a valid date wins:
    the lines right above the "hours of absence" marker, a marker word in the
    header ("на", "графік на", "станом на"), any date in the body with the
    update footer removed, the words "сьогодні"/"завтра", and finally the
    reference day itself.
    """
    lines = text.splitlines()

    for strategy in (_from_hours_marker, _from_header_markers):
        resolved = strategy(lines, now)
        if resolved is not None:
            logger.debug("Resolved date %s via %s", resolved, strategy.__name__)
            return resolved

    for strategy in (_from_body, _from_relative_words):
        resolved = strategy(text, now)
        if resolved is not None:
            logger.debug("Resolved date %s via %s", resolved, strategy.__name__)
            return resolved

    logger.debug("No date in message text, falling back to %s", now.date())
    return now.date()

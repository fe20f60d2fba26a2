from __future__ import annotations

from datetime import date, datetime, time, timedelta, tzinfo
from zoneinfo import ZoneInfo

from fiatlux.core.models import TimeSlot

RELEVANT_WINDOW_DAYS = 2

_END_OF_DAY = time(23, 59, 59)


def local_now(timezone_name: str) -> datetime:
    return datetime.now(tz=ZoneInfo(timezone_name))


def today_of(now: datetime) -> date:
    return now.date()


def tomorrow_of(now: datetime) -> date:
    return now.date() + timedelta(days=1)


def is_in_relevant_window(day: date, now: datetime) -> bool:
    """True for today and tomorrow, relative to the calendar day of ``now``."""
    today = today_of(now)
    return today <= day < today + timedelta(days=RELEVANT_WINDOW_DAYS)


def resolve_year(month: int, now: datetime) -> int:
    """Pick the year for a day/month pair that came without one.

    A December announcement about January points at next year, and a January
    reference to December points at the previous one.
    """
    if now.month == 12 and month == 1:
        return now.year + 1
    if now.month == 1 and month == 12:
        return now.year - 1
    return now.year


def build_date(year: int, month: int, day: int) -> date | None:
    if not 1 <= month <= 12 or not 1 <= day <= 31:
        return None
    try:
        return date(year, month, day)
    except ValueError:
        return None


def parse_clock(value: str) -> tuple[int, int]:
    hours, minutes = value.split(":", 1)
    return int(hours), int(minutes)


def slot_bounds(day: date, slot: TimeSlot, tz: tzinfo | None = None) -> tuple[datetime, datetime]:
    """Resolve a slot on ``day`` to concrete instants, never leaving ``day``.

    An end of ``00:00`` (or ``24:00``) closes the slot at 23:59:59 of the same
    day rather than opening a period on the next one. A start of ``24:00``
    becomes 23:59:59 as well, so such a slot is empty. A slot that runs past
    midnight (``22:00-02:00``) is cut at 23:59:59; the hours after midnight
    belong to the next day's announcement. ``start <= end`` always holds.
    """
    start_hour, start_minute = parse_clock(slot.start)
    end_hour, end_minute = parse_clock(slot.end)
    end_of_day = datetime.combine(day, _END_OF_DAY, tzinfo=tz)

    if start_hour >= 24:
        start = end_of_day
    else:
        start = datetime.combine(day, time(start_hour, start_minute), tzinfo=tz)

    if (end_hour, end_minute) == (0, 0) or end_hour >= 24:
        end = end_of_day
    else:
        end = datetime.combine(day, time(end_hour, end_minute), tzinfo=tz)

    if end < start:
        end = end_of_day

    return start, end

from __future__ import annotations

import re

from fiatlux.core.constants import LEGACY_QUEUE_RANGE, MAX_SLOT_HOUR, MAX_SLOT_MINUTE, QUEUE_DESCRIPTION
from fiatlux.core.models import QueueInfo, TimeSlot

# "08:00-12:00", "8:00 - 12:00", "08:00 – 12:00", "08:00—12:00"
_TIME_RANGE_RE = re.compile(r"(\d{1,2}):(\d{2})\s*[-–—]\s*(\d{1,2}):(\d{2})")
# "1.1: 00:00 – 02:00, 07:00 – 09:30", optionally after a bullet or "Черга".
# Keys only count at the start of a line so "на 16.02:" in a heading is not one.
_SUB_QUEUE_RE = re.compile(
    r"^[^\w\n]*(?:черга\s+)?(\d+)\.(\d+):[ \t]*(.+)$",
    flags=re.IGNORECASE | re.MULTILINE,
)

_LEGACY_SUB_QUEUE_RE = re.compile(
    r"^[^\w\n]*(?:черга\s+)?(\d+)\.\d+:",
    flags=re.IGNORECASE | re.MULTILINE,
)
_LEGACY_QUEUE_RE = re.compile(
    r"(?:черг[аи]|груп[аи])\s*[№#]?\s*(\d+)|(\d+)\s*(?:черг[аи]|груп[аи])",
    flags=re.IGNORECASE,
)
_LEGACY_LIST_RE = re.compile(r"(\d+)-[аяі]")
_LEGACY_TIME_RANGE_RE = re.compile(
    r"(?:з\s+)?(\d{1,2}):(\d{2})\s*[-–—]\s*(\d{1,2}):(\d{2})"
    r"|(?:з\s+)?(\d{1,2}):(\d{2})\s+до\s+(\d{1,2}):(\d{2})",
    flags=re.IGNORECASE,
)


def _valid_clock(hour: str, minute: str) -> bool:
    if int(minute) > MAX_SLOT_MINUTE:
        return False
    if int(hour) == MAX_SLOT_HOUR:
        return int(minute) == 0
    return int(hour) < MAX_SLOT_HOUR


def _make_slot(start_hour: str, start_minute: str, end_hour: str, end_minute: str) -> TimeSlot | None:
    if not (_valid_clock(start_hour, start_minute) and _valid_clock(end_hour, end_minute)):
        return None
    return TimeSlot(
        start=f"{int(start_hour):02d}:{start_minute}",
        end=f"{int(end_hour):02d}:{end_minute}",
    )


def extract_time_slots(line: str) -> list[TimeSlot]:
    """Extract every ``HH:MM-HH:MM`` range from a line, left to right.

    Ranges with an impossible clock value are skipped: minutes stop at 59 and
    nothing goes past ``24:00``. ``00:00`` and ``24:00`` are kept
    verbatim; ``fiatlux.core.dates.slot_bounds`` decides what they mean on a
    given day.
    """
    slots: list[TimeSlot] = []
    for match in _TIME_RANGE_RE.finditer(line):
        slot = _make_slot(*match.groups())
        if slot is not None:
            slots.append(slot)
    return slots


def extract_queues(text: str) -> list[QueueInfo]:
    by_key: dict[str, tuple[int, int, list[TimeSlot]]] = {}

    for match in _SUB_QUEUE_RE.finditer(text):
        main, sub = int(match.group(1)), int(match.group(2))
        key = f"{main}.{sub}"
        slots = extract_time_slots(match.group(3))
        # Lines without ranges ("не вимикається") never displace a real entry.
        if slots:
            by_key[key] = (main, sub, slots)

    queues = [
        QueueInfo(
            queue_number=main + sub / 10,
            time_slots=tuple(slots),
            description=QUEUE_DESCRIPTION.format(key=key),
        )
        for key, (main, sub, slots) in by_key.items()
    ]
    return sorted(queues, key=lambda queue: queue.queue_number)


def extract_legacy_queue_numbers(text: str) -> list[int]:
    numbers: set[int] = set()

    for match in _LEGACY_SUB_QUEUE_RE.finditer(text):
        numbers.add(int(match.group(1)))
    for match in _LEGACY_QUEUE_RE.finditer(text):
        numbers.add(int(match.group(1) or match.group(2)))
    for match in _LEGACY_LIST_RE.finditer(text):
        numbers.add(int(match.group(1)))

    return sorted(number for number in numbers if number in LEGACY_QUEUE_RANGE)


def extract_legacy_time_slots(text: str) -> list[TimeSlot]:
    slots: list[TimeSlot] = []
    for match in _LEGACY_TIME_RANGE_RE.finditer(text):
        groups = match.groups()
        parts = groups[:4] if groups[0] is not None else groups[4:]
        slot = _make_slot(*parts)
        if slot is not None:
            slots.append(slot)
    return slots


def extract_legacy_queues(text: str) -> list[QueueInfo]:
    """Older announcement format: whole queues sharing one list of ranges."""
    slots = tuple(extract_legacy_time_slots(text))
    return [
        QueueInfo(
            queue_number=float(number),
            time_slots=slots,
            description=QUEUE_DESCRIPTION.format(key=number),
        )
        for number in extract_legacy_queue_numbers(text)
    ]

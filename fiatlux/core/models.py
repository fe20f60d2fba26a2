from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum


class ScheduleType(str, Enum):
    CURRENT = "current"
    FUTURE = "future"


@dataclass(frozen=True)
class ChannelMessage:
    id: int
    text: str | None
    timestamp_seconds: int
    chat_id: str = ""


@dataclass(frozen=True)
class TimeSlot:
    start: str
    end: str


@dataclass(frozen=True)
class QueueInfo:
    queue_number: float
    time_slots: tuple[TimeSlot, ...]
    description: str = ""


@dataclass
class Schedule:
    """Outage schedule for one calendar day recovered from one announcement.

    Every field except ``archived`` is treated as read-only once the parser
    builds the record; the store only ever flips ``archived`` to ``True``.
    """

    id: str
    type: ScheduleType
    date: date
    queues: tuple[QueueInfo, ...]
    raw_text: str
    published_at: datetime
    message_id: int
    channel_id: str
    archived: bool = field(default=False, compare=False)


@dataclass(frozen=True)
class ScheduleSnapshot:
    current: Schedule | None
    future: Schedule | None

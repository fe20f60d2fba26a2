from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo

from fiatlux.core.models import ChannelMessage, QueueInfo, Schedule, ScheduleType, TimeSlot

KYIV = ZoneInfo("Europe/Kyiv")

SAMPLE_TEXT = "Графік на 15 лютого\n1.1: 00:00 – 02:00, 07:00 – 09:30\n1.2: 10:00 – 12:00"


def kyiv(year: int, month: int, day: int, hour: int = 12, minute: int = 0) -> datetime:
    return datetime(year, month, day, hour, minute, tzinfo=KYIV)


class FixedClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def channel_message(
    message_id: int,
    text: str | None,
    published: datetime,
    chat_id: str = "cherkasyoblenergo",
) -> ChannelMessage:
    return ChannelMessage(
        id=message_id,
        text=text,
        timestamp_seconds=int(published.timestamp()),
        chat_id=chat_id,
    )


def make_schedule(
    message_id: int,
    day: date,
    published: datetime,
    schedule_type: ScheduleType = ScheduleType.CURRENT,
    slots: tuple[TimeSlot, ...] = (TimeSlot("00:00", "02:00"),),
) -> Schedule:
    return Schedule(
        id=f"{message_id}-{day.isoformat()}",
        type=schedule_type,
        date=day,
        queues=(QueueInfo(queue_number=1.1, time_slots=slots, description="Черга 1.1"),),
        raw_text=f"message {message_id}",
        published_at=published,
        message_id=message_id,
        channel_id="cherkasyoblenergo",
    )

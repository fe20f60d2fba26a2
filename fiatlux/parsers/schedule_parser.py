from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, datetime
from zoneinfo import ZoneInfo

from fiatlux.core.constants import SCHEDULE_KEYWORDS
from fiatlux.core.dates import is_in_relevant_window, today_of, tomorrow_of
from fiatlux.core.models import ChannelMessage, QueueInfo, Schedule, ScheduleType
from fiatlux.parsers.dates import resolve_date
from fiatlux.parsers.queues import extract_legacy_queues, extract_queues

logger = logging.getLogger("fiatlux.parser")


def is_schedule_message(text: str | None) -> bool:
    if not text:
        return False
    lowered = text.lower()
    return any(keyword in lowered for keyword in SCHEDULE_KEYWORDS)


def determine_schedule_type(day: date, now: datetime) -> ScheduleType:
    if day == today_of(now):
        return ScheduleType.CURRENT
    if day == tomorrow_of(now):
        return ScheduleType.FUTURE
    # Anything outside today/tomorrow is reported as current.
    return ScheduleType.CURRENT


def is_relevant_date(day: date, now: datetime) -> bool:
    return is_in_relevant_window(day, now)


class ChannelScheduleParser:
    """Parses outage announcements posted to the utility company channel.

    The parser keeps no state between calls; ``timezone_name`` only decides
    what "now" means when the caller does not pass it and in which zone
    message timestamps are expressed.
    """

    def __init__(self, timezone_name: str = "Europe/Kyiv", *, legacy_queues: bool = False) -> None:
        self.timezone_name = timezone_name
        self.legacy_queues = legacy_queues
        self._tz = ZoneInfo(timezone_name)

    def parse_message(
        self,
        message: ChannelMessage,
        *,
        strict: bool = True,
        now: datetime | None = None,
    ) -> Schedule | None:
        text = message.text
        if not is_schedule_message(text):
            return None

        reference = now or datetime.now(tz=self._tz)
        try:
            return self._build_schedule(message, text, strict=strict, now=reference)
        except Exception:
            logger.exception("Error parsing message %s", message.id)
            return None

    def parse_messages(
        self,
        messages: Iterable[ChannelMessage],
        *,
        strict: bool = True,
        now: datetime | None = None,
    ) -> list[Schedule]:
        schedules: list[Schedule] = []
        for message in messages:
            schedule = self.parse_message(message, strict=strict, now=now)
            if schedule is not None:
                schedules.append(schedule)
        return schedules

    def _extract_queues(self, text: str) -> list[QueueInfo]:
        queues = extract_queues(text)
        if not queues and self.legacy_queues:
            queues = extract_legacy_queues(text)
        return queues

    def _build_schedule(
        self,
        message: ChannelMessage,
        text: str,
        *,
        strict: bool,
        now: datetime,
    ) -> Schedule | None:
        day = resolve_date(text, now)
        if day is None:
            logger.warning(
                "Could not extract date from message %s. Text starts with: %r",
                message.id,
                text[:50],
            )
            return None

        queues = self._extract_queues(text)
        if not queues:
            logger.debug("Skipping message %s - no queues found in text", message.id)
            return None

        if not any(queue.time_slots for queue in queues):
            logger.debug(
                "Skipping message %s - no time slots found in any of the %d queues",
                message.id,
                len(queues),
            )
            return None

        if strict and not is_relevant_date(day, now):
            logger.debug("Skipping schedule for %s - not today or tomorrow", day.isoformat())
            return None

        schedule_type = determine_schedule_type(day, now)
        schedule = Schedule(
            id=f"{message.id}-{day.isoformat()}",
            type=schedule_type,
            date=day,
            queues=tuple(queues),
            raw_text=text,
            published_at=datetime.fromtimestamp(message.timestamp_seconds, tz=self._tz),
            message_id=message.id,
            channel_id=message.chat_id or "",
        )
        logger.info(
            "Parsed schedule: %s for %s with %d queues",
            schedule_type.value,
            day.isoformat(),
            len(queues),
        )
        return schedule

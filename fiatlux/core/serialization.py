from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from fiatlux.core.dates import slot_bounds
from fiatlux.core.models import QueueInfo, Schedule, ScheduleSnapshot


def _queue_payload(schedule: Schedule, queue: QueueInfo) -> dict[str, Any]:
    tz = schedule.published_at.tzinfo
    slots = []
    for slot in queue.time_slots:
        starts_at, ends_at = slot_bounds(schedule.date, slot, tz)
        slots.append(
            {
                "start": slot.start,
                "end": slot.end,
                "startsAt": starts_at.isoformat(),
                "endsAt": ends_at.isoformat(),
            }
        )
    return {
        "queueNumber": queue.queue_number,
        "timeSlots": slots,
        "description": queue.description,
    }


def to_schedule_payload(schedule: Schedule | None) -> dict[str, Any] | None:
    if schedule is None:
        return None

    return {
        "id": schedule.id,
        "type": schedule.type.value,
        "date": schedule.date.isoformat(),
        "queues": [_queue_payload(schedule, queue) for queue in schedule.queues],
        "rawText": schedule.raw_text,
        "publishedAt": schedule.published_at.isoformat(),
        "messageId": schedule.message_id,
        "channelId": schedule.channel_id,
        "archived": schedule.archived,
    }


def to_snapshot_payload(snapshot: ScheduleSnapshot) -> dict[str, Any]:
    return {
        "current": to_schedule_payload(snapshot.current),
        "future": to_schedule_payload(snapshot.future),
    }


def envelope(data: Any = None, *, success: bool = True, error: str | None = None) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "success": success,
        "data": data,
        "timestamp": datetime.now(tz=timezone.utc).isoformat(),
    }
    if error is not None:
        payload["error"] = error
    return payload

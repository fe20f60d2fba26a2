from __future__ import annotations

from datetime import date, datetime

from fiatlux.core.dates import slot_bounds
from fiatlux.core.models import ScheduleSnapshot, ScheduleType, TimeSlot
from fiatlux.core.serialization import envelope, to_schedule_payload, to_snapshot_payload
from tests.helpers import KYIV, kyiv, make_schedule


def test_schedule_payload_shape() -> None:
    schedule = make_schedule(
        4242,
        date(2026, 2, 15),
        kyiv(2026, 2, 15, 7, 55),
        slots=(TimeSlot("00:00", "02:00"), TimeSlot("22:00", "00:00")),
    )

    payload = to_schedule_payload(schedule)

    assert payload["id"] == "4242-2026-02-15"
    assert payload["type"] == "current"
    assert payload["date"] == "2026-02-15"
    assert payload["publishedAt"] == "2026-02-15T07:55:00+02:00"
    assert payload["archived"] is False
    queue = payload["queues"][0]
    assert queue["queueNumber"] == 1.1
    assert queue["description"] == "Черга 1.1"
    assert queue["timeSlots"][0] == {
        "start": "00:00",
        "end": "02:00",
        "startsAt": "2026-02-15T00:00:00+02:00",
        "endsAt": "2026-02-15T02:00:00+02:00",
    }
    assert queue["timeSlots"][1]["end"] == "00:00"
    assert queue["timeSlots"][1]["endsAt"] == "2026-02-15T23:59:59+02:00"


def test_snapshot_payload_allows_missing_days() -> None:
    future = make_schedule(7, date(2026, 2, 16), kyiv(2026, 2, 15, 20), ScheduleType.FUTURE)

    payload = to_snapshot_payload(ScheduleSnapshot(current=None, future=future))

    assert payload["current"] is None
    assert payload["future"]["type"] == "future"


def test_envelope() -> None:
    body = envelope({"removed": 0})

    assert body["success"] is True
    assert body["data"] == {"removed": 0}
    assert "error" not in body
    assert envelope(None, success=False, error="boom")["error"] == "boom"


def test_midnight_end_closes_the_same_day() -> None:
    day = date(2026, 2, 15)

    for end in ("00:00", "24:00"):
        start, finish = slot_bounds(day, TimeSlot("20:00", end), KYIV)
        assert start == datetime(2026, 2, 15, 20, 0, tzinfo=KYIV)
        assert finish == datetime(2026, 2, 15, 23, 59, 59, tzinfo=KYIV)


def test_regular_slot_bounds() -> None:
    start, finish = slot_bounds(date(2026, 2, 15), TimeSlot("07:00", "09:30"))

    assert start == datetime(2026, 2, 15, 7, 0)
    assert finish == datetime(2026, 2, 15, 9, 30)


def test_slot_crossing_midnight_is_cut_at_end_of_day() -> None:
    start, finish = slot_bounds(date(2026, 2, 15), TimeSlot("22:00", "02:00"), KYIV)

    assert start == datetime(2026, 2, 15, 22, 0, tzinfo=KYIV)
    assert finish == datetime(2026, 2, 15, 23, 59, 59, tzinfo=KYIV)


def test_slot_starting_at_24_is_empty() -> None:
    start, finish = slot_bounds(date(2026, 2, 15), TimeSlot("24:00", "24:00"), KYIV)

    assert start == finish == datetime(2026, 2, 15, 23, 59, 59, tzinfo=KYIV)


def test_crossing_slot_payload_stays_on_its_day() -> None:
    schedule = make_schedule(9, date(2026, 2, 15), kyiv(2026, 2, 15, 7), slots=(TimeSlot("23:00", "01:30"),))

    slot = to_schedule_payload(schedule)["queues"][0]["timeSlots"][0]

    assert slot["end"] == "01:30"
    assert slot["startsAt"] == "2026-02-15T23:00:00+02:00"
    assert slot["endsAt"] == "2026-02-15T23:59:59+02:00"

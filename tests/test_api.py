from __future__ import annotations

import httpx
import pytest

from fiatlux.config import Settings
from fiatlux.main import create_app
from tests.helpers import SAMPLE_TEXT, FixedClock, channel_message, kyiv


def _app():
    settings = Settings(enable_scheduler=False, source_kind="memory")
    return create_app(settings, clock=FixedClock(kyiv(2026, 2, 15, 10)))


def _client(app) -> httpx.AsyncClient:
    transport = httpx.ASGITransport(app=app)
    return httpx.AsyncClient(transport=transport, base_url="http://testserver")


@pytest.mark.asyncio
async def test_refresh_then_read_schedules() -> None:
    app = _app()
    app.state.source.extend(
        [
            channel_message(1, SAMPLE_TEXT, kyiv(2026, 2, 15, 7)),
            channel_message(2, "Графік на 16 лютого\n2.2: 18:00 - 20:00", kyiv(2026, 2, 15, 9)),
        ]
    )

    async with _client(app) as client:
        refreshed = await client.post("/api/refresh")
        current = await client.get("/api/schedule/current")
        future = await client.get("/api/schedule/future")
        everything = await client.get("/api/schedule/all")

    assert refreshed.status_code == 200
    assert refreshed.json()["success"] is True

    body = current.json()
    assert body["success"] is True
    assert body["data"]["date"] == "2026-02-15"
    assert [queue["queueNumber"] for queue in body["data"]["queues"]] == pytest.approx([1.1, 1.2])

    assert future.json()["data"]["type"] == "future"
    assert everything.json()["data"]["current"]["id"] == "1-2026-02-15"
    assert everything.json()["data"]["future"]["id"] == "2-2026-02-16"


@pytest.mark.asyncio
async def test_empty_store_returns_null_data() -> None:
    async with _client(_app()) as client:
        response = await client.get("/api/schedule/current")

    assert response.status_code == 200
    assert response.json()["data"] is None


@pytest.mark.asyncio
async def test_history_respects_limit() -> None:
    app = _app()
    app.state.source.extend(
        [
            channel_message(1, SAMPLE_TEXT, kyiv(2026, 2, 15, 7)),
            channel_message(2, "Оновлений графік на 15 лютого\n1.1: 04:00-06:00", kyiv(2026, 2, 15, 8)),
            channel_message(3, "Графік на 16 лютого\n2.2: 18:00 - 20:00", kyiv(2026, 2, 15, 9)),
        ]
    )

    async with _client(app) as client:
        await client.post("/api/refresh")
        response = await client.get("/api/schedule/history", params={"limit": 2})
        default = await client.get("/api/schedule/history")
        invalid = await client.get("/api/schedule/history", params={"limit": 0})

    assert [item["messageId"] for item in response.json()["data"]] == [3, 2]
    assert len(default.json()["data"]) == 3
    assert invalid.status_code == 422


@pytest.mark.asyncio
async def test_cleanup_endpoint_and_health() -> None:
    app = _app()
    app.state.source.extend(
        [
            channel_message(1, SAMPLE_TEXT, kyiv(2026, 2, 15, 7)),
            channel_message(2, "Оновлений графік на 15 лютого\n1.1: 04:00-06:00", kyiv(2026, 2, 15, 8)),
        ]
    )

    async with _client(app) as client:
        await client.post("/api/refresh")
        health_before = await client.get("/api/health")
        cleanup = await client.post("/api/schedule/cleanup")
        health_after = await client.get("/api/health")

    assert health_before.json()["data"]["schedulesCount"] == 2
    assert health_before.json()["data"]["scheduler"]["lastRunStatus"] == "success"
    assert health_before.json()["data"]["lastParsedPublishedAt"] == "2026-02-15T08:00:00+02:00"
    assert cleanup.json()["data"] == {"removed": 1}
    assert health_after.json()["data"]["schedulesCount"] == 1


@pytest.mark.asyncio
async def test_debug_dates_and_metrics() -> None:
    async with _client(_app()) as client:
        dates = await client.get("/api/debug/dates")
        metrics = await client.get("/metrics")
        info = await client.get("/api/info")

    assert dates.json()["todayDetected"] == "2026-02-15"
    assert dates.json()["tomorrowDetected"] == "2026-02-16"
    assert metrics.status_code == 200
    assert "fiatlux_ingest_runs_total" in metrics.text
    assert info.json()["endpoints"]["history"] == "/api/schedule/history"
    assert info.json()["endpoints"]["messages"] == "/api/messages (POST)"


@pytest.mark.asyncio
async def test_pushed_message_is_parsed_and_stored() -> None:
    app = _app()
    pushed = {"id": 31, "text": SAMPLE_TEXT, "date": "2026-02-15T07:00:00+02:00"}

    async with _client(app) as client:
        accepted = await client.post("/api/messages", json=pushed)
        greeting = await client.post("/api/messages", json={"id": 32, "text": "Доброго ранку!", "date": 1771131600})
        broken = await client.post("/api/messages", json={"text": SAMPLE_TEXT})
        current = await client.get("/api/schedule/current")
        refreshed = await client.post("/api/refresh")

    body = accepted.json()
    assert body["success"] is True
    assert body["data"]["accepted"] is True
    assert body["data"]["schedule"]["id"] == "31-2026-02-15"
    assert body["data"]["schedule"]["channelId"] == "cherkasyoblenergo"
    assert greeting.json()["data"] == {"accepted": False, "schedule": None}
    assert broken.status_code == 422
    assert current.json()["data"]["messageId"] == 31
    assert refreshed.json()["data"]["current"]["id"] == "31-2026-02-15"
    assert app.state.store.get_count() == 1

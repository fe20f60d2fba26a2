from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Body, HTTPException, Query, Request
from fastapi.responses import Response

from fiatlux.core.dates import today_of, tomorrow_of
from fiatlux.core.serialization import envelope, to_schedule_payload, to_snapshot_payload
from fiatlux.sources.json_feed import message_from_item

router = APIRouter()


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


@router.get("/api/health")
async def health(request: Request) -> dict:
    store = request.app.state.store
    worker = request.app.state.worker
    uptime = datetime.now(tz=timezone.utc) - request.app.state.started_at
    return envelope(
        {
            "status": "ok",
            "uptime": int(uptime.total_seconds()),
            "scheduler": {
                "enabled": request.app.state.settings.enable_scheduler,
                "running": worker.is_running(),
                "lastRunStatus": worker.last_run_status,
                "lastRunStartedAt": _iso(worker.last_run_started_at),
                "lastRunFinishedAt": _iso(worker.last_run_finished_at),
                "lastError": worker.last_error,
            },
            "lastMessageCheck": _iso(worker.last_message_check),
            "lastParsedPublishedAt": _iso(store.latest_published_at()),
            "schedulesCount": store.get_count(),
        }
    )


@router.get("/api/schedule/current")
async def current_schedule(request: Request) -> dict:
    return envelope(to_schedule_payload(request.app.state.store.get_current_schedule()))


@router.get("/api/schedule/future")
async def future_schedule(request: Request) -> dict:
    return envelope(to_schedule_payload(request.app.state.store.get_future_schedule()))


@router.get("/api/schedule/all")
async def all_schedules(request: Request) -> dict:
    return envelope(to_snapshot_payload(request.app.state.store.get_all_schedules()))


@router.get("/api/schedule/history")
async def schedule_history(
    request: Request,
    limit: int | None = Query(default=None, ge=1, le=100),
) -> dict:
    effective_limit = limit or request.app.state.settings.history_limit
    history = request.app.state.store.get_history(effective_limit)
    return envelope([to_schedule_payload(schedule) for schedule in history])


@router.post("/api/schedule/cleanup")
async def cleanup_schedules(request: Request) -> dict:
    removed = request.app.state.store.cleanup_old_schedules()
    request.app.state.metrics.mark_store_size(request.app.state.store.get_count())
    return envelope({"removed": removed})


@router.post("/api/refresh")
async def refresh(request: Request) -> dict:
    worker = request.app.state.worker
    await worker.run_once()
    snapshot = to_snapshot_payload(request.app.state.store.get_all_schedules())
    if worker.last_run_status != "success":
        return envelope(snapshot, success=False, error=worker.last_error or worker.last_run_status)
    return envelope(snapshot)


@router.post("/api/messages")
async def ingest_message(request: Request, payload: dict = Body(...)) -> dict:
    """Accept one pushed channel post and store its schedule, if it has one."""
    settings = request.app.state.settings
    message = message_from_item(payload, settings.channel_username)
    if message is None:
        raise HTTPException(status_code=422, detail="Message needs an integer id and a timestamp")

    source = request.app.state.source
    if hasattr(source, "push"):
        source.push(message)

    schedule = request.app.state.worker.handle_message(message)
    return envelope({"accepted": schedule is not None, "schedule": to_schedule_payload(schedule)})


@router.get("/api/debug/dates")
async def debug_dates(request: Request) -> dict:
    now = request.app.state.store.now()
    return {
        "systemDate": datetime.now(tz=timezone.utc).isoformat(),
        "localTime": now.isoformat(),
        "timezone": request.app.state.settings.timezone_name,
        "todayDetected": today_of(now).isoformat(),
        "tomorrowDetected": tomorrow_of(now).isoformat(),
    }


@router.get("/api/info")
async def info(request: Request) -> dict:
    return {
        "name": "FiatLux - Telegram Channel Monitor",
        "version": request.app.version,
        "description": f"Monitoring {request.app.state.settings.channel_username} power outage schedules",
        "endpoints": {
            "health": "/api/health",
            "current": "/api/schedule/current",
            "future": "/api/schedule/future",
            "all": "/api/schedule/all",
            "history": "/api/schedule/history",
            "cleanup": "/api/schedule/cleanup (POST)",
            "refresh": "/api/refresh (POST)",
            "messages": "/api/messages (POST)",
            "debug": "/api/debug/dates",
            "metrics": "/metrics",
        },
    }


@router.get("/metrics")
async def metrics(request: Request) -> Response:
    payload, content_type = request.app.state.metrics.render()
    return Response(content=payload, media_type=content_type)

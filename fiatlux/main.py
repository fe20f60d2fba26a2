from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from fastapi import FastAPI

from fiatlux.api.routes import router as api_router
from fiatlux.config import Settings, load_settings
from fiatlux.observability.metrics import Metrics
from fiatlux.parsers.schedule_parser import ChannelScheduleParser
from fiatlux.scheduler.worker import IngestWorker
from fiatlux.sources.registry import build_source
from fiatlux.storage.store import ScheduleStore


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def create_app(settings: Settings | None = None, clock: Callable[[], datetime] | None = None) -> FastAPI:
    app_settings = settings or load_settings()
    configure_logging(app_settings.log_level)
    logger = logging.getLogger("fiatlux")
    logger.info("Monitoring channel: %s", app_settings.channel_username)

    store = ScheduleStore(clock=clock, timezone_name=app_settings.timezone_name)
    parser = ChannelScheduleParser(
        app_settings.timezone_name,
        legacy_queues=app_settings.parser_legacy_queues,
    )
    source = build_source(app_settings)
    metrics = Metrics()

    worker = IngestWorker(
        settings=app_settings,
        source=source,
        parser=parser,
        store=store,
        metrics=metrics,
    )

    app = FastAPI(title="fiatlux", version="1.0.0")
    app.state.settings = app_settings
    app.state.store = store
    app.state.source = source
    app.state.metrics = metrics
    app.state.worker = worker
    app.state.started_at = datetime.now(tz=timezone.utc)

    @app.on_event("startup")
    async def _on_startup() -> None:
        if app_settings.enable_scheduler:
            await worker.start()

    @app.on_event("shutdown")
    async def _on_shutdown() -> None:
        await worker.stop()
        logger.info("In-memory schedules are dropped on shutdown and reloaded on restart")

    app.include_router(api_router)
    return app


app = create_app()

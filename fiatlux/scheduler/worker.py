from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from time import perf_counter

import httpx

from fiatlux.config import Settings
from fiatlux.core.models import ChannelMessage, Schedule
from fiatlux.observability.metrics import Metrics
from fiatlux.parsers.base import MessageParser
from fiatlux.sources.base import MessageSource, SourceError
from fiatlux.storage.store import ScheduleStore


class IngestWorker:
    def __init__(
        self,
        *,
        settings: Settings,
        source: MessageSource,
        parser: MessageParser,
        store: ScheduleStore,
        metrics: Metrics,
    ) -> None:
        self.settings = settings
        self.source = source
        self.parser = parser
        self.store = store
        self.metrics = metrics

        self._task: asyncio.Task[None] | None = None
        self._stop_event = asyncio.Event()
        self._logger = logging.getLogger("fiatlux.ingest")

        self.last_run_status: str = "never"
        self.last_run_started_at: datetime | None = None
        self.last_run_finished_at: datetime | None = None
        self.last_message_check: datetime | None = None
        self.last_error: str | None = None

    async def start(self) -> None:
        if self._task is not None:
            return
        self._stop_event.clear()
        self._task = asyncio.create_task(self._run_loop(), name="ingest-worker")

    async def stop(self) -> None:
        if self._task is None:
            return

        self._stop_event.set()
        await self._task
        self._task = None

    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def handle_message(self, message: ChannelMessage) -> Schedule | None:
        """Parse and store one message; the store is never touched across an await."""
        self.last_message_check = datetime.now(tz=timezone.utc)
        schedule = self.parser.parse_message(
            message,
            strict=self.settings.parser_strict,
            now=self.store.now(),
        )
        if schedule is None:
            self.metrics.mark_message("skipped")
            self._logger.debug("Message %s does not contain schedule information", message.id)
            return None

        inserted = self.store.save_schedule(schedule)
        self.metrics.mark_message("inserted" if inserted else "updated")
        self.metrics.mark_store_size(self.store.get_count())
        return schedule

    async def run_once(self) -> None:
        started = datetime.now(tz=timezone.utc)
        self.last_run_started_at = started
        stage = "fetch"
        status = "success"
        error: str | None = None
        timer_start = perf_counter()

        try:
            messages = await self.source.fetch_recent(self.settings.recent_messages_limit)

            stage = "parse"
            saved = 0
            for message in messages:
                if self.handle_message(message) is not None:
                    saved += 1
            self._logger.info("Found %d schedules in %d recent messages", saved, len(messages))

            if self.settings.cleanup_archived:
                stage = "cleanup"
                self.store.cleanup_old_schedules()
                self.metrics.mark_store_size(self.store.get_count())

        except (SourceError, httpx.HTTPError) as exc:
            status = "fetch_error"
            error = str(exc)
            self._logger.exception("Fetch error during ingest")
        except Exception as exc:  # pragma: no cover
            status = f"{stage}_error"
            error = str(exc)
            self._logger.exception("Unhandled ingest error")
        finally:
            finished = datetime.now(tz=timezone.utc)
            self.last_run_finished_at = finished
            self.last_run_status = status
            self.last_error = error

            self.metrics.mark_ingest_status(status)
            self.metrics.ingest_duration_seconds.observe(perf_counter() - timer_start)
            if status == "success":
                self.metrics.mark_success(finished)

    async def _run_loop(self) -> None:
        await self.run_once()

        while not self._stop_event.is_set():
            sleep_seconds = self._next_sleep_seconds()
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=sleep_seconds)
            except asyncio.TimeoutError:
                pass

            if self._stop_event.is_set():
                break
            await self.run_once()

    def _next_sleep_seconds(self) -> float:
        interval_seconds = max(self.settings.poll_interval_minutes, 1) * 60
        if not self.settings.poll_align_clock:
            return float(interval_seconds)

        now = datetime.now(tz=timezone.utc).timestamp()
        next_tick = ((int(now) // interval_seconds) + 1) * interval_seconds
        return max(next_tick - now, 1.0)

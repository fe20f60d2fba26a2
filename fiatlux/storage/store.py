from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date, datetime

from fiatlux.core.dates import is_in_relevant_window, local_now, today_of, tomorrow_of
from fiatlux.core.models import Schedule, ScheduleSnapshot

DEFAULT_HISTORY_LIMIT = 10


class ScheduleStore:
    """In-memory schedule records with last-publish-wins per calendar day.

    Records go active -> archived -> removed. Archival happens only while
    inserting a new record; removal only through ``cleanup_old_schedules`` or
    ``reset``. Retained records are limited to a couple of days, so a list
    with a linear reconciliation pass is enough.
    """

    def __init__(self, clock: Callable[[], datetime] | None = None, timezone_name: str = "Europe/Kyiv") -> None:
        self._clock = clock or (lambda: local_now(timezone_name))
        self._schedules: list[Schedule] = []
        self._logger = logging.getLogger("fiatlux.store")
        self._logger.info("Initialized in-memory schedule storage")

    def now(self) -> datetime:
        return self._clock()

    def save_schedule(self, schedule: Schedule) -> bool:
        """Insert or replace a schedule; returns ``True`` for a new record."""
        if schedule is None or not schedule.id:
            raise ValueError("schedule with a non-empty id is required")

        for index, existing in enumerate(self._schedules):
            if existing.id == schedule.id:
                # Re-delivery never brings an archived record back.
                schedule.archived = schedule.archived or existing.archived
                self._schedules[index] = schedule
                self._logger.info("Updated schedule: %s", schedule.id)
                return False

        self._schedules.append(schedule)
        self._logger.info("Added new schedule: %s", schedule.id)
        self._archive_older_schedules(schedule)
        return True

    def _archive_older_schedules(self, new_schedule: Schedule) -> None:
        today = today_of(self.now())

        for schedule in self._schedules:
            if schedule.id == new_schedule.id or schedule.archived:
                continue

            if schedule.date < today:
                schedule.archived = True
                self._logger.info("Archived past schedule: %s (%s)", schedule.id, schedule.date.isoformat())
                continue

            if schedule.date != new_schedule.date or new_schedule.archived:
                continue

            # Late delivery of an older announcement must not revive it.
            if schedule.published_at <= new_schedule.published_at:
                schedule.archived = True
                self._logger.info("Archived older schedule for same date: %s", schedule.id)
            else:
                new_schedule.archived = True
                self._logger.info(
                    "Archived incoming schedule %s, %s was published later",
                    new_schedule.id,
                    schedule.id,
                )

    def _relevant(self, now: datetime) -> list[Schedule]:
        return [schedule for schedule in self._schedules if is_in_relevant_window(schedule.date, now)]

    def _latest_active_for(self, day: date, now: datetime) -> Schedule | None:
        candidates = [
            schedule
            for schedule in self._relevant(now)
            if schedule.date == day and not schedule.archived
        ]
        if not candidates:
            return None
        return max(candidates, key=lambda schedule: schedule.published_at)

    def get_current_schedule(self) -> Schedule | None:
        now = self.now()
        return self._latest_active_for(today_of(now), now)

    def get_future_schedule(self) -> Schedule | None:
        now = self.now()
        return self._latest_active_for(tomorrow_of(now), now)

    def get_all_schedules(self) -> ScheduleSnapshot:
        return ScheduleSnapshot(
            current=self.get_current_schedule(),
            future=self.get_future_schedule(),
        )

    def get_history(self, limit: int = DEFAULT_HISTORY_LIMIT) -> list[Schedule]:
        ordered = sorted(
            self._relevant(self.now()),
            key=lambda schedule: schedule.published_at,
            reverse=True,
        )
        return ordered[: max(limit, 0)]

    def get_count(self) -> int:
        return len(self._schedules)

    def latest_published_at(self) -> datetime | None:
        if not self._schedules:
            return None
        return max(schedule.published_at for schedule in self._schedules)

    def cleanup_old_schedules(self) -> int:
        initial_count = len(self._schedules)
        self._schedules = [schedule for schedule in self._schedules if not schedule.archived]
        removed = initial_count - len(self._schedules)
        if removed > 0:
            self._logger.info("Cleaned up %d archived schedules", removed)
        return removed

    def reset(self) -> None:
        self._schedules = []
        self._logger.info("Reset all in-memory schedules")

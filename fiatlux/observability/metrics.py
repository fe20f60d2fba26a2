from __future__ import annotations

from datetime import datetime, timezone

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)


class Metrics:
    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry or CollectorRegistry(auto_describe=True)
        self.ingest_runs_total = Counter(
            "fiatlux_ingest_runs_total",
            "Total ingest runs by status",
            labelnames=("status",),
            registry=self.registry,
        )
        self.ingest_duration_seconds = Histogram(
            "fiatlux_ingest_duration_seconds",
            "Duration of ingest runs in seconds",
            registry=self.registry,
        )
        self.messages_total = Counter(
            "fiatlux_messages_total",
            "Channel messages processed by outcome",
            labelnames=("outcome",),
            registry=self.registry,
        )
        self.schedules_stored = Gauge(
            "fiatlux_schedules_stored",
            "Schedule records currently held in memory, archived included",
            registry=self.registry,
        )
        self.last_success_epoch = Gauge(
            "fiatlux_last_success_epoch_seconds",
            "Unix timestamp of last successful ingest run",
            registry=self.registry,
        )

    def mark_ingest_status(self, status: str) -> None:
        self.ingest_runs_total.labels(status=status).inc()

    def mark_message(self, outcome: str) -> None:
        self.messages_total.labels(outcome=outcome).inc()

    def mark_store_size(self, count: int) -> None:
        self.schedules_stored.set(count)

    def mark_success(self, finished_at_utc: datetime) -> None:
        self.last_success_epoch.set(finished_at_utc.astimezone(timezone.utc).timestamp())

    def render(self) -> tuple[bytes, str]:
        return generate_latest(self.registry), CONTENT_TYPE_LATEST

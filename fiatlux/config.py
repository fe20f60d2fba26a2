from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    app_host: str = "0.0.0.0"
    app_port: int = 3000
    log_level: str = "INFO"

    timezone_name: str = "Europe/Kyiv"
    channel_username: str = "cherkasyoblenergo"

    enable_scheduler: bool = True
    poll_interval_minutes: int = 5
    poll_align_clock: bool = False
    recent_messages_limit: int = 100
    cleanup_archived: bool = False

    source_kind: str = "memory"
    source_url: str = ""
    source_messages_path: str = ""
    source_timeout_seconds: int = 20

    parser_strict: bool = True
    parser_legacy_queues: bool = False

    history_limit: int = 10


def _as_bool(raw: str | None, default: bool) -> bool:
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _as_int(raw: str | None, default: int) -> int:
    if raw is None:
        return default
    return int(raw)


def load_settings() -> Settings:
    return Settings(
        app_host=os.getenv("APP_HOST", "0.0.0.0"),
        app_port=_as_int(os.getenv("APP_PORT"), 3000),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        timezone_name=os.getenv("TIMEZONE", "Europe/Kyiv"),
        channel_username=os.getenv("CHANNEL_USERNAME", "cherkasyoblenergo"),
        enable_scheduler=_as_bool(os.getenv("ENABLE_SCHEDULER"), True),
        poll_interval_minutes=_as_int(os.getenv("POLL_INTERVAL_MINUTES"), 5),
        poll_align_clock=_as_bool(os.getenv("POLL_ALIGN_CLOCK"), False),
        recent_messages_limit=_as_int(os.getenv("RECENT_MESSAGES_LIMIT"), 100),
        cleanup_archived=_as_bool(os.getenv("CLEANUP_ARCHIVED"), False),
        source_kind=os.getenv("SOURCE_KIND", "memory"),
        source_url=os.getenv("SOURCE_URL", ""),
        source_messages_path=os.getenv("SOURCE_MESSAGES_PATH", ""),
        source_timeout_seconds=_as_int(os.getenv("SOURCE_TIMEOUT_SECONDS"), 20),
        parser_strict=_as_bool(os.getenv("PARSER_STRICT"), True),
        parser_legacy_queues=_as_bool(os.getenv("PARSER_LEGACY_QUEUES"), False),
        history_limit=_as_int(os.getenv("HISTORY_LIMIT"), 10),
    )

from __future__ import annotations

from fiatlux.config import Settings
from fiatlux.sources.base import MessageSource
from fiatlux.sources.json_feed import JsonFeedSource
from fiatlux.sources.memory import InMemoryMessageSource


class UnknownSourceError(RuntimeError):
    pass


def build_source(settings: Settings) -> MessageSource:
    if settings.source_kind == "memory":
        return InMemoryMessageSource()

    if settings.source_kind == "json_feed":
        return JsonFeedSource(
            feed_url=settings.source_url,
            messages_path=settings.source_messages_path,
            default_chat_id=settings.channel_username,
            timeout_seconds=settings.source_timeout_seconds,
        )

    raise UnknownSourceError(f"Unsupported source kind: {settings.source_kind}")

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any

import httpx

from fiatlux.core.models import ChannelMessage
from fiatlux.sources.base import SourceError

logger = logging.getLogger("fiatlux.source.json_feed")

_TEXT_KEYS = ("text", "message")
_TIMESTAMP_KEYS = ("date", "timestamp", "timestampSeconds")
_CHAT_KEYS = ("chatId", "chat_id", "channelId")


def _extract_path(payload: Any, path: str) -> Any:
    current = payload
    if not path:
        return None

    for chunk in path.split("."):
        if isinstance(current, dict):
            if chunk not in current:
                return None
            current = current[chunk]
            continue

        if isinstance(current, list):
            try:
                index = int(chunk)
            except ValueError:
                return None
            if index < 0 or index >= len(current):
                return None
            current = current[index]
            continue

        return None

    return current


def _first(item: dict, keys: tuple[str, ...]) -> Any:
    for key in keys:
        if key in item and item[key] is not None:
            return item[key]
    return None


def _parse_timestamp(raw: Any) -> int | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        return int(raw)
    if not isinstance(raw, str) or not raw.strip():
        return None

    value = raw.strip()
    if value.isdigit():
        return int(value)
    try:
        return int(datetime.fromisoformat(value.replace("Z", "+00:00")).timestamp())
    except ValueError:
        return None


def message_from_item(item: Any, default_chat_id: str) -> ChannelMessage | None:
    if not isinstance(item, dict):
        return None

    raw_id = item.get("id")
    try:
        message_id = int(raw_id)
    except (TypeError, ValueError):
        return None

    timestamp = _parse_timestamp(_first(item, _TIMESTAMP_KEYS))
    if timestamp is None:
        return None

    text = _first(item, _TEXT_KEYS)
    chat_id = _first(item, _CHAT_KEYS)
    return ChannelMessage(
        id=message_id,
        text=text if isinstance(text, str) else None,
        timestamp_seconds=timestamp,
        chat_id=str(chat_id) if chat_id is not None else default_chat_id,
    )


def parse_feed(payload: Any, messages_path: str = "", default_chat_id: str = "") -> list[ChannelMessage]:
    """Map a bridge feed document onto channel messages, oldest first."""
    items = _extract_path(payload, messages_path) if messages_path else payload
    if isinstance(items, dict):
        items = items.get("messages")
    if not isinstance(items, list):
        raise SourceError("Could not locate message list in feed payload. Check SOURCE_MESSAGES_PATH.")

    messages: list[ChannelMessage] = []
    for item in items:
        message = message_from_item(item, default_chat_id)
        if message is None:
            logger.warning("Skipping feed item without usable id/timestamp: %r", item)
            continue
        messages.append(message)

    return sorted(messages, key=lambda message: (message.timestamp_seconds, message.id))


@dataclass
class JsonFeedSource:
    feed_url: str
    messages_path: str = ""
    default_chat_id: str = ""
    timeout_seconds: int = 20

    async def fetch_recent(self, limit: int) -> list[ChannelMessage]:
        if not self.feed_url:
            raise SourceError("SOURCE_URL is empty")

        timeout = httpx.Timeout(self.timeout_seconds)
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.get(self.feed_url, params={"limit": limit})
            response.raise_for_status()
            payload = response.json()

        messages = parse_feed(payload, self.messages_path, self.default_chat_id)
        if limit <= 0:
            return []
        return messages[-limit:]

from __future__ import annotations

from collections.abc import Iterable

from fiatlux.core.models import ChannelMessage


class InMemoryMessageSource:
    def __init__(self, messages: Iterable[ChannelMessage] = ()) -> None:
        self._messages: dict[int, ChannelMessage] = {}
        self.extend(messages)

    def push(self, message: ChannelMessage) -> None:
        self._messages[message.id] = message

    def extend(self, messages: Iterable[ChannelMessage]) -> None:
        for message in messages:
            self.push(message)

    async def fetch_recent(self, limit: int) -> list[ChannelMessage]:
        ordered = sorted(self._messages.values(), key=lambda message: (message.timestamp_seconds, message.id))
        if limit <= 0:
            return []
        return ordered[-limit:]

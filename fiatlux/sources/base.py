from __future__ import annotations

from typing import Protocol

from fiatlux.core.models import ChannelMessage


class SourceError(RuntimeError):
    pass


class MessageSource(Protocol):
    async def fetch_recent(self, limit: int) -> list[ChannelMessage]:
        """Fetch up to ``limit`` most recent channel messages, oldest first."""

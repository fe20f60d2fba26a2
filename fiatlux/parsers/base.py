from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import Protocol

from fiatlux.core.models import ChannelMessage, Schedule


class MessageParser(Protocol):
    def parse_message(
        self,
        message: ChannelMessage,
        *,
        strict: bool = True,
        now: datetime | None = None,
    ) -> Schedule | None:
        """Turn one channel message into a schedule, or ``None`` when it holds none."""

    def parse_messages(
        self,
        messages: Iterable[ChannelMessage],
        *,
        strict: bool = True,
        now: datetime | None = None,
    ) -> list[Schedule]:
        """Parse a batch, dropping messages without a usable schedule."""

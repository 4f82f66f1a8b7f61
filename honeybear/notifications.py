"""A short queue of recent events shown as on-screen notifications."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from honeybear.events import Event

NOTIFICATION_WIDTH = 25


def max_string_len(text: str, length: int) -> str:
    """Shorten ``text`` to ``length`` characters, ending in "..." when cut."""
    if len(text) > length:
        return text[: length - 3] + "..."
    return text


@dataclass(frozen=True)
class Notification:
    sender: str
    action: str


class NotificationQueue:
    """Keeps the newest events, dropping the oldest past ``max_length``."""

    def __init__(self, max_length: int = 5, max_age: timedelta = timedelta(seconds=30)) -> None:
        self.max_length = max_length
        self.max_age = max_age
        self._events: deque[Event] = deque()

    def __len__(self) -> int:
        return len(self._events)

    def push(self, event: Event) -> None:
        if len(self._events) >= self.max_length:
            self.pop()
        self._events.append(event)

    def pop(self) -> Optional[Event]:
        """Remove and return the oldest event, or None when empty."""
        return self._events.popleft() if self._events else None

    def entries(self, now: Optional[datetime] = None) -> list[Notification]:
        """Notifications for events younger than ``max_age``, newest first."""
        result = []
        for event in reversed(self._events):
            if event.timestamp is None:
                continue
            current = now if now is not None else datetime.now(event.timestamp.tzinfo)
            if event.timestamp + self.max_age < current:
                continue
            result.append(
                Notification(
                    sender=max_string_len(f"{event.user}@{event.host}", NOTIFICATION_WIDTH),
                    action=max_string_len(f"> {event.action}", NOTIFICATION_WIDTH),
                )
            )
        return result
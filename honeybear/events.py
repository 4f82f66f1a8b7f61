"""Honey pot events: storage, queries and in-process subscriptions."""

from __future__ import annotations

import queue
import threading
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from honeybear.db import Database

SUBSCRIPTION_BUFFER = 10


class EventSource(str, Enum):
    SYSTEM = "system"
    USER = "user"


def event_initialization() -> str:
    """SQL that creates the events table."""
    return """
        PRAGMA user_version = 1;
        CREATE TABLE IF NOT EXISTS events (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user TEXT NOT NULL,
            host TEXT NOT NULL,
            app TEXT NOT NULL,
            source TEXT NOT NULL,
            type TEXT NOT NULL,
            action TEXT NOT NULL,
            timestamp DATETIME DEFAULT CURRENT_TIMESTAMP
        );
        """


@dataclass
class Event:
    user: str = ""
    host: str = ""
    app: str = ""
    source: str = EventSource.SYSTEM.value
    type: str = ""
    action: str = ""
    timestamp: datetime | None = None
    id: int = 0

    def save(self, db: Database) -> None:
        """Insert the event; the database assigns id and timestamp."""
        source = self.source.value if isinstance(self.source, EventSource) else self.source
        db.write(
            "INSERT INTO events (user, host, app, source, type, action) VALUES (?, ?, ?, ?, ?, ?);",
            self.user,
            self.host,
            self.app,
            source,
            self.type,
            self.action,
        )


@dataclass
class EventCount:
    value: str
    count: int


def event_query(db: Database, query: str, *args: Any) -> list[Event]:
    """Run a query whose rows are full event rows."""
    events = []
    for row in db.query(query, *args):
        try:
            ident, user, host, app, source, kind, action, timestamp = row
        except ValueError as exc:
            raise ValueError(f"expected 8 event columns, got {len(row)}") from exc
        events.append(
            Event(
                id=ident,
                user=user,
                host=host,
                app=app,
                source=source,
                type=kind,
                action=action,
                timestamp=timestamp,
            )
        )
    return events


def event_count_query(db: Database, query: str, *args: Any) -> list[EventCount]:
    """Run a query whose rows are (value, count) pairs."""
    counts = []
    for row in db.query(query, *args):
        try:
            value, count = row
        except ValueError as exc:
            raise ValueError(f"expected 2 count columns, got {len(row)}") from exc
        counts.append(EventCount(value=value, count=count))
    return counts


class EventBus:
    """Fan-out of published events to named subscriber queues."""

    def __init__(self) -> None:
        self._subscriptions: dict[str, queue.Queue] = {}
        self._lock = threading.Lock()

    def subscribe(self, name: str) -> queue.Queue:
        subscription: queue.Queue = queue.Queue(maxsize=SUBSCRIPTION_BUFFER)
        with self._lock:
            self._subscriptions[name] = subscription
        return subscription

    def unsubscribe(self, name: str) -> None:
        """Remove a subscriber; its queue receives ``None`` to mark the end."""
        with self._lock:
            subscription = self._subscriptions.pop(name)
        subscription.put(None)

    def publish(self, event: Event) -> None:
        with self._lock:
            subscriptions = list(self._subscriptions.values())
        for subscription in subscriptions:
            subscription.put(event)
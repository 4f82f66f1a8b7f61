"""Statistics queries shown in the admin menu."""

from __future__ import annotations

from datetime import tzinfo
from zoneinfo import ZoneInfo

from honeybear.db import Database
from honeybear.events import EventCount, event_count_query, event_query

DEFAULT_TIMEZONE = "America/Los_Angeles"
LIST_LIMIT = 25
RECENT_LIMIT = 100


def user_counts(db: Database) -> list[EventCount]:
    """Logins over the last day ("1D") and the last week ("7D")."""
    return event_count_query(
        db,
        """
        SELECT '1D' AS duration, COUNT(*) AS total
        FROM events
        WHERE events.type = 'login'
          AND events.timestamp >= datetime('now', '-1 days')
        UNION
        SELECT '7D' AS duration, COUNT(*) AS total
        FROM events
        WHERE events.type = 'login'
          AND events.timestamp >= datetime('now', '-7 days')
        """,
    )


def rare_commands(db: Database) -> list[str]:
    """The least typed commands, longer ones first among equals."""
    rows = event_count_query(
        db,
        f"""
        SELECT action, count(*) AS total
        FROM events
        WHERE events.type = ?
        GROUP BY events.action
        ORDER BY count(*) ASC, length(action) DESC
        LIMIT {LIST_LIMIT}
        """,
        "typed",
    )
    return [row.value for row in rows]


def top_commands(db: Database) -> list[str]:
    """The most typed commands."""
    rows = event_count_query(
        db,
        f"""
        SELECT action, count(*) AS total
        FROM events
        WHERE events.type = ?
        GROUP BY events.action
        ORDER BY count(*) DESC
        LIMIT {LIST_LIMIT}
        """,
        "typed",
    )
    return [row.value for row in rows]


def top_users(db: Database) -> list[str]:
    """Users with the most logins, as "name (count)"."""
    rows = event_count_query(
        db,
        f"""
        SELECT events.user, count(*) AS total
        FROM events
        WHERE events.type = 'login'
        GROUP BY events.user
        ORDER BY count(*) DESC
        LIMIT {LIST_LIMIT}
        """,
    )
    return [f"{row.value} ({row.count})" for row in rows]


def _kitchen(moment) -> str:
    hour = moment.hour % 12 or 12
    return f"{hour}:{moment.minute:02d}{'PM' if moment.hour >= 12 else 'AM'}"


def recent_events(db: Database, tz: tzinfo | None) -> list[str]:
    """The latest shell events as "user (3:04PM) > action" in the given time zone."""
    zone = tz if tz is not None else ZoneInfo(DEFAULT_TIMEZONE)
    events = event_query(
        db,
        f"""
        SELECT * FROM events
        WHERE app = 'ssh'
        ORDER BY timestamp DESC
        LIMIT {RECENT_LIMIT}
        """,
    )
    lines = []
    for event in events:
        stamp = _kitchen(event.timestamp.astimezone(zone)) if event.timestamp is not None else "--"
        lines.append(f"{event.user} ({stamp}) > {event.action}")
    return lines
"""Persistent name/value options."""

from __future__ import annotations

import logging
import re
import sqlite3
from dataclasses import dataclass
from datetime import datetime

from honeybear.db import Database

KEY_ADMIN_PIN = "gui_pin"
KEY_POT_SSH_PORT = "pot_ssh_port"
KEY_POT_MAX_USERS = "pot_max_users"

log = logging.getLogger(__name__)

_INTEGER = re.compile(r"[+-]?[0-9]+")


def option_initialization() -> str:
    """SQL that creates the options table."""
    return """
        CREATE TABLE IF NOT EXISTS options (
            name TEXT PRIMARY KEY,
            value TEXT,
            timestamp DATETIME DEFAULT CURRENT_TIMESTAMP
        );"""


@dataclass
class Option:
    name: str
    value: str = ""
    timestamp: datetime | None = None

    def save(self, db: Database) -> None:
        """Insert or update the option."""
        db.write(
            """
            INSERT INTO options (name, value)
            VALUES (?, ?)
            ON CONFLICT(name)
            DO UPDATE SET value = excluded.value, timestamp = CURRENT_TIMESTAMP;
            """,
            self.name,
            self.value,
        )

    def load(self, db: Database) -> None:
        """Fill value and timestamp from the database; unchanged if the option is missing."""
        if not self.name:
            raise ValueError("name is required")
        rows = db.query("SELECT name, value, timestamp FROM options WHERE name = ?;", self.name)
        if rows:
            self.name, self.value, self.timestamp = rows[0]


def option_get(db: Database, name: str) -> str:
    """Return the stored value, or an empty string when missing or on error."""
    option = Option(name=name)
    try:
        option.load(db)
    except (ValueError, sqlite3.Error) as exc:
        log.error("OptionGet error for %r: %s", name, exc)
        return ""
    return option.value


def option_get_int(db: Database, name: str) -> int:
    """Return the stored value as an integer, or 0 when missing or not a number."""
    value = option_get(db, name)
    if value == "":
        return 0
    if not _INTEGER.fullmatch(value):
        log.error("OptionGetInt error for %r: invalid integer %r", name, value)
        return 0
    return int(value)


def option_set(db: Database, name: str, value: str) -> None:
    """Store a value; failures are logged."""
    try:
        Option(name=name, value=value).save(db)
    except sqlite3.Error as exc:
        log.error("OptionSet error for %r=%r: %s", name, value, exc)
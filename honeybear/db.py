"""SQLite storage for the application data directory."""

from __future__ import annotations

import logging
import sqlite3
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

DB_FILENAME = "database.db"

log = logging.getLogger(__name__)


def _convert_datetime(value: bytes) -> datetime:
    parsed = datetime.fromisoformat(value.decode())
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


sqlite3.register_converter("DATETIME", _convert_datetime)


class Database:
    """A thread-safe wrapper around one SQLite connection."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(
            str(self.path),
            detect_types=sqlite3.PARSE_DECLTYPES,
            isolation_level=None,
            check_same_thread=False,
        )

    def query(self, query: str, *args: Any) -> list[tuple]:
        """Run a SELECT and return all rows."""
        with self._lock:
            return self._conn.execute(query, args).fetchall()

    def write(self, query: str, *args: Any) -> None:
        """Run a statement that changes data; without arguments it may hold several statements."""
        with self._lock:
            if args:
                self._conn.execute(query, args)
            else:
                self._conn.executescript(query)

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def __enter__(self) -> Database:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def open_database(app_config_dir: str | Path, *init_queries: str) -> Database:
    """Open the database in ``app_config_dir`` and run the initialisation queries.

    A failing initialisation query is logged and skipped.
    """
    database = Database(Path(app_config_dir) / DB_FILENAME)
    for query in init_queries:
        try:
            database.write(query)
        except sqlite3.Error as exc:
            log.error("Initialization query failed: %s", exc)
    return database
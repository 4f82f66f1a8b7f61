"""Shared honey pot state: configuration, connected users and statistics."""

from __future__ import annotations

import logging
import sqlite3
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

from honeybear.db import Database
from honeybear.events import event_count_query
from honeybear.options import KEY_POT_MAX_USERS, option_get_int

HOST = "0.0.0.0"
DEFAULT_MAX_USERS = 10
USERS_ALL_TIME_TTL = 10.0

log = logging.getLogger(__name__)


class TunnelStatus(IntEnum):
    NOT_CONFIGURED = -1
    DISCONNECTED = 0
    CONNECTED = 1


@dataclass
class TunnelConfig:
    """Where and how to open the reverse SSH tunnel."""

    user: str
    addr: str
    key_path: str
    port: str = "22"
    remote_bind: str = "127.0.0.1"
    remote_forward_port: str = "8022"
    known_hosts_path: str = ""


def parse_tunnel(host: Optional[str], key_path: Optional[str]) -> Optional[TunnelConfig]:
    """Parse ``user@host[:port]``; None when either setting is empty."""
    if not host or not key_path:
        return None
    parts = host.split("@")
    if len(parts) < 2:
        raise ValueError("Invalid remote host.")
    user = parts[0]
    host_port = parts[1].split(":")
    if len(host_port) == 1:
        return TunnelConfig(user=user, addr=parts[1], key_path=key_path)
    return TunnelConfig(user=user, addr=host_port[0], key_path=key_path, port=host_port[1])


class PotState:
    """Configuration and live statistics of one running honey pot."""

    def __init__(self, db: Optional[Database] = None, clock: Callable[[], float] = time.monotonic) -> None:
        self.db = db
        self.port = ""
        self.additional_listeners: list = []
        self.tunnel: Optional[TunnelConfig] = None
        self.tunnel_status = TunnelStatus.NOT_CONFIGURED
        self.users_this_session = 0
        self._users: list[str] = []
        self._lock = threading.Lock()
        self._clock = clock
        self._all_time_value = 0
        self._all_time_expires: Optional[float] = None

    def set_port(self, port: str) -> None:
        self.port = port

    def set_tunnel(self, host: Optional[str], key_path: Optional[str]) -> None:
        """Configure the reverse tunnel; nothing happens when either setting is empty."""
        if not host or not key_path:
            return
        self.tunnel_status = TunnelStatus.DISCONNECTED
        self.tunnel = parse_tunnel(host, key_path)

    def authorize(self, user: str, password: str) -> bool:
        """Accept any password while there is room for another user."""
        with self._lock:
            active = len(self._users)
        if active + 1 > self.max_users():
            return False
        log.info("Authorization used: %s, %s", user, password)
        with self._lock:
            self.users_this_session += 1
        return True

    def add_user(self, user: str) -> None:
        with self._lock:
            self._users.append(user)

    def remove_user(self, user: str) -> None:
        """Remove the first session of ``user``, if any."""
        with self._lock:
            if user in self._users:
                self._users.remove(user)

    def active_users(self) -> list[str]:
        """Names of the connected users, one entry per session."""
        with self._lock:
            return list(self._users)

    def users_all_time(self) -> int:
        """Number of user logins ever recorded, cached for a few seconds."""
        now = self._clock()
        if self._all_time_expires is not None and now < self._all_time_expires:
            return self._all_time_value
        if self.db is None:
            return self._all_time_value
        try:
            data = event_count_query(
                self.db,
                """
                SELECT 'logins' AS Value, COUNT(*) AS Count
                FROM events
                WHERE events.type = 'login'
                  AND events.source = 'user'
                """,
            )
        except sqlite3.Error as exc:
            log.error("users_all_time: %s", exc)
            return self._all_time_value
        self._all_time_value = data[0].count if data else 0
        self._all_time_expires = now + USERS_ALL_TIME_TTL
        return self._all_time_value

    def max_users(self) -> int:
        """The configured user limit, or the default when unset."""
        if self.db is None:
            return DEFAULT_MAX_USERS
        return option_get_int(self.db, KEY_POT_MAX_USERS) or DEFAULT_MAX_USERS